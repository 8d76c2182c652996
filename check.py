#!/usr/bin/env python

from pylint import lint

lint.Run(['securefilters', 'tests'], exit=False)
