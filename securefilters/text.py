#!/usr/bin/python

"""
Helpers for treating strings as sequences of UTF-16 code units, the unit
that JavaScript escapes and HTML numeric entities are historically computed
over.
"""

import re

_SURROGATE = re.compile(u"[\ud800-\udfff]")


def utf16_code_units(char):
    """
    The UTF-16 code units of a single code point.
    Supplementary code points split into a high and a low surrogate;
    everything else, unpaired surrogates included, is a single unit.
    """
    codepoint = ord(char)
    if codepoint < 0x10000:
        return (codepoint,)
    # Encode per UTF-16 spec.
    codepoint -= 0x10000
    return (0xd800 | (codepoint >> 10), 0xdc00 | (codepoint & 0x3ff))


def join_surrogates(value):
    """
    Combines adjacent high/low surrogate pairs in value into the
    supplementary code points they encode.  Unpaired surrogates are kept
    as they are.
    """
    # Fast path for the common case.
    if not _SURROGATE.search(value):
        return value
    return value.encode('utf-16-le', 'surrogatepass').decode(
        'utf-16-le', 'surrogatepass')
