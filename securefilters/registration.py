#!/usr/bin/python

"""
Registers the encoders as named filters on a template engine.

Usage with Jinja2:

    env = securefilters.configure(jinja2.Environment(autoescape=True),
                                  mark_safe=True)
    env.from_string('<a onclick="f(\\'{{ name|jsAttr }}\\')">')
"""

import functools

from markupsafe import Markup

from securefilters import escaping


# Filter names, in the order they are installed, mapped to encoders.
FILTERS = {
    'html': escaping.escape_html,
    'js': escaping.escape_js,
    'jsAttr': escaping.escape_js_attr,
    'uri': escaping.escape_uri,
    'json': escaping.escape_json,
    'jsObj': escaping.escape_js_obj,
    'css': escaping.escape_css,
    'style': escaping.escape_style,
    }

TO_CONFIGURE = tuple(FILTERS)


def _marked_safe(encoder):
    """
    Wraps encoder so that its output is flagged as markup an autoescaping
    engine must not encode again.
    """
    @functools.wraps(encoder)
    def safe_encoder(value):
        return Markup(encoder(value))
    return safe_encoder


def configure(engine, mark_safe=False):
    """
    Adds this module's filters to a template engine's filter map.

    engine - an object with a mutable `filters` mapping, such as a
        jinja2.Environment, or a dict with a "filters" key.  The map is
        created if it is missing.  Unrelated filters already in the map are
        left alone.
    mark_safe - if true, installed filters return markupsafe.Markup so
        engines that autoescape do not double-encode their output.

    Returns the same engine so calls can be chained.
    """
    if isinstance(engine, dict):
        filters = engine.get('filters')
        if filters is None:
            filters = engine['filters'] = {}
    else:
        filters = getattr(engine, 'filters', None)
        if filters is None:
            filters = {}
            engine.filters = filters
    for name in TO_CONFIGURE:
        encoder = FILTERS[name]
        if mark_safe:
            encoder = _marked_safe(encoder)
        filters[name] = encoder
    return engine
