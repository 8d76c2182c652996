#!/usr/bin/python

"""
Decoders that undo the encodings in the escaping module the way a browser
would: HTML character references, JavaScript string escapes, percent
encoding, CSS escapes, and backslash-escaped JSON in a script block.

They are not used to render anything.  They exist so that encoded output
can be checked to decode back to the original text.
"""

from html.entities import html5 as _ENTITY_NAME_TO_EXPANSION
import json
import re
from urllib.parse import unquote

from securefilters import text


_HTML_ENTITY = re.compile(
    '&(?:#(?:[xX]([0-9A-Fa-f]+);|([0-9]+);)|([a-zA-Z0-9]+;?))')

def unescape_html(html):
    """
    Given HTML that would parse to a single text node, returns the text
    value of that node.
    """
    # Fast path for common case.
    if html.find("&") < 0:
        return html
    return text.join_surrogates(
        _HTML_ENTITY.sub(_decode_html_entity, html))


def _decode_html_entity(match):
    """
    Regex replacer that expects hex digits in group 1, or
    decimal digits in group 2, or a named entity in group 3.
    """
    group = match.group(1)
    if group:
        return _char_ref(int(group, 16))
    group = match.group(2)
    if group:
        return _char_ref(int(group, 10))
    group = match.group(3)
    return _ENTITY_NAME_TO_EXPANSION.get(
        group,
        # Treat "&noSuchEntity;" as "&noSuchEntity;"
        match.group(0))


def _unichr(codepoint):
    """Like chr but maps out of range code points to U+FFFD."""
    if codepoint > 0x10ffff:
        return u'\ufffd'
    return chr(codepoint)


def _char_ref(codepoint):
    """The character a browser produces for a numeric character reference."""
    if 0xd800 <= codepoint <= 0xdfff:
        return u'\ufffd'
    return _unichr(codepoint)


_JS_ESCAPE = re.compile(
    r'\\(?:x([0-9A-Fa-f]{2})|u([0-9A-Fa-f]{4})|u\{([0-9A-Fa-f]+)\}'
    r'|(\r\n|[\n\r\u2028\u2029])|(.))',
    re.DOTALL)

_JS_SINGLE_CHAR_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "0": "\0",
    }

def _decode_js_escape(match):
    """
    Regex replacer that expects two hex digits in group 1, four in group 2,
    a braced code point in group 3, a line continuation in group 4, or a
    single escaped character in group 5.
    """
    group = match.group(1) or match.group(2) or match.group(3)
    if group:
        return _unichr(int(group, 16))
    if match.group(4):
        return ""
    group = match.group(5)
    return _JS_SINGLE_CHAR_ESCAPES.get(group, group)


def unescape_js_string(value):
    """
    The value of a JavaScript string literal whose body, without the
    delimiting quotes, is value.  Surrogate escapes that form a pair decode
    to the supplementary code point.
    """
    if value.find("\\") < 0:
        return value
    return text.join_surrogates(_JS_ESCAPE.sub(_decode_js_escape, value))


def unescape_uri(value):
    """Percent-decodes one URI component as UTF-8."""
    return text.join_surrogates(
        unquote(value, encoding='utf-8', errors='surrogatepass'))


_CSS_ESC = re.compile(
    r'\\(?:([0-9A-Fa-f]{1,6})(?:\r\n|[\t\n\f\r ])?|(\r\n|[\n\r\f])|(.))',
    re.DOTALL)

def _css_decode_one(match):
    """
    r'\a ' -> '\n'.
    Expects hex digits in group 1, an escaped newline in group 2, or any
    other escaped character in group 3.
    """
    group = match.group(1)
    if group:
        codepoint = int(group, 16)
        # Per CSS Syntax 3, consume an escaped code point.
        if codepoint == 0 or 0xd800 <= codepoint <= 0xdfff:
            return u'\ufffd'
        return _unichr(codepoint)
    if match.group(2):
        return ""
    return match.group(3)


def unescape_css(value):
    """The text value of a CSS identifier or string body."""
    return _CSS_ESC.sub(_css_decode_one, value)


_JSON_BACKSLASH_PAIR = re.compile(r'\\(?:x([0-9A-Fa-f]{2})|.)', re.DOTALL)

def _x_escape_to_json(match):
    """'\\x3C' -> '\\u003C'.  Other escapes are kept."""
    group = match.group(1)
    if group:
        return '\\u00' + group
    return match.group(0)


def unescape_js_obj(value):
    """
    Parses the output of escape_js_obj or escape_json back into a value.
    """
    return json.loads(_JSON_BACKSLASH_PAIR.sub(_x_escape_to_json, value))
