#!/usr/bin/python

"""
Definitions of the context-specific encoding functions.

Each encoder takes one untrusted value, coerces it to a string, and returns
a string that can be concatenated into trusted template text at a position
of the corresponding CONTEXT_* kind without letting the value end that
context early.

Every encoder is whitelist based: a compiled character class matches each
code point that is NOT known to be safe in the context, and a replacer
function rewrites the match.  Encoders for nested contexts apply two of the
primitive encoders in a fixed order.

These functions correspond to values of the CONTEXT_* enum defined in the
context module.
"""

import json
import re

from securefilters import context
from securefilters import debug
from securefilters import text


class SerializationError(ValueError):
    """
    A value passed to escape_js_obj cannot be represented as JSON because it
    is cyclic, contains a non-finite float, or contains a value of an
    unsupported type.
    """


def _coerce(value):
    """
    The string form of an arbitrary value.  None becomes the empty string.
    String subclasses such as markup wrappers are reduced to plain strings so
    that their overridden methods do not interfere with encoding.
    """
    if value is None:
        return ""
    if type(value) is not str:
        value = str(value)
    return value


# Control characters that are never meaningful in HTML text and that some
# browsers misinterpret.  Each is converted to a single space.
_HTML_CONTROL = re.compile(u'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')

# Matches all but alphanumerics, allowable whitespace, ",._-" and non-ASCII.
# NO-BREAK SPACE U+00A0 is fine since it's whitespace.
# Supplementary code points are allowed.  Unpaired surrogates are not since
# they cannot be written out as UTF-8.
_HTML_NOT_WHITELISTED = re.compile(
    u'[^\t\n\x0b\x0c\r ,.0-9A-Z_a-z\\-\u00a0-\ud7ff\ue000-\U0010ffff]')

# Matches all but alphanumerics and ",._-".
# "-" is safe in both URIs and HTML.
_JS_NOT_WHITELISTED = re.compile(r'[^,\-.0-9A-Z_a-z]')

# Adds '":[\]{}', the JSON metacharacters, to the JS whitelist.
_JSON_NOT_WHITELISTED = re.compile(r'[^",\-.0-9:A-Z\[\\\]_a-z{}]')

# A CDATA section end after the JS pass has escaped ">".
# Escaping "<" in the same pass is enough to prevent a CDATA section start.
_CDATA_CLOSE = re.compile(r'\]\](?:>|\\x3E|\\u003E)', re.IGNORECASE)

# Matches all but alphanumerics and supplementary code points.  Surrogate
# pairs are joined before matching so unpaired halves are escaped.
# The rest of non-ASCII Unicode is escaped to avoid charset encoding issues.
_CSS_NOT_WHITELISTED = re.compile(
    u'[^0-9A-Za-z\U00010000-\U0010ffff]')

# Matches runs of all but the characters that encodeURIComponent leaves
# alone minus "!'()*~".
_NOT_URI_UNRESERVED = re.compile(r'[^0-9A-Za-z._\-]+')


_ESCAPE_MAP_FOR_HTML = {
    '"': "&quot;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    }

def _replacer_for_html(match):
    """A regex replacer"""
    group = match.group(0)
    encoded = _ESCAPE_MAP_FOR_HTML.get(group)
    if encoded is not None:
        return encoded
    # Decimal is shorter below 100.
    codepoint = ord(group)
    if codepoint < 100:
        return "&#%d;" % codepoint
    # Unpaired surrogates end up here.  Browsers decode them as U+FFFD.
    return "&#x%X;" % codepoint


def _js_slash_encode(char):
    """
    Backslash-encodes a single character per UTF-16 code unit.
    '<' -> '\\x3C', U+2028 -> '\\u2028'
    """
    escapes = []
    for unit in text.utf16_code_units(char):
        if unit < 0x80:
            escapes.append(r'\x%02X' % unit)
        else:
            escapes.append(r'\u%04X' % unit)
    return "".join(escapes)


def _replacer_for_js(match):
    """A regex replacer."""
    return _js_slash_encode(match.group(0))


def _replacer_for_css(match):
    """A regexp replacer."""
    codepoint = ord(match.group(0))
    if codepoint == 0:
        # NUL has undefined behaviour in CSS.  Use REPLACEMENT CHARACTER.
        return '\\fffd '
    # The trailing space terminates the escape so that following hex digits
    # are not read as part of it.
    return '\\%x ' % codepoint


def _pct_encode(match):
    """Percent encodes the UTF-8 octets in the matched text."""
    value = text.join_surrogates(match.group(0))
    octets = value.encode('utf-8', 'surrogatepass')
    return "".join(["%%%02X" % octet for octet in octets])


def escape_html(value):
    """
    Encodes a value for safe embedding in HTML text and in quoted or
    unquoted HTML attribute values.

    Controls are replaced with spaces, then everything outside the
    whitelist is entity encoded.  '"', '&', '<' and '>' get the named
    entities people expect.

    This is not the correct encoding for the content of a <script> or <style>
    element or of any other element whose content is not entity decoded.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    value = text.join_surrogates(_HTML_CONTROL.sub(' ', _coerce(value)))
    return _HTML_NOT_WHITELISTED.sub(_replacer_for_html, value)


def escape_js(value):
    """
    Encodes a value for safe embedding inside a single or double quoted
    JavaScript string literal.

    Always put quotes around the embedded value.  This is not the correct
    encoding for the whole content of a <script> element.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    return _JS_NOT_WHITELISTED.sub(_replacer_for_js, _coerce(value))


def escape_js_attr(value):
    """
    Encodes a value for a JavaScript string inside an HTML attribute,
    e.g. <a onclick="activate('VALUE')">.

    The JS pass must come first: the HTML pass then entity encodes the
    backslashes the JS pass introduced, and the browser undoes the two
    layers in the opposite order.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    return escape_html(escape_js(value))


def escape_uri(value):
    """
    Percent-encodes a value for use as one URI component.

    Only ASCII alphanumerics and "-._" survive; every other octet of the
    UTF-8 encoding becomes %XX with upper case hex digits.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    return _NOT_URI_UNRESERVED.sub(_pct_encode, _coerce(value))


def escape_json(value):
    """
    Backslash-encodes previously generated JSON text so that it can appear
    in a <script> block.

    JSON punctuation is left as is so the output still parses as the same
    JSON value.  '<' and '>' are escaped along with everything else outside
    the whitelist, which prevents '</script>' and '<!--' from appearing.

    value - JSON text.  Not checked for validity.

    Returns an escaped version of value.
    """
    escaped = _JSON_NOT_WHITELISTED.sub(_replacer_for_js, _coerce(value))
    return _CDATA_CLOSE.sub(r'\\x5D\\x5D\\x3E', escaped)


class _MarshalerError(Exception):
    """
    Carries an exception raised by a to_json method through json.dumps so
    that escape_js_obj can tell it apart from a serialization failure.
    """

    def __init__(self, error):
        Exception.__init__(self, error)
        self.error = error


def _marshal_json_obj(obj):
    """
    Marshals a JSON object by looking for a to_json method.
    """
    if hasattr(obj, 'to_json'):
        try:
            return obj.to_json()
        except Exception as err:
            raise _MarshalerError(err) from err
    raise TypeError(
        'Object of type %s is not JSON serializable' % type(obj).__name__)


def escape_js_obj(value):
    """
    Serializes a value as JSON and escapes the result with escape_json so it
    can be assigned to a variable inside a <script> block.

    Objects keep their insertion order.  Objects other than dicts, lists,
    tuples, strings, numbers, booleans and None must provide a to_json
    method that returns one of those.

    value - The value to serialize.

    Returns a JSON representation of value safe for a script block.

    Raises SerializationError if value is cyclic or contains a NaN, an
    infinity, or an unsupported type.  Exceptions raised by a to_json method
    reach the caller as they are.
    """
    marshaler_error = None
    try:
        serialized = json.dumps(
            value,
            ensure_ascii=False,  # escape_json encodes non-ASCII itself.
            check_circular=True,
            allow_nan=False,  # NaN is not JSON.
            indent=None,
            default=_marshal_json_obj,
            separators=(',', ':'))
    except _MarshalerError as err:
        marshaler_error = err.error
    except (TypeError, ValueError, RecursionError) as err:
        raise SerializationError(
            'cannot serialize value as JSON: %s' % err) from err
    if marshaler_error is not None:
        raise marshaler_error
    return escape_json(serialized)


def escape_css(value):
    """
    Backslash-encodes a value for use in CSS as an identifier fragment or a
    property value token.

    Each escape is the lower case hex code point followed by one space:
    '<' -> '\\3c '.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    return _CSS_NOT_WHITELISTED.sub(
        _replacer_for_css, text.join_surrogates(_coerce(value)))


def escape_style(value):
    """
    Encodes a value for a CSS value inside an HTML style attribute.
    CSS encodes first, then entity encodes the result.

    value - The value to escape.  May not be a string, but the value
        will be coerced to a string.

    Returns an escaped version of value.
    """
    return escape_html(escape_css(value))


ENCODER_FOR_CONTEXT = [None for _ in range(0, context.COUNT_OF_CONTEXTS)]
ENCODER_FOR_CONTEXT[context.CONTEXT_HTML] = escape_html
ENCODER_FOR_CONTEXT[context.CONTEXT_JS_STRING] = escape_js
ENCODER_FOR_CONTEXT[context.CONTEXT_JS_ATTR] = escape_js_attr
ENCODER_FOR_CONTEXT[context.CONTEXT_URI] = escape_uri
ENCODER_FOR_CONTEXT[context.CONTEXT_JSON] = escape_json
ENCODER_FOR_CONTEXT[context.CONTEXT_JS_OBJ] = escape_js_obj
ENCODER_FOR_CONTEXT[context.CONTEXT_CSS] = escape_css
ENCODER_FOR_CONTEXT[context.CONTEXT_STYLE] = escape_style


def encode(value, ctx):
    """
    Encodes value for the given context.

    value - The untrusted value.
    ctx - One of the context.CONTEXT_* values.

    Returns the encoded value.
    """
    if not context.is_valid_context(ctx):
        raise ValueError('no encoder for %s' % debug.context_to_string(ctx))
    return ENCODER_FOR_CONTEXT[ctx](value)
