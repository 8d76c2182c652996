"""
Context-sensitive output encoding for HTML, JavaScript, URI and CSS.

Each encoder turns an untrusted value into a string that is safe to embed in
one specific position of trusted template text.
"""

from securefilters.registration import FILTERS, configure
from securefilters.escaping import SerializationError, encode

from securefilters import escaping as _escaping

html = _escaping.escape_html
js = _escaping.escape_js
js_attr = _escaping.escape_js_attr
uri = _escaping.escape_uri
json = _escaping.escape_json
js_obj = _escaping.escape_js_obj
css = _escaping.escape_css
style = _escaping.escape_style
