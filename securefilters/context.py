#!/usr/bin/python

"""
Defines symbolic names for the textual contexts that an untrusted value
can be embedded in, represented as small integers.
"""


# Text or a quoted or unquoted attribute value in HTML markup.
CONTEXT_HTML = 0

# Inside a single or double quoted JavaScript string literal.
CONTEXT_JS_STRING = 1

# Inside a quoted JavaScript string that is itself inside an HTML attribute
# value, as in onclick="f('...')".
CONTEXT_JS_ATTR = 2

# A single component of a URI, such as a path segment or a query value.
CONTEXT_URI = 3

# Already serialized JSON text that appears inside a <script> block.
CONTEXT_JSON = 4

# A value that is serialized to JSON and then placed inside a <script> block.
CONTEXT_JS_OBJ = 5

# A CSS identifier fragment or property value token.
CONTEXT_CSS = 6

# A CSS value inside an HTML style attribute.
CONTEXT_STYLE = 7

# One greater than the max of CONTEXT_*.
COUNT_OF_CONTEXTS = 8


# Maps composite contexts to (inner, outer) pairs.  A value embedded in the
# composite context is encoded for inner first and the result is then encoded
# for outer.  The order is fixed; reversing it lets metacharacters neutralized
# by one layer be reintroduced by the other.
COMPOSITE_CONTEXTS = {
    CONTEXT_JS_ATTR: (CONTEXT_JS_STRING, CONTEXT_HTML),
    CONTEXT_STYLE: (CONTEXT_CSS, CONTEXT_HTML),
    }


def is_composite_context(ctx):
    """True iff values in ctx are encoded by two encoders in sequence."""
    return ctx in COMPOSITE_CONTEXTS


def is_valid_context(ctx):
    """True iff ctx is one of the CONTEXT_* values."""
    return type(ctx) is int and 0 <= ctx < COUNT_OF_CONTEXTS
