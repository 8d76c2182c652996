"""
Utility functions that aid in debugging encoder selection problems.
"""

from securefilters import context

def _context_enum_name_table(prefix):
    """
    Given 'FOO_' produces a table mapping
    the value of context.FOO_XYZ to 'FOO_XYZ'.
    """
    name_table = {}
    for key, value in context.__dict__.items():
        if (key.startswith(prefix)
            and type(value) is int
            and value not in name_table):
            name_table[value] = key
    return name_table

_CONTEXT_NAMES = _context_enum_name_table('CONTEXT_')

def context_to_string(ctx):
    """
    Converts a context represented as an integer to a diagnostic string.
    Composite contexts also list the contexts they are built from.
    """
    name = _CONTEXT_NAMES.get(ctx)
    if name is None:
        return "[Context UNKNOWN %r]" % (ctx,)
    parts = [name]
    if context.is_composite_context(ctx):
        inner, outer = context.COMPOSITE_CONTEXTS[ctx]
        parts.append(
            "%s in %s" % (_CONTEXT_NAMES[inner], _CONTEXT_NAMES[outer]))
    return "[Context %s]" % " ".join(parts)
