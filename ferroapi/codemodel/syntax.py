"""Rust identifier rules."""

from ferroapi.exceptions import InvalidIdentifierError

STRICT_KEYWORDS = frozenset(
    {
        'as', 'async', 'await', 'break', 'const', 'continue', 'crate', 'dyn',
        'else', 'enum', 'extern', 'false', 'fn', 'for', 'if', 'impl', 'in',
        'let', 'loop', 'match', 'mod', 'move', 'mut', 'pub', 'ref', 'return',
        'self', 'Self', 'static', 'struct', 'super', 'trait', 'true', 'type',
        'unsafe', 'use', 'where', 'while',
    }
)

RESERVED_KEYWORDS = frozenset(
    {
        'abstract', 'become', 'box', 'do', 'final', 'gen', 'macro', 'override',
        'priv', 'try', 'typeof', 'unsized', 'virtual', 'yield',
    }
)

KEYWORDS = STRICT_KEYWORDS | RESERVED_KEYWORDS

# Keywords that may still appear as a segment of a path.
PATH_SEGMENT_KEYWORDS = frozenset({'self', 'super', 'crate', '$crate'})


def is_keyword(name: str) -> bool:
    return name in KEYWORDS


def is_identifier_like(name: str) -> bool:
    """Check the lexical shape of an identifier, ignoring keywords."""
    if not name or name == '_':
        return False
    first = name[0]
    if not (first.isalpha() or first == '_'):
        return False
    return all(c.isalnum() or c == '_' for c in name[1:])


def is_identifier(name: str) -> bool:
    """Check that ``name`` is a usable identifier: well formed and not a keyword."""
    return is_identifier_like(name) and not is_keyword(name)


def escape_keyword(name: str) -> str:
    """Append an underscore to keywords so they can be used as identifiers."""
    if is_keyword(name):
        return f'{name}_'
    return name


def parse_identifier(name: str) -> str:
    """Return ``name`` if it is a usable identifier.

    Raises:
        InvalidIdentifierError: If it is malformed or a keyword.
    """
    if not is_identifier(name):
        raise InvalidIdentifierError(name)
    return name


_STRING_ESCAPES = {'\\': '\\\\', '"': '\\"', '\n': '\\n', '\r': '\\r', '\t': '\\t', '\0': '\\0'}


def string_literal(value: str) -> str:
    """Render ``value`` as a Rust string literal."""
    out = []
    for char in value:
        if char in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f'\\u{{{ord(char):x}}}')
        else:
            out.append(char)
    return '"' + ''.join(out) + '"'
