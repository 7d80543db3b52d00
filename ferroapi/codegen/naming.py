"""Naming rules for the generated Rust code.

Every derived identifier goes through one of the functions below, which
guarantee a well-formed identifier that is not a keyword. Names that would
collide with an existing one are made unique with :func:`uncollide`.
"""

import re
from collections.abc import Container
from http import HTTPMethod, HTTPStatus
from typing import Any

from ferroapi.codemodel.syntax import escape_keyword
from ferroapi.openapi.types import StatusClass, StatusSpec

_INVALID_CHARS = re.compile(r'[^A-Za-z0-9_]')
_UNDERSCORE_RUNS = re.compile(r'_+')
_WORD_SPLIT = re.compile(r'[^A-Za-z0-9]+')

_STATUS_CLASS_NAMES = {
    StatusClass.INFORMATIONAL: 'Informational',
    StatusClass.SUCCESS: 'Success',
    StatusClass.REDIRECTION: 'Redirection',
    StatusClass.CLIENT_ERROR: 'ClientError',
    StatusClass.SERVER_ERROR: 'ServerError',
}


def capitalize(name: str) -> str:
    """Uppercase the first character, leaving the rest alone."""
    return name[:1].upper() + name[1:]


def decapitalize(name: str) -> str:
    """Lowercase the first character, leaving the rest alone."""
    return name[:1].lower() + name[1:]


def _identifier(name: str, fallback: str) -> str:
    name = _INVALID_CHARS.sub('_', name)
    if not name.strip('_'):
        return fallback
    if name[0].isdigit():
        name = f'_{name}'
    return name


def pascal_case(text: str) -> str:
    """Split on anything that is not a letter or digit and capitalize each word."""
    return ''.join(capitalize(word) for word in _WORD_SPLIT.split(text) if word)


def schema_to_type_name(name: str) -> str:
    """Type name for a component schema: ``pet`` becomes ``Pet``."""
    return escape_keyword(_identifier(capitalize(name), 'Type'))


def property_to_field_name(name: str) -> str:
    """Field name for a schema property: ``Name`` becomes ``name``, ``type`` becomes ``type_``."""
    return escape_keyword(_identifier(decapitalize(name), 'field'))


def parameter_to_param_name(name: str) -> str:
    return escape_keyword(_identifier(decapitalize(name), 'param'))


def _sanitize_segment(segment: str) -> str:
    return _UNDERSCORE_RUNS.sub('_', _INVALID_CHARS.sub('_', segment)).strip('_')


def path_method_to_fn_name(method: HTTPMethod | str, template: str) -> str:
    """Function name for an operation: ``GET /pets/{petId}`` becomes ``pets_petId_get``.

    Each path segment has characters outside ``[A-Za-z0-9_]`` replaced by
    underscores, runs of underscores collapsed and leading and trailing ones
    dropped. Segments left empty are skipped, so ``/`` and the empty path
    yield the bare method name.
    """
    method = method.value if isinstance(method, HTTPMethod) else method
    segments = [_sanitize_segment(segment) for segment in template.split('/')]
    parts = [segment for segment in segments if segment]
    parts.append(method.lower())
    name = '_'.join(parts)
    if name[0].isdigit():
        name = f'_{name}'
    return escape_keyword(name)


def path_method_to_type_name(method: HTTPMethod | str, template: str) -> str:
    """Type name prefix for an operation: ``GET /pet/{petId}`` becomes ``PetPetIdGet``."""
    method = method.value if isinstance(method, HTTPMethod) else method
    name = pascal_case(template) + capitalize(method.lower())
    if name[0].isdigit():
        name = f'_{name}'
    return name


def media_type_range_to_variant_name(media_range: str) -> str:
    """Variant name for a media type range.

    Both sides of the ``/`` keep only their letters and are capitalized, a
    ``*`` side becomes ``Any``: ``application/x-www-form-urlencoded`` becomes
    ``ApplicationXwwwformurlencoded`` and ``*/*`` becomes ``AnyAny``.
    """
    sides = []
    for side in media_range.split('/'):
        side = side.strip()
        if side == '*':
            sides.append('Any')
        else:
            sides.append(capitalize(''.join(c for c in side if c.isascii() and c.isalpha())))
    name = ''.join(sides)
    return name or 'Any'


def status_spec_to_variant_name(status: StatusSpec) -> str:
    """Variant name for a response status.

    Concrete codes use their reason phrase followed by the code, e.g.
    ``BadRequest400``; codes without a registered phrase become ``Status499``.
    Wildcards become e.g. ``ClientError4XX``, and ``default`` is ``Default``.
    """
    if status.is_default:
        return 'Default'
    if status.is_wildcard:
        return f'{_STATUS_CLASS_NAMES[status.status_class]}{status}'
    try:
        phrase = HTTPStatus(status.code).phrase
    except ValueError:
        return f'Status{status.code}'
    words = _WORD_SPLIT.split(phrase)
    return ''.join(word.capitalize() for word in words if word) + str(status.code)


def enum_value_to_variant_name(value: Any) -> str:
    """Variant name for an enum value: ``available`` becomes ``Available``."""
    name = pascal_case(str(value))
    if not name:
        return 'Empty'
    if name[0].isdigit():
        name = f'_{name}'
    return escape_keyword(name)


def uncollide(name: str, taken: Container[str]) -> str:
    """Make ``name`` unique by appending the smallest positive integer needed.

    Args:
        name: The preferred name.
        taken: The names already in use.

    Returns:
        ``name`` itself if it is free, else the first free ``name{n}`` with n >= 1.
    """
    if name not in taken:
        return name
    n = 1
    while f'{name}{n}' in taken:
        n += 1
    return f'{name}{n}'
