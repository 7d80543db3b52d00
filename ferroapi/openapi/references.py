"""Parsing and validation of ``$ref`` values.

Only intra-document references into the component maps are supported::

    #/components/schemas/{name}
    #/components/requestBodies/{name}
    #/components/responses/{name}
    #/components/parameters/{name}

Every reference in a document is checked once, right after the text has been
loaded and before the document models are built, so that navigation never has
to deal with a reference it cannot follow.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ferroapi.exceptions import DanglingReferenceError, UnsupportedReferenceError

logger = logging.getLogger(__name__)

COMPONENT_KINDS = ('schemas', 'requestBodies', 'responses', 'parameters')

# Payload keys whose values are free-form data rather than document structure.
_OPAQUE_KEYS = frozenset({'example', 'examples', 'default', 'enum', 'const'})

# Keys whose values map user-chosen names to objects; an opaque key is a name there.
_NAME_MAPS = frozenset(
    {
        'properties',
        'patternProperties',
        'responses',
        'schemas',
        'parameters',
        'requestBodies',
        'content',
        'paths',
        'headers',
        'encoding',
        'callbacks',
        'links',
        'webhooks',
        '$defs',
    }
)


def escape_pointer(token: str) -> str:
    """Escape a single JSON pointer reference token."""
    return token.replace('~', '~0').replace('/', '~1')


def unescape_pointer(token: str) -> str:
    """Unescape a single JSON pointer reference token."""
    return token.replace('~1', '/').replace('~0', '~')


@dataclass(frozen=True)
class ComponentRef:
    """A parsed component reference.

    Attributes:
        kind: The component map, one of :data:`COMPONENT_KINDS`.
        name: The unescaped component name.
    """

    kind: str
    name: str

    @property
    def uri(self) -> str:
        """The canonical URI of the component."""
        return f'#/components/{self.kind}/{escape_pointer(self.name)}'


def parse_component_ref(uri: str) -> ComponentRef:
    """Parse a ``$ref`` value into the component it names.

    Args:
        uri: The raw ``$ref`` string.

    Returns:
        The component reference.

    Raises:
        UnsupportedReferenceError: If the reference is not an intra-document
            component reference of a supported kind.
    """
    if not uri.startswith('#/'):
        raise UnsupportedReferenceError(uri, 'only intra-document references are supported')

    parts = uri[2:].split('/')
    if len(parts) != 3 or parts[0] != 'components':
        raise UnsupportedReferenceError(
            uri, 'expected a reference of the form #/components/{kind}/{name}'
        )

    _, kind, name = parts
    if kind not in COMPONENT_KINDS:
        raise UnsupportedReferenceError(
            uri, f"component kind '{kind}' is not one of {', '.join(COMPONENT_KINDS)}"
        )
    if not name:
        raise UnsupportedReferenceError(uri, 'component name is empty')

    return ComponentRef(kind=kind, name=unescape_pointer(name))


def validate_references(document: dict) -> int:
    """Check every ``$ref`` in a raw document.

    Args:
        document: The document as loaded from YAML/JSON.

    Returns:
        The number of references checked.

    Raises:
        UnsupportedReferenceError: If a reference has an unsupported shape.
        DanglingReferenceError: If a reference names a missing component.
    """
    components = document.get('components')
    if not isinstance(components, dict):
        components = {}
    count = 0

    def visit(node: Any, name_map: bool = False, path_map: bool = False) -> None:
        nonlocal count
        if isinstance(node, dict):
            ref = node.get('$ref')
            if isinstance(ref, str) and not name_map:
                _check(ref, components)
                count += 1
            for key, value in node.items():
                if not name_map and key in _OPAQUE_KEYS:
                    continue
                if path_map and isinstance(value, dict):
                    # a path item given as $ref is skipped during navigation, not followed
                    visit({k: v for k, v in value.items() if k != '$ref'})
                    continue
                visit(value, not name_map and key in _NAME_MAPS, not name_map and key == 'paths')
        elif isinstance(node, list):
            for item in node:
                visit(item)

    visit(document)
    logger.debug(f'Validated {count} references')
    return count


def _check(uri: str, components: dict) -> None:
    ref = parse_component_ref(uri)
    targets = components.get(ref.kind)
    if not isinstance(targets, dict) or ref.name not in targets:
        raise DanglingReferenceError(uri)
