"""Version-agnostic model of an OpenAPI 3.0/3.1 document.

:func:`parse` turns document text into a spec adapter. Both adapters expose the
same navigation surface (``schemata()``, ``paths()``, ``components()``) and
hand out node wrappers from :mod:`ferroapi.openapi.nodes`.
"""

import json
import logging
import re
from typing import Any

import yaml
from pydantic import ValidationError

from ferroapi.exceptions import ParseError
from ferroapi.openapi.nodes import check_status_keys
from ferroapi.openapi.probe import OASMajorVersion, probe_version
from ferroapi.openapi.references import validate_references
from ferroapi.openapi.v3 import OAS30Spec
from ferroapi.openapi.v3 import OpenAPI as OpenAPIv3_0
from ferroapi.openapi.v3_1 import OAS31Spec
from ferroapi.openapi.v3_1 import OpenAPI as OpenAPIv3_1

__all__ = [
    'OAS30Spec',
    'OAS31Spec',
    'OASMajorVersion',
    'Spec',
    'load_document',
    'parse',
    'probe_version',
    'stringify_keys',
]

logger = logging.getLogger(__name__)

Spec = OAS30Spec | OAS31Spec

_BOOL_TAG = 'tag:yaml.org,2002:bool'


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader resolving booleans the YAML 1.2 way.

    OpenAPI documents are YAML 1.2, where only `true` and `false` are booleans;
    `yes`, `no`, `on` and `off` stay strings, so an enum like `[NO, SE]` keeps
    its values.
    """


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DocumentLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF'),
)


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return 'true' if key else 'false'
    if key is None:
        return 'null'
    return str(key)


def stringify_keys(value: Any) -> Any:
    """Turn every mapping key into a string, e.g. an unquoted response `200:`."""
    if isinstance(value, dict):
        return {_key_text(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value


def load_document(text: str) -> Any:
    """Load document text, as JSON when it starts with `{` and as YAML otherwise.

    Raises:
        ParseError: If the text is not valid JSON or YAML.
    """
    if text.lstrip().startswith('{'):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError('Document is not valid JSON', cause=e)
    try:
        return yaml.load(text, Loader=DocumentLoader)
    except yaml.YAMLError as e:
        raise ParseError('Document is not valid YAML', cause=e)


def parse(text: str) -> Spec:
    """Parse an OpenAPI document.

    Args:
        text: The document as YAML or JSON text.

    Returns:
        The adapter for the document's version.

    Raises:
        UnsupportedVersionError: If the document is not OpenAPI 3.0 or 3.1.
        ParseError: If the text is not a well-formed OpenAPI document.
        UnsupportedReferenceError: If a $ref points outside the components.
        DanglingReferenceError: If a $ref names a missing component.
        InvalidStatusSpecError: If a response key is not a valid status.
    """
    version = probe_version(text)
    logger.debug(f'Detected OpenAPI {version.value} document')

    data = load_document(text)

    if not isinstance(data, dict):
        raise ParseError(f'Expected a mapping at the document root, got {type(data).__name__}')

    data = stringify_keys(data)
    validate_references(data)

    try:
        if version is OASMajorVersion.V3_0:
            spec = OAS30Spec(OpenAPIv3_0.model_validate(data))
        else:
            spec = OAS31Spec(OpenAPIv3_1.model_validate(data))
    except ValidationError as e:
        raise ParseError(f'Document is not a valid OpenAPI {version.value} document', cause=e)

    check_status_keys(spec)
    return spec
