"""Source pointers.

A source pointer is a small immutable value that addresses one node of an
OpenAPI document by its structural position. Pointers never hold the node
itself: they can be copied, hashed and used as dictionary keys, and any of
them can be turned back into the node with :func:`resolve`.

Two pointers are equal exactly when they are of the same variant and their
components are equal. ``str(pointer)`` renders a JSON-pointer-like path that
is used to name the node in error messages.
"""

from dataclasses import dataclass, fields
from http import HTTPMethod
from typing import Any, Union

from ferroapi.openapi.references import escape_pointer, parse_component_ref
from ferroapi.openapi.types import ParameterLocation


class Source:
    """Base class of all source pointers."""

    def _components(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._components() == other._components()

    def __hash__(self) -> int:
        return hash((type(self).__name__, *self._components()))

    def resolve(self, document: Any) -> Any:
        raise NotImplementedError

    def __str__(self) -> str:
        raise NotImplementedError


def _component(document: Any, uri: str) -> Any:
    ref = parse_component_ref(uri)
    return getattr(document.components, ref.kind)[ref.name]


def _content_at(content: dict | None, index: int) -> Any:
    return list((content or {}).values())[index]


# Paths


@dataclass(frozen=True, eq=False)
class PathItemSource(Source):
    path: str

    def resolve(self, document: Any) -> Any:
        return document.paths[self.path]

    def __str__(self) -> str:
        return f'#/paths/{escape_pointer(self.path)}'


@dataclass(frozen=True, eq=False)
class OperationSource(Source):
    path_item: PathItemSource
    method: HTTPMethod

    def resolve(self, document: Any) -> Any:
        return getattr(self.path_item.resolve(document), self.method.value.lower())

    def __str__(self) -> str:
        return f'{self.path_item}/{self.method.value.lower()}'


# Parameters


@dataclass(frozen=True)
class ParameterLocalId:
    """Identity of a parameter within its owner: its name and its location."""

    name: str
    location: ParameterLocation

    def matches(self, raw: Any) -> bool:
        return raw.name == self.name and raw.in_ == self.location


@dataclass(frozen=True, eq=False)
class ParameterUri(Source):
    uri: str

    def resolve(self, document: Any) -> Any:
        return _component(document, self.uri)

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True, eq=False)
class ParameterOnOperation(Source):
    operation: OperationSource
    local_id: ParameterLocalId

    def resolve(self, document: Any) -> Any:
        return _find_parameter(self.operation.resolve(document).parameters, self.local_id)

    def __str__(self) -> str:
        return f'{self.operation}/parameters/{self.local_id.location.value}:{escape_pointer(self.local_id.name)}'


@dataclass(frozen=True, eq=False)
class ParameterOnPathItem(Source):
    path_item: PathItemSource
    local_id: ParameterLocalId

    def resolve(self, document: Any) -> Any:
        return _find_parameter(self.path_item.resolve(document).parameters, self.local_id)

    def __str__(self) -> str:
        return f'{self.path_item}/parameters/{self.local_id.location.value}:{escape_pointer(self.local_id.name)}'


def _find_parameter(parameters: list | None, local_id: ParameterLocalId) -> Any:
    for raw in parameters or []:
        if hasattr(raw, 'in_') and local_id.matches(raw):
            return raw
    raise KeyError(f'no parameter {local_id.name!r} in {local_id.location.value}')


ParameterSource = Union[ParameterUri, ParameterOnOperation, ParameterOnPathItem]


# Request bodies and responses


@dataclass(frozen=True, eq=False)
class RequestBodyUri(Source):
    uri: str

    def resolve(self, document: Any) -> Any:
        return _component(document, self.uri)

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True, eq=False)
class RequestBodyOnOperation(Source):
    operation: OperationSource

    def resolve(self, document: Any) -> Any:
        return self.operation.resolve(document).requestBody

    def __str__(self) -> str:
        return f'{self.operation}/requestBody'


RequestBodySource = Union[RequestBodyUri, RequestBodyOnOperation]


@dataclass(frozen=True, eq=False)
class ResponseUri(Source):
    uri: str

    def resolve(self, document: Any) -> Any:
        return _component(document, self.uri)

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True, eq=False)
class ResponseOnOperation(Source):
    operation: OperationSource
    index: int

    def resolve(self, document: Any) -> Any:
        return list(self.operation.resolve(document).responses.values())[self.index]

    def __str__(self) -> str:
        return f'{self.operation}/responses/{self.index}'


ResponseSource = Union[ResponseUri, ResponseOnOperation]


# Media types


@dataclass(frozen=True, eq=False)
class MediaTypeOnParameter(Source):
    parameter: ParameterSource
    index: int

    def resolve(self, document: Any) -> Any:
        return _content_at(self.parameter.resolve(document).content, self.index)

    def __str__(self) -> str:
        return f'{self.parameter}/content/{self.index}'


@dataclass(frozen=True, eq=False)
class MediaTypeOnRequestBody(Source):
    request_body: RequestBodySource
    index: int

    def resolve(self, document: Any) -> Any:
        return _content_at(self.request_body.resolve(document).content, self.index)

    def __str__(self) -> str:
        return f'{self.request_body}/content/{self.index}'


@dataclass(frozen=True, eq=False)
class MediaTypeOnResponse(Source):
    response: ResponseSource
    index: int

    def resolve(self, document: Any) -> Any:
        return _content_at(self.response.resolve(document).content, self.index)

    def __str__(self) -> str:
        return f'{self.response}/content/{self.index}'


MediaTypeSource = Union[MediaTypeOnParameter, MediaTypeOnRequestBody, MediaTypeOnResponse]


# Schemas


@dataclass(frozen=True, eq=False)
class SchemaUri(Source):
    uri: str

    @classmethod
    def for_component(cls, name: str) -> 'SchemaUri':
        return cls(f'#/components/schemas/{escape_pointer(name)}')

    def resolve(self, document: Any) -> Any:
        return _component(document, self.uri)

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True, eq=False)
class SchemaProperty(Source):
    parent: 'SchemaSource'
    name: str

    def resolve(self, document: Any) -> Any:
        return self.parent.resolve(document).properties[self.name]

    def __str__(self) -> str:
        return f'{self.parent}/properties/{escape_pointer(self.name)}'


@dataclass(frozen=True, eq=False)
class SchemaPatternProperty(Source):
    parent: 'SchemaSource'
    pattern: str

    def resolve(self, document: Any) -> Any:
        return self.parent.resolve(document).patternProperties[self.pattern]

    def __str__(self) -> str:
        return f'{self.parent}/patternProperties/{escape_pointer(self.pattern)}'


@dataclass(frozen=True, eq=False)
class SchemaItems(Source):
    parent: 'SchemaSource'

    def resolve(self, document: Any) -> Any:
        return self.parent.resolve(document).items

    def __str__(self) -> str:
        return f'{self.parent}/items'


@dataclass(frozen=True, eq=False)
class SchemaAdditionalProperties(Source):
    parent: 'SchemaSource'

    def resolve(self, document: Any) -> Any:
        return self.parent.resolve(document).additionalProperties

    def __str__(self) -> str:
        return f'{self.parent}/additionalProperties'


@dataclass(frozen=True, eq=False)
class SchemaComposite(Source):
    """A member of an ``allOf``, ``anyOf`` or ``oneOf`` list."""

    parent: 'SchemaSource'
    keyword: str
    index: int

    def resolve(self, document: Any) -> Any:
        return getattr(self.parent.resolve(document), self.keyword)[self.index]

    def __str__(self) -> str:
        return f'{self.parent}/{self.keyword}/{self.index}'


@dataclass(frozen=True, eq=False)
class SchemaFromMediaType(Source):
    media_type: MediaTypeSource

    def resolve(self, document: Any) -> Any:
        return self.media_type.resolve(document).schema_

    def __str__(self) -> str:
        return f'{self.media_type}/schema'


@dataclass(frozen=True, eq=False)
class SchemaFromParameter(Source):
    parameter: ParameterSource

    def resolve(self, document: Any) -> Any:
        return self.parameter.resolve(document).schema_

    def __str__(self) -> str:
        return f'{self.parameter}/schema'


SchemaSource = Union[
    SchemaUri,
    SchemaProperty,
    SchemaPatternProperty,
    SchemaItems,
    SchemaAdditionalProperties,
    SchemaComposite,
    SchemaFromMediaType,
    SchemaFromParameter,
]


def resolve(source: Source, document: Any) -> Any:
    """Look up the node a source pointer addresses.

    Args:
        source: Any source pointer created by an adapter.
        document: The document model the pointer was created against.

    Returns:
        The document model node at that position.
    """
    return source.resolve(document)
