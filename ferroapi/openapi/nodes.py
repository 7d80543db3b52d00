"""Version-agnostic navigation over an OpenAPI document.

The node wrappers in this module pair a document model object with the
source pointer that addresses it and the adapter that owns the document.
They only read through the adapter's small set of version hooks, so the
same wrappers serve OpenAPI 3.0 and 3.1 documents alike.

Children that may be given either inline or as a ``$ref`` are returned as
:class:`RefOr` values: either :class:`Inline`, holding the wrapped node, or
:class:`Reference`, holding the URI and the adapter needed to follow it.
"""

import logging
from abc import ABC, abstractmethod
from http import HTTPMethod
from typing import Any, Protocol

from ferroapi.exceptions import UnsupportedReferenceError
from ferroapi.openapi.references import ComponentRef, parse_component_ref
from ferroapi.openapi.sources import (
    MediaTypeOnParameter,
    MediaTypeOnRequestBody,
    MediaTypeOnResponse,
    OperationSource,
    ParameterLocalId,
    ParameterOnOperation,
    ParameterOnPathItem,
    ParameterUri,
    PathItemSource,
    RequestBodyOnOperation,
    RequestBodyUri,
    ResponseOnOperation,
    ResponseUri,
    SchemaAdditionalProperties,
    SchemaComposite,
    SchemaFromMediaType,
    SchemaFromParameter,
    SchemaItems,
    SchemaPatternProperty,
    SchemaProperty,
    SchemaUri,
    Source,
)
from ferroapi.openapi.types import Format, ParameterLocation, StatusSpec, Type

logger = logging.getLogger(__name__)

# Methods in the order they are declared on a path item.
METHODS = (
    HTTPMethod.GET,
    HTTPMethod.PUT,
    HTTPMethod.POST,
    HTTPMethod.DELETE,
    HTTPMethod.OPTIONS,
    HTTPMethod.HEAD,
    HTTPMethod.PATCH,
    HTTPMethod.TRACE,
)


class SpecAdapter(Protocol):
    """The hooks a version adapter provides to the node wrappers."""

    document: Any

    def reference_uri(self, raw: Any) -> str | None: ...

    def schema_types(self, raw: Any) -> list[Type] | None: ...

    def schema_format(self, raw: Any) -> Format | None: ...

    def pattern_properties(self, raw: Any) -> dict[str, Any]: ...


class Node:
    """A document node together with its source pointer."""

    def __init__(self, spec: SpecAdapter, source: Source, raw: Any):
        self.spec = spec
        self.source = source
        self.raw = raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return type(self) is type(other) and self.source == other.source

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.source))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.source})'


class RefOr(ABC):
    """Either an inline node or a reference to a component."""

    @abstractmethod
    def resolve_once(self) -> 'RefOr':
        """Follow at most one reference."""

    def resolve_fully(self) -> Node:
        """Follow references until an inline node is reached.

        Raises:
            UnsupportedReferenceError: If the references form a cycle.
        """
        current = self
        seen: set[str] = set()
        while isinstance(current, Reference):
            if current.uri in seen:
                raise UnsupportedReferenceError(current.uri, 'reference cycle')
            seen.add(current.uri)
            current = current.resolve_once()
        return current.node


class Inline(RefOr):
    def __init__(self, node: Node):
        self.node = node

    def resolve_once(self) -> RefOr:
        return self

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Inline) and self.node == other.node

    def __hash__(self) -> int:
        return hash(('Inline', self.node))

    def __repr__(self) -> str:
        return f'Inline({self.node!r})'


class Reference(RefOr):
    """A ``$ref`` to a component of the expected kind.

    Attributes:
        uri: The reference as written in the document.
        spec: The adapter of the document holding the component.
        kind: The component map the reference must point into.
    """

    def __init__(self, uri: str, spec: SpecAdapter, kind: str):
        self.uri = uri
        self.spec = spec
        self.kind = kind

    @property
    def name(self) -> str:
        return parse_component_ref(self.uri).name

    @property
    def target(self) -> Source:
        """The canonical source pointer of the referenced component."""
        ref = parse_component_ref(self.uri)
        if ref.kind != self.kind:
            raise UnsupportedReferenceError(
                self.uri, f"expected a reference into '{self.kind}', not '{ref.kind}'"
            )
        return _URI_SOURCES[self.kind](ref.uri)

    def resolve_once(self) -> RefOr:
        source = self.target
        raw = source.resolve(self.spec.document)
        return ref_or(self.spec, raw, source, _NODE_TYPES[self.kind], self.kind)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Reference) and (self.kind, self.uri) == (other.kind, other.uri)

    def __hash__(self) -> int:
        return hash(('Reference', self.kind, self.uri))

    def __repr__(self) -> str:
        return f'Reference({self.uri!r})'


def ref_or(spec: SpecAdapter, raw: Any, source: Source, node_type: type, kind: str) -> RefOr:
    """Wrap a document model object that may be a ``$ref``."""
    uri = spec.reference_uri(raw)
    if uri is not None:
        return Reference(uri, spec, kind)
    return Inline(node_type(spec, source, raw))


class Schema(Node):
    @property
    def name(self) -> str | None:
        """The component name for component schemas, None for inline ones."""
        if isinstance(self.source, SchemaUri):
            return parse_component_ref(self.source.uri).name
        return None

    @property
    def title(self) -> str | None:
        return self.raw.title

    @property
    def description(self) -> str | None:
        return self.raw.description

    def types(self) -> list[Type] | None:
        return self.spec.schema_types(self.raw)

    def format(self) -> Format | None:
        return self.spec.schema_format(self.raw)

    def required(self) -> list[str]:
        return list(self.raw.required or [])

    def enum(self) -> list[Any] | None:
        return self.raw.enum

    def all_of(self) -> list[RefOr]:
        return self._composite('allOf')

    def any_of(self) -> list[RefOr]:
        return self._composite('anyOf')

    def one_of(self) -> list[RefOr]:
        return self._composite('oneOf')

    def _composite(self, keyword: str) -> list[RefOr]:
        return [
            self._child(raw, SchemaComposite(self.source, keyword, index))
            for index, raw in enumerate(getattr(self.raw, keyword) or [])
        ]

    def properties(self) -> dict[str, RefOr]:
        return {
            name: self._child(raw, SchemaProperty(self.source, name))
            for name, raw in (self.raw.properties or {}).items()
        }

    def pattern_properties(self) -> dict[str, RefOr]:
        return {
            pattern: self._child(raw, SchemaPatternProperty(self.source, pattern))
            for pattern, raw in self.spec.pattern_properties(self.raw).items()
        }

    def additional_properties(self) -> bool | RefOr:
        """The additional-properties setting; an absent keyword means ``True``."""
        raw = self.raw.additionalProperties
        if raw is None:
            return True
        if isinstance(raw, bool):
            return raw
        return self._child(raw, SchemaAdditionalProperties(self.source))

    def items(self) -> RefOr | None:
        if self.raw.items is None:
            return None
        return self._child(self.raw.items, SchemaItems(self.source))

    def _child(self, raw: Any, source: Source) -> RefOr:
        return ref_or(self.spec, raw, source, Schema, 'schemas')


class MediaType(Node):
    def schema(self) -> RefOr | None:
        if self.raw.schema_ is None:
            return None
        return ref_or(self.spec, self.raw.schema_, SchemaFromMediaType(self.source), Schema, 'schemas')


def _content(node: Node, source_type: type) -> dict[str, MediaType]:
    return {
        media_range: MediaType(node.spec, source_type(node.source, index), raw)
        for index, (media_range, raw) in enumerate((node.raw.content or {}).items())
    }


class Parameter(Node):
    @property
    def name(self) -> str:
        return self.raw.name

    @property
    def location(self) -> ParameterLocation:
        return ParameterLocation(self.raw.in_)

    @property
    def local_id(self) -> ParameterLocalId:
        return ParameterLocalId(self.name, self.location)

    @property
    def required(self) -> bool:
        return bool(self.raw.required)

    def schema(self) -> RefOr | None:
        if self.raw.schema_ is None:
            return None
        return ref_or(self.spec, self.raw.schema_, SchemaFromParameter(self.source), Schema, 'schemas')

    def content(self) -> dict[str, MediaType] | None:
        if self.raw.content is None:
            return None
        return _content(self, MediaTypeOnParameter)


class RequestBody(Node):
    @property
    def required(self) -> bool:
        return bool(self.raw.required)

    def content(self) -> dict[str, MediaType]:
        return _content(self, MediaTypeOnRequestBody)


class Response(Node):
    @property
    def description(self) -> str | None:
        return self.raw.description

    def content(self) -> dict[str, MediaType]:
        return _content(self, MediaTypeOnResponse)


class Operation(Node):
    @property
    def method(self) -> HTTPMethod:
        return self.source.method

    @property
    def operation_id(self) -> str | None:
        return self.raw.operationId

    def parameters(self) -> list[RefOr]:
        return _parameters(self, ParameterOnOperation)

    def request_body(self) -> RefOr | None:
        if self.raw.requestBody is None:
            return None
        return ref_or(
            self.spec,
            self.raw.requestBody,
            RequestBodyOnOperation(self.source),
            RequestBody,
            'requestBodies',
        )

    def responses(self) -> list[tuple[StatusSpec, RefOr]]:
        return [
            (
                StatusSpec.parse(status, str(self.source)),
                ref_or(self.spec, raw, ResponseOnOperation(self.source, index), Response, 'responses'),
            )
            for index, (status, raw) in enumerate((self.raw.responses or {}).items())
        ]


class PathItem(Node):
    @property
    def template(self) -> str:
        return self.source.path

    def operations(self) -> list[tuple[HTTPMethod, Operation]]:
        operations = []
        for method in METHODS:
            raw = getattr(self.raw, method.value.lower())
            if raw is not None:
                operations.append(
                    (method, Operation(self.spec, OperationSource(self.source, method), raw))
                )
        return operations

    def parameters(self) -> list[RefOr]:
        return _parameters(self, ParameterOnPathItem)


def _parameters(owner: Node, source_type: type) -> list[RefOr]:
    parameters = []
    for raw in owner.raw.parameters or []:
        uri = owner.spec.reference_uri(raw)
        if uri is not None:
            parameters.append(Reference(uri, owner.spec, 'parameters'))
            continue
        source = source_type(owner.source, ParameterLocalId(raw.name, ParameterLocation(raw.in_)))
        parameters.append(Inline(Parameter(owner.spec, source, raw)))
    return parameters


class Components:
    """The reusable component maps of a document."""

    def __init__(self, spec: SpecAdapter):
        self.spec = spec
        self.raw = spec.document.components

    def _map(self, kind: str) -> list[tuple[str, RefOr]]:
        entries = getattr(self.raw, kind) or {}
        source_type = _URI_SOURCES[kind]
        node_type = _NODE_TYPES[kind]
        result = []
        for name, raw in entries.items():
            source = source_type(ComponentRef(kind, name).uri)
            result.append((name, ref_or(self.spec, raw, source, node_type, kind)))
        return result

    def schemas(self) -> list[tuple[str, RefOr]]:
        return self._map('schemas')

    def parameters(self) -> list[tuple[str, RefOr]]:
        return self._map('parameters')

    def request_bodies(self) -> list[tuple[str, RefOr]]:
        return self._map('requestBodies')

    def responses(self) -> list[tuple[str, RefOr]]:
        return self._map('responses')


def components(spec: SpecAdapter) -> Components | None:
    if spec.document.components is None:
        return None
    return Components(spec)


def schemata(spec: SpecAdapter) -> list[tuple[str, RefOr]]:
    """Component schemas in declaration order."""
    found = components(spec)
    if found is None:
        return []
    return found.schemas()


def path_items(spec: SpecAdapter) -> list[tuple[str, PathItem]]:
    """Path items in declaration order, skipping path items given as ``$ref``."""
    items = []
    for template, raw in (spec.document.paths or {}).items():
        if raw.ref is not None:
            logger.warning(f"Skipping path item '{template}' given as a reference to '{raw.ref}'")
            continue
        items.append((template, PathItem(spec, PathItemSource(template), raw)))
    return items


def check_status_keys(spec: SpecAdapter) -> None:
    """Parse every response key so malformed ones fail right after loading."""
    for _, path_item in path_items(spec):
        for _, operation in path_item.operations():
            operation.responses()


_URI_SOURCES = {
    'schemas': SchemaUri,
    'parameters': ParameterUri,
    'requestBodies': RequestBodyUri,
    'responses': ResponseUri,
}

_NODE_TYPES = {
    'schemas': Schema,
    'parameters': Parameter,
    'requestBodies': RequestBody,
    'responses': Response,
}
