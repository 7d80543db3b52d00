"""Navigation adapter over an OpenAPI 3.0 document."""

from typing import Any

from ferroapi.openapi import nodes
from ferroapi.openapi.types import Format, Type
from ferroapi.openapi.v3.v3 import OpenAPI, Reference


class OAS30Spec:
    """An OpenAPI 3.0 document.

    In 3.0 a schema has at most one ``type`` and no ``patternProperties``.

    Attributes:
        document: The validated document model.
    """

    version = '3.0'

    def __init__(self, document: OpenAPI):
        self.document = document

    def reference_uri(self, raw: Any) -> str | None:
        if isinstance(raw, Reference):
            return raw.ref
        return None

    def schema_types(self, raw: Any) -> list[Type] | None:
        if raw.type is None:
            return None
        return [Type.coerce(raw.type)]

    def schema_format(self, raw: Any) -> Format | None:
        return Format.parse(raw.format)

    def pattern_properties(self, raw: Any) -> dict[str, Any]:
        return {}

    def schemata(self) -> list[tuple[str, nodes.RefOr]]:
        return nodes.schemata(self)

    def paths(self) -> list[tuple[str, nodes.PathItem]]:
        return nodes.path_items(self)

    def components(self) -> nodes.Components | None:
        return nodes.components(self)

    def __repr__(self) -> str:
        return f'OAS30Spec(openapi={self.document.openapi!r})'
