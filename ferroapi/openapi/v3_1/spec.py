"""Navigation adapter over an OpenAPI 3.1 document."""

from typing import Any

from ferroapi.openapi import nodes
from ferroapi.openapi.types import Format, Type
from ferroapi.openapi.v3_1.v3_1 import OpenAPI, Reference


class OAS31Spec:
    """An OpenAPI 3.1 document.

    A 3.1 schema may declare a set of types, given as a string or a list.
    Integer and number collapse into one type, so the returned set keeps the
    first occurrence of each canonical type in declaration order.

    Attributes:
        document: The validated document model.
    """

    version = '3.1'

    def __init__(self, document: OpenAPI):
        self.document = document

    def reference_uri(self, raw: Any) -> str | None:
        if isinstance(raw, Reference):
            return raw.ref
        return None

    def schema_types(self, raw: Any) -> list[Type] | None:
        if raw.type is None:
            return None
        declared = [raw.type] if isinstance(raw.type, str) else raw.type
        types = []
        for name in declared:
            canonical = Type.coerce(name)
            if canonical not in types:
                types.append(canonical)
        return types

    def schema_format(self, raw: Any) -> Format | None:
        return Format.parse(raw.format)

    def pattern_properties(self, raw: Any) -> dict[str, Any]:
        return dict(raw.patternProperties or {})

    def schemata(self) -> list[tuple[str, nodes.RefOr]]:
        return nodes.schemata(self)

    def paths(self) -> list[tuple[str, nodes.PathItem]]:
        return nodes.path_items(self)

    def components(self) -> nodes.Components | None:
        return nodes.components(self)

    def __repr__(self) -> str:
        return f'OAS31Spec(openapi={self.document.openapi!r})'
