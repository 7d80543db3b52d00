"""Fluent builders for code model declarations.

The builders check the invariants of a declaration while it is assembled,
so that a finished record never has two fields of the same name and a
finished sum type never has two variants of the same name.

Example:
    >>> record = (
    ...     RecordBuilder('Pet')
    ...     .attribute(Attribute.derive('::std::fmt::Debug'))
    ...     .field('id', codemodel.type_i64())
    ...     .field('name', codemodel.type_string())
    ...     .build()
    ... )
    >>> module.insert_record(record)
"""

from typing import Self

from ferroapi.codemodel.model import (
    Attribute,
    Field,
    Function,
    Implementation,
    Param,
    Record,
    RecordVariant,
    SumType,
    Tokens,
    Trait,
    TupleVariant,
    TypeLike,
    TypeRef,
    UnitVariant,
    Variant,
)
from ferroapi.exceptions import DuplicateFieldNameError, DuplicateVariantNameError

__all__ = [
    'FunctionBuilder',
    'ImplementationBuilder',
    'RecordBuilder',
    'SumTypeBuilder',
    'TraitBuilder',
]


def _check_fields(type_name: str, fields: list[Field]) -> None:
    seen = set()
    for f in fields:
        if f.name in seen:
            raise DuplicateFieldNameError(type_name, f.name)
        seen.add(f.name)


class RecordBuilder:
    def __init__(self, name: str):
        self._name = name
        self._attributes: list[Attribute] = []
        self._fields: list[Field] = []
        self._field_names: set[str] = set()

    def attribute(self, attribute: Attribute) -> Self:
        # the same path may appear more than once, e.g. two derive lists
        self._attributes.append(attribute)
        return self

    def field(self, name: str, type_: TypeLike, attributes: list[Attribute] | None = None) -> Self:
        """Append a field.

        Raises:
            DuplicateFieldNameError: If a field of that name was already added.
        """
        if name in self._field_names:
            raise DuplicateFieldNameError(self._name, name)
        self._field_names.add(name)
        self._fields.append(Field(name, type_, list(attributes or [])))
        return self

    def build(self) -> Record:
        return Record(self._name, fields=list(self._fields), attributes=list(self._attributes))


class SumTypeBuilder:
    def __init__(self, name: str):
        self._name = name
        self._attributes: list[Attribute] = []
        self._variants: list[Variant] = []
        self._variant_names: set[str] = set()

    def attribute(self, attribute: Attribute) -> Self:
        self._attributes.append(attribute)
        return self

    def _add(self, variant: Variant) -> Self:
        if variant.name in self._variant_names:
            raise DuplicateVariantNameError(self._name, variant.name)
        self._variant_names.add(variant.name)
        self._variants.append(variant)
        return self

    def unit(self, name: str, attributes: list[Attribute] | None = None) -> Self:
        return self._add(UnitVariant(name, list(attributes or [])))

    def tuple(self, name: str, members: list[TypeLike], attributes: list[Attribute] | None = None) -> Self:
        return self._add(TupleVariant(name, list(members), list(attributes or [])))

    def record(self, name: str, fields: list[Field], attributes: list[Attribute] | None = None) -> Self:
        _check_fields(f'{self._name}::{name}', fields)
        return self._add(RecordVariant(name, list(fields), list(attributes or [])))

    def has_variant(self, name: str) -> bool:
        return name in self._variant_names

    @property
    def variant_names(self) -> set[str]:
        return set(self._variant_names)

    def build(self) -> SumType:
        return SumType(self._name, variants=list(self._variants), attributes=list(self._attributes))


class FunctionBuilder:
    def __init__(self, name: str):
        self._name = name
        self._params: list[Param] = []
        self._returns: TypeLike | None = None
        self._body: Tokens | None = None
        self._attributes: list[Attribute] = []

    def param(self, name: str, type_: TypeLike) -> Self:
        self._params.append(Param(name, type_))
        return self

    def returns(self, type_: TypeLike) -> Self:
        self._returns = type_
        return self

    def body(self, body: Tokens | str) -> Self:
        self._body = body if isinstance(body, Tokens) else Tokens(body)
        return self

    def attribute(self, attribute: Attribute) -> Self:
        self._attributes.append(attribute)
        return self

    def build(self) -> Function:
        return Function(
            self._name,
            params=list(self._params),
            returns=self._returns,
            body=self._body,
            attributes=list(self._attributes),
        )


class TraitBuilder:
    def __init__(self, name: str):
        self._name = name
        self._functions: list[Function] = []
        self._attributes: list[Attribute] = []

    def attribute(self, attribute: Attribute) -> Self:
        self._attributes.append(attribute)
        return self

    def function(self, function: Function) -> Self:
        self._functions.append(function)
        return self

    def build(self) -> Trait:
        return Trait(self._name, functions=list(self._functions), attributes=list(self._attributes))


class ImplementationBuilder:
    """Builds an impl block, inherent or for a trait."""

    def __init__(self, target: TypeRef, trait: Trait | None = None):
        self._target = target
        self._trait = trait
        self._functions: list[Function] = []

    @classmethod
    def inherent(cls, target: TypeRef) -> 'ImplementationBuilder':
        return cls(target)

    @classmethod
    def for_trait(cls, trait: Trait, target: TypeRef) -> 'ImplementationBuilder':
        return cls(target, trait)

    def function(self, function: Function) -> Self:
        self._functions.append(function)
        return self

    def build(self) -> Implementation:
        return Implementation(self._target, functions=list(self._functions), trait=self._trait)
