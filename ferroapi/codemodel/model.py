"""The in-memory Rust type graph.

Types refer to each other through :class:`TypeRef` handles. A type that is
needed before it has been built is inserted as an :class:`Indirection` stub;
the stub is later patched in place when the real declaration is inserted
under the same name, so every handle taken from the stub sees the final type.
"""

import logging
from dataclasses import dataclass, field
from typing import Generic, Iterator, TypeVar, Union

from ferroapi.codemodel.paths import FQTN, SimplePath
from ferroapi.codemodel.syntax import string_literal
from ferroapi.exceptions import ItemAlreadyPresentError

logger = logging.getLogger(__name__)


class TypeRef:
    """Anything that can be used where a type is expected.

    Every type reference has a ``name``: the bare name for declared types and
    the rendered type expression for the structural ones.
    """

    name: str


@dataclass(frozen=True)
class Tokens:
    """Opaque Rust source, written out exactly as given."""

    text: str

    @property
    def name(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


TypeLike = Union[TypeRef, Tokens]


@dataclass(frozen=True)
class Attribute:
    """An outer attribute, ``#[path tokens]``."""

    path: SimplePath
    tokens: Tokens = Tokens('')

    @classmethod
    def new(cls, path: str, tokens: str = '') -> 'Attribute':
        return cls(SimplePath.parse(path), Tokens(tokens))

    @classmethod
    def derive(cls, *traits: str) -> 'Attribute':
        paths = [str(SimplePath.parse(trait)) for trait in traits]
        return cls.new('derive', f'({", ".join(paths)})')

    @classmethod
    def serde_rename(cls, name: str) -> 'Attribute':
        return cls.new('serde', f'(rename = {string_literal(name)})')

    def __str__(self) -> str:
        return f'#[{self.path}{self.tokens}]'


@dataclass(frozen=True)
class Builtin(TypeRef):
    """A primitive type such as ``i64`` or ``()``."""

    name: str


UNIT = Builtin('()')
BUILTINS = {
    builtin.name: builtin
    for builtin in (
        Builtin('u8'),
        Builtin('u16'),
        Builtin('u32'),
        Builtin('u64'),
        Builtin('i8'),
        Builtin('i16'),
        Builtin('i32'),
        Builtin('i64'),
        Builtin('f32'),
        Builtin('f64'),
        Builtin('bool'),
        UNIT,
    )
}


@dataclass
class Field:
    name: str
    type: TypeLike
    attributes: list[Attribute] = field(default_factory=list)


@dataclass(eq=False)
class Record(TypeRef):
    """A struct with named fields."""

    name: str
    fields: list[Field] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    module: 'Module | None' = field(default=None, repr=False)


@dataclass
class UnitVariant:
    name: str
    attributes: list[Attribute] = field(default_factory=list)


@dataclass
class TupleVariant:
    name: str
    members: list[TypeLike] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)


@dataclass
class RecordVariant:
    name: str
    fields: list[Field] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)


Variant = Union[UnitVariant, TupleVariant, RecordVariant]


@dataclass(eq=False)
class SumType(TypeRef):
    """An enum with unit, tuple or record variants."""

    name: str
    variants: list[Variant] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    module: 'Module | None' = field(default=None, repr=False)


@dataclass(eq=False)
class Alias(TypeRef):
    name: str
    target: TypeLike
    module: 'Module | None' = field(default=None, repr=False)


class Indirection(TypeRef):
    """A forward-declared type.

    Until :meth:`resolve` is called this is a stub carrying only a name; after
    that it forwards to the declared type.
    """

    def __init__(self, name: str):
        self._name = name
        self.target: TypeRef | None = None
        self.module: Module | None = None

    @property
    def name(self) -> str:
        if self.target is not None:
            return self.target.name
        return self._name

    @property
    def is_stub(self) -> bool:
        return self.target is None

    def resolve(self, target: TypeRef) -> None:
        self.target = target

    def __repr__(self) -> str:
        state = 'stub' if self.is_stub else f'-> {self.target!r}'
        return f'Indirection({self._name!r}, {state})'


@dataclass(frozen=True, eq=False)
class GenericInstance(TypeRef):
    """A generic type applied to parameters, e.g. ``Vec<Pet>``."""

    head: TypeRef
    params: tuple[TypeLike, ...]

    @property
    def name(self) -> str:
        return f'{self.head.name}<{",".join(param.name for param in self.params)}>'


@dataclass(frozen=True)
class SelfType(TypeRef):
    @property
    def name(self) -> str:
        return 'Self'


@dataclass(frozen=True, eq=False)
class ReferenceTo(TypeRef):
    """A borrowed reference, ``&'lifetime mut T``."""

    target: TypeLike
    mutable: bool = False
    lifetime: str | None = None

    @property
    def name(self) -> str:
        lifetime = f"'{self.lifetime} " if self.lifetime else ''
        mutable = 'mut ' if self.mutable else ''
        return f'&{lifetime}{mutable}{self.target.name}'


@dataclass
class Param:
    name: str
    type: TypeLike


@dataclass
class Function:
    """A function signature and, unless it is a trait declaration, its body."""

    name: str
    params: list[Param] = field(default_factory=list)
    returns: TypeLike | None = None
    body: Tokens | None = None
    attributes: list[Attribute] = field(default_factory=list)


@dataclass(eq=False)
class Trait:
    name: str
    functions: list[Function] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)


@dataclass(eq=False)
class Implementation:
    """An impl block, inherent when ``trait`` is None."""

    target: TypeRef
    functions: list[Function] = field(default_factory=list)
    trait: Trait | None = None

    @property
    def is_inherent(self) -> bool:
        return self.trait is None


T = TypeVar('T')


class Namespace(Generic[T]):
    """Items keyed by name, in insertion order."""

    def __init__(self):
        self._items: dict[str, T] = {}

    def insert(self, name: str, item: T) -> T:
        if name in self._items:
            raise ItemAlreadyPresentError(name)
        self._items[name] = item
        return item

    def replace(self, name: str, item: T) -> T:
        self._items[name] = item
        return item

    def get(self, name: str) -> T | None:
        return self._items.get(name)

    def names(self) -> list[str]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)


DeclaredType = Union[Record, SumType, Alias, Indirection]


class Module:
    """A Rust module.

    Attributes:
        name: The module name.
        external: Whether the module belongs to a crate provided by the
            ecosystem; external modules are referenced, never emitted.
        types: Declared types, including stubs.
        modules: Child modules.
        traits: Declared traits.
        impls: Impl blocks in insertion order.
    """

    def __init__(self, name: str, external: bool = False):
        self.name = name
        self.external = external
        self.parent: Module | None = None
        self.types: Namespace[DeclaredType] = Namespace()
        self.modules: Namespace[Module] = Namespace()
        self.traits: Namespace[Trait] = Namespace()
        self.impls: list[Implementation] = []

    @property
    def path(self) -> SimplePath:
        """The absolute path of the module, starting at its crate."""
        names = []
        module = self
        while module is not None:
            names.append(module.name)
            module = module.parent
        return SimplePath(tuple(reversed(names)), leading_colons=True)

    def insert_module(self, module: 'Module') -> 'Module':
        self.modules.insert(module.name, module)
        module.parent = self
        return module

    def insert_type_stub(self, name: str) -> Indirection:
        stub = Indirection(name)
        self.types.insert(name, stub)
        stub.module = self
        return stub

    def insert_record(self, record: Record) -> Record:
        return self._insert_type(record)

    def insert_sum_type(self, sum_type: SumType) -> SumType:
        return self._insert_type(sum_type)

    def insert_alias(self, name: str, target: TypeLike) -> Alias:
        return self._insert_type(Alias(name, target))

    def _insert_type(self, item):
        existing = self.types.get(item.name)
        if isinstance(existing, Indirection) and existing.is_stub:
            logger.debug(f"Patching stub '{item.name}' in module '{self.name}'")
            existing.resolve(item)
            self.types.replace(item.name, item)
        else:
            self.types.insert(item.name, item)
        item.module = self
        return item

    def insert_trait(self, trait: Trait) -> Trait:
        return self.traits.insert(trait.name, trait)

    def insert_impl(self, implementation: Implementation) -> Implementation:
        self.impls.append(implementation)
        return implementation

    def find_type(self, name: str) -> TypeRef | None:
        """Look up a declared type; unresolved stubs count as absent."""
        found = self.types.get(name)
        if isinstance(found, Indirection) and found.is_stub:
            return None
        return found

    def is_name_taken(self, name: str) -> bool:
        """Whether ``name`` is used by a type or trait, which share a namespace in Rust."""
        return name in self.types or name in self.traits

    def __repr__(self) -> str:
        return f'Module({self.name!r})'


class Codemodel:
    """The root of the type graph: a set of crates.

    The ``std``, ``serde_json`` and ``http`` crates are always present so that
    generated code can refer to strings, vectors, maps, JSON values and HTTP
    responses.
    """

    def __init__(self):
        self.crates: Namespace[Module] = Namespace()
        self._fill_externals()

    def _fill_externals(self) -> None:
        for crate_name, module_path, type_name in (
            ('std', ('string',), 'String'),
            ('std', ('vec',), 'Vec'),
            ('std', ('result',), 'Result'),
            ('std', ('boxed',), 'Box'),
            ('std', ('collections',), 'HashMap'),
            ('serde_json', (), 'Value'),
            ('http', (), 'Response'),
        ):
            module = self.find_crate(crate_name) or self.insert_crate(Module(crate_name, external=True))
            for module_name in module_path:
                child = module.modules.get(module_name)
                if child is None:
                    child = module.insert_module(Module(module_name, external=True))
                module = child
            module.insert_record(Record(type_name))

    def insert_crate(self, crate_module: Module) -> Module:
        return self.crates.insert(crate_module.name, crate_module)

    def find_crate(self, crate_name: str) -> Module | None:
        return self.crates.get(crate_name)

    def find_module(self, crate_name: str, module_path: tuple[str, ...] = ()) -> Module | None:
        module = self.find_crate(crate_name)
        for name in module_path:
            if module is None:
                return None
            module = module.modules.get(name)
        return module

    def find_type(self, fqtn: FQTN | str) -> TypeRef | None:
        """Look up a type by its fully qualified name.

        Args:
            fqtn: A name like ``std::vec::Vec``, parsed if given as a string.

        Returns:
            The type, or None when it is missing or only a stub.
        """
        if isinstance(fqtn, str):
            fqtn = FQTN.parse(fqtn)
        module = self.find_module(fqtn.crate_name, fqtn.module_path)
        if module is None:
            return None
        return module.find_type(fqtn.type_name)

    def type_instance(self, generic_type: TypeRef, type_params: list[TypeLike]) -> GenericInstance:
        return GenericInstance(generic_type, tuple(type_params))

    def _require(self, fqtn: str) -> TypeRef:
        found = self.find_type(fqtn)
        if found is None:
            raise KeyError(fqtn)
        return found

    def builtin(self, name: str) -> Builtin:
        return BUILTINS[name]

    def type_u8(self) -> Builtin:
        return BUILTINS['u8']

    def type_i32(self) -> Builtin:
        return BUILTINS['i32']

    def type_i64(self) -> Builtin:
        return BUILTINS['i64']

    def type_f32(self) -> Builtin:
        return BUILTINS['f32']

    def type_f64(self) -> Builtin:
        return BUILTINS['f64']

    def type_bool(self) -> Builtin:
        return BUILTINS['bool']

    def type_unit(self) -> Builtin:
        return UNIT

    def type_string(self) -> TypeRef:
        return self._require('std::string::String')

    def type_vec(self) -> TypeRef:
        return self._require('std::vec::Vec')

    def type_result(self) -> TypeRef:
        return self._require('std::result::Result')

    def type_box(self) -> TypeRef:
        return self._require('std::boxed::Box')

    def type_hashmap(self) -> TypeRef:
        return self._require('std::collections::HashMap')

    def type_json(self) -> TypeRef:
        return self._require('serde_json::Value')

    def type_http_response(self) -> TypeRef:
        return self._require('http::Response')
