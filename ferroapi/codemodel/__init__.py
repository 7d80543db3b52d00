"""In-memory model of the generated Rust code."""

from ferroapi.codemodel.builders import (
    FunctionBuilder,
    ImplementationBuilder,
    RecordBuilder,
    SumTypeBuilder,
    TraitBuilder,
)
from ferroapi.codemodel.model import (
    UNIT,
    Alias,
    Attribute,
    Builtin,
    Codemodel,
    Field,
    Function,
    GenericInstance,
    Implementation,
    Indirection,
    Module,
    Namespace,
    Param,
    Record,
    RecordVariant,
    ReferenceTo,
    SelfType,
    SumType,
    Tokens,
    Trait,
    TupleVariant,
    TypeLike,
    TypeRef,
    UnitVariant,
)
from ferroapi.codemodel.paths import FQTN, SimplePath

__all__ = [
    'FQTN',
    'UNIT',
    'Alias',
    'Attribute',
    'Builtin',
    'Codemodel',
    'Field',
    'Function',
    'FunctionBuilder',
    'GenericInstance',
    'Implementation',
    'ImplementationBuilder',
    'Indirection',
    'Module',
    'Namespace',
    'Param',
    'Record',
    'RecordBuilder',
    'RecordVariant',
    'ReferenceTo',
    'SelfType',
    'SimplePath',
    'SumType',
    'SumTypeBuilder',
    'Tokens',
    'Trait',
    'TraitBuilder',
    'TupleVariant',
    'TypeLike',
    'TypeRef',
    'UnitVariant',
]
