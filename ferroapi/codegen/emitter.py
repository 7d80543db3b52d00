"""Rust source emission.

This module turns a module of the code model into Rust source text and
provides emitters that hand that text back as a string or write it to a file.

Items are written in a fixed order: traits, then types, then impl blocks,
then child modules, each group in insertion order. Every identifier is
checked again right before it is written, so a malformed name fails here
instead of producing source that does not compile.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from upath import UPath

from ferroapi.codemodel import (
    Alias,
    Attribute,
    Builtin,
    Field,
    Function,
    GenericInstance,
    Implementation,
    Indirection,
    Module,
    Record,
    RecordVariant,
    ReferenceTo,
    SelfType,
    SimplePath,
    SumType,
    Tokens,
    Trait,
    TupleVariant,
    TypeLike,
    UnitVariant,
)
from ferroapi.codemodel.syntax import is_identifier
from ferroapi.exceptions import FormatterError, OutputError, ReparseError, UnresolvedStubError

logger = logging.getLogger(__name__)

INDENT = '    '

MODULE_LINTS = (
    'unused_imports',
    'dead_code',
    'unused_variables',
    'non_snake_case',
    'non_camel_case_types',
)


def _ident(name: str, context: str) -> str:
    if not is_identifier(name):
        raise ReparseError(name, context)
    return name


def type_expr(type_: TypeLike) -> str:
    """Render a type as it appears in a field, parameter or return position.

    Types declared in external crates are written with their absolute path,
    e.g. ``::std::vec::Vec<Pet>``; generated types by their bare name.

    Raises:
        UnresolvedStubError: If the type is, or contains, an unresolved stub.
        ReparseError: If a type name is not a valid identifier.
    """
    if isinstance(type_, Tokens):
        return type_.text
    if isinstance(type_, Indirection):
        if type_.is_stub:
            raise UnresolvedStubError(type_.name)
        return type_expr(type_.target)
    if isinstance(type_, Builtin):
        return type_.name
    if isinstance(type_, (Record, SumType, Alias)):
        name = _ident(type_.name, 'a type reference')
        if type_.module is not None and type_.module.external:
            return f'{type_.module.path}::{name}'
        return name
    if isinstance(type_, GenericInstance):
        params = ', '.join(type_expr(param) for param in type_.params)
        return f'{type_expr(type_.head)}<{params}>'
    if isinstance(type_, SelfType):
        return 'Self'
    if isinstance(type_, ReferenceTo):
        lifetime = f"'{type_.lifetime} " if type_.lifetime else ''
        mutable = 'mut ' if type_.mutable else ''
        return f'&{lifetime}{mutable}{type_expr(type_.target)}'
    raise TypeError(f'Cannot render {type_!r} as a type')


class RustWriter:
    """Writes one module of the code model as Rust source."""

    def __init__(self):
        self._lines: list[str] = []
        self._depth = 0

    def _line(self, text: str = '') -> None:
        self._lines.append(f'{INDENT * self._depth}{text}' if text else '')

    def _attributes(self, attributes: list[Attribute]) -> None:
        for attribute in attributes:
            path = SimplePath.parse(str(attribute.path))
            self._line(f'#[{path}{attribute.tokens}]')

    def render(self, module: Module, wrap: bool = True) -> str:
        """Render a module.

        Args:
            module: The module to render.
            wrap: Whether to wrap the items in ``pub mod {name} { ... }``.

        Returns:
            The Rust source text, ending in a newline.
        """
        self._lines = []
        self._depth = 0
        if wrap:
            self._module(module)
        else:
            self._items(module)
        return '\n'.join(self._lines).rstrip('\n') + '\n'

    def _module(self, module: Module) -> None:
        self._line(f'pub mod {_ident(module.name, "a module name")} {{')
        self._depth += 1
        for lint in MODULE_LINTS:
            self._line(f'#![allow({lint})]')
        if self._has_items(module):
            self._line()
        self._items(module)
        self._depth -= 1
        self._line('}')

    @staticmethod
    def _has_items(module: Module) -> bool:
        return bool(len(module.traits) or len(module.types) or module.impls or len(module.modules))

    def _items(self, module: Module) -> None:
        blocks = (
            [(self._trait, trait) for trait in module.traits]
            + [(self._type, type_) for type_ in module.types]
            + [(self._impl, implementation) for implementation in module.impls]
            + [(self._module, child) for child in module.modules if not child.external]
        )
        for index, (write, item) in enumerate(blocks):
            if index:
                self._line()
            write(item)

    def _type(self, item) -> None:
        if isinstance(item, Indirection):
            if item.is_stub:
                raise UnresolvedStubError(item.name)
            item = item.target
        if isinstance(item, Record):
            self._record(item)
        elif isinstance(item, SumType):
            self._sum_type(item)
        elif isinstance(item, Alias):
            self._alias(item)
        else:
            raise TypeError(f'Cannot emit {item!r} as a declaration')

    def _fields(self, fields: list[Field], context: str, public: bool) -> None:
        visibility = 'pub ' if public else ''
        for f in fields:
            self._attributes(f.attributes)
            self._line(f'{visibility}{_ident(f.name, context)}: {type_expr(f.type)},')

    def _record(self, record: Record) -> None:
        name = _ident(record.name, 'a struct name')
        self._attributes(record.attributes)
        if not record.fields:
            self._line(f'pub struct {name} {{}}')
            return
        self._line(f'pub struct {name} {{')
        self._depth += 1
        self._fields(record.fields, f'struct {name}', public=True)
        self._depth -= 1
        self._line('}')

    def _sum_type(self, sum_type: SumType) -> None:
        name = _ident(sum_type.name, 'an enum name')
        self._attributes(sum_type.attributes)
        if not sum_type.variants:
            self._line(f'pub enum {name} {{}}')
            return
        self._line(f'pub enum {name} {{')
        self._depth += 1
        for variant in sum_type.variants:
            self._attributes(variant.attributes)
            variant_name = _ident(variant.name, f'enum {name}')
            if isinstance(variant, UnitVariant):
                self._line(f'{variant_name},')
            elif isinstance(variant, TupleVariant):
                members = ', '.join(type_expr(member) for member in variant.members)
                self._line(f'{variant_name}({members}),')
            elif isinstance(variant, RecordVariant):
                self._line(f'{variant_name} {{')
                self._depth += 1
                self._fields(variant.fields, f'enum {name}::{variant_name}', public=False)
                self._depth -= 1
                self._line('},')
        self._depth -= 1
        self._line('}')

    def _alias(self, alias: Alias) -> None:
        self._line(f'pub type {_ident(alias.name, "a type alias")} = {type_expr(alias.target)};')

    def _signature(self, function: Function, public: bool) -> str:
        name = _ident(function.name, 'a function name')
        params = []
        for param in function.params:
            if param.name != 'self':
                _ident(param.name, f'fn {name}')
            params.append(f'{param.name}: {type_expr(param.type)}')
        visibility = 'pub ' if public else ''
        signature = f'{visibility}fn {name}({", ".join(params)})'
        if function.returns is not None:
            signature += f' -> {type_expr(function.returns)}'
        return signature

    def _function(self, function: Function, public: bool) -> None:
        self._attributes(function.attributes)
        signature = self._signature(function, public)
        if function.body is None:
            self._line(f'{signature};')
            return
        self._line(f'{signature} {{')
        self._depth += 1
        for body_line in function.body.text.splitlines():
            self._line(body_line)
        self._depth -= 1
        self._line('}')

    def _block(self, header: str, functions: list[Function], public: bool) -> None:
        if not functions:
            self._line(f'{header} {{}}')
            return
        self._line(f'{header} {{')
        self._depth += 1
        for index, function in enumerate(functions):
            if index:
                self._line()
            self._function(function, public)
        self._depth -= 1
        self._line('}')

    def _trait(self, trait: Trait) -> None:
        self._attributes(trait.attributes)
        self._block(f'pub trait {_ident(trait.name, "a trait name")}', trait.functions, public=False)

    def _impl(self, implementation: Implementation) -> None:
        target = type_expr(implementation.target)
        if implementation.is_inherent:
            self._block(f'impl {target}', implementation.functions, public=True)
        else:
            trait = _ident(implementation.trait.name, 'a trait name')
            self._block(f'impl {trait} for {target}', implementation.functions, public=False)


def emit_module(module: Module, wrap: bool = True) -> str:
    """Render a code model module as Rust source text."""
    return RustWriter().render(module, wrap=wrap)


def format_source(source: str, rustfmt: str = 'rustfmt') -> str:
    """Pretty-print Rust source with rustfmt.

    Args:
        source: The source text.
        rustfmt: Name or path of the rustfmt executable.

    Returns:
        The formatted source.

    Raises:
        FormatterError: If rustfmt is not installed or rejects the source.
    """
    executable = shutil.which(rustfmt)
    if executable is None:
        raise FormatterError(f"Formatter '{rustfmt}' was not found on PATH")

    try:
        result = subprocess.run(
            [executable, '--edition', '2021'],
            input=source,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise FormatterError('Failed to run the formatter', cause=e)

    if result.returncode != 0:
        raise FormatterError('Formatter rejected the generated source', cause=result.stderr.strip())
    return result.stdout


class CodeEmitter(ABC):
    """Abstract base class for code emitters.

    An emitter takes a finished code model module and outputs it, optionally
    passing the source through rustfmt first.
    """

    def __init__(self, format_code: bool = False, rustfmt: str = 'rustfmt'):
        self.format_code = format_code
        self.rustfmt = rustfmt

    def render(self, module: Module) -> str:
        source = emit_module(module)
        if self.format_code:
            source = format_source(source, self.rustfmt)
        return source

    @abstractmethod
    def emit(self, module: Module) -> str:
        """Emit a module.

        Returns:
            The source text or the path of the written file, depending on
            the implementation.
        """
        pass


class StringEmitter(CodeEmitter):
    """Emits generated code as strings."""

    def emit(self, module: Module) -> str:
        return self.render(module)


class FileEmitter(CodeEmitter):
    """Emits generated code to a Rust source file.

    Args:
        output: Path of the file to write; any universal-pathlib path works.
        format_code: Whether to format the code with rustfmt.
    """

    def __init__(self, output: str | Path | UPath, format_code: bool = False, rustfmt: str = 'rustfmt'):
        super().__init__(format_code, rustfmt)
        self.output = UPath(output)

    def emit(self, module: Module) -> str:
        source = self.render(module)
        try:
            self.output.parent.mkdir(parents=True, exist_ok=True)
            self.output.write_text(source, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(self.output), cause=e)
        logger.info(f'Wrote {len(source.splitlines())} lines to {self.output}')
        return str(self.output)
