"""Code generation for FerroAPI.

Main Components:
    - Translator: Builds the code model from a parsed OpenAPI document
    - RustWriter: Renders a code model module as Rust source
    - CodeEmitter: Handles output of generated code

Example:
    >>> from ferroapi.codegen import StringEmitter, Translator
    >>> from ferroapi.openapi import parse
    >>>
    >>> codemodel = Translator(parse(text), module_name='petstore').translate()
    >>> source = StringEmitter().emit(codemodel.find_crate('petstore'))
"""

from ferroapi.codegen.emitter import (
    CodeEmitter,
    FileEmitter,
    RustWriter,
    StringEmitter,
    emit_module,
    format_source,
    type_expr,
)
from ferroapi.codegen.translator import Translator, TypeKind, classify

__all__ = [
    'CodeEmitter',
    'FileEmitter',
    'RustWriter',
    'StringEmitter',
    'Translator',
    'TypeKind',
    'classify',
    'emit_module',
    'format_source',
    'type_expr',
]
