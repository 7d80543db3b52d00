"""FerroAPI - Generate typed Rust clients from OpenAPI specifications.

FerroAPI reads an OpenAPI 3.0 or 3.1 document and emits a single Rust module
with one serde-derived struct or enum per schema and a client with one
function per operation, returning a typed ``Result`` per response status.

Quick Start:
    >>> from ferroapi import generate
    >>>
    >>> source = generate(Path('petstore.yaml').read_text(), module_name='petstore')

CLI Usage:
    $ ferroapi generate petstore.yaml --output src/petstore.rs
    $ ferroapi generate --config ferroapi.yaml
"""

from ferroapi.codegen import FileEmitter, StringEmitter, Translator, emit_module, format_source
from ferroapi.config import ApiConfig, get_config
from ferroapi.exceptions import (
    CodeModelError,
    ConfigurationError,
    DanglingReferenceError,
    EmissionError,
    FerroAPIError,
    FormatterError,
    OutputError,
    ParseError,
    SpecError,
    SpecLoadError,
    TranslationError,
    UnsupportedFeatureError,
    UnsupportedReferenceError,
    UnsupportedVersionError,
)
from ferroapi.generator import Generator, generate, translate
from ferroapi.loader import SpecLoader
from ferroapi.openapi import Spec, parse

__all__ = [
    # Main entry points
    'generate',
    'parse',
    'translate',
    'Generator',
    'SpecLoader',
    'Spec',
    'Translator',
    'FileEmitter',
    'StringEmitter',
    'emit_module',
    'format_source',
    # Configuration
    'ApiConfig',
    'get_config',
    # Exceptions
    'FerroAPIError',
    'SpecError',
    'SpecLoadError',
    'ParseError',
    'UnsupportedVersionError',
    'UnsupportedReferenceError',
    'DanglingReferenceError',
    'CodeModelError',
    'TranslationError',
    'UnsupportedFeatureError',
    'EmissionError',
    'FormatterError',
    'ConfigurationError',
    'OutputError',
]

# Version is dynamically set by setuptools-scm
try:
    from ferroapi._version import version as __version__
except ImportError:
    __version__ = 'unknown'
