"""The generation pipeline: read, parse, translate, emit.

Each stage either succeeds completely or raises; no partial output is ever
written.
"""

import logging

from ferroapi.codegen import FileEmitter, StringEmitter, Translator
from ferroapi.codemodel import Module
from ferroapi.config import ApiConfig
from ferroapi.exceptions import ConfigurationError
from ferroapi.loader import SpecLoader
from ferroapi.openapi import Spec, parse

logger = logging.getLogger(__name__)


def translate(spec: Spec, module_name: str = 'generated_api', types: bool = False, traits: bool = False) -> Module:
    """Translate a parsed document and return the generated module."""
    if traits:
        logger.warning('Emitting a client trait; the inherent client impl is emitted as well')
    codemodel = Translator(spec, module_name=module_name, types=types, traits=traits).translate()
    return codemodel.find_crate(module_name)


def generate(
    text: str,
    module_name: str = 'generated_api',
    types: bool = False,
    traits: bool = False,
    format_code: bool = False,
) -> str:
    """Generate Rust source for an OpenAPI document.

    Args:
        text: The OpenAPI 3.0 or 3.1 document as YAML or JSON.
        module_name: Name of the module wrapping the generated code.
        types: Only emit the type definitions.
        traits: Also emit a trait declaring every operation.
        format_code: Run rustfmt over the result.

    Returns:
        The Rust source text.

    Example:
        >>> source = generate(Path('petstore.yaml').read_text(), module_name='petstore')
    """
    module = translate(parse(text), module_name=module_name, types=types, traits=traits)
    return StringEmitter(format_code=format_code).emit(module)


class Generator:
    """Runs the pipeline for a configuration.

    Attributes:
        config: The options of the run.

    Example:
        >>> config = ApiConfig(path='./petstore.yaml', output='./src/api.rs')
        >>> Generator(config).generate()
    """

    def __init__(self, config: ApiConfig, loader: SpecLoader | None = None):
        self.config = config
        self._loader = loader or SpecLoader()

    def generate(self) -> str:
        """Generate the code.

        Returns:
            The generated source when no output is configured, otherwise the
            path of the written file.

        Raises:
            ConfigurationError: If no document path is configured.
        """
        if not self.config.path:
            raise ConfigurationError('No OpenAPI document given', field='path')

        spec = self._loader.load(self.config.path)
        logger.info(f'Parsed OpenAPI {spec.version} document from {self.config.path}')

        module = translate(
            spec,
            module_name=self.config.module_name,
            types=self.config.types,
            traits=self.config.traits,
        )

        if self.config.output:
            emitter = FileEmitter(self.config.output, format_code=self.config.format)
        else:
            emitter = StringEmitter(format_code=self.config.format)
        return emitter.emit(module)
