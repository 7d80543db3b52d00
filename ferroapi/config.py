import json
import os
from pathlib import Path

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ferroapi.codemodel.syntax import is_identifier
from ferroapi.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['ferroapi.yaml', 'ferroapi.yml']


class ApiConfig(BaseSettings):
    """Options for one generation run.

    Every field can also be set through a ``FERROAPI_`` environment variable,
    e.g. ``FERROAPI_MODULE_NAME=petstore``; values given explicitly win.
    """

    model_config = SettingsConfigDict(env_prefix='FERROAPI_', extra='forbid')

    path: str | None = Field(None, description='Path or URL of the OpenAPI document.')

    traits: bool = Field(
        False,
        description='Also emit a trait declaring every operation, implemented by the client.',
    )

    types: bool = Field(
        False, description='Only emit the type definitions, without the client surface.'
    )

    module_name: str = Field(
        'generated_api', description='Name of the Rust module wrapping the generated code.'
    )

    output: str | None = Field(
        None, description='File to write the generated code to; stdout when unset.'
    )

    format: bool = Field(False, description='Whether to run rustfmt over the generated code.')

    @field_validator('module_name')
    @classmethod
    def module_name_is_identifier(cls, value: str) -> str:
        if not is_identifier(value):
            raise ValueError(f"'{value}' is not a valid Rust module name")
        return value


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text()) or {}


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _build(data: dict, config_path: str) -> ApiConfig:
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', config_path=config_path)
    try:
        return ApiConfig(**data)
    except ValidationError as e:
        field = '.'.join(str(part) for part in e.errors()[0]['loc']) or None
        raise ConfigurationError(f'Invalid configuration: {e.errors()[0]["msg"]}', config_path, field)


def _load_file(path: str | Path) -> ApiConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError('Configuration file not found', config_path=str(path))
    try:
        if path.suffix.lower() == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Configuration is not valid YAML or JSON: {e}', config_path=str(path))
    return _build(data, str(path))


def get_config(path: str | None = None) -> ApiConfig:
    """Load configuration from a file.

    Without an explicit path, ``ferroapi.yaml`` and ``ferroapi.yml`` in the
    working directory are tried, then the ``[tool.ferroapi]`` table of
    ``pyproject.toml``.

    Raises:
        ConfigurationError: If no configuration is found or it is invalid.
    """
    if path:
        return _load_file(path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return _load_file(candidate)

    pyproject_path = Path(cwd) / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if 'ferroapi' in tools:
            return _build(tools['ferroapi'], str(pyproject_path))

    raise ConfigurationError('No configuration found')
