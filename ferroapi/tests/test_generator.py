"""Tests for the generation pipeline and document loading."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from ferroapi import generate
from ferroapi.config import ApiConfig
from ferroapi.exceptions import (
    ConfigurationError,
    ParseError,
    SpecLoadError,
    UnsupportedVersionError,
)
from ferroapi.generator import Generator, translate
from ferroapi.loader import SpecLoader
from ferroapi.openapi import OAS30Spec, parse
from ferroapi.tests.fixtures import BARS_SPEC, EMPTY_SPEC, PETSTORE_SPEC, SWAGGER_SPEC


class TestGenerate:
    """Tests for generating source from document text."""

    def test_generate(self):
        source = generate(BARS_SPEC)
        assert source.startswith('pub mod generated_api {\n')
        assert 'pub fn bars_bar_name_get(' in source

    def test_module_name(self):
        assert generate(EMPTY_SPEC, module_name='petstore').startswith('pub mod petstore {\n')

    def test_types_only(self):
        source = generate(PETSTORE_SPEC, types=True)
        assert 'pub struct Pet {' in source
        assert 'Client' not in source

    def test_deterministic(self):
        """Generating twice from the same text gives identical output."""
        assert generate(PETSTORE_SPEC, traits=True) == generate(PETSTORE_SPEC, traits=True)

    def test_invalid_document(self):
        with pytest.raises(UnsupportedVersionError):
            generate(SWAGGER_SPEC)

    def test_traits_warning(self, caplog):
        with caplog.at_level('WARNING', logger='ferroapi.generator'):
            module = translate(parse(BARS_SPEC), traits=True)
        assert module.traits.names() == ['ClientApi']
        assert 'client trait' in caplog.text


class TestGenerator:
    """Tests for the configured pipeline."""

    def test_missing_path(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Generator(ApiConfig()).generate()
        assert exc_info.value.field == 'path'

    def test_returns_source(self, tmp_path):
        document = tmp_path / 'petstore.yaml'
        document.write_text(PETSTORE_SPEC)

        result = Generator(ApiConfig(path=str(document), module_name='petstore')).generate()
        assert result.startswith('pub mod petstore {\n')

    def test_writes_output(self, tmp_path):
        document = tmp_path / 'petstore.yaml'
        document.write_text(PETSTORE_SPEC)
        output = tmp_path / 'src' / 'api.rs'

        result = Generator(ApiConfig(path=str(document), output=str(output))).generate()
        assert result == str(output)
        assert 'pub enum PetPetIdGetError {' in output.read_text()

    def test_uses_loader(self):
        loader = MagicMock()
        loader.load.return_value = parse(EMPTY_SPEC)

        result = Generator(ApiConfig(path='remote.yaml'), loader=loader).generate()
        loader.load.assert_called_once_with('remote.yaml')
        assert 'pub struct Client {}' in result

    def test_parse_errors_propagate(self, tmp_path):
        document = tmp_path / 'broken.yaml'
        document.write_text('openapi: 3.0.0\npaths: [unclosed\n')
        with pytest.raises(ParseError):
            Generator(ApiConfig(path=str(document))).generate()


class TestSpecLoader:
    """Tests for reading documents."""

    def test_load_file(self, tmp_path):
        document = tmp_path / 'petstore.yaml'
        document.write_text(PETSTORE_SPEC)
        spec = SpecLoader().load(str(document))
        assert isinstance(spec, OAS30Spec)

    def test_relative_to_base_path(self, tmp_path):
        (tmp_path / 'api.yaml').write_text(EMPTY_SPEC)
        assert SpecLoader(base_path=tmp_path).read('api.yaml') == EMPTY_SPEC

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecLoadError) as exc_info:
            SpecLoader(base_path=tmp_path).read('missing.yaml')
        assert exc_info.value.source == 'missing.yaml'
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_url_with_client(self):
        client = MagicMock()
        client.get.return_value = MagicMock(text=EMPTY_SPEC)

        text = SpecLoader(http_client=client).read('https://example.com/openapi.yaml')
        client.get.assert_called_once_with('https://example.com/openapi.yaml')
        assert text == EMPTY_SPEC

    @patch('ferroapi.loader.httpx.get')
    def test_url_default_client(self, mock_get):
        mock_get.return_value = MagicMock(text=BARS_SPEC)

        spec = SpecLoader().load('http://example.com/bars.yaml')
        mock_get.assert_called_once_with('http://example.com/bars.yaml', follow_redirects=True, timeout=30.0)
        assert [template for template, _ in spec.paths()] == ['/bars/{bar_name}']

    @patch('ferroapi.loader.httpx.get')
    def test_url_http_error(self, mock_get):
        mock_get.side_effect = httpx.ConnectError('connection refused')

        with pytest.raises(SpecLoadError) as exc_info:
            SpecLoader().read('https://example.com/openapi.yaml')
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @patch('ferroapi.loader.httpx.get')
    def test_url_error_status(self, mock_get):
        request = httpx.Request('GET', 'https://example.com/openapi.yaml')
        mock_get.return_value = httpx.Response(404, request=request)

        with pytest.raises(SpecLoadError, match='404'):
            SpecLoader().read('https://example.com/openapi.yaml')
