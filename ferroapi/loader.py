"""Loading OpenAPI documents from URLs or file paths.

The loader only fetches text; the version probe and parsing happen in
:func:`ferroapi.openapi.parse`, which needs the raw text to look at the
first lines of the document.
"""

import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx

from ferroapi.exceptions import SpecLoadError
from ferroapi.openapi import Spec, parse

logger = logging.getLogger(__name__)


class SpecLoader:
    """Loads OpenAPI documents from URLs or file paths.

    Example:
        >>> loader = SpecLoader()
        >>> spec = loader.load('https://api.example.com/openapi.yaml')
        >>> # or
        >>> spec = loader.load('./petstore.yaml')
    """

    def __init__(self, http_client: httpx.Client | None = None, base_path: str | Path | None = None):
        """Initialize the loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
            base_path: Base path for relative file paths. Defaults to the
                current working directory.
        """
        self._http_client = http_client
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def read(self, source: str) -> str:
        """Read the document text from a URL or file path.

        Raises:
            SpecLoadError: If the source cannot be read.
        """
        if self._is_url(source):
            return self._read_url(source)
        return self._read_file(source)

    def load(self, source: str) -> Spec:
        """Read and parse a document.

        Raises:
            SpecLoadError: If the source cannot be read.
            SpecError: If the document cannot be parsed.
        """
        text = self.read(source)
        logger.debug(f'Read {len(text)} characters from {source}')
        return parse(text)

    def _is_url(self, text: str) -> bool:
        try:
            return urlparse(text).scheme in ('http', 'https')
        except ValueError:
            return False

    def _read_url(self, url: str) -> str:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SpecLoadError(url, cause=e)
        return response.text

    def _read_file(self, file_path: str) -> str:
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise SpecLoadError(file_path, cause=FileNotFoundError(f'File not found: {path}'))

        try:
            return path.read_text(encoding='utf-8')
        except OSError as e:
            raise SpecLoadError(file_path, cause=e)
