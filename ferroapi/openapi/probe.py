"""Detect the OpenAPI version of a document without parsing it."""

import re
from enum import Enum

from ferroapi.exceptions import UnsupportedVersionError

PROBE_LINES = 5

# Matches YAML `openapi: 3.0.3` as well as JSON `"openapi": "3.0.3"`, only as the first key of a line.
_VERSION = re.compile(r'^\s*\{?\s*["\']?openapi["\']?\s*:\s*["\']?((\d+\.\d+)\.\d+)')


class OASMajorVersion(str, Enum):
    V3_0 = '3.0'
    V3_1 = '3.1'


def probe_version(text: str) -> OASMajorVersion:
    """Find the ``openapi`` declaration in the first lines of a document.

    Args:
        text: The document text, YAML or JSON.

    Returns:
        The major.minor version of the document.

    Raises:
        UnsupportedVersionError: If no declaration is found or the version is
            neither 3.0 nor 3.1.
    """
    for line in text.splitlines()[:PROBE_LINES]:
        match = _VERSION.search(line)
        if match is None:
            continue
        try:
            return OASMajorVersion(match.group(2))
        except ValueError:
            raise UnsupportedVersionError(match.group(1)) from None
    raise UnsupportedVersionError(None)
