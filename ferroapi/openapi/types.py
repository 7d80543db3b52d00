"""Version-independent value types shared by both OpenAPI adapters."""

import re
from dataclasses import dataclass
from enum import Enum, IntEnum

from ferroapi.exceptions import InvalidStatusSpecError


class Type(str, Enum):
    """Canonical primitive schema types.

    ``integer`` has no member of its own, it collapses to :attr:`NUMBER`.
    """

    NULL = 'null'
    BOOLEAN = 'boolean'
    OBJECT = 'object'
    ARRAY = 'array'
    NUMBER = 'number'
    STRING = 'string'

    @classmethod
    def coerce(cls, value: str) -> 'Type':
        if value == 'integer':
            return cls.NUMBER
        return cls(value)


class Format(str, Enum):
    INT32 = 'int32'
    INT64 = 'int64'
    FLOAT = 'float'
    DOUBLE = 'double'
    BYTE = 'byte'
    BINARY = 'binary'
    DATE = 'date'
    DATE_TIME = 'date-time'
    PASSWORD = 'password'

    @classmethod
    def parse(cls, value: str | None) -> 'Format | None':
        """Map a format string to a known format, unknown formats yield None."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ParameterLocation(str, Enum):
    QUERY = 'query'
    HEADER = 'header'
    PATH = 'path'
    COOKIE = 'cookie'


class StatusClass(IntEnum):
    """The class of an HTTP status code, i.e. its first digit."""

    INFORMATIONAL = 1
    SUCCESS = 2
    REDIRECTION = 3
    CLIENT_ERROR = 4
    SERVER_ERROR = 5


_WILDCARD = re.compile(r'^([1-5])XX$', re.IGNORECASE)


@dataclass(frozen=True)
class StatusSpec:
    """A response key: ``default``, a class wildcard like ``4XX`` or a concrete code.

    Attributes:
        status_class: The status class, None for ``default``.
        code: The concrete code, None for ``default`` and wildcards.
    """

    status_class: StatusClass | None = None
    code: int | None = None

    @classmethod
    def parse(cls, key: str | int, location: str | None = None) -> 'StatusSpec':
        """Parse a response map key.

        Args:
            key: The key as found in the document.
            location: Pointer to the owning operation, used in error messages.

        Returns:
            The parsed status specification.

        Raises:
            InvalidStatusSpecError: If the key is out of range or malformed.
        """
        text = str(key).strip()
        if text == 'default':
            return cls()

        match = _WILDCARD.match(text)
        if match:
            return cls(status_class=StatusClass(int(match.group(1))))

        if not re.fullmatch(r'[0-9]+', text):
            raise InvalidStatusSpecError(text, location)
        code = int(text)
        if not 100 <= code <= 599:
            raise InvalidStatusSpecError(text, location)
        return cls(status_class=StatusClass(code // 100), code=code)

    @property
    def is_default(self) -> bool:
        return self.status_class is None

    @property
    def is_wildcard(self) -> bool:
        return self.status_class is not None and self.code is None

    @property
    def is_success(self) -> bool:
        return self.status_class is StatusClass.SUCCESS

    def __str__(self) -> str:
        if self.is_default:
            return 'default'
        if self.code is None:
            return f'{self.status_class.value}XX'
        return str(self.code)
