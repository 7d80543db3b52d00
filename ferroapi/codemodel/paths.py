"""Rust paths: simple paths for attributes and fully qualified type names."""

from dataclasses import dataclass

from ferroapi.codemodel.syntax import PATH_SEGMENT_KEYWORDS, is_identifier_like, is_keyword
from ferroapi.exceptions import AttrPathInvalidError


@dataclass(frozen=True)
class SimplePath:
    """A path following ``'::'? Segment ('::' Segment)*``.

    A segment is an identifier or one of ``self``, ``super``, ``crate`` and
    ``$crate``. Other keywords are not allowed.

    Attributes:
        segments: The path segments.
        leading_colons: Whether the path starts with ``::``.
    """

    segments: tuple[str, ...]
    leading_colons: bool = False

    @classmethod
    def parse(cls, text: str) -> 'SimplePath':
        """Parse and validate a path.

        Raises:
            AttrPathInvalidError: If the text is not a valid simple path.
        """
        if not text:
            raise AttrPathInvalidError(text, 'path is empty')

        leading = text.startswith('::')
        body = text[2:] if leading else text
        if not body:
            raise AttrPathInvalidError(text, 'path has no segments')

        segments = tuple(body.split('::'))
        for segment in segments:
            if not segment:
                raise AttrPathInvalidError(text, "path contains an empty segment or ':::'")
            if segment in PATH_SEGMENT_KEYWORDS:
                continue
            if not is_identifier_like(segment):
                raise AttrPathInvalidError(text, f"'{segment}' is not an identifier")
            if is_keyword(segment):
                raise AttrPathInvalidError(text, f"'{segment}' is a keyword")
        return cls(segments, leading)

    def __str__(self) -> str:
        prefix = '::' if self.leading_colons else ''
        return prefix + '::'.join(self.segments)


@dataclass(frozen=True)
class FQTN:
    """A fully qualified type name, ``crate::module::...::Type``.

    The first segment names the crate and the last one the type; everything in
    between is the module path. Keywords are not allowed in any segment.
    """

    path: SimplePath

    @classmethod
    def parse(cls, text: str) -> 'FQTN':
        """Parse a fully qualified type name.

        Raises:
            AttrPathInvalidError: If the text is not a valid path, has fewer than
                two segments or contains a keyword.
        """
        path = SimplePath.parse(text)
        if len(path.segments) < 2:
            raise AttrPathInvalidError(text, 'a qualified type name needs a crate and a type')
        for segment in path.segments:
            if is_keyword(segment) or segment in PATH_SEGMENT_KEYWORDS:
                raise AttrPathInvalidError(text, f"'{segment}' is a keyword")
        return cls(path)

    @classmethod
    def of(cls, crate_name: str, *names: str) -> 'FQTN':
        return cls.parse('::'.join((crate_name, *names)))

    @property
    def crate_name(self) -> str:
        return self.path.segments[0]

    @property
    def module_path(self) -> tuple[str, ...]:
        return self.path.segments[1:-1]

    @property
    def type_name(self) -> str:
        return self.path.segments[-1]

    def __str__(self) -> str:
        return str(self.path)
