"""Custom exceptions for FerroAPI.

This module defines a hierarchy of exceptions used throughout the FerroAPI library.
Errors fall in three families that mirror the stages of generation:

- input errors (:class:`SpecError`) raised while reading the OpenAPI document,
- model errors (:class:`CodeModelError`) raised while building the type graph,
- emission errors (:class:`EmissionError`) raised while writing Rust source.

No stage recovers from an error raised by an earlier one; every error propagates
to the caller and no partial output is produced.
"""


class FerroAPIError(Exception):
    """Base exception for all FerroAPI errors.

    All exceptions raised by FerroAPI inherit from this class, making it easy
    to catch all FerroAPI-related errors with a single except clause.

    Example:
        try:
            generate(text)
        except FerroAPIError as e:
            print(f"FerroAPI error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SpecError(FerroAPIError):
    """Base exception for errors in the input OpenAPI document."""

    pass


class ParseError(SpecError):
    """The OpenAPI document could not be parsed.

    Raised when the text is not valid YAML/JSON or does not match the
    shape of an OpenAPI 3.0/3.1 document.

    Attributes:
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        full_message = message
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class SpecLoadError(SpecError):
    """Failed to read an OpenAPI document from a source.

    Attributes:
        source: The path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load document from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class UnsupportedVersionError(SpecError):
    """The document declares an OpenAPI version other than 3.0 or 3.1.

    Attributes:
        version: The declared version, or None when no declaration was found.
    """

    def __init__(self, version: str | None):
        self.version = version
        if version is None:
            message = 'No OpenAPI version declaration found in the first lines of the document'
        else:
            message = f"Unsupported OpenAPI version '{version}', expected 3.0.x or 3.1.x"
        super().__init__(message)


class UnsupportedReferenceError(SpecError):
    """A $ref points somewhere FerroAPI cannot follow.

    Only intra-document references to ``#/components/{schemas,requestBodies,
    responses,parameters}/{name}`` are supported.

    Attributes:
        reference: The $ref string that could not be followed.
        reason: Explanation of why the reference is not supported.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Unsupported reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class DanglingReferenceError(SpecError):
    """A $ref names a component that does not exist.

    Attributes:
        reference: The $ref string that could not be resolved.
    """

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Reference '{reference}' does not name an existing component")


class InvalidStatusSpecError(SpecError):
    """A response key is neither ``default``, a wildcard nor a code in 100-599.

    Attributes:
        status: The offending response key.
        location: Pointer to the operation holding the response, if known.
    """

    def __init__(self, status: str, location: str | None = None):
        self.status = status
        self.location = location
        message = f"Invalid response status '{status}'"
        if location:
            message += f" at '{location}'"
        super().__init__(message)


class CodeModelError(FerroAPIError):
    """Base exception for errors raised while building the code model."""

    pass


class ItemAlreadyPresentError(CodeModelError):
    """An item with the same name already exists in a namespace.

    Attributes:
        name: The name that collided.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"An item named '{name}' is already present")


class DuplicateFieldNameError(CodeModelError):
    """A record received two fields with the same name.

    Attributes:
        type_name: The record being built.
        field: The duplicated field name.
    """

    def __init__(self, type_name: str, field: str):
        self.type_name = type_name
        self.field = field
        super().__init__(f"Duplicate field '{field}' in record '{type_name}'")


class DuplicateVariantNameError(CodeModelError):
    """A sum type received two variants with the same name.

    Attributes:
        type_name: The sum type being built.
        variant: The duplicated variant name.
    """

    def __init__(self, type_name: str, variant: str):
        self.type_name = type_name
        self.variant = variant
        super().__init__(f"Duplicate variant '{variant}' in sum type '{type_name}'")


class AttrPathInvalidError(CodeModelError):
    """An attribute path or qualified type name does not follow the path grammar.

    Attributes:
        path: The offending path.
        reason: Explanation of what is wrong with it.
    """

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"Invalid path '{path}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class InvalidIdentifierError(CodeModelError):
    """A name is not a valid Rust identifier.

    Attributes:
        identifier: The offending identifier.
    """

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"'{identifier}' is not a valid identifier")


class TranslationError(FerroAPIError):
    """Translating a node of the document failed.

    Attributes:
        source: Pointer to the node that was being translated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, message: str, source: str | None = None, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        full_message = message
        if source:
            full_message += f" at '{source}'"
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class UnsupportedFeatureError(FerroAPIError):
    """Attempted to use an unsupported feature.

    This exception is raised when the schema uses a feature that
    is not yet supported by FerroAPI.

    Attributes:
        feature: Description of the unsupported feature.
        suggestion: Optional suggestion for a workaround.
    """

    def __init__(self, feature: str, suggestion: str | None = None):
        self.feature = feature
        self.suggestion = suggestion
        message = f'Unsupported feature: {feature}'
        if suggestion:
            message += f'. {suggestion}'
        super().__init__(message)


class EmissionError(FerroAPIError):
    """Base exception for errors raised while writing Rust source."""

    pass


class UnresolvedStubError(EmissionError):
    """A forward-declared type was never given a body.

    Attributes:
        name: The name of the stub.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Type '{name}' was declared but never defined")


class ReparseError(EmissionError):
    """An identifier failed to re-parse right before it was written.

    Attributes:
        identifier: The identifier that failed.
        context: What was being emitted.
    """

    def __init__(self, identifier: str, context: str | None = None):
        self.identifier = identifier
        self.context = context
        message = f"'{identifier}' does not parse as an identifier"
        if context:
            message += f' (while emitting {context})'
        super().__init__(message)


class FormatterError(EmissionError):
    """The external code formatter failed.

    Attributes:
        cause: The underlying exception or formatter output.
    """

    def __init__(self, message: str, cause: Exception | str | None = None):
        self.cause = cause
        full_message = message
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class ConfigurationError(FerroAPIError):
    """Error in configuration.

    This exception is raised when the configuration is invalid or
    cannot be loaded.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(FerroAPIError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
