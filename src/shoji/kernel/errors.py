"""Exception hierarchy for the form synthesis kernel."""

from typing import Optional

from shoji.codes import ErrorCode


class ShojiError(Exception):
    """Base class for all fatal shoji errors."""

    code: ErrorCode

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ExtractionError(ShojiError):
    """Raised when attribute extraction has to be aborted.

    Extraction is all-or-nothing, so callers never see a partial record
    alongside this error.
    """

    code = ErrorCode.ATTRIBUTE_READ

    def __init__(self, name: Optional[str], message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.name = name


class InputCardinalityError(ExtractionError):
    """An attribute name carries more than one value instance."""

    code = ErrorCode.INPUT_CARDINALITY

    def __init__(self, name: str, count: int):
        super().__init__(
            name,
            f"Could not process attribute '{name}': multiple items per field not supported "
            f"(found {count})",
        )
        self.count = count


class AttributeReadError(ExtractionError):
    """Metadata or payload of a single attribute could not be read."""

    code = ErrorCode.ATTRIBUTE_READ

    def __init__(self, name: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(name, f"Could not read attribute '{name}': {reason}", cause)
        self.reason = reason


class EnumerationError(ExtractionError):
    """Listing attribute names failed for a reason other than reaching the end."""

    code = ErrorCode.ENUMERATION

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(None, "Failed to read file attributes", cause)


class TemplateNotFound(ShojiError, LookupError):
    """No template is registered for a type identifier.

    This is the only failure that lets template resolution fall back to
    the next candidate.
    """

    code = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, type_identifier: str):
        super().__init__(f"No template registered for type '{type_identifier}'")
        self.type_identifier = type_identifier


class TemplateResolutionError(ShojiError):
    """A template exists for a type but could not be set up."""

    code = ErrorCode.TEMPLATE_RESOLUTION

    def __init__(self, type_identifier: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to set up template for type '{type_identifier}'", cause)
        self.type_identifier = type_identifier


class MimeTypeError(ShojiError, ValueError):
    """The type identifier of a node could not be determined or is malformed."""

    code = ErrorCode.MIME_TYPE_LOOKUP


class SchemaLookupError(ShojiError, ValueError):
    """Attribute schema metadata for a type could not be loaded."""

    code = ErrorCode.SCHEMA_LOOKUP
