"""Error reporting: turns fatal errors into user-facing reports."""

import os
from typing import Optional

from shoji.codes import ErrorCode
from shoji.contracts import ErrorReport
from shoji.kernel.errors import (
    AttributeReadError,
    EnumerationError,
    ExtractionError,
    InputCardinalityError,
    MimeTypeError,
    SchemaLookupError,
    ShojiError,
    TemplateResolutionError,
)

OPEN_FILE_TITLE = "Error opening file"


def error_to_text(error: Optional[BaseException]) -> str:
    """Human-readable text for an error cause.

    OS errors are described by their errno (``os.strerror``); anything
    else by its own message.
    """
    if error is None:
        return "Unknown error"
    if isinstance(error, OSError) and error.errno is not None:
        return os.strerror(error.errno)
    if isinstance(error, ShojiError) and error.cause is not None:
        return error_to_text(error.cause)
    text = str(error)
    return text or type(error).__name__


def _title_and_message(error: ShojiError) -> tuple[str, str]:
    if isinstance(error, InputCardinalityError):
        return OPEN_FILE_TITLE, f"Could not process attribute data {error.name}. Multiple items per field not supported."
    if isinstance(error, AttributeReadError):
        return OPEN_FILE_TITLE, f"Encountered an error reading attribute {error.name} from file."
    if isinstance(error, EnumerationError):
        return OPEN_FILE_TITLE, "Failed to read file attributes."
    if isinstance(error, ExtractionError):
        return OPEN_FILE_TITLE, "Could not map data for display."
    if isinstance(error, TemplateResolutionError):
        return "Error", "Failed to set up view."
    if isinstance(error, MimeTypeError):
        return "MIME type lookup error", "Could not identify MIME type of file."
    if isinstance(error, SchemaLookupError):
        return "MIME attrInfo lookup error", "Could not identify MIME type attributeInfo for filetype."
    return "Error", str(error)


def describe_error(error: BaseException) -> ErrorReport:
    """Build the user-facing report for a fatal error.

    Non-shoji errors (for example a missing input file) are reported with
    a generic title.
    """
    if not isinstance(error, ShojiError):
        return ErrorReport(
            code="UNEXPECTED",
            title="Error",
            message="Could not build form.",
            detail=error_to_text(error),
        )

    title, message = _title_and_message(error)
    if isinstance(error, InputCardinalityError):
        detail = str(error)
    elif error.cause is not None:
        detail = error_to_text(error.cause)
    else:
        detail = str(error)
    return ErrorReport(
        code=ErrorCode(error.code).value,
        title=title,
        message=message,
        detail=detail,
        attribute=getattr(error, "name", None),
    )
