"""Error code constants for shoji.

These constants prevent stringly-typed error codes and let the
presentation layer branch on the kind of failure it has to show.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes carried by every shoji exception."""

    # Extraction (fatal)
    INPUT_CARDINALITY = "INPUT_CARDINALITY"
    ATTRIBUTE_READ = "ATTRIBUTE_READ"
    ENUMERATION = "ENUMERATION"

    # Template resolution
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_RESOLUTION = "TEMPLATE_RESOLUTION"

    # Type metadata lookup (fatal)
    MIME_TYPE_LOOKUP = "MIME_TYPE_LOOKUP"
    SCHEMA_LOOKUP = "SCHEMA_LOOKUP"

    # Non-fatal, absorbed by the field renderer
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
