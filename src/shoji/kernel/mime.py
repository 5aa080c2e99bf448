"""MIME type identifier helpers."""

import re
from typing import Optional

from .errors import MimeTypeError

DEFAULT_TYPE = "application/octet-stream"
MAX_TYPE_LENGTH = 255

_TOKEN = r"[A-Za-z0-9!#$&^_.+\-]+"
_TYPE_RE = re.compile(rf"^{_TOKEN}(/{_TOKEN})?$")


def is_valid_type(type_identifier: str) -> bool:
    """Check for a supertype ("text") or a full type ("text/plain")."""
    return len(type_identifier) <= MAX_TYPE_LENGTH and bool(_TYPE_RE.match(type_identifier))


def normalize_type(type_identifier: str) -> str:
    """Validate and lower-case a type identifier.

    Raises:
        MimeTypeError: If the identifier is not a valid MIME type
    """
    candidate = type_identifier.strip()
    if not is_valid_type(candidate):
        raise MimeTypeError(f"Invalid MIME type '{type_identifier}'")
    return candidate.lower()


def super_type_of(type_identifier: str) -> Optional[str]:
    """Get the supertype ("text" for "text/plain"), or None for a supertype."""
    major, sep, _ = type_identifier.partition("/")
    return major if sep else None
