"""Public result models for the shoji package."""

from typing import Optional
from pydantic import BaseModel


class ErrorReport(BaseModel):
    """User-facing description of a fatal error."""
    code: str  # ErrorCode value, e.g. "INPUT_CARDINALITY"
    title: str  # short caption, e.g. "Error opening file"
    message: str  # what failed
    detail: str  # text of the underlying cause
    attribute: Optional[str] = None  # offending attribute name, when there is one

    def to_text(self) -> str:
        """Render as plain text for terminals and logs."""
        return f"{self.title}: {self.message}\nDetail: {self.detail}"
