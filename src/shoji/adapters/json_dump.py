"""Attribute source backed by a JSON attribute dump.

Dump format::

    {
      "type": "text/x-email",
      "attributes": [
        {"name": "MAIL:subject", "type": "string", "value": "Hello"},
        {"name": "BEOS:icon", "type": "VICN", "hex": "6e6369660502"}
      ]
    }

``type`` at the top level is optional and names the MIME type of the
dumped object. Attribute types accept tag names, four-character codes,
integers or hex strings.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from shoji.kernel.type_codes import ByteOrder

from .memory import MemorySource, make_attribute


class AttributeDumpError(ValueError):
    """Raised when an attribute dump cannot be parsed."""


class DumpedAttribute(BaseModel):
    """One attribute entry of a dump."""
    name: str
    type: Union[int, str]
    value: Optional[Union[bool, int, float, str]] = None
    hex: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_payload(self):
        """Exactly one of ``value`` and ``hex`` must be given."""
        if (self.value is None) == (self.hex is None):
            raise ValueError(f"Attribute '{self.name}' must give exactly one of 'value' or 'hex'")
        return self


class AttributeDump(BaseModel):
    """A dumped attribute set."""
    type: Optional[str] = None
    attributes: List[DumpedAttribute]

    model_config = ConfigDict(extra="forbid")


class JsonAttributeSource(MemorySource):
    """Attribute source read from an attribute dump."""

    def __init__(self, dump: AttributeDump, byte_order: ByteOrder = "little"):
        try:
            attributes = [
                make_attribute(
                    entry.name,
                    entry.type,
                    bytes.fromhex(entry.hex) if entry.hex is not None else entry.value,
                    byte_order,
                )
                for entry in dump.attributes
            ]
        except ValueError as e:
            raise AttributeDumpError(f"Invalid attribute dump: {e}") from e
        super().__init__(attributes)
        self.type_identifier = dump.type

    @classmethod
    def from_json_bytes(cls, data: bytes, byte_order: ByteOrder = "little") -> "JsonAttributeSource":
        """Parse a dump from JSON bytes (pure, no I/O)."""
        try:
            dump = AttributeDump.model_validate(json.loads(data))
        except (ValueError, TypeError, ValidationError) as e:
            raise AttributeDumpError(f"Invalid attribute dump: {e}") from e
        return cls(dump, byte_order)

    @classmethod
    def from_path(cls, path: Union[str, Path], byte_order: ByteOrder = "little") -> "JsonAttributeSource":
        """Load a dump from a JSON file."""
        return cls.from_json_bytes(Path(path).read_bytes(), byte_order)
