"""Type schema entries, schema merging and the visibility policy."""

import json
from typing import Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import SchemaLookupError
from .mime import is_valid_type, super_type_of
from .type_codes import parse_type_code

SchemaLookup = Literal["name", "position"]


class AttributeSchemaEntry(BaseModel):
    """Schema metadata for one attribute of a type ("attr info").

    Mirrors the per-attribute fields of a MIME type's attribute info:
    ``attr:name``, ``attr:public_name``, ``attr:type``, ``attr:viewable``,
    ``attr:editable`` and ``attr:width``.
    """
    name: Optional[str] = None
    public_name: Optional[str] = None
    type_code: Optional[int] = Field(None, alias="type")  # attr:type
    viewable: bool = True
    editable: bool = False
    width: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    @field_validator("type_code", mode="before")
    @classmethod
    def validate_type_code(cls, v: Union[int, str, None]) -> Optional[int]:
        """Accept tag names and four-character codes as well as integers."""
        if v is None:
            return None
        return parse_type_code(v)


class Visibility(BaseModel):
    """Visibility decision for a single attribute."""
    viewable: bool
    editable: bool = False
    label: Optional[str] = None

    model_config = ConfigDict(frozen=True)


HIDDEN = Visibility(viewable=False, editable=False)
SHOWN = Visibility(viewable=True, editable=False)


def merge_schema(
    type_schema: Sequence[AttributeSchemaEntry],
    super_type_schema: Sequence[AttributeSchemaEntry],
) -> List[AttributeSchemaEntry]:
    """Concatenate a type's schema entries with its supertype's.

    The type's own entries come first and order is preserved. No
    de-duplication by name is performed.
    """
    return list(type_schema) + list(super_type_schema)


class VisibilityPolicy:
    """Decides per attribute whether it is shown and whether it is editable.

    Two lookup modes are supported:

    - ``"name"``: the schema is indexed by attribute name once, before
      extraction starts. When a name appears more than once (a type entry
      and a supertype entry), the first entry wins.
    - ``"position"``: the n-th accepted attribute is governed by the n-th
      schema entry, regardless of its name. Any reordering of attributes on
      the source changes the outcome.

    Attributes with no schema entry are hidden unless ``show_unlisted`` is
    set, in which case they are shown read-only.
    """

    def __init__(
        self,
        schema: Sequence[AttributeSchemaEntry],
        lookup: SchemaLookup = "name",
        show_unlisted: bool = False,
    ):
        if lookup not in ("name", "position"):
            raise ValueError(f"Unknown schema lookup mode '{lookup}' (expected 'name' or 'position')")
        self.lookup = lookup
        self.show_unlisted = show_unlisted
        self._entries = list(schema)
        self._by_name: Dict[str, AttributeSchemaEntry] = {}
        for entry in self._entries:
            if entry.name is not None and entry.name not in self._by_name:
                self._by_name[entry.name] = entry

    def decide(self, name: str, accepted_count: int) -> Visibility:
        """Decide visibility for ``name``.

        Args:
            name: Attribute name
            accepted_count: Number of attributes already accepted into the
                record (only consulted in ``"position"`` mode)
        """
        entry = self._find(name, accepted_count)
        if entry is None:
            return SHOWN if self.show_unlisted else HIDDEN
        return Visibility(viewable=entry.viewable, editable=entry.editable, label=entry.public_name)

    def _find(self, name: str, accepted_count: int) -> Optional[AttributeSchemaEntry]:
        if self.lookup == "position":
            if 0 <= accepted_count < len(self._entries):
                return self._entries[accepted_count]
            return None
        return self._by_name.get(name)


class TypeSchema(BaseModel):
    """Attribute schema of one type in the schema database."""
    super_type: Optional[str] = None
    attributes: List[AttributeSchemaEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class TypeSchemaDatabase(BaseModel):
    """Per-type attribute schemas, keyed by MIME type.

    JSON shape::

        {"types": {"text/x-email": {"super_type": "text",
                                    "attributes": [{"name": "MAIL:subject", ...}]}}}
    """
    types: Dict[str, TypeSchema] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("types")
    @classmethod
    def validate_types(cls, v: Dict[str, TypeSchema]) -> Dict[str, TypeSchema]:
        """Validate type keys and normalize them to lower case."""
        normalized: Dict[str, TypeSchema] = {}
        for key, schema in v.items():
            if not is_valid_type(key):
                raise ValueError(f"Schema database key '{key}' is not a valid MIME type")
            if key.lower() in normalized:
                raise ValueError(f"Duplicate schema database type '{key}'")
            normalized[key.lower()] = schema
        return normalized

    def attr_info(self, type_identifier: str) -> List[AttributeSchemaEntry]:
        """Get a type's own schema entries (empty for unknown types)."""
        schema = self.types.get(type_identifier.lower())
        return list(schema.attributes) if schema else []

    def super_type_of(self, type_identifier: str) -> Optional[str]:
        """Get the explicit supertype of a type, else its MIME major type."""
        schema = self.types.get(type_identifier.lower())
        if schema is not None and schema.super_type:
            return schema.super_type.lower()
        return super_type_of(type_identifier.lower())

    def merged_schema(self, type_identifier: str) -> List[AttributeSchemaEntry]:
        """Get the type's schema followed by its supertype's."""
        super_type = self.super_type_of(type_identifier)
        super_entries = self.attr_info(super_type) if super_type else []
        return merge_schema(self.attr_info(type_identifier), super_entries)

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "TypeSchemaDatabase":
        """Load a schema database from JSON bytes (pure, no I/O).

        Raises:
            SchemaLookupError: If the bytes are not a valid schema database
        """
        try:
            payload = json.loads(data)
            return cls.model_validate(payload)
        except (ValueError, TypeError) as e:
            raise SchemaLookupError(f"Invalid schema database: {e}", e) from e
