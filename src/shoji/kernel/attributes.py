"""Attribute source protocol and the typed record produced by extraction."""

from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict

from .type_codes import TypeTag, format_type_code


class AttrInfo(BaseModel):
    """Metadata an attribute source reports for one name."""
    type_code: int
    size: int
    count: int = 1  # number of value instances stored under the name

    model_config = ConfigDict(frozen=True, extra="forbid")


class RawAttribute(BaseModel):
    """A single (name, type code, payload) triple read from a source."""
    name: str
    type_code: int
    data: bytes

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def type_tag(self) -> TypeTag:
        return TypeTag.classify(self.type_code)


class AttributeSource(Protocol):
    """Read-only view of a typed attribute store.

    ``iter_names`` ends normally when the names are exhausted; any other
    failure is raised as ``OSError``. ``stat_attr`` and ``read_attr`` raise
    ``OSError`` (or ``KeyError`` for an unknown name) when the attribute
    cannot be read.
    """

    def iter_names(self) -> Iterator[str]:
        ...

    def stat_attr(self, name: str) -> AttrInfo:
        ...

    def read_attr(self, name: str, info: AttrInfo) -> bytes:
        ...


class TypedValue(BaseModel):
    """One entry of a typed record."""
    type_code: int
    data: bytes
    editable: bool = False
    label: Optional[str] = None  # public name from the type schema, if any

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def type_tag(self) -> TypeTag:
        return TypeTag.classify(self.type_code)


class TypedRecord(BaseModel):
    """Ordered mapping from attribute name to typed value.

    Built once per form request by the extractor and never mutated
    afterwards.
    """
    entries: Dict[str, TypedValue]

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def get(self, name: str) -> Optional[TypedValue]:
        """Get the typed value for a name, or None if absent."""
        return self.entries.get(name)

    def names(self) -> List[str]:
        """Get attribute names in extraction order."""
        return list(self.entries)

    def items(self) -> List[Tuple[str, TypedValue]]:
        """Get (name, value) pairs in extraction order."""
        return list(self.entries.items())

    def summary(self) -> List[Dict[str, object]]:
        """JSON-friendly listing of the record without payload bytes."""
        return [
            {
                "name": name,
                "type": format_type_code(value.type_code),
                "tag": value.type_tag.value,
                "size": len(value.data),
                "editable": value.editable,
                "label": value.label,
            }
            for name, value in self.entries.items()
        ]
