"""Form assembly: ordered field descriptors -> form."""

from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .render import FieldDescriptor


class Form(BaseModel):
    """A renderable form for one data object."""
    type_identifier: str
    strategy: str  # name of the strategy that laid the form out
    title: Optional[str] = None
    fields: Tuple[FieldDescriptor, ...]

    model_config = ConfigDict(frozen=True, extra="forbid")

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """Get field descriptor by attribute name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


def assemble_form(
    type_identifier: str,
    strategy: str,
    fields: Iterable[FieldDescriptor],
    title: Optional[str] = None,
) -> Form:
    """Assemble field descriptors into a form, keeping their order.

    Raises:
        ValueError: If two descriptors share an attribute name
    """
    ordered = tuple(fields)
    seen = set()
    duplicates = set()
    for f in ordered:
        if f.name in seen:
            duplicates.add(f.name)
        seen.add(f.name)
    if duplicates:
        raise ValueError(f"Duplicate form fields not allowed: {sorted(duplicates)}")
    return Form(type_identifier=type_identifier, strategy=strategy, title=title, fields=ordered)
