"""Layout templates, form strategies and type -> strategy resolution."""

import json
import logging
from typing import Callable, Dict, Iterator, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, field_validator

from .attributes import TypedRecord
from .errors import TemplateNotFound, TemplateResolutionError
from .form import Form, assemble_form
from .mime import is_valid_type, super_type_of
from .render import FieldDescriptor, render_value
from .type_codes import ByteOrder

logger = logging.getLogger(__name__)

GENERIC_STRATEGY = "generic"


class TemplateField(BaseModel):
    """One attribute slot in a layout template."""
    attribute: str
    label: Optional[str] = None
    read_only: bool = False  # templates can narrow editability, never grant it

    model_config = ConfigDict(frozen=True, extra="forbid")


class LayoutTemplate(BaseModel):
    """Type-specific form layout."""
    type: str
    title: Optional[str] = None
    fields: List[TemplateField]
    include_unlisted: bool = False  # append record attributes the template does not list

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if not is_valid_type(v):
            raise ValueError(f"Template type '{v}' is not a valid MIME type")
        return v.lower()

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: List[TemplateField]) -> List[TemplateField]:
        """Reject templates that list an attribute twice."""
        seen = set()
        duplicates = set()
        for f in v:
            if f.attribute in seen:
                duplicates.add(f.attribute)
            seen.add(f.attribute)
        if duplicates:
            raise ValueError(f"Duplicate template fields not allowed: {sorted(duplicates)}")
        return v

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "LayoutTemplate":
        """Load a layout template from JSON bytes (pure, no I/O)."""
        payload = json.loads(data)
        return cls.model_validate(payload)


class FormStrategy(Protocol):
    """Lays out a typed record as a form."""

    name: str

    def build(self, type_identifier: str, record: TypedRecord) -> Form:
        ...


class GenericFormStrategy:
    """Form built purely from the record's type tags, in record order."""

    name = GENERIC_STRATEGY

    def __init__(self, byte_order: ByteOrder = "little"):
        self.byte_order = byte_order

    def build(self, type_identifier: str, record: TypedRecord) -> Form:
        fields = [render_value(name, value, self.byte_order) for name, value in record.items()]
        return assemble_form(type_identifier, self.name, fields)


class TemplateFormStrategy:
    """Form laid out by a type-specific template."""

    def __init__(self, template: LayoutTemplate, byte_order: ByteOrder = "little"):
        self.template = template
        self.byte_order = byte_order
        self.name = f"template:{template.type}"

    def build(self, type_identifier: str, record: TypedRecord) -> Form:
        fields: List[FieldDescriptor] = []
        listed = set()
        for slot in self.template.fields:
            listed.add(slot.attribute)
            value = record.get(slot.attribute)
            if value is None:
                logger.debug("Template %s: attribute %r not present", self.template.type, slot.attribute)
                continue
            if slot.label is not None or slot.read_only:
                value = value.model_copy(update={
                    "label": slot.label or value.label,
                    "editable": value.editable and not slot.read_only,
                })
            fields.append(render_value(slot.attribute, value, self.byte_order))

        if self.template.include_unlisted:
            for name, value in record.items():
                if name not in listed:
                    fields.append(render_value(name, value, self.byte_order))

        return assemble_form(type_identifier, self.name, fields, title=self.template.title)


StrategyFactory = Callable[[], FormStrategy]
# A loader returns template JSON bytes for a type or raises TemplateNotFound.
TemplateLoader = Callable[[str], bytes]


class TemplateRegistry:
    """Resolves a type identifier to a form strategy.

    Resolution tries, in order and stopping at the first success:

    1. the strategy registered (or template loadable) for the exact type,
    2. the same for the supertype, only when ``include_supertype`` is set,
    3. the generic strategy.

    Only ``TemplateNotFound`` moves resolution on to the next step. Any
    other failure while setting up a specific strategy is raised as
    ``TemplateResolutionError`` and never replaced by the generic strategy.
    """

    def __init__(
        self,
        loaders: Optional[List[TemplateLoader]] = None,
        include_supertype: bool = False,
        byte_order: ByteOrder = "little",
    ):
        self._factories: Dict[str, StrategyFactory] = {}
        self._loaders: List[TemplateLoader] = list(loaders or [])
        self.include_supertype = include_supertype
        self.byte_order = byte_order

    def register(self, type_identifier: str, factory: StrategyFactory) -> None:
        """Register a strategy factory for an exact type identifier."""
        self._factories[type_identifier.lower()] = factory

    def register_template(self, template: LayoutTemplate) -> None:
        """Register an in-memory layout template."""
        self.register(template.type, lambda: TemplateFormStrategy(template, self.byte_order))

    def add_loader(self, loader: TemplateLoader) -> None:
        self._loaders.append(loader)

    def resolve(self, type_identifier: str) -> FormStrategy:
        """Resolve the strategy for ``type_identifier``.

        Raises:
            TemplateResolutionError: A specific strategy exists but failed to set up
        """
        for candidate in self._candidates(type_identifier):
            try:
                strategy = self._resolve_specific(candidate)
            except TemplateNotFound:
                logger.debug("No template for %s", candidate)
                continue
            logger.info("Resolved %s to strategy %s", type_identifier, strategy.name)
            return strategy

        logger.info("Falling back to generic form for %s", type_identifier)
        return GenericFormStrategy(self.byte_order)

    def _candidates(self, type_identifier: str) -> Iterator[str]:
        yield type_identifier.lower()
        if self.include_supertype:
            super_type = super_type_of(type_identifier.lower())
            if super_type is not None:
                yield super_type

    def _resolve_specific(self, type_identifier: str) -> FormStrategy:
        factory = self._factories.get(type_identifier)
        if factory is not None:
            try:
                return factory()
            except TemplateNotFound:
                raise
            except Exception as e:
                raise TemplateResolutionError(type_identifier, e) from e

        for loader in self._loaders:
            try:
                data = loader(type_identifier)
            except TemplateNotFound:
                continue
            except Exception as e:
                raise TemplateResolutionError(type_identifier, e) from e
            return TemplateFormStrategy(self._parse(type_identifier, data), self.byte_order)

        raise TemplateNotFound(type_identifier)

    def _parse(self, type_identifier: str, data: bytes) -> LayoutTemplate:
        try:
            template = LayoutTemplate.from_json_bytes(data)
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            raise TemplateResolutionError(type_identifier, e) from e
        if template.type != type_identifier:
            raise TemplateResolutionError(
                type_identifier,
                ValueError(f"Template declares type '{template.type}', expected '{type_identifier}'"),
            )
        return template
