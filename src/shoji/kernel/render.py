"""Field renderer: one typed value -> one field descriptor.

``render`` is total. Unknown type tags and undecodable payloads degrade
to an error placeholder so a single bad attribute never blocks the rest
of the form.
"""

import struct
from enum import Enum
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool

from .attributes import TypedValue
from .type_codes import (
    NUMERIC_FORMATS,
    ByteOrder,
    TypeTag,
    decode_bool,
    decode_number,
    decode_string,
)


class WidgetKind(str, Enum):
    CHECKBOX = "checkbox"
    TEXT_FIELD = "text_field"
    ERROR_PLACEHOLDER = "error_placeholder"


class FieldDescriptor(BaseModel):
    """Display-ready representation of one attribute."""
    name: str
    label: str
    widget_kind: WidgetKind
    display_value: Union[StrictBool, str]  # bool for checkboxes, text otherwise
    editable: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


def unsupported_message(name: str) -> str:
    return f"field type of attribute '{name}' is not supported"


def undecodable_message(name: str) -> str:
    return f"value of attribute '{name}' could not be decoded"


def format_float32(value: float) -> str:
    """Shortest decimal form of a 32-bit float that reads back to the same value."""
    packed = struct.pack("<f", value)
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        try:
            candidate = struct.pack("<f", float(text))
        except OverflowError:
            # rounded past the float32 range (near FLT_MAX)
            continue
        if candidate == packed:
            return text
    return repr(value)


def _format_number(tag: TypeTag, data: bytes, byte_order: ByteOrder) -> str:
    value = decode_number(tag, data, byte_order)
    if tag is TypeTag.FLOAT:
        return format_float32(value)
    return str(value)


# Display rule per tag. OTHER has no entry and renders as a placeholder.
_Formatter = Callable[[TypeTag, bytes, ByteOrder], Union[bool, str]]
_DISPLAY_RULES: Dict[TypeTag, _Formatter] = {
    TypeTag.BOOL: lambda tag, data, order: decode_bool(data),
    TypeTag.STRING: lambda tag, data, order: decode_string(data),
}
_DISPLAY_RULES.update({tag: _format_number for tag in NUMERIC_FORMATS})

_WIDGETS: Dict[TypeTag, WidgetKind] = {tag: WidgetKind.TEXT_FIELD for tag in _DISPLAY_RULES}
_WIDGETS[TypeTag.BOOL] = WidgetKind.CHECKBOX


def render(
    name: str,
    type_code: int,
    data: bytes,
    editable: bool = False,
    label: Optional[str] = None,
    byte_order: ByteOrder = "little",
) -> FieldDescriptor:
    """Map one typed attribute to a field descriptor.

    Args:
        name: Attribute name
        type_code: Raw type code; unknown codes render as a placeholder
        data: Raw payload
        editable: Passed through unchanged, placeholders included
        label: Display label (defaults to the attribute name)
        byte_order: Byte order of numeric payloads

    Returns:
        FieldDescriptor (never raises)
    """
    tag = TypeTag.classify(type_code)
    label = label or name
    rule = _DISPLAY_RULES.get(tag)
    if rule is None:
        return _placeholder(name, label, unsupported_message(name), editable)
    try:
        value = rule(tag, data, byte_order)
    except (struct.error, ValueError, OverflowError):
        return _placeholder(name, label, undecodable_message(name), editable)
    return FieldDescriptor(
        name=name,
        label=label,
        widget_kind=_WIDGETS[tag],
        display_value=value,
        editable=editable,
    )


def render_value(name: str, value: TypedValue, byte_order: ByteOrder = "little") -> FieldDescriptor:
    """Render a typed record entry."""
    return render(
        name,
        value.type_code,
        value.data,
        editable=value.editable,
        label=value.label,
        byte_order=byte_order,
    )


def _placeholder(name: str, label: str, message: str, editable: bool) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        label=label,
        widget_kind=WidgetKind.ERROR_PLACEHOLDER,
        display_value=message,
        editable=editable,
    )
