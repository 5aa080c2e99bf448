"""Tests for the field renderer."""

import struct

import pytest

from shoji.kernel.attributes import TypedValue
from shoji.kernel.render import (
    FieldDescriptor,
    WidgetKind,
    format_float32,
    render,
    render_value,
)
from shoji.kernel.type_codes import (
    B_BOOL_TYPE,
    B_DOUBLE_TYPE,
    B_FLOAT_TYPE,
    B_INT16_TYPE,
    B_INT32_TYPE,
    B_INT8_TYPE,
    B_STRING_TYPE,
    TypeTag,
    encode_value,
    pack_type_code,
)


@pytest.mark.parametrize("code,tag,value,expected", [
    (B_DOUBLE_TYPE, TypeTag.DOUBLE, 2.5, "2.5"),
    (B_FLOAT_TYPE, TypeTag.FLOAT, 0.1, "0.1"),
    (B_INT8_TYPE, TypeTag.INT8, -5, "-5"),
    (B_INT16_TYPE, TypeTag.INT16, 1024, "1024"),
    (B_INT32_TYPE, TypeTag.INT32, 5, "5"),
    (B_STRING_TYPE, TypeTag.STRING, "Hello", "Hello"),
])
def test_text_fields_show_canonical_text(code, tag, value, expected):
    field = render("attr", code, encode_value(tag, value))
    assert field.widget_kind == WidgetKind.TEXT_FIELD
    assert field.display_value == expected


@pytest.mark.parametrize("data,expected", [(b"\x01", True), (b"\x00", False)])
def test_bool_renders_checkbox_state(data, expected):
    field = render("Flag", B_BOOL_TYPE, data)
    assert field.widget_kind == WidgetKind.CHECKBOX
    assert field.display_value is expected


def test_unknown_type_renders_placeholder_naming_attribute():
    field = render("Icon", pack_type_code("VICN"), b"\x00\x01")
    assert field.widget_kind == WidgetKind.ERROR_PLACEHOLDER
    assert field.display_value == "field type of attribute 'Icon' is not supported"


def test_undecodable_payload_renders_placeholder():
    field = render("Rating", B_INT32_TYPE, b"\x05")
    assert field.widget_kind == WidgetKind.ERROR_PLACEHOLDER
    assert "Rating" in field.display_value


def test_editable_passes_through_for_every_widget():
    assert render("Title", B_STRING_TYPE, b"x\x00", editable=True).editable is True
    assert render("Title", B_STRING_TYPE, b"x\x00").editable is False
    assert render("Icon", pack_type_code("VICN"), b"\x00", editable=True).editable is True
    assert render("Icon", pack_type_code("VICN"), b"\x00").editable is False
    assert render("Rating", B_INT32_TYPE, b"\x05", editable=True).editable is True


def test_label_defaults_to_name():
    assert render("Title", B_STRING_TYPE, b"x\x00").label == "Title"
    assert render("Title", B_STRING_TYPE, b"x\x00", label="Headline").label == "Headline"


def test_big_endian_numbers():
    data = encode_value(TypeTag.INT32, 7, byte_order="big")
    assert render("n", B_INT32_TYPE, data, byte_order="big").display_value == "7"


def test_render_value_uses_record_entry():
    value = TypedValue(type_code=B_INT32_TYPE, data=encode_value(TypeTag.INT32, 3), editable=True, label="Stars")
    field = render_value("Rating", value)
    assert field == FieldDescriptor(
        name="Rating", label="Stars", widget_kind=WidgetKind.TEXT_FIELD, display_value="3", editable=True
    )


def test_format_float32_is_shortest_round_trip():
    assert format_float32(0.10000000149011612) == "0.1"
    assert format_float32(1.5) == "1.5"
    assert format_float32(-0.0) == "-0"


@pytest.mark.parametrize("bits", [0x7F7FFFFF, 0xFF7FFFFF])
def test_float_extremes_render_as_text(bits):
    data = struct.pack("<I", bits)
    field = render("Limit", B_FLOAT_TYPE, data)
    assert field.widget_kind == WidgetKind.TEXT_FIELD
    assert struct.pack("<f", float(field.display_value)) == data


def test_format_float32_skips_candidates_beyond_float_range():
    (flt_max,) = struct.unpack("<f", struct.pack("<I", 0x7F7FFFFF))
    assert format_float32(flt_max) == "3.4028235e+38"
    assert format_float32(-flt_max) == "-3.4028235e+38"
