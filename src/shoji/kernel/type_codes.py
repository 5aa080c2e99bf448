"""Attribute type codes and their classification into type tags.

Type codes are Haiku-style four-character constants packed big-endian
into an unsigned 32-bit integer ('LONG' -> 0x4C4F4E47). Only a handful
of codes are understood by the renderer; every other code classifies as
``TypeTag.OTHER`` while the raw code stays available to callers.
"""

import struct
from enum import Enum
from typing import Dict, Literal, Union

ByteOrder = Literal["little", "big"]


def pack_type_code(four_cc: str) -> int:
    """Pack a four-character code such as ``"LONG"`` into its integer form."""
    raw = four_cc.encode("ascii")
    if len(raw) != 4:
        raise ValueError(f"Type code '{four_cc}' must be exactly four ASCII characters")
    return int.from_bytes(raw, "big")


def format_type_code(code: int) -> str:
    """Render a type code as its four characters when printable, else as hex."""
    raw = code.to_bytes(4, "big")
    if all(0x20 <= b < 0x7F for b in raw):
        return raw.decode("ascii")
    return f"0x{code:08x}"


B_BOOL_TYPE = pack_type_code("BOOL")
B_DOUBLE_TYPE = pack_type_code("DBLE")
B_FLOAT_TYPE = pack_type_code("FLOT")
B_INT8_TYPE = pack_type_code("BYTE")
B_INT16_TYPE = pack_type_code("SHRT")
B_INT32_TYPE = pack_type_code("LONG")
B_INT64_TYPE = pack_type_code("LLNG")
B_STRING_TYPE = pack_type_code("CSTR")
B_MIME_STRING_TYPE = pack_type_code("MIMS")
B_RAW_TYPE = pack_type_code("RAWT")


class TypeTag(str, Enum):
    """Primitive representation of an attribute value."""

    BOOL = "bool"
    DOUBLE = "double"
    FLOAT = "float"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    STRING = "string"
    OTHER = "other"

    @classmethod
    def classify(cls, code: int) -> "TypeTag":
        """Map a raw type code to its tag; unknown codes become OTHER."""
        return _TAGS_BY_CODE.get(code, cls.OTHER)


_TAGS_BY_CODE: Dict[int, TypeTag] = {
    B_BOOL_TYPE: TypeTag.BOOL,
    B_DOUBLE_TYPE: TypeTag.DOUBLE,
    B_FLOAT_TYPE: TypeTag.FLOAT,
    B_INT8_TYPE: TypeTag.INT8,
    B_INT16_TYPE: TypeTag.INT16,
    B_INT32_TYPE: TypeTag.INT32,
    B_STRING_TYPE: TypeTag.STRING,
    B_MIME_STRING_TYPE: TypeTag.STRING,
}

# Canonical code for each tag, used when a type is given by tag name.
_CODES_BY_TAG: Dict[TypeTag, int] = {
    TypeTag.BOOL: B_BOOL_TYPE,
    TypeTag.DOUBLE: B_DOUBLE_TYPE,
    TypeTag.FLOAT: B_FLOAT_TYPE,
    TypeTag.INT8: B_INT8_TYPE,
    TypeTag.INT16: B_INT16_TYPE,
    TypeTag.INT32: B_INT32_TYPE,
    TypeTag.STRING: B_STRING_TYPE,
}

# struct format character per numeric tag; adding a numeric type is one entry here.
NUMERIC_FORMATS: Dict[TypeTag, str] = {
    TypeTag.DOUBLE: "d",
    TypeTag.FLOAT: "f",
    TypeTag.INT8: "b",
    TypeTag.INT16: "h",
    TypeTag.INT32: "i",
}


def parse_type_code(value: Union[int, str]) -> int:
    """Parse a type code given as an int, a tag name, a four-char code or hex.

    Accepted forms: ``1280265799``, ``"int32"``, ``"LONG"``, ``"0x4c4f4e47"``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid type code: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Type code {value} does not fit in 32 bits")
        return value
    try:
        tag = TypeTag(value.lower())
    except ValueError:
        tag = None
    if tag is not None:
        if tag is TypeTag.OTHER:
            raise ValueError("Type 'other' has no canonical type code; give the code itself")
        return _CODES_BY_TAG[tag]
    if value.lower().startswith("0x"):
        return parse_type_code(int(value, 16))
    return pack_type_code(value)


def _struct_prefix(byte_order: ByteOrder) -> str:
    return "<" if byte_order == "little" else ">"


def decode_number(tag: TypeTag, data: bytes, byte_order: ByteOrder = "little") -> Union[int, float]:
    """Decode a numeric payload; raises ``struct.error`` on a width mismatch."""
    (value,) = struct.unpack(_struct_prefix(byte_order) + NUMERIC_FORMATS[tag], data)
    return value


def decode_string(data: bytes) -> str:
    """Decode a C string payload, dropping the trailing NUL terminator(s)."""
    return data.rstrip(b"\x00").decode("utf-8", errors="replace")


def decode_bool(data: bytes) -> bool:
    """Decode a one-byte boolean payload."""
    if len(data) != 1:
        raise struct.error(f"bool payload must be 1 byte, got {len(data)}")
    return data[0] != 0


def encode_value(tag: TypeTag, value: Union[bool, int, float, str], byte_order: ByteOrder = "little") -> bytes:
    """Encode a plain value as the payload for ``tag``.

    Raises:
        ValueError: If the tag cannot be encoded from a plain value or the
            value does not fit the tag.
    """
    if tag is TypeTag.BOOL:
        return b"\x01" if value else b"\x00"
    if tag is TypeTag.STRING:
        return str(value).encode("utf-8") + b"\x00"
    if tag in NUMERIC_FORMATS:
        try:
            return struct.pack(_struct_prefix(byte_order) + NUMERIC_FORMATS[tag], value)
        except struct.error as e:
            raise ValueError(f"Value {value!r} cannot be encoded as {tag.value}: {e}")
    raise ValueError(f"Type '{tag.value}' cannot be encoded from a plain value")
