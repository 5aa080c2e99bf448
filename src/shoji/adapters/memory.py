"""In-process attribute source."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Tuple, Union

from shoji.kernel.attributes import AttrInfo, RawAttribute
from shoji.kernel.type_codes import ByteOrder, TypeTag, encode_value, parse_type_code

PlainValue = Union[bool, int, float, str, bytes]


class MemorySource:
    """Attribute source backed by a list of raw attributes.

    Several attributes may share a name; ``stat_attr`` then reports the
    number of instances so extraction can reject them.
    """

    def __init__(self, attributes: Iterable[RawAttribute]):
        self._values: Dict[str, List[RawAttribute]] = {}
        for attr in attributes:
            self._values.setdefault(attr.name, []).append(attr)

    @classmethod
    def from_values(
        cls,
        values: Mapping[str, Tuple[Union[int, str], PlainValue]],
        byte_order: ByteOrder = "little",
    ) -> "MemorySource":
        """Build a source from ``{name: (type, value)}``.

        ``type`` is anything ``parse_type_code`` accepts. ``bytes`` values are
        stored as-is; other values are encoded for their type.
        """
        return cls(make_attribute(name, type_, value, byte_order) for name, (type_, value) in values.items())

    def iter_names(self) -> Iterator[str]:
        return iter(list(self._values))

    def stat_attr(self, name: str) -> AttrInfo:
        instances = self._values[name]
        first = instances[0]
        return AttrInfo(type_code=first.type_code, size=len(first.data), count=len(instances))

    def read_attr(self, name: str, info: AttrInfo) -> bytes:
        return self._values[name][0].data


def make_attribute(
    name: str,
    type_: Union[int, str],
    value: PlainValue,
    byte_order: ByteOrder = "little",
) -> RawAttribute:
    """Build a raw attribute, encoding plain values for their type.

    Raises:
        ValueError: If the type is invalid or the value cannot be encoded
    """
    code = parse_type_code(type_)
    if isinstance(value, bytes):
        data = value
    else:
        data = encode_value(TypeTag.classify(code), value, byte_order)
    return RawAttribute(name=name, type_code=code, data=data)
