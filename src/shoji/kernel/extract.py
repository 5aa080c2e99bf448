"""Attribute extraction: source + schema -> typed record."""

import logging
from typing import Dict, Iterator, Sequence

from .attributes import AttributeSource, AttrInfo, TypedRecord, TypedValue
from .errors import AttributeReadError, EnumerationError, InputCardinalityError
from .schema import AttributeSchemaEntry, SchemaLookup, VisibilityPolicy

logger = logging.getLogger(__name__)

# Internal / system attributes that are never shown, regardless of schema.
RESERVED_PREFIXES = ("BEOS:", "be:", "_trk/")


def is_reserved(name: str) -> bool:
    """Check whether an attribute name lives in a reserved internal namespace."""
    return name.startswith(RESERVED_PREFIXES)


def _enumerate(source: AttributeSource) -> Iterator[str]:
    """Yield names from the source, turning enumeration failures into EnumerationError."""
    try:
        names = iter(source.iter_names())
    except OSError as e:
        raise EnumerationError(e) from e
    while True:
        try:
            name = next(names)
        except StopIteration:
            return
        except OSError as e:
            raise EnumerationError(e) from e
        yield name


def extract(
    source: AttributeSource,
    schema: Sequence[AttributeSchemaEntry],
    lookup: SchemaLookup = "name",
    show_unlisted: bool = False,
) -> TypedRecord:
    """Build a typed record from every visible attribute on ``source``.

    Extraction is all-or-nothing: the first failure aborts the pass and no
    partial record is returned.

    Args:
        source: Attribute source to read from
        schema: Merged schema entries for the source's type
        lookup: Schema lookup mode, see ``VisibilityPolicy``
        show_unlisted: Show attributes that have no schema entry (read-only)

    Returns:
        TypedRecord in source enumeration order

    Raises:
        InputCardinalityError: A name carries more than one value instance
        AttributeReadError: Metadata or payload of an attribute could not be read
        EnumerationError: Listing names failed before the end was reached
    """
    policy = VisibilityPolicy(schema, lookup=lookup, show_unlisted=show_unlisted)
    entries: Dict[str, TypedValue] = {}
    seen = set()

    for name in _enumerate(source):
        if is_reserved(name):
            logger.debug("Skipping reserved attribute %r", name)
            continue
        if name in seen:
            raise InputCardinalityError(name, 2)
        seen.add(name)

        info = _stat(source, name)
        if info.count != 1:
            raise InputCardinalityError(name, info.count)

        visibility = policy.decide(name, len(entries))
        if not visibility.viewable:
            logger.debug("Skipping attribute %r: not viewable", name)
            continue

        data = _read(source, name, info)
        entries[name] = TypedValue(
            type_code=info.type_code,
            data=data,
            editable=visibility.editable,
            label=visibility.label,
        )

    logger.debug("Extracted %d attribute(s)", len(entries))
    return TypedRecord(entries=entries)


def _stat(source: AttributeSource, name: str) -> AttrInfo:
    try:
        return source.stat_attr(name)
    except (OSError, KeyError, ValueError) as e:
        raise AttributeReadError(name, "could not read attribute info", e) from e


def _read(source: AttributeSource, name: str, info: AttrInfo) -> bytes:
    try:
        data = source.read_attr(name, info)
    except (OSError, KeyError, ValueError) as e:
        raise AttributeReadError(name, "failed to read attribute value", e) from e
    if not data:
        raise AttributeReadError(name, "attribute value is empty")
    return bytes(data)
