"""Public API for shoji.

High-level functions that run the whole extraction -> template -> form
pipeline and return complete, structured results. Presentation layers and
the CLI should use these functions instead of importing from _internal.
"""

import logging
import mimetypes
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from shoji.adapters.json_dump import JsonAttributeSource
from shoji.adapters.xattr import XattrSource
from shoji.config import ShojiConfig
from shoji.contracts import ErrorReport
from shoji.kernel.attributes import AttributeSource, TypedRecord
from shoji.kernel.errors import ExtractionError, MimeTypeError
from shoji.kernel.extract import extract
from shoji.kernel.form import Form
from shoji.kernel.mime import DEFAULT_TYPE, normalize_type
from shoji.kernel.schema import AttributeSchemaEntry, TypeSchemaDatabase
from shoji.kernel.templates import FormStrategy, TemplateRegistry
from shoji._internal.io.schema_db import load_schema_db_from_path
from shoji._internal.io.templates import DirectoryTemplateLoader
from shoji._internal.reporting import describe_error as _describe_error

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Path]


def _normalize_path(path: PathLike) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def load_schema_db(config: Optional[ShojiConfig] = None) -> TypeSchemaDatabase:
    """Load the configured schema database (empty when none is configured)."""
    config = config or ShojiConfig()
    if config.schema_db is None:
        return TypeSchemaDatabase()
    return load_schema_db_from_path(config.schema_db)


def build_registry(config: Optional[ShojiConfig] = None) -> TemplateRegistry:
    """Build a template registry from configuration."""
    config = config or ShojiConfig()
    loaders = [DirectoryTemplateLoader(config.templates_dir)] if config.templates_dir else []
    return TemplateRegistry(
        loaders=loaders,
        include_supertype=config.include_supertype_templates,
        byte_order=config.byte_order,
    )


def resolve_strategy(type_identifier: str, config: Optional[ShojiConfig] = None) -> FormStrategy:
    """Resolve the form strategy for a type using the configured templates."""
    return build_registry(config).resolve(normalize_type(type_identifier))


def read_record(
    source: AttributeSource,
    schema: Sequence[AttributeSchemaEntry],
    config: Optional[ShojiConfig] = None,
) -> TypedRecord:
    """Extract the typed record of a source."""
    config = config or ShojiConfig()
    return extract(
        source,
        schema,
        lookup=config.schema_lookup,
        show_unlisted=config.show_unlisted,
    )


def build_form(
    source: AttributeSource,
    type_identifier: str,
    schema: Sequence[AttributeSchemaEntry],
    registry: Optional[TemplateRegistry] = None,
    config: Optional[ShojiConfig] = None,
) -> Form:
    """Build the form for an attribute source.

    The strategy is resolved before any attribute is read, so a broken
    template aborts the request without touching the source.

    Args:
        source: Attribute source
        type_identifier: MIME type of the source object
        schema: Merged schema entries for the type
        registry: Template registry (built from config when omitted)
        config: Settings (defaults when omitted)

    Returns:
        Complete form; fatal errors are raised, never returned as partial forms

    Raises:
        MimeTypeError: Invalid type identifier
        TemplateResolutionError: A specific template exists but failed to set up
        ExtractionError: Attribute extraction failed
    """
    config = config or ShojiConfig()
    type_identifier = normalize_type(type_identifier)
    registry = registry or build_registry(config)
    strategy = registry.resolve(type_identifier)
    record = read_record(source, schema, config)
    form = strategy.build(type_identifier, record)
    logger.info("Built %s form for %s with %d field(s)", form.strategy, type_identifier, len(form.fields))
    return form


def detect_type(path: PathLike, source: Optional[XattrSource] = None) -> str:
    """Determine the MIME type of a filesystem node.

    Order: the node's ``BEOS:TYPE`` attribute (when an open source is
    given), the file extension, then ``application/octet-stream``.

    Raises:
        MimeTypeError: The stored type could not be read or is invalid
    """
    if source is not None:
        try:
            declared = source.read_type()
        except OSError as e:
            raise MimeTypeError("Could not read the stored MIME type", e) from e
        if declared:
            return normalize_type(declared)
    guessed, _ = mimetypes.guess_type(_normalize_path(path).name)
    if guessed:
        return normalize_type(guessed)
    return DEFAULT_TYPE


@contextmanager
def _open_xattr_source(path: Path, config: ShojiConfig) -> Iterator[XattrSource]:
    source = XattrSource(
        path,
        byte_order=config.byte_order,
        include_foreign=config.include_foreign_xattrs,
    )
    try:
        source.open()
    except OSError as e:
        raise ExtractionError(None, f"Could not open '{path}'", e) from e
    try:
        yield source
    finally:
        source.close()


def open_form(
    path: PathLike,
    config: Optional[ShojiConfig] = None,
    type_identifier: Optional[str] = None,
) -> Form:
    """Build the form for a filesystem node from its extended attributes.

    Args:
        path: File or directory to inspect
        config: Settings (defaults when omitted)
        type_identifier: Override the detected MIME type
    """
    config = config or ShojiConfig()
    path = _normalize_path(path)
    schema_db = load_schema_db(config)
    registry = build_registry(config)
    with _open_xattr_source(path, config) as source:
        type_id = normalize_type(type_identifier) if type_identifier else detect_type(path, source)
        return build_form(source, type_id, schema_db.merged_schema(type_id), registry, config)


def read_attributes(
    path: PathLike,
    config: Optional[ShojiConfig] = None,
    type_identifier: Optional[str] = None,
) -> TypedRecord:
    """Extract the typed record of a filesystem node."""
    config = config or ShojiConfig()
    path = _normalize_path(path)
    schema_db = load_schema_db(config)
    with _open_xattr_source(path, config) as source:
        type_id = normalize_type(type_identifier) if type_identifier else detect_type(path, source)
        return read_record(source, schema_db.merged_schema(type_id), config)


def _dump_type(source: JsonAttributeSource, type_identifier: Optional[str]) -> str:
    return normalize_type(type_identifier or source.type_identifier or DEFAULT_TYPE)


def form_from_dump(
    path: PathLike,
    config: Optional[ShojiConfig] = None,
    type_identifier: Optional[str] = None,
) -> Form:
    """Build the form for an attribute dump file (JSON)."""
    config = config or ShojiConfig()
    source = JsonAttributeSource.from_path(_normalize_path(path), byte_order=config.byte_order)
    type_id = _dump_type(source, type_identifier)
    schema = load_schema_db(config).merged_schema(type_id)
    return build_form(source, type_id, schema, config=config)


def record_from_dump(
    path: PathLike,
    config: Optional[ShojiConfig] = None,
    type_identifier: Optional[str] = None,
) -> TypedRecord:
    """Extract the typed record of an attribute dump file (JSON)."""
    config = config or ShojiConfig()
    source = JsonAttributeSource.from_path(_normalize_path(path), byte_order=config.byte_order)
    type_id = _dump_type(source, type_identifier)
    return read_record(source, load_schema_db(config).merged_schema(type_id), config)


def describe_error(error: BaseException) -> ErrorReport:
    """Build the user-facing report (title, message, detail) for an error."""
    return _describe_error(error)

