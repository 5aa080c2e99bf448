"""End-to-end tests for the public API."""

import json

import pytest

from shoji import ShojiConfig, build_form
from shoji.adapters.memory import MemorySource
from shoji.api import (
    build_registry,
    detect_type,
    form_from_dump,
    load_schema_db,
    open_form,
    record_from_dump,
    resolve_strategy,
)
from shoji.kernel.errors import (
    ExtractionError,
    InputCardinalityError,
    MimeTypeError,
    SchemaLookupError,
    TemplateResolutionError,
)
from shoji.kernel.mime import DEFAULT_TYPE
from shoji.kernel.schema import AttributeSchemaEntry
from shoji.kernel.templates import TemplateRegistry


def test_form_from_dump_uses_merged_schema(email_dump, email_schema_db):
    config = ShojiConfig(schema_db=str(email_schema_db))
    form = form_from_dump(email_dump, config=config)

    assert form.type_identifier == "text/x-email"
    assert form.strategy == "generic"
    assert form.field_names() == ["MAIL:subject", "MAIL:from", "META:rating"]

    subject = form.get_field("MAIL:subject")
    assert (subject.label, subject.display_value, subject.editable) == ("Subject", "Lunch?", True)
    rating = form.get_field("META:rating")
    assert (rating.label, rating.display_value, rating.editable) == ("Rating", "4", True)
    assert form.get_field("MAIL:from").editable is False


def test_positional_lookup_changes_outcome(email_dump, email_schema_db):
    config = ShojiConfig(schema_db=str(email_schema_db), schema_lookup="position")
    form = form_from_dump(email_dump, config=config)
    # the third accepted attribute meets the hidden MAIL:thread entry
    assert form.field_names() == ["MAIL:subject", "MAIL:from"]


def test_form_from_dump_with_template(email_dump, email_schema_db, templates_dir):
    templates_dir("text/x-email", {
        "type": "text/x-email",
        "title": "Email",
        "fields": [{"attribute": "META:rating"}, {"attribute": "MAIL:subject"}],
    })
    config = ShojiConfig(schema_db=str(email_schema_db), templates_dir=str(templates_dir.directory))
    form = form_from_dump(email_dump, config=config)
    assert form.strategy == "template:text/x-email"
    assert form.title == "Email"
    assert form.field_names() == ["META:rating", "MAIL:subject"]


def test_type_override(email_dump, email_schema_db):
    config = ShojiConfig(schema_db=str(email_schema_db))
    form = form_from_dump(email_dump, config=config, type_identifier="text/plain")
    assert form.type_identifier == "text/plain"
    assert form.field_names() == ["META:rating"]


def test_record_from_dump(email_dump, email_schema_db):
    record = record_from_dump(email_dump, config=ShojiConfig(schema_db=str(email_schema_db)))
    assert record.names() == ["MAIL:subject", "MAIL:from", "META:rating"]
    assert record.summary()[2]["type"] == "LONG"


def test_without_schema_db_everything_is_hidden(email_dump):
    assert form_from_dump(email_dump).fields == ()
    shown = form_from_dump(email_dump, config=ShojiConfig(show_unlisted=True))
    assert shown.field_names() == ["MAIL:subject", "MAIL:from", "MAIL:thread", "META:rating"]
    assert all(not f.editable for f in shown.fields)


def test_dump_cardinality_error(tmp_path):
    path = tmp_path / "dup.json"
    path.write_text(json.dumps({"attributes": [
        {"name": "Tags", "type": "string", "value": "a"},
        {"name": "Tags", "type": "string", "value": "b"},
    ]}), encoding="utf-8")
    with pytest.raises(InputCardinalityError):
        form_from_dump(path, config=ShojiConfig(show_unlisted=True))


def test_build_form_normalizes_type():
    source = MemorySource.from_values({"Note": ("string", "x")})
    form = build_form(source, " Application/X-Foo ", [AttributeSchemaEntry(name="Note")])
    assert form.type_identifier == "application/x-foo"
    assert form.field_names() == ["Note"]


def test_build_form_rejects_invalid_type():
    with pytest.raises(MimeTypeError):
        build_form(MemorySource([]), "not a type", [])


class _UntouchableSource:
    def iter_names(self):
        raise AssertionError("source must not be read")


def test_resolution_failure_happens_before_extraction():
    def broken():
        raise RuntimeError("bad layout")

    registry = TemplateRegistry()
    registry.register("text/x-email", broken)
    with pytest.raises(TemplateResolutionError):
        build_form(_UntouchableSource(), "text/x-email", [], registry=registry)


def test_missing_schema_db_is_lookup_error(tmp_path):
    with pytest.raises(SchemaLookupError):
        load_schema_db(ShojiConfig(schema_db=str(tmp_path / "missing.json")))


def test_build_registry_from_config(templates_dir):
    templates_dir("text", {"type": "text", "fields": []})
    config = ShojiConfig(templates_dir=str(templates_dir.directory), include_supertype_templates=True)
    registry = build_registry(config)
    assert registry.include_supertype is True
    assert resolve_strategy("Text/Plain", config).name == "template:text"
    assert resolve_strategy("image/png", config).name == "generic"


class _TypedSource:
    def __init__(self, declared=None, error=None):
        self.declared = declared
        self.error = error

    def read_type(self):
        if self.error is not None:
            raise self.error
        return self.declared


def test_detect_type_prefers_stored_type(tmp_path):
    assert detect_type(tmp_path / "notes.txt", _TypedSource("Text/X-Email")) == "text/x-email"


def test_detect_type_falls_back_to_extension_then_default(tmp_path):
    assert detect_type(tmp_path / "notes.txt", _TypedSource(None)) == "text/plain"
    assert detect_type(tmp_path / "blob.shoji-unknown") == DEFAULT_TYPE


def test_detect_type_read_failure_is_mime_error(tmp_path):
    with pytest.raises(MimeTypeError):
        detect_type(tmp_path / "x", _TypedSource(error=OSError(5, "I/O error")))


def test_detect_type_invalid_stored_type(tmp_path):
    with pytest.raises(MimeTypeError):
        detect_type(tmp_path / "x", _TypedSource("no such type"))


def test_open_form_missing_file_is_extraction_error(tmp_path):
    with pytest.raises(ExtractionError) as excinfo:
        open_form(tmp_path / "missing.txt")
    assert isinstance(excinfo.value.cause, OSError)
