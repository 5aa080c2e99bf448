"""Tests for schema merging, visibility policy and the schema database."""

import json

import pytest
from pydantic import ValidationError

from shoji.kernel.errors import SchemaLookupError
from shoji.kernel.schema import (
    AttributeSchemaEntry,
    TypeSchemaDatabase,
    VisibilityPolicy,
    merge_schema,
)
from shoji.kernel.type_codes import B_INT32_TYPE


def _entry(name, viewable=True, editable=False, public_name=None):
    return AttributeSchemaEntry(name=name, viewable=viewable, editable=editable, public_name=public_name)


def test_merge_schema_puts_type_entries_first_without_dedup():
    own = [_entry("A"), _entry("B")]
    parent = [_entry("B", viewable=False), _entry("C")]
    merged = merge_schema(own, parent)
    assert [e.name for e in merged] == ["A", "B", "B", "C"]
    assert merged[1].viewable is True


def test_entry_accepts_type_names():
    assert AttributeSchemaEntry(name="n", type_code="int32").type_code == B_INT32_TYPE
    with pytest.raises(ValidationError):
        AttributeSchemaEntry(name="n", type_code="nonsense")


def test_name_lookup_first_entry_wins():
    policy = VisibilityPolicy(merge_schema([_entry("B", editable=True)], [_entry("B", viewable=False)]))
    decision = policy.decide("B", accepted_count=0)
    assert decision.viewable is True
    assert decision.editable is True


def test_name_lookup_ignores_enumeration_position():
    policy = VisibilityPolicy([_entry("A", viewable=False), _entry("B")])
    assert policy.decide("B", accepted_count=0).viewable is True
    assert policy.decide("A", accepted_count=1).viewable is False


def test_unlisted_attributes_hidden_unless_requested():
    assert VisibilityPolicy([]).decide("X", 0).viewable is False
    shown = VisibilityPolicy([], show_unlisted=True).decide("X", 0)
    assert shown.viewable is True
    assert shown.editable is False


def test_position_lookup_uses_accepted_count():
    policy = VisibilityPolicy([_entry("whatever"), _entry("other", viewable=False)], lookup="position")
    assert policy.decide("A", accepted_count=0).viewable is True
    assert policy.decide("B", accepted_count=1).viewable is False
    assert policy.decide("C", accepted_count=2).viewable is False


def test_public_name_becomes_label():
    decision = VisibilityPolicy([_entry("MAIL:subject", public_name="Subject")]).decide("MAIL:subject", 0)
    assert decision.label == "Subject"


def test_unknown_lookup_mode_rejected():
    with pytest.raises(ValueError):
        VisibilityPolicy([], lookup="fuzzy")


def test_schema_database_merges_supertype():
    db = TypeSchemaDatabase.from_json_bytes(json.dumps({
        "types": {
            "Text/X-Email": {"attributes": [{"name": "MAIL:subject"}]},
            "text": {"attributes": [{"name": "META:rating"}]},
        }
    }).encode("utf-8"))
    assert db.super_type_of("text/x-email") == "text"
    assert [e.name for e in db.merged_schema("text/x-email")] == ["MAIL:subject", "META:rating"]
    assert db.attr_info("image/png") == []
    assert db.super_type_of("text") is None


def test_schema_database_explicit_supertype():
    db = TypeSchemaDatabase(types={
        "application/x-person": {"super_type": "application/x-contact", "attributes": []},
        "application/x-contact": {"attributes": [{"name": "META:email"}]},
    })
    assert [e.name for e in db.merged_schema("application/x-person")] == ["META:email"]


@pytest.mark.parametrize("payload", [
    b"not json",
    b"[]",
    json.dumps({"types": {"not a type!": {"attributes": []}}}).encode("utf-8"),
    json.dumps({"types": {}, "extra": 1}).encode("utf-8"),
])
def test_invalid_schema_database_raises_schema_lookup_error(payload):
    with pytest.raises(SchemaLookupError):
        TypeSchemaDatabase.from_json_bytes(payload)


def test_schema_entry_type_key_matches_attr_type():
    db = TypeSchemaDatabase.from_json_bytes(json.dumps({
        "types": {"text": {"attributes": [{"name": "META:rating", "type": "int32"}]}}
    }).encode("utf-8"))
    assert db.attr_info("text")[0].type_code == B_INT32_TYPE
    assert AttributeSchemaEntry(type="LONG").type_code == B_INT32_TYPE
