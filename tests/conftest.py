"""Pytest configuration and shared fixtures.

No sys.path hacks - tests import from the installed shoji package.
"""

import json
from pathlib import Path

import pytest

from shoji.adapters.memory import MemorySource
from shoji.kernel.schema import AttributeSchemaEntry


@pytest.fixture
def scenario_source():
    """Title/Rating plus a reserved icon attribute."""
    return MemorySource.from_values({
        "Title": ("string", "Hello"),
        "Rating": ("int32", 5),
        "BEOS:icon": ("VICN", b"ncif\x05\x02"),
    })


@pytest.fixture
def scenario_schema():
    """Every scenario attribute is viewable."""
    return [
        AttributeSchemaEntry(name="Title", viewable=True),
        AttributeSchemaEntry(name="Rating", viewable=True),
        AttributeSchemaEntry(name="BEOS:icon", viewable=True),
    ]


@pytest.fixture
def email_schema_db(tmp_path: Path) -> Path:
    """Schema database with an email type and its text supertype."""
    db = {
        "types": {
            "text/x-email": {
                "attributes": [
                    {"name": "MAIL:subject", "public_name": "Subject", "type": "string",
                     "viewable": True, "editable": True},
                    {"name": "MAIL:from", "public_name": "From", "type": "string",
                     "viewable": True, "editable": False},
                    {"name": "MAIL:thread", "type": "string", "viewable": False},
                ]
            },
            "text": {
                "attributes": [
                    {"name": "META:rating", "public_name": "Rating", "type": "int32",
                     "viewable": True, "editable": True},
                ]
            },
        }
    }
    path = tmp_path / "schema_db.json"
    path.write_text(json.dumps(db, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def email_dump(tmp_path: Path) -> Path:
    """Attribute dump of an email file."""
    dump = {
        "type": "text/x-email",
        "attributes": [
            {"name": "BEOS:TYPE", "type": "MIMS", "value": "text/x-email"},
            {"name": "MAIL:subject", "type": "string", "value": "Lunch?"},
            {"name": "MAIL:from", "type": "string", "value": "ann@example.com"},
            {"name": "MAIL:thread", "type": "string", "value": "Lunch?"},
            {"name": "META:rating", "type": "int32", "value": 4},
        ],
    }
    path = tmp_path / "email.json"
    path.write_text(json.dumps(dump, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def templates_dir(tmp_path: Path):
    """Empty templates directory plus a writer for layout templates."""
    directory = tmp_path / "templates"
    directory.mkdir()

    def write(type_identifier: str, template) -> Path:
        path = directory / (type_identifier.replace("/", "__") + ".json")
        text = template if isinstance(template, str) else json.dumps(template, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    write.directory = directory
    return write
