"""Generate JSON schemas for shoji's input files and save to schemas/ directory.

Run with the package installed (``pip install -e .``).
"""

import json
from pathlib import Path

from shoji.adapters.json_dump import AttributeDump
from shoji.config import ShojiConfig
from shoji.kernel.schema import TypeSchemaDatabase
from shoji.kernel.templates import LayoutTemplate

SCHEMAS = {
    "schema_db.schema.json": TypeSchemaDatabase,
    "layout_template.schema.json": LayoutTemplate,
    "attribute_dump.schema.json": AttributeDump,
    "config.schema.json": ShojiConfig,
}


def generate_schemas():
    """Generate JSON schemas for every user-authored input format."""
    schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    for filename, model in SCHEMAS.items():
        schema_path = schemas_dir / filename
        with open(schema_path, "w", encoding="utf-8") as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Generated: {schema_path}")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()
