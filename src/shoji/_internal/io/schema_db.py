"""Schema database I/O helpers (internal)."""

from pathlib import Path
from typing import Union

from shoji.kernel.errors import SchemaLookupError
from shoji.kernel.schema import TypeSchemaDatabase


def load_schema_db_from_path(path: Union[str, Path]) -> TypeSchemaDatabase:
    """Load a type schema database from a JSON file path.

    Raises:
        SchemaLookupError: If the file cannot be read or is not a valid database
    """
    db_path = Path(path)
    try:
        data = db_path.read_bytes()
    except OSError as e:
        raise SchemaLookupError(f"Could not read schema database {db_path}", e) from e
    return TypeSchemaDatabase.from_json_bytes(data)
