"""Configuration for form construction.

Settings come from an optional JSON file (``shoji --config``); individual
CLI flags override file values.
"""

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ShojiConfig(BaseModel):
    """Form construction settings."""
    schema_db: Optional[str] = Field(
        None,
        description="Path to the type schema database (JSON); without it every type has an empty schema",
    )
    templates_dir: Optional[str] = Field(
        None,
        description="Directory of per-type layout templates; without it every form is generic",
    )
    schema_lookup: Literal["name", "position"] = Field(
        "name",
        description="Match schema entries to attributes by name, or by running position (legacy)",
    )
    show_unlisted: bool = Field(
        False,
        description="Show attributes that have no schema entry (read-only)",
    )
    include_supertype_templates: bool = Field(
        False,
        description="Try the supertype's template before falling back to the generic form",
    )
    byte_order: Literal["little", "big"] = Field(
        "little",
        description="Byte order of stored type codes and numeric values",
    )
    include_foreign_xattrs: bool = Field(
        False,
        description="Expose user.* xattrs outside the typed namespace as string attributes",
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "ShojiConfig":
        """Load configuration from JSON bytes."""
        payload = json.loads(data)
        return cls.model_validate(payload)

    def with_overrides(self, **overrides: Any) -> "ShojiConfig":
        """Return a copy with every non-None override applied."""
        updates: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return self.model_validate({**self.model_dump(), **updates})


def load_config(path: Optional[Union[str, Path]] = None) -> ShojiConfig:
    """Load configuration from a JSON file, or defaults when no path is given.

    Relative ``schema_db`` and ``templates_dir`` paths are resolved against
    the config file's directory.
    """
    if path is None:
        return ShojiConfig()
    config_path = Path(path)
    config = ShojiConfig.from_json_bytes(config_path.read_bytes())
    base = config_path.resolve().parent
    updates: Dict[str, str] = {}
    for key in ("schema_db", "templates_dir"):
        value = getattr(config, key)
        if value is not None and not Path(value).is_absolute():
            updates[key] = str(base / value)
    return config.model_copy(update=updates) if updates else config
