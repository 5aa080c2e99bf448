"""Canonical JSON for CLI output (forms and record listings)."""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """Serialize with sorted keys and compact separators.

    List order is kept as given; form field order is meaningful.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
