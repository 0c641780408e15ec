"""Canonical JSON serialization for machine-readable reports."""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Serialize with sorted keys and compact separators.

    Lists keep their order; schema column order is significant.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
