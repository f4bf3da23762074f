"""Canonical, order-independent fingerprints for style property bags.

The fingerprint is the full sorted-key JSON serialization of the bag rather
than a fixed-width digest, so two bags share a fingerprint only when they
are structurally equal.
"""

import json
import math
from typing import Any

from stylegraph.models.properties import StyleProps


def _jsonable(value: Any) -> Any:
    if isinstance(value, StyleProps):
        return _jsonable(value.to_bag())
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        # NaN/inf have no JSON form; keep them distinguishable
        return f"__float__{value!r}"
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return repr(value)


def canonical_hash(properties: Any) -> str:
    """Return a deterministic, key-order independent fingerprint.

    Args:
        properties: Property bag (mapping, typed model, or any JSON-like value).

    Returns:
        Compact sorted-key JSON text of the value.
    """
    return json.dumps(
        _jsonable(properties),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
