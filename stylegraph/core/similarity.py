"""Pairwise similarity scoring between property bags."""

from collections.abc import Iterable
from typing import Any, Optional

from stylegraph.core.normalizer import is_number
from stylegraph.models.tokens import Token

NUMERIC_TOLERANCE = 0.01
PARENT_THRESHOLD = 0.8


def values_similar(a: Any, b: Any) -> bool:
    """Return True when two property values are interchangeable.

    Rules:
      - numbers: absolute difference below 0.01
      - lists: same length, element-wise similar
      - dicts: same key set, value-wise similar
      - anything else: strict equality (booleans never equal numbers)
    """
    if is_number(a) and is_number(b):
        return abs(a - b) < NUMERIC_TOLERANCE
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(values_similar(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        if set(a) != set(b):
            return False
        return all(values_similar(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple, dict)) or isinstance(b, (list, tuple, dict)):
        return False
    return a == b


def _score(a: dict[str, Any], b: dict[str, Any], one_sided_credit: float) -> float:
    union = set(a) | set(b)
    if not union:
        return 0.0
    total = 0.0
    for key in union:
        if key in a and key in b:
            if values_similar(a[key], b[key]):
                total += 1.0
        else:
            total += one_sided_credit
    return total / len(union)


def compatibility(a: dict[str, Any], b: dict[str, Any]) -> float:
    """Score in [0, 1]; keys present on one side only earn half credit."""
    return _score(a, b, 0.5)


def similarity(a: dict[str, Any], b: dict[str, Any]) -> float:
    """Score in [0, 1]; keys present on one side only earn nothing."""
    return _score(a, b, 0.0)


def variance(child: dict[str, Any], parent: dict[str, Any]) -> float:
    """How far ``child`` drifts from ``parent`` (``1 - similarity``)."""
    return 1.0 - similarity(child, parent)


def find_potential_parent(
    properties: dict[str, Any],
    tokens: Iterable[Token],
    threshold: float = PARENT_THRESHOLD,
) -> Optional[Token]:
    """Pick the most similar token whose score lies in ``[threshold, 1.0)``.

    An exact match (score 1.0) never becomes a parent. Ties keep the
    first token seen.
    """
    best: Optional[Token] = None
    best_score = -1.0
    for token in tokens:
        score = similarity(properties, token.properties)
        if threshold <= score < 1.0 and score > best_score:
            best = token
            best_score = score
    return best
