"""Semantic normalization of property bags.

``normalize`` rewrites interchangeable representations into one canonical
form (hex case and shorthand, black/white markers, uniform padding, uniform
corner radii). ``semantic_key`` then keeps only the load-bearing fields,
and ``semantic_hash`` fingerprints that key.
"""

import copy
import re
from typing import Any, Optional

from stylegraph.core.hashing import canonical_hash

HEX_SHORT = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$")

COLOR_MARKERS = {
    "#000000": "black",
    "#ffffff": "white",
}

TYPOGRAPHY_KEYS = ("fontFamily", "fontSize", "fontWeight")
LAYOUT_KEYS = ("layoutMode", "itemSpacing")
CORNERS = ("topLeft", "topRight", "bottomLeft", "bottomRight")
SIDES = ("top", "right", "bottom", "left")


def is_number(value: Any) -> bool:
    """True for ints and floats, False for booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_hex(value: str) -> str:
    """Lower-case a hex color and expand ``#abc`` shorthand to ``#aabbcc``."""
    hex_value = value.strip().lower()
    match = HEX_SHORT.match(hex_value)
    if match:
        hex_value = "#" + "".join(ch * 2 for ch in match.groups())
    return hex_value


def _normalize_paint(paint: Any) -> Any:
    if not isinstance(paint, dict) or not isinstance(paint.get("hex"), str):
        return paint
    normalized = dict(paint)
    normalized["hex"] = normalize_hex(paint["hex"])
    marker = COLOR_MARKERS.get(normalized["hex"])
    if marker:
        normalized["normalized"] = marker
    return normalized


def _normalize_padding(padding: Any) -> Any:
    if not isinstance(padding, dict):
        return padding
    values = [padding.get(side) for side in SIDES]
    if all(is_number(v) for v in values) and len(set(values)) == 1:
        return {"uniform": values[0], "isUniform": True}
    return padding


def _normalize_radius(radius: Any) -> Any:
    if not isinstance(radius, dict):
        return radius
    values = [radius.get(corner) for corner in CORNERS]
    if all(is_number(v) for v in values) and len(set(values)) == 1:
        return values[0]
    return radius


def normalize(properties: dict[str, Any]) -> dict[str, Any]:
    """Return a normalized deep copy of ``properties``. Idempotent.

    Args:
        properties: Property bag for any category.

    Returns:
        New bag with canonical color, padding and radius representations.
    """
    normalized = copy.deepcopy(properties)

    if isinstance(normalized.get("fills"), list):
        normalized["fills"] = [_normalize_paint(fill) for fill in normalized["fills"]]

    if isinstance(normalized.get("hex"), str):
        normalized.update(_normalize_paint({"hex": normalized["hex"]}))

    if "padding" in normalized:
        normalized["padding"] = _normalize_padding(normalized["padding"])

    if "cornerRadius" in normalized:
        normalized["cornerRadius"] = _normalize_radius(normalized["cornerRadius"])

    effects = normalized.get("effects")
    if isinstance(effects, dict):
        for key in ("dropShadows", "innerShadows"):
            if isinstance(effects.get(key), list):
                effects[key] = [_normalize_paint(shadow) for shadow in effects[key]]

    return normalized


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def typeface_key(properties: dict[str, Any]) -> str:
    """Return the ``<size>_<family>_<weight>`` typography key, e.g. ``16_Roboto_400``."""
    size, family, weight = (properties.get(k) for k in ("fontSize", "fontFamily", "fontWeight"))
    family = family.strip() if isinstance(family, str) else family
    return f"{_format_number(size)}_{family}_{_format_number(weight)}"


def semantic_key(normalized: dict[str, Any]) -> dict[str, Any]:
    """Reduce normalized properties to their semantically load-bearing fields.

    Args:
        normalized: Output of :func:`normalize`.

    Returns:
        Compact key; empty when nothing in the bag is load-bearing.
    """
    key: dict[str, Any] = {}

    fills = normalized.get("fills")
    if isinstance(fills, list) and fills:
        primary = fills[0]
        if isinstance(primary, dict):
            key["color"] = primary.get("normalized") or primary.get("hex")

    if isinstance(normalized.get("hex"), str):
        key["color"] = normalized.get("normalized") or normalized["hex"]
        if normalized.get("opacity") is not None:
            key["opacity"] = normalized["opacity"]

    radius = normalized.get("cornerRadius")
    if radius is not None:
        key["borderRadius"] = radius if is_number(radius) else canonical_hash(radius)

    padding = normalized.get("padding")
    if isinstance(padding, dict):
        key["padding"] = padding["uniform"] if padding.get("isUniform") else canonical_hash(padding)

    effects = normalized.get("effects")
    if isinstance(effects, dict) and isinstance(effects.get("dropShadows"), list) and effects["dropShadows"]:
        key["shadows"] = [
            {
                "color": shadow.get("hex"),
                "blur": shadow.get("radius"),
                "offset": shadow.get("offset"),
            }
            for shadow in effects["dropShadows"]
            if isinstance(shadow, dict)
        ]

    if any(normalized.get(k) is not None for k in TYPOGRAPHY_KEYS):
        key["typeface"] = typeface_key(normalized)

    for layout_key in LAYOUT_KEYS:
        if normalized.get(layout_key) is not None:
            key[layout_key] = normalized[layout_key]

    if normalized.get("styleRefs"):
        key["styleRefs"] = normalized["styleRefs"]

    return key


def semantic_hash(properties: dict[str, Any]) -> Optional[str]:
    """Fingerprint the semantic key of ``properties``.

    Returns:
        Hash of the key, or None when the bag has no load-bearing field.
    """
    key = semantic_key(normalize(properties))
    if not key:
        return None
    return canonical_hash(key)
