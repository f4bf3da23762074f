"""Human-readable names for tokens.

Names are derived from token properties only: colors by hue family,
typography by a Material-style size scale, spacing by value. ``assign_names``
turns suggestions into unique camelCase identifiers.
"""

import colorsys
import re
from collections.abc import Iterable
from typing import Any, Optional

import structlog

from stylegraph.core.normalizer import is_number, normalize_hex
from stylegraph.models.tokens import Token, TokenCategory

logger = structlog.get_logger(__name__)

WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")
HEX_FULL = re.compile(r"^#[0-9a-f]{6}$")

NAMED_COLORS = {
    "#ffffff": "White",
    "#000000": "Black",
    "#ff0000": "Red",
    "#00ff00": "Green",
    "#0000ff": "Blue",
}

# (upper hue bound in degrees, family)
HUE_FAMILIES = (
    (15, "Red"),
    (45, "Orange"),
    (70, "Yellow"),
    (165, "Green"),
    (195, "Cyan"),
    (255, "Blue"),
    (290, "Purple"),
    (345, "Pink"),
    (360, "Red"),
)

# (minimum font size, scale step), checked top-down
TYPE_SCALE = (
    (32, "DisplayLarge"),
    (28, "DisplayMedium"),
    (24, "DisplaySmall"),
    (22, "HeadlineLarge"),
    (20, "HeadlineMedium"),
    (18, "HeadlineSmall"),
    (16, "BodyLarge"),
    (14, "BodyMedium"),
    (12, "BodySmall"),
    (11, "LabelLarge"),
    (10, "LabelMedium"),
)


def _words(text: str) -> list[str]:
    return WORD_PATTERN.findall(text or "")


def to_pascal_case(text: str) -> str:
    """``"primary button-label"`` -> ``"PrimaryButtonLabel"``."""
    name = "".join(word[0].upper() + word[1:].lower() for word in _words(text))
    if name[:1].isdigit():
        name = "_" + name
    return name


def to_camel_case(text: str) -> str:
    """``"Body Large"`` -> ``"bodyLarge"``."""
    pascal = to_pascal_case(text)
    if pascal.startswith("_"):
        return pascal
    return pascal[:1].lower() + pascal[1:]


def _num(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 2)).replace(".", "_")


def color_name(hex_value: Any) -> Optional[str]:
    """Name a ``#rrggbb`` color by table or by hue family with a lightness qualifier."""
    if not isinstance(hex_value, str):
        return None
    hex_value = normalize_hex(hex_value)
    if not HEX_FULL.match(hex_value):
        return None
    if hex_value in NAMED_COLORS:
        return NAMED_COLORS[hex_value]

    r, g, b = (int(hex_value[i:i + 2], 16) / 255 for i in (1, 3, 5))
    hue, lightness, saturation = colorsys.rgb_to_hls(r, g, b)
    if saturation < 0.15:
        family = "Gray"
    else:
        degrees = hue * 360
        family = next(name for bound, name in HUE_FAMILIES if degrees < bound)

    if lightness >= 0.7:
        return "Light" + family
    if lightness <= 0.3:
        return "Dark" + family
    return family


def _typography_name(properties: dict[str, Any]) -> str:
    size = properties.get("fontSize")
    weight = properties.get("fontWeight")
    size = size if is_number(size) else 16
    weight = weight if is_number(weight) else 400

    step = next((name for minimum, name in TYPE_SCALE if size >= minimum), "LabelSmall")
    if weight >= 700:
        return step + "Bold"
    if weight >= 600:
        return step + "SemiBold"
    if weight >= 500:
        return step + "Medium"
    if weight <= 300:
        return step + "Light"
    return step


def _first_fill_hex(properties: dict[str, Any]) -> Optional[str]:
    fills = properties.get("fills")
    if isinstance(fills, list):
        for fill in fills:
            if isinstance(fill, dict) and isinstance(fill.get("hex"), str):
                return fill["hex"]
    return None


def _decoration_name(properties: dict[str, Any]) -> str:
    name = color_name(_first_fill_hex(properties)) or "Surface"
    radius = properties.get("cornerRadius")
    if is_number(radius):
        name += f"Radius{_num(radius)}"
    return name


def _padding_name(properties: dict[str, Any]) -> str:
    padding = properties.get("padding")
    if isinstance(padding, dict):
        sides = [padding.get(side) for side in ("top", "right", "bottom", "left")]
        if all(is_number(v) for v in sides) and len(set(sides)) == 1:
            return f"Inset{_num(sides[0])}"
        if padding.get("isUniform") and is_number(padding.get("uniform")):
            return f"Inset{_num(padding['uniform'])}"
    return "InsetCustom"


def _layout_name(properties: dict[str, Any]) -> str:
    mode = properties.get("layoutMode")
    name = {"HORIZONTAL": "Row", "VERTICAL": "Column"}.get(mode, "Layout")
    spacing = properties.get("itemSpacing")
    if is_number(spacing) and spacing:
        name += f"Gap{_num(spacing)}"
    return name


def suggest_name(token: Token) -> str:
    """Suggest a PascalCase name for a token from its properties."""
    props = token.properties
    category = token.category

    if category == TokenCategory.COLOR:
        name = color_name(props.get("hex")) or "Color"
    elif category in (TokenCategory.TYPOGRAPHY, TokenCategory.TEXT):
        name = _typography_name(props)
    elif category == TokenCategory.DECORATION:
        name = _decoration_name(props)
    elif category == TokenCategory.PADDING:
        name = _padding_name(props)
    elif category == TokenCategory.LAYOUT:
        name = _layout_name(props)
    else:
        name = "Component"

    if token.is_merged:
        name += "Base"
    return name


def assign_names(tokens: Iterable[Token]) -> dict[str, str]:
    """Give every token a unique camelCase name.

    Clashing names get numeric suffixes starting at 2.

    Returns:
        Mapping of token id to assigned name.
    """
    taken: set[str] = set()
    names: dict[str, str] = {}
    for token in tokens:
        base = to_camel_case(suggest_name(token)) or token.category.value
        name = base
        suffix = 2
        while name in taken:
            name = f"{base}{suffix}"
            suffix += 1
        taken.add(name)
        token.name = name
        names[token.id] = name
    logger.debug("token_names_assigned", count=len(names))
    return names
