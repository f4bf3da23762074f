"""Flutter source snippets for tokens.

Each renderer reads a token's property bag and returns the Dart expression a
Flutter theme would use for it: ``BoxDecoration`` for decoration,
``TextStyle`` for typography and text, ``EdgeInsets`` for padding and
``Color`` for color. Layout and component tokens have no snippet. Nothing is
written anywhere; callers decide where the code goes.
"""

import re
from collections.abc import Callable
from typing import Any, Optional

from stylegraph.core.normalizer import is_number, normalize_hex
from stylegraph.core.registry import CategoryLike, coerce_category
from stylegraph.models.tokens import Token, TokenCategory

HEX_FULL = re.compile(r"^#[0-9a-f]{6}$")
INDENT = "  "
REGULAR_WEIGHT = 400

# (lowest weight, Flutter constant), heaviest first
FONT_WEIGHTS = (
    (700, "FontWeight.bold"),
    (600, "FontWeight.w600"),
    (500, "FontWeight.w500"),
)

CORNERS = ("topLeft", "topRight", "bottomLeft", "bottomRight")


def dart_number(value: Any) -> str:
    """``8.0`` -> ``"8"``, ``0.25`` -> ``"0.25"``."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(round(value, 4))
    return str(value)


def dart_color(hex_value: Any, opacity: Any = None) -> Optional[str]:
    """``"#f00"``, 0.5 -> ``Color(0xFFFF0000).withOpacity(0.5)``.

    Returns:
        The expression, or None when ``hex_value`` is not a hex color.
    """
    if not isinstance(hex_value, str):
        return None
    hex_value = normalize_hex(hex_value)
    if not HEX_FULL.match(hex_value):
        return None
    color = f"Color(0xFF{hex_value[1:].upper()})"
    if is_number(opacity) and opacity != 1:
        color += f".withOpacity({dart_number(opacity)})"
    return color


def font_weight(weight: Any) -> Optional[str]:
    """Map a numeric weight to a ``FontWeight`` constant; None for regular."""
    if not is_number(weight) or weight == REGULAR_WEIGHT:
        return None
    for lowest, constant in FONT_WEIGHTS:
        if weight >= lowest:
            return constant
    return "FontWeight.normal"


def render_color(properties: dict[str, Any]) -> Optional[str]:
    return dart_color(properties.get("hex"), properties.get("opacity"))


def render_text_style(properties: dict[str, Any]) -> str:
    """Render typography or text properties as a one-line ``TextStyle``."""
    parts = []
    family = properties.get("fontFamily")
    if isinstance(family, str) and family.strip():
        escaped = family.strip().replace("'", "\\'")
        parts.append(f"fontFamily: '{escaped}'")

    size = properties.get("fontSize")
    if is_number(size) and size > 0:
        parts.append(f"fontSize: {dart_number(size)}")
    else:
        size = None

    weight = font_weight(properties.get("fontWeight"))
    if weight:
        parts.append(f"fontWeight: {weight}")

    # Flutter line height is a multiple of the font size
    line_height = properties.get("lineHeight")
    if is_number(line_height) and size:
        parts.append(f"height: {dart_number(round(line_height / size, 4))}")

    letter_spacing = properties.get("letterSpacing")
    if is_number(letter_spacing):
        parts.append(f"letterSpacing: {dart_number(letter_spacing)}")

    return f"TextStyle({', '.join(parts)})"


def render_padding(properties: dict[str, Any]) -> str:
    """Render padding as ``EdgeInsets.all`` when uniform, else ``fromLTRB``."""
    padding = properties.get("padding")
    if not isinstance(padding, dict):
        return "EdgeInsets.zero"
    if padding.get("isUniform") and is_number(padding.get("uniform")):
        sides = [padding["uniform"]] * 4
    else:
        sides = [padding.get(side) for side in ("left", "top", "right", "bottom")]
        sides = [value if is_number(value) else 0 for value in sides]

    if len(set(sides)) == 1:
        if sides[0] == 0:
            return "EdgeInsets.zero"
        return f"EdgeInsets.all({dart_number(sides[0])})"
    return f"EdgeInsets.fromLTRB({', '.join(dart_number(v) for v in sides)})"


def _box_shadow(shadow: Any) -> list[str]:
    if not isinstance(shadow, dict):
        return []
    color = dart_color(shadow.get("hex"), shadow.get("opacity"))
    if color is None:
        return []
    offset = shadow.get("offset") if isinstance(shadow.get("offset"), dict) else {}
    x, y = (offset.get(axis) if is_number(offset.get(axis)) else 0 for axis in ("x", "y"))
    radius = shadow.get("radius") if is_number(shadow.get("radius")) else 0

    lines = [
        "BoxShadow(",
        f"{INDENT}color: {color},",
        f"{INDENT}offset: Offset({dart_number(x)}, {dart_number(y)}),",
        f"{INDENT}blurRadius: {dart_number(radius)},",
    ]
    spread = shadow.get("spread")
    if is_number(spread) and spread != 0:
        lines.append(f"{INDENT}spreadRadius: {dart_number(spread)},")
    lines.append("),")
    return lines


def render_decoration(properties: dict[str, Any]) -> str:
    """Render fills, corner radius and drop shadows as a ``BoxDecoration``.

    Only the first fill becomes the box color, and only when it is solid.
    Inner shadows have no ``BoxShadow`` equivalent and are left out.
    """
    lines = []
    fills = properties.get("fills")
    if isinstance(fills, list) and fills and isinstance(fills[0], dict):
        color = dart_color(fills[0].get("hex"), fills[0].get("opacity"))
        if color:
            lines.append(f"color: {color},")

    radius = properties.get("cornerRadius")
    if is_number(radius):
        lines.append(f"borderRadius: BorderRadius.circular({dart_number(radius)}),")
    elif isinstance(radius, dict):
        lines.append("borderRadius: BorderRadius.only(")
        for corner in CORNERS:
            value = radius.get(corner) if is_number(radius.get(corner)) else 0
            lines.append(f"{INDENT}{corner}: Radius.circular({dart_number(value)}),")
        lines.append("),")

    effects = properties.get("effects")
    drop_shadows = effects.get("dropShadows") if isinstance(effects, dict) else None
    shadow_lines = [line for shadow in drop_shadows or [] for line in _box_shadow(shadow)]
    if shadow_lines:
        lines.append("boxShadow: [")
        lines.extend(INDENT + line for line in shadow_lines)
        lines.append("],")

    if not lines:
        return "BoxDecoration()"
    body = "".join(f"{INDENT}{line}\n" for line in lines)
    return f"BoxDecoration(\n{body})"


RENDERERS: dict[TokenCategory, Callable[[dict[str, Any]], Optional[str]]] = {
    TokenCategory.COLOR: render_color,
    TokenCategory.TYPOGRAPHY: render_text_style,
    TokenCategory.TEXT: render_text_style,
    TokenCategory.DECORATION: render_decoration,
    TokenCategory.PADDING: render_padding,
}


def flutter_code(category: CategoryLike, properties: dict[str, Any]) -> Optional[str]:
    """Render a property bag of ``category`` as Flutter source.

    Raises:
        InvalidCategoryError: If ``category`` is unknown.
    """
    renderer = RENDERERS.get(coerce_category(category))
    if renderer is None:
        return None
    return renderer(properties)


def render_token(token: Token) -> Optional[str]:
    """Flutter source for a token, merge bases included."""
    return flutter_code(token.category, token.properties)
