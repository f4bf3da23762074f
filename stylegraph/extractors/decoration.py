"""Box decoration: fills, corner radii and shadows of non-text nodes."""

from typing import Any, Optional, Union

from stylegraph.core.normalizer import is_number
from stylegraph.extractors.base import (
    ExtractionContext,
    Extractor,
    paint_hex,
    paint_opacity,
    rgba_to_hex,
    visible_paints,
)
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import (
    CornerRadii,
    DecorationProps,
    Effects,
    Fill,
    Offset,
    Shadow,
)
from stylegraph.models.tokens import TokenCategory

GRADIENT_PREFIX = "GRADIENT_"


def extract_fills(paints: Any) -> list[Fill]:
    fills: list[Fill] = []
    for paint in visible_paints(paints):
        paint_type = paint.get("type", "SOLID")
        if paint_type == "SOLID":
            hex_value = paint_hex(paint)
            if hex_value is not None:
                fills.append(Fill(hex=hex_value, opacity=paint_opacity(paint)))
        elif isinstance(paint_type, str) and paint_type.startswith(GRADIENT_PREFIX):
            stops = []
            for stop in paint.get("gradientStops") or []:
                if not isinstance(stop, dict):
                    continue
                hex_value = rgba_to_hex(stop.get("color"))
                if hex_value is not None and is_number(stop.get("position")):
                    stops.append({"position": stop["position"], "hex": hex_value})
            fills.append(Fill(type=paint_type, stops=stops))
    return fills


def extract_corner_radius(node: DesignNode) -> Optional[Union[float, CornerRadii]]:
    """Scalar radius, or per-corner radii when ``rectangleCornerRadii`` differ."""
    radii = node.rectangle_corner_radii
    if isinstance(radii, list) and len(radii) == 4 and all(is_number(r) for r in radii):
        if len(set(radii)) > 1:
            # Figma order: top-left, top-right, bottom-right, bottom-left
            return CornerRadii(
                top_left=radii[0],
                top_right=radii[1],
                bottom_right=radii[2],
                bottom_left=radii[3],
            )
        if radii[0] > 0:
            return radii[0]
    if is_number(node.corner_radius) and node.corner_radius > 0:
        return node.corner_radius
    return None


def _shadow(effect: dict[str, Any]) -> Optional[Shadow]:
    color = effect.get("color")
    hex_value = rgba_to_hex(color)
    if hex_value is None:
        return None
    alpha = color.get("a")
    offset = effect.get("offset")
    offset = offset if isinstance(offset, dict) else {}
    radius = effect.get("radius")
    spread = effect.get("spread")
    return Shadow(
        hex=hex_value,
        opacity=round(alpha, 4) if is_number(alpha) else 1.0,
        offset=Offset(
            x=offset["x"] if is_number(offset.get("x")) else 0.0,
            y=offset["y"] if is_number(offset.get("y")) else 0.0,
        ),
        radius=radius if is_number(radius) else 0.0,
        spread=spread if is_number(spread) and spread != 0 else None,
    )


def extract_effects(raw: Any) -> Effects:
    effects = Effects()
    for effect in visible_paints(raw):
        kind = effect.get("type")
        if kind not in ("DROP_SHADOW", "INNER_SHADOW"):
            continue
        shadow = _shadow(effect)
        if shadow is None:
            continue
        if kind == "DROP_SHADOW":
            effects.drop_shadows.append(shadow)
        else:
            effects.inner_shadows.append(shadow)
    return effects


class DecorationExtractor(Extractor):
    """Submits a decoration token for non-text nodes with fills, a radius, or drop or inner shadows."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("decoration", enabled)

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        if node.type == "TEXT":
            return
        fills = extract_fills(node.fills)
        radius = extract_corner_radius(node)
        effects = extract_effects(node.effects)
        has_shadows = bool(effects.drop_shadows or effects.inner_shadows)
        if not fills and radius is None and not has_shadows:
            return

        props = DecorationProps(
            fills=fills or None,
            corner_radius=radius,
            effects=effects if has_shadows else None,
        )
        context.submit(node, TokenCategory.DECORATION, props)
