"""Solid fill and stroke colors."""

import structlog

from stylegraph.extractors.base import (
    ExtractionContext,
    Extractor,
    paint_hex,
    paint_opacity,
    visible_solid_paints,
)
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import ColorProps
from stylegraph.models.tokens import TokenCategory

logger = structlog.get_logger(__name__)


class ColorExtractor(Extractor):
    """Submits one color token per visible solid paint, fills before strokes."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("color", enabled)

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        for paints in (node.fills, node.strokes):
            for paint in visible_solid_paints(paints):
                hex_value = paint_hex(paint)
                if hex_value is None:
                    logger.debug("color_paint_ignored", node_id=node.id)
                    continue
                props = ColorProps(hex=hex_value, opacity=paint_opacity(paint))
                context.submit(node, TokenCategory.COLOR, props)
