"""Text styles of TEXT nodes."""

from typing import Any, Optional

from stylegraph.config import ExtractionSettings
from stylegraph.core.normalizer import is_number
from stylegraph.extractors.base import ExtractionContext, Extractor
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import TypographyProps
from stylegraph.models.tokens import TokenCategory


def build_typography(
    style: Any,
    settings: ExtractionSettings,
    model: type[TypographyProps] = TypographyProps,
) -> Optional[TypographyProps]:
    """Build typography properties from a raw text ``style`` object.

    Missing family, size and weight fall back to the configured defaults.

    Returns:
        The properties, or None when ``style`` is not an object.
    """
    if not isinstance(style, dict):
        return None

    family = style.get("fontFamily")
    if not isinstance(family, str) or not family.strip():
        family = settings.default_font_family

    size = style.get("fontSize")
    if not is_number(size) or size <= 0:
        size = settings.default_font_size

    weight = style.get("fontWeight")
    weight = int(weight) if is_number(weight) and weight > 0 else settings.default_font_weight

    line_height = style.get("lineHeightPx")
    letter_spacing = style.get("letterSpacing")
    text_align = style.get("textAlignHorizontal")

    return model(
        font_family=family.strip(),
        font_size=size,
        font_weight=weight,
        line_height=line_height if is_number(line_height) and line_height > 0 else None,
        letter_spacing=letter_spacing if is_number(letter_spacing) and letter_spacing != 0 else None,
        text_align=text_align if isinstance(text_align, str) else None,
    )


class TypographyExtractor(Extractor):
    """Submits a typography token for every TEXT node carrying a style."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("typography", enabled)

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        if node.type != "TEXT":
            return
        if context.refs_for(node.id).get(TokenCategory.TEXT.value):
            # already submitted as a component label
            return
        props = build_typography(node.style, context.settings)
        if props is not None:
            context.submit(node, TokenCategory.TYPOGRAPHY, props)
