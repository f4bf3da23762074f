"""Auto-layout and padding."""

from stylegraph.core.normalizer import is_number
from stylegraph.extractors.base import ExtractionContext, Extractor
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import LayoutProps, Padding, PaddingProps
from stylegraph.models.tokens import TokenCategory

AUTO_LAYOUT_MODES = ("HORIZONTAL", "VERTICAL")


def extract_padding(node: DesignNode) -> Padding:
    """Padding of a node; missing or malformed sides count as 0."""
    def side(value: object) -> float:
        return value if is_number(value) else 0

    return Padding(
        top=side(node.padding_top),
        right=side(node.padding_right),
        bottom=side(node.padding_bottom),
        left=side(node.padding_left),
    )


class LayoutExtractor(Extractor):
    """Submits layout tokens for auto-layout frames and padding tokens for padded nodes."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("layout", enabled)

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        if node.layout_mode in AUTO_LAYOUT_MODES:
            props = LayoutProps(
                layout_mode=node.layout_mode,
                item_spacing=node.item_spacing if is_number(node.item_spacing) else None,
                primary_axis_align=(
                    node.primary_axis_align_items
                    if isinstance(node.primary_axis_align_items, str) else None
                ),
                counter_axis_align=(
                    node.counter_axis_align_items
                    if isinstance(node.counter_axis_align_items, str) else None
                ),
            )
            context.submit(node, TokenCategory.LAYOUT, props)

        padding = extract_padding(node)
        if any((padding.top, padding.right, padding.bottom, padding.left)):
            context.submit(node, TokenCategory.PADDING, PaddingProps(padding=padding))
