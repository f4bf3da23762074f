"""Component style composition and variant analysis."""

from dataclasses import dataclass, field
from typing import Any

import structlog

from stylegraph.errors import NotAComponentSetError
from stylegraph.extractors.base import ExtractionContext, Extractor
from stylegraph.extractors.typography import build_typography
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import ComponentProps, TextProps
from stylegraph.models.tokens import TokenCategory

logger = structlog.get_logger(__name__)

COMPONENT_NODE_TYPES = ("COMPONENT", "INSTANCE")
COMPOSED_CATEGORIES = (TokenCategory.DECORATION, TokenCategory.PADDING)


class ComponentExtractor(Extractor):
    """Submits a component token referencing the styles a component is built from.

    Must run after the decoration and layout extractors so the node's own
    refs are already recorded. Direct TEXT children within the depth limit
    are submitted here as ``text`` tokens; the typography extractor then
    leaves them alone, so each label counts once.
    """

    def __init__(self, enabled: bool = True) -> None:
        super().__init__("component", enabled)

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        if node.type not in COMPONENT_NODE_TYPES:
            return

        style_refs: dict[str, Any] = {}
        own_refs = context.refs_for(node.id)
        for category in COMPOSED_CATEGORIES:
            if own_refs.get(category.value):
                style_refs[category.value] = own_refs[category.value][0]

        # children past the depth limit are never visited
        labels = node.children if context.depth < context.max_depth else []
        text_refs = []
        for child in labels:
            if child.type != "TEXT" or not (child.visible or context.settings.include_hidden):
                continue
            props = build_typography(child.style, context.settings, model=TextProps)
            if props is not None:
                text_refs.append(context.submit(child, TokenCategory.TEXT, props))
        if text_refs:
            style_refs["text"] = text_refs

        if not style_refs:
            return
        props = ComponentProps(style_refs=style_refs, child_count=len(node.children))
        token_id = context.submit(node, TokenCategory.COMPONENT, props)
        logger.debug("component_composed", node_id=node.id, token_id=token_id, refs=len(style_refs))


@dataclass
class ComponentVariant:
    """One variant of a component set, parsed from its ``Prop=Value`` name."""

    node_id: str
    name: str
    properties: dict[str, str] = field(default_factory=dict)
    is_default: bool = False


def parse_variant_name(name: str) -> dict[str, str]:
    """``"Size=Large, State=Default"`` -> ``{"Size": "Large", "State": "Default"}``."""
    properties = {}
    for part in name.split(","):
        key, sep, value = part.partition("=")
        if sep and key.strip():
            properties[key.strip()] = value.strip()
    return properties


def analyze_component_set(node: DesignNode) -> list[ComponentVariant]:
    """List the variants of a COMPONENT_SET node.

    The default variant is the first one with a property value of "default"
    (any case), otherwise the first variant.

    Raises:
        NotAComponentSetError: If ``node`` is not a COMPONENT_SET.
    """
    if node.type != "COMPONENT_SET":
        logger.error("variant_analysis_rejected", node_id=node.id, node_type=node.type)
        raise NotAComponentSetError(node.id, node.type)

    variants = [
        ComponentVariant(node_id=child.id, name=child.name, properties=parse_variant_name(child.name))
        for child in node.children
        if child.type == "COMPONENT"
    ]
    default = next(
        (v for v in variants if any(value.lower() == "default" for value in v.properties.values())),
        variants[0] if variants else None,
    )
    if default is not None:
        default.is_default = True

    logger.debug("variants_analyzed", node_id=node.id, variants=len(variants))
    return variants
