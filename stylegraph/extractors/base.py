"""Extractor protocol, per-run extraction context and paint helpers.

Extractors read raw style attributes off a ``DesignNode`` and submit typed
property models to the shared registry. They degrade gracefully: a node
without relevant attributes, or with attributes of the wrong shape,
contributes nothing and never raises.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import structlog

from stylegraph.config import ExtractionSettings
from stylegraph.core.normalizer import is_number
from stylegraph.core.registry import CategoryLike, TokenRegistry, coerce_category
from stylegraph.models.nodes import DesignNode
from stylegraph.models.properties import StyleProps

logger = structlog.get_logger(__name__)

# node id -> category -> token ids
StyleRefs = dict[str, dict[str, list[str]]]


def rgba_to_hex(color: Any) -> Optional[str]:
    """Convert a ``{r, g, b}`` color with 0..1 channels to ``#RRGGBB``.

    Returns:
        Upper-case hex string, or None when a channel is missing.
    """
    if not isinstance(color, dict):
        return None
    channels = []
    for key in ("r", "g", "b"):
        value = color.get(key)
        if not is_number(value):
            return None
        channels.append(max(0, min(255, round(value * 255))))
    return "#" + "".join(f"{c:02x}" for c in channels).upper()


def visible_paints(paints: Any) -> Iterator[dict[str, Any]]:
    if not isinstance(paints, list):
        return
    for paint in paints:
        if isinstance(paint, dict) and paint.get("visible") is not False:
            yield paint


def visible_solid_paints(paints: Any) -> Iterator[dict[str, Any]]:
    """Yield visible SOLID paints from a raw ``fills`` or ``strokes`` list."""
    for paint in visible_paints(paints):
        if paint.get("type", "SOLID") == "SOLID":
            yield paint


def paint_hex(paint: dict[str, Any]) -> Optional[str]:
    if isinstance(paint.get("hex"), str) and paint["hex"].strip():
        return paint["hex"].strip()
    return rgba_to_hex(paint.get("color"))


def paint_opacity(paint: dict[str, Any]) -> Optional[float]:
    """Combined paint opacity and color alpha, or None when fully opaque."""
    opacity = paint.get("opacity")
    opacity = float(opacity) if is_number(opacity) else 1.0
    color = paint.get("color")
    if isinstance(color, dict) and is_number(color.get("a")):
        opacity *= color["a"]
    opacity = round(opacity, 4)
    return None if opacity == 1.0 else opacity


@dataclass
class ExtractionContext:
    """State shared by all extractors during one walk.

    Attributes:
        registry: Registry receiving every submission of the run.
        settings: Extractor defaults and walk limits.
        depth: Depth of the node currently being visited (root = 0).
        style_refs: Token ids recorded per node and category.
    """

    registry: TokenRegistry
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    depth: int = 0
    style_refs: StyleRefs = field(default_factory=dict)

    @property
    def max_depth(self) -> int:
        return self.settings.max_depth

    def record(self, node_id: str, category: CategoryLike, token_id: str) -> None:
        """Remember that ``node_id`` resolved to ``token_id`` for ``category``."""
        key = coerce_category(category).value
        refs = self.style_refs.setdefault(node_id, {}).setdefault(key, [])
        if token_id not in refs:
            refs.append(token_id)

    def refs_for(self, node_id: str) -> dict[str, list[str]]:
        return self.style_refs.get(node_id, {})

    def submit(
        self,
        node: DesignNode,
        category: CategoryLike,
        properties: Union[StyleProps, dict[str, Any]],
    ) -> str:
        """Submit properties on behalf of ``node`` and record the resulting ref."""
        token_id = self.registry.submit(category, properties, context=node.id or None)
        self.record(node.id, category, token_id)
        return token_id


@dataclass
class SkippedNode:
    """A node the walk did not visit, with its subtree."""

    node_id: str
    name: str
    type: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"nodeId": self.node_id, "name": self.name, "type": self.type, "reason": self.reason}


@dataclass
class ExtractionResult:
    """Outcome of a walk over one or more root nodes."""

    style_refs: StyleRefs = field(default_factory=dict)
    visited: list[str] = field(default_factory=list)
    skipped: list[SkippedNode] = field(default_factory=list)


class Extractor(ABC):
    """Base class for category extractors.

    Subclasses read one style domain off a node and submit it.
    """

    def __init__(self, name: str, enabled: bool = True) -> None:
        self.name = name
        self.enabled = enabled

    @abstractmethod
    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        """Submit the node's properties for this extractor's category.

        Args:
            node: Node being visited.
            context: Shared run context (registry, settings, refs).
        """
