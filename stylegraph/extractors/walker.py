"""Depth-first extraction walk over a design tree.

The walker owns no tokens: every submission goes to the registry it was
given, so one registry can collect several walks and one walk never sees
another run's state unless the caller shares a registry on purpose.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from stylegraph.config import ExtractionSettings, StyleGraphSettings
from stylegraph.core.merger import StyleMerger
from stylegraph.core.naming import assign_names
from stylegraph.core.registry import TokenRegistry
from stylegraph.extractors.base import (
    ExtractionContext,
    ExtractionResult,
    Extractor,
    SkippedNode,
)
from stylegraph.extractors.color import ColorExtractor
from stylegraph.extractors.component import ComponentExtractor
from stylegraph.extractors.decoration import DecorationExtractor
from stylegraph.extractors.layout import LayoutExtractor
from stylegraph.extractors.typography import TypographyExtractor
from stylegraph.models.nodes import DesignNode, load_roots
from stylegraph.models.tokens import Token

logger = structlog.get_logger(__name__)

SKIP_DEPTH_LIMIT = "depth_limit"
SKIP_HIDDEN = "hidden"


def default_extractors() -> list[Extractor]:
    """Built-in extractors in run order; component reads refs recorded before it."""
    return [
        ColorExtractor(),
        TypographyExtractor(),
        DecorationExtractor(),
        LayoutExtractor(),
        ComponentExtractor(),
    ]


class ExtractionWalker:
    """Visits nodes depth-first and runs every enabled extractor on each.

    Args:
        registry: Registry receiving all submissions.
        extractors: Extractors in run order. Defaults to the built-in set.
        max_depth: Deepest visited level (root = 0). Overrides ``settings``.
        include_hidden: Visit ``visible: false`` nodes. Overrides ``settings``.
        settings: Extraction settings; defaults apply when omitted.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        extractors: Optional[list[Extractor]] = None,
        max_depth: Optional[int] = None,
        include_hidden: Optional[bool] = None,
        settings: Optional[ExtractionSettings] = None,
    ) -> None:
        settings = settings or ExtractionSettings()
        overrides: dict[str, Any] = {}
        if max_depth is not None:
            overrides["max_depth"] = max_depth
        if include_hidden is not None:
            overrides["include_hidden"] = include_hidden
        self.settings = settings.model_copy(update=overrides)
        self.registry = registry
        self.extractors: list[Extractor] = []
        for extractor in extractors if extractors is not None else default_extractors():
            self.register(extractor)

    @property
    def max_depth(self) -> int:
        return self.settings.max_depth

    @property
    def include_hidden(self) -> bool:
        return self.settings.include_hidden

    def register(self, extractor: Extractor) -> None:
        """Append an extractor, replacing a registered one with the same name in place."""
        for index, existing in enumerate(self.extractors):
            if existing.name == extractor.name:
                self.extractors[index] = extractor
                break
        else:
            self.extractors.append(extractor)
        logger.debug("extractor_registered", name=extractor.name)

    def walk(self, roots: Any) -> ExtractionResult:
        """Walk one or more roots and submit their styles to the registry.

        Args:
            roots: A DesignNode, a raw node or file payload, or a list of either.

        Returns:
            Refs recorded per node, visited node ids and skipped nodes.
        """
        context = ExtractionContext(registry=self.registry, settings=self.settings)
        result = ExtractionResult(style_refs=context.style_refs)
        for root in load_roots(roots):
            self._visit(root, 0, context, result)

        logger.info(
            "extraction_walk_completed",
            visited=len(result.visited),
            skipped=len(result.skipped),
            tokens=len(self.registry),
        )
        return result

    def _visit(
        self,
        node: DesignNode,
        depth: int,
        context: ExtractionContext,
        result: ExtractionResult,
    ) -> None:
        if depth > self.max_depth:
            self._skip(node, SKIP_DEPTH_LIMIT, result)
            return
        if not node.visible and not self.include_hidden:
            self._skip(node, SKIP_HIDDEN, result)
            return

        context.depth = depth
        result.visited.append(node.id)
        for extractor in self.extractors:
            if extractor.enabled:
                extractor.extract(node, context)

        for child in node.children:
            self._visit(child, depth + 1, context, result)

    @staticmethod
    def _skip(node: DesignNode, reason: str, result: ExtractionResult) -> None:
        result.skipped.append(SkippedNode(node_id=node.id, name=node.name, type=node.type, reason=reason))
        logger.debug("node_skipped", node_id=node.id, reason=reason)


@dataclass
class ExtractionRun:
    """Everything one ``extract_tokens`` call produced."""

    registry: TokenRegistry
    result: ExtractionResult
    merged: list[Token] = field(default_factory=list)

    @property
    def tokens(self) -> list[Token]:
        """Tokens not absorbed by a merge."""
        return self.registry.active()


def extract_tokens(
    document: Any,
    settings: Optional[StyleGraphSettings] = None,
    registry: Optional[TokenRegistry] = None,
) -> ExtractionRun:
    """Extract, deduplicate and name the style tokens of a design document.

    Args:
        document: Figma file payload, node dict, DesignNode, or a list of them.
        settings: Run settings. Defaults apply when omitted.
        registry: Registry to fill. A fresh one is created when omitted.

    Returns:
        The registry, the walk result and any merge bases applied.
    """
    settings = settings or StyleGraphSettings()
    if registry is None:
        registry = TokenRegistry(parent_threshold=settings.registry.parent_threshold)

    walker = ExtractionWalker(registry, settings=settings.extraction)
    result = walker.walk(document)

    merged: list[Token] = []
    if settings.merge.auto_apply:
        merged = StyleMerger.from_settings(registry, settings.merge).apply_merges()

    assign_names(registry.all())
    report = registry.report()
    logger.info(
        "extraction_completed",
        tokens=report.total_tokens,
        submissions=report.total_submissions,
        merged=len(merged),
        reduction=report.reduction,
    )
    return ExtractionRun(registry=registry, result=result, merged=merged)
