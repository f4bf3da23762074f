"""Category extractors and the extraction walker."""

from stylegraph.extractors.base import (
    ExtractionContext,
    ExtractionResult,
    Extractor,
    SkippedNode,
    rgba_to_hex,
    visible_solid_paints,
)
from stylegraph.extractors.color import ColorExtractor
from stylegraph.extractors.component import (
    ComponentExtractor,
    ComponentVariant,
    analyze_component_set,
)
from stylegraph.extractors.decoration import DecorationExtractor
from stylegraph.extractors.layout import LayoutExtractor
from stylegraph.extractors.typography import TypographyExtractor
from stylegraph.extractors.walker import (
    ExtractionRun,
    ExtractionWalker,
    default_extractors,
    extract_tokens,
)

__all__ = [
    "ExtractionContext",
    "ExtractionResult",
    "Extractor",
    "SkippedNode",
    "rgba_to_hex",
    "visible_solid_paints",
    "ColorExtractor",
    "ComponentExtractor",
    "ComponentVariant",
    "analyze_component_set",
    "DecorationExtractor",
    "LayoutExtractor",
    "TypographyExtractor",
    "ExtractionRun",
    "ExtractionWalker",
    "default_extractors",
    "extract_tokens",
]
