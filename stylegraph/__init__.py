"""stylegraph: deduplicated, named design tokens from design trees."""

from stylegraph.config import StyleGraphSettings, load_settings
from stylegraph.core import StyleMerger, TokenRegistry, canonical_hash, semantic_hash
from stylegraph.errors import (
    ConfigError,
    DuplicateTokenError,
    InvalidCategoryError,
    NotAComponentSetError,
    PreconditionError,
    StyleGraphError,
)
from stylegraph.export import snapshot, to_yaml
from stylegraph.extractors import (
    ExtractionRun,
    ExtractionWalker,
    analyze_component_set,
    extract_tokens,
)
from stylegraph.log_setup import configure_logging
from stylegraph.models import DesignNode, MergeCandidate, Token, TokenCategory

__version__ = "0.1.0"

__all__ = [
    "StyleGraphSettings",
    "load_settings",
    "StyleMerger",
    "TokenRegistry",
    "canonical_hash",
    "semantic_hash",
    "ConfigError",
    "DuplicateTokenError",
    "InvalidCategoryError",
    "NotAComponentSetError",
    "PreconditionError",
    "StyleGraphError",
    "snapshot",
    "to_yaml",
    "ExtractionRun",
    "ExtractionWalker",
    "analyze_component_set",
    "extract_tokens",
    "configure_logging",
    "DesignNode",
    "MergeCandidate",
    "Token",
    "TokenCategory",
]
