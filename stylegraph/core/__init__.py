"""Deduplication core: hashing, normalization, similarity, registry and merging."""

from stylegraph.core.hashing import canonical_hash
from stylegraph.core.merger import StyleMerger
from stylegraph.core.naming import assign_names, suggest_name, to_camel_case, to_pascal_case
from stylegraph.core.normalizer import normalize, semantic_hash, semantic_key
from stylegraph.core.registry import TokenRegistry, coerce_category
from stylegraph.core.rendering import flutter_code, render_token
from stylegraph.core.similarity import (
    compatibility,
    find_potential_parent,
    similarity,
    values_similar,
    variance,
)

__all__ = [
    "canonical_hash",
    "StyleMerger",
    "assign_names",
    "suggest_name",
    "to_camel_case",
    "to_pascal_case",
    "normalize",
    "semantic_hash",
    "semantic_key",
    "TokenRegistry",
    "coerce_category",
    "flutter_code",
    "render_token",
    "compatibility",
    "find_potential_parent",
    "similarity",
    "values_similar",
    "variance",
]
