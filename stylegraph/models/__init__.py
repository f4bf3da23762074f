"""Data models: tokens, typed style properties and design nodes."""

from stylegraph.models.nodes import DesignNode, NodeKind, load_roots
from stylegraph.models.properties import (
    ColorProps,
    ComponentProps,
    CornerRadii,
    DecorationProps,
    Effects,
    Fill,
    LayoutProps,
    Offset,
    Padding,
    PaddingProps,
    Shadow,
    StyleProps,
    TextProps,
    TypographyProps,
    as_property_bag,
)
from stylegraph.models.tokens import (
    MergeCandidate,
    OptimizationReport,
    StyleRelationship,
    Token,
    TokenCategory,
)

__all__ = [
    "DesignNode",
    "NodeKind",
    "load_roots",
    "ColorProps",
    "ComponentProps",
    "CornerRadii",
    "DecorationProps",
    "Effects",
    "Fill",
    "LayoutProps",
    "Offset",
    "Padding",
    "PaddingProps",
    "Shadow",
    "StyleProps",
    "TextProps",
    "TypographyProps",
    "as_property_bag",
    "MergeCandidate",
    "OptimizationReport",
    "StyleRelationship",
    "Token",
    "TokenCategory",
]
