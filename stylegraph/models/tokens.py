"""Token data model: categories, tokens, merge candidates and reports."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class TokenCategory(str, Enum):
    """Style domain a token belongs to."""

    COLOR = "color"
    TYPOGRAPHY = "typography"
    COMPONENT = "component"
    DECORATION = "decoration"
    TEXT = "text"
    LAYOUT = "layout"
    PADDING = "padding"


class Token(BaseModel):
    """A deduplicated, named representation of one style-property bag.

    Attributes:
        id: Unique within a run, never reused.
        category: Style domain of the token.
        properties: Canonical property bag the token represents.
        exact_hash: Order-independent fingerprint of ``properties``.
        semantic_hash: Fingerprint of the normalized load-bearing fields,
            ``None`` when the bag has no load-bearing field.
        usage_count: Submissions that resolved to this token, creation included.
        parent_id: Token this one was derived from by similarity.
        child_ids: Tokens that named this one as parent, or were absorbed by a merge.
        variance: Drift from the parent (0 without parent and for merge bases).
        sources: Submission contexts (usually node ids) that resolved here.
        is_merged: True for merge-synthesized base tokens.
        superseded_by: Id of the merge base that absorbed this token.
        name: Human-readable name assigned by the naming pass.
    """

    id: str
    category: TokenCategory
    properties: dict[str, Any] = Field(default_factory=dict)
    exact_hash: str
    semantic_hash: Optional[str] = None
    usage_count: int = Field(default=1, ge=0)
    parent_id: Optional[str] = None
    child_ids: list[str] = Field(default_factory=list)
    variance: float = Field(default=0.0, ge=0.0)
    sources: list[str] = Field(default_factory=list)
    is_merged: bool = False
    superseded_by: Optional[str] = None
    name: Optional[str] = None

    @property
    def absorbed(self) -> bool:
        """True once an applied merge has absorbed this token."""
        return self.superseded_by is not None

    def add_source(self, context: Optional[str]) -> None:
        if context and context not in self.sources:
            self.sources.append(context)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-safe dictionary with camelCase keys."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "properties": copy.deepcopy(self.properties),
            "exactHash": self.exact_hash,
            "semanticHash": self.semantic_hash,
            "usageCount": self.usage_count,
            "parentId": self.parent_id,
            "childIds": list(self.child_ids),
            "variance": self.variance,
            "sources": list(self.sources),
            "isMerged": self.is_merged,
            "supersededBy": self.superseded_by,
        }


class StyleRelationship(BaseModel):
    """Hierarchy view of a single token."""

    parent_id: Optional[str] = None
    child_ids: list[str] = Field(default_factory=list)
    variance: float = 0.0


class OptimizationReport(BaseModel):
    """Summary statistics of a registry after (or during) a run.

    Attributes:
        total_submissions: Every ``submit`` call.
        total_tokens: Tokens in the registry, merge bases included.
        exact_matches: Submissions resolved by exact hash.
        semantic_matches: Submissions resolved by semantic hash.
        variants: Tokens linked to a parent.
        hierarchy_depth: Longest parent chain.
        merged_tokens: Merge-synthesized base tokens.
        absorbed_tokens: Tokens superseded by a merge base.
        reduction: ``1 - tokens / submissions`` over submitted tokens.
    """

    total_submissions: int = 0
    total_tokens: int = 0
    exact_matches: int = 0
    semantic_matches: int = 0
    variants: int = 0
    hierarchy_depth: int = 0
    merged_tokens: int = 0
    absorbed_tokens: int = 0
    reduction: float = 0.0


@dataclass
class MergeCandidate:
    """A proposed consolidation of two or more tokens into one base token."""

    styles: list[Token]
    common_properties: dict[str, Any]
    differences: dict[str, list[Any]] = field(default_factory=dict)
    merge_score: float = 0.0

    @property
    def token_ids(self) -> list[str]:
        return [t.id for t in self.styles]

    @property
    def category(self) -> TokenCategory:
        return self.styles[0].category

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokenIds": self.token_ids,
            "category": self.category.value,
            "commonProperties": self.common_properties,
            "differences": self.differences,
            "mergeScore": round(self.merge_score, 4),
        }
