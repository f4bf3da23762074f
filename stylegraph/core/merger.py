"""Hierarchy and merge engine.

Finds groups of same-category tokens that share enough properties to be
expressed as one base token plus per-instance overrides, scores them and,
on request, registers the synthesized base tokens.
"""

import copy
from collections.abc import Iterable, Sequence
from itertools import combinations
from typing import Any, Optional

import structlog

from stylegraph.config import MergeSettings
from stylegraph.core.hashing import canonical_hash
from stylegraph.core.normalizer import semantic_hash
from stylegraph.core.registry import TokenRegistry
from stylegraph.core.similarity import compatibility, similarity, values_similar
from stylegraph.models.tokens import MergeCandidate, Token, TokenCategory

logger = structlog.get_logger(__name__)

MAX_DIFFERENCE_PENALTY = 0.3


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class StyleMerger:
    """Scores and applies merges over the tokens of one registry.

    Args:
        registry: Registry whose tokens are analyzed and that hands out ids.
        compatibility_threshold: ``can_merge`` needs compatibility above this.
        benefit_threshold: ``can_merge`` needs merge benefit above this.
        usage_divisor: Usage sum at which the usage term of the benefit saturates.
        min_score: Default cut-off for merge candidates.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        compatibility_threshold: float = 0.7,
        benefit_threshold: float = 0.5,
        usage_divisor: float = 20.0,
        min_score: float = 0.6,
    ) -> None:
        self.registry = registry
        self.compatibility_threshold = compatibility_threshold
        self.benefit_threshold = benefit_threshold
        self.usage_divisor = usage_divisor
        self.min_score = min_score

    @classmethod
    def from_settings(cls, registry: TokenRegistry, settings: MergeSettings) -> "StyleMerger":
        return cls(
            registry,
            compatibility_threshold=settings.compatibility_threshold,
            benefit_threshold=settings.benefit_threshold,
            usage_divisor=settings.usage_divisor,
            min_score=settings.min_score,
        )

    # ── Pairwise checks ───────────────────────────────────────────

    def merge_benefit(self, t1: Token, t2: Token) -> float:
        """Average of saturated combined usage and property similarity."""
        usage_term = min(1.0, (t1.usage_count + t2.usage_count) / self.usage_divisor)
        return (usage_term + similarity(t1.properties, t2.properties)) / 2

    def can_merge(self, t1: Token, t2: Token) -> bool:
        if t1.category != t2.category:
            return False
        if compatibility(t1.properties, t2.properties) <= self.compatibility_threshold:
            return False
        return self.merge_benefit(t1, t2) > self.benefit_threshold

    # ── Group analysis ────────────────────────────────────────────

    @staticmethod
    def extract_common_properties(tokens: Sequence[Token]) -> dict[str, Any]:
        """Keys present with a similar value in every token.

        Values are taken from the first token.
        """
        if not tokens:
            return {}
        first, rest = tokens[0], tokens[1:]
        common: dict[str, Any] = {}
        for key, value in first.properties.items():
            if all(key in t.properties and values_similar(value, t.properties[key]) for t in rest):
                common[key] = value
        return common

    @staticmethod
    def extract_differences(tokens: Sequence[Token], common: dict[str, Any]) -> dict[str, list[Any]]:
        """Distinct observed values per key outside ``common``, in first-seen order."""
        differences: dict[str, list[Any]] = {}
        seen: dict[str, set[str]] = {}
        for token in tokens:
            for key, value in token.properties.items():
                if key in common:
                    continue
                values = differences.setdefault(key, [])
                fingerprints = seen.setdefault(key, set())
                fingerprint = canonical_hash(value)
                if fingerprint not in fingerprints:
                    fingerprints.add(fingerprint)
                    values.append(value)
        return differences

    @staticmethod
    def merge_score(
        tokens: Sequence[Token],
        common: dict[str, Any],
        differences: dict[str, list[Any]],
    ) -> float:
        """``clamp01(commonRatio + usageBonus - differencePenalty)``.

        ``commonRatio`` is common keys over the key union, ``usageBonus`` is
        summed usage over ``count * 10`` and the penalty is a tenth per
        differing key, capped at 0.3.
        """
        if not tokens:
            return 0.0
        union: set[str] = set()
        for token in tokens:
            union.update(token.properties)
        if not union:
            return 0.0
        common_ratio = len(common) / len(union)
        usage_bonus = sum(t.usage_count for t in tokens) / (len(tokens) * 10)
        penalty = min(len(differences) / 10, MAX_DIFFERENCE_PENALTY)
        return _clamp01(common_ratio + usage_bonus - penalty)

    def build_candidate(self, tokens: Sequence[Token]) -> MergeCandidate:
        common = self.extract_common_properties(tokens)
        differences = self.extract_differences(tokens, common)
        return MergeCandidate(
            styles=list(tokens),
            common_properties=common,
            differences=differences,
            merge_score=self.merge_score(tokens, common, differences),
        )

    def find_merge_candidates(
        self,
        tokens: Optional[Iterable[Token]] = None,
        min_score: Optional[float] = None,
    ) -> list[MergeCandidate]:
        """Score every same-category pair, and whole groups of three or more.

        Args:
            tokens: Tokens to analyze. Defaults to the registry's active tokens.
            min_score: Cut-off; defaults to the merger's ``min_score``.

        Returns:
            Candidates at or above the cut-off, best first.
        """
        threshold = self.min_score if min_score is None else min_score
        pool = self.registry.active() if tokens is None else list(tokens)

        groups: dict[TokenCategory, list[Token]] = {}
        for token in pool:
            groups.setdefault(token.category, []).append(token)

        candidates: list[MergeCandidate] = []
        for group in groups.values():
            if len(group) < 2:
                continue
            subsets: list[Sequence[Token]] = list(combinations(group, 2))
            if len(group) >= 3:
                subsets.append(group)
            for subset in subsets:
                candidate = self.build_candidate(subset)
                if candidate.merge_score >= threshold:
                    candidates.append(candidate)

        candidates.sort(key=lambda c: c.merge_score, reverse=True)
        logger.debug(
            "merge_candidates_found",
            tokens=len(pool),
            candidates=len(candidates),
            min_score=threshold,
        )
        return candidates

    # ── Synthesis ─────────────────────────────────────────────────

    def merge_styles(self, tokens: Sequence[Token]) -> Optional[Token]:
        """Synthesize an unregistered base token for ``tokens``.

        Returns:
            The base token, or None for fewer than two tokens, mixed
            categories, or an empty common-property set.
        """
        if len(tokens) < 2:
            return None
        category = tokens[0].category
        if any(t.category != category for t in tokens):
            return None
        common = self.extract_common_properties(tokens)
        if not common:
            return None

        return Token(
            id=self.registry.reserve_id(category, prefix="base"),
            category=category,
            properties=copy.deepcopy(common),
            exact_hash=canonical_hash(common),
            semantic_hash=semantic_hash(common),
            usage_count=sum(t.usage_count for t in tokens),
            child_ids=[t.id for t in tokens],
            variance=0.0,
            is_merged=True,
        )

    def apply_merges(self, min_score: Optional[float] = None) -> list[Token]:
        """Greedily register base tokens for the best non-overlapping candidates.

        Returns:
            Base tokens added to the registry, in application order.
        """
        applied: list[Token] = []
        for candidate in self.find_merge_candidates(min_score=min_score):
            if any(t.absorbed for t in candidate.styles):
                continue
            if self.registry.find_by_hash(canonical_hash(candidate.common_properties)):
                logger.info(
                    "merge_skipped_duplicate",
                    token_ids=candidate.token_ids,
                    score=round(candidate.merge_score, 3),
                )
                continue
            base = self.merge_styles(candidate.styles)
            if base is None:
                continue
            self.registry.add_merged(base)
            applied.append(base)
            logger.info(
                "merge_applied",
                token_id=base.id,
                members=base.child_ids,
                score=round(candidate.merge_score, 3),
            )
        return applied
