"""Token registry: deduplicating store for style tokens.

Each extraction run constructs its own ``TokenRegistry`` and passes it by
reference to the walker and the merge engine. A submission resolves in
three steps:

  1. exact hash: identical property bag in any key order
  2. semantic hash: same load-bearing fields after normalization, within
     the same category
  3. otherwise a new token, linked to the most similar existing token when
     similarity reaches the parent threshold
"""

from collections import defaultdict
from collections.abc import Iterator
from typing import Any, Optional, Union

import structlog

from stylegraph.core.hashing import canonical_hash
from stylegraph.core.normalizer import semantic_hash
from stylegraph.core.similarity import (
    PARENT_THRESHOLD,
    find_potential_parent,
    similarity,
    variance,
)
from stylegraph.errors import DuplicateTokenError, InvalidCategoryError
from stylegraph.models.properties import StyleProps, as_property_bag
from stylegraph.models.tokens import (
    OptimizationReport,
    StyleRelationship,
    Token,
    TokenCategory,
)

logger = structlog.get_logger(__name__)

CategoryLike = Union[TokenCategory, str]


def coerce_category(category: CategoryLike) -> TokenCategory:
    """Return the TokenCategory for an enum member or its string value."""
    if isinstance(category, TokenCategory):
        return category
    try:
        return TokenCategory(str(category).lower())
    except ValueError:
        raise InvalidCategoryError(category) from None


class TokenRegistry:
    """Caller-owned store of tokens with exact and semantic hash indices.

    Attributes:
        parent_threshold: Minimum similarity for linking a new token to a parent.
    """

    def __init__(self, parent_threshold: float = PARENT_THRESHOLD) -> None:
        self.parent_threshold = parent_threshold
        self._tokens: dict[str, Token] = {}
        self._by_hash: dict[str, str] = {}
        self._by_semantic: dict[tuple[TokenCategory, str], str] = {}
        self._counters: dict[TokenCategory, int] = defaultdict(int)
        self._submissions = 0
        self._exact_hits = 0
        self._semantic_hits = 0

    # ── Submission ────────────────────────────────────────────────

    def submit(
        self,
        category: CategoryLike,
        properties: Union[dict[str, Any], StyleProps],
        context: Optional[str] = None,
    ) -> str:
        """Register a property bag and return the id of the token it resolves to.

        Args:
            category: Style domain of the bag.
            properties: Property bag or typed category model.
            context: Optional label of the submitting site, usually a node id.

        Returns:
            Id of an existing token (exact or semantic match) or a new one.

        Raises:
            InvalidCategoryError: If the category is unknown.
        """
        cat = coerce_category(category)
        bag = as_property_bag(properties)
        self._submissions += 1

        exact = canonical_hash(bag)
        existing_id = self._by_hash.get(exact)
        if existing_id is not None:
            token = self._tokens[existing_id]
            self._record_hit(token, context)
            self._exact_hits += 1
            logger.debug("token_exact_match", token_id=token.id, usage=token.usage_count)
            return token.id

        semantic = semantic_hash(bag)
        if semantic is not None:
            existing_id = self._by_semantic.get((cat, semantic))
            if existing_id is not None:
                token = self._tokens[existing_id]
                self._record_hit(token, context)
                self._semantic_hits += 1
                logger.debug("token_semantic_match", token_id=token.id, usage=token.usage_count)
                return token.id

        parent = find_potential_parent(bag, self._tokens.values(), self.parent_threshold)
        token = Token(
            id=self.reserve_id(cat),
            category=cat,
            properties=bag,
            exact_hash=exact,
            semantic_hash=semantic,
            parent_id=parent.id if parent else None,
            variance=variance(bag, parent.properties) if parent else 0.0,
        )
        token.add_source(context)
        self._store(token)

        if parent is not None:
            parent.child_ids.append(token.id)
            logger.debug(
                "token_parent_linked",
                token_id=token.id,
                parent_id=parent.id,
                variance=round(token.variance, 3),
            )

        logger.info(
            "token_created",
            token_id=token.id,
            category=cat.value,
            parent_id=token.parent_id,
            total_tokens=len(self._tokens),
        )
        return token.id

    def _record_hit(self, token: Token, context: Optional[str]) -> None:
        token.usage_count += 1
        token.add_source(context)

    def _store(self, token: Token) -> None:
        self._tokens[token.id] = token
        self._by_hash[token.exact_hash] = token.id
        if token.semantic_hash is not None:
            self._by_semantic.setdefault((token.category, token.semantic_hash), token.id)

    def reserve_id(self, category: CategoryLike, prefix: Optional[str] = None) -> str:
        """Hand out a fresh id from the category's monotonic counter.

        Ids look like ``decoration_3`` or, with a prefix, ``decoration_base_4``.
        """
        cat = coerce_category(category)
        self._counters[cat] += 1
        infix = f"{prefix}_" if prefix else ""
        return f"{cat.value}_{infix}{self._counters[cat]}"

    def add_merged(self, token: Token) -> Token:
        """Insert a merge-synthesized base token and mark its members absorbed.

        Members stay in the registry; each gets ``superseded_by`` pointing at
        the base.

        Raises:
            DuplicateTokenError: If a token with the same exact hash exists.
        """
        existing_id = self._by_hash.get(token.exact_hash)
        if existing_id is not None:
            logger.warning("merge_base_duplicate", token_id=token.id, existing_id=existing_id)
            raise DuplicateTokenError(token.id, existing_id)

        self._store(token)
        for member_id in token.child_ids:
            member = self._tokens.get(member_id)
            if member is not None:
                member.superseded_by = token.id

        logger.info(
            "merge_base_added",
            token_id=token.id,
            members=len(token.child_ids),
            usage=token.usage_count,
        )
        return token

    def reset(self) -> None:
        """Drop every token, index and counter."""
        self._tokens.clear()
        self._by_hash.clear()
        self._by_semantic.clear()
        self._counters.clear()
        self._submissions = 0
        self._exact_hits = 0
        self._semantic_hits = 0
        logger.debug("registry_reset")

    # ── Queries ───────────────────────────────────────────────────

    def get(self, token_id: str) -> Optional[Token]:
        return self._tokens.get(token_id)

    def all(self) -> list[Token]:
        """All tokens in insertion order."""
        return list(self._tokens.values())

    def active(self) -> list[Token]:
        """Tokens not absorbed by an applied merge."""
        return [t for t in self._tokens.values() if not t.absorbed]

    def by_category(self, category: CategoryLike) -> list[Token]:
        cat = coerce_category(category)
        return [t for t in self._tokens.values() if t.category == cat]

    def top_used(self, n: int, category: Optional[CategoryLike] = None) -> list[Token]:
        """Most used tokens first; ties keep insertion order."""
        tokens = self.by_category(category) if category is not None else self.all()
        return sorted(tokens, key=lambda t: t.usage_count, reverse=True)[: max(n, 0)]

    def find_by_hash(self, exact_hash: str) -> Optional[Token]:
        token_id = self._by_hash.get(exact_hash)
        return self._tokens[token_id] if token_id is not None else None

    def find_similar(
        self,
        properties: Union[dict[str, Any], StyleProps],
        threshold: float = PARENT_THRESHOLD,
    ) -> list[str]:
        """Ids of tokens whose similarity to ``properties`` lies in ``[threshold, 1)``."""
        bag = as_property_bag(properties)
        return [
            t.id
            for t in self._tokens.values()
            if threshold <= similarity(bag, t.properties) < 1.0
        ]

    def hierarchy(self) -> dict[str, StyleRelationship]:
        return {
            t.id: StyleRelationship(
                parent_id=t.parent_id,
                child_ids=list(t.child_ids),
                variance=t.variance,
            )
            for t in self._tokens.values()
        }

    def usage_stats(self) -> dict[str, int]:
        return {t.id: t.usage_count for t in self._tokens.values()}

    def depth_of(self, token_id: str) -> int:
        """Length of the parent chain above a token."""
        depth = 0
        seen = {token_id}
        current = self._tokens.get(token_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            depth += 1
            current = self._tokens.get(current.parent_id)
        return depth

    def report(self) -> OptimizationReport:
        """Summarize deduplication, hierarchy and merge state."""
        tokens = list(self._tokens.values())
        merged = sum(1 for t in tokens if t.is_merged)
        submitted = len(tokens) - merged
        reduction = 1 - submitted / self._submissions if self._submissions else 0.0
        return OptimizationReport(
            total_submissions=self._submissions,
            total_tokens=len(tokens),
            exact_matches=self._exact_hits,
            semantic_matches=self._semantic_hits,
            variants=sum(1 for t in tokens if t.parent_id is not None),
            hierarchy_depth=max((self.depth_of(t.id) for t in tokens), default=0),
            merged_tokens=merged,
            absorbed_tokens=sum(1 for t in tokens if t.absorbed),
            reduction=round(reduction, 4),
        )

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(list(self._tokens.values()))

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._tokens
