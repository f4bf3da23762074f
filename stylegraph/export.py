"""Read-only views of a registry for downstream code generators."""

from typing import Any

import yaml

from stylegraph.core.registry import TokenRegistry
from stylegraph.core.rendering import render_token


def snapshot(registry: TokenRegistry, include_absorbed: bool = True) -> dict[str, Any]:
    """Return a JSON-safe view of the registry.

    Args:
        registry: Registry to describe.
        include_absorbed: Keep tokens absorbed by an applied merge.

    Returns:
        Mapping with ``tokens`` grouped by category (each with its
        ``flutterCode``, None for layout and component), ``hierarchy``,
        ``usage`` and ``report``.
    """
    tokens = registry.all() if include_absorbed else registry.active()
    grouped: dict[str, list[dict[str, Any]]] = {}
    for token in tokens:
        entry = token.to_dict()
        entry["flutterCode"] = render_token(token)
        grouped.setdefault(token.category.value, []).append(entry)

    included = {t.id for t in tokens}
    hierarchy = {
        token_id: {
            "parentId": rel.parent_id,
            "childIds": rel.child_ids,
            "variance": round(rel.variance, 4),
        }
        for token_id, rel in registry.hierarchy().items()
        if token_id in included
    }
    return {
        "tokens": grouped,
        "hierarchy": hierarchy,
        "usage": {k: v for k, v in registry.usage_stats().items() if k in included},
        "report": registry.report().model_dump(),
    }


def to_yaml(registry: TokenRegistry, include_absorbed: bool = True) -> str:
    """Render :func:`snapshot` as YAML text."""
    return yaml.safe_dump(
        snapshot(registry, include_absorbed=include_absorbed),
        sort_keys=False,
        allow_unicode=True,
    )
