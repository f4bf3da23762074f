"""Shared fixtures: registries and raw design-node payloads."""

from typing import Any

import pytest

from stylegraph.core.registry import TokenRegistry


def solid(r: float, g: float, b: float, a: float = 1.0, **extra: Any) -> dict[str, Any]:
    """Build a raw Figma SOLID paint."""
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}, **extra}


@pytest.fixture
def registry() -> TokenRegistry:
    """Create an empty registry."""
    return TokenRegistry()


@pytest.fixture
def card_document() -> dict[str, Any]:
    """A Figma file payload with two identical cards and a heading."""
    def card(node_id: str) -> dict[str, Any]:
        return {
            "id": node_id,
            "name": "Card",
            "type": "FRAME",
            "fills": [solid(1, 0, 0)],
            "cornerRadius": 8,
            "layoutMode": "VERTICAL",
            "itemSpacing": 12,
            "paddingTop": 16,
            "paddingRight": 16,
            "paddingBottom": 16,
            "paddingLeft": 16,
            "children": [
                {
                    "id": f"{node_id}-title",
                    "name": "Title",
                    "type": "TEXT",
                    "characters": "Hello",
                    "style": {"fontFamily": "Roboto", "fontSize": 16, "fontWeight": 400},
                },
            ],
        }

    return {
        "name": "Design",
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [card("1:1"), card("1:2")],
        },
    }


@pytest.fixture
def deep_tree() -> dict[str, Any]:
    """A chain of frames eight levels deep, each with a distinct fill."""
    node: dict[str, Any] = {"id": "n8", "name": "n8", "type": "FRAME", "fills": [solid(0, 0, 0.8)]}
    for level in range(7, -1, -1):
        node = {
            "id": f"n{level}",
            "name": f"n{level}",
            "type": "FRAME",
            "fills": [solid(level / 10, 0, 0)],
            "children": [node],
        }
    return node


@pytest.fixture
def button_component() -> dict[str, Any]:
    """A COMPONENT with decoration, padding and a text label."""
    return {
        "id": "5:1",
        "name": "Button",
        "type": "COMPONENT",
        "fills": [solid(0.2, 0.4, 0.8)],
        "cornerRadius": 4,
        "paddingTop": 8,
        "paddingBottom": 8,
        "paddingLeft": 16,
        "paddingRight": 16,
        "children": [
            {
                "id": "5:2",
                "name": "Label",
                "type": "TEXT",
                "characters": "Submit",
                "style": {"fontFamily": "Inter", "fontSize": 14, "fontWeight": 600},
            },
        ],
    }
