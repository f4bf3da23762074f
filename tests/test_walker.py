"""Tests for the extraction walker and the category extractors."""

from typing import Any

import pytest
from conftest import solid

from stylegraph.config import ExtractionSettings, StyleGraphSettings
from stylegraph.core.registry import TokenRegistry
from stylegraph.extractors.base import ExtractionContext, Extractor, rgba_to_hex
from stylegraph.extractors.walker import ExtractionWalker, extract_tokens
from stylegraph.models.nodes import DesignNode
from stylegraph.models.tokens import TokenCategory


def text_node(node_id: str, style: Any, **extra: Any) -> dict[str, Any]:
    return {"id": node_id, "name": node_id, "type": "TEXT", "style": style, **extra}


class RecordingExtractor(Extractor):
    """Remembers visited node ids and depths."""

    def __init__(self) -> None:
        super().__init__("recording")
        self.seen: list[tuple[str, int]] = []

    def extract(self, node: DesignNode, context: ExtractionContext) -> None:
        self.seen.append((node.id, context.depth))


class TestWalk:
    """Test traversal order and limits."""

    def test_card_document(self, registry: TokenRegistry, card_document: dict) -> None:
        """Test two identical cards collapse into one token per category."""
        result = ExtractionWalker(registry).walk(card_document)
        assert result.visited == ["0:0", "1:1", "1:1-title", "1:2", "1:2-title"]
        assert result.skipped == []
        assert sorted(t.category.value for t in registry.all()) == [
            "color", "decoration", "layout", "padding", "typography",
        ]
        assert all(t.usage_count == 2 for t in registry.all())
        assert result.style_refs["1:1"] == result.style_refs["1:2"]

    def test_depth_limit(self, registry: TokenRegistry, deep_tree: dict) -> None:
        """Test nodes below max depth are skipped with their subtree."""
        result = ExtractionWalker(registry).walk(deep_tree)
        assert result.visited == [f"n{level}" for level in range(6)]
        assert [(s.node_id, s.reason) for s in result.skipped] == [("n6", "depth_limit")]
        assert len(registry.by_category("color")) == 6

    def test_siblings_within_limit_processed(self, registry: TokenRegistry) -> None:
        """Test a too-deep branch does not stop its shallower siblings."""
        tree = {
            "id": "root",
            "children": [
                {"id": "a", "children": [{"id": "a1"}]},
                {"id": "b"},
            ],
        }
        recorder = RecordingExtractor()
        result = ExtractionWalker(registry, extractors=[recorder], max_depth=1).walk(tree)
        assert recorder.seen == [("root", 0), ("a", 1), ("b", 1)]
        assert [s.node_id for s in result.skipped] == ["a1"]

    def test_max_depth_zero(self, registry: TokenRegistry, deep_tree: dict) -> None:
        """Test a zero depth limit visits roots only."""
        result = ExtractionWalker(registry, max_depth=0).walk(deep_tree)
        assert result.visited == ["n0"]

    def test_hidden_nodes_skipped(self, registry: TokenRegistry) -> None:
        """Test invisible nodes and their subtrees are skipped."""
        tree = {
            "id": "root",
            "children": [
                {"id": "hidden", "visible": False, "fills": [solid(1, 0, 0)], "children": [{"id": "inner"}]},
                {"id": "shown", "fills": [solid(0, 1, 0)]},
            ],
        }
        result = ExtractionWalker(registry).walk(tree)
        assert result.visited == ["root", "shown"]
        assert [(s.node_id, s.reason) for s in result.skipped] == [("hidden", "hidden")]
        assert [t.properties["hex"] for t in registry.by_category("color")] == ["#00FF00"]

    def test_include_hidden(self, registry: TokenRegistry) -> None:
        """Test hidden nodes are visited on request."""
        tree = {"id": "root", "children": [{"id": "hidden", "visible": False}]}
        walker = ExtractionWalker(registry, settings=ExtractionSettings(include_hidden=True))
        assert walker.walk(tree).visited == ["root", "hidden"]

    def test_arguments_override_settings(self, registry: TokenRegistry) -> None:
        """Test explicit limits win over settings."""
        walker = ExtractionWalker(registry, max_depth=2, settings=ExtractionSettings(max_depth=7))
        assert walker.max_depth == 2
        assert not walker.include_hidden

    def test_multiple_roots(self, registry: TokenRegistry) -> None:
        """Test a list of roots is walked in order."""
        recorder = RecordingExtractor()
        ExtractionWalker(registry, extractors=[recorder]).walk([{"id": "r1"}, {"id": "r2"}])
        assert recorder.seen == [("r1", 0), ("r2", 0)]

    def test_disabled_extractor(self, registry: TokenRegistry) -> None:
        """Test disabled extractors are not called."""
        recorder = RecordingExtractor()
        recorder.enabled = False
        ExtractionWalker(registry, extractors=[recorder]).walk({"id": "r"})
        assert recorder.seen == []

    def test_register_replaces_by_name(self, registry: TokenRegistry) -> None:
        """Test registering an extractor name twice keeps one instance."""
        walker = ExtractionWalker(registry)
        names = [e.name for e in walker.extractors]
        assert names == ["color", "typography", "decoration", "layout", "component"]
        recorder = RecordingExtractor()
        recorder.name = "color"
        walker.register(recorder)
        assert [e.name for e in walker.extractors] == names
        assert walker.extractors[0] is recorder

    def test_input_not_mutated(self, registry: TokenRegistry, card_document: dict) -> None:
        """Test the raw payload is left unchanged."""
        root = DesignNode.from_raw(card_document)
        before = root.model_dump()
        ExtractionWalker(registry).walk(root)
        assert root.model_dump() == before

    @pytest.mark.parametrize("document", ["nonsense", None, 42, []])
    def test_non_node_input(self, registry: TokenRegistry, document: Any) -> None:
        """Test unusable documents produce an empty result."""
        result = ExtractionWalker(registry).walk(document)
        assert result.visited == []
        assert len(registry) == 0


class TestExtractors:
    """Test category extractors on single nodes."""

    def walk(self, registry: TokenRegistry, node: dict) -> None:
        ExtractionWalker(registry).walk(node)

    def test_rgba_to_hex(self) -> None:
        """Test channel conversion and upper-casing."""
        assert rgba_to_hex({"r": 0.2, "g": 0.4, "b": 0.8}) == "#3366CC"
        assert rgba_to_hex({"r": 1, "g": 1}) is None
        assert rgba_to_hex("red") is None

    def test_color_from_fills_and_strokes(self, registry: TokenRegistry) -> None:
        """Test fills come before strokes and hidden paints are ignored."""
        node = {
            "id": "s",
            "type": "RECTANGLE",
            "fills": [solid(1, 1, 1), solid(1, 0, 0, visible=False)],
            "strokes": [solid(0, 0, 0, opacity=0.5)],
        }
        self.walk(registry, node)
        colors = [t.properties for t in registry.by_category(TokenCategory.COLOR)]
        assert colors == [{"hex": "#FFFFFF"}, {"hex": "#000000", "opacity": 0.5}]

    def test_color_alpha_combines(self, registry: TokenRegistry) -> None:
        """Test paint opacity and color alpha multiply."""
        self.walk(registry, {"id": "s", "fills": [solid(0, 0, 1, a=0.5, opacity=0.5)]})
        assert registry.by_category("color")[0].properties == {"hex": "#0000FF", "opacity": 0.25}

    def test_typography_defaults(self, registry: TokenRegistry) -> None:
        """Test missing style values fall back to Roboto 16/400."""
        self.walk(registry, text_node("t", {}))
        props = registry.by_category("typography")[0].properties
        assert props["fontFamily"] == "Roboto"
        assert props["fontSize"] == 16
        assert props["fontWeight"] == 400
        assert "lineHeight" not in props

    def test_typography_full_style(self, registry: TokenRegistry) -> None:
        """Test line height, letter spacing and alignment are kept."""
        style = {
            "fontFamily": "Inter",
            "fontSize": 20,
            "fontWeight": 700,
            "lineHeightPx": 28,
            "letterSpacing": 0.5,
            "textAlignHorizontal": "CENTER",
        }
        self.walk(registry, text_node("t", style))
        props = registry.by_category("typography")[0].properties
        assert props["lineHeight"] == 28
        assert props["letterSpacing"] == 0.5
        assert props["textAlign"] == "CENTER"

    def test_typography_custom_defaults(self, registry: TokenRegistry) -> None:
        """Test configured defaults are used."""
        settings = ExtractionSettings(default_font_family="Inter", default_font_size=14, default_font_weight=500)
        ExtractionWalker(registry, settings=settings).walk(text_node("t", {"fontSize": "big"}))
        props = registry.by_category("typography")[0].properties
        assert (props["fontFamily"], props["fontSize"], props["fontWeight"]) == ("Inter", 14, 500)

    def test_text_without_style(self, registry: TokenRegistry) -> None:
        """Test TEXT nodes without a style object contribute no typography."""
        self.walk(registry, text_node("t", None))
        assert registry.by_category("typography") == []

    def test_decoration_gradient_and_radii(self, registry: TokenRegistry) -> None:
        """Test gradients, per-corner radii and shadows."""
        node = {
            "id": "d",
            "type": "FRAME",
            "fills": [
                {
                    "type": "GRADIENT_LINEAR",
                    "gradientStops": [
                        {"position": 0, "color": {"r": 1, "g": 0, "b": 0, "a": 1}},
                        {"position": 1, "color": {"r": 0, "g": 0, "b": 1, "a": 1}},
                    ],
                },
            ],
            "rectangleCornerRadii": [8, 8, 0, 0],
            "effects": [
                {
                    "type": "DROP_SHADOW",
                    "color": {"r": 0, "g": 0, "b": 0, "a": 0.25},
                    "offset": {"x": 0, "y": 4},
                    "radius": 8,
                },
                {"type": "LAYER_BLUR", "radius": 4},
            ],
        }
        self.walk(registry, node)
        props = registry.by_category("decoration")[0].properties
        assert props["fills"] == [
            {
                "type": "GRADIENT_LINEAR",
                "stops": [{"position": 0, "hex": "#FF0000"}, {"position": 1, "hex": "#0000FF"}],
            },
        ]
        assert props["cornerRadius"] == {"topLeft": 8, "topRight": 8, "bottomRight": 0, "bottomLeft": 0}
        shadow = props["effects"]["dropShadows"][0]
        assert shadow["hex"] == "#000000"
        assert shadow["opacity"] == 0.25
        assert shadow["offset"] == {"x": 0, "y": 4}
        assert props["effects"]["innerShadows"] == []

    def test_decoration_skips_text(self, registry: TokenRegistry) -> None:
        """Test TEXT nodes never produce decoration tokens."""
        self.walk(registry, text_node("t", {}, fills=[solid(0, 0, 0)]))
        assert registry.by_category("decoration") == []
        assert len(registry.by_category("color")) == 1

    def test_decoration_inner_shadow_only(self, registry: TokenRegistry) -> None:
        """Test an inner shadow alone is enough for a decoration token."""
        node = {
            "id": "i",
            "effects": [
                {"type": "INNER_SHADOW", "color": {"r": 0, "g": 0, "b": 0, "a": 0.5}, "radius": 2},
            ],
        }
        self.walk(registry, node)
        props = registry.by_category("decoration")[0].properties
        assert props["effects"]["dropShadows"] == []
        assert props["effects"]["innerShadows"][0]["opacity"] == 0.5
        assert "fills" not in props

    def test_layout_and_padding(self, registry: TokenRegistry) -> None:
        """Test auto-layout and padding submissions."""
        node = {
            "id": "l",
            "layoutMode": "HORIZONTAL",
            "itemSpacing": 8,
            "primaryAxisAlignItems": "CENTER",
            "paddingLeft": 12,
            "paddingRight": 12,
        }
        self.walk(registry, node)
        layout = registry.by_category("layout")[0].properties
        assert layout["layoutMode"] == "HORIZONTAL"
        assert layout["itemSpacing"] == 8
        assert layout["primaryAxisAlign"] == "CENTER"
        padding = registry.by_category("padding")[0].properties["padding"]
        assert (padding["top"], padding["right"], padding["bottom"], padding["left"]) == (0, 12, 0, 12)

    def test_no_layout_without_auto_layout(self, registry: TokenRegistry) -> None:
        """Test frames without auto-layout and padding contribute nothing."""
        self.walk(registry, {"id": "f", "layoutMode": "NONE", "itemSpacing": 8})
        assert len(registry) == 0

    def test_malformed_attributes(self, registry: TokenRegistry) -> None:
        """Test wrongly shaped attributes are ignored without raising."""
        node = {
            "id": "m",
            "type": "FRAME",
            "fills": "oops",
            "strokes": [42, {"type": "SOLID", "color": "red"}],
            "cornerRadius": "8px",
            "rectangleCornerRadii": [1, 2],
            "effects": [{"type": "DROP_SHADOW"}, "shadow"],
            "paddingTop": None,
            "paddingLeft": "4",
            "style": "bold",
            "children": [1, "x", None, text_node("ok", {"fontSize": 12})],
        }
        result = ExtractionWalker(registry).walk(node)
        assert result.visited == ["m", "ok"]
        assert [t.category for t in registry.all()] == [TokenCategory.TYPOGRAPHY]


class TestExtractTokens:
    """Test the one-shot helper."""

    def test_fresh_registry_per_run(self, card_document: dict) -> None:
        """Test every run owns its registry."""
        first = extract_tokens(card_document)
        second = extract_tokens(card_document)
        assert first.registry is not second.registry
        assert len(first.registry) == len(second.registry) == 5

    def test_names_assigned(self, card_document: dict) -> None:
        """Test tokens are named after the run."""
        run = extract_tokens(card_document)
        names = {t.category.value: t.name for t in run.registry.all()}
        assert names["color"] == "red"
        assert names["decoration"] == "redRadius8"
        assert names["layout"] == "columnGap12"
        assert names["padding"] == "inset16"
        assert names["typography"] == "bodyLarge"

    def test_auto_merge(self) -> None:
        """Test merges are applied when configured."""
        frames = [
            {"id": f"f{i}", "type": "FRAME", "cornerRadius": 8, "fills": [solid(v, v, v)]}
            for i, v in enumerate((0.1, 0.1, 0.1, 0.1, 0.1, 0.2, 0.2, 0.2))
        ]
        settings = StyleGraphSettings.model_validate({"merge": {"auto_apply": True}})
        run = extract_tokens({"id": "root", "children": frames}, settings=settings)
        assert len(run.merged) == 1
        base = run.merged[0]
        assert base.properties == {"cornerRadius": 8}
        assert base.usage_count == 8
        assert base.name == "surfaceRadius8Base"
        assert base in run.tokens

    def test_no_merge_by_default(self, card_document: dict) -> None:
        """Test merges are only proposed unless enabled."""
        assert extract_tokens(card_document).merged == []

    def test_existing_registry(self, registry: TokenRegistry, card_document: dict) -> None:
        """Test a passed registry is filled in place."""
        run = extract_tokens(card_document, registry=registry)
        assert run.registry is registry
        assert len(registry) == 5
