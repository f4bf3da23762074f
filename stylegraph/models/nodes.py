"""Design tree input model.

Nodes mirror the Figma REST node shape. Style attributes are kept raw
(``Any``) so a malformed attribute never fails loading; extractors check
shapes themselves and treat anything unexpected as no contribution.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class NodeKind(str, Enum):
    """Coarse kind tag derived from the node type."""

    CONTAINER = "container"
    TEXT = "text"
    SHAPE = "shape"
    COMPONENT = "component"


COMPONENT_TYPES = frozenset({"COMPONENT", "COMPONENT_SET", "INSTANCE"})
SHAPE_TYPES = frozenset({
    "RECTANGLE", "ELLIPSE", "VECTOR", "LINE", "STAR",
    "REGULAR_POLYGON", "BOOLEAN_OPERATION",
})


class DesignNode(BaseModel):
    """One node of the design tree. Treated as read-only by the core."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str = ""
    name: str = ""
    type: str = "FRAME"
    visible: bool = True
    children: list["DesignNode"] = Field(default_factory=list)

    fills: Any = None
    strokes: Any = None
    stroke_weight: Any = None
    effects: Any = None
    opacity: Any = None
    corner_radius: Any = None
    rectangle_corner_radii: Any = None
    padding_left: Any = None
    padding_right: Any = None
    padding_top: Any = None
    padding_bottom: Any = None
    item_spacing: Any = None
    layout_mode: Any = None
    primary_axis_align_items: Any = None
    counter_axis_align_items: Any = None
    style: Any = None
    characters: Any = None
    absolute_bounding_box: Any = None

    @field_validator("children", mode="before")
    @classmethod
    def _drop_malformed_children(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [child for child in value if isinstance(child, (dict, DesignNode))]

    @field_validator("id", "name", "type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("visible", mode="before")
    @classmethod
    def _coerce_visible(cls, value: Any) -> bool:
        return value is not False

    @property
    def kind(self) -> NodeKind:
        node_type = self.type.upper()
        if node_type == "TEXT":
            return NodeKind.TEXT
        if node_type in COMPONENT_TYPES:
            return NodeKind.COMPONENT
        if node_type in SHAPE_TYPES:
            return NodeKind.SHAPE
        return NodeKind.CONTAINER

    @classmethod
    def from_raw(cls, payload: Any) -> Optional["DesignNode"]:
        """Build a node tree from a Figma file response or a bare node dict.

        Returns:
            The root node, or None when the payload is not an object.
        """
        if isinstance(payload, DesignNode):
            return payload
        if not isinstance(payload, dict):
            return None
        if isinstance(payload.get("document"), dict):
            payload = payload["document"]
        return cls.model_validate(payload)


def load_roots(document: Any) -> list[DesignNode]:
    """Accept a node, a raw payload or a list of either and return root nodes."""
    items = document if isinstance(document, list) else [document]
    roots = []
    for item in items:
        node = DesignNode.from_raw(item)
        if node is not None:
            roots.append(node)
    return roots
