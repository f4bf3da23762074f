"""Typed per-category style properties.

Each model has explicit optional fields and renders to the camelCase
property bag that the hasher, normalizer and similarity engine operate on.
The registry accepts either one of these models or a plain mapping.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StyleProps(BaseModel):
    """Base for category property models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_bag(self) -> dict[str, Any]:
        """Return the property bag with unset fields removed."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Fill(StyleProps):
    """A single paint; solid paints carry ``hex``, gradients carry ``stops``."""

    hex: Optional[str] = None
    opacity: Optional[float] = None
    type: Optional[str] = None
    stops: Optional[list[dict[str, Any]]] = None


class Offset(StyleProps):
    x: float = 0.0
    y: float = 0.0


class Shadow(StyleProps):
    hex: str
    opacity: float = 1.0
    offset: Offset = Field(default_factory=Offset)
    radius: float = 0.0
    spread: Optional[float] = None


class Effects(StyleProps):
    drop_shadows: list[Shadow] = Field(default_factory=list)
    inner_shadows: list[Shadow] = Field(default_factory=list)


class CornerRadii(StyleProps):
    top_left: float = 0.0
    top_right: float = 0.0
    bottom_left: float = 0.0
    bottom_right: float = 0.0


class Padding(StyleProps):
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class ColorProps(StyleProps):
    hex: str
    opacity: Optional[float] = None


class TypographyProps(StyleProps):
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    text_align: Optional[str] = None


class TextProps(TypographyProps):
    """Text style attached to a component's text child."""


class DecorationProps(StyleProps):
    fills: Optional[list[Fill]] = None
    corner_radius: Optional[Union[float, CornerRadii]] = None
    effects: Optional[Effects] = None


class PaddingProps(StyleProps):
    padding: Padding


class LayoutProps(StyleProps):
    layout_mode: Optional[str] = None
    item_spacing: Optional[float] = None
    primary_axis_align: Optional[str] = None
    counter_axis_align: Optional[str] = None


class ComponentProps(StyleProps):
    style_refs: dict[str, Any] = Field(default_factory=dict)
    child_count: Optional[int] = None


def as_property_bag(properties: Any) -> dict[str, Any]:
    """Return a fresh property bag for a typed model or a mapping.

    Raises:
        TypeError: If ``properties`` is neither.
    """
    if isinstance(properties, StyleProps):
        return properties.to_bag()
    if isinstance(properties, dict):
        return _plain_copy(properties)
    if hasattr(properties, "items"):
        return _plain_copy(dict(properties.items()))
    raise TypeError(f"Style properties must be a mapping or StyleProps, got {type(properties).__name__}")


def _plain_copy(value: Any) -> Any:
    if isinstance(value, StyleProps):
        return value.to_bag()
    if isinstance(value, dict):
        return {str(k): _plain_copy(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain_copy(v) for v in value]
    return value
