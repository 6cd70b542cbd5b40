"""
Screen document IR types.

A screen is a JSON document `{version, route, meta?, tree}` whose tree is a
recursive Node. JSON keys are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# A style value: a raw value or a token reference ("$color.primary")
StyleValue = str | int | float


class SpecModel(BaseModel):
    """Base for all document models: camelCase aliases, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON document shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# =============================================================================
# Style
# =============================================================================


class NodeStyle(SpecModel):
    """Typed visual property bag. Only these properties are modeled."""

    # Typography
    font_size: StyleValue | None = None
    font_weight: StyleValue | None = None
    font_style: Literal["normal", "italic"] | None = None
    line_height: StyleValue | None = None
    letter_spacing: StyleValue | None = None
    text_align: Literal["left", "center", "right", "justify"] | None = None
    text_decoration: Literal["none", "underline", "line-through"] | None = None
    text_transform: Literal["none", "uppercase", "lowercase", "capitalize"] | None = None
    color: StyleValue | None = None

    # Sizing
    width: StyleValue | None = None
    height: StyleValue | None = None
    min_width: StyleValue | None = None
    max_width: StyleValue | None = None
    min_height: StyleValue | None = None
    max_height: StyleValue | None = None

    # Spacing (per-side)
    padding_top: StyleValue | None = None
    padding_right: StyleValue | None = None
    padding_bottom: StyleValue | None = None
    padding_left: StyleValue | None = None
    margin_top: StyleValue | None = None
    margin_right: StyleValue | None = None
    margin_bottom: StyleValue | None = None
    margin_left: StyleValue | None = None

    # Background
    background_color: StyleValue | None = None
    background_image: str | None = None

    # Border
    border_width: StyleValue | None = None
    border_color: StyleValue | None = None
    border_style: Literal["none", "solid", "dashed", "dotted"] | None = None
    border_radius: StyleValue | None = None
    border_top_left_radius: StyleValue | None = None
    border_top_right_radius: StyleValue | None = None
    border_bottom_left_radius: StyleValue | None = None
    border_bottom_right_radius: StyleValue | None = None

    # Effects
    opacity: float | None = None
    box_shadow: StyleValue | None = None

    # Layout (flex child / container)
    overflow: Literal["visible", "hidden", "auto", "scroll"] | None = None
    justify_content: (
        Literal["flex-start", "center", "flex-end", "space-between", "space-around"] | None
    ) = None
    align_items: Literal["flex-start", "center", "flex-end", "stretch", "baseline"] | None = None
    flex_wrap: Literal["nowrap", "wrap"] | None = None
    gap: StyleValue | None = None
    flex_grow: float | None = None
    flex_shrink: float | None = None
    align_self: Literal["auto", "flex-start", "center", "flex-end", "stretch"] | None = None

    # Position
    position: Literal["static", "relative", "absolute", "fixed", "sticky"] | None = None
    top: StyleValue | None = None
    right: StyleValue | None = None
    bottom: StyleValue | None = None
    left: StyleValue | None = None
    z_index: int | None = None

    def declared(self) -> dict[str, StyleValue]:
        """Set properties keyed by their camelCase name, in declaration order."""
        return self.model_dump(by_alias=True, exclude_none=True)


STYLE_PROPERTIES: frozenset[str] = frozenset(
    field.alias or name for name, field in NodeStyle.model_fields.items()
)


class ResponsiveStyle(SpecModel):
    """Partial style overrides applied at narrower breakpoints."""

    tablet: NodeStyle | None = None
    mobile: NodeStyle | None = None


# =============================================================================
# Interactions and data binding
# =============================================================================


class ClickInteraction(SpecModel):
    action: Literal["navigate", "toggleVisibility", "custom"]
    target: str | None = None
    code: str | None = None


class ChangeInteraction(SpecModel):
    action: Literal["setState", "custom"]
    target: str | None = None
    code: str | None = None


class VisibilityRule(SpecModel):
    """Render the node only while `state` satisfies `operator`/`value`."""

    state: str
    operator: Literal["eq", "neq", "truthy"]
    value: str | None = None


class Interactions(SpecModel):
    on_click: ClickInteraction | None = None
    on_change: ChangeInteraction | None = None
    visible_when: VisibilityRule | None = None


class DataSource(SpecModel):
    """Binding of a data-driven node (List, DataTable) to rows."""

    type: Literal["static", "api", "mock"]
    url: str | None = None
    data: list[Any] | None = None
    mapping: dict[str, str] | None = None


# =============================================================================
# Node and screen
# =============================================================================


class Node(SpecModel):
    """One element of the screen tree."""

    id: str
    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[Node] | None = None
    style: NodeStyle | None = None
    responsive: ResponsiveStyle | None = None
    interactions: Interactions | None = None
    data_source: DataSource | None = None

    def iter_children(self) -> list[Node]:
        return self.children or []


class ScreenMeta(SpecModel):
    model_config = ConfigDict(extra="allow")

    layout: str | None = None
    auth: str | None = None


class ScreenSpec(SpecModel):
    """A whole screen document."""

    version: int = 1
    route: str
    meta: ScreenMeta | None = None
    tree: Node

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScreenSpec:
        return cls.model_validate(data)

    def snapshot(self) -> ScreenSpec:
        """Deep copy; nothing is shared with the original."""
        return self.model_copy(deep=True)


Node.model_rebuild()
