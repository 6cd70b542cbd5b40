"""
Tree renderer base class.

A renderer walks one resolved screen tree and returns target markup. It
dispatches purely on the node kind:

- BuiltinType: the matching `render_<snake_case_type>` method
- RefKind: a visible diagnostic placeholder (the ref could not be expanded)
- plugin-owned type: the plugin's emit hook for this backend
- any other type: the generic fallback

Visibility conditions (click toggles and visibleWhen rules) are applied by
the base class around whatever the type method returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ...core.config import StudioConfig
from ...core.ir import BuiltinType, Node, RefKind, ScreenSpec, node_kind
from ...core.references import UNRESOLVED_CIRCULAR, UNRESOLVED_INVALID
from .backend import EmitContext
from .screen import analyze_screen, visibility_conditions
from .utils import camel_to_kebab, js_literal, scale_lookup

_METHODS: dict[BuiltinType, str] = {
    t: f"render_{camel_to_kebab(t.value).replace('-', '_')}" for t in BuiltinType
}


def prop_str(node: Node, name: str, default: str = "") -> str:
    value = node.props.get(name)
    return value if isinstance(value, str) else default


def prop_num(node: Node, name: str, default: int | float | None = None) -> Any:
    value = node.props.get(name)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return default


def heading_level(node: Node) -> int:
    return min(max(int(prop_num(node, "level", 1)), 1), 6)


class TreeRenderer(ABC):
    """Base class for per-screen markup renderers."""

    framework: str = ""

    def __init__(self, spec: ScreenSpec, config: StudioConfig, context: EmitContext):
        self.spec = spec
        self.config = config
        self.context = context
        self.tokens = context.tokens
        self.maps = context.token_maps
        self.state = analyze_screen(spec.tree)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def render(self, node: Node) -> str:
        kind = node_kind(node)
        if isinstance(kind, RefKind):
            markup = self.render_placeholder(node, self.placeholder_message(node))
        elif isinstance(kind, BuiltinType):
            markup = getattr(self, _METHODS[kind])(node)
        else:
            plugin = self.context.plugins.get(node.type)
            markup = plugin.render(node, self.framework) if plugin else self.render_other(node)

        conditions = self.conditions(node)
        if conditions:
            return self.conditional(node, conditions, markup)
        return markup

    def render_children(self, node: Node) -> str:
        return "\n".join(self.render(child) for child in node.iter_children())

    def conditions(self, node: Node) -> list[str]:
        return visibility_conditions(node, self.state, self.quote)

    def quote(self, value: str) -> str:
        """String literal syntax used inside generated expressions."""
        return js_literal(value)

    @staticmethod
    def placeholder_message(node: Node) -> str:
        ref = node.props.get("ref") or "?"
        if node.props.get("unresolved") == UNRESOLVED_CIRCULAR:
            return f"Circular component reference: {ref}"
        if node.props.get("unresolved") == UNRESOLVED_INVALID:
            return f"Invalid component reference: {ref}"
        return f"Missing component: {ref}"

    # ------------------------------------------------------------------
    # Scales
    # ------------------------------------------------------------------

    def gap_value(self, key: Any) -> str:
        return scale_lookup(self.maps.gap, key)

    def size_value(self, key: Any) -> str:
        return scale_lookup(self.maps.size, key)

    # ------------------------------------------------------------------
    # Target hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def conditional(self, node: Node, conditions: list[str], markup: str) -> str:
        """Wrap markup so it renders only while every condition holds."""

    @abstractmethod
    def render_placeholder(self, node: Node, message: str) -> str:
        """Visible diagnostic for an unexpanded ComponentRef."""

    @abstractmethod
    def render_other(self, node: Node) -> str:
        """Generic element for an externally supplied component type."""

    # Layout
    @abstractmethod
    def render_stack(self, node: Node) -> str: ...

    @abstractmethod
    def render_grid(self, node: Node) -> str: ...

    @abstractmethod
    def render_section(self, node: Node) -> str: ...

    @abstractmethod
    def render_scroll_area(self, node: Node) -> str: ...

    @abstractmethod
    def render_spacer(self, node: Node) -> str: ...

    @abstractmethod
    def render_box(self, node: Node) -> str: ...

    # Content
    @abstractmethod
    def render_heading(self, node: Node) -> str: ...

    @abstractmethod
    def render_text(self, node: Node) -> str: ...

    @abstractmethod
    def render_image(self, node: Node) -> str: ...

    @abstractmethod
    def render_input(self, node: Node) -> str: ...

    @abstractmethod
    def render_link(self, node: Node) -> str: ...

    @abstractmethod
    def render_divider(self, node: Node) -> str: ...

    @abstractmethod
    def render_list(self, node: Node) -> str: ...

    @abstractmethod
    def render_icon(self, node: Node) -> str: ...

    # Components
    @abstractmethod
    def render_card(self, node: Node) -> str: ...

    @abstractmethod
    def render_button(self, node: Node) -> str: ...

    @abstractmethod
    def render_form(self, node: Node) -> str: ...

    @abstractmethod
    def render_modal(self, node: Node) -> str: ...

    @abstractmethod
    def render_tabs(self, node: Node) -> str: ...

    @abstractmethod
    def render_nav(self, node: Node) -> str: ...

    @abstractmethod
    def render_data_table(self, node: Node) -> str: ...
