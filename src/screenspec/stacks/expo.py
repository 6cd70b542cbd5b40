"""
Expo / React Native backend.

Emits one function component per screen using React Native primitives
(View, Text, Image, TextInput, ScrollView, TouchableOpacity). Styles are
inline style objects with numeric point values; tablet/mobile overrides are
applied from `useWindowDimensions()` since there is no CSS to carry media
queries. Navigation goes through expo-router.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.config import StudioConfig
from ..core.ir import DesignTokens, Node, NodeStyle, ScreenSpec
from ..core.tokens import resolve_style
from .base.backend import (
    GENERATED_MARKER,
    BackendCapabilities,
    EmitContext,
    EmitResult,
    EmittedFile,
    ScreenBackend,
)
from .base.css import BREAKPOINTS
from .base.jsx import JsxRenderer, jsx_attr, object_literal
from .base.renderer import heading_level, prop_num, prop_str
from .base.screen import cell_text, list_items, nav_items, tab_labels, table_columns, table_rows
from .base.utils import component_name_from_route, indent, js_literal, js_single_quoted, length_to_points, step_to_points

logger = logging.getLogger(__name__)

REACT_NATIVE = "react-native"

HEADING_SIZES = (32, 28, 24, 20, 18, 16)

MUTED = "#6b7280"
BORDER = "#e5e7eb"
ACCENT = "#2563eb"

BUTTON_INTENTS: dict[str, tuple[str, str, str | None]] = {
    # intent -> (background, text color, border color)
    "primary": (ACCENT, "#ffffff", None),
    "default": (ACCENT, "#ffffff", None),
    "secondary": ("#f3f4f6", "#111827", None),
    "destructive": ("#dc2626", "#ffffff", None),
    "outline": ("transparent", ACCENT, ACCENT),
    "ghost": ("transparent", "#111827", None),
    "link": ("transparent", ACCENT, None),
}

BUTTON_PADDING = {
    "xs": (4, 8),
    "sm": (6, 12),
    "default": (10, 20),
    "lg": (14, 28),
    "icon": (10, 10),
}

# Properties React Native has no equivalent for
_UNSUPPORTED = frozenset({"backgroundImage", "boxShadow"})

# Properties carrying a plain keyword or number rather than a length
_KEYWORDS = frozenset(
    {
        "fontStyle",
        "textAlign",
        "textTransform",
        "color",
        "backgroundColor",
        "borderColor",
        "borderStyle",
        "opacity",
        "overflow",
        "justifyContent",
        "alignItems",
        "flexWrap",
        "flexGrow",
        "flexShrink",
        "alignSelf",
        "position",
        "zIndex",
    }
)

_PRESSABLE = frozenset({"TouchableOpacity", "Pressable"})


def native_style(style: NodeStyle | None, tokens: DesignTokens | None) -> dict[str, Any]:
    """
    Convert a style bag into a React Native style object.

    Lengths become points (px as is, rem/em at 16pt); textDecoration becomes
    textDecorationLine; properties without a native counterpart are dropped.
    """
    result: dict[str, Any] = {}
    for key, value in resolve_style(style, tokens).items():
        if key in _UNSUPPORTED:
            logger.debug(f"Dropping style '{key}' unsupported by React Native")
            continue
        if key == "textDecoration":
            result["textDecorationLine"] = value
        elif key == "fontWeight":
            result[key] = str(value)
        elif key in _KEYWORDS:
            result[key] = value
        else:
            result[key] = length_to_points(value)
    return result


class ExpoRenderer(JsxRenderer):
    framework = "expo"

    # ------------------------------------------------------------------
    # Element building
    # ------------------------------------------------------------------

    def rn(self, tag: str) -> str:
        return self.use(REACT_NATIVE, tag)

    def style_parts(self, node: Node, defaults: dict[str, Any]) -> list[str]:
        """The style attribute: defaults under the node's own style, then breakpoint overrides."""
        base = {**defaults, **native_style(node.style, self.tokens)}
        if node.id not in self.state.responsive_ids:
            return self.style_attr(base)

        entries = [object_literal(base)]
        for breakpoint, max_width in BREAKPOINTS:
            overrides = native_style(getattr(node.responsive, breakpoint), self.tokens)
            if overrides:
                entries.append(f"width <= {max_width} && {object_literal(overrides)}")
        return [f"style={{[{', '.join(entries)}]}}"]

    def node_element(
        self,
        node: Node,
        tag: str,
        style: dict[str, Any] | None = None,
        body: str | None = None,
        attrs: list[str] | None = None,
        inline: bool = False,
    ) -> str:
        """
        Element for `node` with its style and click handler.

        Touchable tags take the handler directly; anything else is wrapped in
        a Pressable.
        """
        parts = list(attrs or [])
        parts.extend(self.style_parts(node, style or {}))
        handler = self.click_handler(node)
        if handler and tag in _PRESSABLE:
            parts.append(f"onPress={{{handler}}}")
            handler = None
        markup = self.element(self.rn(tag), parts, body, inline)
        if handler:
            markup = self.element(self.rn("Pressable"), [f"onPress={{{handler}}}"], markup)
        return markup

    def label(self, text: str, style: dict[str, Any] | None = None) -> str:
        return self.element(self.rn("Text"), self.style_attr(style or {}), self.text(text), inline=True)

    def gap_points(self, node: Node) -> Any:
        return step_to_points(self.gap_value(node.props.get("gap")))

    def size_points(self, key: Any) -> Any:
        return step_to_points(self.size_value(key))

    def padding(self, node: Node, default: str | None = None) -> dict[str, Any]:
        key = node.props.get("padding", default)
        return {"padding": self.size_points(key)} if key is not None else {}

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def navigate_call(self, target: str) -> str:
        self.use("expo-router", "router")
        return f"router.push({js_literal(target)})"

    def open_href(self, href: str) -> str | None:
        """Press handler for a link target; app routes navigate, anything else opens externally."""
        if not href or href == "#":
            return None
        if href.startswith("/"):
            return f"() => {self.navigate_call(href)}"
        self.rn("Linking")
        return f"() => Linking.openURL({js_literal(href)})"

    def change_attr(self, handler_body: str | None, setter: str | None) -> str | None:
        if setter:
            return f"onChangeText={{{setter}}}"
        return f"onChangeText={{(text) => {{ {handler_body} }}}}"

    def hook_lines(self) -> list[str]:
        lines = super().hook_lines()
        if self.state.responsive:
            self.rn("useWindowDimensions")
            lines.insert(0, "const { width } = useWindowDimensions();")
        return lines

    # ------------------------------------------------------------------
    # Diagnostics and fallbacks
    # ------------------------------------------------------------------

    def render_placeholder(self, node: Node, message: str) -> str:
        style = {"borderWidth": 1, "borderStyle": "dashed", "borderColor": "#ef4444", "padding": 8}
        body = self.label(message, {"fontSize": 12, "color": "#b91c1c"})
        return self.node_element(node, "View", style, body)

    def render_other(self, node: Node) -> str:
        style = {"borderWidth": 1, "borderStyle": "dashed", "borderColor": "#9ca3af", "borderRadius": 4, "padding": 8}
        parts = [self.label(f"<{node.type}>", {"fontSize": 12, "color": MUTED})]
        children = self.render_children(node)
        if children:
            parts.append(children)
        return self.node_element(node, "View", style, "\n".join(parts))

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def render_stack(self, node: Node) -> str:
        direction = "row" if node.props.get("direction") == "row" else "column"
        style = {"flexDirection": direction, "gap": self.gap_points(node), **self.padding(node)}
        return self.node_element(node, "View", style, self.render_children(node))

    def render_grid(self, node: Node) -> str:
        style = {"flexDirection": "row", "flexWrap": "wrap", "gap": self.gap_points(node)}
        return self.node_element(node, "View", style, self.render_children(node))

    def render_section(self, node: Node) -> str:
        style = {"width": "100%", **self.padding(node)}
        return self.node_element(node, "View", style, self.render_children(node))

    def render_scroll_area(self, node: Node) -> str:
        height = prop_str(node, "height", "auto")
        style = {} if height == "auto" else {"height": length_to_points(height)}
        return self.node_element(node, "ScrollView", style, self.render_children(node))

    def render_spacer(self, node: Node) -> str:
        return self.node_element(node, "View", {"height": self.size_points(node.props.get("size"))})

    def render_box(self, node: Node) -> str:
        return self.node_element(node, "View", body=self.render_children(node))

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def render_heading(self, node: Node) -> str:
        style: dict[str, Any] = {"fontSize": HEADING_SIZES[heading_level(node) - 1], "fontWeight": "bold"}
        font = prop_str(node, "fontFamily")
        if font:
            style["fontFamily"] = font
        return self.node_element(node, "Text", style, self.text(prop_str(node, "text")), inline=True)

    def render_text(self, node: Node) -> str:
        style: dict[str, Any] = {"fontSize": 14, "color": MUTED} if prop_str(node, "variant") == "muted" else {}
        font = prop_str(node, "fontFamily")
        if font:
            style["fontFamily"] = font
        return self.node_element(node, "Text", style, self.text(prop_str(node, "text")), inline=True)

    def render_image(self, node: Node) -> str:
        size = {"width": prop_num(node, "width", 200), "height": prop_num(node, "height", 200)}
        src = prop_str(node, "src")
        if not src:
            style = {**size, "backgroundColor": "#f3f4f6", "borderRadius": 8, "alignItems": "center", "justifyContent": "center"}
            return self.node_element(node, "View", style, self.label("Image", {"fontSize": 12, "color": "#9ca3af"}))
        attrs = [f"source={{{{ uri: {js_literal(src)} }}}}", jsx_attr("resizeMode", "cover")]
        alt = prop_str(node, "alt")
        if alt:
            attrs.append(jsx_attr("accessibilityLabel", alt))
        return self.node_element(node, "Image", size, attrs=attrs)

    def render_input(self, node: Node) -> str:
        attrs: list[str] = []
        placeholder = prop_str(node, "placeholder")
        if placeholder:
            attrs.append(jsx_attr("placeholder", placeholder))
        kind = prop_str(node, "type", "text")
        if kind == "password":
            attrs.append("secureTextEntry")
        elif kind == "email":
            attrs.append(jsx_attr("keyboardType", "email-address"))
        elif kind == "number":
            attrs.append(jsx_attr("keyboardType", "numeric"))
        attrs.extend(self.change_attrs(node))
        field_style = {"borderWidth": 1, "borderColor": "#d1d5db", "borderRadius": 8, "padding": 10, "fontSize": 14}

        label = prop_str(node, "label")
        if not label:
            return self.node_element(node, "TextInput", field_style, attrs=attrs)
        field = self.element(self.rn("TextInput"), [*attrs, *self.style_attr(field_style)])
        caption = self.label(label, {"fontSize": 14, "fontWeight": "500", "marginBottom": 4})
        return self.node_element(node, "View", body=f"{caption}\n{field}")

    def render_link(self, node: Node) -> str:
        href = prop_str(node, "href", "#")
        text = prop_str(node, "text") or href
        attrs = []
        press = None if self.click_handler(node) else self.open_href(href)
        if press:
            attrs.append(f"onPress={{{press}}}")
        body = self.label(text, {"color": ACCENT, "textDecorationLine": "underline"})
        return self.node_element(node, "TouchableOpacity", body=body, attrs=attrs)

    def render_divider(self, node: Node) -> str:
        return self.node_element(node, "View", {"height": 1, "backgroundColor": BORDER, "width": "100%"})

    def render_list(self, node: Node) -> str:
        ordered = node.props.get("ordered") is True
        item_style = {"fontSize": 14, "paddingVertical": 2}
        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            self.rn("Text")
            marker = "{index + 1}. " if ordered else "• "
            value = (
                'typeof item === "object" && item !== null ? Object.values(item).join(" - ") : String(item)'
            )
            body = (
                f"{{{fetch.variable}.map((item, index) => (\n"
                f"  <Text key={{index}} style={{{object_literal(item_style)}}}>{marker}{{{value}}}</Text>\n"
                "))}"
            )
        else:
            body = "\n".join(
                self.label(f"{i}. {item}" if ordered else f"• {item}", item_style)
                for i, item in enumerate(list_items(node), start=1)
            )
        return self.node_element(node, "View", body=body)

    def render_icon(self, node: Node) -> str:
        size = prop_num(node, "size", 24)
        style = {"width": size, "height": size, "alignItems": "center", "justifyContent": "center"}
        text_style: dict[str, Any] = {"fontSize": 12}
        color = prop_str(node, "color")
        if color:
            text_style["color"] = color
        return self.node_element(node, "View", style, self.label(f"[{prop_str(node, 'name', 'Star')}]", text_style))

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def render_card(self, node: Node) -> str:
        style = {
            "backgroundColor": "#ffffff",
            "borderRadius": 12,
            **self.padding(node, "md"),
            "borderWidth": 1,
            "borderColor": BORDER,
            "shadowColor": "#000",
            "shadowOpacity": 0.05,
            "shadowRadius": 4,
            "elevation": 2,
        }
        return self.node_element(node, "View", style, self.render_children(node))

    def render_button(self, node: Node) -> str:
        background, color, border = BUTTON_INTENTS.get(prop_str(node, "intent", "primary"), BUTTON_INTENTS["primary"])
        vertical, horizontal = BUTTON_PADDING.get(prop_str(node, "size", "default"), BUTTON_PADDING["default"])
        style: dict[str, Any] = {
            "backgroundColor": background,
            "paddingVertical": vertical,
            "paddingHorizontal": horizontal,
            "borderRadius": 8,
            "alignItems": "center",
        }
        if border:
            style.update({"borderWidth": 1, "borderColor": border})
        body = self.label(prop_str(node, "label", "Button"), {"color": color, "fontWeight": "600", "fontSize": 14})
        return self.node_element(node, "TouchableOpacity", style, body)

    def render_form(self, node: Node) -> str:
        return self.node_element(node, "View", {"gap": 16}, self.render_children(node))

    def render_modal(self, node: Node) -> str:
        view = self.rn("View")
        title = self.label(prop_str(node, "title", "Dialog"), {"fontWeight": "600", "fontSize": 14})
        header_style = {"paddingHorizontal": 16, "paddingVertical": 12, "borderBottomWidth": 1, "borderBottomColor": BORDER}
        header = self.element(view, self.style_attr(header_style), title)
        parts = [header]
        children = self.render_children(node)
        if children:
            parts.append(self.element(view, self.style_attr({"padding": 16}), children))
        style = {"backgroundColor": "#ffffff", "borderRadius": 12, "borderWidth": 1, "borderColor": BORDER, "maxWidth": 400}
        return self.node_element(node, "View", style, "\n".join(parts))

    def render_tabs(self, node: Node) -> str:
        view = self.rn("View")
        touchable = self.rn("TouchableOpacity")
        buttons = []
        for i, tab in enumerate(tab_labels(node)):
            active = i == 0
            button_style = {
                "paddingHorizontal": 16,
                "paddingVertical": 8,
                "borderBottomWidth": 2,
                "borderBottomColor": ACCENT if active else "transparent",
            }
            text_style = {"fontSize": 14, "color": ACCENT if active else MUTED}
            if active:
                text_style["fontWeight"] = "500"
            buttons.append(self.element(touchable, self.style_attr(button_style), self.label(tab, text_style)))
        bar_style = {"flexDirection": "row", "borderBottomWidth": 1, "borderBottomColor": BORDER}
        parts = [self.element(view, self.style_attr(bar_style), "\n".join(buttons))]
        children = node.iter_children()
        if children:
            parts.append(self.element(view, self.style_attr({"paddingTop": 12}), self.render(children[0])))
        return self.node_element(node, "View", body="\n".join(parts))

    def render_nav(self, node: Node) -> str:
        direction = "column" if node.props.get("orientation") == "vertical" else "row"
        items = []
        for label, href in nav_items(node):
            attrs = self.style_attr({"paddingHorizontal": 12, "paddingVertical": 6, "borderRadius": 6})
            press = self.open_href(href)
            if press:
                attrs.append(f"onPress={{{press}}}")
            items.append(self.element(self.rn("TouchableOpacity"), attrs, self.label(label, {"fontSize": 14})))
        children = self.render_children(node)
        if children:
            items.append(children)
        return self.node_element(node, "View", {"flexDirection": direction, "gap": 4}, "\n".join(items))

    def render_data_table(self, node: Node) -> str:
        view = self.rn("View")
        columns = table_columns(node)
        header_cells = "\n".join(
            self.label(label, {"flex": 1, "fontWeight": "600", "fontSize": 12, "padding": 8}) for _, label in columns
        )
        header_style = {"flexDirection": "row", "backgroundColor": "#f9fafb", "borderBottomWidth": 1, "borderBottomColor": BORDER}
        row_style = {"flexDirection": "row", "borderBottomWidth": 1, "borderBottomColor": BORDER}
        cell_style = {"flex": 1, "fontSize": 12, "padding": 8}
        empty = self.element(
            view,
            self.style_attr({"padding": 8, "alignItems": "center"}),
            self.label("No data", {"color": "#9ca3af", "fontSize": 12}),
        )

        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            self.rn("Text")
            cells = "\n".join(
                f"<Text style={{{object_literal(cell_style)}}}>{{String(row[{js_single_quoted(key)}] ?? \"\")}}</Text>"
                for key, _ in columns
            )
            rows = (
                f"{{{fetch.variable}.map((row, index) => (\n"
                f"  <View key={{index}} style={{{object_literal(row_style)}}}>\n{indent(cells, 4)}\n  </View>\n"
                "))}\n"
                f"{{{fetch.variable}.length === 0 && (\n{indent(empty)}\n)}}"
            )
        else:
            rows = "\n".join(
                self.element(
                    view,
                    self.style_attr(row_style),
                    "\n".join(self.label(cell_text(row, key), cell_style) for key, _ in columns),
                )
                for row in table_rows(node)
            ) or empty

        body = f"{self.element(view, self.style_attr(header_style), header_cells)}\n{rows}"
        style = {"borderWidth": 1, "borderColor": BORDER, "borderRadius": 8, "overflow": "hidden"}
        return self.node_element(node, "View", style, body)


class ExpoBackend(ScreenBackend):
    """Generates Expo / React Native components."""

    name = "expo"

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="expo",
            description="Expo / React Native components (TSX) with inline native styles",
            output_formats=["tsx"],
            file_extension=".tsx",
        )

    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        context = context or EmitContext.create()
        name = component_name_from_route(spec.route)
        renderer = ExpoRenderer(spec, config, context)
        body = renderer.render(spec.tree)
        if body.startswith("{"):
            body = f"<>\n{indent(body)}\n</>"

        contents = renderer.component(name, body, [f"// {GENERATED_MARKER}"])
        path = self.generated_path(config, f"{name}.generated.tsx")
        return EmitResult(files=[EmittedFile(path, contents)], component_name=name)

    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        lines = [f"// {GENERATED_MARKER}"]
        lines.extend(
            f'export {{ {name} }} from "./{name}.generated";' for name in sorted(component_names)
        )
        return EmittedFile(self.generated_path(config, "index.ts"), "\n".join(lines) + "\n")
