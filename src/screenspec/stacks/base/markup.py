"""
HTML-tag renderer shared by the vue, svelte, and html backends.

Nodes become plain HTML elements with inline CSS. Targets differ only in
how they bind events, interpolate expressions, repeat rows, and gate
rendering on state, which subclasses provide through small hooks.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from ...core.ir import Node
from .css import NODE_ATTRIBUTE, css_properties, inline_css
from .renderer import TreeRenderer, heading_level, prop_num, prop_str
from .screen import DataFetch, cell_text, list_items, nav_items, tab_labels, table_columns, table_rows
from .utils import escape_html, indent, js_literal, js_single_quoted, step_to_css

BUTTON_INTENTS: dict[str, dict[str, str]] = {
    "primary": {"background": "#18181b", "color": "#fff", "border": "none"},
    "default": {"background": "#18181b", "color": "#fff", "border": "none"},
    "secondary": {"background": "#f4f4f5", "color": "#18181b", "border": "none"},
    "destructive": {"background": "#ef4444", "color": "#fff", "border": "none"},
    "outline": {"background": "transparent", "color": "#18181b", "border": "1px solid #e5e7eb"},
    "ghost": {"background": "transparent", "color": "#18181b", "border": "none"},
    "link": {
        "background": "transparent",
        "color": "#2563eb",
        "border": "none",
        "text-decoration": "underline",
    },
}

BUTTON_SIZES: dict[str, str] = {
    "xs": "0.125rem 0.5rem",
    "sm": "0.25rem 0.75rem",
    "default": "0.5rem 1rem",
    "lg": "0.75rem 1.5rem",
    "icon": "0.5rem",
}

BASE_CSS = """\
* { box-sizing: border-box; margin: 0; padding: 0; }
body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.5; color: #18181b; }
a { color: #2563eb; }
button { font-family: inherit; }"""

PLACEHOLDER_CSS: dict[str, str] = {
    "padding": "0.5rem 0.75rem",
    "border": "1px dashed #ef4444",
    "color": "#b91c1c",
    "font-size": "0.875rem",
}

TEXT_VARIANTS: dict[str, dict[str, str]] = {
    "muted": {"color": "#6b7280", "font-size": "0.875rem"},
}

HEADING_VARIANTS: dict[str, dict[str, str]] = {
    "hero": {"font-size": "3rem", "font-weight": "800"},
    "title": {"font-size": "2.25rem", "font-weight": "700"},
    "subtitle": {"font-size": "1.25rem", "font-weight": "500", "color": "#6b7280"},
    "section": {"font-size": "1.5rem", "font-weight": "600"},
}


class MarkupRenderer(TreeRenderer):
    """Renders resolved trees as HTML elements with inline styles."""

    # ------------------------------------------------------------------
    # Target hooks
    # ------------------------------------------------------------------

    def text(self, value: Any) -> str:
        """Escape literal text and attribute values for the target template."""
        return escape_html(value)

    @abstractmethod
    def event_attrs(self, node: Node, events: tuple[str, ...]) -> list[str]:
        """Attributes binding a node's click ("click") and change ("change") interactions."""

    @abstractmethod
    def if_block(self, expression: str, markup: str) -> str: ...

    @abstractmethod
    def each_block(self, items: str, item: str, markup: str) -> str: ...

    @abstractmethod
    def interpolate(self, expression: str) -> str: ...

    def conditional(self, node: Node, conditions: list[str], markup: str) -> str:
        return self.if_block(" && ".join(conditions), markup)

    # ------------------------------------------------------------------
    # Element building
    # ------------------------------------------------------------------

    def element(
        self,
        node: Node,
        tag: str,
        body: str | None = None,
        css: dict[str, str] | None = None,
        attrs: list[str] | None = None,
        events: tuple[str, ...] = ("click", "change"),
        void: bool = False,
        inline: bool = False,
    ) -> str:
        """
        Build the element that represents `node`.

        The node's resolved style bag is merged over `css`; the responsive
        marker, className, and interaction bindings are added here so every
        node type gets them the same way.
        """
        parts = [tag]
        if node.id in self.state.responsive_ids:
            parts.append(f'{NODE_ATTRIBUTE}="{self.text(node.id)}"')
        class_name = prop_str(node, "className")
        if class_name:
            parts.append(f'class="{self.text(class_name)}"')
        parts.extend(attrs or [])
        declarations = {**(css or {}), **css_properties(node.style, self.tokens)}
        if declarations:
            parts.append(f'style="{self.text(inline_css(declarations))}"')
        parts.extend(self.event_attrs(node, events))

        opening = "<" + " ".join(parts)
        if void:
            return f"{opening} />"
        if not body:
            return f"{opening}></{tag}>"
        if inline:
            return f"{opening}>{body}</{tag}>"
        return f"{opening}>\n{indent(body)}\n</{tag}>"

    def tag(self, tag: str, body: str, css: dict[str, str] | None = None, attrs: list[str] | None = None) -> str:
        """A plain child element with no node behind it."""
        parts = [tag, *(attrs or [])]
        if css:
            parts.append(f'style="{self.text(inline_css(css))}"')
        opening = "<" + " ".join(parts) + ">"
        if "\n" in body:
            return f"{opening}\n{indent(body)}\n</{tag}>"
        return f"{opening}{body}</{tag}>"

    def _gap(self, node: Node) -> str:
        return step_to_css(self.gap_value(node.props.get("gap")))

    def _padding(self, node: Node, default: str | None = None) -> dict[str, str]:
        key = node.props.get("padding", default)
        if key is None:
            return {}
        return {"padding": step_to_css(self.size_value(key))}

    # ------------------------------------------------------------------
    # Diagnostics and fallbacks
    # ------------------------------------------------------------------

    def render_placeholder(self, node: Node, message: str) -> str:
        return self.element(
            node,
            "div",
            self.text(message),
            PLACEHOLDER_CSS,
            [f'data-component-ref="{self.text(node.props.get("ref") or "")}"'],
            inline=True,
        )

    def render_other(self, node: Node) -> str:
        attrs = [f'data-component="{self.text(node.type)}"']
        for key, value in node.props.items():
            if key == "className":
                continue
            shown = value if isinstance(value, str) else js_literal(value)
            attrs.append(f'data-{key}="{self.text(shown)}"')
        return self.element(node, "div", self.render_children(node), attrs=attrs)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def render_stack(self, node: Node) -> str:
        css = {
            "display": "flex",
            "flex-direction": "row" if node.props.get("direction") == "row" else "column",
            "gap": self._gap(node),
            **self._padding(node),
        }
        return self.element(node, "div", self.render_children(node), css)

    def render_grid(self, node: Node) -> str:
        columns = prop_num(node, "columns", 2)
        css = {
            "display": "grid",
            "grid-template-columns": f"repeat({columns}, minmax(0, 1fr))",
            "gap": self._gap(node),
        }
        return self.element(node, "div", self.render_children(node), css)

    def render_section(self, node: Node) -> str:
        return self.element(node, "section", self.render_children(node), self._padding(node))

    def render_scroll_area(self, node: Node) -> str:
        css = {"overflow": "auto", "height": prop_str(node, "height", "auto")}
        return self.element(node, "div", self.render_children(node), css)

    def render_spacer(self, node: Node) -> str:
        size = step_to_css(self.size_value(node.props.get("size")))
        return self.element(node, "div", css={"height": size, "flex-shrink": "0"}, attrs=['aria-hidden="true"'])

    def render_box(self, node: Node) -> str:
        return self.element(node, "div", self.render_children(node))

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def render_heading(self, node: Node) -> str:
        css = dict(HEADING_VARIANTS.get(prop_str(node, "variant"), {}))
        font = prop_str(node, "fontFamily")
        if font:
            css["font-family"] = font
        text = self.text(prop_str(node, "text"))
        return self.element(node, f"h{heading_level(node)}", text, css, inline=True)

    def render_text(self, node: Node) -> str:
        css = dict(TEXT_VARIANTS.get(prop_str(node, "variant"), {}))
        font = prop_str(node, "fontFamily")
        if font:
            css["font-family"] = font
        return self.element(node, "p", self.text(prop_str(node, "text")), css, inline=True)

    def render_image(self, node: Node) -> str:
        attrs = [f'src="{self.text(prop_str(node, "src"))}"', f'alt="{self.text(prop_str(node, "alt"))}"']
        for dimension in ("width", "height"):
            value = prop_num(node, dimension)
            if value is not None:
                attrs.append(f'{dimension}="{value}"')
        return self.element(node, "img", attrs=attrs, void=True)

    def render_input(self, node: Node) -> str:
        attrs = [f'type="{self.text(prop_str(node, "type", "text"))}"']
        placeholder = prop_str(node, "placeholder")
        if placeholder:
            attrs.append(f'placeholder="{self.text(placeholder)}"')
        input_css = {"padding": "0.5rem", "border": "1px solid #d1d5db", "border-radius": "0.375rem"}

        label = prop_str(node, "label")
        if not label:
            return self.element(node, "input", css=input_css, attrs=attrs, void=True)

        input_id = f"{node.id}-input"
        attrs.append(f'id="{self.text(input_id)}"')
        field_parts = [f'<input {" ".join(attrs)}', f'style="{self.text(inline_css(input_css))}"']
        field_parts.extend(self.event_attrs(node, ("change",)))
        body = "\n".join(
            [
                f'<label for="{self.text(input_id)}">{self.text(label)}</label>',
                " ".join(field_parts) + " />",
            ]
        )
        css = {"display": "flex", "flex-direction": "column", "gap": "0.25rem"}
        return self.element(node, "div", body, css, events=("click",))

    def render_link(self, node: Node) -> str:
        href = prop_str(node, "href", "#")
        text = prop_str(node, "text") or href
        return self.element(node, "a", self.text(text), attrs=[f'href="{self.text(href)}"'], inline=True)

    def render_divider(self, node: Node) -> str:
        css = {"border": "none", "border-top": "1px solid #e5e7eb"}
        return self.element(node, "hr", css=css, void=True)

    def render_list(self, node: Node) -> str:
        tag = "ol" if node.props.get("ordered") is True else "ul"
        css = {"padding-left": "1.25rem"}
        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            return self.element(node, tag, self.dynamic_list_items(fetch), css)
        items = "\n".join(self.tag("li", self.text(item)) for item in list_items(node))
        return self.element(node, tag, items, css)

    def render_icon(self, node: Node) -> str:
        name = prop_str(node, "name", "Star")
        css = {"display": "inline-block", "font-size": f"{prop_num(node, 'size', 24)}px"}
        color = prop_str(node, "color")
        if color:
            css["color"] = color
        attrs = [f'data-icon="{self.text(name)}"', 'aria-hidden="true"']
        return self.element(node, "span", self.text(name), css, attrs, inline=True)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def render_card(self, node: Node) -> str:
        css = {
            "border": "1px solid #e5e7eb",
            "border-radius": "0.5rem",
            "box-shadow": "0 1px 3px rgb(0 0 0 / 0.1)",
            **self._padding(node, "md"),
        }
        return self.element(node, "div", self.render_children(node), css)

    def render_button(self, node: Node) -> str:
        intent = prop_str(node, "intent", "primary")
        css = {
            "padding": BUTTON_SIZES.get(prop_str(node, "size", "default"), BUTTON_SIZES["default"]),
            "border-radius": "0.375rem",
            "font-size": "0.875rem",
            "font-weight": "500",
            "cursor": "pointer",
            **BUTTON_INTENTS.get(intent, BUTTON_INTENTS["primary"]),
        }
        label = self.text(prop_str(node, "label", "Button"))
        return self.element(node, "button", label, css, ['type="button"'], inline=True)

    def render_form(self, node: Node) -> str:
        attrs = []
        action = prop_str(node, "action")
        if action:
            attrs.append(f'action="{self.text(action)}"')
        attrs.append(f'method="{self.text(prop_str(node, "method", "post"))}"')
        css = {"display": "flex", "flex-direction": "column", "gap": "1rem"}
        return self.element(node, "form", self.render_children(node), css, attrs)

    def render_modal(self, node: Node) -> str:
        attrs = ["open"] if node.props.get("open", True) is not False else []
        body = "\n".join(
            part
            for part in (
                self.tag("h3", self.text(prop_str(node, "title", "Dialog")), {"margin": "0 0 0.5rem"}),
                self.render_children(node),
            )
            if part
        )
        css = {
            "border": "1px solid #e5e7eb",
            "border-radius": "0.5rem",
            "max-width": "28rem",
            "padding": "1.5rem",
            "box-shadow": "0 25px 50px -12px rgb(0 0 0 / 0.25)",
        }
        return self.element(node, "dialog", body, css, attrs)

    def render_tabs(self, node: Node) -> str:
        labels = tab_labels(node)
        buttons = "\n".join(
            self.tag(
                "button",
                self.text(label),
                attrs=['type="button"', 'role="tab"', f'aria-selected="{"true" if i == 0 else "false"}"'],
            )
            for i, label in enumerate(labels)
        )
        tablist = self.tag(
            "div",
            buttons,
            {"display": "flex", "gap": "0.5rem", "border-bottom": "1px solid #e5e7eb"},
            ['role="tablist"'],
        )
        panels = [
            self.tag("div", self.render(child), attrs=['role="tabpanel"', *([] if i == 0 else ["hidden"])])
            for i, child in enumerate(node.iter_children())
        ]
        css = {"display": "flex", "flex-direction": "column", "gap": "1rem"}
        return self.element(node, "div", "\n".join([tablist, *panels]), css)

    def render_nav(self, node: Node) -> str:
        vertical = node.props.get("orientation") == "vertical"
        links = [
            self.tag("a", self.text(label), attrs=[f'href="{self.text(href)}"'])
            for label, href in nav_items(node)
        ]
        children = self.render_children(node)
        body = "\n".join([*links, children] if children else links)
        css = {"display": "flex", "flex-direction": "column" if vertical else "row", "gap": "1rem"}
        return self.element(node, "nav", body, css)

    def render_data_table(self, node: Node) -> str:
        columns = table_columns(node)
        cell_css = {"text-align": "left", "padding": "0.5rem 1rem"}
        header = self.tag(
            "tr",
            "\n".join(self.tag("th", self.text(label), cell_css) for _, label in columns),
        )
        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            body_rows = self.dynamic_table_rows(fetch, columns, cell_css)
        else:
            rows = table_rows(node)
            body_rows = "\n".join(
                self.tag(
                    "tr",
                    "\n".join(self.tag("td", self.text(cell_text(row, key)), cell_css) for key, _ in columns),
                )
                for row in rows
            )
            if not rows:
                body_rows = self.empty_row(len(columns))
        table = "\n".join(
            [self.tag("thead", header), self.tag("tbody", body_rows)]
        )
        css = {"width": "100%", "border-collapse": "collapse", "font-size": "0.875rem"}
        return self.element(node, "table", table, css)

    def empty_row(self, span: int) -> str:
        cell = self.tag(
            "td",
            "No data",
            {"padding": "0.75rem 1rem", "text-align": "center", "color": "#6b7280"},
            [f'colspan="{max(span, 1)}"'],
        )
        return self.tag("tr", cell)

    # ------------------------------------------------------------------
    # API-bound rows
    # ------------------------------------------------------------------

    def dynamic_list_items(self, fetch: DataFetch) -> str:
        expression = (
            "typeof item === 'object' && item !== null ? Object.values(item).join(' - ') : item"
        )
        return self.each_block(fetch.variable, "item", self.tag("li", self.interpolate(expression)))

    def dynamic_table_rows(self, fetch: DataFetch, columns: list[tuple[str, str]], cell_css: dict[str, str]) -> str:
        cells = "\n".join(
            self.tag("td", self.interpolate(f"row[{js_single_quoted(key)}] ?? ''"), cell_css) for key, _ in columns
        )
        rows = self.each_block(fetch.variable, "row", self.tag("tr", cells))
        empty = self.if_block(f"{fetch.variable}.length === 0", self.empty_row(len(columns)))
        return f"{rows}\n{empty}"
