"""
Next.js (React + Tailwind CSS) tree renderer.
"""

from __future__ import annotations

import re
from typing import Any

from ...core.ir import Node
from ...core.tokens import resolve_style
from ..base.css import NODE_ATTRIBUTE
from ..base.jsx import JsxRenderer, jsx_attr
from ..base.renderer import heading_level, prop_num, prop_str
from ..base.screen import cell_text, list_items, nav_items, tab_labels, table_columns, table_rows
from ..base.utils import indent, js_literal, js_single_quoted, step_to_tailwind
from .adapters import ComponentAdapter

HEADING_CLASSES = (
    "text-4xl font-bold",
    "text-3xl font-bold",
    "text-2xl font-semibold",
    "text-xl font-semibold",
    "text-lg font-medium",
    "text-base font-medium",
)

HEADING_VARIANTS = {
    "hero": "text-5xl font-extrabold tracking-tight",
    "title": "text-4xl font-bold",
    "subtitle": "text-xl font-medium text-muted-foreground",
    "section": "text-2xl font-semibold",
}

BUTTON_INTENTS = {
    "primary": "bg-primary text-primary-foreground hover:bg-primary/90",
    "default": "bg-primary text-primary-foreground hover:bg-primary/90",
    "secondary": "bg-secondary text-secondary-foreground hover:bg-secondary/80",
    "destructive": "bg-destructive text-destructive-foreground hover:bg-destructive/90",
    "outline": "border border-input bg-background hover:bg-accent",
    "ghost": "hover:bg-accent hover:text-accent-foreground",
    "link": "text-primary underline-offset-4 hover:underline",
}

BUTTON_SIZES = {
    "default": "h-10 px-4 py-2",
    "xs": "h-7 px-2 text-xs",
    "sm": "h-9 px-3",
    "lg": "h-11 px-8",
    "icon": "h-10 w-10",
}

_ICON_NAME = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def classes(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


class NextjsRenderer(JsxRenderer):
    framework = "nextjs"

    def __init__(self, *args: Any, adapter: ComponentAdapter | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.adapter = adapter

    # ------------------------------------------------------------------
    # Element building
    # ------------------------------------------------------------------

    def node_element(
        self,
        node: Node,
        tag: str,
        class_name: str = "",
        body: str | None = None,
        attrs: list[str] | None = None,
        style: dict[str, Any] | None = None,
        inline: bool = False,
        change: bool = True,
    ) -> str:
        """Element for `node` with className, style bag, responsive marker, and handlers."""
        parts: list[str] = []
        if node.id in self.state.responsive_ids:
            parts.append(jsx_attr(NODE_ATTRIBUTE, node.id))
        merged_class = classes(class_name, prop_str(node, "className"))
        if merged_class:
            parts.append(jsx_attr("className", merged_class))
        parts.extend(attrs or [])
        parts.extend(self.style_attr({**(style or {}), **resolve_style(node.style, self.tokens)}))
        parts.extend(self.event_attrs(node, change=change))
        return self.element(tag, parts, body, inline)

    def library(self, node: Node) -> str | None:
        """The adapter's tag for this node type, importing it on first use."""
        if self.adapter is None or not self.adapter.handles(node.type):
            return None
        spec = self.adapter.resolve_import(node.type, self.config.import_alias)
        return self.use(spec.source, spec.specifier)

    def gap_class(self, node: Node) -> str:
        return step_to_tailwind("gap", self.gap_value(node.props.get("gap")))

    def padding_class(self, node: Node, default: str | None = None) -> str:
        key = node.props.get("padding", default)
        return step_to_tailwind("p", self.size_value(key)) if key is not None else ""

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def navigate_call(self, target: str) -> str:
        return f"router.push({js_literal(target)})"

    def router_lines(self) -> list[str]:
        self.use("next/navigation", "useRouter")
        return ["const router = useRouter();"]

    def change_attr(self, handler_body: str | None, setter: str | None) -> str | None:
        if setter:
            return f"onChange={{(e) => {setter}(e.target.value)}}"
        return f"onChange={{(e) => {{ {handler_body} }}}}"

    # ------------------------------------------------------------------
    # Diagnostics and fallbacks
    # ------------------------------------------------------------------

    def render_placeholder(self, node: Node, message: str) -> str:
        attrs = [jsx_attr("data-component-ref", node.props.get("ref") or "")]
        return self.node_element(
            node,
            "div",
            "border border-dashed border-red-500 px-3 py-2 text-sm text-red-700",
            self.text(message),
            attrs,
            inline=True,
        )

    def render_other(self, node: Node) -> str:
        attrs = [jsx_attr("data-component", node.type)]
        for key, value in node.props.items():
            if key != "className":
                attrs.append(jsx_attr(f"data-{key}", value if isinstance(value, str) else js_literal(value)))
        return self.node_element(node, "div", body=self.render_children(node), attrs=attrs)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def render_stack(self, node: Node) -> str:
        direction = "flex-row" if node.props.get("direction") == "row" else "flex-col"
        class_name = classes("flex", direction, self.gap_class(node), self.padding_class(node))
        return self.node_element(node, "div", class_name, self.render_children(node))

    def render_grid(self, node: Node) -> str:
        columns = prop_num(node, "columns", 2)
        class_name = classes("grid", f"grid-cols-{columns}", self.gap_class(node))
        return self.node_element(node, "div", class_name, self.render_children(node))

    def render_section(self, node: Node) -> str:
        return self.node_element(node, "section", self.padding_class(node), self.render_children(node))

    def render_scroll_area(self, node: Node) -> str:
        height = prop_str(node, "height", "auto")
        height_class = "h-auto" if height == "auto" else f"h-[{height.replace(' ', '_')}]"
        tag = self.library(node)
        if tag:
            return self.node_element(node, tag, height_class, self.render_children(node))
        return self.node_element(node, "div", classes("overflow-auto", height_class), self.render_children(node))

    def render_spacer(self, node: Node) -> str:
        size = self.size_value(node.props.get("size"))
        return self.node_element(node, "div", classes(step_to_tailwind("h", size), "shrink-0"), attrs=["aria-hidden"])

    def render_box(self, node: Node) -> str:
        return self.node_element(node, "div", body=self.render_children(node))

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def render_heading(self, node: Node) -> str:
        level = heading_level(node)
        class_name = HEADING_VARIANTS.get(prop_str(node, "variant"), HEADING_CLASSES[level - 1])
        font = prop_str(node, "fontFamily")
        style = {"fontFamily": font} if font else None
        return self.node_element(
            node, f"h{level}", class_name, self.text(prop_str(node, "text")), style=style, inline=True
        )

    def render_text(self, node: Node) -> str:
        class_name = "text-sm text-muted-foreground" if prop_str(node, "variant") == "muted" else ""
        font = prop_str(node, "fontFamily")
        style = {"fontFamily": font} if font else None
        return self.node_element(node, "p", class_name, self.text(prop_str(node, "text")), style=style, inline=True)

    def render_image(self, node: Node) -> str:
        attrs = [jsx_attr("src", prop_str(node, "src")), jsx_attr("alt", prop_str(node, "alt"))]
        for dimension in ("width", "height"):
            value = prop_num(node, dimension)
            if value is not None:
                attrs.append(f"{dimension}={{{value}}}")
        return self.node_element(node, "img", attrs=attrs)

    def render_input(self, node: Node) -> str:
        input_id = f"{node.id}-input"
        attrs = [jsx_attr("id", input_id), jsx_attr("type", prop_str(node, "type", "text"))]
        placeholder = prop_str(node, "placeholder")
        if placeholder:
            attrs.append(jsx_attr("placeholder", placeholder))

        tag = self.library(node)
        field_class = "" if tag else "rounded-md border border-input px-3 py-2 text-sm"
        label = prop_str(node, "label")
        if not label:
            return self.node_element(node, tag or "input", field_class, attrs=attrs)

        field_attrs = [jsx_attr("className", field_class)] if field_class else []
        field_attrs.extend(attrs)
        field_attrs.extend(self.change_attrs(node))
        field = self.element(tag or "input", field_attrs)
        body = "\n".join(
            [
                f'<label htmlFor="{input_id}" className="text-sm font-medium">{self.text(label)}</label>',
                field,
            ]
        )
        return self.node_element(node, "div", "flex flex-col gap-1", body, change=False)

    def render_link(self, node: Node) -> str:
        tag = self.use_default("next/link", "Link")
        href = prop_str(node, "href", "#")
        text = prop_str(node, "text") or href
        return self.node_element(node, tag, "", self.text(text), [jsx_attr("href", href)], inline=True)

    def render_divider(self, node: Node) -> str:
        tag = self.library(node)
        if tag:
            return self.node_element(node, tag)
        return self.node_element(node, "hr", "border-t border-border")

    def render_list(self, node: Node) -> str:
        ordered = node.props.get("ordered") is True
        tag = "ol" if ordered else "ul"
        class_name = classes("list-decimal" if ordered else "list-disc", "pl-4")
        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            item = (
                "typeof item === \"object\" && item !== null ? Object.values(item).join(\" - \") : String(item)"
            )
            body = f"{{{fetch.variable}.map((item, index) => (\n  <li key={{index}}>{{{item}}}</li>\n))}}"
        else:
            body = "\n".join(f"<li>{self.text(item)}</li>" for item in list_items(node))
        return self.node_element(node, tag, class_name, body)

    def render_icon(self, node: Node) -> str:
        name = prop_str(node, "name", "Star")
        size = prop_num(node, "size", 24)
        if not _ICON_NAME.match(name):
            return self.node_element(node, "span", "inline-block", self.text(name), [jsx_attr("aria-hidden", "true")], inline=True)
        tag = self.use("lucide-react", f"{name}Icon")
        attrs = [f"size={{{size}}}"]
        color = prop_str(node, "color")
        if color:
            attrs.append(jsx_attr("color", color))
        return self.node_element(node, tag, attrs=attrs)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def render_card(self, node: Node) -> str:
        tag = self.library(node)
        padding = self.padding_class(node, "md")
        if tag:
            return self.node_element(node, tag, padding, self.render_children(node))
        class_name = classes("rounded-lg border bg-card text-card-foreground shadow-sm", padding)
        return self.node_element(node, "div", class_name, self.render_children(node))

    def render_button(self, node: Node) -> str:
        label = self.text(prop_str(node, "label", "Button"))
        tag = self.library(node)
        if tag:
            props = self.adapter.transform_props(node.type, node.props)
            attrs = [
                jsx_attr(key, value)
                for key, value in props.items()
                if key in ("variant", "size") and isinstance(value, str)
            ]
            return self.node_element(node, tag, body=label, attrs=attrs, inline=True)

        intent = prop_str(node, "intent", "primary")
        class_name = classes(
            "inline-flex items-center justify-center rounded-md text-sm font-medium",
            BUTTON_INTENTS.get(intent, BUTTON_INTENTS["primary"]),
            BUTTON_SIZES.get(prop_str(node, "size", "default"), BUTTON_SIZES["default"]),
        )
        return self.node_element(node, "button", class_name, label, ['type="button"'], inline=True)

    def render_form(self, node: Node) -> str:
        attrs = []
        action = prop_str(node, "action")
        if action:
            attrs.append(jsx_attr("action", action))
        attrs.append(jsx_attr("method", prop_str(node, "method", "post")))
        return self.node_element(node, "form", "flex flex-col gap-4", self.render_children(node), attrs)

    def render_modal(self, node: Node) -> str:
        attrs = ["open"] if node.props.get("open", True) is not False else []
        title = f'<h3 className="mb-2 text-lg font-semibold">{self.text(prop_str(node, "title", "Dialog"))}</h3>'
        children = self.render_children(node)
        body = f"{title}\n{children}" if children else title
        return self.node_element(node, "dialog", "max-w-md rounded-lg border p-6 shadow-lg", body, attrs)

    def render_tabs(self, node: Node) -> str:
        buttons = "\n".join(
            f'<button type="button" role="tab" aria-selected={{{"true" if i == 0 else "false"}}} '
            f'className="px-3 py-2 text-sm font-medium">{self.text(label)}</button>'
            for i, label in enumerate(tab_labels(node))
        )
        parts = [f'<div role="tablist" className="flex gap-2 border-b">\n{indent(buttons)}\n</div>']
        for i, child in enumerate(node.iter_children()):
            hidden = "" if i == 0 else " hidden"
            parts.append(f'<div role="tabpanel"{hidden}>\n{indent(self.render(child))}\n</div>')
        return self.node_element(node, "div", "flex flex-col gap-4", "\n".join(parts))

    def render_nav(self, node: Node) -> str:
        direction = "flex-col" if node.props.get("orientation") == "vertical" else "flex-row"
        items = nav_items(node)
        if items:
            self.use_default("next/link", "Link")
        links = [
            f'<Link {jsx_attr("href", href)} className="text-sm font-medium">{self.text(label)}</Link>'
            for label, href in items
        ]
        children = self.render_children(node)
        body = "\n".join([*links, children] if children else links)
        return self.node_element(node, "nav", classes("flex gap-4", direction), body)

    def render_data_table(self, node: Node) -> str:
        columns = table_columns(node)
        cell = "px-4 py-2"
        header = "\n".join(f'<th className="{cell} text-left font-medium">{self.text(label)}</th>' for _, label in columns)
        empty = (
            f'<tr>\n  <td colSpan={{{max(len(columns), 1)}}} className="px-4 py-3 text-center text-muted-foreground">'
            "No data</td>\n</tr>"
        )
        fetch = self.state.fetch_for(node.id)
        if fetch is not None:
            cells = "\n".join(
                f'<td className="{cell}">{{String(row[{js_single_quoted(key)}] ?? "")}}</td>' for key, _ in columns
            )
            rows = (
                f"{{{fetch.variable}.map((row, index) => (\n"
                f"  <tr key={{index}} className=\"border-b\">\n{indent(cells, 4)}\n  </tr>\n))}}\n"
                f"{{{fetch.variable}.length === 0 && (\n{indent(empty)}\n)}}"
            )
        else:
            data = table_rows(node)
            rows = "\n".join(
                '<tr className="border-b">\n'
                + indent("\n".join(f'<td className="{cell}">{self.text(cell_text(row, key))}</td>' for key, _ in columns))
                + "\n</tr>"
                for row in data
            ) or empty
        table = (
            f"<thead>\n  <tr className=\"border-b bg-muted/50\">\n{indent(header, 4)}\n  </tr>\n</thead>\n"
            f"<tbody>\n{indent(rows)}\n</tbody>"
        )
        return self.node_element(node, "table", "w-full text-sm", table)
