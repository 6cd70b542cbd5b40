"""
JSX renderer base shared by the React targets (nextjs, expo).

Handles what every React component needs regardless of the element set:
import collection, JSX attribute and style-object syntax, useState/useEffect
hooks for interaction state and API rows, event handlers, and `&&`
conditional rendering.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from ...core.ir import Node
from ...core.tree import find_node
from .renderer import TreeRenderer
from .screen import initial_rows, state_var, visibility_var
from .utils import escape_jsx_text, indent, js_literal, setter_name

_PLAIN_ATTRIBUTE = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 -_./:#%,()")


def jsx_attr(name: str, value: Any) -> str:
    """A JSX attribute; non-string values and awkward strings use an expression."""
    if isinstance(value, bool):
        return name if value else f"{name}={{false}}"
    if isinstance(value, str) and all(ch in _PLAIN_ATTRIBUTE for ch in value):
        return f'{name}="{value}"'
    return f"{name}={{{js_literal(value)}}}"


def object_literal(values: dict[str, Any]) -> str:
    """A JavaScript object literal with bare keys where possible."""
    entries = []
    for key, value in values.items():
        name = key if key.replace("_", "a").isalnum() and not key[0].isdigit() else js_literal(key)
        entries.append(f"{name}: {js_literal(value)}")
    return "{ " + ", ".join(entries) + " }" if entries else "{}"


class JsxRenderer(TreeRenderer):
    """Base for renderers emitting React function components."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.imports: dict[str, set[str]] = {}
        self.default_imports: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def use(self, source: str, name: str) -> str:
        self.imports.setdefault(source, set()).add(name)
        return name

    def use_default(self, source: str, name: str) -> str:
        self.default_imports[source] = name
        return name

    def import_lines(self) -> list[str]:
        lines = [
            f"import {name} from {js_literal(source)};" for source, name in sorted(self.default_imports.items())
        ]
        lines.extend(
            f"import {{ {', '.join(sorted(names))} }} from {js_literal(source)};"
            for source, names in sorted(self.imports.items())
        )
        return lines

    # ------------------------------------------------------------------
    # Syntax helpers
    # ------------------------------------------------------------------

    def text(self, value: Any) -> str:
        return escape_jsx_text(value)

    def element(
        self,
        tag: str,
        attrs: list[str],
        body: str | None = None,
        inline: bool = False,
    ) -> str:
        opening = "<" + " ".join([tag, *attrs])
        if not body:
            return f"{opening} />"
        if inline:
            return f"{opening}>{body}</{tag}>"
        return f"{opening}>\n{indent(body)}\n</{tag}>"

    def style_attr(self, values: dict[str, Any]) -> list[str]:
        return [f"style={{{object_literal(values)}}}"] if values else []

    def conditional(self, node: Node, conditions: list[str], markup: str) -> str:
        return f"{{{' && '.join(conditions)} && (\n{indent(markup)}\n)}}"

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    @abstractmethod
    def navigate_call(self, target: str) -> str:
        """Expression navigating to a route."""

    @abstractmethod
    def change_attr(self, handler_body: str | None, setter: str | None) -> str | None:
        """The change-event attribute; either a state setter or a custom handler body."""

    def click_handler(self, node: Node) -> str | None:
        click = node.interactions.on_click if node.interactions else None
        if click is None:
            return None
        if click.action == "navigate" and click.target:
            return f"() => {self.navigate_call(click.target)}"
        if click.action == "toggleVisibility" and click.target:
            return f"() => {setter_name(visibility_var(click.target))}((visible) => !visible)"
        if click.action == "custom" and click.code:
            return f"() => {{ {click.code} }}"
        return None

    def event_attrs(self, node: Node, click_name: str = "onClick", change: bool = True) -> list[str]:
        attrs: list[str] = []
        handler = self.click_handler(node)
        if handler:
            attrs.append(f"{click_name}={{{handler}}}")
        if change:
            attrs.extend(self.change_attrs(node))
        return attrs

    def change_attrs(self, node: Node) -> list[str]:
        on_change = node.interactions.on_change if node.interactions else None
        if on_change is None:
            return []
        attr = None
        if on_change.action == "setState" and on_change.target:
            attr = self.change_attr(None, setter_name(state_var(on_change.target)))
        elif on_change.action == "custom" and on_change.code:
            attr = self.change_attr(on_change.code, None)
        return [attr] if attr else []

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def router_lines(self) -> list[str]:
        """Statements placed at the top of the component body when navigation is used."""
        return []

    def hook_lines(self) -> list[str]:
        state = self.state
        lines: list[str] = []
        if state.navigates:
            lines.extend(self.router_lines())
        if state.stateful:
            self.use("react", "useState")
        for node_id in state.toggled:
            var = visibility_var(node_id)
            lines.append(f"const [{var}, {setter_name(var)}] = useState(true);")
        for name in state.values:
            var = state_var(name)
            lines.append(f'const [{var}, {setter_name(var)}] = useState("");')
        for fetch in state.fetches:
            node = find_node(self.spec.tree, fetch.node_id)
            rows = initial_rows(node) if node is not None else []
            var = fetch.variable
            lines.append(f"const [{var}, {setter_name(var)}] = useState<any[]>({js_literal(rows)});")

        if state.fetches:
            self.use("react", "useEffect")
            lines.append("")
            lines.append("useEffect(() => {")
            for fetch in state.fetches:
                lines.extend(
                    [
                        f"  fetch({js_literal(fetch.url)})",
                        "    .then((response) => response.json())",
                        f"    .then((data) => {setter_name(fetch.variable)}(data{fetch.transform}));",
                    ]
                )
            lines.append("}, []);")
        return lines

    def component(self, name: str, body: str, header: list[str], preamble: list[str] | None = None) -> str:
        """
        Assemble the component module.

        Args:
            name: Exported component name
            body: Rendered root JSX
            header: Comment and directive lines placed before the imports
            preamble: Module-level declarations placed after the imports
        """
        hooks = self.hook_lines()
        lines = [*header, *self.import_lines(), ""]
        if preamble:
            lines.extend([*preamble, ""])
        lines.append(f"export function {name}() {{")
        if hooks:
            lines.extend(indent(line) for line in hooks)
            lines.append("")
        lines.append("  return (")
        lines.append(indent(body, 4))
        lines.append("  );")
        lines.append("}")
        return "\n".join(lines) + "\n"
