"""
Plain HTML/CSS backend.

Generates standalone .html files that open directly in a browser. There
are no framework dependencies: layout uses inline styles plus a minimal
embedded stylesheet, and interactions run through a small inline script
that shows and hides elements marked with `data-ss-*` attributes.
API-bound lists and tables render their static fallback rows.
"""

from __future__ import annotations

from ..core.config import StudioConfig
from ..core.ir import Node, ScreenSpec
from .base.backend import (
    GENERATED_MARKER,
    BackendCapabilities,
    EmitContext,
    EmitResult,
    EmittedFile,
    ScreenBackend,
)
from .base.css import responsive_css
from .base.markup import BASE_CSS, MarkupRenderer
from .base.utils import component_name_from_route, escape_html, indent, js_literal, js_single_quoted

STATE_SCRIPT = """\
function ssUpdate() {
  document.querySelectorAll("[data-ss-when]").forEach(function (el) {
    var show = true;
    var toggle = el.dataset.ssToggle;
    if (toggle !== undefined) show = show && ssVisible[toggle] !== false;
    var name = el.dataset.ssState;
    if (name !== undefined) {
      var current = ssState[name];
      var op = el.dataset.ssOp;
      if (op === "eq") show = show && String(current) === el.dataset.ssValue;
      else if (op === "neq") show = show && String(current) !== el.dataset.ssValue;
      else show = show && !!current;
    }
    el.style.display = show ? "contents" : "none";
  });
}
function ssToggle(id) {
  ssVisible[id] = ssVisible[id] === false;
  ssUpdate();
}
function ssSet(name, value) {
  ssState[name] = value;
  ssUpdate();
}
ssUpdate();"""


class HtmlRenderer(MarkupRenderer):
    framework = "html"

    def __init__(self, spec: ScreenSpec, config: StudioConfig, context: EmitContext):
        super().__init__(spec, config, context)
        # No runtime fetching: data nodes show their static rows
        self.state.fetches = []

    def event_attrs(self, node: Node, events: tuple[str, ...]) -> list[str]:
        if node.interactions is None:
            return []
        attrs: list[str] = []
        click = node.interactions.on_click
        if "click" in events and click is not None:
            statement = None
            if click.action == "navigate" and click.target:
                statement = f"window.location.href = {js_single_quoted(click.target)}"
            elif click.action == "toggleVisibility" and click.target:
                statement = f"ssToggle({js_single_quoted(click.target)})"
            elif click.action == "custom" and click.code:
                statement = click.code
            if statement:
                attrs.append(f'onclick="{self.text(statement)}"')
        change = node.interactions.on_change
        if "change" in events and change is not None:
            statement = None
            if change.action == "setState" and change.target:
                statement = f"ssSet({js_single_quoted(change.target)}, this.value)"
            elif change.action == "custom" and change.code:
                statement = change.code
            if statement:
                attrs.append(f'oninput="{self.text(statement)}"')
        return attrs

    def conditional(self, node: Node, conditions: list[str], markup: str) -> str:
        attrs = ["data-ss-when"]
        if node.id in self.state.toggled:
            attrs.append(f'data-ss-toggle="{self.text(node.id)}"')
        rule = node.interactions.visible_when if node.interactions else None
        if rule is not None:
            attrs.append(f'data-ss-state="{self.text(rule.state)}"')
            attrs.append(f'data-ss-op="{rule.operator}"')
            if rule.operator != "truthy":
                attrs.append(f'data-ss-value="{self.text(rule.value or "")}"')
        return f'<div {" ".join(attrs)} style="display: contents">\n{indent(markup)}\n</div>'

    # Runtime blocks are never produced once fetches are cleared

    def if_block(self, expression: str, markup: str) -> str:
        return markup

    def each_block(self, items: str, item: str, markup: str) -> str:
        return markup

    def interpolate(self, expression: str) -> str:
        return ""


class HtmlBackend(ScreenBackend):
    """Generates standalone HTML documents."""

    name = "html"

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="html",
            description="Standalone HTML documents with inline CSS, no framework",
            output_formats=["html"],
            file_extension=".html",
        )

    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        context = context or EmitContext.create()
        name = component_name_from_route(spec.route)
        renderer = HtmlRenderer(spec, config, context)
        body = renderer.render(spec.tree)

        css = BASE_CSS
        responsive = responsive_css(renderer.state.responsive, context.tokens)
        if responsive:
            css = f"{css}\n{responsive}"

        script = self._script(renderer)
        lines = [
            "<!DOCTYPE html>",
            f"<!-- {GENERATED_MARKER} -->",
            '<html lang="en">',
            "<head>",
            '  <meta charset="UTF-8" />',
            '  <meta name="viewport" content="width=device-width, initial-scale=1.0" />',
            f"  <title>{escape_html(name)}</title>",
            "  <style>",
            indent(css, 4),
            "  </style>",
            "</head>",
            "<body>",
            '  <div id="app">',
            indent(body, 4),
            "  </div>",
        ]
        if script:
            lines.extend(["  <script>", indent(script, 4), "  </script>"])
        lines.extend(["</body>", "</html>"])

        contents = "\n".join(lines) + "\n"
        path = self.generated_path(config, f"{name}.generated.html")
        return EmitResult(files=[EmittedFile(path, contents)], component_name=name)

    def _script(self, renderer: HtmlRenderer) -> str:
        state = renderer.state
        if not (state.toggled or state.values):
            return ""
        visible = {node_id: True for node_id in state.toggled}
        values = {name: "" for name in state.values}
        return "\n".join(
            [
                f"var ssVisible = {js_literal(visible)};",
                f"var ssState = {js_literal(values)};",
                STATE_SCRIPT,
            ]
        )

    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        links = "\n".join(
            f'      <li><a href="./{name}.generated.html">{escape_html(name)}</a></li>'
            for name in sorted(component_names)
        )
        lines = [
            "<!DOCTYPE html>",
            f"<!-- {GENERATED_MARKER} -->",
            '<html lang="en">',
            "<head>",
            '  <meta charset="UTF-8" />',
            "  <title>Screens</title>",
            "</head>",
            "<body>",
            "  <nav>",
            "    <ul>",
        ]
        if links:
            lines.append(links)
        lines.extend(["    </ul>", "  </nav>", "</body>", "</html>"])
        return EmittedFile(self.generated_path(config, "index.html"), "\n".join(lines) + "\n")
