"""
Vue backend.

Emits one single-file component per screen: a `<script setup lang="ts">`
block holding interaction state, a template of plain HTML elements with
inline styles, and a `<style>` block for responsive overrides.
"""

from __future__ import annotations

from ..core.config import StudioConfig
from ..core.ir import Node, ScreenSpec
from ..core.tree import find_node
from .base.backend import (
    GENERATED_MARKER,
    BackendCapabilities,
    EmitContext,
    EmitResult,
    EmittedFile,
    ScreenBackend,
)
from .base.css import responsive_css
from .base.markup import MarkupRenderer
from .base.screen import initial_rows, state_var, visibility_var
from .base.utils import component_name_from_route, indent, js_literal, js_single_quoted


class VueRenderer(MarkupRenderer):
    framework = "vue"

    def text(self, value: object) -> str:
        return super().text(value).replace("{{", "&#123;&#123;")

    def quote(self, value: str) -> str:
        return js_single_quoted(value)

    def event_attrs(self, node: Node, events: tuple[str, ...]) -> list[str]:
        if node.interactions is None:
            return []
        attrs: list[str] = []
        click = node.interactions.on_click
        if "click" in events and click is not None:
            statement = None
            if click.action == "navigate" and click.target:
                statement = f"router.push({js_single_quoted(click.target)})"
            elif click.action == "toggleVisibility" and click.target:
                var = visibility_var(click.target)
                statement = f"{var} = !{var}"
            elif click.action == "custom" and click.code:
                statement = click.code
            if statement:
                attrs.append(f'@click="{self.text(statement)}"')
        change = node.interactions.on_change
        if "change" in events and change is not None:
            statement = None
            if change.action == "setState" and change.target:
                statement = f"{state_var(change.target)} = ($event.target as HTMLInputElement).value"
            elif change.action == "custom" and change.code:
                statement = change.code
            if statement:
                attrs.append(f'@input="{self.text(statement)}"')
        return attrs

    def if_block(self, expression: str, markup: str) -> str:
        return f'<template v-if="{self.text(expression)}">\n{indent(markup)}\n</template>'

    def each_block(self, items: str, item: str, markup: str) -> str:
        return f'<template v-for="({item}, index) in {items}" :key="index">\n{indent(markup)}\n</template>'

    def interpolate(self, expression: str) -> str:
        return f"{{{{ {expression} }}}}"


class VueBackend(ScreenBackend):
    """Generates Vue 3 single-file components."""

    name = "vue"

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="vue",
            description="Vue 3 single-file components with <script setup> and inline styles",
            output_formats=["vue", "typescript"],
            file_extension=".vue",
        )

    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        context = context or EmitContext.create()
        name = component_name_from_route(spec.route)
        renderer = VueRenderer(spec, config, context)
        template = renderer.render(spec.tree)

        sections = [f"<!-- {GENERATED_MARKER} -->"]
        script = self._script(renderer)
        if script:
            sections.append(f'<script setup lang="ts">\n{script}\n</script>')
        sections.append(f"<template>\n{indent(template)}\n</template>")

        styles = responsive_css(renderer.state.responsive, context.tokens)
        if styles:
            sections.append(f"<style>\n{styles}\n</style>")

        contents = "\n\n".join(sections) + "\n"
        path = self.generated_path(config, f"{name}.generated.vue")
        return EmitResult(files=[EmittedFile(path, contents)], component_name=name)

    def _script(self, renderer: VueRenderer) -> str:
        state = renderer.state
        vue_imports = sorted(
            ([] if not state.stateful else ["ref"]) + (["onMounted"] if state.fetches else [])
        )

        lines: list[str] = []
        if vue_imports:
            lines.append(f'import {{ {", ".join(vue_imports)} }} from "vue";')
        if state.navigates:
            lines.append('import { useRouter } from "vue-router";')
        if lines:
            lines.append("")
        if state.navigates:
            lines.append("const router = useRouter();")
        for node_id in state.toggled:
            lines.append(f"const {visibility_var(node_id)} = ref(true);")
        for name in state.values:
            lines.append(f'const {state_var(name)} = ref("");')
        for fetch in state.fetches:
            node = find_node(renderer.spec.tree, fetch.node_id)
            rows = initial_rows(node) if node is not None else []
            lines.append(f"const {fetch.variable} = ref<any[]>({js_literal(rows)});")

        if state.fetches:
            lines.append("")
            lines.append("onMounted(async () => {")
            for fetch in state.fetches:
                lines.append(f"  const {fetch.variable}Response = await fetch({js_literal(fetch.url)});")
                lines.append(
                    f"  {fetch.variable}.value = (await {fetch.variable}Response.json()){fetch.transform};"
                )
            lines.append("});")
        return "\n".join(lines)

    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        lines = [f"// {GENERATED_MARKER}"]
        lines.extend(
            f'export {{ default as {name} }} from "./{name}.generated.vue";'
            for name in sorted(component_names)
        )
        return EmittedFile(self.generated_path(config, "index.ts"), "\n".join(lines) + "\n")
