"""
Svelte backend.

Emits one `.svelte` component per screen with plain `let` state, `on:`
event directives, `{#if}`/`{#each}` blocks, and a `<style>` block whose
responsive rules are marked `:global` so they reach every element.
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
from .base.css import node_selector, responsive_css
from .base.markup import MarkupRenderer
from .base.screen import initial_rows, state_var, visibility_var
from .base.utils import component_name_from_route, escape_jsx_text, indent, js_literal


class SvelteRenderer(MarkupRenderer):
    framework = "svelte"

    def text(self, value: object) -> str:
        return escape_jsx_text(value)

    def event_attrs(self, node: Node, events: tuple[str, ...]) -> list[str]:
        if node.interactions is None:
            return []
        attrs: list[str] = []
        click = node.interactions.on_click
        if "click" in events and click is not None:
            if click.action == "navigate" and click.target:
                attrs.append(f"on:click={{() => goto({js_literal(click.target)})}}")
            elif click.action == "toggleVisibility" and click.target:
                var = visibility_var(click.target)
                attrs.append(f"on:click={{() => ({var} = !{var})}}")
            elif click.action == "custom" and click.code:
                attrs.append(f"on:click={{() => {{ {click.code} }}}}")
        change = node.interactions.on_change
        if "change" in events and change is not None:
            if change.action == "setState" and change.target:
                attrs.append(f"on:input={{(e) => ({state_var(change.target)} = e.currentTarget.value)}}")
            elif change.action == "custom" and change.code:
                attrs.append(f"on:input={{(e) => {{ {change.code} }}}}")
        return attrs

    def if_block(self, expression: str, markup: str) -> str:
        return f"{{#if {expression}}}\n{indent(markup)}\n{{/if}}"

    def each_block(self, items: str, item: str, markup: str) -> str:
        return f"{{#each {items} as {item}}}\n{indent(markup)}\n{{/each}}"

    def interpolate(self, expression: str) -> str:
        return f"{{{expression}}}"


class SvelteBackend(ScreenBackend):
    """Generates Svelte components."""

    name = "svelte"

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="svelte",
            description="Svelte components with inline styles and SvelteKit navigation",
            output_formats=["svelte", "typescript"],
            file_extension=".svelte",
        )

    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        context = context or EmitContext.create()
        name = component_name_from_route(spec.route)
        renderer = SvelteRenderer(spec, config, context)
        markup = renderer.render(spec.tree)

        sections = [f"<!-- {GENERATED_MARKER} -->"]
        script = self._script(renderer)
        if script:
            sections.append(f'<script lang="ts">\n{indent(script)}\n</script>')
        sections.append(markup)

        styles = responsive_css(
            renderer.state.responsive,
            context.tokens,
            selector=lambda node_id: f":global({node_selector(node_id)})",
        )
        if styles:
            sections.append(f"<style>\n{indent(styles)}\n</style>")

        contents = "\n\n".join(sections) + "\n"
        path = self.generated_path(config, f"{name}.generated.svelte")
        return EmitResult(files=[EmittedFile(path, contents)], component_name=name)

    def _script(self, renderer: SvelteRenderer) -> str:
        state = renderer.state
        lines: list[str] = []
        if state.fetches:
            lines.append('import { onMount } from "svelte";')
        if state.navigates:
            lines.append('import { goto } from "$app/navigation";')
        if lines and state.stateful:
            lines.append("")
        for node_id in state.toggled:
            lines.append(f"let {visibility_var(node_id)} = true;")
        for name in state.values:
            lines.append(f'let {state_var(name)} = "";')
        for fetch in state.fetches:
            node = find_node(renderer.spec.tree, fetch.node_id)
            rows = initial_rows(node) if node is not None else []
            lines.append(f"let {fetch.variable}: any[] = {js_literal(rows)};")

        if state.fetches:
            lines.append("")
            lines.append("onMount(async () => {")
            for fetch in state.fetches:
                lines.append(f"  const {fetch.variable}Response = await fetch({js_literal(fetch.url)});")
                lines.append(
                    f"  {fetch.variable} = (await {fetch.variable}Response.json()){fetch.transform};"
                )
            lines.append("});")
        return "\n".join(lines)

    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        lines = [f"// {GENERATED_MARKER}"]
        lines.extend(
            f'export {{ default as {name} }} from "./{name}.generated.svelte";'
            for name in sorted(component_names)
        )
        return EmittedFile(self.generated_path(config, "index.ts"), "\n".join(lines) + "\n")
