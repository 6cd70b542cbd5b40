"""
Next.js backend.

Emits one React function component per screen as TSX styled with Tailwind
utility classes. Screens with interactions become client components.
When `componentLibrary` names a known adapter (e.g. "shadcn"), mapped node
types render as that library's components.
"""

from __future__ import annotations

import logging

from ...core.config import StudioConfig
from ...core.ir import ScreenSpec
from ..base.backend import (
    GENERATED_MARKER,
    BackendCapabilities,
    EmitContext,
    EmitResult,
    EmittedFile,
    ScreenBackend,
)
from ..base.css import responsive_css
from ..base.utils import component_name_from_route, indent, js_literal
from .adapters import ADAPTERS, get_adapter
from .renderer import NextjsRenderer

logger = logging.getLogger(__name__)

RESPONSIVE_CONSTANT = "RESPONSIVE_CSS"


class NextjsBackend(ScreenBackend):
    """Generates Next.js React components with Tailwind classes."""

    name = "nextjs"

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="nextjs",
            description="Next.js React components (TSX) styled with Tailwind CSS",
            output_formats=["tsx"],
            file_extension=".tsx",
            component_libraries=sorted(ADAPTERS),
        )

    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        context = context or EmitContext.create()
        name = component_name_from_route(spec.route)
        renderer = NextjsRenderer(spec, config, context, adapter=get_adapter(config.component_library))
        body = renderer.render(spec.tree)

        preamble: list[str] = []
        responsive = responsive_css(renderer.state.responsive, context.tokens)
        if responsive:
            preamble.append(f"const {RESPONSIVE_CONSTANT} = {js_literal(responsive)};")
            body = f"<>\n{indent(f'<style>{{{RESPONSIVE_CONSTANT}}}</style>')}\n{indent(body)}\n</>"
        elif body.startswith("{"):
            body = f"<>\n{indent(body)}\n</>"

        header = [f"// {GENERATED_MARKER}"]
        if renderer.state.interactive:
            header.append('"use client";')
            header.append("")

        contents = renderer.component(name, body, header, preamble)
        logger.debug(f"Rendered {name} with {len(renderer.imports)} import source(s)")
        path = self.generated_path(config, f"{name}.generated.tsx")
        return EmitResult(files=[EmittedFile(path, contents)], component_name=name)

    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        lines = [f"// {GENERATED_MARKER}"]
        lines.extend(
            f'export {{ {name} }} from "./{name}.generated";' for name in sorted(component_names)
        )
        return EmittedFile(self.generated_path(config, "index.ts"), "\n".join(lines) + "\n")
