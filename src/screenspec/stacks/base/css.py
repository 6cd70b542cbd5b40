"""
CSS rendering of node style bags for the web backends.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ...core.ir import DesignTokens, Node, NodeStyle, StyleValue
from ...core.tokens import resolve_style
from .utils import camel_to_kebab

# Properties whose bare numbers carry no unit
UNITLESS = frozenset({"fontWeight", "lineHeight", "opacity", "zIndex", "flexGrow", "flexShrink"})

# Breakpoint name -> max viewport width in px, widest first
BREAKPOINTS: tuple[tuple[str, int], ...] = (("tablet", 1024), ("mobile", 640))

NODE_ATTRIBUTE = "data-ss"


def css_value(prop: str, value: StyleValue) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and prop not in UNITLESS:
        return f"{value}px"
    return str(value)


def css_properties(style: NodeStyle | None, tokens: DesignTokens | None) -> dict[str, str]:
    """Resolve a style bag into kebab-case CSS declarations."""
    return {
        camel_to_kebab(prop): css_value(prop, value)
        for prop, value in resolve_style(style, tokens).items()
    }


def inline_css(declarations: dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations.items())


def node_selector(node_id: str) -> str:
    return f'[{NODE_ATTRIBUTE}="{node_id}"]'


def responsive_css(
    nodes: Iterable[Node],
    tokens: DesignTokens | None,
    selector: Callable[[str], str] = node_selector,
) -> str:
    """
    Media-query rules for every node carrying responsive overrides.

    Overrides use !important so they win over inline styles.

    Returns:
        CSS text, empty when no node has overrides
    """
    nodes = list(nodes)
    blocks: list[str] = []
    for breakpoint, max_width in BREAKPOINTS:
        rules: list[str] = []
        for node in nodes:
            if node.responsive is None:
                continue
            declarations = css_properties(getattr(node.responsive, breakpoint), tokens)
            if not declarations:
                continue
            body = " ".join(f"{prop}: {value} !important;" for prop, value in declarations.items())
            rules.append(f"  {selector(node.id)} {{ {body} }}")
        if rules:
            blocks.append(f"@media (max-width: {max_width}px) {{\n" + "\n".join(rules) + "\n}")
    return "\n".join(blocks)
