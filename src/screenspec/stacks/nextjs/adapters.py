"""
Component library adapters for the Next.js backend.

An adapter maps logical node types (Button, Card, Input, ...) to a
library's components: where to import them from, which JSX tag to use, and
how node props translate into the component's props. Node types an adapter
does not list are rendered as plain elements.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSpec:
    specifier: str
    source: str


@dataclass(frozen=True)
class ComponentMapping:
    """
    How one node type maps onto a library component.

    Attributes:
        tag: JSX tag / exported component name
        module: Module path under the library's component directory
        rename: Node prop name -> component prop name
        value_map: Node prop name -> (node value -> component value)
    """

    tag: str
    module: str
    rename: dict[str, str] = field(default_factory=dict)
    value_map: dict[str, dict[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class ComponentAdapter:
    """A component library's mapping table."""

    name: str
    base_path: str
    components: dict[str, ComponentMapping]

    def handles(self, node_type: str) -> bool:
        return node_type in self.components

    def resolve_import(self, node_type: str, import_alias: str) -> ImportSpec | None:
        mapping = self.components.get(node_type)
        if mapping is None:
            return None
        prefix = import_alias.rstrip("/")
        return ImportSpec(mapping.tag, f"{prefix}/{self.base_path}/{mapping.module}")

    def transform_props(self, node_type: str, props: dict[str, Any]) -> dict[str, Any]:
        """Apply value maps on the document prop names, then rename props."""
        mapping = self.components.get(node_type)
        if mapping is None:
            return dict(props)
        result: dict[str, Any] = {}
        for key, value in props.items():
            values = mapping.value_map.get(key)
            if values is not None and isinstance(value, str) and value in values:
                value = values[value]
            result[mapping.rename.get(key, key)] = value
        return result


SHADCN = ComponentAdapter(
    name="shadcn",
    base_path="components/ui",
    components={
        "Button": ComponentMapping(
            "Button",
            "button",
            rename={"intent": "variant"},
            value_map={"intent": {"primary": "default"}},
        ),
        "Card": ComponentMapping("Card", "card"),
        "Input": ComponentMapping("Input", "input"),
        "ScrollArea": ComponentMapping("ScrollArea", "scroll-area"),
        "Divider": ComponentMapping("Separator", "separator"),
    },
)

ADAPTERS: dict[str, ComponentAdapter] = {SHADCN.name: SHADCN}


def get_adapter(name: str | None) -> ComponentAdapter | None:
    """Look up a component library adapter; unknown names render plain elements."""
    if not name:
        return None
    adapter = ADAPTERS.get(name)
    if adapter is None:
        logger.warning(f"Unknown component library '{name}', emitting plain elements")
    return adapter
