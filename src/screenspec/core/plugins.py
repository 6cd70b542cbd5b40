"""
Node plugins: project-supplied node types.

A plugin declares a node type that is not built in, a prop schema used to
validate nodes of that type, and an `emit` function returning the markup
backends splice in for such a node. Plugins are referenced from
studio.config.json either as ``package.module:ATTR`` or as a path to a
``.py`` file exposing ``PLUGIN`` or ``PLUGINS``.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import PluginError, ValidationIssue
from .ir import BUILTIN_TYPES, COMPONENT_REF, Node
from .prop_schemas import PropDef, check_props
from .tree import walk

logger = logging.getLogger(__name__)

EmitFn = Callable[[Node], str]


@dataclass
class NodePlugin:
    """
    A custom node type.

    Attributes:
        type: Node type tag; must not collide with a built-in type
        label: Palette label
        prop_schema: Allowed props for nodes of this type
        emit: Markup for a node, used by every backend without its own entry
        emitters: Backend name -> markup function overriding `emit`
        accepts_children: Whether the node may hold children
        category: Palette grouping
        description: Palette help text
    """

    type: str
    label: str
    prop_schema: dict[str, PropDef]
    emit: EmitFn
    emitters: dict[str, EmitFn] = field(default_factory=dict)
    accepts_children: bool = False
    category: str = "Custom"
    description: str = ""

    def render(self, node: Node, framework: str) -> str:
        return self.emitters.get(framework, self.emit)(node)


class PluginRegistry:
    """Registry of node plugins keyed by type."""

    def __init__(self) -> None:
        self._plugins: dict[str, NodePlugin] = {}

    def register(self, plugin: NodePlugin) -> None:
        """
        Register a plugin.

        Raises:
            PluginError: If the type is built in or already registered
        """
        if plugin.type in BUILTIN_TYPES or plugin.type == COMPONENT_REF:
            raise PluginError(f"Plugin type '{plugin.type}' conflicts with a built-in node type")
        if plugin.type in self._plugins:
            raise PluginError(f"Plugin type '{plugin.type}' is already registered")
        self._plugins[plugin.type] = plugin
        logger.debug(f"Registered node plugin: {plugin.type}")

    def get(self, node_type: str) -> NodePlugin | None:
        return self._plugins.get(node_type)

    def has(self, node_type: str) -> bool:
        return node_type in self._plugins

    def all(self) -> list[NodePlugin]:
        return list(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)

    def validate_tree(self, tree: Node) -> list[ValidationIssue]:
        """Check plugin-owned nodes against their plugin's prop schema."""
        issues: list[ValidationIssue] = []
        for node, path in walk(tree):
            plugin = self.get(node.type)
            if plugin is None:
                continue
            for issue_path, message in check_props(node.props, plugin.prop_schema, path):
                issues.append(ValidationIssue(issue_path, message))
            if node.children and not plugin.accepts_children:
                issues.append(ValidationIssue(f"{path}.children", f"{node.type} does not accept children"))
        return issues


def _import_reference(reference: str, root: Path) -> Any:
    if reference.endswith(".py"):
        path = (root / reference).resolve()
        spec = importlib.util.spec_from_file_location(f"screenspec_plugins.{path.stem}", path)
        if spec is None or spec.loader is None:
            raise PluginError(f"Cannot load plugin file: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        if hasattr(module, "PLUGINS"):
            return module.PLUGINS
        if hasattr(module, "PLUGIN"):
            return module.PLUGIN
        raise PluginError(f"Plugin file {path} defines neither PLUGIN nor PLUGINS")

    module_name, _, attr = reference.partition(":")
    module = importlib.import_module(module_name)
    if attr:
        return getattr(module, attr)
    return getattr(module, "PLUGINS", None) or getattr(module, "PLUGIN")


def load_plugins(references: Iterable[str], root: Path) -> PluginRegistry:
    """
    Import and register every referenced plugin.

    Args:
        references: ``module:attr`` references or ``.py`` paths relative to root
        root: Project root

    Returns:
        Registry holding every loaded plugin

    Raises:
        PluginError: If a reference cannot be imported or does not yield NodePlugins
    """
    registry = PluginRegistry()
    for reference in references:
        try:
            exported = _import_reference(reference, root)
        except PluginError:
            raise
        except Exception as e:
            raise PluginError(f"Failed to load plugin '{reference}': {e}") from e

        plugins = exported if isinstance(exported, (list, tuple)) else [exported]
        for plugin in plugins:
            if not isinstance(plugin, NodePlugin):
                raise PluginError(
                    f"Plugin '{reference}' must export a NodePlugin or a list of NodePlugins"
                )
            registry.register(plugin)
    return registry
