"""
ComponentRef expansion.

A ComponentRef node stands in for an instance of a registered ComponentDef.
Resolution replaces it with a deep copy of the definition's tree after
applying, in order:

1. root prop overrides (shallow merge)
2. root style overrides (shallow merge)
3. per-descendant overrides, addressed by node id inside the definition
4. slot substitution: a node whose `slot` prop names supplied, non-empty
   content gets that content as its children

The expanded root takes the ComponentRef's own id and is resolved again,
since definitions may reference other definitions. References that cannot be
expanded never raise; the ref node is passed through with
`props.unresolved` set so backends can render a visible placeholder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from .ir import COMPONENT_REF, ComponentDef, ComponentRefProps, Node, NodeStyle

logger = logging.getLogger(__name__)

MAX_DEPTH = 32

UNRESOLVED_MISSING = "missing"
UNRESOLVED_CIRCULAR = "circular"
UNRESOLVED_INVALID = "invalid"

Registry = Mapping[str, ComponentDef]


def build_registry(defs: Iterable[ComponentDef]) -> dict[str, ComponentDef]:
    """Index definitions by id; a later duplicate replaces an earlier one."""
    registry: dict[str, ComponentDef] = {}
    for definition in defs:
        if definition.id in registry:
            logger.warning(f"Duplicate component definition id '{definition.id}', last one wins")
        registry[definition.id] = definition
    return registry


def _merge_style(style: NodeStyle | None, overrides: Mapping[str, Any] | None) -> NodeStyle | None:
    if not overrides:
        return style
    merged = style.declared() if style else {}
    merged.update(overrides)
    return NodeStyle.model_validate(merged)


def _apply_overrides(
    node: Node,
    props: Mapping[str, Any] | None,
    style: Mapping[str, Any] | None,
) -> None:
    if props:
        node.props = {**node.props, **props}
    node.style = _merge_style(node.style, style)


def _apply_descendant_overrides(node: Node, ref_props: ComponentRefProps) -> None:
    override = ref_props.descendants.get(node.id)
    if override is not None:
        _apply_overrides(node, override.props, override.style)
    for child in node.iter_children():
        _apply_descendant_overrides(child, ref_props)


def _inject_slot_content(node: Node, slot_content: Mapping[str, list[Node]]) -> None:
    slot = node.props.get("slot")
    if isinstance(slot, str) and slot_content.get(slot):
        node.children = [child.model_copy(deep=True) for child in slot_content[slot]]
        return
    for child in node.iter_children():
        _inject_slot_content(child, slot_content)


def _unresolved(node: Node, reason: str) -> Node:
    return node.model_copy(update={"props": {**node.props, "unresolved": reason}})


def expand_ref(node: Node, definition: ComponentDef) -> Node:
    """
    Expand a single ComponentRef against its definition, without recursing.

    Raises:
        pydantic.ValidationError: If the ref's props are malformed
    """
    ref_props = ComponentRefProps.model_validate(node.props)

    expanded = definition.tree.model_copy(deep=True)
    _apply_overrides(expanded, ref_props.overrides, ref_props.style_overrides)
    if ref_props.descendants:
        _apply_descendant_overrides(expanded, ref_props)
    if ref_props.slot_content:
        _inject_slot_content(expanded, ref_props.slot_content)
    expanded.id = node.id
    return expanded


def _resolve(node: Node, registry: Registry, active: frozenset[str], depth: int) -> Node:
    if node.type == COMPONENT_REF:
        ref = node.props.get("ref")
        if not isinstance(ref, str) or not ref:
            return node
        definition = registry.get(ref)
        if definition is None:
            logger.warning(f"ComponentRef '{node.id}' targets unknown component '{ref}'")
            return _unresolved(node, UNRESOLVED_MISSING)
        if ref in active or depth >= MAX_DEPTH:
            logger.warning(f"Circular component reference at '{node.id}' -> '{ref}'")
            return _unresolved(node, UNRESOLVED_CIRCULAR)
        try:
            expanded = expand_ref(node, definition)
        except ValidationError as e:
            logger.warning(f"ComponentRef '{node.id}' has malformed props: {e}")
            return _unresolved(node, UNRESOLVED_INVALID)
        return _resolve(expanded, registry, active | {ref}, depth + 1)

    if not node.children:
        return node

    children = [_resolve(child, registry, active, depth) for child in node.children]
    if all(new is old for new, old in zip(children, node.children)):
        return node
    return node.model_copy(update={"children": children})


def resolve_refs(tree: Node, registry: Registry) -> Node:
    """
    Expand every ComponentRef in a tree.

    The input is never mutated. Subtrees containing no ComponentRef are
    returned as the same objects.

    Args:
        tree: Tree possibly containing ComponentRef nodes
        registry: Component definitions keyed by id

    Returns:
        A tree in which every resolvable ref has been expanded
    """
    return _resolve(tree, registry, frozenset(), 0)


def has_unresolved_refs(tree: Node) -> bool:
    if tree.type == COMPONENT_REF:
        return True
    return any(has_unresolved_refs(child) for child in tree.iter_children())


# =============================================================================
# Instance editing helpers
# =============================================================================


def overridden_props(instance: Node, definition: ComponentDef) -> list[str]:
    """Prop names whose instance override differs from the definition root."""
    overrides = instance.props.get("overrides") or {}
    base = definition.tree.props
    return sorted(key for key, value in overrides.items() if base.get(key) != value)


def reset_to_component(instance: Node) -> Node:
    """Drop every override from a ComponentRef, keeping its id and target."""
    if instance.type != COMPONENT_REF:
        return instance
    props = {
        key: value
        for key, value in instance.props.items()
        if key not in ("overrides", "styleOverrides", "descendants", "slotContent", "unresolved")
    }
    return instance.model_copy(update={"props": props})
