"""
Reusable component definitions and the props carried by ComponentRef nodes.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .node import Node, SpecModel


class ComponentDef(SpecModel):
    """A named subtree registered once and referenced by id."""

    id: str
    name: str
    tree: Node
    slots: list[str] | None = None


class DescendantOverride(SpecModel):
    """Prop and style overrides for one node inside a definition's subtree."""

    props: dict[str, Any] | None = None
    style: dict[str, Any] | None = None


class ComponentRefProps(SpecModel):
    """
    Props of a ComponentRef node.

    `descendants` is keyed by node id within the definition's own tree;
    `slot_content` maps a slot name to the nodes that replace that slot's children.
    """

    model_config = ConfigDict(extra="ignore")

    ref: str
    overrides: dict[str, Any] = Field(default_factory=dict)
    style_overrides: dict[str, Any] = Field(default_factory=dict)
    descendants: dict[str, DescendantOverride] = Field(default_factory=dict)
    slot_content: dict[str, list[Node]] = Field(default_factory=dict)
    unresolved: str | None = None
