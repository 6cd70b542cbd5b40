"""
Node kind classification.

Every node tag falls into exactly one of three kinds:

- BuiltinType: one of the tags the validator and every backend understand
- RefKind: a ComponentRef placeholder that resolution expands
- OtherType: an externally supplied component name, carried with its
  attributes and exempt from core prop validation
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .node import Node


class BuiltinType(StrEnum):
    """Built-in node tags."""

    # Layout
    STACK = "Stack"
    GRID = "Grid"
    SECTION = "Section"
    SCROLL_AREA = "ScrollArea"
    SPACER = "Spacer"
    BOX = "Box"

    # Content
    HEADING = "Heading"
    TEXT = "Text"
    IMAGE = "Image"
    INPUT = "Input"
    LINK = "Link"
    DIVIDER = "Divider"
    LIST = "List"
    ICON = "Icon"

    # Components
    CARD = "Card"
    BUTTON = "Button"
    FORM = "Form"
    MODAL = "Modal"
    TABS = "Tabs"
    NAV = "Nav"
    DATA_TABLE = "DataTable"


COMPONENT_REF = "ComponentRef"

BUILTIN_TYPES: frozenset[str] = frozenset(t.value for t in BuiltinType)

CONTAINER_TYPES: frozenset[BuiltinType] = frozenset(
    {
        BuiltinType.STACK,
        BuiltinType.GRID,
        BuiltinType.SECTION,
        BuiltinType.SCROLL_AREA,
        BuiltinType.BOX,
        BuiltinType.CARD,
        BuiltinType.FORM,
        BuiltinType.MODAL,
        BuiltinType.TABS,
        BuiltinType.NAV,
    }
)


@dataclass(frozen=True)
class RefKind:
    """A ComponentRef node; `ref` is None when the props carry no usable id."""

    ref: str | None


@dataclass(frozen=True)
class OtherType:
    """An externally supplied component tag with its raw attributes."""

    tag: str
    attributes: Mapping[str, Any] = field(default_factory=dict)


NodeKind = BuiltinType | RefKind | OtherType


def classify_type(tag: str, attributes: Mapping[str, Any] | None = None) -> NodeKind:
    """
    Classify a node tag.

    Args:
        tag: The node's `type` string
        attributes: The node's props

    Returns:
        The node kind
    """
    attributes = attributes or {}
    if tag in BUILTIN_TYPES:
        return BuiltinType(tag)
    if tag == COMPONENT_REF:
        ref = attributes.get("ref")
        return RefKind(ref=ref if isinstance(ref, str) and ref else None)
    return OtherType(tag=tag, attributes=dict(attributes))


def node_kind(node: Node) -> NodeKind:
    """Classify a parsed node."""
    return classify_type(node.type, node.props)


def accepts_children(tag: str) -> bool:
    """Whether a built-in tag is a container. Non built-in tags may always nest."""
    if tag in BUILTIN_TYPES:
        return BuiltinType(tag) in CONTAINER_TYPES
    return True
