"""
Screen document intermediate representation.

Re-exports the document model so callers can `from screenspec.core import ir`
and use `ir.Node`, `ir.ScreenSpec`, and friends.
"""

from .component import ComponentDef, ComponentRefProps, DescendantOverride
from .kinds import (
    BUILTIN_TYPES,
    COMPONENT_REF,
    CONTAINER_TYPES,
    BuiltinType,
    NodeKind,
    OtherType,
    RefKind,
    accepts_children,
    classify_type,
    node_kind,
)
from .node import (
    STYLE_PROPERTIES,
    ChangeInteraction,
    ClickInteraction,
    DataSource,
    Interactions,
    Node,
    NodeStyle,
    ResponsiveStyle,
    ScreenMeta,
    ScreenSpec,
    SpecModel,
    StyleValue,
    VisibilityRule,
)
from .tokens import DesignTokens, TokenGroup, TokenValue, Typography

__all__ = [
    # Kinds
    "BUILTIN_TYPES",
    "COMPONENT_REF",
    "CONTAINER_TYPES",
    "BuiltinType",
    "NodeKind",
    "OtherType",
    "RefKind",
    "accepts_children",
    "classify_type",
    "node_kind",
    # Document
    "STYLE_PROPERTIES",
    "ChangeInteraction",
    "ClickInteraction",
    "DataSource",
    "Interactions",
    "Node",
    "NodeStyle",
    "ResponsiveStyle",
    "ScreenMeta",
    "ScreenSpec",
    "SpecModel",
    "StyleValue",
    "VisibilityRule",
    # Components
    "ComponentDef",
    "ComponentRefProps",
    "DescendantOverride",
    # Tokens
    "DesignTokens",
    "TokenGroup",
    "TokenValue",
    "Typography",
]
