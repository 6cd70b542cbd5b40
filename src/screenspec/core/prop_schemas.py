"""
Allowed props per built-in node type.

Both validation paths and the generated JSON Schema are driven from this
table, so they accept exactly the same documents.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Literal

from .ir import BuiltinType

PropType = Literal["string", "number", "boolean", "array"]


@dataclass(frozen=True)
class PropDef:
    """
    Declaration of a single prop.

    Attributes:
        type: Primitive JSON type of the value
        label: Human-readable label for editor property panels
        required: Whether the prop must be present
        enum: Allowed values, when restricted
        default: Value the editor seeds new nodes with
    """

    type: PropType
    label: str = ""
    required: bool = False
    enum: tuple[Any, ...] | None = None
    default: Any = None

    def check(self, value: Any) -> str | None:
        """Return a violation message for `value`, or None when it is acceptable."""
        if not _matches_type(self.type, value):
            return f"must be of type {self.type}"
        if self.enum is not None and value not in self.enum:
            allowed = ", ".join(repr(v) for v in self.enum)
            return f"must be one of {allowed}"
        return None

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type}
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        return schema


def _matches_type(prop_type: PropType, value: Any) -> bool:
    if prop_type == "string":
        return isinstance(value, str)
    if prop_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if prop_type == "boolean":
        return isinstance(value, bool)
    return isinstance(value, list)


SCALE = ("xs", "sm", "md", "lg", "xl")

# Props every node may carry regardless of type
COMMON_PROPS: dict[str, PropDef] = {
    "slot": PropDef("string", "Slot name"),
    "className": PropDef("string", "Class name"),
}

NODE_PROP_SCHEMAS: dict[BuiltinType, dict[str, PropDef]] = {
    # Layout
    BuiltinType.STACK: {
        "gap": PropDef("string", "Gap", enum=SCALE, default="md"),
        "padding": PropDef("string", "Padding", enum=SCALE),
        "direction": PropDef("string", "Direction", enum=("column", "row"), default="column"),
    },
    BuiltinType.GRID: {
        "columns": PropDef("number", "Columns", default=2),
        "gap": PropDef("string", "Gap", enum=SCALE, default="md"),
    },
    BuiltinType.SECTION: {
        "padding": PropDef("string", "Padding", enum=SCALE),
    },
    BuiltinType.SCROLL_AREA: {
        "height": PropDef("string", "Height", default="auto"),
    },
    BuiltinType.SPACER: {
        "size": PropDef("string", "Size", enum=SCALE, default="md"),
    },
    BuiltinType.BOX: {},
    # Content
    BuiltinType.HEADING: {
        "text": PropDef("string", "Text", default="Heading"),
        "level": PropDef("number", "Level", enum=(1, 2, 3, 4, 5, 6), default=1),
        "variant": PropDef("string", "Variant", enum=("", "hero", "title", "subtitle", "section")),
        "fontFamily": PropDef("string", "Font Family"),
    },
    BuiltinType.TEXT: {
        "text": PropDef("string", "Text", default="Text content"),
        "variant": PropDef("string", "Variant", enum=("", "body", "muted")),
        "fontFamily": PropDef("string", "Font Family"),
    },
    BuiltinType.IMAGE: {
        "src": PropDef("string", "Source URL", required=True),
        "alt": PropDef("string", "Alt text", required=True),
        "width": PropDef("number", "Width"),
        "height": PropDef("number", "Height"),
    },
    BuiltinType.INPUT: {
        "placeholder": PropDef("string", "Placeholder"),
        "type": PropDef(
            "string",
            "Type",
            enum=("text", "email", "password", "number", "tel", "url"),
            default="text",
        ),
        "label": PropDef("string", "Label"),
    },
    BuiltinType.LINK: {
        "href": PropDef("string", "URL", required=True),
        "text": PropDef("string", "Text"),
    },
    BuiltinType.DIVIDER: {},
    BuiltinType.LIST: {
        "items": PropDef("array", "Items", default=[]),
        "ordered": PropDef("boolean", "Ordered", default=False),
    },
    BuiltinType.ICON: {
        "name": PropDef("string", "Icon Name", default="Star"),
        "size": PropDef("number", "Size (px)", default=24),
        "color": PropDef("string", "Color"),
    },
    # Components
    BuiltinType.CARD: {
        "padding": PropDef("string", "Padding", enum=SCALE, default="md"),
    },
    BuiltinType.BUTTON: {
        "label": PropDef("string", "Label", default="Button"),
        "intent": PropDef(
            "string",
            "Intent",
            enum=("default", "primary", "secondary", "destructive", "outline", "ghost", "link"),
            default="primary",
        ),
        "size": PropDef("string", "Size", enum=("default", "xs", "sm", "lg", "icon"), default="default"),
    },
    BuiltinType.FORM: {
        "action": PropDef("string", "Action URL"),
        "method": PropDef("string", "Method", enum=("post", "get"), default="post"),
    },
    BuiltinType.MODAL: {
        "title": PropDef("string", "Title", default="Dialog"),
        "open": PropDef("boolean", "Open (preview)", default=True),
    },
    BuiltinType.TABS: {
        "tabs": PropDef("array", "Tab labels", default=["Tab 1", "Tab 2"]),
    },
    BuiltinType.NAV: {
        "orientation": PropDef(
            "string", "Orientation", enum=("horizontal", "vertical"), default="horizontal"
        ),
        "items": PropDef("array", "Nav items (label|href)", default=["Home|/", "About|/about"]),
    },
    BuiltinType.DATA_TABLE: {
        "columns": PropDef("array", "Columns (key|label)", default=["name|Name", "email|Email"]),
        "rows": PropDef("array", "Rows (JSON per line)", default=[]),
    },
}


def allowed_props(node_type: BuiltinType) -> dict[str, PropDef]:
    """Every prop a built-in type accepts, common props included."""
    return {**COMMON_PROPS, **NODE_PROP_SCHEMAS[node_type]}


def default_props(node_type: BuiltinType) -> dict[str, Any]:
    """Props seeded on a freshly created node of this type."""
    return {
        name: copy.deepcopy(prop.default)
        for name, prop in NODE_PROP_SCHEMAS[node_type].items()
        if prop.default is not None
    }


def check_props(props: dict[str, Any], schema: dict[str, PropDef], path: str) -> list[tuple[str, str]]:
    """
    Check a prop bag against a schema, failing closed on unknown props.

    Returns:
        (instance path, message) pairs, one per violation
    """
    issues: list[tuple[str, str]] = []
    for name, prop in schema.items():
        if prop.required and name not in props:
            issues.append((f"{path}.props", f"missing required prop '{name}'"))
    for name, value in props.items():
        prop = schema.get(name)
        if prop is None:
            issues.append((f"{path}.props.{name}", "is not an allowed prop"))
            continue
        message = prop.check(value)
        if message:
            issues.append((f"{path}.props.{name}", message))
    return issues
