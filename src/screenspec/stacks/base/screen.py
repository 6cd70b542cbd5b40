"""
Screen analysis shared by every backend.

Collects what a generated component needs besides markup: state variables
driven by interactions, whether navigation is used, which data-driven nodes
fetch rows from an API, and which nodes carry responsive overrides. Also
normalizes List/DataTable data the way the editor preview reads it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ...core.ir import BuiltinType, Node, VisibilityRule
from ...core.tree import walk
from .utils import identifier, js_literal, parse_pair

logger = logging.getLogger(__name__)

DATA_TYPES = frozenset({BuiltinType.LIST.value, BuiltinType.DATA_TABLE.value})


@dataclass(frozen=True)
class DataFetch:
    """A List/DataTable bound to an API endpoint."""

    node_id: str
    url: str
    mapping: dict[str, str] | None = None

    @property
    def variable(self) -> str:
        return rows_var(self.node_id)

    @property
    def transform(self) -> str:
        """JavaScript applied to the fetched array to rename mapped fields."""
        if not self.mapping:
            return ""
        fields = ", ".join(
            f"{js_literal(display)}: row[{js_literal(source)}]"
            for display, source in self.mapping.items()
        )
        return f".map((row) => ({{ ...row, {fields} }}))"


@dataclass
class ScreenState:
    """
    Interaction state of one screen.

    Attributes:
        toggled: Ids of nodes whose visibility is toggled by a click
        values: State names written by onChange or read by visibleWhen
        navigates: Whether any click navigates
        handlers: Whether any node binds a click or change handler
        fetches: API-bound data nodes
        responsive: Nodes with tablet/mobile overrides
    """

    toggled: list[str] = field(default_factory=list)
    values: list[str] = field(default_factory=list)
    navigates: bool = False
    handlers: bool = False
    fetches: list[DataFetch] = field(default_factory=list)
    responsive: list[Node] = field(default_factory=list)

    @property
    def stateful(self) -> bool:
        return bool(self.toggled or self.values or self.fetches)

    @property
    def interactive(self) -> bool:
        return self.stateful or self.navigates or self.handlers

    @property
    def responsive_ids(self) -> set[str]:
        return {node.id for node in self.responsive}

    def fetch_for(self, node_id: str) -> DataFetch | None:
        return next((f for f in self.fetches if f.node_id == node_id), None)


def analyze_screen(tree: Node) -> ScreenState:
    """Collect interaction state in tree order; names are de-duplicated."""
    state = ScreenState()
    for node, _ in walk(tree):
        interactions = node.interactions
        if interactions is not None:
            if interactions.on_click is not None or interactions.on_change is not None:
                state.handlers = True
            click = interactions.on_click
            if click is not None and click.target:
                if click.action == "toggleVisibility" and click.target not in state.toggled:
                    state.toggled.append(click.target)
                elif click.action == "navigate":
                    state.navigates = True
            change = interactions.on_change
            if change is not None and change.action == "setState" and change.target:
                if change.target not in state.values:
                    state.values.append(change.target)
            rule = interactions.visible_when
            if rule is not None and rule.state not in state.values:
                state.values.append(rule.state)

        source = node.data_source
        if source is not None and source.type == "api" and node.type in DATA_TYPES:
            if source.url:
                state.fetches.append(DataFetch(node.id, source.url, source.mapping))
            else:
                logger.warning(f"Node '{node.id}' has an api data source without a url")

        if node.responsive is not None and (node.responsive.tablet or node.responsive.mobile):
            state.responsive.append(node)
    return state


# =============================================================================
# Variable naming
# =============================================================================


def visibility_var(node_id: str) -> str:
    return f"{identifier(node_id)}Visible"


def state_var(name: str) -> str:
    ident = identifier(name)
    return f"state{ident[0].upper()}{ident[1:]}"


def rows_var(node_id: str) -> str:
    return f"{identifier(node_id)}Rows"


def condition_expr(
    rule: VisibilityRule,
    quote: Callable[[str], str] = js_literal,
    var: Callable[[str], str] = state_var,
) -> str:
    """JavaScript test for a visibleWhen rule; values compare as strings."""
    name = var(rule.state)
    if rule.operator == "truthy":
        return f"!!{name}"
    operator = "===" if rule.operator == "eq" else "!=="
    return f"String({name}) {operator} {quote(rule.value or '')}"


def visibility_conditions(
    node: Node,
    state: ScreenState,
    quote: Callable[[str], str] = js_literal,
) -> list[str]:
    """Every condition gating a node's rendering, toggles first."""
    conditions: list[str] = []
    if node.id in state.toggled:
        conditions.append(visibility_var(node.id))
    if node.interactions is not None and node.interactions.visible_when is not None:
        conditions.append(condition_expr(node.interactions.visible_when, quote))
    return conditions


# =============================================================================
# List / DataTable data
# =============================================================================


def apply_mapping(row: Any, mapping: dict[str, str] | None) -> Any:
    """
    Rename source fields into display keys.

    `mapping` is display key -> source field; unmapped fields pass through.
    """
    if not mapping or not isinstance(row, dict):
        return row
    mapped = {key: value for key, value in row.items() if key not in mapping.values()}
    for display_key, source_key in mapping.items():
        mapped[display_key] = row.get(source_key)
    return mapped


def _source_rows(node: Node) -> list[Any] | None:
    source = node.data_source
    if source is None or not source.data:
        return None
    return [apply_mapping(row, source.mapping) for row in source.data]


def list_items(node: Node) -> list[str]:
    """List entries: data-source rows when present, else the `items` prop."""
    rows = _source_rows(node)
    if rows is None:
        items = node.props.get("items")
        return [str(item) for item in items] if isinstance(items, list) else []
    return [
        " - ".join("" if v is None else str(v) for v in row.values()) if isinstance(row, dict) else str(row)
        for row in rows
    ]


def table_columns(node: Node) -> list[tuple[str, str]]:
    """(key, label) pairs parsed from "key|label" column entries."""
    columns = node.props.get("columns")
    return [parse_pair(c) for c in columns] if isinstance(columns, list) else []


def _parse_row(row: Any) -> dict[str, Any]:
    if isinstance(row, dict):
        return row
    try:
        parsed = json.loads(str(row))
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def table_rows(node: Node) -> list[dict[str, Any]]:
    """Rows as dicts: data-source rows when present, else `rows` (objects or JSON strings)."""
    rows = _source_rows(node)
    if rows is None:
        raw = node.props.get("rows")
        rows = raw if isinstance(raw, list) else []
    return [_parse_row(row) for row in rows]


def cell_text(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


def nav_items(node: Node) -> list[tuple[str, str]]:
    """(label, href) pairs parsed from "label|href" nav entries."""
    items = node.props.get("items")
    if not isinstance(items, list):
        return []
    return [parse_pair(item) if "|" in str(item) else (str(item), "#") for item in items]


def tab_labels(node: Node) -> list[str]:
    tabs = node.props.get("tabs")
    return [str(t) for t in tabs] if isinstance(tabs, list) else []


def initial_rows(node: Node) -> list[Any]:
    """Rows an API-bound node shows before its fetch completes."""
    if node.type == BuiltinType.DATA_TABLE.value:
        return table_rows(node)
    return list_items(node)
