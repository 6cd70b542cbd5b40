"""
Editable screen document.

EditorDocument is the single-writer mutation engine shared by interactive
editing and tooling. Every structural mutation:

1. checks its guards (root protection, locks, missing ids, id collisions)
   and returns a rejected MutationResult without touching history when one
   fails
2. records a snapshot of the pre-mutation document
3. applies the change in place

Selection, hidden, and locked ids are editor-local state and are never
written into the document.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..core.ir import BuiltinType, Node, NodeStyle, ScreenSpec
from ..core.tree import collect_ids, detach_node, find_node, find_parent, insert_child, is_descendant
from .history import DEFAULT_HISTORY_LIMIT, History
from .ids import IdFactory, clone_with_new_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    """Outcome of an editor operation."""

    applied: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.applied

    @classmethod
    def ok(cls) -> MutationResult:
        return cls(True)

    @classmethod
    def rejected(cls, reason: str) -> MutationResult:
        logger.debug(f"Mutation rejected: {reason}")
        return cls(False, reason)


def _prune_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None and value != ""}


class EditorDocument:
    """
    A screen spec under edit, with selection, locks, clipboard, and history.

    Example:
        doc = EditorDocument(spec)
        doc.add_node("root", Node(id="title", type="Heading", props={"text": "Hi"}))
        doc.undo()
    """

    def __init__(
        self,
        spec: ScreenSpec,
        id_factory: Callable[[str], str] | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.spec = spec.snapshot()
        self.id_factory = id_factory or IdFactory()
        self.history = History(history_limit)
        self.selected_id: str | None = None
        self.hidden_ids: set[str] = set()
        self.locked_ids: set[str] = set()
        self.clipboard: Node | None = None
        self.dirty = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def root(self) -> Node:
        return self.spec.tree

    def find(self, node_id: str) -> Node | None:
        return find_node(self.spec.tree, node_id)

    def _checkpoint(self) -> None:
        self.history.record(self.spec)
        self.dirty = True

    def _target(self, node_id: str | None) -> str | None:
        return node_id if node_id is not None else self.selected_id

    # ------------------------------------------------------------------
    # Structural mutations
    # ------------------------------------------------------------------

    def add_node(self, parent_id: str, node: Node, index: int | None = None) -> MutationResult:
        """Insert a copy of `node` under `parent_id` and select it."""
        parent = self.find(parent_id)
        if parent is None:
            return MutationResult.rejected(f"parent '{parent_id}' not found")

        incoming = node.model_copy(deep=True)
        clashes = set(collect_ids(incoming)) & set(collect_ids(self.root))
        if clashes:
            return MutationResult.rejected(f"id(s) already in use: {', '.join(sorted(clashes))}")

        self._checkpoint()
        insert_child(parent, incoming, index)
        self.selected_id = incoming.id
        return MutationResult.ok()

    def remove_node(self, node_id: str) -> MutationResult:
        if node_id == self.root.id:
            return MutationResult.rejected("the root node cannot be removed")
        if node_id in self.locked_ids:
            return MutationResult.rejected(f"node '{node_id}' is locked")
        node = self.find(node_id)
        if node is None:
            return MutationResult.rejected(f"node '{node_id}' not found")

        removed_ids = set(collect_ids(node))
        self._checkpoint()
        detach_node(self.root, node_id)
        if self.selected_id in removed_ids:
            self.selected_id = None
        return MutationResult.ok()

    def move_node(self, node_id: str, new_parent_id: str, new_index: int) -> MutationResult:
        """
        Detach a node and reinsert it under `new_parent_id` at `new_index`.

        The index addresses the new parent's children after the node has been
        detached.
        """
        if node_id == self.root.id:
            return MutationResult.rejected("the root node cannot be moved")
        if node_id in self.locked_ids:
            return MutationResult.rejected(f"node '{node_id}' is locked")
        if self.find(node_id) is None:
            return MutationResult.rejected(f"node '{node_id}' not found")
        if self.find(new_parent_id) is None:
            return MutationResult.rejected(f"parent '{new_parent_id}' not found")
        if is_descendant(self.root, node_id, new_parent_id):
            return MutationResult.rejected(f"'{new_parent_id}' is inside the subtree of '{node_id}'")

        self._checkpoint()
        node, _, _ = detach_node(self.root, node_id)
        insert_child(self.find(new_parent_id), node, new_index)
        return MutationResult.ok()

    def _shift(self, node_id: str | None, offset: int) -> MutationResult:
        target = self._target(node_id)
        if target is None:
            return MutationResult.rejected("no node selected")
        if target == self.root.id:
            return MutationResult.rejected("the root node cannot be moved")
        if target in self.locked_ids:
            return MutationResult.rejected(f"node '{target}' is locked")
        parent = find_parent(self.root, target)
        if parent is None:
            return MutationResult.rejected(f"node '{target}' not found")

        siblings = parent.children
        index = next(i for i, child in enumerate(siblings) if child.id == target)
        new_index = index + offset
        if not 0 <= new_index < len(siblings):
            return MutationResult.rejected(f"node '{target}' is already at the edge")

        self._checkpoint()
        siblings.insert(new_index, siblings.pop(index))
        return MutationResult.ok()

    def move_node_up(self, node_id: str | None = None) -> MutationResult:
        """Swap a node (default: the selection) with its previous sibling."""
        return self._shift(node_id, -1)

    def move_node_down(self, node_id: str | None = None) -> MutationResult:
        """Swap a node (default: the selection) with its next sibling."""
        return self._shift(node_id, 1)

    def rename_node(self, old_id: str, new_id: str) -> MutationResult:
        """
        Change a node's id.

        Whitespace in the new id becomes underscores. Empty, unchanged, and
        already-used ids are rejected. Selection, hidden, and locked state
        follow the node to its new id.
        """
        sanitized = re.sub(r"\s+", "_", new_id.strip())
        if not sanitized:
            return MutationResult.rejected("new id is empty")
        if sanitized == old_id:
            return MutationResult.rejected("new id equals the old id")
        node = self.find(old_id)
        if node is None:
            return MutationResult.rejected(f"node '{old_id}' not found")
        if sanitized in collect_ids(self.root):
            return MutationResult.rejected(f"id '{sanitized}' is already in use")

        self._checkpoint()
        node.id = sanitized
        if self.selected_id == old_id:
            self.selected_id = sanitized
        for ids in (self.hidden_ids, self.locked_ids):
            if old_id in ids:
                ids.discard(old_id)
                ids.add(sanitized)
        return MutationResult.ok()

    def update_node_props(self, node_id: str, props: Mapping[str, Any]) -> MutationResult:
        """Merge props into a node; None or "" deletes the key."""
        if node_id in self.locked_ids:
            return MutationResult.rejected(f"node '{node_id}' is locked")
        node = self.find(node_id)
        if node is None:
            return MutationResult.rejected(f"node '{node_id}' not found")

        self._checkpoint()
        node.props = _prune_empty({**node.props, **props})
        return MutationResult.ok()

    def update_node_style(self, node_id: str, style: Mapping[str, Any]) -> MutationResult:
        """Merge style properties into a node; None or "" deletes, an emptied style is dropped."""
        if node_id in self.locked_ids:
            return MutationResult.rejected(f"node '{node_id}' is locked")
        node = self.find(node_id)
        if node is None:
            return MutationResult.rejected(f"node '{node_id}' not found")

        current = node.style.declared() if node.style else {}
        merged = _prune_empty({**current, **style})
        try:
            new_style = NodeStyle.model_validate(merged) if merged else None
        except ValidationError as e:
            return MutationResult.rejected(f"invalid style: {e.errors()[0]['msg']}")

        self._checkpoint()
        node.style = new_style
        return MutationResult.ok()

    def group_into_stack(self, node_id: str | None = None) -> MutationResult:
        """Wrap a node (default: the selection) in a new column Stack and select the wrapper."""
        target = self._target(node_id)
        if target is None:
            return MutationResult.rejected("no node selected")
        if target == self.root.id:
            return MutationResult.rejected("the root node cannot be grouped")
        parent = find_parent(self.root, target)
        if parent is None:
            return MutationResult.rejected(f"node '{target}' not found")

        self._checkpoint()
        index = next(i for i, child in enumerate(parent.children) if child.id == target)
        wrapper = Node(
            id=self.id_factory(BuiltinType.STACK.value.lower()),
            type=BuiltinType.STACK.value,
            props={"direction": "column", "gap": "md"},
            children=[parent.children[index]],
        )
        parent.children[index] = wrapper
        self.selected_id = wrapper.id
        return MutationResult.ok()

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def copy_node(self, node_id: str | None = None) -> MutationResult:
        target = self._target(node_id)
        node = self.find(target) if target is not None else None
        if node is None:
            return MutationResult.rejected("nothing to copy")
        self.clipboard = node.model_copy(deep=True)
        return MutationResult.ok()

    def paste_node(self) -> MutationResult:
        """Insert a fresh-id clone of the clipboard after the selection, else at the end of the root."""
        if self.clipboard is None:
            return MutationResult.rejected("clipboard is empty")
        clone = clone_with_new_ids(self.clipboard, self.id_factory)

        if self.selected_id is not None:
            parent = find_parent(self.root, self.selected_id)
            if parent is not None:
                index = next(i for i, c in enumerate(parent.children) if c.id == self.selected_id)
                return self.add_node(parent.id, clone, index + 1)
        return self.add_node(self.root.id, clone)

    def duplicate_node(self, node_id: str | None = None) -> MutationResult:
        """Insert a fresh-id clone of a node (default: the selection) right after it."""
        target = self._target(node_id)
        if target is None:
            return MutationResult.rejected("no node selected")
        if target == self.root.id:
            return MutationResult.rejected("the root node cannot be duplicated")
        parent = find_parent(self.root, target)
        if parent is None:
            return MutationResult.rejected(f"node '{target}' not found")

        index = next(i for i, c in enumerate(parent.children) if c.id == target)
        clone = clone_with_new_ids(parent.children[index], self.id_factory)
        return self.add_node(parent.id, clone, index + 1)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _restore(self, spec: ScreenSpec | None, what: str) -> MutationResult:
        if spec is None:
            return MutationResult.rejected(f"nothing to {what}")
        self.spec = spec
        self.dirty = True
        if self.selected_id is not None and self.find(self.selected_id) is None:
            self.selected_id = None
        return MutationResult.ok()

    def undo(self) -> MutationResult:
        return self._restore(self.history.undo(self.spec), "undo")

    def redo(self) -> MutationResult:
        return self._restore(self.history.redo(self.spec), "redo")

    # ------------------------------------------------------------------
    # Editor-local state
    # ------------------------------------------------------------------

    def select_node(self, node_id: str | None) -> None:
        self.selected_id = node_id

    def toggle_hidden(self, node_id: str) -> bool:
        """Flip a node's hidden flag and return the new value."""
        if node_id in self.hidden_ids:
            self.hidden_ids.discard(node_id)
            return False
        self.hidden_ids.add(node_id)
        return True

    def toggle_locked(self, node_id: str) -> bool:
        """Flip a node's lock and return the new value."""
        if node_id in self.locked_ids:
            self.locked_ids.discard(node_id)
            return False
        self.locked_ids.add(node_id)
        return True

    def is_hidden(self, node_id: str) -> bool:
        return node_id in self.hidden_ids

    def is_locked(self, node_id: str) -> bool:
        return node_id in self.locked_ids

    def mark_clean(self) -> None:
        self.dirty = False
