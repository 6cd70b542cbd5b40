"""
Tree traversal helpers shared by the editor, resolver, lint, and backends.
"""

from __future__ import annotations

from collections.abc import Iterator

from .ir import Node


def walk(node: Node, path: str = "tree") -> Iterator[tuple[Node, str]]:
    """
    Pre-order traversal yielding each node with its instance path.

    Args:
        node: Subtree root
        path: Instance path of `node` (e.g. "tree.children[0]")

    Yields:
        (node, path) pairs, parents before children
    """
    yield node, path
    for index, child in enumerate(node.iter_children()):
        yield from walk(child, f"{path}.children[{index}]")


def find_node(root: Node, node_id: str) -> Node | None:
    for node, _ in walk(root):
        if node.id == node_id:
            return node
    return None


def find_parent(root: Node, node_id: str) -> Node | None:
    """Return the node whose children contain `node_id`, or None for the root or a miss."""
    for node, _ in walk(root):
        if any(child.id == node_id for child in node.iter_children()):
            return node
    return None


def collect_ids(root: Node) -> list[str]:
    """All node ids in pre-order, duplicates included."""
    return [node.id for node, _ in walk(root)]


def is_descendant(root: Node, ancestor_id: str, node_id: str) -> bool:
    """Whether `node_id` lies inside the subtree rooted at `ancestor_id` (inclusive)."""
    ancestor = find_node(root, ancestor_id)
    if ancestor is None:
        return False
    return find_node(ancestor, node_id) is not None


def detach_node(root: Node, node_id: str) -> tuple[Node, Node, int] | None:
    """
    Remove a node from its parent's children in place.

    Returns:
        (detached node, former parent, former index), or None when the node is
        the root or absent
    """
    parent = find_parent(root, node_id)
    if parent is None or parent.children is None:
        return None
    for index, child in enumerate(parent.children):
        if child.id == node_id:
            del parent.children[index]
            return child, parent, index
    return None


def insert_child(parent: Node, child: Node, index: int | None = None) -> None:
    """Insert `child` under `parent`, appending when `index` is None, negative, or past the end."""
    if parent.children is None:
        parent.children = []
    if index is None or index < 0 or index >= len(parent.children):
        parent.children.append(child)
    else:
        parent.children.insert(index, child)
