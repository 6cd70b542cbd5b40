"""
Snapshot-based undo/redo history.
"""

from __future__ import annotations

from collections import deque

from ..core.ir import ScreenSpec

DEFAULT_HISTORY_LIMIT = 50


class History:
    """
    Bounded undo/redo stacks of full document snapshots.

    `record` stores a deep copy of the state *before* a mutation and drops
    every redo entry. Undo and redo exchange the current state with the
    adjacent snapshot, so `undo(); redo()` restores the exact pre-undo state.
    Only the `limit` most recent undo snapshots are kept.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._past: deque[ScreenSpec] = deque(maxlen=limit)
        self._future: list[ScreenSpec] = []

    def record(self, spec: ScreenSpec) -> None:
        self._past.append(spec.snapshot())
        self._future.clear()

    def undo(self, current: ScreenSpec) -> ScreenSpec | None:
        """Return the previous state, or None when there is nothing to undo."""
        if not self._past:
            return None
        self._future.append(current.snapshot())
        return self._past.pop()

    def redo(self, current: ScreenSpec) -> ScreenSpec | None:
        """Return the next state, or None when there is nothing to redo."""
        if not self._future:
            return None
        self._past.append(current.snapshot())
        return self._future.pop()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    @property
    def redo_depth(self) -> int:
        return len(self._future)
