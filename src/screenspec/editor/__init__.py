"""
Editing engine: structural tree mutations with bounded snapshot undo/redo.
"""

from .document import EditorDocument, MutationResult
from .history import DEFAULT_HISTORY_LIMIT, History
from .ids import IdFactory, clone_with_new_ids

__all__ = [
    "EditorDocument",
    "MutationResult",
    "History",
    "DEFAULT_HISTORY_LIMIT",
    "IdFactory",
    "clone_with_new_ids",
]
