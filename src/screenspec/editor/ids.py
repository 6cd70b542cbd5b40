"""
Node id generation and id-fresh subtree cloning.
"""

from __future__ import annotations

import string
import time
from collections.abc import Callable

from ..core.ir import Node
from ..core.tree import walk

_DIGITS = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_DIGITS[remainder])
    return "".join(reversed(digits))


class IdFactory:
    """
    Generates ids of the form ``<prefix>_<base36 millis>_<counter>``.

    The counter is per factory and never repeats, so ids from one factory
    are unique even within the same millisecond.

    Example:
        ids = IdFactory()
        ids("stack")  # "stack_lq2x9k1a_1"
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counter = 0

    def __call__(self, prefix: str = "node") -> str:
        self._counter += 1
        millis = int(self._clock() * 1000)
        return f"{prefix}_{to_base36(millis)}_{self._counter}"


def clone_with_new_ids(node: Node, id_factory: Callable[[str], str]) -> Node:
    """Deep-clone a subtree, giving every node in it a fresh id."""
    clone = node.model_copy(deep=True)
    for current, _ in walk(clone):
        current.id = id_factory(current.type.lower())
    return clone
