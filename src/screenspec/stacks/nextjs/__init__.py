"""
Next.js backend: React TSX components styled with Tailwind CSS.
"""

from .adapters import ADAPTERS, SHADCN, ComponentAdapter, ComponentMapping, get_adapter
from .backend import NextjsBackend
from .renderer import NextjsRenderer

__all__ = [
    "ADAPTERS",
    "SHADCN",
    "ComponentAdapter",
    "ComponentMapping",
    "NextjsBackend",
    "NextjsRenderer",
    "get_adapter",
]
