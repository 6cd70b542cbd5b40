"""
Shared building blocks for emission backends.
"""

from .backend import (
    GENERATED_MARKER,
    BackendCapabilities,
    EmitContext,
    EmitResult,
    EmittedFile,
    ScreenBackend,
)
from .renderer import TreeRenderer
from .screen import DataFetch, ScreenState, analyze_screen
from .utils import component_name_from_route

__all__ = [
    "GENERATED_MARKER",
    "BackendCapabilities",
    "DataFetch",
    "EmitContext",
    "EmitResult",
    "EmittedFile",
    "ScreenBackend",
    "ScreenState",
    "TreeRenderer",
    "analyze_screen",
    "component_name_from_route",
]
