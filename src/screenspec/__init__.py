"""
screenspec - compile declarative JSON screen specs into UI source code.

Screens are described as JSON trees and compiled deterministically into
Next.js, Vue, Svelte, plain HTML, or Expo components, while an editing
engine mutates the same document model with bounded undo/redo.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import (
    BackendError,
    ConfigError,
    ScreenSpecError,
    SpecLoadError,
    SpecValidationError,
)


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("screenspec")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "ScreenSpecError",
    "ConfigError",
    "SpecLoadError",
    "SpecValidationError",
    "BackendError",
]
