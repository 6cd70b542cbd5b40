"""
Input discovery: screen documents and the component registry file.

Everything here is fatal on failure. Without readable inputs there is no
meaningful partial result, so errors abort the whole run.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import StudioConfig
from .errors import SpecLoadError
from .ir import ComponentDef

logger = logging.getLogger(__name__)

SCREEN_SUFFIX = ".screen.json"


@dataclass
class DiscoveredScreen:
    """A screen document read from disk, not yet validated."""

    path: Path
    raw: Any

    @property
    def route(self) -> str:
        route = self.raw.get("route") if isinstance(self.raw, dict) else None
        return route if isinstance(route, str) else ""

    @property
    def name(self) -> str:
        return self.path.name


def read_json(path: Path, what: str) -> Any:
    """Parse a JSON file, raising SpecLoadError when it is unreadable or malformed."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SpecLoadError(f"{what} not found: {path}") from e
    except OSError as e:
        raise SpecLoadError(f"Failed to read {what.lower()}: {path}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecLoadError(f"Invalid JSON in {path}: {e}") from e


def discover_screens(config: StudioConfig, root: Path) -> list[DiscoveredScreen]:
    """
    Read every *.screen.json document in the configured screens directory.

    Args:
        config: Project configuration
        root: Project root

    Returns:
        Raw documents sorted by route, then file name

    Raises:
        SpecLoadError: Missing directory, no screens, or unparsable JSON
    """
    screens_dir = config.resolve_path(root, config.screens_dir)
    if not screens_dir.is_dir():
        raise SpecLoadError(f"Screens directory not found: {screens_dir}")

    paths = sorted(p for p in screens_dir.iterdir() if p.name.endswith(SCREEN_SUFFIX))
    if not paths:
        raise SpecLoadError(
            f"No *{SCREEN_SUFFIX} files found in {screens_dir}. Create at least one screen spec."
        )

    screens = [DiscoveredScreen(path=path, raw=read_json(path, "Screen spec")) for path in paths]
    screens.sort(key=lambda s: (s.route, s.name))
    logger.debug(f"Discovered {len(screens)} screen(s) in {screens_dir}")
    return screens


def parse_component_defs(data: Any, source: str = "components") -> list[ComponentDef]:
    """
    Parse a JSON array of component definitions.

    Raises:
        SpecLoadError: If the data is not an array of valid definitions
    """
    if not isinstance(data, list):
        raise SpecLoadError(f"{source}: component registry must be a JSON array")
    try:
        return [ComponentDef.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise SpecLoadError(f"{source}: invalid component definition: {e}") from e


def load_component_defs(config: StudioConfig, root: Path) -> list[ComponentDef]:
    """Load the configured component registry; no file configured means no definitions."""
    if not config.components:
        return []
    path = config.resolve_path(root, config.components)
    defs = parse_component_defs(read_json(path, "Component registry"), str(path))
    logger.debug(f"Loaded {len(defs)} component definition(s) from {path}")
    return defs
