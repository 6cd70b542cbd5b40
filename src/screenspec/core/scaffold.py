"""
Screen scaffolding.

Creates a new `<name>.screen.json` in the configured screens directory from
a starter template: a padded Stack holding one Heading titled after the
screen, routed at the kebab-cased name.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from .config import StudioConfig
from .discovery import SCREEN_SUFFIX
from .errors import ScaffoldError

logger = logging.getLogger(__name__)

SCREEN_NAME_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")


def validate_screen_name(name: str) -> tuple[bool, str | None]:
    """
    Validate a screen name.

    Returns:
        (is_valid, error_message)

    Examples:
        validate_screen_name("checkout")  # -> (True, None)
        validate_screen_name("2fa")  # -> (False, "...")
    """
    if not name or not name.strip():
        return (False, "Screen name is required")
    if not SCREEN_NAME_PATTERN.fullmatch(name):
        return (
            False,
            f"Invalid screen name '{name}'. Use letters, numbers, hyphens, or underscores",
        )
    return (True, None)


def screen_title(name: str) -> str:
    """
    Heading text for a screen name.

    Examples:
        "user-profile" -> "User Profile"
        "order_history" -> "Order History"
    """
    spaced = re.sub(r"[-_]", " ", name)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def screen_route(name: str) -> str:
    """
    Kebab-case route for a screen name.

    Examples:
        "checkout" -> "/checkout"
        "userProfile" -> "/user-profile"
        "order_history" -> "/order-history"
    """
    slug = re.sub(r"([a-z])([A-Z])", r"\1-\2", name)
    slug = re.sub(r"[_\s]+", "-", slug).lower()
    return f"/{slug}"


def build_screen_template(name: str) -> dict[str, Any]:
    """Return the starter screen document for a name."""
    return {
        "version": 1,
        "route": screen_route(name),
        "meta": {"layout": "default", "auth": "public"},
        "tree": {
            "id": "root",
            "type": "Stack",
            "props": {"gap": "md", "padding": "lg"},
            "children": [
                {"id": "heading_1", "type": "Heading", "props": {"text": screen_title(name)}},
            ],
        },
    }


def add_screen(config: StudioConfig, root: Path, name: str) -> Path:
    """
    Write a starter screen document into the screens directory.

    Args:
        config: Project configuration
        root: Project root
        name: Screen name, also the file stem

    Returns:
        Path of the created file

    Raises:
        ScaffoldError: If the name is invalid or the file already exists
    """
    is_valid, error = validate_screen_name(name)
    if not is_valid:
        raise ScaffoldError(error or "Invalid screen name")

    screens_dir = config.resolve_path(root, config.screens_dir)
    path = screens_dir / f"{name}{SCREEN_SUFFIX}"
    if path.exists():
        raise ScaffoldError(f"{path.name} already exists at {path}")

    screens_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_screen_template(name), indent=2) + "\n", encoding="utf-8")
    logger.info(f"Created screen {path}")
    return path
