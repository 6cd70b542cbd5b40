"""
Design token loading and resolution.

Style values may reference tokens with a `$` sigil and a dotted path into
the token table, e.g. `"$color.primary"` or `"$typography.fontSize.lg"`.
A lookup miss never raises: the single-value resolver hands back the
literal reference text so the failure stays visible in generated output,
while the whole-bag resolver omits the property.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from .errors import SpecLoadError
from .ir import DesignTokens, NodeStyle, StyleValue

logger = logging.getLogger(__name__)

TOKEN_SIGIL = "$"
TOKEN_SEPARATOR = "."

SCALE_KEYS = ["xs", "sm", "md", "lg", "xl"]

# Tailwind scale steps used when no spacing/size tokens are configured
DEFAULT_GAP: dict[str, str] = {"xs": "1", "sm": "2", "md": "4", "lg": "6", "xl": "8"}
DEFAULT_SIZE: dict[str, str] = {"xs": "2", "sm": "4", "md": "6", "lg": "8", "xl": "12"}

_GROUPS = ("spacing", "size", "color", "borderRadius", "shadow")
_TYPOGRAPHY_GROUPS = ("fontFamily", "fontSize", "fontWeight", "lineHeight", "letterSpacing")


# =============================================================================
# Loading
# =============================================================================


def _is_token_leaf(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("value"), (str, int, float))


def _extract_group(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    return {key: entry for key, entry in value.items() if _is_token_leaf(entry)}


def parse_tokens(raw: dict[str, Any]) -> DesignTokens:
    """
    Build a DesignTokens table from a parsed token document.

    Nested groups that are not `{value}` leaves stay reachable through `raw`
    but are left out of the typed groups.
    """
    data: dict[str, Any] = {group: _extract_group(raw.get(group)) for group in _GROUPS}
    typography = raw.get("typography")
    if isinstance(typography, dict):
        data["typography"] = {
            group: _extract_group(typography.get(group)) for group in _TYPOGRAPHY_GROUPS
        }
    data["raw"] = raw
    return DesignTokens.model_validate(data)


def load_tokens(path: Path) -> DesignTokens:
    """
    Load a Style-Dictionary-compatible token file.

    Raises:
        SpecLoadError: If the file is missing or is not a JSON object
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SpecLoadError(f"Tokens file not found: {path}") from e
    except OSError as e:
        raise SpecLoadError(f"Failed to read tokens file: {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecLoadError(f"Invalid JSON in tokens file: {path}: {e}") from e

    if not isinstance(raw, dict):
        raise SpecLoadError(f"Tokens file must contain a JSON object: {path}")

    try:
        tokens = parse_tokens(raw)
    except ValidationError as e:
        raise SpecLoadError(f"Invalid token table in {path}: {e}") from e

    logger.debug(f"Loaded design tokens from {path}")
    return tokens


# =============================================================================
# Lookup
# =============================================================================


def is_token_ref(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(TOKEN_SIGIL) and len(value) > 1


def lookup_token(path: str, tokens: DesignTokens | None) -> str | int | float | None:
    """
    Walk a dotted path through the raw token table.

    Args:
        path: Path without the sigil, e.g. "color.primary"
        tokens: Token table, or None

    Returns:
        The leaf's `value`, a primitive found at the path, or None when unresolved
    """
    if tokens is None:
        return None

    current: Any = tokens.raw
    for segment in path.split(TOKEN_SEPARATOR):
        if not isinstance(current, dict) or segment not in current:
            return None
        current = current[segment]

    if isinstance(current, dict):
        value = current.get("value")
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return value
        return None
    if isinstance(current, (str, int, float)) and not isinstance(current, bool):
        return current
    return None


def resolve_style_value(value: StyleValue | None, tokens: DesignTokens | None) -> StyleValue | None:
    """Resolve one value; an unresolved reference comes back as its literal text."""
    if value is None:
        return None
    if not is_token_ref(value):
        return value
    resolved = lookup_token(str(value)[len(TOKEN_SIGIL):], tokens)
    return value if resolved is None else resolved


def resolve_style(style: NodeStyle | None, tokens: DesignTokens | None) -> dict[str, StyleValue]:
    """
    Resolve every set property of a style bag.

    Properties whose reference cannot be resolved are omitted.

    Returns:
        camelCase property name -> resolved value, in declaration order
    """
    if style is None:
        return {}

    resolved: dict[str, StyleValue] = {}
    for key, value in style.declared().items():
        if is_token_ref(value):
            hit = lookup_token(str(value)[len(TOKEN_SIGIL):], tokens)
            if hit is None:
                logger.warning(f"Unresolved token reference {value!r} for style '{key}', omitted")
                continue
            resolved[key] = hit
        else:
            resolved[key] = value
    return resolved


# =============================================================================
# Backend scale maps
# =============================================================================


@dataclass
class TokenMaps:
    """Named scales shared by every backend."""

    gap: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_GAP))
    size: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SIZE))
    colors: dict[str, str] = field(default_factory=dict)
    font_sizes: dict[str, str] = field(default_factory=dict)
    radii: dict[str, str] = field(default_factory=dict)
    shadows: dict[str, str] = field(default_factory=dict)

    @property
    def customized(self) -> bool:
        """Whether spacing or size came from a token file rather than the defaults."""
        return self.gap != DEFAULT_GAP or self.size != DEFAULT_SIZE


def resolve_token_maps(tokens: DesignTokens | None = None) -> TokenMaps:
    """Overlay configured token groups onto the default spacing and size scales."""
    maps = TokenMaps()
    if tokens is None:
        return maps

    maps.gap.update({key: str(token.value) for key, token in tokens.spacing.items()})
    maps.size.update({key: str(token.value) for key, token in tokens.size.items()})
    maps.colors = {key: str(token.value) for key, token in tokens.color.items()}
    maps.font_sizes = {
        key: str(token.value) for key, token in tokens.typography.font_size.items()
    }
    maps.radii = {key: str(token.value) for key, token in tokens.border_radius.items()}
    maps.shadows = {key: str(token.value) for key, token in tokens.shadow.items()}
    return maps


TokenCategory = Literal["spacing", "size", "color", "borderRadius", "shadow", "fontSize"]


def list_token_names(tokens: DesignTokens | None, category: TokenCategory) -> list[str]:
    """Token names available for a category, for editor pickers."""
    if tokens is None:
        return list(SCALE_KEYS) if category in ("spacing", "size") else []

    groups = {
        "spacing": tokens.spacing,
        "size": tokens.size,
        "color": tokens.color,
        "borderRadius": tokens.border_radius,
        "shadow": tokens.shadow,
        "fontSize": tokens.typography.font_size,
    }
    return list(groups.get(category, {}))
