"""
Common utilities for backends.

Provides helper functions that are useful across multiple backends:
- Naming (component names from routes, identifiers)
- Text escaping and literal quoting
- Scale conversion from token-map values to each target's units
"""

from __future__ import annotations

import json
import re
from typing import Any

_STEP = re.compile(r"^\d+(\.\d+)?$")
_LENGTH = re.compile(r"^(-?\d+(?:\.\d+)?)(px|rem|em)?$")


def component_name_from_route(route: str) -> str:
    """
    Derive a component name from a route.

    "/" becomes "Home"; otherwise each path segment is split on non
    alphanumerics, capitalised, and joined ("/user-settings/edit" becomes
    "UserSettingsEdit").
    """
    words = [w for w in re.split(r"[^A-Za-z0-9]+", route) if w]
    if not words:
        return "Home"
    name = "".join(w[0].upper() + w[1:] for w in words)
    return f"Screen{name}" if name[0].isdigit() else name


def indent(text: str, spaces: int = 2) -> str:
    """
    Indent all non-empty lines in text by the given number of spaces.

    Args:
        text: Text to indent
        spaces: Number of spaces to indent

    Returns:
        Indented text
    """
    pad = " " * spaces
    return "\n".join(pad + line if line.strip() else line for line in text.split("\n"))


def escape_html(value: Any) -> str:
    text = value if isinstance(value, str) else ("" if value is None else str(value))
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def escape_jsx_text(value: Any) -> str:
    """Escape text placed between JSX tags."""
    return escape_html(value).replace("{", "&#123;").replace("}", "&#125;")


def js_literal(value: Any) -> str:
    """A JavaScript literal for a JSON-compatible value."""
    return json.dumps(value, ensure_ascii=False)


def js_single_quoted(value: str) -> str:
    """A single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def identifier(name: str) -> str:
    """Turn an arbitrary state key into a JavaScript identifier."""
    cleaned = re.sub(r"[^A-Za-z0-9_$]+", "_", name).strip("_") or "state"
    return f"_{cleaned}" if cleaned[0].isdigit() else cleaned


def setter_name(name: str) -> str:
    return f"set{name[0].upper()}{name[1:]}"


def camel_to_kebab(name: str) -> str:
    return re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name).lower()


def parse_pair(item: Any) -> tuple[str, str]:
    """Split a "key|label" entry; a bare entry is both key and label."""
    text = str(item)
    if "|" in text:
        first, second = text.split("|", 1)
        return first, second
    return text, text


# =============================================================================
# Scale conversion
# =============================================================================


def scale_lookup(scale: dict[str, str], key: Any, default: str = "md") -> str:
    """Look a scale key (xs..xl) up, falling back to the default step."""
    if isinstance(key, str) and key in scale:
        return scale[key]
    return scale.get(default, "4")


def step_to_css(value: str) -> str:
    """A Tailwind step ("4") becomes rem (1rem); any other length passes through."""
    if _STEP.match(value):
        return f"{float(value) * 0.25:g}rem"
    return value


def step_to_points(value: str) -> int | float | str:
    """
    Convert a scale value to React Native points.

    Tailwind steps are 4pt each, px values are taken as is, rem/em use 16pt.
    Values in any other unit are returned unchanged.
    """
    if _STEP.match(value):
        return _number(float(value) * 4)
    return length_to_points(value)


def length_to_points(value: Any) -> Any:
    if isinstance(value, (int, float)) or not isinstance(value, str):
        return value
    match = _LENGTH.match(value.strip())
    if not match:
        return value
    number, unit = float(match.group(1)), match.group(2)
    if unit in ("rem", "em"):
        number *= 16
    return _number(number)


def step_to_tailwind(prefix: str, value: str) -> str:
    """`gap` + "4" gives "gap-4"; a custom length gives "gap-[12px]"."""
    if _STEP.match(value):
        return f"{prefix}-{value}"
    return f"{prefix}-[{value.replace(' ', '_')}]"


def _number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value
