"""Core screenspec functionality: document model, validation, tokens, component references, lint."""

from . import ir
from .config import StudioConfig, load_config
from .errors import (
    BackendError,
    ConfigError,
    ErrorContext,
    PluginError,
    ScaffoldError,
    ScreenSpecError,
    SpecLoadError,
    SpecValidationError,
    ValidationIssue,
)
from .references import build_registry, resolve_refs
from .tokens import load_tokens, resolve_style, resolve_style_value
from .validator import SpecValidator, build_screen_schema, ensure_valid, validate_spec

__all__ = [
    "ir",
    "StudioConfig",
    "load_config",
    "ScreenSpecError",
    "ConfigError",
    "SpecLoadError",
    "SpecValidationError",
    "BackendError",
    "PluginError",
    "ScaffoldError",
    "ErrorContext",
    "ValidationIssue",
    "build_registry",
    "resolve_refs",
    "load_tokens",
    "resolve_style",
    "resolve_style_value",
    "SpecValidator",
    "build_screen_schema",
    "ensure_valid",
    "validate_spec",
]
