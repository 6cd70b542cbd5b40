"""
Error types for screen spec loading, validation, and emission.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ScreenSpecError(Exception):
    """Base exception for all screenspec errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(ScreenSpecError):
    """
    Raised when studio.config.json cannot be loaded.

    Examples:
    - Missing config file
    - Invalid JSON
    - Unsupported framework name
    - Missing required directory settings
    """

    pass


class SpecLoadError(ScreenSpecError):
    """
    Raised when input documents cannot be read at all.

    These abort the whole run because no meaningful partial result exists:
    - Screens directory missing
    - No *.screen.json files discovered
    - Unparsable JSON in a spec, token, or component registry file
    """

    pass


class SpecValidationError(ScreenSpecError):
    """
    Raised when a single screen spec fails validation.

    Carries every violated constraint so the batch can record one
    aggregated failure for the screen and move on.
    """

    def __init__(
        self,
        message: str,
        issues: list[ValidationIssue] | None = None,
        context: ErrorContext | None = None,
    ):
        self.issues = list(issues or [])
        super().__init__(message, context)


class BackendError(ScreenSpecError):
    """
    Raised when a backend fails to generate output.

    Examples:
    - Unknown framework name
    - A node renderer failing on malformed props
    """

    pass


class ScaffoldError(ScreenSpecError):
    """
    Raised when a new screen cannot be scaffolded.

    Examples:
    - Screen name with invalid characters
    - Target file already exists
    """

    pass


class PluginError(ScreenSpecError):
    """
    Raised when a node plugin cannot be loaded or registered.

    Examples:
    - Plugin module import failure
    - Plugin type conflicts with a built-in node type
    - Duplicate plugin type
    """

    pass


@dataclass(frozen=True)
class ValidationIssue:
    """
    One violated constraint in a screen spec.

    Attributes:
        path: Instance path of the offending value (e.g. "tree.children[0].props.level")
        message: Human-readable description of the violation
    """

    path: str
    message: str

    def format(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        file: Path to the source document
        pointer: Optional instance path inside the document
    """

    file: Path
    pointer: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "screens/home.screen.json at tree.children[2]"
        """
        if self.pointer:
            return f"{self.file} at {self.pointer}"
        return str(self.file)


def make_validation_error(
    name: str,
    issues: list[ValidationIssue],
    file: Path | None = None,
) -> SpecValidationError:
    """
    Build a SpecValidationError aggregating all issues for one screen.

    Args:
        name: Screen name or file path used in the message
        issues: Every violated constraint
        file: Optional source file for context

    Returns:
        SpecValidationError with one line per issue
    """
    lines = "\n".join(issue.format() for issue in issues)
    context = ErrorContext(file=file) if file else None
    return SpecValidationError(
        f"{name} failed validation with {len(issues)} issue(s):\n{lines}",
        issues=issues,
        context=context,
    )
