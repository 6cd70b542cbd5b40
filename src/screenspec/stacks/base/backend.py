"""
Backend contract shared by every emission target.

A backend turns one resolved (ComponentRef-free) screen into target source
files and lists generated components in a barrel index. Backends are
independent of each other and of the pipeline; everything they need beyond
the screen and config arrives in an explicit EmitContext.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ...core.config import StudioConfig
from ...core.ir import DesignTokens, ScreenSpec
from ...core.plugins import PluginRegistry
from ...core.tokens import TokenMaps, resolve_token_maps

GENERATED_MARKER = "AUTO-GENERATED by screenspec. Do not edit directly."


@dataclass
class EmittedFile:
    """A single generated file; `path` is relative to the project root."""

    path: str
    contents: str


@dataclass
class EmitResult:
    """Files generated for one screen and the component name they export."""

    files: list[EmittedFile]
    component_name: str


@dataclass
class EmitContext:
    """
    Read-only inputs shared by every screen of a compile run.

    Attributes:
        tokens: Loaded design tokens, or None when none are configured
        token_maps: Spacing/size/colour scales derived from the tokens
        plugins: Node plugins for project-specific types
    """

    tokens: DesignTokens | None = None
    token_maps: TokenMaps = field(default_factory=TokenMaps)
    plugins: PluginRegistry = field(default_factory=PluginRegistry)

    @classmethod
    def create(
        cls,
        tokens: DesignTokens | None = None,
        plugins: PluginRegistry | None = None,
    ) -> EmitContext:
        return cls(
            tokens=tokens,
            token_maps=resolve_token_maps(tokens),
            plugins=plugins or PluginRegistry(),
        )


@dataclass
class BackendCapabilities:
    """
    Describes what a backend generates.

    Used for introspection and CLI help text.
    """

    name: str
    description: str
    output_formats: list[str]
    file_extension: str
    responsive: bool = True
    component_libraries: list[str] = field(default_factory=list)


class ScreenBackend(ABC):
    """
    Abstract base class for emission targets.

    Subclasses implement `emit_screen` and `emit_barrel_index` against the
    same resolved tree shape and nothing else.
    """

    name: str = ""

    @abstractmethod
    def emit_screen(
        self,
        spec: ScreenSpec,
        config: StudioConfig,
        context: EmitContext | None = None,
    ) -> EmitResult:
        """
        Generate the files for one screen.

        Args:
            spec: Validated screen whose ComponentRefs have been resolved
            config: Project configuration
            context: Tokens and plugins for this run

        Returns:
            EmitResult with the generated files and component name

        Raises:
            BackendError: If the screen cannot be rendered
        """

    @abstractmethod
    def emit_barrel_index(self, component_names: list[str], config: StudioConfig) -> EmittedFile:
        """Generate the index listing every generated component, sorted by name."""

    def get_capabilities(self) -> BackendCapabilities:
        """
        Get backend capabilities for introspection.

        Override to provide backend metadata.
        """
        return BackendCapabilities(
            name=self.name or self.__class__.__name__,
            description="No description provided",
            output_formats=["unknown"],
            file_extension="",
        )

    def generated_path(self, config: StudioConfig, filename: str) -> str:
        return f"{config.generated_dir.rstrip('/')}/{filename}"
