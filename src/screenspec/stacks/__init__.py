"""
Emission backends for screenspec.

Each backend turns resolved screens into source files for one frontend
framework. Backends are selected by the `framework` config key.
"""

from __future__ import annotations

from ..core.errors import BackendError
from .base import BackendCapabilities, EmitContext, EmitResult, EmittedFile, ScreenBackend
from .expo import ExpoBackend
from .html import HtmlBackend
from .nextjs import NextjsBackend
from .svelte import SvelteBackend
from .vue import VueBackend


class BackendRegistry:
    """
    Registry for emission backends.

    Supports:
    - Manual registration via register()
    - Lookup by name
    """

    def __init__(self) -> None:
        self._backends: dict[str, type[ScreenBackend]] = {}

    def register(self, name: str, backend_class: type[ScreenBackend]) -> None:
        """
        Register a backend class.

        Args:
            name: Backend name (the `framework` config value)
            backend_class: Backend class (must extend ScreenBackend)

        Raises:
            BackendError: If name already registered or class invalid
        """
        if name in self._backends:
            raise BackendError(
                f"Backend '{name}' is already registered. Cannot register {backend_class.__name__}."
            )

        if not issubclass(backend_class, ScreenBackend):
            raise BackendError(f"Backend class {backend_class.__name__} must extend ScreenBackend")

        self._backends[name] = backend_class

    def get(self, name: str) -> ScreenBackend:
        """
        Get a backend instance by name.

        Raises:
            BackendError: If backend not found
        """
        if name not in self._backends:
            available = sorted(self._backends)
            raise BackendError(f"Backend '{name}' not found. Available backends: {available}")

        return self._backends[name]()

    def list_backends(self) -> list[str]:
        return sorted(self._backends)


# Global registry instance
_registry: BackendRegistry | None = None


def get_registry() -> BackendRegistry:
    """
    Get the global backend registry.

    The built-in backends are registered on first call.
    """
    global _registry
    if _registry is None:
        _registry = BackendRegistry()
        for backend_class in (NextjsBackend, VueBackend, SvelteBackend, HtmlBackend, ExpoBackend):
            _registry.register(backend_class.name, backend_class)
    return _registry


def register_backend(name: str, backend_class: type[ScreenBackend]) -> None:
    """Register a backend in the global registry."""
    get_registry().register(name, backend_class)


def get_backend(name: str) -> ScreenBackend:
    """
    Get a backend instance by name.

    Raises:
        BackendError: If backend not found
    """
    return get_registry().get(name)


def list_backends() -> list[str]:
    return get_registry().list_backends()


__all__ = [
    "BackendCapabilities",
    "BackendError",
    "BackendRegistry",
    "EmitContext",
    "EmitResult",
    "EmittedFile",
    "ExpoBackend",
    "HtmlBackend",
    "NextjsBackend",
    "ScreenBackend",
    "SvelteBackend",
    "VueBackend",
    "get_backend",
    "get_registry",
    "list_backends",
    "register_backend",
]
