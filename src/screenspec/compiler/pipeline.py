"""
Compiler pipeline.

discover -> validate -> resolve ComponentRefs -> emit -> format -> write.

Each screen is isolated: a validation or emission failure is recorded as a
CompileError and its siblings still compile. Missing inputs (config,
screens directory, unparsable JSON) are fatal and raise before any screen
is processed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.config import StudioConfig
from ..core.discovery import discover_screens, load_component_defs
from ..core.errors import SpecValidationError
from ..core.ir import ComponentDef, DesignTokens, ScreenSpec
from ..core.plugins import PluginRegistry, load_plugins
from ..core.references import Registry, build_registry, resolve_refs
from ..core.tokens import load_tokens
from ..core.validator import SpecValidator
from ..stacks import get_backend
from ..stacks.base import EmitContext, EmitResult, EmittedFile, ScreenBackend
from .formatting import format_output

logger = logging.getLogger(__name__)


@dataclass
class CompileError:
    """A screen that failed validation or emission."""

    file_path: str
    message: str


@dataclass
class CompileSummary:
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass
class CompileResult:
    """
    Outcome of a compile run.

    Attributes:
        files: Every generated file (formatted), barrel index last
        errors: One entry per failed screen
        summary: Succeeded/failed screen counts and skipped (unchanged) writes
    """

    files: list[EmittedFile] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)
    summary: CompileSummary = field(default_factory=CompileSummary)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class _ScreenOutcome:
    name: str
    result: EmitResult | None = None
    error: CompileError | None = None


@dataclass
class _Batch:
    """Everything shared, read-only, by the screens of one run."""

    backend: ScreenBackend
    config: StudioConfig
    context: EmitContext
    registry: Registry
    validator: SpecValidator


# =============================================================================
# Per-screen processing
# =============================================================================


def _compile_screen(batch: _Batch, name: str, raw: Any, file: Path | None = None) -> _ScreenOutcome:
    try:
        spec = batch.validator.ensure_valid(raw, name, file)
    except SpecValidationError as e:
        logger.warning(f"Validation failed for {name}: {len(e.issues)} issue(s)")
        return _ScreenOutcome(name, error=CompileError(name, e.message))

    plugin_issues = batch.context.plugins.validate_tree(spec.tree)
    if plugin_issues:
        lines = "\n".join(issue.format() for issue in plugin_issues)
        logger.warning(f"Plugin validation failed for {name}: {len(plugin_issues)} issue(s)")
        message = f"{name} failed validation with {len(plugin_issues)} issue(s):\n{lines}"
        return _ScreenOutcome(name, error=CompileError(name, message))

    if batch.registry:
        spec = spec.model_copy(update={"tree": resolve_refs(spec.tree, batch.registry)})

    try:
        result = batch.backend.emit_screen(spec, batch.config, batch.context)
    except Exception as e:
        logger.warning(f"Emit failed for {name}: {e}")
        return _ScreenOutcome(name, error=CompileError(name, f"Emit failed: {e}"))
    return _ScreenOutcome(name, result=result)


def _compile_all(
    batch: _Batch,
    screens: Sequence[tuple[str, Any, Path | None]],
    workers: int,
) -> list[_ScreenOutcome]:
    """Compile every screen; outcomes come back in input order regardless of workers."""
    if workers <= 1 or len(screens) <= 1:
        return [_compile_screen(batch, *screen) for screen in screens]

    # The schema loads lazily; load it before the workers share the validator
    mode = "schema document" if batch.validator.uses_schema else "built-in rules"
    logger.debug(f"Compiling {len(screens)} screen(s) on {workers} worker(s), validating with {mode}")
    outcomes: list[_ScreenOutcome | None] = [None] * len(screens)
    with ThreadPoolExecutor(max_workers=min(workers, len(screens))) as executor:
        futures = {
            executor.submit(_compile_screen, batch, *screen): index
            for index, screen in enumerate(screens)
        }
        for future in as_completed(futures):
            outcomes[futures[future]] = future.result()
    return [outcome for outcome in outcomes if outcome is not None]


def _collect(batch: _Batch, outcomes: Iterable[_ScreenOutcome]) -> CompileResult:
    """Aggregate outcomes and append the barrel index of every emitted component."""
    result = CompileResult()
    names: list[str] = []
    for outcome in outcomes:
        if outcome.error is not None:
            result.errors.append(outcome.error)
        elif outcome.result is not None:
            result.files.extend(outcome.result.files)
            names.append(outcome.result.component_name)

    result.files.append(batch.backend.emit_barrel_index(names, batch.config))
    result.files = [EmittedFile(f.path, format_output(f.contents, f.path)) for f in result.files]
    result.summary = CompileSummary(succeeded=len(names), failed=len(result.errors))
    return result


# =============================================================================
# Writing
# =============================================================================


def write_output(files: Iterable[EmittedFile], root: Path) -> int:
    """
    Write files under root, skipping any whose stored bytes already match.

    Returns:
        Number of files skipped because they were unchanged
    """
    skipped = 0
    for file in files:
        path = root / file.path
        data = file.contents.encode("utf-8")
        if path.is_file() and path.read_bytes() == data:
            logger.debug(f"Unchanged: {file.path}")
            skipped += 1
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Generated: {file.path}")
    return skipped


def _display_path(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root.resolve()))
    except ValueError:
        return str(path)


# =============================================================================
# Entry points
# =============================================================================


def compile_project(
    config: StudioConfig,
    root: Path,
    write: bool = True,
    workers: int = 1,
) -> CompileResult:
    """
    Compile every screen of a project.

    Args:
        config: Loaded project configuration
        root: Project root; config paths and emitted file paths are relative to it
        write: Persist the output (unchanged files are not rewritten)
        workers: Maximum screens compiled concurrently

    Returns:
        CompileResult with formatted files, per-screen errors, and the summary

    Raises:
        BackendError: Unknown framework
        SpecLoadError: Missing screens directory, no screens, or unparsable input JSON
        PluginError: A configured plugin cannot be loaded
    """
    backend = get_backend(config.framework)
    tokens = load_tokens(config.resolve_path(root, config.tokens)) if config.tokens else None
    defs = load_component_defs(config, root)
    plugins = load_plugins(config.plugins, root)
    screens = discover_screens(config, root)

    batch = _Batch(
        backend=backend,
        config=config,
        context=EmitContext.create(tokens, plugins),
        registry=build_registry(defs),
        validator=SpecValidator(config.resolve_path(root, config.schema_path)),
    )
    logger.info(f"Compiling {len(screens)} screen(s) with the {backend.name} backend")

    jobs = [(_display_path(screen.path, root), screen.raw, screen.path) for screen in screens]
    result = _collect(batch, _compile_all(batch, jobs, workers))

    if write:
        result.summary.skipped = write_output(result.files, root)

    if result.errors:
        logger.warning(f"Compile completed with {len(result.errors)} error(s)")
    return result


def compile_from_memory(
    specs: Sequence[tuple[str, ScreenSpec | dict[str, Any]]],
    config: StudioConfig,
    component_defs: Iterable[ComponentDef] | None = None,
    tokens: DesignTokens | None = None,
    plugins: PluginRegistry | None = None,
) -> CompileResult:
    """
    Compile screens passed as arguments, without touching the filesystem.

    Validation uses the built-in rules since no schema document is read.

    Args:
        specs: (name, document) pairs; documents are raw dicts or ScreenSpec models
        config: Project configuration
        component_defs: Definitions ComponentRef nodes resolve against
        tokens: Design tokens for style references
        plugins: Node plugins for project-specific types

    Returns:
        CompileResult with `summary.skipped == 0`

    Raises:
        BackendError: Unknown framework
    """
    batch = _Batch(
        backend=get_backend(config.framework),
        config=config,
        context=EmitContext.create(tokens, plugins),
        registry=build_registry(component_defs or []),
        validator=SpecValidator(),
    )
    jobs = [
        (name, spec.to_dict() if isinstance(spec, ScreenSpec) else spec, None)
        for name, spec in specs
    ]
    return _collect(batch, _compile_all(batch, jobs, workers=1))
