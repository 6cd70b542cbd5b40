"""
screenspec command line interface.

Commands operate on a project root holding studio.config.json:

- compile: generate components for every screen
- validate: check every screen document
- lint: validate plus authoring checks
- schema: write the screen JSON Schema document
- add-screen: scaffold a new screen document
- backends: list emission targets
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from ..compiler import CompileResult, compile_project
from ..core.config import StudioConfig, load_config
from ..core.discovery import discover_screens
from ..core.errors import ScreenSpecError, SpecValidationError
from ..core.lint import Severity, has_errors, lint_screens
from ..core.plugins import load_plugins
from ..core.scaffold import add_screen, screen_route
from ..core.validator import SpecValidator, write_schema
from ..stacks import get_backend, list_backends
from .utils import configure_logging, console, get_version, version_callback

app = typer.Typer(
    help="screenspec - compile JSON screen specs into UI components",
    no_args_is_help=True,
)

PROJECT_OPTION = typer.Option(
    Path("."),
    "--project",
    "-p",
    help="Project root containing studio.config.json",
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """screenspec CLI main callback for global options."""
    configure_logging(verbose)


def _fail(error: ScreenSpecError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def _load(project: Path) -> tuple[Path, StudioConfig]:
    root = project.resolve()
    return root, load_config(root)


def _print_summary(result: CompileResult, dry_run: bool) -> None:
    table = Table(title="Compile summary" + (" (dry run)" if dry_run else ""))
    table.add_column("Succeeded", style="green")
    table.add_column("Failed", style="red")
    table.add_column("Skipped (unchanged)", style="cyan")
    table.add_column("Files")
    summary = result.summary
    table.add_row(str(summary.succeeded), str(summary.failed), str(summary.skipped), str(len(result.files)))
    console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="compile")
def compile_command(
    project: Path = PROJECT_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Generate without writing files"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Screens compiled concurrently"),
) -> None:
    """
    Compile every screen in the configured screens directory.

    The whole batch always runs; the exit code is 1 if any screen failed.
    """
    try:
        root, config = _load(project)
        result = compile_project(config, root, write=not dry_run, workers=workers)
    except ScreenSpecError as e:
        raise _fail(e) from e

    if dry_run:
        for file in result.files:
            typer.echo(f"Would generate: {file.path}")
    _print_summary(result, dry_run)

    if result.errors:
        typer.echo(f"\nCompile completed with {len(result.errors)} error(s):", err=True)
        for error in result.errors:
            typer.echo(f"  - {error.file_path}: {error.message}", err=True)
        raise typer.Exit(code=1)


@app.command(name="validate")
def validate_command(project: Path = PROJECT_OPTION) -> None:
    """Validate every screen document against the schema and plugin prop tables."""
    try:
        root, config = _load(project)
        screens = discover_screens(config, root)
        plugins = load_plugins(config.plugins, root)
    except ScreenSpecError as e:
        raise _fail(e) from e

    validator = SpecValidator(config.resolve_path(root, config.schema_path))
    failed = 0
    for screen in screens:
        try:
            spec = validator.ensure_valid(screen.raw, screen.name)
        except SpecValidationError as e:
            failed += 1
            typer.echo(e.message, err=True)
            continue
        issues = plugins.validate_tree(spec.tree)
        if issues:
            failed += 1
            typer.echo(f"{screen.name} failed plugin validation with {len(issues)} issue(s):", err=True)
            for issue in issues:
                typer.echo(f"  {issue.format()}", err=True)

    typer.echo(f"{len(screens) - failed}/{len(screens)} screen(s) valid")
    if failed:
        raise typer.Exit(code=1)


@app.command(name="lint")
def lint_command(project: Path = PROJECT_OPTION) -> None:
    """Run validation plus authoring checks (ids, headings, alt text, routes)."""
    try:
        root, config = _load(project)
        screens = discover_screens(config, root)
    except ScreenSpecError as e:
        raise _fail(e) from e

    issues = lint_screens(screens, SpecValidator(config.resolve_path(root, config.schema_path)), root)
    if not issues:
        typer.echo("No issues found")
        return

    table = Table(title=f"{len(issues)} lint issue(s)")
    table.add_column("Severity")
    table.add_column("Rule", style="cyan")
    table.add_column("File")
    table.add_column("Message")
    for issue in issues:
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        table.add_row(f"[{style}]{issue.severity}[/{style}]", issue.rule, issue.file, issue.message)
    console.print(table)

    if has_errors(issues):
        raise typer.Exit(code=1)


@app.command(name="schema")
def schema_command(
    project: Path = PROJECT_OPTION,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write here instead of the configured schemaPath"
    ),
) -> None:
    """Write the screen document JSON Schema."""
    if output is None:
        try:
            root, config = _load(project)
        except ScreenSpecError as e:
            raise _fail(e) from e
        output = config.resolve_path(root, config.schema_path)
    write_schema(output)
    typer.echo(f"Wrote schema: {output}")


@app.command(name="add-screen")
def add_screen_command(
    name: str = typer.Argument(..., help="Screen name, e.g. checkout or user-profile"),
    project: Path = PROJECT_OPTION,
) -> None:
    """
    Create a starter <name>.screen.json in the screens directory.

    The route is the kebab-cased name and the heading its title-cased form.
    """
    try:
        root, config = _load(project)
        path = add_screen(config, root, name)
    except ScreenSpecError as e:
        raise _fail(e) from e

    typer.echo(f"Created {path}")
    typer.echo(f"  route: {screen_route(name)}")
    typer.echo("\nRun `screenspec compile` to generate the component.")


@app.command(name="backends")
def backends_command() -> None:
    """List available emission backends."""
    table = Table(title="Backends")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Extension")
    table.add_column("Component libraries")
    for name in list_backends():
        capabilities = get_backend(name).get_capabilities()
        table.add_row(
            name,
            capabilities.description,
            capabilities.file_extension,
            ", ".join(capabilities.component_libraries) or "-",
        )
    console.print(table)


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main", "get_version", "version_callback"]
