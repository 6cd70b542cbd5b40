"""
Spec linting: common authoring mistakes checked without a full compile.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .discovery import DiscoveredScreen
from .errors import SpecValidationError
from .ir import BuiltinType, ScreenSpec
from .tree import walk
from .validator import SpecValidator


class Severity(StrEnum):
    ERROR = "error"
    WARN = "warn"


@dataclass(frozen=True)
class LintIssue:
    file: str
    severity: Severity
    rule: str
    message: str


def _lint_tree(file: str, spec: ScreenSpec) -> list[LintIssue]:
    issues: list[LintIssue] = []

    locations: dict[str, list[str]] = defaultdict(list)
    for node, path in walk(spec.tree):
        locations[node.id].append(path)
    for node_id, paths in locations.items():
        if len(paths) > 1:
            issues.append(
                LintIssue(
                    file,
                    Severity.ERROR,
                    "duplicate-id",
                    f"Node ID '{node_id}' is used {len(paths)} times: {', '.join(paths)}",
                )
            )

    levels_seen: set[int] = set()
    for node, path in walk(spec.tree):
        props = node.props
        if node.children is not None and not node.children:
            issues.append(
                LintIssue(
                    file,
                    Severity.WARN,
                    "empty-children",
                    f"{path}: Empty children array; omit the key instead of using []",
                )
            )

        if node.type == BuiltinType.HEADING:
            level = props.get("level", 1)
            levels_seen.add(level)
            if level > 1 and level - 1 not in levels_seen:
                issues.append(
                    LintIssue(
                        file,
                        Severity.WARN,
                        "heading-hierarchy",
                        f"{path}: Heading level {level} without a preceding level {level - 1}",
                    )
                )
        elif node.type == BuiltinType.IMAGE:
            alt = props.get("alt")
            if not isinstance(alt, str) or not alt.strip():
                issues.append(
                    LintIssue(
                        file,
                        Severity.ERROR,
                        "image-alt",
                        f"{path}: Image is missing an 'alt' prop (required for accessibility)",
                    )
                )
        elif node.type == BuiltinType.BUTTON:
            label = props.get("label")
            if not isinstance(label, str) or not label.strip():
                issues.append(
                    LintIssue(file, Severity.WARN, "empty-label", f"{path}: Button has no 'label' prop")
                )
        elif node.type == BuiltinType.LINK:
            text = props.get("text")
            if not isinstance(text, str) or not text.strip():
                issues.append(
                    LintIssue(file, Severity.WARN, "empty-label", f"{path}: Link has no 'text' prop")
                )

    return issues


def lint_screens(
    screens: list[DiscoveredScreen],
    validator: SpecValidator,
    root: Path | None = None,
) -> list[LintIssue]:
    """
    Lint every screen, then check across screens.

    Screens failing schema validation report one `schema` error and are
    skipped by the remaining rules. File names are shown relative to `root`
    when given.

    Returns:
        Issues in discovery order, cross-screen issues last
    """
    issues: list[LintIssue] = []
    valid: list[tuple[str, ScreenSpec]] = []

    for screen in screens:
        file = _display(screen.path, root)
        try:
            spec = validator.ensure_valid(screen.raw, screen.name)
        except SpecValidationError as e:
            issues.append(LintIssue(file, Severity.ERROR, "schema", e.message))
            continue
        valid.append((file, spec))
        issues.extend(_lint_tree(file, spec))

    routes: dict[str, list[str]] = defaultdict(list)
    owners: dict[str, list[str]] = defaultdict(list)
    for file, spec in valid:
        routes[spec.route].append(file)
        for node_id in dict.fromkeys(node.id for node, _ in walk(spec.tree)):
            owners[node_id].append(file)

    for route, files in routes.items():
        if len(files) > 1:
            issues.append(
                LintIssue(
                    ", ".join(files),
                    Severity.ERROR,
                    "duplicate-route",
                    f"Route '{route}' is defined in {len(files)} files: {', '.join(files)}",
                )
            )
    for node_id, files in owners.items():
        if len(files) > 1:
            issues.append(
                LintIssue(
                    ", ".join(files),
                    Severity.WARN,
                    "cross-screen-duplicate-id",
                    f"Node ID '{node_id}' appears in {len(files)} screens: {', '.join(files)}",
                )
            )

    return issues


def _display(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def has_errors(issues: list[LintIssue]) -> bool:
    return any(issue.severity == Severity.ERROR for issue in issues)
