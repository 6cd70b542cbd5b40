"""Shared pytest fixtures for screenspec tests."""

import json
import os
from pathlib import Path
from typing import Any

import pytest

# Rich sizes tables to the terminal; pin a wide one so CLI output is not truncated.
os.environ["COLUMNS"] = "200"

from screenspec.core.config import CONFIG_FILE, StudioConfig
from screenspec.core.ir import ScreenSpec


def make_config(framework: str = "nextjs", **overrides: Any) -> StudioConfig:
    """Build a config with the usual project layout."""
    data: dict[str, Any] = {
        "framework": framework,
        "appDir": "app",
        "componentsDir": "components",
        "generatedDir": "app/generated",
        "screensDir": "screens",
        "schemaPath": "schema/screen.schema.json",
        "importAlias": "@",
    }
    data.update(overrides)
    return StudioConfig.model_validate(data)


def screen_doc(route: str = "/", tree: dict[str, Any] | None = None) -> dict[str, Any]:
    """A raw screen document with a small default tree."""
    return {
        "version": 1,
        "route": route,
        "tree": tree
        or {
            "id": "root",
            "type": "Stack",
            "props": {"gap": "md"},
            "children": [
                {"id": "title", "type": "Heading", "props": {"text": "Welcome", "level": 1}},
                {"id": "intro", "type": "Text", "props": {"text": "Hello there"}},
            ],
        },
    }


def write_project(
    root: Path,
    screens: dict[str, Any],
    framework: str = "nextjs",
    **config_overrides: Any,
) -> Path:
    """
    Lay out a project on disk.

    Args:
        root: Project root
        screens: File stem -> screen document (a str is written verbatim)
        framework: Target backend
        config_overrides: Extra studio.config.json keys (camelCase)
    """
    config = {
        "framework": framework,
        "appDir": "app",
        "componentsDir": "components",
        "generatedDir": "app/generated",
        "screensDir": "screens",
        "schemaPath": "schema/screen.schema.json",
        "importAlias": "@",
        **config_overrides,
    }
    (root / CONFIG_FILE).write_text(json.dumps(config, indent=2))
    screens_dir = root / "screens"
    screens_dir.mkdir(parents=True, exist_ok=True)
    for stem, doc in screens.items():
        text = doc if isinstance(doc, str) else json.dumps(doc, indent=2)
        (screens_dir / f"{stem}.screen.json").write_text(text)
    return root


@pytest.fixture
def studio_config() -> StudioConfig:
    """Return a Next.js project config."""
    return make_config()


@pytest.fixture
def sample_doc() -> dict[str, Any]:
    """Return a raw screen document."""
    return screen_doc()


@pytest.fixture
def sample_spec(sample_doc: dict[str, Any]) -> ScreenSpec:
    """Return a parsed screen spec."""
    return ScreenSpec.from_dict(sample_doc)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with two valid screens."""
    return write_project(
        tmp_path,
        {
            "home": screen_doc("/"),
            "about": screen_doc(
                "/about",
                {
                    "id": "about_root",
                    "type": "Section",
                    "props": {"padding": "lg"},
                    "children": [{"id": "about_heading", "type": "Heading", "props": {"text": "About"}}],
                },
            ),
        },
    )


@pytest.fixture
def config_factory():
    """Return a builder for configs with the usual layout."""
    return make_config


@pytest.fixture
def doc_factory():
    """Return a builder for raw screen documents."""
    return screen_doc


@pytest.fixture
def project_factory():
    """Return a function laying out a project on disk."""
    return write_project
