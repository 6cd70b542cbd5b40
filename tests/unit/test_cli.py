"""Tests for CLI commands."""

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from screenspec import __version__
from screenspec.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures root logging; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestVersion:
    def test_version_flag(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"screenspec {__version__}" in result.output


class TestCompileCommand:
    def test_compiles_project(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["compile", "--project", str(project)])

        assert result.exit_code == 0, result.output
        assert (project / "app" / "generated" / "Home.generated.tsx").exists()
        assert (project / "app" / "generated" / "About.generated.tsx").exists()
        assert (project / "app" / "generated" / "index.ts").exists()

    def test_dry_run(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["compile", "-p", str(project), "--dry-run"])

        assert result.exit_code == 0
        assert "Would generate: app/generated/Home.generated.tsx" in result.output
        assert "Would generate: app/generated/index.ts" in result.output
        assert not (project / "app").exists()

    def test_workers_option(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["compile", "-p", str(project), "--workers", "3"])
        assert result.exit_code == 0

    def test_failed_screen_exits_nonzero(self, cli_runner, project: Path) -> None:
        broken = project / "screens" / "about.screen.json"
        doc = json.loads(broken.read_text())
        doc["route"] = "about"
        broken.write_text(json.dumps(doc))

        result = cli_runner.invoke(app, ["compile", "-p", str(project)])

        assert result.exit_code == 1
        assert "Compile completed with 1 error(s):" in result.output
        assert "screens/about.screen.json" in result.output
        assert (project / "app" / "generated" / "Home.generated.tsx").exists()

    def test_missing_config(self, cli_runner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["compile", "-p", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error: Config file not found" in result.output

    def test_unparsable_screen(self, cli_runner, project: Path) -> None:
        (project / "screens" / "broken.screen.json").write_text("{")
        result = cli_runner.invoke(app, ["compile", "-p", str(project)])
        assert result.exit_code == 1
        assert "Error: Invalid JSON" in result.output


class TestValidateCommand:
    def test_all_valid(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["validate", "-p", str(project)])
        assert result.exit_code == 0
        assert "2/2 screen(s) valid" in result.output

    def test_reports_failures(self, cli_runner, project: Path) -> None:
        path = project / "screens" / "home.screen.json"
        doc = json.loads(path.read_text())
        doc["version"] = 5
        path.write_text(json.dumps(doc))

        result = cli_runner.invoke(app, ["validate", "-p", str(project)])

        assert result.exit_code == 1
        assert "home.screen.json failed validation with" in result.output
        assert "1/2 screen(s) valid" in result.output


class TestLintCommand:
    def test_clean_project(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["lint", "-p", str(project)])
        assert result.exit_code == 0
        assert "No issues found" in result.output

    def test_warnings_do_not_fail(self, cli_runner, tmp_path: Path, project_factory, doc_factory) -> None:
        doc = doc_factory(tree={"id": "root", "type": "Stack", "children": [{"id": "b", "type": "Button"}]})
        project_factory(tmp_path, {"home": doc})

        result = cli_runner.invoke(app, ["lint", "-p", str(tmp_path)])
        assert result.exit_code == 0
        assert "empty-label" in result.output

    def test_shared_ids_across_screens_warn(self, cli_runner, tmp_path: Path, project_factory, doc_factory) -> None:
        project_factory(tmp_path, {"home": doc_factory("/"), "landing": doc_factory("/landing")})
        result = cli_runner.invoke(app, ["lint", "-p", str(tmp_path)])
        assert result.exit_code == 0
        assert "cross-screen-duplicate-id" in result.output

    def test_errors_fail(self, cli_runner, tmp_path: Path, project_factory, doc_factory) -> None:
        project_factory(tmp_path, {"home": doc_factory("/"), "landing": doc_factory("/")})
        result = cli_runner.invoke(app, ["lint", "-p", str(tmp_path)])
        assert result.exit_code == 1
        assert "duplicate-route" in result.output


class TestSchemaCommand:
    def test_writes_configured_path(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["schema", "-p", str(project)])

        schema_path = project / "schema" / "screen.schema.json"
        assert result.exit_code == 0
        assert "Wrote schema:" in result.output
        assert json.loads(schema_path.read_text())["title"] == "ScreenSpec"

    def test_output_option(self, cli_runner, tmp_path: Path) -> None:
        target = tmp_path / "out" / "schema.json"
        result = cli_runner.invoke(app, ["schema", "-o", str(target)])
        assert result.exit_code == 0
        assert target.exists()


class TestAddScreenCommand:
    def test_creates_screen(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["add-screen", "user-profile", "-p", str(project)])

        assert result.exit_code == 0, result.output
        assert "route: /user-profile" in result.output
        doc = json.loads((project / "screens" / "user-profile.screen.json").read_text())
        assert doc["tree"]["children"][0]["props"]["text"] == "User Profile"

    def test_new_screen_compiles(self, cli_runner, project: Path) -> None:
        cli_runner.invoke(app, ["add-screen", "checkout", "-p", str(project)])
        result = cli_runner.invoke(app, ["compile", "-p", str(project)])

        assert result.exit_code == 0, result.output
        assert (project / "app" / "generated" / "Checkout.generated.tsx").exists()

    def test_existing_screen_fails(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["add-screen", "home", "-p", str(project)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_invalid_name_fails(self, cli_runner, project: Path) -> None:
        result = cli_runner.invoke(app, ["add-screen", "9lives", "-p", str(project)])
        assert result.exit_code == 1
        assert "Invalid screen name" in result.output


class TestBackendsCommand:
    def test_lists_backends(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["backends"])

        assert result.exit_code == 0
        for name in ("nextjs", "vue", "svelte", "html", "expo"):
            assert name in result.output
