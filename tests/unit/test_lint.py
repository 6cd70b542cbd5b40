"""Tests for spec linting."""

from pathlib import Path

from screenspec.core.discovery import DiscoveredScreen
from screenspec.core.lint import Severity, has_errors, lint_screens
from screenspec.core.validator import SpecValidator


def screen(name: str, raw) -> DiscoveredScreen:
    return DiscoveredScreen(path=Path("screens") / f"{name}.screen.json", raw=raw)


def rules(issues) -> list[str]:
    return [issue.rule for issue in issues]


class TestLint:
    def test_clean_screen(self, sample_doc) -> None:
        assert lint_screens([screen("home", sample_doc)], SpecValidator()) == []

    def test_schema_failure_reported_once(self, sample_doc) -> None:
        sample_doc["version"] = 2
        sample_doc["route"] = "bad"
        issues = lint_screens([screen("home", sample_doc)], SpecValidator())

        assert rules(issues) == ["schema"]
        assert issues[0].severity == Severity.ERROR
        assert has_errors(issues)

    def test_duplicate_id(self, doc_factory) -> None:
        doc = doc_factory(
            tree={
                "id": "root",
                "type": "Stack",
                "children": [{"id": "a", "type": "Text"}, {"id": "a", "type": "Divider"}],
            }
        )
        issues = lint_screens([screen("home", doc)], SpecValidator())
        assert rules(issues) == ["duplicate-id"]
        assert "tree.children[0], tree.children[1]" in issues[0].message

    def test_authoring_warnings(self, doc_factory) -> None:
        doc = doc_factory(
            tree={
                "id": "root",
                "type": "Stack",
                "children": [
                    {"id": "h", "type": "Heading", "props": {"text": "Deep", "level": 3}},
                    {"id": "b", "type": "Button", "props": {}},
                    {"id": "l", "type": "Link", "props": {"href": "/x"}},
                    {"id": "empty", "type": "Box", "children": []},
                ],
            }
        )
        issues = lint_screens([screen("home", doc)], SpecValidator())

        assert sorted(rules(issues)) == ["empty-children", "empty-label", "empty-label", "heading-hierarchy"]
        assert all(issue.severity == Severity.WARN for issue in issues)
        assert not has_errors(issues)

    def test_image_alt(self, doc_factory) -> None:
        doc = doc_factory(tree={"id": "img", "type": "Image", "props": {"src": "/a.png", "alt": " "}})
        issues = lint_screens([screen("home", doc)], SpecValidator())
        assert rules(issues) == ["image-alt"]
        assert has_errors(issues)

    def test_cross_screen_checks(self, sample_doc, doc_factory) -> None:
        other = doc_factory("/", {"id": "root", "type": "Box"})
        issues = lint_screens([screen("home", sample_doc), screen("landing", other)], SpecValidator())

        by_rule = {issue.rule: issue for issue in issues}
        assert by_rule["duplicate-route"].severity == Severity.ERROR
        assert "Route '/'" in by_rule["duplicate-route"].message
        assert by_rule["cross-screen-duplicate-id"].severity == Severity.WARN
        assert "'root'" in by_rule["cross-screen-duplicate-id"].message

    def test_invalid_screens_skip_cross_checks(self, sample_doc, doc_factory) -> None:
        broken = doc_factory("/")
        broken["version"] = 9
        issues = lint_screens([screen("home", sample_doc), screen("broken", broken)], SpecValidator())
        assert rules(issues) == ["schema"]

    def test_files_relative_to_root(self, doc_factory) -> None:
        doc = doc_factory(tree={"id": "b", "type": "Button"})
        found = DiscoveredScreen(path=Path("/project/screens/home.screen.json"), raw=doc)
        issues = lint_screens([found], SpecValidator(), Path("/project"))
        assert issues[0].file == str(Path("screens/home.screen.json"))
