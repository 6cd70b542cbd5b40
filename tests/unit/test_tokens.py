"""Tests for design token loading and resolution."""

import json
import logging
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from screenspec.core.errors import SpecLoadError
from screenspec.core.ir import DesignTokens, NodeStyle
from screenspec.core.tokens import (
    DEFAULT_GAP,
    DEFAULT_SIZE,
    list_token_names,
    load_tokens,
    lookup_token,
    parse_tokens,
    resolve_style,
    resolve_style_value,
    resolve_token_maps,
)

TOKEN_DOC = {
    "color": {
        "primary": {"value": "#3366ff", "type": "color"},
        "muted": {"value": "#6b7280"},
    },
    "spacing": {"md": {"value": "5"}, "xl": {"value": "24px"}},
    "typography": {
        "fontSize": {"lg": {"value": "1.25rem"}},
        "fontWeight": {"bold": {"value": 700}},
    },
    "shadow": {"card": {"value": "0 1px 2px #0002"}},
    "brand": {"name": "Acme", "palette": {"accent": {"value": "#ff6600"}}},
}


@pytest.fixture
def tokens() -> DesignTokens:
    return parse_tokens(TOKEN_DOC)


class TestResolveStyleValue:
    def test_reference_resolves_to_leaf_value(self, tokens: DesignTokens) -> None:
        assert resolve_style_value("$color.primary", tokens) == "#3366ff"

    def test_empty_table_keeps_literal(self) -> None:
        assert resolve_style_value("$color.primary", DesignTokens()) == "$color.primary"

    def test_no_table_keeps_literal(self) -> None:
        assert resolve_style_value("$color.primary", None) == "$color.primary"

    def test_primitive_at_path(self, tokens: DesignTokens) -> None:
        assert resolve_style_value("$brand.name", tokens) == "Acme"

    def test_nested_group(self, tokens: DesignTokens) -> None:
        assert resolve_style_value("$brand.palette.accent", tokens) == "#ff6600"

    def test_numeric_value(self, tokens: DesignTokens) -> None:
        assert resolve_style_value("$typography.fontWeight.bold", tokens) == 700

    def test_group_without_value_is_unresolved(self, tokens: DesignTokens) -> None:
        assert resolve_style_value("$color", tokens) == "$color"

    @pytest.mark.parametrize("value", ["#fff", 12, 1.5, "$", "16px"])
    def test_non_references_pass_through(self, tokens: DesignTokens, value) -> None:
        assert resolve_style_value(value, tokens) == value

    def test_none(self, tokens: DesignTokens) -> None:
        assert resolve_style_value(None, tokens) is None

    @given(st.text(alphabet="abcdefghij.", min_size=1, max_size=20))
    def test_never_raises(self, path: str) -> None:
        """Invariant: a miss returns the literal reference, never an error."""
        value = f"${path}"
        result = resolve_style_value(value, parse_tokens(TOKEN_DOC))
        assert result is not None


class TestResolveStyle:
    def test_resolves_every_property(self, tokens: DesignTokens) -> None:
        style = NodeStyle(color="$color.primary", font_size="$typography.fontSize.lg", width=200)
        assert resolve_style(style, tokens) == {
            "fontSize": "1.25rem",
            "color": "#3366ff",
            "width": 200,
        }

    def test_omits_unresolved(self, tokens: DesignTokens, caplog: pytest.LogCaptureFixture) -> None:
        style = NodeStyle(color="$color.missing", background_color="$color.muted")
        with caplog.at_level(logging.WARNING, logger="screenspec.core.tokens"):
            resolved = resolve_style(style, tokens)

        assert resolved == {"backgroundColor": "#6b7280"}
        assert "$color.missing" in caplog.text

    def test_none_style(self, tokens: DesignTokens) -> None:
        assert resolve_style(None, tokens) == {}


class TestLoading:
    def test_typed_groups(self, tokens: DesignTokens) -> None:
        assert tokens.color["primary"].value == "#3366ff"
        assert tokens.color["primary"].type == "color"
        assert tokens.typography.font_size["lg"].value == "1.25rem"
        assert tokens.shadow["card"].value == "0 1px 2px #0002"

    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps(TOKEN_DOC))
        assert lookup_token("color.primary", load_tokens(path)) == "#3366ff"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpecLoadError, match="not found"):
            load_tokens(tmp_path / "tokens.json")

    def test_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "tokens.json"
        path.write_text("{not json")
        with pytest.raises(SpecLoadError, match="Invalid JSON"):
            load_tokens(path)

    def test_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "tokens.json"
        path.write_text("[]")
        with pytest.raises(SpecLoadError, match="JSON object"):
            load_tokens(path)


class TestTokenMaps:
    def test_defaults_without_tokens(self) -> None:
        maps = resolve_token_maps(None)
        assert maps.gap == DEFAULT_GAP
        assert maps.size == DEFAULT_SIZE
        assert not maps.customized

    def test_overlay(self, tokens: DesignTokens) -> None:
        maps = resolve_token_maps(tokens)
        assert maps.gap["md"] == "5"
        assert maps.gap["xl"] == "24px"
        assert maps.gap["sm"] == DEFAULT_GAP["sm"]
        assert maps.colors == {"primary": "#3366ff", "muted": "#6b7280"}
        assert maps.font_sizes == {"lg": "1.25rem"}
        assert maps.customized

    def test_defaults_are_not_shared(self, tokens: DesignTokens) -> None:
        resolve_token_maps(tokens)
        assert DEFAULT_GAP["md"] == "4"

    def test_token_names(self, tokens: DesignTokens) -> None:
        assert list_token_names(tokens, "color") == ["primary", "muted"]
        assert list_token_names(None, "spacing") == ["xs", "sm", "md", "lg", "xl"]
        assert list_token_names(None, "color") == []
