"""Tests for the emission backends and the backend registry."""

from typing import Any

import pytest

from screenspec.core.errors import BackendError
from screenspec.core.ir import NodeStyle, ScreenSpec
from screenspec.core.plugins import NodePlugin, PluginRegistry
from screenspec.core.tokens import parse_tokens
from screenspec.stacks import BackendRegistry, get_backend, list_backends
from screenspec.stacks.base import (
    GENERATED_MARKER,
    EmitContext,
    EmittedFile,
    ScreenBackend,
    analyze_screen,
    component_name_from_route,
)
from screenspec.stacks.base.screen import apply_mapping, list_items, table_rows
from screenspec.stacks.expo import native_style

ALL_BACKENDS = ["nextjs", "vue", "svelte", "html", "expo"]

EXTENSIONS = {
    "nextjs": ".generated.tsx",
    "vue": ".generated.vue",
    "svelte": ".generated.svelte",
    "html": ".generated.html",
    "expo": ".generated.tsx",
}


def interactive_tree() -> dict[str, Any]:
    return {
        "id": "root",
        "type": "Stack",
        "props": {"gap": "md"},
        "children": [
            {"id": "title", "type": "Heading", "props": {"text": "Welcome"}},
            {
                "id": "toggle",
                "type": "Button",
                "props": {"label": "Details"},
                "interactions": {"onClick": {"action": "toggleVisibility", "target": "details"}},
            },
            {"id": "details", "type": "Text", "props": {"text": "More info"}},
            {
                "id": "go",
                "type": "Button",
                "props": {"label": "About"},
                "interactions": {"onClick": {"action": "navigate", "target": "/about"}},
            },
            {
                "id": "search",
                "type": "Input",
                "props": {"placeholder": "Search"},
                "interactions": {"onChange": {"action": "setState", "target": "query"}},
            },
            {
                "id": "result",
                "type": "Text",
                "props": {"text": "Results"},
                "interactions": {"visibleWhen": {"state": "query", "operator": "truthy"}},
            },
            {
                "id": "users",
                "type": "DataTable",
                "props": {"columns": ["name|Name"]},
                "dataSource": {"type": "api", "url": "/api/users"},
            },
        ],
    }


def make_spec(tree: dict[str, Any], route: str = "/") -> ScreenSpec:
    return ScreenSpec.from_dict({"version": 1, "route": route, "tree": tree})


def emit(framework: str, tree: dict[str, Any], config_factory, context: EmitContext | None = None, **config) -> str:
    backend = get_backend(framework)
    result = backend.emit_screen(make_spec(tree), config_factory(framework, **config), context)
    assert len(result.files) == 1
    return result.files[0].contents


# =============================================================================
# Contract shared by every backend
# =============================================================================


@pytest.mark.parametrize("framework", ALL_BACKENDS)
class TestBackendContract:
    def test_file_path_and_component_name(self, framework: str, config_factory, sample_spec) -> None:
        result = get_backend(framework).emit_screen(sample_spec, config_factory(framework))

        assert result.component_name == "Home"
        assert result.files[0].path == f"app/generated/Home{EXTENSIONS[framework]}"

    def test_generated_marker(self, framework: str, config_factory, sample_spec) -> None:
        result = get_backend(framework).emit_screen(sample_spec, config_factory(framework))
        assert GENERATED_MARKER in result.files[0].contents

    def test_text_content(self, framework: str, config_factory, sample_doc) -> None:
        contents = emit(framework, sample_doc["tree"], config_factory)
        assert "Welcome" in contents
        assert "Hello there" in contents

    def test_text_is_escaped(self, framework: str, config_factory) -> None:
        contents = emit(framework, {"id": "t", "type": "Text", "props": {"text": "<b>bold</b>"}}, config_factory)
        assert "<b>bold</b>" not in contents
        assert "&lt;b&gt;" in contents

    def test_missing_ref_placeholder(self, framework: str, config_factory) -> None:
        tree = {"id": "ghost", "type": "ComponentRef", "props": {"ref": "nope", "unresolved": "missing"}}
        assert "Missing component: nope" in emit(framework, tree, config_factory)

    def test_circular_ref_placeholder(self, framework: str, config_factory) -> None:
        tree = {"id": "loop", "type": "ComponentRef", "props": {"ref": "loop", "unresolved": "circular"}}
        assert "Circular component reference: loop" in emit(framework, tree, config_factory)

    def test_invalid_ref_placeholder(self, framework: str, config_factory) -> None:
        tree = {"id": "bad", "type": "ComponentRef", "props": {"ref": "card", "unresolved": "invalid"}}
        contents = emit(framework, tree, config_factory)
        assert "Invalid component reference: card" in contents
        assert "Missing component" not in contents

    def test_plugin_markup(self, framework: str, config_factory) -> None:
        plugins = PluginRegistry()
        plugins.register(NodePlugin(type="Rating", label="Rating", prop_schema={}, emit=lambda node: "<rating-widget />"))
        tree = {"id": "root", "type": "Stack", "children": [{"id": "r", "type": "Rating"}]}
        contents = emit(framework, tree, config_factory, EmitContext.create(plugins=plugins))
        assert "<rating-widget />" in contents

    def test_every_builtin_renders(self, framework: str, config_factory) -> None:
        tree = {
            "id": "root",
            "type": "Stack",
            "children": [
                {"id": "grid", "type": "Grid", "props": {"columns": 3}},
                {"id": "section", "type": "Section", "props": {"padding": "sm"}},
                {"id": "scroll", "type": "ScrollArea", "props": {"height": "200px"}},
                {"id": "spacer", "type": "Spacer", "props": {"size": "lg"}},
                {"id": "box", "type": "Box"},
                {"id": "img", "type": "Image", "props": {"src": "/hero.png", "alt": "Hero", "width": 320}},
                {"id": "email", "type": "Input", "props": {"type": "email", "label": "Email"}},
                {"id": "link", "type": "Link", "props": {"href": "/docs", "text": "Docs"}},
                {"id": "hr", "type": "Divider"},
                {"id": "list", "type": "List", "props": {"items": ["One", "Two"], "ordered": True}},
                {"id": "icon", "type": "Icon", "props": {"name": "Star", "size": 16}},
                {"id": "card", "type": "Card", "children": [{"id": "in_card", "type": "Text", "props": {"text": "Inside"}}]},
                {"id": "form", "type": "Form", "props": {"action": "/submit"}},
                {"id": "modal", "type": "Modal", "props": {"title": "Confirm"}},
                {
                    "id": "tabs",
                    "type": "Tabs",
                    "props": {"tabs": ["First", "Second"]},
                    "children": [
                        {"id": "panel_a", "type": "Text", "props": {"text": "Panel A"}},
                        {"id": "panel_b", "type": "Text", "props": {"text": "Panel B"}},
                    ],
                },
                {"id": "nav", "type": "Nav", "props": {"items": ["Home|/", "Docs|/docs"]}},
                {
                    "id": "table",
                    "type": "DataTable",
                    "props": {"columns": ["name|Name", "role|Role"], "rows": ['{"name": "Ada", "role": "Admin"}']},
                },
            ],
        }
        contents = emit(framework, tree, config_factory)
        for text in ("Docs", "One", "Two", "Inside", "Confirm", "First", "Second", "Panel A", "Name", "Ada", "Admin"):
            assert text in contents, text

    def test_empty_table(self, framework: str, config_factory) -> None:
        tree = {"id": "table", "type": "DataTable", "props": {"columns": ["name|Name"]}}
        assert "No data" in emit(framework, tree, config_factory)

    def test_static_data_source_rows(self, framework: str, config_factory) -> None:
        tree = {
            "id": "people",
            "type": "List",
            "dataSource": {"type": "static", "data": [{"full": "Grace"}], "mapping": {"name": "full"}},
        }
        assert "Grace" in emit(framework, tree, config_factory)

    def test_barrel_is_sorted(self, framework: str, config_factory) -> None:
        backend = get_backend(framework)
        barrel = backend.emit_barrel_index(["Settings", "Home"], config_factory(framework))

        assert barrel.path.startswith("app/generated/index.")
        assert GENERATED_MARKER in barrel.contents
        assert barrel.contents.index("Home") < barrel.contents.index("Settings")

    def test_emission_is_deterministic(self, framework: str, config_factory) -> None:
        first = emit(framework, interactive_tree(), config_factory)
        second = emit(framework, interactive_tree(), config_factory)
        assert first == second


# =============================================================================
# Next.js
# =============================================================================


class TestNextjs:
    def test_static_screen_is_server_component(self, config_factory, sample_doc) -> None:
        contents = emit("nextjs", sample_doc["tree"], config_factory)

        assert contents.startswith(f"// {GENERATED_MARKER}")
        assert '"use client";' not in contents
        assert "export function Home() {" in contents
        assert 'className="flex flex-col gap-4"' in contents
        assert 'className="text-4xl font-bold"' in contents

    def test_interactions(self, config_factory) -> None:
        contents = emit("nextjs", interactive_tree(), config_factory)

        assert '"use client";' in contents
        assert 'import { useEffect, useState } from "react";' in contents
        assert 'import { useRouter } from "next/navigation";' in contents
        assert "const router = useRouter();" in contents
        assert 'router.push("/about")' in contents
        assert "const [detailsVisible, setDetailsVisible] = useState(true);" in contents
        assert "onClick={() => setDetailsVisible((visible) => !visible)}" in contents
        assert "{detailsVisible && (" in contents
        assert 'const [stateQuery, setStateQuery] = useState("");' in contents
        assert "onChange={(e) => setStateQuery(e.target.value)}" in contents
        assert "{!!stateQuery && (" in contents
        assert 'fetch("/api/users")' in contents
        assert "usersRows.map((row, index) => (" in contents

    def test_mapping_transform(self, config_factory) -> None:
        tree = {
            "id": "users",
            "type": "List",
            "dataSource": {"type": "api", "url": "/api/users", "mapping": {"name": "full_name"}},
        }
        contents = emit("nextjs", tree, config_factory)
        assert '.map((row) => ({ ...row, "name": row["full_name"] }))' in contents

    def test_tokens_in_styles_and_scales(self, config_factory) -> None:
        tokens = parse_tokens({"color": {"primary": {"value": "#3366ff"}}, "spacing": {"md": {"value": "5"}}})
        tree = {
            "id": "root",
            "type": "Stack",
            "style": {"color": "$color.primary", "backgroundColor": "$color.nope"},
            "children": [],
        }
        contents = emit("nextjs", tree, config_factory, EmitContext.create(tokens))

        assert 'style={{ color: "#3366ff" }}' in contents
        assert "gap-5" in contents
        assert "$color.nope" not in contents

    def test_responsive_overrides(self, config_factory) -> None:
        tree = {
            "id": "title",
            "type": "Heading",
            "props": {"text": "Hi"},
            "responsive": {"mobile": {"fontSize": 14}},
        }
        contents = emit("nextjs", tree, config_factory)

        assert "const RESPONSIVE_CSS = " in contents
        assert "<style>{RESPONSIVE_CSS}</style>" in contents
        assert 'data-ss="title"' in contents
        assert "@media (max-width: 640px)" in contents

    def test_shadcn_adapter(self, config_factory) -> None:
        tree = {
            "id": "root",
            "type": "Stack",
            "children": [
                {"id": "buy", "type": "Button", "props": {"label": "Buy", "intent": "primary"}},
                {"id": "sep", "type": "Divider"},
            ],
        }
        contents = emit("nextjs", tree, config_factory, componentLibrary="shadcn")

        assert 'import { Button } from "@/components/ui/button";' in contents
        assert 'import { Separator } from "@/components/ui/separator";' in contents
        assert '<Button variant="default">Buy</Button>' in contents

    def test_unknown_component_library_renders_plain(self, config_factory) -> None:
        tree = {"id": "buy", "type": "Button", "props": {"label": "Buy"}}
        contents = emit("nextjs", tree, config_factory, componentLibrary="mystery")
        assert "<button" in contents
        assert "components/ui" not in contents

    def test_icons_and_links(self, config_factory) -> None:
        tree = {
            "id": "root",
            "type": "Stack",
            "children": [
                {"id": "star", "type": "Icon", "props": {"name": "Star"}},
                {"id": "docs", "type": "Link", "props": {"href": "/docs", "text": "Docs"}},
            ],
        }
        contents = emit("nextjs", tree, config_factory)
        assert 'import { StarIcon } from "lucide-react";' in contents
        assert 'import Link from "next/link";' in contents

    def test_other_type(self, config_factory) -> None:
        tree = {"id": "chart", "type": "SalesChart", "props": {"period": "q1"}}
        contents = emit("nextjs", tree, config_factory)
        assert 'data-component="SalesChart"' in contents
        assert 'data-period="q1"' in contents


# =============================================================================
# Vue
# =============================================================================


class TestVue:
    def test_single_file_component(self, config_factory) -> None:
        contents = emit("vue", interactive_tree(), config_factory)

        assert contents.startswith(f"<!-- {GENERATED_MARKER} -->")
        assert '<script setup lang="ts">' in contents
        assert 'import { onMounted, ref } from "vue";' in contents
        assert 'import { useRouter } from "vue-router";' in contents
        assert "const detailsVisible = ref(true);" in contents
        assert 'const stateQuery = ref("");' in contents
        assert "const usersRows = ref<any[]>([]);" in contents
        assert 'await fetch("/api/users")' in contents
        assert "<template>" in contents

    def test_template_bindings(self, config_factory) -> None:
        contents = emit("vue", interactive_tree(), config_factory)

        assert '@click="detailsVisible = !detailsVisible"' in contents
        assert "@click=\"router.push('/about')\"" in contents
        assert "@input=\"stateQuery = ($event.target as HTMLInputElement).value\"" in contents
        assert '<template v-if="detailsVisible">' in contents
        assert '<template v-if="!!stateQuery">' in contents
        assert '<template v-for="(row, index) in usersRows" :key="index">' in contents

    def test_static_screen_has_no_script(self, config_factory, sample_doc) -> None:
        contents = emit("vue", sample_doc["tree"], config_factory)
        assert "<script" not in contents

    def test_responsive_style_block(self, config_factory) -> None:
        tree = {"id": "title", "type": "Heading", "props": {"text": "Hi"}, "responsive": {"tablet": {"width": 300}}}
        contents = emit("vue", tree, config_factory)
        assert '[data-ss="title"] { width: 300px !important; }' in contents
        assert "@media (max-width: 1024px)" in contents

    def test_barrel(self, config_factory) -> None:
        barrel = get_backend("vue").emit_barrel_index(["Home"], config_factory("vue"))
        assert barrel.path == "app/generated/index.ts"
        assert 'export { default as Home } from "./Home.generated.vue";' in barrel.contents


# =============================================================================
# Svelte
# =============================================================================


class TestSvelte:
    def test_component(self, config_factory) -> None:
        contents = emit("svelte", interactive_tree(), config_factory)

        assert contents.startswith(f"<!-- {GENERATED_MARKER} -->")
        assert '<script lang="ts">' in contents
        assert 'import { onMount } from "svelte";' in contents
        assert 'import { goto } from "$app/navigation";' in contents
        assert "let detailsVisible = true;" in contents
        assert 'let stateQuery = "";' in contents
        assert 'on:click={() => goto("/about")}' in contents
        assert "on:click={() => (detailsVisible = !detailsVisible)}" in contents
        assert "on:input={(e) => (stateQuery = e.currentTarget.value)}" in contents
        assert "{#if detailsVisible}" in contents
        assert "{#each usersRows as row}" in contents

    def test_responsive_rules_are_global(self, config_factory) -> None:
        tree = {"id": "title", "type": "Heading", "props": {"text": "Hi"}, "responsive": {"mobile": {"fontSize": 14}}}
        contents = emit("svelte", tree, config_factory)
        assert ':global([data-ss="title"])' in contents

    def test_barrel(self, config_factory) -> None:
        barrel = get_backend("svelte").emit_barrel_index(["Home"], config_factory("svelte"))
        assert 'export { default as Home } from "./Home.generated.svelte";' in barrel.contents


# =============================================================================
# HTML
# =============================================================================


class TestHtml:
    def test_document(self, config_factory, sample_doc) -> None:
        contents = emit("html", sample_doc["tree"], config_factory)

        assert contents.startswith("<!DOCTYPE html>")
        assert f"<!-- {GENERATED_MARKER} -->" in contents
        assert '<div id="app">' in contents
        assert 'style="display: flex; flex-direction: column; gap: 1rem"' in contents
        assert "<script>" not in contents

    def test_interaction_runtime(self, config_factory) -> None:
        contents = emit("html", interactive_tree(), config_factory)

        assert "onclick=\"ssToggle('details')\"" in contents
        assert "onclick=\"window.location.href = '/about'\"" in contents
        assert "oninput=\"ssSet('query', this.value)\"" in contents
        assert '<div data-ss-when data-ss-toggle="details" style="display: contents">' in contents
        assert 'data-ss-state="query" data-ss-op="truthy"' in contents
        assert 'var ssVisible = {"details": true};' in contents
        assert 'var ssState = {"query": ""};' in contents

    def test_api_rows_render_statically(self, config_factory) -> None:
        contents = emit("html", interactive_tree(), config_factory)
        assert "fetch(" not in contents
        assert "No data" in contents

    def test_custom_spacing_tokens(self, config_factory) -> None:
        tokens = parse_tokens({"spacing": {"md": {"value": "5"}}})
        contents = emit("html", {"id": "s", "type": "Stack"}, config_factory, EmitContext.create(tokens))
        assert "gap: 1.25rem" in contents

    def test_barrel(self, config_factory) -> None:
        barrel = get_backend("html").emit_barrel_index(["Home"], config_factory("html"))
        assert barrel.path == "app/generated/index.html"
        assert '<li><a href="./Home.generated.html">Home</a></li>' in barrel.contents


# =============================================================================
# Expo
# =============================================================================


class TestExpo:
    def test_component(self, config_factory) -> None:
        contents = emit("expo", interactive_tree(), config_factory)

        assert contents.startswith(f"// {GENERATED_MARKER}")
        assert 'from "react-native";' in contents
        assert 'import { router } from "expo-router";' in contents
        assert 'onPress={() => router.push("/about")}' in contents
        assert "onPress={() => setDetailsVisible((visible) => !visible)}" in contents
        assert "onChangeText={setStateQuery}" in contents
        assert "{detailsVisible && (" in contents
        assert 'fetch("/api/users")' in contents

    def test_pressable_wraps_non_touchables(self, config_factory) -> None:
        tree = {
            "id": "t",
            "type": "Text",
            "props": {"text": "Tap"},
            "interactions": {"onClick": {"action": "navigate", "target": "/next"}},
        }
        contents = emit("expo", tree, config_factory)
        assert '<Pressable onPress={() => router.push("/next")}>' in contents

    def test_responsive_uses_window_dimensions(self, config_factory) -> None:
        tree = {"id": "title", "type": "Heading", "props": {"text": "Hi"}, "responsive": {"mobile": {"fontSize": 14}}}
        contents = emit("expo", tree, config_factory)

        assert "const { width } = useWindowDimensions();" in contents
        assert 'style={[{ fontSize: 32, fontWeight: "bold" }, width <= 640 && { fontSize: 14 }]}' in contents

    def test_inputs(self, config_factory) -> None:
        tree = {
            "id": "root",
            "type": "Stack",
            "children": [
                {"id": "pw", "type": "Input", "props": {"type": "password"}},
                {"id": "mail", "type": "Input", "props": {"type": "email"}},
            ],
        }
        contents = emit("expo", tree, config_factory)
        assert "secureTextEntry" in contents
        assert 'keyboardType="email-address"' in contents

    def test_external_link(self, config_factory) -> None:
        tree = {"id": "ext", "type": "Link", "props": {"href": "https://example.com", "text": "Site"}}
        contents = emit("expo", tree, config_factory)
        assert 'Linking.openURL("https://example.com")' in contents

    def test_spacing_in_points(self, config_factory) -> None:
        contents = emit("expo", {"id": "s", "type": "Stack", "props": {"gap": "lg"}}, config_factory)
        assert 'style={{ flexDirection: "column", gap: 24 }}' in contents

    def test_native_style(self) -> None:
        style = NodeStyle(
            width="16px",
            padding_top="1rem",
            text_decoration="underline",
            box_shadow="0 1px 2px #000",
            font_weight=700,
            color="red",
        )
        assert native_style(style, None) == {
            "width": 16,
            "paddingTop": 16,
            "textDecorationLine": "underline",
            "fontWeight": "700",
            "color": "red",
        }


# =============================================================================
# Shared analysis and helpers
# =============================================================================


class TestScreenAnalysis:
    def test_collects_state(self) -> None:
        state = analyze_screen(make_spec(interactive_tree()).tree)

        assert state.toggled == ["details"]
        assert state.values == ["query"]
        assert state.navigates
        assert [f.node_id for f in state.fetches] == ["users"]
        assert state.interactive

    def test_static_screen(self, sample_spec) -> None:
        state = analyze_screen(sample_spec.tree)
        assert not state.interactive
        assert not state.stateful

    def test_mapping(self) -> None:
        assert apply_mapping({"full": "Ada", "age": 36}, {"name": "full"}) == {"age": 36, "name": "Ada"}
        assert apply_mapping("plain", {"name": "full"}) == "plain"

    def test_list_and_table_data(self) -> None:
        spec = make_spec(
            {
                "id": "root",
                "type": "Stack",
                "children": [
                    {"id": "l", "type": "List", "props": {"items": ["a", "b"]}},
                    {"id": "t", "type": "DataTable", "props": {"rows": ['{"x": 1}', "not json", {"x": 2}]}},
                ],
            }
        )
        list_node, table_node = spec.tree.children
        assert list_items(list_node) == ["a", "b"]
        assert table_rows(table_node) == [{"x": 1}, {}, {"x": 2}]

    @pytest.mark.parametrize(
        ("route", "name"),
        [
            ("/", "Home"),
            ("/about", "About"),
            ("/user-settings/edit", "UserSettingsEdit"),
            ("/users/:id", "UsersId"),
            ("/404", "Screen404"),
        ],
    )
    def test_component_names(self, route: str, name: str) -> None:
        assert component_name_from_route(route) == name


class TestBackendRegistry:
    def test_builtin_backends(self) -> None:
        assert list_backends() == ["expo", "html", "nextjs", "svelte", "vue"]

    def test_unknown_backend(self) -> None:
        with pytest.raises(BackendError, match="Backend 'angular' not found"):
            get_backend("angular")

    def test_register_custom_backend(self) -> None:
        class TextBackend(ScreenBackend):
            name = "text"

            def emit_screen(self, spec, config, context=None):
                raise NotImplementedError

            def emit_barrel_index(self, component_names, config):
                return EmittedFile("index.txt", "\n".join(component_names))

        registry = BackendRegistry()
        registry.register("text", TextBackend)
        assert registry.list_backends() == ["text"]
        assert isinstance(registry.get("text"), TextBackend)
        assert registry.get("text").get_capabilities().description == "No description provided"

        with pytest.raises(BackendError, match="already registered"):
            registry.register("text", TextBackend)

    def test_register_rejects_non_backend(self) -> None:
        with pytest.raises(BackendError, match="must extend ScreenBackend"):
            BackendRegistry().register("bad", dict)

    @pytest.mark.parametrize("framework", ALL_BACKENDS)
    def test_capabilities(self, framework: str) -> None:
        capabilities = get_backend(framework).get_capabilities()
        assert capabilities.name == framework
        assert capabilities.file_extension
