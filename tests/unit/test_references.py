"""Tests for ComponentRef expansion."""

import logging

import pytest

from screenspec.core.ir import ComponentDef, Node
from screenspec.core.references import (
    UNRESOLVED_CIRCULAR,
    UNRESOLVED_INVALID,
    UNRESOLVED_MISSING,
    build_registry,
    has_unresolved_refs,
    overridden_props,
    reset_to_component,
    resolve_refs,
)


def ref(node_id: str, target: str, **props) -> Node:
    return Node(id=node_id, type="ComponentRef", props={"ref": target, **props})


@pytest.fixture
def text_def() -> ComponentDef:
    return ComponentDef(id="comp_1", name="Greeting", tree=Node(id="x", type="Text", props={"text": "hi"}))


@pytest.fixture
def card_def() -> ComponentDef:
    return ComponentDef(
        id="card",
        name="Card",
        slots=["body"],
        tree=Node(
            id="card_root",
            type="Card",
            props={"padding": "md"},
            children=[
                Node(id="card_title", type="Heading", props={"text": "Title", "level": 3}),
                Node(id="card_body", type="Stack", props={"slot": "body"}, children=[Node(id="default", type="Text")]),
            ],
        ),
    )


class TestResolveRefs:
    def test_overrides_apply_and_root_takes_ref_id(self, text_def: ComponentDef) -> None:
        tree = Node(id="root", type="Stack", children=[ref("greet", "comp_1", overrides={"text": "bye"})])
        resolved = resolve_refs(tree, build_registry([text_def]))

        node = resolved.children[0]
        assert node.id == "greet"
        assert node.type == "Text"
        assert node.props["text"] == "bye"

    def test_ref_as_tree_root(self, text_def: ComponentDef) -> None:
        resolved = resolve_refs(ref("top", "comp_1"), build_registry([text_def]))
        assert resolved.id == "top"
        assert resolved.props == {"text": "hi"}

    def test_input_is_not_mutated(self, text_def: ComponentDef) -> None:
        tree = Node(id="root", type="Stack", children=[ref("greet", "comp_1", overrides={"text": "bye"})])
        before = tree.to_dict()
        resolve_refs(tree, build_registry([text_def]))
        assert tree.to_dict() == before
        assert text_def.tree.props == {"text": "hi"}

    def test_unaffected_subtrees_are_shared(self, text_def: ComponentDef) -> None:
        plain = Node(id="plain", type="Box", children=[Node(id="leaf", type="Text")])
        tree = Node(id="root", type="Stack", children=[plain, ref("greet", "comp_1")])
        resolved = resolve_refs(tree, build_registry([text_def]))
        assert resolved.children[0] is plain

    def test_tree_without_refs_is_returned_as_is(self, sample_spec) -> None:
        assert resolve_refs(sample_spec.tree, {}) is sample_spec.tree

    def test_style_overrides_merge(self) -> None:
        definition = ComponentDef(
            id="badge",
            name="Badge",
            tree=Node(id="b", type="Text", style={"color": "red", "fontSize": 12}),
        )
        node = ref("b1", "badge", styleOverrides={"color": "blue"})
        resolved = resolve_refs(node, build_registry([definition]))
        assert resolved.style.declared() == {"fontSize": 12, "color": "blue"}

    def test_descendant_overrides(self, card_def: ComponentDef) -> None:
        node = ref("promo", "card", descendants={"card_title": {"props": {"text": "Sale"}, "style": {"color": "red"}}})
        resolved = resolve_refs(node, build_registry([card_def]))

        title = resolved.children[0]
        assert title.props == {"text": "Sale", "level": 3}
        assert title.style.declared() == {"color": "red"}

    def test_slot_content_replaces_children(self, card_def: ComponentDef) -> None:
        content = [{"id": "custom", "type": "Button", "props": {"label": "Buy"}}]
        resolved = resolve_refs(ref("promo", "card", slotContent={"body": content}), build_registry([card_def]))

        body = resolved.children[1]
        assert [child.id for child in body.children] == ["custom"]

    def test_empty_slot_content_keeps_defaults(self, card_def: ComponentDef) -> None:
        resolved = resolve_refs(ref("promo", "card", slotContent={"body": []}), build_registry([card_def]))
        assert [child.id for child in resolved.children[1].children] == ["default"]

    def test_nested_definitions(self, text_def: ComponentDef) -> None:
        wrapper = ComponentDef(
            id="wrapper",
            name="Wrapper",
            tree=Node(id="w", type="Box", children=[ref("inner", "comp_1", overrides={"text": "nested"})]),
        )
        resolved = resolve_refs(ref("outer", "wrapper"), build_registry([text_def, wrapper]))

        assert resolved.id == "outer"
        assert resolved.children[0].type == "Text"
        assert resolved.children[0].props["text"] == "nested"
        assert not has_unresolved_refs(resolved)

    def test_repeated_resolution_is_identical(self) -> None:
        label = ComponentDef(
            id="label",
            name="Label",
            tree=Node(id="label_text", type="Text", props={"text": "Default"}, style={"color": "black"}),
        )
        panel = ComponentDef(
            id="panel",
            name="Panel",
            slots=["content"],
            tree=Node(
                id="panel_root",
                type="Box",
                props={"padding": "sm"},
                children=[
                    Node(
                        id="panel_title",
                        type="Heading",
                        props={"text": "Panel", "level": 2},
                        style={"color": "black"},
                    ),
                    ref("panel_label", "label", overrides={"text": "Inner"}),
                    Node(
                        id="panel_slot",
                        type="Stack",
                        props={"slot": "content"},
                        children=[Node(id="filler", type="Text")],
                    ),
                ],
            ),
        )
        registry = build_registry([label, panel])
        tree = Node(
            id="root",
            type="Stack",
            children=[
                ref(
                    "promo",
                    "panel",
                    overrides={"padding": "lg"},
                    descendants={"panel_title": {"props": {"text": "Sale", "level": 1}, "style": {"color": "red"}}},
                    slotContent={"content": [{"id": "buy", "type": "Button", "props": {"label": "Buy"}}]},
                )
            ],
        )

        first = resolve_refs(tree, registry)
        second = resolve_refs(tree, registry)
        assert first.to_dict() == second.to_dict()

        promo = first.children[0]
        title, inner, slot = promo.children
        assert [promo.id, title.id, inner.id, slot.id] == ["promo", "panel_title", "panel_label", "panel_slot"]
        assert promo.props["padding"] == "lg"
        assert title.props == {"text": "Sale", "level": 1}
        assert title.style.declared() == {"color": "red"}
        assert inner.type == "Text"
        assert inner.props["text"] == "Inner"
        assert inner.style.declared() == {"color": "black"}
        assert [child.id for child in slot.children] == ["buy"]
        assert not has_unresolved_refs(first)

    def test_same_definition_twice_is_not_circular(self, text_def: ComponentDef) -> None:
        tree = Node(id="root", type="Stack", children=[ref("a", "comp_1"), ref("b", "comp_1")])
        resolved = resolve_refs(tree, build_registry([text_def]))
        assert [c.type for c in resolved.children] == ["Text", "Text"]


class TestUnresolved:
    def test_missing_target_passes_through(self, caplog: pytest.LogCaptureFixture) -> None:
        node = ref("ghost", "nope")
        with caplog.at_level(logging.WARNING):
            resolved = resolve_refs(node, {})

        assert resolved.type == "ComponentRef"
        assert resolved.props["unresolved"] == UNRESOLVED_MISSING
        assert "nope" in caplog.text
        assert "unresolved" not in node.props

    def test_cycle_is_guarded(self) -> None:
        a = ComponentDef(id="a", name="A", tree=Node(id="a_root", type="Box", children=[ref("to_b", "b")]))
        b = ComponentDef(id="b", name="B", tree=Node(id="b_root", type="Box", children=[ref("to_a", "a")]))
        resolved = resolve_refs(ref("start", "a"), build_registry([a, b]))

        leaf = resolved.children[0].children[0]
        assert leaf.type == "ComponentRef"
        assert leaf.props["unresolved"] == UNRESOLVED_CIRCULAR
        assert has_unresolved_refs(resolved)

    def test_malformed_props_are_invalid_not_missing(
        self, text_def: ComponentDef, caplog: pytest.LogCaptureFixture
    ) -> None:
        node = ref("c1", "comp_1", descendants="oops")
        with caplog.at_level(logging.WARNING):
            resolved = resolve_refs(node, build_registry([text_def]))

        assert resolved.type == "ComponentRef"
        assert resolved.props["unresolved"] == UNRESOLVED_INVALID
        assert "malformed props" in caplog.text

    def test_self_reference(self) -> None:
        loop = ComponentDef(id="loop", name="Loop", tree=ref("again", "loop"))
        resolved = resolve_refs(ref("start", "loop"), build_registry([loop]))
        assert resolved.props["unresolved"] == UNRESOLVED_CIRCULAR


class TestRegistryHelpers:
    def test_last_duplicate_wins(self, text_def: ComponentDef) -> None:
        other = ComponentDef(id="comp_1", name="Other", tree=Node(id="y", type="Divider"))
        assert build_registry([text_def, other])["comp_1"].name == "Other"

    def test_overridden_props(self, text_def: ComponentDef) -> None:
        instance = ref("greet", "comp_1", overrides={"text": "bye", "variant": "muted"})
        assert overridden_props(instance, text_def) == ["text", "variant"]
        same = ref("greet", "comp_1", overrides={"text": "hi"})
        assert overridden_props(same, text_def) == []

    def test_reset_to_component(self) -> None:
        instance = ref("greet", "comp_1", overrides={"text": "bye"}, styleOverrides={"color": "red"})
        reset = reset_to_component(instance)
        assert reset.props == {"ref": "comp_1"}
        assert reset.id == "greet"
