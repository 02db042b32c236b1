"""Unit tests for the scaffold schema and traversal helpers."""

import pytest
from pydantic import ValidationError

from src.schema import (
    BoxNode,
    ButtonNode,
    FieldNode,
    FormNode,
    Scaffold,
    StackNode,
    TextNode,
    build_json_pointer,
    build_parent_map,
    find_node,
    is_descendant,
    iter_pre_order,
    parse_json_pointer,
    parse_node,
    parse_scaffold,
    resolve_json_pointer,
    traverse_pre_order,
)


class TestParseNode:
    """Tests for discriminated node parsing."""

    @pytest.mark.unit
    def test_camel_case_keys(self):
        """camelCase JSON keys map onto snake_case attributes."""
        node = parse_node(
            {
                "type": "Button",
                "id": "save",
                "text": "Save",
                "roleHint": "primary",
                "widthPolicy": "fill",
                "tabIndex": 2,
            }
        )
        assert isinstance(node, ButtonNode)
        assert node.role_hint == "primary"
        assert node.width_policy == "fill"
        assert node.tab_index == 2

    @pytest.mark.unit
    def test_nested_children(self):
        """Containers parse their children recursively."""
        node = parse_node(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Text", "id": "t", "text": "Hello"},
                    {"type": "Box", "id": "b", "child": {"type": "Field", "id": "f", "label": "Email"}},
                ],
            }
        )
        assert isinstance(node, StackNode)
        assert isinstance(node.children[1], BoxNode)
        assert isinstance(node.children[1].child, FieldNode)

    @pytest.mark.unit
    def test_unknown_type_rejected(self):
        """An unknown discriminator fails validation."""
        with pytest.raises(ValidationError):
            parse_node({"type": "Carousel", "id": "c"})

    @pytest.mark.unit
    def test_existing_node_passthrough(self):
        """Typed nodes are returned as-is."""
        node = TextNode(id="t", text="x")
        assert parse_node(node) is node

    @pytest.mark.unit
    def test_behaviors(self):
        """Behavior blocks expose convenience accessors."""
        node = parse_node(
            {
                "type": "Stack",
                "id": "adv",
                "behaviors": {
                    "disclosure": {"collapsible": True, "controlsId": "toggle"},
                    "guidedFlow": {"role": "step", "stepIndex": 2},
                },
            }
        )
        assert node.disclosure.collapsible is True
        assert node.disclosure.controls_id == "toggle"
        assert node.guided_flow.step_index == 2


class TestParseScaffold:
    """Tests for scaffold-level defaults."""

    @pytest.mark.unit
    def test_default_settings(self):
        """Missing settings fall back to defaults."""
        scaffold = parse_scaffold(
            {
                "schemaVersion": "1.0.0",
                "screen": {"id": "s", "root": {"type": "Text", "id": "t", "text": "x"}},
            }
        )
        assert scaffold.settings.spacing_scale == [0, 4, 8, 12, 16, 24, 32, 48, 64]
        assert scaffold.settings.min_touch_target.w == 44
        assert scaffold.settings.breakpoints == ["320x640", "768x1024", "1280x800"]

    @pytest.mark.unit
    def test_passthrough(self, login_scaffold):
        """Typed scaffolds are returned unchanged."""
        assert parse_scaffold(login_scaffold) is login_scaffold
        assert isinstance(login_scaffold, Scaffold)


class TestChildSlots:
    """Tests for the uniform children accessor."""

    @pytest.mark.unit
    def test_form_fields_then_actions(self):
        """Form children are fields followed by actions."""
        form = FormNode(
            id="f",
            fields=[FieldNode(id="a", label="A")],
            actions=[ButtonNode(id="ok", text="OK")],
        )
        assert [(slot, index, child.id) for slot, index, child in form.child_slots()] == [
            ("fields", 0, "a"),
            ("actions", 0, "ok"),
        ]

    @pytest.mark.unit
    def test_box_single_child(self):
        """Box exposes its child without an index."""
        box = BoxNode(id="b", child=TextNode(id="t", text="x"))
        assert box.child_slots()[0][:2] == ("child", None)
        assert BoxNode(id="empty").child_slots() == []

    @pytest.mark.unit
    def test_leaf_has_no_children(self):
        """Leaves report no children."""
        assert TextNode(id="t", text="x").children_of() == []


class TestTraversal:
    """Tests for pre-order traversal and visibility pruning."""

    @pytest.mark.unit
    def test_pre_order_with_pointers(self):
        """Pointers follow the document structure."""
        root = StackNode(
            id="root",
            children=[
                TextNode(id="t", text="x"),
                FormNode(id="f", actions=[ButtonNode(id="ok", text="OK")]),
            ],
        )
        pairs = [(node.id, pointer) for node, pointer in iter_pre_order(root)]
        assert pairs == [
            ("root", "/screen/root"),
            ("t", "/screen/root/children/0"),
            ("f", "/screen/root/children/1"),
            ("ok", "/screen/root/children/1/actions/0"),
        ]

    @pytest.mark.unit
    def test_hidden_subtree_pruned(self):
        """A hidden node excludes its descendants."""
        root = StackNode(
            id="root",
            children=[
                StackNode(id="hidden", visible=False, children=[TextNode(id="inner", text="x")]),
                TextNode(id="shown", text="y"),
            ],
        )
        assert [n.id for n in traverse_pre_order(root)] == ["root", "shown"]
        assert [n.id for n in traverse_pre_order(root, visible_only=False)] == [
            "root",
            "hidden",
            "inner",
            "shown",
        ]

    @pytest.mark.unit
    def test_find_and_descendant(self):
        """find_node and is_descendant agree on the tree."""
        inner = TextNode(id="inner", text="x")
        section = StackNode(id="section", children=[inner])
        root = StackNode(id="root", children=[section])
        assert find_node(root, "inner") is inner
        assert find_node(root, "missing") is None
        assert is_descendant(section, "inner")
        assert not is_descendant(section, "section")

    @pytest.mark.unit
    def test_parent_map(self):
        """Visible children map to their parent."""
        root = StackNode(id="root", children=[TextNode(id="a", text="x")])
        assert build_parent_map(root)["a"] is root


class TestJsonPointer:
    """Tests for RFC 6901 helpers."""

    @pytest.mark.unit
    def test_escaping(self):
        """Slash and tilde are escaped."""
        assert build_json_pointer("a/b", "c~d") == "/a~1b/c~0d"
        assert parse_json_pointer("/a~1b/c~0d") == ["a/b", "c~d"]

    @pytest.mark.unit
    def test_resolve(self):
        """Pointers resolve into nested data."""
        doc = {"screen": {"root": {"children": [{"id": "x"}]}}}
        assert resolve_json_pointer(doc, "/screen/root/children/0/id") == "x"

    @pytest.mark.unit
    def test_resolve_missing(self):
        """Missing tokens raise KeyError."""
        with pytest.raises(KeyError):
            resolve_json_pointer({"a": []}, "/a/3")

    @pytest.mark.unit
    def test_invalid_pointer(self):
        """Pointers must start with a slash."""
        with pytest.raises(ValueError):
            parse_json_pointer("screen/root")
