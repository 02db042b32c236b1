"""Unit tests for keyboard tab-order analysis."""

import logging

import pytest

from src.keyboard import (
    analyze_keyboard_flow,
    build_tab_sequence,
    get_all_focusable_ids,
    is_focusable,
)
from src.schema import ButtonNode, FieldNode, StackNode, TextNode


class TestIsFocusable:
    """Tests for focusability rules."""

    @pytest.mark.unit
    def test_controls_focusable_by_default(self):
        """Buttons and Fields are focusable unless opted out."""
        assert is_focusable(ButtonNode(id="b", text="Go"))
        assert is_focusable(FieldNode(id="f", label="Name"))
        assert not is_focusable(ButtonNode(id="b", text="Go", focusable=False))
        assert not is_focusable(FieldNode(id="f", label="Name", focusable=False))

    @pytest.mark.unit
    def test_other_nodes_opt_in(self):
        """Other nodes need focusable=True."""
        assert not is_focusable(TextNode(id="t", text="x"))
        assert is_focusable(TextNode(id="t", text="x", focusable=True))

    @pytest.mark.unit
    def test_hidden_never_focusable(self):
        """Hidden nodes cannot take focus."""
        assert not is_focusable(ButtonNode(id="b", text="Go", visible=False))


class TestBuildTabSequence:
    """Tests for tab ordering."""

    @pytest.mark.unit
    def test_positive_first_then_document_order(self):
        """tabIndex [0, 1, 2] orders as idx1, idx2, idx0."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="idx0", text="a", tab_index=0),
                ButtonNode(id="idx1", text="b", tab_index=1),
                ButtonNode(id="idx2", text="c", tab_index=2),
            ],
        )
        assert build_tab_sequence(root) == ["idx1", "idx2", "idx0"]

    @pytest.mark.unit
    def test_equal_positive_indexes_keep_document_order(self):
        """Ties keep document order."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="a", text="a", tab_index=3),
                ButtonNode(id="b", text="b", tab_index=1),
                ButtonNode(id="c", text="c", tab_index=3),
            ],
        )
        assert build_tab_sequence(root) == ["b", "a", "c"]

    @pytest.mark.unit
    def test_negative_excluded(self):
        """Negative tabIndex leaves the sequence but stays focusable."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="skip", text="a", tab_index=-1),
                ButtonNode(id="ok", text="b"),
            ],
        )
        assert build_tab_sequence(root) == ["ok"]
        assert get_all_focusable_ids(root) == ["skip", "ok"]

    @pytest.mark.unit
    def test_hidden_subtree_skipped(self):
        """Nodes under a hidden container are not visited."""
        root = StackNode(
            id="root",
            children=[
                StackNode(id="hidden", visible=False, children=[ButtonNode(id="x", text="x")]),
                FieldNode(id="f", label="Name"),
            ],
        )
        assert build_tab_sequence(root) == ["f"]


class TestAnalyzeKeyboardFlow:
    """Tests for the keyboard analysis entry point."""

    @pytest.mark.unit
    def test_clean_form(self, login_scaffold):
        """A well-ordered form has no issues."""
        output = analyze_keyboard_flow(login_scaffold)
        assert output.sequence == ["email", "password", "submit", "cancel"]
        assert output.unreachable == []
        assert output.issues == []

    @pytest.mark.unit
    def test_unreachable_is_critical(self, make_scaffold):
        """Each negative tabIndex node yields one critical issue."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Button", "id": "a", "text": "A", "tabIndex": -1},
                    {"type": "Field", "id": "b", "label": "B", "tabIndex": -1},
                    {"type": "Button", "id": "c", "text": "C"},
                ],
            }
        )
        output = analyze_keyboard_flow(scaffold)
        assert output.sequence == ["c"]
        assert output.unreachable == ["a", "b"]
        assert [(i.id, i.severity, i.node_id) for i in output.issues] == [
            ("unreachable", "critical", "a"),
            ("unreachable", "critical", "b"),
        ]
        assert output.issues[0].json_pointer == "/screen/root/children/0"
        assert output.issues[0].viewport is None

    @pytest.mark.unit
    def test_viewport_width_resolves_overrides(self, make_scaffold):
        """Overrides can hide controls at a width."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Button", "id": "desktop", "text": "A", "at": {"<=480": {"visible": False}}},
                    {"type": "Button", "id": "always", "text": "B"},
                ],
            }
        )
        assert analyze_keyboard_flow(scaffold).sequence == ["desktop", "always"]
        assert analyze_keyboard_flow(scaffold, viewport_width=320).sequence == ["always"]

    @pytest.mark.unit
    def test_flow_rule_issues_included(self, make_scaffold):
        """Form flow rule issues are appended after reachability issues."""
        scaffold = make_scaffold(
            {
                "type": "Form",
                "id": "form",
                "fields": [{"type": "Field", "id": "name", "label": "Name"}],
                "actions": [
                    {"type": "Button", "id": "cancel", "text": "Cancel"},
                    {"type": "Button", "id": "save", "text": "Save", "roleHint": "primary"},
                ],
            }
        )
        output = analyze_keyboard_flow(scaffold)
        assert [i.id for i in output.issues] == ["cancel-before-primary"]

    @pytest.mark.unit
    def test_wire_shape(self, make_scaffold):
        """to_dict emits plain lists and issue dicts."""
        scaffold = make_scaffold({"type": "Button", "id": "b", "text": "B", "tabIndex": -1})
        wire = analyze_keyboard_flow(scaffold).to_dict()
        assert wire["sequence"] == []
        assert wire["unreachable"] == ["b"]
        assert wire["issues"][0]["id"] == "unreachable"
        assert "viewport" not in wire["issues"][0]


class TestKeyboardLogging:
    """Tests for analyzer debug logging."""

    @pytest.mark.unit
    def test_summary_logged(self, login_scaffold, caplog):
        with caplog.at_level(logging.DEBUG, logger="scaffold-audit.keyboard"):
            analyze_keyboard_flow(login_scaffold)
        messages = [r.getMessage() for r in caplog.records if not r.args]
        assert "Keyboard flow: 4 in sequence, 0 unreachable, 0 issues" in messages
