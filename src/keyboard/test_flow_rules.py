"""Unit tests for Form keyboard flow rules."""

import pytest

from src.schema import ButtonNode, FieldNode, FormNode, StackNode

from .flow_rules import (
    check_cancel_before_primary,
    check_field_after_actions,
    is_cancel_button,
    validate_flow_rules,
)


def _form(fields, actions, form_id="form"):
    return FormNode(id=form_id, fields=fields, actions=actions)


class TestCancelBeforePrimary:
    """Tests for the cancel-before-primary rule."""

    @pytest.mark.unit
    def test_cancel_first_warns(self):
        """[cancel, primary] yields one warning."""
        form = _form(
            [],
            [
                ButtonNode(id="cancel", text="Cancel"),
                ButtonNode(id="save", text="Save", role_hint="primary"),
            ],
        )
        issue = check_cancel_before_primary(form)
        assert issue.id == "cancel-before-primary"
        assert issue.severity == "warn"
        assert issue.node_id == "form"
        assert issue.details == {"cancelId": "cancel", "primaryId": "save"}

    @pytest.mark.unit
    def test_primary_first_passes(self):
        """[primary, cancel] passes."""
        form = _form(
            [],
            [
                ButtonNode(id="save", text="Save", role_hint="primary"),
                ButtonNode(id="cancel", text="Cancel"),
            ],
        )
        assert check_cancel_before_primary(form) is None

    @pytest.mark.unit
    def test_back_label_counts(self):
        """Back buttons count as cancel."""
        form = _form(
            [],
            [
                ButtonNode(id="back", text="Go back"),
                ButtonNode(id="next", text="Next", role_hint="primary"),
            ],
        )
        assert check_cancel_before_primary(form) is not None

    @pytest.mark.unit
    def test_no_primary_passes(self):
        """Without a primary button there is nothing to compare."""
        form = _form([], [ButtonNode(id="cancel", text="Cancel")])
        assert check_cancel_before_primary(form) is None

    @pytest.mark.unit
    def test_label_matching(self):
        """Only whole words match."""
        assert is_cancel_button(ButtonNode(id="a", text="CANCEL order"))
        assert not is_cancel_button(ButtonNode(id="b", text="Send feedback"))


class TestFieldAfterActions:
    """Tests for the field-after-actions rule."""

    @pytest.mark.unit
    def test_field_inside_actions_reported(self):
        """A Field reached after the first action is an error."""
        form = _form(
            [FieldNode(id="name", label="Name")],
            [
                ButtonNode(id="save", text="Save"),
                StackNode(id="extra", children=[FieldNode(id="late", label="Late")]),
            ],
        )
        issue = check_field_after_actions(form, "/screen/root")
        assert issue.id == "field-after-actions"
        assert issue.severity == "error"
        assert issue.node_id == "late"
        assert issue.json_pointer == "/screen/root/actions/1/children/0"

    @pytest.mark.unit
    def test_reports_last_offender_once(self):
        """Several offending fields produce one issue naming the last."""
        form = _form(
            [],
            [
                ButtonNode(id="save", text="Save"),
                FieldNode(id="a", label="A"),
                FieldNode(id="b", label="B"),
            ],
        )
        issues = [i for i in validate_flow_rules(form) if i.id == "field-after-actions"]
        assert len(issues) == 1
        assert issues[0].node_id == "b"

    @pytest.mark.unit
    def test_well_ordered_form_passes(self):
        """Fields before actions pass."""
        form = _form([FieldNode(id="a", label="A")], [ButtonNode(id="save", text="Save")])
        assert check_field_after_actions(form) is None


class TestValidateFlowRules:
    """Tests for rule aggregation over a tree."""

    @pytest.mark.unit
    def test_every_form_checked(self):
        """Rules run once per visible Form."""
        bad_actions = [
            ButtonNode(id="c", text="Cancel"),
            ButtonNode(id="p", text="Save", role_hint="primary"),
        ]
        root = StackNode(
            id="root",
            children=[
                _form([], bad_actions, form_id="one"),
                FormNode(id="hidden", visible=False, actions=bad_actions),
            ],
        )
        issues = validate_flow_rules(root)
        assert [(i.id, i.node_id) for i in issues] == [("cancel-before-primary", "one")]
