"""Unit tests for Guided.Flow scope resolution and rules."""

import pytest

from src.layout import Frame
from src.schema import BoxNode, ButtonNode, FieldNode, FormNode, StackNode, TextNode

from .guided_flow import (
    GUIDED_FLOW,
    build_guided_flow,
    classify_button,
    detect_actions,
    resolve_guided_flow_scopes,
)
from .lib import validate_pattern


def _button(button_id, text, primary=False):
    button = {"type": "Button", "id": button_id, "text": text}
    if primary:
        button["roleHint"] = "primary"
    return button


def _step(index, buttons, title=True, after_actions=None, visible=True, step_id=None):
    step_id = step_id or f"s{index}"
    flow = {"role": "step"}
    if index is not None:
        flow["stepIndex"] = index
    children = []
    if title:
        children.append({"type": "Text", "id": f"{step_id}-title", "text": f"Details {index}"})
    children.append(
        {
            "type": "Stack",
            "id": f"{step_id}-actions",
            "direction": "horizontal",
            "children": buttons,
        }
    )
    children.extend(after_actions or [])
    return {
        "type": "Stack",
        "id": step_id,
        "visible": visible,
        "behaviors": {"guidedFlow": flow},
        "children": children,
    }


def _wizard(steps, wizard_id="wiz", **flow):
    return {
        "type": "Stack",
        "id": wizard_id,
        "behaviors": {"guidedFlow": {"role": "wizard", **flow}},
        "children": steps,
    }


def _three_steps():
    return [
        _step(1, [_button("n1", "Next", primary=True)]),
        _step(2, [_button("b2", "Back"), _button("n2", "Next", primary=True)]),
        _step(3, [_button("b3", "Back"), _button("f3", "Finish", primary=True)]),
    ]


def _issues(scaffold, rule_id, pattern=GUIDED_FLOW):
    result = validate_pattern(pattern, scaffold.screen.root)
    return [issue for issue in result.issues if issue.id == rule_id]


# =============================================================================
# Scope Resolution
# =============================================================================


class TestResolveScopes:
    """Tests for grouping steps into wizard scopes."""

    @pytest.mark.unit
    def test_wizard_scope(self, wizard_scaffold):
        """Steps under a wizard share its scope and total."""
        scopes = resolve_guided_flow_scopes(wizard_scaffold.screen.root)
        assert len(scopes) == 1
        scope = scopes[0]
        assert scope.scope_node.id == "signup-wizard"
        assert scope.indices == [1, 2, 3]
        assert scope.total_steps == 3
        assert scope.steps[0].actions_row.id == "step-1-actions"
        assert [b.id for b in scope.steps[2].buttons] == ["back-3", "finish-3"]

    @pytest.mark.unit
    def test_global_scope_without_wizard(self, make_scaffold):
        """Steps with no wizard form one global scope sorted by index."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    _step(2, [_button("f2", "Finish")]),
                    _step(1, [_button("n1", "Next")]),
                ],
            }
        )
        (scope,) = resolve_guided_flow_scopes(scaffold.screen.root)
        assert scope.scope_node is None
        assert scope.indices == [1, 2]
        assert scope.total_steps == 2

    @pytest.mark.unit
    def test_wizard_plus_orphans(self, make_scaffold):
        """Orphan steps next to a wizard get their own global scope."""
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    _wizard([_step(1, [_button("n1", "Next")])], total_steps=1),
                    _step(5, [_button("x", "Done")]),
                ],
            }
        )
        scopes = resolve_guided_flow_scopes(scaffold.screen.root)
        assert [s.scope_node.id if s.scope_node else None for s in scopes] == ["wiz", None]
        assert scopes[1].indices == [5]

    @pytest.mark.unit
    def test_hidden_and_explicit_invalid_steps_excluded(self, make_scaffold):
        """Hidden steps and explicit indices below 1 are skipped."""
        invalid = _step(0, [_button("z", "Next")])
        scaffold = make_scaffold(
            _wizard(
                [
                    _step(1, [_button("n1", "Next")]),
                    _step(2, [_button("f2", "Finish")], visible=False),
                    invalid,
                ]
            )
        )
        (scope,) = resolve_guided_flow_scopes(scaffold.screen.root)
        assert scope.indices == [1]
        assert scope.total_steps == 1

    @pytest.mark.unit
    def test_unindexed_steps_use_document_position(self, make_scaffold):
        """Steps without stepIndex are numbered by position in their scope."""
        scaffold = make_scaffold(
            _wizard(
                [
                    _step(None, [_button("n1", "Next")], step_id="first"),
                    _step(None, [_button("b2", "Back"), _button("f2", "Finish")], step_id="last"),
                ]
            )
        )
        (scope,) = resolve_guided_flow_scopes(scaffold.screen.root)
        assert scope.indices == [1, 2]
        assert [step.node.id for step in scope.steps] == ["first", "last"]
        assert scope.total_steps == 2

    @pytest.mark.unit
    def test_unindexed_steps_are_checked(self, make_scaffold):
        """Rules run on unindexed steps."""
        scaffold = make_scaffold(
            _wizard(
                [
                    _step(None, [_button("c1", "Cancel")], step_id="first"),
                    _step(None, [_button("b2", "Back"), _button("f2", "Finish")], step_id="last"),
                ]
            )
        )
        (issue,) = _issues(scaffold, "wizard-next-missing")
        assert issue.node_id == "first"
        assert _issues(scaffold, "wizard-steps-missing") == []


class TestDetectActions:
    """Tests for actions-row detection and button classification."""

    @pytest.mark.unit
    def test_form_step_uses_actions(self):
        """A Form step's actions are its actions row."""
        form = FormNode(
            id="step",
            fields=[FieldNode(id="f", label="Name")],
            actions=[ButtonNode(id="next", text="Next")],
        )
        row, buttons = detect_actions(form)
        assert row is form
        assert [b.id for b in buttons] == ["next"]

    @pytest.mark.unit
    def test_mixed_horizontal_row(self):
        """A horizontal row with a spacer container still counts."""
        step = StackNode(
            id="step",
            children=[
                TextNode(id="title", text="Details"),
                StackNode(
                    id="row",
                    direction="horizontal",
                    children=[
                        BoxNode(id="spacer"),
                        ButtonNode(id="next", text="Next", role_hint="primary"),
                    ],
                ),
            ],
        )
        row, buttons = detect_actions(step)
        assert row.id == "row"
        assert [b.id for b in buttons] == ["next"]

    @pytest.mark.unit
    def test_button_only_row_preferred(self):
        """An all-Button row wins over a later mixed row."""
        step = StackNode(
            id="step",
            children=[
                StackNode(
                    id="buttons",
                    direction="horizontal",
                    children=[ButtonNode(id="next", text="Next")],
                ),
                StackNode(
                    id="mixed",
                    direction="horizontal",
                    children=[BoxNode(id="spacer"), ButtonNode(id="help", text="Help")],
                ),
            ],
        )
        row, _ = detect_actions(step)
        assert row.id == "buttons"

    @pytest.mark.unit
    def test_mixed_row_satisfies_next(self, make_scaffold):
        """A primary Next in a mixed row is found by the rules."""
        mixed = _step(1, [{"type": "Box", "id": "spacer"}, _button("n1", "Next", primary=True)])
        last = _step(2, [_button("b2", "Back"), _button("f2", "Finish", primary=True)])
        scaffold = make_scaffold(_wizard([mixed, last]))
        assert _issues(scaffold, "wizard-next-missing") == []

    @pytest.mark.unit
    def test_classify_button(self):
        """Labels map onto back, next, finish or other."""
        assert classify_button(ButtonNode(id="a", text="Previous")) == "back"
        assert classify_button(ButtonNode(id="b", text=" Continue ")) == "next"
        assert classify_button(ButtonNode(id="c", text="Done")) == "finish"
        assert classify_button(ButtonNode(id="d", text="Next step")) == "other"


# =============================================================================
# Rules
# =============================================================================


class TestGuidedFlowRules:
    """Tests for the Guided.Flow rule set."""

    @pytest.mark.unit
    def test_clean_wizard_passes(self, wizard_scaffold):
        """A well-formed wizard passes every rule."""
        result = validate_pattern(GUIDED_FLOW, wizard_scaffold.screen.root)
        assert result.issues == []
        assert (result.must_passed, result.should_passed) == (7, 4)

    @pytest.mark.unit
    def test_steps_missing(self, make_scaffold):
        """Indices [1, 3] of a three-step wizard are not contiguous."""
        steps = _three_steps()
        scaffold = make_scaffold(_wizard([steps[0], steps[2]], total_steps=3))
        (issue,) = _issues(scaffold, "wizard-steps-missing")
        assert issue.details["foundIndices"] == [1, 3]
        assert issue.details["expectedRange"] == [1, 2, 3]
        assert issue.details["scopeNodeId"] == "wiz"
        assert issue.node_id == "wiz"

    @pytest.mark.unit
    def test_duplicate_indices(self, make_scaffold):
        """Duplicate indices break the sequence."""
        steps = _three_steps()
        duplicate = _step(2, [_button("b", "Back"), _button("n", "Next")])
        duplicate["id"] = "s2-copy"
        scaffold = make_scaffold(_wizard(steps + [duplicate]))
        assert len(_issues(scaffold, "wizard-steps-missing")) == 1

    @pytest.mark.unit
    def test_next_missing(self, make_scaffold):
        """A non-final step with only Cancel lacks a forward action."""
        steps = _three_steps()
        steps[0] = _step(1, [_button("c1", "Cancel")])
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-next-missing")
        assert issue.node_id == "s1"
        assert issue.details["actionsRowNodeId"] == "s1-actions"

    @pytest.mark.unit
    def test_primary_counts_as_next(self, make_scaffold):
        """A primary button other than Back moves the flow forward."""
        steps = _three_steps()
        steps[0] = _step(1, [_button("save", "Save and continue", primary=True)])
        scaffold = make_scaffold(_wizard(steps))
        assert _issues(scaffold, "wizard-next-missing") == []

    @pytest.mark.unit
    def test_back_illegal_on_first_step(self, make_scaffold):
        """The first step cannot go back."""
        steps = _three_steps()
        steps[0] = _step(1, [_button("b1", "Back"), _button("n1", "Next", primary=True)])
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-back-illegal")
        assert issue.details["stepIndex"] == 1

    @pytest.mark.unit
    def test_back_missing_on_intermediate_step(self, make_scaffold):
        """Intermediate steps need Back."""
        steps = _three_steps()
        steps[1] = _step(2, [_button("n2", "Next", primary=True)])
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-back-missing")
        assert issue.node_id == "s2"

    @pytest.mark.unit
    def test_finish_missing_on_last_step(self, make_scaffold):
        """The last step needs Finish, Submit or Done."""
        steps = _three_steps()
        steps[2] = _step(3, [_button("b3", "Back"), _button("n3", "Next", primary=True)])
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-finish-missing")
        assert issue.details == {"stepIndex": 3, "totalSteps": 3, "actionsRowNodeId": "s3-actions"}

    @pytest.mark.unit
    def test_field_after_actions(self, make_scaffold):
        """A Field after the actions row is misplaced."""
        steps = _three_steps()
        steps[0] = _step(
            1,
            [_button("n1", "Next", primary=True)],
            after_actions=[{"type": "Field", "id": "late", "label": "Late field"}],
        )
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-field-after-actions")
        assert issue.details["misplacedFieldIds"] == ["late"]
        assert issue.details["actionsRowId"] == "s1-actions"

    @pytest.mark.unit
    def test_multiple_primary(self, make_scaffold):
        """Only one primary button per step."""
        steps = _three_steps()
        steps[1] = _step(
            2,
            [
                _button("b2", "Back"),
                _button("skip", "Skip", primary=True),
                _button("n2", "Next", primary=True),
            ],
        )
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-multiple-primary")
        assert issue.details["primaryButtonIds"] == ["skip", "n2"]

    @pytest.mark.unit
    def test_progress_missing(self, make_scaffold):
        """hasProgress without an indicator is a warning."""
        scaffold = make_scaffold(_wizard(_three_steps(), has_progress=True))
        (issue,) = _issues(scaffold, "wizard-progress-missing")
        assert issue.severity == "warn"
        assert issue.node_id == "wiz"

    @pytest.mark.unit
    def test_progress_node_reference(self, make_scaffold):
        """An explicit progressNodeId satisfies the rule when visible."""
        wizard = _wizard(_three_steps(), has_progress=True, progress_node_id="bar")
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Text", "id": "bar", "text": "1/3", "affordances": ["progress"]},
                    wizard,
                ],
            }
        )
        assert _issues(scaffold, "wizard-progress-missing") == []

    @pytest.mark.unit
    def test_actions_order(self, make_scaffold):
        """Back should come before Next."""
        steps = _three_steps()
        steps[1] = _step(2, [_button("n2", "Next", primary=True), _button("b2", "Back")])
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-actions-order")
        assert issue.details["order"] == ["next", "back"]

    @pytest.mark.unit
    def test_step_title_missing(self, make_scaffold):
        """A step without any Text before its actions gets a warning."""
        steps = _three_steps()
        steps[0] = _step(1, [_button("n1", "Next", primary=True)], title=False)
        scaffold = make_scaffold(_wizard(steps))
        (issue,) = _issues(scaffold, "wizard-step-title-missing")
        assert issue.node_id == "s1"


class TestPrimaryBelowFold:
    """Tests for the layout-aware below-fold rule."""

    @pytest.mark.unit
    def test_vacuous_without_frames(self, wizard_scaffold):
        """The registered pattern has no frames and never reports."""
        assert _issues(wizard_scaffold, "wizard-primary-below-fold") == []

    @pytest.mark.unit
    def test_reports_with_frames(self, wizard_scaffold):
        """A primary button ending below the viewport height is flagged."""
        pattern = build_guided_flow(
            frames=[
                Frame(id="next-1", x=0, y=600, w=100, h=44),
                Frame(id="next-2", x=0, y=100, w=100, h=44),
            ],
            viewport_height=640,
        )
        issues = _issues(wizard_scaffold, "wizard-primary-below-fold", pattern)
        assert [issue.details["primaryId"] for issue in issues] == ["next-1"]
        assert issues[0].severity == "warn"
