"""Unit tests for Progressive.Disclosure and its control inference."""

import pytest

from src.schema import ButtonNode, FieldNode, StackNode, TextNode

from .disclosure import build_sibling_map, find_control, infer_control
from .lib import validate_pattern
from .progressive_disclosure import PROGRESSIVE_DISCLOSURE


def _section(section_id="adv", children=None, affordances=None, **disclosure):
    return StackNode(
        id=section_id,
        behaviors={"disclosure": {"collapsible": True, **disclosure}},
        affordances=affordances,
        children=children if children is not None else [TextNode(id=f"{section_id}-summary", text="Advanced options")],
    )


def _issues(root, rule_id):
    result = validate_pattern(PROGRESSIVE_DISCLOSURE, root)
    return [issue for issue in result.issues if issue.id == rule_id]


class TestControlInference:
    """Tests for locating a section's toggle."""

    @pytest.mark.unit
    def test_preceding_sibling_closest_first(self):
        """The closest preceding keyword button wins."""
        section = _section()
        siblings = [
            ButtonNode(id="far", text="Show more"),
            ButtonNode(id="near", text="Hide details"),
            section,
        ]
        assert infer_control(section, siblings).id == "near"

    @pytest.mark.unit
    def test_following_sibling_and_affordance(self):
        """Following siblings match by keyword or chevron affordance."""
        section = _section()
        siblings = [section, ButtonNode(id="toggle", text="", affordances=["chevron"])]
        assert infer_control(section, siblings).id == "toggle"

    @pytest.mark.unit
    def test_header_row_child(self):
        """The section's own first child may be the toggle."""
        section = _section(children=[ButtonNode(id="head", text="Expand")])
        assert infer_control(section, [section]).id == "head"

    @pytest.mark.unit
    def test_explicit_controls_id(self):
        """controlsId must resolve to a visible Button."""
        section = _section(controls_id="toggle")
        visible = ButtonNode(id="toggle", text="Options")
        hidden = ButtonNode(id="toggle", text="Options", visible=False)
        assert find_control(section, [visible, section]) is visible
        assert find_control(section, [hidden, section]) is None

    @pytest.mark.unit
    def test_sibling_map(self):
        """Children map to the full child list of their parent."""
        section = _section()
        root = StackNode(id="root", children=[TextNode(id="t", text="x"), section])
        siblings = build_sibling_map(root)
        assert [node.id for node in siblings["adv"]] == ["t", "adv"]
        assert "root" not in siblings


class TestDisclosureRules:
    """Tests for the Progressive.Disclosure rule set."""

    @pytest.mark.unit
    def test_clean_section_passes(self):
        """A toggled, labelled section with no primary action passes."""
        root = StackNode(
            id="root",
            children=[ButtonNode(id="toggle", text="Show advanced"), _section()],
        )
        result = validate_pattern(PROGRESSIVE_DISCLOSURE, root)
        assert result.issues == []
        assert (result.must_passed, result.should_passed) == (3, 3)

    @pytest.mark.unit
    def test_no_control(self):
        """A section with no toggle anywhere fails."""
        root = StackNode(id="root", children=[_section()])
        (issue,) = _issues(root, "disclosure-no-control")
        assert issue.node_id == "adv"
        assert issue.json_pointer == "/screen/root/children/0"
        assert "toggle-adv" in issue.suggestion
        assert issue.source.name == "Nielsen Norman Group: Progressive Disclosure"

    @pytest.mark.unit
    def test_hides_primary(self):
        """A collapsed-by-default section must not contain the primary action."""
        children = [
            TextNode(id="summary", text="More"),
            ButtonNode(id="save", text="Save", role_hint="primary"),
        ]
        collapsed = StackNode(
            id="root",
            children=[ButtonNode(id="toggle", text="Show"), _section(children=children)],
        )
        expanded = StackNode(
            id="root",
            children=[
                ButtonNode(id="toggle", text="Show"),
                _section(children=children, default_state="expanded"),
            ],
        )
        (issue,) = _issues(collapsed, "disclosure-hides-primary")
        assert issue.found == "defaultState: collapsed, primary inside section"
        assert _issues(expanded, "disclosure-hides-primary") == []

    @pytest.mark.unit
    def test_missing_label(self):
        """A section whose control has no text and no Text label fails."""
        root = StackNode(
            id="root",
            children=[
                _section(controls_id="t", children=[FieldNode(id="f", label="Notes")]),
                ButtonNode(id="t", text="", affordances=["chevron"]),
            ],
        )
        (issue,) = _issues(root, "disclosure-missing-label")
        assert '"adv-label"' in issue.suggestion

    @pytest.mark.unit
    def test_control_far(self):
        """A toggle three siblings away is not adjacent."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="toggle", text="Show more"),
                TextNode(id="a", text="One"),
                TextNode(id="b", text="Two"),
                _section(),
            ],
        )
        (issue,) = _issues(root, "disclosure-control-far")
        assert issue.details == {"controlId": "toggle", "distance": 3}
        assert issue.severity == "warn"

    @pytest.mark.unit
    def test_inconsistent_affordance(self):
        """Sibling sections with disjoint affordances are flagged once."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="t1", text="Show shipping"),
                _section("shipping", affordances=["Chevron"]),
                ButtonNode(id="t2", text="Show billing"),
                _section("billing", affordances=["plus"]),
            ],
        )
        (issue,) = _issues(root, "disclosure-inconsistent-affordance")
        assert issue.node_id == "shipping"
        assert issue.details["collapsibleIds"] == ["shipping", "billing"]

        root.children[3].affordances = ["chevron", "plus"]
        assert _issues(root, "disclosure-inconsistent-affordance") == []

    @pytest.mark.unit
    def test_early_section(self):
        """A section before the first required field is flagged."""
        root = StackNode(
            id="root",
            children=[
                ButtonNode(id="toggle", text="Show advanced"),
                _section(),
                FieldNode(id="email", label="Email address", required=True),
            ],
        )
        (issue,) = _issues(root, "disclosure-early-section")
        assert issue.node_id == "adv"
        assert issue.details == {"firstRequiredFieldId": "email"}
