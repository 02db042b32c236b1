"""Unit tests for the pattern validator, registry, Form.Basic and Table.Simple."""

import pytest

from src.issues import IssueSource
from src.schema import ButtonNode, FieldNode, FormNode, StackNode, TableNode, TextNode

from .form_basic import FORM_BASIC, needs_help_text
from .lib import Pattern, Rule, RuleLevel, pattern_issue, validate_pattern, validate_patterns
from .registry import (
    find_pattern,
    get_all_patterns,
    get_pattern,
    has_pattern,
    list_pattern_names,
)
from .table_simple import TABLE_SIMPLE, build_table_simple


def _ids(result, rule_id):
    return [issue for issue in result.issues if issue.id == rule_id]


# =============================================================================
# Validator
# =============================================================================


class TestValidatePattern:
    """Tests for per-rule pass/fail counting."""

    @pytest.mark.unit
    def test_clean_form_passes(self, login_scaffold):
        """A well-formed Form passes every rule."""
        result = validate_pattern(FORM_BASIC, login_scaffold.screen.root)
        assert result.pattern == "Form.Basic"
        assert (result.must_passed, result.must_failed) == (4, 0)
        assert (result.should_passed, result.should_failed) == (1, 0)
        assert result.issues == []

    @pytest.mark.unit
    def test_rule_counts_once(self):
        """A rule with several issues is still one failure."""
        form = FormNode(
            id="f",
            fields=[FieldNode(id="a", label=""), FieldNode(id="b", label=" ")],
            actions=[ButtonNode(id="ok", text="OK")],
        )
        result = validate_pattern(FORM_BASIC, form)
        assert result.must_failed == 1
        assert result.should_failed == 1
        assert len(_ids(result, "field-has-label")) == 2
        assert len(_ids(result, "help-text")) == 2

    @pytest.mark.unit
    def test_issue_carries_source_and_pointer(self):
        """Pattern issues cite their source and locate the node."""
        form = FormNode(id="f", fields=[FieldNode(id="a", label="")])
        issue = _ids(validate_pattern(FORM_BASIC, form), "field-has-label")[0]
        assert issue.node_id == "a"
        assert issue.json_pointer == "/screen/root/fields/0"
        assert issue.source.pattern == "Form.Basic"
        assert issue.source.url.endswith("/components/text-input/")
        assert "viewport" not in issue.to_dict()

    @pytest.mark.unit
    def test_custom_rule(self):
        """Any callable returning issues can back a rule."""
        pattern = Pattern(
            name="Custom",
            source=FORM_BASIC.source,
            must=(Rule("always", RuleLevel.MUST, "never fails", lambda root: []),),
        )
        result = validate_pattern(pattern, TextNode(id="t", text="x"))
        assert result.must_passed == 1
        assert pattern.rules == pattern.must

    @pytest.mark.unit
    def test_validate_patterns_totals(self):
        """FlowOutput aggregates must failures and issue counts."""
        form = FormNode(id="f", fields=[FieldNode(id="email", label="Email address")])
        output = validate_patterns([FORM_BASIC, TABLE_SIMPLE], form)
        assert output.has_must_failures is True
        assert output.total_issues == 1
        assert [result.pattern for result in output.patterns] == ["Form.Basic", "Table.Simple"]

    @pytest.mark.unit
    def test_wire_shape(self, login_scaffold):
        """Serialization uses camelCase keys."""
        data = validate_patterns([FORM_BASIC], login_scaffold.screen.root).to_dict()
        assert data["hasMustFailures"] is False
        assert data["totalIssues"] == 0
        assert data["patterns"][0]["mustPassed"] == 4
        assert data["patterns"][0]["source"]["name"] == "GOV.UK Design System"


# =============================================================================
# Form.Basic
# =============================================================================


class TestFormBasic:
    """Tests for Form.Basic rules."""

    @pytest.mark.unit
    def test_actions_exist(self):
        """A Form without actions fails."""
        form = FormNode(id="f", fields=[FieldNode(id="email", label="Email address")])
        issues = _ids(validate_pattern(FORM_BASIC, form), "actions-exist")
        assert [issue.node_id for issue in issues] == ["f"]

    @pytest.mark.unit
    def test_actions_after_fields(self):
        """A Field nested after the first action fails."""
        form = FormNode(
            id="f",
            fields=[FieldNode(id="email", label="Email address")],
            actions=[
                StackNode(
                    id="row",
                    children=[
                        ButtonNode(id="ok", text="OK"),
                        FieldNode(id="late", label="Late field"),
                    ],
                )
            ],
        )
        issues = _ids(validate_pattern(FORM_BASIC, form), "actions-after-fields")
        assert [issue.node_id for issue in issues] == ["f"]

    @pytest.mark.unit
    def test_error_state_required(self):
        """errorText requires an "error" state on the Form."""
        field = FieldNode(id="email", label="Email address", error_text="Enter an email")
        ok = ButtonNode(id="ok", text="OK")
        missing = FormNode(id="f", fields=[field], actions=[ok], states=["default"])
        declared = FormNode(id="f", fields=[field], actions=[ok], states=["default", "error"])
        issues = _ids(validate_pattern(FORM_BASIC, missing), "has-error-state")
        assert issues[0].details == {"fieldIds": ["email"]}
        assert _ids(validate_pattern(FORM_BASIC, declared), "has-error-state") == []

    @pytest.mark.unit
    def test_help_text_heuristic(self):
        """Short or technical labels need helpText."""
        assert needs_help_text(FieldNode(id="a", label="ID"))
        assert needs_help_text(FieldNode(id="b", label="API key"))
        assert not needs_help_text(FieldNode(id="c", label="Rapid response"))
        assert not needs_help_text(FieldNode(id="d", label="API key", help_text="From settings"))


# =============================================================================
# Table.Simple
# =============================================================================


class TestTableSimple:
    """Tests for Table.Simple rules."""

    @pytest.mark.unit
    def test_clean_table_passes(self, table_scaffold):
        """A titled, scrolling table with adjacent filter passes."""
        result = validate_pattern(TABLE_SIMPLE, table_scaffold.screen.root)
        assert (result.must_failed, result.should_failed) == (0, 0)
        assert (result.must_passed, result.should_passed) == (3, 1)

    @pytest.mark.unit
    def test_missing_title_and_strategy(self):
        """No title and no strategy fail three MUST rules."""
        result = validate_pattern(TABLE_SIMPLE, TableNode(id="t", columns=["A"]))
        assert result.must_failed == 3
        assert {issue.id for issue in result.issues} == {
            "title-exists",
            "responsive-strategy",
            "min-width-fit-or-scroll",
        }

    @pytest.mark.unit
    def test_explicit_null_found_serialized(self):
        """found=None is kept; an omitted found is not."""
        source = IssueSource(pattern="Table.Simple")
        explicit = pattern_issue("r", "error", "m", source, found=None).to_dict()
        omitted = pattern_issue("r", "error", "m", source, suggestion=None).to_dict()
        assert explicit["found"] is None
        assert "found" not in omitted
        assert "suggestion" not in omitted

    @pytest.mark.unit
    def test_missing_strategy_reports_null_found(self):
        """A table without a strategy reports found: null."""
        table = TableNode(id="t", title="Orders")
        (issue,) = _ids(validate_pattern(TABLE_SIMPLE, table), "responsive-strategy")
        assert issue.to_dict()["found"] is None

    @pytest.mark.unit
    def test_invalid_strategy(self):
        """Unknown strategies are rejected by name."""
        table = TableNode(id="t", title="Orders", responsive={"strategy": "stack"})
        issues = _ids(validate_pattern(TABLE_SIMPLE, table), "responsive-strategy")
        assert len(issues) == 1
        assert "invalid" in issues[0].message
        assert issues[0].found == "stack"

    @pytest.mark.unit
    def test_wrap_columns_must_fit(self):
        """Wrapped columns wider than the smallest viewport fail."""
        table = TableNode(
            id="t",
            title="Orders",
            columns=["A", "B", "C", "D"],
            responsive={"strategy": "wrap", "minColumnWidth": 120},
        )
        narrow = _ids(validate_pattern(build_table_simple(320), table), "min-width-fit-or-scroll")
        assert narrow[0].found == 480
        assert narrow[0].expected == 320
        assert _ids(validate_pattern(build_table_simple(768), table), "min-width-fit-or-scroll") == []
        assert _ids(validate_pattern(TABLE_SIMPLE, table), "min-width-fit-or-scroll") == []

    @pytest.mark.unit
    def test_controls_far_from_table(self):
        """A search control separated from the table is flagged."""
        root = StackNode(
            id="root",
            children=[
                FieldNode(id="search", label="Search orders"),
                TextNode(id="a", text="Intro"),
                TextNode(id="b", text="More intro"),
                TableNode(id="orders", title="Orders", responsive={"strategy": "scroll"}),
            ],
        )
        issues = _ids(validate_pattern(TABLE_SIMPLE, root), "controls-adjacent")
        assert len(issues) == 1
        assert issues[0].node_id == "orders"
        assert issues[0].json_pointer == "/screen/root/children/3"
        assert issues[0].details["controlIds"] == ["search"]


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    """Tests for pattern lookup."""

    @pytest.mark.unit
    def test_aliases_case_insensitive(self):
        """Aliases and canonical names resolve regardless of case."""
        assert get_pattern("WIZARD").name == "Guided.Flow"
        assert get_pattern("pd").name == "Progressive.Disclosure"
        assert get_pattern("form.basic").name == "Form.Basic"
        assert has_pattern("table-simple")

    @pytest.mark.unit
    def test_unknown_pattern(self):
        """Unknown names return None or raise with suggestions."""
        assert find_pattern("carousel") is None
        with pytest.raises(KeyError, match="Did you mean"):
            get_pattern("tab")

    @pytest.mark.unit
    def test_listing(self):
        """Every pattern is listed once; names include aliases."""
        assert [p.name for p in get_all_patterns()] == [
            "Form.Basic",
            "Table.Simple",
            "Progressive.Disclosure",
            "Guided.Flow",
        ]
        assert "flow-wizard" in list_pattern_names()
