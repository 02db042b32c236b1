"""Unit tests for category scoring and pass/fail aggregation."""

import pytest
from pydantic import ValidationError

from src.issues import Issue, IssueSource
from src.keyboard import KeyboardOutput
from src.layout import LayoutOutput
from src.patterns import FlowOutput, PatternResult

from .categories import (
    score_flow_reachability,
    score_hierarchy_grouping,
    score_pattern_fidelity,
    score_responsive_behavior,
)
from .lib import calculate_overall_score, evaluate_pass_fail, score_analysis
from .models import CategoryScores, PassCriteria, ScoreWeights


def _result(must_failed=0, should_failed=0) -> PatternResult:
    return PatternResult(
        pattern="Form.Basic",
        source=IssueSource(pattern="Form.Basic"),
        must_failed=must_failed,
        should_failed=should_failed,
    )


def _issue(issue_id: str, severity: str = "error") -> Issue:
    return Issue(id=issue_id, severity=severity, message=issue_id)


def _layout(*issue_ids: str) -> LayoutOutput:
    return LayoutOutput(viewport="390x844", issues=[_issue(i) for i in issue_ids])


def _categories(pattern_fidelity=100.0) -> CategoryScores:
    return CategoryScores(
        pattern_fidelity=pattern_fidelity,
        flow_reachability=100,
        hierarchy_grouping=100,
        responsive_behavior=100,
    )


class TestCategories:
    """Tests for the four category scorers."""

    @pytest.mark.unit
    def test_pattern_fidelity(self):
        """Each MUST failure costs 30, each SHOULD failure 10."""
        assert score_pattern_fidelity([_result(must_failed=2)]) == 40
        assert score_pattern_fidelity([_result(should_failed=1), _result(must_failed=1)]) == 60

    @pytest.mark.unit
    def test_pattern_fidelity_floor(self):
        assert score_pattern_fidelity([_result(must_failed=5)]) == 0

    @pytest.mark.unit
    def test_flow_reachability(self):
        """Unreachable nodes cost 30, keyboard warnings 10."""
        assert score_flow_reachability(KeyboardOutput(unreachable=["a", "b"])) == 40
        warned = KeyboardOutput(issues=[_issue("cancel-before-primary", "warn")])
        assert score_flow_reachability(warned) == 90

    @pytest.mark.unit
    def test_hierarchy_grouping(self):
        """Spacing issues count per cluster of three."""
        keyboard_issues = [_issue("field-after-actions")]
        layout_issues = [_issue("spacing-off-scale", "warn") for _ in range(6)]
        assert score_hierarchy_grouping(keyboard_issues, layout_issues) == 80

    @pytest.mark.unit
    def test_stray_spacing_is_free(self):
        layout_issues = [_issue("spacing-off-scale", "warn") for _ in range(2)]
        assert score_hierarchy_grouping([], layout_issues) == 100

    @pytest.mark.unit
    def test_responsive_without_viewports(self):
        assert score_responsive_behavior([]) == 100

    @pytest.mark.unit
    def test_responsive_averages_viewports(self):
        """The penalty is averaged across all analyzed viewports."""
        layouts = [_layout("overflow-x"), _layout()]
        assert score_responsive_behavior(layouts) == 85

    @pytest.mark.unit
    def test_responsive_below_fold(self):
        assert score_responsive_behavior([_layout("primary-below-fold")]) == 80


class TestWeights:
    """Tests for weight validation."""

    @pytest.mark.unit
    def test_defaults(self):
        weights = ScoreWeights()
        assert weights.pattern_fidelity == 0.45
        assert weights.responsive_behavior == 0.10

    @pytest.mark.unit
    def test_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            ScoreWeights(pattern_fidelity=0.9)

    @pytest.mark.unit
    def test_camel_case_input(self):
        weights = ScoreWeights(
            patternFidelity=0.25,
            flowReachability=0.25,
            hierarchyGrouping=0.25,
            responsiveBehavior=0.25,
        )
        assert weights.hierarchy_grouping == 0.25


class TestOverall:
    """Tests for the weighted overall score."""

    @pytest.mark.unit
    def test_weighted_sum(self):
        assert calculate_overall_score(_categories(40), ScoreWeights()) == 73

    @pytest.mark.unit
    def test_perfect(self):
        assert calculate_overall_score(_categories(), ScoreWeights()) == 100

    @pytest.mark.unit
    def test_rounds_half_up(self):
        """0.5 * 89 + 0.5 * 90 = 89.5 rounds to 90."""
        weights = ScoreWeights(
            pattern_fidelity=0.5,
            flow_reachability=0.5,
            hierarchy_grouping=0,
            responsive_behavior=0,
        )
        categories = CategoryScores(
            pattern_fidelity=89,
            flow_reachability=90,
            hierarchy_grouping=0,
            responsive_behavior=0,
        )
        assert calculate_overall_score(categories, weights) == 90


class TestPassFail:
    """Tests for pass criteria."""

    @pytest.mark.unit
    def test_all_reasons(self):
        criteria = PassCriteria(min_overall_score=85)
        passed, reasons = evaluate_pass_fail(50, [_result(must_failed=2)], 1, criteria)
        assert not passed
        assert reasons == [
            "2 MUST failure(s) in pattern validation",
            "1 unreachable node(s)",
            "Overall score 50 below minimum 85",
        ]

    @pytest.mark.unit
    def test_disabled_gates(self):
        """Disabled criteria never fail."""
        criteria = PassCriteria(
            no_must_failures=False,
            no_critical_flow_errors=False,
            min_overall_score=None,
        )
        passed, reasons = evaluate_pass_fail(0, [_result(must_failed=3)], 4, criteria)
        assert passed
        assert reasons == []

    @pytest.mark.unit
    def test_min_score_from_environment(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLD_MIN_OVERALL_SCORE", "70")
        assert PassCriteria().min_overall_score == 70

    @pytest.mark.unit
    def test_min_score_default(self, monkeypatch):
        monkeypatch.delenv("SCAFFOLD_MIN_OVERALL_SCORE", raising=False)
        assert PassCriteria().min_overall_score == 85


class TestScoreAnalysis:
    """Tests for end-to-end scoring of engine outputs."""

    @pytest.mark.unit
    def test_clean_inputs_pass(self):
        flow = FlowOutput(patterns=[_result()])
        output = score_analysis(flow, KeyboardOutput(), [_layout()])
        assert output.overall == 100
        assert output.passed
        assert output.categories.responsive_behavior == 100

    @pytest.mark.unit
    def test_must_failure_fails(self):
        flow = FlowOutput(patterns=[_result(must_failed=1)], has_must_failures=True)
        output = score_analysis(
            flow, KeyboardOutput(), [], criteria=PassCriteria(min_overall_score=None)
        )
        assert output.overall == 87
        assert not output.passed
        assert output.fail_reasons == ["1 MUST failure(s) in pattern validation"]

    @pytest.mark.unit
    def test_wire_shape(self):
        output = score_analysis(FlowOutput(), KeyboardOutput(), [])
        data = output.to_dict()
        assert data["pass"] is True
        assert data["failReasons"] == []
        assert data["categories"]["patternFidelity"] == 100
        assert data["weights"]["flowReachability"] == 0.25
