"""Unit tests for pattern suggestions, auto-selection and coverage."""

import pytest

from src.schema import ButtonNode, StackNode

from .suggestions import (
    compute_coverage,
    has_disclosure_hints,
    has_guided_flow_hints,
    select_patterns,
    suggest_patterns,
)


class TestSuggestPatterns:
    """Tests for structural suggestions."""

    @pytest.mark.unit
    def test_form(self, login_scaffold):
        """A Form suggests Form.Basic with high confidence."""
        (suggestion,) = suggest_patterns(login_scaffold.screen.root)
        assert suggestion.pattern == "Form.Basic"
        assert suggestion.confidence == "high"
        assert suggestion.confidence_score == 95
        assert "2 field(s) and 2 action(s)" in suggestion.reason

    @pytest.mark.unit
    def test_table(self, table_scaffold):
        """A Table with columns suggests Table.Simple."""
        (suggestion,) = suggest_patterns(table_scaffold.screen.root)
        assert suggestion.pattern == "Table.Simple"
        assert suggestion.confidence_score == 90
        assert "responsive.strategy=scroll" in suggestion.reason

    @pytest.mark.unit
    def test_wizard(self, wizard_scaffold):
        """Many step indicators give a high-confidence Guided.Flow."""
        (suggestion,) = suggest_patterns(wizard_scaffold.screen.root)
        assert suggestion.pattern == "Guided.Flow"
        assert suggestion.confidence == "high"
        assert suggestion.confidence_score == 88

    @pytest.mark.unit
    def test_flow_hint_levels(self):
        """One hint is low confidence, two or three are medium."""
        single = StackNode(id="root", children=[ButtonNode(id="n", text="Next")])
        double = StackNode(
            id="root",
            children=[ButtonNode(id="b", text="Back"), ButtonNode(id="n", text="Next")],
        )
        assert suggest_patterns(single)[0].confidence_score == 40
        assert suggest_patterns(double)[0].confidence == "medium"

    @pytest.mark.unit
    def test_wire_shape(self, login_scaffold):
        """Suggestions serialize with camelCase keys."""
        data = suggest_patterns(login_scaffold.screen.root)[0].to_dict()
        assert data["confidenceScore"] == 95


class TestHints:
    """Tests for behavior hint detection."""

    @pytest.mark.unit
    def test_hidden_nodes_count(self):
        """Hints are found even on hidden nodes."""
        root = StackNode(
            id="root",
            children=[
                StackNode(
                    id="adv",
                    visible=False,
                    behaviors={"disclosure": {"collapsible": True}},
                )
            ],
        )
        assert has_disclosure_hints(root)
        assert not has_guided_flow_hints(root)

    @pytest.mark.unit
    def test_guided_flow_hints(self, wizard_scaffold):
        assert has_guided_flow_hints(wizard_scaffold.screen.root)


class TestSelectPatterns:
    """Tests for choosing patterns to validate."""

    @pytest.mark.unit
    def test_auto_selects_high_confidence(self, login_scaffold):
        """Without explicit names, high-confidence suggestions are used."""
        names = [p.name for p in select_patterns(login_scaffold.screen.root)]
        assert names == ["Form.Basic"]

    @pytest.mark.unit
    def test_explicit_plus_hints(self, wizard_scaffold):
        """Explicit names pull in hinted behavior patterns."""
        names = [p.name for p in select_patterns(wizard_scaffold.screen.root, ["table"])]
        assert names == ["Table.Simple", "Guided.Flow"]

    @pytest.mark.unit
    def test_explicit_without_auto(self, wizard_scaffold):
        """auto=False keeps only the requested patterns, deduplicated."""
        patterns = select_patterns(wizard_scaffold.screen.root, ["form", "Form.Basic"], auto=False)
        assert [p.name for p in patterns] == ["Form.Basic"]

    @pytest.mark.unit
    def test_unknown_name(self, login_scaffold):
        with pytest.raises(KeyError):
            select_patterns(login_scaffold.screen.root, ["carousel"])


class TestCoverage:
    """Tests for coverage reporting."""

    @pytest.mark.unit
    def test_gaps_and_percent(self, wizard_scaffold):
        """Unactivated medium/high suggestions are gaps."""
        suggestions = suggest_patterns(wizard_scaffold.screen.root)
        coverage = compute_coverage(suggestions, ["Form.Basic"])
        assert coverage.activated == 1
        assert coverage.n_total == 4
        assert coverage.percent == 25.0
        assert [gap.pattern for gap in coverage.gaps] == ["Guided.Flow"]
        assert coverage.to_dict()["nTotal"] == 4
