"""Integration tests for the analysis driver."""

import pytest

from src.layout import Viewport
from src.patterns import TABLE_SIMPLE, FORM_BASIC
from src.scoring import PassCriteria

from .lib import analyze_scaffold, contextualize_patterns, resolve_viewports, smallest_viewport


class TestViewports:
    """Tests for viewport resolution."""

    @pytest.mark.unit
    def test_defaults_to_breakpoints(self, make_scaffold):
        scaffold = make_scaffold(
            {"type": "Stack", "id": "root"}, breakpoints=["768x1024", "320x640"]
        )
        assert resolve_viewports(scaffold) == [Viewport(768, 1024), Viewport(320, 640)]

    @pytest.mark.unit
    def test_explicit_viewports(self, login_scaffold):
        assert resolve_viewports(login_scaffold, ["390x844"]) == [Viewport(390, 844)]

    @pytest.mark.unit
    def test_malformed_viewport(self, login_scaffold):
        with pytest.raises(ValueError):
            resolve_viewports(login_scaffold, ["wide"])

    @pytest.mark.unit
    def test_smallest(self):
        viewports = [Viewport(1280, 800), Viewport(320, 640), Viewport(320, 568)]
        assert smallest_viewport(viewports) == Viewport(320, 568)
        assert smallest_viewport([]) is None


class TestContextualizePatterns:
    """Tests for rebuilding layout-aware patterns."""

    @pytest.mark.unit
    def test_without_layout_unchanged(self):
        patterns = [TABLE_SIMPLE, FORM_BASIC]
        assert contextualize_patterns(patterns, None, None) == patterns

    @pytest.mark.unit
    def test_table_rebuilt(self, table_scaffold):
        report = analyze_scaffold(table_scaffold, patterns=["table"], viewports=["320x640"])
        rebuilt = contextualize_patterns(
            [TABLE_SIMPLE, FORM_BASIC], report.layouts[0], Viewport(320, 640)
        )
        assert [pattern.name for pattern in rebuilt] == ["Table.Simple", "Form.Basic"]
        assert rebuilt[0] is not TABLE_SIMPLE
        assert rebuilt[1] is FORM_BASIC


class TestAnalyzeScaffold:
    """End-to-end analysis of sample scaffolds."""

    @pytest.mark.integration
    def test_login(self, login_scaffold):
        """A well-formed form passes with only score gating disabled."""
        report = analyze_scaffold(
            login_scaffold,
            viewports=["390x844"],
            criteria=PassCriteria(min_overall_score=None),
        )
        assert [layout.viewport for layout in report.layouts] == ["390x844"]
        assert report.keyboard.sequence == ["email", "password", "submit", "cancel"]
        assert report.keyboard.unreachable == []
        assert [result.pattern for result in report.flow.patterns] == ["Form.Basic"]
        assert not report.flow.has_must_failures
        assert report.score.categories.pattern_fidelity == 100
        assert report.score.passed
        assert report.coverage.activated == 1

    @pytest.mark.integration
    def test_raw_mapping(self, login_scaffold):
        """Raw mappings are parsed before analysis."""
        raw = login_scaffold.to_dict()
        report = analyze_scaffold(raw, patterns=["form"], viewports=["390x844"])
        assert report.keyboard.sequence == ["email", "password", "submit", "cancel"]

    @pytest.mark.integration
    def test_wizard_selects_guided_flow(self, wizard_scaffold):
        report = analyze_scaffold(wizard_scaffold, viewports=["1280x2000"])
        assert [result.pattern for result in report.flow.patterns] == ["Guided.Flow"]
        assert report.flow.patterns[0].must_failed == 0

    @pytest.mark.integration
    def test_unreachable_fails(self, make_scaffold):
        scaffold = make_scaffold(
            {
                "type": "Stack",
                "id": "root",
                "children": [
                    {"type": "Button", "id": "go", "text": "Go", "tabIndex": -1},
                ],
            }
        )
        report = analyze_scaffold(
            scaffold, viewports=["1280x800"], criteria=PassCriteria(min_overall_score=None)
        )
        assert report.keyboard.unreachable == ["go"]
        assert not report.score.passed
        assert report.score.fail_reasons == ["1 unreachable node(s)"]

    @pytest.mark.integration
    def test_unknown_pattern(self, login_scaffold):
        with pytest.raises(KeyError):
            analyze_scaffold(login_scaffold, patterns=["carousel"])

    @pytest.mark.integration
    def test_wire_shape(self, table_scaffold):
        data = analyze_scaffold(table_scaffold, viewports=["320x640"]).to_dict()
        assert set(data) == {"layouts", "keyboard", "flow", "score", "suggestions", "coverage"}
        assert data["layouts"][0]["viewport"] == "320x640"
        assert data["flow"]["patterns"][0]["pattern"] == "Table.Simple"
        assert "pass" in data["score"]
