"""Unit tests for the issue vocabulary."""

import pytest

from src.issues import Issue, IssueSource, Severity, count_issues, max_severity


class TestIssueSerialization:
    """Tests for field-presence preserving serialization."""

    @pytest.mark.unit
    def test_only_set_fields_emitted(self):
        """Unset optional fields are omitted."""
        issue = Issue(id="unreachable", severity=Severity.CRITICAL, message="m", node_id="n")
        assert issue.to_dict() == {
            "id": "unreachable",
            "severity": "critical",
            "message": "m",
            "nodeId": "n",
        }

    @pytest.mark.unit
    def test_explicit_null_found_kept(self):
        """found=None survives when explicitly set."""
        issue = Issue(id="x", severity="warn", message="m", found=None)
        assert "found" in issue.to_dict()
        assert issue.to_dict()["found"] is None

    @pytest.mark.unit
    def test_source_nested(self):
        """Pattern provenance serializes as a nested object."""
        issue = Issue(
            id="actions-exist",
            severity="error",
            message="m",
            source=IssueSource(pattern="Form.Basic", name="GOV.UK Design System"),
        )
        assert issue.to_dict()["source"] == {
            "pattern": "Form.Basic",
            "name": "GOV.UK Design System",
        }

    @pytest.mark.unit
    def test_camel_case_input(self):
        """Issues accept their wire shape."""
        issue = Issue.model_validate(
            {"id": "x", "severity": "info", "message": "m", "jsonPointer": "/screen/root"}
        )
        assert issue.json_pointer == "/screen/root"


class TestIssueHelpers:
    """Tests for counting helpers."""

    @pytest.mark.unit
    def test_count_by_id_and_severity(self):
        """Filters combine."""
        issues = [
            Issue(id="a", severity="warn", message=""),
            Issue(id="a", severity="error", message=""),
            Issue(id="b", severity="warn", message=""),
        ]
        assert count_issues(issues, issue_id="a") == 2
        assert count_issues(issues, severity=Severity.WARN) == 2
        assert count_issues(issues, issue_id="a", severity="warn") == 1

    @pytest.mark.unit
    def test_max_severity(self):
        """Highest severity wins."""
        issues = [
            Issue(id="a", severity="warn", message=""),
            Issue(id="b", severity="critical", message=""),
        ]
        assert max_severity(issues) == "critical"
        assert max_severity([]) is None
