"""Issue vocabulary shared by every analysis engine.

Engines never raise for a structurally valid tree. Every defect they find
is reported as an `Issue` value and flows through to scoring.
"""

from enum import Enum
from typing import Any

from pydantic import Field

from src.schema import CamelModel


class Severity(str, Enum):
    """Issue severity, lowest to highest."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    CRITICAL = "critical"


SEVERITY_ORDER: dict[str, int] = {
    Severity.INFO.value: 0,
    Severity.WARN.value: 1,
    Severity.ERROR.value: 2,
    Severity.CRITICAL.value: 3,
}


class IssueSource(CamelModel):
    """Design-system provenance of a pattern rule."""

    pattern: str = Field(..., description="Canonical pattern name")
    name: str | None = Field(default=None, description="Design system name")
    url: str | None = Field(default=None, description="Reference documentation")


class Issue(CamelModel):
    """A single defect found in a scaffold.

    Only fields that were explicitly set are serialized by `to_dict`, so
    ``source`` appears only on pattern issues and ``viewport`` only on
    per-viewport layout issues.

    Attributes:
        id: Stable, machine-readable identifier (e.g. "overflow-x").
        severity: info, warn, error or critical.
        message: Human-readable description.
        node_id: Offending node.
        json_pointer: Location of the node inside the scaffold document.
        viewport: "WxH" viewport the issue was found at.
        details: Structured, rule-specific data.
        source: Pattern provenance.
        suggestion: Deterministic remediation hint.
        expected: Expected value, when meaningful.
        found: Observed value; may be explicitly null.
    """

    id: str
    severity: Severity
    message: str
    node_id: str | None = None
    json_pointer: str | None = None
    viewport: str | None = None
    details: dict[str, Any] | None = None
    source: IssueSource | None = None
    suggestion: str | None = None
    expected: Any = None
    found: Any = None


def count_issues(
    issues: list[Issue],
    issue_id: str | None = None,
    severity: Severity | str | None = None,
) -> int:
    """Count issues matching an id and/or severity."""
    return sum(
        1
        for issue in issues
        if (issue_id is None or issue.id == issue_id)
        and (severity is None or issue.severity == severity)
    )


def max_severity(issues: list[Issue]) -> str | None:
    """Return the highest severity present, or None for an empty list."""
    if not issues:
        return None
    return max((issue.severity for issue in issues), key=lambda s: SEVERITY_ORDER[s])


__all__ = [
    "Severity",
    "SEVERITY_ORDER",
    "IssueSource",
    "Issue",
    "count_issues",
    "max_severity",
]
