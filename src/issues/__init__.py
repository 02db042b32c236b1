"""Issue vocabulary: severities, pattern provenance and the Issue record."""

from .lib import (
    SEVERITY_ORDER,
    Issue,
    IssueSource,
    Severity,
    count_issues,
    max_severity,
)

__all__ = [
    "Severity",
    "SEVERITY_ORDER",
    "IssueSource",
    "Issue",
    "count_issues",
    "max_severity",
]
