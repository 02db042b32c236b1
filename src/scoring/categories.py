"""Category scorers.

Each category starts at 100 and loses points per defect, floored at 0:

- pattern fidelity: 30 per failed MUST rule, 10 per failed SHOULD rule
- flow reachability: 30 per unreachable node, 10 per keyboard warning
- hierarchy grouping: 10 per field-after-actions, 5 per cluster of three
  spacing-off-scale issues
- responsive behavior: mean over viewports of 30 per overflow-x and 20 per
  primary-below-fold
"""

from __future__ import annotations

from typing import Iterable

from src.issues import Issue, Severity, count_issues
from src.keyboard import KeyboardOutput
from src.layout import LayoutOutput
from src.patterns import PatternResult

MUST_PENALTY = 30
SHOULD_PENALTY = 10
UNREACHABLE_PENALTY = 30
KEYBOARD_WARN_PENALTY = 10
STRUCTURAL_PENALTY = 10
SPACING_CLUSTER_SIZE = 3
SPACING_CLUSTER_PENALTY = 5
OVERFLOW_PENALTY = 30
BELOW_FOLD_PENALTY = 20


def _floor(score: float) -> float:
    return max(0, score)


def score_pattern_fidelity(results: Iterable[PatternResult]) -> float:
    results = list(results)
    must_failed = sum(result.must_failed for result in results)
    should_failed = sum(result.should_failed for result in results)
    return _floor(100 - MUST_PENALTY * must_failed - SHOULD_PENALTY * should_failed)


def score_flow_reachability(keyboard: KeyboardOutput) -> float:
    warnings = count_issues(keyboard.issues, severity=Severity.WARN)
    return _floor(
        100 - UNREACHABLE_PENALTY * len(keyboard.unreachable) - KEYBOARD_WARN_PENALTY * warnings
    )


def score_hierarchy_grouping(
    keyboard_issues: list[Issue],
    layout_issues: list[Issue],
) -> float:
    """Score grouping from structural and spacing defects.

    Spacing issues only count in clusters, so one or two stray values cost
    nothing.
    """
    structural = count_issues(keyboard_issues, issue_id="field-after-actions")
    clusters = count_issues(layout_issues, issue_id="spacing-off-scale") // SPACING_CLUSTER_SIZE
    return _floor(100 - STRUCTURAL_PENALTY * structural - SPACING_CLUSTER_PENALTY * clusters)


def viewport_penalty(issues: list[Issue]) -> int:
    """Responsive penalty of one viewport's layout issues."""
    return OVERFLOW_PENALTY * count_issues(
        issues, issue_id="overflow-x"
    ) + BELOW_FOLD_PENALTY * count_issues(issues, issue_id="primary-below-fold")


def score_responsive_behavior(layouts: Iterable[LayoutOutput]) -> float:
    """Average the penalty across every analyzed viewport.

    Returns:
        100 minus the mean penalty, floored at 0; 100 when no viewport
        was analyzed.
    """
    penalties = [viewport_penalty(layout.issues) for layout in layouts]
    if not penalties:
        return 100
    return _floor(100 - sum(penalties) / len(penalties))


__all__ = [
    "score_pattern_fidelity",
    "score_flow_reachability",
    "score_hierarchy_grouping",
    "score_responsive_behavior",
    "viewport_penalty",
]
