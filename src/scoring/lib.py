"""Score aggregation and pass/fail evaluation.

Example:
    >>> output = score_analysis(flow, keyboard, layouts)
    >>> output.overall, output.passed
    (92, True)
"""

from __future__ import annotations

import math
from typing import Iterable

from src.core.log import get_logger
from src.keyboard import KeyboardOutput
from src.layout import LayoutOutput
from src.patterns import FlowOutput, PatternResult

from .categories import (
    score_flow_reachability,
    score_hierarchy_grouping,
    score_pattern_fidelity,
    score_responsive_behavior,
)
from .models import CategoryScores, PassCriteria, ScoreOutput, ScoreWeights

logger = get_logger("scoring")


def calculate_overall_score(categories: CategoryScores, weights: ScoreWeights) -> int:
    """Weighted sum of the categories, rounded half up."""
    weighted = (
        weights.pattern_fidelity * categories.pattern_fidelity
        + weights.flow_reachability * categories.flow_reachability
        + weights.hierarchy_grouping * categories.hierarchy_grouping
        + weights.responsive_behavior * categories.responsive_behavior
    )
    return math.floor(round(weighted, 6) + 0.5)


def evaluate_pass_fail(
    overall: int,
    pattern_results: Iterable[PatternResult],
    unreachable_count: int,
    criteria: PassCriteria,
) -> tuple[bool, list[str]]:
    """Check every enabled criterion.

    Returns:
        ``(passed, fail_reasons)`` with one reason per violated criterion.
    """
    fail_reasons: list[str] = []

    if criteria.no_must_failures:
        must_failures = sum(result.must_failed for result in pattern_results)
        if must_failures > 0:
            fail_reasons.append(f"{must_failures} MUST failure(s) in pattern validation")

    if criteria.no_critical_flow_errors and unreachable_count > 0:
        fail_reasons.append(f"{unreachable_count} unreachable node(s)")

    if criteria.min_overall_score is not None and overall < criteria.min_overall_score:
        fail_reasons.append(
            f"Overall score {overall} below minimum {criteria.min_overall_score}"
        )

    return not fail_reasons, fail_reasons


def create_score_output(
    categories: CategoryScores,
    weights: ScoreWeights,
    pattern_results: list[PatternResult],
    unreachable_count: int,
    criteria: PassCriteria,
) -> ScoreOutput:
    """Combine category scores into the final ScoreOutput."""
    overall = calculate_overall_score(categories, weights)
    passed, fail_reasons = evaluate_pass_fail(
        overall, pattern_results, unreachable_count, criteria
    )
    return ScoreOutput(
        categories=categories,
        weights=weights,
        overall=overall,
        criteria=criteria,
        passed=passed,
        fail_reasons=fail_reasons,
    )


def score_analysis(
    flow: FlowOutput,
    keyboard: KeyboardOutput,
    layouts: list[LayoutOutput],
    weights: ScoreWeights | None = None,
    criteria: PassCriteria | None = None,
) -> ScoreOutput:
    """Score the outputs of the pattern, keyboard and layout engines.

    Args:
        flow: Pattern validation output.
        keyboard: Keyboard analysis output.
        layouts: One layout output per analyzed viewport.
        weights: Category weights; defaults to 0.45/0.25/0.20/0.10.
        criteria: Pass criteria; defaults read SCAFFOLD_MIN_OVERALL_SCORE.

    Returns:
        The aggregated ScoreOutput.
    """
    weights = weights or ScoreWeights()
    criteria = criteria or PassCriteria()
    layout_issues = [issue for layout in layouts for issue in layout.issues]

    categories = CategoryScores(
        pattern_fidelity=score_pattern_fidelity(flow.patterns),
        flow_reachability=score_flow_reachability(keyboard),
        hierarchy_grouping=score_hierarchy_grouping(keyboard.issues, layout_issues),
        responsive_behavior=score_responsive_behavior(layouts),
    )
    output = create_score_output(
        categories, weights, flow.patterns, len(keyboard.unreachable), criteria
    )
    logger.debug(f"Overall score {output.overall}, pass={output.passed}")
    return output


__all__ = [
    "calculate_overall_score",
    "evaluate_pass_fail",
    "create_score_output",
    "score_analysis",
]
