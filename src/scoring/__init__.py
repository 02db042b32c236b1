"""Scoring: four category scores, a weighted overall and pass/fail reasons.

Example:
    >>> from src.scoring import ScoreWeights, score_analysis
    >>> score = score_analysis(flow, keyboard, layouts, weights=ScoreWeights())
    >>> score.to_dict()["pass"]
    True
"""

from .categories import (
    score_flow_reachability,
    score_hierarchy_grouping,
    score_pattern_fidelity,
    score_responsive_behavior,
    viewport_penalty,
)
from .lib import (
    calculate_overall_score,
    create_score_output,
    evaluate_pass_fail,
    score_analysis,
)
from .models import (
    WEIGHT_TOLERANCE,
    CategoryScores,
    PassCriteria,
    ScoreOutput,
    ScoreWeights,
)

__all__ = [
    # Models
    "CategoryScores",
    "ScoreWeights",
    "PassCriteria",
    "ScoreOutput",
    "WEIGHT_TOLERANCE",
    # Categories
    "score_pattern_fidelity",
    "score_flow_reachability",
    "score_hierarchy_grouping",
    "score_responsive_behavior",
    "viewport_penalty",
    # Aggregation
    "calculate_overall_score",
    "evaluate_pass_fail",
    "create_score_output",
    "score_analysis",
]
