"""Scoring types: category scores, weights, pass criteria and output."""

from __future__ import annotations

from pydantic import Field, model_validator

from src.config import get_min_overall_score
from src.schema import CamelModel

WEIGHT_TOLERANCE = 0.01


class CategoryScores(CamelModel):
    """Per-category quality scores in [0, 100]."""

    pattern_fidelity: float = Field(..., ge=0, le=100)
    flow_reachability: float = Field(..., ge=0, le=100)
    hierarchy_grouping: float = Field(..., ge=0, le=100)
    responsive_behavior: float = Field(..., ge=0, le=100)


class ScoreWeights(CamelModel):
    """Category weights; they must sum to 1.0.

    Raises:
        pydantic.ValidationError: A ``ValueError`` when the weights are out
            of range or do not sum to 1.0 within ``WEIGHT_TOLERANCE``.
    """

    pattern_fidelity: float = Field(default=0.45, ge=0, le=1)
    flow_reachability: float = Field(default=0.25, ge=0, le=1)
    hierarchy_grouping: float = Field(default=0.20, ge=0, le=1)
    responsive_behavior: float = Field(default=0.10, ge=0, le=1)

    @model_validator(mode="after")
    def _check_total(self) -> "ScoreWeights":
        total = (
            self.pattern_fidelity
            + self.flow_reachability
            + self.hierarchy_grouping
            + self.responsive_behavior
        )
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"Score weights must sum to 1.0, got {total:.3f}")
        return self


class PassCriteria(CamelModel):
    """Pass/fail gates, each independently toggleable.

    Attributes:
        no_must_failures: Fail when any pattern MUST rule failed.
        no_critical_flow_errors: Fail when any node is unreachable by keyboard.
        min_overall_score: Minimum overall score; None disables the gate.
            Defaults to SCAFFOLD_MIN_OVERALL_SCORE.
    """

    no_must_failures: bool = True
    no_critical_flow_errors: bool = True
    min_overall_score: int | None = Field(default_factory=lambda: get_min_overall_score())


class ScoreOutput(CamelModel):
    """Final score with the inputs that produced it."""

    categories: CategoryScores
    weights: ScoreWeights
    overall: int
    criteria: PassCriteria
    passed: bool = Field(..., alias="pass")
    fail_reasons: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "categories": self.categories.model_dump(by_alias=True),
            "weights": self.weights.model_dump(by_alias=True),
            "overall": self.overall,
            "criteria": self.criteria.model_dump(by_alias=True),
            "pass": self.passed,
            "failReasons": list(self.fail_reasons),
        }


__all__ = [
    "WEIGHT_TOLERANCE",
    "CategoryScores",
    "ScoreWeights",
    "PassCriteria",
    "ScoreOutput",
]
