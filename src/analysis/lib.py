"""Analysis driver running every engine over one scaffold.

Example:
    >>> report = analyze_scaffold(raw, viewports=["390x844"])
    >>> report.score.overall
    96
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import Field

from src.config import get_default_breakpoints
from src.core.log import get_logger
from src.keyboard import KeyboardOutput, analyze_keyboard_flow
from src.layout import LayoutOptions, LayoutOutput, Viewport, compute_layout, parse_viewport
from src.patterns import (
    CoverageResult,
    FlowOutput,
    Pattern,
    PatternSuggestion,
    build_guided_flow,
    build_table_simple,
    compute_coverage,
    select_patterns,
    suggest_patterns,
    validate_patterns,
)
from src.schema import CamelModel, Scaffold, parse_scaffold
from src.scoring import PassCriteria, ScoreOutput, ScoreWeights, score_analysis

logger = get_logger("analysis")


class AnalysisReport(CamelModel):
    """Everything the engines found for one scaffold."""

    layouts: list[LayoutOutput] = Field(default_factory=list)
    keyboard: KeyboardOutput
    flow: FlowOutput
    score: ScoreOutput
    suggestions: list[PatternSuggestion] = Field(default_factory=list)
    coverage: CoverageResult

    def to_dict(self) -> dict:
        return {
            "layouts": [layout.to_dict() for layout in self.layouts],
            "keyboard": self.keyboard.to_dict(),
            "flow": self.flow.to_dict(),
            "score": self.score.to_dict(),
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
            "coverage": self.coverage.to_dict(),
        }


def resolve_viewports(
    scaffold: Scaffold,
    viewports: Iterable[Viewport | str] | None = None,
) -> list[Viewport]:
    """Parse the requested viewports, defaulting to the scaffold breakpoints.

    Raises:
        ValueError: If a viewport string is malformed.
    """
    if viewports is None:
        viewports = list(scaffold.settings.breakpoints) or get_default_breakpoints()
    return [parse_viewport(viewport) for viewport in viewports]


def smallest_viewport(viewports: list[Viewport]) -> Viewport | None:
    if not viewports:
        return None
    return min(viewports, key=lambda viewport: (viewport.width, viewport.height))


def contextualize_patterns(
    patterns: list[Pattern],
    layout: LayoutOutput | None,
    viewport: Viewport | None,
) -> list[Pattern]:
    """Rebuild layout-aware patterns with one viewport's layout.

    Table.Simple learns the viewport width and Guided.Flow the frames and
    viewport height. Other patterns are returned unchanged.
    """
    if layout is None or viewport is None:
        return list(patterns)

    rebuilt: list[Pattern] = []
    for pattern in patterns:
        if pattern.name == "Table.Simple":
            pattern = build_table_simple(viewport.width)
        elif pattern.name == "Guided.Flow":
            pattern = build_guided_flow(layout.frames, viewport.height)
        rebuilt.append(pattern)
    return rebuilt


def analyze_scaffold(
    scaffold: Scaffold | dict[str, Any],
    patterns: Iterable[str] | None = None,
    viewports: Iterable[Viewport | str] | None = None,
    weights: ScoreWeights | None = None,
    criteria: PassCriteria | None = None,
    layout_options: LayoutOptions | None = None,
) -> AnalysisReport:
    """Run layout, keyboard, pattern and scoring engines over a scaffold.

    Args:
        scaffold: Typed scaffold or its raw mapping.
        patterns: Pattern names or aliases to validate. When omitted,
            patterns are selected from high-confidence suggestions.
        viewports: Viewports to lay out; defaults to the scaffold
            breakpoints, then to configuration.
        weights: Category weights for the overall score.
        criteria: Pass/fail criteria.
        layout_options: Knobs forwarded to the layout engine.

    Returns:
        AnalysisReport combining every engine output.

    Raises:
        pydantic.ValidationError: If a raw scaffold does not parse.
        ValueError: If a viewport string is malformed.
        KeyError: If a pattern name is unknown.
    """
    scaffold = parse_scaffold(scaffold)
    root = scaffold.screen.root
    resolved = resolve_viewports(scaffold, viewports)
    logger.info(
        f"Analyzing screen '{scaffold.screen.id}' at "
        f"{', '.join(viewport.label for viewport in resolved) or 'no viewports'}"
    )

    layouts = [compute_layout(scaffold, viewport, layout_options) for viewport in resolved]
    keyboard = analyze_keyboard_flow(scaffold)

    smallest = smallest_viewport(resolved)
    smallest_layout = layouts[resolved.index(smallest)] if smallest is not None else None
    selected = contextualize_patterns(
        select_patterns(root, patterns), smallest_layout, smallest
    )
    flow = validate_patterns(selected, root)

    suggestions = suggest_patterns(root)
    coverage = compute_coverage(suggestions, [pattern.name for pattern in selected])
    score = score_analysis(flow, keyboard, layouts, weights=weights, criteria=criteria)

    logger.info(
        f"Screen '{scaffold.screen.id}': score {score.overall}, "
        f"{'pass' if score.passed else 'fail'}, "
        f"{flow.total_issues} pattern issue(s), {len(keyboard.unreachable)} unreachable"
    )
    return AnalysisReport(
        layouts=layouts,
        keyboard=keyboard,
        flow=flow,
        score=score,
        suggestions=suggestions,
        coverage=coverage,
    )


__all__ = [
    "AnalysisReport",
    "analyze_scaffold",
    "contextualize_patterns",
    "resolve_viewports",
    "smallest_viewport",
]
