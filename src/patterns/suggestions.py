"""Structural pattern suggestions, auto-selection and coverage.

Suggestions are heuristics over the whole tree (hidden nodes included):
a Form suggests Form.Basic, a Table suggests Table.Simple, collapsible
sections suggest Progressive.Disclosure, and step-like buttons or
guidedFlow behaviors suggest Guided.Flow.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

from pydantic import Field

from src.core.log import get_logger
from src.schema import (
    ButtonNode,
    CamelModel,
    FlowRole,
    FormNode,
    Node,
    TableNode,
    traverse_pre_order,
)

from .lib import Pattern
from .registry import get_all_patterns, get_pattern

logger = get_logger("patterns.suggestions")

HIGH_CONFIDENCE_THRESHOLD = 80
MEDIUM_CONFIDENCE_THRESHOLD = 50

_FLOW_WORDS = ("next", "previous", "prev", "back")
_STEP_TEXT = re.compile(r"step\s*\d+", re.IGNORECASE)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PatternSuggestion(CamelModel):
    """A pattern the tree structurally resembles."""

    pattern: str
    reason: str
    confidence: Confidence
    confidence_score: int = Field(..., ge=0, le=100)


class CoverageGap(CamelModel):
    pattern: str
    reason: str


class CoverageResult(CamelModel):
    """How many registered patterns were activated, and what was missed."""

    activated: int
    n_total: int
    percent: float
    gaps: list[CoverageGap] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "activated": self.activated,
            "nTotal": self.n_total,
            "percent": self.percent,
            "gaps": [gap.to_dict() for gap in self.gaps],
        }


def confidence_for(score: int) -> Confidence:
    """Map a numeric score onto a confidence level."""
    if score >= HIGH_CONFIDENCE_THRESHOLD:
        return Confidence.HIGH
    if score >= MEDIUM_CONFIDENCE_THRESHOLD:
        return Confidence.MEDIUM
    return Confidence.LOW


def has_disclosure_hints(root: Node) -> bool:
    """Return True when any node, hidden or not, is collapsible."""
    return any(
        node.disclosure is not None and node.disclosure.collapsible
        for node in traverse_pre_order(root, visible_only=False)
    )


def has_guided_flow_hints(root: Node) -> bool:
    """Return True when any node declares a wizard or step role."""
    return any(
        node.guided_flow is not None
        and node.guided_flow.role in (FlowRole.WIZARD, FlowRole.STEP)
        for node in traverse_pre_order(root, visible_only=False)
    )


def _is_flow_button(button: ButtonNode) -> bool:
    text = (button.text or "").lower()
    return any(word in text for word in _FLOW_WORDS) or bool(_STEP_TEXT.search(text))


def suggest_patterns(root: Node) -> list[PatternSuggestion]:
    """Suggest patterns from structural evidence.

    Returns:
        Suggestions in registry order: Form.Basic, Table.Simple,
        Progressive.Disclosure, Guided.Flow.
    """
    forms = fields = actions = 0
    tables = columns = 0
    strategy: str | None = None
    has_disclosure = False
    flow_hints: list[str] = []

    # Each node counts towards at most one pattern, checked in this order.
    for node in traverse_pre_order(root, visible_only=False):
        if isinstance(node, FormNode):
            forms += 1
            fields += len(node.fields)
            actions += len(node.actions)
        elif isinstance(node, TableNode):
            tables += 1
            columns += len(node.columns)
            strategy = node.responsive.strategy if node.responsive else None
        elif node.disclosure is not None and node.disclosure.collapsible:
            has_disclosure = True
        elif isinstance(node, ButtonNode):
            if _is_flow_button(node):
                flow_hints.append(node.text.lower())
        elif node.guided_flow is not None:
            flow_hints.append(node.id)

    suggestions: list[PatternSuggestion] = []
    if forms:
        suggestions.append(
            PatternSuggestion(
                pattern="Form.Basic",
                reason=f"Detected Form node with {fields} field(s) and {actions} action(s)",
                confidence=Confidence.HIGH,
                confidence_score=95,
            )
        )
    if tables:
        score = 90 if columns > 0 else 60
        suggestions.append(
            PatternSuggestion(
                pattern="Table.Simple",
                reason=(
                    f"Detected Table node ({columns} columns, "
                    f"responsive.strategy={strategy or 'none'})"
                ),
                confidence=confidence_for(score),
                confidence_score=score,
            )
        )
    if has_disclosure:
        suggestions.append(
            PatternSuggestion(
                pattern="Progressive.Disclosure",
                reason="Found collapsible disclosure behavior on one or more nodes",
                confidence=Confidence.HIGH,
                confidence_score=92,
            )
        )
    if len(flow_hints) >= 2:
        score = 88 if len(flow_hints) > 3 else 70
        suggestions.append(
            PatternSuggestion(
                pattern="Guided.Flow",
                reason=(
                    f"Found multi-step indicators ({', '.join(flow_hints[:5])}) "
                    "suggesting a wizard flow"
                ),
                confidence=confidence_for(score),
                confidence_score=score,
            )
        )
    elif flow_hints:
        suggestions.append(
            PatternSuggestion(
                pattern="Guided.Flow",
                reason=f"Single guided-flow hint ({flow_hints[0]}) detected",
                confidence=Confidence.LOW,
                confidence_score=40,
            )
        )

    logger.debug(f"Suggested {[s.pattern for s in suggestions]}")
    return suggestions


def _add(patterns: list[Pattern], pattern: Pattern) -> None:
    if all(existing.name != pattern.name for existing in patterns):
        patterns.append(pattern)


def select_patterns(
    root: Node,
    explicit: Iterable[str] | None = None,
    auto: bool = True,
) -> list[Pattern]:
    """Choose the patterns to validate.

    Args:
        root: Root of the node tree.
        explicit: Pattern names or aliases requested by the caller.
        auto: Allow activation from structural evidence.

    Returns:
        With explicit names: those patterns, plus Progressive.Disclosure
        and Guided.Flow when the tree carries their behavior hints. Without:
        every suggestion scoring at or above the high-confidence threshold.

    Raises:
        KeyError: If an explicit name is unknown.
    """
    names = list(explicit or [])
    patterns: list[Pattern] = []
    for name in names:
        _add(patterns, get_pattern(name))

    if not auto:
        return patterns

    if names:
        if has_disclosure_hints(root):
            _add(patterns, get_pattern("Progressive.Disclosure"))
        if has_guided_flow_hints(root):
            _add(patterns, get_pattern("Guided.Flow"))
        return patterns

    for suggestion in suggest_patterns(root):
        if suggestion.confidence_score >= HIGH_CONFIDENCE_THRESHOLD:
            _add(patterns, get_pattern(suggestion.pattern))
    return patterns


def compute_coverage(
    suggestions: list[PatternSuggestion],
    activated: Iterable[str],
) -> CoverageResult:
    """Compare suggestions against the activated pattern names.

    Medium and high confidence suggestions that were not activated are
    reported as gaps.
    """
    activated_names = set(activated)
    total = len(get_all_patterns())
    gaps = [
        CoverageGap(pattern=s.pattern, reason=s.reason)
        for s in suggestions
        if s.confidence in (Confidence.HIGH, Confidence.MEDIUM)
        and s.pattern not in activated_names
    ]
    percent = round(len(activated_names) / total * 100, 2) if total else 0.0
    return CoverageResult(
        activated=len(activated_names), n_total=total, percent=percent, gaps=gaps
    )


__all__ = [
    "HIGH_CONFIDENCE_THRESHOLD",
    "MEDIUM_CONFIDENCE_THRESHOLD",
    "Confidence",
    "PatternSuggestion",
    "CoverageGap",
    "CoverageResult",
    "confidence_for",
    "has_disclosure_hints",
    "has_guided_flow_hints",
    "suggest_patterns",
    "select_patterns",
    "compute_coverage",
]
