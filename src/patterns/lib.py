"""Pattern rule model and validator.

A pattern is a named, frozen set of MUST and SHOULD rules. Each rule is a
pure function of the node tree returning the issues it found. Validation
counts pass/fail per rule: a rule reporting one or more issues is a single
failure regardless of how many issues it produced.

Example:
    >>> from src.patterns import FORM_BASIC, validate_pattern
    >>> result = validate_pattern(FORM_BASIC, scaffold.screen.root)
    >>> result.must_failed
    0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from pydantic import Field

from src.core.log import get_logger
from src.issues import Issue, IssueSource, Severity
from src.schema import BaseNode, CamelModel, Node

logger = get_logger("patterns")


# =============================================================================
# Rules and Patterns
# =============================================================================


class RuleLevel(str, Enum):
    """Whether a rule failure blocks (MUST) or advises (SHOULD)."""

    MUST = "must"
    SHOULD = "should"


RuleCheck = Callable[[Node], list[Issue]]


@dataclass(frozen=True)
class Rule:
    """One stateless check belonging to a pattern.

    Attributes:
        id: Rule id, also used as the id of the issues it reports.
        level: MUST or SHOULD.
        description: One-line statement of the requirement.
        check: Callable evaluating the rule against a subtree root.
    """

    id: str
    level: RuleLevel
    description: str
    check: RuleCheck

    def evaluate(self, root: Node) -> list[Issue]:
        """Run the rule and return its issues."""
        return list(self.check(root))


@dataclass(frozen=True)
class Pattern:
    """A named design pattern with its provenance and rules."""

    name: str
    source: IssueSource
    must: tuple[Rule, ...] = ()
    should: tuple[Rule, ...] = ()

    @property
    def rules(self) -> tuple[Rule, ...]:
        """MUST rules followed by SHOULD rules."""
        return self.must + self.should


_UNSET: Any = object()


def pattern_issue(
    rule_id: str,
    severity: Severity,
    message: str,
    source: IssueSource,
    node: BaseNode | None = None,
    pointer: str | None = None,
    details: dict[str, Any] | None = None,
    suggestion: str | None = None,
    expected: Any = None,
    found: Any = _UNSET,
) -> Issue:
    """Build a pattern-rule issue.

    ``details``, ``suggestion`` and ``expected`` are only set when not None.
    ``found`` is set whenever it is passed, so an explicit None serializes
    as ``"found": null``.
    """
    fields: dict[str, Any] = {
        "id": rule_id,
        "severity": severity,
        "message": message,
        "source": source,
    }
    if node is not None:
        fields["node_id"] = node.id
    if pointer is not None:
        fields["json_pointer"] = pointer
    optional = {"details": details, "suggestion": suggestion, "expected": expected}
    fields.update({key: value for key, value in optional.items() if value is not None})
    if found is not _UNSET:
        fields["found"] = found
    return Issue(**fields)


# =============================================================================
# Results
# =============================================================================


class PatternResult(CamelModel):
    """Per-pattern rule counts and the issues its rules reported."""

    pattern: str
    source: IssueSource
    must_passed: int = 0
    must_failed: int = 0
    should_passed: int = 0
    should_failed: int = 0
    issues: list[Issue] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pattern": self.pattern,
            "source": self.source.to_dict(),
            "mustPassed": self.must_passed,
            "mustFailed": self.must_failed,
            "shouldPassed": self.should_passed,
            "shouldFailed": self.should_failed,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class FlowOutput(CamelModel):
    """Combined result of validating several patterns."""

    patterns: list[PatternResult] = Field(default_factory=list)
    has_must_failures: bool = False
    total_issues: int = 0

    @property
    def issues(self) -> list[Issue]:
        """All issues across patterns, in pattern order."""
        return [issue for result in self.patterns for issue in result.issues]

    def to_dict(self) -> dict:
        return {
            "patterns": [result.to_dict() for result in self.patterns],
            "hasMustFailures": self.has_must_failures,
            "totalIssues": self.total_issues,
        }


# =============================================================================
# Validation
# =============================================================================


def validate_pattern(pattern: Pattern, root: Node) -> PatternResult:
    """Evaluate MUST rules then SHOULD rules of one pattern.

    Args:
        pattern: Pattern to validate.
        root: Root of the node tree.

    Returns:
        Per-rule pass/fail counts and the concatenated issues.
    """
    result = PatternResult(pattern=pattern.name, source=pattern.source)

    for rule in pattern.must:
        rule_issues = rule.evaluate(root)
        if rule_issues:
            result.must_failed += 1
            result.issues.extend(rule_issues)
        else:
            result.must_passed += 1

    for rule in pattern.should:
        rule_issues = rule.evaluate(root)
        if rule_issues:
            result.should_failed += 1
            result.issues.extend(rule_issues)
        else:
            result.should_passed += 1

    logger.debug(
        f"{pattern.name}: must {result.must_passed}/{len(pattern.must)} passed, "
        f"should {result.should_passed}/{len(pattern.should)} passed"
    )
    return result


def validate_patterns(patterns: Iterable[Pattern], root: Node) -> FlowOutput:
    """Validate several patterns against the same tree."""
    results = [validate_pattern(pattern, root) for pattern in patterns]
    return FlowOutput(
        patterns=results,
        has_must_failures=any(result.must_failed > 0 for result in results),
        total_issues=sum(len(result.issues) for result in results),
    )


__all__ = [
    "RuleLevel",
    "RuleCheck",
    "Rule",
    "Pattern",
    "pattern_issue",
    "PatternResult",
    "FlowOutput",
    "validate_pattern",
    "validate_patterns",
]
