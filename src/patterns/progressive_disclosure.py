"""Progressive.Disclosure pattern.

Collapsible sections (``behaviors.disclosure.collapsible``) need a toggle,
a label, and must not hide the screen's primary action. Each rule cites
the design system it comes from: Nielsen Norman Group, GOV.UK Details and
the USWDS Accordion.
"""

from __future__ import annotations

from src.issues import Issue, IssueSource, Severity
from src.schema import Node, build_parent_map, iter_pre_order

from .disclosure import (
    affordance_tokens,
    build_sibling_map,
    find_collapsibles,
    find_control,
    find_first_required_field,
    has_label,
    has_primary_hidden,
    index_of,
    is_collapsible,
)
from .lib import Pattern, Rule, RuleLevel, pattern_issue

PATTERN_NAME = "Progressive.Disclosure"
NNG_URL = "https://www.nngroup.com/articles/progressive-disclosure/"

NNG_SOURCE = IssueSource(
    pattern=PATTERN_NAME,
    name="Nielsen Norman Group: Progressive Disclosure",
    url=NNG_URL,
)
GOVUK_DETAILS_SOURCE = IssueSource(
    pattern=PATTERN_NAME,
    name="GOV.UK Design System: Details",
    url="https://design-system.service.gov.uk/components/details/",
)
USWDS_ACCORDION_SOURCE = IssueSource(
    pattern=PATTERN_NAME,
    name="USWDS: Accordion",
    url="https://designsystem.digital.gov/components/accordion/",
)


def disclosure_suggestion(rule_id: str, node_id: str | None = None) -> str | None:
    """Return the remediation hint for a disclosure rule, or None."""
    if rule_id == "disclosure-no-control":
        section = node_id or "advanced"
        return (
            "Add a control Button near the section and reference it:\n"
            f'"behaviors": {{ "disclosure": {{ "collapsible": true, "controlsId": "toggle-{section}", '
            '"defaultState": "collapsed" } }\n'
            "...and define the control:\n"
            f'{{ "id": "toggle-{section}", "type": "Button", "text": "Show details" }}'
        )
    if rule_id == "disclosure-missing-label":
        section = node_id or "section"
        return (
            "Add a sibling Text label before the section:\n"
            f'{{ "type":"Text", "id":"{section}-label", "text":"Section title" }}'
        )
    return DISCLOSURE_SUGGESTIONS.get(rule_id)


DISCLOSURE_SUGGESTIONS: dict[str, str] = {
    "disclosure-hides-primary": (
        "Move the primary action outside the collapsible section OR set:\n"
        '"behaviors": { "disclosure": { "defaultState": "expanded" } }'
    ),
    "disclosure-control-far": (
        "Place the control as a preceding sibling or within a header row next to the section."
    ),
    "disclosure-inconsistent-affordance": (
        'Align affordances across collapsible sections, e.g. "affordances":["chevron"].'
    ),
    "disclosure-early-section": (
        "Move collapsible sections after required fields and before the action row."
    ),
}


# =============================================================================
# MUST
# =============================================================================


def check_no_control(root: Node) -> list[Issue]:
    siblings = build_sibling_map(root)
    issues: list[Issue] = []
    for node, pointer in find_collapsibles(root):
        if find_control(node, siblings.get(node.id)) is not None:
            continue
        issues.append(
            pattern_issue(
                "disclosure-no-control",
                Severity.ERROR,
                f'Collapsible section "{node.id}" has no associated control',
                NNG_SOURCE,
                node,
                pointer,
                suggestion=disclosure_suggestion("disclosure-no-control", node.id),
                expected="controlsId referencing a Button or nearby Button with disclosure keywords",
                found=node.disclosure.controls_id,
            )
        )
    return issues


def check_hides_primary(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "disclosure-hides-primary",
            Severity.ERROR,
            f'Primary action is hidden by default within collapsed section "{node.id}"',
            GOVUK_DETAILS_SOURCE,
            node,
            pointer,
            suggestion=disclosure_suggestion("disclosure-hides-primary"),
            expected="Primary action outside collapsed section or defaultState expanded",
            found=f"defaultState: {node.disclosure.default_state or 'collapsed'}, primary inside section",
        )
        for node, pointer in find_collapsibles(root)
        if has_primary_hidden(node)
    ]


def check_missing_label(root: Node) -> list[Issue]:
    siblings = build_sibling_map(root)
    issues: list[Issue] = []
    for node, pointer in find_collapsibles(root):
        node_siblings = siblings.get(node.id)
        if has_label(node, node_siblings, find_control(node, node_siblings)):
            continue
        issues.append(
            pattern_issue(
                "disclosure-missing-label",
                Severity.ERROR,
                f'Collapsible section "{node.id}" lacks a visible label or summary',
                USWDS_ACCORDION_SOURCE,
                node,
                pointer,
                suggestion=disclosure_suggestion("disclosure-missing-label", node.id),
                expected="Sibling Text label, child Text summary, or control button with meaningful text",
            )
        )
    return issues


# =============================================================================
# SHOULD
# =============================================================================


def check_control_far(root: Node) -> list[Issue]:
    siblings = build_sibling_map(root)
    issues: list[Issue] = []
    for node, pointer in find_collapsibles(root):
        node_siblings = siblings.get(node.id)
        control = find_control(node, node_siblings)
        if control is None or not node_siblings:
            continue
        control_index = index_of(node_siblings, control.id)
        node_index = index_of(node_siblings, node.id)
        if control_index < 0 or node_index < 0:
            continue
        distance = abs(control_index - node_index)
        if distance <= 1:
            continue
        issues.append(
            pattern_issue(
                "disclosure-control-far",
                Severity.WARN,
                f'Control "{control.id}" is not adjacent to collapsible section "{node.id}" '
                f"(distance: {distance} siblings)",
                NNG_SOURCE,
                node,
                pointer,
                details={"controlId": control.id, "distance": distance},
                suggestion=disclosure_suggestion("disclosure-control-far"),
                expected="Control adjacent to collapsible (distance <= 1)",
                found=f"Control at distance {distance} from collapsible",
            )
        )
    return issues


def _format_tokens(node: Node, tokens: set[str]) -> str:
    quoted = ", ".join(f'"{token}"' for token in sorted(tokens))
    return f'"{node.id}": [{quoted}]'


def check_inconsistent_affordance(root: Node) -> list[Issue]:
    parents = build_parent_map(root)
    groups: dict[str | None, list[tuple[Node, str]]] = {}
    for node, pointer in find_collapsibles(root):
        parent = parents.get(node.id)
        groups.setdefault(parent.id if parent else None, []).append((node, pointer))

    issues: list[Issue] = []
    for members in groups.values():
        if len(members) < 2:
            continue
        token_sets = [affordance_tokens(node) for node, _ in members]
        non_empty = [tokens for tokens in token_sets if tokens]
        if len(non_empty) < 2 or set.intersection(*non_empty):
            continue

        summary = "; ".join(
            _format_tokens(node, tokens) for (node, _), tokens in zip(members, token_sets)
        )
        first, first_pointer = members[0]
        issues.append(
            pattern_issue(
                "disclosure-inconsistent-affordance",
                Severity.WARN,
                f"Multiple collapsibles use inconsistent affordances: {summary}",
                GOVUK_DETAILS_SOURCE,
                first,
                first_pointer,
                details={"collapsibleIds": [node.id for node, _ in members]},
                suggestion=disclosure_suggestion("disclosure-inconsistent-affordance"),
                expected="Common affordance token across all collapsibles",
                found=f"No intersection: {summary}",
            )
        )
    return issues


def check_early_section(root: Node) -> list[Issue]:
    required = find_first_required_field(root)
    if required is None:
        return []

    for node, pointer in iter_pre_order(root):
        if node.id == required.id:
            return []
        if not is_collapsible(node):
            continue
        return [
            pattern_issue(
                "disclosure-early-section",
                Severity.WARN,
                f'Collapsible section "{node.id}" appears before the first required field "{required.id}"',
                USWDS_ACCORDION_SOURCE,
                node,
                pointer,
                details={"firstRequiredFieldId": required.id},
                suggestion=disclosure_suggestion("disclosure-early-section"),
                expected="Collapsible after primary content (required fields)",
                found=f'Collapsible "{node.id}" before required field "{required.id}"',
            )
        ]
    return []


PROGRESSIVE_DISCLOSURE = Pattern(
    name=PATTERN_NAME,
    source=IssueSource(pattern=PATTERN_NAME, name="Nielsen Norman Group", url=NNG_URL),
    must=(
        Rule(
            "disclosure-no-control",
            RuleLevel.MUST,
            "Collapsible section must have an associated control",
            check_no_control,
        ),
        Rule(
            "disclosure-hides-primary",
            RuleLevel.MUST,
            "Primary action must not be hidden by default in collapsed section",
            check_hides_primary,
        ),
        Rule(
            "disclosure-missing-label",
            RuleLevel.MUST,
            "Collapsible section must have a visible label or summary",
            check_missing_label,
        ),
    ),
    should=(
        Rule(
            "disclosure-control-far",
            RuleLevel.SHOULD,
            "Control should be adjacent to collapsible section",
            check_control_far,
        ),
        Rule(
            "disclosure-inconsistent-affordance",
            RuleLevel.SHOULD,
            "Multiple collapsibles should use consistent affordances",
            check_inconsistent_affordance,
        ),
        Rule(
            "disclosure-early-section",
            RuleLevel.SHOULD,
            "Collapsible content should follow primary content",
            check_early_section,
        ),
    ),
)


__all__ = [
    "PROGRESSIVE_DISCLOSURE",
    "DISCLOSURE_SUGGESTIONS",
    "disclosure_suggestion",
    "check_no_control",
    "check_hides_primary",
    "check_missing_label",
    "check_control_far",
    "check_inconsistent_affordance",
    "check_early_section",
]
