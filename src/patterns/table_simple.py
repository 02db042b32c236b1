"""Table.Simple pattern (IBM Carbon Design System).

MUST:
- title-exists: every Table has a non-empty title
- responsive-strategy: responsive.strategy is one of wrap, scroll, cards
- min-width-fit-or-scroll: the table cannot overflow the smallest viewport

SHOULD:
- controls-adjacent: filter, search and sort controls sit next to the table
"""

from __future__ import annotations

import re

from src.issues import Issue, IssueSource, Severity
from src.schema import (
    ButtonNode,
    FieldNode,
    Node,
    TableNode,
    child_pointer,
    iter_pre_order,
    traverse_pre_order,
)

from .lib import Pattern, Rule, RuleLevel, pattern_issue

PATTERN_NAME = "Table.Simple"
VALID_STRATEGIES = ("wrap", "scroll", "cards")
OVERFLOW_SAFE_STRATEGIES = ("scroll", "cards")

TABLE_SOURCE = IssueSource(
    pattern=PATTERN_NAME,
    name="IBM Carbon Design System",
    url="https://carbondesignsystem.com/components/data-table/usage/",
)

_CONTROL_PATTERN = re.compile(r"\b(filter|search|sort)", re.IGNORECASE)


def _strategy(table: TableNode) -> str | None:
    return table.responsive.strategy if table.responsive else None


def check_title_exists(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "title-exists",
            Severity.ERROR,
            f'Table "{node.id}" has empty or missing title',
            TABLE_SOURCE,
            node,
            pointer,
            suggestion='Give the table a title, e.g. "title": "Recent orders"',
        )
        for node, pointer in iter_pre_order(root)
        if isinstance(node, TableNode) and not (node.title or "").strip()
    ]


def check_responsive_strategy(root: Node) -> list[Issue]:
    issues: list[Issue] = []
    for node, pointer in iter_pre_order(root):
        if not isinstance(node, TableNode):
            continue
        strategy = _strategy(node)
        if not strategy:
            message = f'Table "{node.id}" is missing responsive.strategy'
        elif strategy not in VALID_STRATEGIES:
            message = (
                f'Table "{node.id}" has invalid responsive.strategy "{strategy}" '
                f"(must be: wrap, scroll, or cards)"
            )
        else:
            continue
        issues.append(
            pattern_issue(
                "responsive-strategy",
                Severity.ERROR,
                message,
                TABLE_SOURCE,
                node,
                pointer,
                expected=list(VALID_STRATEGIES),
                found=strategy,
                suggestion='Set "responsive": {"strategy": "scroll"}',
            )
        )
    return issues


def build_min_width_check(viewport_width: float | None = None):
    """Build the min-width-fit-or-scroll check.

    Args:
        viewport_width: Width of the smallest analyzed viewport. Without it
            only tables lacking any strategy are reported.
    """

    def check_min_width_fit_or_scroll(root: Node) -> list[Issue]:
        issues: list[Issue] = []
        for node, pointer in iter_pre_order(root):
            if not isinstance(node, TableNode):
                continue
            strategy = _strategy(node)
            if strategy in OVERFLOW_SAFE_STRATEGIES:
                continue
            if not strategy:
                issues.append(
                    pattern_issue(
                        "min-width-fit-or-scroll",
                        Severity.ERROR,
                        f'Table "{node.id}" has no responsive strategy; may overflow on small viewports',
                        TABLE_SOURCE,
                        node,
                        pointer,
                        suggestion='Use "scroll" or "cards" for wide tables',
                    )
                )
                continue
            min_column_width = node.responsive.min_column_width
            if viewport_width is None or min_column_width is None or not node.columns:
                continue
            required = min_column_width * len(node.columns)
            if required > viewport_width:
                issues.append(
                    pattern_issue(
                        "min-width-fit-or-scroll",
                        Severity.ERROR,
                        f'Table "{node.id}" needs {required:g}px for {len(node.columns)} columns '
                        f"but the smallest viewport is {viewport_width:g}px wide",
                        TABLE_SOURCE,
                        node,
                        pointer,
                        expected=viewport_width,
                        found=required,
                        details={"strategy": strategy, "minColumnWidth": min_column_width},
                        suggestion='Switch to "scroll" or "cards", or reduce the column count',
                    )
                )
        return issues

    return check_min_width_fit_or_scroll


def is_table_control(node: Node) -> bool:
    """Return True for visible nodes that are or contain a filter/search/sort control."""
    for candidate in traverse_pre_order(node):
        if isinstance(candidate, ButtonNode) and _CONTROL_PATTERN.search(candidate.text):
            return True
        if isinstance(candidate, FieldNode) and _CONTROL_PATTERN.search(candidate.label):
            return True
    return False


def check_controls_adjacent(root: Node) -> list[Issue]:
    issues: list[Issue] = []
    for parent, parent_pointer in iter_pre_order(root):
        slots = parent.child_slots()
        siblings = [child for _, _, child in slots]
        for index, (slot, slot_index, table) in enumerate(slots):
            if not isinstance(table, TableNode) or not table.visible:
                continue
            distances = {
                sibling.id: abs(position - index)
                for position, sibling in enumerate(siblings)
                if position != index and sibling.visible and is_table_control(sibling)
            }
            if not distances or min(distances.values()) <= 1:
                continue
            issues.append(
                pattern_issue(
                    "controls-adjacent",
                    Severity.WARN,
                    f'Table "{table.id}" controls are not adjacent to the table',
                    TABLE_SOURCE,
                    table,
                    child_pointer(parent_pointer, slot, slot_index),
                    details={"controlIds": list(distances), "parentId": parent.id},
                    suggestion="Place filter, search and sort controls directly above the table",
                )
            )
    return issues


def build_table_simple(viewport_width: float | None = None) -> Pattern:
    """Build Table.Simple, optionally aware of the smallest viewport width."""
    return Pattern(
        name=PATTERN_NAME,
        source=TABLE_SOURCE,
        must=(
            Rule("title-exists", RuleLevel.MUST, "Table.title must be non-empty", check_title_exists),
            Rule(
                "responsive-strategy",
                RuleLevel.MUST,
                "Table.responsive.strategy must be one of: wrap, scroll, cards",
                check_responsive_strategy,
            ),
            Rule(
                "min-width-fit-or-scroll",
                RuleLevel.MUST,
                "At the smallest viewport the table fits or uses scroll/cards",
                build_min_width_check(viewport_width),
            ),
        ),
        should=(
            Rule(
                "controls-adjacent",
                RuleLevel.SHOULD,
                "Filters and controls should be adjacent to the table",
                check_controls_adjacent,
            ),
        ),
    )


TABLE_SIMPLE = build_table_simple()


__all__ = [
    "TABLE_SIMPLE",
    "VALID_STRATEGIES",
    "build_table_simple",
    "build_min_width_check",
    "is_table_control",
    "check_title_exists",
    "check_responsive_strategy",
    "check_controls_adjacent",
]
