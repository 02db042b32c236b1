"""Guided.Flow pattern (multi-step wizards).

Steps are nodes with ``behaviors.guidedFlow.role == "step"``. They are
grouped into scopes before any rule runs:

- every ``role == "wizard"`` container is a scope holding the steps nested
  inside it (a step belongs to the first wizard, in document order, that
  contains it)
- steps outside every wizard form one implicit global scope, which also
  exists when the screen declares no wizard at all

Within a scope, steps are ordered by ``stepIndex`` (a step without one
takes its 1-based document position in the scope; explicit values below 1
are ignored) and ``totalSteps`` is the container's value, else the first
explicit step value, else the largest index seen. Each step's actions row
is detected structurally and its buttons are classified by label (back,
next, finish).

Layout-aware checks need frames from a layout run. The default
`GUIDED_FLOW` has none, so its below-fold rule passes vacuously; use
`build_guided_flow` to supply them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from src.issues import Issue, IssueSource, Severity
from src.layout import Frame
from src.schema import (
    ButtonNode,
    FieldNode,
    FlowRole,
    FormNode,
    Node,
    RoleHint,
    StackNode,
    TextNode,
    build_pointer_map,
    find_node,
    is_container,
    traverse_pre_order,
)

from .lib import Pattern, Rule, RuleLevel, pattern_issue

PATTERN_NAME = "Guided.Flow"

GUIDED_FLOW_SOURCE = IssueSource(
    pattern=PATTERN_NAME,
    name="Nielsen Norman Group: Wizards",
    url="https://www.nngroup.com/articles/wizard-design/",
)

PROGRESS_AFFORDANCE = "progress-indicator"
PROGRESS_SEARCH_DEPTH = 6

_BACK = re.compile(r"^(back|previous)$")
_NEXT = re.compile(r"^(next|continue)$")
_FINISH = re.compile(r"^(finish|submit|done)$")
_PROGRESS_TEXT = re.compile(r"step\s+\d+\s+of\s+\d+", re.IGNORECASE)

GUIDED_FLOW_SUGGESTIONS: dict[str, str] = {
    "wizard-steps-missing": (
        "Define contiguous stepIndex values 1..N. Example: "
        '{"behaviors":{"guidedFlow":{"role":"step","stepIndex":2,"totalSteps":4}}}'
    ),
    "wizard-next-missing": (
        'Add a Next button: {"id":"next-<i>","type":"Button","text":"Next","roleHint":"primary"}'
    ),
    "wizard-back-missing": (
        'Add a Back button before Next: {"id":"back-<i>","type":"Button","text":"Back"}'
    ),
    "wizard-back-illegal": "Remove Back from the first step or move it to step 2.",
    "wizard-finish-missing": (
        'Add a Finish action: {"id":"finish","type":"Button","text":"Finish","roleHint":"primary"}'
    ),
    "wizard-field-after-actions": (
        "Ensure fields appear before the actions row. Move the actions Stack below all Field nodes."
    ),
    "wizard-multiple-primary": (
        "Keep only one primary action per step; remove roleHint or demote extras."
    ),
    "wizard-progress-missing": (
        'Add a visible progress indicator: {"id":"progress-1","type":"Text","text":"Step 1 of 4"} '
        "and reference it via behaviors.guidedFlow.progressNodeId."
    ),
    "wizard-actions-order": "Order actions as Back then Next/Finish inside the actions row.",
    "wizard-step-title-missing": (
        "Add a heading Text near the top of each step: "
        '{"id":"step-<i>-title","type":"Text","text":"Step <i>: Details"}'
    ),
    "wizard-primary-below-fold": (
        "Move the primary action higher in the step or shorten the content above it."
    ),
}


# =============================================================================
# Scope Resolution
# =============================================================================


@dataclass
class GuidedFlowStep:
    """One resolved wizard step.

    Attributes:
        node: The step node.
        index: Declared 1-based stepIndex.
        total: Step count of the enclosing scope.
        actions_row: Node holding the step's actions, if any.
        buttons: Visible buttons of the actions row, in order.
    """

    node: Node
    index: int
    total: int
    actions_row: Node | None = None
    buttons: list[ButtonNode] = field(default_factory=list)


@dataclass
class GuidedFlowScope:
    """Steps governed by one wizard container, or the global scope."""

    scope_node: Node | None
    steps: list[GuidedFlowStep] = field(default_factory=list)
    total_steps: int = 0

    @property
    def indices(self) -> list[int]:
        return [step.index for step in self.steps]


def has_role(node: Node, role: FlowRole) -> bool:
    flow = node.guided_flow
    return flow is not None and flow.role == role


def _children(node: Node) -> list[Node]:
    return [child for child in node.children_of() if child.visible]


def detect_actions(step: Node) -> tuple[Node | None, list[ButtonNode]]:
    """Find a step's actions row and its buttons.

    Preference order: the step itself when it is a Form (its actions), the
    last horizontal Stack whose children are all Buttons, the last
    horizontal Stack holding at least one Button, then the last Stack whose
    children are all leaves including at least one Button.
    """
    if isinstance(step, FormNode):
        return step, [a for a in step.actions if isinstance(a, ButtonNode) and a.visible]

    stacks = [node for node in traverse_pre_order(step) if isinstance(node, StackNode)]
    with_buttons = [
        stack
        for stack in stacks
        if any(isinstance(child, ButtonNode) for child in _children(stack))
    ]
    horizontal = [stack for stack in with_buttons if stack.direction == "horizontal"]
    button_rows = [
        stack
        for stack in horizontal
        if all(isinstance(child, ButtonNode) for child in _children(stack))
    ]
    leaf_rows = [
        stack
        for stack in with_buttons
        if not any(is_container(child) for child in _children(stack))
    ]

    for rows in (button_rows, horizontal, leaf_rows):
        if rows:
            row = rows[-1]
            return row, [child for child in _children(row) if isinstance(child, ButtonNode)]
    return None, []


def _resolve_scope(scope_node: Node | None, step_nodes: list[Node]) -> GuidedFlowScope:
    steps: list[GuidedFlowStep] = []
    for position, node in enumerate(step_nodes, start=1):
        flow = node.guided_flow
        # Unindexed steps take their document position within the scope.
        index = position if flow.step_index is None else flow.step_index
        if index < 1:
            continue
        actions_row, buttons = detect_actions(node)
        steps.append(
            GuidedFlowStep(
                node=node,
                index=index,
                total=flow.total_steps or 0,
                actions_row=actions_row,
                buttons=buttons,
            )
        )

    explicit_totals = [
        total
        for total in [scope_node.guided_flow.total_steps if scope_node else None]
        + [step.total for step in steps]
        if total is not None and total > 0
    ]
    if explicit_totals:
        total_steps = explicit_totals[0]
    else:
        total_steps = max((step.index for step in steps), default=0)

    for step in steps:
        if step.total == 0:
            step.total = total_steps

    # Stable: duplicate indices keep document order.
    steps.sort(key=lambda step: step.index)
    return GuidedFlowScope(scope_node=scope_node, steps=steps, total_steps=total_steps)


def resolve_guided_flow_scopes(root: Node) -> list[GuidedFlowScope]:
    """Group visible steps into wizard scopes.

    Returns:
        One scope per wizard container in document order, followed by the
        global scope when it has steps or when no wizard exists.
    """
    nodes = traverse_pre_order(root)
    wizards = [node for node in nodes if has_role(node, FlowRole.WIZARD)]
    wizard_members = [
        {member.id for member in traverse_pre_order(wizard)} for wizard in wizards
    ]

    scoped: list[list[Node]] = [[] for _ in wizards]
    global_steps: list[Node] = []
    for node in nodes:
        if not has_role(node, FlowRole.STEP):
            continue
        owner = next(
            (
                position
                for position, members in enumerate(wizard_members)
                if node.id in members and node is not wizards[position]
            ),
            None,
        )
        if owner is None:
            global_steps.append(node)
        else:
            scoped[owner].append(node)

    scopes = [_resolve_scope(wizard, steps) for wizard, steps in zip(wizards, scoped)]
    if not wizards or global_steps:
        scopes.append(_resolve_scope(None, global_steps))
    return scopes


def classify_button(button: ButtonNode) -> str:
    """Classify a button as back, next, finish or other by its label."""
    text = (button.text or "").strip().lower()
    if _BACK.match(text):
        return "back"
    if _NEXT.match(text):
        return "next"
    if _FINISH.match(text):
        return "finish"
    return "other"


def _first_action_position(step: GuidedFlowStep, subtree: list[Node]) -> int | None:
    if not step.buttons:
        return None
    first = step.buttons[0]
    return next((i for i, node in enumerate(subtree) if node is first), None)


# =============================================================================
# Rule Helpers
# =============================================================================


def _issue(
    rule_id: str,
    node: Node | None,
    message: str,
    details: dict,
    pointers: dict[str, str],
    severity: Severity = Severity.ERROR,
) -> Issue:
    return pattern_issue(
        rule_id,
        severity,
        message,
        GUIDED_FLOW_SOURCE,
        node,
        pointers.get(node.id) if node is not None else None,
        details=details,
        suggestion=GUIDED_FLOW_SUGGESTIONS.get(rule_id),
    )


def _row_id(step: GuidedFlowStep) -> dict:
    return {"actionsRowNodeId": step.actions_row.id} if step.actions_row is not None else {}


# =============================================================================
# MUST
# =============================================================================


def check_steps_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        if not scope.steps:
            continue
        expected = list(range(1, scope.total_steps + 1))
        indices = scope.indices
        contiguous = len(indices) == len(expected) and all(i in indices for i in expected)
        unique = len(set(indices)) == len(indices)
        if contiguous and unique:
            continue
        details = {
            "expectedRange": expected,
            "foundIndices": indices,
            "totalSteps": scope.total_steps,
        }
        if scope.scope_node is not None:
            details["scopeNodeId"] = scope.scope_node.id
        issues.append(
            _issue(
                "wizard-steps-missing",
                scope.scope_node or scope.steps[0].node,
                "Step indices must be unique & contiguous 1..N",
                details,
                pointers,
            )
        )
    return issues


def _is_last(step: GuidedFlowStep, scope: GuidedFlowScope) -> bool:
    return scope.total_steps > 0 and step.index == scope.total_steps


def _has_forward_action(step: GuidedFlowStep) -> bool:
    return any(
        classify_button(button) == "next"
        or (button.role_hint == RoleHint.PRIMARY and classify_button(button) != "back")
        for button in step.buttons
    )


def check_next_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            if _is_last(step, scope) or _has_forward_action(step):
                continue
            issues.append(
                _issue(
                    "wizard-next-missing",
                    step.node,
                    f"Step {step.index} missing Next action",
                    {"stepIndex": step.index, "totalSteps": scope.total_steps, **_row_id(step)},
                    pointers,
                )
            )
    return issues


def check_back_illegal(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        first = next((step for step in scope.steps if step.index == 1), None)
        if first is None:
            continue
        if any(classify_button(button) == "back" for button in first.buttons):
            issues.append(
                _issue(
                    "wizard-back-illegal",
                    first.node,
                    "Back button not allowed on first step",
                    {"stepIndex": first.index, **_row_id(first)},
                    pointers,
                )
            )
    return issues


def check_back_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            if step.index <= 1 or step.index >= scope.total_steps:
                continue
            if any(classify_button(button) == "back" for button in step.buttons):
                continue
            issues.append(
                _issue(
                    "wizard-back-missing",
                    step.node,
                    f"Step {step.index} missing Back action",
                    {"stepIndex": step.index, "totalSteps": scope.total_steps, **_row_id(step)},
                    pointers,
                )
            )
    return issues


def check_finish_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            if not _is_last(step, scope):
                continue
            if any(classify_button(button) == "finish" for button in step.buttons):
                continue
            issues.append(
                _issue(
                    "wizard-finish-missing",
                    step.node,
                    f"Last step {step.index} missing Finish action",
                    {"stepIndex": step.index, "totalSteps": scope.total_steps, **_row_id(step)},
                    pointers,
                )
            )
    return issues


def check_field_after_actions(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            subtree = traverse_pre_order(step.node)
            boundary = _first_action_position(step, subtree)
            if boundary is None:
                continue
            misplaced = [
                node.id for node in subtree[boundary + 1 :] if isinstance(node, FieldNode)
            ]
            if not misplaced:
                continue
            issues.append(
                _issue(
                    "wizard-field-after-actions",
                    step.node,
                    f"Fields appear after actions row in step {step.index}",
                    {
                        "stepIndex": step.index,
                        "actionsRowId": step.actions_row.id,
                        "misplacedFieldIds": misplaced,
                    },
                    pointers,
                )
            )
    return issues


def check_multiple_primary(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            primary = [b.id for b in step.buttons if b.role_hint == RoleHint.PRIMARY]
            if len(primary) <= 1:
                continue
            issues.append(
                _issue(
                    "wizard-multiple-primary",
                    step.node,
                    f"Multiple primary actions in step {step.index}",
                    {"stepIndex": step.index, "primaryButtonIds": primary},
                    pointers,
                )
            )
    return issues


# =============================================================================
# SHOULD
# =============================================================================


def find_progress_node(root: Node, container: Node) -> Node | None:
    """Locate a wizard's progress indicator.

    An explicit ``progressNodeId`` must name a visible node anywhere in the
    tree. Otherwise the first few nodes of the container are searched for
    a "Step n of m" Text or a ``progress-indicator`` affordance.
    """
    progress_id = container.guided_flow.progress_node_id
    if progress_id:
        return find_node(root, progress_id)

    head = traverse_pre_order(container)[:PROGRESS_SEARCH_DEPTH]
    for node in head:
        if isinstance(node, TextNode) and _PROGRESS_TEXT.search(node.text):
            return node
    for node in head:
        if PROGRESS_AFFORDANCE in (node.affordances or []):
            return node
    return None


def check_progress_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        container = scope.scope_node
        if container is None or not container.guided_flow.has_progress:
            continue
        if find_progress_node(root, container) is not None:
            continue
        issues.append(
            _issue(
                "wizard-progress-missing",
                container,
                "Progress indicator missing for wizard",
                {"scopeNodeId": container.id, "hasProgress": True},
                pointers,
                Severity.WARN,
            )
        )
    return issues


def check_actions_order(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            order = [classify_button(button) for button in step.buttons]
            if "back" not in order:
                continue
            forward = "finish" if "finish" in order else "next"
            if forward not in order or order.index("back") < order.index(forward):
                continue
            issues.append(
                _issue(
                    "wizard-actions-order",
                    step.node,
                    f"Back action appears after Next/Finish in step {step.index}",
                    {"stepIndex": step.index, "order": order},
                    pointers,
                    Severity.WARN,
                )
            )
    return issues


def check_step_title_missing(root: Node) -> list[Issue]:
    pointers = build_pointer_map(root)
    issues: list[Issue] = []
    for scope in resolve_guided_flow_scopes(root):
        for step in scope.steps:
            subtree = traverse_pre_order(step.node)
            boundary = _first_action_position(step, subtree)
            if any(isinstance(node, TextNode) for node in subtree[:boundary]):
                continue
            issues.append(
                _issue(
                    "wizard-step-title-missing",
                    step.node,
                    f"Step {step.index} missing title/heading",
                    {"stepIndex": step.index},
                    pointers,
                    Severity.WARN,
                )
            )
    return issues


def _primary_button(step: GuidedFlowStep) -> ButtonNode | None:
    for button in step.buttons:
        if button.role_hint == RoleHint.PRIMARY:
            return button
    return next(
        (b for b in step.buttons if classify_button(b) in ("next", "finish")), None
    )


def build_primary_below_fold_check(
    frames: Iterable[Frame] | None = None,
    viewport_height: float | None = None,
):
    """Build the wizard-primary-below-fold check.

    Args:
        frames: Frames from a layout run at the smallest viewport.
        viewport_height: Height of that viewport.
    """
    by_id = {frame.id: frame for frame in frames or []}

    def check_primary_below_fold(root: Node) -> list[Issue]:
        if not by_id or viewport_height is None:
            return []
        pointers = build_pointer_map(root)
        issues: list[Issue] = []
        for scope in resolve_guided_flow_scopes(root):
            for step in scope.steps:
                primary = _primary_button(step)
                frame = by_id.get(primary.id) if primary is not None else None
                if frame is None or frame.bottom <= viewport_height:
                    continue
                issues.append(
                    _issue(
                        "wizard-primary-below-fold",
                        step.node,
                        f"Primary action {primary.id} of step {step.index} is below the fold",
                        {
                            "stepIndex": step.index,
                            "primaryId": primary.id,
                            "bottom": frame.bottom,
                            "viewportHeight": viewport_height,
                        },
                        pointers,
                        Severity.WARN,
                    )
                )
        return issues

    return check_primary_below_fold


# =============================================================================
# Pattern
# =============================================================================


def build_guided_flow(
    frames: Iterable[Frame] | None = None,
    viewport_height: float | None = None,
) -> Pattern:
    """Build Guided.Flow, optionally aware of a layout run's frames."""
    return Pattern(
        name=PATTERN_NAME,
        source=GUIDED_FLOW_SOURCE,
        must=(
            Rule(
                "wizard-steps-missing",
                RuleLevel.MUST,
                "Steps must form contiguous 1..N sequence",
                check_steps_missing,
            ),
            Rule(
                "wizard-next-missing",
                RuleLevel.MUST,
                "Each non-final step must have a next action",
                check_next_missing,
            ),
            Rule(
                "wizard-back-illegal",
                RuleLevel.MUST,
                "Back action must not appear on first step",
                check_back_illegal,
            ),
            Rule(
                "wizard-back-missing",
                RuleLevel.MUST,
                "Intermediate steps must include back action",
                check_back_missing,
            ),
            Rule(
                "wizard-finish-missing",
                RuleLevel.MUST,
                "Last step must provide a finish/submit action",
                check_finish_missing,
            ),
            Rule(
                "wizard-field-after-actions",
                RuleLevel.MUST,
                "Fields must appear before actions row in a step",
                check_field_after_actions,
            ),
            Rule(
                "wizard-multiple-primary",
                RuleLevel.MUST,
                "Only one primary action per step",
                check_multiple_primary,
            ),
        ),
        should=(
            Rule(
                "wizard-progress-missing",
                RuleLevel.SHOULD,
                "Progress indicator should exist when hasProgress=true",
                check_progress_missing,
            ),
            Rule(
                "wizard-actions-order",
                RuleLevel.SHOULD,
                "Back should precede Next/Finish in action sequence",
                check_actions_order,
            ),
            Rule(
                "wizard-step-title-missing",
                RuleLevel.SHOULD,
                "Each step should expose a visible title",
                check_step_title_missing,
            ),
            Rule(
                "wizard-primary-below-fold",
                RuleLevel.SHOULD,
                "Primary action should appear within the smallest viewport",
                build_primary_below_fold_check(frames, viewport_height),
            ),
        ),
    )


GUIDED_FLOW = build_guided_flow()


__all__ = [
    "GUIDED_FLOW",
    "GUIDED_FLOW_SUGGESTIONS",
    "GuidedFlowStep",
    "GuidedFlowScope",
    "build_guided_flow",
    "build_primary_below_fold_check",
    "classify_button",
    "detect_actions",
    "find_progress_node",
    "resolve_guided_flow_scopes",
]
