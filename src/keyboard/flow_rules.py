"""Keyboard flow rules for Forms.

- cancel-before-primary (warn): a Cancel/Back button precedes the primary
  action in the actions row, so Tab reaches the escape hatch first
- field-after-actions (error): a Field is reached after the first action
"""

from __future__ import annotations

import re

from src.issues import Issue, Severity
from src.schema import (
    ButtonNode,
    FieldNode,
    FormNode,
    Node,
    ROOT_POINTER,
    RoleHint,
    iter_pre_order,
)

_CANCEL_PATTERN = re.compile(r"\b(cancel|back)\b", re.IGNORECASE)


def is_cancel_button(node: Node) -> bool:
    """Return True for Buttons labelled Cancel or Back."""
    return isinstance(node, ButtonNode) and bool(_CANCEL_PATTERN.search(node.text or ""))


def check_cancel_before_primary(form: FormNode, pointer: str = ROOT_POINTER) -> Issue | None:
    """Warn when a Cancel/Back button precedes the first primary button."""
    actions = [action for action in form.actions if action.visible]
    primary_index = next(
        (
            i
            for i, action in enumerate(actions)
            if isinstance(action, ButtonNode) and action.role_hint == RoleHint.PRIMARY
        ),
        None,
    )
    if primary_index is None:
        return None

    cancel = next((a for a in actions[:primary_index] if is_cancel_button(a)), None)
    if cancel is None:
        return None

    return Issue(
        id="cancel-before-primary",
        severity=Severity.WARN,
        message=(
            f"Cancel/back button {cancel.id} appears before the primary button "
            f"in Form {form.id}"
        ),
        node_id=form.id,
        json_pointer=pointer,
        details={"cancelId": cancel.id, "primaryId": actions[primary_index].id},
        suggestion="Place the primary action before the cancel/back button",
    )


def check_field_after_actions(form: FormNode, pointer: str = ROOT_POINTER) -> Issue | None:
    """Report the last Field reached after the Form's first action."""
    action_ids = {action.id for action in form.actions}

    first_action: int | None = None
    offending: tuple[FieldNode, str] | None = None
    for index, (node, node_pointer) in enumerate(iter_pre_order(form, pointer=pointer)):
        if first_action is None and node.id in action_ids:
            first_action = index
        if first_action is not None and isinstance(node, FieldNode):
            offending = (node, node_pointer)

    if offending is None:
        return None

    field, field_pointer = offending
    return Issue(
        id="field-after-actions",
        severity=Severity.ERROR,
        message=f'Field "{field.label}" appears after action buttons in Form {form.id}',
        node_id=field.id,
        json_pointer=field_pointer,
        details={"formId": form.id},
        suggestion="Move all fields before the action buttons",
    )


def find_forms(root: Node) -> list[tuple[FormNode, str]]:
    """Return every visible Form with its JSON pointer."""
    return [
        (node, pointer)
        for node, pointer in iter_pre_order(root)
        if isinstance(node, FormNode)
    ]


def validate_flow_rules(root: Node) -> list[Issue]:
    """Run every Form flow rule over the tree."""
    issues: list[Issue] = []
    for form, pointer in find_forms(root):
        for check in (check_cancel_before_primary, check_field_after_actions):
            issue = check(form, pointer)
            if issue is not None:
                issues.append(issue)
    return issues


__all__ = [
    "is_cancel_button",
    "check_cancel_before_primary",
    "check_field_after_actions",
    "find_forms",
    "validate_flow_rules",
]
