"""Form.Basic pattern (GOV.UK Design System).

MUST:
- field-has-label: every Field has a non-empty label
- actions-exist: every Form has at least one action
- actions-after-fields: no Field is reached after the Form's first action
- has-error-state: Forms whose fields carry errorText declare an "error" state

SHOULD:
- help-text: short or technical labels come with helpText
"""

from __future__ import annotations

import re

from src.issues import Issue, IssueSource, Severity
from src.schema import FieldNode, FormNode, Node, iter_pre_order

from .lib import Pattern, Rule, RuleLevel, pattern_issue

PATTERN_NAME = "Form.Basic"
SOURCE_NAME = "GOV.UK Design System"
GOVUK_URL = "https://design-system.service.gov.uk"

SHORT_LABEL_LENGTH = 5
TECHNICAL_TERMS = ("id", "uuid", "api", "url", "uri", "ssn", "ein")
_TECHNICAL_PATTERN = re.compile(
    r"\b(" + "|".join(TECHNICAL_TERMS) + r")\b", re.IGNORECASE
)


def _source(path: str) -> IssueSource:
    return IssueSource(pattern=PATTERN_NAME, name=SOURCE_NAME, url=f"{GOVUK_URL}{path}")


TEXT_INPUT_SOURCE = _source("/components/text-input/")
QUESTION_PAGES_SOURCE = _source("/patterns/question-pages/")
ERROR_MESSAGE_SOURCE = _source("/components/error-message/")


def check_field_has_label(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "field-has-label",
            Severity.ERROR,
            f'Field "{node.id}" has empty or missing label',
            TEXT_INPUT_SOURCE,
            node,
            pointer,
            suggestion='Give the field a visible label, e.g. "label": "Email address"',
        )
        for node, pointer in iter_pre_order(root)
        if isinstance(node, FieldNode) and not node.label.strip()
    ]


def check_actions_exist(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "actions-exist",
            Severity.ERROR,
            f'Form "{node.id}" has no action buttons',
            QUESTION_PAGES_SOURCE,
            node,
            pointer,
            suggestion='Add a submit action: {"type":"Button","id":"submit","text":"Continue","roleHint":"primary"}',
        )
        for node, pointer in iter_pre_order(root)
        if isinstance(node, FormNode) and not node.actions
    ]


def _field_after_first_action(form: FormNode) -> bool:
    action_ids = {action.id for action in form.actions}
    seen_action = False
    for node, _ in iter_pre_order(form):
        if node.id in action_ids:
            seen_action = True
        elif seen_action and isinstance(node, FieldNode):
            return True
    return False


def check_actions_after_fields(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "actions-after-fields",
            Severity.ERROR,
            f'Form "{node.id}" has fields appearing after action buttons',
            QUESTION_PAGES_SOURCE,
            node,
            pointer,
            suggestion="Move every field above the actions row",
        )
        for node, pointer in iter_pre_order(root)
        if isinstance(node, FormNode) and _field_after_first_action(node)
    ]


def check_has_error_state(root: Node) -> list[Issue]:
    issues: list[Issue] = []
    for node, pointer in iter_pre_order(root):
        if not isinstance(node, FormNode):
            continue
        error_fields = [
            field.id
            for field in node.fields
            if isinstance(field, FieldNode) and (field.error_text or "").strip()
        ]
        if error_fields and "error" not in (node.states or []):
            issues.append(
                pattern_issue(
                    "has-error-state",
                    Severity.ERROR,
                    f'Form "{node.id}" has fields with errorText but states does not include "error"',
                    ERROR_MESSAGE_SOURCE,
                    node,
                    pointer,
                    details={"fieldIds": error_fields},
                    suggestion='Add "error" to the form states: "states": ["default", "error"]',
                )
            )
    return issues


def needs_help_text(field: FieldNode) -> bool:
    """Return True when the label is too short or technical to stand alone."""
    if field.help_text:
        return False
    return len(field.label) <= SHORT_LABEL_LENGTH or bool(
        _TECHNICAL_PATTERN.search(field.label)
    )


def check_help_text(root: Node) -> list[Issue]:
    return [
        pattern_issue(
            "help-text",
            Severity.WARN,
            f'Field "{node.id}" with label "{node.label}" should have helpText for clarity',
            TEXT_INPUT_SOURCE,
            node,
            pointer,
            suggestion="Add helpText explaining the expected value and its format",
        )
        for node, pointer in iter_pre_order(root)
        if isinstance(node, FieldNode) and needs_help_text(node)
    ]


FORM_BASIC = Pattern(
    name=PATTERN_NAME,
    source=QUESTION_PAGES_SOURCE,
    must=(
        Rule("field-has-label", RuleLevel.MUST, "Every Field.label must be non-empty", check_field_has_label),
        Rule("actions-exist", RuleLevel.MUST, "Form.actions must not be empty", check_actions_exist),
        Rule(
            "actions-after-fields",
            RuleLevel.MUST,
            "Actions must appear after all fields in the same Form",
            check_actions_after_fields,
        ),
        Rule(
            "has-error-state",
            RuleLevel.MUST,
            'If any Field.errorText exists, Form.states must include "error"',
            check_has_error_state,
        ),
    ),
    should=(
        Rule("help-text", RuleLevel.SHOULD, "Provide helpText for ambiguous labels", check_help_text),
    ),
)


__all__ = [
    "FORM_BASIC",
    "TECHNICAL_TERMS",
    "needs_help_text",
    "check_field_has_label",
    "check_actions_exist",
    "check_actions_after_fields",
    "check_has_error_state",
    "check_help_text",
]
