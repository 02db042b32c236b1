"""Keyboard flow analysis: tab sequence, reachability and Form flow rules."""

from .flow_rules import (
    check_cancel_before_primary,
    check_field_after_actions,
    find_forms,
    is_cancel_button,
    validate_flow_rules,
)
from .lib import (
    KeyboardOutput,
    analyze_keyboard_flow,
    build_tab_sequence,
    get_all_focusable_ids,
    get_focusable_nodes,
    get_tab_index,
    is_focusable,
)

__all__ = [
    # Sequence
    "KeyboardOutput",
    "analyze_keyboard_flow",
    "build_tab_sequence",
    "get_all_focusable_ids",
    "get_focusable_nodes",
    "get_tab_index",
    "is_focusable",
    # Flow rules
    "check_cancel_before_primary",
    "check_field_after_actions",
    "find_forms",
    "is_cancel_button",
    "validate_flow_rules",
]
