"""Keyboard tab-order analysis.

Builds the Tab sequence of a scaffold the way a browser would order it:
positive tabIndex values first in ascending order, then tabIndex 0 in
document order. Focusable nodes with a negative tabIndex never join the
sequence and are reported as unreachable.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from src.core.log import get_logger
from src.issues import Issue, Severity
from src.layout import apply_responsive_overrides_recursive
from src.schema import (
    ButtonNode,
    CamelModel,
    FieldNode,
    Node,
    Scaffold,
    build_pointer_map,
    iter_pre_order,
    parse_scaffold,
)

from .flow_rules import validate_flow_rules

logger = get_logger("keyboard")


class KeyboardOutput(CamelModel):
    """Tab sequence, unreachable nodes and keyboard issues."""

    sequence: list[str] = Field(default_factory=list)
    unreachable: list[str] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sequence": list(self.sequence),
            "unreachable": list(self.unreachable),
            "issues": [issue.to_dict() for issue in self.issues],
        }


def is_focusable(node: Node) -> bool:
    """Return True when the node can take keyboard focus.

    Buttons and Fields are focusable unless ``focusable`` is False. Any
    other node is focusable only when ``focusable`` is True. Hidden nodes
    never are.
    """
    if not node.visible:
        return False
    if isinstance(node, (ButtonNode, FieldNode)):
        return node.focusable is not False
    return node.focusable is True


def get_tab_index(node: Node) -> int:
    """Return the node's tabIndex, defaulting to 0."""
    return node.tab_index if node.tab_index is not None else 0


def get_focusable_nodes(root: Node) -> list[Node]:
    """Return focusable nodes in document pre-order."""
    return [node for node, _ in iter_pre_order(root) if is_focusable(node)]


def get_all_focusable_ids(root: Node) -> list[str]:
    """Return focusable node ids in document pre-order."""
    return [node.id for node in get_focusable_nodes(root)]


def build_tab_sequence(root: Node) -> list[str]:
    """Order focusable nodes the way Tab visits them.

    Example:
        >>> # tabIndex values [0, 1, 2] in document order
        >>> build_tab_sequence(root)
        ['idx1', 'idx2', 'idx0']
    """
    positive: list[Node] = []
    natural: list[Node] = []
    for node in get_focusable_nodes(root):
        tab_index = get_tab_index(node)
        if tab_index > 0:
            positive.append(node)
        elif tab_index == 0:
            natural.append(node)

    positive.sort(key=get_tab_index)
    return [node.id for node in positive] + [node.id for node in natural]


def analyze_keyboard_flow(
    scaffold: Scaffold | dict[str, Any],
    viewport_width: int | None = None,
) -> KeyboardOutput:
    """Analyze tab order and Form flow rules.

    Args:
        scaffold: Typed scaffold or its raw mapping.
        viewport_width: When given, responsive overrides are resolved first.

    Returns:
        KeyboardOutput. Each unreachable node carries a critical issue.
    """
    scaffold = parse_scaffold(scaffold)
    root = scaffold.screen.root
    if viewport_width is not None:
        root = apply_responsive_overrides_recursive(root, viewport_width)

    sequence = build_tab_sequence(root)
    in_sequence = set(sequence)
    pointers = build_pointer_map(root)

    issues: list[Issue] = []
    unreachable: list[str] = []
    for node_id in get_all_focusable_ids(root):
        if node_id in in_sequence:
            continue
        unreachable.append(node_id)
        issues.append(
            Issue(
                id="unreachable",
                severity=Severity.CRITICAL,
                message=f"Focusable node {node_id} is unreachable in the tab sequence",
                node_id=node_id,
                json_pointer=pointers[node_id],
                suggestion="Remove the negative tabIndex or make the node non-focusable",
            )
        )

    issues.extend(validate_flow_rules(root))
    logger.debug(
        f"Keyboard flow: {len(sequence)} in sequence, "
        f"{len(unreachable)} unreachable, {len(issues)} issues"
    )
    return KeyboardOutput(sequence=sequence, unreachable=unreachable, issues=issues)


__all__ = [
    "KeyboardOutput",
    "is_focusable",
    "get_tab_index",
    "get_focusable_nodes",
    "get_all_focusable_ids",
    "build_tab_sequence",
    "analyze_keyboard_flow",
]
