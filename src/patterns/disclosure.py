"""Helpers for locating disclosure controls, labels and hidden actions."""

from __future__ import annotations

import re

from src.schema import (
    ButtonNode,
    FieldNode,
    Node,
    RoleHint,
    TextNode,
    iter_pre_order,
    traverse_pre_order,
)

CONTROL_KEYWORDS = re.compile(
    r"\b(show|hide|expand|collapse|advanced|details|more)\b", re.IGNORECASE
)
CONTROL_AFFORDANCES = frozenset({"chevron", "details"})
MIN_CONTROL_LABEL_LENGTH = 2


def is_collapsible(node: Node) -> bool:
    disclosure = node.disclosure
    return disclosure is not None and disclosure.collapsible


def find_collapsibles(root: Node) -> list[tuple[Node, str]]:
    """Return visible collapsible sections with their pointers."""
    return [(node, pointer) for node, pointer in iter_pre_order(root) if is_collapsible(node)]


def build_sibling_map(root: Node) -> dict[str, list[Node]]:
    """Map node id to the full child list of its parent.

    Sibling lists include hidden children so positions match the document.
    The root has no entry.
    """
    siblings: dict[str, list[Node]] = {}
    for node in traverse_pre_order(root):
        children = node.children_of()
        for child in children:
            siblings[child.id] = children
    return siblings


def index_of(nodes: list[Node], node_id: str) -> int:
    """Return the position of ``node_id`` in ``nodes``, or -1."""
    return next((i for i, node in enumerate(nodes) if node.id == node_id), -1)


def is_control_candidate(node: Node) -> bool:
    """Return True for visible Buttons that look like disclosure toggles."""
    if not isinstance(node, ButtonNode) or not node.visible:
        return False
    if node.text and CONTROL_KEYWORDS.search(node.text):
        return True
    return bool(CONTROL_AFFORDANCES.intersection(node.affordances or []))


def _find_button(root: Node, node_id: str) -> ButtonNode | None:
    for node in traverse_pre_order(root):
        if node.id == node_id and isinstance(node, ButtonNode):
            return node
    return None


def infer_control(node: Node, siblings: list[Node] | None) -> ButtonNode | None:
    """Find a toggle by proximity.

    Preceding siblings are searched closest first, then following siblings,
    then the section's own first child (header row).
    """
    if not siblings:
        return None
    position = index_of(siblings, node.id)
    if position < 0:
        return None

    for sibling in reversed(siblings[:position]):
        if is_control_candidate(sibling):
            return sibling
    for sibling in siblings[position + 1 :]:
        if is_control_candidate(sibling):
            return sibling

    children = node.children_of()
    if children and is_control_candidate(children[0]):
        return children[0]
    return None


def find_control(node: Node, siblings: list[Node] | None) -> ButtonNode | None:
    """Return the control toggling a collapsible section.

    An explicit ``controlsId`` must name a visible Button inside the
    section or among its siblings (and their descendants); when it does
    not, no control is found. Without ``controlsId`` the control is
    inferred by proximity.
    """
    controls_id = node.disclosure.controls_id if node.disclosure else None
    if not controls_id:
        return infer_control(node, siblings)

    control = _find_button(node, controls_id)
    if control is not None:
        return control
    for sibling in siblings or []:
        control = _find_button(sibling, controls_id)
        if control is not None:
            return control
    return None


def has_primary_hidden(node: Node) -> bool:
    """Return True when a collapsed-by-default section contains a primary Button."""
    disclosure = node.disclosure
    if disclosure is None or not disclosure.collapsible:
        return False
    if (disclosure.default_state or "collapsed") != "collapsed":
        return False
    return any(
        isinstance(descendant, ButtonNode) and descendant.role_hint == RoleHint.PRIMARY
        for descendant in traverse_pre_order(node)
    )


def _has_text(node: Node) -> bool:
    return isinstance(node, TextNode) and node.visible and bool(node.text.strip())


def has_label(node: Node, siblings: list[Node] | None, control: ButtonNode | None) -> bool:
    """Return True when the section has a visible label or summary.

    Accepted labels: a control with meaningful text, a Text immediately
    preceding the section, or a Text child of the section.
    """
    if control is not None and len(control.text.strip()) >= MIN_CONTROL_LABEL_LENGTH:
        return True
    if siblings:
        position = index_of(siblings, node.id)
        if position > 0 and _has_text(siblings[position - 1]):
            return True
    return any(_has_text(child) for child in node.children_of())


def affordance_tokens(node: Node) -> set[str]:
    """Return normalized, non-empty affordance tokens."""
    return {token.strip().lower() for token in node.affordances or [] if token.strip()}


def find_first_required_field(root: Node) -> FieldNode | None:
    for node in traverse_pre_order(root):
        if isinstance(node, FieldNode) and node.required is True:
            return node
    return None


__all__ = [
    "CONTROL_KEYWORDS",
    "CONTROL_AFFORDANCES",
    "is_collapsible",
    "find_collapsibles",
    "build_sibling_map",
    "index_of",
    "is_control_candidate",
    "infer_control",
    "find_control",
    "has_primary_hidden",
    "has_label",
    "affordance_tokens",
    "find_first_required_field",
]
