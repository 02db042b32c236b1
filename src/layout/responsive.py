"""Responsive override cascade.

A node's ``at`` map holds partial nodes keyed by ``>=N`` or ``<=N``. At a
viewport width W, every ``>=T`` block with T <= W is applied in ascending T,
then every ``<=T`` block with T >= W in descending T. Later blocks win, so
at equal specificity ``<=`` beats ``>=``.

Example:
    >>> node = parse_node({
    ...     "type": "Text", "id": "t", "text": "Hi",
    ...     "at": {">=320": {"fontSize": 18}, "<=768": {"fontSize": 14}},
    ... })
    >>> apply_responsive_overrides(node, 640).font_size
    14.0
"""

from __future__ import annotations

import re
from typing import Any

from src.core.log import get_logger
from src.schema import BoxNode, FormNode, GridNode, Node, StackNode, parse_node

logger = get_logger("layout.responsive")

_AT_KEY_PATTERN = re.compile(r"^(>=|<=)(\d+)$")


def parse_at_key(key: str) -> tuple[str, int] | None:
    """Split an override key into ``(operator, threshold)``.

    Returns:
        The parsed pair, or None for malformed keys (which are ignored).
    """
    match = _AT_KEY_PATTERN.match(key)
    if match is None:
        return None
    return match.group(1), int(match.group(2))


def shallow_merge(base: dict[str, Any], override: dict[str, Any] | None) -> dict[str, Any]:
    """Merge one override block onto a node mapping.

    Mappings merge key-by-key one level deep. Lists and primitives replace.
    A None block, or a None value for a key, leaves the base untouched.
    """
    merged = dict(base)
    if override is None:
        return merged
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def ordered_overrides(
    at: dict[str, dict[str, Any] | None], width: int
) -> list[tuple[str, dict[str, Any] | None]]:
    """Return the applicable ``(key, block)`` pairs in application order."""
    min_width: list[tuple[int, str]] = []
    max_width: list[tuple[int, str]] = []
    for key in at:
        parsed = parse_at_key(key)
        if parsed is None:
            continue
        operator, threshold = parsed
        if operator == ">=" and threshold <= width:
            min_width.append((threshold, key))
        elif operator == "<=" and threshold >= width:
            max_width.append((threshold, key))

    # sorted() is stable, so equal thresholds keep declaration order
    ordered = [key for _, key in sorted(min_width, key=lambda item: item[0])]
    ordered += [key for _, key in sorted(max_width, key=lambda item: -item[0])]
    return [(key, at[key]) for key in ordered]


def apply_responsive_overrides(node: Node, width: int) -> Node:
    """Resolve one node's overrides at ``width``.

    The resolved node never carries ``at``. A node without overrides is
    returned unchanged, so resolving twice yields the same result.
    """
    if not node.at:
        return node

    data = node.model_dump(by_alias=True, exclude={"at"})
    applied: list[str] = []
    for key, block in ordered_overrides(node.at, width):
        data = shallow_merge(data, block)
        applied.append(key)
    data.pop("at", None)

    if applied:
        logger.debug(f"Node {node.id} at {width}px: applied {', '.join(applied)}")
    return parse_node(data)


def apply_responsive_overrides_recursive(node: Node, width: int) -> Node:
    """Resolve overrides on a whole subtree.

    Each node is resolved before descending, so children introduced by an
    override are themselves resolved. Hidden nodes are resolved too, since
    an override may make them visible.
    """
    resolved = apply_responsive_overrides(node, width)

    updates: dict[str, Any] = {}
    if isinstance(resolved, (StackNode, GridNode)):
        children = [apply_responsive_overrides_recursive(c, width) for c in resolved.children]
        if _changed(resolved.children, children):
            updates["children"] = children
    elif isinstance(resolved, BoxNode) and resolved.child is not None:
        child = apply_responsive_overrides_recursive(resolved.child, width)
        if child is not resolved.child:
            updates["child"] = child
    elif isinstance(resolved, FormNode):
        fields = [apply_responsive_overrides_recursive(f, width) for f in resolved.fields]
        actions = [apply_responsive_overrides_recursive(a, width) for a in resolved.actions]
        if _changed(resolved.fields, fields):
            updates["fields"] = fields
        if _changed(resolved.actions, actions):
            updates["actions"] = actions

    if not updates:
        return resolved
    return resolved.model_copy(update=updates)


def _changed(before: list[Node], after: list[Node]) -> bool:
    return any(old is not new for old, new in zip(before, after))


__all__ = [
    "parse_at_key",
    "shallow_merge",
    "ordered_overrides",
    "apply_responsive_overrides",
    "apply_responsive_overrides_recursive",
]
