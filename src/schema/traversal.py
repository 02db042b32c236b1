"""Tree traversal and JSON pointer helpers.

All engines walk the scaffold through these helpers so the visibility rule
(hidden nodes prune their whole subtree) lives in one place.
"""

from __future__ import annotations

from typing import Any, Iterator

from .lib import BaseNode, Node

ROOT_POINTER = "/screen/root"


# =============================================================================
# JSON Pointers (RFC 6901)
# =============================================================================


def escape_pointer_token(token: str) -> str:
    """Escape one reference token (``~`` → ``~0``, ``/`` → ``~1``)."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape_pointer_token(token: str) -> str:
    """Reverse `escape_pointer_token`."""
    return token.replace("~1", "/").replace("~0", "~")


def build_json_pointer(*tokens: str | int) -> str:
    """Join reference tokens into a pointer.

    Example:
        >>> build_json_pointer("screen", "root", "children", 1)
        '/screen/root/children/1'
    """
    if not tokens:
        return ""
    return "/" + "/".join(escape_pointer_token(str(token)) for token in tokens)


def parse_json_pointer(pointer: str) -> list[str]:
    """Split a pointer into unescaped reference tokens.

    Raises:
        ValueError: If the pointer is non-empty and does not start with "/".
    """
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"Invalid JSON pointer '{pointer}': must start with '/'")
    return [unescape_pointer_token(token) for token in pointer[1:].split("/")]


def resolve_json_pointer(document: Any, pointer: str) -> Any:
    """Resolve a pointer against nested mappings and lists.

    Raises:
        KeyError: If a token does not address an existing value.
    """
    current = document
    for token in parse_json_pointer(pointer):
        if isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError) as e:
                raise KeyError(f"Pointer '{pointer}' does not resolve at '{token}'") from e
        elif isinstance(current, dict) and token in current:
            current = current[token]
        else:
            raise KeyError(f"Pointer '{pointer}' does not resolve at '{token}'")
    return current


def child_pointer(parent_pointer: str, slot: str, index: int | None) -> str:
    """Extend a node pointer to one of its child slots."""
    pointer = f"{parent_pointer}/{escape_pointer_token(slot)}"
    if index is not None:
        pointer = f"{pointer}/{index}"
    return pointer


# =============================================================================
# Traversal
# =============================================================================


def iter_pre_order(
    root: BaseNode,
    visible_only: bool = True,
    pointer: str = ROOT_POINTER,
) -> Iterator[tuple[Node, str]]:
    """Yield ``(node, json_pointer)`` pairs in document pre-order.

    Args:
        root: Subtree root.
        visible_only: Skip hidden nodes together with their descendants.
        pointer: Pointer of ``root`` inside the scaffold document.
    """
    if visible_only and not root.visible:
        return
    yield root, pointer
    for slot, index, child in root.child_slots():
        yield from iter_pre_order(child, visible_only, child_pointer(pointer, slot, index))


def traverse_pre_order(root: BaseNode, visible_only: bool = True) -> list[Node]:
    """Return the nodes of a subtree in document pre-order."""
    return [node for node, _ in iter_pre_order(root, visible_only)]


def build_pointer_map(root: BaseNode) -> dict[str, str]:
    """Map node id to its JSON pointer for every visible node."""
    return {node.id: pointer for node, pointer in iter_pre_order(root)}


def find_node(root: BaseNode, node_id: str, visible_only: bool = True) -> Node | None:
    """Return the first node with ``node_id``, or None."""
    for node, _ in iter_pre_order(root, visible_only):
        if node.id == node_id:
            return node
    return None


def is_descendant(ancestor: BaseNode, node_id: str) -> bool:
    """Return True when ``node_id`` is a strict descendant of ``ancestor``."""
    return any(
        node.id == node_id
        for node, _ in iter_pre_order(ancestor, visible_only=False)
        if node is not ancestor
    )


def build_parent_map(root: BaseNode) -> dict[str, BaseNode]:
    """Map each node id to its parent node (visible nodes only)."""
    parents: dict[str, BaseNode] = {}
    for node, _ in iter_pre_order(root):
        for child in node.children_of():
            if child.visible:
                parents[child.id] = node
    return parents


__all__ = [
    "ROOT_POINTER",
    "escape_pointer_token",
    "unescape_pointer_token",
    "build_json_pointer",
    "parse_json_pointer",
    "resolve_json_pointer",
    "child_pointer",
    "iter_pre_order",
    "traverse_pre_order",
    "build_pointer_map",
    "find_node",
    "is_descendant",
    "build_parent_map",
]
