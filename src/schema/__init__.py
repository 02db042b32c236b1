"""Scaffold schema: typed node tree, settings and traversal.

This package is the source of truth for the scaffold document model.

Example:
    >>> from src.schema import parse_scaffold, traverse_pre_order
    >>> scaffold = parse_scaffold(raw)
    >>> [node.id for node in traverse_pre_order(scaffold.screen.root)]
"""

from .lib import (
    CONTAINER_TYPES,
    DEFAULT_BREAKPOINTS,
    DEFAULT_MIN_TOUCH_TARGET,
    DEFAULT_SPACING_SCALE,
    Align,
    BaseNode,
    Behaviors,
    BoxNode,
    ButtonNode,
    CamelModel,
    Direction,
    DisclosureBehavior,
    FieldNode,
    FlowRole,
    FormNode,
    GridNode,
    GuidedFlowBehavior,
    Node,
    RoleHint,
    Scaffold,
    Screen,
    Settings,
    Size,
    SizePolicy,
    StackNode,
    TableNode,
    TableResponsive,
    TextNode,
    TouchTarget,
    is_container,
    parse_node,
    parse_scaffold,
)
from .traversal import (
    ROOT_POINTER,
    build_json_pointer,
    build_parent_map,
    build_pointer_map,
    child_pointer,
    escape_pointer_token,
    find_node,
    is_descendant,
    iter_pre_order,
    parse_json_pointer,
    resolve_json_pointer,
    traverse_pre_order,
    unescape_pointer_token,
)

__all__ = [
    # Base
    "CamelModel",
    # Enums
    "SizePolicy",
    "Direction",
    "Align",
    "RoleHint",
    "FlowRole",
    # Value objects
    "Size",
    "DisclosureBehavior",
    "GuidedFlowBehavior",
    "Behaviors",
    "TableResponsive",
    # Nodes
    "BaseNode",
    "StackNode",
    "GridNode",
    "BoxNode",
    "TextNode",
    "ButtonNode",
    "FieldNode",
    "FormNode",
    "TableNode",
    "Node",
    "CONTAINER_TYPES",
    "is_container",
    # Scaffold
    "DEFAULT_SPACING_SCALE",
    "DEFAULT_MIN_TOUCH_TARGET",
    "DEFAULT_BREAKPOINTS",
    "TouchTarget",
    "Settings",
    "Screen",
    "Scaffold",
    "parse_node",
    "parse_scaffold",
    # Traversal
    "ROOT_POINTER",
    "iter_pre_order",
    "traverse_pre_order",
    "build_pointer_map",
    "build_parent_map",
    "find_node",
    "is_descendant",
    # JSON pointers
    "build_json_pointer",
    "parse_json_pointer",
    "resolve_json_pointer",
    "child_pointer",
    "escape_pointer_token",
    "unescape_pointer_token",
]
