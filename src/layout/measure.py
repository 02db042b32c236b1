"""Heuristic measurement of leaf nodes.

Text width is estimated from character count; it is not browser-accurate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.schema import (
    ButtonNode,
    FieldNode,
    Node,
    Size,
    SizePolicy,
    TableNode,
    TextNode,
    TouchTarget,
)

DEFAULT_FONT_SIZE = 16
CHAR_WIDTH_FACTOR = 0.55
LINE_HEIGHT_FACTOR = 1.4
CONTROL_PADDING_X = 24
TABLE_HEADER_HEIGHT = 48
TABLE_ROW_HEIGHT = 40
DEFAULT_TABLE_ROWS = 5


@dataclass(frozen=True)
class Extent:
    """Measured width and height."""

    w: float
    h: float


def estimate_text_width(text: str, font_size: float = DEFAULT_FONT_SIZE) -> float:
    """Estimate the single-line width of ``text``."""
    return font_size * CHAR_WIDTH_FACTOR * len(text)


def measure_text(node: TextNode, available_width: float) -> Extent:
    """Measure a Text node, wrapping onto more lines when it does not fit.

    Args:
        node: Text node.
        available_width: Width offered by the parent.

    Returns:
        Width and height. A non-positive available width yields zero width
        and a single line of height.
    """
    font_size = node.font_size if node.font_size is not None else DEFAULT_FONT_SIZE
    line_height = font_size * LINE_HEIGHT_FACTOR
    if node.intrinsic_text_width is not None:
        single_line = node.intrinsic_text_width
    else:
        single_line = estimate_text_width(node.text, font_size)

    if available_width <= 0:
        return Extent(w=0, h=line_height)
    if available_width < single_line:
        lines = math.ceil(single_line / available_width)
        return Extent(w=min(single_line, available_width), h=lines * line_height)
    return Extent(w=single_line, h=line_height)


def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None:
        value = max(value, low)
    if high is not None:
        value = min(value, high)
    return value


def measure_control(
    text_width: float,
    width_policy: str,
    height_policy: str,
    min_size: Size | None,
    max_size: Size | None,
    available_width: float,
    touch: TouchTarget,
) -> Extent:
    """Shared sizing for Buttons and Fields.

    Width follows the width policy, is clamped to the min/max constraints,
    then floored at the touch-target width. Height follows the height policy
    and is clamped to the constraints afterwards.
    """
    min_w = min_size.w if min_size else None
    min_h = min_size.h if min_size else None
    max_w = max_size.w if max_size else None
    max_h = max_size.h if max_size else None

    if width_policy == SizePolicy.FILL:
        width = available_width
    elif width_policy == SizePolicy.FIXED:
        width = min_w if min_w is not None else text_width + CONTROL_PADDING_X
    else:
        width = min(text_width + CONTROL_PADDING_X, available_width)
    width = max(_clamp(width, min_w, max_w), touch.w)

    if height_policy == SizePolicy.FILL:
        height = touch.h
    elif height_policy == SizePolicy.FIXED:
        height = min_h if min_h is not None else touch.h
    else:
        height = max(touch.h, min_h or 0)
    height = _clamp(height, min_h, max_h)

    return Extent(w=width, h=height)


def measure_button(node: ButtonNode, available_width: float, touch: TouchTarget) -> Extent:
    """Measure a Button from its label."""
    return measure_control(
        estimate_text_width(node.text),
        node.width_policy,
        node.height_policy,
        node.min_size,
        node.max_size,
        available_width,
        touch,
    )


def measure_field(node: FieldNode, available_width: float, touch: TouchTarget) -> Extent:
    """Measure a Field from its label."""
    return measure_control(
        estimate_text_width(node.label),
        node.width_policy,
        node.height_policy,
        node.min_size,
        node.max_size,
        available_width,
        touch,
    )


def measure_table(node: TableNode, available_width: float) -> Extent:
    """Tables take the full width; height grows with the row count."""
    rows = node.rows if node.rows is not None else DEFAULT_TABLE_ROWS
    return Extent(w=available_width, h=TABLE_HEADER_HEIGHT + TABLE_ROW_HEIGHT * rows)


def measure_leaf(node: Node, available_width: float, touch: TouchTarget) -> Extent:
    """Dispatch measurement for any leaf node type.

    Raises:
        TypeError: If ``node`` is a container.
    """
    if isinstance(node, TextNode):
        return measure_text(node, available_width)
    if isinstance(node, ButtonNode):
        return measure_button(node, available_width, touch)
    if isinstance(node, FieldNode):
        return measure_field(node, available_width, touch)
    if isinstance(node, TableNode):
        return measure_table(node, available_width)
    raise TypeError(f"Cannot measure container node '{node.id}' of type {node.type}")


__all__ = [
    "DEFAULT_FONT_SIZE",
    "CHAR_WIDTH_FACTOR",
    "LINE_HEIGHT_FACTOR",
    "CONTROL_PADDING_X",
    "Extent",
    "estimate_text_width",
    "measure_text",
    "measure_control",
    "measure_button",
    "measure_field",
    "measure_table",
    "measure_leaf",
]
