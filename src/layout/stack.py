"""Stack and Form layout.

Children are laid out at the origin by the caller-supplied ``layout_child``
callback and then translated into place. Hidden children return None and
take no space.
"""

from __future__ import annotations

from typing import Callable

from src.issues import Severity
from src.schema import Align, BaseNode, Direction, FormNode, SizePolicy, StackNode

from .models import Frame, LayoutContext, Placement

LayoutChild = Callable[[BaseNode, float], Placement | None]

# Tolerance for float noise in estimated widths
_EPSILON = 1e-6


def layout_stack(
    node: StackNode, width: float, ctx: LayoutContext, layout_child: LayoutChild
) -> Placement:
    """Lay out a Stack according to its direction and wrap flag."""
    padding = node.padding or 0
    gap = node.gap or 0
    ctx.check_spacing(node, "padding", padding)
    ctx.check_spacing(node, "gap", gap)

    if node.direction == Direction.HORIZONTAL:
        if node.wrap:
            return _layout_horizontal_wrap(node, width, padding, gap, layout_child)
        return _layout_horizontal(node, width, padding, gap, ctx, layout_child)
    return _layout_vertical(node, node.children, width, padding, gap, layout_child)


def layout_form(
    node: FormNode, width: float, ctx: LayoutContext, layout_child: LayoutChild
) -> Placement:
    """Lay out a Form as one column: fields, then actions."""
    return _layout_vertical(node, node.children_of(), width, 0, 0, layout_child)


def _layout_vertical(
    node: BaseNode,
    children: list[BaseNode],
    width: float,
    padding: float,
    gap: float,
    layout_child: LayoutChild,
) -> Placement:
    content_w = max(0.0, width - 2 * padding)
    align = getattr(node, "align", Align.START)

    frames: list[Frame] = []
    y = padding
    placed_any = False
    for child in children:
        placed = layout_child(child, content_w)
        if placed is None:
            continue
        if align == Align.STRETCH and child.width_policy != SizePolicy.FIXED:
            placed = placed.resized(content_w)

        if align == Align.CENTER:
            x = padding + (content_w - placed.w) / 2
        elif align == Align.END:
            x = padding + (content_w - placed.w)
        else:
            x = padding

        frames.extend(placed.translated(x, y))
        y += placed.h + gap
        placed_any = True

    height = y - gap + padding if placed_any else 2 * padding
    return Placement.container(node.id, width, height, frames)


def _layout_horizontal(
    node: StackNode,
    width: float,
    padding: float,
    gap: float,
    ctx: LayoutContext,
    layout_child: LayoutChild,
) -> Placement:
    content_w = max(0.0, width - 2 * padding)

    row: list[tuple[Placement, float]] = []
    x = padding
    for child in node.children:
        placed = layout_child(child, content_w)
        if placed is None:
            continue
        if x + placed.w > width + _EPSILON:
            ctx.report(
                "overflow-x",
                Severity.ERROR,
                f"Child {child.id} overflows horizontal Stack {node.id}",
                child,
                details={"containerId": node.id, "containerWidth": width},
                expected=width,
                found=x + placed.w,
            )
        row.append((placed, x))
        x += placed.w + gap

    row_h = max((placed.h for placed, _ in row), default=0)
    frames: list[Frame] = []
    for placed, child_x in row:
        if node.align == Align.CENTER:
            y = padding + (row_h - placed.h) / 2
        elif node.align == Align.END:
            y = padding + (row_h - placed.h)
        else:
            y = padding
        frames.extend(placed.translated(child_x, y))

    return Placement.container(node.id, width, row_h + 2 * padding, frames)


def _layout_horizontal_wrap(
    node: StackNode,
    width: float,
    padding: float,
    gap: float,
    layout_child: LayoutChild,
) -> Placement:
    content_w = max(0.0, width - 2 * padding)

    frames: list[Frame] = []
    x = padding
    y = padding
    row_h = 0.0
    placed_any = False
    for child in node.children:
        placed = layout_child(child, content_w)
        if placed is None:
            continue
        if placed_any and x + placed.w > width + _EPSILON:
            x = padding
            y += row_h + gap
            row_h = 0.0
        frames.extend(placed.translated(x, y))
        row_h = max(row_h, placed.h)
        x += placed.w + gap
        placed_any = True

    height = y + row_h + padding if placed_any else 2 * padding
    return Placement.container(node.id, width, height, frames)


__all__ = ["LayoutChild", "layout_stack", "layout_form"]
