"""Grid layout with column reduction."""

from __future__ import annotations

import math

from src.issues import Severity
from src.schema import GridNode

from .models import Frame, LayoutContext, Placement
from .stack import LayoutChild

_EPSILON = 1e-6


def effective_columns(
    columns: int, content_width: float, gap: float, min_col_width: float | None
) -> int:
    """Reduce the column count until every column is at least ``min_col_width``.

    Example:
        >>> effective_columns(4, 250, 8, 100)
        2
    """
    if min_col_width is None or min_col_width + gap <= 0:
        return columns
    fit = math.floor((content_width + gap) / (min_col_width + gap))
    return max(1, min(columns, fit))


def cell_width(content_width: float, columns: int, gap: float) -> float:
    """Width of one cell once gaps are removed."""
    return max(0.0, (content_width - (columns - 1) * gap) / columns)


def layout_grid(
    node: GridNode, width: float, ctx: LayoutContext, layout_child: LayoutChild
) -> Placement:
    """Place children row-major into equal-width cells."""
    gap = node.gap or 0
    ctx.check_spacing(node, "gap", gap)

    cols = effective_columns(node.columns, width, gap, node.min_col_width)
    cell_w = cell_width(width, cols, gap)

    frames: list[Frame] = []
    y = 0.0
    row_h = 0.0
    placed_count = 0
    for child in node.children:
        placed = layout_child(child, cell_w)
        if placed is None:
            continue
        if placed.w > cell_w + _EPSILON:
            ctx.report(
                "overflow-x",
                Severity.ERROR,
                f"Child {child.id} width {placed.w:g} exceeds Grid {node.id} cell width {cell_w:g}",
                child,
                details={"containerId": node.id, "cellWidth": cell_w, "columns": cols},
                expected=cell_w,
                found=placed.w,
            )

        col = placed_count % cols
        if col == 0 and placed_count > 0:
            y += row_h + gap
            row_h = 0.0
        frames.extend(placed.translated(col * (cell_w + gap), y))
        row_h = max(row_h, placed.h)
        placed_count += 1

    height = y + row_h if placed_count else 0
    return Placement.container(node.id, width, height, frames)


__all__ = ["effective_columns", "cell_width", "layout_grid"]
