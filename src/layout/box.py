"""Box layout: a single child inset by padding."""

from __future__ import annotations

from src.schema import BoxNode

from .models import LayoutContext, Placement
from .stack import LayoutChild


def layout_box(
    node: BoxNode, width: float, ctx: LayoutContext, layout_child: LayoutChild
) -> Placement:
    """Inset the child by ``padding`` on every side.

    A Box without a visible child has zero height.
    """
    padding = node.padding or 0
    ctx.check_spacing(node, "padding", padding)

    placed = None
    if node.child is not None:
        placed = layout_child(node.child, max(0.0, width - 2 * padding))
    if placed is None:
        return Placement.container(node.id, width, 0, [])

    return Placement.container(
        node.id, width, placed.h + 2 * padding, placed.translated(padding, padding)
    )


__all__ = ["layout_box"]
