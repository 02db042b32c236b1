"""Layout engine.

Resolves the responsive cascade for a viewport, computes one frame per
visible node, and reports layout defects:

- overflow-x (error): a child passes its horizontal Stack edge or Grid cell
- spacing-off-scale (warn): nonzero gap/padding not on the spacing scale
- touch-target-too-small (warn): focusable Button/Field below the minimum
- primary-below-fold (warn): the primary action ends below the viewport

Example:
    >>> output = compute_layout(scaffold, "320x640")
    >>> [issue.id for issue in output.issues]
    ['primary-below-fold']
"""

from __future__ import annotations

from typing import Any

from src.config import get_default_breakpoints, get_primary_detection
from src.core.log import get_logger
from src.issues import Severity
from src.schema import (
    BoxNode,
    ButtonNode,
    FieldNode,
    FormNode,
    GridNode,
    Node,
    RoleHint,
    Scaffold,
    StackNode,
    build_pointer_map,
    parse_scaffold,
    traverse_pre_order,
)

from .box import layout_box
from .grid import layout_grid
from .measure import measure_leaf
from .models import (
    Frame,
    LayoutContext,
    LayoutOptions,
    LayoutOutput,
    Placement,
    PrimaryDetection,
    Viewport,
    parse_viewport,
)
from .responsive import apply_responsive_overrides_recursive
from .stack import layout_form, layout_stack

logger = get_logger("layout")


def compute_layout(
    scaffold: Scaffold | dict[str, Any],
    viewport: Viewport | str,
    options: LayoutOptions | None = None,
) -> LayoutOutput:
    """Compute frames and layout issues for one viewport.

    Args:
        scaffold: Typed scaffold or its raw mapping.
        viewport: Viewport or "WxH" string.
        options: Optional layout knobs.

    Returns:
        LayoutOutput with pre-order frames and issues tagged with the viewport.

    Raises:
        ValueError: If ``viewport`` is malformed.
    """
    scaffold = parse_scaffold(scaffold)
    viewport = parse_viewport(viewport)
    options = options or LayoutOptions()
    settings = scaffold.settings

    root = apply_responsive_overrides_recursive(scaffold.screen.root, viewport.width)
    ctx = LayoutContext(
        viewport=viewport,
        spacing_scale=list(settings.spacing_scale),
        min_touch_target=settings.min_touch_target,
        pointers=build_pointer_map(root),
    )

    placed = layout_node(root, viewport.width, ctx)
    frames = placed.frames if placed is not None else []

    detection = options.primary_detection or PrimaryDetection(get_primary_detection())
    check_primary_below_fold(root, frames, ctx, detection)

    logger.debug(
        f"Layout {viewport.label}: {len(frames)} frames, {len(ctx.issues)} issues"
    )
    return LayoutOutput(viewport=viewport.label, frames=frames, issues=ctx.issues)


def compute_layouts(
    scaffold: Scaffold | dict[str, Any],
    viewports: list[Viewport | str] | None = None,
    options: LayoutOptions | None = None,
) -> list[LayoutOutput]:
    """Compute layouts for several viewports.

    Viewports default to the scaffold's breakpoints, then to configuration.
    """
    scaffold = parse_scaffold(scaffold)
    if viewports is None:
        viewports = list(scaffold.settings.breakpoints) or get_default_breakpoints()
    return [compute_layout(scaffold, viewport, options) for viewport in viewports]


def layout_node(node: Node, width: float, ctx: LayoutContext) -> Placement | None:
    """Lay out ``node`` at the origin with ``width`` available.

    Returns:
        The subtree placement, or None when the node is hidden.
    """
    if not node.visible:
        return None

    def layout_child(child: Node, available: float) -> Placement | None:
        return layout_node(child, available, ctx)

    if isinstance(node, StackNode):
        return layout_stack(node, width, ctx, layout_child)
    if isinstance(node, GridNode):
        return layout_grid(node, width, ctx, layout_child)
    if isinstance(node, BoxNode):
        return layout_box(node, width, ctx, layout_child)
    if isinstance(node, FormNode):
        return layout_form(node, width, ctx, layout_child)

    extent = measure_leaf(node, width, ctx.min_touch_target)
    if isinstance(node, (ButtonNode, FieldNode)) and node.focusable is not False:
        _check_touch_target(node, extent.w, extent.h, ctx)
    return Placement.leaf(node.id, extent.w, extent.h)


def _check_touch_target(node: Node, w: float, h: float, ctx: LayoutContext) -> None:
    target = ctx.min_touch_target
    if w >= target.w and h >= target.h:
        return
    ctx.report(
        "touch-target-too-small",
        Severity.WARN,
        f"{node.type} {node.id} has touch target {w:g}x{h:g}, "
        f"minimum is {target.w:g}x{target.h:g}",
        node,
        expected={"w": target.w, "h": target.h},
        found={"w": w, "h": h},
    )


def find_primary_frame(
    root: Node, frames: list[Frame], detection: PrimaryDetection
) -> Frame | None:
    """Locate the frame of the screen's primary action."""
    by_id = {frame.id: frame for frame in frames}
    if detection == PrimaryDetection.ID_SUBSTRING:
        return next((frame for frame in frames if "primary" in frame.id), None)
    for node in traverse_pre_order(root):
        if isinstance(node, ButtonNode) and node.role_hint == RoleHint.PRIMARY:
            return by_id.get(node.id)
    return None


def check_primary_below_fold(
    root: Node,
    frames: list[Frame],
    ctx: LayoutContext,
    detection: PrimaryDetection = PrimaryDetection.ROLE_HINT,
) -> None:
    """Warn when the primary action's bottom edge is below the viewport."""
    frame = find_primary_frame(root, frames, detection)
    if frame is None or frame.bottom <= ctx.viewport.height:
        return
    node = next((n for n in traverse_pre_order(root) if n.id == frame.id), None)
    if node is None:
        return
    ctx.report(
        "primary-below-fold",
        Severity.WARN,
        f"Primary action {frame.id} is below the fold at viewport {ctx.viewport.label}",
        node,
        expected=ctx.viewport.height,
        found=frame.bottom,
    )


__all__ = [
    "compute_layout",
    "compute_layouts",
    "layout_node",
    "find_primary_frame",
    "check_primary_below_fold",
]
