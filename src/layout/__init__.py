"""Layout engine: responsive cascade, measurement and box layout.

Example:
    >>> from src.layout import compute_layout
    >>> output = compute_layout(scaffold, "320x640")
    >>> output.frame_for("submit").bottom
"""

from .lib import (
    check_primary_below_fold,
    compute_layout,
    compute_layouts,
    find_primary_frame,
    layout_node,
)
from .measure import (
    Extent,
    estimate_text_width,
    measure_button,
    measure_field,
    measure_leaf,
    measure_table,
    measure_text,
)
from .models import (
    Frame,
    LayoutContext,
    LayoutOptions,
    LayoutOutput,
    Placement,
    PrimaryDetection,
    Viewport,
    format_viewport,
    parse_viewport,
)
from .responsive import (
    apply_responsive_overrides,
    apply_responsive_overrides_recursive,
    ordered_overrides,
    parse_at_key,
    shallow_merge,
)

__all__ = [
    # Engine
    "compute_layout",
    "compute_layouts",
    "layout_node",
    "find_primary_frame",
    "check_primary_below_fold",
    # Models
    "Frame",
    "LayoutOutput",
    "LayoutOptions",
    "LayoutContext",
    "Placement",
    "PrimaryDetection",
    "Viewport",
    "parse_viewport",
    "format_viewport",
    # Measurement
    "Extent",
    "estimate_text_width",
    "measure_text",
    "measure_button",
    "measure_field",
    "measure_table",
    "measure_leaf",
    # Responsive
    "parse_at_key",
    "shallow_merge",
    "ordered_overrides",
    "apply_responsive_overrides",
    "apply_responsive_overrides_recursive",
]
