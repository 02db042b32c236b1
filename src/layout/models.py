"""Layout data types: frames, viewports, options and the per-call context."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from pydantic import Field

from src.issues import Issue, Severity
from src.schema import DEFAULT_SPACING_SCALE, BaseNode, CamelModel, TouchTarget

_VIEWPORT_PATTERN = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


# =============================================================================
# Viewport
# =============================================================================


@dataclass(frozen=True)
class Viewport:
    """Analysis viewport in CSS pixels."""

    width: int
    height: int

    @property
    def label(self) -> str:
        return format_viewport(self)

    def __str__(self) -> str:
        return self.label


def parse_viewport(value: str | Viewport) -> Viewport:
    """Parse a "WxH" string.

    Args:
        value: Viewport string such as "320x640", or a Viewport.

    Returns:
        The parsed Viewport.

    Raises:
        ValueError: If the string is not two positive integers joined by "x".

    Example:
        >>> parse_viewport("320x640")
        Viewport(width=320, height=640)
    """
    if isinstance(value, Viewport):
        return value
    match = _VIEWPORT_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid viewport '{value}'. Expected format WxH, e.g. 320x640")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid viewport '{value}'. Width and height must be positive")
    return Viewport(width=width, height=height)


def format_viewport(viewport: Viewport) -> str:
    """Format a viewport back to "WxH"."""
    return f"{viewport.width}x{viewport.height}"


# =============================================================================
# Frames and Output
# =============================================================================


class Frame(CamelModel):
    """Absolute box of one visible node at one viewport."""

    id: str = Field(..., description="Node id")
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


class LayoutOutput(CamelModel):
    """Frames and layout issues for one viewport."""

    viewport: str
    frames: list[Frame] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)

    def frame_for(self, node_id: str) -> Frame | None:
        """Return the frame of ``node_id``, or None when not laid out."""
        for frame in self.frames:
            if frame.id == node_id:
                return frame
        return None

    def to_dict(self) -> dict:
        return {
            "viewport": self.viewport,
            "frames": [frame.to_dict() for frame in self.frames],
            "issues": [issue.to_dict() for issue in self.issues],
        }


# =============================================================================
# Options
# =============================================================================


class PrimaryDetection(str, Enum):
    """How the primary action is located for the below-fold check.

    - ROLE_HINT: first visible Button with roleHint "primary"
    - ID_SUBSTRING: first frame whose id contains "primary"
    """

    ROLE_HINT = "role"
    ID_SUBSTRING = "id"


@dataclass
class LayoutOptions:
    """Optional knobs for `compute_layout`.

    Attributes:
        primary_detection: Primary-action lookup; None reads configuration.
    """

    primary_detection: PrimaryDetection | None = None


# =============================================================================
# Layout Context
# =============================================================================


@dataclass
class Placement:
    """Result of laying out one subtree at the origin.

    ``frames[0]`` is the subtree root's own frame; descendants follow in
    pre-order, all relative to the subtree origin.
    """

    w: float
    h: float
    frames: list[Frame]

    @classmethod
    def leaf(cls, node_id: str, w: float, h: float) -> "Placement":
        return cls(w=w, h=h, frames=[Frame(id=node_id, x=0, y=0, w=w, h=h)])

    @classmethod
    def container(
        cls, node_id: str, w: float, h: float, children: list[Frame]
    ) -> "Placement":
        return cls(w=w, h=h, frames=[Frame(id=node_id, x=0, y=0, w=w, h=h), *children])

    def translated(self, dx: float, dy: float) -> list[Frame]:
        """Return the frames shifted by ``(dx, dy)``."""
        return [
            frame.model_copy(update={"x": frame.x + dx, "y": frame.y + dy})
            for frame in self.frames
        ]

    def resized(self, w: float) -> "Placement":
        """Return a copy whose own frame has width ``w``."""
        own = self.frames[0].model_copy(update={"w": w})
        return Placement(w=w, h=self.h, frames=[own, *self.frames[1:]])


@dataclass
class LayoutContext:
    """Shared state for one `compute_layout` call.

    The issue list is an append-only sink scoped to the call; nothing in it
    outlives the returned LayoutOutput.
    """

    viewport: Viewport
    spacing_scale: list[float] = field(default_factory=lambda: list(DEFAULT_SPACING_SCALE))
    min_touch_target: TouchTarget = field(default_factory=TouchTarget)
    pointers: dict[str, str] = field(default_factory=dict)
    issues: list[Issue] = field(default_factory=list)

    def report(
        self,
        issue_id: str,
        severity: Severity,
        message: str,
        node: BaseNode,
        **extra,
    ) -> None:
        """Append an issue tagged with this viewport and the node's pointer."""
        values = {
            "id": issue_id,
            "severity": severity,
            "message": message,
            "node_id": node.id,
            "viewport": self.viewport.label,
        }
        pointer = self.pointers.get(node.id)
        if pointer is not None:
            values["json_pointer"] = pointer
        values.update(extra)
        self.issues.append(Issue(**values))

    def check_spacing(self, node: BaseNode, prop: str, value: float) -> None:
        """Warn when a nonzero spacing value is not on the spacing scale."""
        if value == 0 or value in self.spacing_scale:
            return
        self.report(
            "spacing-off-scale",
            Severity.WARN,
            f"{node.type} {node.id} {prop} {value:g} is not in spacingScale",
            node,
            details={"property": prop, "value": value},
            expected=list(self.spacing_scale),
            found=value,
        )


__all__ = [
    "Viewport",
    "parse_viewport",
    "format_viewport",
    "Frame",
    "LayoutOutput",
    "PrimaryDetection",
    "LayoutOptions",
    "Placement",
    "LayoutContext",
]
