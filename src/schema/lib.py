"""Authoritative scaffold model.

This module is the single source of truth for the shape of a scaffold:
a screen holding one recursive tree of typed nodes, plus analysis settings.
Every engine consumes these models and nothing else.

Node types form a discriminated union on the ``type`` key. JSON keys are
camelCase (``widthPolicy``, ``tabIndex``); Python attributes are snake_case.

Example:
    >>> scaffold = parse_scaffold({
    ...     "schemaVersion": "1.0.0",
    ...     "screen": {"id": "login", "root": {"type": "Text", "id": "t", "text": "Hi"}},
    ... })
    >>> scaffold.screen.root.type
    'Text'
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

# =============================================================================
# Base Model
# =============================================================================


class CamelModel(BaseModel):
    """Base model serializing snake_case attributes as camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "use_enum_values": True,
    }

    def to_dict(self) -> dict[str, Any]:
        """Dump the wire shape, omitting fields that were never set."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


# =============================================================================
# Enums
# =============================================================================


class SizePolicy(str, Enum):
    """How a node sizes itself along one axis.

    - HUG: shrink to content
    - FILL: take all available space
    - FIXED: use the explicit minSize value
    """

    HUG = "hug"
    FILL = "fill"
    FIXED = "fixed"


class Direction(str, Enum):
    """Stack main axis."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Align(str, Enum):
    """Cross-axis alignment for Stack children."""

    START = "start"
    CENTER = "center"
    END = "end"
    STRETCH = "stretch"


class RoleHint(str, Enum):
    """Semantic weight of a Button."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    DANGER = "danger"
    LINK = "link"


class FlowRole(str, Enum):
    """Role a node plays in a guided (wizard) flow."""

    WIZARD = "wizard"
    STEP = "step"


# =============================================================================
# Shared Value Objects
# =============================================================================


class Size(CamelModel):
    """Optional width/height pair used for min/max constraints."""

    w: float | None = Field(default=None, description="Width in pixels")
    h: float | None = Field(default=None, description="Height in pixels")


class DisclosureBehavior(CamelModel):
    """Progressive-disclosure metadata for a collapsible section."""

    collapsible: bool = Field(default=False, description="Section can collapse")
    default_state: Literal["collapsed", "expanded"] | None = Field(
        default=None, description="Initial state of the section"
    )
    controls_id: str | None = Field(
        default=None, description="Id of the control toggling this section"
    )
    aria_summary_text: str | None = Field(
        default=None, description="Accessible summary when collapsed"
    )


class GuidedFlowBehavior(CamelModel):
    """Wizard metadata: either the container or one of its steps."""

    role: FlowRole = Field(..., description="wizard container or step")
    step_index: int | None = Field(default=None, description="1-based step position")
    total_steps: int | None = Field(default=None, description="Declared step count")
    next_id: str | None = Field(default=None, description="Id of the next step")
    prev_id: str | None = Field(default=None, description="Id of the previous step")
    has_progress: bool | None = Field(
        default=None, description="Wizard shows a progress indicator"
    )
    progress_node_id: str | None = Field(
        default=None, description="Id of the progress indicator node"
    )


class Behaviors(CamelModel):
    """Optional behavioral annotations on a node."""

    disclosure: DisclosureBehavior | None = None
    guided_flow: GuidedFlowBehavior | None = None


class TableResponsive(CamelModel):
    """Responsive strategy for a Table on narrow viewports."""

    strategy: str | None = Field(
        default=None, description="wrap, scroll or cards"
    )
    min_column_width: float | None = Field(
        default=None, description="Narrowest acceptable column width"
    )


# =============================================================================
# Nodes
# =============================================================================


class BaseNode(CamelModel):
    """Fields shared by every node type.

    Attributes:
        id: Unique identifier within the scaffold.
        visible: Hidden nodes exclude their whole subtree from analysis.
        width_policy: Horizontal sizing policy.
        height_policy: Vertical sizing policy.
        min_size: Lower size constraint.
        max_size: Upper size constraint.
        at: Responsive overrides keyed by ">=N" / "<=N".
        pattern: Optional pattern annotation (e.g. "Form.Basic").
        behaviors: Disclosure and guided-flow metadata.
        affordances: Free-form affordance tags ("chevron", "details").
        focusable: Explicit focusability override.
        tab_index: Explicit tab order; negative removes from the sequence.
    """

    id: str = Field(..., description="Unique identifier for the node")
    visible: bool = Field(default=True, description="Node participates in analysis")
    width_policy: SizePolicy = Field(default=SizePolicy.HUG)
    height_policy: SizePolicy = Field(default=SizePolicy.HUG)
    min_size: Size | None = None
    max_size: Size | None = None
    at: dict[str, dict[str, Any] | None] | None = Field(
        default=None, description="Responsive override blocks"
    )
    pattern: str | None = None
    behaviors: Behaviors | None = None
    affordances: list[str] | None = None
    focusable: bool | None = None
    tab_index: int | None = None

    def child_slots(self) -> list[tuple[str, int | None, Node]]:
        """Return ordered ``(slot, index, child)`` triples.

        ``slot`` is the JSON key holding the child and ``index`` its list
        position, or None for single-child slots. Leaves return an empty list.
        """
        return []

    def children_of(self) -> list[Node]:
        """Return direct children in document order."""
        return [child for _, _, child in self.child_slots()]

    @property
    def disclosure(self) -> DisclosureBehavior | None:
        return self.behaviors.disclosure if self.behaviors else None

    @property
    def guided_flow(self) -> GuidedFlowBehavior | None:
        return self.behaviors.guided_flow if self.behaviors else None


def _list_slots(slot: str, items: list[Node]) -> list[tuple[str, int | None, Node]]:
    return [(slot, index, child) for index, child in enumerate(items)]


class StackNode(BaseNode):
    """Linear container laying children along one axis."""

    type: Literal["Stack"] = "Stack"
    direction: Direction = Field(default=Direction.VERTICAL)
    gap: float | None = None
    padding: float | None = None
    align: Align = Field(default=Align.START)
    wrap: bool = False
    children: list[Node] = Field(default_factory=list)

    def child_slots(self) -> list[tuple[str, int | None, Node]]:
        return _list_slots("children", self.children)


class GridNode(BaseNode):
    """Row-major grid with optional column reduction."""

    type: Literal["Grid"] = "Grid"
    columns: int = Field(default=1, ge=1)
    gap: float | None = None
    min_col_width: float | None = None
    children: list[Node] = Field(default_factory=list)

    def child_slots(self) -> list[tuple[str, int | None, Node]]:
        return _list_slots("children", self.children)


class BoxNode(BaseNode):
    """Padded wrapper around at most one child."""

    type: Literal["Box"] = "Box"
    padding: float | None = None
    child: Node | None = None

    def child_slots(self) -> list[tuple[str, int | None, Node]]:
        if self.child is None:
            return []
        return [("child", None, self.child)]


class TextNode(BaseNode):
    """Static text."""

    type: Literal["Text"] = "Text"
    text: str = ""
    font_size: float | None = None
    max_lines: int | None = None
    intrinsic_text_width: float | None = None


class ButtonNode(BaseNode):
    """Clickable action."""

    type: Literal["Button"] = "Button"
    text: str = ""
    role_hint: RoleHint | None = None


class FieldNode(BaseNode):
    """Labelled input."""

    type: Literal["Field"] = "Field"
    label: str = ""
    input_type: str | None = None
    required: bool | None = None
    help_text: str | None = None
    error_text: str | None = None


class FormNode(BaseNode):
    """Fields followed by an actions row."""

    type: Literal["Form"] = "Form"
    title: str | None = None
    fields: list[Node] = Field(default_factory=list)
    actions: list[Node] = Field(default_factory=list)
    states: list[str] | None = None

    def child_slots(self) -> list[tuple[str, int | None, Node]]:
        return _list_slots("fields", self.fields) + _list_slots("actions", self.actions)


class TableNode(BaseNode):
    """Tabular data."""

    type: Literal["Table"] = "Table"
    title: str | None = None
    columns: list[str] = Field(default_factory=list)
    rows: int | None = None
    responsive: TableResponsive | None = None
    states: list[str] | None = None


Node = Annotated[
    Union[
        StackNode,
        GridNode,
        BoxNode,
        TextNode,
        ButtonNode,
        FieldNode,
        FormNode,
        TableNode,
    ],
    Field(discriminator="type"),
]

CONTAINER_TYPES: frozenset[str] = frozenset({"Stack", "Grid", "Box", "Form"})

for _model in (StackNode, GridNode, BoxNode, FormNode):
    _model.model_rebuild()


# =============================================================================
# Scaffold
# =============================================================================


DEFAULT_SPACING_SCALE: list[float] = [0, 4, 8, 12, 16, 24, 32, 48, 64]
DEFAULT_MIN_TOUCH_TARGET: tuple[float, float] = (44, 44)
DEFAULT_BREAKPOINTS: list[str] = ["320x640", "768x1024", "1280x800"]


class TouchTarget(CamelModel):
    """Minimum interactive size."""

    w: float = DEFAULT_MIN_TOUCH_TARGET[0]
    h: float = DEFAULT_MIN_TOUCH_TARGET[1]


class Settings(CamelModel):
    """Analysis settings carried by the scaffold."""

    spacing_scale: list[float] = Field(
        default_factory=lambda: list(DEFAULT_SPACING_SCALE)
    )
    min_touch_target: TouchTarget = Field(default_factory=TouchTarget)
    breakpoints: list[str] = Field(default_factory=lambda: list(DEFAULT_BREAKPOINTS))


class Screen(CamelModel):
    """One screen and its node tree."""

    id: str
    title: str | None = None
    root: Node


class Scaffold(CamelModel):
    """Top-level document."""

    schema_version: str = "1.0.0"
    screen: Screen
    settings: Settings = Field(default_factory=Settings)


_NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(Node)


def parse_node(data: dict[str, Any] | BaseNode) -> Node:
    """Build a typed node from a raw mapping.

    Args:
        data: Mapping with a ``type`` discriminator, or an existing node.

    Returns:
        The typed node.

    Raises:
        pydantic.ValidationError: If the mapping does not describe a node.
    """
    if isinstance(data, BaseNode):
        return data
    return _NODE_ADAPTER.validate_python(data)


def parse_scaffold(data: dict[str, Any] | Scaffold) -> Scaffold:
    """Build a typed scaffold from a raw mapping.

    Raises:
        pydantic.ValidationError: If the mapping does not describe a scaffold.
    """
    if isinstance(data, Scaffold):
        return data
    return Scaffold.model_validate(data)


def is_container(node: BaseNode) -> bool:
    """Return True for node types that hold other nodes."""
    return node.type in CONTAINER_TYPES


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
    # Scaffold
    "DEFAULT_SPACING_SCALE",
    "DEFAULT_MIN_TOUCH_TARGET",
    "DEFAULT_BREAKPOINTS",
    "TouchTarget",
    "Settings",
    "Screen",
    "Scaffold",
    # Construction
    "parse_node",
    "parse_scaffold",
    "is_container",
]
