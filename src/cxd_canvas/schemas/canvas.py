"""Canvas element schemas.

A canvas element is a positioned unit on a board. Only freeform cards, text blocks
and shapes carry markdown content; every other kind is modelled by OtherElement so
whole board exports validate without the task engine having to know about them.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter, field_validator

from cxd_canvas.schemas.base import CanvasModel, TaskPriority, TaskStatus, TaskType

# Element kinds that can become tasks
TASK_ELEMENT_TYPES = ("freeform", "text", "shape")

CustomPropertyValue = Union[bool, int, float, str]


class Subtask(CanvasModel):
    """Structured subtask stored in task metadata."""

    id: str
    text: str
    is_completed: bool = False
    order: int = 0


class TaskMetadata(CanvasModel):
    """Optional task data attached to an element.

    When present, status, priority and subtasks here take precedence over anything
    inferred from the element's markdown.
    """

    is_actionable: Optional[bool] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    task_type: Optional[TaskType] = None
    due_date: Optional[str] = None  # ISO date or datetime
    start_date: Optional[str] = None  # ISO date or datetime
    assignee: Optional[str] = None
    estimated_hours: Optional[float] = None
    custom_tags: Optional[List[str]] = None
    custom_properties: Optional[Dict[str, CustomPropertyValue]] = None
    subtasks: Optional[List[Subtask]] = None


class CanvasElementBase(CanvasModel):
    """Fields shared by every element kind."""

    id: str
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    z_index: int = 0
    board_id: Optional[str] = None  # None = root canvas
    hypercube_tags: List[str] = Field(default_factory=list)
    task_metadata: Optional[TaskMetadata] = None

    @field_validator("hypercube_tags", mode="before")
    @classmethod
    def _none_tags_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FreeformElement(CanvasElementBase):
    """Sticky-note style card."""

    type: Literal["freeform"] = "freeform"
    content: str = ""
    emoji: Optional[str] = None


class TextElement(CanvasElementBase):
    type: Literal["text"] = "text"
    content: str = ""


class ShapeElement(CanvasElementBase):
    type: Literal["shape"] = "shape"
    shape_type: str = "rectangle"
    content: Optional[str] = None


class OtherElement(CanvasElementBase):
    """Any element kind without markdown content (images, links, boards, ...)."""

    type: Literal[
        "image",
        "container",
        "connector",
        "line",
        "link",
        "board",
        "experienceBlock",
    ]


CanvasElement = Annotated[
    Union[FreeformElement, TextElement, ShapeElement, OtherElement],
    Field(discriminator="type"),
]

_element_adapter: TypeAdapter[CanvasElement] = TypeAdapter(CanvasElement)


def parse_element(data: Dict[str, Any]) -> CanvasElement:
    """Validate a single element dict (camelCase or snake_case keys)."""
    return _element_adapter.validate_python(data)


def parse_elements(items: List[Dict[str, Any]]) -> List[CanvasElement]:
    """Validate a list of element dicts. Raises on the first invalid element."""
    return [parse_element(item) for item in items]


def element_content(element: CanvasElement) -> Optional[str]:
    """Return the markdown body of an element, or None for kinds without one."""
    match element:
        case FreeformElement() | TextElement():
            return element.content
        case ShapeElement():
            return element.content
        case _:
            return None


HYPERCUBE_FACE_TAGS = [
    "Reality Planes",
    "Sensory Domains",
    "Presence Types",
    "State Mapping",
    "Trait Mapping",
    "Meaning Architecture",
]

HYPERCUBE_FACE_COLORS = {
    "Reality Planes": "#8B5CF6",
    "Sensory Domains": "#EC4899",
    "Presence Types": "#06B6D4",
    "State Mapping": "#F59E0B",
    "Trait Mapping": "#10B981",
    "Meaning Architecture": "#6366F1",
}
