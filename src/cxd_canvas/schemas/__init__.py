"""Pydantic schemas for CXD Canvas input data and task queries."""

from cxd_canvas.schemas.base import CanvasModel, TaskPriority, TaskStatus, TaskType
from cxd_canvas.schemas.canvas import (
    HYPERCUBE_FACE_COLORS,
    HYPERCUBE_FACE_TAGS,
    TASK_ELEMENT_TYPES,
    CanvasElement,
    FreeformElement,
    OtherElement,
    ShapeElement,
    Subtask,
    TaskMetadata,
    TextElement,
    element_content,
    parse_element,
    parse_elements,
)
from cxd_canvas.schemas.project import CanvasBoard, CanvasProject, collect_elements
from cxd_canvas.schemas.query import (
    DEFAULT_SORT,
    DateRange,
    SortDirection,
    TaskFilter,
    TaskQuery,
    TaskSort,
)

__all__ = [
    # Base
    "CanvasModel",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
    # Elements
    "CanvasElement",
    "FreeformElement",
    "TextElement",
    "ShapeElement",
    "OtherElement",
    "Subtask",
    "TaskMetadata",
    "TASK_ELEMENT_TYPES",
    "HYPERCUBE_FACE_TAGS",
    "HYPERCUBE_FACE_COLORS",
    "element_content",
    "parse_element",
    "parse_elements",
    # Project
    "CanvasBoard",
    "CanvasProject",
    "collect_elements",
    # Query
    "DateRange",
    "SortDirection",
    "TaskFilter",
    "TaskQuery",
    "TaskSort",
    "DEFAULT_SORT",
]
