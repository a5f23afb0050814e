"""
Derived task records.

Tasks are not stored anywhere: every query projects them afresh from the canvas
elements, so these dataclasses only live for the duration of one call.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cxd_canvas.schemas.base import TaskPriority, TaskStatus, TaskType


@dataclass(frozen=True)
class TaskQualificationCriteria:
    """Independent probes deciding whether an element is a task source."""

    has_markdown_tasks: bool
    is_explicitly_actionable: bool
    has_hypercube_tags: bool

    def to_dict(self) -> Dict[str, bool]:
        return {
            "hasMarkdownTasks": self.has_markdown_tasks,
            "isExplicitlyActionable": self.is_explicitly_actionable,
            "hasHypercubeTags": self.has_hypercube_tags,
        }


@dataclass(frozen=True)
class SubtaskProjection:
    """A checkbox line (or structured subtask) belonging to a task.

    line_index is the 0-based line of the checkbox in the element content and is the
    key used to write toggles back. For metadata subtasks it holds the subtask order.
    """

    id: str
    text: str
    is_completed: bool
    line_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "isCompleted": self.is_completed,
            "lineIndex": self.line_index,
        }


@dataclass(frozen=True)
class CanvasPosition:
    x: float
    y: float


@dataclass(frozen=True)
class TaskProjection:
    """A task derived from a canvas element."""

    # Identity
    id: str
    source_element_id: str
    source_element_type: str  # freeform | text | shape
    source_board_id: Optional[str]
    qualification_criteria: TaskQualificationCriteria

    # Content
    title: str
    description: str
    subtasks: List[SubtaskProjection]

    # Progress
    status: TaskStatus
    completed_subtasks: int
    total_subtasks: int
    completion_percent: int  # 0-100

    # Metadata
    priority: Optional[TaskPriority] = None
    task_type: Optional[TaskType] = None
    due_date: Optional[str] = None
    start_date: Optional[str] = None
    assignee: Optional[str] = None
    estimated_hours: Optional[float] = None
    tags: Optional[List[str]] = None
    custom_properties: Optional[Dict[str, Any]] = None

    hypercube_tags: List[str] = field(default_factory=list)
    canvas_position: CanvasPosition = field(default_factory=lambda: CanvasPosition(0, 0))

    # Checkbox line a split task was taken from (None for aggregate tasks)
    source_line_index: Optional[int] = None

    @property
    def is_split(self) -> bool:
        return self.source_line_index is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape the web client renders."""
        result: Dict[str, Any] = {
            "id": self.id,
            "sourceElementId": self.source_element_id,
            "sourceElementType": self.source_element_type,
            "sourceBoardId": self.source_board_id,
            "qualificationCriteria": self.qualification_criteria.to_dict(),
            "title": self.title,
            "description": self.description,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "status": self.status.value,
            "completedSubtasks": self.completed_subtasks,
            "totalSubtasks": self.total_subtasks,
            "completionPercent": self.completion_percent,
            "hypercubeTags": list(self.hypercube_tags),
            "canvasPosition": {"x": self.canvas_position.x, "y": self.canvas_position.y},
        }
        optional = {
            "priority": self.priority.value if self.priority else None,
            "taskType": self.task_type.value if self.task_type else None,
            "dueDate": self.due_date,
            "startDate": self.start_date,
            "assignee": self.assignee,
            "estimatedHours": self.estimated_hours,
            "tags": self.tags,
            "customProperties": self.custom_properties,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result


@dataclass
class TaskQueryResult:
    """Page of tasks plus the filtered total before pagination."""

    tasks: List[TaskProjection]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {"tasks": [t.to_dict() for t in self.tasks], "total": self.total}
