"""Task query descriptors.

A TaskQuery is a pure description of what a Plan view wants: which tasks (filter),
in what order (sort) and which page (offset, limit). It carries no state.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from cxd_canvas.schemas.base import CanvasModel, TaskPriority, TaskStatus


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class DateRange(CanvasModel):
    """Inclusive date bounds; either side may be left open."""

    start: Optional[str] = None
    end: Optional[str] = None


class TaskFilter(CanvasModel):
    """Filter shared by every Plan view. Unset fields do not filter."""

    # Status
    statuses: Optional[List[TaskStatus]] = None
    show_completed: Optional[bool] = None

    # Hypercube faces
    hypercube_faces: Optional[List[str]] = None
    require_all_faces: bool = False  # AND instead of OR

    # Dates
    due_date_range: Optional[DateRange] = None
    start_date_range: Optional[DateRange] = None

    # Other
    priorities: Optional[List[TaskPriority]] = None
    assignees: Optional[List[str]] = None
    search_query: Optional[str] = None
    board_ids: Optional[List[str]] = None
    custom_tags: Optional[List[str]] = None

    # Qualification
    include_implicit_tasks: Optional[bool] = None  # cards with markdown checkboxes
    include_explicit_tasks: Optional[bool] = None  # cards flagged isActionable
    include_tagged_cards: Optional[bool] = None  # accepted for compatibility, never qualifies


class TaskSort(CanvasModel):
    """One sort key. `field` is a TaskProjection field name (camelCase or snake_case)."""

    field: str
    direction: SortDirection = SortDirection.ASC


class TaskQuery(CanvasModel):
    filter: TaskFilter = Field(default_factory=TaskFilter)
    sort: List[TaskSort] = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)


# Plan views sort by priority (most urgent first), then soonest due date
DEFAULT_SORT: List[TaskSort] = [
    TaskSort(field="priority", direction=SortDirection.DESC),
    TaskSort(field="dueDate", direction=SortDirection.ASC),
]
