"""
Grouping and date lookups for kanban, calendar and timeline views.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Union

from cxd_canvas.errors import TaskQueryError
from cxd_canvas.schemas.base import TaskStatus
from cxd_canvas.tasks.dates import parse_date, to_utc, utc_day
from cxd_canvas.tasks.models import TaskProjection

GROUP_KEYS = ("status", "priority", "hypercubeFace", "assignee")

_GROUP_KEY_ALIASES = {
    "status": "status",
    "priority": "priority",
    "hypercubeFace": "hypercubeFace",
    "hypercube_face": "hypercubeFace",
    "face": "hypercubeFace",
    "assignee": "assignee",
}


@dataclass
class KanbanColumn:
    id: TaskStatus
    label: str
    color: str
    tasks: List[TaskProjection] = field(default_factory=list)


# Column order of the status board
DEFAULT_KANBAN_COLUMNS = (
    (TaskStatus.NOT_STARTED, "To Do", "#6B7280"),
    (TaskStatus.IN_PROGRESS, "In Progress", "#3B82F6"),
    (TaskStatus.BLOCKED, "Blocked", "#EF4444"),
    (TaskStatus.COMPLETED, "Done", "#10B981"),
)


def _group_keys(task: TaskProjection, group_by: str) -> List[str]:
    if group_by == "status":
        return [task.status.value]
    if group_by == "priority":
        return [task.priority.value if task.priority else "none"]
    if group_by == "hypercubeFace":
        return list(task.hypercube_tags) if task.hypercube_tags else ["untagged"]
    return [task.assignee if task.assignee is not None else "unassigned"]


def group_tasks_by(tasks: List[TaskProjection], group_by: str) -> Dict[str, List[TaskProjection]]:
    """
    Bucket tasks by status, priority, hypercube face or assignee.

    Groups appear in first-seen order and keep the tasks' relative order. Grouping by
    face is not a partition: a task tagged with several faces is listed under each.

    Raises:
        TaskQueryError: If group_by is not a supported key
    """
    key = _GROUP_KEY_ALIASES.get(group_by)
    if key is None:
        raise TaskQueryError(
            f"Unsupported group key: {group_by!r} (expected one of {', '.join(GROUP_KEYS)})"
        )

    groups: Dict[str, List[TaskProjection]] = {}
    for task in tasks:
        for group in _group_keys(task, key):
            groups.setdefault(group, []).append(task)
    return groups


def kanban_columns(tasks: List[TaskProjection]) -> List[KanbanColumn]:
    """Status columns in board order, including empty ones."""
    by_status = group_tasks_by(tasks, "status")
    return [
        KanbanColumn(id=status, label=label, color=color, tasks=by_status.get(status.value, []))
        for status, label, color in DEFAULT_KANBAN_COLUMNS
    ]


def filter_by_face(tasks: List[TaskProjection], face: str) -> List[TaskProjection]:
    return [task for task in tasks if face in task.hypercube_tags]


def get_tasks_for_date(
    tasks: List[TaskProjection], day: Union[date, datetime]
) -> List[TaskProjection]:
    """Tasks due on the given calendar day (compared in UTC)."""
    target = to_utc(day).date().isoformat()
    return [
        task for task in tasks if task.due_date and utc_day(task.due_date) == target
    ]


def get_tasks_in_range(
    tasks: List[TaskProjection],
    start: Union[date, datetime],
    end: Union[date, datetime],
) -> List[TaskProjection]:
    """
    Tasks whose [start_date, due_date] span overlaps [start, end].

    A task needs at least one of the two dates; a missing side is treated as open.
    """
    range_start = to_utc(start)
    range_end = to_utc(end)

    result = []
    for task in tasks:
        if not task.start_date and not task.due_date:
            continue
        task_start = parse_date(task.start_date)
        task_end = parse_date(task.due_date)
        if task_start is not None and task_start > range_end:
            continue
        if task_end is not None and task_end < range_start:
            continue
        result.append(task)
    return result
