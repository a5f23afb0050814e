"""
Task projection.

Maps a qualifying canvas element to TaskProjection records. An element whose markdown
holds several checkbox lines is split into one atomic task per line; an element with
structured subtasks in its metadata always stays a single aggregate task.
"""

import math
from typing import List, Optional

from cxd_canvas.schemas.base import TaskStatus
from cxd_canvas.schemas.canvas import TASK_ELEMENT_TYPES, CanvasElement, element_content
from cxd_canvas.schemas.query import TaskFilter
from cxd_canvas.tasks.markdown import extract_title, parse_markdown_tasks
from cxd_canvas.tasks.models import (
    CanvasPosition,
    SubtaskProjection,
    TaskProjection,
    TaskQualificationCriteria,
)
from cxd_canvas.tasks.qualification import qualifies_as_task


def split_task_id(element_id: str, index: int) -> str:
    """Id of the index-th split task of an element."""
    return f"{element_id}-task-{index}"


def completion_percent(completed: int, total: int) -> int:
    """Whole-number percentage, rounding halves up; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def infer_status(completed: int, total: int) -> TaskStatus:
    if total > 0 and completed == total:
        return TaskStatus.COMPLETED
    if completed > 0:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.NOT_STARTED


def _passes_qualification(criteria: TaskQualificationCriteria, filter: Optional[TaskFilter]) -> bool:
    if filter is None:
        return criteria.has_markdown_tasks or criteria.is_explicitly_actionable

    by_markdown = criteria.has_markdown_tasks and filter.include_implicit_tasks is not False
    by_explicit = criteria.is_explicitly_actionable and filter.include_explicit_tasks is not False
    return by_markdown or by_explicit


def project_element_as_tasks(
    element: CanvasElement, filter: Optional[TaskFilter] = None
) -> List[TaskProjection]:
    """
    Project a canvas element into zero or more tasks.

    Args:
        element: Canvas element to project
        filter: Optional filter; only its include_implicit_tasks / include_explicit_tasks
            switches are consulted here

    Returns:
        An empty list if the element does not qualify, one task per checkbox line if the
        markdown holds several, otherwise a single aggregate task with id == element id.
    """
    criteria = qualifies_as_task(element)
    if not _passes_qualification(criteria, filter):
        return []

    if element.type not in TASK_ELEMENT_TYPES:
        return []

    content = element_content(element) or ""
    metadata = element.task_metadata

    from_metadata = metadata is not None and metadata.subtasks is not None
    if from_metadata:
        subtasks = [
            SubtaskProjection(
                id=st.id,
                text=st.text,
                is_completed=st.is_completed,
                line_index=st.order,
            )
            for st in metadata.subtasks
        ]
    else:
        subtasks = parse_markdown_tasks(content)

    shared = dict(
        source_element_id=element.id,
        source_element_type=element.type,
        source_board_id=element.board_id,
        qualification_criteria=criteria,
        priority=metadata.priority if metadata else None,
        task_type=metadata.task_type if metadata else None,
        due_date=metadata.due_date if metadata else None,
        start_date=metadata.start_date if metadata else None,
        assignee=metadata.assignee if metadata else None,
        estimated_hours=metadata.estimated_hours if metadata else None,
        tags=list(metadata.custom_tags) if metadata and metadata.custom_tags is not None else None,
        custom_properties=(
            dict(metadata.custom_properties)
            if metadata and metadata.custom_properties is not None
            else None
        ),
        hypercube_tags=list(element.hypercube_tags),
        canvas_position=CanvasPosition(x=element.x, y=element.y),
    )

    # Several checkbox lines: each one is its own atomic task
    if len(subtasks) > 1 and not from_metadata:
        return [
            TaskProjection(
                id=split_task_id(element.id, index),
                title=subtask.text,
                description=subtask.text,
                subtasks=[],
                status=TaskStatus.COMPLETED if subtask.is_completed else TaskStatus.NOT_STARTED,
                completed_subtasks=1 if subtask.is_completed else 0,
                total_subtasks=1,
                completion_percent=100 if subtask.is_completed else 0,
                source_line_index=subtask.line_index,
                **shared,
            )
            for index, subtask in enumerate(subtasks)
        ]

    completed = sum(1 for s in subtasks if s.is_completed)
    total = len(subtasks)

    if metadata is not None and metadata.status is not None:
        status = metadata.status
    else:
        status = infer_status(completed, total)

    return [
        TaskProjection(
            id=element.id,
            title=extract_title(content),
            description=content,
            subtasks=subtasks,
            status=status,
            completed_subtasks=completed,
            total_subtasks=total,
            completion_percent=completion_percent(completed, total),
            **shared,
        )
    ]
