"""
State-update helpers.

Edits made in Plan views are never applied to derived tasks. These helpers compute
the new content string or merged metadata for the *source element*; the caller owns
writing that back and persisting it.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

from loguru import logger
from pydantic.alias_generators import to_snake

from cxd_canvas.errors import TaskUpdateError
from cxd_canvas.schemas.canvas import CanvasElement, Subtask, TaskMetadata, element_content
from cxd_canvas.tasks.markdown import update_subtask_in_content
from cxd_canvas.tasks.models import SubtaskProjection, TaskProjection

# TaskProjection field names that are stored under a different metadata name
_PROJECTION_TO_METADATA = {
    "tags": "custom_tags",
}

_EDITABLE_FIELDS = {
    "status",
    "priority",
    "task_type",
    "due_date",
    "start_date",
    "assignee",
    "estimated_hours",
    "custom_tags",
    "custom_properties",
    "subtasks",
    "is_actionable",
}


@dataclass
class ElementPatch:
    """Changes to write back into one canvas element. None means unchanged."""

    element_id: str
    content: Optional[str] = None
    task_metadata: Optional[TaskMetadata] = None

    def is_empty(self) -> bool:
        return self.content is None and self.task_metadata is None


def create_updated_content(
    original_content: str, line_index: int, new_completed_state: bool
) -> str:
    """Content with the checkbox on line_index set to new_completed_state."""
    return update_subtask_in_content(original_content, line_index, new_completed_state)


def create_task_metadata_update(
    existing_metadata: Optional[TaskMetadata],
    updates: Union[TaskMetadata, Mapping[str, Any]],
) -> TaskMetadata:
    """
    Merge updates over existing metadata.

    Keys present in updates win, including explicit None (which clears a value).
    Keys may be camelCase or snake_case.
    """
    merged = existing_metadata.model_dump(exclude_unset=True) if existing_metadata else {}

    if isinstance(updates, TaskMetadata):
        changes = updates.model_dump(exclude_unset=True)
    else:
        changes = {to_snake(key): value for key, value in updates.items()}

    merged.update(changes)
    return TaskMetadata.model_validate(merged)


def apply_patch(element: CanvasElement, patch: ElementPatch) -> CanvasElement:
    """Return a copy of element with the patch applied."""
    changes: dict = {}
    if patch.content is not None:
        changes["content"] = patch.content
    if patch.task_metadata is not None:
        changes["task_metadata"] = patch.task_metadata
    return element.model_copy(update=changes) if changes else element


def find_source_element(
    elements: Iterable[CanvasElement], task_or_id: Union[TaskProjection, str]
) -> Optional[CanvasElement]:
    """
    Locate the element a task was derived from.

    Accepts a TaskProjection or a task id; split ids ("<element>-task-<n>") resolve to
    their element when no element carries the id itself.
    """
    elements = list(elements)
    if isinstance(task_or_id, TaskProjection):
        element_id = task_or_id.source_element_id
    else:
        element_id = task_or_id

    for element in elements:
        if element.id == element_id:
            return element

    if "-task-" in element_id:
        base_id, _, index = element_id.rpartition("-task-")
        if index.isdigit():
            for element in elements:
                if element.id == base_id:
                    return element
    return None


def _toggle_metadata_subtask(
    metadata: TaskMetadata, subtask: SubtaskProjection
) -> Optional[TaskMetadata]:
    subtasks: List[Subtask] = []
    changed = False
    for existing in metadata.subtasks or []:
        if existing.id == subtask.id and not changed:
            existing = existing.model_copy(update={"is_completed": not existing.is_completed})
            changed = True
        subtasks.append(existing)
    if not changed:
        return None
    return create_task_metadata_update(metadata, {"subtasks": subtasks})


def toggle_subtask(
    elements: Iterable[CanvasElement],
    task: TaskProjection,
    subtask_index: int = 0,
) -> Optional[ElementPatch]:
    """
    Flip one checkbox of a task and return the patch for its source element.

    For a split task the task itself is the checkbox and subtask_index is ignored.
    For an aggregate task subtask_index selects the subtask. Structured subtasks are
    toggled in metadata; markdown subtasks are toggled in the content.

    Returns:
        ElementPatch, or None if the element or subtask cannot be found
    """
    element = find_source_element(elements, task)
    if element is None:
        logger.debug(f"Toggle skipped: no source element for task {task.id}")
        return None

    content = element_content(element) or ""

    if task.is_split:
        is_completed = task.completed_subtasks == 1
        return ElementPatch(
            element_id=element.id,
            content=create_updated_content(content, task.source_line_index, not is_completed),
        )

    if not 0 <= subtask_index < len(task.subtasks):
        logger.debug(f"Toggle skipped: task {task.id} has no subtask {subtask_index}")
        return None
    subtask = task.subtasks[subtask_index]

    metadata = element.task_metadata
    if metadata is not None and metadata.subtasks is not None:
        updated = _toggle_metadata_subtask(metadata, subtask)
        if updated is None:
            return None
        return ElementPatch(element_id=element.id, task_metadata=updated)

    return ElementPatch(
        element_id=element.id,
        content=create_updated_content(content, subtask.line_index, not subtask.is_completed),
    )


def _metadata_changes(changes: Mapping[str, Any]) -> dict:
    result = {}
    for key, value in changes.items():
        name = to_snake(key)
        name = _PROJECTION_TO_METADATA.get(name, name)
        if name not in _EDITABLE_FIELDS:
            raise TaskUpdateError(f"Field {key!r} cannot be edited from a task")
        if name == "subtasks" and value is not None:
            value = [
                Subtask(id=s.id, text=s.text, is_completed=s.is_completed, order=s.line_index)
                if isinstance(s, SubtaskProjection)
                else s
                for s in value
            ]
        result[name] = value
    return result


def apply_task_updates(
    elements: Iterable[CanvasElement], task_id: str, **changes: Any
) -> Optional[ElementPatch]:
    """
    Compute the metadata patch for edits made to a task (status, priority, dates...).

    Changes use TaskProjection names (``tags`` is stored as ``custom_tags``). Edits to a
    split task apply to its source element and therefore to all of its siblings.

    Raises:
        TaskUpdateError: If a change names a field that is not task metadata
    """
    metadata_changes = _metadata_changes(changes)

    element = find_source_element(elements, task_id)
    if element is None:
        logger.debug(f"Update skipped: no source element for task {task_id}")
        return None

    return ElementPatch(
        element_id=element.id,
        task_metadata=create_task_metadata_update(element.task_metadata, metadata_changes),
    )
