"""
Task query engine.

Projects every element, filters, counts, sorts and paginates. Nothing is cached: the
canvas is the single source of truth and each query re-derives tasks from it.
"""

from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Optional

from loguru import logger
from pydantic.alias_generators import to_snake

from cxd_canvas.errors import TaskQueryError
from cxd_canvas.schemas.canvas import CanvasElement
from cxd_canvas.schemas.query import SortDirection, TaskFilter, TaskQuery, TaskSort
from cxd_canvas.tasks.dates import parse_date
from cxd_canvas.tasks.models import TaskProjection, TaskQueryResult
from cxd_canvas.tasks.projection import project_element_as_tasks

STATUS_ORDER = {
    "not_started": 0,
    "in_progress": 1,
    "blocked": 2,
    "completed": 3,
}

# Higher weight = more important, so a descending sort puts urgent first
PRIORITY_WEIGHT = {
    "low": 0,
    "medium": 1,
    "high": 2,
    "urgent": 3,
}


def query_tasks(elements: Iterable[CanvasElement], query: TaskQuery) -> TaskQueryResult:
    """
    Run a task query over a collection of canvas elements.

    Args:
        elements: Canvas elements in board order
        query: Filter, sort and pagination descriptor

    Returns:
        TaskQueryResult with the requested page and the filtered total
    """
    elements = list(elements)
    tasks: List[TaskProjection] = []
    for element in elements:
        tasks.extend(project_element_as_tasks(element, query.filter))

    tasks = apply_filters(tasks, query.filter)
    total = len(tasks)

    tasks = apply_sorting(tasks, query.sort)
    tasks = paginate(tasks, query.offset, query.limit)

    logger.debug(
        f"Task query: {len(elements)} elements, {total} matching tasks, {len(tasks)} returned"
    )
    return TaskQueryResult(tasks=tasks, total=total)


# --- Filtering ---


def _matches_filter(task: TaskProjection, filter: TaskFilter) -> bool:
    if filter.statuses and task.status not in filter.statuses:
        return False

    if filter.show_completed is False and task.status == "completed":
        return False

    if filter.hypercube_faces:
        present = [face in task.hypercube_tags for face in filter.hypercube_faces]
        if filter.require_all_faces and not all(present):
            return False
        if not filter.require_all_faces and not any(present):
            return False

    if filter.priorities and (task.priority is None or task.priority not in filter.priorities):
        return False

    if filter.assignees and (task.assignee is None or task.assignee not in filter.assignees):
        return False

    if filter.due_date_range is not None:
        date_range = filter.due_date_range
        if task.due_date:
            due = parse_date(task.due_date)
            start = parse_date(date_range.start) if date_range.start else None
            end = parse_date(date_range.end) if date_range.end else None
            if due is not None and start is not None and due < start:
                return False
            if due is not None and end is not None and due > end:
                return False
        elif date_range.start or date_range.end:
            # Filtering by due date excludes undated tasks
            return False

    if filter.board_ids:
        board_id = task.source_board_id if task.source_board_id is not None else "root"
        if board_id not in filter.board_ids:
            return False

    if filter.search_query and filter.search_query.strip():
        needle = filter.search_query.lower()
        if needle not in task.title.lower() and needle not in task.description.lower():
            return False

    if filter.custom_tags:
        if not task.tags or not any(tag in task.tags for tag in filter.custom_tags):
            return False

    return True


def apply_filters(tasks: List[TaskProjection], filter: TaskFilter) -> List[TaskProjection]:
    """Keep tasks passing every active predicate of the filter."""
    return [task for task in tasks if _matches_filter(task, filter)]


# --- Sorting ---


def _attribute_name(field: str) -> str:
    """Map a camelCase sort field ("dueDate") to the dataclass attribute ("due_date")."""
    return field if "_" in field or field.islower() else to_snake(field)


def _compare_values(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _compare_titles(a: TaskProjection, b: TaskProjection) -> int:
    # Case-insensitive first, then exact, so "apple" < "Banana" < "banana"
    return _compare_values((a.title.casefold(), a.title), (b.title.casefold(), b.title))


def _compare_status(a: TaskProjection, b: TaskProjection) -> int:
    return STATUS_ORDER.get(a.status.value, 0) - STATUS_ORDER.get(b.status.value, 0)


def _compare_progress(a: TaskProjection, b: TaskProjection) -> int:
    return (a.completion_percent or 0) - (b.completion_percent or 0)


def _compare_default(field: str) -> Callable[[TaskProjection, TaskProjection], int]:
    attribute = _attribute_name(field)

    def compare(a: TaskProjection, b: TaskProjection) -> int:
        a_value = getattr(a, attribute, None)
        b_value = getattr(b, attribute, None)
        if isinstance(a_value, str) and isinstance(b_value, str):
            return _compare_values(a_value, b_value)
        numeric = (int, float)
        if (
            isinstance(a_value, numeric)
            and isinstance(b_value, numeric)
            and not isinstance(a_value, bool)
            and not isinstance(b_value, bool)
        ):
            return _compare_values(a_value, b_value)
        return 0

    return compare


def _priority_key(task: TaskProjection) -> Optional[int]:
    return PRIORITY_WEIGHT.get(task.priority.value) if task.priority else None


def _date_key(attribute: str) -> Callable[[TaskProjection], Any]:
    return lambda task: parse_date(getattr(task, attribute))


# Fields whose missing values sort last regardless of direction
_NULLS_LAST_KEYS = {
    "priority": _priority_key,
    "due_date": _date_key("due_date"),
    "start_date": _date_key("start_date"),
}

_COMPARATORS = {
    "title": _compare_titles,
    "status": _compare_status,
    "completion_percent": _compare_progress,
    "subtask_progress": _compare_progress,
}


def _compare_by(sort: TaskSort) -> Callable[[TaskProjection, TaskProjection], int]:
    attribute = _attribute_name(sort.field)
    descending = sort.direction == SortDirection.DESC

    if attribute in _NULLS_LAST_KEYS:
        key = _NULLS_LAST_KEYS[attribute]

        def compare(a: TaskProjection, b: TaskProjection) -> int:
            a_value, b_value = key(a), key(b)
            if a_value is None and b_value is None:
                return 0
            if a_value is None:
                return 1
            if b_value is None:
                return -1
            result = _compare_values(a_value, b_value)
            return -result if descending else result

        return compare

    base = _COMPARATORS.get(attribute) or _compare_default(sort.field)
    if descending:
        return lambda a, b: -base(a, b)
    return base


def apply_sorting(tasks: List[TaskProjection], sorts: List[TaskSort]) -> List[TaskProjection]:
    """Stable multi-key sort; the first key that differs decides."""
    if not sorts:
        return list(tasks)

    comparators = [_compare_by(sort) for sort in sorts]

    def compare(a: TaskProjection, b: TaskProjection) -> int:
        for comparator in comparators:
            result = comparator(a, b)
            if result != 0:
                return result
        return 0

    return sorted(tasks, key=cmp_to_key(compare))


# --- Pagination ---


def paginate(
    tasks: List[TaskProjection], offset: Optional[int] = None, limit: Optional[int] = None
) -> List[TaskProjection]:
    """Skip `offset` tasks, then keep at most `limit`."""
    if (offset is not None and offset < 0) or (limit is not None and limit < 0):
        raise TaskQueryError(f"offset and limit must be non-negative (offset={offset}, limit={limit})")

    if offset is not None:
        tasks = tasks[offset:]
    if limit is not None:
        tasks = tasks[:limit]
    return tasks
