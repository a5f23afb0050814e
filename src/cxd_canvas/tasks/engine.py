"""
Task engine facade.

Binds the stateless query functions to one collection of canvas elements, the way a
Plan view holds the current project's elements.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from cxd_canvas.schemas.canvas import CanvasElement
from cxd_canvas.schemas.query import TaskFilter, TaskQuery
from cxd_canvas.tasks.grouping import (
    KanbanColumn,
    filter_by_face,
    get_tasks_for_date,
    get_tasks_in_range,
    group_tasks_by,
    kanban_columns,
)
from cxd_canvas.tasks.models import TaskProjection, TaskQueryResult
from cxd_canvas.tasks.query import query_tasks


class TaskEngine:
    """Runs task queries against a fixed collection of canvas elements."""

    def __init__(self, elements: Iterable[CanvasElement]):
        """
        Initialize engine with canvas elements.

        Args:
            elements: Canvas elements (root canvas and nested boards)
        """
        self.elements: List[CanvasElement] = list(elements)

    def query(self, query: Optional[TaskQuery] = None) -> TaskQueryResult:
        """Execute a query; with no query every qualifying task is returned unsorted."""
        return query_tasks(self.elements, query or TaskQuery(filter=TaskFilter()))

    def tasks(self, query: Optional[TaskQuery] = None) -> List[TaskProjection]:
        return self.query(query).tasks

    def get_task(self, task_id: str) -> Optional[TaskProjection]:
        for task in self.tasks():
            if task.id == task_id:
                return task
        return None

    def group_by(
        self, group_by: str, query: Optional[TaskQuery] = None
    ) -> Dict[str, List[TaskProjection]]:
        return group_tasks_by(self.tasks(query), group_by)

    def kanban(self, query: Optional[TaskQuery] = None) -> List[KanbanColumn]:
        return kanban_columns(self.tasks(query))

    def tasks_for_date(
        self, day: Union[date, datetime], query: Optional[TaskQuery] = None
    ) -> List[TaskProjection]:
        return get_tasks_for_date(self.tasks(query), day)

    def tasks_in_range(
        self,
        start: Union[date, datetime],
        end: Union[date, datetime],
        query: Optional[TaskQuery] = None,
    ) -> List[TaskProjection]:
        return get_tasks_in_range(self.tasks(query), start, end)

    def filter_by_face(self, face: str, query: Optional[TaskQuery] = None) -> List[TaskProjection]:
        return filter_by_face(self.tasks(query), face)
