"""
Task derivation engine for CXD Canvas.

Derives tasks from canvas elements carrying markdown checkboxes or an actionable flag,
and filters, sorts, paginates and groups them for Plan views.
"""

from cxd_canvas.tasks.engine import TaskEngine
from cxd_canvas.tasks.formatter import TaskFormatter
from cxd_canvas.tasks.grouping import (
    KanbanColumn,
    filter_by_face,
    get_tasks_for_date,
    get_tasks_in_range,
    group_tasks_by,
    kanban_columns,
)
from cxd_canvas.tasks.markdown import (
    extract_title,
    has_markdown_tasks,
    has_multiple_tasks,
    parse_markdown_tasks,
    update_subtask_in_content,
)
from cxd_canvas.tasks.models import (
    SubtaskProjection,
    TaskProjection,
    TaskQualificationCriteria,
    TaskQueryResult,
)
from cxd_canvas.tasks.projection import project_element_as_tasks
from cxd_canvas.tasks.qualification import is_task_qualified, qualifies_as_task
from cxd_canvas.tasks.query import apply_filters, apply_sorting, paginate, query_tasks
from cxd_canvas.tasks.updates import (
    ElementPatch,
    apply_patch,
    apply_task_updates,
    create_task_metadata_update,
    create_updated_content,
    find_source_element,
    toggle_subtask,
)

__all__ = [
    # Engine
    "TaskEngine",
    "TaskFormatter",
    # Markdown
    "parse_markdown_tasks",
    "extract_title",
    "has_markdown_tasks",
    "has_multiple_tasks",
    "update_subtask_in_content",
    # Models
    "SubtaskProjection",
    "TaskProjection",
    "TaskQualificationCriteria",
    "TaskQueryResult",
    # Qualification / projection
    "qualifies_as_task",
    "is_task_qualified",
    "project_element_as_tasks",
    # Query
    "query_tasks",
    "apply_filters",
    "apply_sorting",
    "paginate",
    # Grouping
    "KanbanColumn",
    "group_tasks_by",
    "kanban_columns",
    "filter_by_face",
    "get_tasks_for_date",
    "get_tasks_in_range",
    # Updates
    "ElementPatch",
    "apply_patch",
    "apply_task_updates",
    "create_task_metadata_update",
    "create_updated_content",
    "find_source_element",
    "toggle_subtask",
]
