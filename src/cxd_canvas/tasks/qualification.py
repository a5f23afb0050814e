"""
Task qualification.

An element becomes a task source when its content contains checkbox syntax or its
metadata flags it as actionable. Hypercube tags are reported but never qualify an
element on their own: tagging is a classification workflow, not a to-do list.
"""

from cxd_canvas.schemas.canvas import CanvasElement, element_content
from cxd_canvas.tasks.markdown import has_markdown_tasks
from cxd_canvas.tasks.models import TaskQualificationCriteria


def qualifies_as_task(element: CanvasElement) -> TaskQualificationCriteria:
    """Evaluate the three qualification probes for an element."""
    content = element_content(element)
    metadata = element.task_metadata

    return TaskQualificationCriteria(
        has_markdown_tasks=has_markdown_tasks(content) if content else False,
        is_explicitly_actionable=metadata is not None and metadata.is_actionable is True,
        has_hypercube_tags=len(element.hypercube_tags) > 0,
    )


def is_task_qualified(element: CanvasElement) -> bool:
    """True if the element has checkbox syntax or is explicitly actionable."""
    criteria = qualifies_as_task(element)
    return criteria.has_markdown_tasks or criteria.is_explicitly_actionable
