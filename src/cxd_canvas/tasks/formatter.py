"""
Result formatter for task queries.

Formats task projections as markdown for pasting into notes or chat.
"""

from typing import Dict, List

from cxd_canvas.tasks.models import TaskProjection


class TaskFormatter:
    """Formats tasks for display."""

    @classmethod
    def format_task_list(cls, tasks: List[TaskProjection]) -> str:
        """
        Format tasks as a markdown checklist.

        Aggregate tasks list their subtasks indented underneath.

        Args:
            tasks: Tasks to format

        Returns:
            Markdown task list string
        """
        if not tasks:
            return "_No tasks_"

        lines = []
        for task in tasks:
            mark = "x" if task.status == "completed" else " "
            suffix = f" ({task.completion_percent}%)" if task.total_subtasks > 1 else ""
            lines.append(f"- [{mark}] {task.title}{suffix}")
            for subtask in task.subtasks:
                sub_mark = "x" if subtask.is_completed else " "
                lines.append(f"  - [{sub_mark}] {subtask.text}")

        return "\n".join(lines)

    @classmethod
    def format_table(cls, tasks: List[TaskProjection]) -> str:
        """Format tasks as a markdown table."""
        if not tasks:
            return "_No results_"

        header = "| Status | Title | Priority | Due | Progress | Faces |"
        separator = "| --- | --- | --- | --- | --- | --- |"
        rows = []
        for task in tasks:
            values = [
                task.status.value,
                task.title.replace("|", "\\|"),
                task.priority.value if task.priority else "",
                (task.due_date or "").split("T")[0],
                f"{task.completion_percent}%",
                ", ".join(task.hypercube_tags),
            ]
            rows.append("| " + " | ".join(values) + " |")

        return "\n".join([header, separator] + rows)

    @classmethod
    def format_groups(cls, groups: Dict[str, List[TaskProjection]]) -> str:
        """Format grouped tasks as markdown sections."""
        if not groups:
            return "_No tasks_"

        sections = []
        for name, members in groups.items():
            sections.append(f"## {name} ({len(members)})\n\n{cls.format_task_list(members)}")
        return "\n\n".join(sections)
