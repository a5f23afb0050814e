"""Task CLI commands for cxd-canvas.

Registered as a subcommand group: `cxd-canvas tasks list`, `cxd-canvas tasks group`,
`cxd-canvas tasks toggle`.
"""

from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.table import Table

from cxd_canvas.cli.app import tasks_app
from cxd_canvas.cli.commands.command_utils import (
    OutputFormat,
    console,
    echo_json,
    load_project_or_exit,
)
from cxd_canvas.config import default_filter, get_config
from cxd_canvas.errors import CanvasError
from cxd_canvas.file_utils import write_element_patch
from cxd_canvas.schemas.base import TaskPriority, TaskStatus
from cxd_canvas.schemas.project import collect_elements
from cxd_canvas.schemas.query import (
    DEFAULT_SORT,
    DateRange,
    SortDirection,
    TaskQuery,
    TaskSort,
)
from cxd_canvas.tasks.engine import TaskEngine
from cxd_canvas.tasks.formatter import TaskFormatter
from cxd_canvas.tasks.models import TaskProjection
from cxd_canvas.tasks.updates import toggle_subtask

STATUS_STYLES = {
    TaskStatus.NOT_STARTED: "white",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.BLOCKED: "red",
    TaskStatus.COMPLETED: "green",
}


def parse_sort_option(value: str) -> TaskSort:
    """Parse FIELD or FIELD:asc|desc."""
    field, _, direction = value.partition(":")
    if not field:
        raise typer.BadParameter(f"Missing sort field in {value!r}")
    try:
        return TaskSort(field=field, direction=SortDirection(direction.lower() or "asc"))
    except ValueError:
        raise typer.BadParameter(f"Sort direction must be asc or desc, got {direction!r}")


def _tasks_table(title: str, tasks: List[TaskProjection]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Progress", justify="right")
    table.add_column("Faces")

    for task in tasks:
        style = STATUS_STYLES.get(task.status, "white")
        table.add_row(
            task.id,
            task.title,
            f"[{style}]{task.status.value}[/{style}]",
            task.priority.value if task.priority else "",
            (task.due_date or "").split("T")[0],
            f"{task.completed_subtasks}/{task.total_subtasks} ({task.completion_percent}%)",
            ", ".join(task.hypercube_tags),
        )
    return table


@tasks_app.command("list")
def list_tasks(
    project_file: Annotated[Path, typer.Argument(help="Project JSON export")],
    status: Annotated[
        Optional[List[TaskStatus]], typer.Option("--status", help="Only these statuses")
    ] = None,
    priority: Annotated[
        Optional[List[TaskPriority]], typer.Option("--priority", help="Only these priorities")
    ] = None,
    assignee: Annotated[
        Optional[List[str]], typer.Option("--assignee", help="Only these assignees")
    ] = None,
    face: Annotated[
        Optional[List[str]], typer.Option("--face", help="Hypercube face tag")
    ] = None,
    all_faces: bool = typer.Option(
        False, "--all-faces", help="Require every --face instead of any"
    ),
    board: Annotated[
        Optional[List[str]], typer.Option("--board", help="Only tasks on these boards")
    ] = None,
    tag: Annotated[Optional[List[str]], typer.Option("--tag", help="Custom tag")] = None,
    search: Optional[str] = typer.Option(None, "--search", help="Match title or description"),
    due_from: Optional[str] = typer.Option(None, "--due-from", help="Earliest due date"),
    due_to: Optional[str] = typer.Option(None, "--due-to", help="Latest due date"),
    show_completed: Optional[bool] = typer.Option(
        None,
        "--show-completed/--hide-completed",
        help="Include completed tasks (defaults to CXD_CANVAS_SHOW_COMPLETED)",
    ),
    sort: Annotated[
        Optional[List[str]],
        typer.Option("--sort", help="FIELD[:asc|desc], repeatable; first key wins"),
    ] = None,
    limit: Optional[int] = typer.Option(None, "--limit", min=0, help="Page size"),
    offset: Optional[int] = typer.Option(None, "--offset", min=0, help="Tasks to skip"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", help="Output format"),
):
    """List tasks derived from a project's canvas.

    Sorted by priority (urgent first) then due date unless --sort is given.
    The table view pages with the configured default page size when --limit is omitted.
    """
    config = get_config()
    sorts = [parse_sort_option(value) for value in sort] if sort else list(DEFAULT_SORT)

    changes = {
        "statuses": status or None,
        "priorities": priority or None,
        "assignees": assignee or None,
        "hypercube_faces": face or None,
        "require_all_faces": all_faces,
        "board_ids": board or None,
        "custom_tags": tag or None,
        "search_query": search,
    }
    if show_completed is not None:
        changes["show_completed"] = show_completed
    if due_from or due_to:
        changes["due_date_range"] = DateRange(start=due_from, end=due_to)
    task_filter = default_filter(config).model_copy(update=changes)

    if limit is None and format == OutputFormat.TABLE:
        limit = config.default_page_size

    project = load_project_or_exit(project_file)
    engine = TaskEngine(collect_elements(project))
    result = engine.query(TaskQuery(filter=task_filter, sort=sorts, limit=limit, offset=offset))

    if format == OutputFormat.JSON:
        echo_json(result.to_dict())
        return
    if format == OutputFormat.MARKDOWN:
        typer.echo(TaskFormatter.format_table(result.tasks))
        return

    if not result.tasks:
        console.print("[yellow]No tasks matched.[/yellow]")
        return
    console.print(_tasks_table(f"Tasks: {project.name or project_file.name}", result.tasks))
    console.print(f"\nShowing {len(result.tasks)} of {result.total} tasks")


@tasks_app.command("group")
def group_tasks(
    project_file: Annotated[Path, typer.Argument(help="Project JSON export")],
    by: str = typer.Option(
        "status", "--by", help="status, priority, hypercubeFace or assignee"
    ),
    show_completed: bool = typer.Option(
        True, "--show-completed/--hide-completed", help="Include completed tasks"
    ),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", help="Output format"),
):
    """Group tasks the way the kanban and face views do."""
    project = load_project_or_exit(project_file)
    engine = TaskEngine(collect_elements(project))
    task_filter = default_filter().model_copy(update={"show_completed": show_completed})

    try:
        groups = engine.group_by(by, TaskQuery(filter=task_filter, sort=list(DEFAULT_SORT)))
    except CanvasError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        echo_json({name: [task.to_dict() for task in members] for name, members in groups.items()})
        return
    if format == OutputFormat.MARKDOWN:
        typer.echo(TaskFormatter.format_groups(groups))
        return

    if not groups:
        console.print("[yellow]No tasks matched.[/yellow]")
        return
    for name, members in groups.items():
        console.print(_tasks_table(f"{name} ({len(members)})", members))


@tasks_app.command("toggle")
def toggle_task(
    project_file: Annotated[Path, typer.Argument(help="Project JSON export")],
    task_id: Annotated[str, typer.Argument(help="Task id as shown by `tasks list`")],
    index: Annotated[
        int, typer.Argument(help="Subtask index (ignored for split tasks)")
    ] = 0,
    write: bool = typer.Option(False, "--write", help="Save the change into PROJECT_FILE"),
):
    """Flip a checkbox of a task.

    Without --write the resulting element patch is printed as JSON.
    """
    project = load_project_or_exit(project_file)
    elements = collect_elements(project)
    engine = TaskEngine(elements)

    task = engine.get_task(task_id)
    if task is None:
        console.print(f"[red]Error: no task with id {task_id}[/red]")
        raise typer.Exit(1)

    patch = toggle_subtask(elements, task, index)
    if patch is None or patch.is_empty():
        console.print(f"[red]Error: task {task_id} has no subtask {index}[/red]")
        raise typer.Exit(1)

    if not write:
        payload = {"elementId": patch.element_id}
        if patch.content is not None:
            payload["content"] = patch.content
        if patch.task_metadata is not None:
            payload["taskMetadata"] = patch.task_metadata.to_json_dict()
        echo_json(payload)
        return

    try:
        written = write_element_patch(project_file, patch)
    except CanvasError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    if not written:
        console.print(f"[red]Error: element {patch.element_id} not found[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Updated {patch.element_id}[/green]")
