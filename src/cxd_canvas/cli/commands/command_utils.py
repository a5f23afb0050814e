"""Shared helpers for CLI commands."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from cxd_canvas.errors import ProjectLoadError
from cxd_canvas.file_utils import load_project
from cxd_canvas.schemas.project import CanvasProject

console = Console()


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


def load_project_or_exit(path: Path) -> CanvasProject:
    """Load a project export, printing the error and exiting 1 on failure."""
    try:
        return load_project(path)
    except ProjectLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def echo_json(data: Any) -> None:
    """Print JSON without rich markup so output stays machine readable."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
