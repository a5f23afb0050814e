"""Diagnose command for cxd-canvas."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from cxd_canvas.cli.app import app
from cxd_canvas.cli.commands.command_utils import (
    OutputFormat,
    console,
    echo_json,
    load_project_or_exit,
)
from cxd_canvas.diagnostics import FACE_TAGS, calculate_face_intensities, generate_diagnostics
from cxd_canvas.diagnostics.models import DiagnosticSeverity
from cxd_canvas.schemas.canvas import HYPERCUBE_FACE_COLORS
from cxd_canvas.schemas.project import collect_elements

SEVERITY_STYLES = {
    DiagnosticSeverity.INFO: "blue",
    DiagnosticSeverity.CAUTION: "yellow",
    DiagnosticSeverity.CONCERN: "red",
}


@app.command()
def diagnose(
    project_file: Annotated[Path, typer.Argument(help="Project JSON export")],
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", help="Output format"),
):
    """Run design diagnostics over a project."""
    project = load_project_or_exit(project_file)
    elements = collect_elements(project)
    diagnostics = generate_diagnostics(project, elements)

    if format == OutputFormat.JSON:
        echo_json([d.to_dict() for d in diagnostics])
        return

    if format == OutputFormat.MARKDOWN:
        if not diagnostics:
            typer.echo("_No diagnostics_")
            return
        for d in diagnostics:
            typer.echo(f"- **{d.category.value}** ({d.severity.value}): {d.message}")
        return

    faces = Table(title="Face intensities")
    faces.add_column("Face")
    faces.add_column("State")
    faces.add_column("Completion", justify="right")
    faces.add_column("Coherence", justify="right")
    faces.add_column("Elements", justify="right")
    for key, intensity in calculate_face_intensities(project, elements).items():
        tag = FACE_TAGS[key]
        color = HYPERCUBE_FACE_COLORS[tag]
        faces.add_row(
            f"[{color}]{tag}[/{color}]",
            intensity.state,
            f"{intensity.completion:.0%}",
            f"{intensity.coherence:.0%}",
            str(intensity.element_count),
        )
    console.print(faces)

    if not diagnostics:
        console.print("[green]No diagnostics raised.[/green]")
        return

    table = Table(title="Diagnostics")
    table.add_column("Category", style="cyan")
    table.add_column("Severity")
    table.add_column("Message")
    for d in diagnostics:
        style = SEVERITY_STYLES[d.severity]
        table.add_row(d.category.value, f"[{style}]{d.severity.value}[/{style}]", d.message)
    console.print(table)
