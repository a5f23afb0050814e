from typing import Optional, get_args

import typer

from cxd_canvas.config import LogLevel, get_config
from cxd_canvas.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import cxd_canvas

        typer.echo(f"cxd-canvas version: {cxd_canvas.__version__}")
        raise typer.Exit()


def log_level_callback(value: Optional[str]) -> Optional[str]:
    """Normalize --log-level and reject names loguru does not know."""
    if value is None:
        return None
    level = value.upper()
    if level not in get_args(LogLevel):
        raise typer.BadParameter(
            f"Unknown log level {value!r}, expected one of {', '.join(get_args(LogLevel))}"
        )
    return level


app = typer.Typer(name="cxd-canvas", no_args_is_help=True)


@app.callback()
def app_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum log level (defaults to CXD_CANVAS_LOG_LEVEL or INFO)",
        callback=log_level_callback,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """CXD Canvas - derive and review tasks from canvas boards."""
    config = get_config()
    setup_logging(
        log_level=log_level or config.log_level,
        log_to_stderr=config.log_to_stderr,
    )


# Register sub-command groups
tasks_app = typer.Typer(help="List, group and toggle tasks derived from a project")
app.add_typer(tasks_app, name="tasks")
