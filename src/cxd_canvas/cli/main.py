"""Main CLI entry point for cxd-canvas."""  # pragma: no cover

from cxd_canvas.cli.app import app  # pragma: no cover

# Register commands
from cxd_canvas.cli.commands import diagnose, tasks  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
