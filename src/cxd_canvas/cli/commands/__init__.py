"""CLI commands for cxd-canvas."""

from . import diagnose, tasks

__all__ = ["diagnose", "tasks"]
