"""
Custom exceptions for the CXD Canvas engine.

The task pipeline itself is total over valid input: malformed markdown, unsupported
element kinds and out-of-range edits degrade to fallback values. These exceptions
only signal contract violations at the edges (bad descriptors, unreadable exports).
"""


class CanvasError(Exception):
    """Base exception for all CXD Canvas errors."""

    pass


class TaskQueryError(CanvasError):
    """Raised when a task query or grouping request is malformed."""

    pass


class ProjectLoadError(CanvasError):
    """Raised when a project export cannot be read or validated."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"{message}{location}")


class TaskUpdateError(CanvasError):
    """Raised when a task edit names a field that is not task metadata."""

    pass
