"""Shared base model and enumerations for CXD Canvas schemas.

The web client stores everything as camelCase JSON; Python code uses snake_case
attribute names. Every schema inherits the alias configuration from CanvasModel so
either spelling validates.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CanvasModel(BaseModel):
    """Base for all CXD Canvas input models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskStatus(str, Enum):
    """Task status, inferred from checkboxes or set explicitly."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(str, Enum):
    DESIGN = "Design"
    DEV = "Dev"
    ADMIN = "Admin"
    RESEARCH = "Research"
    CUSTOM = "Custom"
