"""Configuration management for cxd-canvas."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cxd_canvas.schemas.query import TaskFilter

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class CanvasConfig(BaseSettings):
    """Runtime settings, read from CXD_CANVAS_* environment variables."""

    log_level: LogLevel = Field(default="INFO", description="Minimum level for log output")

    log_to_stderr: bool = Field(
        default=True, description="Write log records to stderr (disable for quiet scripting)"
    )

    default_page_size: int = Field(
        default=25,
        ge=1,
        description="Page size used by the table listing when no --limit is given",
    )

    show_completed: bool = Field(
        default=False,
        description="Whether the default task filter includes completed tasks",
    )

    model_config = SettingsConfigDict(
        env_prefix="CXD_CANVAS_",
        extra="ignore",
    )


@lru_cache
def get_config() -> CanvasConfig:
    """Return the process-wide configuration."""
    return CanvasConfig()


def default_filter(config: CanvasConfig | None = None) -> TaskFilter:
    """Build the filter Plan views start from."""
    config = config or get_config()
    return TaskFilter(
        show_completed=config.show_completed,
        include_implicit_tasks=True,
        include_explicit_tasks=True,
        include_tagged_cards=True,
    )
