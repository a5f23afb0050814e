"""Utility functions for cxd-canvas."""

import sys

from loguru import logger


def setup_logging(log_level: str = "INFO", log_to_stderr: bool = True) -> None:
    """Configure loguru for the CLI.

    The engine modules only emit DEBUG records; callers embedding the library keep
    whatever sinks they already installed unless they call this.

    Args:
        log_level: Minimum level to emit
        log_to_stderr: When False all sinks are removed and nothing is written
    """
    logger.remove()
    if log_to_stderr:
        logger.add(
            sys.stderr,
            level=log_level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name} - {message}",
            backtrace=False,
            diagnose=False,
        )
    logger.debug(f"Logging configured at {log_level}")
