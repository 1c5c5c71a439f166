"""
Build context logger.

Provides logging interface for build context with automatic [build] prefix.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from gnuplatex.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[build]"


def setup_build_logger(
    log_dir: Optional[Path] = None, gnuplot: str = "gnuplot", verbose: bool = False
) -> Path:
    """Configure loguru for a build session and return the log file path."""
    return _setup_logger(
        context_name="build",
        log_dir=log_dir,
        extra_provenance={"gnuplot": gnuplot},
        verbose=verbose,
    )


def _log_info(message: str) -> None:
    """Log info message with [build] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [build] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [build] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [build] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [build] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
