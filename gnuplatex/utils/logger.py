"""
Generic loguru setup shared by every context.

Context-specific wrappers with message prefixes live in
contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {thread.name: <12} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[dict] = None,
    verbose: bool = False,
) -> Path:
    """
    Configure loguru with a file sink, a console sink and a provenance header.

    The file sink records everything at DEBUG. The console shows INFO and
    above, or DEBUG when ``verbose`` is set. Worker thread names are kept in
    the file format because rasterization and include rewrites log from
    executor threads.

    Args:
        context_name: Context identifier used as the log file stem (e.g. "render")
        log_dir: Directory for the log file (default: LOGS_PATH)
        extra_provenance: Additional key-value pairs for the provenance header
        verbose: Lower the console threshold to DEBUG

    Returns:
        Path to log file
    """
    if log_dir is None:
        log_dir = LOGS_PATH
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", enqueue=True)
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Log command line, working directory and Python version, plus any extras."""
    logger.debug("=" * 80)
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
