"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from gnuplatex.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Optional[Path] = None, latex_compiler: str = "pdflatex", verbose: bool = False
) -> Path:
    """Configure loguru for a post-build session and return the log file path."""
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": latex_compiler},
        verbose=verbose,
    )


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_compilation_result(
    document_name: str,
    result,  # CompilationResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Log compilation result with diagnostics.

    Args:
        document_name: Wrapper document file name
        result: CompilationResult from compile_document()
        elapsed_time: Time taken to compile
        verbose: Show more errors and the raw compiler output on success too
    """
    if result.success:
        _log_success(f"{document_name}: compiled ({elapsed_time:.2f}s)")
        if result.pdf_path:
            _log_debug(f"  PDF: {result.pdf_path}")
    else:
        _log_error(f"{document_name}: {len(result.errors)} errors ({elapsed_time:.2f}s)")
        error_limit = 10 if verbose else 5
        for i, err in enumerate(result.errors[:error_limit], 1):
            _log_error(f"  Error {i}: {err}")
        if len(result.errors) > error_limit:
            _log_error(f"  ... and {len(result.errors) - error_limit} more errors")

    if result.warnings:
        _log_warning(f"{len(result.warnings)} warnings detected")
        warning_limit = 10 if verbose else 3
        for i, warn in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warn}")

    # raw=True keeps loguru from prefixing every line of multi-line output
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )
