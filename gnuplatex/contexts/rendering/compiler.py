"""
Toolchain Driver

Compiles the wrapper document to PDF, then hands the PDF to the viewer and to
the rasterizer. Only the compiler call is awaited; the viewer launch and the
per-target rasterizations are spawned and report their own failures.
"""

import re
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Dict, List, Optional

from gnuplatex.config import ToolchainConfig
from gnuplatex.contexts.rendering.assembler import AssembledDocument
from gnuplatex.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_compilation_result,
)
from gnuplatex.contexts.rendering.patterns import OutputTarget
from gnuplatex.utils.pdf_processing import page_count
from gnuplatex.utils.process_runner import ProcessResult, ProcessRunner

COMPILER_FLAGS = ["-interaction", "nonstopmode", "-halt-on-error", "-file-line-error"]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the compiler
        stderr: Standard error from the compiler
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log output for errors and warnings.

    Handles both the classic "! message" form and the "file:line: message"
    form produced by -file-line-error.

    Args:
        log_content: Content of the .log file (or compiler stdout)

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    for match in re.finditer(r"^! (.+)$", log_content, re.MULTILINE):
        errors.append(match.group(1).strip())

    file_line_pattern = re.compile(
        r"^(?P<file>[^\s:]+\.tex):(?P<line>\d+): (?P<message>.+)$", re.MULTILINE
    )
    for match in file_line_pattern.finditer(log_content):
        error = f"{match.group('file')}:{match.group('line')}: {match.group('message').strip()}"
        if error not in errors:
            errors.append(error)

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def compile_document(
    document: AssembledDocument,
    runner: ProcessRunner,
    toolchain: ToolchainConfig,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile the wrapper document in its own directory and wait for the result.

    A stale PDF is removed first so that an existing file after the run
    always belongs to this compilation.

    Args:
        document: Assembled wrapper document
        runner: Process runner
        toolchain: Toolchain settings (compiler command)
        verbose: Log the raw compiler output even on success

    Returns:
        CompilationResult with success status and diagnostic information
    """
    pdf_path = document.pdf_path
    if pdf_path.exists():
        pdf_path.unlink()

    cmd = [toolchain.latex_compiler, *COMPILER_FLAGS, document.path.name]
    _log_info(f"Compiling {document.path.name} ({len(document.targets)} targets)")
    _log_debug(f"  Command: {' '.join(cmd)}")

    start_time = time.time()
    try:
        process = runner.run(cmd, cwd=document.directory)
    except OSError as e:
        result = CompilationResult(
            success=False, errors=[f"Could not start {toolchain.latex_compiler}: {e}"]
        )
        log_compilation_result(document.path.name, result, time.time() - start_time, verbose)
        return result

    errors: List[str] = []
    warnings: List[str] = []
    if document.log_path.exists():
        # pdflatex writes its log in latin-1 (font metadata is not UTF-8)
        errors, warnings = _parse_latex_log(document.log_path.read_text(encoding="latin-1"))
    elif process.stdout:
        errors, warnings = _parse_latex_log(process.stdout)

    success = process.ok and pdf_path.exists()
    if not success and not errors:
        if not process.ok:
            errors.append(f"{toolchain.latex_compiler} exited with status {process.returncode}")
        else:
            errors.append("PDF file was not generated")

    result = CompilationResult(
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        stdout=process.stdout,
        stderr=process.stderr,
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if pdf_path.exists() else None,
    )

    log_compilation_result(document.path.name, result, time.time() - start_time, verbose)

    if result.success and result.page_count is not None:
        if result.page_count != len(document.targets):
            _log_warning(
                f"{pdf_path.name} has {result.page_count} pages for "
                f"{len(document.targets)} targets; rasterized images may not line up"
            )

    return result


def _report_viewer(pdf_name: str, future: Future) -> None:
    error = future.exception()
    if error is not None:
        _log_warning(f"Could not open viewer for {pdf_name}: {error}")
    else:
        _log_debug(f"Viewer started for {pdf_name}")


def launch_viewer(
    document: AssembledDocument, runner: ProcessRunner, toolchain: ToolchainConfig
) -> Optional[Future]:
    """
    Open the compiled PDF in the configured viewer without waiting.

    Returns:
        Future resolving to the viewer process, or None when no viewer is configured
    """
    if not toolchain.viewer:
        _log_debug("No viewer configured")
        return None

    cmd = [toolchain.viewer, *toolchain.viewer_args, document.pdf_path.name]
    future = runner.launch(cmd, cwd=document.directory)
    future.add_done_callback(partial(_report_viewer, document.pdf_path.name))
    return future


def rasterize_command(
    document: AssembledDocument, target: OutputTarget, toolchain: ToolchainConfig
) -> List[str]:
    """Command line extracting the target's page into its PNG file."""
    return [
        toolchain.rasterizer,
        "-density",
        str(toolchain.density),
        f"{document.pdf_path.name}[{target.index}]",
        "-quality",
        str(toolchain.quality),
        target.image_file,
    ]


def _report_rasterization(target: OutputTarget, future: Future) -> None:
    error = future.exception()
    if error is not None:
        _log_error(f"Rasterizing {target.name} failed: {error}")
        return

    process: ProcessResult = future.result()
    if process.ok:
        _log_info(f"Rasterized page {target.index} to {target.image_file}")
    else:
        _log_error(
            f"Rasterizing {target.name} failed with status {process.returncode}: "
            f"{process.stderr.strip() or process.stdout.strip()}"
        )


def rasterize_targets(
    document: AssembledDocument, runner: ProcessRunner, toolchain: ToolchainConfig
) -> Dict[str, Future]:
    """
    Spawn one rasterizer process per target.

    Each process is independent: a failure is logged for that target only.

    Returns:
        Futures of the rasterizer processes, keyed by target name
    """
    futures = {}
    for target in document.targets:
        future = runner.spawn(rasterize_command(document, target, toolchain), cwd=document.directory)
        future.add_done_callback(partial(_report_rasterization, target))
        futures[target.name] = future
    return futures
