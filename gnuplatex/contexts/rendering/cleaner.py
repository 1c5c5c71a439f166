"""
Workspace Cleaner

Removes transient compiler files after a successful compilation and points the
cairolatex include files at their images relative to the project root.
"""

import os
from concurrent.futures import Future
from functools import partial
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from gnuplatex.contexts.rendering.assembler import AssembledDocument
from gnuplatex.contexts.rendering.logger import _log_debug, _log_error, _log_warning
from gnuplatex.contexts.rendering.patterns import rewrite_include_paths
from gnuplatex.utils.process_runner import ProcessRunner


def find_artifacts(document: AssembledDocument, extensions: Iterable[str]) -> List[Path]:
    """List transient files in the document directory plus the wrapper itself."""
    suffixes = {ext.lower() for ext in extensions}
    artifacts = sorted(
        path
        for path in document.directory.iterdir()
        if path.is_file() and path.suffix.lower() in suffixes
    )
    if document.path not in artifacts:
        artifacts.append(document.path)
    return artifacts


def remove_artifacts(document: AssembledDocument, extensions: Iterable[str]) -> List[Path]:
    """
    Delete transient compiler files and the wrapper document.

    Deletion is best-effort: a file that cannot be removed is logged and
    skipped.

    Args:
        document: Compiled wrapper document
        extensions: Artifact suffixes (e.g. [".aux", ".log"])

    Returns:
        Paths that were removed
    """
    removed = []
    for path in find_artifacts(document, extensions):
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            _log_warning(f"Could not remove {path.name}: {e}")
            continue
        removed.append(path)

    _log_debug(f"Removed {len(removed)} artifacts: {', '.join(p.name for p in removed)}")
    return removed


def relative_prefix(project_root: Path, working_dir: Path) -> Optional[str]:
    """
    POSIX-style path from the project root to the working directory.

    Returns:
        The relative path, or None when both are the same directory
    """
    project_root = Path(project_root).resolve()
    working_dir = Path(working_dir).resolve()
    if project_root == working_dir:
        return None
    return Path(os.path.relpath(working_dir, project_root)).as_posix()


def rewrite_include_file(path: Path, prefix: str) -> bool:
    """
    Rewrite one include file in place.

    Returns:
        True if the file changed
    """
    original = path.read_text(encoding="utf-8")
    rewritten = rewrite_include_paths(original, prefix)
    if rewritten == original:
        return False
    path.write_text(rewritten, encoding="utf-8")
    return True


def _report_rewrite(path: Path, future: Future) -> None:
    error = future.exception()
    if error is not None:
        _log_error(f"Could not rewrite {path.name}: {error}")
    elif future.result():
        _log_debug(f"Rewrote image paths in {path.name}")


def rewrite_target_includes(
    document: AssembledDocument,
    project_root: Optional[Path],
    runner: ProcessRunner,
) -> Dict[str, Future]:
    """
    Prefix image references in every target's include file when the document
    directory lies below a different project root.

    Each file is read, rewritten and written back on the pool; a failure is
    logged for that file only.

    Returns:
        Futures of the rewrites keyed by target name (empty when no rewrite is needed)
    """
    if project_root is None:
        return {}

    prefix = relative_prefix(project_root, document.directory)
    if prefix is None:
        return {}

    _log_debug(f"Prefixing include paths with {prefix}")
    futures = {}
    for target in document.targets:
        path = document.directory / target.include_file
        future = runner.submit(rewrite_include_file, path, prefix)
        future.add_done_callback(partial(_report_rewrite, path))
        futures[target.name] = future
    return futures
