"""
Post-Build Pipeline

Runs once per successful gnuplot build:

    extract targets -> assemble wrapper -> compile (awaited)
        -> { viewer | rasterize x N | remove artifacts | rewrite includes x N }

Everything after compilation is started without a join. The returned
PostBuildRun holds the futures so that a caller can wait for them, but the
pipeline itself never does.
"""

from concurrent.futures import Future, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from gnuplatex.config import GnuplatexConfig
from gnuplatex.contexts.rendering.assembler import (
    AssembledDocument,
    assemble_document,
    wrapper_path,
)
from gnuplatex.contexts.rendering.cleaner import remove_artifacts, rewrite_target_includes
from gnuplatex.contexts.rendering.compiler import (
    CompilationResult,
    compile_document,
    launch_viewer,
    rasterize_targets,
)
from gnuplatex.contexts.rendering.exceptions import CompilationError, DuplicateTargetError
from gnuplatex.contexts.rendering.logger import _log_debug, _log_error, _log_info
from gnuplatex.contexts.rendering.patterns import (
    OutputTarget,
    extract_output_targets,
    find_duplicate_targets,
)
from gnuplatex.utils.process_runner import ProcessRunner


@dataclass(frozen=True)
class SourceScript:
    """
    The gnuplot script that was built.

    Attributes:
        text: Full script text
        basename: File name without extension
        directory: Directory containing the script
    """

    text: str
    basename: str
    directory: Path

    @classmethod
    def from_path(cls, path: Path) -> "SourceScript":
        path = Path(path).resolve()
        return cls(
            text=path.read_text(encoding="utf-8", errors="replace"),
            basename=path.stem,
            directory=path.parent,
        )


@dataclass
class PostBuildRun:
    """
    Handle on one pipeline run.

    Attributes:
        script: Script the run was started for
        document: Assembled wrapper document
        compilation: Result of the awaited compiler step
        viewer: Future of the viewer launch (None if disabled)
        rasterizations: Rasterizer futures keyed by target name
        rewrites: Include-rewrite futures keyed by target name
        removed: Artifacts deleted by the cleaner
    """

    script: SourceScript
    document: AssembledDocument
    compilation: CompilationResult
    viewer: Optional[Future] = None
    rasterizations: Dict[str, Future] = field(default_factory=dict)
    rewrites: Dict[str, Future] = field(default_factory=dict)
    removed: List[Path] = field(default_factory=list)

    @property
    def targets(self) -> List[OutputTarget]:
        return self.document.targets

    def pending(self) -> List[Future]:
        futures = list(self.rasterizations.values()) + list(self.rewrites.values())
        if self.viewer is not None:
            futures.append(self.viewer)
        return futures

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every spawned branch has finished.

        Returns:
            True if all futures completed within ``timeout``
        """
        _, not_done = wait(self.pending(), timeout=timeout)
        return not not_done

    def failed_targets(self) -> List[str]:
        """Names of targets whose rasterization has finished unsuccessfully."""
        failed = []
        for name, future in self.rasterizations.items():
            if not future.done():
                continue
            if future.exception() is not None or not future.result().ok:
                failed.append(name)
        return failed


def run_post_build(
    script: SourceScript,
    config: GnuplatexConfig,
    runner: ProcessRunner,
    project_root: Optional[Path] = None,
    verbose: bool = False,
) -> PostBuildRun:
    """
    Turn a built gnuplot script into a PDF and one PNG per output target.

    Args:
        script: The script that was built
        config: Provider configuration
        runner: Process runner used for every external call
        project_root: Root against which include paths are rewritten (None skips rewriting)
        verbose: Log raw compiler output on success too

    Returns:
        PostBuildRun with the compilation result and the spawned futures

    Raises:
        DuplicateTargetError: If the script declares a target name more than once
        OSError: If the wrapper document cannot be written
        CompilationError: If the document compiler fails
    """
    toolchain = config.toolchain

    targets = extract_output_targets(script.text)
    if not targets:
        _log_info(f"{script.basename}: no .tex outputs declared")
    else:
        _log_debug(f"Targets: {', '.join(t.name for t in targets)}")

    duplicates = find_duplicate_targets(targets)
    if duplicates:
        raise DuplicateTargetError(duplicates)

    document = assemble_document(targets, wrapper_path(script.directory, script.basename))

    compilation = compile_document(document, runner, toolchain, verbose=verbose)
    if not compilation.success:
        _log_error(f"Skipping viewer, rasterization and cleanup for {script.basename}")
        raise CompilationError(f"Compilation of {document.path.name} failed", compilation)

    run = PostBuildRun(script=script, document=document, compilation=compilation)
    run.viewer = launch_viewer(document, runner, toolchain)
    run.rasterizations = rasterize_targets(document, runner, toolchain)
    run.removed = remove_artifacts(document, toolchain.artifact_extensions)
    run.rewrites = rewrite_target_includes(document, project_root, runner)

    return run


def on_build_complete(
    build_succeeded: bool,
    script: SourceScript,
    config: GnuplatexConfig,
    runner: ProcessRunner,
    project_root: Optional[Path] = None,
    verbose: bool = False,
) -> Optional[PostBuildRun]:
    """
    Build-completed hook: run the pipeline only after a successful build.

    Returns:
        PostBuildRun, or None when the build failed
    """
    if not build_succeeded:
        _log_debug(f"Build of {script.basename} failed; post-build skipped")
        return None
    return run_post_build(script, config, runner, project_root=project_root, verbose=verbose)
