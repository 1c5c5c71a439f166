"""
Rendering Context

Responsibilities:
- Extracts the .tex outputs a gnuplot script declares
- Assembles and compiles the wrapper document
- Rasterizes one PNG per output and opens the viewer
- Removes transient files and fixes include paths

Owns: wrapper document, compiled PDF, PNG renders
Never: Runs gnuplot itself
"""

from gnuplatex.contexts.rendering.exceptions import (
    CompilationError,
    DuplicateTargetError,
    RenderingError,
)
from gnuplatex.contexts.rendering.patterns import (
    OutputTarget,
    extract_output_targets,
    rewrite_include_paths,
)
from gnuplatex.contexts.rendering.pipeline import (
    PostBuildRun,
    SourceScript,
    on_build_complete,
    run_post_build,
)

__all__ = [
    "CompilationError",
    "DuplicateTargetError",
    "RenderingError",
    "OutputTarget",
    "extract_output_targets",
    "rewrite_include_paths",
    "PostBuildRun",
    "SourceScript",
    "on_build_complete",
    "run_post_build",
]
