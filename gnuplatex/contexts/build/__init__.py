"""
Build Context

Responsibilities:
- Decides whether a script is eligible for the gnuplot provider
- Checks that the external toolchain is installed
- Runs gnuplot and matches its error output

Owns: gnuplot invocation, build errors
Never: Touches the files produced by the build
"""

from gnuplatex.contexts.build.dependencies import check_dependencies
from gnuplatex.contexts.build.provider import (
    BuildError,
    BuildOutcome,
    grammar_scope_for,
    is_eligible,
    parse_build_errors,
    run_gnuplot,
)

__all__ = [
    "check_dependencies",
    "BuildError",
    "BuildOutcome",
    "grammar_scope_for",
    "is_eligible",
    "parse_build_errors",
    "run_gnuplot",
]
