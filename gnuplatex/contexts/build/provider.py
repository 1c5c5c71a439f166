"""
Gnuplot Build Provider

Eligibility rules for the provider and the build step itself: running gnuplot
on a script and matching its error messages.
"""

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from gnuplatex.config import GnuplatexConfig
from gnuplatex.contexts.build.logger import _log_debug, _log_error, _log_info, _log_success
from gnuplatex.utils.process_runner import ProcessResult, ProcessRunner

NICE_NAME = "Gnuplot"
GNUPLOT_SCOPE = "source.gnuplot"

SCOPE_BY_EXTENSION = {
    ".gp": GNUPLOT_SCOPE,
    ".gpi": GNUPLOT_SCOPE,
    ".gnu": GNUPLOT_SCOPE,
    ".gnuplot": GNUPLOT_SCOPE,
    ".plt": GNUPLOT_SCOPE,
    ".plot": GNUPLOT_SCOPE,
}

# gnuplot reports errors as: "script.gp", line 12: undefined variable: x
ERROR_MATCH = re.compile(
    r"\"(?P<file>[\\/0-9a-zA-Z\._-]+)\",\sline\s(?P<line>\d+):\s(?P<message>.+)"
)


@dataclass
class BuildError:
    """One error reported by gnuplot."""

    file: str
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}: {self.message}"


@dataclass
class BuildOutcome:
    """
    Result of running gnuplot on a script.

    Attributes:
        success: Whether gnuplot exited cleanly
        errors: Matched error messages
        result: Raw process result (None if gnuplot could not be started)
    """

    success: bool
    errors: List[BuildError] = field(default_factory=list)
    result: Optional[ProcessResult] = None


def grammar_scope_for(path: Path) -> Optional[str]:
    """Grammar scope of a file, derived from its extension."""
    return SCOPE_BY_EXTENSION.get(Path(path).suffix.lower())


def is_eligible(config: GnuplatexConfig, scope: Optional[str]) -> bool:
    """
    Whether the provider applies to a script with the given grammar scope.

    The always-eligible override wins. Otherwise gnuplot must be on PATH and
    the scope must be one of the configured grammar scopes.
    """
    if config.always_eligible:
        return True

    if shutil.which(config.toolchain.gnuplot) is None:
        _log_debug(f"{config.toolchain.gnuplot} not found on PATH")
        return False

    return scope in config.grammar_scopes


def parse_build_errors(output: str) -> List[BuildError]:
    """Match gnuplot error lines into BuildError records."""
    return [
        BuildError(
            file=match.group("file"),
            line=int(match.group("line")),
            message=match.group("message").strip(),
        )
        for match in ERROR_MATCH.finditer(output)
    ]


def run_gnuplot(script_path: Path, runner: ProcessRunner, config: GnuplatexConfig) -> BuildOutcome:
    """
    Run gnuplot on a script from the script's directory.

    Args:
        script_path: Path to the gnuplot script
        runner: Process runner
        config: Provider configuration (gnuplot command)

    Returns:
        BuildOutcome with matched errors
    """
    script_path = Path(script_path).resolve()
    cmd = [config.toolchain.gnuplot, script_path.name]
    _log_info(f"Running {' '.join(cmd)} in {script_path.parent}")

    try:
        result = runner.run(cmd, cwd=script_path.parent)
    except OSError as e:
        _log_error(f"Could not start {config.toolchain.gnuplot}: {e}")
        return BuildOutcome(success=False)

    errors = parse_build_errors(result.stderr + "\n" + result.stdout)
    outcome = BuildOutcome(success=result.ok, errors=errors, result=result)

    if outcome.success:
        _log_success(f"{script_path.name}: build succeeded")
    else:
        _log_error(f"{script_path.name}: gnuplot exited with status {result.returncode}")
        for error in errors:
            _log_error(f"  {error}")
        if not errors and result.stderr.strip():
            _log_error(f"  {result.stderr.strip()}")

    return outcome
