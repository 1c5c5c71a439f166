"""External toolchain availability checks."""

import shutil
from typing import Dict

from gnuplatex.config import GnuplatexConfig
from gnuplatex.contexts.build.logger import _log_debug, _log_warning


def required_programs(config: GnuplatexConfig) -> Dict[str, str]:
    """Map each toolchain role to its configured executable."""
    toolchain = config.toolchain
    programs = {
        "gnuplot": toolchain.gnuplot,
        "latex_compiler": toolchain.latex_compiler,
        "rasterizer": toolchain.rasterizer,
    }
    if toolchain.viewer:
        programs["viewer"] = toolchain.viewer
    return programs


def check_dependencies(config: GnuplatexConfig) -> Dict[str, bool]:
    """
    Check which configured executables can be found on PATH.

    Missing programs are logged as warnings; nothing is installed.

    Returns:
        Availability keyed by executable name
    """
    availability = {}
    for role, program in required_programs(config).items():
        found = shutil.which(program) is not None
        availability[program] = found
        if found:
            _log_debug(f"Found {role}: {program}")
        else:
            _log_warning(f"Missing {role}: '{program}' is not on PATH")
    return availability
