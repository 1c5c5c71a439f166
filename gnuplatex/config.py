"""
Configuration for the gnuplatex build provider.

The configuration is a value object built once per invocation and passed into
the build and rendering contexts. Sources, later ones overriding earlier ones:

1. The structured schema below (types and fallbacks)
2. The packaged defaults.yaml
3. A user YAML file (``path`` argument or the GNUPLATEX_CONFIG env variable)

Examples:
    >>> config = load_config()
    >>> config.toolchain.latex_compiler
    'pdflatex'

    >>> config = load_config(overrides={"always_eligible": True})
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"
USER_CONFIG_PATH = os.getenv("GNUPLATEX_CONFIG")


@dataclass
class ToolchainConfig:
    """
    External programs used by the build and the post-build pipeline.

    Attributes:
        gnuplot: Plot interpreter run on the active script
        latex_compiler: Document compiler run on the wrapper document
        viewer: PDF viewer launched after compilation (empty string disables it)
        viewer_args: Flags passed to the viewer before the PDF path
        rasterizer: Image converter that extracts one PDF page per target
        density: Rasterization resolution in DPI
        quality: Rasterization quality level
        artifact_extensions: Suffixes of transient files removed after compilation
        max_workers: Worker threads for spawned processes and file rewrites
    """

    gnuplot: str = "gnuplot"
    latex_compiler: str = "pdflatex"
    viewer: str = "SumatraPDF"
    viewer_args: List[str] = field(default_factory=lambda: ["-reuse-instance"])
    rasterizer: str = "convert"
    density: int = 300
    quality: int = 100
    artifact_extensions: List[str] = field(default_factory=lambda: [".aux", ".log"])
    max_workers: int = 4


@dataclass
class GnuplatexConfig:
    """
    Provider settings.

    Attributes:
        grammar_scopes: Grammar scopes the provider applies to
        manage_dependencies: Check external executables when the provider starts
        always_eligible: Offer the provider even when eligibility checks fail
        toolchain: External program settings
    """

    grammar_scopes: List[str] = field(default_factory=lambda: ["source.gnuplot"])
    manage_dependencies: bool = True
    always_eligible: bool = False
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GnuplatexConfig:
    """
    Load provider configuration.

    Args:
        path: Optional user YAML file (defaults to GNUPLATEX_CONFIG env variable)
        overrides: Optional nested dict applied last (e.g. from CLI flags)

    Returns:
        GnuplatexConfig instance

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        omegaconf.errors.ValidationError: If a value has the wrong type
        omegaconf.errors.ConfigKeyError: If a file contains an unknown key
    """
    if path is None and USER_CONFIG_PATH:
        path = Path(USER_CONFIG_PATH)

    schema = OmegaConf.structured(GnuplatexConfig)
    layers = [schema, OmegaConf.load(DEFAULTS_PATH)]

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        layers.append(OmegaConf.load(path))

    if overrides:
        layers.append(OmegaConf.create(overrides))

    merged = OmegaConf.merge(*layers)
    return OmegaConf.to_object(merged)
