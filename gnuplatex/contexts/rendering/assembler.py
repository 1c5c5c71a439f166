"""
Wrapper Document Assembly

Renders the LaTeX document that includes every cairolatex output of a script,
one page per target.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from gnuplatex.contexts.rendering.logger import _log_debug
from gnuplatex.contexts.rendering.patterns import OutputTarget

TEMPLATES_PATH = Path(__file__).parent / "templates"
WRAPPER_TEMPLATE = "wrapper.tex.jinja"
WRAPPER_PREFIX = "Plot_"


@dataclass
class AssembledDocument:
    """
    Generated wrapper document.

    Attributes:
        path: Location of the .tex file
        targets: Included targets, in page order
    """

    path: Path
    targets: List[OutputTarget] = field(default_factory=list)

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def pdf_path(self) -> Path:
        return self.path.with_suffix(".pdf")

    @property
    def log_path(self) -> Path:
        return self.path.with_suffix(".log")


def wrapper_path(directory: Path, basename: str) -> Path:
    """Return ``<directory>/Plot_<basename>.tex``."""
    return Path(directory) / f"{WRAPPER_PREFIX}{basename}.tex"


@lru_cache(maxsize=1)
def _wrapper_template() -> Template:
    # Custom delimiters keep Jinja2 syntax clear of LaTeX braces
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_PATH)),
        undefined=StrictUndefined,
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=True,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )
    return env.get_template(WRAPPER_TEMPLATE)


def render_document(targets: List[OutputTarget]) -> str:
    """
    Render the wrapper document text.

    The preamble is fixed and the include lines follow ``targets`` order, so
    the same targets always produce the same text.
    """
    return _wrapper_template().render(targets=targets)


def assemble_document(targets: List[OutputTarget], destination: Path) -> AssembledDocument:
    """
    Write the wrapper document, overwriting any previous one.

    Args:
        targets: Ordered output targets
        destination: Path of the .tex file to write

    Returns:
        AssembledDocument describing the written file

    Raises:
        OSError: If the file cannot be written
    """
    destination = Path(destination)
    destination.write_text(render_document(targets), encoding="utf-8")
    _log_debug(f"Wrote {destination.name} with {len(targets)} includes")
    return AssembledDocument(path=destination, targets=list(targets))
