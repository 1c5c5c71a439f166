"""
Pattern extraction and substitution for gnuplot scripts and cairolatex output.

Both operations are lightweight regex scans, not parsers. They are the only
place where script or LaTeX syntax is interpreted, so a stricter parser can
replace them without touching the pipeline.
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class GnuplotRegex:
    """Patterns matched against gnuplot script text."""

    # set output 'name.tex' / set output "name.tex"; the opening quote must close
    SET_OUTPUT_TEX: str = r"^[ \t]*set[ \t]+output[ \t]+(['\"])(?P<name>[\w-]+)\.tex\1"


@dataclass(frozen=True)
class IncludeRegex:
    """Patterns matched against the include files written by cairolatex."""

    # \includegraphics{name} or \includegraphics[opts]{name}, bare names only
    INCLUDEGRAPHICS: str = r"\\includegraphics(?P<options>\[[^\]]*\])?\{(?P<name>[\w-]+)\}"


@dataclass(frozen=True)
class OutputTarget:
    """
    One declared rendering target of a gnuplot script.

    Attributes:
        name: Output file stem (``set output 'name.tex'`` yields ``name``)
        index: Position in the script, used as the page index of the compiled PDF
    """

    name: str
    index: int

    @property
    def include_file(self) -> str:
        """File name of the LaTeX include written by gnuplot."""
        return f"{self.name}.tex"

    @property
    def image_file(self) -> str:
        """File name of the rasterized page."""
        return f"png_{self.name}.png"


_SET_OUTPUT = re.compile(GnuplotRegex.SET_OUTPUT_TEX, re.MULTILINE)
_INCLUDEGRAPHICS = re.compile(IncludeRegex.INCLUDEGRAPHICS)


def extract_output_targets(text: str) -> List[OutputTarget]:
    """
    Extract every ``set output '<name>.tex'`` statement in source order.

    Malformed or partially quoted statements do not match and are skipped.

    Args:
        text: Full gnuplot script text

    Returns:
        Ordered list of OutputTarget (empty if the script declares none)

    Examples:
        >>> [t.name for t in extract_output_targets("set output 'a.tex'\\nset output 'b.tex'")]
        ['a', 'b']
    """
    return [
        OutputTarget(name=match.group("name"), index=index)
        for index, match in enumerate(_SET_OUTPUT.finditer(text))
    ]


def find_duplicate_targets(targets: List[OutputTarget]) -> List[str]:
    """Return target names declared more than once, in first-seen order."""
    counts = Counter(target.name for target in targets)
    seen = []
    for target in targets:
        if counts[target.name] > 1 and target.name not in seen:
            seen.append(target.name)
    return seen


def rewrite_include_paths(text: str, prefix: str) -> str:
    """
    Prefix every bare ``\\includegraphics`` reference with ``prefix``.

    References that already contain a path separator are left untouched, so
    applying the rewrite twice gives the same text.

    Args:
        text: Content of a cairolatex include file
        prefix: POSIX-style directory relative to the project root

    Returns:
        Rewritten text

    Examples:
        >>> rewrite_include_paths(r"\\includegraphics{foo}", "sub")
        '\\\\includegraphics{sub/foo}'
    """
    prefix = prefix.rstrip("/")

    def _prefixed(match: re.Match) -> str:
        options = match.group("options") or ""
        return f"\\includegraphics{options}{{{prefix}/{match.group('name')}}}"

    return _INCLUDEGRAPHICS.sub(_prefixed, text)
