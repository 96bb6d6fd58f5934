"""Discover benchmark functions in Go test sources.

Discovery is purely lexical.  A line declares a benchmark when it
matches the declaration grammar::

    ^func (?P<name>Benchmark[^(]*)\\(

that is, a top-level ``func`` whose name begins with ``Benchmark``.  The
identifier is everything from the start of the name up to the opening
parenthesis of the parameter list.  No type checking is done; a textual
match is final.  Methods and indented declarations never match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from isobench.errors import SourceReadError
from isobench.logging import get_logger

log = get_logger("scanner")

BENCHMARK_DECL = re.compile(r"^func (?P<name>Benchmark[^(]*)\(")


@dataclass
class ScanResult:
    """Benchmark identifiers in discovery order."""

    identifiers: list[str] = field(default_factory=list)
    width: int = 0  # Longest identifier seen, for output alignment.

    def extend(self, names: list[str]) -> None:
        """Append *names*, keeping duplicates and updating the width."""
        for name in names:
            self.identifiers.append(name)
            self.width = max(self.width, len(name))


def scan_source(text: str) -> list[str]:
    """Return the benchmark identifiers declared in *text*, top to bottom."""
    names: list[str] = []
    for line in text.split("\n"):
        m = BENCHMARK_DECL.match(line)
        if m is not None:
            names.append(m.group("name"))
    return names


def scan_files(paths: list[Path]) -> ScanResult:
    """Scan test source files in the order given.

    Raises:
        SourceReadError: If any file cannot be read.  No partial result
            is returned.
    """
    result = ScanResult()
    for path in paths:
        try:
            # No newline translation; lines split on \n only.
            text = Path(path).read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            raise SourceReadError(f"Cannot read {path}: {exc}") from exc
        names = scan_source(text)
        log.debug("%s: %d benchmark(s)", path, len(names))
        result.extend(names)
    return result
