"""Accumulate isolated run results into a go test style report.

The report is buffered: nothing is written until every benchmark has
run, so a fatal error never leaves a partial report on stdout.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from isobench.duration import format_duration
from isobench.errors import LineParseError
from isobench.logging import get_logger
from isobench.parse import MeasurementRecord, format_record, parse_line
from isobench.runner import PASS_MARKER, RunResult, trailer_prefix

log = get_logger("report")


@dataclass
class RunSummary:
    """Total elapsed time across all runs."""

    total_ns: int = 0
    runs: int = 0

    def add(self, elapsed_ns: int) -> None:
        self.total_ns += elapsed_ns
        self.runs += 1


@dataclass
class Reporter:
    """Collects one output line per run plus the summary."""

    target: str
    width: int = 0
    summary: RunSummary = field(default_factory=RunSummary)
    records: list[MeasurementRecord] = field(default_factory=list)
    _lines: list[str] = field(default_factory=list)

    def add(self, result: RunResult) -> MeasurementRecord | None:
        """Account for *result* and queue its output line.

        The elapsed time always counts, even when the result line does
        not parse; such a line is kept verbatim.

        Returns:
            The parsed record, or None if the line was passed through.
        """
        self.summary.add(result.elapsed_ns)
        line = result.result_line
        try:
            record = parse_line(line)
        except LineParseError as exc:
            log.warning("%s: keeping unparsed result line (%s)", result.identifier, exc)
            self._lines.append(line)
            return None
        self.records.append(record)
        self._lines.append(format_record(record, self.width))
        return record

    def lines(self) -> list[str]:
        """The full report: result lines, PASS, and the trailer."""
        trailer = f"{trailer_prefix(self.target)}{format_duration(self.summary.total_ns)}"
        return [*self._lines, PASS_MARKER, trailer]

    def render(self) -> str:
        return "\n".join(self.lines()) + "\n"
