"""Run a single benchmark in its own ``go test`` process.

Each benchmark gets a fresh process so that garbage collector pressure
and other process-level state left behind by one benchmark cannot skew
the next one.  The elapsed time is the one ``go test`` reports in its
trailer line; nothing is timed here.

Expected output of one invocation::

    BenchmarkFoo-4   	    2000	   1068291 ns/op
    PASS
    ok  	github.com/cznic/bench	2.250s

Current toolchains print ``goos:``/``goarch:``/``pkg:``/``cpu:`` header
lines first; those are dropped before the shape is checked.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field

from isobench.config import RunConfig
from isobench.duration import parse_duration
from isobench.errors import CommandFailedError, OutputFormatError, ToolNotFoundError
from isobench.logging import get_logger

log = get_logger("runner")

PASS_MARKER = "PASS"
_HEADER_PREFIXES = ("goos:", "goarch:", "pkg:", "cpu:")


def trailer_prefix(target: str) -> str:
    """The start of the ``ok`` line go test prints for *target*."""
    return f"ok  \t{target}\t"


@dataclass
class RunResult:
    """Output of one isolated ``go test`` invocation."""

    identifier: str
    command: list[str]
    exit_code: int
    output: str
    elapsed_ns: int = 0
    lines: list[str] = field(default_factory=list)

    @property
    def result_line(self) -> str:
        """The benchmark result line (first line after any header)."""
        return self.lines[0] if self.lines else ""


def build_command(go: str, identifier: str, target: str, *, benchmem: bool = False) -> list[str]:
    """Build the argv selecting exactly *identifier* and no tests."""
    cmd = [go, "test", "-run", "NONE", "-bench", f"^{identifier}$"]
    if benchmem:
        cmd.append("-benchmem")
    cmd.append(target)
    return cmd


def _strip_header(lines: list[str]) -> list[str]:
    i = 0
    while i < len(lines) and lines[i].startswith(_HEADER_PREFIXES):
        i += 1
    return lines[i:]


def check_output(identifier: str, target: str, output: str) -> tuple[list[str], int]:
    """Validate the shape of go test output and parse the trailer duration.

    Returns:
        The output lines (header stripped) and the elapsed nanoseconds.

    Raises:
        OutputFormatError: If the output has fewer than three lines, the
            lines are not result/PASS/trailer, or the duration is malformed.
    """
    lines = _strip_header(output.split("\n"))
    if len(lines) < 3:
        raise OutputFormatError("Unrecognized format of go test output", output=output)

    prefix = trailer_prefix(target)
    if (
        not lines[0].startswith(identifier)
        or lines[1] != PASS_MARKER
        or not lines[2].startswith(prefix)
    ):
        raise OutputFormatError("Unexpected format of go test output", output=output)

    try:
        elapsed_ns = parse_duration(lines[2][len(prefix) :])
    except ValueError as exc:
        raise OutputFormatError("Cannot parse benchmark duration", output=output) from exc
    return lines, elapsed_ns


def run_isolated(config: RunConfig, go: str, target: str, identifier: str) -> RunResult:
    """Run *identifier* alone and return its validated result.

    Blocks until go test exits.  There is no timeout.

    Raises:
        ToolNotFoundError: If *go* cannot be executed.
        CommandFailedError: If go test exits non-zero.
        OutputFormatError: If the output is not in the expected shape.
    """
    cmd = build_command(go, identifier, target, benchmem=config.benchmem)
    log.debug("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=str(config.cwd),
            env=config.child_env(),
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(f"Cannot find the go tool: {go}") from exc

    output = proc.stdout.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        raise CommandFailedError(
            f"{' '.join(cmd)}: exit status {proc.returncode}",
            exit_code=proc.returncode,
            output=output,
        )

    lines, elapsed_ns = check_output(identifier, target, output)
    return RunResult(
        identifier=identifier,
        command=cmd,
        exit_code=proc.returncode,
        output=output,
        elapsed_ns=elapsed_ns,
        lines=lines,
    )
