"""Benchmark orchestration.

Orchestrates:
1. Configuration validation
2. Locating the go tool and resolving the target package
3. Discovering benchmarks in the package's test files
4. Running each benchmark in its own go test process, strictly in order
5. Normalizing and aggregating the results

Any failure other than an unparsable result line aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from isobench.config import RunConfig, validate_config
from isobench.duration import format_duration
from isobench.report import Reporter
from isobench.resolve import find_go_tool, list_test_files, resolve_target
from isobench.runner import run_isolated
from isobench.scanner import ScanResult, scan_files

log = logging.getLogger("isobench")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback after each benchmark."""

    index: int  # 1-based
    total: int
    identifier: str
    elapsed_ns: int
    parsed: bool


ProgressCallback = Callable[[BenchProgress], None]


# ---------------------------------------------------------------------------
# BenchOrchestrator
# ---------------------------------------------------------------------------


class BenchOrchestrator:
    """Runs every benchmark of a package in isolation.

    Usage::

        config = RunConfig(benchmem=True, target="github.com/cznic/lldb")
        reporter = BenchOrchestrator(config).run()
        print(reporter.render(), end="")
    """

    def __init__(
        self,
        config: RunConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.progress: ProgressCallback = progress_callback or self._default_progress

    def run(self) -> Reporter:
        """Execute the full run.

        Returns:
            The Reporter holding every result line and the summary.

        Raises:
            ValueError: If configuration is invalid.
            IsobenchError: On the first fatal error.
        """
        errors = validate_config(self.config)
        fatal = [e for e in errors if e.severity == "error"]
        for w in (e for e in errors if e.severity == "warning"):
            log.warning("Config warning: %s: %s", w.field, w.message)
        if fatal:
            messages = [f"  {e.field}: {e.message}" for e in fatal]
            raise ValueError("Invalid configuration:\n" + "\n".join(messages))

        go = find_go_tool(self.config.go_tool)
        target = resolve_target(self.config, go)
        log.debug("Target: %s (go: %s)", target, go)

        scan = self.discover(go, target)
        log.info("Found %d benchmark(s) in %s", len(scan.identifiers), target)

        reporter = Reporter(target=target, width=scan.width)
        total = len(scan.identifiers)
        for index, identifier in enumerate(scan.identifiers, start=1):
            result = run_isolated(self.config, go, target, identifier)
            record = reporter.add(result)
            self.progress(
                BenchProgress(
                    index=index,
                    total=total,
                    identifier=identifier,
                    elapsed_ns=result.elapsed_ns,
                    parsed=record is not None,
                )
            )
        return reporter

    def discover(self, go: str, target: str) -> ScanResult:
        """Find the benchmark identifiers declared in *target*'s tests."""
        files: list[Path] = list_test_files(self.config, go, target)
        return scan_files(files)

    @staticmethod
    def _default_progress(p: BenchProgress) -> None:
        log.info(
            "[%d/%d] %s %s%s",
            p.index,
            p.total,
            p.identifier,
            format_duration(p.elapsed_ns),
            "" if p.parsed else " (unparsed)",
        )
