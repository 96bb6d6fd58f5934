"""Tests for isobench.orchestrator — sequential isolated runs end to end."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from isobench_test_helpers import completed, go_test_output

from isobench.config import RunConfig
from isobench.errors import CommandFailedError, SourceReadError
from isobench.orchestrator import BenchOrchestrator, BenchProgress

_TARGET = "github.com/cznic/bench"

_SOURCE = """package bench

import "testing"

func BenchmarkFoo(b *testing.B) {}

func BenchmarkBar(b *testing.B) {}
"""

_RESULTS = {
    "^BenchmarkFoo$": ("BenchmarkFoo-4   \t    2000\t   1068291 ns/op", "2.250s"),
    "^BenchmarkBar$": ("BenchmarkBar-4   \t     100\t  10067251 ns/op", "1.021s"),
}


def _fake_go_test(cmd: list[str], **kwargs: object) -> object:
    line, duration = _RESULTS[cmd[cmd.index("-bench") + 1]]
    return completed(cmd, go_test_output(line, _TARGET, duration))


class OrchestratorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.test_file = Path(self._tmp.name) / "bench_test.go"
        self.test_file.write_text(_SOURCE)

        patches = [
            patch("isobench.orchestrator.find_go_tool", return_value="/usr/bin/go"),
            patch("isobench.orchestrator.resolve_target", return_value=_TARGET),
            patch("isobench.orchestrator.list_test_files", return_value=[self.test_file]),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def _config(self, **kwargs: object) -> RunConfig:
        return RunConfig(work_dir=Path(self._tmp.name), **kwargs)  # type: ignore[arg-type]


class TestOrchestratorRun(OrchestratorTestCase):
    @patch("isobench.runner.subprocess.run", side_effect=_fake_go_test)
    def test_two_benchmarks(self, mock_run: MagicMock) -> None:
        reporter = BenchOrchestrator(self._config(), progress_callback=lambda p: None).run()

        self.assertEqual(mock_run.call_count, 2)
        selected = [c.args[0][c.args[0].index("-bench") + 1] for c in mock_run.call_args_list]
        self.assertEqual(selected, ["^BenchmarkFoo$", "^BenchmarkBar$"])

        lines = reporter.lines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].startswith("BenchmarkFoo-4"))
        self.assertTrue(lines[1].startswith("BenchmarkBar-4"))
        self.assertEqual(lines[2], "PASS")
        self.assertEqual(lines[3], f"ok  \t{_TARGET}\t3.271s")

    @patch("isobench.runner.subprocess.run", side_effect=_fake_go_test)
    def test_benchmem_forwarded(self, mock_run: MagicMock) -> None:
        BenchOrchestrator(self._config(benchmem=True), progress_callback=lambda p: None).run()
        for c in mock_run.call_args_list:
            self.assertIn("-benchmem", c.args[0])
            self.assertEqual(c.args[0][0], "/usr/bin/go")

    @patch("isobench.runner.subprocess.run", side_effect=_fake_go_test)
    def test_progress_reported_per_benchmark(self, mock_run: MagicMock) -> None:
        seen: list[BenchProgress] = []
        BenchOrchestrator(self._config(), progress_callback=seen.append).run()
        self.assertEqual([(p.index, p.total, p.identifier) for p in seen], [
            (1, 2, "BenchmarkFoo"),
            (2, 2, "BenchmarkBar"),
        ])
        self.assertEqual(seen[0].elapsed_ns, 2_250_000_000)
        self.assertTrue(all(p.parsed for p in seen))

    @patch("isobench.runner.subprocess.run", side_effect=_fake_go_test)
    def test_default_progress_logs(self, mock_run: MagicMock) -> None:
        with self.assertLogs("isobench", level="INFO") as logs:
            BenchOrchestrator(self._config()).run()
        self.assertTrue(any("[1/2] BenchmarkFoo 2.25s" in line for line in logs.output))

    @patch("isobench.runner.subprocess.run")
    def test_failure_on_second_run_aborts(self, mock_run: MagicMock) -> None:
        first = completed([], go_test_output(_RESULTS["^BenchmarkFoo$"][0], _TARGET, "2.250s"))
        second = completed([], "--- FAIL: BenchmarkBar\nFAIL\n", returncode=1)
        mock_run.side_effect = [first, second]
        seen: list[BenchProgress] = []

        with self.assertRaises(CommandFailedError):
            BenchOrchestrator(self._config(), progress_callback=seen.append).run()

        self.assertEqual(mock_run.call_count, 2)
        self.assertEqual([p.identifier for p in seen], ["BenchmarkFoo"])

    @patch("isobench.runner.subprocess.run")
    def test_unparsed_line_still_counted(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = [
            completed([], go_test_output("BenchmarkFoo-4 weird output", _TARGET, "1.5s")),
            completed([], go_test_output("BenchmarkBar-4 10 5 ns/op", _TARGET, "0.5s")),
        ]
        reporter = BenchOrchestrator(self._config(), progress_callback=lambda p: None).run()
        lines = reporter.lines()
        self.assertEqual(lines[0], "BenchmarkFoo-4 weird output")
        self.assertEqual(lines[-1], f"ok  \t{_TARGET}\t2s")

    @patch("isobench.runner.subprocess.run")
    def test_no_benchmarks(self, mock_run: MagicMock) -> None:
        self.test_file.write_text("package bench\n")
        reporter = BenchOrchestrator(self._config(), progress_callback=lambda p: None).run()
        mock_run.assert_not_called()
        self.assertEqual(reporter.lines(), ["PASS", f"ok  \t{_TARGET}\t0s"])

    @patch("isobench.runner.subprocess.run")
    def test_unreadable_source_runs_nothing(self, mock_run: MagicMock) -> None:
        self.test_file.unlink()
        with self.assertRaises(SourceReadError):
            BenchOrchestrator(self._config()).run()
        mock_run.assert_not_called()

    @patch("isobench.runner.subprocess.run")
    def test_invalid_config(self, mock_run: MagicMock) -> None:
        with self.assertRaises(ValueError) as ctx:
            BenchOrchestrator(self._config(target="-x")).run()
        self.assertIn("target", str(ctx.exception))
        mock_run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
