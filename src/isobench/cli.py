"""Command-line interface for isobench.

Usage::

    isobench [--benchmem] [import-path]
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from isobench import __version__
from isobench.errors import IsobenchError
from isobench.logging import setup_logging


@click.command()
@click.version_option(version=__version__)
@click.argument("targets", nargs=-1, metavar="[IMPORT_PATH]")
@click.option(
    "--benchmem",
    is_flag=True,
    default=False,
    help="Print memory allocation statistics for benchmarks.",
)
@click.option(
    "--go",
    "go_tool",
    type=str,
    default=None,
    help="The go tool to run (default: go on PATH).",
)
@click.option(
    "--config",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with run defaults.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def main(
    targets: tuple[str, ...],
    benchmem: bool,
    go_tool: str | None,
    profile_path: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run package benchmarks in isolation, one by one.

    Each benchmark runs in its own go test process so that one
    benchmark's memory use cannot influence the next.  No tests are run.
    The output is in go test format and benchcmp compatible.

    \b
    Examples:
        # Benchmark the package in the current directory
        isobench > log-isobench

        # With allocation statistics, by import path
        isobench --benchmem github.com/cznic/lldb
    """
    from isobench.config import RunConfig, config_from_profile, load_profile
    from isobench.orchestrator import BenchOrchestrator

    if len(targets) > 1:
        raise click.UsageError("At most one import path is supported.")

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "benchmem": True if benchmem else None,
        "target": targets[0] if targets else None,
        "go_tool": go_tool,
        "cli_args": sys.argv[1:],
    }
    try:
        if profile_path is not None:
            config = config_from_profile(load_profile(profile_path), cli_overrides=cli_overrides)
        else:
            config = RunConfig(
                benchmem=benchmem,
                target=targets[0] if targets else None,
                go_tool=go_tool or "go",
                cli_args=sys.argv[1:],
            )
    except (OSError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    try:
        reporter = BenchOrchestrator(config).run()
    except IsobenchError as exc:
        click.echo(f"Error: {exc}", err=True)
        if exc.output:
            click.echo(exc.output.rstrip("\n"), err=True)
        raise SystemExit(1) from exc
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    click.echo(reporter.render(), nl=False)
