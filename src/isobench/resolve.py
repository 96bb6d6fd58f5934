"""Resolve the target package and its test files.

The go tool does the heavy lifting: ``go list -json`` reports a
package's directory and test files, and in module mode it also knows
the import path of the working directory.  For GOPATH workspaces the
import path is derived directly from the GOPATH entries.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

from isobench.config import RunConfig
from isobench.errors import TargetResolutionError, ToolNotFoundError
from isobench.logging import get_logger

log = get_logger("resolve")


def find_go_tool(go_tool: str = "go") -> str:
    """Return the full path of the go tool.

    Raises:
        ToolNotFoundError: If *go_tool* is not an executable on PATH.
    """
    path = shutil.which(go_tool)
    if path is None:
        raise ToolNotFoundError(f"Cannot find the go tool: {go_tool}")
    return path


def import_path_for_dir(directory: Path, gopaths: list[str]) -> str | None:
    """Derive the import path of *directory* from GOPATH entries.

    Returns the path of *directory* relative to the first ``<gopath>/src``
    that contains it, with ``/`` separators, or None if no entry does.
    """
    directory = directory.resolve()
    for entry in gopaths:
        src = Path(entry).resolve() / "src"
        try:
            rel = directory.relative_to(src)
        except ValueError:
            continue
        if rel.parts:
            return "/".join(rel.parts)
    return None


def _go_list(go: str, args: list[str], config: RunConfig) -> str:
    """Run ``go list`` and return its stdout."""
    cmd = [go, "list", *args]
    log.debug("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(config.cwd),
            env=config.child_env(),
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(f"Cannot find the go tool: {go}") from exc
    if proc.returncode != 0:
        raise TargetResolutionError(
            f"go list {' '.join(args)} failed with exit code {proc.returncode}",
            output=proc.stderr,
        )
    return proc.stdout


def resolve_target(config: RunConfig, go: str) -> str:
    """Return the import path to benchmark.

    An import path target is used as given.  A relative path target
    (``./sub``) is turned into its import path with ``go list``, since
    that is the name go test prints in its trailer.  Otherwise the working
    directory's import path comes from GOPATH, or from ``go list`` when
    the directory is not inside any GOPATH entry.

    Raises:
        TargetResolutionError: If the import path cannot be determined.
    """
    if config.target is not None and config.relative_target:
        return _list_import_path(go, config.target, config)
    if config.target is not None and not config.targets_work_dir:
        return config.target

    import_path = import_path_for_dir(config.cwd, config.gopath_entries())
    if import_path:
        log.debug("Import path from GOPATH: %s", import_path)
        return import_path

    return _list_import_path(go, ".", config)


def _list_import_path(go: str, path: str, config: RunConfig) -> str:
    """Ask go list for the import path of the package at *path*."""
    where = "the current directory" if path == "." else path
    try:
        import_path = _go_list(go, ["-f", "{{.ImportPath}}", path], config).strip()
    except TargetResolutionError as exc:
        raise TargetResolutionError(
            f"Cannot determine import path of {where}.",
            output=exc.output,
        ) from exc
    if not import_path or import_path.startswith("_"):
        # go list reports "_/abs/path" for directories outside any workspace.
        raise TargetResolutionError(f"Cannot determine import path of {where}.")
    log.debug("Import path from go list: %s -> %s", path, import_path)
    return import_path


def list_test_files(config: RunConfig, go: str, target: str) -> list[Path]:
    """Return the test source files of *target*.

    In-package test files come first, then external (``_test`` package)
    test files, each group in the order go lists them.
    """
    out = _go_list(go, ["-json", target], config)
    try:
        info = json.loads(out)
    except json.JSONDecodeError as exc:
        raise TargetResolutionError(f"Cannot parse go list output for {target}", output=out) from exc

    pkg_dir = Path(info.get("Dir", ""))
    names = list(info.get("TestGoFiles") or []) + list(info.get("XTestGoFiles") or [])
    files = [pkg_dir / name for name in names]
    log.debug("%s: %d test file(s) in %s", target, len(files), pkg_dir)
    return files
