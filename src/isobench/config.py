"""Run configuration and profile loading.

Handles:
- The explicit configuration value passed to the orchestrator.
- Loading optional defaults from a YAML profile.
- Merging CLI options over profile values.
- Validating the final configuration before execution.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

log = logging.getLogger("isobench")


# ---------------------------------------------------------------------------
# RunConfig
# ---------------------------------------------------------------------------


@dataclass
class RunConfig:
    """Resolved configuration for one isobench run."""

    # Ask go test for memory allocation statistics.
    benchmem: bool = False

    # Import path of the package to benchmark.  None or "." means the
    # package in the working directory.
    target: str | None = None

    # The go tool and the environment its child processes see.
    go_tool: str = "go"
    env: dict[str, str] = field(default_factory=dict)

    # Directory go is run from; defaults to the process working directory.
    work_dir: Path | None = None

    # GOPATH entries used to resolve the working directory's import path.
    # None means read GOPATH from the environment.
    gopaths: list[str] | None = None

    # CLI provenance
    cli_args: list[str] = field(default_factory=list)

    @property
    def targets_work_dir(self) -> bool:
        """Whether the target is the package in the working directory."""
        return self.target in (None, ".")

    @property
    def relative_target(self) -> bool:
        """Whether the target is a filesystem path relative to the working directory."""
        return self.target is not None and self.target.startswith(("./", "../"))

    @property
    def cwd(self) -> Path:
        """The directory go commands run in."""
        return self.work_dir if self.work_dir is not None else Path.cwd()

    def child_env(self) -> dict[str, str]:
        """The environment for go child processes."""
        env = dict(os.environ)
        env.update(self.env)
        return env

    def gopath_entries(self) -> list[str]:
        """GOPATH entries, falling back to the child environment."""
        if self.gopaths is not None:
            return list(self.gopaths)
        raw = self.child_env().get("GOPATH", "")
        return [p for p in raw.split(os.pathsep) if p]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: RunConfig) -> list[ValidationError]:
    """Validate a run configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.target is not None:
        if not config.target.strip():
            errors.append(ValidationError(field="target", message="Target must be non-empty."))
        elif config.target.startswith("-"):
            errors.append(
                ValidationError(
                    field="target",
                    message=f"Target looks like a flag, not an import path: {config.target}",
                )
            )

    if not config.go_tool or not config.go_tool.strip():
        errors.append(ValidationError(field="go_tool", message="The go tool must be named."))

    if config.work_dir is not None and not config.work_dir.is_dir():
        errors.append(
            ValidationError(
                field="work_dir",
                message=f"Working directory does not exist: {config.work_dir}",
            )
        )

    for key in config.env:
        if not key or "=" in key:
            errors.append(
                ValidationError(
                    field="env",
                    message=f"Invalid environment variable name: {key!r}",
                )
            )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


_PROFILE_KEYS = {"benchmem", "target", "go", "env"}


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load run defaults from a YAML file.

    Profile format::

        benchmem: true
        target: "github.com/cznic/lldb"
        go: "/usr/local/go/bin/go"
        env:
          GOMAXPROCS: "4"

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _PROFILE_KEYS)
    for key in unknown:
        log.warning("Ignoring unknown profile key: %s", key)
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> RunConfig:
    """Build a RunConfig from a parsed profile.

    CLI overrides that are not None take precedence over profile values.
    Keys match RunConfig field names.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    env_data = profile_data.get("env") or {}
    if not isinstance(env_data, dict):
        raise ValueError(f"Profile 'env' must be a mapping, got {type(env_data).__name__}")
    env = {str(k): str(v) for k, v in env_data.items()}
    env.update(cli.get("env", {}))

    benchmem = profile_data.get("benchmem", False)
    if not isinstance(benchmem, bool):
        raise ValueError(f"Profile 'benchmem' must be true or false, got {benchmem!r}")

    target = profile_data.get("target")
    return RunConfig(
        benchmem=bool(cli.get("benchmem", benchmem)),
        target=cli.get("target", str(target) if target is not None else None),
        go_tool=str(cli.get("go_tool", profile_data.get("go", "go"))),
        env=env,
        work_dir=cli.get("work_dir"),
        cli_args=list(cli.get("cli_args", [])),
    )
