"""Invoke the framework's own production build before bundling."""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import subprocess
from pathlib import Path

from edge_bundles.errors import FrameworkBuildError

log = logging.getLogger("edge_bundles.framework")

DEFAULT_BUILD_CMD = "node_modules/.bin/next"
DEFAULT_BUILD_ARGS = ("build",)


@dc.dataclass(slots=True)
class FrameworkBuildOptions:
    """Command line used to run the framework compiler."""

    cmd: str = DEFAULT_BUILD_CMD
    args: list[str] = dc.field(default_factory=lambda: list(DEFAULT_BUILD_ARGS))
    cwd: Path | None = None
    env: dict[str, str] = dc.field(default_factory=dict)


def build_env(options: FrameworkBuildOptions) -> dict[str, str]:
    """Return the process environment with ``options.env`` layered on top."""
    env = os.environ.copy()
    env.update(options.env)
    return env


def run_framework_build(
    options: FrameworkBuildOptions, *, project_dir: Path
) -> subprocess.CompletedProcess[str]:
    """Run the framework build, raising :class:`FrameworkBuildError` on failure."""
    cwd = options.cwd or project_dir
    command = [options.cmd, *options.args]
    log.info("running %s in %s", " ".join(command), cwd)
    try:
        return subprocess.run(  # noqa: S603 - command comes from build config
            command,
            check=True,
            cwd=cwd,
            env=build_env(options),
            text=True,
        )
    except FileNotFoundError as exc:
        msg = f"Framework build command not found: {options.cmd}"
        raise FrameworkBuildError(msg) from exc
    except subprocess.CalledProcessError as exc:
        msg = f"Framework build failed with exit code {exc.returncode}"
        raise FrameworkBuildError(msg) from exc


__all__ = [
    "DEFAULT_BUILD_ARGS",
    "DEFAULT_BUILD_CMD",
    "FrameworkBuildOptions",
    "build_env",
    "run_framework_build",
]
