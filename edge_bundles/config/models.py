"""Typed dataclasses describing an edge bundle build."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from edge_bundles.framework import FrameworkBuildOptions
from edge_bundles.metadata import FrameworkLayout

DEFAULT_OUTPUT_DIR = ".serverless_nextjs"
DEFAULT_FRAMEWORK_DIR = ".next"


@dc.dataclass(slots=True)
class BuildConfig:
    """A fully resolved build definition.

    Attributes
    ----------
    project_dir : Path
        Root of the framework project (holds ``public/`` and the framework
        output directory).
    output_dir : Path
        Parent directory of the generated bundle directories.
    framework_dir : Path
        The framework's build output directory, usually ``.next``.
    build : FrameworkBuildOptions
        Command used to run the framework compiler.
    skip_build : bool
        Reuse existing framework output instead of running the compiler.
    cleanup : bool
        Remove intermediate framework output once bundles are written.
    cleanup_dirs : list[str]
        Entries of ``framework_dir`` removed by cleanup.
    keep_dirs : list[str]
        Entries of ``framework_dir`` never removed by cleanup, even when
        listed in ``cleanup_dirs``.
    shim_path : Path or None
        Override for the compatibility shim copied into each bundle.
    templates_dir : Path or None
        Override for the entry point templates.
    """

    project_dir: Path
    output_dir: Path
    framework_dir: Path
    build: FrameworkBuildOptions = dc.field(default_factory=FrameworkBuildOptions)
    skip_build: bool = False
    cleanup: bool = True
    cleanup_dirs: list[str] = dc.field(
        default_factory=lambda: ["serverless", "prerender-manifest.json"]
    )
    keep_dirs: list[str] = dc.field(default_factory=lambda: ["cache"])
    shim_path: Path | None = None
    templates_dir: Path | None = None

    @classmethod
    def for_project(cls, project_dir: Path) -> BuildConfig:
        """Return the default configuration for ``project_dir``."""
        return cls(
            project_dir=project_dir,
            output_dir=project_dir / DEFAULT_OUTPUT_DIR,
            framework_dir=project_dir / DEFAULT_FRAMEWORK_DIR,
        )

    @property
    def layout(self) -> FrameworkLayout:
        return FrameworkLayout(
            project_dir=self.project_dir, framework_dir=self.framework_dir
        )


__all__ = ["BuildConfig", "DEFAULT_FRAMEWORK_DIR", "DEFAULT_OUTPUT_DIR"]
