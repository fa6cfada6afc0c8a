"""Cyclopts CLI entrypoint for building edge function bundles.

The ``edge-bundles`` console script turns a framework project's production
build into a ``default-lambda`` bundle for page rendering and an
``api-lambda`` bundle for API routes, each with its own routing manifest.
Typical usage runs ``edge-bundles build`` in CI before deployment, and
``edge-bundles plan`` locally to inspect how routes and files will be split.

Examples
--------
Build bundles for the project in the current directory:

>>> from edge_bundles.cli import main
>>> main()  # doctest: +SKIP

Preview the partition without writing anything:

>>> from edge_bundles.cli import app
>>> app(["plan", "--project-dir", "my-app"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .builder import Builder
from .config import BuildConfig, resolve_build_config
from .manifest import MANIFEST_FILENAME, encode_manifest, load_manifest, routing_tables
from .partition import ASSETS_DIR
from .routes.matcher import match_route

app = App(name="edge-bundles", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_config(
    project_dir: Path,
    config: Path | None,
    output_dir: Path | None,
) -> BuildConfig:
    build_config = resolve_build_config(project_dir, config_path=config)
    if output_dir is not None:
        build_config.output_dir = output_dir
    return build_config


@app.command(help="Build the default and API bundles from framework output.")
def build(
    *,
    project_dir: typ.Annotated[
        Path, Parameter(help="Framework project directory", env_var="INPUT_PROJECT_DIR")
    ] = Path(),
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to edge-bundles.yaml", env_var="INPUT_CONFIG"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the bundle output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    skip_build: typ.Annotated[
        bool, Parameter(help="Reuse existing framework output")
    ] = False,
    cleanup: typ.Annotated[
        bool, Parameter(help="Remove intermediate framework output afterwards")
    ] = True,
    verbose: bool = False,
) -> None:
    """Build deployable bundles for a framework project.

    Parameters
    ----------
    project_dir : Path, optional
        Root of the framework project; defaults to the current directory.
    config : Path or None, optional
        Build configuration file; ``edge-bundles.yaml`` in the project is used
        when omitted and present.
    output_dir : Path or None, optional
        Override the directory that receives the bundle directories.
    skip_build : bool, optional
        Skip running the framework compiler and reuse its current output.
    cleanup : bool, optional
        Remove intermediate framework output once bundles are written.
    verbose : bool, optional
        Log per-route and per-file decisions.

    Returns
    -------
    None
        Writes bundle directories and prints the written manifest paths.
    """
    _configure_logging(verbose)
    build_config = _load_config(project_dir, config, output_dir)
    build_config.skip_build = build_config.skip_build or skip_build
    build_config.cleanup = build_config.cleanup and cleanup

    result = Builder(build_config).build()
    for bundle_name, written in result.written.items():
        if bundle_name == ASSETS_DIR:
            if written:
                assets_dir = result.prepared.plan.assets.directory
                print(f"wrote {_format_path(assets_dir)} ({len(written)} files)")
            continue
        if not written:
            print(f"{bundle_name}: no routes, bundle left empty")
            continue
        manifest_path = next(path for path in written if path.name == MANIFEST_FILENAME)
        print(f"wrote {_format_path(manifest_path)} ({len(written)} files)")
    for path in result.removed:
        print(f"removed {_format_path(path)}")


@app.command(help="Show how pages would be split across bundles without writing.")
def plan(
    *,
    project_dir: typ.Annotated[
        Path, Parameter(help="Framework project directory", env_var="INPUT_PROJECT_DIR")
    ] = Path(),
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to edge-bundles.yaml", env_var="INPUT_CONFIG"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the bundle output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    manifests: typ.Annotated[
        bool, Parameter(help="Also print the manifests that would be written")
    ] = False,
    verbose: bool = False,
) -> None:
    """Print the partition plan computed from existing framework output."""
    _configure_logging(verbose)
    prepared = Builder(_load_config(project_dir, config, output_dir)).prepare()
    for line in prepared.plan.describe():
        print(line)
    if manifests:
        print(encode_manifest(prepared.manifests.default).decode("utf-8"), end="")
        print(encode_manifest(prepared.manifests.api).decode("utf-8"), end="")


@app.command(help="Resolve a request path against a written bundle manifest.")
def match(
    path: str,
    *,
    manifest: typ.Annotated[
        Path, Parameter(help="Path to a bundle's manifest.json")
    ] = Path(".serverless_nextjs/default-lambda/manifest.json"),
) -> None:
    """Print the route, kind, and file that would serve ``path``.

    Raises
    ------
    SystemExit
        With status 1 when no route matches.
    """
    loaded = load_manifest(manifest)
    found = match_route(routing_tables(loaded), path)
    if found is None:
        print(f"{path}: no matching route")
        raise SystemExit(1)
    print(f"{path}: {found.kind} {found.route} -> {found.file}")
    for name, value in found.params.items():
        rendered = "/".join(value) if isinstance(value, list) else value
        print(f"  {name} = {rendered}")


def main() -> None:
    """Invoke the Cyclopts application that powers ``edge-bundles``."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
