"""Load build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from edge_bundles.errors import BuildConfigError
from edge_bundles.framework import DEFAULT_BUILD_ARGS, DEFAULT_BUILD_CMD, FrameworkBuildOptions

from .models import DEFAULT_FRAMEWORK_DIR, DEFAULT_OUTPUT_DIR, BuildConfig

CONFIG_FILENAME = "edge-bundles.yaml"


def load_build_config(path: Path, *, project_dir: Path | None = None) -> BuildConfig:
    """Load the YAML file describing how a project is bundled.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``edge-bundles.yaml``).
    project_dir : Path, optional
        Project root; overrides ``project_dir`` in the file. Defaults to the
        file's own directory. Relative paths in the file resolve against it.

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    BuildConfigError
        If the top-level structure is not a mapping or a value has the wrong
        type.

    Examples
    --------
    >>> from pathlib import Path
    >>> from edge_bundles.config import load_build_config
    >>> config = load_build_config(Path("edge-bundles.yaml"))  # doctest: +SKIP
    >>> config.output_dir.name  # doctest: +SKIP
    '.serverless_nextjs'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise BuildConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    base_dir = path.parent
    root = project_dir or _resolve(base_dir, raw.get("project_dir", "."))
    build_raw = raw.get("build") or {}
    if not isinstance(build_raw, dict):
        msg = "'build' must be a mapping."
        raise BuildConfigError(msg)

    return BuildConfig(
        project_dir=root,
        output_dir=_resolve(root, raw.get("output_dir", DEFAULT_OUTPUT_DIR)),
        framework_dir=_resolve(root, raw.get("framework_dir", DEFAULT_FRAMEWORK_DIR)),
        build=_build_options(build_raw, root),
        skip_build=_as_bool(raw.get("skip_build", False), "skip_build"),
        cleanup=_as_bool(raw.get("cleanup", True), "cleanup"),
        cleanup_dirs=_as_entry_names(
            raw.get("cleanup_dirs", ["serverless", "prerender-manifest.json"]),
            "cleanup_dirs",
        ),
        keep_dirs=_as_entry_names(raw.get("keep_dirs", ["cache"]), "keep_dirs"),
        shim_path=_optional_path(root, raw.get("shim_path")),
        templates_dir=_optional_path(root, raw.get("templates_dir")),
    )


def resolve_build_config(
    project_dir: Path, *, config_path: Path | None = None
) -> BuildConfig:
    """Return the configuration for ``project_dir``.

    An explicit ``config_path`` must exist. Otherwise ``edge-bundles.yaml``
    in the project directory is used when present, and built-in defaults
    when it is not.
    """
    if config_path is not None:
        return load_build_config(config_path, project_dir=project_dir)
    candidate = project_dir / CONFIG_FILENAME
    if candidate.exists():
        return load_build_config(candidate, project_dir=project_dir)
    return BuildConfig.for_project(project_dir)


def _build_options(payload: typ.Mapping[str, typ.Any], root: Path) -> FrameworkBuildOptions:
    env = payload.get("env") or {}
    if not isinstance(env, dict):
        msg = "'build.env' must be a mapping."
        raise BuildConfigError(msg)
    cwd = payload.get("cwd")
    return FrameworkBuildOptions(
        cmd=str(payload.get("cmd", DEFAULT_BUILD_CMD)),
        args=_as_str_list(payload.get("args", list(DEFAULT_BUILD_ARGS)), "build.args"),
        cwd=_resolve(root, cwd) if cwd else None,
        env={str(key): str(value) for key, value in env.items()},
    )


def _resolve(root: Path, value: str | Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else root / path


def _optional_path(root: Path, value: str | None) -> Path | None:
    if not value:
        return None
    return _resolve(root, value)


def _as_bool(value: object, key: str) -> bool:
    match value:
        case bool():
            return value
        case _:
            msg = f"'{key}' must be true or false, got {value!r}."
            raise BuildConfigError(msg)


def _as_str_list(value: object, key: str) -> list[str]:
    match value:
        case str():
            return [value]
        case list():
            return [str(item) for item in value]
        case _:
            msg = f"'{key}' must be a list of strings, got {value!r}."
            raise BuildConfigError(msg)


def _as_entry_names(value: object, key: str) -> list[str]:
    names = _as_str_list(value, key)
    for name in names:
        if not name or name in {".", ".."} or "/" in name:
            msg = f"'{key}' entries must be plain directory entry names, got {name!r}."
            raise BuildConfigError(msg)
    return names


__all__ = ["CONFIG_FILENAME", "load_build_config", "resolve_build_config"]
