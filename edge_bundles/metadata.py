"""Read the framework's production build output.

The framework writes ``<framework_dir>/serverless/pages-manifest.json``
mapping each route to its compiled file, with the files themselves under
``<framework_dir>/serverless/pages``. Public assets live in
``<project_dir>/public`` and are served from object storage untouched.
"""

from __future__ import annotations

import dataclasses as dc
import logging
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json

from edge_bundles.errors import BuildMetadataError

log = logging.getLogger("edge_bundles.metadata")

PAGES_MANIFEST = "pages-manifest.json"
SERVERLESS_DIR = "serverless"
PUBLIC_DIR = "public"


@dc.dataclass(frozen=True, slots=True)
class FrameworkLayout:
    """Filesystem locations of one project's build inputs."""

    project_dir: Path
    framework_dir: Path

    @classmethod
    def for_project(cls, project_dir: Path, framework_dir: str | Path = ".next") -> FrameworkLayout:
        framework_path = Path(framework_dir)
        if not framework_path.is_absolute():
            framework_path = project_dir / framework_path
        return cls(project_dir=project_dir, framework_dir=framework_path)

    @property
    def serverless_dir(self) -> Path:
        return self.framework_dir / SERVERLESS_DIR

    @property
    def pages_manifest(self) -> Path:
        return self.serverless_dir / PAGES_MANIFEST

    @property
    def public_dir(self) -> Path:
        return self.project_dir / PUBLIC_DIR


@dc.dataclass(frozen=True, slots=True)
class BuildMetadata:
    """Page inventory and public assets reported by one framework build."""

    pages: dict[str, str]
    public_files: list[str]

    @property
    def page_files(self) -> list[str]:
        return list(self.pages.values())


def read_pages_manifest(path: Path) -> dict[str, str]:
    """Decode the framework's route-to-file mapping.

    Raises
    ------
    BuildMetadataError
        If the manifest does not exist or is not a string-to-string mapping.
    """
    if not path.exists():
        msg = (
            f"{path} not found. Check that the framework build target is "
            "set to 'serverless'."
        )
        raise BuildMetadataError(msg)
    try:
        return msgspec_json.decode(path.read_bytes(), type=dict[str, str])
    except msgspec.DecodeError as exc:
        msg = f"Unable to read pages manifest at {path}: {exc}"
        raise BuildMetadataError(msg) from exc


def read_public_files(public_dir: Path) -> list[str]:
    """Return every file under ``public_dir`` as a sorted POSIX-relative path."""
    if not public_dir.is_dir():
        return []
    return sorted(
        path.relative_to(public_dir).as_posix()
        for path in public_dir.rglob("*")
        if path.is_file()
    )


def load_build_metadata(layout: FrameworkLayout) -> BuildMetadata:
    """Read the pages manifest and public asset inventory for ``layout``."""
    pages = read_pages_manifest(layout.pages_manifest)
    public_files = read_public_files(layout.public_dir)
    log.info(
        "read %d pages and %d public files from %s",
        len(pages),
        len(public_files),
        layout.project_dir,
    )
    return BuildMetadata(pages=pages, public_files=public_files)


__all__ = [
    "BuildMetadata",
    "FrameworkLayout",
    "PAGES_MANIFEST",
    "load_build_metadata",
    "read_pages_manifest",
    "read_public_files",
]
