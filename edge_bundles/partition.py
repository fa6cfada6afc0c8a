"""Partition compiled framework output into self-contained bundles.

Partitioning runs in two phases. :func:`plan_partition` reads the
framework's ``pages`` tree and decides where every file goes without
writing anything; :func:`apply_partition` empties each bundle directory and
then materializes the plan. Each bundle ends up as::

    <output_dir>/default-lambda/
        index.js
        manifest.json
        node_modules/next-aws-cloudfront/index.js
        pages/...            # SSR pages and internal pages, never pages/api
    <output_dir>/api-lambda/
        index.js
        manifest.json
        node_modules/next-aws-cloudfront/index.js
        pages/_error.js
        pages/api/...
    <output_dir>/assets/
        pages/...            # prerendered .html and .json data files

Prerendered ``.html`` pages and ``.json`` data files stay out of both
bundles. They are copied to ``<output_dir>/assets/pages/...`` instead, ready
to be uploaded to object storage under the keys the default handler
rewrites requests to.
"""

from __future__ import annotations

import concurrent.futures as cf
import dataclasses as dc
import logging
import shutil
import typing as typ
from pathlib import Path, PurePosixPath

from edge_bundles.errors import BundleError, FilesystemFailure
from edge_bundles.handlers import HandlerRenderer, default_shim_path
from edge_bundles.manifest import MANIFEST_FILENAME, write_manifest
from edge_bundles.routes.classifier import (
    API_SEGMENT,
    DATA_SUFFIX,
    HTML_SUFFIX,
    PAGES_ROOT,
    PageKind,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from edge_bundles.manifest import ApiManifest, BuildManifests, DefaultManifest
    from edge_bundles.routes.classifier import Classification

log = logging.getLogger("edge_bundles.partition")

DEFAULT_BUNDLE = "default"
API_BUNDLE = "api"
DEFAULT_LAMBDA_CODE_DIR = "default-lambda"
API_LAMBDA_CODE_DIR = "api-lambda"
BUNDLE_DIRS: dict[str, str] = {
    DEFAULT_BUNDLE: DEFAULT_LAMBDA_CODE_DIR,
    API_BUNDLE: API_LAMBDA_CODE_DIR,
}
ENTRY_POINT = "index.js"
SHIM_DESTINATION = PurePosixPath("node_modules/next-aws-cloudfront/index.js")
ERROR_PAGE = PurePosixPath(PAGES_ROOT, "_error.js")
ASSETS_DIR = "assets"
DEFAULT_KEEP = ("cache",)
DEFAULT_CLEANUP = ("serverless", "prerender-manifest.json")
ALWAYS_KEEP = frozenset({"static"})


@dc.dataclass(frozen=True, slots=True)
class CopyOperation:
    """Copy ``source`` to ``destination`` relative to a bundle directory."""

    source: Path
    destination: PurePosixPath


@dc.dataclass(slots=True)
class BundlePlan:
    """Everything one bundle directory will contain after a build."""

    name: str
    directory: Path
    populate: bool = True
    copies: list[CopyOperation] = dc.field(default_factory=list)

    @property
    def page_destinations(self) -> list[str]:
        return [
            op.destination.as_posix()
            for op in self.copies
            if op.destination.parts[0] == PAGES_ROOT
        ]

    def describe(self) -> list[str]:
        """Return the planned bundle contents as display lines."""
        if not self.populate:
            return [f"{self.name}: {self.directory} (emptied, no routes)"]
        lines = [f"{self.name}: {self.directory}"]
        lines.append(f"  {ENTRY_POINT}")
        lines.append(f"  {MANIFEST_FILENAME}")
        lines.extend(f"  {op.destination.as_posix()}" for op in self.copies)
        return lines


@dc.dataclass(slots=True)
class AssetPlan:
    """Files served from object storage rather than by a bundle."""

    directory: Path
    copies: list[CopyOperation] = dc.field(default_factory=list)

    def describe(self) -> list[str]:
        lines = [f"assets: {self.directory}"]
        lines.extend(f"  {op.destination.as_posix()}" for op in self.copies)
        return lines


@dc.dataclass(slots=True)
class PartitionPlan:
    """The placement of every compiled file across bundles."""

    bundles: dict[str, BundlePlan]
    assets: AssetPlan

    @property
    def skipped(self) -> list[str]:
        """Page files left out of every bundle."""
        return [op.destination.as_posix() for op in self.assets.copies]

    @property
    def default(self) -> BundlePlan:
        return self.bundles[DEFAULT_BUNDLE]

    @property
    def api(self) -> BundlePlan:
        return self.bundles[API_BUNDLE]

    def describe(self) -> list[str]:
        lines: list[str] = []
        for bundle in self.bundles.values():
            lines.extend(bundle.describe())
        lines.extend(self.assets.describe())
        return lines


def _kind_for(relative: PurePosixPath, known: cabc.Mapping[str, PageKind]) -> PageKind:
    kind = known.get(relative.as_posix())
    if kind is not None:
        return kind
    parts = relative.parts
    if len(parts) > 2 and parts[1] == API_SEGMENT:
        return PageKind.API
    if len(parts) == 2 and relative.stem == API_SEGMENT:
        return PageKind.API
    if relative.suffix == HTML_SUFFIX:
        return PageKind.HTML
    return PageKind.SSR


def plan_partition(
    *,
    serverless_dir: Path,
    output_dir: Path,
    classification: Classification,
    shim_path: Path | None = None,
) -> PartitionPlan:
    """Decide which bundle receives each compiled page file.

    Parameters
    ----------
    serverless_dir : Path
        Framework output directory containing ``pages/``.
    output_dir : Path
        Parent directory for the bundle directories.
    classification : Classification
        Route classification for the same build; files it knows about keep
        their classified kind.
    shim_path : Path, optional
        Compatibility shim copied into every bundle; defaults to the copy
        shipped with this package.

    Returns
    -------
    PartitionPlan
        The planned contents of both bundles and of the assets directory.

    Raises
    ------
    BundleError
        If a page file would land in both bundles.
    """
    shim = shim_path or default_shim_path()
    known = {entry.file: entry.kind for entry in classification.entries}
    internal_files = set(classification.internal.values()) | {ERROR_PAGE.as_posix()}

    default = BundlePlan(
        name=DEFAULT_BUNDLE, directory=output_dir / DEFAULT_LAMBDA_CODE_DIR
    )
    api = BundlePlan(
        name=API_BUNDLE,
        directory=output_dir / API_LAMBDA_CODE_DIR,
        populate=classification.has_api_routes,
    )
    plan = PartitionPlan(
        bundles={DEFAULT_BUNDLE: default, API_BUNDLE: api},
        assets=AssetPlan(directory=output_dir / ASSETS_DIR),
    )

    pages_dir = serverless_dir / PAGES_ROOT
    sources = sorted(p for p in pages_dir.rglob("*") if p.is_file()) if pages_dir.is_dir() else []
    for source in sources:
        relative = PurePosixPath(PAGES_ROOT, *source.relative_to(pages_dir).parts)
        operation = CopyOperation(source=source, destination=relative)
        if relative.suffix in (HTML_SUFFIX, DATA_SUFFIX):
            plan.assets.copies.append(operation)
            continue
        if _kind_for(relative, known) is PageKind.API:
            api.copies.append(operation)
            continue
        default.copies.append(operation)
        if relative == ERROR_PAGE:
            api.copies.append(operation)

    for bundle in plan.bundles.values():
        bundle.copies.append(CopyOperation(source=shim, destination=SHIM_DESTINATION))

    shared = set(default.page_destinations) & set(api.page_destinations)
    leaked = sorted(shared - internal_files)
    if leaked:
        msg = f"Files assigned to both bundles: {', '.join(leaked)}"
        raise BundleError(msg)
    return plan


def empty_dir(directory: Path) -> None:
    """Create ``directory`` if needed and remove everything inside it."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for child in directory.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as exc:
        raise FilesystemFailure("empty directory", directory) from exc


def _copy(operation: CopyOperation, bundle_dir: Path) -> None:
    target = bundle_dir.joinpath(*operation.destination.parts)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(operation.source, target)
    except OSError as exc:
        raise FilesystemFailure(f"copy {operation.source} to", target) from exc


def _write_entry_point(bundle: BundlePlan, renderer: HandlerRenderer) -> Path:
    target = bundle.directory / ENTRY_POINT
    source = renderer.render(bundle.name, manifest_filename=MANIFEST_FILENAME)
    try:
        target.write_text(source, encoding="utf-8")
    except OSError as exc:
        raise FilesystemFailure("write entry point", target) from exc
    return target


def apply_bundle(
    bundle: BundlePlan,
    manifest: DefaultManifest | ApiManifest,
    *,
    renderer: HandlerRenderer,
) -> list[Path]:
    """Empty ``bundle.directory`` and populate it according to the plan.

    Returns the written files; empty when the bundle has nothing to hold.
    """
    empty_dir(bundle.directory)
    if not bundle.populate:
        log.info("emptied %s bundle at %s", bundle.name, bundle.directory)
        return []
    written = [
        _write_entry_point(bundle, renderer),
        write_manifest(manifest, bundle.directory),
    ]
    for operation in bundle.copies:
        _copy(operation, bundle.directory)
        written.append(bundle.directory.joinpath(*operation.destination.parts))
    log.info(
        "built %s bundle at %s with %d files", bundle.name, bundle.directory, len(written)
    )
    return written


def apply_assets(assets: AssetPlan) -> list[Path]:
    """Empty ``assets.directory`` and copy every storage-served page into it."""
    empty_dir(assets.directory)
    written: list[Path] = []
    for operation in assets.copies:
        _copy(operation, assets.directory)
        written.append(assets.directory.joinpath(*operation.destination.parts))
    log.info("collected %d storage assets at %s", len(written), assets.directory)
    return written


def apply_partition(
    plan: PartitionPlan,
    manifests: BuildManifests,
    *,
    renderer: HandlerRenderer | None = None,
) -> dict[str, list[Path]]:
    """Materialize ``plan`` on disk, one worker per bundle.

    Bundles and the assets directory own disjoint directories, so they are
    applied concurrently. The first failure is re-raised once every worker
    has finished. The result maps each bundle name, plus ``"assets"``, to
    the files written for it.
    """
    renderer = renderer or HandlerRenderer()
    manifest_for = {DEFAULT_BUNDLE: manifests.default, API_BUNDLE: manifests.api}
    with cf.ThreadPoolExecutor(max_workers=len(plan.bundles) + 1) as pool:
        futures = {
            name: pool.submit(apply_bundle, bundle, manifest_for[name], renderer=renderer)
            for name, bundle in plan.bundles.items()
        }
        futures[ASSETS_DIR] = pool.submit(apply_assets, plan.assets)
    return {name: future.result() for name, future in futures.items()}


def cleanup_framework_output(
    framework_dir: Path,
    *,
    remove: cabc.Iterable[str] = DEFAULT_CLEANUP,
    keep: cabc.Iterable[str] = DEFAULT_KEEP,
) -> list[Path]:
    """Remove the designated intermediate entries of ``framework_dir``.

    Only entries named in ``remove`` are deleted. Entries named in ``keep``,
    and the framework's ``static`` directory, always survive. Must run only
    after every bundle and the assets directory have been populated.
    """
    if not framework_dir.is_dir():
        return []
    preserved = ALWAYS_KEEP.union(keep)
    removed: list[Path] = []
    for name in remove:
        if name in preserved:
            log.warning("not removing preserved entry %s from %s", name, framework_dir)
            continue
        child = framework_dir / name
        if not child.exists() and not child.is_symlink():
            continue
        try:
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        except OSError as exc:
            raise FilesystemFailure("remove", child) from exc
        removed.append(child)
    log.info("removed %d entries from %s", len(removed), framework_dir)
    return removed


__all__ = [
    "ALWAYS_KEEP",
    "API_BUNDLE",
    "API_LAMBDA_CODE_DIR",
    "ASSETS_DIR",
    "AssetPlan",
    "BUNDLE_DIRS",
    "BundlePlan",
    "CopyOperation",
    "DEFAULT_BUNDLE",
    "DEFAULT_CLEANUP",
    "DEFAULT_KEEP",
    "DEFAULT_LAMBDA_CODE_DIR",
    "ENTRY_POINT",
    "PartitionPlan",
    "SHIM_DESTINATION",
    "apply_assets",
    "apply_bundle",
    "apply_partition",
    "cleanup_framework_output",
    "empty_dir",
    "plan_partition",
]
