"""Assemble and serialize the routing manifest written into each bundle.

The default bundle's manifest describes page routes and public files::

    {
      "publicFiles": {"/favicon.ico": "favicon.ico"},
      "pages": {
        "ssr":  {"dynamic": {...}, "nonDynamic": {...}},
        "html": {"dynamic": {...}, "nonDynamic": {...}}
      }
    }

The API bundle's manifest holds only ``{"apis": {"dynamic": ..., "nonDynamic": ...}}``.
Struct field order fixes the JSON key order, so identical inputs always
encode to identical bytes.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json

from edge_bundles.errors import BuildMetadataError, FilesystemFailure

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from edge_bundles.routes.classifier import Classification, RouteTable

log = logging.getLogger("edge_bundles.manifest")

MANIFEST_FILENAME = "manifest.json"


class DynamicEntry(msgspec.Struct, frozen=True):
    """A dynamic route's compiled file and matching pattern."""

    file: str
    regex: str


class RouteTableManifest(msgspec.Struct, rename="camel"):
    """Serialized form of one kind's route tables."""

    dynamic: dict[str, DynamicEntry] = msgspec.field(default_factory=dict)
    non_dynamic: dict[str, str] = msgspec.field(default_factory=dict)


class PagesManifest(msgspec.Struct):
    ssr: RouteTableManifest = msgspec.field(default_factory=RouteTableManifest)
    html: RouteTableManifest = msgspec.field(default_factory=RouteTableManifest)


class DefaultManifest(msgspec.Struct, rename="camel"):
    """Manifest for the page-rendering bundle."""

    public_files: dict[str, str] = msgspec.field(default_factory=dict)
    pages: PagesManifest = msgspec.field(default_factory=PagesManifest)


class ApiManifest(msgspec.Struct):
    """Manifest for the API bundle."""

    apis: RouteTableManifest = msgspec.field(default_factory=RouteTableManifest)


@dc.dataclass(frozen=True, slots=True)
class BuildManifests:
    """The pair of manifests produced by one build."""

    default: DefaultManifest
    api: ApiManifest


def _table_manifest(table: RouteTable) -> RouteTableManifest:
    return RouteTableManifest(
        dynamic={
            key: DynamicEntry(file=route.file, regex=route.regex)
            for key, route in table.dynamic.items()
        },
        non_dynamic=dict(table.non_dynamic),
    )


def assemble_manifests(
    classification: Classification, public_files: cabc.Iterable[str]
) -> BuildManifests:
    """Combine classified routes and public assets into bundle manifests.

    Parameters
    ----------
    classification : Classification
        Output of :func:`edge_bundles.routes.classify_pages`.
    public_files : Iterable[str]
        POSIX paths relative to the public directory; each is exposed at
        ``/<path>``.

    Returns
    -------
    BuildManifests
        The default and API bundle manifests.
    """
    default = DefaultManifest(
        public_files={f"/{name}": name for name in public_files},
        pages=PagesManifest(
            ssr=_table_manifest(classification.ssr),
            html=_table_manifest(classification.html),
        ),
    )
    api = ApiManifest(apis=_table_manifest(classification.api))
    return BuildManifests(default=default, api=api)


def encode_manifest(manifest: DefaultManifest | ApiManifest) -> bytes:
    """Return the canonical JSON encoding of ``manifest``."""
    return msgspec_json.format(msgspec_json.encode(manifest), indent=2) + b"\n"


def write_manifest(manifest: DefaultManifest | ApiManifest, bundle_dir: Path) -> Path:
    """Write ``manifest.json`` into ``bundle_dir``, replacing any prior copy."""
    path = bundle_dir / MANIFEST_FILENAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_manifest(manifest))
    except OSError as exc:
        raise FilesystemFailure("write manifest", path) from exc
    log.debug("wrote manifest %s", path)
    return path


def load_manifest(path: Path) -> DefaultManifest | ApiManifest:
    """Decode a manifest written by :func:`write_manifest`."""
    try:
        raw = msgspec_json.decode(path.read_bytes())
    except FileNotFoundError as exc:
        msg = f"Manifest not found: {path}"
        raise BuildMetadataError(msg) from exc
    except msgspec.DecodeError as exc:
        msg = f"Unable to parse manifest at {path}: {exc}"
        raise BuildMetadataError(msg) from exc
    if not isinstance(raw, dict):
        msg = f"Manifest at {path} must be a JSON object."
        raise BuildMetadataError(msg)
    target: type[DefaultManifest | ApiManifest] = (
        ApiManifest if "apis" in raw else DefaultManifest
    )
    try:
        return msgspec.convert(raw, type=target)
    except msgspec.ValidationError as exc:
        msg = f"Manifest at {path} does not match the expected schema: {exc}"
        raise BuildMetadataError(msg) from exc


def routing_tables(
    manifest: DefaultManifest | ApiManifest,
) -> list[tuple[str, RouteTableManifest]]:
    """Return ``(kind, table)`` pairs in the order a handler consults them."""
    match manifest:
        case ApiManifest(apis=apis):
            return [("api", apis)]
        case DefaultManifest(public_files=public_files, pages=pages):
            return [
                ("html", pages.html),
                ("ssr", pages.ssr),
                ("public", RouteTableManifest(non_dynamic=dict(public_files))),
            ]
    msg = f"Unsupported manifest type: {type(manifest).__name__}"
    raise TypeError(msg)


__all__ = [
    "ApiManifest",
    "BuildManifests",
    "DefaultManifest",
    "DynamicEntry",
    "MANIFEST_FILENAME",
    "PagesManifest",
    "RouteTableManifest",
    "assemble_manifests",
    "encode_manifest",
    "load_manifest",
    "routing_tables",
    "write_manifest",
]
