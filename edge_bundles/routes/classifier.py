"""Sort compiled page files into route tables per bundle.

The framework emits one file per page under ``pages/``. Each file maps to a
route by stripping the ``pages/`` root and the extension, with ``index``
files collapsing onto their directory. Routes are then split three ways:

* API routes (first segment ``api``) belong to the API bundle.
* Prerendered ``.html`` pages are static HTML served without a render.
* Everything else is server-rendered on each request.

Each kind is further split into non-dynamic (fixed path) and dynamic
(parameterised) tables. ``_app``, ``_document`` and ``_error`` are internal
pages: they are recorded separately and never exposed as routes.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
from pathlib import PurePosixPath

from edge_bundles.errors import ClassificationConflict, MalformedRoutePath
from edge_bundles.routes.patterns import compile_pattern
from edge_bundles.routes.segments import RoutePath, parse_route_path

log = logging.getLogger("edge_bundles.routes")

PAGES_ROOT = "pages"
API_SEGMENT = "api"
HTML_SUFFIX = ".html"
DATA_SUFFIX = ".json"
INTERNAL_PAGES = frozenset({"/_app", "/_document", "/_error"})


class PageKind(enum.StrEnum):
    """How a page is served."""

    HTML = "html"
    SSR = "ssr-page"
    API = "api"


@dc.dataclass(frozen=True, slots=True)
class PageEntry:
    """One compiled page and the route it serves."""

    route: str
    file: str
    kind: PageKind
    path: RoutePath

    @property
    def internal(self) -> bool:
        return self.route in INTERNAL_PAGES


@dc.dataclass(frozen=True, slots=True)
class DynamicRoute:
    """A parameterised route's file and matching pattern."""

    file: str
    regex: str


@dc.dataclass(slots=True)
class RouteTable:
    """Disjoint exact-path and pattern-matched route mappings."""

    non_dynamic: dict[str, str] = dc.field(default_factory=dict)
    dynamic: dict[str, DynamicRoute] = dc.field(default_factory=dict)

    def add(self, entry: PageEntry) -> None:
        if entry.path.is_dynamic:
            self.dynamic[entry.path.express_key] = DynamicRoute(
                file=entry.file, regex=compile_pattern(entry.path)
            )
        else:
            self.non_dynamic[entry.route] = entry.file

    def __len__(self) -> int:
        return len(self.non_dynamic) + len(self.dynamic)


@dc.dataclass(slots=True)
class Classification:
    """Route tables for every page kind produced by one build."""

    ssr: RouteTable = dc.field(default_factory=RouteTable)
    html: RouteTable = dc.field(default_factory=RouteTable)
    api: RouteTable = dc.field(default_factory=RouteTable)
    internal: dict[str, str] = dc.field(default_factory=dict)
    entries: list[PageEntry] = dc.field(default_factory=list)

    @property
    def has_api_routes(self) -> bool:
        return len(self.api) > 0

    def table_for(self, kind: PageKind) -> RouteTable:
        match kind:
            case PageKind.HTML:
                return self.html
            case PageKind.API:
                return self.api
            case _:
                return self.ssr


def route_for_file(file: str) -> str:
    """Return the bracket-form route served by a compiled page file.

    Examples
    --------
    >>> route_for_file("pages/index.js")
    '/'
    >>> route_for_file("pages/blog/index.html")
    '/blog'
    >>> route_for_file("pages/customers/[customer].js")
    '/customers/[customer]'
    """
    posix = PurePosixPath(file)
    if not posix.parts or posix.parts[0] != PAGES_ROOT or len(posix.parts) < 2:
        raise MalformedRoutePath(file, f"page files must live under '{PAGES_ROOT}/'")
    parts = list(posix.parts[1:])
    parts[-1] = PurePosixPath(parts[-1]).stem
    if parts[-1] == "index":
        parts.pop()
    return "/" + "/".join(parts)


def page_kind(path: RoutePath, file: str) -> PageKind:
    """Decide whether ``file`` is an API handler, static HTML, or SSR page."""
    if path.first_literal == API_SEGMENT:
        return PageKind.API
    if file.endswith(HTML_SUFFIX):
        return PageKind.HTML
    return PageKind.SSR


def classify_pages(files: cabc.Iterable[str]) -> Classification:
    """Classify compiled page files into per-kind route tables.

    Parameters
    ----------
    files : Iterable[str]
        Page files relative to the framework's serverless output root, for
        example ``pages/api/customers/[id].js``. Order is preserved in the
        resulting tables. ``.json`` data files are skipped.

    Returns
    -------
    Classification
        Route tables for SSR, HTML and API pages plus the internal pages.

    Raises
    ------
    ClassificationConflict
        If two distinct files resolve to the same route, or two dynamic
        routes match exactly the same request paths.
    MalformedRoutePath
        If a file's route has invalid bracket syntax.
    """
    result = Classification()
    by_route: dict[str, str] = {}
    by_shape: dict[tuple[str, ...], PageEntry] = {}

    for file in files:
        if file.endswith(DATA_SUFFIX):
            continue
        route = route_for_file(file)
        previous = by_route.get(route)
        if previous == file:
            continue
        if previous is not None:
            raise ClassificationConflict(route, previous, file)
        by_route[route] = file

        path = parse_route_path(route)
        entry = PageEntry(route=route, file=file, kind=page_kind(path, file), path=path)
        result.entries.append(entry)

        if entry.internal:
            log.debug("internal page %s -> %s", route, file)
            result.internal[route] = file
            continue

        if path.is_dynamic:
            clash = by_shape.get(path.shape)
            if clash is not None:
                raise ClassificationConflict(path.express_key, clash.file, file)
            by_shape[path.shape] = entry

        log.debug("%s page %s -> %s", entry.kind, route, file)
        result.table_for(entry.kind).add(entry)

    return result


__all__ = [
    "Classification",
    "DynamicRoute",
    "INTERNAL_PAGES",
    "PageEntry",
    "PageKind",
    "RouteTable",
    "classify_pages",
    "page_kind",
    "route_for_file",
]
