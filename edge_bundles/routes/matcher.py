"""Resolve request paths against compiled route tables.

Manifests record dynamic routes in scan order, which says nothing about
precedence. The matcher applies it explicitly:

1. exact non-dynamic routes,
2. parameterised routes without a catch-all, most literal segments first,
3. catch-all routes, most literal segments first.

Within a tier, earlier tables and earlier entries win.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from edge_bundles.routes.patterns import extract_params
from edge_bundles.routes.segments import RoutePath, parse_express_key


class DynamicRouteLike(typ.Protocol):
    file: str
    regex: str


class RouteTableLike(typ.Protocol):
    non_dynamic: cabc.Mapping[str, str]
    dynamic: cabc.Mapping[str, DynamicRouteLike]


@dc.dataclass(frozen=True, slots=True)
class RouteMatch:
    """The route chosen for a request path."""

    kind: str
    route: str
    file: str
    params: dict[str, str | list[str]] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class _Candidate:
    kind: str
    key: str
    file: str
    path: RoutePath
    pattern: re.Pattern[str]
    order: int

    @property
    def rank(self) -> tuple[int, int, int]:
        return (int(self.path.has_catch_all), -self.path.literal_count, self.order)


def match_route(
    tables: cabc.Sequence[tuple[str, RouteTableLike]], request_path: str
) -> RouteMatch | None:
    """Return the best route for ``request_path`` or ``None``.

    Parameters
    ----------
    tables : Sequence[tuple[str, RouteTableLike]]
        ``(kind, table)`` pairs, for example ``[("html", ...), ("ssr", ...)]``.
    request_path : str
        Path component of the incoming request, without query string.
    """
    path = request_path or "/"
    normalized = path.rstrip("/") or "/"
    for kind, table in tables:
        for candidate in (path, normalized):
            file = table.non_dynamic.get(candidate)
            if file is not None:
                return RouteMatch(kind=kind, route=candidate, file=file)

    candidates = sorted(_dynamic_candidates(tables), key=lambda item: item.rank)
    for candidate in candidates:
        found = candidate.pattern.match(path)
        if found:
            return RouteMatch(
                kind=candidate.kind,
                route=candidate.key,
                file=candidate.file,
                params=extract_params(candidate.path, found),
            )
    return None


def _dynamic_candidates(
    tables: cabc.Sequence[tuple[str, RouteTableLike]],
) -> cabc.Iterator[_Candidate]:
    order = 0
    for kind, table in tables:
        for key, route in table.dynamic.items():
            yield _Candidate(
                kind=kind,
                key=key,
                file=route.file,
                path=parse_express_key(key),
                pattern=re.compile(route.regex),
                order=order,
            )
            order += 1


__all__ = ["RouteMatch", "RouteTableLike", "match_route"]
