"""Compile parsed route paths into anchored regular expressions.

Patterns use positional groups only so the same string can be evaluated by
the Python matcher and by the JavaScript handlers shipped in each bundle.
Parameter values are recovered by pairing groups with
:attr:`RoutePath.param_names`.
"""

from __future__ import annotations

import re

from edge_bundles.routes.segments import (
    CatchAllSegment,
    LiteralSegment,
    ParamSegment,
    RoutePath,
    parse_route_path,
)

PARAM_PATTERN = "([^/]+)"
CATCH_ALL_PATTERN = "([^/]+(?:/[^/]+)*)"
TRAILING_SLASH = "/?"


def compile_pattern(route: RoutePath | str) -> str:
    """Return the anchored pattern string matching ``route``.

    Literal segments match verbatim, a parameter matches one or more
    non-slash characters, and a trailing catch-all matches one or more
    non-empty segments. A single trailing slash on the request
    path is accepted.

    Examples
    --------
    >>> compile_pattern("/customers/[customer]")
    '^/customers/([^/]+)/?$'
    >>> compile_pattern("/docs/[...slug]")
    '^/docs/([^/]+(?:/[^/]+)*)/?$'
    """
    path = parse_route_path(route) if isinstance(route, str) else route
    if not path.segments:
        return "^/$"
    parts: list[str] = []
    for seg in path.segments:
        match seg:
            case LiteralSegment(value=value):
                parts.append(re.escape(value))
            case ParamSegment():
                parts.append(PARAM_PATTERN)
            case CatchAllSegment():
                parts.append(CATCH_ALL_PATTERN)
    return "^/" + "/".join(parts) + TRAILING_SLASH + "$"


def extract_params(route: RoutePath, match: re.Match[str]) -> dict[str, str | list[str]]:
    """Map a successful match back onto the route's parameter names.

    Catch-all values are split into their component segments.
    """
    params: dict[str, str | list[str]] = {}
    dynamic = [seg for seg in route.segments if not isinstance(seg, LiteralSegment)]
    for seg, value in zip(dynamic, match.groups(), strict=True):
        if isinstance(seg, CatchAllSegment):
            params[seg.name] = value.split("/")
        else:
            params[seg.name] = value
    return params


__all__ = [
    "CATCH_ALL_PATTERN",
    "PARAM_PATTERN",
    "compile_pattern",
    "extract_params",
]
