"""Parse framework route paths into tagged segments.

Page files use a bracket convention for path parameters::

    /customers             -> [LiteralSegment("customers")]
    /customers/[customer]  -> [LiteralSegment("customers"), ParamSegment("customer")]
    /docs/[...slug]        -> [LiteralSegment("docs"), CatchAllSegment("slug")]

Classification, pattern compilation, and route matching all read the parsed
form, so "is this segment dynamic" is decided in exactly one place.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from edge_bundles.errors import MalformedRoutePath

_CATCH_ALL_PREFIX = "..."
_EXPRESS_PARAM_PREFIX = ":"
_FORBIDDEN_NAME_CHARS = frozenset("[]/:*")


@dc.dataclass(frozen=True, slots=True)
class LiteralSegment:
    """A path segment matched verbatim."""

    value: str

    def express(self) -> str:
        return self.value


@dc.dataclass(frozen=True, slots=True)
class ParamSegment:
    """A named parameter matching exactly one non-empty segment."""

    name: str

    def express(self) -> str:
        return f":{self.name}"


@dc.dataclass(frozen=True, slots=True)
class CatchAllSegment:
    """A trailing parameter absorbing one or more remaining segments."""

    name: str

    def express(self) -> str:
        return f":{self.name}*"


Segment: typ.TypeAlias = LiteralSegment | ParamSegment | CatchAllSegment


@dc.dataclass(frozen=True, slots=True)
class RoutePath:
    """A parsed route path.

    Attributes
    ----------
    raw : str
        The bracket-form route as produced by the framework, for example
        ``/customers/[customer]``.
    segments : tuple[Segment, ...]
        Parsed segments in path order; empty for the root route ``/``.
    """

    raw: str
    segments: tuple[Segment, ...]

    @property
    def is_dynamic(self) -> bool:
        """Return ``True`` when any segment is a parameter or catch-all."""
        return any(not isinstance(seg, LiteralSegment) for seg in self.segments)

    @property
    def has_catch_all(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], CatchAllSegment)

    @property
    def literal_count(self) -> int:
        return sum(1 for seg in self.segments if isinstance(seg, LiteralSegment))

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(
            seg.name for seg in self.segments if not isinstance(seg, LiteralSegment)
        )

    @property
    def first_literal(self) -> str | None:
        """Return the first segment's value when it is a literal."""
        if self.segments and isinstance(self.segments[0], LiteralSegment):
            return self.segments[0].value
        return None

    @property
    def express_key(self) -> str:
        """Render the route in ``/customers/:customer`` form.

        Non-dynamic routes render identically to their raw form.
        """
        if not self.segments:
            return "/"
        return "/" + "/".join(seg.express() for seg in self.segments)

    @property
    def shape(self) -> tuple[str, ...]:
        """Return the route with parameter names erased.

        Two dynamic routes with the same shape match exactly the same paths.
        """
        parts: list[str] = []
        for seg in self.segments:
            match seg:
                case LiteralSegment(value=value):
                    parts.append(f"literal:{value}")
                case ParamSegment():
                    parts.append("param")
                case CatchAllSegment():
                    parts.append("catch-all")
        return tuple(parts)


def parse_route_path(raw: str) -> RoutePath:
    """Parse ``raw`` into a :class:`RoutePath`.

    Parameters
    ----------
    raw : str
        Slash-delimited route such as ``/blog/[post]``. A leading slash is
        required; a single trailing slash is tolerated.

    Returns
    -------
    RoutePath
        The parsed route.

    Raises
    ------
    MalformedRoutePath
        If brackets are unbalanced or mixed with literal text, a parameter
        name is empty or repeated, a catch-all is not the final segment, an
        optional catch-all (``[[...name]]``) is used, a literal segment starts
        with ``:``, or the path contains an empty segment.
    """
    if not raw.startswith("/"):
        raise MalformedRoutePath(raw, "route paths must start with '/'")
    body = raw[1:]
    if body.endswith("/"):
        body = body[:-1]
    if not body:
        return RoutePath(raw=raw, segments=())

    segments: list[Segment] = []
    parts = body.split("/")
    seen_names: set[str] = set()
    for index, part in enumerate(parts):
        segment = _parse_segment(raw, part)
        if isinstance(segment, CatchAllSegment) and index != len(parts) - 1:
            raise MalformedRoutePath(
                raw, f"catch-all segment '[...{segment.name}]' must be last"
            )
        if not isinstance(segment, LiteralSegment):
            if segment.name in seen_names:
                raise MalformedRoutePath(
                    raw, f"parameter name '{segment.name}' is used more than once"
                )
            seen_names.add(segment.name)
        segments.append(segment)
    return RoutePath(raw=raw, segments=tuple(segments))


def parse_express_key(key: str) -> RoutePath:
    """Parse a manifest key such as ``/customers/:customer`` back into segments.

    ``:name`` is a parameter and a trailing ``:name*`` a catch-all. The
    returned path's ``raw`` is the equivalent bracket form.
    """
    bracketed: list[str] = []
    for part in key.strip("/").split("/"):
        if part.startswith(_EXPRESS_PARAM_PREFIX) and part.endswith("*"):
            bracketed.append(f"[...{part[1:-1]}]")
        elif part.startswith(_EXPRESS_PARAM_PREFIX):
            bracketed.append(f"[{part[1:]}]")
        else:
            bracketed.append(part)
    return parse_route_path("/" + "/".join(bracketed))


def _parse_segment(raw: str, part: str) -> Segment:
    if not part:
        raise MalformedRoutePath(raw, "empty path segment")
    opens = part.count("[")
    closes = part.count("]")
    if opens == 0 and closes == 0:
        if part.startswith(_EXPRESS_PARAM_PREFIX):
            raise MalformedRoutePath(
                raw, f"literal segment '{part}' must not start with ':'"
            )
        return LiteralSegment(part)
    if part.startswith("[[") and part.endswith("]]"):
        raise MalformedRoutePath(
            raw, f"optional catch-all segment '{part}' is not supported"
        )
    if opens != 1 or closes != 1 or not (part.startswith("[") and part.endswith("]")):
        raise MalformedRoutePath(
            raw, f"segment '{part}' has unbalanced or misplaced brackets"
        )

    inner = part[1:-1]
    if inner.startswith(_CATCH_ALL_PREFIX):
        name = _validate_name(raw, inner[len(_CATCH_ALL_PREFIX) :], part)
        return CatchAllSegment(name)
    return ParamSegment(_validate_name(raw, inner, part))


def _validate_name(raw: str, name: str, part: str) -> str:
    if not name:
        raise MalformedRoutePath(raw, f"segment '{part}' has an empty parameter name")
    if name.startswith(".") or _FORBIDDEN_NAME_CHARS.intersection(name):
        raise MalformedRoutePath(
            raw, f"segment '{part}' has an invalid parameter name '{name}'"
        )
    return name


__all__ = [
    "CatchAllSegment",
    "LiteralSegment",
    "ParamSegment",
    "RoutePath",
    "Segment",
    "parse_express_key",
    "parse_route_path",
]
