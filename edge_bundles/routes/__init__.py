"""Route grammar, classification, pattern compilation, and matching."""

from .classifier import (
    Classification,
    DynamicRoute,
    PageEntry,
    PageKind,
    RouteTable,
    classify_pages,
    route_for_file,
)
from .matcher import RouteMatch, match_route
from .patterns import compile_pattern, extract_params
from .segments import (
    CatchAllSegment,
    LiteralSegment,
    ParamSegment,
    RoutePath,
    parse_express_key,
    parse_route_path,
)

__all__ = [
    "CatchAllSegment",
    "Classification",
    "DynamicRoute",
    "LiteralSegment",
    "PageEntry",
    "PageKind",
    "ParamSegment",
    "RouteMatch",
    "RoutePath",
    "RouteTable",
    "classify_pages",
    "compile_pattern",
    "extract_params",
    "match_route",
    "parse_express_key",
    "parse_route_path",
    "route_for_file",
]
