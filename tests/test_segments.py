from __future__ import annotations

import pytest

from edge_bundles.errors import MalformedRoutePath
from edge_bundles.routes.segments import (
    CatchAllSegment,
    LiteralSegment,
    ParamSegment,
    parse_express_key,
    parse_route_path,
)


def test_parses_literal_param_and_catch_all_segments() -> None:
    path = parse_route_path("/customers/[customer]/[...rest]")
    assert path.segments == (
        LiteralSegment("customers"),
        ParamSegment("customer"),
        CatchAllSegment("rest"),
    )
    assert path.is_dynamic
    assert path.has_catch_all
    assert path.param_names == ("customer", "rest")
    assert path.literal_count == 1


def test_root_route_has_no_segments() -> None:
    path = parse_route_path("/")
    assert path.segments == ()
    assert not path.is_dynamic
    assert path.express_key == "/"


def test_literal_route_is_not_dynamic() -> None:
    path = parse_route_path("/customers/new")
    assert not path.is_dynamic
    assert path.express_key == "/customers/new"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/customers/[customer]", "/customers/:customer"),
        ("/customers/[customer]/[post]", "/customers/:customer/:post"),
        ("/customers/[...catchAll]", "/customers/:catchAll*"),
        ("/[root]", "/:root"),
    ],
)
def test_express_key(raw: str, expected: str) -> None:
    assert parse_route_path(raw).express_key == expected


def test_express_key_round_trips_to_bracket_form() -> None:
    path = parse_express_key("/customers/:customer/:rest*")
    assert path.raw == "/customers/[customer]/[...rest]"
    assert path.has_catch_all


def test_shape_ignores_parameter_names() -> None:
    assert parse_route_path("/blog/[post]").shape == parse_route_path("/blog/[slug]").shape
    assert parse_route_path("/blog/[post]").shape != parse_route_path("/blog/[...post]").shape


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ("/docs/[...slug]/edit", "must be last"),
        ("/docs/[slug", "unbalanced"),
        ("/docs/slug]", "unbalanced"),
        ("/docs/post-[id]", "misplaced"),
        ("/docs/[]", "empty parameter name"),
        ("/docs/[...]", "empty parameter name"),
        ("/docs/[[...slug]]", "optional catch-all"),
        ("/[id]/posts/[id]", "more than once"),
        ("/docs//intro", "empty path segment"),
        ("docs", "must start with"),
        ("/docs/:draft", "must not start with ':'"),
        ("/docs/[slug*]", "invalid parameter name"),
    ],
)
def test_malformed_paths_are_rejected(raw: str, reason: str) -> None:
    with pytest.raises(MalformedRoutePath) as excinfo:
        parse_route_path(raw)
    assert excinfo.value.path == raw
    assert reason in str(excinfo.value)
