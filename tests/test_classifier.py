from __future__ import annotations

import re

import pytest

from edge_bundles.errors import ClassificationConflict, MalformedRoutePath
from edge_bundles.routes.classifier import PageKind, classify_pages, route_for_file

from .conftest import SIMPLE_APP_PAGES


@pytest.fixture
def classification():
    return classify_pages(SIMPLE_APP_PAGES.values())


@pytest.mark.parametrize(
    ("file", "route"),
    [
        ("pages/index.js", "/"),
        ("pages/about.html", "/about"),
        ("pages/blog/index.js", "/blog"),
        ("pages/customers/[customer]/[post].js", "/customers/[customer]/[post]"),
        ("pages/customers/[...catchAll].js", "/customers/[...catchAll]"),
    ],
)
def test_route_for_file(file: str, route: str) -> None:
    assert route_for_file(file) == route


def test_route_for_file_requires_pages_root() -> None:
    with pytest.raises(MalformedRoutePath):
        route_for_file("static/chunk.js")


def test_ssr_tables(classification) -> None:
    assert classification.ssr.non_dynamic == {
        "/customers/new": "pages/customers/new.js",
        "/": "pages/index.js",
        "/404": "pages/404.js",
    }
    assert {key: route.file for key, route in classification.ssr.dynamic.items()} == {
        "/:root": "pages/[root].js",
        "/customers/:customer": "pages/customers/[customer].js",
        "/customers/:customer/:post": "pages/customers/[customer]/[post].js",
        "/customers/:customer/profile": "pages/customers/[customer]/profile.js",
        "/customers/:catchAll*": "pages/customers/[...catchAll].js",
    }


def test_html_tables(classification) -> None:
    assert classification.html.non_dynamic == {
        "/terms": "pages/terms.html",
        "/about": "pages/about.html",
    }
    assert list(classification.html.dynamic) == ["/blog/:post"]
    assert classification.html.dynamic["/blog/:post"].file == "pages/blog/[post].html"


def test_api_routes_only_in_api_table(classification) -> None:
    assert classification.api.non_dynamic == {
        "/api/customers": "pages/api/customers.js",
        "/api/customers/new": "pages/api/customers/new.js",
    }
    assert classification.api.dynamic["/api/customers/:id"].file == "pages/api/customers/[id].js"
    page_keys = (
        set(classification.ssr.non_dynamic)
        | set(classification.ssr.dynamic)
        | set(classification.html.non_dynamic)
        | set(classification.html.dynamic)
    )
    assert not any(key.startswith("/api") for key in page_keys)
    assert classification.has_api_routes


def test_internal_pages_are_not_routes(classification) -> None:
    assert classification.internal == {
        "/_app": "pages/_app.js",
        "/_document": "pages/_document.js",
        "/_error": "pages/_error.js",
    }
    for table in (classification.ssr, classification.html, classification.api):
        assert not set(table.non_dynamic) & set(classification.internal)


def test_non_dynamic_routes_never_land_in_dynamic(classification) -> None:
    for table in (classification.ssr, classification.html, classification.api):
        for route in table.non_dynamic:
            assert "[" not in route
            assert route not in table.dynamic


def test_dynamic_patterns_match_concrete_paths(classification) -> None:
    post = classification.ssr.dynamic["/customers/:customer/:post"]
    assert re.match(post.regex, "/customers/acme/hello-world")
    assert not re.match(post.regex, "/customers/acme")
    catch_all = classification.ssr.dynamic["/customers/:catchAll*"]
    assert re.match(catch_all.regex, "/customers/a/b/c")


def test_entry_kinds(classification) -> None:
    kinds = {entry.file: entry.kind for entry in classification.entries}
    assert kinds["pages/terms.html"] is PageKind.HTML
    assert kinds["pages/index.js"] is PageKind.SSR
    assert kinds["pages/api/customers/[id].js"] is PageKind.API


def test_same_route_from_two_files_is_a_conflict() -> None:
    with pytest.raises(ClassificationConflict) as excinfo:
        classify_pages(["pages/about.js", "pages/about.html"])
    assert excinfo.value.route == "/about"
    assert excinfo.value.files == ("pages/about.js", "pages/about.html")


def test_index_and_named_page_conflict() -> None:
    with pytest.raises(ClassificationConflict):
        classify_pages(["pages/blog.js", "pages/blog/index.js"])


def test_differently_named_params_at_same_position_conflict() -> None:
    with pytest.raises(ClassificationConflict):
        classify_pages(["pages/blog/[post].js", "pages/blog/[slug].js"])


def test_repeated_file_is_not_a_conflict() -> None:
    result = classify_pages(["pages/index.js", "pages/index.js"])
    assert result.ssr.non_dynamic == {"/": "pages/index.js"}


def test_data_files_are_ignored() -> None:
    result = classify_pages(["pages/about.html", "pages/about.json"])
    assert result.html.non_dynamic == {"/about": "pages/about.html"}
    assert len(result.entries) == 1


def test_malformed_page_path_is_reported() -> None:
    with pytest.raises(MalformedRoutePath) as excinfo:
        classify_pages(["pages/docs/[...slug]/edit.js"])
    assert excinfo.value.path == "/docs/[...slug]/edit"


def test_literal_that_reads_as_a_parameter_is_rejected() -> None:
    with pytest.raises(MalformedRoutePath, match="must not start with ':'"):
        classify_pages(["pages/docs/:draft.js"])


def test_classification_is_stable() -> None:
    first = classify_pages(SIMPLE_APP_PAGES.values())
    second = classify_pages(SIMPLE_APP_PAGES.values())
    assert list(first.ssr.dynamic) == list(second.ssr.dynamic)
    assert first.ssr.dynamic == second.ssr.dynamic
