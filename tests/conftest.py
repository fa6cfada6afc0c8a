"""Shared fixtures describing a framework project after a production build."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from edge_bundles.config import BuildConfig

SIMPLE_APP_PAGES: dict[str, str] = {
    "/[root]": "pages/[root].js",
    "/customers/[customer]": "pages/customers/[customer].js",
    "/customers/[customer]/[post]": "pages/customers/[customer]/[post].js",
    "/customers/[customer]/profile": "pages/customers/[customer]/profile.js",
    "/customers/[...catchAll]": "pages/customers/[...catchAll].js",
    "/customers/new": "pages/customers/new.js",
    "/": "pages/index.js",
    "/_app": "pages/_app.js",
    "/_document": "pages/_document.js",
    "/_error": "pages/_error.js",
    "/404": "pages/404.js",
    "/terms": "pages/terms.html",
    "/about": "pages/about.html",
    "/blog/[post]": "pages/blog/[post].html",
    "/api/customers": "pages/api/customers.js",
    "/api/customers/new": "pages/api/customers/new.js",
    "/api/customers/[id]": "pages/api/customers/[id].js",
}

SIMPLE_APP_PUBLIC = ("favicon.ico", "sub/image.png", "sw.js")


def write_simple_app(
    root: Path,
    pages: dict[str, str] | None = None,
    public: tuple[str, ...] = SIMPLE_APP_PUBLIC,
) -> Path:
    """Lay out framework build output for a small app under ``root``."""
    pages = SIMPLE_APP_PAGES if pages is None else pages
    serverless = root / ".next" / "serverless"
    if serverless.exists():
        shutil.rmtree(serverless)
    serverless.mkdir(parents=True, exist_ok=True)
    (serverless / "pages-manifest.json").write_text(json.dumps(pages), encoding="utf-8")
    for file in pages.values():
        target = serverless / file
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"// compiled {file}\n", encoding="utf-8")
    (root / ".next" / "cache").mkdir(exist_ok=True)
    (root / ".next" / "cache" / "build.bin").write_text("cache", encoding="utf-8")
    (root / ".next" / "static" / "chunks").mkdir(parents=True, exist_ok=True)
    (root / ".next" / "static" / "chunks" / "main.js").write_text("// chunk\n", encoding="utf-8")
    (root / ".next" / "prerender-manifest.json").write_text("{}", encoding="utf-8")
    for name in public:
        target = root / "public" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(name, encoding="utf-8")
    return root


@pytest.fixture
def simple_app(tmp_path: Path) -> Path:
    """Return a project directory containing finished framework output."""
    return write_simple_app(tmp_path / "simple-app")


@pytest.fixture
def build_config(simple_app: Path) -> BuildConfig:
    """Return a config that reuses the fixture's framework output."""
    config = BuildConfig.for_project(simple_app)
    config.skip_build = True
    return config
