from __future__ import annotations

from pathlib import Path

import pytest

from edge_bundles import cli


def test_build_command_prints_written_manifests(
    simple_app: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(project_dir=simple_app, skip_build=True)
    out = capsys.readouterr().out
    assert "default-lambda/manifest.json" in out
    assert "api-lambda/manifest.json" in out
    assert "assets (3 files)" in out
    assert "removed" in out
    assert (simple_app / ".serverless_nextjs" / "default-lambda" / "index.js").is_file()


def test_build_command_respects_output_override(
    simple_app: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    target = tmp_path / "bundles"
    cli.build(project_dir=simple_app, output_dir=target, skip_build=True, cleanup=False)
    assert (target / "api-lambda" / "manifest.json").is_file()
    assert "removed" not in capsys.readouterr().out
    assert (simple_app / ".next" / "serverless").is_dir()


def test_plan_command_writes_nothing(
    simple_app: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.plan(project_dir=simple_app, manifests=True)
    out = capsys.readouterr().out
    assert "  pages/api/customers.js" in out
    assert '"publicFiles"' in out
    assert '"apis"' in out
    assert not (simple_app / ".serverless_nextjs").exists()


def test_match_command_reports_route(
    simple_app: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(project_dir=simple_app, skip_build=True)
    capsys.readouterr()
    manifest = simple_app / ".serverless_nextjs" / "default-lambda" / "manifest.json"

    cli.match("/customers/a/b", manifest=manifest)
    out = capsys.readouterr().out
    assert "ssr /customers/:catchAll* -> pages/customers/[...catchAll].js" in out
    assert "catchAll = a/b" in out


def test_match_command_exits_when_nothing_matches(
    simple_app: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(project_dir=simple_app, skip_build=True)
    manifest = simple_app / ".serverless_nextjs" / "api-lambda" / "manifest.json"
    with pytest.raises(SystemExit) as excinfo:
        cli.match("/api/orders", manifest=manifest)
    assert excinfo.value.code == 1
