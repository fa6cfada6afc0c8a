from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from edge_bundles import framework
from edge_bundles.errors import FrameworkBuildError
from edge_bundles.framework import FrameworkBuildOptions, build_env, run_framework_build


def test_build_env_layers_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODE_ENV", "development")
    monkeypatch.setenv("EDGE_BUNDLES_MARKER", "1")
    env = build_env(FrameworkBuildOptions(env={"NODE_ENV": "production"}))
    assert env["NODE_ENV"] == "production"
    assert env["EDGE_BUNDLES_MARKER"] == "1"


def test_runs_in_project_dir_by_default(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    seen: dict[str, object] = {}

    def fake_run(cmd: list[str], **kwargs: object) -> SimpleNamespace:
        seen["cmd"] = cmd
        seen.update(kwargs)
        return SimpleNamespace(returncode=0)

    monkeypatch.setattr(framework.subprocess, "run", fake_run)
    run_framework_build(
        FrameworkBuildOptions(cmd="npx", args=["next", "build"]), project_dir=tmp_path
    )
    assert seen["cmd"] == ["npx", "next", "build"]
    assert seen["cwd"] == tmp_path
    assert seen["check"] is True


def test_explicit_cwd_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: dict[str, object] = {}

    def fake_run(cmd: list[str], **kwargs: object) -> SimpleNamespace:
        seen.update(kwargs)
        return SimpleNamespace(returncode=0)

    monkeypatch.setattr(framework.subprocess, "run", fake_run)
    run_framework_build(
        FrameworkBuildOptions(cwd=tmp_path / "web"), project_dir=tmp_path
    )
    assert seen["cwd"] == tmp_path / "web"


def test_missing_command_is_reported(tmp_path: Path) -> None:
    options = FrameworkBuildOptions(cmd=str(tmp_path / "no-such-compiler"), args=[])
    with pytest.raises(FrameworkBuildError, match="not found"):
        run_framework_build(options, project_dir=tmp_path)


def test_nonzero_exit_is_reported(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_run(cmd: list[str], **kwargs: object) -> None:
        raise subprocess.CalledProcessError(returncode=3, cmd=cmd)

    monkeypatch.setattr(framework.subprocess, "run", fake_run)
    with pytest.raises(FrameworkBuildError, match="exit code 3"):
        run_framework_build(FrameworkBuildOptions(), project_dir=tmp_path)
