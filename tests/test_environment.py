# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for Node.js runtime discovery."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from conftest import posix_only

from polyfmt.environment import DEFAULT_CANDIDATES, NodeEnvironment, install_hint, locate_runtime_binary
from polyfmt.interfaces import EnvironmentProbe
from polyfmt.process_utils import SubprocessExecutionError


def _make_root(base: Path, *packages: str) -> Path:
    for package in packages or ("placeholder",):
        (base / "node_modules" / package).mkdir(parents=True)
    return base


def test_node_environment_satisfies_protocol() -> None:
    assert isinstance(NodeEnvironment(), EnvironmentProbe)


def test_first_candidate_with_node_modules_wins(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    first = _make_root(tmp_path / "first")
    second = _make_root(tmp_path / "second")
    environment = NodeEnvironment(candidates=[lambda env: [empty], lambda env: [first, second]], env={})

    assert environment.find_runtime_package_root() == first


def test_no_candidate_returns_none(tmp_path: Path) -> None:
    environment = NodeEnvironment(candidates=[lambda env: [tmp_path / "nothing"]], env={})

    assert environment.find_runtime_package_root() is None


def test_prefix_candidate_reads_environment(tmp_path: Path) -> None:
    prefix_generator = DEFAULT_CANDIDATES[1]
    candidates = list(prefix_generator({"NPM_CONFIG_PREFIX": str(tmp_path)}))

    assert candidates and candidates[0] in {tmp_path, tmp_path / "lib"}


def test_npm_candidate_uses_parent_of_npm_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _make_root(tmp_path / "lib")

    def fake_run(args, **kwargs):
        assert list(args) == ["npm", "root", "-g"]
        return subprocess.CompletedProcess(args, 0, stdout=f"{root / 'node_modules'}\n", stderr="")

    monkeypatch.setattr("polyfmt.environment.run_command", fake_run)
    environment = NodeEnvironment(env={})

    assert environment.find_runtime_package_root() == root


def test_npm_candidate_tolerates_missing_npm(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(args, **kwargs):
        raise FileNotFoundError("npm")

    monkeypatch.setattr("polyfmt.environment.run_command", missing)
    fallback = _make_root(tmp_path / "home" / ".npm-global" / "lib")
    environment = NodeEnvironment(env={"HOME": str(tmp_path / "home")})

    assert environment.find_runtime_package_root() == fallback


def test_package_exists(tmp_path: Path) -> None:
    root = _make_root(tmp_path, "prettier", "@scope/plugin")
    environment = NodeEnvironment()

    assert environment.package_exists(root, "prettier")
    assert environment.package_exists(root, "@scope/plugin")
    assert not environment.package_exists(root, "sql-formatter")


def test_runtime_detection_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(args, **kwargs):
        raise SubprocessExecutionError(args, 1, "", "boom")

    monkeypatch.setattr("polyfmt.environment.run_command", failing)

    assert NodeEnvironment().is_runtime_installed() is False


def test_runtime_detection_missing_binary() -> None:
    assert NodeEnvironment(node_command="definitely-not-node-binary").is_runtime_installed() is False


@posix_only
def test_locate_runtime_binary_in_sibling_bin(tmp_path: Path) -> None:
    root = _make_root(tmp_path / "lib")
    launcher = tmp_path / "bin" / "prettier"
    launcher.parent.mkdir()
    launcher.write_text("", encoding="utf-8")

    assert locate_runtime_binary(root, "prettier") == launcher
    assert locate_runtime_binary(root, "sql-formatter") is None


def test_install_hint() -> None:
    assert install_hint(["prettier", "prettier-plugin-java"]) == "npm install -g prettier prettier-plugin-java"
