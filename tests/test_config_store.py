# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the TOML configuration store."""

from __future__ import annotations

import os
import textwrap
from pathlib import Path

import pytest

from polyfmt.config import CONFIG_ENV, ConfigError, ConfigStore, default_config_path, default_formatters, parse_config
from polyfmt.config.defaults import shell_wrapper
from polyfmt.interfaces import ConfigProvider
from polyfmt.languages import Language
from polyfmt.models import DialectKind, Transport


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_every_language_has_a_default_entry() -> None:
    assert set(default_formatters()) == set(Language)


def test_store_satisfies_provider_protocol() -> None:
    assert isinstance(ConfigStore(), ConfigProvider)


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    store = ConfigStore.load(tmp_path / "absent.toml")

    entry = store.get_formatter_entry(Language.PYTHON)
    assert entry is not None
    assert entry.command == "ruff"
    assert entry.args == ("format", "-")


def test_default_config_path_honours_env(tmp_path: Path) -> None:
    target = tmp_path / "custom.toml"

    assert default_config_path({CONFIG_ENV: str(target)}) == target


@pytest.mark.skipif(os.name == "nt", reason="APPDATA takes precedence on Windows")
def test_default_config_path_uses_xdg(tmp_path: Path) -> None:
    path = default_config_path({"XDG_CONFIG_HOME": str(tmp_path)})

    assert path == tmp_path / "polyfmt" / "config.toml"


def test_settings_are_merged_over_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        [formatters.python.settings]
        line-length = 100
        quote-style = "single"
        """,
    )

    store = ConfigStore.load(path)
    settings = store.get_settings_with_defaults(Language.PYTHON)

    assert settings["line-length"] == 100
    assert settings["quote-style"] == "single"
    assert settings["indent-style"] == "space"
    entry = store.get_formatter_entry(Language.PYTHON)
    assert entry is not None and entry.dialect.kind is DialectKind.DIRECT_FLAG


def test_overriding_command_resets_args(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        [formatters.lua]
        command = "lua-format"
        """,
    )

    entry = ConfigStore.load(path).get_formatter_entry(Language.LUA)

    assert entry is not None
    assert entry.command == "lua-format"
    assert entry.args == ()


def test_temp_file_override_is_validated(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        [formatters.lua]
        command = "fmt"
        transport = "temp-file"
        args = ["--write"]
        """,
    )

    with pytest.raises(ConfigError, match="formatters.lua"):
        ConfigStore.load(path)


def test_unknown_language_section_is_ignored(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write(
        tmp_path,
        """
        [formatters.cobol]
        command = "cobfmt"
        """,
    )

    store = ConfigStore.load(path)

    assert store.get_formatter_entry(Language.PYTHON) is not None
    assert "cobol" in caplog.text


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "[formatters\n")

    with pytest.raises(ConfigError, match="Failed to parse"):
        ConfigStore.load(path)


def test_paths_are_expanded_and_case_insensitive(tmp_path: Path) -> None:
    config = parse_config({"paths": {"Ruff": "$TOOLS/ruff"}}, env={"TOOLS": str(tmp_path)})
    store = ConfigStore(config)

    assert store.get_custom_path("ruff") == tmp_path / "ruff"
    assert store.get_custom_path("RUFF") == tmp_path / "ruff"
    assert store.get_custom_path("dprint") is None


def test_last_language_round_trip() -> None:
    store = ConfigStore(parse_config({"defaults": {"last_language": "Go"}}, env={}))

    assert store.last_language is Language.GO
    store.save_last_language(Language.RUBY)
    assert store.last_language is Language.RUBY


def test_save_setting_and_reset() -> None:
    store = ConfigStore()

    store.save_setting(Language.SHELL, "indent", 4)
    assert store.get_settings_with_defaults(Language.SHELL)["indent"] == 4

    store.save_all_settings(Language.SHELL, {"caseIndent": True})
    settings = store.get_settings_with_defaults(Language.SHELL)
    assert settings["indent"] == 2
    assert settings["caseIndent"] is True

    store.reset_settings(Language.SHELL)
    assert store.get_settings_with_defaults(Language.SHELL)["caseIndent"] is False


def test_reset_formatter_entry_restores_default(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        [formatters.ruby]
        command = "rubocop"
        """,
    )
    store = ConfigStore.load(path)

    store.reset_formatter_entry(Language.RUBY)

    entry = store.get_formatter_entry(Language.RUBY)
    assert entry is not None and entry.command == "rufo"


def test_shell_wrapper_variants() -> None:
    assert shell_wrapper("prettier --parser java", windows=False) == ("sh", ("-c", "prettier --parser java"))
    command, args = shell_wrapper("prettier --parser java", windows=True)
    assert command == "powershell"
    assert args[-1] == "& prettier --parser java"


def test_temp_file_defaults_use_placeholder() -> None:
    entry = default_formatters()[Language.CSHARP]

    assert entry.transport is Transport.TEMP_FILE
    assert "{file}" in entry.args
    assert entry.temp_file_extension == ".cs"


@pytest.mark.parametrize(
    ("language", "trusted"),
    [(Language.DELPHI, False), (Language.CSHARP, False), (Language.PHP, True), (Language.PYTHON, True)],
)
def test_output_trust_is_scoped_per_tool(language: Language, trusted: bool) -> None:
    assert default_formatters()[language].trust_output_on_failure is trusted
