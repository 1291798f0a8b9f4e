# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""TOML-backed configuration store supplying formatter entries and settings."""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..languages import Language, language_from_key
from ..models import FormatterEntry
from ..settings import SettingValue, resolve_settings, setting_definitions
from .defaults import default_formatters

CONFIG_ENV: Final[str] = "POLYFMT_CONFIG"
CONFIG_DIR_NAME: Final[str] = "polyfmt"
CONFIG_FILE_NAME: Final[str] = "config.toml"
DEFAULTS_SECTION: Final[str] = "defaults"
FORMATTERS_SECTION: Final[str] = "formatters"
PATHS_SECTION: Final[str] = "paths"

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")

LOGGER = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class FormatterConfig(BaseModel):
    """Fully resolved configuration: defaults merged with user overrides."""

    model_config = ConfigDict(validate_assignment=True)

    last_language: Language = Language.PYTHON
    formatters: dict[Language, FormatterEntry] = Field(default_factory=default_formatters)
    paths: dict[str, Path] = Field(default_factory=dict)


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the location of the user configuration file.

    Args:
        env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        Path: ``$POLYFMT_CONFIG`` when set, otherwise the platform config dir.
    """

    env = os.environ if env is None else env
    if override := env.get(CONFIG_ENV):
        return Path(override).expanduser()
    if os.name == "nt" and (appdata := env.get("APPDATA")):
        return Path(appdata) / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1) or match.group(2)
            return env.get(key, match.group(0))

        return _ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, Mapping):
        return {k: _expand_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v, env) for v in value]
    return value


def parse_config(document: Mapping[str, Any], *, env: Mapping[str, str] | None = None) -> FormatterConfig:
    """Merge a raw TOML document over the built-in defaults.

    Args:
        document: Parsed TOML document.
        env: Environment used to expand ``$VAR`` references in ``[paths]``.

    Returns:
        FormatterConfig: Validated configuration.

    Raises:
        ConfigError: If a section has the wrong shape or an entry is invalid.
    """

    env = os.environ if env is None else env
    config = FormatterConfig()

    defaults = document.get(DEFAULTS_SECTION, {})
    if not isinstance(defaults, Mapping):
        raise ConfigError(f"[{DEFAULTS_SECTION}] must be a table")
    if (raw_last := defaults.get("last_language")) is not None:
        last = language_from_key(str(raw_last))
        if last is None:
            LOGGER.warning("Unknown last_language %r in configuration; keeping %s", raw_last, config.last_language)
        else:
            config.last_language = last

    formatters = document.get(FORMATTERS_SECTION, {})
    if not isinstance(formatters, Mapping):
        raise ConfigError(f"[{FORMATTERS_SECTION}] must be a table")
    merged_entries = dict(config.formatters)
    for key, raw_entry in formatters.items():
        language = language_from_key(key)
        if language is None:
            LOGGER.warning("Ignoring formatter entry for unknown language '%s'", key)
            continue
        if not isinstance(raw_entry, Mapping):
            raise ConfigError(f"[{FORMATTERS_SECTION}.{key}] must be a table")
        base = merged_entries[language].model_dump() if language in merged_entries else {}
        # An overridden command starts from a clean argument template.
        if "command" in raw_entry and "args" not in raw_entry:
            base.pop("args", None)
        try:
            merged_entries[language] = FormatterEntry.model_validate(_deep_merge(base, raw_entry))
        except ValidationError as exc:
            raise ConfigError(f"Invalid formatter entry [{FORMATTERS_SECTION}.{key}]: {exc}") from exc
    config.formatters = merged_entries

    paths = document.get(PATHS_SECTION, {})
    if not isinstance(paths, Mapping):
        raise ConfigError(f"[{PATHS_SECTION}] must be a table")
    resolved_paths: dict[str, Path] = {}
    for tool, raw_path in paths.items():
        if not isinstance(raw_path, str):
            raise ConfigError(f"[{PATHS_SECTION}].{tool} must be a string path")
        resolved_paths[tool.lower()] = Path(_expand_env(raw_path, env)).expanduser()
    config.paths = resolved_paths
    return config


class ConfigStore:
    """In-memory configuration store implementing :class:`ConfigProvider`.

    The store is an explicit value handed to the formatter service; nothing in
    polyfmt reads configuration through a process-wide singleton.
    """

    def __init__(self, config: FormatterConfig | None = None) -> None:
        self._config = config if config is not None else FormatterConfig()

    @classmethod
    def load(cls, path: Path | None = None, *, env: Mapping[str, str] | None = None) -> ConfigStore:
        """Return a store populated from the TOML file at ``path``.

        A missing file yields the built-in defaults.

        Args:
            path: Configuration file; defaults to :func:`default_config_path`.
            env: Environment mapping used for path resolution and expansion.

        Returns:
            ConfigStore: Store backed by the merged configuration.

        Raises:
            ConfigError: If the file cannot be parsed or validated.
        """

        target = path if path is not None else default_config_path(env)
        if not target.is_file():
            LOGGER.debug("No configuration at %s; using built-in defaults", target)
            return cls()
        try:
            with target.open("rb") as handle:
                document = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Failed to parse {target}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Failed to read {target}: {exc}") from exc
        LOGGER.debug("Loaded configuration from %s", target)
        return cls(parse_config(document, env=env))

    @property
    def config(self) -> FormatterConfig:
        """Return the underlying configuration model."""

        return self._config

    @property
    def last_language(self) -> Language:
        """Return the language most recently selected by the user."""

        return self._config.last_language

    def save_last_language(self, language: Language) -> None:
        """Remember ``language`` as the most recently selected language."""

        self._config.last_language = language

    def get_formatter_entry(self, language: Language) -> FormatterEntry | None:
        """Return the formatter entry configured for ``language``.

        Args:
            language: Language whose entry is requested.

        Returns:
            FormatterEntry | None: The entry, or ``None`` when unconfigured.
        """

        return self._config.formatters.get(language)

    def get_settings_with_defaults(self, language: Language) -> dict[str, SettingValue]:
        """Return defaults for ``language`` overlaid with the saved values.

        Args:
            language: Language whose settings are requested.

        Returns:
            dict[str, SettingValue]: A new mapping; callers may mutate it freely.
        """

        entry = self.get_formatter_entry(language)
        saved = entry.settings if entry is not None else None
        return resolve_settings(setting_definitions(language), saved)

    def get_custom_path(self, tool_name: str) -> Path | None:
        """Return the configured executable override for ``tool_name``."""

        return self._config.paths.get(tool_name.lower())

    def save_setting(self, language: Language, key: str, value: SettingValue) -> None:
        """Store a single setting value for ``language``."""

        entry = self._entry_or_default(language)
        if entry is None:
            return
        settings = dict(entry.settings)
        settings[key] = value
        self._replace(language, entry.model_copy(update={"settings": settings}))

    def save_all_settings(self, language: Language, settings: Mapping[str, SettingValue]) -> None:
        """Replace every saved setting for ``language`` with ``settings``."""

        entry = self._entry_or_default(language)
        if entry is None:
            return
        self._replace(language, entry.model_copy(update={"settings": dict(settings)}))

    def reset_settings(self, language: Language) -> None:
        """Drop all saved settings for ``language`` so defaults apply again."""

        entry = self.get_formatter_entry(language)
        if entry is None:
            return
        self._replace(language, entry.model_copy(update={"settings": {}}))

    def reset_formatter_entry(self, language: Language) -> None:
        """Restore the built-in entry for ``language``, discarding user edits."""

        default = default_formatters().get(language)
        if default is None:
            return
        self._replace(language, default)

    def _entry_or_default(self, language: Language) -> FormatterEntry | None:
        entry = self.get_formatter_entry(language)
        if entry is not None:
            return entry
        return default_formatters().get(language)

    def _replace(self, language: Language, entry: FormatterEntry) -> None:
        formatters = dict(self._config.formatters)
        formatters[language] = entry
        self._config.formatters = formatters


__all__ = [
    "CONFIG_ENV",
    "ConfigError",
    "ConfigStore",
    "FormatterConfig",
    "default_config_path",
    "parse_config",
]
