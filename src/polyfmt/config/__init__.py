# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration loading and the built-in formatter table."""

from __future__ import annotations

from .defaults import default_formatters, shell_wrapper
from .store import (
    CONFIG_ENV,
    ConfigError,
    ConfigStore,
    FormatterConfig,
    default_config_path,
    parse_config,
)

__all__ = [
    "CONFIG_ENV",
    "ConfigError",
    "ConfigStore",
    "FormatterConfig",
    "default_config_path",
    "default_formatters",
    "parse_config",
    "shell_wrapper",
]
