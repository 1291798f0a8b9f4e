# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Route source code to external formatter tools behind one async contract."""

from __future__ import annotations

from importlib import metadata

from .config import ConfigError, ConfigStore
from .languages import Language
from .models import FormatErrorCategory, FormatResult, FormatterEntry
from .process import ProcessRunner
from .service import FormatterService, format_code
from .session import FormatSession

__all__ = [
    "ConfigError",
    "ConfigStore",
    "FormatErrorCategory",
    "FormatResult",
    "FormatSession",
    "FormatterEntry",
    "FormatterService",
    "Language",
    "ProcessRunner",
    "__version__",
    "format_code",
]

try:
    __version__ = metadata.version("polyfmt")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
