# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the formatter service on the command line."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ..config import ConfigError, ConfigStore
from ..dialects import render_value
from ..languages import LANGUAGES, Language, language_from_key
from ..logging import configure_logging, fail, warn
from ..service import FormatterService
from ..settings import SettingDefinition, SettingType, setting_definitions
from .doctor import run_doctor

USAGE_ERROR_EXIT_CODE = 2

app = typer.Typer(
    help="Format source code through external formatter tools.",
    no_args_is_help=True,
    add_completion=False,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Configuration file; defaults to the user config directory.", dir_okay=False),
]


def _load_store(config: Path | None) -> ConfigStore:
    try:
        return ConfigStore.load(config)
    except ConfigError as exc:
        fail(str(exc), use_emoji=False)
        raise typer.Exit(code=USAGE_ERROR_EXIT_CODE) from exc


def _parse_language(key: str) -> Language:
    language = language_from_key(key)
    if language is None:
        fail(f"Unknown language '{key}'. Run 'polyfmt languages' for the supported keys.", use_emoji=False)
        raise typer.Exit(code=USAGE_ERROR_EXIT_CODE)
    return language


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        fail(f"Cannot read {path}: {exc}", use_emoji=False)
        raise typer.Exit(code=USAGE_ERROR_EXIT_CODE) from exc


@app.command("format")
def format_command(
    language: Annotated[str, typer.Argument(help="Language key such as 'python' or 'shell'.")],
    path: Annotated[
        Path | None,
        typer.Argument(help="File to format; standard input is read when omitted.", exists=True, dir_okay=False),
    ] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", min=0.1, help="Deadline in seconds.")] = None,
    config: ConfigOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log formatter invocations.")] = False,
) -> None:
    """Format PATH (or standard input) and print the result to standard output."""

    configure_logging(verbose=verbose)
    store = _load_store(config)
    target = _parse_language(language)
    code = _read_source(path) if path is not None else sys.stdin.read()
    result = FormatterService(store, timeout=timeout).format_sync(code, target)
    if not result.success:
        fail(result.output, use_emoji=False)
        raise typer.Exit(code=1)
    if result.warnings:
        warn(result.warnings, use_emoji=False)
    typer.echo(result.output, nl=False)


@app.command("languages")
def languages_command(config: ConfigOption = None) -> None:
    """List supported languages with their formatter and transport."""

    store = _load_store(config)
    table = Table(title="Languages", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="bold")
    table.add_column("Language")
    table.add_column("Extension")
    table.add_column("Formatter")
    table.add_column("Transport")
    for info in LANGUAGES:
        entry = store.get_formatter_entry(info.language)
        table.add_row(
            info.config_key,
            info.display_name,
            info.file_extension,
            entry.command if entry is not None else "-",
            entry.transport.value if entry is not None else "-",
        )
    Console().print(table)


def _constraint(definition: SettingDefinition) -> str:
    if definition.type is SettingType.CHOICE:
        return " | ".join(definition.choices)
    if definition.type is SettingType.INTEGER:
        return f"{definition.minimum}..{definition.maximum}"
    return "true | false"


@app.command("settings")
def settings_command(
    language: Annotated[str, typer.Argument(help="Language key such as 'python'.")],
    config: ConfigOption = None,
) -> None:
    """Show the setting definitions and effective values for LANGUAGE."""

    store = _load_store(config)
    target = _parse_language(language)
    definitions = setting_definitions(target)
    console = Console()
    if not definitions:
        console.print(f"{target.display_name} has no configurable settings.")
        return
    effective = store.get_settings_with_defaults(target)
    table = Table(title=f"{target.display_name} settings", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="bold")
    table.add_column("Name")
    table.add_column("Default")
    table.add_column("Value")
    table.add_column("Allowed", overflow="fold")
    table.add_column("Description", overflow="fold")
    for definition in definitions:
        table.add_row(
            definition.key,
            definition.display_name,
            render_value(definition.default),
            render_value(effective[definition.key]),
            _constraint(definition),
            definition.description,
        )
    console.print(table)


@app.command("doctor")
def doctor_command(config: ConfigOption = None) -> None:
    """Report which formatters and runtimes are available."""

    store = _load_store(config)
    raise typer.Exit(code=run_doctor(store))


__all__ = ["app"]
