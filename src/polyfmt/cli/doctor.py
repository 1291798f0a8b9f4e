# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Formatter availability diagnostics."""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from ..config import ConfigStore
from ..environment import NodeEnvironment
from ..interfaces import EnvironmentProbe
from ..languages import LANGUAGES
from ..resolver import CommandResolver


@dataclass(slots=True)
class ToolCheck:
    """Availability of one formatter command."""

    command: str
    resolved: str
    available: bool
    languages: list[str]


def locate_executable(resolved: str) -> str | None:
    """Return the concrete executable for a resolver result, or ``None``."""

    path = Path(resolved)
    if path.is_absolute():
        return str(path) if path.is_file() else None
    return shutil.which(resolved)


def collect_tool_checks(store: ConfigStore, resolver: CommandResolver) -> list[ToolCheck]:
    """Group languages by formatter command and probe each command once."""

    checks: dict[str, ToolCheck] = {}
    for info in LANGUAGES:
        entry = store.get_formatter_entry(info.language)
        if entry is None:
            continue
        check = checks.get(entry.command)
        if check is None:
            resolved = resolver.resolve(entry.command)
            located = locate_executable(resolved)
            check = ToolCheck(
                command=entry.command,
                resolved=located or resolved,
                available=located is not None,
                languages=[],
            )
            checks[entry.command] = check
        check.languages.append(info.display_name)
    return list(checks.values())


def run_doctor(
    store: ConfigStore,
    *,
    console: Console | None = None,
    resolver: CommandResolver | None = None,
    environment: EnvironmentProbe | None = None,
) -> int:
    """Print formatter and runtime availability and return an exit status.

    Missing formatters are expected on most machines, so the report never
    fails on their account; only a machine without a single usable formatter
    is reported as unhealthy.

    Args:
        store: Configuration supplying formatter entries and path overrides.
        console: Console receiving the report.
        resolver: Resolver used to locate executables.
        environment: Probe for the Node.js runtime.

    Returns:
        int: ``0`` when at least one formatter is usable, ``1`` otherwise.
    """

    console = console or Console()
    resolver = resolver or CommandResolver(custom_path=store.get_custom_path)
    environment = environment or NodeEnvironment()
    console.print(Rule("[bold cyan]polyfmt Doctor[/bold cyan]"))

    runtime_table = Table(title="Environment", box=box.SIMPLE, expand=True)
    runtime_table.add_column("Check", style="bold")
    runtime_table.add_column("Status", style="bold")
    runtime_table.add_column("Details", overflow="fold")
    runtime_table.add_row("Python", "[green]ok[/]", platform.python_version())
    node_ok = environment.is_runtime_installed()
    runtime_table.add_row("Node.js", "[green]ok[/]" if node_ok else "[yellow]missing[/]", "-")
    root = environment.find_runtime_package_root() if node_ok else None
    runtime_table.add_row(
        "npm global root",
        "[green]ok[/]" if root is not None else "[yellow]missing[/]",
        str(root) if root is not None else "-",
    )
    console.print(runtime_table)

    tool_table = Table(title="Formatters", box=box.SIMPLE, expand=True)
    tool_table.add_column("Command", style="bold")
    tool_table.add_column("Status")
    tool_table.add_column("Path", overflow="fold")
    tool_table.add_column("Languages", overflow="fold")
    checks = collect_tool_checks(store, resolver)
    for check in checks:
        status = "[green]available[/]" if check.available else "[red]missing[/]"
        tool_table.add_row(check.command, status, check.resolved, ", ".join(check.languages))
    console.print(tool_table)

    healthy = any(check.available for check in checks)
    style = "green" if healthy else "red"
    console.print(Panel(f"[{style}]Doctor completed[/]", border_style=style))
    return 0 if healthy else 1


__all__ = ["ToolCheck", "collect_tool_checks", "locate_executable", "run_doctor"]
