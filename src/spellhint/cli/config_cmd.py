"""Config commands — inspect and update the spellhint TOML config."""

from __future__ import annotations

import sys
from typing import Any

import click
from rich.table import Table

from spellhint.cli.main import HintContext, pass_context
from spellhint.core.exceptions import ConfigError


def _coerce(value: str) -> Any:
    """Turn a command-line string into the TOML scalar it most likely means."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        return value


@click.group()
def config() -> None:
    """View and change configuration."""


@config.command("show")
@pass_context
def config_show(ctx: HintContext) -> None:
    """Show the active configuration."""
    from spellhint.core.config import get_config_path

    try:
        data = ctx.get_config()
    except ConfigError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    if ctx.json_mode:
        ctx.formatter.json(data)
        return

    table = Table(title=str(get_config_path()), show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Value")
    for section, values in data.items():
        if isinstance(values, dict):
            for key, value in values.items():
                table.add_row(f"{section}.{key}", repr(value))
        else:
            table.add_row(section, repr(values))
    ctx.formatter.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
@pass_context
def config_set(ctx: HintContext, key: str, value: str) -> None:
    """Set a config value by dotted KEY, e.g. editor.tab_size 2."""
    from spellhint.core.config import update_config

    section, _, name = key.partition(".")
    if not section or not name:
        ctx.formatter.error(f"Key must look like 'section.name', got {key!r}")
        sys.exit(1)

    try:
        updated = update_config(**{section: {name: _coerce(value)}})
    except ConfigError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    if ctx.json_mode:
        ctx.formatter.json(updated)
    else:
        ctx.formatter.success(f"{key} = {updated[section][name]!r}")
