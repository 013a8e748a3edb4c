"""Root CLI group — entry point for all spellhint commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

from spellhint import __version__
from spellhint.core.exceptions import ConfigError, SchemaError
from spellhint.output.formatter import OutputFormatter


class HintContext:
    """Shared context passed through Click commands."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode
        self.formatter = OutputFormatter(json_mode=json_mode)
        self._config: dict[str, Any] | None = None

    def get_config(self) -> dict[str, Any]:
        """Lazy-load and return the configuration."""
        if self._config is None:
            from spellhint.core.config import load_config

            self._config = load_config()
        return self._config

    def get_engine(
        self,
        schema_path: Path | None = None,
        kind: str | None = None,
        tab_size: int | None = None,
    ):
        """Build an engine from command options, falling back to the config file."""
        from spellhint.core.config import get_schema_path
        from spellhint.models.schema import get_schema
        from spellhint.services.engine import HintEngine

        config = self.get_config()
        editor = config.get("editor", {})
        if schema_path is None:
            schema_path = get_schema_path(config)
        if schema_path is None:
            raise SchemaError("No metadata schema configured. Pass --schema or run 'spellhint config set schema.path PATH'.")
        schema = get_schema(str(Path(schema_path).expanduser().resolve()))
        return HintEngine(
            schema,
            kind=kind or editor.get("document_kind", "spell"),
            tab_size=tab_size or editor.get("tab_size", 4),
        )


pass_context = click.make_pass_decorator(HintContext, ensure=True)


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.option("--json", "json_mode", is_flag=True, help="Output JSON for tool consumption.")
@click.option("--verbose", "-v", is_flag=True, help="Log hierarchy and dispatch details.")
@click.version_option(__version__, prog_name="spellhint")
@click.pass_context
def cli(ctx: click.Context, json_mode: bool, verbose: bool) -> None:
    """spellhint — schema-driven autocompletion for spell configuration files."""
    ctx.ensure_object(HintContext)
    ctx.obj = HintContext(json_mode=json_mode)
    if verbose:
        configure_logging("DEBUG")
    else:
        try:
            level = ctx.obj.get_config().get("logging", {}).get("level", "WARNING")
        except ConfigError:
            level = "WARNING"
        configure_logging(level)


# ── Register subcommands ──────────────────────────────────────────

from spellhint.cli.complete import complete, hierarchy
cli.add_command(complete)
cli.add_command(hierarchy)

from spellhint.cli.edit import edit
cli.add_command(edit)

from spellhint.cli.config_cmd import config
cli.add_command(config)
