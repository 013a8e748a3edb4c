"""Interactive editor — prompt_toolkit multiline session with live spell completion."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from spellhint.cli.completer import SpellCompleter
from spellhint.cli.main import HintContext, pass_context
from spellhint.core.config import DOCUMENT_KINDS, get_history_path
from spellhint.core.exceptions import DocumentError, SpellHintError


def _read_text(path: Path) -> str:
    """Return the file contents, or an empty document for a new file."""
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Failed to read {path}: {e}") from e


@click.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--schema", "schema_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Metadata JSON file (defaults to schema.path from the config).",
)
@click.option("--kind", type=click.Choice(DOCUMENT_KINDS), default=None, help="Document kind.")
@click.option("--tab-size", type=click.IntRange(min=1), default=None, help="Tab width in spaces.")
@pass_context
def edit(
    ctx: HintContext,
    file: Path,
    schema_path: Path | None,
    kind: str | None,
    tab_size: int | None,
) -> None:
    """Edit FILE in the terminal with completions as you type.

    Press Esc then Enter to save, Ctrl-D or Ctrl-C to quit without saving.
    """
    try:
        engine = ctx.get_engine(schema_path, kind, tab_size)
        text = _read_text(file)
    except SpellHintError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    session: PromptSession[str] = PromptSession(
        multiline=True,
        completer=SpellCompleter(engine),
        complete_while_typing=True,
        history=FileHistory(str(get_history_path())),
    )
    try:
        edited = session.prompt("", default=text)
    except (EOFError, KeyboardInterrupt):
        ctx.formatter.info("Closed without saving.")
        return

    try:
        file.write_text(edited, encoding="utf-8")
    except OSError as e:
        ctx.formatter.error(f"Failed to write {file}: {e}")
        sys.exit(1)
    ctx.formatter.success(f"Saved {file}")
