"""One-shot completion commands — query a document file at a cursor position."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from spellhint.adapters.buffers import LineBuffer
from spellhint.cli.main import HintContext, pass_context
from spellhint.core.config import DOCUMENT_KINDS
from spellhint.core.exceptions import DocumentError, SpellHintError


def read_document(path: Path) -> LineBuffer:
    """Read a document file into a LineBuffer."""
    try:
        return LineBuffer.from_text(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"Failed to read {path}: {e}") from e


def _cursor_options(f):
    f = click.option("--col", type=click.IntRange(min=0), required=True, help="Cursor column (0-based).")(f)
    f = click.option("--line", type=click.IntRange(min=0), required=True, help="Cursor line (0-based).")(f)
    f = click.option("--tab-size", type=click.IntRange(min=1), default=None, help="Tab width in spaces.")(f)
    return f


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_cursor_options
@click.option(
    "--schema", "schema_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Metadata JSON file (defaults to schema.path from the config).",
)
@click.option("--kind", type=click.Choice(DOCUMENT_KINDS), default=None, help="Document kind.")
@pass_context
def complete(
    ctx: HintContext,
    file: Path,
    line: int,
    col: int,
    tab_size: int | None,
    schema_path: Path | None,
    kind: str | None,
) -> None:
    """Show ranked completions at LINE:COL of FILE.

    Examples:
        spellhint complete fireball.yml --line 3 --col 6 --schema meta.json
        spellhint --json complete spells.yml --line 10 --col 4 --kind spells
    """
    try:
        engine = ctx.get_engine(schema_path, kind, tab_size)
        buffer = read_document(file)
    except SpellHintError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    result = engine.request_completions(buffer, line, col)
    if result is None:
        if ctx.json_mode:
            ctx.formatter.json(None)
        else:
            ctx.formatter.info("No suggestions at this position.")
        return

    if ctx.json_mode:
        ctx.formatter.json(result.model_dump())
        return
    title = " › ".join(key or "∅" for key in result.hierarchy)
    ctx.formatter.candidates(title, result.candidates)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_cursor_options
@pass_context
def hierarchy(ctx: HintContext, file: Path, line: int, col: int, tab_size: int | None) -> None:
    """Print the key path enclosing LINE:COL of FILE."""
    from spellhint.services.hierarchy import resolve_hierarchy

    try:
        tab_size = tab_size or ctx.get_config().get("editor", {}).get("tab_size", 4)
        buffer = read_document(file)
    except SpellHintError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    path = resolve_hierarchy(buffer, line, col, tab_size)
    if ctx.json_mode:
        ctx.formatter.json(path)
    else:
        ctx.formatter.print(" › ".join(key or "∅" for key in path) or "(outside document)")
