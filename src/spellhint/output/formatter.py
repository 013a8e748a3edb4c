"""Dual-mode output — Rich for humans, JSON for tools."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from spellhint.services.ranker import Candidate, trim_tags

# Human output goes to stdout; in JSON mode, human messages go to stderr
_console = Console()
_err_console = Console(stderr=True)


def render_candidate(candidate: Candidate) -> tuple[Text, Text]:
    """Render a candidate as a (title, description) row.

    Defaults are bold and inherited entries dimmed, mirroring the drop-down styling.
    """
    style = ""
    if candidate.is_default:
        style = "bold green"
    elif candidate.inherited:
        style = "dim italic"
    title = Text(candidate.text, style=style)
    lines = [trim_tags(line) or "" for line in candidate.description or []]
    return title, Text("\n".join(lines))


class OutputFormatter:
    """Routes output to Rich (human) or JSON (tools) depending on mode."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode

    # ── JSON output ──────────────────────────────────────────────

    def json(self, data: Any, status: str = "success") -> None:
        """Print structured JSON to stdout."""
        envelope = {"status": status, "data": data}
        print(json.dumps(envelope, indent=2, default=str))

    def json_error(self, message: str, code: int = 1) -> None:
        """Print a JSON error envelope to stdout."""
        envelope = {"status": "error", "error": {"message": message, "code": code}}
        print(json.dumps(envelope, indent=2))

    # ── Human output ─────────────────────────────────────────────

    def print(self, message: Any = "", **kwargs: Any) -> None:
        """Print a message, routing to stderr in JSON mode."""
        console = _err_console if self.json_mode else _console
        console.print(message, **kwargs)

    def success(self, message: str) -> None:
        """Print a success message."""
        if self.json_mode:
            return
        _console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Print an error message (a JSON envelope in JSON mode)."""
        if self.json_mode:
            self.json_error(message)
            return
        _err_console.print(f"[red]✗[/red] {message}")

    def info(self, message: str) -> None:
        """Print an info message."""
        if self.json_mode:
            return
        _console.print(f"[dim]ℹ[/dim] {message}")

    def candidates(self, title: str, candidates: list[Candidate]) -> None:
        """Print a ranked candidate list as a two-column table."""
        if self.json_mode:
            self.json([c.model_dump() for c in candidates])
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Completion", no_wrap=True)
        table.add_column("Description")
        for candidate in candidates:
            table.add_row(*render_candidate(candidate))
        _console.print(table)
