"""Buffer protocol — the contract a host editor must follow to request completions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextBuffer(Protocol):
    """Read-only view of the document being edited."""

    def line_count(self) -> int:
        """Return the number of lines in the document."""
        ...

    def get_line(self, index: int) -> str:
        """Return the text of line ``index`` (0-based), without the line terminator."""
        ...
