"""Concrete TextBuffer implementations for plain text and prompt_toolkit documents."""

from __future__ import annotations

from prompt_toolkit.document import Document


class LineBuffer:
    """A TextBuffer over an in-memory list of lines."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines

    @classmethod
    def from_text(cls, text: str) -> "LineBuffer":
        return cls(text.split("\n") if text else [""])

    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        if 0 <= index < len(self._lines):
            return self._lines[index].rstrip("\r")
        return ""


class DocumentBuffer:
    """A TextBuffer backed by a prompt_toolkit Document."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def line_count(self) -> int:
        return self.document.line_count

    def get_line(self, index: int) -> str:
        lines = self.document.lines
        if 0 <= index < len(lines):
            return lines[index]
        return ""

    @property
    def cursor(self) -> tuple[int, int]:
        """Return the cursor as (line, column)."""
        return self.document.cursor_position_row, self.document.cursor_position_col
