"""Hierarchy resolution — rebuild the key path to the cursor from indentation alone."""

from __future__ import annotations

from spellhint.adapters.protocol import TextBuffer
from spellhint.services.text import DEFAULT_TAB_SIZE, indent_width, is_blank_or_comment, leaf_key, object_key


def effective_indent(line: str, col: int, tab_size: int = DEFAULT_TAB_SIZE) -> int:
    """Indentation of ``line`` as seen from a cursor at ``col``."""
    return indent_width(line[: max(col, 0)], tab_size)


def find_enclosing(
    buffer: TextBuffer, line_no: int, indent: int, tab_size: int = DEFAULT_TAB_SIZE
) -> tuple[int, str, int] | None:
    """Find the nearest block opener above ``line_no`` that is less indented than ``indent``.

    Returns (line index, key, indentation) or None when the top is reached.
    """
    index = line_no - 1
    while index >= 0:
        text = buffer.get_line(index)
        if not is_blank_or_comment(text):
            width = indent_width(text, tab_size)
            if width < indent:
                key = object_key(text)
                if key is not None:
                    return index, key, width
        index -= 1
    return None


def resolve_hierarchy(
    buffer: TextBuffer, line_no: int, col: int, tab_size: int = DEFAULT_TAB_SIZE
) -> list[str]:
    """Return the enclosing key path of the cursor, outermost first.

    The innermost element is the key on the cursor line, or ``""`` when the
    line has no ``key:`` yet. A cursor at indentation 0 yields a single
    element; an indented cursor always has at least one enclosing element,
    ``""`` standing in for the document root when no opener is found.
    """
    if line_no < 0 or line_no >= buffer.line_count():
        return []
    line = buffer.get_line(line_no)
    indent = effective_indent(line, col, tab_size)
    if indent == 0:
        if col <= 0:
            return [""]
        return [leaf_key(line) or ""]

    path = [leaf_key(line) or ""]
    index = line_no
    while indent > 0:
        found = find_enclosing(buffer, index, indent, tab_size)
        if found is None:
            path.append("")
            break
        index, key, indent = found
        path.append(key)
    path.reverse()
    return path
