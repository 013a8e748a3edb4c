"""Single-line text helpers — indentation, keys and word spans."""

from __future__ import annotations

import re

DEFAULT_TAB_SIZE = 4

# `<indent><dash?><word>:<anything>`
_LEAF_KV_RE = re.compile(r"^[\s-]*?(\w+)\s*?:")
# `<indent><dash?><word>:` with nothing after the colon, which opens a block
_OBJECT_KEY_RE = re.compile(r"^[\s-]*?(\w+)\s*?:\s*?$")
_WORD_OR_COLON_RE = re.compile(r"[\w:]")
_LEADING_WS_RE = re.compile(r"[ \t]*")
_WORD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.")


def is_comment(line: str) -> bool:
    return line.strip().startswith("#")


def is_blank_or_comment(line: str) -> bool:
    trimmed = line.strip()
    return not trimmed or trimmed.startswith("#")


def is_list_item(line: str) -> bool:
    return line.strip().startswith("-")


def indent_width(line: str, tab_size: int = DEFAULT_TAB_SIZE) -> int:
    """Width of the leading run of non-word, non-colon characters, tabs expanded.

    List dashes count as indentation, so ``"  - class: X"`` has width 4.
    """
    end = 0
    while end < len(line) and not _WORD_OR_COLON_RE.match(line[end]):
        end += 1
    return len(line[:end].replace("\t", " " * tab_size))


def dash_column(line: str, tab_size: int = DEFAULT_TAB_SIZE) -> int:
    """Width of the leading whitespace only (the column of a list dash)."""
    prefix = _LEADING_WS_RE.match(line).group()
    return len(prefix.replace("\t", " " * tab_size))


def leaf_key(line: str) -> str | None:
    """Return the key of a ``key: value`` line, or None."""
    if is_comment(line):
        return None
    m = _LEAF_KV_RE.match(line)
    return m.group(1) if m else None


def object_key(line: str) -> str | None:
    """Return the key of a block opener (``key:`` with no value), or None."""
    if is_comment(line):
        return None
    m = _OBJECT_KEY_RE.match(line)
    return m.group(1) if m else None


def split_key_value(line: str) -> tuple[str, str]:
    """Split ``- key: value`` into ``("key", "value")``."""
    line = line.replace("- ", "", 1)
    key, _, value = line.partition(":")
    return key.strip(), value.strip()


def current_word(line: str, col: int) -> tuple[int, int, str]:
    """Expand from ``col`` over ``[A-Za-z0-9_.]`` and return (start, end, word)."""
    start = end = max(0, min(col, len(line)))
    while start > 0 and line[start - 1] in _WORD_CHARS:
        start -= 1
    while end < len(line) and line[end] in _WORD_CHARS:
        end += 1
    return start, end, line[start:end]


def add_suffix(text: str, suffix: str | None) -> str:
    if suffix and not text.endswith(suffix):
        return text + suffix
    return text
