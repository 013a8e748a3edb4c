"""Context scanning around the cursor — siblings, classes and list structure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from spellhint.adapters.protocol import TextBuffer
from spellhint.models.schema import ACTION_SUFFIX, MetaSchema
from spellhint.services.hierarchy import effective_indent, find_enclosing
from spellhint.services.text import (
    DEFAULT_TAB_SIZE,
    add_suffix,
    dash_column,
    indent_width,
    is_blank_or_comment,
    is_list_item,
    object_key,
    split_key_value,
)


@dataclass(frozen=True)
class ScanContext:
    """A cursor position inside a buffer."""

    buffer: TextBuffer
    line_no: int
    col: int
    tab_size: int = DEFAULT_TAB_SIZE

    @property
    def line(self) -> str:
        return self.buffer.get_line(self.line_no)

    @property
    def indent(self) -> int:
        return effective_indent(self.line, self.col, self.tab_size)

    def at_line(self, line_no: int) -> "ScanContext":
        """A context positioned at the end of another line."""
        return ScanContext(self.buffer, line_no, len(self.buffer.get_line(line_no)), self.tab_size)


class ElementType(NamedTuple):
    type_key: str | None
    options: dict[str, str | None]
    is_list: bool


def collect_siblings(ctx: ScanContext, indent: int | None = None) -> dict[str, str]:
    """Collect ``key: value`` pairs at the cursor's indentation within the current block.

    Scanning stops at a shallower line or at a list item at or left of the
    reference indentation, so separate list elements never share siblings.
    """
    if indent is None:
        indent = ctx.indent
    buffer, tab_size = ctx.buffer, ctx.tab_size
    siblings: dict[str, str] = {}

    if not is_list_item(ctx.line):
        index = ctx.line_no - 1
        while index >= 0:
            text = buffer.get_line(index)
            index -= 1
            if is_blank_or_comment(text):
                continue
            width = indent_width(text, tab_size)
            if width < indent:
                break
            if width == indent and text.find(":") > 0:
                key, value = split_key_value(text)
                siblings.setdefault(key, value)
            if width <= indent and is_list_item(text):
                break

    index = ctx.line_no + 1
    while index < buffer.line_count():
        text = buffer.get_line(index)
        index += 1
        if is_blank_or_comment(text):
            continue
        width = indent_width(text, tab_size)
        if width < indent or (width <= indent and is_list_item(text)):
            break
        if width == indent and text.find(":") > 0:
            key, value = split_key_value(text)
            siblings.setdefault(key, value)
    return siblings


def current_class(ctx: ScanContext, suffix: str | None = None, indent: int | None = None) -> str | None:
    """Return the ``class`` sibling of the cursor's block, optionally suffixed."""
    class_name = collect_siblings(ctx, indent).get("class")
    if not class_name:
        return None
    return add_suffix(class_name, suffix)


def find_declared_action_classes(
    buffer: TextBuffer,
    tab_size: int = DEFAULT_TAB_SIZE,
    start: int = 0,
    end: int | None = None,
    indent: int | None = 0,
) -> list[str]:
    """List the action classes declared under the ``actions:`` block, as ``...Action`` names."""
    if end is None:
        end = buffer.line_count()
    opener = None
    block_indent = 0
    for index in range(start, end):
        text = buffer.get_line(index)
        if text.strip() != "actions:":
            continue
        width = indent_width(text, tab_size)
        if indent is None or width == indent:
            opener, block_indent = index, width
            break
    if opener is None:
        return []

    classes: list[str] = []
    for index in range(opener + 1, end):
        text = buffer.get_line(index)
        if is_blank_or_comment(text):
            continue
        if indent_width(text, tab_size) <= block_indent:
            break
        stripped = text.replace("-", "", 1).strip()
        if stripped.startswith("class:"):
            name = stripped[len("class:"):].strip()
            if name:
                name = add_suffix(name, ACTION_SUFFIX)
                if name not in classes:
                    classes.append(name)
    return classes


def record_bounds(buffer: TextBuffer, line_no: int, tab_size: int = DEFAULT_TAB_SIZE) -> tuple[int, int]:
    """Return the [start, end) line range of the top-level record containing ``line_no``."""
    start = 0
    for index in range(min(line_no, buffer.line_count() - 1), -1, -1):
        text = buffer.get_line(index)
        if not is_blank_or_comment(text) and indent_width(text, tab_size) == 0:
            start = index
            break
    end = buffer.line_count()
    for index in range(start + 1, buffer.line_count()):
        text = buffer.get_line(index)
        if not is_blank_or_comment(text) and indent_width(text, tab_size) == 0:
            end = index
            break
    return start, end


def previous_sibling(ctx: ScanContext) -> str | None:
    """Trimmed text of the nearest earlier line starting at the cursor's column."""
    indent = ctx.indent
    for index in range(ctx.line_no - 1, -1, -1):
        text = ctx.buffer.get_line(index)
        if is_blank_or_comment(text):
            continue
        column = dash_column(text, ctx.tab_size)
        if column < indent:
            return None
        if column == indent:
            return text.strip()
    return None


def is_first_in_block(ctx: ScanContext) -> bool:
    """True when the nearest earlier line is the (shallower) block opener."""
    for index in range(ctx.line_no - 1, -1, -1):
        text = ctx.buffer.get_line(index)
        if is_blank_or_comment(text):
            continue
        return indent_width(text, ctx.tab_size) < ctx.indent
    return False


def enclosing_list_item(ctx: ScanContext) -> int | None:
    """Index of the list item whose body the cursor is in, if any."""
    indent = ctx.indent
    for index in range(ctx.line_no - 1, -1, -1):
        text = ctx.buffer.get_line(index)
        if is_blank_or_comment(text):
            continue
        if dash_column(text, ctx.tab_size) < indent:
            return index if is_list_item(text) else None
    return None


def is_misaligned_list_item(ctx: ScanContext) -> bool:
    """True when the cursor sits between a list item's dash and its content column."""
    index = enclosing_list_item(ctx)
    if index is None:
        return False
    text = ctx.buffer.get_line(index)
    return dash_column(text, ctx.tab_size) < ctx.indent < indent_width(text, ctx.tab_size)


def parent_key(ctx: ScanContext) -> str | None:
    """Key of the nearest earlier block opener at or left of the cursor column.

    None when the cursor is inside the body of a list item.
    """
    indent = ctx.indent
    for index in range(ctx.line_no - 1, -1, -1):
        text = ctx.buffer.get_line(index)
        if is_blank_or_comment(text):
            continue
        column = dash_column(text, ctx.tab_size)
        if column > indent:
            continue
        if column < indent and is_list_item(text):
            return None
        key = object_key(text)
        if key is not None:
            return key
    return None


def enclosing_opener(ctx: ScanContext) -> tuple[int, str, int] | None:
    """(line index, key, indentation) of the block the cursor is in."""
    return find_enclosing(ctx.buffer, ctx.line_no, ctx.indent, ctx.tab_size)


def make_list(options: dict[str, str | None], line: str) -> dict[str, str | None]:
    """Prefix every key with a list dash unless the line already has one."""
    if is_list_item(line):
        return options
    return {f"- {key}": value for key, value in options.items()}


def check_list(options: dict[str, str | None], ctx: ScanContext) -> dict[str, str | None]:
    """Dash-prefix ``options`` when the cursor starts a new list element."""
    if not options or is_list_item(ctx.line):
        return options
    sibling = previous_sibling(ctx)
    if is_first_in_block(ctx) or (sibling is not None and sibling.startswith("-")):
        return make_list(options, ctx.line)
    return options


def map_or_list_value_type(schema: MetaSchema, property_key: str | None) -> ElementType:
    """Options one level into a collection property: a map's keys or a list's elements."""
    type_def = schema.type_def(schema.property_type(property_key))
    if type_def is None:
        return ElementType(None, {}, False)
    if type_def.is_map:
        return ElementType(type_def.key_type, schema.type_options(type_def.key_type), False)
    if type_def.is_list:
        return ElementType(type_def.value_type, schema.type_options(type_def.value_type), True)
    return ElementType(None, {}, False)
