"""Tests for context scanning around the cursor."""

from __future__ import annotations

from spellhint.adapters.buffers import LineBuffer
from spellhint.services.scanner import (
    ScanContext,
    check_list,
    collect_siblings,
    current_class,
    find_declared_action_classes,
    is_misaligned_list_item,
    make_list,
    map_or_list_value_type,
    parent_key,
    previous_sibling,
    record_bounds,
)


def _ctx(text: str, line: int, col: int | None = None) -> ScanContext:
    buffer = LineBuffer.from_text(text)
    if col is None:
        col = len(buffer.get_line(line))
    return ScanContext(buffer, line, col)


class TestSiblings:
    def test_both_directions(self):
        text = "name: Fire\nicon: dirt\n\ncooldown: 100"
        assert collect_siblings(_ctx(text, 2, 0)) == {"name": "Fire", "icon": "dirt", "cooldown": "100"}

    def test_cursor_line_not_collected(self):
        text = "name: Fire\nicon: dirt\ncooldown: 100"
        assert collect_siblings(_ctx(text, 1, 0)) == {"name": "Fire", "cooldown": "100"}

    def test_stops_at_shallower_line(self):
        text = "actions:\n  cast:\n    - class: A\nname: x"
        siblings = collect_siblings(_ctx(text, 1, 2))
        assert siblings == {}

    def test_stops_at_list_boundary(self):
        text = (
            "cast:\n"
            "  - class: Fireball\n"
            "    size: 3\n"
            "    \n"
            "  - class: Damage\n"
            "    damage: 5"
        )
        siblings = collect_siblings(_ctx(text, 3, 4))
        assert siblings == {"class": "Fireball", "size": "3"}

    def test_list_item_line_does_not_look_up(self):
        text = "cast:\n  - class: Fireball\n    size: 3\n  - "
        assert collect_siblings(_ctx(text, 3)) == {}

    def test_ignores_comments(self):
        text = "name: Fire\n# icon: dirt\n"
        assert collect_siblings(_ctx(text, 2, 0)) == {"name": "Fire"}


class TestCurrentClass:
    def test_suffix_is_added(self):
        text = "actions:\n  - class: Fireball\n    "
        assert current_class(_ctx(text, 2), "Action") == "FireballAction"

    def test_full_name_kept(self):
        text = "effectlib:\n  class: SphereEffect\n  "
        assert current_class(_ctx(text, 2), "Effect") == "SphereEffect"

    def test_no_class(self):
        text = "actions:\n  - target: self\n    "
        assert current_class(_ctx(text, 2), "Action") is None


class TestDeclaredActions:
    def test_collects_classes(self):
        buffer = LineBuffer.from_text(
            "actions:\n"
            "  cast:\n"
            "  - class: Fireball\n"
            "\n"
            "  - class: DamageAction\n"
            "  - class: Fireball\n"
            "parameters:\n"
            "  - class: Ignored\n"
        )
        assert find_declared_action_classes(buffer) == ["FireballAction", "DamageAction"]

    def test_no_actions_block(self):
        buffer = LineBuffer.from_text("name: Fire\nparameters:\n  radius: 2")
        assert find_declared_action_classes(buffer) == []

    def test_nested_block_needs_any_indent(self):
        buffer = LineBuffer.from_text("fire:\n  actions:\n    cast:\n    - class: Fireball")
        assert find_declared_action_classes(buffer) == []
        assert find_declared_action_classes(buffer, indent=None) == ["FireballAction"]

    def test_record_bounds(self):
        buffer = LineBuffer.from_text("fire:\n  name: a\n\nice:\n  name: b\n  icon: dirt")
        assert record_bounds(buffer, 1) == (0, 3)
        assert record_bounds(buffer, 5) == (3, 6)


class TestListStructure:
    def test_misaligned_between_dash_and_content(self):
        text = "actions:\n  - class: Fireball\n   "
        assert is_misaligned_list_item(_ctx(text, 2))

    def test_aligned_with_content(self):
        text = "actions:\n  - class: Fireball\n    "
        assert not is_misaligned_list_item(_ctx(text, 2))

    def test_previous_sibling(self):
        text = "cast:\n  - location: origin\n  "
        assert previous_sibling(_ctx(text, 2)) == "- location: origin"
        assert previous_sibling(_ctx("cast:\n  ", 1)) is None

    def test_parent_key(self):
        assert parent_key(_ctx("actions:\n  ", 1)) == "actions"
        assert parent_key(_ctx("actions:\n  - class: Fireball\n    ", 2)) is None

    def test_make_list(self):
        assert make_list({"a": None}, "  ") == {"- a": None}
        assert make_list({"a": None}, "  - ") == {"a": None}

    def test_check_list_first_in_block(self):
        options = {"location": None}
        assert check_list(options, _ctx("cast:\n  ", 1)) == {"- location": None}

    def test_check_list_after_plain_sibling(self):
        options = {"location": None}
        assert check_list(options, _ctx("cast:\n  radius: 1\n  ", 2)) == options

    def test_check_list_after_list_item(self):
        options = {"location": None}
        assert check_list(options, _ctx("cast:\n  radius: 1\n  - particle: flame\n  ", 3)) == {"- location": None}


class TestElementTypes:
    def test_list_property(self, schema):
        element = map_or_list_value_type(schema, "destructible")
        assert element.type_key == "material"
        assert element.is_list
        assert set(element.options) == {"stone", "dirt", "diamond_block"}

    def test_map_property(self, schema):
        element = map_or_list_value_type(schema, "add_effects")
        assert element.type_key == "potion_effect_type"
        assert not element.is_list
        assert set(element.options) == {"speed", "jump", "slow"}

    def test_scalar_and_unknown(self, schema):
        assert map_or_list_value_type(schema, "radius").options == {}
        assert map_or_list_value_type(schema, "missing").type_key is None
        assert map_or_list_value_type(schema, None).options == {}
