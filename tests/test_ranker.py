"""Tests for candidate filtering, numeric synthesis and ordering."""

from __future__ import annotations

import pytest

from spellhint.services.ranker import (
    Ranker,
    add_multiples,
    add_powers_of_ten,
    color_hue,
    format_number,
    trim_tags,
)
from spellhint.services.resolver import RawCandidates


@pytest.fixture
def ranker(schema):
    return Ranker(schema)


def _texts(candidates) -> list[str]:
    return [c.text for c in candidates]


class TestHelpers:
    def test_trim_tags(self):
        assert trim_tags("<b>Fire</b>rain") == "rain"
        assert trim_tags("plain") == "plain"
        assert trim_tags("ends with>") == "ends with>"
        assert trim_tags(None) is None

    def test_color_hue(self):
        assert color_hue("FF0000") == pytest.approx(0)
        assert color_hue("#00FF00") == pytest.approx(120)
        assert color_hue("'0000FF'") == pytest.approx(240)
        assert color_hue("blue") == 0
        assert color_hue("GGGGGG") == 0

    def test_format_number(self):
        assert format_number(12.0) == "12"
        assert format_number(0.25, 5) == "0.25"
        assert format_number(3.0, 5) == "3"


class TestNumericSynthesis:
    def test_integer_multiples(self):
        values: dict[str, str | None] = {}
        add_multiples("100", values, 0)
        assert {"200", "1000", "50", "25", "12", "6", "3", "1", "0", "10"} <= set(values)

    def test_double_multiples(self):
        values: dict[str, str | None] = {}
        add_multiples("4.5", values, 5)
        assert {"9", "45", "2.25", "0.45"} <= set(values)

    def test_non_numeric_default(self):
        values: dict[str, str | None] = {}
        add_multiples("fast", values, 0)
        add_multiples("inf", values, 0)
        assert values == {}

    def test_powers_of_ten(self):
        values: dict[str, str | None] = {}
        add_powers_of_ten("5", values, integer=True)
        assert list(values) == ["5", "50", "500", "5000"]

    def test_powers_of_ten_keeps_unparsed_words(self):
        values: dict[str, str | None] = {}
        add_powers_of_ten("abc", values, integer=True)
        add_powers_of_ten("2.5", values, integer=True)
        assert list(values) == ["abc", "2.5"]

    def test_powers_of_ten_stop_at_overflow(self):
        values: dict[str, str | None] = {}
        add_powers_of_ten("1e307", values, integer=False)
        assert list(values)[0] == "1e307"
        assert len(values) == 2

    def test_huge_integer_default(self):
        values: dict[str, str | None] = {}
        add_multiples("1e308", values, 0)
        assert values
        assert all(text.isdigit() for text in values)


class TestRanking:
    def test_prefix_before_substring(self, ranker):
        raw = RawCandidates(values={"dirt": None, "diamond_block": None, "stone": None, "redirt": None})
        assert _texts(ranker.rank(raw, "dirt")) == ["dirt", "redirt"]

    def test_description_matches(self, ranker):
        raw = RawCandidates(values={"mana": "Mana cost", "health": "Health cost"})
        assert _texts(ranker.rank(raw, "cost")) == ["health", "mana"]

    def test_integer_synthesis(self, ranker):
        raw = RawCandidates(values={}, default="100", value_type="integer")
        candidates = ranker.rank(raw, "")
        assert candidates[0].text == "100"
        assert candidates[0].is_default
        assert {"200", "1000", "50", "0"} <= set(_texts(candidates))

    def test_typed_number(self, ranker):
        raw = RawCandidates(values={}, default="100", value_type="integer")
        texts = _texts(ranker.rank(raw, "3"))
        assert texts[0] == "3"
        assert {"30", "300", "3000"} <= set(texts)
        assert "1000" not in texts

    def test_numeric_types_skip_substring_matches(self, ranker):
        raw = RawCandidates(values={"250": None, "500": None}, value_type="milliseconds")
        assert _texts(ranker.rank(raw, "5")) == ["500"]

    def test_default_first(self, ranker):
        raw = RawCandidates(values={"flame": None, "redstone": None, "smoke": None}, default="smoke")
        candidates = ranker.rank(raw, "")
        assert _texts(candidates) == ["smoke", "flame", "redstone"]
        assert candidates[0].is_default

    def test_exact_match_beats_default(self, ranker):
        raw = RawCandidates(values={"flame": None, "flames": None}, default="flames")
        assert _texts(ranker.rank(raw, "flame")) == ["flame", "flames"]

    def test_inherited_after_own(self, ranker):
        raw = RawCandidates(
            values={"size": "radius", "damage": "damage"},
            inherited={"damage": "damage", "target": "target"},
            class_type="properties",
            suffix=": ",
        )
        candidates = ranker.rank(raw, "")
        assert _texts(candidates) == ["damage: ", "size: ", "target: "]
        assert [c.inherited for c in candidates] == [False, False, True]

    def test_importance_orders(self, ranker):
        raw = RawCandidates(values={"icon": "icon", "name": "name"}, class_type="properties", suffix=": ")
        candidates = ranker.rank(raw, "")
        assert _texts(candidates) == ["name: ", "icon: "]
        assert candidates[0].description == ["The display name of the spell"]

    def test_class_descriptions(self, ranker):
        raw = RawCandidates(values={"Fireball": "fireball"}, class_type="actions")
        [candidate] = ranker.rank(raw, "")
        assert candidate.description == ["Launch a fireball"]

    def test_plain_descriptions(self, ranker):
        raw = RawCandidates(values={"mana": "Mana cost", "bare": None})
        by_text = {c.text: c for c in ranker.rank(raw, "")}
        assert by_text["mana"].description == ["Mana cost"]
        assert by_text["bare"].description is None

    def test_colors_sort_by_hue(self, ranker):
        raw = RawCandidates(values={"FF0000": None, "00FF00": None, "0000FF": None}, value_type="color")
        assert _texts(ranker.rank(raw, "")) == ["0000FF", "00FF00", "FF0000"]

    def test_casefold_ordering(self, ranker):
        raw = RawCandidates(values={"beta": None, "Alpha": None, "alpha": None})
        assert _texts(ranker.rank(raw, "")) == ["Alpha", "alpha", "beta"]

    def test_deterministic(self, ranker):
        raw = RawCandidates(values={"a": None, "b": "x", "c": None}, default="b")
        assert ranker.rank(raw, "") == ranker.rank(raw, "")
