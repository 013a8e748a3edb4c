"""Ranking — filter raw candidates by the typed word, synthesize numbers, and sort."""

from __future__ import annotations

import colorsys
import functools
import math

from pydantic import BaseModel

from spellhint.models.schema import MetaSchema
from spellhint.services.resolver import RawCandidates

PREFIX_ONLY_TYPES = {"milliseconds", "percentage"}
INTEGER_TYPE = "integer"
DOUBLE_TYPE = "double"
COLOR_TYPE = "color"

# Extra halving/tenth steps kept once a synthesized double drops below 1
DOUBLE_DECIMALS = 5


class Candidate(BaseModel):
    """One row of the completion drop-down."""

    text: str
    description: list[str] | None = None
    importance: float = 0
    inherited: bool = False
    is_default: bool = False


def trim_tags(description: str | None) -> str | None:
    """Drop leading markup, keeping the text after the last ``>``."""
    if description is None:
        return None
    index = description.rfind(">")
    if 0 < index < len(description) - 1:
        return description[index + 1:]
    return description


def color_hue(literal: str) -> float:
    """Hue (0-360) of a hex color literal such as ``'FF8800'``; 0 if unparsable."""
    hex_value = literal.strip().strip("'\"").lstrip("#")
    if len(hex_value) < 6:
        return 0
    try:
        r, g, b = (int(hex_value[i:i + 2], 16) / 255 for i in (0, 2, 4))
    except ValueError:
        return 0
    hue, _, _ = colorsys.rgb_to_hsv(r, g, b)
    return hue * 360


def format_number(value: float, decimals: int = 0) -> str:
    if decimals == 0 or float(value).is_integer():
        return str(int(value))
    return f"{value:.{decimals}f}".rstrip("0").rstrip(".")


def add_multiples(default: str, values: dict[str, str | None], decimals: int) -> None:
    """Add x2 and x10 of ``default`` plus successive halvings and tenths."""
    try:
        base = float(default)
    except ValueError:
        return
    if not math.isfinite(base):
        return

    def put(number: float) -> None:
        if not math.isfinite(number):
            return
        if decimals == 0:
            number = math.floor(number)
        else:
            number = round(number, decimals)
        values.setdefault(format_number(number, decimals), None)

    put(base * 2)
    put(base * 10)
    for divisor in (2, 10):
        lesser = base
        remaining = decimals
        while remaining >= 0:
            lesser /= divisor
            put(lesser)
            if abs(lesser) < 1:
                remaining -= 1


def add_powers_of_ten(word: str, values: dict[str, str | None], integer: bool) -> None:
    """Add the typed word and, when it is a number, three ascending powers of ten of it."""
    values.setdefault(word, None)
    try:
        number: float = int(word) if integer else float(word)
    except ValueError:
        return
    if not math.isfinite(number):
        return
    decimals = 0 if integer else DOUBLE_DECIMALS
    for _ in range(3):
        number *= 10
        if not math.isfinite(number):
            break
        values.setdefault(format_number(number, decimals), None)


class Ranker:
    """Turns RawCandidates into the ordered candidate list for one request."""

    def __init__(self, schema: MetaSchema) -> None:
        self.schema = schema

    def rank(self, raw: RawCandidates, word: str) -> list[Candidate]:
        values = raw.values
        include_contains = True
        if raw.value_type in PREFIX_ONLY_TYPES:
            include_contains = False
        elif raw.value_type in (INTEGER_TYPE, DOUBLE_TYPE):
            include_contains = False
            integer = raw.value_type == INTEGER_TYPE
            values = dict(values)
            if raw.default is not None:
                add_multiples(raw.default, values, 0 if integer else DOUBLE_DECIMALS)
            if word:
                add_powers_of_ten(word, values, integer)

        starts_with: list[Candidate] = []
        contains: list[Candidate] = []
        found_default = False
        groups = [(False, values)]
        if raw.inherited is not None:
            groups.append((True, {k: v for k, v in raw.inherited.items() if k not in values}))
        for inherited, entries in groups:
            for key, description in entries.items():
                is_default = raw.default is not None and raw.default == key
                found_default = found_default or is_default
                match = key + (trim_tags(description) or "")
                if word not in match:
                    continue
                candidate = self._convert(key + raw.suffix, description, raw, inherited, is_default)
                if match.startswith(word):
                    starts_with.append(candidate)
                else:
                    contains.append(candidate)

        if raw.default is not None and not found_default and word in raw.default:
            candidate = self._convert(raw.default + raw.suffix, None, raw, False, True)
            if raw.default.startswith(word):
                starts_with.append(candidate)
            else:
                contains.append(candidate)

        order = functools.cmp_to_key(_comparator(word, raw.suffix))
        starts_with.sort(key=order)
        contains.sort(key=order)
        if include_contains:
            return starts_with + contains
        return starts_with

    def _convert(
        self,
        text: str,
        value: str | None,
        raw: RawCandidates,
        inherited: bool,
        is_default: bool,
    ) -> Candidate:
        description: list[str] | None = None
        importance: float = 0
        found = self.schema.describe(raw.class_type, value) if raw.class_type and value else None
        if found is not None:
            description, importance = found
        elif value is not None:
            description = [value]

        if importance == 0 and raw.value_type == COLOR_TYPE:
            importance = color_hue(text)

        return Candidate(
            text=text,
            description=description,
            importance=importance,
            inherited=inherited,
            is_default=is_default,
        )


def _comparator(word: str, suffix: str):
    def bare(candidate: Candidate) -> str:
        if suffix and candidate.text.endswith(suffix):
            return candidate.text[: -len(suffix)]
        return candidate.text

    def compare(a: Candidate, b: Candidate) -> int:
        a_exact, b_exact = bare(a) == word, bare(b) == word
        if a_exact != b_exact:
            return -1 if a_exact else 1
        if a.is_default != b.is_default:
            return -1 if a.is_default else 1
        if a.inherited != b.inherited:
            return 1 if a.inherited else -1
        if a.importance != b.importance:
            return -1 if a.importance > b.importance else 1
        a_key, b_key = (a.text.casefold(), a.text), (b.text.casefold(), b.text)
        return (a_key > b_key) - (a_key < b_key)

    return compare
