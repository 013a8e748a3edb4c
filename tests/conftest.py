"""Shared fixtures: a small but complete metadata schema."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from spellhint.models.schema import MetaSchema, schema_from_dict
from spellhint.services.engine import HintEngine

SCHEMA_DATA: dict[str, Any] = {
    "types": {
        "string": {},
        "integer": {},
        "double": {},
        "milliseconds": {},
        "section": {},
        "boolean": {"options": ["true", "false"]},
        "color": {"options": {"FF0000": None, "00FF00": None, "0000FF": None}},
        "cost_type": {"options": {"mana": "Mana cost", "health": "Health cost", "hunger": "Hunger cost"}},
        "material": {"options": {"stone": None, "dirt": None, "diamond_block": None}},
        "material_list": {"value_type": "material"},
        "potion_effect_type": {"options": {"speed": None, "jump": None, "slow": None}},
        "potion_effect_map": {"key_type": "potion_effect_type", "value_type": "integer"},
        "particle": {"options": {"flame": None, "smoke": None, "redstone": None}},
        "target_type": {"options": {"self": None, "other": None, "block": None}},
        "location_type": {"options": {"origin": None, "target": None, "both": None}},
    },
    "properties": {
        "name": {"type": "string", "description": ["The display name of the spell"], "importance": 10},
        "icon": {"type": "material", "description": "Icon shown in the spell book"},
        "cooldown": {"type": "milliseconds", "description": ["Time between casts"]},
        "color": {"type": "color"},
        "actions": {"type": "section"},
        "effects": {"type": "section"},
        "parameters": {"type": "section"},
        "costs": {"type": "section"},
        "quiet": {"type": "boolean"},
        "target": {"type": "target_type"},
        "radius": {"type": "integer", "description": ["Radius of effect"]},
        "damage": {"type": "double", "description": ["Damage dealt"]},
        "repeat": {"type": "integer"},
        "duration": {"type": "integer"},
        "destructible": {"type": "material_list"},
        "add_effects": {"type": "potion_effect_map"},
        "particle": {"type": "particle"},
        "location": {"type": "location_type"},
        "action_class": {"type": "string"},
        "effectlib_class": {"type": "string"},
        "effectlib": {"type": "section"},
    },
    "context": {
        "properties": {
            "name": "name",
            "icon": "icon",
            "cooldown": "cooldown",
            "color": "color",
            "actions": "actions",
            "effects": "effects",
            "parameters": "parameters",
            "costs": "costs",
        },
        "parameters": {"target": "target", "cooldown": "cooldown", "destructible": "destructible"},
        "effect_parameters": {
            "location": "location",
            "particle": "particle",
            "color": "color",
            "effectlib": "effectlib",
        },
        "effectlib_parameters": {"class": "effectlib_class", "duration": "duration", "particle": "particle"},
        "action_parameters": {"class": "action_class", "target": "target", "radius": "radius"},
        "compound_action_parameters": {
            "class": "action_class",
            "target": "target",
            "repeat": "repeat",
            "actions": "actions",
        },
        "action_classes": {
            "Fireball": "fireball",
            "Damage": "damage",
            "Repeat": "repeat",
            "PotionEffect": "potion_effect",
        },
        "effectlib_classes": {"Sphere": "sphere", "Helix": "helix"},
        "actions": {
            "FireballAction": {"size": "radius", "damage": "damage", "incendiary": "quiet"},
            "DamageAction": {"damage": "damage", "magic_damage": "damage"},
            "RepeatAction": {"repeat": "repeat"},
            "PotionEffectAction": {"add_effects": "add_effects", "duration": "duration"},
        },
        "effects": {
            "SphereEffect": {"radius": "radius", "particle": "particle"},
            "HelixEffect": {"radius": "radius"},
        },
    },
    "actions": {
        "fireball": {
            "description": ["Launch a fireball"],
            "category": "projectiles",
            "parameters": {"radius": 2, "damage": 4.5},
        },
        "damage": {"description": ["Damage the target"], "category": "combat", "parameters": {"damage": 10.0}},
        "repeat": {"description": ["Run actions several times"], "category": "compound", "parameters": {"repeat": 3}},
        "potion_effect": {"description": "Apply potion effects", "parameters": {"duration": 5000}},
    },
    "effectlib_effects": {
        "sphere": {"description": ["A sphere of particles"], "parameters": {"radius": 0.6, "particle": "redstone"}},
        "helix": {"description": ["A rising helix"]},
    },
    "action_parameters": {"radius": 1, "target": "other"},
    "effectlib_parameters": {"duration": 2000, "particle": "flame"},
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the user's real config directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("SPELLHINT_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def schema_data() -> dict[str, Any]:
    return copy.deepcopy(SCHEMA_DATA)


@pytest.fixture
def schema(schema_data) -> MetaSchema:
    return schema_from_dict(schema_data)


@pytest.fixture
def engine(schema) -> HintEngine:
    return HintEngine(schema)
