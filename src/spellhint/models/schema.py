"""Metadata schema models — the read-only description of valid spell documents."""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, PrivateAttr, ValidationError, field_validator

from spellhint.core.exceptions import SchemaError

logger = logging.getLogger(__name__)

ACTION_SUFFIX = "Action"
EFFECT_SUFFIX = "Effect"


def _literal(value: Any) -> str | None:
    """Render a JSON scalar the way it would be written in a spell file."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_lines(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class PropertyDef(BaseModel):
    """A single property or parameter: its value type and presentation metadata."""

    type: str = "string"
    description: list[str] = Field(default_factory=list)
    importance: float = 0
    field: str | None = None
    category: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> list[str]:
        return _as_lines(v)

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, v: Any) -> float:
        return v or 0


class TypeDef(BaseModel):
    """A value type: enum-like (options), list-typed, map-typed or scalar."""

    options: dict[str, str | None] = Field(default_factory=dict)
    value_type: str | None = None
    key_type: str | None = None
    description: list[str] = Field(default_factory=list)
    class_name: str | None = None

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v: Any) -> dict[str, str | None]:
        if v is None:
            return {}
        if isinstance(v, (list, tuple)):
            return {str(option): None for option in v}
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> list[str]:
        return _as_lines(v)

    @property
    def is_map(self) -> bool:
        return bool(self.key_type)

    @property
    def is_list(self) -> bool:
        return bool(self.value_type) and not self.key_type


class ClassDescription(BaseModel):
    """An action or effect class: its parameter defaults and category."""

    parameters: dict[str, str | None] = Field(default_factory=dict)
    category: str | None = None
    description: list[str] = Field(default_factory=list)
    importance: float = 0

    @field_validator("parameters", mode="before")
    @classmethod
    def _parameters(cls, v: Any) -> dict[str, str | None]:
        if not v:
            return {}
        return {key: _literal(value) for key, value in v.items()}

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> list[str]:
        return _as_lines(v)

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, v: Any) -> float:
        return v or 0


class SpellContext(BaseModel):
    """Field-name to property-key maps for every block kind, plus class registries."""

    spell_properties: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("spell_properties", "properties")
    )
    spell_parameters: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("spell_parameters", "parameters")
    )
    effect_parameters: dict[str, str] = Field(default_factory=dict)
    effectlib_parameters: dict[str, str] = Field(default_factory=dict)
    action_parameters: dict[str, str] = Field(default_factory=dict)
    compound_action_parameters: dict[str, str] = Field(default_factory=dict)
    action_classes: dict[str, str] = Field(default_factory=dict)
    effectlib_classes: dict[str, str] = Field(default_factory=dict)
    actions: dict[str, dict[str, str]] = Field(default_factory=dict)
    effects: dict[str, dict[str, str]] = Field(default_factory=dict)


@dataclass(frozen=True)
class ClassRecord:
    """Flattened view of one action or effect class."""

    short_name: str
    class_name: str
    class_key: str | None = None
    fields: dict[str, str] = field(default_factory=dict)
    parameters: dict[str, str | None] = field(default_factory=dict)
    category: str | None = None

    @property
    def is_compound(self) -> bool:
        return self.category == "compound"


class MetaSchema(BaseModel):
    """The complete metadata schema, loaded once and treated as read-only."""

    properties: dict[str, PropertyDef] = Field(default_factory=dict)
    types: dict[str, TypeDef] = Field(default_factory=dict)
    context: SpellContext = Field(
        default_factory=SpellContext, validation_alias=AliasChoices("context", "spell_context")
    )
    actions: dict[str, ClassDescription] = Field(default_factory=dict)
    effectlib_effects: dict[str, ClassDescription] = Field(default_factory=dict)
    action_parameters: dict[str, str | None] = Field(default_factory=dict)
    effectlib_parameters: dict[str, str | None] = Field(default_factory=dict)

    _action_registry: dict[str, ClassRecord] = PrivateAttr(default_factory=dict)
    _effect_registry: dict[str, ClassRecord] = PrivateAttr(default_factory=dict)

    @field_validator("action_parameters", "effectlib_parameters", mode="before")
    @classmethod
    def _defaults(cls, v: Any) -> dict[str, str | None]:
        if not v:
            return {}
        return {key: _literal(value) for key, value in v.items()}

    def model_post_init(self, __context: Any) -> None:
        self._action_registry = _build_registry(
            self.context.action_classes, self.context.actions, self.actions, ACTION_SUFFIX
        )
        self._effect_registry = _build_registry(
            self.context.effectlib_classes, self.context.effects, self.effectlib_effects, EFFECT_SUFFIX
        )

    # ── Lookups ──────────────────────────────────────────────────

    def property_def(self, property_key: str | None) -> PropertyDef | None:
        if property_key is None:
            return None
        return self.properties.get(property_key)

    def property_type(self, property_key: str | None) -> str | None:
        prop = self.property_def(property_key)
        return prop.type if prop else None

    def type_def(self, type_key: str | None) -> TypeDef | None:
        if type_key is None:
            return None
        return self.types.get(type_key)

    def type_options(self, type_key: str | None) -> dict[str, str | None]:
        type_def = self.type_def(type_key)
        return type_def.options if type_def else {}

    def property_options(self, property_key: str | None) -> tuple[str | None, dict[str, str | None]]:
        """Return (value type, options) for a property, or (None, {}) if unknown."""
        value_type = self.property_type(property_key)
        if value_type is None:
            return None, {}
        return value_type, self.type_options(value_type)

    def describe(self, class_type: str, key: str) -> tuple[list[str], float] | None:
        """Look up the description and importance of a property or class key."""
        if class_type == "properties":
            entry: PropertyDef | ClassDescription | None = self.properties.get(key)
        elif class_type == "actions":
            entry = self.actions.get(key)
        elif class_type == "effectlib_effects":
            entry = self.effectlib_effects.get(key)
        else:
            return None
        if entry is None:
            return None
        return entry.description, entry.importance

    def action_record(self, name: str | None) -> ClassRecord | None:
        """Find an action class by short name (``Damage``) or class name (``DamageAction``)."""
        return _lookup(self._action_registry, name, ACTION_SUFFIX)

    def effect_record(self, name: str | None) -> ClassRecord | None:
        """Find an effectlib class by short name (``Sphere``) or class name (``SphereEffect``)."""
        return _lookup(self._effect_registry, name, EFFECT_SUFFIX)

    @property
    def action_records(self) -> list[ClassRecord]:
        return list(self._action_registry.values())

    @property
    def effect_records(self) -> list[ClassRecord]:
        return list(self._effect_registry.values())


def _build_registry(
    classes: dict[str, str],
    class_fields: dict[str, dict[str, str]],
    descriptions: dict[str, ClassDescription],
    suffix: str,
) -> dict[str, ClassRecord]:
    registry: dict[str, ClassRecord] = {}
    for short_name, class_key in classes.items():
        class_name = short_name if short_name.endswith(suffix) else short_name + suffix
        description = descriptions.get(class_key)
        registry[short_name] = ClassRecord(
            short_name=short_name,
            class_name=class_name,
            class_key=class_key,
            fields=class_fields.get(class_name, {}),
            parameters=description.parameters if description else {},
            category=description.category if description else None,
        )
    # Field maps for classes missing from the registry (unreleased classes)
    for class_name, fields in class_fields.items():
        short_name = class_name[: -len(suffix)] if class_name.endswith(suffix) else class_name
        if short_name not in registry:
            registry[short_name] = ClassRecord(short_name=short_name, class_name=class_name, fields=fields)
    return registry


def _lookup(registry: dict[str, ClassRecord], name: str | None, suffix: str) -> ClassRecord | None:
    if not name:
        return None
    record = registry.get(name)
    if record is None and name.endswith(suffix):
        record = registry.get(name[: -len(suffix)])
    return record


def schema_from_dict(data: dict[str, Any]) -> MetaSchema:
    """Build a schema from already-parsed JSON."""
    try:
        return MetaSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"Invalid metadata schema: {e}") from e


def load_schema(path: Path | str) -> MetaSchema:
    """Load and validate a metadata JSON file."""
    path = Path(path).expanduser()
    if not path.exists():
        raise SchemaError(f"Metadata file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SchemaError(f"Failed to read metadata {path}: {e}") from e
    if not isinstance(data, dict):
        raise SchemaError(f"Metadata root must be an object: {path}")
    schema = schema_from_dict(data)
    logger.info(
        "Loaded schema %s: %d properties, %d types, %d actions, %d effects",
        path, len(schema.properties), len(schema.types),
        len(schema.action_records), len(schema.effect_records),
    )
    return schema


@functools.lru_cache(maxsize=4)
def get_schema(path: str) -> MetaSchema:
    """Process-wide, load-once access to a schema file."""
    return load_schema(path)
