"""Candidate resolution — map a hierarchy path onto the schema subset valid at the cursor."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from spellhint.core.config import DOCUMENT_KINDS
from spellhint.core.exceptions import ConfigError
from spellhint.models.schema import ACTION_SUFFIX, EFFECT_SUFFIX, ClassRecord, MetaSchema
from spellhint.services.scanner import (
    ScanContext,
    check_list,
    collect_siblings,
    current_class,
    enclosing_opener,
    find_declared_action_classes,
    is_misaligned_list_item,
    make_list,
    map_or_list_value_type,
    parent_key,
    previous_sibling,
    record_bounds,
)
from spellhint.services.text import leaf_key

logger = logging.getLogger(__name__)

KEY_SUFFIX = ": "

Options = dict[str, str | None]

ACTION_TRIGGERS: dict[str, str | None] = {
    "cast": "cast_actions",
    "alternate_up": "alternate_up_actions",
    "alternate_down": "alternate_down_actions",
    "alternate_sneak": "alternate_sneak_actions",
}

EFFECT_TRIGGERS: dict[str, str | None] = {
    "cast": "cast_effect_list",
    "tick": "tick_effect_list",
    "hit": "hit_effect_list",
    "hit_entity": "hit_entity_effect_list",
    "hit_block": "hit_block_effect_list",
    "blockmiss": "blockmiss_effect_list",
    "prehit": "prehit_effect_list",
    "step": "step_effect_list",
    "reflect": "reflect_effect_list",
    "miss": "miss_effect_list",
    "headshot": "headshot_effect_list",
    "projectile": "projectile_effect_list",
}

COST_BLOCKS = ("costs", "active_costs")
NEW_ACTION_KEY = "- class"
NEW_ACTION_HINT = "Add a new action to this list"
NEW_EFFECT_KEY = "- location"
NEW_EFFECT_HINT = "Add a new effect to this list"

# Block openers whose body is a list of actions
ACTION_LIST_KEYS = ("actions", *ACTION_TRIGGERS)


@dataclass
class RawCandidates:
    """Unranked candidates for one request.

    ``values`` maps a candidate literal to what describes it: a property key
    when ``class_type`` is ``"properties"``, a class key for ``"actions"`` /
    ``"effectlib_effects"``, otherwise a plain description.
    """

    values: dict[str, str | None]
    inherited: dict[str, str | None] | None = None
    default: str | None = None
    class_type: str = ""
    value_type: str | None = None
    suffix: str = ""

    @classmethod
    def empty(cls, suffix: str = "") -> "RawCandidates":
        return cls(values={}, suffix=suffix)


class CandidateResolver:
    """Dispatches a hierarchy path to the schema lookup rule that applies."""

    def __init__(self, schema: MetaSchema, kind: str = "spell") -> None:
        if kind not in DOCUMENT_KINDS:
            raise ConfigError(f"Unknown document kind: {kind}")
        self.schema = schema
        self.kind = kind

    def normalize(self, path: list[str]) -> list[str]:
        """Give every spell path a leading record element."""
        if self.kind == "spell":
            return [""] + path
        return path

    def resolve(self, ctx: ScanContext, path: list[str]) -> RawCandidates:
        if not path:
            return RawCandidates.empty()
        is_leaf = leaf_key(ctx.line) is not None
        if self.kind == "effects":
            if is_leaf:
                return self._effect_file_values(ctx, path)
            return self._effect_file_keys(ctx, path)
        path = self.normalize(path)
        if is_leaf:
            return self._spell_values(ctx, path)
        return self._spell_keys(ctx, path)

    # ── Values ───────────────────────────────────────────────────

    def _spell_values(self, ctx: ScanContext, path: list[str]) -> RawCandidates:
        context = self.schema.context
        field = path[-1]
        depth = len(path)
        section = path[1] if depth > 1 else ""

        if depth == 2:
            return self._property_values(context.spell_properties.get(field))
        if depth == 3 and section == "parameters":
            property_key = context.spell_parameters.get(field)
            if property_key is not None:
                return self._property_values(property_key)
            return self._declared_action_values(ctx, field)
        if depth >= 3 and section == "actions" and field == "class":
            return RawCandidates(values=dict(context.action_classes), class_type="actions")
        if depth >= 3 and section == "effects" and field == "class":
            return RawCandidates(values=dict(context.effectlib_classes), class_type="effectlib_effects")
        if depth >= 3 and section == "actions":
            return self._class_parameter_values(ctx, field, actions=True)
        if depth >= 4 and section == "effects" and path[-2] == "effectlib":
            return self._class_parameter_values(ctx, field, actions=False)
        if depth >= 4 and section == "effects":
            return self._property_values(context.effect_parameters.get(field))
        return RawCandidates.empty()

    def _effect_file_values(self, ctx: ScanContext, path: list[str]) -> RawCandidates:
        context = self.schema.context
        field = path[-1]
        if len(path) == 2:
            return self._property_values(context.effect_parameters.get(field))
        if len(path) >= 3 and path[1] == "effectlib":
            if field == "class":
                return RawCandidates(values=dict(context.effectlib_classes), class_type="effectlib_effects")
            return self._class_parameter_values(ctx, field, actions=False)
        return RawCandidates.empty()

    def _property_values(self, property_key: str | None, default: str | None = None) -> RawCandidates:
        value_type, options = self.schema.property_options(property_key)
        if not options:
            element = map_or_list_value_type(self.schema, property_key)
            if element.options:
                value_type, options = element.type_key, element.options
        return RawCandidates(values=dict(options), default=default, value_type=value_type)

    def _declared_action_values(self, ctx: ScanContext, field: str) -> RawCandidates:
        values: dict[str, str | None] = {}
        value_type = None
        for record in self._declared_action_records(ctx):
            property_key = record.fields.get(field)
            if property_key is None:
                continue
            found = self._property_values(property_key)
            values.update(found.values)
            value_type = value_type or found.value_type
        return RawCandidates(values=values, value_type=value_type)

    def _class_parameter_values(self, ctx: ScanContext, field: str, actions: bool) -> RawCandidates:
        context = self.schema.context
        if actions:
            generic, generic_defaults = context.action_parameters, self.schema.action_parameters
        else:
            generic, generic_defaults = context.effectlib_parameters, self.schema.effectlib_parameters

        property_key = generic.get(field)
        default = generic_defaults.get(property_key) if property_key is not None else None
        record = self._class_record(current_class(ctx), actions)
        if record is not None:
            if property_key is None:
                property_key = record.fields.get(field)
            if property_key is not None and property_key in record.parameters:
                default = record.parameters[property_key]
        if property_key is None:
            return RawCandidates.empty()
        return self._property_values(property_key, default)

    # ── Keys ─────────────────────────────────────────────────────

    def _spell_keys(self, ctx: ScanContext, path: list[str]) -> RawCandidates:
        if is_misaligned_list_item(ctx):
            logger.debug("Cursor between list dash and content, no key suggestions")
            return RawCandidates.empty(KEY_SUFFIX)

        context = self.schema.context
        depth = len(path)
        section = path[1] if depth > 1 else ""
        if path[-1] != "" or depth < 2:
            return RawCandidates.empty(KEY_SUFFIX)

        inherited: dict[str, str | None] | None = None
        suffix = KEY_SUFFIX
        if depth == 2:
            properties = dict(context.spell_properties)
        elif depth == 3 and section in COST_BLOCKS:
            properties = dict(self.schema.type_options("cost_type"))
        elif section == "parameters":
            properties, inherited, suffix = self._parameter_keys(ctx, path)
        elif section == "actions":
            action_class = current_class(ctx, ACTION_SUFFIX)
            if depth == 3 and action_class is None:
                properties = self._trigger_keys(ctx, ACTION_TRIGGERS, NEW_ACTION_KEY, NEW_ACTION_HINT)
            else:
                properties, inherited, suffix = self._action_keys(ctx, action_class)
        elif section == "effects" and depth == 3:
            properties = self._trigger_keys(ctx, EFFECT_TRIGGERS, NEW_EFFECT_KEY, NEW_EFFECT_HINT)
        elif section == "effects" and depth >= 5 and path[-2] == "effectlib":
            properties, inherited = self._effectlib_keys(ctx)
        elif section == "effects" and depth == 4:
            properties = dict(context.effect_parameters)
            sibling = previous_sibling(ctx)
            if sibling is not None and sibling.startswith("-"):
                properties = make_list(properties, ctx.line)
            else:
                properties = check_list(properties, ctx)
        elif section == "effects":
            properties, suffix = self._map_property_keys(ctx, context.effect_parameters, actions=None)
        else:
            return RawCandidates.empty(KEY_SUFFIX)
        return self._without_siblings(ctx, properties, inherited, suffix)

    def _effect_file_keys(self, ctx: ScanContext, path: list[str]) -> RawCandidates:
        context = self.schema.context
        if path[-1] != "" or len(path) < 2:
            return RawCandidates.empty(KEY_SUFFIX)
        inherited: dict[str, str | None] | None = None
        suffix = KEY_SUFFIX
        if len(path) == 2:
            properties = check_list(dict(context.effect_parameters), ctx)
        elif path[1] == "effectlib":
            properties, inherited = self._effectlib_keys(ctx)
        else:
            properties, suffix = self._map_property_keys(ctx, context.effect_parameters, actions=None)
        return self._without_siblings(ctx, properties, inherited, suffix)

    def _parameter_keys(self, ctx: ScanContext, path: list[str]) -> tuple[Options, Options | None, str]:
        context = self.schema.context
        properties: dict[str, str | None] = {}
        for record in self._declared_action_records(ctx):
            properties.update(record.fields)
        if len(path) == 3:
            return properties, dict(context.spell_parameters), KEY_SUFFIX

        # Nested block: offer the keys/elements of the collection-typed parent field
        parent_field = path[-2]
        property_key = properties.get(parent_field) or context.spell_parameters.get(parent_field)
        element = map_or_list_value_type(self.schema, property_key)
        if element.is_list:
            return check_list(dict(element.options), ctx), None, ""
        return dict(element.options), None, KEY_SUFFIX

    def _action_keys(self, ctx: ScanContext, action_class: str | None) -> tuple[Options, Options, str]:
        context = self.schema.context
        suffix = KEY_SUFFIX
        if action_class is not None:
            inherited = dict(context.action_parameters)
            properties: dict[str, str | None] = {}
            record = self.schema.action_record(action_class)
            if record is not None:
                properties = dict(record.fields)
                if record.is_compound:
                    inherited = dict(context.compound_action_parameters)
            else:
                logger.debug("No metadata for action class %s", action_class)
            inherited = check_list(inherited, ctx)
            properties = check_list(properties, ctx)
        else:
            inherited = {}
            properties, suffix = self._map_property_keys(ctx, context.action_parameters, actions=True)

        if parent_key(ctx) in ACTION_LIST_KEYS:
            properties = dict(properties)
            properties[NEW_ACTION_KEY] = NEW_ACTION_HINT
        return properties, inherited, suffix

    def _trigger_keys(
        self, ctx: ScanContext, triggers: Options, new_key: str, hint: str
    ) -> Options:
        """Trigger names, plus a new list entry unless the block is already keyed by trigger."""
        properties = dict(triggers)
        if not any(key in triggers for key in collect_siblings(ctx)):
            properties[new_key] = hint
        return properties

    def _effectlib_keys(self, ctx: ScanContext) -> tuple[Options, Options]:
        inherited = dict(self.schema.context.effectlib_parameters)
        properties: dict[str, str | None] = {}
        record = self.schema.effect_record(current_class(ctx, EFFECT_SUFFIX))
        if record is not None:
            properties = dict(record.fields)
        return properties, inherited

    def _map_property_keys(
        self, ctx: ScanContext, generic: dict[str, str], actions: bool | None
    ) -> tuple[Options, str]:
        """Keys or elements of the collection property that opens the cursor's block."""
        opener = enclosing_opener(ctx)
        if opener is None:
            return {}, KEY_SUFFIX
        index, field, _ = opener
        property_key = generic.get(field)
        if property_key is None and actions is not None:
            record = self._class_record(current_class(ctx.at_line(index)), actions)
            if record is not None:
                property_key = record.fields.get(field)
        element = map_or_list_value_type(self.schema, property_key)
        if element.is_list:
            return check_list(dict(element.options), ctx), ""
        return dict(element.options), KEY_SUFFIX

    # ── Helpers ──────────────────────────────────────────────────

    def _class_record(self, name: str | None, actions: bool) -> ClassRecord | None:
        if actions:
            return self.schema.action_record(name)
        return self.schema.effect_record(name)

    def _declared_action_records(self, ctx: ScanContext) -> list[ClassRecord]:
        if self.kind == "spells":
            start, end = record_bounds(ctx.buffer, ctx.line_no, ctx.tab_size)
            names = find_declared_action_classes(ctx.buffer, ctx.tab_size, start=start, end=end, indent=None)
        else:
            names = find_declared_action_classes(ctx.buffer, ctx.tab_size)
        records = []
        for name in names:
            record = self.schema.action_record(name)
            if record is not None:
                records.append(record)
        return records

    def _without_siblings(
        self,
        ctx: ScanContext,
        properties: dict[str, str | None],
        inherited: dict[str, str | None] | None,
        suffix: str,
    ) -> RawCandidates:
        siblings = collect_siblings(ctx)
        properties = {k: v for k, v in properties.items() if k not in siblings}
        if inherited is not None:
            inherited = {k: v for k, v in inherited.items() if k not in siblings}
        return RawCandidates(values=properties, inherited=inherited, class_type="properties", suffix=suffix)
