"""Repository for room definitions."""
from __future__ import annotations

from typing import List

from soulstone.data.errors import DataReferenceError, DataValidationError, RoomNotFoundError
from soulstone.data.repositories.base import RecordRepositoryBase
from soulstone.domain.defs import (
    ActionDef,
    CombatDef,
    ContinueAt,
    DialogueStepDef,
    EndDialogue,
    ExitDef,
    NextStep,
    NpcDialogueDef,
    ResponseDef,
    RoomDef,
    RoomEventDef,
)

END_DIALOGUE_STEP = -1
DEFAULT_ENEMY_DAMAGE = 5
COMBAT_ACTIONS: tuple[str, ...] = ("Attack", "Use Item", "Flee")
ROOM_EVENT_TYPES: tuple[str, ...] = ("add_item", "pick_item", "set_flag", "restore_health")

_RESPONSE_EFFECT_KEYS = {
    "setFlagTrue": "set_flag_true",
    "setFlagFalse": "set_flag_false",
    "setFlagConcluded": "set_flag_concluded",
    "getItem": "get_item",
    "giveItem": "give_item",
    "startQuest": "start_quest",
    "completeQuest": "complete_quest",
}


def split_speaker(message: str) -> tuple[str | None, str]:
    """Split a "<speaker># <text>" message into its speaker and text."""
    speaker, separator, text = message.partition("#")
    if not separator:
        return None, message
    speaker = speaker.strip()
    if not speaker:
        return None, text.strip()
    return speaker, text.strip()


class RoomsRepository(RecordRepositoryBase[RoomDef]):
    """Loads and validates room definitions from rooms/<room_id>.json."""

    not_found_error = RoomNotFoundError

    def __init__(self, base_path=None) -> None:
        super().__init__("rooms", base_path)

    def _build(self, record_id: str, raw: dict[str, object]) -> RoomDef:
        context = f"room '{record_id}'"
        room_id = self._require_str(raw.get("room_id"), f"{context} room_id")
        if room_id != record_id:
            raise DataValidationError(f"{context} room_id must match file name (found '{room_id}').")
        description = self._require_str(raw.get("description"), f"{context} description")
        items = tuple(self._require_str_list(raw.get("items", []), f"{context} items"))
        actions = self._parse_actions(raw.get("actions", []), context)
        exits = self._parse_exits(raw.get("exits", []), context)
        dialogues = self._parse_dialogues(raw.get("dialogues", []), context)
        combat = self._parse_combat(raw.get("combat"), context)
        events = self._parse_events(raw.get("events", []), context)
        return RoomDef(
            room_id=room_id,
            description=description,
            items=items,
            actions=tuple(actions),
            exits=tuple(exits),
            dialogues=tuple(dialogues),
            combat=combat,
            events=tuple(events),
        )

    def _parse_actions(self, value: object, context: str) -> List[ActionDef]:
        actions: List[ActionDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} actions")):
            ctx = f"{context} actions[{index}]"
            mapping = self._require_mapping(entry, ctx)
            action_id = self._require_str(mapping.get("action_id"), f"{ctx}.action_id")
            label = self._optional_str(mapping.get("action_description"), f"{ctx}.action_description")
            actions.append(
                ActionDef(
                    action_id=action_id,
                    label=label or action_id,
                    flag_true=self._optional_str(mapping.get("flag_true"), f"{ctx}.flag_true"),
                    flag_false=self._optional_str(mapping.get("flag_false"), f"{ctx}.flag_false"),
                )
            )
        return actions

    def _parse_exits(self, value: object, context: str) -> List[ExitDef]:
        exits: List[ExitDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} exits")):
            ctx = f"{context} exits[{index}]"
            mapping = self._require_mapping(entry, ctx)
            exits.append(
                ExitDef(
                    exit_name=self._require_str(mapping.get("exit_name"), f"{ctx}.exit_name"),
                    leads_to=self._require_str(mapping.get("leads_to"), f"{ctx}.leads_to"),
                    conditions=tuple(
                        self._require_str_list(mapping.get("conditions", []), f"{ctx}.conditions")
                    ),
                    conditions_not=tuple(
                        self._require_str_list(mapping.get("conditions_not", []), f"{ctx}.conditions_not")
                    ),
                )
            )
        return exits

    def _parse_dialogues(self, value: object, context: str) -> List[NpcDialogueDef]:
        dialogues: List[NpcDialogueDef] = []
        seen: set[str] = set()
        for index, entry in enumerate(self._require_list(value, f"{context} dialogues")):
            ctx = f"{context} dialogues[{index}]"
            mapping = self._require_mapping(entry, ctx)
            npc_name = self._require_str(mapping.get("npc_name"), f"{ctx}.npc_name")
            if npc_name in seen:
                raise DataValidationError(f"{ctx}.npc_name '{npc_name}' is declared twice.")
            seen.add(npc_name)
            raw_steps = self._require_list(mapping.get("dialogues"), f"{ctx}.dialogues")
            if not raw_steps:
                raise DataValidationError(f"{ctx} must define at least one dialogue step.")
            steps = [
                self._parse_step(step, len(raw_steps), f"{ctx}.dialogues[{step_index}]")
                for step_index, step in enumerate(raw_steps)
            ]
            dialogues.append(NpcDialogueDef(npc_name=npc_name, steps=tuple(steps)))
        return dialogues

    def _parse_step(self, value: object, step_count: int, ctx: str) -> DialogueStepDef:
        mapping = self._require_mapping(value, ctx)
        speaker, message = split_speaker(self._require_str(mapping.get("message"), f"{ctx}.message"))
        responses: List[ResponseDef] = []
        for index, entry in enumerate(self._require_list(mapping.get("responses", []), f"{ctx}.responses")):
            responses.append(self._parse_response(entry, step_count, f"{ctx}.responses[{index}]"))
        return DialogueStepDef(speaker=speaker, message=message, responses=tuple(responses))

    def _parse_response(self, value: object, step_count: int, ctx: str) -> ResponseDef:
        mapping = self._require_mapping(value, ctx)
        text = self._require_str(mapping.get("text"), f"{ctx}.text")
        next_step = self._parse_next_step(mapping.get("next_step"), step_count, f"{ctx}.next_step")
        effects: dict[str, str | None] = {}
        for json_key, field_name in _RESPONSE_EFFECT_KEYS.items():
            effect_value = self._optional_str(mapping.get(json_key), f"{ctx}.{json_key}")
            # An empty string is how authoring tools write "no effect".
            effects[field_name] = effect_value or None
        return ResponseDef(text=text, next_step=next_step, **effects)

    def _parse_next_step(self, value: object, step_count: int, ctx: str) -> NextStep:
        step = self._require_int(value, ctx)
        if step == END_DIALOGUE_STEP:
            return EndDialogue()
        if 0 <= step < step_count:
            return ContinueAt(step)
        raise DataReferenceError(
            f"{ctx} must be {END_DIALOGUE_STEP} or a step index below {step_count} (found {step})."
        )

    def _parse_combat(self, value: object, context: str) -> CombatDef | None:
        if value is None:
            return None
        ctx = f"{context} combat"
        mapping = self._require_mapping(value, ctx)
        enemy_name = self._require_str(mapping.get("enemy_name"), f"{ctx}.enemy_name")
        enemy_health = self._require_int(mapping.get("enemy_health"), f"{ctx}.enemy_health")
        if enemy_health <= 0:
            raise DataValidationError(f"{ctx}.enemy_health must be positive.")
        enemy_damage = self._require_int(
            mapping.get("enemyDamage", DEFAULT_ENEMY_DAMAGE), f"{ctx}.enemyDamage"
        )
        if enemy_damage < 0:
            raise DataValidationError(f"{ctx}.enemyDamage must be a non-negative integer.")
        actions = tuple(
            self._require_str_list(mapping.get("combat_actions", list(COMBAT_ACTIONS)), f"{ctx}.combat_actions")
        )
        for action in actions:
            if action not in COMBAT_ACTIONS:
                raise DataValidationError(
                    f"{ctx}.combat_actions entries must be one of {', '.join(COMBAT_ACTIONS)} (found '{action}')."
                )
        enemy_id = self._optional_str(mapping.get("enemy_id"), f"{ctx}.enemy_id") or enemy_name
        defeat_flag = self._optional_str(mapping.get("defeat_flag"), f"{ctx}.defeat_flag") or None
        return CombatDef(
            enemy_id=enemy_id,
            enemy_name=enemy_name,
            enemy_health=enemy_health,
            enemy_damage=enemy_damage,
            combat_actions=actions,
            defeat_flag=defeat_flag,
        )

    def _parse_events(self, value: object, context: str) -> List[RoomEventDef]:
        events: List[RoomEventDef] = []
        for index, entry in enumerate(self._require_list(value, f"{context} events")):
            ctx = f"{context} events[{index}]"
            mapping = self._require_mapping(entry, ctx)
            event_type = self._require_str(mapping.get("event_type"), f"{ctx}.event_type")
            if event_type not in ROOM_EVENT_TYPES:
                raise DataValidationError(
                    f"{ctx}.event_type must be one of {', '.join(ROOM_EVENT_TYPES)}."
                )
            if event_type == "set_flag":
                flag_name = self._require_str(mapping.get("flag_name"), f"{ctx}.flag_name")
                if not flag_name.strip():
                    raise DataValidationError(f"{ctx}.flag_name must not be empty.")
                flag_value = self._require_flag_value(mapping.get("value", "true"), f"{ctx}.value")
                events.append(RoomEventDef(event_type="set_flag", flag_name=flag_name, value=flag_value))
            elif event_type == "restore_health":
                events.append(RoomEventDef(event_type="restore_health"))
            else:
                item_id = self._require_str(mapping.get("item_id"), f"{ctx}.item_id")
                events.append(RoomEventDef(event_type=event_type, item_id=item_id))  # type: ignore[arg-type]
        return events
