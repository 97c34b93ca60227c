"""Room definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple, Union

RoomEventType = Literal["add_item", "pick_item", "set_flag", "restore_health"]


@dataclass(slots=True)
class ActionDef:
    """An interaction offered in a room, optionally gated by a single flag each way."""

    action_id: str
    label: str
    flag_true: str | None = None
    flag_false: str | None = None


@dataclass(slots=True)
class ExitDef:
    """A labelled route to another room, gated by conjunctive flag conditions."""

    exit_name: str
    leads_to: str
    conditions: Tuple[str, ...] = ()
    conditions_not: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ContinueAt:
    step_index: int


@dataclass(frozen=True, slots=True)
class EndDialogue:
    pass


NextStep = Union[ContinueAt, EndDialogue]


@dataclass(slots=True)
class ResponseDef:
    text: str
    next_step: NextStep
    set_flag_true: str | None = None
    set_flag_false: str | None = None
    set_flag_concluded: str | None = None
    get_item: str | None = None
    give_item: str | None = None
    start_quest: str | None = None
    complete_quest: str | None = None


@dataclass(slots=True)
class DialogueStepDef:
    speaker: str | None
    message: str
    responses: Tuple[ResponseDef, ...]

    @property
    def is_terminal(self) -> bool:
        return not self.responses


@dataclass(slots=True)
class NpcDialogueDef:
    """Dialogue tree owned by an NPC; step 0 is the entry point."""

    npc_name: str
    steps: Tuple[DialogueStepDef, ...]


@dataclass(slots=True)
class CombatDef:
    enemy_id: str
    enemy_name: str
    enemy_health: int
    enemy_damage: int
    combat_actions: Tuple[str, ...]
    defeat_flag: str | None = None


@dataclass(slots=True)
class RoomEventDef:
    event_type: RoomEventType
    item_id: str | None = None
    flag_name: str | None = None
    value: str | None = None


@dataclass(slots=True)
class RoomDef:
    """Static room content loaded by identifier."""

    room_id: str
    description: str
    items: Tuple[str, ...]
    actions: Tuple[ActionDef, ...]
    exits: Tuple[ExitDef, ...]
    dialogues: Tuple[NpcDialogueDef, ...] = ()
    combat: CombatDef | None = None
    events: Tuple[RoomEventDef, ...] = ()

    def get_dialogue(self, npc_name: str) -> NpcDialogueDef | None:
        for dialogue in self.dialogues:
            if dialogue.npc_name == npc_name:
                return dialogue
        return None
