"""Branching dialogue interpreter."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from soulstone.domain.defs import ContinueAt, DialogueStepDef, NpcDialogueDef, ResponseDef
from soulstone.domain.flags import FLAG_CONCLUDED, FLAG_FALSE, FLAG_TRUE
from soulstone.domain.quest_state import QuestState
from soulstone.domain.state import DialogueState, GameState
from soulstone.services.errors import InvalidActionError
from soulstone.services.events import GameEvent
from soulstone.services.inventory_service import InventoryService
from soulstone.services.quest_service import QuestService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DialogueView:
    """Data returned to the presentation layer for rendering."""

    npc_name: str
    speaker: str | None
    message: str
    responses: List[str]


@dataclass(slots=True)
class DialogueEndedEvent(GameEvent):
    npc_name: str


@dataclass(slots=True)
class DialogueResult:
    """Result returned after starting a dialogue or choosing a response."""

    events: List[GameEvent] = field(default_factory=list)
    view: DialogueView | None = None
    ended: bool = False


class DialogueService:
    """Runs an NPC's dialogue steps and applies response side effects."""

    def __init__(self, *, quest_service: QuestService, inventory_service: InventoryService) -> None:
        self._quest_service = quest_service
        self._inventory_service = inventory_service

    def has_dialogue(self, state: GameState, npc_name: str) -> bool:
        room = state.current_room
        return room is not None and room.definition.get_dialogue(npc_name) is not None

    def start_dialogue(self, state: GameState, npc_name: str) -> DialogueResult:
        dialogue = self._find_dialogue(state, npc_name)
        state.dialogue = DialogueState(npc_name=npc_name, step_index=0)
        state.mode = "dialogue"
        logger.info("Dialogue started: %s", npc_name)
        result = DialogueResult()
        result.events.extend(self._quest_service.record_npc_talked(state, npc_name))
        self._enter_step(state, dialogue, 0, result)
        return result

    def get_current_view(self, state: GameState) -> DialogueView:
        dialogue, step = self._current_step(state)
        return self._build_view(dialogue, step)

    def choose_response(self, state: GameState, response_index: int) -> DialogueResult:
        dialogue, step = self._current_step(state)
        if not 0 <= response_index < len(step.responses):
            raise InvalidActionError(f"Invalid response index {response_index}.")
        response = step.responses[response_index]
        result = DialogueResult()
        result.events.extend(self._apply_effects(state, dialogue.npc_name, response))
        if isinstance(response.next_step, ContinueAt):
            self._enter_step(state, dialogue, response.next_step.step_index, result)
        else:
            self._end_dialogue(state, result)
        return result

    def _enter_step(
        self, state: GameState, dialogue: NpcDialogueDef, step_index: int, result: DialogueResult
    ) -> None:
        assert state.dialogue is not None
        state.dialogue.step_index = step_index
        step = dialogue.steps[step_index]
        result.view = self._build_view(dialogue, step)
        if step.is_terminal:
            self._end_dialogue(state, result)

    def _end_dialogue(self, state: GameState, result: DialogueResult) -> None:
        npc_name = state.dialogue.npc_name if state.dialogue else ""
        state.dialogue = None
        state.mode = "explore"
        result.ended = True
        result.events.append(DialogueEndedEvent(npc_name=npc_name))
        logger.info("Dialogue ended: %s", npc_name)

    def _apply_effects(self, state: GameState, npc_name: str, response: ResponseDef) -> List[GameEvent]:
        events: List[GameEvent] = []
        for flag_name, value in (
            (response.set_flag_true, FLAG_TRUE),
            (response.set_flag_false, FLAG_FALSE),
            (response.set_flag_concluded, FLAG_CONCLUDED),
        ):
            if flag_name:
                state.flags.set(flag_name, value)
                events.extend(self._quest_service.record_flag_set(state, flag_name))
        if response.get_item:
            events.extend(self._inventory_service.grant_item(state, response.get_item))
        if response.give_item:
            events.extend(self._inventory_service.give_item(state, response.give_item, npc_name))
        if response.start_quest:
            if self._quest_service.can_accept(state, response.start_quest):
                events.extend(self._quest_service.accept_quest(state, response.start_quest).events)
            else:
                logger.info("Quest '%s' cannot be accepted yet.", response.start_quest)
        if response.complete_quest:
            quest_state = self._quest_service.get_state(state, response.complete_quest)
            if quest_state is QuestState.READY_TO_TURN_IN:
                events.extend(self._quest_service.turn_in_quest(state, response.complete_quest).events)
            else:
                logger.info("Quest '%s' is %s; not turning in.", response.complete_quest, quest_state.value)
        return events

    def _find_dialogue(self, state: GameState, npc_name: str) -> NpcDialogueDef:
        room = state.current_room
        dialogue = room.definition.get_dialogue(npc_name) if room else None
        if dialogue is None:
            raise InvalidActionError(f"No one named '{npc_name}' to talk to here.")
        return dialogue

    def _current_step(self, state: GameState) -> tuple[NpcDialogueDef, DialogueStepDef]:
        if state.dialogue is None:
            raise InvalidActionError("No dialogue in progress.")
        dialogue = self._find_dialogue(state, state.dialogue.npc_name)
        return dialogue, dialogue.steps[state.dialogue.step_index]

    @staticmethod
    def _build_view(dialogue: NpcDialogueDef, step: DialogueStepDef) -> DialogueView:
        return DialogueView(
            npc_name=dialogue.npc_name,
            speaker=step.speaker,
            message=step.message,
            responses=[response.text for response in step.responses],
        )
