"""Room graph navigation: available actions, exits, room entry and room events."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from soulstone.data.errors import RoomNotFoundError
from soulstone.data.repositories import RoomsRepository
from soulstone.domain.combat_models import CombatEncounter, CombatState
from soulstone.domain.defs import ActionDef, ExitDef, RoomDef, RoomEventDef
from soulstone.domain.flags import FLAG_TRUE, FlagStore
from soulstone.domain.gates import resolve_actions, resolve_exits
from soulstone.domain.state import ActiveRoom, GameState
from soulstone.services.dialogue_service import DialogueResult, DialogueService
from soulstone.services.errors import InvalidActionError, TravelBlockedError
from soulstone.services.events import GameEvent
from soulstone.services.inventory_service import InventoryService
from soulstone.services.quest_service import QuestService

logger = logging.getLogger(__name__)


def item_taken_flag(room_id: str, item_id: str) -> str:
    """Return the flag recording that an item was taken from a room."""
    return f"taken_{room_id}_{item_id}"


@dataclass(slots=True)
class ActionView:
    action_id: str
    label: str


@dataclass(slots=True)
class ExitView:
    label: str
    destination_id: str


@dataclass(slots=True)
class RoomView:
    """Snapshot of the current room for rendering."""

    room_id: str
    description: str
    items: List[str]
    actions: List[ActionView]
    exits: List[ExitView]
    combat_actions: List[str] = field(default_factory=list)

    @property
    def in_combat(self) -> bool:
        return bool(self.combat_actions)


@dataclass(slots=True)
class RoomEnteredEvent(GameEvent):
    room_id: str
    narration: str | None = None


@dataclass(slots=True)
class EncounterStartedEvent(GameEvent):
    enemy_name: str
    enemy_health: int


@dataclass(slots=True)
class FlagChangedEvent(GameEvent):
    flag_name: str
    value: str


@dataclass(slots=True)
class HealthRestoredEvent(GameEvent):
    health: int


@dataclass(slots=True)
class TravelResult:
    events: List[GameEvent] = field(default_factory=list)
    room_view: RoomView | None = None


class RoomService:
    """Resolves what is offered in a room and moves the player between rooms."""

    def __init__(
        self,
        *,
        rooms_repo: RoomsRepository,
        quest_service: QuestService,
        inventory_service: InventoryService,
        dialogue_service: DialogueService,
    ) -> None:
        self._rooms_repo = rooms_repo
        self._quest_service = quest_service
        self._inventory_service = inventory_service
        self._dialogue_service = dialogue_service

    def get_available_actions(self, room: RoomDef, flags: FlagStore) -> List[ActionDef]:
        return resolve_actions(room.actions, flags)

    def get_available_exits(self, room: RoomDef, flags: FlagStore) -> List[ExitDef]:
        return resolve_exits(room.exits, flags)

    def enter_room(self, state: GameState, room_id: str, *, narration: str | None = None) -> TravelResult:
        """
        Load a room by id and make it the current room.

        Raises RoomNotFoundError with the game state untouched when the room
        has no content. Room events fire before quest progress is reported, and
        a live encounter puts the game into combat before anything else is offered.
        """
        try:
            definition = self._rooms_repo.get(room_id)
        except RoomNotFoundError:
            logger.error("Room '%s' not found; staying in '%s'.", room_id, state.current_room_id)
            raise
        previous_id = state.current_room_id
        if previous_id is not None and previous_id != room_id:
            state.previous_room_id = previous_id
        active = ActiveRoom(
            definition=definition,
            description=definition.description,
            items=[item for item in definition.items if not state.flags.is_true(item_taken_flag(room_id, item))],
        )
        state.current_room = active
        state.dialogue = None
        state.combat = None
        state.mode = "explore"
        if room_id not in state.visited_rooms:
            state.visited_rooms.append(room_id)
        logger.info("Entered room %s", room_id)

        result = TravelResult()
        result.events.append(RoomEnteredEvent(room_id=room_id, narration=narration))
        state.narrate(narration or "")
        for event in definition.events:
            result.events.extend(self._fire_room_event(state, active, event))
        result.events.extend(self._quest_service.record_room_entered(state, room_id))

        combat = definition.combat
        if combat is not None and not (combat.defeat_flag and state.flags.is_true(combat.defeat_flag)):
            encounter = CombatEncounter.from_definition(combat)
            active.encounter = encounter
            state.combat = CombatState(encounter=encounter)
            state.mode = "combat"
            logger.info("Encounter started: %s", encounter.enemy_name)
            result.events.append(
                EncounterStartedEvent(enemy_name=encounter.enemy_name, enemy_health=encounter.enemy_health)
            )
        result.room_view = self.get_room_view(state)
        return result

    def traverse(self, state: GameState, exit_name: str) -> TravelResult:
        room = self._require_room(state)
        if state.mode != "explore":
            raise InvalidActionError(f"Cannot travel while in {state.mode}.")
        for exit_def in self.get_available_exits(room.definition, state.flags):
            if exit_def.exit_name == exit_name:
                return self.enter_room(state, exit_def.leads_to)
        if any(exit_def.exit_name == exit_name for exit_def in room.definition.exits):
            raise TravelBlockedError(f"The way '{exit_name}' is closed.")
        raise InvalidActionError(f"No exit named '{exit_name}'.")

    def perform_action(self, state: GameState, action_id: str) -> TravelResult | DialogueResult:
        """Trigger an offered action: an exit of the same name or the dialogue it names."""
        room = self._require_room(state)
        if state.mode != "explore":
            raise InvalidActionError(f"Cannot act while in {state.mode}.")
        offered = [action.action_id for action in self.get_available_actions(room.definition, state.flags)]
        if action_id not in offered:
            raise InvalidActionError(f"Action '{action_id}' is not available here.")
        if any(exit_def.exit_name == action_id for exit_def in room.definition.exits):
            return self.traverse(state, action_id)
        if self._dialogue_service.has_dialogue(state, action_id):
            return self._dialogue_service.start_dialogue(state, action_id)
        logger.info("Action '%s' in room %s has no effect.", action_id, room.room_id)
        return TravelResult(room_view=self.get_room_view(state))

    def take_item(self, state: GameState, item_id: str) -> List[GameEvent]:
        room = self._require_room(state)
        if state.mode != "explore" or item_id not in room.items:
            raise InvalidActionError(f"There is no '{item_id}' to take here.")
        room.items.remove(item_id)
        state.flags.set(item_taken_flag(room.room_id, item_id), FLAG_TRUE)
        return self._inventory_service.grant_item(state, item_id)

    def get_room_view(self, state: GameState) -> RoomView:
        room = self._require_room(state)
        if state.mode == "combat" and state.combat is not None:
            return RoomView(
                room_id=room.room_id,
                description=room.description,
                items=list(room.items),
                actions=[],
                exits=[],
                combat_actions=list(state.combat.encounter.actions),
            )
        return RoomView(
            room_id=room.room_id,
            description=room.description,
            items=list(room.items),
            actions=self._action_views(self.get_available_actions(room.definition, state.flags)),
            exits=[
                ExitView(label=exit_def.exit_name, destination_id=exit_def.leads_to)
                for exit_def in self.get_available_exits(room.definition, state.flags)
            ],
        )

    def _fire_room_event(self, state: GameState, room: ActiveRoom, event: RoomEventDef) -> List[GameEvent]:
        if event.event_type == "set_flag":
            assert event.flag_name is not None and event.value is not None
            state.flags.set(event.flag_name, event.value)
            events: List[GameEvent] = [FlagChangedEvent(flag_name=event.flag_name, value=event.value)]
            events.extend(self._quest_service.record_flag_set(state, event.flag_name))
            return events
        if event.event_type == "restore_health":
            state.player.health = state.player.max_health
            return [HealthRestoredEvent(health=state.player.health)]
        assert event.item_id is not None
        taken_flag = item_taken_flag(room.room_id, event.item_id)
        if state.flags.is_true(taken_flag):
            return []
        if event.event_type == "add_item":
            if event.item_id not in room.items:
                room.items.append(event.item_id)
            return []
        state.flags.set(taken_flag, FLAG_TRUE)
        return self._inventory_service.grant_item(state, event.item_id)

    @staticmethod
    def _action_views(actions: Sequence[ActionDef]) -> List[ActionView]:
        return [ActionView(action_id=action.action_id, label=action.label) for action in actions]

    @staticmethod
    def _require_room(state: GameState) -> ActiveRoom:
        if state.current_room is None:
            raise InvalidActionError("No room is loaded.")
        return state.current_room
