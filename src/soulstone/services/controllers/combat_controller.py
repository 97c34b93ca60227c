"""UI-agnostic combat controller that separates turn resolution from room transitions."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from soulstone.core.types import CombatActionType
from soulstone.data.errors import RoomNotFoundError
from soulstone.domain.state import GameState
from soulstone.services.combat_service import (
    CombatService,
    CombatView,
    PlayerDefeatedEvent,
    PlayerFledEvent,
)
from soulstone.services.errors import InvalidActionError
from soulstone.services.events import GameEvent
from soulstone.services.room_service import RoomService

logger = logging.getLogger(__name__)

FLEE_NARRATION = "You cowardly flee from the Battle!"
RESPAWN_NARRATION = "You wake up from odd dream."


@dataclass(slots=True)
class CombatAction:
    """Represents a structured combat decision from the player."""

    action_type: CombatActionType
    item_id: str | None = None


@dataclass(slots=True)
class CombatTurnResult:
    events: List[GameEvent] = field(default_factory=list)
    combat_over: bool = False


class CombatController:
    """
    UI-agnostic controller for combat progression.

    Wraps CombatService for the turn itself and RoomService for where the
    player ends up once combat is over: the previous room after fleeing, the
    respawn room after being defeated.
    """

    def __init__(self, combat_service: CombatService, room_service: RoomService, *, respawn_room: str) -> None:
        self._service = combat_service
        self._room_service = room_service
        self._respawn_room = respawn_room

    def get_combat_view(self, state: GameState) -> CombatView:
        return self._service.get_combat_view(state)

    def get_available_actions(self, state: GameState) -> List[str]:
        if state.combat is None or state.combat.phase != "player_turn":
            return []
        return list(state.combat.encounter.actions)

    def apply_player_action(self, state: GameState, action: CombatAction) -> CombatTurnResult:
        """Resolve one player action plus the enemy reply, then any room transition."""
        if action.action_type == "Attack":
            events = self._service.attack(state)
        elif action.action_type == "Use Item":
            if not action.item_id:
                raise InvalidActionError("Use Item requires item_id.")
            events = self._service.use_item(state, action.item_id)
        elif action.action_type == "Flee":
            events = self._service.flee(state)
        else:
            raise InvalidActionError(f"Unknown combat action: {action.action_type}")

        result = CombatTurnResult(events=list(events), combat_over=state.combat is None)
        if any(isinstance(event, PlayerFledEvent) for event in events):
            destination = state.previous_room_id or self._respawn_room
            result.events.extend(self._move_to(state, destination, FLEE_NARRATION))
        elif any(isinstance(event, PlayerDefeatedEvent) for event in events):
            result.events.extend(self._move_to(state, self._respawn_room, RESPAWN_NARRATION))
        return result

    def _move_to(self, state: GameState, room_id: str, narration: str) -> List[GameEvent]:
        try:
            return self._room_service.enter_room(state, room_id, narration=narration).events
        except RoomNotFoundError:
            if room_id == self._respawn_room:
                raise
            logger.error("Cannot return to '%s'; respawning instead.", room_id)
            return self._room_service.enter_room(state, self._respawn_room, narration=narration).events
