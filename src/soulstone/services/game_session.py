"""Session facade that wires the services around one game state."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from soulstone.core.types import CombatActionType, GameMode
from soulstone.data.errors import ContentNotFoundError, DataError
from soulstone.domain.defs import StoryConfigDef
from soulstone.domain.flags import FlagStore
from soulstone.domain.state import GameState, PlayerStats
from soulstone.services.chapter_service import ChapterService
from soulstone.services.combat_service import CombatView
from soulstone.services.controllers import CombatAction, CombatController
from soulstone.services.dialogue_service import DialogueResult, DialogueService, DialogueView
from soulstone.services.errors import InvalidActionError, QuestStateError
from soulstone.services.events import GameEvent
from soulstone.services.inventory_service import InventoryService, InventorySummary
from soulstone.services.map_service import MapService, MapView
from soulstone.services.quest_service import QuestJournalView, QuestService
from soulstone.services.room_service import RoomService, RoomView

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ActionResult:
    """Outcome of one player command; `error` is set when the command was a no-op."""

    events: List[GameEvent] = field(default_factory=list)
    narration: List[str] = field(default_factory=list)
    dialogue: DialogueView | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class SessionView:
    mode: GameMode
    player: PlayerStats
    room: RoomView | None
    dialogue: DialogueView | None
    combat: CombatView | None


class GameSession:
    """Single entry point for a renderer: commands in, snapshots and events out."""

    def __init__(
        self,
        *,
        story_config: StoryConfigDef,
        room_service: RoomService,
        dialogue_service: DialogueService,
        quest_service: QuestService,
        inventory_service: InventoryService,
        map_service: MapService,
        combat_controller: CombatController,
        chapter_service: ChapterService | None = None,
    ) -> None:
        self._story_config = story_config
        self._room_service = room_service
        self._dialogue_service = dialogue_service
        self._quest_service = quest_service
        self._inventory_service = inventory_service
        self._map_service = map_service
        self._combat_controller = combat_controller
        self._chapter_service = chapter_service
        self._state: GameState | None = None

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("No game in progress; call start_new_game first.")
        return self._state

    @property
    def story_config(self) -> StoryConfigDef:
        return self._story_config

    def start_new_game(self, player_name: str | None = None) -> ActionResult:
        """Create a fresh state from the story configuration and enter the starting room."""
        config = self._story_config
        state = GameState(
            player=PlayerStats(
                name=player_name or PlayerStats().name,
                health=config.starting_health,
                max_health=config.starting_health,
                gold=config.starting_gold,
                uses_enhanced_stats=config.use_enhanced_stats,
            ),
            flags=FlagStore(config.starting_flags),
        )
        for item_id in config.starting_items:
            state.inventory.add_item(item_id)
        for slot, item_id in config.starting_equipment.items():
            state.inventory.equipped[slot] = item_id
        travel = self._room_service.enter_room(state, config.starting_room)
        self._state = state
        logger.info("New game started in %s", config.starting_room)
        return self._finish(ActionResult(events=travel.events))

    def get_view(self) -> SessionView:
        state = self.state
        room = self._room_service.get_room_view(state) if state.current_room else None
        dialogue = self._dialogue_service.get_current_view(state) if state.dialogue else None
        combat = self._combat_controller.get_combat_view(state) if state.combat else None
        return SessionView(mode=state.mode, player=state.player, room=room, dialogue=dialogue, combat=combat)

    def perform_action(self, action_id: str) -> ActionResult:
        def run(result: ActionResult) -> None:
            outcome = self._room_service.perform_action(self.state, action_id)
            result.events.extend(outcome.events)
            if isinstance(outcome, DialogueResult):
                result.dialogue = outcome.view

        return self._run(run)

    def travel(self, exit_name: str) -> ActionResult:
        return self._run(lambda result: result.events.extend(self._room_service.traverse(self.state, exit_name).events))

    def choose_response(self, response_index: int) -> ActionResult:
        def run(result: ActionResult) -> None:
            outcome = self._dialogue_service.choose_response(self.state, response_index)
            result.events.extend(outcome.events)
            result.dialogue = outcome.view

        return self._run(run)

    def combat_action(self, action_type: CombatActionType, item_id: str | None = None) -> ActionResult:
        action = CombatAction(action_type=action_type, item_id=item_id)
        return self._run(
            lambda result: result.events.extend(
                self._combat_controller.apply_player_action(self.state, action).events
            )
        )

    def take_item(self, item_id: str) -> ActionResult:
        return self._run(lambda result: result.events.extend(self._room_service.take_item(self.state, item_id)))

    def equip_item(self, item_id: str) -> ActionResult:
        return self._run(
            lambda result: result.events.extend(self._inventory_service.equip_item(self.state, item_id))
        )

    def accept_quest(self, quest_id: str) -> ActionResult:
        return self._run(
            lambda result: result.events.extend(self._quest_service.accept_quest(self.state, quest_id).events)
        )

    def turn_in_quest(self, quest_id: str) -> ActionResult:
        return self._run(
            lambda result: result.events.extend(self._quest_service.turn_in_quest(self.state, quest_id).events)
        )

    def get_journal(self) -> QuestJournalView:
        return self._quest_service.build_journal_view(self.state)

    def get_inventory(self) -> InventorySummary:
        return self._inventory_service.build_summary(self.state)

    def get_map_view(self, map_id: str | None = None) -> MapView | None:
        target = map_id or self._story_config.default_map_id
        if not target:
            return None
        try:
            return self._map_service.build_map_view(self.state, target)
        except ContentNotFoundError as exc:
            logger.error("%s", exc)
            return None

    def current_chapter_name(self) -> str | None:
        if self._chapter_service is None:
            return None
        chapter = self._chapter_service.current_chapter(self.state.flags)
        return chapter.name if chapter else None

    def _run(self, command: Callable[[ActionResult], None]) -> ActionResult:
        result = ActionResult()
        try:
            command(result)
        except ContentNotFoundError as exc:
            logger.error("Content missing: %s", exc)
            result.error = str(exc)
        except DataError as exc:
            logger.error("Content failed to load: %s", exc)
            result.error = f"Broken game content: {exc}"
        except (InvalidActionError, QuestStateError) as exc:
            logger.info("Rejected command: %s", exc)
            result.error = str(exc)
        return self._finish(result)

    def _finish(self, result: ActionResult) -> ActionResult:
        if self._state is not None:
            result.narration.extend(self._state.drain_narration())
        return result
