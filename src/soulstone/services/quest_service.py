"""Quest system orchestration and progress tracking."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from soulstone.data.errors import QuestNotFoundError
from soulstone.data.repositories import QuestsRepository
from soulstone.domain.defs import ObjectiveDef, ObjectiveType, QuestDef
from soulstone.domain.defs.quest_def import SINGLE_SHOT_OBJECTIVES
from soulstone.domain.flags import (
    FLAG_ACTIVE,
    FLAG_CONCLUDED,
    FLAG_FALSE,
    FLAG_TRUE,
    location_flag,
)
from soulstone.domain.quest_state import ObjectiveProgress, QuestProgress, QuestState
from soulstone.domain.state import GameState
from soulstone.services.errors import QuestStateError
from soulstone.services.events import GameEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuestEvent(GameEvent):
    """Base class for quest events."""


@dataclass(slots=True)
class QuestAcceptedEvent(QuestEvent):
    quest_id: str
    quest_name: str


@dataclass(slots=True)
class ObjectiveProgressEvent(QuestEvent):
    quest_id: str
    objective_id: str
    description: str
    current: int
    target: int
    completed: bool


@dataclass(slots=True)
class QuestReadyEvent(QuestEvent):
    quest_id: str
    quest_name: str


@dataclass(slots=True)
class QuestCompletedEvent(QuestEvent):
    quest_id: str
    quest_name: str
    gold: int
    experience_points: int
    item_ids: List[str]


@dataclass(slots=True)
class QuestFailedEvent(QuestEvent):
    quest_id: str
    quest_name: str


@dataclass(slots=True)
class LocationRevealedEvent(QuestEvent):
    location_id: str


@dataclass(slots=True)
class QuestUpdate:
    quest_id: str
    quest_name: str
    accepted: bool = False
    ready: bool = False
    turned_in: bool = False
    failed: bool = False
    events: List[QuestEvent] = field(default_factory=list)


@dataclass(slots=True)
class QuestObjectiveView:
    description: str
    progress_text: str
    current: int
    target: int
    completed: bool
    is_current: bool
    is_optional: bool


@dataclass(slots=True)
class QuestStatusView:
    quest_id: str
    name: str
    description: str
    quest_type: str
    state: QuestState
    objectives: List[QuestObjectiveView]


@dataclass(slots=True)
class QuestJournalView:
    active: List[QuestStatusView]
    ready_to_turn_in: List[QuestStatusView]
    completed: List[str]
    failed: List[str]


def objective_progress_text(objective: ObjectiveDef, progress: ObjectiveProgress) -> str:
    """Return "(Complete)"/"" for visit and talk objectives, "(current/target)" otherwise."""
    if objective.objective_type in SINGLE_SHOT_OBJECTIVES:
        return "(Complete)" if progress.is_complete else ""
    return f"({progress.current_count}/{progress.target_count})"


class QuestService:
    """Centralized quest logic (accept, progress, advance, turn-in)."""

    def __init__(self, *, quests_repo: QuestsRepository) -> None:
        self._quests_repo = quests_repo

    def get_definition(self, quest_id: str) -> QuestDef:
        return self._quests_repo.get(quest_id)

    def get_state(self, state: GameState, quest_id: str) -> QuestState:
        progress = state.quests.get(quest_id)
        return progress.state if progress else QuestState.NOT_STARTED

    def missing_prerequisites(self, state: GameState, quest: QuestDef) -> List[str]:
        """Return every unmet prerequisite quest id or flag name."""
        missing: List[str] = []
        for prereq_id in quest.prerequisite_quests:
            if state.flags.get(prereq_id) != FLAG_CONCLUDED:
                missing.append(prereq_id)
        for flag_name in quest.prerequisite_flags:
            if not state.flags.is_true(flag_name):
                missing.append(flag_name)
        return missing

    def can_accept(self, state: GameState, quest_id: str) -> bool:
        try:
            quest = self._quests_repo.get(quest_id)
        except QuestNotFoundError:
            logger.error("Cannot evaluate unknown quest '%s'.", quest_id)
            return False
        if quest_id in state.quests:
            return False
        return not self.missing_prerequisites(state, quest)

    def accept_quest(self, state: GameState, quest_id: str) -> QuestUpdate:
        quest = self._quests_repo.get(quest_id)
        if quest_id in state.quests:
            raise QuestStateError(f"Quest '{quest_id}' has already been started.")
        missing = self.missing_prerequisites(state, quest)
        if missing:
            raise QuestStateError(
                f"Quest '{quest_id}' prerequisites are not met: {', '.join(missing)}."
            )
        progress = QuestProgress(
            quest_id=quest_id,
            objectives=[ObjectiveProgress(target_count=objective.target_count) for objective in quest.objectives],
        )
        state.quests[quest_id] = progress
        state.flags.set(quest_id, FLAG_ACTIVE)
        logger.info("Quest accepted: %s", quest_id)
        update = QuestUpdate(quest_id=quest_id, quest_name=quest.name, accepted=True)
        update.events.append(QuestAcceptedEvent(quest_id=quest_id, quest_name=quest.name))
        update.events.extend(self._reveal_locations(state, quest.reveals_on_accept))
        current_room_id = state.current_room_id
        if current_room_id:
            update.events.extend(
                self._progress_quest(state, quest, progress, ObjectiveType.GO_TO_ROOM, current_room_id, 1)
            )
        update.events.extend(self._auto_advance(state, quest, progress))
        update.ready = progress.state is QuestState.READY_TO_TURN_IN
        return update

    def report_progress(
        self,
        state: GameState,
        objective_type: ObjectiveType,
        target_id: str,
        amount: int = 1,
    ) -> List[QuestEvent]:
        """Apply progress to every active quest whose eligible objectives match."""
        events: List[QuestEvent] = []
        for quest_id in sorted(state.quests.keys()):
            progress = state.quests[quest_id]
            if progress.state is not QuestState.ACTIVE:
                continue
            quest = self._quests_repo.get(quest_id)
            events.extend(self._progress_quest(state, quest, progress, objective_type, target_id, amount))
            events.extend(self._auto_advance(state, quest, progress))
        return events

    def advance(self, state: GameState, quest_id: str) -> bool:
        """
        Move past the current objective when it is complete or optional.

        Returns True when the index moved or the quest became ready to turn in.
        """
        progress = state.quests.get(quest_id)
        if progress is None or progress.state is not QuestState.ACTIVE:
            return False
        quest = self._quests_repo.get(quest_id)
        index = progress.current_objective_index
        if not self._is_passable(quest, progress, index):
            return False
        if index + 1 < len(quest.objectives):
            progress.current_objective_index = index + 1
        else:
            progress.state = QuestState.READY_TO_TURN_IN
            logger.info("Quest ready to turn in: %s", quest_id)
        return True

    def turn_in_quest(self, state: GameState, quest_id: str) -> QuestUpdate:
        quest = self._quests_repo.get(quest_id)
        progress = state.quests.get(quest_id)
        if progress is None or progress.state is not QuestState.READY_TO_TURN_IN:
            raise QuestStateError(f"Quest '{quest_id}' is not ready to turn in.")
        update = QuestUpdate(quest_id=quest_id, quest_name=quest.name, turned_in=True)
        self._apply_rewards(state, quest)
        update.events.extend(self._reveal_locations(state, quest.reveals_on_complete))
        state.flags.set(quest_id, FLAG_CONCLUDED)
        progress.state = QuestState.COMPLETED
        logger.info("Quest completed: %s", quest_id)
        update.events.append(
            QuestCompletedEvent(
                quest_id=quest_id,
                quest_name=quest.name,
                gold=quest.rewards.gold,
                experience_points=quest.rewards.experience_points if state.player.uses_enhanced_stats else 0,
                item_ids=list(quest.rewards.item_ids),
            )
        )
        return update

    def fail_quest(self, state: GameState, quest_id: str) -> QuestUpdate:
        quest = self._quests_repo.get(quest_id)
        progress = state.quests.get(quest_id)
        if progress is None or progress.state not in (QuestState.ACTIVE, QuestState.READY_TO_TURN_IN):
            raise QuestStateError(f"Quest '{quest_id}' is not in progress.")
        progress.state = QuestState.FAILED
        state.flags.set(quest_id, FLAG_FALSE)
        logger.info("Quest failed: %s", quest_id)
        update = QuestUpdate(quest_id=quest_id, quest_name=quest.name, failed=True)
        update.events.append(QuestFailedEvent(quest_id=quest_id, quest_name=quest.name))
        return update

    def record_room_entered(self, state: GameState, room_id: str) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.GO_TO_ROOM, room_id)

    def record_npc_talked(self, state: GameState, npc_name: str) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.TALK_TO_NPC, npc_name)

    def record_enemy_defeated(self, state: GameState, enemy_id: str) -> List[QuestEvent]:
        events = self.report_progress(state, ObjectiveType.DEFEAT_ENEMY, enemy_id)
        events.extend(self.report_progress(state, ObjectiveType.DEFEAT_COUNT, enemy_id))
        return events

    def record_item_collected(self, state: GameState, item_id: str, quantity: int = 1) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.COLLECT_ITEM, item_id, quantity)

    def record_item_delivered(self, state: GameState, item_id: str, npc_name: str) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.DELIVER_ITEM, f"{item_id}_{npc_name}")

    def record_flag_set(self, state: GameState, flag_name: str) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.SET_FLAG, flag_name)

    def record_item_used(self, state: GameState, item_id: str) -> List[QuestEvent]:
        return self.report_progress(state, ObjectiveType.USE_ITEM, item_id)

    def available_quests_at_location(self, state: GameState, location_id: str) -> List[QuestDef]:
        return [
            quest
            for quest in self._quests_repo.all()
            if quest.quest_giver_location == location_id and self.can_accept(state, quest.quest_id)
        ]

    def build_journal_view(self, state: GameState) -> QuestJournalView:
        active: List[QuestStatusView] = []
        ready: List[QuestStatusView] = []
        completed: List[str] = []
        failed: List[str] = []
        for quest_id in sorted(state.quests.keys()):
            progress = state.quests[quest_id]
            quest = self._quests_repo.get(quest_id)
            if progress.state is QuestState.ACTIVE:
                active.append(self._build_status_view(quest, progress))
            elif progress.state is QuestState.READY_TO_TURN_IN:
                ready.append(self._build_status_view(quest, progress))
            elif progress.state is QuestState.COMPLETED:
                completed.append(quest.name)
            elif progress.state is QuestState.FAILED:
                failed.append(quest.name)
        return QuestJournalView(active=active, ready_to_turn_in=ready, completed=completed, failed=failed)

    def _build_status_view(self, quest: QuestDef, progress: QuestProgress) -> QuestStatusView:
        objectives: List[QuestObjectiveView] = []
        for index, objective in enumerate(quest.objectives):
            entry = progress.objectives[index]
            objectives.append(
                QuestObjectiveView(
                    description=objective.description,
                    progress_text=objective_progress_text(objective, entry),
                    current=entry.current_count,
                    target=entry.target_count,
                    completed=entry.is_complete,
                    is_current=progress.state is QuestState.ACTIVE and index == progress.current_objective_index,
                    is_optional=objective.is_optional,
                )
            )
        return QuestStatusView(
            quest_id=quest.quest_id,
            name=quest.name,
            description=quest.description,
            quest_type=quest.quest_type.value,
            state=progress.state,
            objectives=objectives,
        )

    def _progress_quest(
        self,
        state: GameState,
        quest: QuestDef,
        progress: QuestProgress,
        objective_type: ObjectiveType,
        target_id: str,
        amount: int,
    ) -> List[QuestEvent]:
        events: List[QuestEvent] = []
        for index, objective in enumerate(quest.objectives):
            if objective.objective_type != objective_type or objective.target_id != target_id:
                continue
            eligible = (
                index == progress.current_objective_index
                or objective.is_parallel
                or objective.is_optional
            )
            if not eligible:
                continue
            entry = progress.objectives[index]
            if not entry.add_progress(amount):
                continue
            logger.debug(
                "Quest %s objective %s: %s/%s",
                quest.quest_id,
                objective.objective_id,
                entry.current_count,
                entry.target_count,
            )
            events.append(
                ObjectiveProgressEvent(
                    quest_id=quest.quest_id,
                    objective_id=objective.objective_id,
                    description=objective.description,
                    current=entry.current_count,
                    target=entry.target_count,
                    completed=entry.is_complete,
                )
            )
        return events

    def _auto_advance(self, state: GameState, quest: QuestDef, progress: QuestProgress) -> List[QuestEvent]:
        while progress.state is QuestState.ACTIVE and self.advance(state, quest.quest_id):
            if progress.state is QuestState.READY_TO_TURN_IN:
                return [QuestReadyEvent(quest_id=quest.quest_id, quest_name=quest.name)]
        return []

    @staticmethod
    def _is_passable(quest: QuestDef, progress: QuestProgress, index: int) -> bool:
        if index >= len(quest.objectives):
            return False
        return progress.objectives[index].is_complete or quest.objectives[index].is_optional

    def _apply_rewards(self, state: GameState, quest: QuestDef) -> None:
        reward = quest.rewards
        state.player.gold += reward.gold
        if state.player.uses_enhanced_stats:
            state.player.experience_points += reward.experience_points
        for item_id in reward.item_ids:
            state.inventory.add_item(item_id)
        for flag in reward.flags_to_set:
            state.flags.set(flag.flag_name, flag.flag_value)

    def _reveal_locations(self, state: GameState, location_ids: tuple[str, ...]) -> List[QuestEvent]:
        events: List[QuestEvent] = []
        for location_id in location_ids:
            flag_name = location_flag(location_id)
            if state.flags.is_true(flag_name):
                continue
            state.flags.set(flag_name, FLAG_TRUE)
            events.append(LocationRevealedEvent(location_id=location_id))
        return events
