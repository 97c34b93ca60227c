"""Turn-based combat resolution for room encounters."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from soulstone.core.types import CombatPhase
from soulstone.domain.combat_models import CombatState
from soulstone.domain.flags import DEAD_FLAG, FLAG_TRUE
from soulstone.domain.item_effects import apply_item_effect
from soulstone.domain.state import GameState
from soulstone.services.errors import InvalidActionError
from soulstone.services.events import GameEvent
from soulstone.services.inventory_service import InventoryService
from soulstone.services.quest_service import QuestService

logger = logging.getLogger(__name__)

VICTORY_DESCRIPTION = "You defeat the enemy!"


@dataclass(slots=True)
class CombatEvent(GameEvent):
    """Base class for combat events."""


@dataclass(slots=True)
class AttackResolvedEvent(CombatEvent):
    weapon_name: str
    message: str
    damage: int
    enemy_health: int


@dataclass(slots=True)
class ItemUsedEvent(CombatEvent):
    item_id: str
    item_name: str
    message: str
    player_health: int
    enemy_health: int


@dataclass(slots=True)
class EnemyAttackEvent(CombatEvent):
    enemy_name: str
    damage: int
    player_health: int


@dataclass(slots=True)
class EnemyDefeatedEvent(CombatEvent):
    enemy_id: str
    enemy_name: str


@dataclass(slots=True)
class PlayerFledEvent(CombatEvent):
    enemy_name: str


@dataclass(slots=True)
class PlayerDefeatedEvent(CombatEvent):
    enemy_name: str


@dataclass(slots=True)
class CombatView:
    enemy_name: str
    enemy_health: int
    player_health: int
    phase: CombatPhase
    actions: List[str]
    usable_items: List[tuple[str, str, int]]  # id, name, qty


class CombatService:
    """Applies player combat actions and the enemy's reply to the active encounter."""

    def __init__(
        self,
        *,
        inventory_service: InventoryService,
        quest_service: QuestService,
        unarmed_damage: int = 1,
    ) -> None:
        self._inventory_service = inventory_service
        self._quest_service = quest_service
        self._unarmed_damage = unarmed_damage

    def get_combat_view(self, state: GameState) -> CombatView:
        combat = self._require_combat(state)
        return CombatView(
            enemy_name=combat.encounter.enemy_name,
            enemy_health=combat.encounter.enemy_health,
            player_health=state.player.health,
            phase=combat.phase,
            actions=list(combat.encounter.actions),
            usable_items=[
                (item_id, self._inventory_service.item_name(item_id), quantity)
                for item_id, quantity in sorted(state.inventory.items.items())
            ],
        )

    def attack(self, state: GameState) -> List[GameEvent]:
        combat = self._require_player_turn(state, "Attack")
        weapon = self._inventory_service.main_hand_item(state)
        damage = weapon.effect_amount if weapon else self._unarmed_damage
        combat.encounter.enemy_health -= damage
        events: List[GameEvent] = [
            AttackResolvedEvent(
                weapon_name=weapon.name if weapon else "bare hands",
                message=weapon.usage_success if weapon else "You strike with your bare hands.",
                damage=damage,
                enemy_health=combat.encounter.enemy_health,
            )
        ]
        logger.debug("Attack for %s; enemy health %s", damage, combat.encounter.enemy_health)
        events.extend(self._resolve_player_action(state, combat))
        return events

    def use_item(self, state: GameState, item_id: str) -> List[GameEvent]:
        combat = self._require_player_turn(state, "Use Item")
        if not state.inventory.has_item(item_id):
            raise InvalidActionError(f"You do not have '{item_id}'.")
        item = self._inventory_service.find_item(item_id)
        if item is None:
            raise InvalidActionError(f"'{item_id}' cannot be used.")
        self._inventory_service.consume_item(state, item_id)
        effect = apply_item_effect(state.player, item, encounter=combat.encounter)
        message = item.usage_success if effect.had_effect else item.usage_fail
        events: List[GameEvent] = [
            ItemUsedEvent(
                item_id=item_id,
                item_name=item.name,
                message=message,
                player_health=state.player.health,
                enemy_health=combat.encounter.enemy_health,
            )
        ]
        events.extend(self._quest_service.record_item_used(state, item_id))
        events.extend(self._resolve_player_action(state, combat))
        return events

    def flee(self, state: GameState) -> List[GameEvent]:
        combat = self._require_player_turn(state, "Flee")
        combat.phase = "fled"
        self._end_combat(state)
        logger.info("Fled from %s", combat.encounter.enemy_name)
        return [PlayerFledEvent(enemy_name=combat.encounter.enemy_name)]

    def _resolve_player_action(self, state: GameState, combat: CombatState) -> List[GameEvent]:
        if not combat.encounter.is_alive:
            return self._victory(state, combat)
        combat.phase = "enemy_turn"
        return self._enemy_turn(state, combat)

    def _enemy_turn(self, state: GameState, combat: CombatState) -> List[GameEvent]:
        encounter = combat.encounter
        state.player.health -= encounter.enemy_damage
        events: List[GameEvent] = [
            EnemyAttackEvent(
                enemy_name=encounter.enemy_name,
                damage=encounter.enemy_damage,
                player_health=max(0, state.player.health),
            )
        ]
        if state.player.health <= 0:
            state.player.health = 0
            state.flags.set(DEAD_FLAG, FLAG_TRUE)
            combat.phase = "player_defeated"
            self._end_combat(state)
            logger.info("Player defeated by %s", encounter.enemy_name)
            events.append(PlayerDefeatedEvent(enemy_name=encounter.enemy_name))
            return events
        combat.phase = "player_turn"
        combat.turn += 1
        return events

    def _victory(self, state: GameState, combat: CombatState) -> List[GameEvent]:
        encounter = combat.encounter
        combat.phase = "victory"
        room = state.current_room
        if room is not None:
            room.description = VICTORY_DESCRIPTION
        if encounter.defeat_flag:
            state.flags.set(encounter.defeat_flag, FLAG_TRUE)
        self._end_combat(state)
        logger.info("Enemy defeated: %s", encounter.enemy_name)
        events: List[GameEvent] = [EnemyDefeatedEvent(enemy_id=encounter.enemy_id, enemy_name=encounter.enemy_name)]
        events.extend(self._quest_service.record_enemy_defeated(state, encounter.enemy_id))
        return events

    @staticmethod
    def _end_combat(state: GameState) -> None:
        if state.current_room is not None:
            state.current_room.encounter = None
        state.combat = None
        state.mode = "explore"

    @staticmethod
    def _require_combat(state: GameState) -> CombatState:
        if state.combat is None:
            raise InvalidActionError("No combat in progress.")
        return state.combat

    def _require_player_turn(self, state: GameState, action: str) -> CombatState:
        combat = self._require_combat(state)
        if combat.phase != "player_turn":
            raise InvalidActionError(f"Cannot {action} during {combat.phase}.")
        if action not in combat.encounter.actions:
            raise InvalidActionError(f"'{action}' is not offered in this fight.")
        return combat
