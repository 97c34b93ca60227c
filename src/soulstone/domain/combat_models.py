"""Runtime combat encounter models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from soulstone.core.types import CombatPhase
from soulstone.domain.defs import CombatDef

TERMINAL_PHASES: frozenset[str] = frozenset({"victory", "fled", "player_defeated"})


@dataclass(slots=True)
class CombatEncounter:
    """Mutable enemy state for the encounter owned by the active room."""

    enemy_id: str
    enemy_name: str
    enemy_health: int
    enemy_damage: int
    actions: Tuple[str, ...]
    defeat_flag: str | None = None

    @classmethod
    def from_definition(cls, definition: CombatDef) -> "CombatEncounter":
        return cls(
            enemy_id=definition.enemy_id,
            enemy_name=definition.enemy_name,
            enemy_health=definition.enemy_health,
            enemy_damage=definition.enemy_damage,
            actions=definition.combat_actions,
            defeat_flag=definition.defeat_flag,
        )

    @property
    def is_alive(self) -> bool:
        return self.enemy_health > 0


@dataclass(slots=True)
class CombatState:
    encounter: CombatEncounter
    phase: CombatPhase = "player_turn"
    turn: int = 1

    @property
    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES
