"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from soulstone.core.types import GameMode
from soulstone.domain.combat_models import CombatEncounter, CombatState
from soulstone.domain.defs import RoomDef
from soulstone.domain.flags import FlagStore
from soulstone.domain.inventory import Inventory
from soulstone.domain.quest_state import QuestProgress


@dataclass(slots=True)
class PlayerStats:
    name: str = "Wanderer"
    health: int = 100
    max_health: int = 100
    gold: int = 0
    experience_points: int = 0
    uses_enhanced_stats: bool = False


@dataclass(slots=True)
class ActiveRoom:
    """A loaded room: its definition plus the parts play can change while inside it."""

    definition: RoomDef
    description: str
    items: List[str]
    encounter: CombatEncounter | None = None

    @property
    def room_id(self) -> str:
        return self.definition.room_id


@dataclass(slots=True)
class DialogueState:
    npc_name: str
    step_index: int = 0


@dataclass
class GameState:
    """Everything one play session mutates."""

    player: PlayerStats = field(default_factory=PlayerStats)
    flags: FlagStore = field(default_factory=FlagStore)
    inventory: Inventory = field(default_factory=Inventory)
    mode: GameMode = "explore"
    current_room: ActiveRoom | None = None
    previous_room_id: str | None = None
    dialogue: DialogueState | None = None
    combat: CombatState | None = None
    quests: Dict[str, QuestProgress] = field(default_factory=dict)
    visited_rooms: List[str] = field(default_factory=list)
    pending_narration: List[str] = field(default_factory=list)

    @property
    def current_room_id(self) -> str | None:
        return self.current_room.room_id if self.current_room else None

    def narrate(self, text: str) -> None:
        if text:
            self.pending_narration.append(text)

    def drain_narration(self) -> List[str]:
        lines = list(self.pending_narration)
        self.pending_narration.clear()
        return lines
