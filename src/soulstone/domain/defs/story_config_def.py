"""Story configuration structures used to start a new game."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True)
class StoryConfigDef:
    story_id: str
    name: str
    starting_room: str
    respawn_room: str
    starting_health: int = 100
    starting_gold: int = 0
    starting_items: Tuple[str, ...] = ()
    starting_equipment: Dict[str, str] = field(default_factory=dict)
    starting_flags: Dict[str, str] = field(default_factory=dict)
    use_enhanced_stats: bool = False
    default_map_id: str | None = None
    unarmed_damage: int = 1
