"""Repository for the story configuration used to start a new game."""
from __future__ import annotations

from typing import Dict

from soulstone.data.errors import DataValidationError
from soulstone.data.repositories.base import RepositoryBase
from soulstone.domain.defs import StoryConfigDef

_STORY_FIELDS = {
    "story_id",
    "name",
    "starting_room",
    "respawn_room",
    "starting_health",
    "starting_gold",
    "starting_items",
    "starting_equipment",
    "starting_flags",
    "use_enhanced_stats",
    "default_map_id",
    "unarmed_damage",
}


class StoryConfigRepository(RepositoryBase[StoryConfigDef]):
    """Loads story.json, a single story configuration object."""

    def __init__(self, base_path=None) -> None:
        super().__init__("story.json", base_path)

    def get_config(self) -> StoryConfigDef:
        return self.all()[0]

    def _build(self, raw: dict[str, object]) -> Dict[str, StoryConfigDef]:
        context = "story.json"
        self._assert_known_fields(raw, _STORY_FIELDS, context)
        story_id = self._require_str(raw.get("story_id"), f"{context} story_id")
        starting_room = self._require_str(raw.get("starting_room"), f"{context} starting_room")
        starting_health = self._require_int(raw.get("starting_health", 100), f"{context} starting_health")
        if starting_health <= 0:
            raise DataValidationError(f"{context} starting_health must be positive.")
        starting_gold = self._require_int(raw.get("starting_gold", 0), f"{context} starting_gold")
        if starting_gold < 0:
            raise DataValidationError(f"{context} starting_gold must be a non-negative integer.")
        unarmed_damage = self._require_int(raw.get("unarmed_damage", 1), f"{context} unarmed_damage")
        if unarmed_damage < 0:
            raise DataValidationError(f"{context} unarmed_damage must be a non-negative integer.")

        equipment_map = self._require_mapping(raw.get("starting_equipment", {}), f"{context} starting_equipment")
        equipment: Dict[str, str] = {}
        for slot, item_id in equipment_map.items():
            equipment[slot] = self._require_str(item_id, f"{context} starting_equipment.{slot}")

        flags_map = self._require_mapping(raw.get("starting_flags", {}), f"{context} starting_flags")
        flags: Dict[str, str] = {}
        for flag_name, flag_value in flags_map.items():
            flags[flag_name] = self._require_flag_value(flag_value, f"{context} starting_flags.{flag_name}")

        config = StoryConfigDef(
            story_id=story_id,
            name=self._require_str(raw.get("name", story_id), f"{context} name"),
            starting_room=starting_room,
            respawn_room=self._require_str(raw.get("respawn_room", starting_room), f"{context} respawn_room"),
            starting_health=starting_health,
            starting_gold=starting_gold,
            starting_items=tuple(self._require_str_list(raw.get("starting_items", []), f"{context} starting_items")),
            starting_equipment=equipment,
            starting_flags=flags,
            use_enhanced_stats=self._require_bool(
                raw.get("use_enhanced_stats", False), f"{context} use_enhanced_stats"
            ),
            default_map_id=self._optional_str(raw.get("default_map_id"), f"{context} default_map_id") or None,
            unarmed_damage=unarmed_damage,
        )
        return {story_id: config}
