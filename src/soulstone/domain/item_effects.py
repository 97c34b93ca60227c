"""Pure helpers for applying item effects in combat."""
from __future__ import annotations

from dataclasses import dataclass

from soulstone.domain.combat_models import CombatEncounter
from soulstone.domain.defs import ItemDef
from soulstone.domain.state import PlayerStats


@dataclass(slots=True)
class ItemEffectResult:
    """Summary of health deltas produced by using an item."""

    player_health_delta: int = 0
    enemy_health_delta: int = 0

    @property
    def had_effect(self) -> bool:
        return self.player_health_delta != 0 or self.enemy_health_delta != 0


def apply_item_effect(
    player: PlayerStats,
    item: ItemDef,
    *,
    encounter: CombatEncounter | None = None,
) -> ItemEffectResult:
    """Apply Heal/Self and Damage/NPC effects; every other pairing has no numeric effect."""

    result = ItemEffectResult()
    amount = max(0, item.effect_amount)

    if item.effect_type == "Heal" and item.target == "Self" and amount > 0:
        before = player.health
        player.health += amount
        result.player_health_delta = player.health - before

    if item.effect_type == "Damage" and item.target == "NPC" and encounter is not None and amount > 0:
        before = encounter.enemy_health
        encounter.enemy_health -= amount
        result.enemy_health_delta = encounter.enemy_health - before

    return result
