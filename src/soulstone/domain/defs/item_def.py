"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EffectType = Literal["None", "Damage", "Heal", "Bless", "CurePoison", "Open", "Cold"]
EffectTarget = Literal["None", "NPC", "Self", "Lock"]
EquipSlot = Literal["None", "MainHand", "OffHand", "Head", "Body", "Feet", "Ring"]


@dataclass(slots=True)
class ItemDef:
    """Usable, equippable or quest item definition."""

    id: str
    name: str
    description: str
    category: str
    effect_type: EffectType = "None"
    effect_amount: int = 0
    target: EffectTarget = "None"
    stacking: bool = False
    equip_slot: EquipSlot = "None"
    usage_success: str = ""
    usage_fail: str = ""
    buy_price: int = 0
    sell_price: int = 0

    @property
    def is_equippable(self) -> bool:
        return self.equip_slot != "None"
