"""Items repository."""
from __future__ import annotations

from typing import Dict, get_args

from soulstone.data.errors import DataValidationError
from soulstone.data.repositories.base import RepositoryBase
from soulstone.domain.defs import ItemDef
from soulstone.domain.defs.item_def import EffectTarget, EffectType, EquipSlot

_ITEM_FIELDS = {
    "name",
    "description",
    "category",
    "effect_type",
    "effect_amount",
    "target",
    "stacking",
    "equip_slot",
    "usage_success",
    "usage_fail",
    "buy_price",
    "sell_price",
}


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates item definitions keyed by item id."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id:
                raise DataValidationError("Item IDs must be non-empty strings.")
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._assert_known_fields(item_data, _ITEM_FIELDS, context)
            effect_amount = self._require_int(item_data.get("effect_amount", 0), f"{context} effect_amount")
            if effect_amount < 0:
                raise DataValidationError(f"{context} effect_amount must be a non-negative integer.")
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data.get("name", raw_id), f"{context} name"),
                description=self._require_str(item_data.get("description", ""), f"{context} description"),
                category=self._require_str(item_data.get("category", "Misc"), f"{context} category"),
                effect_type=self._require_choice(
                    item_data.get("effect_type", "None"), get_args(EffectType), f"{context} effect_type"
                ),
                effect_amount=effect_amount,
                target=self._require_choice(
                    item_data.get("target", "None"), get_args(EffectTarget), f"{context} target"
                ),
                stacking=self._require_bool(item_data.get("stacking", False), f"{context} stacking"),
                equip_slot=self._require_choice(
                    item_data.get("equip_slot", "None"), get_args(EquipSlot), f"{context} equip_slot"
                ),
                usage_success=self._require_str(item_data.get("usage_success", ""), f"{context} usage_success"),
                usage_fail=self._require_str(item_data.get("usage_fail", ""), f"{context} usage_fail"),
                buy_price=self._require_int(item_data.get("buy_price", 0), f"{context} buy_price"),
                sell_price=self._require_int(item_data.get("sell_price", 0), f"{context} sell_price"),
            )
        return items

    def _require_choice(self, value: object, choices: tuple[str, ...], context: str):
        text = self._require_str(value, context)
        if text not in choices:
            raise DataValidationError(f"{context} must be one of {', '.join(choices)} (found '{text}').")
        return text
