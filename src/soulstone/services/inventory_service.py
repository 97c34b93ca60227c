"""Inventory and equipment orchestration services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from soulstone.data.repositories import ItemsRepository
from soulstone.domain.defs import ItemDef
from soulstone.domain.state import GameState
from soulstone.services.events import GameEvent
from soulstone.services.quest_service import QuestService

logger = logging.getLogger(__name__)

MAIN_HAND = "MainHand"


@dataclass(slots=True)
class InventorySummary:
    items: List[tuple[str, str, int]]  # id, name, qty
    equipped: List[tuple[str, str, str]]  # slot, id, name


@dataclass(slots=True)
class InventoryEvent(GameEvent):
    """Base class for inventory/equipment events."""


@dataclass(slots=True)
class ItemGainedEvent(InventoryEvent):
    item_id: str
    item_name: str
    quantity: int


@dataclass(slots=True)
class ItemGivenEvent(InventoryEvent):
    item_id: str
    item_name: str
    recipient: str


@dataclass(slots=True)
class ItemEquippedEvent(InventoryEvent):
    item_id: str
    item_name: str
    slot: str


@dataclass(slots=True)
class ItemUnequippedEvent(InventoryEvent):
    item_id: str
    item_name: str
    slot: str


@dataclass(slots=True)
class EquipFailedEvent(InventoryEvent):
    item_id: str
    reason: str
    message: str


class InventoryService:
    """Service responsible for the player's items and equipment."""

    def __init__(self, *, items_repo: ItemsRepository, quest_service: QuestService | None = None) -> None:
        self._items_repo = items_repo
        self._quest_service = quest_service

    def find_item(self, item_id: str) -> ItemDef | None:
        try:
            return self._items_repo.get(item_id)
        except KeyError:
            return None

    def item_name(self, item_id: str) -> str:
        item = self.find_item(item_id)
        return item.name if item else item_id

    def grant_item(self, state: GameState, item_id: str, quantity: int = 1) -> List[GameEvent]:
        """Add items to the inventory and report collection progress."""
        if quantity <= 0:
            return []
        if self.find_item(item_id) is None:
            logger.warning("Granting item '%s' with no item definition.", item_id)
        state.inventory.add_item(item_id, quantity)
        events: List[GameEvent] = [
            ItemGainedEvent(item_id=item_id, item_name=self.item_name(item_id), quantity=quantity)
        ]
        if self._quest_service is not None:
            events.extend(self._quest_service.record_item_collected(state, item_id, quantity))
        return events

    def give_item(self, state: GameState, item_id: str, recipient: str) -> List[GameEvent]:
        """Hand one item to an NPC, reporting the delivery; nothing happens if it is not held."""
        if not state.inventory.remove_item(item_id):
            logger.warning("Cannot give '%s' to %s: item not held.", item_id, recipient)
            return []
        events: List[GameEvent] = [
            ItemGivenEvent(item_id=item_id, item_name=self.item_name(item_id), recipient=recipient)
        ]
        if self._quest_service is not None:
            events.extend(self._quest_service.record_item_delivered(state, item_id, recipient))
        return events

    def consume_item(self, state: GameState, item_id: str) -> bool:
        return state.inventory.remove_item(item_id)

    def equip_item(self, state: GameState, item_id: str) -> List[InventoryEvent]:
        item = self.find_item(item_id)
        if item is None or not state.inventory.has_item(item_id):
            return [EquipFailedEvent(item_id=item_id, reason="missing", message="You do not have that item.")]
        if not item.is_equippable:
            return [
                EquipFailedEvent(
                    item_id=item_id, reason="not_equippable", message=f"{item.name} cannot be equipped."
                )
            ]
        events: List[InventoryEvent] = []
        slot = item.equip_slot
        displaced = state.inventory.equipped.get(slot)
        if displaced is not None:
            state.inventory.add_item(displaced)
            events.append(
                ItemUnequippedEvent(item_id=displaced, item_name=self.item_name(displaced), slot=slot)
            )
        state.inventory.remove_item(item_id)
        state.inventory.equipped[slot] = item_id
        events.append(ItemEquippedEvent(item_id=item_id, item_name=item.name, slot=slot))
        return events

    def unequip_slot(self, state: GameState, slot: str) -> List[InventoryEvent]:
        item_id = state.inventory.equipped.pop(slot, None)
        if item_id is None:
            return []
        state.inventory.add_item(item_id)
        return [ItemUnequippedEvent(item_id=item_id, item_name=self.item_name(item_id), slot=slot)]

    def main_hand_item(self, state: GameState) -> ItemDef | None:
        item_id = state.inventory.equipped_in(MAIN_HAND)
        return self.find_item(item_id) if item_id else None

    def build_summary(self, state: GameState) -> InventorySummary:
        items = [
            (item_id, self.item_name(item_id), quantity)
            for item_id, quantity in sorted(state.inventory.items.items())
        ]
        equipped = [
            (slot, item_id, self.item_name(item_id))
            for slot, item_id in sorted(state.inventory.equipped.items())
        ]
        return InventorySummary(items=items, equipped=equipped)
