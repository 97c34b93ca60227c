from __future__ import annotations

from pathlib import Path

from soulstone.domain.combat_models import CombatEncounter
from soulstone.domain.defs import ItemDef
from soulstone.domain.inventory import Inventory
from soulstone.domain.item_effects import apply_item_effect
from soulstone.domain.quest_state import QuestState
from soulstone.domain.state import PlayerStats
from soulstone.services.inventory_service import (
    EquipFailedEvent,
    ItemEquippedEvent,
    ItemGainedEvent,
    ItemUnequippedEvent,
)
from tests.helpers.content_builders import build_services, make_objective, make_quest, make_state, write_content


def test_inventory_counts_and_removal() -> None:
    inventory = Inventory()
    inventory.add_item("Healing Potion", 2)

    assert inventory.remove_item("Healing Potion")
    assert inventory.count("Healing Potion") == 1
    assert not inventory.remove_item("Healing Potion", 2)
    assert inventory.remove_item("Healing Potion")
    assert "Healing Potion" not in inventory.items
    assert not inventory.has_item("Healing Potion")


def test_grant_item_reports_collection(tmp_path: Path) -> None:
    write_content(tmp_path, quests=[make_quest("gather", [make_objective("stone", "CollectItem", "Soul Stone")])])
    services = build_services(tmp_path)
    state = make_state()
    services.quest_service.accept_quest(state, "gather")

    events = services.inventory_service.grant_item(state, "Soul Stone")

    assert isinstance(events[0], ItemGainedEvent)
    assert events[0].item_name == "Soul Stone"
    assert services.quest_service.get_state(state, "gather") is QuestState.READY_TO_TURN_IN


def test_give_item_not_held_is_a_no_op(tmp_path: Path) -> None:
    write_content(tmp_path)
    services = build_services(tmp_path)
    state = make_state()

    assert services.inventory_service.give_item(state, "Soul Stone", "Priest") == []


def test_equip_swaps_main_hand(tmp_path: Path) -> None:
    write_content(tmp_path)
    services = build_services(tmp_path)
    state = make_state()
    state.inventory.equipped["MainHand"] = "Dagger"
    state.inventory.add_item("Iron Sword")

    events = services.inventory_service.equip_item(state, "Iron Sword")

    assert [type(event) for event in events] == [ItemUnequippedEvent, ItemEquippedEvent]
    assert state.inventory.equipped_in("MainHand") == "Iron Sword"
    assert state.inventory.has_item("Dagger")
    assert not state.inventory.has_item("Iron Sword")
    main_hand = services.inventory_service.main_hand_item(state)
    assert main_hand is not None and main_hand.effect_amount == 15


def test_equip_failures(tmp_path: Path) -> None:
    write_content(tmp_path)
    services = build_services(tmp_path)
    state = make_state()
    state.inventory.add_item("Healing Potion")

    missing = services.inventory_service.equip_item(state, "Iron Sword")
    not_equippable = services.inventory_service.equip_item(state, "Healing Potion")

    assert isinstance(missing[0], EquipFailedEvent) and missing[0].reason == "missing"
    assert isinstance(not_equippable[0], EquipFailedEvent) and not_equippable[0].reason == "not_equippable"


def test_unequip_and_summary(tmp_path: Path) -> None:
    write_content(tmp_path)
    services = build_services(tmp_path)
    state = make_state()
    state.inventory.equipped["MainHand"] = "Dagger"
    state.inventory.add_item("Healing Potion", 2)

    summary = services.inventory_service.build_summary(state)
    assert summary.items == [("Healing Potion", "Healing Potion", 2)]
    assert summary.equipped == [("MainHand", "Dagger", "Dagger")]

    services.inventory_service.unequip_slot(state, "MainHand")
    assert state.inventory.equipped_in("MainHand") is None
    assert state.inventory.has_item("Dagger")
    assert services.inventory_service.unequip_slot(state, "MainHand") == []


def test_item_effect_heal_self_adds_full_amount() -> None:
    player = PlayerStats(health=40, max_health=50)
    potion = ItemDef(id="p", name="Potion", description="", category="Consumable", effect_type="Heal", effect_amount=20, target="Self")

    result = apply_item_effect(player, potion)

    assert player.health == 60
    assert result.player_health_delta == 20
    assert result.had_effect


def test_item_effect_damage_needs_an_encounter() -> None:
    player = PlayerStats()
    scroll = ItemDef(id="s", name="Scroll", description="", category="Consumable", effect_type="Damage", effect_amount=7, target="NPC")
    encounter = CombatEncounter(enemy_id="wolf", enemy_name="Wolf", enemy_health=10, enemy_damage=2, actions=("Attack",))

    assert not apply_item_effect(player, scroll).had_effect
    result = apply_item_effect(player, scroll, encounter=encounter)

    assert encounter.enemy_health == 3
    assert result.enemy_health_delta == -7


def test_item_effect_other_pairings_do_nothing() -> None:
    player = PlayerStats(health=10, max_health=50)
    bless = ItemDef(id="b", name="Blessing", description="", category="Consumable", effect_type="Bless", effect_amount=5, target="Self")

    assert not apply_item_effect(player, bless).had_effect
    assert player.health == 10
