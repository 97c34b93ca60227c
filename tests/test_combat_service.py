from __future__ import annotations

from pathlib import Path

import pytest

from soulstone.domain.flags import DEAD_FLAG
from soulstone.domain.quest_state import QuestState
from soulstone.domain.state import GameState
from soulstone.services.combat_service import (
    VICTORY_DESCRIPTION,
    AttackResolvedEvent,
    EnemyAttackEvent,
    EnemyDefeatedEvent,
    ItemUsedEvent,
    PlayerDefeatedEvent,
    PlayerFledEvent,
)
from soulstone.services.errors import InvalidActionError
from tests.helpers.content_builders import (
    Services,
    build_services,
    make_objective,
    make_quest,
    make_room,
    make_state,
    write_content,
)


def _build(tmp_path: Path, combat: dict | None = None, quests: list[dict] | None = None) -> Services:
    encounter = {
        "enemy_id": "skeleton",
        "enemy_name": "Skeleton",
        "enemy_health": 20,
        "enemyDamage": 5,
        "defeat_flag": "skeleton_defeated",
    }
    encounter.update(combat or {})
    write_content(
        tmp_path,
        rooms=[make_room("crypt", combat=encounter), make_room("temple")],
        quests=quests or [],
    )
    return build_services(tmp_path, unarmed_damage=2)


def _enter_fight(services: Services, *, health: int = 50, weapon: str | None = "Iron Sword") -> GameState:
    state = make_state(health)
    if weapon:
        state.inventory.equipped["MainHand"] = weapon
    services.room_service.enter_room(state, "crypt")
    return state


def test_attack_then_enemy_reply_until_victory(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services)

    events = services.combat_service.attack(state)

    assert state.combat is not None
    assert state.combat.encounter.enemy_health == 5
    assert state.player.health == 45
    assert state.combat.phase == "player_turn"
    assert [type(event) for event in events] == [AttackResolvedEvent, EnemyAttackEvent]

    events = services.combat_service.attack(state)

    assert any(isinstance(event, EnemyDefeatedEvent) for event in events)
    assert not any(isinstance(event, EnemyAttackEvent) for event in events)
    assert state.combat is None
    assert state.mode == "explore"
    assert state.player.health == 45
    assert state.flags.is_true("skeleton_defeated")
    assert state.current_room is not None and state.current_room.description == VICTORY_DESCRIPTION


def test_victory_completes_defeat_objective(tmp_path: Path) -> None:
    services = _build(
        tmp_path, quests=[make_quest("slay", [make_objective("kill", "DefeatEnemy", "skeleton")])]
    )
    state = _enter_fight(services)
    services.quest_service.accept_quest(state, "slay")

    services.combat_service.attack(state)
    services.combat_service.attack(state)

    objective = state.quests["slay"].objectives[0]
    assert objective.current_count == 1
    assert objective.is_complete
    assert services.quest_service.get_state(state, "slay") is QuestState.READY_TO_TURN_IN


def test_unarmed_attack_uses_configured_damage(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services, weapon=None)

    events = services.combat_service.attack(state)

    attack = events[0]
    assert isinstance(attack, AttackResolvedEvent)
    assert attack.damage == 2
    assert state.combat is not None and state.combat.encounter.enemy_health == 18


def test_use_item_heals_and_consumes(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services)
    state.player.health = 10
    state.inventory.add_item("Healing Potion")

    events = services.combat_service.use_item(state, "Healing Potion")

    assert isinstance(events[0], ItemUsedEvent)
    assert events[0].player_health == 30
    assert state.player.health == 25
    assert not state.inventory.has_item("Healing Potion")


def test_heal_adds_past_max_health(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services)
    state.inventory.add_item("Healing Potion")

    events = services.combat_service.use_item(state, "Healing Potion")

    used = events[0]
    assert isinstance(used, ItemUsedEvent)
    assert used.player_health == 70
    assert used.message == "You feel better."
    assert state.player.health == 65


def test_damage_item_can_win_the_fight(tmp_path: Path) -> None:
    services = _build(tmp_path, combat={"enemy_health": 8})
    state = _enter_fight(services)
    state.inventory.add_item("Fire Scroll")

    events = services.combat_service.use_item(state, "Fire Scroll")

    assert any(isinstance(event, EnemyDefeatedEvent) for event in events)
    assert state.combat is None


def test_use_item_not_held_is_rejected(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services)

    with pytest.raises(InvalidActionError):
        services.combat_service.use_item(state, "Healing Potion")

    assert state.combat is not None and state.combat.turn == 1
    assert state.player.health == 50


def test_flee_ends_combat_without_enemy_reply(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _enter_fight(services)

    events = services.combat_service.flee(state)

    assert [type(event) for event in events] == [PlayerFledEvent]
    assert state.combat is None
    assert state.player.health == 50
    assert not state.flags.is_true("skeleton_defeated")


def test_defeat_marks_player_dead(tmp_path: Path) -> None:
    services = _build(tmp_path, combat={"enemyDamage": 30})
    state = _enter_fight(services, health=25, weapon="Dagger")

    events = services.combat_service.attack(state)

    assert isinstance(events[-1], PlayerDefeatedEvent)
    assert state.player.health == 0
    assert state.flags.is_true(DEAD_FLAG)
    assert state.combat is None


def test_actions_not_offered_are_rejected(tmp_path: Path) -> None:
    services = _build(tmp_path, combat={"combat_actions": ["Attack"]})
    state = _enter_fight(services)

    with pytest.raises(InvalidActionError):
        services.combat_service.flee(state)

    assert services.combat_service.get_combat_view(state).actions == ["Attack"]


def test_combat_actions_outside_combat_are_rejected(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = make_state()
    services.room_service.enter_room(state, "temple")

    with pytest.raises(InvalidActionError):
        services.combat_service.attack(state)
