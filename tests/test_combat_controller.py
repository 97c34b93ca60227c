"""Combat controller moves the player out of the fight once it is over."""
from __future__ import annotations

from pathlib import Path

import pytest

from soulstone.domain.flags import DEAD_FLAG
from soulstone.domain.state import GameState
from soulstone.services.controllers import CombatAction, CombatController
from soulstone.services.controllers.combat_controller import FLEE_NARRATION, RESPAWN_NARRATION
from soulstone.services.errors import InvalidActionError
from tests.helpers.content_builders import Services, build_services, make_exit, make_room, make_state, write_content


def _build(tmp_path: Path, enemy_damage: int = 5) -> Services:
    write_content(
        tmp_path,
        rooms=[
            make_room("road", exits=[make_exit("Den", "den")]),
            make_room(
                "den",
                combat={"enemy_id": "wolf", "enemy_name": "Wolf", "enemy_health": 30, "enemyDamage": enemy_damage},
            ),
            make_room(
                "temple",
                events=[
                    {"event_type": "set_flag", "flag_name": "Dead", "value": "false"},
                    {"event_type": "restore_health"},
                ],
            ),
        ],
    )
    return build_services(tmp_path, respawn_room="temple")


def _walk_into_den(services: Services, health: int = 40) -> GameState:
    state = make_state(health)
    services.room_service.enter_room(state, "road")
    services.room_service.traverse(state, "Den")
    return state


def test_controller_exposes_offered_actions(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _walk_into_den(services)

    assert services.combat_controller.get_available_actions(state) == ["Attack", "Use Item", "Flee"]
    assert services.combat_controller.get_combat_view(state).enemy_name == "Wolf"


def test_flee_returns_to_previous_room(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _walk_into_den(services)

    result = services.combat_controller.apply_player_action(state, CombatAction(action_type="Flee"))

    assert result.combat_over
    assert state.current_room_id == "road"
    assert state.mode == "explore"
    assert state.drain_narration() == [FLEE_NARRATION]


def test_flee_without_previous_room_goes_to_respawn(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = make_state()
    services.room_service.enter_room(state, "den")

    services.combat_controller.apply_player_action(state, CombatAction(action_type="Flee"))

    assert state.current_room_id == "temple"


def test_defeat_respawns_player(tmp_path: Path) -> None:
    services = _build(tmp_path, enemy_damage=50)
    state = _walk_into_den(services, health=10)

    result = services.combat_controller.apply_player_action(state, CombatAction(action_type="Attack"))

    assert result.combat_over
    assert state.current_room_id == "temple"
    assert state.drain_narration() == [RESPAWN_NARRATION]
    assert state.flags.get(DEAD_FLAG) == "false"
    assert state.player.health == state.player.max_health


def test_use_item_requires_item_id(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _walk_into_den(services)

    with pytest.raises(InvalidActionError):
        services.combat_controller.apply_player_action(state, CombatAction(action_type="Use Item"))


def test_attack_mid_fight_keeps_player_in_room(tmp_path: Path) -> None:
    services = _build(tmp_path)
    state = _walk_into_den(services)

    result = services.combat_controller.apply_player_action(state, CombatAction(action_type="Attack"))

    assert not result.combat_over
    assert state.current_room_id == "den"
    assert services.combat_controller.get_available_actions(state) == ["Attack", "Use Item", "Flee"]


def test_controller_has_no_presentation_imports() -> None:
    import soulstone.services.controllers.combat_controller as module

    source = Path(module.__file__).read_text(encoding="utf-8")
    assert "presentation" not in source
    assert isinstance(CombatController, type)
