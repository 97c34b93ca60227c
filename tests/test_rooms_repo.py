from __future__ import annotations

from pathlib import Path

import pytest

from soulstone.data.errors import DataReferenceError, DataValidationError, RoomNotFoundError
from soulstone.data.repositories import RoomsRepository
from soulstone.data.repositories.rooms_repo import DEFAULT_ENEMY_DAMAGE, split_speaker
from soulstone.domain.defs import ContinueAt, EndDialogue
from tests.helpers.content_builders import make_exit, make_room, write_json


def _dialogue(npc_name: str, steps: list[dict]) -> dict:
    return {"npc_name": npc_name, "dialogues": steps}


def _write_room(tmp_path: Path, room: dict) -> RoomsRepository:
    write_json(tmp_path / "rooms" / f"{room['room_id']}.json", room)
    return RoomsRepository(tmp_path)


def test_room_loads_actions_exits_and_dialogue(tmp_path: Path) -> None:
    repo = _write_room(
        tmp_path,
        make_room(
            "city_gates",
            items=["Dagger"],
            actions=[
                {"action_id": "Guard", "action_description": "Talk to the guard", "flag_false": "gate_open"},
                {"action_id": "Look"},
            ],
            exits=[make_exit("Forest", "forest_1", conditions=["gate_key"])],
            dialogues=[
                _dialogue(
                    "Guard",
                    [
                        {
                            "message": "Guard# Halt!",
                            "responses": [
                                {"text": "Why?", "next_step": 1, "setFlagTrue": "asked", "getItem": ""},
                                {"text": "Bye", "next_step": -1},
                            ],
                        },
                        {"message": "Orders.", "responses": []},
                    ],
                )
            ],
        ),
    )

    room = repo.get("city_gates")

    assert room.items == ("Dagger",)
    assert [action.label for action in room.actions] == ["Talk to the guard", "Look"]
    assert room.actions[0].flag_false == "gate_open"
    assert room.exits[0].conditions == ("gate_key",)
    dialogue = room.get_dialogue("Guard")
    assert dialogue is not None
    first, second = dialogue.steps
    assert first.speaker == "Guard"
    assert first.message == "Halt!"
    assert first.responses[0].next_step == ContinueAt(1)
    assert first.responses[0].set_flag_true == "asked"
    assert first.responses[0].get_item is None
    assert isinstance(first.responses[1].next_step, EndDialogue)
    assert second.speaker is None
    assert second.is_terminal


def test_room_lookup_is_cached(tmp_path: Path) -> None:
    repo = _write_room(tmp_path, make_room("hall"))

    assert repo.get("hall") is repo.get("hall")
    assert repo.ids() == ["hall"]
    assert repo.exists("hall")
    assert not repo.exists("../hall")


def test_unknown_room_raises_not_found(tmp_path: Path) -> None:
    repo = _write_room(tmp_path, make_room("hall"))

    with pytest.raises(RoomNotFoundError) as excinfo:
        repo.get("attic")

    assert excinfo.value.record_id == "attic"
    assert "attic" in str(excinfo.value)
    assert isinstance(excinfo.value, KeyError)


def test_room_id_must_match_file_name(tmp_path: Path) -> None:
    write_json(tmp_path / "rooms" / "hall.json", make_room("kitchen"))

    with pytest.raises(DataValidationError):
        RoomsRepository(tmp_path).get("hall")


def test_next_step_out_of_range_is_rejected(tmp_path: Path) -> None:
    repo = _write_room(
        tmp_path,
        make_room(
            "hall",
            dialogues=[_dialogue("Priest", [{"message": "Hi", "responses": [{"text": "Go", "next_step": 3}]}])],
        ),
    )

    with pytest.raises(DataReferenceError):
        repo.get("hall")


def test_dialogue_without_steps_is_rejected(tmp_path: Path) -> None:
    repo = _write_room(tmp_path, make_room("hall", dialogues=[_dialogue("Priest", [])]))

    with pytest.raises(DataValidationError):
        repo.get("hall")


def test_combat_defaults(tmp_path: Path) -> None:
    repo = _write_room(tmp_path, make_room("den", combat={"enemy_name": "Wolf", "enemy_health": 10}))

    combat = repo.get("den").combat

    assert combat is not None
    assert combat.enemy_id == "Wolf"
    assert combat.enemy_damage == DEFAULT_ENEMY_DAMAGE
    assert combat.combat_actions == ("Attack", "Use Item", "Flee")
    assert combat.defeat_flag is None


@pytest.mark.parametrize(
    "combat",
    [
        {"enemy_name": "Wolf", "enemy_health": 0},
        {"enemy_name": "Wolf", "enemy_health": 10, "enemyDamage": -1},
        {"enemy_name": "Wolf", "enemy_health": 10, "combat_actions": ["Attack", "Dance"]},
        {"enemy_name": "Wolf", "enemy_health": True},
    ],
)
def test_invalid_combat_is_rejected(tmp_path: Path, combat: dict) -> None:
    repo = _write_room(tmp_path, make_room("den", combat=combat))

    with pytest.raises(DataValidationError):
        repo.get("den")


def test_room_events(tmp_path: Path) -> None:
    repo = _write_room(
        tmp_path,
        make_room(
            "shrine",
            events=[
                {"event_type": "set_flag", "flag_name": "prayed"},
                {"event_type": "pick_item", "item_id": "Soul Stone"},
                {"event_type": "restore_health"},
            ],
        ),
    )

    events = repo.get("shrine").events

    assert [event.event_type for event in events] == ["set_flag", "pick_item", "restore_health"]
    assert events[0].value == "true"
    assert events[1].item_id == "Soul Stone"


def test_room_event_flag_value_must_be_a_sentinel(tmp_path: Path) -> None:
    repo = _write_room(
        tmp_path,
        make_room("shrine", events=[{"event_type": "set_flag", "flag_name": "prayed", "value": "yes"}]),
    )

    with pytest.raises(DataValidationError):
        repo.get("shrine")


def test_split_speaker() -> None:
    assert split_speaker("Hermit# Welcome.") == ("Hermit", "Welcome.")
    assert split_speaker("No speaker here.") == (None, "No speaker here.")
    assert split_speaker("# Anonymous") == (None, "Anonymous")
