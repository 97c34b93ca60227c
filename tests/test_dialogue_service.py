from __future__ import annotations

from pathlib import Path

import pytest

from soulstone.domain.quest_state import QuestState
from soulstone.services.dialogue_service import DialogueEndedEvent
from soulstone.services.errors import InvalidActionError
from soulstone.services.inventory_service import ItemGainedEvent, ItemGivenEvent
from soulstone.services.quest_service import QuestAcceptedEvent, QuestCompletedEvent
from tests.helpers.content_builders import (
    Services,
    build_services,
    make_objective,
    make_quest,
    make_room,
    make_state,
    write_content,
)


def _step(message: str, responses: list[dict] | None = None) -> dict:
    return {"message": message, "responses": responses or []}


def _build(tmp_path: Path, steps: list[dict], quests: list[dict] | None = None) -> Services:
    write_content(
        tmp_path,
        rooms=[
            make_room(
                "temple",
                actions=[{"action_id": "Priest", "action_description": "Speak with the priest"}],
                dialogues=[{"npc_name": "Priest", "dialogues": steps}],
            )
        ],
        quests=quests or [],
    )
    return build_services(tmp_path)


def test_response_sets_flag_grants_item_and_jumps(tmp_path: Path) -> None:
    steps = [
        _step(
            "Priest# Take this.",
            [{"text": "Thank you.", "setFlagTrue": "HasSoulStone", "getItem": "Soul Stone", "next_step": 7}],
        )
    ]
    steps.extend(_step(f"Priest# Line {index}.", [{"text": "...", "next_step": -1}]) for index in range(1, 8))
    services = _build(tmp_path, steps)
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.dialogue_service.start_dialogue(state, "Priest")

    result = services.dialogue_service.choose_response(state, 0)

    assert state.flags.get("HasSoulStone") == "true"
    assert state.inventory.has_item("Soul Stone")
    assert state.dialogue is not None and state.dialogue.step_index == 7
    assert result.view is not None and result.view.message == "Line 7."
    assert any(isinstance(event, ItemGainedEvent) for event in result.events)


def test_start_dialogue_enters_step_zero(tmp_path: Path) -> None:
    services = _build(tmp_path, [_step("Priest# Welcome.", [{"text": "Hi", "next_step": -1}])])
    state = make_state()
    services.room_service.enter_room(state, "temple")

    result = services.dialogue_service.start_dialogue(state, "Priest")

    assert state.mode == "dialogue"
    assert result.view is not None
    assert result.view.speaker == "Priest"
    assert result.view.responses == ["Hi"]
    assert services.dialogue_service.get_current_view(state).message == "Welcome."


def test_end_response_returns_to_explore(tmp_path: Path) -> None:
    services = _build(tmp_path, [_step("Priest# Welcome.", [{"text": "Bye", "next_step": -1}])])
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.dialogue_service.start_dialogue(state, "Priest")

    result = services.dialogue_service.choose_response(state, 0)

    assert result.ended
    assert state.dialogue is None
    assert state.mode == "explore"
    assert isinstance(result.events[-1], DialogueEndedEvent)


def test_terminal_step_ends_dialogue_after_display(tmp_path: Path) -> None:
    services = _build(
        tmp_path,
        [_step("Priest# Listen.", [{"text": "Go on", "next_step": 1}]), _step("Priest# That is all.")],
    )
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.dialogue_service.start_dialogue(state, "Priest")

    result = services.dialogue_service.choose_response(state, 0)

    assert result.view is not None and result.view.message == "That is all."
    assert result.ended
    assert state.mode == "explore"


def test_invalid_response_index_changes_nothing(tmp_path: Path) -> None:
    services = _build(tmp_path, [_step("Priest# Welcome.", [{"text": "Hi", "setFlagTrue": "x", "next_step": -1}])])
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.dialogue_service.start_dialogue(state, "Priest")

    with pytest.raises(InvalidActionError):
        services.dialogue_service.choose_response(state, 5)

    assert state.dialogue is not None and state.dialogue.step_index == 0
    assert "x" not in state.flags


def test_choose_without_dialogue_is_rejected(tmp_path: Path) -> None:
    services = _build(tmp_path, [_step("Priest# Welcome.")])
    state = make_state()
    services.room_service.enter_room(state, "temple")

    with pytest.raises(InvalidActionError):
        services.dialogue_service.choose_response(state, 0)
    with pytest.raises(InvalidActionError):
        services.dialogue_service.start_dialogue(state, "Nobody")


def test_give_item_completes_delivery_quest(tmp_path: Path) -> None:
    services = _build(
        tmp_path,
        [
            _step(
                "Priest# Do you have it?",
                [
                    {
                        "text": "Here.",
                        "giveItem": "Soul Stone",
                        "completeQuest": "return_stone",
                        "next_step": -1,
                    }
                ],
            )
        ],
        quests=[
            make_quest(
                "return_stone",
                [make_objective("deliver", "DeliverItem", "Soul Stone_Priest")],
                rewards={"gold": 25},
            )
        ],
    )
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.quest_service.accept_quest(state, "return_stone")
    state.inventory.add_item("Soul Stone")
    services.dialogue_service.start_dialogue(state, "Priest")

    result = services.dialogue_service.choose_response(state, 0)

    kinds = [type(event) for event in result.events]
    assert kinds.index(ItemGivenEvent) < kinds.index(QuestCompletedEvent)
    assert not state.inventory.has_item("Soul Stone")
    assert services.quest_service.get_state(state, "return_stone") is QuestState.COMPLETED
    assert state.player.gold == 25


def test_flags_apply_before_start_quest(tmp_path: Path) -> None:
    services = _build(
        tmp_path,
        [
            _step(
                "Priest# Will you help?",
                [{"text": "Yes.", "setFlagTrue": "agreed", "startQuest": "help", "next_step": -1}],
            )
        ],
        quests=[make_quest("help", [make_objective("a", "GoToRoom", "crypt")], prerequisiteFlags=["agreed"])],
    )
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.dialogue_service.start_dialogue(state, "Priest")

    result = services.dialogue_service.choose_response(state, 0)

    assert any(isinstance(event, QuestAcceptedEvent) for event in result.events)
    assert state.flags.get("help") == "active"


def test_complete_quest_not_ready_is_ignored(tmp_path: Path) -> None:
    services = _build(
        tmp_path,
        [_step("Priest# Done?", [{"text": "Yes.", "completeQuest": "help", "next_step": -1}])],
        quests=[make_quest("help", [make_objective("a", "GoToRoom", "crypt")])],
    )
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.quest_service.accept_quest(state, "help")
    services.dialogue_service.start_dialogue(state, "Priest")

    services.dialogue_service.choose_response(state, 0)

    assert services.quest_service.get_state(state, "help") is QuestState.ACTIVE


def test_talking_reports_quest_progress(tmp_path: Path) -> None:
    services = _build(
        tmp_path,
        [_step("Priest# Welcome.", [{"text": "Hi", "next_step": -1}])],
        quests=[make_quest("meet", [make_objective("talk", "TalkToNPC", "Priest")])],
    )
    state = make_state()
    services.room_service.enter_room(state, "temple")
    services.quest_service.accept_quest(state, "meet")

    services.dialogue_service.start_dialogue(state, "Priest")

    assert services.quest_service.get_state(state, "meet") is QuestState.READY_TO_TURN_IN
