from __future__ import annotations

from pathlib import Path

import pytest

from soulstone.data.errors import DataLoadError, DataReferenceError, DataValidationError, MapNotFoundError
from soulstone.data.repositories import (
    ChaptersRepository,
    ItemsRepository,
    MapsRepository,
    StoryConfigRepository,
)
from soulstone.domain.defs import PathStyle
from tests.helpers.content_builders import write_json


def _pin(location_id: str, **fields: object) -> dict:
    pin: dict = {"locationId": location_id, "displayName": location_id.title(), "position": {"x": 1, "y": 2}}
    pin.update(fields)
    return pin


def test_items_repo_loads_defaults(tmp_path: Path) -> None:
    write_json(
        tmp_path / "items.json",
        {
            "Rope": {"name": "Rope"},
            "Sword": {"name": "Sword", "effect_type": "Damage", "effect_amount": 6, "equip_slot": "MainHand"},
        },
    )

    repo = ItemsRepository(tmp_path)

    assert [item.id for item in repo.all()] == ["Rope", "Sword"]
    rope = repo.get("Rope")
    assert rope.effect_type == "None"
    assert rope.is_equippable is False
    assert repo.get("Sword").is_equippable is True


@pytest.mark.parametrize(
    "payload",
    [
        {"Rope": {"name": "Rope", "weight": 3}},
        {"Rope": {"name": "Rope", "effect_type": "Explode"}},
        {"Rope": {"name": "Rope", "effect_amount": -2}},
        {"Rope": {"name": "Rope", "equip_slot": "Tail"}},
    ],
)
def test_items_repo_rejects_invalid_items(tmp_path: Path, payload: dict) -> None:
    write_json(tmp_path / "items.json", payload)

    with pytest.raises(DataValidationError):
        ItemsRepository(tmp_path).all()


def test_missing_catalog_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        ItemsRepository(tmp_path).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    (tmp_path / "items.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        ItemsRepository(tmp_path).all()


def test_chapters_repo_orders_by_number(tmp_path: Path) -> None:
    write_json(
        tmp_path / "chapters.json",
        {
            "two": {"chapterName": "Two", "chapterNumber": 2, "unlockQuestId": "q1", "locationIds": ["castle"]},
            "one": {"chapterName": "One", "chapterNumber": 1, "locationIds": ["gates"]},
        },
    )

    chapters = ChaptersRepository(tmp_path).by_number()

    assert [chapter.chapter_id for chapter in chapters] == ["one", "two"]
    assert chapters[0].unlock_quest_id is None
    assert chapters[1].location_ids == ("castle",)


def test_chapters_repo_rejects_duplicate_numbers(tmp_path: Path) -> None:
    write_json(
        tmp_path / "chapters.json",
        {"a": {"chapterNumber": 1}, "b": {"chapterNumber": 1}},
    )

    with pytest.raises(DataValidationError):
        ChaptersRepository(tmp_path).all()


def test_story_config_defaults(tmp_path: Path) -> None:
    write_json(tmp_path / "story.json", {"story_id": "demo", "starting_room": "hall"})

    config = StoryConfigRepository(tmp_path).get_config()

    assert config.name == "demo"
    assert config.respawn_room == "hall"
    assert config.starting_health == 100
    assert config.unarmed_damage == 1
    assert config.default_map_id is None


@pytest.mark.parametrize(
    "extra",
    [
        {"starting_flags": {"gate_open": "open"}},
        {"starting_health": 0},
        {"mystery": 1},
    ],
)
def test_story_config_rejects_invalid_fields(tmp_path: Path, extra: dict) -> None:
    payload = {"story_id": "demo", "starting_room": "hall"}
    payload.update(extra)
    write_json(tmp_path / "story.json", payload)

    with pytest.raises(DataValidationError):
        StoryConfigRepository(tmp_path).get_config()


def test_map_loads_pins_and_paths(tmp_path: Path) -> None:
    write_json(
        tmp_path / "maps" / "world.json",
        {
            "mapId": "world",
            "regionId": "valley",
            "pins": [
                _pin("gates", alwaysVisible=True),
                _pin("crypt", position=[30, 40], revealQuests=["find_stone"]),
                _pin("hut", revealFlag="heard_of_hut"),
            ],
            "paths": [
                {"pathId": "a", "fromLocationId": "gates", "toLocationId": "crypt", "waypoints": [{"x": 5, "y": 5}]},
                {
                    "pathId": "b",
                    "fromLocationId": "gates",
                    "toLocationId": "hut",
                    "visibleWhenBothRevealed": False,
                    "visibleWhenOneRevealed": True,
                },
                {"pathId": "c", "fromLocationId": "crypt", "toLocationId": "hut", "style": "Hidden"},
                {
                    "pathId": "d",
                    "fromLocationId": "crypt",
                    "toLocationId": "gates",
                    "visibleWhenBothRevealed": False,
                },
            ],
        },
    )

    world = MapsRepository(tmp_path).get("world")

    assert world.size == (1024.0, 1024.0)
    crypt = world.get_pin("crypt")
    assert crypt is not None
    assert crypt.position == (30.0, 40.0)
    assert crypt.reveal.reveal_quests == ("find_stone",)
    assert [path.visibility for path in world.paths] == ["both_revealed", "either_revealed", "never", "never"]
    assert world.paths[0].waypoints == ((5.0, 5.0),)
    assert world.paths[0].style is PathStyle.DOTTED
    assert world.paths[0].width == 2.0


def test_map_path_endpoint_without_pin_is_rejected(tmp_path: Path) -> None:
    write_json(
        tmp_path / "maps" / "world.json",
        {
            "mapId": "world",
            "pins": [_pin("gates")],
            "paths": [{"fromLocationId": "gates", "toLocationId": "nowhere"}],
        },
    )

    with pytest.raises(DataReferenceError):
        MapsRepository(tmp_path).get("world")


def test_map_rejects_duplicate_pins(tmp_path: Path) -> None:
    write_json(tmp_path / "maps" / "world.json", {"mapId": "world", "pins": [_pin("gates"), _pin("gates")]})

    with pytest.raises(DataValidationError):
        MapsRepository(tmp_path).get("world")


def test_unknown_map_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(MapNotFoundError):
        MapsRepository(tmp_path).get("world")


def test_map_path_both_revealed_takes_precedence_by_default(tmp_path: Path) -> None:
    write_json(
        tmp_path / "maps" / "world.json",
        {
            "mapId": "world",
            "pins": [_pin("gates"), _pin("hut")],
            "paths": [
                {"pathId": "one_flag", "fromLocationId": "gates", "toLocationId": "hut", "visibleWhenOneRevealed": True},
                {
                    "pathId": "both_flags",
                    "fromLocationId": "gates",
                    "toLocationId": "hut",
                    "visibleWhenBothRevealed": True,
                    "visibleWhenOneRevealed": True,
                },
            ],
        },
    )

    world = MapsRepository(tmp_path).get("world")

    assert [path.visibility for path in world.paths] == ["both_revealed", "both_revealed"]
