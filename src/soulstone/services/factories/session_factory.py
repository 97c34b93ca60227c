"""Factory that builds a fully wired GameSession from a content directory."""
from __future__ import annotations

import logging
from pathlib import Path

from soulstone.data import paths
from soulstone.data.errors import DataValidationError
from soulstone.data.repositories import (
    ChaptersRepository,
    ItemsRepository,
    MapsRepository,
    QuestsRepository,
    RoomsRepository,
    StoryConfigRepository,
)
from soulstone.services.chapter_service import ChapterService
from soulstone.services.combat_service import CombatService
from soulstone.services.content_validator import format_issue, has_errors, validate_content
from soulstone.services.controllers import CombatController
from soulstone.services.dialogue_service import DialogueService
from soulstone.services.game_session import GameSession
from soulstone.services.inventory_service import InventoryService
from soulstone.services.map_service import MapService
from soulstone.services.quest_service import QuestService
from soulstone.services.room_service import RoomService

logger = logging.getLogger(__name__)


def create_game_session(content_path: Path | str | None = None, *, validate: bool = True) -> GameSession:
    """
    Construct every repository and service over one content directory.

    With `validate` set, all content is loaded and checked up front and any
    ERROR issue raises DataValidationError listing every problem found.
    """
    base_path = paths.get_content_path(content_path)
    story_repo = StoryConfigRepository(base_path)
    story_config = story_repo.get_config()
    rooms_repo = RoomsRepository(base_path)
    quests_repo = QuestsRepository(base_path)
    items_repo = ItemsRepository(base_path)
    maps_repo = MapsRepository(base_path)

    chapters_repo = None
    chapter_service = None
    if (base_path / "chapters.json").is_file():
        chapters_repo = ChaptersRepository(base_path)
        chapter_service = ChapterService(chapters_repo=chapters_repo)

    if validate:
        issues = validate_content(
            rooms_repo=rooms_repo,
            quests_repo=quests_repo,
            items_repo=items_repo,
            maps_repo=maps_repo,
            chapters_repo=chapters_repo,
            story_repo=story_repo,
        )
        for issue in issues:
            logger.warning("%s", format_issue(issue))
        if has_errors(issues):
            errors = [format_issue(issue) for issue in issues if issue.severity == "ERROR"]
            raise DataValidationError(f"Content in {base_path} is invalid:\n" + "\n".join(errors))

    quest_service = QuestService(quests_repo=quests_repo)
    inventory_service = InventoryService(items_repo=items_repo, quest_service=quest_service)
    dialogue_service = DialogueService(quest_service=quest_service, inventory_service=inventory_service)
    room_service = RoomService(
        rooms_repo=rooms_repo,
        quest_service=quest_service,
        inventory_service=inventory_service,
        dialogue_service=dialogue_service,
    )
    combat_service = CombatService(
        inventory_service=inventory_service,
        quest_service=quest_service,
        unarmed_damage=story_config.unarmed_damage,
    )
    return GameSession(
        story_config=story_config,
        room_service=room_service,
        dialogue_service=dialogue_service,
        quest_service=quest_service,
        inventory_service=inventory_service,
        map_service=MapService(maps_repo=maps_repo, chapter_gate=chapter_service),
        combat_controller=CombatController(
            combat_service, room_service, respawn_room=story_config.respawn_room
        ),
        chapter_service=chapter_service,
    )
