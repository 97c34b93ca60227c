"""Repository exports."""

from .chapters_repo import ChaptersRepository
from .items_repo import ItemsRepository
from .maps_repo import MapsRepository
from .quests_repo import QuestsRepository
from .rooms_repo import RoomsRepository
from .story_config_repo import StoryConfigRepository

__all__ = [
    "ChaptersRepository",
    "ItemsRepository",
    "MapsRepository",
    "QuestsRepository",
    "RoomsRepository",
    "StoryConfigRepository",
]
