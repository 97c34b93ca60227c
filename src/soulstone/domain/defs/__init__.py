"""Domain definition exports."""

from .chapter_def import ChapterDef
from .item_def import ItemDef
from .map_def import MapDef, MapPathDef, MapPinDef, PathStyle
from .quest_def import (
    FlagRewardDef,
    ObjectiveDef,
    ObjectiveType,
    QuestDef,
    QuestType,
    RewardDef,
)
from .room_def import (
    ActionDef,
    CombatDef,
    ContinueAt,
    DialogueStepDef,
    EndDialogue,
    ExitDef,
    NextStep,
    NpcDialogueDef,
    ResponseDef,
    RoomDef,
    RoomEventDef,
)
from .story_config_def import StoryConfigDef

__all__ = [
    "ActionDef",
    "ChapterDef",
    "CombatDef",
    "ContinueAt",
    "DialogueStepDef",
    "EndDialogue",
    "ExitDef",
    "FlagRewardDef",
    "ItemDef",
    "MapDef",
    "MapPathDef",
    "MapPinDef",
    "NextStep",
    "NpcDialogueDef",
    "ObjectiveDef",
    "ObjectiveType",
    "PathStyle",
    "QuestDef",
    "QuestType",
    "ResponseDef",
    "RewardDef",
    "RoomDef",
    "RoomEventDef",
    "StoryConfigDef",
]
