"""Quest definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ObjectiveType(str, Enum):
    GO_TO_ROOM = "GoToRoom"
    TALK_TO_NPC = "TalkToNPC"
    COLLECT_ITEM = "CollectItem"
    DELIVER_ITEM = "DeliverItem"
    DEFEAT_ENEMY = "DefeatEnemy"
    DEFEAT_COUNT = "DefeatCount"
    SET_FLAG = "SetFlag"
    USE_ITEM = "UseItem"
    CUSTOM = "Custom"


class QuestType(str, Enum):
    MAIN = "Main"
    SIDE = "Side"


# Objectives of these types complete on a single visit/conversation and show no counter.
SINGLE_SHOT_OBJECTIVES: frozenset[ObjectiveType] = frozenset(
    {ObjectiveType.GO_TO_ROOM, ObjectiveType.TALK_TO_NPC}
)


@dataclass(slots=True)
class ObjectiveDef:
    objective_id: str
    description: str
    objective_type: ObjectiveType
    target_id: str
    target_count: int = 1
    is_optional: bool = False
    is_parallel: bool = False


@dataclass(slots=True)
class FlagRewardDef:
    flag_name: str
    flag_value: str


@dataclass(slots=True)
class RewardDef:
    gold: int = 0
    experience_points: int = 0
    item_ids: Tuple[str, ...] = ()
    flags_to_set: Tuple[FlagRewardDef, ...] = ()


@dataclass(slots=True)
class QuestDef:
    quest_id: str
    name: str
    description: str
    quest_giver: str
    quest_giver_location: str
    quest_type: QuestType
    chapter_number: int
    prerequisite_quests: Tuple[str, ...]
    prerequisite_flags: Tuple[str, ...]
    objectives: Tuple[ObjectiveDef, ...]
    reveals_on_accept: Tuple[str, ...]
    reveals_on_complete: Tuple[str, ...]
    rewards: RewardDef
