"""Repository for quest definitions."""
from __future__ import annotations

from typing import List

from soulstone.data.errors import DataValidationError, QuestNotFoundError
from soulstone.data.repositories.base import RecordRepositoryBase
from soulstone.domain.defs import (
    FlagRewardDef,
    ObjectiveDef,
    ObjectiveType,
    QuestDef,
    QuestType,
    RewardDef,
)

_OBJECTIVE_TYPES = ", ".join(member.value for member in ObjectiveType)


class QuestsRepository(RecordRepositoryBase[QuestDef]):
    """Loads and validates quest definitions from quests/<quest_id>.json."""

    not_found_error = QuestNotFoundError

    def __init__(self, base_path=None) -> None:
        super().__init__("quests", base_path)

    def _build(self, record_id: str, raw: dict[str, object]) -> QuestDef:
        context = f"quest '{record_id}'"
        quest_id = self._require_str(raw.get("questId"), f"{context} questId")
        if quest_id != record_id:
            raise DataValidationError(f"{context} questId must match file name (found '{quest_id}').")
        name = self._require_str(raw.get("questName"), f"{context} questName")
        description = self._require_str(raw.get("questDescription", ""), f"{context} questDescription")
        quest_giver = self._require_str(raw.get("questGiver", ""), f"{context} questGiver")
        giver_location = self._require_str(
            raw.get("questGiverLocation", ""), f"{context} questGiverLocation"
        )
        raw_type = self._require_str(raw.get("questType", QuestType.MAIN.value), f"{context} questType")
        try:
            quest_type = QuestType(raw_type)
        except ValueError as exc:
            raise DataValidationError(f"{context} questType must be Main or Side.") from exc
        chapter_number = self._require_int(raw.get("chapterNumber", 1), f"{context} chapterNumber")
        if chapter_number < 1:
            raise DataValidationError(f"{context} chapterNumber must be at least 1.")
        return QuestDef(
            quest_id=quest_id,
            name=name,
            description=description,
            quest_giver=quest_giver,
            quest_giver_location=giver_location,
            quest_type=quest_type,
            chapter_number=chapter_number,
            prerequisite_quests=tuple(
                self._require_str_list(raw.get("prerequisiteQuests", []), f"{context} prerequisiteQuests")
            ),
            prerequisite_flags=tuple(
                self._require_str_list(raw.get("prerequisiteFlags", []), f"{context} prerequisiteFlags")
            ),
            objectives=tuple(self._parse_objectives(raw.get("objectives"), context)),
            reveals_on_accept=tuple(
                self._require_str_list(raw.get("revealsOnAccept", []), f"{context} revealsOnAccept")
            ),
            reveals_on_complete=tuple(
                self._require_str_list(raw.get("revealsOnComplete", []), f"{context} revealsOnComplete")
            ),
            rewards=self._parse_rewards(raw.get("rewards"), context),
        )

    def _parse_objectives(self, value: object, context: str) -> List[ObjectiveDef]:
        objectives_data = self._require_list(value, f"{context} objectives")
        if not objectives_data:
            raise DataValidationError(f"{context} must define at least one objective.")
        objectives: List[ObjectiveDef] = []
        seen: set[str] = set()
        for index, entry in enumerate(objectives_data):
            ctx = f"{context} objectives[{index}]"
            mapping = self._require_mapping(entry, ctx)
            objective_id = self._require_str(mapping.get("objectiveId", f"objective_{index}"), f"{ctx}.objectiveId")
            if objective_id in seen:
                raise DataValidationError(f"{ctx}.objectiveId '{objective_id}' is declared twice.")
            seen.add(objective_id)
            raw_type = self._require_str(mapping.get("type"), f"{ctx}.type")
            try:
                objective_type = ObjectiveType(raw_type)
            except ValueError as exc:
                raise DataValidationError(f"{ctx}.type must be one of {_OBJECTIVE_TYPES}.") from exc
            target_count = self._require_int(mapping.get("targetCount", 1), f"{ctx}.targetCount")
            if target_count <= 0:
                raise DataValidationError(f"{ctx}.targetCount must be a positive integer.")
            objectives.append(
                ObjectiveDef(
                    objective_id=objective_id,
                    description=self._require_str(mapping.get("description", ""), f"{ctx}.description"),
                    objective_type=objective_type,
                    target_id=self._require_str(mapping.get("targetId"), f"{ctx}.targetId"),
                    target_count=target_count,
                    is_optional=self._require_bool(mapping.get("isOptional", False), f"{ctx}.isOptional"),
                    is_parallel=self._require_bool(mapping.get("isParallel", False), f"{ctx}.isParallel"),
                )
            )
        return objectives

    def _parse_rewards(self, value: object, context: str) -> RewardDef:
        if value is None:
            return RewardDef()
        mapping = self._require_mapping(value, f"{context} rewards")
        gold = self._require_int(mapping.get("gold", 0), f"{context} rewards.gold")
        experience = self._require_int(
            mapping.get("experiencePoints", 0), f"{context} rewards.experiencePoints"
        )
        if gold < 0:
            raise DataValidationError(f"{context} rewards.gold must be a non-negative integer.")
        if experience < 0:
            raise DataValidationError(
                f"{context} rewards.experiencePoints must be a non-negative integer."
            )
        item_ids = tuple(self._require_str_list(mapping.get("itemIds", []), f"{context} rewards.itemIds"))
        flags: List[FlagRewardDef] = []
        raw_flags = self._require_list(mapping.get("flagsToSet", []), f"{context} rewards.flagsToSet")
        for index, entry in enumerate(raw_flags):
            ctx = f"{context} rewards.flagsToSet[{index}]"
            flag_map = self._require_mapping(entry, ctx)
            flag_name = self._require_str(flag_map.get("flagName"), f"{ctx}.flagName")
            if not flag_name.strip():
                raise DataValidationError(f"{ctx}.flagName must not be empty.")
            flag_value = self._require_flag_value(flag_map.get("flagValue", "true"), f"{ctx}.flagValue")
            flags.append(FlagRewardDef(flag_name=flag_name, flag_value=flag_value))
        return RewardDef(
            gold=gold,
            experience_points=experience,
            item_ids=item_ids,
            flags_to_set=tuple(flags),
        )
