"""Static content integrity validation across rooms, quests, items, chapters and maps."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from soulstone.data.errors import DataError
from soulstone.data.repositories import (
    ChaptersRepository,
    ItemsRepository,
    MapsRepository,
    QuestsRepository,
    RoomsRepository,
    StoryConfigRepository,
)
from soulstone.domain.defs import ObjectiveType, QuestDef, RoomDef

Severity = str

_ITEM_OBJECTIVES = {ObjectiveType.COLLECT_ITEM, ObjectiveType.USE_ITEM}


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(issue.severity == "ERROR" for issue in issues)


def validate_content(
    *,
    rooms_repo: RoomsRepository,
    quests_repo: QuestsRepository,
    items_repo: ItemsRepository,
    maps_repo: MapsRepository | None = None,
    chapters_repo: ChaptersRepository | None = None,
    story_repo: StoryConfigRepository | None = None,
) -> list[Issue]:
    """Load every record and report broken references; content problems never raise."""
    issues: list[Issue] = []
    rooms = _load_records(rooms_repo.ids(), rooms_repo.get, "room", issues)
    quests = _load_records(quests_repo.ids(), quests_repo.get, "quest", issues)
    item_ids = _load_item_ids(items_repo, issues)

    issues.extend(_check_rooms(rooms, quests, item_ids))
    issues.extend(_check_quests(quests, rooms, item_ids))
    issues.extend(_check_prerequisite_cycles(quests))
    if chapters_repo is not None:
        issues.extend(_check_chapters(chapters_repo, rooms, quests))
    if maps_repo is not None:
        _load_records(maps_repo.ids(), maps_repo.get, "map", issues)
    if story_repo is not None:
        issues.extend(_check_story(story_repo, rooms, item_ids, maps_repo))
    return issues


def _load_records(ids: Sequence[str], getter, kind: str, issues: list[Issue]) -> Dict[str, object]:
    records: Dict[str, object] = {}
    for record_id in ids:
        try:
            records[record_id] = getter(record_id)
        except DataError as exc:
            issues.append(
                Issue(severity="ERROR", code="LOAD_ERROR", message=str(exc), context={kind: record_id})
            )
    return records


def _load_item_ids(items_repo: ItemsRepository, issues: list[Issue]) -> set[str]:
    try:
        return {item.id for item in items_repo.all()}
    except DataError as exc:
        issues.append(Issue(severity="ERROR", code="LOAD_ERROR", message=str(exc), context={"file": "items.json"}))
        return set()


def _check_rooms(
    rooms: Mapping[str, RoomDef], quests: Mapping[str, QuestDef], item_ids: set[str]
) -> list[Issue]:
    issues: list[Issue] = []
    for room_id, room in sorted(rooms.items()):
        for index, exit_def in enumerate(room.exits):
            if exit_def.leads_to not in rooms:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="MISSING_ROOM",
                        message=f"Exit '{exit_def.exit_name}' leads to unknown room '{exit_def.leads_to}'.",
                        context={"room": room_id, "path": f"exits[{index}]"},
                    )
                )
        for event in room.events:
            if event.item_id and event.item_id not in item_ids:
                issues.append(_unknown_item(event.item_id, {"room": room_id, "path": "events"}))
        for dialogue in room.dialogues:
            for step_index, step in enumerate(dialogue.steps):
                for response_index, response in enumerate(step.responses):
                    context = {
                        "room": room_id,
                        "npc": dialogue.npc_name,
                        "path": f"dialogues[{step_index}].responses[{response_index}]",
                    }
                    for item_id in (response.get_item, response.give_item):
                        if item_id and item_id not in item_ids:
                            issues.append(_unknown_item(item_id, context))
                    for quest_id in (response.start_quest, response.complete_quest):
                        if quest_id and quest_id not in quests:
                            issues.append(
                                Issue(
                                    severity="ERROR",
                                    code="UNKNOWN_QUEST",
                                    message=f"Response references unknown quest '{quest_id}'.",
                                    context=context,
                                )
                            )
    return issues


def _check_quests(
    quests: Mapping[str, QuestDef], rooms: Mapping[str, RoomDef], item_ids: set[str]
) -> list[Issue]:
    issues: list[Issue] = []
    for quest_id, quest in sorted(quests.items()):
        if quest.quest_giver_location and quest.quest_giver_location not in rooms:
            issues.append(
                Issue(
                    severity="WARNING",
                    code="MISSING_ROOM",
                    message=f"Quest giver location '{quest.quest_giver_location}' is not a room.",
                    context={"quest": quest_id},
                )
            )
        for prereq_id in quest.prerequisite_quests:
            if prereq_id not in quests:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="UNKNOWN_QUEST",
                        message=f"Prerequisite quest '{prereq_id}' not found.",
                        context={"quest": quest_id},
                    )
                )
        for index, objective in enumerate(quest.objectives):
            context = {"quest": quest_id, "path": f"objectives[{index}]"}
            if objective.objective_type == ObjectiveType.GO_TO_ROOM and objective.target_id not in rooms:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="MISSING_ROOM",
                        message=f"Objective targets unknown room '{objective.target_id}'.",
                        context=context,
                    )
                )
            if objective.objective_type in _ITEM_OBJECTIVES and objective.target_id not in item_ids:
                issues.append(_unknown_item(objective.target_id, context))
        for item_id in quest.rewards.item_ids:
            if item_id not in item_ids:
                issues.append(_unknown_item(item_id, {"quest": quest_id, "path": "rewards.itemIds"}))
    return issues


def _check_prerequisite_cycles(quests: Mapping[str, QuestDef]) -> list[Issue]:
    issues: list[Issue] = []
    finished: set[str] = set()

    def visit(quest_id: str, path: List[str]) -> None:
        if quest_id in path:
            cycle = path[path.index(quest_id):] + [quest_id]
            issues.append(
                Issue(
                    severity="ERROR",
                    code="CIRCULAR_PREREQUISITES",
                    message=f"Quest '{quest_id}' has circular prerequisites.",
                    context={"cycle": " -> ".join(cycle)},
                )
            )
            return
        if quest_id in finished or quest_id not in quests:
            return
        for prereq_id in quests[quest_id].prerequisite_quests:
            visit(prereq_id, path + [quest_id])
        finished.add(quest_id)

    for quest_id in sorted(quests.keys()):
        visit(quest_id, [])
    return issues


def _check_chapters(
    chapters_repo: ChaptersRepository, rooms: Mapping[str, RoomDef], quests: Mapping[str, QuestDef]
) -> list[Issue]:
    try:
        chapters = chapters_repo.by_number()
    except DataError as exc:
        return [Issue(severity="ERROR", code="LOAD_ERROR", message=str(exc), context={"file": "chapters.json"})]
    issues: list[Issue] = []
    for position, chapter in enumerate(chapters, start=1):
        context = {"chapter": chapter.chapter_id}
        if chapter.number != position:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="CHAPTER_NUMBERING",
                    message=f"Chapter has number {chapter.number}, expected {position}.",
                    context=context,
                )
            )
        if position > 1 and not chapter.unlock_quest_id and not chapter.unlock_flags:
            issues.append(
                Issue(
                    severity="WARNING",
                    code="CHAPTER_ALWAYS_OPEN",
                    message="Chapter has no unlock quest or unlock flags.",
                    context=context,
                )
            )
        if chapter.unlock_quest_id and chapter.unlock_quest_id not in quests:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="UNKNOWN_QUEST",
                    message=f"Unlock quest '{chapter.unlock_quest_id}' not found.",
                    context=context,
                )
            )
        for location_id in chapter.location_ids:
            if location_id not in rooms:
                issues.append(
                    Issue(
                        severity="WARNING",
                        code="MISSING_ROOM",
                        message=f"Chapter lists unknown location '{location_id}'.",
                        context=context,
                    )
                )
    return issues


def _check_story(
    story_repo: StoryConfigRepository,
    rooms: Mapping[str, RoomDef],
    item_ids: set[str],
    maps_repo: MapsRepository | None,
) -> list[Issue]:
    try:
        config = story_repo.get_config()
    except DataError as exc:
        return [Issue(severity="ERROR", code="LOAD_ERROR", message=str(exc), context={"file": "story.json"})]
    issues: list[Issue] = []
    for field_name, room_id in (("starting_room", config.starting_room), ("respawn_room", config.respawn_room)):
        if room_id not in rooms:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_ROOM",
                    message=f"{field_name} '{room_id}' is not a room.",
                    context={"story": config.story_id},
                )
            )
    for item_id in (*config.starting_items, *config.starting_equipment.values()):
        if item_id not in item_ids:
            issues.append(_unknown_item(item_id, {"story": config.story_id}))
    if config.default_map_id and maps_repo is not None and not maps_repo.exists(config.default_map_id):
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_MAP",
                message=f"default_map_id '{config.default_map_id}' not found.",
                context={"story": config.story_id},
            )
        )
    issues.extend(_check_reachability(rooms, config.starting_room, {config.respawn_room}))
    return issues


def _check_reachability(rooms: Mapping[str, RoomDef], start_id: str, extra_roots: set[str]) -> list[Issue]:
    """Warn about rooms no chain of exits reaches, ignoring flag conditions."""
    roots = [room_id for room_id in [start_id, *sorted(extra_roots)] if room_id in rooms]
    reached: set[str] = set()
    pending = list(roots)
    while pending:
        room_id = pending.pop()
        if room_id in reached:
            continue
        reached.add(room_id)
        for exit_def in rooms[room_id].exits:
            if exit_def.leads_to in rooms and exit_def.leads_to not in reached:
                pending.append(exit_def.leads_to)
    return [
        Issue(
            severity="WARNING",
            code="UNREACHABLE_ROOM",
            message="No exit leads to this room.",
            context={"room": room_id},
        )
        for room_id in sorted(rooms.keys())
        if room_id not in reached
    ]


def _unknown_item(item_id: str, context: dict[str, str]) -> Issue:
    return Issue(
        severity="WARNING",
        code="UNKNOWN_ITEM",
        message=f"Unknown item '{item_id}'.",
        context=context,
    )
