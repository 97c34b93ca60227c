"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Iterable, Sequence

from soulstone.services.combat_service import (
    AttackResolvedEvent,
    CombatView,
    EnemyAttackEvent,
    EnemyDefeatedEvent,
    ItemUsedEvent,
    PlayerDefeatedEvent,
    PlayerFledEvent,
)
from soulstone.services.dialogue_service import DialogueView
from soulstone.services.events import GameEvent
from soulstone.services.inventory_service import (
    EquipFailedEvent,
    InventorySummary,
    ItemEquippedEvent,
    ItemGainedEvent,
    ItemGivenEvent,
)
from soulstone.services.map_service import MapView
from soulstone.services.quest_service import (
    LocationRevealedEvent,
    ObjectiveProgressEvent,
    QuestAcceptedEvent,
    QuestCompletedEvent,
    QuestFailedEvent,
    QuestJournalView,
    QuestReadyEvent,
)
from soulstone.services.room_service import EncounterStartedEvent, HealthRestoredEvent, RoomView

_WIDTH = 72


def debug_enabled() -> bool:
    """Return True only when SOULSTONE_DEBUG is explicitly set to '1'."""
    return os.getenv("SOULSTONE_DEBUG") == "1"


def wrap(text: str, width: int = _WIDTH) -> list[str]:
    if not text:
        return [""]
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width=width, break_long_words=False) or [""])
    return lines


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def render_narration(lines: Sequence[str]) -> None:
    for line in lines:
        for wrapped in wrap(line):
            print(wrapped)


def render_room(view: RoomView) -> None:
    title = view.room_id.replace("_", " ").title()
    if debug_enabled():
        title = f"{title} [{view.room_id}]"
    render_heading(title)
    render_narration([view.description])
    if view.items:
        print()
        print("You see:")
        render_bullet_lines(view.items)


def render_dialogue(view: DialogueView) -> None:
    render_heading(view.speaker or view.npc_name)
    render_narration([view.message])


def render_combat(view: CombatView) -> None:
    render_heading(f"Combat: {view.enemy_name}")
    print(f"Enemy health: {view.enemy_health}")
    print(f"Your health: {view.player_health}")


def render_journal(journal: QuestJournalView) -> None:
    render_heading("Quest Journal")
    if not (journal.active or journal.ready_to_turn_in or journal.completed or journal.failed):
        print("No quests yet.")
        return
    for quest in [*journal.active, *journal.ready_to_turn_in]:
        suffix = " (ready to turn in)" if quest in journal.ready_to_turn_in else ""
        print(f"{quest.name} [{quest.quest_type}]{suffix}")
        for objective in quest.objectives:
            marker = ">" if objective.is_current else " "
            optional = " (optional)" if objective.is_optional else ""
            print(f"  {marker} {objective.description} {objective.progress_text}{optional}".rstrip())
    if journal.completed:
        print("Completed:")
        render_bullet_lines(journal.completed)
    if journal.failed:
        print("Failed:")
        render_bullet_lines(journal.failed)


def render_inventory(summary: InventorySummary) -> None:
    render_heading("Inventory")
    if not summary.items and not summary.equipped:
        print("Your pack is empty.")
        return
    for _, name, quantity in summary.items:
        print(f"- {name} x{quantity}")
    for slot, _, name in summary.equipped:
        print(f"- {name} (equipped: {slot})")


def render_map(view: MapView) -> None:
    render_heading(f"Map: {view.region_id or view.map_id}")
    for pin in view.pins:
        marker = " (you are here)" if pin.is_current else ""
        print(f"- {pin.display_name}{marker}")
    for path in view.paths:
        print(f"  {path.from_location_id} <-> {path.to_location_id}")


def describe_event(event: GameEvent) -> str | None:
    """Return a player-facing line for an event, or None if it is silent."""
    if isinstance(event, ItemGainedEvent):
        suffix = f" x{event.quantity}" if event.quantity > 1 else ""
        return f"You receive {event.item_name}{suffix}."
    if isinstance(event, ItemGivenEvent):
        return f"You give {event.item_name} to {event.recipient}."
    if isinstance(event, ItemEquippedEvent):
        return f"You equip {event.item_name}."
    if isinstance(event, EquipFailedEvent):
        return event.message
    if isinstance(event, QuestAcceptedEvent):
        return f"Quest accepted: {event.quest_name}"
    if isinstance(event, ObjectiveProgressEvent):
        status = "complete" if event.completed else f"{event.current}/{event.target}"
        return f"Objective {event.description}: {status}"
    if isinstance(event, QuestReadyEvent):
        return f"Quest ready to turn in: {event.quest_name}"
    if isinstance(event, QuestCompletedEvent):
        return f"Quest completed: {event.quest_name} (+{event.gold} gold)"
    if isinstance(event, QuestFailedEvent):
        return f"Quest failed: {event.quest_name}"
    if isinstance(event, LocationRevealedEvent):
        return f"New location revealed: {event.location_id.replace('_', ' ').title()}"
    if isinstance(event, EncounterStartedEvent):
        return f"{event.enemy_name} blocks your way!"
    if isinstance(event, HealthRestoredEvent):
        return f"Your health is restored to {event.health}."
    if isinstance(event, AttackResolvedEvent):
        return f"{event.message} You deal {event.damage} damage.".strip()
    if isinstance(event, ItemUsedEvent):
        return event.message or f"You use {event.item_name}."
    if isinstance(event, EnemyAttackEvent):
        return f"{event.enemy_name} hits you for {event.damage}. Your health is now {event.player_health}."
    if isinstance(event, EnemyDefeatedEvent):
        return f"{event.enemy_name} is defeated!"
    if isinstance(event, PlayerFledEvent):
        return None
    if isinstance(event, PlayerDefeatedEvent):
        return f"{event.enemy_name} has defeated you!"
    return None


def render_events(events: Sequence[GameEvent]) -> None:
    lines = [line for line in (describe_event(event) for event in events) if line]
    if not lines:
        return
    render_heading("Events")
    render_bullet_lines(lines)
