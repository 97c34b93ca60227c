"""Console-driven UI loops for Soulstone."""
from __future__ import annotations

import logging
from typing import Callable, List, Literal, Sequence, Tuple

from soulstone.data.errors import DataError
from soulstone.services import ActionResult, GameSession
from soulstone.services.factories import create_game_session
from soulstone.presentation.cli.config import configure_logging, load_config
from soulstone.presentation.cli.render import (
    render_combat,
    render_dialogue,
    render_events,
    render_heading,
    render_inventory,
    render_journal,
    render_map,
    render_menu,
    render_narration,
    render_room,
)

logger = logging.getLogger(__name__)

MenuAction = Literal["new_game", "quit"]
MenuOption = Tuple[str, Callable[[], bool]]


def main() -> None:
    """Start the interactive CLI session."""
    config = load_config()
    configure_logging(config)
    try:
        session = create_game_session(config["content_path"] or None)
    except DataError as exc:
        logger.error("Unable to load content: %s", exc)
        print(f"Unable to load game content: {exc}")
        return
    print(f"=== {session.story_config.name} ===")
    running = True
    while running:
        action = _main_menu_loop()
        if action == "quit":
            running = False
            continue
        player_name = _prompt_player_name()
        _show_result(session.start_new_game(player_name))
        running = _run_game_loop(session)
    print("Goodbye!")


def _main_menu_loop() -> MenuAction:
    while True:
        print()
        print("Main Menu")
        print("1. New Game")
        print("2. Quit")
        choice = input("Select an option: ").strip()
        if choice == "1":
            return "new_game"
        if choice == "2":
            return "quit"
        print("Invalid selection. Please enter 1 or 2.")


def _prompt_player_name() -> str:
    name = input("Enter your name (default Wanderer): ").strip()
    return name or "Wanderer"


def _run_game_loop(session: GameSession) -> bool:
    """Play until the player leaves to the main menu (True) or quits (False)."""
    while True:
        view = session.get_view()
        if view.mode == "dialogue" and view.dialogue is not None:
            render_dialogue(view.dialogue)
            render_menu("Responses", view.dialogue.responses)
            index = _prompt_index(view.dialogue.responses)
            _show_result(session.choose_response(index))
            continue
        if view.mode == "combat" and view.combat is not None:
            render_combat(view.combat)
            _run_combat_turn(session, view.combat.actions, view.combat.usable_items)
            continue
        if view.room is None:
            return True
        render_room(view.room)
        options: List[MenuOption] = []
        for action in view.room.actions:
            options.append((action.label, _command(session.perform_action, action.action_id)))
        for exit_view in view.room.exits:
            options.append((f"Go: {exit_view.label}", _command(session.travel, exit_view.label)))
        for item_id in view.room.items:
            options.append((f"Take: {item_id}", _command(session.take_item, item_id)))
        options.append(("Journal", lambda: _show_journal(session)))
        options.append(("Inventory", lambda: _show_inventory(session)))
        options.append(("Map", lambda: _show_map(session)))
        options.append(("Main Menu", lambda: False))
        render_menu("Actions", [label for label, _ in options])
        index = _prompt_index([label for label, _ in options])
        if not options[index][1]():
            return True


def _run_combat_turn(
    session: GameSession, actions: Sequence[str], usable_items: Sequence[tuple[str, str, int]]
) -> None:
    render_menu("Combat", actions)
    action = actions[_prompt_index(actions)]
    if action == "Use Item":
        if not usable_items:
            print("You have nothing to use.")
            return
        render_menu("Items", [f"{name} x{quantity}" for _, name, quantity in usable_items])
        item_id = usable_items[_prompt_index(usable_items)][0]
        _show_result(session.combat_action("Use Item", item_id))
        return
    _show_result(session.combat_action(action))  # type: ignore[arg-type]


def _command(run: Callable[[str], ActionResult], argument: str) -> Callable[[], bool]:
    def invoke() -> bool:
        _show_result(run(argument))
        return True

    return invoke


def _show_journal(session: GameSession) -> bool:
    chapter = session.current_chapter_name()
    if chapter:
        render_heading(f"Chapter: {chapter}")
    render_journal(session.get_journal())
    return True


def _show_inventory(session: GameSession) -> bool:
    summary = session.get_inventory()
    render_inventory(summary)
    if not summary.items:
        return True
    choice = input("Equip which item? (number, blank to skip): ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(summary.items):
        _show_result(session.equip_item(summary.items[int(choice) - 1][0]))
    return True


def _show_map(session: GameSession) -> bool:
    view = session.get_map_view()
    if view is None:
        print("You have no map.")
        return True
    render_map(view)
    return True


def _show_result(result: ActionResult) -> None:
    if result.narration:
        print()
        render_narration(result.narration)
    if result.dialogue is not None and not result.dialogue.responses:
        render_dialogue(result.dialogue)
    render_events(result.events)
    if result.error:
        print(result.error)


def _prompt_index(options: Sequence[object]) -> int:
    while True:
        raw = input("Choose: ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw) - 1
        print(f"Please enter a number between 1 and {len(options)}.")
