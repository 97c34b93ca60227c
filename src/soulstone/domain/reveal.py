"""Single reveal rule shared by map pins and location discovery."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from soulstone.domain.flags import FlagStore, location_flag


@dataclass(slots=True)
class RevealRule:
    """Conditions under which a location counts as discovered."""

    always_visible: bool = False
    reveal_flag: str | None = None
    reveal_quests: Tuple[str, ...] = ()


def is_revealed(rule: RevealRule, location_id: str, flags: FlagStore) -> bool:
    """
    Evaluate a reveal rule against the current flags.

    A location is revealed when it is always visible, when its canonical
    `location_<id>` flag is "true", when its explicit reveal flag is "true",
    or when any listed quest flag is present and not "false" (an active quest
    reveals its locations just as a concluded one does).
    """
    if rule.always_visible:
        return True
    if flags.is_true(location_flag(location_id)):
        return True
    if rule.reveal_flag and flags.is_true(rule.reveal_flag):
        return True
    return any(flags.is_revealing(quest_id) for quest_id in rule.reveal_quests if quest_id)
