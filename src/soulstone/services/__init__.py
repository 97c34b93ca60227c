"""Service layer exports."""

from .errors import InvalidActionError, QuestStateError, TravelBlockedError
from .events import GameEvent
from .game_session import ActionResult, GameSession, SessionView

__all__ = [
    "ActionResult",
    "GameEvent",
    "GameSession",
    "InvalidActionError",
    "QuestStateError",
    "SessionView",
    "TravelBlockedError",
]
