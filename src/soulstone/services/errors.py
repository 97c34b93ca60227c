"""Service-layer exceptions."""


class InvalidActionError(ValueError):
    """Raised when an action is not offered in the current game state."""


class QuestStateError(ValueError):
    """Raised when a quest operation does not fit the quest's current state."""


class TravelBlockedError(InvalidActionError):
    """Raised when an exit is closed by its flag conditions."""
