"""Quest progress state data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class QuestState(str, Enum):
    NOT_STARTED = "NotStarted"
    ACTIVE = "Active"
    READY_TO_TURN_IN = "ReadyToTurnIn"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(slots=True)
class ObjectiveProgress:
    """Tracks progress for a single quest objective."""

    target_count: int
    current_count: int = 0
    is_complete: bool = False

    def add_progress(self, amount: int = 1) -> bool:
        """Accrue progress capped at the target; return True when the count changed."""
        if amount <= 0 or self.is_complete:
            return False
        updated = min(self.current_count + amount, self.target_count)
        changed = updated != self.current_count
        self.current_count = updated
        self.is_complete = self.current_count >= self.target_count
        return changed


@dataclass(slots=True)
class QuestProgress:
    """Runtime progress for a started quest."""

    quest_id: str
    state: QuestState = QuestState.ACTIVE
    current_objective_index: int = 0
    objectives: List[ObjectiveProgress] = field(default_factory=list)
