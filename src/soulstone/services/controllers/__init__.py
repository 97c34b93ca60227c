"""UI-agnostic controllers for game flow orchestration."""
from __future__ import annotations

from .combat_controller import CombatAction, CombatController, CombatTurnResult

__all__ = [
    "CombatAction",
    "CombatController",
    "CombatTurnResult",
]
