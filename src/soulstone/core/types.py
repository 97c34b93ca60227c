"""Shared type aliases for the core and domain layers."""
from typing import Literal

GameMode = Literal["explore", "dialogue", "combat"]
CombatPhase = Literal["player_turn", "enemy_turn", "victory", "fled", "player_defeated"]
CombatActionType = Literal["Attack", "Use Item", "Flee"]

__all__ = ["CombatActionType", "CombatPhase", "GameMode"]
