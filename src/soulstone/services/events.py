"""Base type for events reported by services to the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GameEvent:
    """Base class for every service event."""
