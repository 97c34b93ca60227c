"""Chapter definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class ChapterDef:
    chapter_id: str
    name: str
    number: int
    unlock_quest_id: str | None
    unlock_flags: Tuple[str, ...]
    location_ids: Tuple[str, ...]
