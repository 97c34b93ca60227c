"""Repository for chapter definitions."""
from __future__ import annotations

from typing import Dict

from soulstone.data.errors import DataValidationError
from soulstone.data.repositories.base import RepositoryBase
from soulstone.domain.defs import ChapterDef


class ChaptersRepository(RepositoryBase[ChapterDef]):
    """Loads chapter gating data keyed by chapter id."""

    def __init__(self, base_path=None) -> None:
        super().__init__("chapters.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ChapterDef]:
        chapters: Dict[str, ChapterDef] = {}
        numbers: Dict[int, str] = {}
        for chapter_id, payload in raw.items():
            context = f"chapter '{chapter_id}'"
            mapping = self._require_mapping(payload, context)
            number = self._require_int(mapping.get("chapterNumber"), f"{context} chapterNumber")
            if number < 1:
                raise DataValidationError(f"{context} chapterNumber must be at least 1.")
            if number in numbers:
                raise DataValidationError(
                    f"{context} chapterNumber {number} is already used by chapter '{numbers[number]}'."
                )
            numbers[number] = chapter_id
            chapters[chapter_id] = ChapterDef(
                chapter_id=chapter_id,
                name=self._require_str(mapping.get("chapterName", chapter_id), f"{context} chapterName"),
                number=number,
                unlock_quest_id=self._optional_str(mapping.get("unlockQuestId"), f"{context} unlockQuestId") or None,
                unlock_flags=tuple(
                    self._require_str_list(mapping.get("unlockFlags", []), f"{context} unlockFlags")
                ),
                location_ids=tuple(
                    self._require_str_list(mapping.get("locationIds", []), f"{context} locationIds")
                ),
            )
        return chapters

    def by_number(self) -> list[ChapterDef]:
        """Return chapters ordered by chapter number."""
        return sorted(self.all(), key=lambda chapter: chapter.number)
