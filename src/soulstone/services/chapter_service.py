"""Chapter gating driven by quest and story flags."""
from __future__ import annotations

from typing import List

from soulstone.data.repositories import ChaptersRepository
from soulstone.domain.defs import ChapterDef
from soulstone.domain.flags import FLAG_CONCLUDED, FlagStore


class ChapterService:
    """Decides which chapters, and therefore which map locations, are open."""

    def __init__(self, *, chapters_repo: ChaptersRepository) -> None:
        self._chapters_repo = chapters_repo

    def is_chapter_unlocked(self, chapter: ChapterDef, flags: FlagStore) -> bool:
        chapters = self._chapters_repo.by_number()
        if chapters and chapter.number == chapters[0].number:
            return True
        if chapter.unlock_quest_id and flags.get(chapter.unlock_quest_id) != FLAG_CONCLUDED:
            return False
        return all(flags.is_true(flag_name) for flag_name in chapter.unlock_flags)

    def unlocked_chapters(self, flags: FlagStore) -> List[ChapterDef]:
        return [chapter for chapter in self._chapters_repo.by_number() if self.is_chapter_unlocked(chapter, flags)]

    def current_chapter(self, flags: FlagStore) -> ChapterDef | None:
        unlocked = self.unlocked_chapters(flags)
        return unlocked[-1] if unlocked else None

    def is_location_in_unlocked_chapter(self, location_id: str, flags: FlagStore) -> bool:
        """Return True unless every chapter listing the location is still locked."""
        owners = [chapter for chapter in self._chapters_repo.all() if location_id in chapter.location_ids]
        if not owners:
            return True
        return any(self.is_chapter_unlocked(chapter, flags) for chapter in owners)
