"""Level repository."""

from __future__ import annotations

from worldimport.models.level import GameLevel
from worldimport.repositories.base import BaseRepository


class LevelRepository(BaseRepository[GameLevel]):
    """Persistence-only repository for :class:`GameLevel`."""

    model = GameLevel

    def _sortable_fields(self):
        return {"level_id": GameLevel.level_id}
