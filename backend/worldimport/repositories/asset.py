"""Asset and asset-dependency repositories."""

from __future__ import annotations

from sqlalchemy import select

from worldimport.models.asset import AssetDependencyRelation, GameAsset
from worldimport.repositories.base import BaseRepository


class AssetRepository(BaseRepository[GameAsset]):
    """Persistence-only repository for :class:`GameAsset`."""

    model = GameAsset


class AssetDependencyRepository(BaseRepository[AssetDependencyRelation]):
    """Persistence-only repository for :class:`AssetDependencyRelation`."""

    model = AssetDependencyRelation

    def existing_pairs(self) -> set[tuple[str, str]]:
        """Return every stored ``(dependent, dependency)`` pair.

        :returns: Pair index used for constant-time duplicate checks.
        :rtype: set[tuple[str, str]]
        """
        stmt = select(AssetDependencyRelation.dependent, AssetDependencyRelation.dependency)
        return {(row[0], row[1]) for row in self.session.execute(stmt)}
