"""Repositories for the seeded join rows."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, or_

from worldimport.models.relations import (
    FavouriteLevelRelation,
    FavouriteUserRelation,
    PlayLevelRelation,
    UniquePlayLevelRelation,
)
from worldimport.repositories.base import BaseRepository


class _ActorScopedRepository(BaseRepository):
    """Adds bulk deletion of every row a set of users appears in."""

    def _actor_columns(self):
        raise NotImplementedError

    def delete_for_users(self, user_ids: Iterable[str]) -> int:
        """Delete rows referencing any of ``user_ids``; returns rows removed."""
        ids = list(user_ids)
        if not ids:
            return 0
        clause = or_(*(col.in_(ids) for col in self._actor_columns()))
        result = self.session.execute(
            delete(self.model).where(clause).execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)


class UniquePlayRepository(_ActorScopedRepository):
    model = UniquePlayLevelRelation

    def _actor_columns(self):
        return (UniquePlayLevelRelation.user_id,)


class PlayRepository(_ActorScopedRepository):
    model = PlayLevelRelation

    def _actor_columns(self):
        return (PlayLevelRelation.user_id,)


class FavouriteUserRepository(_ActorScopedRepository):
    model = FavouriteUserRelation

    def _actor_columns(self):
        return (
            FavouriteUserRelation.user_favouriting_id,
            FavouriteUserRelation.user_to_favourite_id,
        )


class FavouriteLevelRepository(_ActorScopedRepository):
    model = FavouriteLevelRelation

    def _actor_columns(self):
        return (FavouriteLevelRelation.user_id,)
