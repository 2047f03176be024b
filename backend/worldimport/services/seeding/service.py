"""
SeedService
===========

Expands the snapshot's scalar popularity counters into concrete join rows
backed by a pool of placeholder users.

Steps (each in its own transaction, committed independently):

1. (replace mode) purge placeholders left by earlier runs.
2. Create ``maxCount`` placeholders, ``maxCount`` being the largest
   unique-play counter in the snapshot.
3. Unique-play pass: one unique-play row and one play-count row per
   placeholder index ``0..c-1`` for every stored level.
4. Creator-hearts pass: favourite-user rows from re-enumerated placeholders,
   clamped to the pool.
5. Level-hearts pass: favourite-level rows, clamped the same way.

Reseeding in accumulate mode is not idempotent: every run adds a new pool
and new rows on top of the old ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from worldimport.core.config import SEED_MODE_ACCUMULATE, SEED_MODE_REPLACE
from worldimport.models.relations import (
    FavouriteLevelRelation,
    FavouriteUserRelation,
    PlayLevelRelation,
    UniquePlayLevelRelation,
)
from worldimport.services._shared.base import BaseService, ServiceContext
from worldimport.services.seeding.dto import PassResult, SeedResult
from worldimport.services.seeding.popularity import PopularityLoader
from worldimport.services.seeding.population import (
    create_placeholders,
    enumerate_placeholders,
    purge_placeholders,
)

SEED_MODES = (SEED_MODE_ACCUMULATE, SEED_MODE_REPLACE)


class SeedService(BaseService):
    """Run the three fixed seeding passes against the current store."""

    def __init__(
        self, *, ctx: ServiceContext | None = None, mode: str = SEED_MODE_ACCUMULATE
    ) -> None:
        super().__init__(ctx=ctx)
        mode = (mode or SEED_MODE_ACCUMULATE).strip().lower()
        if mode not in SEED_MODES:
            raise ValueError(f"Unknown seed mode {mode!r}; expected one of {SEED_MODES}")
        self.mode = mode

    @property
    def prefix(self) -> str:
        return self.ctx.placeholder_prefix

    # ------------------------------ Entry point ---------------------------- #

    def seed(self, loader: PopularityLoader) -> SeedResult:
        """
        Seed join rows from ``loader``'s counters.

        :param loader: An entered :class:`PopularityLoader`.
        :type loader: PopularityLoader
        :returns: Pool and per-pass counts.
        :rtype: SeedResult
        :raises SnapshotReadError: If a counter query fails.
        :raises StoreWriteError: If a step fails to commit; earlier steps stay
            committed.
        """
        result = SeedResult()
        if self.mode == SEED_MODE_REPLACE:
            result.purged = self.purge()

        unique_counts = loader.unique_play_counts()
        pool = self.create_pool(max(unique_counts.values(), default=0))
        result.pool_size = len(pool)

        result.passes.append(self.seed_unique_plays(pool, unique_counts))
        result.passes.append(self.seed_creator_hearts(loader.creator_heart_counts()))
        result.passes.append(self.seed_level_hearts(loader.level_heart_counts()))
        result.placeholders_total = result.passes[-1].pool
        return result

    # -------------------------------- Steps -------------------------------- #

    def purge(self) -> int:
        """Delete earlier placeholders and their join rows; returns users removed."""
        try:
            with self.rw_uow() as uow:
                removed = purge_placeholders(uow, prefix=self.prefix)
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="placeholder purge") from exc
        return removed

    def create_pool(self, size: int) -> list[str]:
        """Create ``size`` placeholders; returns their ids in pool order."""
        self.log.info("Creating %d placeholder users", size, extra={"phase": "seed", "count": size})
        if size <= 0:
            return []
        try:
            with self.rw_uow() as uow:
                pool = create_placeholders(uow, size, prefix=self.prefix)
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="placeholder users") from exc
        return pool

    def seed_unique_plays(self, pool: list[str], counts: Mapping[int, int]) -> PassResult:
        """
        Back each stored level's unique-play counter with rows.

        ``pool`` is the in-memory list built by :meth:`create_pool`; it is
        sized from these very counters, so no level overflows it.
        """
        outcome = PassResult(name="unique_plays", pool=len(pool))
        now = datetime.now(timezone.utc)
        unique_rows: list[UniquePlayLevelRelation] = []
        play_rows: list[PlayLevelRelation] = []
        try:
            with self.rw_uow() as uow:
                for level in uow.levels.list(sort=["level_id"]):
                    actors = self._actors_for(pool, counts.get(level.level_id, 0), outcome)
                    for user_id in actors:
                        unique_rows.append(
                            UniquePlayLevelRelation(
                                level_id=level.level_id, user_id=user_id, timestamp=now
                            )
                        )
                        play_rows.append(
                            PlayLevelRelation(
                                level_id=level.level_id, user_id=user_id, timestamp=now, count=1
                            )
                        )
                uow.unique_plays.add_all(unique_rows)
                uow.plays.add_all(play_rows)
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="unique plays") from exc
        self._log_pass(outcome)
        return outcome

    def seed_creator_hearts(self, counts: Mapping[str, int]) -> PassResult:
        """Back each stored user's heart counter with favourite-user rows."""
        outcome = PassResult(name="creator_hearts")
        rows: list[FavouriteUserRelation] = []
        try:
            with self.rw_uow() as uow:
                pool = enumerate_placeholders(uow, prefix=self.prefix)
                outcome.pool = len(pool)
                for target in uow.users.list(sort=["username"]):
                    actors = self._actors_for(pool, counts.get(target.username, 0), outcome)
                    rows.extend(
                        FavouriteUserRelation(
                            user_favouriting_id=user_id, user_to_favourite_id=target.user_id
                        )
                        for user_id in actors
                    )
                uow.favourite_users.add_all(rows)
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="creator hearts") from exc
        self._log_pass(outcome)
        return outcome

    def seed_level_hearts(self, counts: Mapping[int, int]) -> PassResult:
        """Back each stored level's heart counter with favourite-level rows."""
        outcome = PassResult(name="level_hearts")
        rows: list[FavouriteLevelRelation] = []
        try:
            with self.rw_uow() as uow:
                pool = enumerate_placeholders(uow, prefix=self.prefix)
                outcome.pool = len(pool)
                for level in uow.levels.list(sort=["level_id"]):
                    actors = self._actors_for(pool, counts.get(level.level_id, 0), outcome)
                    rows.extend(
                        FavouriteLevelRelation(user_id=user_id, level_id=level.level_id)
                        for user_id in actors
                    )
                uow.favourite_levels.add_all(rows)
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="level hearts") from exc
        self._log_pass(outcome)
        return outcome

    # ------------------------------- Helpers ------------------------------- #

    @staticmethod
    def _actors_for(pool: list[str], count: int, outcome: PassResult) -> list[str]:
        """Take the first ``min(count, len(pool))`` placeholders and tally."""
        if count <= 0:
            return []
        actors = pool[: min(count, len(pool))]
        if len(actors) < count:
            outcome.clamped += 1
        if actors:
            outcome.targets += 1
            outcome.rows += len(actors)
        return actors

    def _log_pass(self, outcome: PassResult) -> None:
        self.log.info(
            "Seeded %s: %d rows over %d targets (%d clamped, pool %d)",
            outcome.name,
            outcome.rows,
            outcome.targets,
            outcome.clamped,
            outcome.pool,
            extra={"phase": "seed", "count": outcome.rows},
        )
