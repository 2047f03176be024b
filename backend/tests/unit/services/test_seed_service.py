"""Unit tests for SeedService: pool sizing, per-pass seeding and clamping."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from worldimport.core.config import SEED_MODE_REPLACE
from worldimport.models import (
    FavouriteLevelRelation,
    FavouriteUserRelation,
    PlayLevelRelation,
    UniquePlayLevelRelation,
)
from worldimport.repositories import UserRepository
from worldimport.services.seeding.service import SeedService

from tests.factories.level import GameLevelFactory
from tests.factories.user import GameUserFactory

PREFIX = "dummy_user_"


class StaticCounters:
    """Stand-in for :class:`PopularityLoader` serving fixed counters."""

    def __init__(self, unique=None, creators=None, level_hearts=None):
        self.unique = dict(unique or {})
        self.creators = dict(creators or {})
        self.level_hearts = dict(level_hearts or {})

    def unique_play_counts(self):
        return dict(self.unique)

    def creator_heart_counts(self):
        return dict(self.creators)

    def level_heart_counts(self):
        return dict(self.level_hearts)


def count_rows(session, model, **filters) -> int:
    stmt = select(func.count()).select_from(model)
    for key, value in filters.items():
        stmt = stmt.where(getattr(model, key) == value)
    return int(session.execute(stmt).scalar_one())


class TestSeedService:
    # -------------------------- Fixtures ---------------------------------- #

    @pytest.fixture()
    def service(self, service_ctx) -> SeedService:
        return SeedService(ctx=service_ctx)

    @pytest.fixture()
    def users(self, session) -> UserRepository:
        return UserRepository(session=session)

    # -------------------------- Unique plays ------------------------------ #

    def test_unique_play_counter_is_backed_by_distinct_placeholders(
        self, service, session, users
    ):
        """
        GIVEN a level with a unique-play counter of 5
        WHEN seeding runs
        THEN 5 unique-play and 5 play-count rows exist, from 5 distinct placeholders.
        """
        level = GameLevelFactory(level_id=7)

        result = service.seed(StaticCounters(unique={7: 5}))

        assert result.pool_size == 5
        assert count_rows(session, UniquePlayLevelRelation, level_id=level.level_id) == 5
        assert count_rows(session, PlayLevelRelation, level_id=level.level_id) == 5
        actors = session.execute(
            select(UniquePlayLevelRelation.user_id).where(UniquePlayLevelRelation.level_id == 7)
        ).scalars().all()
        assert len(set(actors)) == 5
        placeholder_ids = {u.user_id for u in users.list_placeholders(PREFIX)}
        assert set(actors) == placeholder_ids

    def test_play_rows_share_timestamp_and_count_one(self, service, session):
        GameLevelFactory(level_id=1)

        service.seed(StaticCounters(unique={1: 3}))

        plays = session.execute(select(PlayLevelRelation)).scalars().all()
        assert {p.count for p in plays} == {1}
        assert len({p.timestamp for p in plays}) == 1

    def test_pool_is_sized_from_every_snapshot_counter(self, service, session):
        """
        GIVEN counters for a stored level (2) and an unknown level (4)
        WHEN seeding runs
        THEN the pool has 4 placeholders but only the stored level gets rows.
        """
        GameLevelFactory(level_id=1)

        result = service.seed(StaticCounters(unique={1: 2, 999: 4}))

        assert result.pool_size == 4
        assert count_rows(session, UniquePlayLevelRelation) == 2
        assert result.pass_named("unique_plays").targets == 1

    def test_placeholders_are_numbered_from_zero(self, service, users):
        GameLevelFactory(level_id=1)

        service.seed(StaticCounters(unique={1: 3}))

        names = [u.username for u in users.list_placeholders(PREFIX)]
        assert names == ["dummy_user_0", "dummy_user_1", "dummy_user_2"]

    # -------------------------- Hearts ------------------------------------ #

    def test_creator_hearts_are_clamped_to_pool(self, service, session):
        """
        GIVEN a creator heart counter (10) larger than the pool (3)
        WHEN seeding runs
        THEN exactly 3 favourite-user rows point at that creator.
        """
        GameLevelFactory(level_id=1)
        creator = GameUserFactory(username="alice")

        result = service.seed(StaticCounters(unique={1: 3}, creators={"alice": 10}))

        assert (
            count_rows(session, FavouriteUserRelation, user_to_favourite_id=creator.user_id) == 3
        )
        hearts = result.pass_named("creator_hearts")
        assert hearts.clamped == 1
        assert hearts.rows == 3

    def test_level_hearts_use_lowest_pool_indexes(self, service, session, users):
        GameLevelFactory(level_id=1)
        GameLevelFactory(level_id=2)

        service.seed(StaticCounters(unique={1: 4}, level_hearts={2: 2}))

        pool = [u.user_id for u in users.list_placeholders(PREFIX)]
        hearted = session.execute(
            select(FavouriteLevelRelation.user_id).where(FavouriteLevelRelation.level_id == 2)
        ).scalars().all()
        assert sorted(hearted) == sorted(pool[:2])

    def test_hearts_reuse_placeholders_from_earlier_runs(self, service, session):
        """
        GIVEN placeholders already stored and no unique-play counters now
        WHEN seeding runs
        THEN the hearts passes still draw from the stored placeholders.
        """
        GameUserFactory(username="dummy_user_0")
        GameUserFactory(username="dummy_user_1")
        level = GameLevelFactory(level_id=5)

        result = service.seed(StaticCounters(level_hearts={5: 2}))

        assert result.pool_size == 0
        assert count_rows(session, FavouriteLevelRelation, level_id=level.level_id) == 2

    def test_zero_counters_create_nothing(self, service, session, users):
        GameLevelFactory(level_id=1)

        result = service.seed(StaticCounters(unique={1: 0}, level_hearts={1: 0}))

        assert result.pool_size == 0
        assert users.list_placeholders(PREFIX) == []
        assert count_rows(session, FavouriteLevelRelation) == 0

    # -------------------------- Reruns ------------------------------------ #

    def test_reseeding_accumulates(self, service, session, users):
        """
        GIVEN unchanged counters
        WHEN seeding runs twice in accumulate mode
        THEN placeholders and relation rows double, and names stay unique.
        """
        GameLevelFactory(level_id=1)
        counters = StaticCounters(unique={1: 3}, level_hearts={1: 2})

        service.seed(counters)
        second = service.seed(counters)

        names = [u.username for u in users.list_placeholders(PREFIX)]
        assert names == [f"dummy_user_{i}" for i in range(6)]
        assert second.placeholders_total == 6
        assert count_rows(session, UniquePlayLevelRelation, level_id=1) == 6
        assert count_rows(session, PlayLevelRelation, level_id=1) == 6
        assert count_rows(session, FavouriteLevelRelation, level_id=1) == 4

    def test_replace_mode_is_idempotent(self, service_ctx, session, users):
        GameLevelFactory(level_id=1)
        creator = GameUserFactory(username="alice")
        counters = StaticCounters(unique={1: 3}, creators={"alice": 2}, level_hearts={1: 1})
        service = SeedService(ctx=service_ctx, mode=SEED_MODE_REPLACE)

        service.seed(counters)
        second = service.seed(counters)

        assert second.purged == 3
        assert len(users.list_placeholders(PREFIX)) == 3
        assert count_rows(session, UniquePlayLevelRelation) == 3
        assert count_rows(session, PlayLevelRelation) == 3
        assert count_rows(session, FavouriteUserRelation, user_to_favourite_id=creator.user_id) == 2
        assert count_rows(session, FavouriteLevelRelation) == 1
        assert users.get_by_username("alice") is not None

    def test_replace_mode_only_purges_numbered_placeholders(self, service_ctx, users):
        """
        GIVEN a stored user carrying the prefix without a numeric suffix
        WHEN seeding runs in replace mode
        THEN that user survives the purge.
        """
        GameLevelFactory(level_id=1)
        GameUserFactory(username="dummy_user_x")
        service = SeedService(ctx=service_ctx, mode=SEED_MODE_REPLACE)
        service.seed(StaticCounters(unique={1: 2}))

        second = service.seed(StaticCounters(unique={1: 2}))

        assert second.purged == 2
        assert users.get_by_username("dummy_user_x") is not None

    def test_unknown_mode_is_rejected(self, service_ctx):
        with pytest.raises(ValueError):
            SeedService(ctx=service_ctx, mode="sometimes")
