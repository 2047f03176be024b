"""Join rows produced by the seeding passes.

These are never updated and never deduplicated against each other: several
identical rows for the same user/target pair are expected.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worldimport.core.extensions import db

from .base import PKMixin, ReprMixin

if TYPE_CHECKING:
    from .level import GameLevel
    from .user import GameUser


class UniquePlayLevelRelation(PKMixin, ReprMixin, db.Model):
    """A user has played a level at least once."""

    __tablename__ = "unique_play_level_relations"

    level_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("game_levels.level_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("game_users.user_id", ondelete="CASCADE"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    level: Mapped[GameLevel] = relationship("GameLevel")
    user: Mapped[GameUser] = relationship("GameUser")

    __table_args__ = (
        Index("ix_unique_play_level_relations_level_id", "level_id"),
        Index("ix_unique_play_level_relations_user_id", "user_id"),
    )


class PlayLevelRelation(PKMixin, ReprMixin, db.Model):
    """``count`` plays of a level by a user."""

    __tablename__ = "play_level_relations"

    level_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("game_levels.level_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("game_users.user_id", ondelete="CASCADE"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    level: Mapped[GameLevel] = relationship("GameLevel")
    user: Mapped[GameUser] = relationship("GameUser")

    __table_args__ = (
        Index("ix_play_level_relations_level_id", "level_id"),
        Index("ix_play_level_relations_user_id", "user_id"),
    )


class FavouriteUserRelation(PKMixin, ReprMixin, db.Model):
    """``user_favouriting`` hearted the creator ``user_to_favourite``."""

    __tablename__ = "favourite_user_relations"

    user_favouriting_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("game_users.user_id", ondelete="CASCADE"), nullable=False
    )
    user_to_favourite_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("game_users.user_id", ondelete="CASCADE"), nullable=False
    )

    user_favouriting: Mapped[GameUser] = relationship(
        "GameUser", foreign_keys=[user_favouriting_id]
    )
    user_to_favourite: Mapped[GameUser] = relationship(
        "GameUser", foreign_keys=[user_to_favourite_id]
    )

    __table_args__ = (
        Index("ix_favourite_user_relations_user_favouriting_id", "user_favouriting_id"),
        Index("ix_favourite_user_relations_user_to_favourite_id", "user_to_favourite_id"),
    )


class FavouriteLevelRelation(PKMixin, ReprMixin, db.Model):
    """A user hearted a level."""

    __tablename__ = "favourite_level_relations"

    user_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("game_users.user_id", ondelete="CASCADE"), nullable=False
    )
    level_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("game_levels.level_id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped[GameUser] = relationship("GameUser")
    level: Mapped[GameLevel] = relationship("GameLevel")

    __table_args__ = (
        Index("ix_favourite_level_relations_user_id", "user_id"),
        Index("ix_favourite_level_relations_level_id", "level_id"),
    )
