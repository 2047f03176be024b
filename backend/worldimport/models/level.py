"""Level model keyed by its author-assigned numeric id."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worldimport.core.extensions import db

from .base import ReprMixin, RequiredTextMixin

if TYPE_CHECKING:
    from .user import GameUser


class GameLevel(ReprMixin, RequiredTextMixin, db.Model):
    """
    A published level.

    ``level_id`` comes from upstream and is never generated here, so levels
    merge by primary key without any natural-key lookup. ``publisher_id`` is
    always the importer's fallback owner.
    """

    __tablename__ = "game_levels"

    REQUIRED_TEXT_FIELDS = (
        "title",
        "icon_hash",
        "description",
        "root_resource",
        "original_publisher",
    )

    level_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    is_adventure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location_x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location_y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    root_resource: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    publish_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    update_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    min_players: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_players: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enforce_min_max_players: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    same_screen_game: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date_team_picked: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_modded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    background_guid: Mapped[str | None] = mapped_column(String(64), nullable=True)
    game_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level_type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    story_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_sub_level: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_copyable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    original_publisher: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_re_upload: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    publisher_id: Mapped[str | None] = mapped_column(
        String(24), ForeignKey("game_users.user_id"), nullable=True
    )
    publisher: Mapped[GameUser | None] = relationship("GameUser", lazy="joined")

    __table_args__ = (
        Index("ix_game_levels_title", "title"),
        Index("ix_game_levels_story_id", "story_id"),
        Index("ix_game_levels_publisher_id", "publisher_id"),
    )
