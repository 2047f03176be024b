"""Content-addressed assets and their dependency edges."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worldimport.core.extensions import db

from .base import PKMixin, ReprMixin, RequiredTextMixin

if TYPE_CHECKING:
    from .user import GameUser


class GameAsset(ReprMixin, RequiredTextMixin, db.Model):
    """
    An uploaded asset, identified by the hash of its content.

    Fields
    ------
    asset_hash : str
        Content hash; natural key and primary key at once.
    dependencies : list[str]
        Hashes of the assets this one references.
    as_mainline_icon_hash : str
        Equal to ``asset_hash`` when the asset is some level's icon,
        otherwise empty.
    """

    __tablename__ = "game_assets"

    REQUIRED_TEXT_FIELDS = (
        "as_mainline_icon_hash",
        "as_mip_icon_hash",
        "as_mainline_photo_hash",
    )

    asset_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    upload_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_psp: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    size_in_bytes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    asset_type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    asset_serialization_method: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dependencies: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    as_mainline_icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    as_mip_icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    as_mainline_photo_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    original_uploader_id: Mapped[str | None] = mapped_column(
        String(24), ForeignKey("game_users.user_id"), nullable=True
    )
    original_uploader: Mapped[GameUser | None] = relationship("GameUser")

    __table_args__ = (Index("ix_game_assets_original_uploader_id", "original_uploader_id"),)

    @property
    def is_level_icon(self) -> bool:
        """Return ``True`` when the asset is flagged as a level icon."""
        return bool(self.as_mainline_icon_hash) and self.as_mainline_icon_hash == self.asset_hash


class AssetDependencyRelation(PKMixin, ReprMixin, db.Model):
    """Directed edge ``dependent -> dependency`` between two asset hashes.

    The pair is the identity of an edge; the unique constraint keeps the
    store free of duplicates even if a caller skips the importer's dedup.
    """

    __tablename__ = "asset_dependency_relations"

    dependent: Mapped[str] = mapped_column(String(64), nullable=False)
    dependency: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("dependent", "dependency", name="uq_asset_dependency_relations_pair"),
        Index("ix_asset_dependency_relations_dependency", "dependency"),
    )
