"""Game user model: the account record levels and assets point at."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from worldimport.core.extensions import db

from .base import ReprMixin, RequiredTextMixin

OBJECT_ID_LENGTH = 24


class GameUser(ReprMixin, RequiredTextMixin, db.Model):
    """
    A game-server account.

    Fields
    ------
    user_id : str
        24-hex object identifier; stable across re-imports of the same
        ``username``.
    username : str
        Public display name and natural key. Unique per store.
    email_address, password_bcrypt : str
        Credentials copied verbatim from the batch (may be empty).
    *_icon_hash, *_planets_hash, *_face_hash : str
        Content hashes of profile assets, empty when unset.
    """

    __tablename__ = "game_users"

    REQUIRED_TEXT_FIELDS = (
        "email_address",
        "password_bcrypt",
        "icon_hash",
        "psp_icon_hash",
        "vita_icon_hash",
        "beta_icon_hash",
        "description",
        "beta_planets_hash",
        "lbp2_planets_hash",
        "lbp3_planets_hash",
        "vita_planets_hash",
        "yay_face_hash",
        "boo_face_hash",
        "meh_face_hash",
        "presence_server_auth_token",
    )

    user_id: Mapped[str] = mapped_column(String(OBJECT_ID_LENGTH), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)

    email_address: Mapped[str] = mapped_column(String(254), nullable=False, default="")
    password_bcrypt: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email_address_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    should_reset_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    psp_icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    vita_icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    beta_icon_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    force_match: Mapped[str | None] = mapped_column(String(OBJECT_ID_LENGTH), nullable=True)
    filesize_quota_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location_x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location_y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    join_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    beta_planets_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    lbp2_planets_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    lbp3_planets_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    vita_planets_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    yay_face_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    boo_face_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    meh_face_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    allow_ip_authentication: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    ban_expiry_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rpcn_authentication_allowed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    psn_authentication_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    profile_visibility: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level_visibility: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    presence_server_auth_token: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    unescape_xml_sequences: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    show_modded_content: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    role: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("username", name="uq_game_users_username"),
        Index("ix_game_users_username", "username"),
        Index("ix_game_users_email_address", "email_address"),
    )

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Reject blank usernames at the model boundary.

        :param key: Field name (``username``).
        :type key: str
        :param value: Username to validate.
        :type value: str
        :returns: The username unchanged.
        :rtype: str
        :raises ValueError: If the username is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value
