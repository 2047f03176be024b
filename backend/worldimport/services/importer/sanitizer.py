"""Normalize staging records so every write satisfies the store's NOT NULL columns."""

from __future__ import annotations

import logging

from worldimport.models.asset import GameAsset
from worldimport.models.level import GameLevel
from worldimport.models.user import GameUser
from worldimport.services.importer.dto import StagingRecord

LOGGER = logging.getLogger(__name__)


def fabricate_username(user_id: str) -> str:
    return f"user_{user_id}"


def sanitize_user(record: StagingRecord) -> StagingRecord:
    """
    Coalesce a user's required text fields and fill a blank display name.

    The record must already carry its resolved ``user_id``: the fabricated
    name is derived from it.

    :param record: User staging record, mutated in place.
    :type record: StagingRecord
    :returns: The same record.
    :rtype: StagingRecord
    """
    username = record.get("username")
    if username is None or not str(username).strip():
        record["username"] = fabricate_username(record["user_id"])
        LOGGER.warning("Blank username on %s; using %s", record["user_id"], record["username"])
    GameUser.coalesce_required_text(record)
    return record


def sanitize_level(record: StagingRecord) -> StagingRecord:
    GameLevel.coalesce_required_text(record)
    return record


def sanitize_asset(record: StagingRecord) -> StagingRecord:
    GameAsset.coalesce_required_text(record)
    if record.get("dependencies") is None:
        record["dependencies"] = []
    return record
