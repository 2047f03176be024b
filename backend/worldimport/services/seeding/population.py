"""Placeholder user pool: creation, re-enumeration and purge."""

from __future__ import annotations

import logging

from worldimport.models.user import GameUser
from worldimport.repositories.user import placeholder_index
from worldimport.services.importer.identity import allocate_identifier
from worldimport.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


def placeholder_name(prefix: str, index: int) -> str:
    return f"{prefix}{index}"


def build_placeholder(prefix: str, index: int) -> GameUser:
    """Return a transient placeholder with every required text field empty."""
    record = {"user_id": allocate_identifier(), "username": placeholder_name(prefix, index)}
    GameUser.coalesce_required_text(record)
    return GameUser(**record)


def create_placeholders(uow: SQLAlchemyUnitOfWork, size: int, *, prefix: str) -> list[str]:
    """
    Stage ``size`` new placeholder users.

    Numbering starts after the highest placeholder index already stored, so
    display names stay unique when seeding runs again on the same store.

    :returns: The new users' ids, in creation (pool index) order.
    :rtype: list[str]
    """
    if size <= 0:
        return []
    start = uow.users.next_placeholder_index(prefix)
    users = [build_placeholder(prefix, start + offset) for offset in range(size)]
    uow.users.add_all(users)
    LOGGER.info(
        "Staged placeholders %s..%s",
        users[0].username,
        users[-1].username,
        extra={"phase": "seed", "count": size},
    )
    return [user.user_id for user in users]


def enumerate_placeholders(uow: SQLAlchemyUnitOfWork, *, prefix: str) -> list[str]:
    """Return the ids of every stored placeholder, ordered by numeric suffix."""
    return [user.user_id for user in uow.users.list_placeholders(prefix)]


def purge_placeholders(uow: SQLAlchemyUnitOfWork, *, prefix: str) -> int:
    """
    Remove numbered placeholders and every join row they take part in.

    Only names of the form ``<prefix><digits>`` are purged, the shape
    :func:`create_placeholders` writes. An imported user whose name has that
    shape is indistinguishable from a placeholder and is purged too.

    :returns: Number of placeholder users deleted.
    :rtype: int
    """
    ids = [
        user.user_id
        for user in uow.users.list_placeholders(prefix)
        if placeholder_index(user.username, prefix) is not None
    ]
    if not ids:
        return 0
    rows = 0
    for repo in (uow.unique_plays, uow.plays, uow.favourite_users, uow.favourite_levels):
        rows += repo.delete_for_users(ids)
    removed = uow.users.delete_by_ids(ids)
    LOGGER.info(
        "Purged %d placeholders and %d join rows",
        removed,
        rows,
        extra={"phase": "seed", "count": removed},
    )
    return removed
