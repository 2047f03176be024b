"""Game user repository: natural-key lookups and placeholder enumeration."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import cast

from sqlalchemy import delete, select

from worldimport.models.user import GameUser
from worldimport.repositories.base import BaseRepository


class UserRepository(BaseRepository[GameUser]):
    """Persistence-only repository for :class:`GameUser`."""

    model = GameUser

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        """Expose sortable fields for safe public sorting."""
        return {"username": GameUser.username}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str | None) -> GameUser | None:
        """Fetch a user by exact display name.

        :param username: Display name to search; ``None`` never matches.
        :type username: str | None
        :returns: User instance or ``None`` when not found.
        :rtype: GameUser | None
        """
        if username is None:
            return None
        stmt = select(GameUser).where(GameUser.username == username)
        result = self.session.execute(stmt).scalars().first()
        return cast(GameUser | None, result)

    # ---------------------------- Placeholders ----------------------------

    def list_placeholders(self, prefix: str) -> list[GameUser]:
        """Return placeholder users ordered by their numeric suffix.

        Names that carry the prefix but no numeric suffix sort after the
        numbered ones, by name.
        """
        stmt = select(GameUser).where(GameUser.username.startswith(prefix, autoescape=True))
        users = list(self.session.execute(stmt).scalars().all())
        return sorted(users, key=lambda u: _placeholder_sort_key(u.username, prefix))

    def next_placeholder_index(self, prefix: str) -> int:
        """Return the first free zero-based placeholder index."""
        indexes = [
            idx
            for idx in (
                placeholder_index(name, prefix)
                for name in self.session.execute(
                    select(GameUser.username).where(
                        GameUser.username.startswith(prefix, autoescape=True)
                    )
                ).scalars()
            )
            if idx is not None
        ]
        return max(indexes) + 1 if indexes else 0

    def delete_by_ids(self, user_ids: Iterable[str]) -> int:
        """Bulk-delete users by id; returns the number of rows removed."""
        ids = list(user_ids)
        if not ids:
            return 0
        result = self.session.execute(
            delete(GameUser).where(GameUser.user_id.in_(ids)).execution_options(
                synchronize_session=False
            )
        )
        return int(result.rowcount or 0)


def placeholder_index(username: str, prefix: str) -> int | None:
    """Parse the numeric suffix of a placeholder username, if it has one."""
    if not username.startswith(prefix):
        return None
    match = re.fullmatch(r"\d+", username[len(prefix) :])
    return int(match.group(0)) if match else None


def _placeholder_sort_key(username: str, prefix: str) -> tuple[int, int, str]:
    idx = placeholder_index(username, prefix)
    if idx is None:
        return (1, 0, username)
    return (0, idx, username)
