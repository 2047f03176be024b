"""Identifier allocation and find-or-allocate resolution by display name."""

from __future__ import annotations

import logging

from worldimport.repositories.user import UserRepository
from worldimport.schemas.common import EMPTY_OBJECT_ID, new_object_id
from worldimport.services.importer.dto import IdentityResolution

LOGGER = logging.getLogger(__name__)


def allocate_identifier() -> str:
    """Return a fresh, unique 24-hex user identifier."""
    return new_object_id()


def is_empty_identifier(value: str | None) -> bool:
    """``True`` for the zero sentinel, ``None`` or an empty string."""
    return not value or value == EMPTY_OBJECT_ID


class IdentityResolver:
    """
    Resolve the identity every incoming user should be written under.

    A display name already present in the store wins: its stored id is
    promoted onto the incoming record so the merge updates that row. A name
    seen earlier in the same batch resolves to the id given to that first
    record. Otherwise the incoming id is kept, or allocated when empty.
    """

    def __init__(self, users: UserRepository) -> None:
        self._users = users
        self._seen: dict[str, str] = {}

    def find_or_allocate(self, username: str | None, incoming_id: str | None) -> IdentityResolution:
        """
        Decide the identifier for one user without touching the record.

        :param username: Incoming display name (may be ``None``).
        :type username: str | None
        :param incoming_id: Identifier carried by the batch.
        :type incoming_id: str | None
        :returns: Tagged resolution result.
        :rtype: IdentityResolution
        """
        named = bool(username and username.strip())
        if named and username in self._seen:
            return IdentityResolution(user_id=self._seen[username], existing=True)

        stored = self._users.get_by_username(username) if named else None
        if stored is not None:
            resolution = IdentityResolution(user_id=stored.user_id, existing=True)
        elif is_empty_identifier(incoming_id):
            resolution = IdentityResolution(
                user_id=allocate_identifier(), existing=False, allocated=True
            )
        else:
            resolution = IdentityResolution(user_id=str(incoming_id), existing=False)

        if named:
            self._seen[username] = resolution.user_id
        return resolution
