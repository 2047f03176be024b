"""Merge-by-natural-key reconciliation of an incoming batch against the store."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from worldimport.services.importer.dto import IdentityResolution, StagingRecord
from worldimport.services.importer.identity import IdentityResolver

LOGGER = logging.getLogger(__name__)


def reconcile_users(
    users: Iterable[StagingRecord], resolver: IdentityResolver
) -> list[IdentityResolution]:
    """
    Rewrite each user's ``user_id`` with its resolved identity.

    :param users: User staging records, mutated in place.
    :param resolver: Resolver bound to the store being written.
    :returns: One resolution per user, in batch order.
    :rtype: list[IdentityResolution]
    """
    resolutions: list[IdentityResolution] = []
    for record in users:
        resolution = resolver.find_or_allocate(record.get("username"), record.get("user_id"))
        if resolution.existing and record.get("user_id") != resolution.user_id:
            LOGGER.debug(
                "Promoting stored id %s onto incoming user %r",
                resolution.user_id,
                record.get("username"),
            )
        record["user_id"] = resolution.user_id
        resolutions.append(resolution)
    return resolutions


class EdgeDeduplicator:
    """
    Admit each ``(dependent, dependency)`` pair at most once.

    Seeded with the pairs already stored; every admitted pair joins the
    index, so repeats inside the same batch are skipped too.
    """

    def __init__(self, existing: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs: set[tuple[str, str]] = set(existing)
        self.skipped = 0

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def admit(self, dependent: str, dependency: str) -> bool:
        pair = (dependent, dependency)
        if pair in self._pairs:
            self.skipped += 1
            return False
        self._pairs.add(pair)
        return True

    def filter(self, relations: Iterable[StagingRecord]) -> Iterator[StagingRecord]:
        """Yield only the relations whose pair has not been seen yet."""
        for record in relations:
            if self.admit(record["dependent"], record["dependency"]):
                yield record
