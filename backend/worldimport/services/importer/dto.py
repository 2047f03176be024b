"""
DTOs for the import pipeline.

Staging records are plain mutable mappings keyed by model attribute name;
the reconciliation steps rewrite them in place before the write phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

StagingRecord = dict[str, Any]


# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class ImportBatch:
    """
    One deserialized ``import.json``.

    :param users: User records, in file order.
    :param levels: Level records, in file order.
    :param relations: Asset dependency edges, in file order.
    :param assets: Asset records, in file order.
    """

    users: list[StagingRecord] = field(default_factory=list)
    levels: list[StagingRecord] = field(default_factory=list)
    relations: list[StagingRecord] = field(default_factory=list)
    assets: list[StagingRecord] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ImportBatch:
        return cls(
            users=list(data.get("users") or []),
            levels=list(data.get("levels") or []),
            relations=list(data.get("relations") or []),
            assets=list(data.get("assets") or []),
        )


# --------------------------------------------------------------------------- #
# Reconciliation
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class IdentityResolution:
    """
    Outcome of resolving a user's identity by display name.

    :param user_id: Identifier the record must carry into the write phase.
    :param existing: ``True`` when the id was promoted from a user with the
        same display name (stored, or earlier in the batch), ``False`` when
        it is new to the store.
    :param allocated: ``True`` when a fresh id had to be generated.
    """

    user_id: str
    existing: bool
    allocated: bool = False


# --------------------------------------------------------------------------- #
# Output
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ImportResult:
    """
    Counts of what one import actually wrote.

    :param users: Users merged (created or updated).
    :param levels: Levels merged.
    :param relations: Dependency edges inserted.
    :param relations_skipped: Edges skipped because the pair already existed.
    :param assets: Assets merged.
    :param users_existing: Users whose id was taken from a namesake.
    :param users_created: Users new to the store.
    :param fallback_owner_id: Owner assigned to every level and asset.
    """

    users: int
    levels: int
    relations: int
    relations_skipped: int
    assets: int
    users_existing: int
    users_created: int
    fallback_owner_id: str
