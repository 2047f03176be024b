"""Fallback ownership for levels and assets, and level-icon flagging."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from worldimport.core.errors import EmptyImportError
from worldimport.services.importer.dto import StagingRecord


def select_fallback_owner(users: Sequence[StagingRecord]) -> StagingRecord:
    """
    Return the first user of the batch.

    :raises EmptyImportError: When the batch has no users at all.
    """
    if not users:
        raise EmptyImportError()
    return users[0]


def level_icon_hashes(levels: Iterable[StagingRecord]) -> set[str]:
    """Collect the non-empty icon hashes of ``levels``."""
    return {lvl["icon_hash"] for lvl in levels if lvl.get("icon_hash")}


def link_fallback_owner(
    levels: Iterable[StagingRecord],
    assets: Iterable[StagingRecord],
    *,
    owner_id: str,
) -> None:
    """
    Point every level's publisher and every asset's uploader at ``owner_id``.

    Any owner already present on the records is overwritten: the import
    assumes a single-owner migration.
    """
    for level in levels:
        level["publisher_id"] = owner_id
    for asset in assets:
        asset["original_uploader_id"] = owner_id


def flag_level_icons(assets: Iterable[StagingRecord], icon_hashes: set[str]) -> int:
    """
    Mark assets that are some level's icon.

    A matching asset gets its own hash as ``as_mainline_icon_hash``; the
    other icon-role fields are left for the sanitizer to default.

    :returns: Number of assets flagged.
    :rtype: int
    """
    flagged = 0
    for asset in assets:
        if asset.get("asset_hash") in icon_hashes:
            asset["as_mainline_icon_hash"] = asset["asset_hash"]
            flagged += 1
    return flagged
