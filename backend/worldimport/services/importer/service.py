"""
ImportService
=============

Reconciles an exported batch against the store and writes it atomically:

- Resolves user identities by display name (promoting stored ids).
- Sanitizes required text fields and fabricates blank usernames.
- Links every level/asset to the batch's fallback owner.
- Writes users, levels, deduplicated edges, then assets in one transaction.
"""

from __future__ import annotations

import json
from pathlib import Path

from marshmallow import ValidationError

from worldimport.core.errors import EmptyImportError, PayloadError
from worldimport.models.asset import AssetDependencyRelation, GameAsset
from worldimport.models.level import GameLevel
from worldimport.models.user import GameUser
from worldimport.repositories.user import placeholder_index
from worldimport.schemas.import_data import ImportDataSchema
from worldimport.services._shared.base import BaseService
from worldimport.services.importer.dto import ImportBatch, ImportResult, StagingRecord
from worldimport.services.importer.identity import IdentityResolver
from worldimport.services.importer.linker import (
    flag_level_icons,
    level_icon_hashes,
    link_fallback_owner,
    select_fallback_owner,
)
from worldimport.services.importer.reconciler import EdgeDeduplicator, reconcile_users
from worldimport.services.importer.sanitizer import sanitize_asset, sanitize_level, sanitize_user
from worldimport.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class ImportService(BaseService):
    """
    Orchestrates one import of users, levels, dependency edges and assets.
    """

    schema = ImportDataSchema()

    # ------------------------------ Reading ------------------------------- #

    def load_batch(self, path: str | Path) -> ImportBatch:
        """
        Read and deserialize the batch file at ``path``.

        :raises PayloadError: If the file is unreadable, is not JSON, or does
            not match the expected shape.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise PayloadError(f"Error reading {path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PayloadError(f"Error reading {path}: {exc}") from exc

        return self.parse_batch(data, source=str(path))

    def parse_batch(self, data: object, *, source: str = "batch") -> ImportBatch:
        """Deserialize an already-decoded JSON document."""
        if data is None:
            return ImportBatch()
        if not isinstance(data, dict):
            raise PayloadError(f"Error reading {source}: top-level value must be an object")
        try:
            loaded = self.schema.load(data)
        except ValidationError as exc:
            raise PayloadError(
                f"Error reading {source}: invalid batch",
                details={"errors": exc.messages},
            ) from exc
        return ImportBatch.from_mapping(loaded)

    # ------------------------------ Writing ------------------------------- #

    @staticmethod
    def ensure_importable(batch: ImportBatch) -> None:
        """Raise :class:`EmptyImportError` unless the batch has a user to own levels/assets."""
        if not batch.users:
            raise EmptyImportError()

    def import_batch(self, batch: ImportBatch) -> ImportResult:
        """
        Reconcile ``batch`` and write it in a single transaction.

        The batch records are rewritten in place (ids, owners, defaults).

        :param batch: Staging data, treated as mutable.
        :type batch: ImportBatch
        :returns: Counts of what was written.
        :rtype: ImportResult
        :raises EmptyImportError: When the batch holds no users; nothing is
            written in that case.
        :raises StoreWriteError: When staging or committing fails; the whole
            transaction is rolled back.
        """
        self.ensure_importable(batch)

        try:
            with self.rw_uow() as uow:
                resolutions = reconcile_users(batch.users, IdentityResolver(uow.users))
                for user in batch.users:
                    sanitize_user(user)
                self._warn_placeholder_names(batch.users)

                owner = select_fallback_owner(batch.users)
                for level in batch.levels:
                    sanitize_level(level)
                link_fallback_owner(batch.levels, batch.assets, owner_id=owner["user_id"])
                flagged = flag_level_icons(batch.assets, level_icon_hashes(batch.levels))
                for asset in batch.assets:
                    sanitize_asset(asset)

                self._log_counts(uow, "before commit")
                relations_written, skipped = self._write(uow, batch)
                self._log_counts(uow, "staged")
        except Exception as exc:
            raise self.translate_exceptions(exc, phase="import batch") from exc

        existing = sum(1 for r in resolutions if r.existing)
        result = ImportResult(
            users=len(batch.users),
            levels=len(batch.levels),
            relations=relations_written,
            relations_skipped=skipped,
            assets=len(batch.assets),
            users_existing=existing,
            users_created=len(resolutions) - existing,
            fallback_owner_id=owner["user_id"],
        )
        self.log.info(
            "Imported %d users, %d levels, %d relations, %d assets (%d level icons)",
            result.users,
            result.levels,
            result.relations,
            result.assets,
            flagged,
            extra={"phase": "import"},
        )
        return result

    def _write(self, uow: SQLAlchemyUnitOfWork, batch: ImportBatch) -> tuple[int, int]:
        """Stage the four collections in dependency order; returns edge counts."""
        for record in batch.users:
            uow.users.merge(GameUser(**record))
        uow.users.flush()

        for record in batch.levels:
            uow.levels.merge(GameLevel(**record))
        uow.levels.flush()

        dedup = EdgeDeduplicator(uow.asset_dependencies.existing_pairs())
        edges = [AssetDependencyRelation(**record) for record in dedup.filter(batch.relations)]
        uow.asset_dependencies.add_all(edges)

        for record in batch.assets:
            uow.assets.merge(GameAsset(**record))
        uow.assets.flush()

        return len(edges), dedup.skipped

    def _warn_placeholder_names(self, users: list[StagingRecord]) -> None:
        prefix = self.ctx.placeholder_prefix
        for user in users:
            if placeholder_index(user["username"], prefix) is not None:
                self.log.warning(
                    "Imported user %s is named like a placeholder; replace-mode seeding "
                    "will purge it",
                    user["username"],
                    extra={"phase": "import"},
                )

    def _log_counts(self, uow: SQLAlchemyUnitOfWork, label: str) -> None:
        self.log.debug(
            "%s: users=%d levels=%d relations=%d assets=%d",
            label,
            uow.users.count(),
            uow.levels.count(),
            uow.asset_dependencies.count(),
            uow.assets.count(),
            extra={"phase": "import"},
        )
