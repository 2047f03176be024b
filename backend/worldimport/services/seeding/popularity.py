"""Read-only access to the popularity counters of a relational snapshot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from worldimport.core.errors import SnapshotReadError

LOGGER = logging.getLogger(__name__)

UNIQUE_PLAYS_SQL = text("SELECT id, uniquePlayCount FROM slot")
CREATOR_HEARTS_SQL = text('SELECT npHandle, heartCount FROM "user"')
LEVEL_HEARTS_SQL = text("SELECT id, heartCount FROM slot")


def readonly_uri(path: str | Path) -> str:
    """Return a SQLAlchemy URI opening ``path`` in SQLite read-only mode."""
    return f"sqlite:///file:{Path(path).resolve().as_posix()}?mode=ro&uri=true"


class PopularityLoader:
    """
    Load per-entity counters from the snapshot.

    Use as a context manager; the engine is created on entry and disposed on
    exit. Every lookup returns a mapping from natural key to a non-negative
    count, with ``NULL`` counters read as ``0``.
    """

    def __init__(self, snapshot_path: str | Path) -> None:
        self.path = Path(snapshot_path)
        self._engine: Engine | None = None

    def __enter__(self) -> PopularityLoader:
        self._engine = create_engine(readonly_uri(self.path))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("PopularityLoader must be used as a context manager.")
        return self._engine

    # ------------------------------ Lookups ------------------------------- #

    def unique_play_counts(self) -> dict[int, int]:
        """Unique-play counters keyed by level id."""
        return self._fetch(UNIQUE_PLAYS_SQL, int)

    def creator_heart_counts(self) -> dict[str, int]:
        """Creator heart counters keyed by display name."""
        return self._fetch(CREATOR_HEARTS_SQL, str)

    def level_heart_counts(self) -> dict[int, int]:
        """Level heart counters keyed by level id."""
        return self._fetch(LEVEL_HEARTS_SQL, int)

    def _fetch(self, stmt: Any, key_type: type) -> dict[Any, int]:
        counts: dict[Any, int] = {}
        try:
            with self.engine.connect() as conn:
                for key, value in conn.execute(stmt):
                    if key is None:
                        continue
                    counts[key_type(key)] = max(int(value or 0), 0)
        except SQLAlchemyError as exc:
            raise SnapshotReadError(
                f"Error reading snapshot {self.path}: {exc}",
                details={"path": str(self.path)},
            ) from exc
        LOGGER.debug(
            "Loaded %d counters", len(counts), extra={"count": len(counts), "path": str(self.path)}
        )
        return counts
