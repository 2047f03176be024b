"""Target store and snapshot file plumbing.

The store is opened once per logical phase (import, seed): each phase runs
inside its own application context and disposes of the engine on exit, so
no connection outlives the phase that needed it.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from flask import Flask
from sqlalchemy import text
from sqlalchemy.engine import Engine

from worldimport.core.errors import MissingSnapshotError, StoreVersionError, TemplateCopyError
from worldimport.core.extensions import db

LOGGER = logging.getLogger(__name__)


def sqlite_uri(path: str | Path) -> str:
    """Return a SQLAlchemy URI addressing ``path`` absolutely."""
    return f"sqlite:///{Path(path).resolve()}"


def ensure_snapshot(path: str | Path) -> Path:
    """Return the snapshot path, raising when the file does not exist."""
    snapshot = Path(path).resolve()
    if not snapshot.is_file():
        raise MissingSnapshotError(str(snapshot))
    return snapshot


def prepare_output_store(template: str | Path, output: str | Path) -> bool:
    """Create ``output`` from ``template`` unless it already exists.

    :returns: ``True`` when a new store was created, ``False`` when the
        existing file will be appended to.
    :rtype: bool
    :raises TemplateCopyError: If the template cannot be copied.
    """
    output_path = Path(output)
    if output_path.exists():
        LOGGER.info("Output store exists; appending to it", extra={"path": str(output_path)})
        return False
    try:
        shutil.copyfile(template, output_path)
    except OSError as exc:
        raise TemplateCopyError(f"Failed to copy template: {exc}") from exc
    LOGGER.info("Created new store from template", extra={"path": str(output_path)})
    return True


def ensure_schema_version(engine: Engine, expected: int) -> int:
    """Stamp ``expected`` on an untagged store, refuse a mismatching one.

    :returns: The version tag the store carries afterwards.
    :raises StoreVersionError: If the store is tagged with another version.
    """
    if engine.dialect.name != "sqlite":
        return expected
    with engine.begin() as conn:
        found = int(conn.execute(text("PRAGMA user_version")).scalar() or 0)
        if found == 0:
            conn.execute(text(f"PRAGMA user_version = {int(expected)}"))
            return expected
    if found != expected:
        raise StoreVersionError(found, expected)
    return found


@contextmanager
def store_scope(app: Flask) -> Iterator[None]:
    """Open the store bound to ``app`` for one phase.

    Creates missing tables, checks the schema tag, and tears the session and
    engine down when the phase ends.
    """
    with app.app_context():
        engine = db.engine
        ensure_schema_version(engine, int(app.config["SCHEMA_VERSION"]))
        db.create_all()
        try:
            yield
        finally:
            db.session.remove()
            engine.dispose()


__all__ = [
    "sqlite_uri",
    "ensure_snapshot",
    "prepare_output_store",
    "ensure_schema_version",
    "store_scope",
]
