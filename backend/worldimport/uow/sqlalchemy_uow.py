"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from worldimport.core.extensions import db
from worldimport.repositories import (
    AssetDependencyRepository,
    AssetRepository,
    FavouriteLevelRepository,
    FavouriteUserRepository,
    LevelRepository,
    PlayRepository,
    UniquePlayRepository,
    UserRepository,
)
from worldimport.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.levels = LevelRepository(session=self.session)
        self.assets = AssetRepository(session=self.session)
        self.asset_dependencies = AssetDependencyRepository(session=self.session)
        self.unique_plays = UniquePlayRepository(session=self.session)
        self.plays = PlayRepository(session=self.session)
        self.favourite_users = FavouriteUserRepository(session=self.session)
        self.favourite_levels = FavouriteLevelRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent
    transaction. Leaving the block normally commits; leaving it through an
    exception rolls everything staged inside it back.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first write.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
