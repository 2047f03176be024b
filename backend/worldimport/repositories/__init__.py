"""Repository package exposing persistence-layer access for all world models."""

from __future__ import annotations

from worldimport.repositories.asset import AssetDependencyRepository, AssetRepository
from worldimport.repositories.base import BaseRepository
from worldimport.repositories.level import LevelRepository
from worldimport.repositories.relations import (
    FavouriteLevelRepository,
    FavouriteUserRepository,
    PlayRepository,
    UniquePlayRepository,
)
from worldimport.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Domain
    "UserRepository",
    "LevelRepository",
    "AssetRepository",
    "AssetDependencyRepository",
    "UniquePlayRepository",
    "PlayRepository",
    "FavouriteUserRepository",
    "FavouriteLevelRepository",
]
