from worldimport.models.asset import AssetDependencyRelation, GameAsset
from worldimport.models.level import GameLevel
from worldimport.models.relations import (
    FavouriteLevelRelation,
    FavouriteUserRelation,
    PlayLevelRelation,
    UniquePlayLevelRelation,
)
from worldimport.models.user import GameUser

__all__ = [
    "AssetDependencyRelation",
    "FavouriteLevelRelation",
    "FavouriteUserRelation",
    "GameAsset",
    "GameLevel",
    "GameUser",
    "PlayLevelRelation",
    "UniquePlayLevelRelation",
]
