"""Factory Boy definitions for assets and their dependency edges."""

from __future__ import annotations

import factory
from worldimport.models.asset import AssetDependencyRelation, GameAsset

from tests.factories import BaseFactory


class GameAssetFactory(BaseFactory):
    class Meta:
        model = GameAsset

    asset_hash = factory.Faker("sha1")
    dependencies = factory.LazyFunction(list)
    original_uploader = None


class AssetDependencyFactory(BaseFactory):
    class Meta:
        model = AssetDependencyRelation

    id = None
    dependent = factory.Faker("sha1")
    dependency = factory.Faker("sha1")
