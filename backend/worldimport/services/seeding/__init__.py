"""Seeding use case: placeholder users and popularity-backed join rows."""

from worldimport.services.seeding.dto import PassResult, SeedResult
from worldimport.services.seeding.popularity import PopularityLoader
from worldimport.services.seeding.service import SeedService

__all__ = ["PassResult", "PopularityLoader", "SeedResult", "SeedService"]
