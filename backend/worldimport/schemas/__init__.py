"""Marshmallow schemas for the exported import batch."""

from worldimport.schemas.common import EMPTY_OBJECT_ID, ObjectIdField, new_object_id
from worldimport.schemas.import_data import (
    AssetImportSchema,
    ImportDataSchema,
    LevelImportSchema,
    RelationImportSchema,
    UserImportSchema,
)

__all__ = [
    "EMPTY_OBJECT_ID",
    "ObjectIdField",
    "new_object_id",
    "AssetImportSchema",
    "ImportDataSchema",
    "LevelImportSchema",
    "RelationImportSchema",
    "UserImportSchema",
]
