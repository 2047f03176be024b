"""Import use case: reconcile an exported batch into the store."""

from worldimport.services.importer.dto import IdentityResolution, ImportBatch, ImportResult
from worldimport.services.importer.service import ImportService

__all__ = ["IdentityResolution", "ImportBatch", "ImportResult", "ImportService"]
