"""Building blocks shared by the importer and seeding services."""

from worldimport.services._shared.base import BaseService, ServiceContext

__all__ = ["BaseService", "ServiceContext"]
