from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from worldimport.core.errors import ImporterError, StoreWriteError
from worldimport.core.logger import ensure_run_id
from worldimport.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting run-scoped data.

    :param run_id: Correlation id shared with every log record of the run.
    :param placeholder_prefix: Username prefix reserved for placeholder users.
    """

    run_id: str | None = None
    placeholder_prefix: str = "dummy_user_"


class BaseService:
    """
    Base class for importer and seeding services.

    Responsibilities
    ----------------
    * Provide a helper to open read-write units of work.
    * Centralize translation of storage faults into terminal errors.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext(run_id=ensure_run_id())
        self.log = logging.getLogger(self.__class__.__module__)

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception, *, phase: str) -> Exception:
        """
        Map storage-level errors raised inside ``phase`` to terminal errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :param phase: Short name of the step that failed, for the message.
        :type phase: str
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, ImporterError):
            return exc

        if isinstance(exc, (SQLAlchemyError, ValueError)):
            return StoreWriteError(
                f"Error writing {phase} to store: {exc}",
                details={"phase": phase, "error": exc.__class__.__name__},
            )

        return exc
