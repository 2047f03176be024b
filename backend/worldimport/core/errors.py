"""Terminal error taxonomy for import and seeding runs.

Every failure the tool knows about is an :class:`ImporterError`. The CLI
translates them into a diagnostic on stderr and a non-zero exit code; none
of them is retried.
"""

from __future__ import annotations

from typing import Any


class ImporterError(Exception):
    """
    Represent a run-terminating error.

    Parameters
    ----------
    message : str
        Human-readable description printed for the operator.
    exit_code : int, optional
        Process exit status. Defaults to ``1``.
    code : str, optional
        Machine-readable identifier, snake_case. Defaults to ``"error"``.
    details : dict[str, Any] | None, optional
        Optional structured context included in the log record.
    """

    default_code = "error"

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = int(exit_code)
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class UsageError(ImporterError):
    """Wrong number or shape of command-line arguments."""

    default_code = "usage"


class MissingSnapshotError(ImporterError):
    """The relational snapshot file is not where it is expected."""

    default_code = "missing_snapshot"

    def __init__(self, path: str) -> None:
        super().__init__(f"Could not find snapshot database at {path}", details={"path": path})


class TemplateCopyError(ImporterError):
    """Creating the output store from its template failed."""

    default_code = "template_copy"


class PayloadError(ImporterError):
    """The import batch could not be read or deserialized."""

    default_code = "payload"


class EmptyImportError(ImporterError):
    """The batch has no users, so nothing can own levels or assets."""

    default_code = "empty_import"

    def __init__(
        self, message: str = "No users to import; nothing to link levels/assets to."
    ) -> None:
        super().__init__(message)


class StoreVersionError(ImporterError):
    """The target store carries a schema tag other than the expected one."""

    default_code = "store_version"

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(
            f"Store schema version {found} does not match expected version {expected}",
            details={"found": found, "expected": expected},
        )


class SnapshotReadError(ImporterError):
    """Querying the relational snapshot for popularity counters failed."""

    default_code = "snapshot_read"


class StoreWriteError(ImporterError):
    """Staging or committing a transaction against the store failed."""

    default_code = "store_write"


__all__ = [
    "ImporterError",
    "UsageError",
    "MissingSnapshotError",
    "TemplateCopyError",
    "PayloadError",
    "EmptyImportError",
    "StoreVersionError",
    "SnapshotReadError",
    "StoreWriteError",
]
