"""Reusable SQLAlchemy mixins shared by the world models (typed 2.0)."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, ClassVar

from sqlalchemy import Integer, inspect
from sqlalchemy.orm import Mapped, mapped_column


class PKMixin:
    """Expose an integer surrogate primary key column named ``id``.

    Used by join/edge rows, which have no natural identity of their own.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class RequiredTextMixin:
    """Declare which text columns must never be written as ``NULL``.

    Subclasses list the attribute names in ``REQUIRED_TEXT_FIELDS``; the
    importer's sanitizer coalesces each of them to ``""`` before a write.
    """

    REQUIRED_TEXT_FIELDS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def coalesce_required_text(cls, record: MutableMapping[str, Any]) -> list[str]:
        """Replace absent required text values in ``record`` with ``""``.

        :param record: Staging mapping of column values, mutated in place.
        :returns: Names of the fields that were filled in.
        :rtype: list[str]
        """
        filled: list[str] = []
        for name in cls.REQUIRED_TEXT_FIELDS:
            if record.get(name) is None:
                record[name] = ""
                filled.append(name)
        return filled


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and primary key."""

    def __repr__(self) -> str:
        """Return a short and useful string representation.

        :returns: Debug-friendly ``<ClassName key=...>``.
        :rtype: str
        """
        cls = self.__class__.__name__
        pk_cols = inspect(self.__class__).primary_key
        key = tuple(getattr(self, col.key, None) for col in pk_cols)
        return f"<{cls} key={key[0] if len(key) == 1 else key}>"
