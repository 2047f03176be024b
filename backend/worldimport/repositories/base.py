"""Generic repository base and query utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Safe sorting with a whitelist mapping.
- Deterministic ordering (adds a primary-key tiebreaker).
- Merge-by-primary-key for upserts.
- No business logic, no commit/rollback: services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement reconciliation or seeding policies.
  - They never call commit/rollback; services define the Unit of Work.
* Sorting is opt-in per aggregate via ``_sortable_fields`` mapping.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from worldimport.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples.

    :param raw: Public tokens like ``["-username", "user_id"]``.
    :type raw: Iterable[str]
    :returns: List of ``(field_name, is_desc)`` tokens.
    :rtype: list[tuple[str, bool]]
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = token[1:] if is_desc else token
        field = field.strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply safe ``ORDER BY`` clauses based on a whitelist mapping.

    Unknown sort tokens are ignored silently. The model's primary key is always
    appended as a final ascending tiebreaker so listings are stable.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)

    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())

    return stmt


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    Subclasses MAY override ``_sortable_fields`` to expose safe sort keys.

    This class NEVER opens, commits, or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``worldimport.core.extensions``.
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        """Return the model's single-column primary-key attribute, if any.

        :returns: PK attribute or ``None``.
        :rtype: :class:`sqlalchemy.orm.InstrumentedAttribute` | None
        """
        pk_cols = inspect(self.model).primary_key
        if len(pk_cols) != 1:
            return None
        return getattr(self.model, pk_cols[0].key, None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist mapping of public sort keys to model attributes."""
        return {}

    # --------------------------------- CRUD ----------------------------------

    def add_all(self, instances: Iterable[E]) -> list[E]:
        """Stage several new entities and flush once."""
        items = list(instances)
        self.session.add_all(items)
        self.flush()
        return items

    def merge(self, instance: E) -> E:
        """Insert ``instance`` or overwrite the row sharing its primary key.

        :param instance: Detached/transient entity carrying the primary key.
        :type instance: E
        :returns: The persistent instance attached to the session.
        :rtype: E
        """
        return cast(E, self.session.merge(instance))

    def count(self) -> int:
        """Count every row of the aggregate."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        return int(self.session.execute(stmt).scalar_one())

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    # ------------------------------- Listing ---------------------------------

    def list(self, *, sort: Iterable[str] | None = None) -> list[E]:
        """List entities in whitelisted sort order.

        :param sort: Public sort tokens (e.g., ``["-username"]``).
        :type sort: Iterable[str] | None
        :returns: List of entities in a stable order.
        :rtype: list[E]
        """
        stmt: Select[Any] = select(self.model)
        stmt = _apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        results = self.session.execute(stmt).scalars().all()
        return cast(list[E], list(results))
