"""Store session: scoped, read-only access to persisted entities.

A ``StoreSession`` wraps one database alias for the duration of a single
read.  It keeps an identity map (one instance per ``(model, pk)``) and
counts every round trip it issues, so callers can assert how many queries
a hydration strategy costs.

Associations are never followed implicitly.  Code that needs a related
entity asks the session for a ``Ref`` (to-one) or a ``CollectionRef``
(to-many) and calls ``resolve()`` on it.  Resolving the same handle twice
never issues a second query.

Errors:
- ``EntityNotFound``: ``get_by_id`` found no row.
- ``StoreUnavailable``: any ``django.db.DatabaseError`` (cause chained).
- ``SessionClosed``: the session was used after ``close()``.

The session does not open a transaction; the hydrator only issues
SELECTs and the round-trip counter must match the SQL actually sent.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, List, Tuple, Type, TypeVar

import structlog
from django.db import DEFAULT_DB_ALIAS, DatabaseError
from django.db.models import Model, QuerySet

from modules.core.exceptions import StoreUnavailable
from modules.orders.exceptions import EntityNotFound, SessionClosed

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=Model)


def _identity(model: Type[Model], pk: Any) -> Tuple[str, str]:
    return model._meta.concrete_model._meta.label, str(pk)


class StoreSession:
    """Per-request unit of read access with an identity map."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self._using = using
        self._identity_map: Dict[Tuple[str, str], Model] = {}
        self._collections: Dict[Hashable, List[Model]] = {}
        self._queries_issued = 0
        self._closed = False

    @property
    def queries_issued(self) -> int:
        return self._queries_issued

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._identity_map.clear()
        self._collections.clear()
        logger.debug("store_session.closed", queries=self._queries_issued)

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosed("Store session is closed.")

    # ------------------------------------------------------------------
    # Round trips
    # ------------------------------------------------------------------

    def fetch(self, queryset: QuerySet) -> List[Any]:
        """Evaluate ``queryset`` in one round trip and return its rows.

        The queryset must not carry ``prefetch_related`` lookups; each
        call is counted as exactly one query.
        """
        self._ensure_open()
        try:
            rows = list(queryset.using(self._using))
        except DatabaseError as exc:
            logger.error(
                "store_session.query_failed",
                model=queryset.model._meta.label,
                error=str(exc),
            )
            raise StoreUnavailable(str(exc)) from exc
        self._queries_issued += 1
        return rows

    def get_by_id(self, model: Type[M], pk: Any) -> M:
        """Return the entity with primary key ``pk``.

        Served from the identity map when already loaded.

        Raises:
            EntityNotFound: if no row has this primary key.
        """
        self._ensure_open()
        key = _identity(model, pk)
        if key in self._identity_map:
            return self._identity_map[key]  # type: ignore[return-value]
        rows = self.fetch(model._default_manager.filter(pk=pk))
        if not rows:
            raise EntityNotFound(f"{model.__name__} {pk} not found.")
        return self.attach(rows[0])

    def attach(self, instance: M) -> M:
        """Register an already loaded entity; the first instance wins."""
        self._ensure_open()
        key = _identity(type(instance), instance.pk)
        return self._identity_map.setdefault(key, instance)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Association handles
    # ------------------------------------------------------------------

    def ref(self, model: Type[M], pk: Any) -> Ref:
        return Ref(session=self, model=model, pk=pk)

    def collection(self, key: Hashable, queryset: QuerySet) -> CollectionRef:
        return CollectionRef(session=self, key=key, queryset=queryset)

    def _load_collection(self, key: Hashable, queryset: QuerySet) -> List[Model]:
        self._ensure_open()
        if key not in self._collections:
            self._collections[key] = [self.attach(obj) for obj in self.fetch(queryset)]
        return self._collections[key]


@dataclass(frozen=True)
class Ref:
    """Unresolved to-one association."""

    session: StoreSession = field(repr=False)
    model: Type[Model]
    pk: Any

    def resolve(self) -> Model:
        return self.session.get_by_id(self.model, self.pk)


@dataclass(frozen=True)
class CollectionRef:
    """Unresolved to-many association, keyed by owner."""

    session: StoreSession = field(repr=False)
    key: Hashable
    queryset: QuerySet = field(repr=False, compare=False)

    def resolve(self) -> List[Model]:
        return self.session._load_collection(self.key, self.queryset)


@contextmanager
def open_store_session(using: str = DEFAULT_DB_ALIAS) -> Iterator[StoreSession]:
    """Open a session that is closed when the block exits, even on error."""
    session = StoreSession(using=using)
    try:
        yield session
    finally:
        session.close()
