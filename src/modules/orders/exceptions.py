"""Order domain exceptions.

Read side (hydration) and write side (placement, cancellation) errors.
Everything extends the cross-module taxonomy in ``modules.core.exceptions``
so the API layer can map families of errors to HTTP codes.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidArgument, NotFound, StoreUnavailable


class EntityNotFound(NotFound):
    """A store look-up by primary key found no row."""


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class InvalidOrderSearch(InvalidArgument):
    """The order search filter or paging arguments are malformed."""


class SessionClosed(StoreUnavailable):
    """A reference was resolved after its store session was closed."""


class OrderAlreadyDelivered(Exception):
    """A delivered order cannot be cancelled."""
