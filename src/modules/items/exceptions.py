"""Item domain exceptions.

Raised by the model and Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound


class ItemNotFound(NotFound):
    """The requested item does not exist."""


class NotEnoughStock(Exception):
    """Removing stock would leave a negative quantity."""
