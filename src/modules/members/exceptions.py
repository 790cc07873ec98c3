"""Member domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound


class MemberAlreadyExists(Exception):
    """A member with the same name already exists."""


class MemberNotFound(NotFound):
    """The requested member does not exist."""
