"""Cross-module error taxonomy.

Module-specific exceptions (``OrderNotFound``, ``InvalidOrderSearch``, ...)
extend these bases so the API layer can translate whole families of
errors without importing every module.
"""

from __future__ import annotations


class NotFound(Exception):
    """A referenced identifier has no backing row."""


class InvalidArgument(Exception):
    """A caller supplied a malformed argument (e.g. a bad search filter)."""


class StoreUnavailable(Exception):
    """The relational store failed or timed out.

    Never retried here; retry policy belongs to the caller.
    """
