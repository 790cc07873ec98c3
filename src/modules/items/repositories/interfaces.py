"""Item repository interface.

Extends ``IRepository[Item]`` with the row-locking look-up used by the
order service for stock changes.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.items.models import Item


class IItemRepository(IRepository["Item"]):
    """Repository contract for the Item aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Item]:
        """Retrieve an item with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` if the item does not exist.
        """
