"""Order repository interface.

Extends ``IRepository[Order]`` with the write-side methods required by
the Order aggregate: atomic creation with its Delivery and lines, and
row-locked retrieval for cancellation.

Read models are not served from here; see ``OrderQueryRepository``.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its delivery and lines atomically.

        ``data`` must include ``member``, ``address`` (``AddressDTO``) and
        ``lines`` (list of dicts with ``item``, ``order_price``, ``count``).
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with member, delivery and lines loaded."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock."""
