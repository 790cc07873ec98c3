"""Item service layer (Use Cases).

Updates go through change detection: the entity is loaded, mutated
field by field and saved, never merged from a detached copy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.items.exceptions import ItemNotFound
from modules.items.models import Item

if TYPE_CHECKING:
    from modules.items.dtos import CreateItemDTO, UpdateItemDTO
    from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class ItemService:
    """Application service for Item use-cases."""

    def __init__(self, repository: IItemRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_item(self, dto: CreateItemDTO) -> Item:
        item = Item(
            name=dto.name,
            price=dto.price,
            stock_quantity=dto.stock_quantity,
        )
        item = self._repo.save(item)
        logger.info("item.created", item_id=str(item.id))
        return item

    @transaction.atomic
    def update_item(self, id: str, dto: UpdateItemDTO) -> Item:
        """Apply the supplied fields to an existing item.

        Raises:
            ItemNotFound: if the item does not exist.
        """
        item = self._repo.get_by_id(id)
        if not item:
            raise ItemNotFound(f"Item {id} not found.")

        for field in ("name", "price", "stock_quantity"):
            value = getattr(dto, field)
            if value is not None:
                setattr(item, field, value)

        item = self._repo.save(item)
        logger.info("item.updated", item_id=str(id))
        return item

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[Item]:
        return self._repo.list(filters)

    def get_item(self, id: str) -> Item:
        """Retrieve a single item by ID.

        Raises:
            ItemNotFound: if the item does not exist.
        """
        item = self._repo.get_by_id(id)
        if not item:
            raise ItemNotFound(f"Item {id} not found.")
        return item
