"""Django ORM implementation of the Item repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.items.models import Item
from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class ItemDjangoRepository(IItemRepository):
    """Concrete Item repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Item]:
        """Retrieve an item by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Item.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Item]:
        queryset = Item.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Item) -> Item:
        """Persist (create or update) an item."""
        entity.save()
        logger.info("item.saved", item_id=str(entity.id), name=entity.name)
        return entity

    def get_for_update(self, id: str) -> Optional[Item]:
        try:
            return Item.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
