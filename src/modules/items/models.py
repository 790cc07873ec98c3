"""Item model with stock control.

Business rules implemented:
- Price must be greater than zero.
- Stock quantity cannot go negative: ``remove_stock`` raises
  ``NotEnoughStock`` instead.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.items.exceptions import NotEnoughStock

logger = structlog.get_logger(__name__)


class Item(BaseModel):
    """Catalog item referenced by many order lines."""

    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "items"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="items_price_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def add_stock(self, quantity: int) -> None:
        self.stock_quantity += quantity

    def remove_stock(self, quantity: int) -> None:
        rest = self.stock_quantity - quantity
        if rest < 0:
            logger.warning(
                "item.not_enough_stock",
                item_id=str(self.id),
                requested=quantity,
                available=self.stock_quantity,
            )
            raise NotEnoughStock(
                f"Item {self.name}: requested {quantity}, "
                f"available {self.stock_quantity}."
            )
        self.stock_quantity = rest

    def __str__(self) -> str:
        return self.name
