"""Order, Delivery and OrderItem models.

Business rules implemented:
- Every Order references exactly one Member and exactly one Delivery.
- Order owns its OrderItems (CASCADE); Member and Item are PROTECTed.
- OrderItem snapshots the item price at order time (``order_price``).
- A delivered order (delivery status COMP) cannot be cancelled
  (enforced at service layer via ``Order.can_cancel``).

Associations are declared as regular foreign keys, but the read side
never follows them implicitly: hydration resolves ``member_id``,
``delivery_id`` and ``item_id`` through explicit session references
(see ``modules.orders.store``).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import AddressModel, BaseModel
from modules.orders.constants import DeliveryStatus, OrderStatus


class Delivery(AddressModel):
    """Delivery for one order.

    Persisted in its own table with its own lifecycle; the order only
    holds a reference to it.
    """

    status = models.CharField(
        max_length=10,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.READY,
    )

    class Meta:
        db_table = "deliveries"

    def __str__(self) -> str:
        return f"Delivery {self.id} ({self.status})"


class Order(BaseModel):
    """Order aggregate root."""

    member: models.ForeignKey = models.ForeignKey(
        "members.Member",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    delivery: models.OneToOneField = models.OneToOneField(
        "orders.Delivery",
        on_delete=models.PROTECT,
        related_name="order",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.ORDERED,
    )
    order_date: models.DateTimeField = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "orders"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["created_at", "id"], name="orders_created_idx"),
        ]

    def can_cancel(self, delivery: Delivery) -> bool:
        return delivery.status != DeliveryStatus.COMP

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Order line linking an Order to an Item.

    ``order_price`` is a snapshot of the item price at the time of
    purchase.  Lines are immutable once created.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="order_items",
    )
    item: models.ForeignKey = models.ForeignKey(
        "items.Item",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    order_price: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )
    count: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(count__gte=1),
                name="order_items_count_positive",
            ),
        ]

    @property
    def total_price(self) -> Decimal:
        return self.order_price * self.count

    def __str__(self) -> str:
        return f"{self.item_id} x{self.count}"
