"""Order DTOs: search input, placement input and read models.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``OrderSearchDTO``: optional member-name / status filter.
- ``PlaceOrderDTO``: input for order placement.
- ``OrderLineDTO``: one line of an order read model.
- ``OrderSummaryDTO``: order read model with its lines.
- ``SimpleOrderDTO``: order read model with to-one fields only.

Read models hold copied scalar values only (names, prices, the address
value), never entities, so they serialize without cycles.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from modules.core.dtos import AddressDTO
from modules.orders.exceptions import InvalidOrderSearch

if TYPE_CHECKING:
    from modules.items.models import Item
    from modules.members.models import Member
    from modules.orders.models import Delivery, Order, OrderItem


# ---------------------------------------------------------------------------
# Enum (framework-agnostic, not Django TextChoices)
# ---------------------------------------------------------------------------


class OrderStatusEnum(StrEnum):
    ORDERED = "ORDERED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class OrderSearchDTO(BaseModel):
    """Immutable order search filter.

    Absent fields match every order.  ``member_name`` is an exact match.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    member_name: Optional[str] = None
    status: Optional[OrderStatusEnum] = None

    @field_validator("member_name")
    @classmethod
    def member_name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("member_name must not be blank.")
        return v

    @classmethod
    def parse(cls, raw: Optional[Mapping[str, Any]] = None) -> OrderSearchDTO:
        """Build a search from loosely typed input.

        Raises:
            InvalidOrderSearch: if any value is malformed.
        """
        try:
            return cls.model_validate(dict(raw or {}))
        except ValidationError as exc:
            raise InvalidOrderSearch(str(exc)) from exc


class PlaceOrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: UUID
    count: int

    @field_validator("count")
    @classmethod
    def count_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Count must be at least 1.")
        return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement.

    Validates:
    - ``lines`` must contain at least one line.
    - No item appears twice.
    """

    model_config = ConfigDict(frozen=True)

    member_id: UUID
    lines: List[PlaceOrderLineDTO]

    @field_validator("lines")
    @classmethod
    def lines_must_be_valid(cls, v: List[PlaceOrderLineDTO]) -> List[PlaceOrderLineDTO]:
        if not v:
            raise ValueError("Order must have at least one line.")
        item_ids = [line.item_id for line in v]
        if len(item_ids) != len(set(item_ids)):
            raise ValueError("Duplicate item IDs are not allowed in the same order.")
        return v


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------


class OrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_name: str
    order_price: Decimal
    count: int

    @classmethod
    def from_entity(cls, line: OrderItem, item: Item) -> OrderLineDTO:
        return cls(item_name=item.name, order_price=line.order_price, count=line.count)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> OrderLineDTO:
        return cls(
            item_name=row["item_name"],
            order_price=row["order_price"],
            count=row["count"],
        )


class SimpleOrderDTO(BaseModel):
    """Order read model with the to-one fields inlined and no lines."""

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    member_name: str
    order_date: datetime
    order_status: OrderStatusEnum
    address: AddressDTO

    @classmethod
    def from_entities(cls, order: Order, member: Member, delivery: Delivery) -> SimpleOrderDTO:
        return cls(
            order_id=order.id,
            member_name=member.name,
            order_date=order.order_date,
            order_status=order.status,
            address=delivery.address,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SimpleOrderDTO:
        """Build from a projection row (see ``ORDER_ROW_FIELDS``)."""
        return cls(
            order_id=row["order_id"],
            member_name=row["member_name"],
            order_date=row["order_date"],
            order_status=row["order_status"],
            address=AddressDTO(
                city=row["city"],
                street=row["street"],
                zipcode=row["zipcode"],
            ),
        )


class OrderSummaryDTO(SimpleOrderDTO):
    """Order read model with its lines.

    ``order_items`` is always a list: an order without lines has an
    empty list, never ``None``.
    """

    order_items: List[OrderLineDTO]

    @classmethod
    def from_graph(
        cls,
        order: Order,
        member: Member,
        delivery: Delivery,
        lines: Sequence[OrderLineDTO],
    ) -> OrderSummaryDTO:
        base = SimpleOrderDTO.from_entities(order, member, delivery)
        return cls(**base.model_dump(), order_items=list(lines))

    @classmethod
    def from_simple(cls, simple: SimpleOrderDTO, lines: Sequence[OrderLineDTO]) -> OrderSummaryDTO:
        return cls(**simple.model_dump(), order_items=list(lines))
