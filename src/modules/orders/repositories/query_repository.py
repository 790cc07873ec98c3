"""Read-side queries for order summaries.

Every method issues its SQL through a ``StoreSession`` so round trips are
counted and database errors are translated.  Root queries are ordered
by ``(created_at, id)``; order lines are ordered the same way inside an
order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.db.models import F, QuerySet

from modules.orders.dtos import OrderLineDTO, OrderSearchDTO
from modules.orders.models import Order, OrderItem
from modules.orders.store import CollectionRef, StoreSession

logger = structlog.get_logger(__name__)

ROOT_ORDERING = ("created_at", "id")

# Phase-1 projection: one row per order with the to-one fields inlined.
ORDER_ROW_FIELDS: Dict[str, Any] = {
    "order_id": F("id"),
    "member_name": F("member__name"),
    "order_status": F("status"),
    "city": F("delivery__city"),
    "street": F("delivery__street"),
    "zipcode": F("delivery__zipcode"),
}


def _paginate(queryset: QuerySet, offset: int = 0, limit: Optional[int] = None) -> QuerySet:
    if limit is not None:
        return queryset[offset : offset + limit]
    if offset:
        return queryset[offset:]
    return queryset


class OrderQueryRepository:
    """Order read queries bound to one store session."""

    def __init__(self, session: StoreSession) -> None:
        self._session = session

    def _search(self, search: OrderSearchDTO) -> QuerySet:
        queryset = Order.objects.all()
        if search.member_name is not None:
            queryset = queryset.filter(member__name=search.member_name)
        if search.status is not None:
            queryset = queryset.filter(status=search.status.value)
        return queryset.order_by(*ROOT_ORDERING)

    # ------------------------------------------------------------------
    # Entity queries
    # ------------------------------------------------------------------

    def find_orders(
        self,
        search: OrderSearchDTO,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Root query: orders with their own columns only."""
        orders = self._session.fetch(_paginate(self._search(search), offset, limit))
        return [self._session.attach(order) for order in orders]

    def find_orders_with_to_one(
        self,
        search: OrderSearchDTO,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Root query joining Member and Delivery in the same round trip.

        The joined entities are attached to the session, so their refs
        resolve without another query.
        """
        queryset = self._search(search).select_related("member", "delivery")
        orders = self._session.fetch(_paginate(queryset, offset, limit))
        for order in orders:
            self._session.attach(order.member)
            self._session.attach(order.delivery)
        return [self._session.attach(order) for order in orders]

    def lines_of(self, order: Order) -> CollectionRef:
        """Lazy handle on one order's lines."""
        queryset = OrderItem.objects.filter(order_id=order.pk).order_by(*ROOT_ORDERING)
        return self._session.collection(("order_items", order.pk), queryset)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def find_order_rows(
        self,
        search: OrderSearchDTO,
        offset: int = 0,
        limit: Optional[int] = None,
        order_id: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        """One row per order with member name and delivery address inlined."""
        queryset = self._search(search)
        if order_id is not None:
            queryset = queryset.filter(id=order_id)
        queryset = queryset.values("order_date", **ORDER_ROW_FIELDS)
        return self._session.fetch(_paginate(queryset, offset, limit))

    def find_lines_by_order(self, order_ids: Iterable[UUID]) -> Dict[UUID, List[OrderLineDTO]]:
        """All lines of ``order_ids`` in a single ``IN`` query, grouped by order.

        Orders without lines are absent from the returned mapping.
        """
        order_ids = list(order_ids)
        if not order_ids:
            return {}
        queryset = (
            OrderItem.objects.filter(order_id__in=order_ids)
            .order_by(*ROOT_ORDERING)
            .values("order_id", "order_price", "count", item_name=F("item__name"))
        )
        grouped: Dict[UUID, List[OrderLineDTO]] = defaultdict(list)
        for row in self._session.fetch(queryset):
            grouped[row["order_id"]].append(OrderLineDTO.from_row(row))
        return dict(grouped)

    def find_flat_rows(
        self,
        search: OrderSearchDTO,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Orders joined with their lines: one row per (order, line).

        Orders without lines yield one row whose line columns are ``None``.
        ``offset`` and ``limit`` count joined rows, not orders, so a page
        can cut an order's lines in half.
        """
        if offset or limit is not None:
            logger.warning("order_query.flat_rows_paginated", offset=offset, limit=limit)
        queryset = (
            self._search(search)
            .order_by(*ROOT_ORDERING, "order_items__created_at", "order_items__id")
            .values(
                "order_date",
                item_name=F("order_items__item__name"),
                order_price=F("order_items__order_price"),
                count=F("order_items__count"),
                **ORDER_ROW_FIELDS,
            )
        )
        return self._session.fetch(_paginate(queryset, offset, limit))
