"""Order service layer (Use Cases).

``OrderService`` owns the write side: placement and cancellation, each
one atomic unit of work.  ``OrderQueryService`` owns the read side: it
opens a ``StoreSession`` for the duration of one hydration call and
closes it before returning.

Business rules enforced:
- The member and every item must exist.
- Each line snapshots the item price at placement time.
- Stock is removed under ``SELECT FOR UPDATE`` and restored on cancel.
- A delivered order (delivery status COMP) cannot be cancelled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.db import DEFAULT_DB_ALIAS, transaction

from modules.items.exceptions import ItemNotFound
from modules.members.exceptions import MemberNotFound
from modules.orders.constants import DEFAULT_HYDRATION_STRATEGY, OrderStatus
from modules.orders.exceptions import OrderAlreadyDelivered, OrderNotFound
from modules.orders.hydration import OrderSummaryHydrator, StrategyArg, coerce_strategy
from modules.orders.store import open_store_session

if TYPE_CHECKING:
    from modules.items.repositories.interfaces import IItemRepository
    from modules.members.repositories.interfaces import IMemberRepository
    from modules.orders.dtos import (
        OrderSearchDTO,
        OrderSummaryDTO,
        PlaceOrderDTO,
        SimpleOrderDTO,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order write use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        member_repository: IMemberRepository,
        item_repository: IItemRepository,
    ) -> None:
        self._order_repo = order_repository
        self._member_repo = member_repository
        self._item_repo = item_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Place an order for a member.

        Steps:
        1. Load the member; the delivery is created from its address.
        2. For each line (sorted by item PK to avoid deadlocks):
           - Lock the item row (SELECT FOR UPDATE).
           - Snapshot the current price.
           - Remove stock.
        3. Persist delivery + order + lines atomically.

        Raises:
            MemberNotFound: member does not exist.
            ItemNotFound: an item does not exist.
            NotEnoughStock: an item has too little stock.
        """
        log = logger.bind(member_id=str(dto.member_id))

        member = self._member_repo.get_by_id(str(dto.member_id))
        if not member:
            raise MemberNotFound(f"Member {dto.member_id} not found.")

        lines = []
        for line_dto in sorted(dto.lines, key=lambda line: str(line.item_id)):
            item = self._item_repo.get_for_update(str(line_dto.item_id))
            if not item:
                raise ItemNotFound(f"Item {line_dto.item_id} not found.")

            item.remove_stock(line_dto.count)
            item.save(update_fields=["stock_quantity", "updated_at"])
            log.info(
                "order.stock_removed",
                item_id=str(item.id),
                count=line_dto.count,
                remaining=item.stock_quantity,
            )
            lines.append({"item": item, "order_price": item.price, "count": line_dto.count})

        order = self._order_repo.create(
            {"member": member, "address": member.address, "lines": lines}
        )
        log.info("order.placed", order_id=str(order.id))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(self, order_id: str) -> Order:
        """Cancel an order and restore the stock of its lines.

        Locks the order row first so concurrent cancellations cannot
        restore stock twice.

        Raises:
            OrderNotFound: order does not exist.
            OrderAlreadyDelivered: the delivery is already completed.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=str(order_id), current_status=order.status)

        if not order.can_cancel(order.delivery):
            log.warning("order.cancel_not_allowed")
            raise OrderAlreadyDelivered("Delivered orders cannot be cancelled.")

        if order.status != OrderStatus.CANCELLED:
            for line in order.order_items.order_by("item_id"):
                item = self._item_repo.get_for_update(str(line.item_id))
                item.add_stock(line.count)
                item.save(update_fields=["stock_quantity", "updated_at"])
                log.info(
                    "order.stock_restored",
                    item_id=str(item.id),
                    count=line.count,
                    restored_stock=item.stock_quantity,
                )

            order.status = OrderStatus.CANCELLED
            self._order_repo.save(order)

        log.info("order.cancelled")
        return self._order_repo.get_by_id(str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order


class OrderQueryService:
    """Read use-cases: order summaries through a scoped store session."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self._using = using

    def fetch_order_summaries(
        self,
        search: Optional[OrderSearchDTO] = None,
        strategy: StrategyArg = DEFAULT_HYDRATION_STRATEGY,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[OrderSummaryDTO]:
        """Hydrate order summaries.

        Without ``limit`` every matching order is returned.

        Raises:
            InvalidOrderSearch: malformed search, strategy or paging.
            StoreUnavailable: the store failed; nothing is returned.
        """
        strategy = coerce_strategy(strategy)

        with open_store_session(using=self._using) as session:
            summaries = OrderSummaryHydrator(session).fetch_order_summaries(
                search, strategy=strategy, offset=offset, limit=limit
            )
            queries = session.queries_issued

        logger.info(
            "order_summaries.hydrated",
            strategy=strategy.value,
            count=len(summaries),
            queries=queries,
        )
        return summaries

    def fetch_simple_order_summaries(
        self,
        search: Optional[OrderSearchDTO] = None,
        strategy: StrategyArg = DEFAULT_HYDRATION_STRATEGY,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[SimpleOrderDTO]:
        strategy = coerce_strategy(strategy)

        with open_store_session(using=self._using) as session:
            summaries = OrderSummaryHydrator(session).fetch_simple_order_summaries(
                search, strategy=strategy, offset=offset, limit=limit
            )
            queries = session.queries_issued

        logger.info(
            "simple_order_summaries.hydrated",
            strategy=strategy.value,
            count=len(summaries),
            queries=queries,
        )
        return summaries

    def get_order_summary(self, order_id: str) -> OrderSummaryDTO:
        """Hydrate the summary of a single order (batched strategy).

        Raises:
            OrderNotFound: if the order does not exist.
        """
        try:
            pk = UUID(str(order_id))
        except ValueError as exc:
            raise OrderNotFound(f"Order {order_id} not found.") from exc

        with open_store_session(using=self._using) as session:
            summary = OrderSummaryHydrator(session).fetch_order_summary(pk)
        if summary is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return summary
