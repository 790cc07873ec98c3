"""Order summary hydration.

Builds ``OrderSummaryDTO`` / ``SimpleOrderDTO`` lists from the store using
one of four strategies (``HydrationStrategy``):

- ``LAZY``: root query, then one round trip per unresolved reference
  (member, delivery, each order's lines, each distinct item).
- ``JOIN_FETCH``: member and delivery joined into the root query; lines
  and items still resolved lazily.
- ``FLAT_JOIN``: orders joined with their lines, one row per line.
  Cannot be paginated by order and is rejected when offset/limit are given.
- ``BATCHED``: one projection query for the orders, one ``IN`` query for
  all their lines, merged in memory.  Always two round trips at most.

For the same data every strategy returns the same list in the same
order.  Hydration is read-only and performs no recovery: the first store
error aborts the call.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union
from uuid import UUID

from modules.items.models import Item
from modules.members.models import Member
from modules.orders.constants import (
    DEFAULT_HYDRATION_STRATEGY,
    MAX_SUMMARY_LIMIT,
    HydrationStrategy,
)
from modules.orders.dtos import (
    OrderLineDTO,
    OrderSearchDTO,
    OrderSummaryDTO,
    SimpleOrderDTO,
)
from modules.orders.exceptions import InvalidOrderSearch
from modules.orders.models import Delivery, Order
from modules.orders.repositories.query_repository import OrderQueryRepository
from modules.orders.store import StoreSession

StrategyArg = Union[HydrationStrategy, str]


def coerce_strategy(strategy: StrategyArg) -> HydrationStrategy:
    try:
        return HydrationStrategy(strategy)
    except ValueError as exc:
        raise InvalidOrderSearch(f"Unknown hydration strategy: {strategy!r}.") from exc


def validate_page(offset: int, limit: Optional[int]) -> None:
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise InvalidOrderSearch("offset must be a non-negative integer.")
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidOrderSearch("limit must be a positive integer.")
    if limit > MAX_SUMMARY_LIMIT:
        raise InvalidOrderSearch(f"limit must not exceed {MAX_SUMMARY_LIMIT}.")


class OrderSummaryHydrator:
    """Loads order read models through an open ``StoreSession``.

    The session is owned by the caller and must stay open for the whole
    call; references resolved after it is closed raise ``SessionClosed``.
    """

    def __init__(
        self,
        session: StoreSession,
        repository: Optional[OrderQueryRepository] = None,
    ) -> None:
        self._session = session
        self._repository = repository or OrderQueryRepository(session)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_order_summaries(
        self,
        search: Optional[OrderSearchDTO] = None,
        strategy: StrategyArg = DEFAULT_HYDRATION_STRATEGY,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[OrderSummaryDTO]:
        """Return summaries of the orders matching ``search``.

        Raises:
            InvalidOrderSearch: unknown strategy, bad paging arguments, or
                a paginated ``FLAT_JOIN`` request.
            StoreUnavailable: the store failed during any phase.
        """
        search = search or OrderSearchDTO()
        strategy = coerce_strategy(strategy)
        validate_page(offset, limit)

        if strategy == HydrationStrategy.FLAT_JOIN:
            if offset or limit is not None:
                raise InvalidOrderSearch(
                    "flat_join cannot be paginated; use the batched strategy."
                )
            return self._flat_join(search)

        handlers: Dict[HydrationStrategy, Callable[..., List[OrderSummaryDTO]]] = {
            HydrationStrategy.LAZY: self._lazy,
            HydrationStrategy.JOIN_FETCH: self._join_fetch,
            HydrationStrategy.BATCHED: self._batched,
        }
        return handlers[strategy](search, offset, limit)

    def fetch_order_summary(self, order_id: UUID) -> Optional[OrderSummaryDTO]:
        """Batched summary of one order, or ``None`` if it does not exist."""
        rows = self._repository.find_order_rows(OrderSearchDTO(), order_id=order_id)
        if not rows:
            return None
        lines = self._repository.find_lines_by_order([order_id])
        return OrderSummaryDTO.from_simple(
            SimpleOrderDTO.from_row(rows[0]), lines.get(rows[0]["order_id"], [])
        )

    def fetch_simple_order_summaries(
        self,
        search: Optional[OrderSearchDTO] = None,
        strategy: StrategyArg = DEFAULT_HYDRATION_STRATEGY,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[SimpleOrderDTO]:
        """Return to-one-only summaries (no lines) of matching orders."""
        search = search or OrderSearchDTO()
        strategy = coerce_strategy(strategy)
        validate_page(offset, limit)

        if strategy == HydrationStrategy.LAZY:
            orders = self._repository.find_orders(search, offset, limit)
        elif strategy == HydrationStrategy.JOIN_FETCH:
            orders = self._repository.find_orders_with_to_one(search, offset, limit)
        elif strategy == HydrationStrategy.BATCHED:
            rows = self._repository.find_order_rows(search, offset, limit)
            return [SimpleOrderDTO.from_row(row) for row in rows]
        else:
            raise InvalidOrderSearch("flat_join does not apply to simple order summaries.")

        return [
            SimpleOrderDTO.from_entities(order, *self._to_one(order))
            for order in orders
        ]

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _lazy(
        self, search: OrderSearchDTO, offset: int, limit: Optional[int]
    ) -> List[OrderSummaryDTO]:
        orders = self._repository.find_orders(search, offset, limit)
        return [self._from_graph(order) for order in orders]

    def _join_fetch(
        self, search: OrderSearchDTO, offset: int, limit: Optional[int]
    ) -> List[OrderSummaryDTO]:
        orders = self._repository.find_orders_with_to_one(search, offset, limit)
        return [self._from_graph(order) for order in orders]

    def _flat_join(self, search: OrderSearchDTO) -> List[OrderSummaryDTO]:
        grouped: Dict[object, tuple[SimpleOrderDTO, List[OrderLineDTO]]] = {}
        for row in self._repository.find_flat_rows(search):
            if row["order_id"] not in grouped:
                grouped[row["order_id"]] = (SimpleOrderDTO.from_row(row), [])
            if row["item_name"] is not None:
                grouped[row["order_id"]][1].append(OrderLineDTO.from_row(row))
        return [OrderSummaryDTO.from_simple(order, lines) for order, lines in grouped.values()]

    def _batched(
        self, search: OrderSearchDTO, offset: int, limit: Optional[int]
    ) -> List[OrderSummaryDTO]:
        rows = self._repository.find_order_rows(search, offset, limit)
        if not rows:
            return []
        lines = self._repository.find_lines_by_order(row["order_id"] for row in rows)
        return [
            OrderSummaryDTO.from_simple(
                SimpleOrderDTO.from_row(row),
                lines.get(row["order_id"], []),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Graph walking
    # ------------------------------------------------------------------

    def _to_one(self, order: Order) -> tuple[Member, Delivery]:
        member = self._session.ref(Member, order.member_id).resolve()
        delivery = self._session.ref(Delivery, order.delivery_id).resolve()
        return member, delivery

    def _from_graph(self, order: Order) -> OrderSummaryDTO:
        member, delivery = self._to_one(order)
        lines = [
            OrderLineDTO.from_entity(line, self._session.ref(Item, line.item_id).resolve())
            for line in self._repository.lines_of(order).resolve()
        ]
        return OrderSummaryDTO.from_graph(order, member, delivery, lines)
