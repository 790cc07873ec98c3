"""Unit tests for OrderSummaryHydrator.

Covers:
- Every strategy returns the same summaries for the same data.
- Round trips per strategy (lazy walk, join-fetch, batched).
- Orders without lines, empty results, search filters and paging.
- The flat-join paging defect and its rejection by the hydrator.
- Store failures abort hydration.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import OperationalError, connection
from django.db.models import QuerySet
from django.test.utils import CaptureQueriesContext

from modules.core.dtos import AddressDTO
from modules.core.exceptions import StoreUnavailable
from modules.items.models import Item
from modules.members.models import Member
from modules.orders.constants import MAX_SUMMARY_LIMIT, HydrationStrategy
from modules.orders.dtos import OrderSearchDTO
from modules.orders.exceptions import InvalidOrderSearch, SessionClosed
from modules.orders.hydration import OrderSummaryHydrator
from modules.orders.models import Delivery, Order
from modules.orders.repositories.query_repository import OrderQueryRepository
from modules.orders.store import StoreSession, open_store_session

pytestmark = pytest.mark.unit

PAGINABLE = [
    HydrationStrategy.LAZY,
    HydrationStrategy.JOIN_FETCH,
    HydrationStrategy.BATCHED,
]


def _lines(summary):
    return [(line.item_name, line.order_price, line.count) for line in summary.order_items]


def _hydrate(strategy, search=None, **kwargs):
    with open_store_session() as session:
        return OrderSummaryHydrator(session).fetch_order_summaries(
            search, strategy=strategy, **kwargs
        )


# ---------------------------------------------------------------------------
# Scenario
# ---------------------------------------------------------------------------


class TestTwoOrderScenario:
    def test_batched_summaries(self, order_dataset):
        summaries = _hydrate(HydrationStrategy.BATCHED)

        assert [s.order_id for s in summaries] == [
            order_dataset.order1.id,
            order_dataset.order2.id,
        ]
        first, second = summaries
        assert first.member_name == "member1"
        assert first.order_status == "ORDERED"
        assert first.address == AddressDTO(city="Seoul", street="1", zipcode="1111")
        assert _lines(first) == [
            ("itemA", Decimal("10000"), 2),
            ("itemB", Decimal("20000"), 1),
        ]
        assert second.member_name == "member2"
        assert _lines(second) == [("itemC", Decimal("5000"), 3)]

    @pytest.mark.parametrize(
        "strategy",
        [HydrationStrategy.LAZY, HydrationStrategy.JOIN_FETCH, HydrationStrategy.FLAT_JOIN],
    )
    def test_strategies_are_equivalent(self, order_dataset, strategy):
        expected = _hydrate(HydrationStrategy.BATCHED)
        actual = _hydrate(strategy)
        assert [s.model_dump() for s in actual] == [s.model_dump() for s in expected]

    def test_default_strategy_is_batched(self, order_dataset, django_assert_num_queries):
        with open_store_session() as session:
            with django_assert_num_queries(2):
                OrderSummaryHydrator(session).fetch_order_summaries()

    def test_string_strategy_is_accepted(self, order_dataset):
        assert len(_hydrate("join_fetch")) == 2

    def test_hydration_only_reads(self, order_dataset):
        for strategy in HydrationStrategy:
            with CaptureQueriesContext(connection) as ctx:
                _hydrate(strategy)
            assert ctx.captured_queries
            assert all(q["sql"].lstrip().upper().startswith("SELECT") for q in ctx.captured_queries)


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


class TestRoundTrips:
    @pytest.mark.parametrize(
        ("strategy", "expected"),
        [
            # root + (member, delivery, lines) per order + 3 distinct items
            (HydrationStrategy.LAZY, 10),
            # root with member/delivery joined + lines per order + 3 items
            (HydrationStrategy.JOIN_FETCH, 6),
            (HydrationStrategy.BATCHED, 2),
            (HydrationStrategy.FLAT_JOIN, 1),
        ],
    )
    def test_query_count(self, order_dataset, django_assert_num_queries, strategy, expected):
        session = StoreSession()
        with django_assert_num_queries(expected):
            OrderSummaryHydrator(session).fetch_order_summaries(strategy=strategy)
        assert session.queries_issued == expected

    def test_shared_member_is_loaded_once(
        self, order_dataset, order_factory, django_assert_num_queries
    ):
        order_factory(order_dataset.member1, [(order_dataset.item_a, 1)])
        session = StoreSession()
        # root + member1 + 3 deliveries + 3 line collections + items A, B + member2 + item C
        with django_assert_num_queries(12):
            summaries = OrderSummaryHydrator(session).fetch_order_summaries(
                strategy=HydrationStrategy.LAZY
            )
        assert [s.member_name for s in summaries] == ["member1", "member2", "member1"]

    def test_batched_skips_second_phase_when_nothing_matches(
        self, order_dataset, django_assert_num_queries
    ):
        search = OrderSearchDTO(member_name="nobody")
        session = StoreSession()
        with django_assert_num_queries(1):
            result = OrderSummaryHydrator(session).fetch_order_summaries(search)
        assert result == []


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_empty_store_returns_empty_list(self):
        for strategy in HydrationStrategy:
            assert _hydrate(strategy) == []

    @pytest.mark.parametrize("strategy", list(HydrationStrategy))
    def test_order_without_lines_has_empty_items(self, order_dataset, order_factory, strategy):
        empty = order_factory(order_dataset.member2, [])
        summaries = _hydrate(strategy)
        assert summaries[-1].order_id == empty.id
        assert summaries[-1].order_items == []

    def test_filter_by_member_name(self, order_dataset):
        for strategy in HydrationStrategy:
            summaries = _hydrate(strategy, OrderSearchDTO(member_name="member1"))
            assert [s.order_id for s in summaries] == [order_dataset.order1.id]
            assert len(summaries[0].order_items) == 2

    def test_filter_by_status(self, order_dataset):
        Order.objects.filter(id=order_dataset.order2.id).update(status="CANCELLED")
        search = OrderSearchDTO.parse({"status": "CANCELLED"})
        summaries = _hydrate(HydrationStrategy.BATCHED, search)
        assert [s.order_id for s in summaries] == [order_dataset.order2.id]
        assert summaries[0].order_status == "CANCELLED"

    def test_lines_follow_creation_order(self, order_dataset):
        for strategy in HydrationStrategy:
            first = _hydrate(strategy)[0]
            assert [line.item_name for line in first.order_items] == ["itemA", "itemB"]

    def test_delivery_address_is_copied_not_member_address(self, order_dataset):
        Delivery.objects.filter(id=order_dataset.order1.delivery_id).update(city="Incheon")
        for strategy in HydrationStrategy:
            assert _hydrate(strategy)[0].address.city == "Incheon"


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------


class TestPaging:
    @pytest.mark.parametrize("strategy", PAGINABLE)
    def test_offset_and_limit_count_orders(self, order_dataset, strategy):
        first_page = _hydrate(strategy, offset=0, limit=1)
        second_page = _hydrate(strategy, offset=1, limit=1)

        assert [s.order_id for s in first_page] == [order_dataset.order1.id]
        assert len(first_page[0].order_items) == 2
        assert [s.order_id for s in second_page] == [order_dataset.order2.id]
        assert len(second_page[0].order_items) == 1

    def test_offset_past_the_end_is_empty(self, order_dataset):
        assert _hydrate(HydrationStrategy.BATCHED, offset=5, limit=10) == []

    def test_flat_rows_paginate_joined_rows(self, order_dataset):
        """A flat page of one row cuts order1 in half."""
        with open_store_session() as session:
            rows = OrderQueryRepository(session).find_flat_rows(OrderSearchDTO(), limit=1)

        assert len(rows) == 1
        assert rows[0]["order_id"] == order_dataset.order1.id
        assert rows[0]["item_name"] == "itemA"

    def test_flat_rows_offset_splits_an_order(self, order_dataset):
        with open_store_session() as session:
            rows = OrderQueryRepository(session).find_flat_rows(
                OrderSearchDTO(), offset=1, limit=2
            )

        assert [(r["order_id"], r["item_name"]) for r in rows] == [
            (order_dataset.order1.id, "itemB"),
            (order_dataset.order2.id, "itemC"),
        ]

    def test_flat_first_row_is_not_the_first_order(self, order_factory):
        """Three lines then one: a flat page of one row is a partial order."""
        member = Member.objects.create(name="member1")
        items = [
            Item.objects.create(name=f"item{i}", price=Decimal("1000"), stock_quantity=10)
            for i in range(3)
        ]
        order_factory(member, [(item, 1) for item in items])
        order_factory(member, [(items[0], 1)])

        with open_store_session() as session:
            rows = OrderQueryRepository(session).find_flat_rows(OrderSearchDTO(), limit=1)
        first_order = _hydrate(HydrationStrategy.BATCHED, limit=1)[0]

        assert rows[0]["order_id"] == first_order.order_id
        assert len(rows) == 1
        assert len(first_order.order_items) == 3
        with pytest.raises(InvalidOrderSearch):
            _hydrate(HydrationStrategy.FLAT_JOIN, limit=1)

    @pytest.mark.parametrize("paging", [{"limit": 1}, {"offset": 1}, {"offset": 0, "limit": 10}])
    def test_hydrator_rejects_paginated_flat_join(self, order_dataset, paging):
        with pytest.raises(InvalidOrderSearch):
            _hydrate(HydrationStrategy.FLAT_JOIN, **paging)

    @pytest.mark.parametrize(
        "paging",
        [
            {"offset": -1},
            {"limit": 0},
            {"limit": MAX_SUMMARY_LIMIT + 1},
            {"offset": "1"},
            {"limit": True},
        ],
    )
    def test_bad_paging_arguments(self, paging):
        with pytest.raises(InvalidOrderSearch):
            _hydrate(HydrationStrategy.BATCHED, **paging)

    def test_unknown_strategy(self):
        with pytest.raises(InvalidOrderSearch, match="Unknown hydration strategy"):
            _hydrate("eager")


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.parametrize("failing_call", [1, 2])
    def test_store_failure_in_any_phase_aborts(self, order_dataset, monkeypatch, failing_call):
        original = QuerySet._fetch_all
        calls = []

        def flaky(queryset):
            calls.append(queryset)
            if len(calls) == failing_call:
                raise OperationalError("connection lost")
            return original(queryset)

        monkeypatch.setattr(QuerySet, "_fetch_all", flaky)

        with pytest.raises(StoreUnavailable):
            _hydrate(HydrationStrategy.BATCHED)

    def test_closed_session_raises(self, order_dataset):
        session = StoreSession()
        session.close()
        with pytest.raises(SessionClosed):
            OrderSummaryHydrator(session).fetch_order_summaries()


# ---------------------------------------------------------------------------
# Single order and simple summaries
# ---------------------------------------------------------------------------


class TestSingleOrder:
    def test_fetch_order_summary(self, order_dataset, django_assert_num_queries):
        with open_store_session() as session:
            with django_assert_num_queries(2):
                summary = OrderSummaryHydrator(session).fetch_order_summary(
                    order_dataset.order2.id
                )
        assert summary.member_name == "member2"
        assert _lines(summary) == [("itemC", Decimal("5000"), 3)]

    def test_fetch_missing_order_summary(self, order_dataset):
        with open_store_session() as session:
            hydrator = OrderSummaryHydrator(session)
            assert hydrator.fetch_order_summary(order_dataset.item_a.id) is None


class TestSimpleSummaries:
    @pytest.mark.parametrize(
        ("strategy", "expected"),
        [
            (HydrationStrategy.LAZY, 5),
            (HydrationStrategy.JOIN_FETCH, 1),
            (HydrationStrategy.BATCHED, 1),
        ],
    )
    def test_query_count_and_equivalence(
        self, order_dataset, django_assert_num_queries, strategy, expected
    ):
        with open_store_session() as session:
            reference = OrderSummaryHydrator(session).fetch_simple_order_summaries(
                strategy=HydrationStrategy.BATCHED
            )
        with open_store_session() as session:
            with django_assert_num_queries(expected):
                summaries = OrderSummaryHydrator(session).fetch_simple_order_summaries(
                    strategy=strategy
                )
        assert [s.model_dump() for s in summaries] == [s.model_dump() for s in reference]
        assert [s.member_name for s in summaries] == ["member1", "member2"]

    def test_flat_join_does_not_apply(self, order_dataset):
        with open_store_session() as session:
            with pytest.raises(InvalidOrderSearch):
                OrderSummaryHydrator(session).fetch_simple_order_summaries(
                    strategy=HydrationStrategy.FLAT_JOIN
                )
