"""Integration tests for order placement and cancellation endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.items.models import Item
from modules.orders.constants import DeliveryStatus
from modules.orders.models import Delivery, Order

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


def _payload(member, *lines):
    return {
        "member_id": str(member.id),
        "lines": [{"item_id": str(item.id), "count": count} for item, count in lines],
    }


class TestPlaceOrder:
    def test_place_order(self, auth_client, order_dataset):
        payload = _payload(order_dataset.member2, (order_dataset.item_b, 4))

        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["member_name"] == "member2"
        assert data["address"]["city"] == "Busan"
        assert data["order_items"] == [
            {"item_name": "itemB", "order_price": "20000.00", "count": 4}
        ]
        assert Item.objects.get(id=order_dataset.item_b.id).stock_quantity == 96

    def test_not_enough_stock(self, auth_client, order_dataset):
        payload = _payload(order_dataset.member1, (order_dataset.item_a, 1000))

        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 409
        assert Order.objects.count() == 2

    def test_unknown_member(self, auth_client, order_dataset):
        payload = {
            "member_id": str(uuid4()),
            "lines": [{"item_id": str(order_dataset.item_a.id), "count": 1}],
        }
        response = auth_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 404

    def test_unknown_item(self, auth_client, order_dataset):
        payload = {
            "member_id": str(order_dataset.member1.id),
            "lines": [{"item_id": str(uuid4()), "count": 1}],
        }
        response = auth_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 404

    def test_duplicate_items(self, auth_client, order_dataset):
        payload = _payload(
            order_dataset.member1,
            (order_dataset.item_a, 1),
            (order_dataset.item_a, 2),
        )
        response = auth_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "payload",
        [
            {"lines": []},
            {"member_id": "x", "lines": []},
            {"member_id": str(uuid4()), "lines": []},
            {"member_id": str(uuid4()), "lines": [{"item_id": str(uuid4()), "count": 0}]},
        ],
    )
    def test_invalid_payload(self, auth_client, payload):
        response = auth_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["type"] == "client_error"


class TestCancelOrder:
    def test_cancel(self, auth_client, order_dataset):
        order = order_dataset.order2

        response = auth_client.post(f"{ORDERS_URL}{order.id}/cancel/")

        assert response.status_code == 200
        assert response.json()["order_status"] == "CANCELLED"
        assert Item.objects.get(id=order_dataset.item_c.id).stock_quantity == 103

    def test_cancel_delivered(self, auth_client, order_dataset):
        order = order_dataset.order1
        Delivery.objects.filter(id=order.delivery_id).update(status=DeliveryStatus.COMP)

        response = auth_client.post(f"{ORDERS_URL}{order.id}/cancel/")

        assert response.status_code == 400

    def test_cancel_missing(self, auth_client):
        response = auth_client.post(f"{ORDERS_URL}{uuid4()}/cancel/")
        assert response.status_code == 404

    def test_cancelled_order_is_filtered_by_status(self, auth_client, order_dataset):
        auth_client.post(f"{ORDERS_URL}{order_dataset.order2.id}/cancel/")

        response = auth_client.get(ORDERS_URL, {"status": "CANCELLED"})

        data = response.json()["data"]
        assert [o["order_id"] for o in data] == [str(order_dataset.order2.id)]
