from decimal import Decimal
from types import SimpleNamespace

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.items.models import Item
from modules.members.models import Member
from modules.orders.models import Delivery, Order, OrderItem


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(username="apiuser", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


def make_order(member, lines):
    """Persist an order for ``member`` with ``lines`` = [(item, count), ...]."""
    delivery = Delivery.objects.create(
        city=member.city,
        street=member.street,
        zipcode=member.zipcode,
    )
    order = Order.objects.create(member=member, delivery=delivery)
    for item, count in lines:
        OrderItem.objects.create(order=order, item=item, order_price=item.price, count=count)
    return order


@pytest.fixture()
def order_factory():
    return make_order


@pytest.fixture()
def order_dataset():
    """Two members, three items and two orders.

    - order1: member1, lines itemA x2 (10000) and itemB x1 (20000)
    - order2: member2, line itemC x3 (5000)
    """
    member1 = Member.objects.create(name="member1", city="Seoul", street="1", zipcode="1111")
    member2 = Member.objects.create(name="member2", city="Busan", street="2", zipcode="2222")
    item_a = Item.objects.create(name="itemA", price=Decimal("10000"), stock_quantity=100)
    item_b = Item.objects.create(name="itemB", price=Decimal("20000"), stock_quantity=100)
    item_c = Item.objects.create(name="itemC", price=Decimal("5000"), stock_quantity=100)
    order1 = make_order(member1, [(item_a, 2), (item_b, 1)])
    order2 = make_order(member2, [(item_c, 3)])
    return SimpleNamespace(
        member1=member1,
        member2=member2,
        item_a=item_a,
        item_b=item_b,
        item_c=item_c,
        order1=order1,
        order2=order2,
    )
