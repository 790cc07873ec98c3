"""Unit tests for ItemService.

``update_item`` loads the item and changes only the supplied fields.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.items.dtos import CreateItemDTO, UpdateItemDTO
from modules.items.exceptions import ItemNotFound
from modules.items.models import Item
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.items.services import ItemService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ItemService(repository=ItemDjangoRepository())


@pytest.fixture()
def book(service):
    return service.create_item(
        CreateItemDTO(name="JPA BOOK", price=Decimal("10000"), stock_quantity=10)
    )


class TestCreateItem:
    def test_create(self, book):
        stored = Item.objects.get(id=book.id)
        assert stored.name == "JPA BOOK"
        assert stored.price == Decimal("10000")
        assert stored.stock_quantity == 10

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "", "price": Decimal("1")},
            {"name": "x", "price": Decimal("0")},
            {"name": "x", "price": Decimal("1"), "stock_quantity": -1},
        ],
    )
    def test_invalid_input(self, payload):
        with pytest.raises(ValidationError):
            CreateItemDTO(**payload)


class TestUpdateItem:
    def test_updates_only_supplied_fields(self, service, book):
        updated = service.update_item(str(book.id), UpdateItemDTO(price=Decimal("12000")))

        assert updated.price == Decimal("12000")
        assert updated.name == "JPA BOOK"
        assert updated.stock_quantity == 10
        assert Item.objects.get(id=book.id).price == Decimal("12000")

    def test_unknown_item(self, service):
        with pytest.raises(ItemNotFound):
            service.update_item(str(uuid4()), UpdateItemDTO(name="x"))


class TestQueries:
    def test_list_items(self, service, book):
        service.create_item(CreateItemDTO(name="ABC BOOK", price=Decimal("500")))
        assert [i.name for i in service.list_items()] == ["ABC BOOK", "JPA BOOK"]

    def test_get_item(self, service, book):
        assert service.get_item(str(book.id)) == book

    @pytest.mark.parametrize("item_id", [str(uuid4()), "nope"])
    def test_get_missing_item(self, service, item_id):
        with pytest.raises(ItemNotFound):
            service.get_item(item_id)
