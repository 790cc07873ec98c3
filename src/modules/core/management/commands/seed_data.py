from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.core.dtos import AddressDTO
from modules.items.dtos import CreateItemDTO
from modules.items.models import Item
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.items.services import ItemService
from modules.members.dtos import CreateMemberDTO
from modules.members.models import Member
from modules.members.repositories.django_repository import MemberDjangoRepository
from modules.members.services import MemberService
from modules.orders.dtos import PlaceOrderDTO, PlaceOrderLineDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService


class Command(BaseCommand):
    help = "Seed database with two members, four items and two orders."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Orders already exist, skipping."))
            return

        members = self._seed_members()
        items = self._seed_items()
        orders_created = self._seed_orders(members, items)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"members={len(members)}, "
                f"items={len(items)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return 0
        User.objects.create_superuser("admin", password="admin123")
        return 1

    def _seed_members(self) -> dict[str, Member]:
        service = MemberService(repository=MemberDjangoRepository())
        members = {}
        for name, city, street, zipcode in [
            ("userA", "Seoul", "1", "1111"),
            ("userB", "Jinju", "2", "2222"),
        ]:
            existing = Member.objects.filter(name=name).first()
            members[name] = existing or service.join(
                CreateMemberDTO(
                    name=name,
                    address=AddressDTO(city=city, street=street, zipcode=zipcode),
                )
            )
        return members

    def _seed_items(self) -> dict[str, Item]:
        service = ItemService(repository=ItemDjangoRepository())
        catalog = [
            ("JPA1 BOOK", Decimal("10000"), 100),
            ("JPA2 BOOK", Decimal("20000"), 100),
            ("SPRING1 BOOK", Decimal("20000"), 200),
            ("SPRING2 BOOK", Decimal("40000"), 300),
        ]
        return {
            name: service.create_item(
                CreateItemDTO(name=name, price=price, stock_quantity=stock)
            )
            for name, price, stock in catalog
        }

    def _seed_orders(self, members: dict[str, Member], items: dict[str, Item]) -> int:
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            member_repository=MemberDjangoRepository(),
            item_repository=ItemDjangoRepository(),
        )
        plan = [
            ("userA", [("JPA1 BOOK", 1), ("JPA2 BOOK", 2)]),
            ("userB", [("SPRING1 BOOK", 3), ("SPRING2 BOOK", 4)]),
        ]
        for member_name, lines in plan:
            service.place_order(
                PlaceOrderDTO(
                    member_id=members[member_name].id,
                    lines=[
                        PlaceOrderLineDTO(item_id=items[name].id, count=count)
                        for name, count in lines
                    ],
                )
            )
        return len(plan)
