"""Order repositories package."""

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.repositories.query_repository import OrderQueryRepository

__all__ = ["IOrderRepository", "OrderDjangoRepository", "OrderQueryRepository"]
