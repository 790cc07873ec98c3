"""Item API views.

Exposes the ``ItemService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; generic exceptions propagate.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.items.dtos import CreateItemDTO, UpdateItemDTO
from modules.items.exceptions import ItemNotFound
from modules.items.filters import ItemFilter
from modules.items.models import Item
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.items.serializers import ItemSerializer
from modules.items.services import ItemService


class ItemViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Item operations.

    Uses ``ItemService`` with ``ItemDjangoRepository`` (DIP).  Listing is
    paginated and filtered by ``ItemFilter``.
    """

    queryset = Item.objects.all()
    serializer_class = ItemSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = ItemFilter
    search_fields = ["name"]
    ordering_fields = ["name", "price", "stock_quantity", "created_at"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ItemService(repository=ItemDjangoRepository())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/items/{pk}/"""
        try:
            item = self._service.get_item(str(pk))
        except ItemNotFound:
            return Response(
                {"detail": "Item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ItemSerializer(item).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/items/"""
        data = request.data

        try:
            dto = CreateItemDTO(
                name=data.get("name", ""),
                price=data.get("price", 0),
                stock_quantity=data.get("stock_quantity", 0),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        item = self._service.create_item(dto)
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/items/{pk}/"""
        data = request.data

        try:
            dto = UpdateItemDTO(
                name=data.get("name"),
                price=data.get("price"),
                stock_quantity=data.get("stock_quantity"),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            item = self._service.update_item(str(pk), dto)
        except ItemNotFound:
            return Response(
                {"detail": "Item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        return Response(ItemSerializer(item).data)
