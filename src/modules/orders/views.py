"""Order API views.

``OrderViewSet`` serves order summaries (read models hydrated by
``OrderQueryService``) and the placement / cancellation commands of
``OrderService``.  ``SimpleOrderViewSet`` serves the to-one-only
summaries.

Domain exceptions are caught and translated into HTTP status codes.
``StoreUnavailable`` is left to the project exception handler (503).
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.exceptions import InvalidArgument
from modules.items.exceptions import ItemNotFound, NotEnoughStock
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.members.exceptions import MemberNotFound
from modules.members.repositories.django_repository import MemberDjangoRepository
from modules.orders.dtos import OrderSearchDTO, PlaceOrderDTO, PlaceOrderLineDTO
from modules.orders.exceptions import OrderAlreadyDelivered, OrderNotFound
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderSearchSerializer,
    OrderSummarySerializer,
    PlaceOrderSerializer,
    SimpleOrderSerializer,
)
from modules.orders.services import OrderQueryService, OrderService


def _search_arguments(request: Request) -> Dict[str, Any]:
    """Validate the query string into hydrator keyword arguments."""
    serializer = OrderSearchSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    return {
        "search": OrderSearchDTO.parse(
            {key: data[key] for key in ("member_name", "status") if key in data}
        ),
        "strategy": data["strategy"],
        "offset": data["offset"],
        "limit": data.get("limit"),
    }


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: reads go through the store
    session, writes through the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            member_repository=MemberDjangoRepository(),
            item_repository=ItemDjangoRepository(),
        )
        self._queries = OrderQueryService()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Query parameters: ``member_name``, ``status``, ``strategy``
        (default ``batched``), ``offset``, ``limit``.
        """
        try:
            summaries = self._queries.fetch_order_summaries(**_search_arguments(request))
        except InvalidArgument as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"data": OrderSummarySerializer(summaries, many=True).data})

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            summary = self._queries.get_order_summary(str(pk))
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSummarySerializer(summary).data)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = PlaceOrderDTO(
                member_id=data["member_id"],
                lines=[
                    PlaceOrderLineDTO(item_id=line["item_id"], count=line["count"])
                    for line in data["lines"]
                ],
            )
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.place_order(dto)
        except MemberNotFound:
            return Response(
                {"detail": "Member not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except ItemNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except NotEnoughStock as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        summary = self._queries.get_order_summary(str(order.id))
        return Response(OrderSummarySerializer(summary).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels an order and restores the stock of its lines.
        """
        try:
            order = self._service.cancel_order(str(pk))
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except OrderAlreadyDelivered as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        summary = self._queries.get_order_summary(str(order.id))
        return Response(OrderSummarySerializer(summary).data)


class SimpleOrderViewSet(ViewSet):
    """Order summaries without lines (member and delivery only)."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._queries = OrderQueryService()

    def list(self, request: Request) -> Response:
        """GET /api/v1/simple-orders/"""
        try:
            summaries = self._queries.fetch_simple_order_summaries(
                **_search_arguments(request)
            )
        except InvalidArgument as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"data": SimpleOrderSerializer(summaries, many=True).data})
