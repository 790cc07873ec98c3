"""Member API views.

Exposes the ``MemberService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; generic exceptions propagate.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.dtos import AddressDTO
from modules.members.dtos import CreateMemberDTO, UpdateMemberDTO
from modules.members.exceptions import MemberAlreadyExists, MemberNotFound
from modules.members.filters import MemberFilter
from modules.members.models import Member
from modules.members.repositories.django_repository import MemberDjangoRepository
from modules.members.serializers import (
    CreateMemberSerializer,
    MemberNameSerializer,
    MemberSerializer,
    UpdateMemberSerializer,
)
from modules.members.services import MemberService


class MemberViewSet(GenericViewSet):
    """ViewSet for Member operations.

    The list response wraps the collection in ``{"data": [...]}`` so that
    fields can be added next to it later without breaking clients.
    """

    queryset = Member.objects.all()
    filterset_class = MemberFilter
    ordering_fields = ["name", "created_at"]
    ordering = ["created_at", "id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = MemberService(repository=MemberDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/members/"""
        members = self.filter_queryset(self.get_queryset())
        serializer = MemberNameSerializer(members, many=True)
        return Response({"data": serializer.data})

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/members/{pk}/"""
        try:
            member = self._service.get_member(str(pk))
        except MemberNotFound:
            return Response(
                {"detail": "Member not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(MemberSerializer(member).data)

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/members/"""
        serializer = CreateMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateMemberDTO(
                name=data["name"],
                address=AddressDTO(**data.get("address", {})),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            member = self._service.join(dto)
        except MemberAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        return Response({"id": str(member.id)}, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/members/{pk}/"""
        serializer = UpdateMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateMemberDTO(name=serializer.validated_data["name"])
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            member = self._service.update_member(str(pk), dto)
        except MemberNotFound:
            return Response(
                {"detail": "Member not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except MemberAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        return Response({"id": str(member.id), "name": member.name})
