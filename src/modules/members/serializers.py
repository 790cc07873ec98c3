"""Member DRF serializers for API input/output.

Request payloads are validated here and converted into the Pydantic
DTOs the Service Layer expects.  Responses never expose the entity's
orders.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.members.models import Member


class AddressSerializer(serializers.Serializer):
    city = serializers.CharField(required=False, default="", allow_blank=True)
    street = serializers.CharField(required=False, default="", allow_blank=True)
    zipcode = serializers.CharField(required=False, default="", allow_blank=True)


class CreateMemberSerializer(serializers.Serializer):
    """Validates the member registration payload."""

    name = serializers.CharField(max_length=255)
    address = AddressSerializer(required=False)


class UpdateMemberSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class MemberNameSerializer(serializers.Serializer):
    """List representation: only the display name."""

    name = serializers.CharField(read_only=True)


class MemberSerializer(serializers.ModelSerializer):
    """Read serializer for a single member with its address value."""

    address = AddressSerializer(read_only=True)

    class Meta:
        model = Member
        fields = ["id", "name", "address", "created_at"]
        read_only_fields = fields
