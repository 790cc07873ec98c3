"""Item DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.items.models import Item


class ItemSerializer(serializers.ModelSerializer):
    """Read serializer for the Item resource."""

    class Meta:
        model = Item
        fields = [
            "id",
            "name",
            "price",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
