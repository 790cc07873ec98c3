"""Order DRF serializers for API input/output.

Input serializers validate request payloads and query parameters before
they become Pydantic DTOs.  Output serializers render the read models
(``OrderSummaryDTO`` / ``SimpleOrderDTO``), never Order entities.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.members.serializers import AddressSerializer
from modules.orders.constants import (
    DEFAULT_HYDRATION_STRATEGY,
    MAX_SUMMARY_LIMIT,
    HydrationStrategy,
    OrderStatus,
)

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderLineSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    count = serializers.IntegerField(min_value=1)


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the order placement payload."""

    member_id = serializers.UUIDField()
    lines = PlaceOrderLineSerializer(many=True, allow_empty=False)


class OrderSearchSerializer(serializers.Serializer):
    """Validates the order summary query string.

    ``member_name`` and ``status`` are optional filters; absent means
    "match every order".
    """

    # allow_blank keeps "?member_name=" from being read as an absent field
    member_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    strategy = serializers.ChoiceField(
        choices=HydrationStrategy.choices,
        default=DEFAULT_HYDRATION_STRATEGY.value,
    )
    offset = serializers.IntegerField(min_value=0, default=0)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_SUMMARY_LIMIT,
        required=False,
    )

    def validate_member_name(self, value: str) -> str:
        if not value:
            raise serializers.ValidationError("This field may not be blank.", code="blank")
        return value


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.Serializer):
    item_name = serializers.CharField(read_only=True)
    order_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    count = serializers.IntegerField(read_only=True)


class SimpleOrderSerializer(serializers.Serializer):
    """Order with member name and delivery address inlined; no lines."""

    order_id = serializers.UUIDField(read_only=True)
    member_name = serializers.CharField(read_only=True)
    order_date = serializers.DateTimeField(read_only=True)
    order_status = serializers.CharField(read_only=True)
    address = AddressSerializer(read_only=True)


class OrderSummarySerializer(SimpleOrderSerializer):
    order_items = OrderLineSerializer(many=True, read_only=True)
