"""Order status history DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import UPDATED_BY_MAX_LENGTH, CustomerNotified
from modules.orders.models import OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class UpdateStatusHistorySerializer(serializers.Serializer):
    """Validates a status history update request."""

    comment = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, default=None
    )
    status_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    notify = serializers.IntegerField(required=False, default=CustomerNotified.HIDDEN)
    email_subject = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    email_text = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, trim_whitespace=False
    )
    updated_by = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        max_length=UPDATED_BY_MAX_LENGTH,
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    order_id = serializers.IntegerField(read_only=True)
    visible_to_customer = serializers.BooleanField(
        source="is_visible_to_customer", read_only=True
    )

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "order_id",
            "status_id",
            "updated_by",
            "customer_notified",
            "visible_to_customer",
            "comments",
            "created_at",
        ]
        read_only_fields = fields
