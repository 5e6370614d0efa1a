"""Order DRF serializers for API input/output.

Input serializers check shapes only.  Identifiers are optional here so a
missing one reaches the façade and comes back as its ``*_REQUIRED`` /
``MISSING_DATA`` error code.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.orders.models import Order, OrderStaffAssignment, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    pickup_address = serializers.CharField(max_length=500)
    pickup_pincode = serializers.RegexField(r"^\d{6}$")
    delivery_address = serializers.CharField(max_length=500)
    delivery_pincode = serializers.RegexField(r"^\d{6}$")
    total_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    total_weight_kg = serializers.DecimalField(
        max_digits=8, decimal_places=2, min_value=Decimal("0"), required=False
    )
    is_express = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class AssignBranchSerializer(serializers.Serializer):
    branch_id = serializers.UUIDField(required=False, allow_null=True)


class AssignLogisticsSerializer(serializers.Serializer):
    logistics_partner_id = serializers.UUIDField(required=False, allow_null=True)
    type = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AssignStaffSerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False, allow_null=True)


class TransitionStatusSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = [
            "sequence",
            "old_status",
            "new_status",
            "actor_id",
            "actor_role",
            "notes",
            "is_override",
            "created_at",
        ]
        read_only_fields = fields


class StaffAssignmentSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.name", read_only=True)
    staff_role = serializers.CharField(source="staff.role", read_only=True)

    class Meta:
        model = OrderStaffAssignment
        fields = ["staff_id", "staff_name", "staff_role", "assigned_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with history and staff."""

    status_history = StatusHistorySerializer(many=True, read_only=True)
    assigned_staff = StaffAssignmentSerializer(
        source="staff_assignments", many=True, read_only=True
    )
    branch_name = serializers.CharField(
        source="branch.name", read_only=True, default=None
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "status",
            "branch_id",
            "branch_name",
            "logistics_partner_id",
            "pickup_partner_id",
            "delivery_partner_id",
            "pickup_address",
            "pickup_pincode",
            "delivery_address",
            "delivery_pincode",
            "total_amount",
            "total_weight_kg",
            "is_express",
            "notes",
            "created_at",
            "updated_at",
            "assigned_staff",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "status",
            "branch_id",
            "is_express",
            "total_amount",
            "created_at",
        ]
        read_only_fields = fields
