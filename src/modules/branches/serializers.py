"""Branch and staff DRF serializers."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.branches.constants import WEEKDAYS, StaffRole
from modules.branches.models import Branch, BranchHoliday, Staff

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateBranchSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(max_length=20)
    address_line = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    pincode = serializers.RegexField(r"^\d{6}$", max_length=6)
    contact_phone = serializers.CharField(max_length=20)
    contact_email = serializers.EmailField(required=False, default="", allow_blank=True)
    max_orders_per_day = serializers.IntegerField(min_value=1, required=False)
    max_weight_per_day = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01"), required=False
    )


class CreateStaffSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20)
    role = serializers.ChoiceField(choices=StaffRole.choices)
    branch_id = serializers.UUIDField(required=False)
    max_concurrent_orders = serializers.IntegerField(min_value=1, required=False)


class UpdateCapacitySerializer(serializers.Serializer):
    max_orders_per_day = serializers.IntegerField(min_value=1)
    max_weight_per_day = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )


class UpdateContactSerializer(serializers.Serializer):
    contact_phone = serializers.CharField(max_length=20)
    contact_email = serializers.EmailField(required=False, default="", allow_blank=True)


class UpdateOperatingHoursSerializer(serializers.Serializer):
    open_time = serializers.TimeField()
    close_time = serializers.TimeField()
    working_days = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS),
        allow_empty=True,
    )

    def validate(self, attrs):
        if attrs["close_time"] <= attrs["open_time"]:
            raise serializers.ValidationError(
                {"close_time": "Closing time must be after opening time."}
            )
        return attrs


class UpdateStaffAvailabilitySerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
    max_concurrent_orders = serializers.IntegerField(min_value=1)


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class BranchHolidaySerializer(serializers.ModelSerializer):
    class Meta:
        model = BranchHoliday
        fields = ["id", "date", "reason", "is_recurring"]
        read_only_fields = fields


class BranchSerializer(serializers.ModelSerializer):
    holidays = BranchHolidaySerializer(many=True, read_only=True)

    class Meta:
        model = Branch
        fields = [
            "id",
            "name",
            "code",
            "address_line",
            "city",
            "pincode",
            "contact_phone",
            "contact_email",
            "max_orders_per_day",
            "max_weight_per_day",
            "open_time",
            "close_time",
            "working_days",
            "holidays",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CapacityReportSerializer(serializers.Serializer):
    branch_id = serializers.UUIDField()
    day = serializers.DateField()
    is_operating = serializers.BooleanField()
    orders_today = serializers.IntegerField()
    max_orders_per_day = serializers.IntegerField()
    weight_today = serializers.DecimalField(max_digits=12, decimal_places=2)
    max_weight_per_day = serializers.DecimalField(max_digits=10, decimal_places=2)
    remaining_orders = serializers.IntegerField()
    remaining_weight = serializers.DecimalField(max_digits=12, decimal_places=2)


class StaffSerializer(serializers.ModelSerializer):
    current_load = serializers.SerializerMethodField()

    class Meta:
        model = Staff
        fields = [
            "id",
            "name",
            "phone",
            "branch_id",
            "role",
            "is_active",
            "max_concurrent_orders",
            "current_load",
            "created_at",
        ]
        read_only_fields = fields

    def get_current_load(self, obj: Staff) -> int:
        return obj.current_load


class StaffListQuerySerializer(serializers.Serializer):
    branch = serializers.UUIDField(required=False)
