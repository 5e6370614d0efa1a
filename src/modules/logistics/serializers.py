"""Logistics partner DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.logistics.models import LogisticsPartner


class UpdateCoverageSerializer(serializers.Serializer):
    serviceable_pincodes = serializers.ListField(
        child=serializers.RegexField(r"^\d{6}$"),
        allow_empty=True,
    )


class LogisticsPartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = LogisticsPartner
        fields = [
            "id",
            "company_name",
            "contact_person",
            "phone",
            "is_active",
            "serviceable_pincodes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
