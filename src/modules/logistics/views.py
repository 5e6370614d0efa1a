"""Logistics partner API views."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.mixins import ActorScopeMixin
from modules.logistics.dtos import UpdateCoverageDTO
from modules.logistics.models import LogisticsPartner
from modules.logistics.repositories.django_repository import (
    LogisticsPartnerDjangoRepository,
)
from modules.logistics.serializers import (
    LogisticsPartnerSerializer,
    UpdateCoverageSerializer,
)
from modules.logistics.services import LogisticsPartnerService
from shared.domain.errors import DomainError


class LogisticsPartnerViewSet(ActorScopeMixin, GenericViewSet):
    queryset = LogisticsPartner.objects.all()
    serializer_class = LogisticsPartnerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = LogisticsPartnerService(
            partner_repository=LogisticsPartnerDjangoRepository()
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/logistics-partners/

        ``?pincode=`` limits the list to active partners covering it.
        """
        try:
            partners = self._service.list_partners(self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        pincode = request.query_params.get("pincode")
        if pincode:
            partners = [p for p in partners if p.is_active and p.covers_pincode(pincode)]
        page = self.paginate_queryset(partners)
        serializer = LogisticsPartnerSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["put"])
    def coverage(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/logistics-partners/{pk}/coverage/"""
        serializer = UpdateCoverageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateCoverageDTO(**serializer.validated_data)
        try:
            partner = self._service.update_coverage(pk, dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(LogisticsPartnerSerializer(partner).data)

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/logistics-partners/{pk}/toggle-status/"""
        try:
            partner = self._service.toggle_status(pk, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(LogisticsPartnerSerializer(partner).data)
