"""Order API views.

Exposes ``OrderWorkflowService`` over HTTP.  The actor's role comes from
the authenticated user via ``ActorScopeMixin``; domain and storage errors
are re-raised as API exceptions and rendered by the standardized handler.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.mixins import ActorScopeMixin
from modules.orders.dtos import (
    AssignBranchDTO,
    AssignLogisticsDTO,
    AssignStaffDTO,
    OrderListFiltersDTO,
    PlaceOrderDTO,
    TransitionStatusDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.serializers import (
    AssignBranchSerializer,
    AssignLogisticsSerializer,
    AssignStaffSerializer,
    OrderListSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    TransitionStatusSerializer,
)
from modules.orders.services import build_workflow_service
from shared.domain.errors import DomainError, InfrastructureError


class OrderViewSet(ActorScopeMixin, GenericViewSet):
    """ViewSet for the order workflow.

    Does **not** extend ``ModelViewSet``: all ORM access goes through the
    façade and its repositories.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_workflow_service()

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttle scopes per action."""
        if self.action == "create":
            self.throttle_scope = "order_placement"
        elif self.action in {"list", "retrieve"}:
            self.throttle_scope = "order_listing"
        else:
            self.throttle_scope = "order_workflow"
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Place
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {k: v for k, v in serializer.validated_data.items() if v is not None}
        dto = PlaceOrderDTO(**data)

        try:
            order = self._service.place_order(dto, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Results are limited to the actor's scope, then narrowed by
        ``status``, ``branch``, ``is_express``, ``start_date`` and
        ``end_date``.
        """
        filterset = OrderFilter(request.query_params, queryset=Order.objects.none())
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        cleaned = filterset.form.cleaned_data
        filters = OrderListFiltersDTO(
            status=cleaned.get("status") or None,
            branch_id=cleaned.get("branch"),
            is_express=cleaned.get("is_express"),
            start_date=cleaned.get("start_date"),
            end_date=cleaned.get("end_date"),
        )

        try:
            orders = self._service.list_orders(self.get_scope(), filters)
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)

        page = self.paginate_queryset(orders)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Workflow actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="assign-branch")
    def assign_branch(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/assign-branch/"""
        serializer = AssignBranchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = AssignBranchDTO(
            order_id=pk,
            branch_id=serializer.validated_data.get("branch_id"),
        )

        try:
            order = self._service.assign_branch(dto, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="assign-logistics")
    def assign_logistics(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/assign-logistics/

        Body: ``logistics_partner_id`` and ``type`` (``pickup`` | ``delivery``).
        """
        serializer = AssignLogisticsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = AssignLogisticsDTO(
            order_id=pk,
            logistics_partner_id=serializer.validated_data.get("logistics_partner_id"),
            leg=serializer.validated_data.get("type"),
        )

        try:
            order = self._service.assign_logistics(dto, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="assign-staff")
    def assign_staff(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/assign-staff/"""
        serializer = AssignStaffSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = AssignStaffDTO(
            order_id=pk,
            staff_id=serializer.validated_data.get("staff_id"),
        )

        try:
            order = self._service.assign_staff(dto, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="status")
    def transition_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status/

        Administrators may move an order to any status (override); other
        roles follow their transition table.
        """
        serializer = TransitionStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = TransitionStatusDTO(
            order_id=pk,
            status=serializer.validated_data.get("status"),
            notes=serializer.validated_data.get("notes") or "",
        )

        try:
            order = self._service.transition_status(dto, self.get_scope())
        except (DomainError, InfrastructureError) as exc:
            self.raise_api_error(exc)
        return Response(OrderSerializer(order).data)
