"""Branch and staff API views.

Thin adapters over ``BranchService`` / ``StaffService``.  Domain errors are
re-raised as API exceptions so the standardized error handler renders them.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.mixins import ActorScopeMixin
from modules.branches.dtos import (
    CreateBranchDTO,
    CreateStaffDTO,
    UpdateCapacityDTO,
    UpdateContactDTO,
    UpdateOperatingHoursDTO,
    UpdateStaffAvailabilityDTO,
)
from modules.branches.models import Branch, Staff
from modules.branches.repositories.django_repository import (
    BranchDjangoRepository,
    StaffDjangoRepository,
)
from modules.branches.serializers import (
    BranchSerializer,
    CapacityReportSerializer,
    CreateBranchSerializer,
    CreateStaffSerializer,
    StaffListQuerySerializer,
    StaffSerializer,
    UpdateCapacitySerializer,
    UpdateContactSerializer,
    UpdateOperatingHoursSerializer,
    UpdateStaffAvailabilitySerializer,
)
from modules.branches.services import BranchService, StaffService
from modules.orders.oracles import CapacityOracle
from shared.domain.errors import DomainError


class BranchViewSet(ActorScopeMixin, GenericViewSet):
    queryset = Branch.objects.all()
    serializer_class = BranchSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = BranchService(
            branch_repository=BranchDjangoRepository(),
            capacity_oracle=CapacityOracle(),
        )

    def create(self, request: Request) -> Response:
        """POST /api/v1/branches/"""
        serializer = CreateBranchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = CreateBranchDTO(**serializer.validated_data)
        try:
            branch = self._service.create_branch(dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/branches/"""
        try:
            branches = self._service.list_branches(self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        page = self.paginate_queryset(branches)
        serializer = BranchSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/branches/{pk}/"""
        try:
            branch = self._service.get_branch(pk, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data)

    @action(detail=True, methods=["put"])
    def capacity(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/branches/{pk}/capacity/"""
        serializer = UpdateCapacitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateCapacityDTO(**serializer.validated_data)
        try:
            branch = self._service.update_capacity(pk, dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data)

    @action(detail=True, methods=["put"])
    def contact(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/branches/{pk}/contact/"""
        serializer = UpdateContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateContactDTO(**serializer.validated_data)
        try:
            branch = self._service.update_contact(pk, dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data)

    @action(detail=True, methods=["put"], url_path="operating-hours")
    def operating_hours(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/branches/{pk}/operating-hours/"""
        serializer = UpdateOperatingHoursSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateOperatingHoursDTO(**serializer.validated_data)
        try:
            branch = self._service.update_operating_hours(pk, dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data)

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/branches/{pk}/toggle-status/"""
        try:
            branch = self._service.toggle_status(pk, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(BranchSerializer(branch).data)

    @action(detail=True, methods=["get"], url_path="capacity-report")
    def capacity_report(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/branches/{pk}/capacity-report/"""
        try:
            report = self._service.capacity_report(pk, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(CapacityReportSerializer(report).data)


class StaffViewSet(ActorScopeMixin, GenericViewSet):
    queryset = Staff.objects.all()
    serializer_class = StaffSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StaffService(
            staff_repository=StaffDjangoRepository(),
            branch_repository=BranchDjangoRepository(),
        )

    def create(self, request: Request) -> Response:
        """POST /api/v1/staff/

        Branch managers may omit ``branch_id``; their own branch is used.
        """
        serializer = CreateStaffSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = CreateStaffDTO(**serializer.validated_data)
        try:
            staff = self._service.create_staff(dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(StaffSerializer(staff).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/staff/

        Branch managers only see their own branch; ``?branch=`` narrows the
        list for administrators.
        """
        query = StaffListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = {}
        if query.validated_data.get("branch"):
            filters["branch_id"] = query.validated_data["branch"]
        try:
            staff = self._service.list_staff(self.get_scope(), filters)
        except DomainError as exc:
            self.raise_api_error(exc)
        page = self.paginate_queryset(staff)
        serializer = StaffSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["put"])
    def availability(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/staff/{pk}/availability/"""
        serializer = UpdateStaffAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateStaffAvailabilityDTO(**serializer.validated_data)
        try:
            staff = self._service.update_availability(pk, dto, self.get_scope())
        except DomainError as exc:
            self.raise_api_error(exc)
        return Response(StaffSerializer(staff).data)
