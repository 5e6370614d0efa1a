"""Django ORM implementation of the branch and staff repositories."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.branches.models import Branch, Staff
from modules.branches.repositories.interfaces import IBranchRepository, IStaffRepository

logger = structlog.get_logger(__name__)


class BranchDjangoRepository(IBranchRepository):
    """Concrete Branch repository; holidays are always prefetched."""

    def get_by_id(self, id: Any) -> Optional[Branch]:
        try:
            return Branch.objects.prefetch_related("holidays").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[Branch]:
        """Lock the branch row; used to serialize capacity checks."""
        try:
            return (
                Branch.objects.select_for_update()
                .prefetch_related("holidays")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Branch]:
        queryset = Branch.objects.prefetch_related("holidays")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_code(self, code: str) -> Optional[Branch]:
        return Branch.objects.filter(code=code.strip().upper()).first()

    def save(self, entity: Branch, update_fields: Optional[list[str]] = None) -> Branch:
        entity.save(update_fields=update_fields)
        logger.info("branch.saved", branch_id=str(entity.id))
        return entity


class StaffDjangoRepository(IStaffRepository):
    """Concrete Staff repository.

    Workload changes go through the ``current_orders`` relation so that the
    order engine never touches the join table directly.
    """

    def get_by_id(self, id: Any) -> Optional[Staff]:
        try:
            return Staff.objects.select_related("branch").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[Staff]:
        try:
            return (
                Staff.objects.select_for_update()
                .select_related("branch")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Staff]:
        queryset = Staff.objects.select_related("branch")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_phone(self, phone: str) -> Optional[Staff]:
        return Staff.objects.filter(phone=phone).first()

    def save(self, entity: Staff, update_fields: Optional[list[str]] = None) -> Staff:
        entity.save(update_fields=update_fields)
        logger.info("staff.saved", staff_id=str(entity.id))
        return entity

    def current_load(self, staff: Staff) -> int:
        return staff.current_orders.count()

    def holds_order(self, staff: Staff, order_id: Any) -> bool:
        return staff.current_orders.filter(id=order_id).exists()

    def add_current_order(self, staff: Staff, order_id: Any) -> None:
        staff.current_orders.add(order_id)

    def release_order(self, order_id: Any) -> int:
        through = Staff.current_orders.through
        removed, _ = through.objects.filter(order_id=order_id).delete()
        if removed:
            logger.info("staff.workload_released", order_id=str(order_id), count=removed)
        return removed
