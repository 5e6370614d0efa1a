"""Branch and staff administrative use cases.

Update commands replace a whole value group inside one transaction with the
row locked, so a concurrent branch assignment either sees the old limits or
the new ones, never a mix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import ActorRole
from modules.branches.exceptions import (
    BranchCodeExists,
    BranchNotFound,
    BranchRequired,
    InactiveBranch,
    StaffNotFound,
    StaffPhoneExists,
)
from modules.branches.models import Branch, Staff

if TYPE_CHECKING:
    from modules.accounts.scope import ActorScope
    from modules.branches.dtos import (
        CreateBranchDTO,
        CreateStaffDTO,
        UpdateCapacityDTO,
        UpdateContactDTO,
        UpdateOperatingHoursDTO,
        UpdateStaffAvailabilityDTO,
    )
    from modules.branches.repositories.interfaces import (
        IBranchRepository,
        IStaffRepository,
    )
    from modules.orders.oracles import CapacityOracle, CapacityReport

logger = structlog.get_logger(__name__)

ADMIN_ROLES = (ActorRole.ADMIN, ActorRole.CENTER_ADMIN)
BRANCH_ADMIN_ROLES = (*ADMIN_ROLES, ActorRole.BRANCH_MANAGER)


class BranchService:
    """Application service for branch configuration.

    Capacity limits and activation are reserved for administrators; contact
    details and operating hours may also be changed by the branch's own
    manager.
    """

    def __init__(
        self,
        branch_repository: IBranchRepository,
        capacity_oracle: Optional[CapacityOracle] = None,
    ) -> None:
        self._branch_repo = branch_repository
        self._capacity_oracle = capacity_oracle

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_branch(self, branch_id: Any, scope: ActorScope) -> Branch:
        scope.ensure_role(*BRANCH_ADMIN_ROLES, ActorRole.SUPPORT_AGENT)
        scope.ensure_branch_access(branch_id)
        branch = self._branch_repo.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFound(f"Branch {branch_id} not found.")
        return branch

    def list_branches(
        self, scope: ActorScope, filters: Optional[Dict[str, Any]] = None
    ) -> List[Branch]:
        scope.ensure_role(*BRANCH_ADMIN_ROLES, ActorRole.SUPPORT_AGENT)
        filters = dict(filters or {})
        if scope.is_branch_scoped:
            filters["id"] = scope.owned_branch_id
        return self._branch_repo.list(filters)

    def capacity_report(self, branch_id: Any, scope: ActorScope) -> CapacityReport:
        """Today's load against the branch limits, as the engine would see it."""
        branch = self.get_branch(branch_id, scope)
        if self._capacity_oracle is None:
            from modules.orders.oracles import CapacityOracle

            self._capacity_oracle = CapacityOracle()
        return self._capacity_oracle.report(branch)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_branch(self, dto: CreateBranchDTO, scope: ActorScope) -> Branch:
        """Register a new branch.

        Raises:
            AccessDenied: if the actor is not an administrator.
            BranchCodeExists: if ``code`` is already taken.
        """
        scope.ensure_role(*ADMIN_ROLES)
        log = logger.bind(code=dto.code)
        if self._branch_repo.get_by_code(dto.code):
            log.warning("branch.duplicate_code")
            raise BranchCodeExists(f"Branch code {dto.code} already exists.")

        branch = Branch(
            name=dto.name,
            code=dto.code,
            address_line=dto.address_line,
            city=dto.city,
            pincode=dto.pincode,
            contact_phone=dto.contact_phone,
            contact_email=dto.contact_email or "",
            max_orders_per_day=dto.max_orders_per_day,
            max_weight_per_day=dto.max_weight_per_day,
        )
        branch = self._branch_repo.save(branch)
        log.info("branch.created", branch_id=str(branch.id))
        return branch

    @transaction.atomic
    def update_capacity(
        self, branch_id: Any, dto: UpdateCapacityDTO, scope: ActorScope
    ) -> Branch:
        scope.ensure_role(*ADMIN_ROLES)
        branch = self._lock(branch_id)
        branch.max_orders_per_day = dto.max_orders_per_day
        branch.max_weight_per_day = dto.max_weight_per_day
        self._branch_repo.save(
            branch, update_fields=["max_orders_per_day", "max_weight_per_day"]
        )
        logger.info(
            "branch.capacity_updated",
            branch_id=str(branch.id),
            max_orders_per_day=dto.max_orders_per_day,
            max_weight_per_day=str(dto.max_weight_per_day),
        )
        return branch

    @transaction.atomic
    def update_contact(
        self, branch_id: Any, dto: UpdateContactDTO, scope: ActorScope
    ) -> Branch:
        scope.ensure_role(*BRANCH_ADMIN_ROLES)
        scope.ensure_branch_access(branch_id)
        branch = self._lock(branch_id)
        branch.contact_phone = dto.contact_phone
        branch.contact_email = dto.contact_email or ""
        self._branch_repo.save(branch, update_fields=["contact_phone", "contact_email"])
        logger.info("branch.contact_updated", branch_id=str(branch.id))
        return branch

    @transaction.atomic
    def update_operating_hours(
        self, branch_id: Any, dto: UpdateOperatingHoursDTO, scope: ActorScope
    ) -> Branch:
        scope.ensure_role(*BRANCH_ADMIN_ROLES)
        scope.ensure_branch_access(branch_id)
        branch = self._lock(branch_id)
        branch.open_time = dto.open_time
        branch.close_time = dto.close_time
        branch.working_days = list(dto.working_days)
        self._branch_repo.save(
            branch, update_fields=["open_time", "close_time", "working_days"]
        )
        logger.info(
            "branch.operating_hours_updated",
            branch_id=str(branch.id),
            working_days=branch.working_days,
        )
        return branch

    @transaction.atomic
    def toggle_status(self, branch_id: Any, scope: ActorScope) -> Branch:
        scope.ensure_role(*ADMIN_ROLES)
        branch = self._lock(branch_id)
        branch.is_active = not branch.is_active
        self._branch_repo.save(branch, update_fields=["is_active"])
        logger.info(
            "branch.status_toggled",
            branch_id=str(branch.id),
            is_active=branch.is_active,
        )
        return branch

    def _lock(self, branch_id: Any) -> Branch:
        branch = self._branch_repo.get_for_update(branch_id)
        if branch is None:
            raise BranchNotFound(f"Branch {branch_id} not found.")
        return branch


class StaffService:
    """Application service for staff records and availability."""

    def __init__(
        self,
        staff_repository: IStaffRepository,
        branch_repository: IBranchRepository,
    ) -> None:
        self._staff_repo = staff_repository
        self._branch_repo = branch_repository

    def list_staff(
        self, scope: ActorScope, filters: Optional[Dict[str, Any]] = None
    ) -> List[Staff]:
        scope.ensure_role(*BRANCH_ADMIN_ROLES)
        filters = dict(filters or {})
        branch_id = scope.constrain_branch(filters.pop("branch_id", None))
        if branch_id is not None:
            filters["branch_id"] = branch_id
        return self._staff_repo.list(filters)

    @transaction.atomic
    def update_availability(
        self, staff_id: Any, dto: UpdateStaffAvailabilityDTO, scope: ActorScope
    ) -> Staff:
        """Replace ``is_active`` and ``max_concurrent_orders`` together.

        Lowering the limit below the current load is allowed; the staff
        member simply takes no new orders until the load drops.
        """
        scope.ensure_role(*BRANCH_ADMIN_ROLES)
        staff = self._staff_repo.get_for_update(staff_id)
        if staff is None:
            raise StaffNotFound(f"Staff {staff_id} not found.")
        scope.ensure_branch_access(staff.branch_id)

        staff.is_active = dto.is_active
        staff.max_concurrent_orders = dto.max_concurrent_orders
        self._staff_repo.save(staff, update_fields=["is_active", "max_concurrent_orders"])
        logger.info(
            "staff.availability_updated",
            staff_id=str(staff.id),
            is_active=staff.is_active,
            max_concurrent_orders=staff.max_concurrent_orders,
        )
        return staff

    @transaction.atomic
    def create_staff(self, dto: CreateStaffDTO, scope: ActorScope) -> Staff:
        """Add a staff member to a branch.

        Branch managers always add to their own branch; administrators must
        name one.

        Raises:
            AccessDenied, BranchRequired, BranchNotFound, InactiveBranch,
            StaffPhoneExists.
        """
        scope.ensure_role(*BRANCH_ADMIN_ROLES)
        branch_id = scope.constrain_branch(dto.branch_id)
        if branch_id is None:
            raise BranchRequired()
        branch = self._branch_repo.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFound(f"Branch {branch_id} not found.")
        if not branch.is_active:
            raise InactiveBranch(f"Branch {branch.code} is inactive.")

        log = logger.bind(branch_id=str(branch.id), phone=dto.phone)
        if self._staff_repo.get_by_phone(dto.phone):
            log.warning("staff.duplicate_phone")
            raise StaffPhoneExists()

        staff = Staff(
            name=dto.name,
            phone=dto.phone,
            role=dto.role,
            branch=branch,
            max_concurrent_orders=dto.max_concurrent_orders,
        )
        staff = self._staff_repo.save(staff)
        log.info("staff.created", staff_id=str(staff.id), role=staff.role)
        return staff
