"""Assignment engine.

Orchestrates branch, logistics and staff assignment and bare status
changes.  Every public method is one database transaction:

1. lock the order row (and the branch or staff row it reads limits from),
2. check authority, status preconditions and the relevant oracle,
3. apply the status / assignment change and append the history entry.

Any failure raises before step 3, so nothing is persisted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import ActorRole
from modules.accounts.exceptions import AccessDenied
from modules.branches.exceptions import (
    BranchFull,
    BranchNotFound,
    InactiveBranch,
    InactiveStaff,
    StaffBranchMismatch,
    StaffNotFound,
    StaffUnavailable,
)
from modules.logistics.exceptions import (
    InactiveLogisticsPartner,
    LogisticsPartnerNotFound,
    PartnerAreaNotCovered,
)
from modules.orders.authority import allowed_transitions, authorize_transition
from modules.orders.constants import (
    BRANCH_BOUND_STATES,
    LEG_REQUIRED_STATUS,
    LEG_TARGET_STATUS,
    TERMINAL_STATES,
    LogisticsLeg,
    OrderStatus,
)
from modules.orders.events import OrderStatusChanged, StaffAssigned
from modules.orders.exceptions import (
    OrderInvalidStatus,
    OrderInvalidTransition,
    OrderNotFound,
    StaffAlreadyAssigned,
)
from modules.orders.oracles import AvailabilityOracle, CapacityOracle, CoverageOracle

if TYPE_CHECKING:
    from modules.accounts.scope import ActorScope
    from modules.branches.repositories.interfaces import (
        IBranchRepository,
        IStaffRepository,
    )
    from modules.logistics.repositories.interfaces import ILogisticsPartnerRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class AssignmentEngine:
    """Applies workflow intents to orders.

    Receives repositories and oracles via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        branch_repository: IBranchRepository,
        staff_repository: IStaffRepository,
        partner_repository: ILogisticsPartnerRepository,
        capacity_oracle: Optional[CapacityOracle] = None,
        coverage_oracle: Optional[CoverageOracle] = None,
        availability_oracle: Optional[AvailabilityOracle] = None,
    ) -> None:
        self._order_repo = order_repository
        self._branch_repo = branch_repository
        self._staff_repo = staff_repository
        self._partner_repo = partner_repository
        self._capacity = capacity_oracle or CapacityOracle()
        self._coverage = coverage_oracle or CoverageOracle()
        self._availability = availability_oracle or AvailabilityOracle()

    # ------------------------------------------------------------------
    # Branch assignment
    # ------------------------------------------------------------------

    @transaction.atomic
    def assign_branch(self, order_id: Any, branch_id: Any, scope: ActorScope) -> Order:
        """Move a ``placed`` order to a branch with capacity left today.

        Raises:
            OrderNotFound, AccessDenied, OrderInvalidStatus,
            BranchNotFound, InactiveBranch, BranchFull.
        """
        order = self._lock_order(order_id, scope)
        log = logger.bind(order_id=str(order.id), branch_id=str(branch_id))

        self._ensure_assignment_authority(
            scope, OrderStatus.PLACED, OrderStatus.ASSIGNED_TO_BRANCH
        )
        if order.status != OrderStatus.PLACED:
            log.warning("order.branch_assignment_rejected", status=order.status)
            raise OrderInvalidStatus(
                f"Order must be {OrderStatus.PLACED} to assign a branch "
                f"(current: {order.status})."
            )

        branch = self._branch_repo.get_for_update(branch_id)
        if branch is None:
            raise BranchNotFound(f"Branch {branch_id} not found.")
        if not branch.is_active:
            raise InactiveBranch(f"Branch {branch.code} is inactive.")

        report = self._capacity.report(branch)
        if not report.is_operating:
            log.warning("order.branch_closed", day=str(report.day))
            raise BranchFull(f"Branch {branch.code} is not operating on {report.day}.")
        if not report.has_capacity(order.total_weight_kg):
            log.warning(
                "order.branch_full",
                orders_today=report.orders_today,
                weight_today=str(report.weight_today),
            )
            raise BranchFull(f"Branch {branch.code} has reached capacity for today.")

        order.branch = branch
        self._commit_transition(
            order,
            OrderStatus.ASSIGNED_TO_BRANCH,
            scope,
            notes=f"Assigned to branch: {branch.name}",
            extra_fields=["branch"],
        )
        log.info("order.branch_assigned", orders_today=report.orders_today + 1)
        return order

    # ------------------------------------------------------------------
    # Logistics assignment
    # ------------------------------------------------------------------

    @transaction.atomic
    def assign_logistics(
        self,
        order_id: Any,
        partner_id: Any,
        leg: str,
        scope: ActorScope,
    ) -> Order:
        """Hand the pickup or delivery leg to a partner covering the pincode.

        Raises:
            OrderNotFound, AccessDenied, OrderInvalidStatus,
            LogisticsPartnerNotFound, InactiveLogisticsPartner,
            PartnerAreaNotCovered.
        """
        leg = LogisticsLeg(leg)
        required = LEG_REQUIRED_STATUS[leg]
        target = LEG_TARGET_STATUS[leg]

        order = self._lock_order(order_id, scope)
        log = logger.bind(order_id=str(order.id), leg=leg.value)

        self._ensure_assignment_authority(scope, required, target)
        if order.status != required:
            log.warning("order.logistics_assignment_rejected", status=order.status)
            raise OrderInvalidStatus(
                f"Order must be {required} for {leg.value} assignment "
                f"(current: {order.status})."
            )

        partner = self._partner_repo.get_by_id(partner_id)
        if partner is None:
            raise LogisticsPartnerNotFound(f"Logistics partner {partner_id} not found.")
        if not partner.is_active:
            raise InactiveLogisticsPartner(
                f"Logistics partner {partner.company_name} is inactive."
            )

        pincode = (
            order.pickup_pincode if leg == LogisticsLeg.PICKUP else order.delivery_pincode
        )
        if not self._coverage.covers(partner, pincode):
            log.warning(
                "order.area_not_covered",
                partner_id=str(partner.id),
                pincode=pincode,
            )
            raise PartnerAreaNotCovered(
                f"{partner.company_name} does not service pincode {pincode}."
            )

        order.logistics_partner = partner
        if leg == LogisticsLeg.PICKUP:
            order.pickup_partner = partner
            leg_field = "pickup_partner"
        else:
            order.delivery_partner = partner
            leg_field = "delivery_partner"

        self._commit_transition(
            order,
            target,
            scope,
            notes=f"Assigned to {partner.company_name} for {leg.value}",
            extra_fields=["logistics_partner", leg_field],
        )
        log.info("order.logistics_assigned", partner_id=str(partner.id))
        return order

    # ------------------------------------------------------------------
    # Staff assignment
    # ------------------------------------------------------------------

    @transaction.atomic
    def assign_staff(self, order_id: Any, staff_id: Any, scope: ActorScope) -> Order:
        """Add a staff member to the order and the order to their workload.

        Both sides are written in this transaction; the status does not
        change.

        Raises:
            OrderNotFound, AccessDenied, OrderInvalidStatus, StaffNotFound,
            InactiveStaff, StaffBranchMismatch, StaffAlreadyAssigned,
            StaffUnavailable.
        """
        order = self._lock_order(order_id, scope)
        if not (scope.is_administrative or scope.has_role(ActorRole.BRANCH_MANAGER)):
            raise AccessDenied(f"Role '{scope.role}' cannot assign staff.")
        if order.is_terminal:
            raise OrderInvalidStatus(f"Order is already {order.status}.")

        staff = self._staff_repo.get_for_update(staff_id)
        if staff is None:
            raise StaffNotFound(f"Staff {staff_id} not found.")
        if not staff.is_active:
            raise InactiveStaff(f"Staff {staff.name} is inactive.")
        if staff.branch_id != order.branch_id:
            logger.warning(
                "order.staff_branch_mismatch",
                order_id=str(order.id),
                staff_id=str(staff.id),
                order_branch_id=str(order.branch_id),
                staff_branch_id=str(staff.branch_id),
            )
            raise StaffBranchMismatch()
        if self._order_repo.has_staff(order, staff):
            raise StaffAlreadyAssigned()

        availability = self._availability.report(staff, order.branch_id)
        if not availability.is_available:
            raise StaffUnavailable(
                f"Staff {staff.name} has {availability.current_load} of "
                f"{availability.limit} orders."
            )

        self._order_repo.add_staff_assignment(order, staff, assigned_by=scope.actor_id)
        self._staff_repo.add_current_order(staff, order.id)
        order.add_domain_event(
            StaffAssigned(
                aggregate_id=order.id,
                staff_id=staff.id,
                branch_id=order.branch_id,
            )
        )
        self._order_repo.save(order, update_fields=[])

        logger.info(
            "order.staff_assigned",
            order_id=str(order.id),
            staff_id=str(staff.id),
            staff_load=availability.current_load + 1,
        )
        return order

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @transaction.atomic
    def transition_status(
        self,
        order_id: Any,
        target_status: str,
        scope: ActorScope,
        notes: str = "",
    ) -> Order:
        """Move an order along the role's table, or override as an admin.

        Raises:
            OrderNotFound, AccessDenied, OrderInvalidTransition.
        """
        order = self._lock_order(order_id, scope)
        current = order.status
        log = logger.bind(
            order_id=str(order.id),
            current_status=current,
            new_status=target_status,
            actor_role=scope.role,
        )

        decision = authorize_transition(current, target_status, scope.role)
        if not decision.allowed:
            log.warning("order.invalid_transition", reason=decision.reason)
            raise OrderInvalidTransition(decision.reason)

        extra_fields: list[str] = []
        if decision.is_override:
            if target_status in BRANCH_BOUND_STATES and order.branch_id is None:
                log.warning("order.invalid_transition", reason="no branch")
                raise OrderInvalidTransition(
                    f"Order needs a branch before moving to {target_status}."
                )
            if target_status == OrderStatus.PLACED:
                order.branch = None
                order.logistics_partner = None
                extra_fields = ["branch", "logistics_partner"]

        self._commit_transition(
            order,
            target_status,
            scope,
            notes=notes,
            is_override=decision.is_override,
            extra_fields=extra_fields,
        )

        if decision.is_override:
            log.warning("order.override_transition")
        else:
            log.info("order.status_updated")
        return order

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock_order(self, order_id: Any, scope: ActorScope) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        scope.ensure_can_access(order)
        return order

    @staticmethod
    def _ensure_assignment_authority(
        scope: ActorScope, required: str, target: str
    ) -> None:
        if target not in allowed_transitions(required, scope.role):
            raise AccessDenied(
                f"Role '{scope.role}' cannot move orders from {required} to {target}."
            )

    def _commit_transition(
        self,
        order: Order,
        target_status: str,
        scope: ActorScope,
        *,
        notes: str = "",
        is_override: bool = False,
        extra_fields: Optional[list[str]] = None,
    ) -> None:
        """Write the new status and its history entry together.

        Staff workload is released when the order leaves the branch
        workflow (terminal state, or an override back to ``placed``) and
        restored when it comes back.
        """
        old_status = order.status
        order.status = target_status
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                order_number=order.order_number,
                old_status=old_status,
                new_status=target_status,
                customer_id=order.customer_id,
                actor_id=scope.actor_id,
                actor_role=scope.role,
                is_override=is_override,
            )
        )
        self._order_repo.save(order, update_fields=["status", *(extra_fields or [])])
        self._order_repo.add_history(
            order,
            target_status,
            old_status=old_status,
            actor_id=scope.actor_id,
            actor_role=scope.role,
            notes=notes,
            is_override=is_override,
        )

        if order.is_terminal or target_status == OrderStatus.PLACED:
            self._staff_repo.release_order(order.id)
        elif old_status in TERMINAL_STATES or old_status == OrderStatus.PLACED:
            self._restore_workload(order)

    def _restore_workload(self, order: Order) -> None:
        """Put a reopened order back on its assigned staff's workload.

        Only staff of the order's current branch are restored. Staff limits
        are not checked.
        """
        for staff in self._order_repo.assigned_staff(order):
            if staff.branch_id != order.branch_id:
                continue
            if self._staff_repo.holds_order(staff, order.id):
                continue
            self._staff_repo.add_current_order(staff, order.id)
            logger.info(
                "order.staff_workload_restored",
                order_id=str(order.id),
                staff_id=str(staff.id),
                staff_load=self._staff_repo.current_load(staff),
            )
