"""Unit tests for AssignmentEngine branch, logistics and staff assignment.

Covers:
- Branch assignment preconditions and the capacity boundary.
- Logistics assignment per leg, coverage and partner state.
- Staff assignment: availability, branch match, idempotency guard and the
  reciprocal workload update.
- Nothing is persisted when an assignment is rejected.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from modules.accounts.exceptions import AccessDenied
from modules.accounts.scope import ActorScope
from modules.branches.exceptions import (
    BranchFull,
    BranchNotFound,
    InactiveBranch,
    StaffBranchMismatch,
    StaffNotFound,
    StaffUnavailable,
)
from modules.branches.models import BranchHoliday
from modules.logistics.exceptions import (
    LogisticsPartnerNotFound,
    PartnerAreaNotCovered,
)
from modules.orders.constants import LogisticsLeg, OrderStatus
from modules.orders.exceptions import (
    OrderInvalidStatus,
    OrderNotFound,
    StaffAlreadyAssigned,
)
from modules.orders.models import Order, OrderStaffAssignment, OrderStatusHistory
from shared.domain.errors import AlreadyAssigned, NotFound, Unavailable

pytestmark = pytest.mark.unit


def history_of(order):
    return list(OrderStatusHistory.objects.filter(order=order).order_by("sequence"))


def assert_unchanged(order, status, history_length=1):
    order.refresh_from_db()
    assert order.status == status
    assert len(history_of(order)) == history_length


# ===========================================================================
# Branch assignment
# ===========================================================================


class TestAssignBranch:
    def test_placed_order_goes_to_an_empty_branch(
        self, engine, make_order, branch, admin_scope
    ):
        order = make_order()

        result = engine.assign_branch(order.id, branch.id, admin_scope)

        assert result.status == OrderStatus.ASSIGNED_TO_BRANCH
        assert result.branch_id == branch.id
        history = history_of(order)
        assert len(history) == 2
        assert history[-1].old_status == OrderStatus.PLACED
        assert history[-1].new_status == OrderStatus.ASSIGNED_TO_BRANCH
        assert history[-1].notes == "Assigned to branch: Indiranagar"
        assert history[-1].actor_role == "admin"
        assert history[-1].is_override is False

    def test_one_slot_left_is_enough(self, engine, make_order, make_branch, admin_scope):
        small = make_branch(max_orders_per_day=3)
        for _ in range(2):
            make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=small)
        order = make_order()

        result = engine.assign_branch(order.id, small.id, admin_scope)

        assert result.status == OrderStatus.ASSIGNED_TO_BRANCH

    def test_full_branch_is_rejected(self, engine, make_order, make_branch, admin_scope):
        small = make_branch(max_orders_per_day=3)
        for _ in range(3):
            make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=small)
        order = make_order()

        with pytest.raises(BranchFull):
            engine.assign_branch(order.id, small.id, admin_scope)

        assert_unchanged(order, OrderStatus.PLACED)
        assert Order.objects.get(pk=order.pk).branch_id is None

    def test_weight_limit_is_enforced(self, engine, make_order, make_branch, admin_scope):
        small = make_branch(max_weight_per_day=Decimal("10.00"))
        make_order(
            status=OrderStatus.ASSIGNED_TO_BRANCH,
            branch=small,
            total_weight_kg=Decimal("7.00"),
        )
        order = make_order(total_weight_kg=Decimal("3.50"))

        with pytest.raises(BranchFull):
            engine.assign_branch(order.id, small.id, admin_scope)

    def test_branch_on_holiday_is_rejected(self, engine, make_order, branch, admin_scope):
        BranchHoliday.objects.create(branch=branch, date=timezone.localdate())
        order = make_order()

        with pytest.raises(BranchFull, match="not operating"):
            engine.assign_branch(order.id, branch.id, admin_scope)

    def test_inactive_branch_is_not_found(self, engine, make_order, make_branch, admin_scope):
        closed = make_branch(is_active=False)
        order = make_order()

        with pytest.raises(BranchNotFound) as exc_info:
            engine.assign_branch(order.id, closed.id, admin_scope)

        assert isinstance(exc_info.value, InactiveBranch)
        assert exc_info.value.code == "BRANCH_NOT_FOUND"
        assert_unchanged(order, OrderStatus.PLACED)

    def test_unknown_branch(self, engine, make_order, admin_scope):
        order = make_order()
        with pytest.raises(BranchNotFound):
            engine.assign_branch(order.id, uuid4(), admin_scope)

    def test_unknown_order(self, engine, branch, admin_scope):
        with pytest.raises(OrderNotFound):
            engine.assign_branch(uuid4(), branch.id, admin_scope)

    def test_order_already_assigned(self, engine, make_order, branch, other_branch, admin_scope):
        order = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)

        with pytest.raises(OrderInvalidStatus):
            engine.assign_branch(order.id, other_branch.id, admin_scope)

        order.refresh_from_db()
        assert order.branch_id == branch.id

    def test_customer_cannot_assign_a_branch(
        self, engine, make_order, branch, customer_scope
    ):
        order = make_order()
        with pytest.raises(AccessDenied):
            engine.assign_branch(order.id, branch.id, customer_scope)
        assert_unchanged(order, OrderStatus.PLACED)

    def test_support_agent_cannot_assign_a_branch(
        self, engine, make_order, branch, support_scope
    ):
        order = make_order()
        with pytest.raises(AccessDenied):
            engine.assign_branch(order.id, branch.id, support_scope)

    def test_center_admin_may_assign(self, engine, make_order, branch, make_user):
        scope = ActorScope.for_user(make_user("center_admin"))
        order = make_order()

        result = engine.assign_branch(order.id, branch.id, scope)

        assert result.status == OrderStatus.ASSIGNED_TO_BRANCH


# ===========================================================================
# Logistics assignment
# ===========================================================================


class TestAssignLogistics:
    def test_pickup_leg(self, engine, make_order, branch, partner, admin_scope):
        order = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)

        result = engine.assign_logistics(
            order.id, partner.id, LogisticsLeg.PICKUP, admin_scope
        )

        assert result.status == OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP
        assert result.logistics_partner_id == partner.id
        assert result.pickup_partner_id == partner.id
        assert result.delivery_partner_id is None
        assert history_of(order)[-1].notes == "Assigned to QuickShip for pickup"

    def test_pickup_checks_the_pickup_pincode(
        self, engine, make_order, branch, make_partner, admin_scope
    ):
        narrow = make_partner(pincodes=["560001"])
        order = make_order(
            status=OrderStatus.ASSIGNED_TO_BRANCH,
            branch=branch,
            pickup_pincode="560002",
            delivery_pincode="560001",
        )

        with pytest.raises(PartnerAreaNotCovered):
            engine.assign_logistics(order.id, narrow.id, "pickup", admin_scope)

        assert_unchanged(order, OrderStatus.ASSIGNED_TO_BRANCH)
        assert Order.objects.get(pk=order.pk).logistics_partner_id is None

    def test_delivery_checks_the_delivery_pincode(
        self, engine, make_order, branch, make_partner, manager_scope
    ):
        narrow = make_partner(pincodes=["560001"])
        order = make_order(
            status=OrderStatus.READY,
            branch=branch,
            pickup_pincode="560001",
            delivery_pincode="560034",
        )

        with pytest.raises(PartnerAreaNotCovered):
            engine.assign_logistics(order.id, narrow.id, "delivery", manager_scope)

    def test_delivery_overwrites_the_current_partner(
        self, engine, make_order, branch, partner, make_partner, manager_scope
    ):
        courier = make_partner(pincodes=["560001"], company_name="CityDash")
        order = make_order(
            status=OrderStatus.READY,
            branch=branch,
            logistics_partner=partner,
            pickup_partner=partner,
        )

        result = engine.assign_logistics(order.id, courier.id, "delivery", manager_scope)

        assert result.status == OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY
        assert result.logistics_partner_id == courier.id
        assert result.pickup_partner_id == partner.id
        assert result.delivery_partner_id == courier.id
        assert history_of(order)[-1].notes == "Assigned to CityDash for delivery"

    def test_pickup_requires_assigned_to_branch(
        self, engine, make_order, branch, partner, admin_scope
    ):
        order = make_order(status=OrderStatus.READY, branch=branch)
        with pytest.raises(OrderInvalidStatus):
            engine.assign_logistics(order.id, partner.id, "pickup", admin_scope)
        assert_unchanged(order, OrderStatus.READY)

    def test_delivery_requires_ready(self, engine, make_order, branch, partner, admin_scope):
        order = make_order(status=OrderStatus.IN_PROCESS, branch=branch)
        with pytest.raises(OrderInvalidStatus):
            engine.assign_logistics(order.id, partner.id, "delivery", admin_scope)

    def test_inactive_partner_is_not_found(
        self, engine, make_order, branch, make_partner, admin_scope
    ):
        idle = make_partner(is_active=False)
        order = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)
        with pytest.raises(LogisticsPartnerNotFound):
            engine.assign_logistics(order.id, idle.id, "pickup", admin_scope)

    def test_unknown_partner(self, engine, make_order, branch, admin_scope):
        order = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)
        with pytest.raises(LogisticsPartnerNotFound):
            engine.assign_logistics(order.id, uuid4(), "pickup", admin_scope)

    def test_branch_manager_cannot_book_pickup(
        self, engine, make_order, branch, partner, manager_scope
    ):
        order = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)
        with pytest.raises(AccessDenied):
            engine.assign_logistics(order.id, partner.id, "pickup", manager_scope)

    def test_other_branch_manager_is_denied(
        self, engine, make_order, branch, partner, other_manager_scope
    ):
        order = make_order(status=OrderStatus.READY, branch=branch)
        with pytest.raises(AccessDenied):
            engine.assign_logistics(order.id, partner.id, "delivery", other_manager_scope)


# ===========================================================================
# Staff assignment
# ===========================================================================


class TestAssignStaff:
    def test_assignment_updates_both_sides(
        self, engine, make_order, branch, staff_member, manager_scope
    ):
        order = make_order(status=OrderStatus.PICKED, branch=branch)

        result = engine.assign_staff(order.id, staff_member.id, manager_scope)

        assert result.status == OrderStatus.PICKED
        assignments = list(OrderStaffAssignment.objects.filter(order=order))
        assert [a.staff_id for a in assignments] == [staff_member.id]
        assert assignments[0].assigned_by_id == manager_scope.actor_id
        assert list(staff_member.current_orders.all()) == [order]
        assert len(history_of(order)) == 1

    def test_full_staff_then_freed_slot(
        self, engine, make_order, branch, staff_member, manager_scope
    ):
        busy = [
            make_order(status=OrderStatus.IN_PROCESS, branch=branch) for _ in range(3)
        ]
        staff_member.current_orders.add(*busy)
        order = make_order(status=OrderStatus.PICKED, branch=branch)

        with pytest.raises(StaffUnavailable) as exc_info:
            engine.assign_staff(order.id, staff_member.id, manager_scope)
        assert isinstance(exc_info.value, Unavailable)
        assert staff_member.current_orders.count() == 3
        assert not OrderStaffAssignment.objects.filter(order=order).exists()

        staff_member.current_orders.remove(busy[0])
        engine.assign_staff(order.id, staff_member.id, manager_scope)

        assert staff_member.current_orders.count() == 3
        assert staff_member.current_orders.filter(pk=order.pk).exists()

    def test_same_staff_twice_is_rejected(
        self, engine, make_order, branch, staff_member, manager_scope
    ):
        order = make_order(status=OrderStatus.PICKED, branch=branch)
        engine.assign_staff(order.id, staff_member.id, manager_scope)

        with pytest.raises(StaffAlreadyAssigned) as exc_info:
            engine.assign_staff(order.id, staff_member.id, manager_scope)

        assert isinstance(exc_info.value, AlreadyAssigned)
        assert OrderStaffAssignment.objects.filter(order=order).count() == 1
        assert staff_member.current_orders.count() == 1

    def test_second_staff_member_is_appended(
        self, engine, make_order, branch, make_staff, manager_scope
    ):
        washer = make_staff(name="Washer")
        ironer = make_staff(name="Ironer", role="ironer")
        order = make_order(status=OrderStatus.IN_PROCESS, branch=branch)

        engine.assign_staff(order.id, washer.id, manager_scope)
        engine.assign_staff(order.id, ironer.id, manager_scope)

        staff_ids = list(
            OrderStaffAssignment.objects.filter(order=order).values_list(
                "staff_id", flat=True
            )
        )
        assert staff_ids == [washer.id, ironer.id]

    def test_staff_of_another_branch(
        self, engine, make_order, branch, other_branch, make_staff, admin_scope
    ):
        outsider = make_staff(branch=other_branch)
        order = make_order(status=OrderStatus.PICKED, branch=branch)

        with pytest.raises(StaffBranchMismatch):
            engine.assign_staff(order.id, outsider.id, admin_scope)

        assert outsider.current_orders.count() == 0

    def test_order_without_branch_is_a_mismatch(
        self, engine, make_order, staff_member, admin_scope
    ):
        order = make_order()
        with pytest.raises(StaffBranchMismatch):
            engine.assign_staff(order.id, staff_member.id, admin_scope)

    def test_inactive_staff_is_not_found(
        self, engine, make_order, branch, make_staff, manager_scope
    ):
        idle = make_staff(is_active=False)
        order = make_order(status=OrderStatus.PICKED, branch=branch)
        with pytest.raises(StaffNotFound) as exc_info:
            engine.assign_staff(order.id, idle.id, manager_scope)
        assert isinstance(exc_info.value, NotFound)

    def test_unknown_staff(self, engine, make_order, branch, manager_scope):
        order = make_order(status=OrderStatus.PICKED, branch=branch)
        with pytest.raises(StaffNotFound):
            engine.assign_staff(order.id, uuid4(), manager_scope)

    def test_terminal_order(self, engine, make_order, branch, staff_member, manager_scope):
        order = make_order(status=OrderStatus.DELIVERED, branch=branch)
        with pytest.raises(OrderInvalidStatus):
            engine.assign_staff(order.id, staff_member.id, manager_scope)

    def test_staff_role_cannot_assign(
        self, engine, make_order, branch, staff_member, staff_scope
    ):
        order = make_order(status=OrderStatus.PICKED, branch=branch)
        with pytest.raises(AccessDenied):
            engine.assign_staff(order.id, staff_member.id, staff_scope)

    def test_other_branch_manager_is_denied(
        self, engine, make_order, branch, staff_member, other_manager_scope
    ):
        order = make_order(status=OrderStatus.PICKED, branch=branch)
        with pytest.raises(AccessDenied):
            engine.assign_staff(order.id, staff_member.id, other_manager_scope)
