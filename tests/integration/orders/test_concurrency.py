"""Assignment concurrency integration test.

Proves that ``SELECT FOR UPDATE`` in ``AssignmentEngine`` serializes
concurrent assignments that compete for the last free slot.

Scenarios:
- Branch with **max_orders_per_day = 3** already holding 2 orders; 6
  threads each try to assign a different placed order to it.  Exactly one
  succeeds, the rest raise ``BranchFull``.
- Staff member with **max_concurrent_orders = 2** already holding 1 order;
  6 threads each try to add a different order to their workload.  Exactly
  one succeeds, the rest raise ``StaffUnavailable``.

Uses ``TransactionTestCase`` so each thread sees committed data.  SQLite
has no row-level locks, so the test only runs against PostgreSQL or MySQL
(set ``DATABASE_URL``).
"""

from __future__ import annotations

import logging
import unittest
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import django
import pytest
from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase

from modules.accounts.constants import ActorRole
from modules.accounts.models import UserProfile
from modules.accounts.scope import ActorScope
from modules.branches.constants import StaffRole
from modules.branches.exceptions import BranchFull, StaffUnavailable
from modules.branches.models import Branch, Staff
from modules.branches.repositories.django_repository import (
    BranchDjangoRepository,
    StaffDjangoRepository,
)
from modules.logistics.repositories.django_repository import (
    LogisticsPartnerDjangoRepository,
)
from modules.orders.constants import OrderStatus
from modules.orders.engine import AssignmentEngine
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration

logger = logging.getLogger(__name__)

NUM_WORKERS = 6


def build_engine() -> AssignmentEngine:
    return AssignmentEngine(
        order_repository=OrderDjangoRepository(),
        branch_repository=BranchDjangoRepository(),
        staff_repository=StaffDjangoRepository(),
        partner_repository=LogisticsPartnerDjangoRepository(),
    )


@unittest.skipIf(
    connection.vendor == "sqlite", "row-level locking needs PostgreSQL or MySQL"
)
class TestAssignmentConcurrency(TransactionTestCase):
    """Prove that the last branch slot and the last staff slot go to one caller."""

    def setUp(self):
        User = get_user_model()
        self.customer = User.objects.create_user(username="priya", password="testpass123")
        UserProfile.objects.create(user=self.customer, role=ActorRole.CUSTOMER)
        admin = User.objects.create_user(username="admin", password="testpass123")
        UserProfile.objects.create(user=admin, role=ActorRole.ADMIN)
        self.scope = ActorScope.for_user(admin)

        self.branch = Branch.objects.create(
            name="Indiranagar",
            code="BLR-IND",
            address_line="100 Feet Road",
            city="Bengaluru",
            pincode="560038",
            contact_phone="08040000000",
            max_orders_per_day=3,
        )

    def _order(self, status=OrderStatus.PLACED, branch=None) -> Order:
        return Order.objects.create(
            customer=self.customer,
            status=status,
            branch=branch,
            pickup_address="12 Residency Road",
            pickup_pincode="560001",
            delivery_address="12 Residency Road",
            delivery_pincode="560001",
            total_amount=Decimal("450.00"),
            total_weight_kg=Decimal("5.00"),
        )

    def _run(self, call, orders, expected_error) -> list[str]:
        def worker(order_id) -> str:
            django.db.connections.close_all()
            try:
                call(build_engine(), order_id)
                logger.warning("Order %s: assigned", order_id)
                return "success"
            except expected_error:
                logger.warning("Order %s: %s (expected)", order_id, expected_error.__name__)
                return "rejected"
            finally:
                django.db.connections.close_all()

        results = []
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [pool.submit(worker, order.id) for order in orders]
            for future in as_completed(futures):
                results.append(future.result())
        return results

    def test_last_branch_slot_goes_to_one_order(self):
        for _ in range(2):
            self._order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=self.branch)
        contenders = [self._order() for _ in range(NUM_WORKERS)]

        results = self._run(
            lambda engine, order_id: engine.assign_branch(
                order_id, self.branch.id, self.scope
            ),
            contenders,
            BranchFull,
        )

        self.assertEqual(results.count("success"), 1)
        self.assertEqual(results.count("rejected"), NUM_WORKERS - 1)
        self.assertEqual(Order.objects.filter(branch=self.branch).count(), 3)
        self.assertEqual(
            Order.objects.filter(
                id__in=[o.id for o in contenders], status=OrderStatus.PLACED
            ).count(),
            NUM_WORKERS - 1,
        )

    def test_last_staff_slot_goes_to_one_order(self):
        staff = Staff.objects.create(
            name="Suresh Kumar",
            phone="9800000001",
            branch=self.branch,
            role=StaffRole.WASHER,
            max_concurrent_orders=2,
        )
        staff.current_orders.add(
            self._order(status=OrderStatus.IN_PROCESS, branch=self.branch)
        )
        contenders = [
            self._order(status=OrderStatus.PICKED, branch=self.branch)
            for _ in range(NUM_WORKERS)
        ]

        results = self._run(
            lambda engine, order_id: engine.assign_staff(order_id, staff.id, self.scope),
            contenders,
            StaffUnavailable,
        )

        self.assertEqual(results.count("success"), 1)
        self.assertEqual(results.count("rejected"), NUM_WORKERS - 1)
        self.assertEqual(staff.current_orders.count(), 2)
