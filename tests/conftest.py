import itertools
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.constants import ActorRole
from modules.accounts.models import UserProfile
from modules.accounts.scope import ActorScope
from modules.branches.constants import StaffRole
from modules.branches.models import Branch, Staff
from modules.logistics.models import LogisticsPartner
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start each test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Branches, partners, staff
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_branch():
    def _make(**overrides):
        n = next(_counter)
        defaults = {
            "name": f"Branch {n}",
            "code": f"BR-{n:03d}",
            "address_line": f"{n} MG Road",
            "city": "Bengaluru",
            "pincode": "560001",
            "contact_phone": "08040000000",
        }
        defaults.update(overrides)
        return Branch.objects.create(**defaults)

    return _make


@pytest.fixture()
def branch(make_branch):
    return make_branch(name="Indiranagar", code="BLR-IND")


@pytest.fixture()
def other_branch(make_branch):
    return make_branch(name="Koramangala", code="BLR-KOR")


@pytest.fixture()
def make_partner():
    def _make(pincodes=("560001",), **overrides):
        n = next(_counter)
        defaults = {
            "company_name": f"Courier {n}",
            "contact_person": "Anil Rao",
            "phone": f"99{n:08d}",
            "serviceable_pincodes": list(pincodes),
        }
        defaults.update(overrides)
        return LogisticsPartner.objects.create(**defaults)

    return _make


@pytest.fixture()
def partner(make_partner):
    return make_partner(pincodes=["560001", "560002"], company_name="QuickShip")


@pytest.fixture()
def make_staff(branch):
    def _make(branch=branch, **overrides):
        n = next(_counter)
        defaults = {
            "name": f"Worker {n}",
            "phone": f"98{n:08d}",
            "branch": branch,
            "role": StaffRole.WASHER,
        }
        defaults.update(overrides)
        return Staff.objects.create(**defaults)

    return _make


@pytest.fixture()
def staff_member(make_staff):
    return make_staff(name="Suresh Kumar")


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    """Create a user with a workflow profile."""
    User = get_user_model()

    def _make(role=ActorRole.CUSTOMER, branch=None, username=None):
        user = User.objects.create_user(
            username=username or f"{role}-{next(_counter)}",
            password="testpass123",
        )
        UserProfile.objects.create(user=user, role=role, assigned_branch=branch)
        return user

    return _make


@pytest.fixture()
def customer(make_user):
    return make_user(ActorRole.CUSTOMER, username="priya")


@pytest.fixture()
def admin_user(make_user):
    return make_user(ActorRole.ADMIN, username="admin")


@pytest.fixture()
def manager_user(make_user, branch):
    return make_user(ActorRole.BRANCH_MANAGER, branch=branch, username="manager")


@pytest.fixture()
def other_manager_user(make_user, other_branch):
    return make_user(ActorRole.BRANCH_MANAGER, branch=other_branch, username="manager2")


@pytest.fixture()
def support_user(make_user):
    return make_user(ActorRole.SUPPORT_AGENT, username="support")


@pytest.fixture()
def staff_user(make_user, branch):
    return make_user(ActorRole.STAFF, branch=branch, username="washer")


@pytest.fixture()
def admin_scope(admin_user):
    return ActorScope.for_user(admin_user)


@pytest.fixture()
def manager_scope(manager_user):
    return ActorScope.for_user(manager_user)


@pytest.fixture()
def other_manager_scope(other_manager_user):
    return ActorScope.for_user(other_manager_user)


@pytest.fixture()
def customer_scope(customer):
    return ActorScope.for_user(customer)


@pytest.fixture()
def support_scope(support_user):
    return ActorScope.for_user(support_user)


@pytest.fixture()
def staff_scope(staff_user):
    return ActorScope.for_user(staff_user)


@pytest.fixture()
def auth_client(api_client):
    """Return a function that authenticates ``api_client`` as a user."""

    def _as(user):
        api_client.force_authenticate(user=user)
        return api_client

    return _as


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order(customer):
    """Create an order already sitting at ``status``.

    A single history entry is written so the last entry always matches the
    stored status.
    """

    def _make(
        status=OrderStatus.PLACED,
        branch=None,
        customer=customer,
        pickup_pincode="560001",
        delivery_pincode="560001",
        total_weight_kg=Decimal("5.00"),
        **overrides,
    ):
        order = Order.objects.create(
            customer=customer,
            status=status,
            branch=branch,
            pickup_address="12 Residency Road",
            pickup_pincode=pickup_pincode,
            delivery_address="12 Residency Road",
            delivery_pincode=delivery_pincode,
            total_amount=Decimal("450.00"),
            total_weight_kg=total_weight_kg,
            **overrides,
        )
        OrderStatusHistory.objects.create(
            order=order,
            sequence=1,
            old_status=None,
            new_status=status,
            actor=customer,
            actor_role=ActorRole.CUSTOMER,
            notes="Order placed",
        )
        return order

    return _make


@pytest.fixture()
def workflow_service():
    from modules.orders.services import build_workflow_service

    return build_workflow_service()


@pytest.fixture()
def engine():
    from modules.branches.repositories.django_repository import (
        BranchDjangoRepository,
        StaffDjangoRepository,
    )
    from modules.logistics.repositories.django_repository import (
        LogisticsPartnerDjangoRepository,
    )
    from modules.orders.engine import AssignmentEngine
    from modules.orders.repositories.django_repository import OrderDjangoRepository

    return AssignmentEngine(
        order_repository=OrderDjangoRepository(),
        branch_repository=BranchDjangoRepository(),
        staff_repository=StaffDjangoRepository(),
        partner_repository=LogisticsPartnerDjangoRepository(),
    )
