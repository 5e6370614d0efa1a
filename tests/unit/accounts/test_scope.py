"""Unit tests for ActorScope.

Covers:
- Resolution from an authenticated user and its profile.
- Branch-scoped roles need a branch.
- Order access and query filters per role.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model

from modules.accounts.constants import ActorRole
from modules.accounts.exceptions import AccessDenied, ActorRoleMissing, NoBranchAssigned
from modules.accounts.scope import ActorScope
from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.unit


class TestForUser:
    def test_customer(self, customer):
        scope = ActorScope.for_user(customer)
        assert scope.role == ActorRole.CUSTOMER
        assert scope.actor_id == customer.pk
        assert scope.owned_branch_id is None
        assert scope.is_customer

    def test_branch_manager_carries_the_branch(self, manager_user, branch):
        scope = ActorScope.for_user(manager_user)
        assert scope.owned_branch_id == branch.id
        assert scope.is_branch_scoped

    def test_branch_of_non_branch_role_is_ignored(self, make_user, branch):
        user = make_user(ActorRole.SUPPORT_AGENT)
        user.profile.assigned_branch = branch
        user.profile.save()

        assert ActorScope.for_user(user).owned_branch_id is None

    def test_user_without_profile(self):
        user = get_user_model().objects.create_user(username="nobody", password="x")
        with pytest.raises(ActorRoleMissing):
            ActorScope.for_user(user)

    def test_superuser_without_profile_is_admin(self):
        user = get_user_model().objects.create_superuser(
            username="root", password="x", email="root@example.com"
        )
        scope = ActorScope.for_user(user)
        assert scope.role == ActorRole.ADMIN
        assert scope.is_administrative

    def test_manager_without_branch(self, make_user):
        user = make_user(ActorRole.BRANCH_MANAGER)
        with pytest.raises(NoBranchAssigned):
            ActorScope.for_user(user)

    def test_unknown_role(self):
        with pytest.raises(ActorRoleMissing):
            ActorScope(role="driver")


class TestOrderAccess:
    def test_customer_owns_order(self, make_order, customer_scope, make_user):
        own = make_order()
        foreign = make_order(customer=make_user())
        assert customer_scope.can_access(own) is True
        assert customer_scope.can_access(foreign) is False
        with pytest.raises(AccessDenied):
            customer_scope.ensure_can_access(foreign)

    def test_manager_sees_own_branch_only(
        self, make_order, branch, other_branch, manager_scope
    ):
        ours = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=branch)
        theirs = make_order(status=OrderStatus.ASSIGNED_TO_BRANCH, branch=other_branch)
        unassigned = make_order()

        assert manager_scope.can_access(ours) is True
        assert manager_scope.can_access(theirs) is False
        assert manager_scope.can_access(unassigned) is False

    def test_admin_and_support_see_everything(self, make_order, admin_scope, support_scope):
        order = make_order()
        assert admin_scope.can_access(order) is True
        assert support_scope.can_access(order) is True


class TestQueryScoping:
    def test_order_filters(self, customer_scope, manager_scope, admin_scope, branch):
        assert customer_scope.order_filters() == {"customer_id": customer_scope.actor_id}
        assert manager_scope.order_filters() == {"branch_id": branch.id}
        assert admin_scope.order_filters() == {}

    def test_constrain_branch_pins_branch_roles(self, manager_scope, branch):
        assert manager_scope.constrain_branch(None) == branch.id
        assert manager_scope.constrain_branch(branch.id) == branch.id
        with pytest.raises(AccessDenied):
            manager_scope.constrain_branch(uuid4())

    def test_constrain_branch_passes_through_for_admins(self, admin_scope):
        branch_id = uuid4()
        assert admin_scope.constrain_branch(branch_id) == branch_id
        assert admin_scope.constrain_branch(None) is None

    def test_customers_have_no_branch_access(self, customer_scope, branch):
        assert customer_scope.can_access_branch(branch.id) is False

    def test_ensure_role(self, support_scope):
        support_scope.ensure_role(ActorRole.SUPPORT_AGENT, ActorRole.ADMIN)
        with pytest.raises(AccessDenied):
            support_scope.ensure_role(ActorRole.ADMIN)
