"""Per-request actor scope.

``ActorScope`` is computed once from the authenticated identity and passed
explicitly into every service call.  Query filtering and authorization
checks ask the scope instead of branching on the role at each call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from django.core.exceptions import ObjectDoesNotExist

from modules.accounts.constants import (
    ADMINISTRATIVE_ROLES,
    BRANCH_SCOPED_ROLES,
    ActorRole,
)
from modules.accounts.exceptions import AccessDenied, ActorRoleMissing, NoBranchAssigned

if TYPE_CHECKING:
    from modules.orders.models import Order


@dataclass(frozen=True)
class ActorScope:
    role: str
    actor_id: Optional[int] = None
    owned_branch_id: Optional[UUID] = None

    def __post_init__(self) -> None:
        if self.role not in ActorRole.values:
            raise ActorRoleMissing(f"Unknown role '{self.role}'.")
        if self.role in BRANCH_SCOPED_ROLES and self.owned_branch_id is None:
            raise NoBranchAssigned()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def for_user(cls, user: Any) -> ActorScope:
        """Resolve the scope of an authenticated Django user.

        Superusers without a profile act as ``admin``; any other user must
        carry a ``UserProfile``.
        """
        try:
            profile = user.profile
        except (AttributeError, ObjectDoesNotExist):
            profile = None

        if profile is None:
            if getattr(user, "is_superuser", False):
                return cls(role=ActorRole.ADMIN, actor_id=user.pk)
            raise ActorRoleMissing()

        owned_branch_id = (
            profile.assigned_branch_id if profile.role in BRANCH_SCOPED_ROLES else None
        )
        return cls(
            role=profile.role,
            actor_id=user.pk,
            owned_branch_id=owned_branch_id,
        )

    # ------------------------------------------------------------------
    # Role predicates
    # ------------------------------------------------------------------

    @property
    def is_administrative(self) -> bool:
        return self.role in ADMINISTRATIVE_ROLES

    @property
    def is_branch_scoped(self) -> bool:
        return self.role in BRANCH_SCOPED_ROLES

    @property
    def is_customer(self) -> bool:
        return self.role == ActorRole.CUSTOMER

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    def ensure_role(self, *roles: str) -> None:
        if not self.has_role(*roles):
            raise AccessDenied(f"Role '{self.role}' may not perform this operation.")

    # ------------------------------------------------------------------
    # Resource access
    # ------------------------------------------------------------------

    def can_access_branch(self, branch_id: Optional[UUID]) -> bool:
        if not self.is_branch_scoped:
            return not self.is_customer
        return branch_id is not None and str(branch_id) == str(self.owned_branch_id)

    def ensure_branch_access(self, branch_id: Optional[UUID]) -> None:
        if not self.can_access_branch(branch_id):
            raise AccessDenied("Access denied to this branch.")

    def can_access(self, order: Order) -> bool:
        if self.is_customer:
            return order.customer_id == self.actor_id
        if self.is_branch_scoped:
            return self.can_access_branch(order.branch_id)
        return True

    def ensure_can_access(self, order: Order) -> None:
        if not self.can_access(order):
            raise AccessDenied("Access denied to this order.")

    def constrain_branch(self, branch_id: Optional[UUID]) -> Optional[UUID]:
        """Return the branch a query should be limited to.

        Branch-level roles are pinned to their own branch; asking for a
        different one is an authorization failure, not an empty result.
        """
        if not self.is_branch_scoped:
            return branch_id
        if branch_id is not None and str(branch_id) != str(self.owned_branch_id):
            raise AccessDenied("Access denied to this branch.")
        return self.owned_branch_id

    def order_filters(self) -> Dict[str, Any]:
        """ORM look-ups restricting an order query to what this actor may see."""
        if self.is_customer:
            return {"customer_id": self.actor_id}
        if self.is_branch_scoped:
            return {"branch_id": self.owned_branch_id}
        return {}
