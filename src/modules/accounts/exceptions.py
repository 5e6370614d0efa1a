"""Identity / authorization errors."""

from __future__ import annotations

from shared.domain.errors import Forbidden


class ActorRoleMissing(Forbidden):
    """The authenticated user has no workflow role."""

    code = "ROLE_REQUIRED"
    default_message = "No workflow role is assigned to this user."


class NoBranchAssigned(Forbidden):
    """A branch-level role has no branch assigned to it."""

    code = "NO_BRANCH_ASSIGNED"
    default_message = "No branch assigned to this user."


class AccessDenied(Forbidden):
    """The actor's role lacks authority over this specific resource."""

    code = "FORBIDDEN"
    default_message = "Access denied to this resource."
