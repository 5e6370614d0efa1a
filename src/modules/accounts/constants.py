"""Actor roles recognised by the workflow engine."""

from django.db import models


class ActorRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    ADMIN = "admin", "Admin"
    BRANCH_MANAGER = "branch_manager", "Branch Manager"
    SUPPORT_AGENT = "support_agent", "Support Agent"
    CENTER_ADMIN = "center_admin", "Center Admin"
    STAFF = "staff", "Staff (Washer/Ironer)"


# Roles that see every branch and may perform corrective overrides.
ADMINISTRATIVE_ROLES: frozenset[str] = frozenset(
    {ActorRole.ADMIN, ActorRole.CENTER_ADMIN}
)

# Roles whose authority is confined to the branch assigned to them.
BRANCH_SCOPED_ROLES: frozenset[str] = frozenset(
    {ActorRole.BRANCH_MANAGER, ActorRole.STAFF}
)
