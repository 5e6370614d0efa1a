"""Actor profile linking an authenticated user to a workflow role.

Authentication itself (password/JWT) stays with ``django.contrib.auth`` and
SimpleJWT; this table only answers "which role does this user act as and,
for branch-level roles, which branch do they own".
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from modules.accounts.constants import BRANCH_SCOPED_ROLES, ActorRole
from modules.core.models import BaseModel


class UserProfile(BaseModel):
    user: models.OneToOneField = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    role: models.CharField = models.CharField(
        max_length=20,
        choices=ActorRole.choices,
        default=ActorRole.CUSTOMER,
    )
    assigned_branch: models.ForeignKey = models.ForeignKey(
        "branches.Branch",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    phone: models.CharField = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        db_table = "user_profiles"
        indexes = [
            models.Index(fields=["role"], name="user_profiles_role_idx"),
        ]

    def clean(self) -> None:
        super().clean()
        if self.role not in BRANCH_SCOPED_ROLES and self.assigned_branch_id:
            raise ValidationError(
                {"assigned_branch": "Only branch-level roles carry a branch."}
            )

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"
