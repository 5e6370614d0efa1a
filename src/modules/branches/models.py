"""Branch, BranchHoliday and Staff models.

The workflow engine only reads these records (capacity limits, operating
calendar, staff availability) and, for Staff, maintains ``current_orders``.
Everything else here is changed by administrative update commands in
``services.py``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.branches.constants import (
    DEFAULT_MAX_CONCURRENT_ORDERS,
    DEFAULT_MAX_ORDERS_PER_DAY,
    DEFAULT_MAX_WEIGHT_PER_DAY,
    WEEKDAYS,
    StaffRole,
    all_weekdays,
)
from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Branch(BaseModel):
    """A processing branch with a daily intake capacity."""

    name: models.CharField = models.CharField(max_length=255)
    code: models.CharField = models.CharField(max_length=20, unique=True)
    address_line: models.CharField = models.CharField(max_length=255)
    city: models.CharField = models.CharField(max_length=100)
    pincode: models.CharField = models.CharField(max_length=10)
    contact_phone: models.CharField = models.CharField(max_length=20)
    contact_email: models.EmailField = models.EmailField(blank=True, default="")
    max_orders_per_day: models.PositiveIntegerField = models.PositiveIntegerField(
        default=DEFAULT_MAX_ORDERS_PER_DAY,
        validators=[MinValueValidator(1)],
    )
    max_weight_per_day: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=DEFAULT_MAX_WEIGHT_PER_DAY,
    )
    open_time: models.TimeField = models.TimeField(default=time(9, 0))
    close_time: models.TimeField = models.TimeField(default=time(18, 0))
    working_days: models.JSONField = models.JSONField(default=all_weekdays)
    is_active: models.BooleanField = models.BooleanField(default=True)

    class Meta:
        db_table = "branches"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="branches_active_idx"),
        ]

    # ------------------------------------------------------------------
    # Operating calendar
    # ------------------------------------------------------------------

    def is_working_day(self, day: date) -> bool:
        return WEEKDAYS[day.weekday()] in (self.working_days or [])

    def is_holiday(self, day: date) -> bool:
        return any(holiday.falls_on(day) for holiday in self.holidays.all())

    def is_operating_on(self, day: date) -> bool:
        """``True`` if the branch accepts work on *day* (ignores ``is_active``)."""
        return self.is_working_day(day) and not self.is_holiday(day)

    @staticmethod
    def operating_day_bounds(day: date) -> tuple[datetime, datetime]:
        """Half-open ``[start, end)`` window of *day* in the current time zone."""
        start = timezone.make_aware(datetime.combine(day, time.min))
        return start, start + timedelta(days=1)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.code:
            self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class BranchHoliday(BaseModel):
    """A closed day.  Recurring holidays repeat on the same month/day."""

    branch: models.ForeignKey = models.ForeignKey(
        "branches.Branch",
        on_delete=models.CASCADE,
        related_name="holidays",
    )
    date: models.DateField = models.DateField()
    reason: models.CharField = models.CharField(max_length=255, blank=True, default="")
    is_recurring: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "branch_holidays"
        ordering = ["date"]

    def falls_on(self, day: date) -> bool:
        if self.is_recurring:
            return (self.date.month, self.date.day) == (day.month, day.day)
        return self.date == day

    def __str__(self) -> str:
        return f"{self.branch_id} closed on {self.date}"


class Staff(BaseModel):
    """Washer or ironer working at one branch.

    ``branch`` is fixed at creation.  ``current_orders`` is the staff
    member's active workload; the order engine adds to it on assignment and
    removes from it when the order leaves the branch workflow.
    """

    name: models.CharField = models.CharField(max_length=255)
    phone: models.CharField = models.CharField(max_length=20, unique=True)
    branch: models.ForeignKey = models.ForeignKey(
        "branches.Branch",
        on_delete=models.PROTECT,
        related_name="staff",
    )
    role: models.CharField = models.CharField(max_length=10, choices=StaffRole.choices)
    is_active: models.BooleanField = models.BooleanField(default=True)
    max_concurrent_orders: models.PositiveSmallIntegerField = (
        models.PositiveSmallIntegerField(
            default=DEFAULT_MAX_CONCURRENT_ORDERS,
            validators=[MinValueValidator(1)],
        )
    )
    current_orders: models.ManyToManyField = models.ManyToManyField(
        "orders.Order",
        related_name="working_staff",
        blank=True,
    )

    class Meta:
        db_table = "staff"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["branch", "is_active"], name="staff_branch_active_idx"),
        ]

    @property
    def current_load(self) -> int:
        return self.current_orders.count()

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            stored_branch = (
                Staff.objects.filter(pk=self.pk)
                .values_list("branch_id", flat=True)
                .first()
            )
            if stored_branch is not None and stored_branch != self.branch_id:
                logger.warning(
                    "staff.branch_change_rejected",
                    staff_id=str(self.pk),
                    branch_id=str(stored_branch),
                )
                raise ValidationError({"branch": "Staff branch cannot be changed."})
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"
