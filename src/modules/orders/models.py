"""Order, OrderStatusHistory, OrderStaffAssignment and OrderNumberSequence.

Rules kept by the models themselves:
- ``order_number`` is assigned once, on first save, from a per-day counter
  (``ORD-YYYYMMDD-NNNNN``, local date).
- ``customer`` uses PROTECT and orders are never deleted.
- History entries carry a per-order ``sequence`` so "the last entry" does
  not depend on timestamp resolution.

Status changes, assignments and their history are written only by the
assignment engine (``engine.py``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.utils import timezone

from modules.accounts.constants import ActorRole
from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin


class OrderNumberSequence(models.Model):
    """Last order number handed out for a local day (``YYYYMMDD``)."""

    period: models.CharField = models.CharField(max_length=8, unique=True)
    last_value: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_number_sequences"

    @classmethod
    def next_number(cls, period: str) -> int:
        with transaction.atomic():
            cls.objects.get_or_create(period=period)
            counter = cls.objects.select_for_update().get(period=period)
            counter.last_value += 1
            counter.save(update_fields=["last_value"])
            return counter.last_value


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``logistics_partner`` points at the partner of the current leg and is
    overwritten by each leg assignment; ``pickup_partner`` and
    ``delivery_partner`` keep the per-leg references.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    customer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="laundry_orders",
    )
    status: models.CharField = models.CharField(
        max_length=40,
        choices=OrderStatus.choices,
        default=OrderStatus.PLACED,
    )
    branch: models.ForeignKey = models.ForeignKey(
        "branches.Branch",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )
    logistics_partner: models.ForeignKey = models.ForeignKey(
        "logistics.LogisticsPartner",
        on_delete=models.PROTECT,
        related_name="current_orders",
        null=True,
        blank=True,
    )
    pickup_partner: models.ForeignKey = models.ForeignKey(
        "logistics.LogisticsPartner",
        on_delete=models.PROTECT,
        related_name="pickup_orders",
        null=True,
        blank=True,
    )
    delivery_partner: models.ForeignKey = models.ForeignKey(
        "logistics.LogisticsPartner",
        on_delete=models.PROTECT,
        related_name="delivery_orders",
        null=True,
        blank=True,
    )
    pickup_address: models.CharField = models.CharField(max_length=500)
    pickup_pincode: models.CharField = models.CharField(max_length=10)
    delivery_address: models.CharField = models.CharField(max_length=500)
    delivery_pincode: models.CharField = models.CharField(max_length=10)
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    total_weight_kg: models.DecimalField = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_express: models.BooleanField = models.BooleanField(default=False)
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["branch", "created_at"], name="orders_branch_day_idx"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """``ORD-YYYYMMDD-NNNNN``; the counter restarts every local day."""
        period = f"{timezone.localdate():%Y%m%d}"
        value = OrderNumberSequence.next_number(period)
        return f"{ORDER_NUMBER_PREFIX}-{period}-{value:05d}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            self.order_number = self.generate_order_number()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail; one row per accepted transition.

    ``actor`` is nullable so the trail survives user removal; ``actor_role``
    is the role the change was authorized under.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    sequence: models.PositiveIntegerField = models.PositiveIntegerField()
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=40,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=40,
        choices=OrderStatus.choices,
    )
    actor: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    actor_role: models.CharField = models.CharField(
        max_length=20, choices=ActorRole.choices
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    is_override: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "order_status_history"
        ordering = ["sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "sequence"],
                name="osh_order_sequence_unique",
            ),
        ]

    @classmethod
    def next_sequence(cls, order_id: Any) -> int:
        last: Optional[int] = (
            cls.objects.filter(order_id=order_id)
            .order_by("-sequence")
            .values_list("sequence", flat=True)
            .first()
        )
        return (last or 0) + 1

    def __str__(self) -> str:
        return f"{self.order_id} #{self.sequence}: {self.old_status} -> {self.new_status}"


class OrderStaffAssignment(BaseModel):
    """One entry of an order's append-only ``assignedStaff`` sequence."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="staff_assignments",
    )
    staff: models.ForeignKey = models.ForeignKey(
        "branches.Staff",
        on_delete=models.PROTECT,
        related_name="order_assignments",
    )
    assigned_at: models.DateTimeField = models.DateTimeField(default=timezone.now)
    assigned_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "order_staff_assignments"
        ordering = ["assigned_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "staff"],
                name="osa_order_staff_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.staff_id} on {self.order_id}"
