"""Read-only decision functions consulted before an assignment.

Oracles never write.  The engine calls them while holding the row locks of
the records they read, so their answer stays valid for the write that
follows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from django.db.models import Count, Sum
from django.utils import timezone

if TYPE_CHECKING:
    from modules.branches.models import Branch, Staff
    from modules.logistics.models import LogisticsPartner
    from modules.orders.models import Order


@dataclass(frozen=True)
class CapacityReport:
    """Same-day load of a branch against its limits."""

    branch_id: object
    day: date
    is_operating: bool
    orders_today: int
    max_orders_per_day: int
    weight_today: Decimal
    max_weight_per_day: Decimal

    @property
    def remaining_orders(self) -> int:
        return max(self.max_orders_per_day - self.orders_today, 0)

    @property
    def remaining_weight(self) -> Decimal:
        return max(self.max_weight_per_day - self.weight_today, Decimal("0"))

    def has_capacity(self, additional_weight: Decimal = Decimal("0")) -> bool:
        return (
            self.is_operating
            and self.orders_today < self.max_orders_per_day
            and self.weight_today + additional_weight <= self.max_weight_per_day
        )


class CapacityOracle:
    """Counts orders assigned to a branch that were created today.

    "Today" is the current local date (``TIME_ZONE``); the window is the
    whole calendar day, not the branch's opening hours.
    """

    def report(self, branch: Branch, day: Optional[date] = None) -> CapacityReport:
        from modules.orders.models import Order

        day = day or timezone.localdate()
        start, end = branch.operating_day_bounds(day)
        totals = Order.objects.filter(
            branch_id=branch.id,
            created_at__gte=start,
            created_at__lt=end,
        ).aggregate(count=Count("id"), weight=Sum("total_weight_kg"))
        return CapacityReport(
            branch_id=branch.id,
            day=day,
            is_operating=branch.is_operating_on(day),
            orders_today=totals["count"] or 0,
            max_orders_per_day=branch.max_orders_per_day,
            weight_today=totals["weight"] or Decimal("0"),
            max_weight_per_day=branch.max_weight_per_day,
        )

    def has_capacity(self, branch: Branch, order: Order) -> bool:
        return self.report(branch).has_capacity(order.total_weight_kg or Decimal("0"))


class CoverageOracle:
    def covers(self, partner: LogisticsPartner, pincode: Optional[str]) -> bool:
        if not pincode:
            return False
        return partner.covers_pincode(pincode)


@dataclass(frozen=True)
class AvailabilityReport:
    is_active: bool
    same_branch: bool
    current_load: int
    limit: int

    @property
    def is_available(self) -> bool:
        return self.is_active and self.same_branch and self.current_load < self.limit


class AvailabilityOracle:
    """Staff availability from ``is_active``, branch match and workload."""

    def report(self, staff: Staff, branch_id: object) -> AvailabilityReport:
        return AvailabilityReport(
            is_active=staff.is_active,
            same_branch=branch_id is not None and staff.branch_id == branch_id,
            current_load=staff.current_orders.count(),
            limit=staff.max_concurrent_orders,
        )

    def is_available(self, staff: Staff, branch_id: object) -> bool:
        return self.report(staff, branch_id).is_available
