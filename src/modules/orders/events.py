"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when a customer places an order."""

    order_number: str = ""
    customer_id: Optional[int] = None


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised for every accepted transition, overrides included."""

    order_number: str = ""
    old_status: Optional[str] = None
    new_status: str = ""
    customer_id: Optional[int] = None
    actor_id: Optional[int] = None
    actor_role: str = ""
    is_override: bool = False


@dataclass(frozen=True)
class StaffAssigned(DomainEvent):
    """Raised when a staff member joins an order."""

    staff_id: Optional[UUID] = None
    branch_id: Optional[UUID] = None
