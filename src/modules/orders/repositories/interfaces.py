"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
creation, the status history trail and the staff assignment sequence.

The workflow engine depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.branches.models import Staff
    from modules.orders.models import Order, OrderStaffAssignment, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderStatusHistory and OrderStaffAssignment
    records.  ``save`` hands collected domain events to the event bus for
    publication after commit.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order in its initial status."""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with prefetched history and staff."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional ORM filters."""

    @abstractmethod
    def add_history(
        self,
        order: Order,
        new_status: str,
        *,
        old_status: Optional[str],
        actor_id: Any,
        actor_role: str,
        notes: str = "",
        is_override: bool = False,
    ) -> OrderStatusHistory:
        """Append one entry to the order's status history."""

    @abstractmethod
    def has_staff(self, order: Order, staff: Staff) -> bool:
        """``True`` if *staff* already appears in the order's assignments."""

    @abstractmethod
    def add_staff_assignment(
        self, order: Order, staff: Staff, assigned_by: Any = None
    ) -> OrderStaffAssignment:
        """Append *staff* to the order's assignment sequence."""

    @abstractmethod
    def assigned_staff(self, order: Order) -> List[Staff]:
        """Staff in the order's assignment sequence, in assignment order."""
