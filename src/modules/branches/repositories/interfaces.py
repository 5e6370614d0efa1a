"""Branch and staff repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.branches.models import Branch, Staff


class IBranchRepository(IRepository["Branch"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Branch]:
        """List branches with optional filters."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Branch]:
        """Look a branch up by its unique code."""


class IStaffRepository(IRepository["Staff"]):
    """Repository contract for staff members and their workload set."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Staff]:
        """List staff with optional filters."""

    @abstractmethod
    def get_by_phone(self, phone: str) -> Optional[Staff]:
        """Look a staff member up by phone number."""

    @abstractmethod
    def current_load(self, staff: Staff) -> int:
        """Number of orders currently held by *staff*."""

    @abstractmethod
    def holds_order(self, staff: Staff, order_id: Any) -> bool:
        """``True`` if *order_id* is in the staff member's workload."""

    @abstractmethod
    def add_current_order(self, staff: Staff, order_id: Any) -> None:
        """Add *order_id* to the staff member's workload."""

    @abstractmethod
    def release_order(self, order_id: Any) -> int:
        """Remove *order_id* from every staff workload; returns rows removed."""
