"""Logistics partner repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.logistics.models import LogisticsPartner


class ILogisticsPartnerRepository(IRepository["LogisticsPartner"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[LogisticsPartner]:
        """List partners with optional filters."""
