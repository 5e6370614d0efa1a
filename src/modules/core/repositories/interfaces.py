"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that every
domain-specific repository interface extends.  Service-layer code depends
on this abstraction, never on the Django ORM directly.

There is no ``delete``: orders are retained for audit and branches, staff
and logistics partners are deactivated rather than removed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (``Order``, ``Branch``, ``Staff``, ``LogisticsPartner``).
    """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an entity by primary key; ``None`` when absent or malformed."""

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional[T]:
        """Retrieve an entity with a row-level lock held until commit."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List entities with optional filters."""

    @abstractmethod
    def save(self, entity: T, update_fields: Optional[list[str]] = None) -> T:
        """Persist (create or update) an entity."""
