"""Branch and staff repositories package."""

from modules.branches.repositories.django_repository import (
    BranchDjangoRepository,
    StaffDjangoRepository,
)
from modules.branches.repositories.interfaces import IBranchRepository, IStaffRepository

__all__ = [
    "BranchDjangoRepository",
    "IBranchRepository",
    "IStaffRepository",
    "StaffDjangoRepository",
]
