"""Branch and staff domain exceptions.

Raised by the service layer and the order assignment engine.  The API layer
translates them into HTTP responses through ``modules.core.exceptions``.
"""

from __future__ import annotations

from shared.domain.errors import (
    BranchMismatch,
    CapacityExceeded,
    DomainError,
    InactiveResource,
    MissingParameter,
    NotFound,
    Unavailable,
)


class BranchRequired(MissingParameter):
    code = "BRANCH_REQUIRED"
    default_message = "Branch ID is required."


class BranchNotFound(NotFound):
    code = "BRANCH_NOT_FOUND"
    default_message = "Branch not found."


class BranchCodeExists(DomainError):
    code = "BRANCH_CODE_EXISTS"
    default_message = "Branch code already exists."


class InactiveBranch(InactiveResource, BranchNotFound):
    """The branch exists but is disabled; still a ``BranchNotFound``."""

    code = "BRANCH_NOT_FOUND"
    default_message = "Branch is inactive."


class BranchFull(CapacityExceeded):
    code = "BRANCH_FULL"
    default_message = "Branch has reached capacity."


class StaffRequired(MissingParameter):
    code = "STAFF_REQUIRED"
    default_message = "Staff ID is required."


class StaffNotFound(NotFound):
    code = "STAFF_NOT_FOUND"
    default_message = "Staff not found."


class InactiveStaff(InactiveResource, StaffNotFound):
    code = "STAFF_NOT_FOUND"
    default_message = "Staff member is inactive."


class StaffPhoneExists(DomainError):
    code = "PHONE_EXISTS"
    default_message = "Staff with this phone number already exists."


class StaffBranchMismatch(BranchMismatch):
    code = "STAFF_BRANCH_MISMATCH"
    default_message = "Staff does not belong to this branch."


class StaffUnavailable(Unavailable):
    code = "STAFF_UNAVAILABLE"
    default_message = "Staff is not available for new orders."
