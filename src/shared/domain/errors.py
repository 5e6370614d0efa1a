"""Business error taxonomy.

Every business-rule violation raised by a service is a ``DomainError``
subclass.  The *kind* classes below are the closed set of failure
categories; concrete errors in each module inherit from one (or, for
"not found or inactive" cases, two) of them and add a stable ``code``.

Errors are local and non-retriable: they describe the request, not the
infrastructure.  Transient storage faults use ``InfrastructureError``
instead and are never mixed into this hierarchy.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    kind = "DomainError"
    code = "DOMAIN_ERROR"
    default_message = "Business rule violated."

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message or self.default_message)
        self.context = context

    @property
    def message(self) -> str:
        return str(self)


class NotFound(DomainError):
    kind = "NotFound"
    code = "NOT_FOUND"
    default_message = "Resource not found."


class InactiveResource(DomainError):
    kind = "InactiveResource"
    code = "INACTIVE_RESOURCE"
    default_message = "Resource is inactive."


class InvalidStatus(DomainError):
    kind = "InvalidStatus"
    code = "INVALID_STATUS"
    default_message = "Operation not allowed in the current status."


class InvalidTransition(DomainError):
    kind = "InvalidTransition"
    code = "INVALID_TRANSITION"
    default_message = "Invalid status transition."


class CapacityExceeded(DomainError):
    kind = "CapacityExceeded"
    code = "CAPACITY_EXCEEDED"
    default_message = "Capacity exhausted."


class AreaNotCovered(DomainError):
    kind = "AreaNotCovered"
    code = "AREA_NOT_COVERED"
    default_message = "Area not covered."


class Unavailable(DomainError):
    kind = "Unavailable"
    code = "UNAVAILABLE"
    default_message = "Resource unavailable."


class BranchMismatch(DomainError):
    kind = "BranchMismatch"
    code = "BRANCH_MISMATCH"
    default_message = "Branch mismatch."


class AlreadyAssigned(DomainError):
    kind = "AlreadyAssigned"
    code = "ALREADY_ASSIGNED"
    default_message = "Already assigned."


class MissingParameter(DomainError):
    kind = "MissingParameter"
    code = "MISSING_DATA"
    default_message = "Required parameter missing."


class Forbidden(DomainError):
    kind = "Forbidden"
    code = "FORBIDDEN"
    default_message = "Access denied."


class InfrastructureError(Exception):
    """Transient fault in a collaborator (database, broker)."""

    kind = "Unavailable"
    code = "SERVICE_UNAVAILABLE"


class StorageUnavailable(InfrastructureError):
    """The persistence layer could not complete the operation.

    Raised before any partial order update is visible.
    """

    code = "STORAGE_UNAVAILABLE"
