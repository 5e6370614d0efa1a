"""Order domain exceptions.

Raised by the workflow engine and façade.  Branch, staff and logistics
partner errors live in their own modules; the API layer translates all of
them through ``modules.core.exceptions``.
"""

from __future__ import annotations

from shared.domain.errors import (
    AlreadyAssigned,
    InvalidStatus,
    InvalidTransition,
    MissingParameter,
    NotFound,
)


class OrderRequired(MissingParameter):
    code = "ORDER_REQUIRED"
    default_message = "Order ID is required."


class StatusRequired(MissingParameter):
    code = "STATUS_REQUIRED"
    default_message = "Status is required."


class OrderNotFound(NotFound):
    code = "ORDER_NOT_FOUND"
    default_message = "Order not found."


class OrderInvalidStatus(InvalidStatus):
    """The operation's status precondition is not met."""

    code = "INVALID_STATUS"


class OrderInvalidTransition(InvalidTransition):
    """The requested status is not reachable for the actor's role."""

    code = "INVALID_TRANSITION"


class StaffAlreadyAssigned(AlreadyAssigned):
    code = "ALREADY_ASSIGNED"
    default_message = "Staff already assigned to this order."


class CustomerRequired(MissingParameter):
    code = "CUSTOMER_REQUIRED"
    default_message = "Customer ID is required."


class CustomerNotFound(NotFound):
    code = "CUSTOMER_NOT_FOUND"
    default_message = "Customer not found."
