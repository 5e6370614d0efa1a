"""Order domain constants.

Status enumeration, the state groupings the workflow relies on and the
per-leg logistics mapping.  Role permissions over these statuses live in
``authority.py``.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PLACED = "placed", "Placed"
    ASSIGNED_TO_BRANCH = "assigned_to_branch", "Assigned to branch"
    ASSIGNED_TO_LOGISTICS_PICKUP = (
        "assigned_to_logistics_pickup",
        "Assigned to logistics (pickup)",
    )
    PICKED = "picked", "Picked"
    IN_PROCESS = "in_process", "In process"
    READY = "ready", "Ready"
    ASSIGNED_TO_LOGISTICS_DELIVERY = (
        "assigned_to_logistics_delivery",
        "Assigned to logistics (delivery)",
    )
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class LogisticsLeg(models.TextChoices):
    PICKUP = "pickup", "Pickup"
    DELIVERY = "delivery", "Delivery"


# Forward lifecycle, in order.
LIFECYCLE: tuple[str, ...] = (
    OrderStatus.PLACED,
    OrderStatus.ASSIGNED_TO_BRANCH,
    OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
    OrderStatus.PICKED,
    OrderStatus.IN_PROCESS,
    OrderStatus.READY,
    OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# States in which ``Order.branch`` must be set.
BRANCH_BOUND_STATES: frozenset[str] = frozenset(LIFECYCLE[1:])

# Targets reachable only through the matching assignment operation.
ASSIGNMENT_STATUSES: frozenset[str] = frozenset(
    {
        OrderStatus.ASSIGNED_TO_BRANCH,
        OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
        OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY,
    }
)

LEG_REQUIRED_STATUS: dict[str, str] = {
    LogisticsLeg.PICKUP: OrderStatus.ASSIGNED_TO_BRANCH,
    LogisticsLeg.DELIVERY: OrderStatus.READY,
}

LEG_TARGET_STATUS: dict[str, str] = {
    LogisticsLeg.PICKUP: OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
    LogisticsLeg.DELIVERY: OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY,
}

# The customer hears about these transitions.
NOTIFIABLE_STATUSES: frozenset[str] = frozenset(
    {
        OrderStatus.PLACED,
        OrderStatus.PICKED,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    }
)

ORDER_NUMBER_PREFIX = "ORD"
