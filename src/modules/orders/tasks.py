"""Asynchronous tasks of the orders module."""

from __future__ import annotations

from typing import Optional

import structlog
from celery import shared_task

from modules.orders.constants import OrderStatus

logger = structlog.get_logger(__name__)

MESSAGES = {
    OrderStatus.PLACED: "Your order {order_number} has been placed.",
    OrderStatus.PICKED: "Your order {order_number} has been picked up.",
    OrderStatus.READY: "Your order {order_number} is ready.",
    OrderStatus.OUT_FOR_DELIVERY: "Your order {order_number} is out for delivery.",
    OrderStatus.DELIVERED: "Your order {order_number} has been delivered.",
}


@shared_task(name="orders.send_order_notification")
def send_order_notification(
    order_id: str,
    order_number: str,
    status: str,
    customer_id: Optional[int] = None,
) -> dict:
    """Hand a customer notification to the delivery channel.

    The channel itself (SMS, e-mail, push) is external; this task renders
    the message and records the dispatch.
    """
    template = MESSAGES.get(status)
    if template is None:
        logger.info("notification.skipped", order_id=order_id, status=status)
        return {"sent": False, "status": status}

    message = template.format(order_number=order_number)
    logger.info(
        "notification.sent",
        order_id=order_id,
        customer_id=customer_id,
        status=status,
    )
    return {"sent": True, "status": status, "message": message}
