"""Event handlers for Orders domain events.

Handlers run after the workflow transaction has committed.  Notification
enqueue failures are logged and never propagate: the transition stands.
"""

from __future__ import annotations

from typing import Optional

import structlog

from modules.orders.constants import NOTIFIABLE_STATUSES, OrderStatus
from modules.orders.events import OrderPlaced, OrderStatusChanged, StaffAssigned
from modules.orders.tasks import send_order_notification
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


def enqueue_notification(
    order_id: str,
    order_number: str,
    status: str,
    customer_id: Optional[int] = None,
) -> bool:
    if status not in NOTIFIABLE_STATUSES:
        return False
    try:
        send_order_notification.delay(
            order_id=order_id,
            order_number=order_number,
            status=status,
            customer_id=customer_id,
        )
    except Exception:
        logger.exception(
            "order.notification_enqueue_failed",
            order_id=order_id,
            status=status,
        )
        return False
    logger.info("order.notification_enqueued", order_id=order_id, status=status)
    return True


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        enqueue_notification(
            order_id=str(event.aggregate_id),
            order_number=event.order_number,
            status=OrderStatus.PLACED,
            customer_id=event.customer_id,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
            is_override=event.is_override,
        )
        enqueue_notification(
            order_id=str(event.aggregate_id),
            order_number=event.order_number,
            status=event.new_status,
            customer_id=event.customer_id,
        )


class StaffAssignedHandler(IEventHandler[StaffAssigned]):
    def handle(self, event: StaffAssigned) -> None:
        logger.info(
            "order.event.staff_assigned",
            order_id=str(event.aggregate_id),
            staff_id=str(event.staff_id),
        )


order_placed_handler = OrderPlacedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
staff_assigned_handler = StaffAssignedHandler()
