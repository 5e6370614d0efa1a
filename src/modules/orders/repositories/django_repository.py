"""Django ORM implementation of the Order repository.

Row locking for the workflow uses ``select_for_update()``; callers run
inside the engine's transaction so the lock is held until commit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.orders.models import Order, OrderStaffAssignment, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

READ_RELATIONS = ("branch", "logistics_partner", "pickup_partner", "delivery_partner")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order.

        ``data`` keys mirror the model fields: ``customer_id``,
        ``pickup_address``, ``pickup_pincode``, ``delivery_address``,
        ``delivery_pincode`` (required) and ``total_amount``,
        ``total_weight_kg``, ``is_express``, ``notes`` (optional).
        """
        order = Order(**data)
        order.save()
        logger.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.select_related(*READ_RELATIONS)
                .prefetch_related("status_history", "staff_assignments__staff")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[Order]:
        """Lock the order row (SELECT FOR UPDATE) without joining relations.

        PostgreSQL refuses ``FOR UPDATE`` across the nullable outer joins
        ``select_related`` would add, so relations load lazily here.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = Order.objects.select_related(*READ_RELATIONS)
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    def save(self, entity: Order, update_fields: Optional[list[str]] = None) -> Order:
        """Persist the order and schedule its domain events for after commit."""
        entity.save(update_fields=update_fields)

        events = entity.domain_events
        event_bus.publish_on_commit(events)
        entity.clear_domain_events()

        logger.debug("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    # ------------------------------------------------------------------
    # History and staff
    # ------------------------------------------------------------------

    def add_history(
        self,
        order: Order,
        new_status: str,
        *,
        old_status: Optional[str],
        actor_id: Any,
        actor_role: str,
        notes: str = "",
        is_override: bool = False,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order=order,
            sequence=OrderStatusHistory.next_sequence(order.id),
            old_status=old_status,
            new_status=new_status,
            actor_id=actor_id,
            actor_role=actor_role,
            notes=notes,
            is_override=is_override,
        )
        logger.info(
            "order.history_added",
            order_id=str(order.id),
            sequence=history.sequence,
            old_status=old_status,
            new_status=new_status,
        )
        return history

    def has_staff(self, order: Order, staff: Any) -> bool:
        return OrderStaffAssignment.objects.filter(order=order, staff=staff).exists()

    def add_staff_assignment(
        self, order: Order, staff: Any, assigned_by: Any = None
    ) -> OrderStaffAssignment:
        return OrderStaffAssignment.objects.create(
            order=order,
            staff=staff,
            assigned_by_id=assigned_by,
        )

    def assigned_staff(self, order: Order) -> List[Any]:
        return [
            assignment.staff
            for assignment in OrderStaffAssignment.objects.filter(order=order)
            .select_related("staff")
            .order_by("assigned_at", "id")
        ]
