"""Order workflow façade (use cases).

``OrderWorkflowService`` is the only entry point the HTTP layer calls.  It
checks that required identifiers are present, delegates the workflow
intents to ``AssignmentEngine`` and owns placement and scoped reads.

Transient database faults are re-raised as ``StorageUnavailable`` after the
transaction has rolled back.
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, TypeVar

import structlog
from django.contrib.auth import get_user_model
from django.db import InterfaceError, OperationalError, transaction

from modules.accounts.constants import ActorRole
from modules.branches.exceptions import BranchRequired, StaffRequired
from modules.logistics.exceptions import InvalidLogisticsLeg, MissingLogisticsData
from modules.orders.constants import LogisticsLeg, OrderStatus
from modules.orders.events import OrderPlaced
from modules.orders.exceptions import (
    CustomerNotFound,
    CustomerRequired,
    OrderNotFound,
    OrderRequired,
    StatusRequired,
)
from shared.domain.errors import StorageUnavailable

if TYPE_CHECKING:
    from modules.accounts.scope import ActorScope
    from modules.orders.dtos import (
        AssignBranchDTO,
        AssignLogisticsDTO,
        AssignStaffDTO,
        OrderListFiltersDTO,
        PlaceOrderDTO,
        TransitionStatusDTO,
    )
    from modules.orders.engine import AssignmentEngine
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

PLACING_ROLES = (
    ActorRole.CUSTOMER,
    ActorRole.ADMIN,
    ActorRole.CENTER_ADMIN,
    ActorRole.SUPPORT_AGENT,
)


def storage_guard(func: F) -> F:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error(
                "order.storage_unavailable",
                operation=func.__name__,
                error=str(exc),
            )
            raise StorageUnavailable("Storage is temporarily unavailable.") from exc

    return wrapper  # type: ignore[return-value]


class OrderWorkflowService:
    """Application service for the order workflow."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        engine: AssignmentEngine,
    ) -> None:
        self._order_repo = order_repository
        self._engine = engine

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    @storage_guard
    @transaction.atomic
    def place_order(self, dto: PlaceOrderDTO, scope: ActorScope) -> Order:
        """Create an order in ``placed`` with its first history entry.

        Customers always place for themselves; administrators and support
        agents place on behalf of the customer named in ``dto``.
        """
        scope.ensure_role(*PLACING_ROLES)
        customer_id = scope.actor_id if scope.is_customer else dto.customer_id
        if customer_id is None:
            raise CustomerRequired()
        if not get_user_model().objects.filter(pk=customer_id, is_active=True).exists():
            raise CustomerNotFound(f"Customer {customer_id} not found.")

        order = self._order_repo.create(
            {
                "customer_id": customer_id,
                "pickup_address": dto.pickup_address,
                "pickup_pincode": dto.pickup_pincode,
                "delivery_address": dto.delivery_address,
                "delivery_pincode": dto.delivery_pincode,
                "total_amount": dto.total_amount,
                "total_weight_kg": dto.total_weight_kg,
                "is_express": dto.is_express,
                "notes": dto.notes or "",
            }
        )
        self._order_repo.add_history(
            order,
            OrderStatus.PLACED,
            old_status=None,
            actor_id=scope.actor_id,
            actor_role=scope.role,
            notes="Order placed",
        )
        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                order_number=order.order_number,
                customer_id=customer_id,
            )
        )
        self._order_repo.save(order, update_fields=[])

        logger.info(
            "order.placed",
            order_id=str(order.id),
            order_number=order.order_number,
            is_express=order.is_express,
        )
        return self._order_repo.get_by_id(order.id) or order

    # ------------------------------------------------------------------
    # Workflow intents
    # ------------------------------------------------------------------

    @storage_guard
    def assign_branch(self, dto: AssignBranchDTO, scope: ActorScope) -> Order:
        if dto.order_id is None:
            raise OrderRequired()
        if dto.branch_id is None:
            raise BranchRequired()
        order = self._engine.assign_branch(dto.order_id, dto.branch_id, scope)
        return self._reload(order)

    @storage_guard
    def assign_logistics(self, dto: AssignLogisticsDTO, scope: ActorScope) -> Order:
        if dto.order_id is None:
            raise OrderRequired()
        if dto.logistics_partner_id is None or not dto.leg:
            raise MissingLogisticsData()
        if dto.leg not in LogisticsLeg.values:
            raise InvalidLogisticsLeg()
        order = self._engine.assign_logistics(
            dto.order_id, dto.logistics_partner_id, dto.leg, scope
        )
        return self._reload(order)

    @storage_guard
    def assign_staff(self, dto: AssignStaffDTO, scope: ActorScope) -> Order:
        if dto.order_id is None:
            raise OrderRequired()
        if dto.staff_id is None:
            raise StaffRequired()
        order = self._engine.assign_staff(dto.order_id, dto.staff_id, scope)
        return self._reload(order)

    @storage_guard
    def transition_status(self, dto: TransitionStatusDTO, scope: ActorScope) -> Order:
        if dto.order_id is None:
            raise OrderRequired()
        if not dto.status:
            raise StatusRequired()
        order = self._engine.transition_status(
            dto.order_id, dto.status.lower(), scope, notes=dto.notes
        )
        return self._reload(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @storage_guard
    def get_order(self, order_id: Any, scope: ActorScope) -> Order:
        """Retrieve a single order the actor may see.

        Raises:
            OrderNotFound: the order does not exist.
            AccessDenied: the order is outside the actor's scope.
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        scope.ensure_can_access(order)
        return order

    @storage_guard
    def list_orders(
        self,
        scope: ActorScope,
        filters: Optional[OrderListFiltersDTO] = None,
    ) -> List[Order]:
        """Orders visible to the actor, narrowed by *filters*."""
        lookups: Dict[str, Any] = scope.order_filters()
        if filters is not None:
            if filters.branch_id is not None:
                lookups["branch_id"] = scope.constrain_branch(filters.branch_id)
            if filters.status:
                lookups["status"] = filters.status.lower()
            if filters.is_express is not None:
                lookups["is_express"] = filters.is_express
            if filters.start_date:
                lookups["created_at__date__gte"] = filters.start_date
            if filters.end_date:
                lookups["created_at__date__lte"] = filters.end_date
        return self._order_repo.list(lookups)

    def _reload(self, order: Order) -> Order:
        return self._order_repo.get_by_id(order.id) or order


def build_workflow_service() -> OrderWorkflowService:
    """Wire the façade with the Django repositories."""
    from modules.branches.repositories.django_repository import (
        BranchDjangoRepository,
        StaffDjangoRepository,
    )
    from modules.logistics.repositories.django_repository import (
        LogisticsPartnerDjangoRepository,
    )
    from modules.orders.engine import AssignmentEngine
    from modules.orders.repositories.django_repository import OrderDjangoRepository

    order_repository = OrderDjangoRepository()
    engine = AssignmentEngine(
        order_repository=order_repository,
        branch_repository=BranchDjangoRepository(),
        staff_repository=StaffDjangoRepository(),
        partner_repository=LogisticsPartnerDjangoRepository(),
    )
    return OrderWorkflowService(order_repository=order_repository, engine=engine)
