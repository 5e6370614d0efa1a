"""Unit tests for domain events registration on entities."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderPlaced, OrderStatusChanged
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events(customer):
    order = Order(
        customer=customer,
        order_number="ORD-20260301-00001",
        status=OrderStatus.PLACED,
        total_amount=Decimal("0.00"),
    )

    assert order.domain_events == []

    event = OrderPlaced(aggregate_id=order.id, order_number=order.order_number)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderPlaced"

    order.clear_domain_events()
    assert order.domain_events == []


def test_payload_is_json_friendly():
    event = OrderStatusChanged(
        aggregate_id=UUID("0190f3c2-7a1b-7c3d-8e4f-5a6b7c8d9e0f"),
        order_number="ORD-20260301-00001",
        old_status=OrderStatus.PICKED,
        new_status=OrderStatus.ASSIGNED_TO_BRANCH,
        actor_id=7,
        actor_role="branch_manager",
    )

    payload = event.as_payload()

    assert payload["aggregate_id"] == "0190f3c2-7a1b-7c3d-8e4f-5a6b7c8d9e0f"
    assert payload["event_name"] == "OrderStatusChanged"
    assert payload["new_status"] == "assigned_to_branch"
    assert payload["is_override"] is False
    assert isinstance(payload["occurred_on"], str)
    assert isinstance(payload["event_id"], str)
