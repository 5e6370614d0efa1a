"""Order DTOs for the workflow façade.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models.  The
façade accepts them from the API layer; identifiers stay optional so that a
missing one surfaces as the matching ``MissingParameter`` error instead of
a validation failure.

- ``PlaceOrderDTO``: input for order placement.
- ``AssignBranchDTO`` / ``AssignLogisticsDTO`` / ``AssignStaffDTO``:
  assignment intents.
- ``TransitionStatusDTO``: bare status change (or override).
- ``OrderListFiltersDTO``: scoped listing filters.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


def _validate_pincode(value: str) -> str:
    value = value.strip()
    if not (value.isdigit() and len(value) == 6):
        raise ValueError("Pincode must be 6 digits.")
    return value


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement.

    ``customer_id`` is resolved from the caller for the ``customer`` role;
    staff placing on behalf of a customer must pass it explicitly.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: Optional[int] = None
    pickup_address: str
    pickup_pincode: str
    delivery_address: str
    delivery_pincode: str
    total_amount: Decimal = Decimal("0.00")
    total_weight_kg: Decimal = Decimal("0.00")
    is_express: bool = False
    notes: Optional[str] = ""

    @field_validator("pickup_pincode", "delivery_pincode")
    @classmethod
    def pincode_must_be_six_digits(cls, v: str) -> str:
        return _validate_pincode(v)

    @field_validator("pickup_address", "delivery_address")
    @classmethod
    def address_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Address is required.")
        return v.strip()

    @field_validator("total_amount", "total_weight_kg")
    @classmethod
    def must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Value cannot be negative.")
        return v


class AssignBranchDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: Optional[UUID] = None
    branch_id: Optional[UUID] = None


class AssignLogisticsDTO(BaseModel):
    """``leg`` is kept as a plain string; the façade validates it."""

    model_config = ConfigDict(frozen=True)

    order_id: Optional[UUID] = None
    logistics_partner_id: Optional[UUID] = None
    leg: Optional[str] = None


class AssignStaffDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: Optional[UUID] = None
    staff_id: Optional[UUID] = None


class TransitionStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: Optional[UUID] = None
    status: Optional[str] = None
    notes: str = ""


class OrderListFiltersDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None
    branch_id: Optional[UUID] = None
    is_express: Optional[bool] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def range_is_ordered(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self
