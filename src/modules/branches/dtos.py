"""Branch and staff commands.

Each update command replaces a whole value group (capacity, contact,
operating hours, availability); partial updates are not accepted.
"""

from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.branches.constants import (
    DEFAULT_MAX_CONCURRENT_ORDERS,
    DEFAULT_MAX_ORDERS_PER_DAY,
    DEFAULT_MAX_WEIGHT_PER_DAY,
    WEEKDAYS,
    StaffRole,
)


class UpdateCapacityDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_orders_per_day: int
    max_weight_per_day: Decimal

    @field_validator("max_orders_per_day")
    @classmethod
    def orders_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Daily order limit must be at least 1.")
        return v

    @field_validator("max_weight_per_day")
    @classmethod
    def weight_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Daily weight limit must be greater than zero.")
        return v


class UpdateContactDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    contact_phone: str
    contact_email: Optional[str] = ""

    @field_validator("contact_phone")
    @classmethod
    def phone_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Contact phone is required.")
        return v.strip()


class UpdateOperatingHoursDTO(BaseModel):
    """Opening window plus the weekdays the branch works."""

    model_config = ConfigDict(frozen=True)

    open_time: time
    close_time: time
    working_days: List[str]

    @field_validator("working_days")
    @classmethod
    def days_must_be_known(cls, v: List[str]) -> List[str]:
        days = [day.lower() for day in v]
        unknown = sorted(set(days) - set(WEEKDAYS))
        if unknown:
            raise ValueError(f"Unknown weekdays: {', '.join(unknown)}.")
        # Keep calendar order and drop duplicates.
        return [day for day in WEEKDAYS if day in days]

    @model_validator(mode="after")
    def close_after_open(self):
        if self.close_time <= self.open_time:
            raise ValueError("Closing time must be after opening time.")
        return self


class UpdateStaffAvailabilityDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_active: bool
    max_concurrent_orders: int

    @field_validator("max_concurrent_orders")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Concurrent order limit must be at least 1.")
        return v


class CreateBranchDTO(BaseModel):
    """A new branch; limits fall back to the house defaults."""

    model_config = ConfigDict(frozen=True)

    name: str
    code: str
    address_line: str
    city: str
    pincode: str
    contact_phone: str
    contact_email: Optional[str] = ""
    max_orders_per_day: int = DEFAULT_MAX_ORDERS_PER_DAY
    max_weight_per_day: Decimal = DEFAULT_MAX_WEIGHT_PER_DAY

    @field_validator("name", "address_line", "city", "contact_phone")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be blank.")
        return v.strip()

    @field_validator("code")
    @classmethod
    def normalise_code(cls, v: str) -> str:
        code = v.strip().upper()
        if not code:
            raise ValueError("Branch code is required.")
        return code

    @field_validator("pincode")
    @classmethod
    def pincode_must_be_six_digits(cls, v: str) -> str:
        v = v.strip()
        if len(v) != 6 or not v.isdigit():
            raise ValueError("Pincode must be 6 digits.")
        return v

    @field_validator("max_orders_per_day")
    @classmethod
    def orders_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Daily order limit must be at least 1.")
        return v

    @field_validator("max_weight_per_day")
    @classmethod
    def weight_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Daily weight limit must be greater than zero.")
        return v


class CreateStaffDTO(BaseModel):
    """A new staff member.  ``branch_id`` is fixed for the record's lifetime."""

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    role: StaffRole
    branch_id: Optional[UUID] = None
    max_concurrent_orders: int = DEFAULT_MAX_CONCURRENT_ORDERS

    @field_validator("name", "phone")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be blank.")
        return v.strip()

    @field_validator("max_concurrent_orders")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Concurrent order limit must be at least 1.")
        return v
