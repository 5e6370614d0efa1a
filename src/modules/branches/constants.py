"""Branch and staff constants."""

from decimal import Decimal

from django.db import models

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_MAX_ORDERS_PER_DAY = 100
DEFAULT_MAX_WEIGHT_PER_DAY = Decimal("500.00")  # kg
DEFAULT_MAX_CONCURRENT_ORDERS = 3


class StaffRole(models.TextChoices):
    WASHER = "washer", "Washer"
    IRONER = "ironer", "Ironer"


def all_weekdays() -> list[str]:
    return list(WEEKDAYS)
