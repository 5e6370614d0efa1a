"""Logistics partner model."""

from __future__ import annotations

from typing import Iterable

from django.db import models

from modules.core.models import BaseModel


def normalize_pincodes(pincodes: Iterable[str]) -> list[str]:
    """Strip, de-duplicate and sort a pincode collection."""
    return sorted({str(code).strip() for code in pincodes if str(code).strip()})


class LogisticsPartner(BaseModel):
    """Courier company moving items between customers and branches.

    ``serviceable_pincodes`` is the complete coverage set; coverage checks
    are exact string matches against it.
    """

    company_name: models.CharField = models.CharField(max_length=255)
    contact_person: models.CharField = models.CharField(max_length=255)
    phone: models.CharField = models.CharField(max_length=20)
    is_active: models.BooleanField = models.BooleanField(default=True)
    serviceable_pincodes: models.JSONField = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "logistics_partners"
        ordering = ["company_name"]
        indexes = [
            models.Index(fields=["is_active"], name="logistics_active_idx"),
        ]

    def covers_pincode(self, pincode: str) -> bool:
        return str(pincode).strip() in set(self.serviceable_pincodes or [])

    def __str__(self) -> str:
        return self.company_name
