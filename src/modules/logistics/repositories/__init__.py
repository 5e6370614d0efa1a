"""Logistics partner repositories package."""

from modules.logistics.repositories.django_repository import (
    LogisticsPartnerDjangoRepository,
)
from modules.logistics.repositories.interfaces import ILogisticsPartnerRepository

__all__ = ["ILogisticsPartnerRepository", "LogisticsPartnerDjangoRepository"]
