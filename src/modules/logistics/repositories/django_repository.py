"""Django ORM implementation of the logistics partner repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.logistics.models import LogisticsPartner
from modules.logistics.repositories.interfaces import ILogisticsPartnerRepository

logger = structlog.get_logger(__name__)


class LogisticsPartnerDjangoRepository(ILogisticsPartnerRepository):
    def get_by_id(self, id: Any) -> Optional[LogisticsPartner]:
        try:
            return LogisticsPartner.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[LogisticsPartner]:
        try:
            return LogisticsPartner.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[LogisticsPartner]:
        queryset = LogisticsPartner.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def save(
        self,
        entity: LogisticsPartner,
        update_fields: Optional[list[str]] = None,
    ) -> LogisticsPartner:
        entity.save(update_fields=update_fields)
        logger.info("logistics_partner.saved", partner_id=str(entity.id))
        return entity
