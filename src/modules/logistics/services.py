"""Logistics partner administrative use cases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import ActorRole
from modules.logistics.exceptions import LogisticsPartnerNotFound

if TYPE_CHECKING:
    from modules.accounts.scope import ActorScope
    from modules.logistics.dtos import UpdateCoverageDTO
    from modules.logistics.models import LogisticsPartner
    from modules.logistics.repositories.interfaces import ILogisticsPartnerRepository

logger = structlog.get_logger(__name__)

ADMIN_ROLES = (ActorRole.ADMIN, ActorRole.CENTER_ADMIN)


class LogisticsPartnerService:
    """Coverage and activation of logistics partners (administrators only).

    Branch managers may list partners to pick one for a delivery leg.
    """

    def __init__(self, partner_repository: ILogisticsPartnerRepository) -> None:
        self._partner_repo = partner_repository

    def list_partners(
        self, scope: ActorScope, filters: Optional[Dict[str, Any]] = None
    ) -> List[LogisticsPartner]:
        scope.ensure_role(*ADMIN_ROLES, ActorRole.BRANCH_MANAGER)
        return self._partner_repo.list(filters)

    @transaction.atomic
    def update_coverage(
        self, partner_id: Any, dto: UpdateCoverageDTO, scope: ActorScope
    ) -> LogisticsPartner:
        scope.ensure_role(*ADMIN_ROLES)
        partner = self._lock(partner_id)
        partner.serviceable_pincodes = list(dto.serviceable_pincodes)
        self._partner_repo.save(partner, update_fields=["serviceable_pincodes"])
        logger.info(
            "logistics_partner.coverage_updated",
            partner_id=str(partner.id),
            pincode_count=len(partner.serviceable_pincodes),
        )
        return partner

    @transaction.atomic
    def toggle_status(self, partner_id: Any, scope: ActorScope) -> LogisticsPartner:
        scope.ensure_role(*ADMIN_ROLES)
        partner = self._lock(partner_id)
        partner.is_active = not partner.is_active
        self._partner_repo.save(partner, update_fields=["is_active"])
        logger.info(
            "logistics_partner.status_toggled",
            partner_id=str(partner.id),
            is_active=partner.is_active,
        )
        return partner

    def _lock(self, partner_id: Any) -> LogisticsPartner:
        partner = self._partner_repo.get_for_update(partner_id)
        if partner is None:
            raise LogisticsPartnerNotFound(f"Logistics partner {partner_id} not found.")
        return partner
