"""Logistics partner domain exceptions."""

from __future__ import annotations

from shared.domain.errors import (
    AreaNotCovered,
    InactiveResource,
    MissingParameter,
    NotFound,
)


class MissingLogisticsData(MissingParameter):
    code = "MISSING_DATA"
    default_message = "Logistics partner ID and type are required."


class InvalidLogisticsLeg(MissingParameter):
    code = "INVALID_TYPE"
    default_message = "Type must be either 'pickup' or 'delivery'."


class LogisticsPartnerNotFound(NotFound):
    code = "LOGISTICS_NOT_FOUND"
    default_message = "Logistics partner not found."


class InactiveLogisticsPartner(InactiveResource, LogisticsPartnerNotFound):
    code = "LOGISTICS_NOT_FOUND"
    default_message = "Logistics partner is inactive."


class PartnerAreaNotCovered(AreaNotCovered):
    code = "AREA_NOT_COVERED"
    default_message = "Logistics partner does not service this area."
