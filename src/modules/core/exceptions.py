"""Translation of domain errors into DRF API exceptions.

Views catch ``DomainError`` / ``InfrastructureError`` from the service layer
and re-raise them through ``to_api_exception`` so that the configured
``drf_standardized_errors`` handler renders every failure with the same
``{"type", "errors": [{"code", "detail", "attr"}]}`` envelope.
"""

from __future__ import annotations

from typing import Dict, Type, Union

from rest_framework import status
from rest_framework.exceptions import APIException

from shared.domain.errors import (
    AlreadyAssigned,
    AreaNotCovered,
    BranchMismatch,
    CapacityExceeded,
    DomainError,
    Forbidden,
    InactiveResource,
    InfrastructureError,
    InvalidStatus,
    InvalidTransition,
    MissingParameter,
    NotFound,
    Unavailable,
)

# Looked up along the exception's MRO, so the first matching kind wins.
HTTP_STATUS_BY_KIND: Dict[Type[Exception], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InactiveResource: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    MissingParameter: status.HTTP_400_BAD_REQUEST,
    InvalidStatus: status.HTTP_400_BAD_REQUEST,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    CapacityExceeded: status.HTTP_400_BAD_REQUEST,
    AreaNotCovered: status.HTTP_400_BAD_REQUEST,
    Unavailable: status.HTTP_400_BAD_REQUEST,
    BranchMismatch: status.HTTP_400_BAD_REQUEST,
    AlreadyAssigned: status.HTTP_400_BAD_REQUEST,
    InfrastructureError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class WorkflowAPIException(APIException):
    """API exception carrying the status and code of a domain error."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"

    def __init__(self, detail: str, code: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(detail=detail, code=code)


def http_status_for(exc: Union[DomainError, InfrastructureError]) -> int:
    for klass in type(exc).__mro__:
        if klass in HTTP_STATUS_BY_KIND:
            return HTTP_STATUS_BY_KIND[klass]
    return status.HTTP_400_BAD_REQUEST


def to_api_exception(
    exc: Union[DomainError, InfrastructureError],
) -> WorkflowAPIException:
    return WorkflowAPIException(
        detail=str(exc),
        code=exc.code,
        status_code=http_status_for(exc),
    )
