"""View helpers shared by the workflow API modules."""

from __future__ import annotations

from typing import NoReturn, Union

import structlog

from modules.accounts.scope import ActorScope
from modules.core.exceptions import to_api_exception
from shared.domain.errors import DomainError, InfrastructureError

UUID_LOOKUP_REGEX = (
    "[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class ActorScopeMixin:
    """Resolves the request's ``ActorScope`` from ``request.user``.

    The role never comes from the request body.
    """

    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_scope(self) -> ActorScope:
        if not hasattr(self, "_actor_scope"):
            try:
                scope = ActorScope.for_user(self.request.user)
            except DomainError as exc:
                self.raise_api_error(exc)
            structlog.contextvars.bind_contextvars(
                actor_id=scope.actor_id,
                actor_role=scope.role,
            )
            self._actor_scope = scope
        return self._actor_scope

    @staticmethod
    def raise_api_error(exc: Union[DomainError, InfrastructureError]) -> NoReturn:
        raise to_api_exception(exc) from exc

