"""Transition authority table.

``ROLE_TRANSITIONS[role][current]`` is the set of statuses *role* may move
an order to from *current*.  The table is total: every role has a row for
every status, checked when the module is imported.

Cancellation pairs are part of each role's table, so every accepted
non-override transition appears here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping

from modules.accounts.constants import ADMINISTRATIVE_ROLES, ActorRole
from modules.orders.constants import (
    ASSIGNMENT_STATUSES,
    LIFECYCLE,
    TERMINAL_STATES,
    OrderStatus,
)

Table = Dict[str, FrozenSet[str]]

NON_TERMINAL: tuple[str, ...] = tuple(
    status for status in OrderStatus.values if status not in TERMINAL_STATES
)

# Statuses from which each role may cancel.
CANCELLATION_AUTHORITY: Dict[str, FrozenSet[str]] = {
    ActorRole.ADMIN: frozenset(NON_TERMINAL),
    ActorRole.CENTER_ADMIN: frozenset(NON_TERMINAL),
    ActorRole.BRANCH_MANAGER: frozenset(NON_TERMINAL),
    ActorRole.SUPPORT_AGENT: frozenset(
        {
            OrderStatus.PLACED,
            OrderStatus.ASSIGNED_TO_BRANCH,
            OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP,
        }
    ),
    ActorRole.CUSTOMER: frozenset(
        {OrderStatus.PLACED, OrderStatus.ASSIGNED_TO_BRANCH}
    ),
    ActorRole.STAFF: frozenset(),
}

FORWARD_LIFECYCLE: Mapping[str, str] = dict(zip(LIFECYCLE, LIFECYCLE[1:]))

BRANCH_WORKFLOW: Mapping[str, str] = {
    OrderStatus.ASSIGNED_TO_LOGISTICS_PICKUP: OrderStatus.PICKED,
    OrderStatus.PICKED: OrderStatus.IN_PROCESS,
    OrderStatus.IN_PROCESS: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY,
    OrderStatus.ASSIGNED_TO_LOGISTICS_DELIVERY: OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.OUT_FOR_DELIVERY: OrderStatus.DELIVERED,
}

FLOOR_WORKFLOW: Mapping[str, str] = {
    OrderStatus.PICKED: OrderStatus.IN_PROCESS,
    OrderStatus.IN_PROCESS: OrderStatus.READY,
}


def _build_table(role: str, forward: Mapping[str, str]) -> Table:
    cancellable = CANCELLATION_AUTHORITY[role]
    table: Table = {}
    for status in OrderStatus.values:
        targets = set()
        if status in forward:
            targets.add(forward[status])
        if status in cancellable:
            targets.add(OrderStatus.CANCELLED)
        table[status] = frozenset(targets)
    return table


ROLE_TRANSITIONS: Dict[str, Table] = {
    ActorRole.ADMIN: _build_table(ActorRole.ADMIN, FORWARD_LIFECYCLE),
    ActorRole.CENTER_ADMIN: _build_table(ActorRole.CENTER_ADMIN, FORWARD_LIFECYCLE),
    ActorRole.BRANCH_MANAGER: _build_table(ActorRole.BRANCH_MANAGER, BRANCH_WORKFLOW),
    ActorRole.STAFF: _build_table(ActorRole.STAFF, FLOOR_WORKFLOW),
    ActorRole.SUPPORT_AGENT: _build_table(ActorRole.SUPPORT_AGENT, {}),
    ActorRole.CUSTOMER: _build_table(ActorRole.CUSTOMER, {}),
}


def check_exhaustive(
    tables: Mapping[str, Mapping[str, Iterable[str]]],
    roles: Iterable[str],
    statuses: Iterable[str],
) -> None:
    """Raise ``RuntimeError`` if any role or status is missing from *tables*."""
    roles = set(roles)
    statuses = set(statuses)
    missing_roles = roles - set(tables)
    if missing_roles:
        raise RuntimeError(f"No transition table for roles: {sorted(missing_roles)}")
    for role in roles:
        missing = statuses - set(tables[role])
        if missing:
            raise RuntimeError(f"Role '{role}' has no row for: {sorted(missing)}")
        for targets in tables[role].values():
            unknown = set(targets) - statuses
            if unknown:
                raise RuntimeError(f"Role '{role}' targets unknown: {sorted(unknown)}")


check_exhaustive(ROLE_TRANSITIONS, ActorRole.values, OrderStatus.values)


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    is_override: bool = False
    reason: str = ""


def allowed_transitions(current: str, role: str) -> FrozenSet[str]:
    return ROLE_TRANSITIONS.get(role, {}).get(current, frozenset())


def can_cancel(current: str, role: str) -> bool:
    return current in CANCELLATION_AUTHORITY.get(role, frozenset())


def authorize_transition(
    current: str,
    requested: str,
    role: str,
    *,
    via_assignment: bool = False,
) -> TransitionDecision:
    """Decide whether *role* may move an order from *current* to *requested*.

    ``via_assignment`` is set by the assignment operations; a bare status
    change can never reach an assignment-coupled status through the table.
    Administrative roles fall back to an override for any other change.
    """
    if requested not in OrderStatus.values:
        return TransitionDecision(False, reason=f"Unknown status '{requested}'.")
    if requested == current:
        return TransitionDecision(False, reason=f"Order is already {current}.")

    coupled = requested in ASSIGNMENT_STATUSES and not via_assignment
    if requested in allowed_transitions(current, role) and not coupled:
        return TransitionDecision(True)

    if role in ADMINISTRATIVE_ROLES and not via_assignment:
        return TransitionDecision(True, is_override=True)

    if coupled and requested in allowed_transitions(current, role):
        reason = f"{requested} is reached through the matching assignment operation."
    else:
        reason = f"Role '{role}' cannot move an order from {current} to {requested}."
    return TransitionDecision(False, reason=reason)
