"""Legal employee status transitions.

Every status change, whatever the caller, is checked against ``TRANSITIONS``.
"""

from dataclasses import dataclass

from workforce_api.exceptions import InvalidTransitionError
from workforce_api.models.domain.employee import EmployeeStatus


@dataclass(frozen=True)
class TransitionRule:
    """Constraints attached to one edge of the status graph."""

    requires_separation: bool = False
    requires_terminate_capability: bool = False


_SIMPLE = TransitionRule()
_SEPARATION = TransitionRule(requires_separation=True)
_TERMINATION = TransitionRule(requires_separation=True, requires_terminate_capability=True)

TRANSITIONS: dict[tuple[EmployeeStatus, EmployeeStatus], TransitionRule] = {
    (EmployeeStatus.ACTIVE, EmployeeStatus.ON_HOLD): _SIMPLE,
    (EmployeeStatus.ACTIVE, EmployeeStatus.RESIGNED): _SEPARATION,
    (EmployeeStatus.ACTIVE, EmployeeStatus.TERMINATED): _TERMINATION,
    (EmployeeStatus.ON_HOLD, EmployeeStatus.ACTIVE): _SIMPLE,
    (EmployeeStatus.ON_HOLD, EmployeeStatus.TERMINATED): _TERMINATION,
    # Rehire
    (EmployeeStatus.RESIGNED, EmployeeStatus.ACTIVE): _SIMPLE,
    (EmployeeStatus.TERMINATED, EmployeeStatus.ACTIVE): _SIMPLE,
}


def get_rule(old_status: EmployeeStatus, new_status: EmployeeStatus) -> TransitionRule:
    """Return the rule for an edge.

    Raises:
        InvalidTransitionError: If the edge is not in the graph
    """
    rule = TRANSITIONS.get((old_status, new_status))
    if rule is None:
        raise InvalidTransitionError(old_status, new_status)
    return rule


def allowed_targets(old_status: EmployeeStatus, can_terminate: bool = False) -> list[EmployeeStatus]:
    """List the statuses reachable from ``old_status`` for a principal."""
    return [
        new
        for (old, new), rule in TRANSITIONS.items()
        if old == old_status and (can_terminate or not rule.requires_terminate_capability)
    ]
