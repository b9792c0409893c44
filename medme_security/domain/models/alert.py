"""Alert lifecycle. State is derived from audit-record metadata, never stored as a column."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from medme_security.domain.exceptions import InvalidAlertTransitionError

# Metadata keys written on the source audit record.
ACKNOWLEDGED = "acknowledged"
ACKNOWLEDGED_BY = "acknowledged_by"
ACKNOWLEDGED_AT = "acknowledged_at"
RESOLVED = "resolved"
RESOLVED_BY = "resolved_by"
RESOLVED_AT = "resolved_at"


class AlertState(str, Enum):
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"

    @classmethod
    def from_metadata(cls, metadata: Optional[Mapping[str, Any]]) -> "AlertState":
        """Derive the current state from which lifecycle keys are present."""
        metadata = metadata or {}
        if metadata.get(RESOLVED_AT):
            return cls.RESOLVED
        if metadata.get(ACKNOWLEDGED_AT):
            return cls.ACKNOWLEDGED
        return cls.OPEN


_TRANSITIONS: Dict[AlertState, FrozenSet[AlertState]] = {
    AlertState.OPEN: frozenset({AlertState.ACKNOWLEDGED, AlertState.RESOLVED}),
    AlertState.ACKNOWLEDGED: frozenset({AlertState.RESOLVED}),
    AlertState.RESOLVED: frozenset(),
}

# (current, target) pairs that are already satisfied and need no write.
_NO_OPS: FrozenSet[tuple] = frozenset(
    {
        (AlertState.ACKNOWLEDGED, AlertState.ACKNOWLEDGED),
        (AlertState.RESOLVED, AlertState.ACKNOWLEDGED),
        (AlertState.RESOLVED, AlertState.RESOLVED),
    }
)


def _validate_transition(current: AlertState, target: AlertState) -> None:
    if target not in _TRANSITIONS.get(current, frozenset()):
        raise InvalidAlertTransitionError(
            f"Invalid alert transition from {current.value} to {target.value}"
        )


def transition_metadata(
    metadata: Optional[Mapping[str, Any]],
    target: AlertState,
    *,
    actor_id: Optional[str],
    at: datetime,
) -> Optional[Dict[str, Any]]:
    """
    Return the metadata that moves an alert to `target`, or None when the alert
    is already there (idempotent acknowledge / resolve).
    Resolving an open alert acknowledges it with the same timestamp, so
    acknowledged_at <= resolved_at always holds.
    Raises InvalidAlertTransitionError for any other move.
    """
    current = AlertState.from_metadata(metadata)
    if (current, target) in _NO_OPS:
        return None
    _validate_transition(current, target)

    stamp = at.isoformat()
    updated = dict(metadata or {})
    if current == AlertState.OPEN:
        updated[ACKNOWLEDGED] = True
        updated[ACKNOWLEDGED_BY] = actor_id
        updated[ACKNOWLEDGED_AT] = stamp
    if target == AlertState.RESOLVED:
        updated[RESOLVED] = True
        updated[RESOLVED_BY] = actor_id
        updated[RESOLVED_AT] = stamp
    return updated
