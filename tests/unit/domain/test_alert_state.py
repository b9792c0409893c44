"""Alert lifecycle state machine derived from metadata."""

from datetime import datetime, timedelta, timezone

import pytest

from medme_security.domain.exceptions import InvalidAlertTransitionError
from medme_security.domain.models.alert import AlertState, transition_metadata

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_state_from_metadata():
    assert AlertState.from_metadata(None) == AlertState.OPEN
    assert AlertState.from_metadata({"ip_address": "1.2.3.4"}) == AlertState.OPEN
    assert AlertState.from_metadata({"acknowledged_at": T0.isoformat()}) == AlertState.ACKNOWLEDGED
    assert (
        AlertState.from_metadata({"acknowledged_at": T0.isoformat(), "resolved_at": T0.isoformat()})
        == AlertState.RESOLVED
    )


def test_acknowledge_open_alert_sets_ack_keys_and_keeps_other_metadata():
    updated = transition_metadata({"ip_address": "1.2.3.4"}, AlertState.ACKNOWLEDGED, actor_id="admin-1", at=T0)
    assert updated["acknowledged"] is True
    assert updated["acknowledged_by"] == "admin-1"
    assert updated["acknowledged_at"] == T0.isoformat()
    assert updated["ip_address"] == "1.2.3.4"
    assert "resolved_at" not in updated


def test_resolve_open_alert_also_acknowledges_with_same_timestamp():
    updated = transition_metadata({}, AlertState.RESOLVED, actor_id="admin-1", at=T0)
    assert AlertState.from_metadata(updated) == AlertState.RESOLVED
    assert updated["acknowledged"] is True
    assert updated["resolved"] is True
    assert updated["acknowledged_at"] == updated["resolved_at"]


def test_resolve_acknowledged_alert_keeps_original_acknowledgement():
    acked = transition_metadata({}, AlertState.ACKNOWLEDGED, actor_id="admin-1", at=T0)
    later = T0 + timedelta(minutes=10)
    resolved = transition_metadata(acked, AlertState.RESOLVED, actor_id="admin-2", at=later)
    assert resolved["acknowledged_by"] == "admin-1"
    assert resolved["acknowledged_at"] == T0.isoformat()
    assert resolved["resolved_by"] == "admin-2"
    assert datetime.fromisoformat(resolved["acknowledged_at"]) <= datetime.fromisoformat(resolved["resolved_at"])


@pytest.mark.parametrize(
    "metadata,target",
    [
        ({"acknowledged_at": T0.isoformat()}, AlertState.ACKNOWLEDGED),
        ({"acknowledged_at": T0.isoformat(), "resolved_at": T0.isoformat()}, AlertState.ACKNOWLEDGED),
        ({"acknowledged_at": T0.isoformat(), "resolved_at": T0.isoformat()}, AlertState.RESOLVED),
    ],
)
def test_satisfied_transitions_are_noops(metadata, target):
    assert transition_metadata(metadata, target, actor_id="admin-1", at=T0) is None


def test_open_is_never_a_target():
    with pytest.raises(InvalidAlertTransitionError):
        transition_metadata({"acknowledged_at": T0.isoformat()}, AlertState.OPEN, actor_id="a", at=T0)
