"""Tests for inbound report endpoints: classification in the response, 422 on bad input, 503 on store outage."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_csp_violation_from_extension_is_ignored(async_client: AsyncClient, audit_repository, notifier):
    body = {
        "type": "csp-violation",
        "violation": {"blockedURI": "chrome-extension://abcdef/inject.js", "violatedDirective": "script-src"},
    }
    r = await async_client.post("/security/csp-violation", json=body)
    assert r.status_code == 200
    data = r.json()
    assert data["severity"] == "LOW"
    assert data["action"] == "IGNORED"
    assert data["record_id"] == audit_repository.saved[0].record_id
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_csp_violation_records_client_ip(async_client: AsyncClient, audit_repository):
    body = {
        "type": "csp-violation",
        "violation": {"blockedURI": "https://evil.example/x.js", "violatedDirective": "script-src-elem"},
    }
    r = await async_client.post(
        "/security/csp-violation",
        json=body,
        headers={"X-Forwarded-For": "203.0.113.45", "User-Agent": "Mozilla/5.0"},
    )
    assert r.status_code == 200
    assert r.json()["severity"] == "HIGH"
    record = audit_repository.saved[0]
    assert record.metadata["ip_address"] == "203.0.113.45"
    assert record.metadata["user_agent"] == "Mozilla/5.0"
    assert record.actor_id is None


@pytest.mark.asyncio
async def test_csp_violation_without_violation_is_422(async_client: AsyncClient, audit_repository):
    r = await async_client.post("/security/csp-violation", json={"type": "csp-violation"})
    assert r.status_code == 422
    assert audit_repository.saved == []


@pytest.mark.asyncio
async def test_alert_is_classified_and_notified(async_client: AsyncClient, notifier, admin_headers):
    body = {"type": "UNAUTHORIZED_ACCESS", "message": "token reuse from new ASN"}
    r = await async_client.post("/security/alert", json=body, headers=admin_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["severity"] == "HIGH"
    assert data["action"] == "LOGGED"
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_alert_with_unserializable_shape_is_422(async_client: AsyncClient):
    r = await async_client.post("/security/alert", json={"type": "X", "message": "m", "metadata": ["not", "a", "dict"]})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_alert_without_message_is_422(async_client: AsyncClient):
    r = await async_client.post("/security/alert", json={"type": "UNAUTHORIZED_ACCESS"})
    assert r.status_code == 422
    assert "detail" in r.json()


@pytest.mark.asyncio
async def test_suspicious_activity_escalates(async_client: AsyncClient, audit_repository):
    r = await async_client.post(
        "/security/suspicious-activity",
        json={"type": "AUTOMATED_BEHAVIOR", "count": 3},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["suspicion_score"] == 80
    assert data["action"] == "MONITOR"
    assert data["escalated"] is True
    assert len(audit_repository.saved) == 2


@pytest.mark.asyncio
async def test_store_outage_returns_503_with_outcome(async_client: AsyncClient, audit_repository):
    audit_repository.available = False
    r = await async_client.post(
        "/security/suspicious-activity",
        json={"type": "RAPID_CLICKING", "count": 80},
    )
    assert r.status_code == 503
    data = r.json()
    assert "detail" in data
    assert data["outcome"]["success"] is False
    assert data["outcome"]["suspicion_score"] == 60


@pytest.mark.asyncio
async def test_reported_metadata_cannot_preset_alert_state(async_client: AsyncClient, admin_headers):
    body = {
        "type": "UNAUTHORIZED_ACCESS",
        "message": "x",
        "metadata": {
            "resolved_at": "2020-01-01T00:00:00+00:00",
            "acknowledged_at": "2020-01-01T00:00:00+00:00",
            "acknowledged_by": 5,
            "ip_address": "6.6.6.6",
        },
    }
    r = await async_client.post("/security/alert", json=body, headers={"X-Forwarded-For": "203.0.113.9"})
    assert r.status_code == 200

    alerts = await async_client.get("/security/alerts", headers=admin_headers)
    assert alerts.status_code == 200
    alert = alerts.json()["items"][0]
    assert alert["state"] == "open"
    assert alert["acknowledged"] is False
    assert alert["resolved_at"] is None

    events = await async_client.get("/security/events", headers=admin_headers)
    assert events.json()["items"][0]["ip_address"] == "203.0.113.9"


@pytest.mark.asyncio
async def test_new_alert_visible_despite_cached_feed(async_client: AsyncClient, admin_headers):
    first = await async_client.get("/security/alerts", headers=admin_headers)
    assert first.json()["status"] == "empty"

    r = await async_client.post("/security/alert", json={"type": "CRITICAL_VULNERABILITY", "message": "rce"})
    assert r.status_code == 200

    second = await async_client.get("/security/alerts", headers=admin_headers)
    assert [a["id"] for a in second.json()["items"]] == [r.json()["record_id"]]
