"""Slack-compatible incoming-webhook sink for HIGH / CRITICAL security alerts."""

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi.encoders import jsonable_encoder

from medme_security.application.exceptions import NotificationError
from medme_security.application.notifier import AlertNotification
from medme_security.domain.models.audit import AuditSeverity

SEVERITY_COLORS = {
    AuditSeverity.LOW: "#36a64f",
    AuditSeverity.MEDIUM: "#f2c744",
    AuditSeverity.HIGH: "#ff9900",
    AuditSeverity.CRITICAL: "#d00000",
}
MAX_FIELDS = 10


def build_payload(notification: AlertNotification, environment: str) -> Dict[str, Any]:
    fields = [
        {"title": key, "value": str(value), "short": True}
        for key, value in list(notification.metadata.items())[:MAX_FIELDS]
        if value is not None
    ]
    payload = {
        "text": f":rotating_light: *{notification.title}* ({notification.severity.value})",
        "attachments": [
            {
                "color": SEVERITY_COLORS[notification.severity],
                "title": notification.title,
                "text": notification.description,
                "fields": fields,
                "footer": f"medme-security ({environment}) record {notification.record_id}",
            }
        ],
    }
    # Make it JSON-safe (datetimes -> isoformat, enums -> values, etc.)
    return jsonable_encoder(payload)


class WebhookAlertNotifier:
    """Implements AlertNotifier. Any transport error or non-2xx answer raises NotificationError."""

    def __init__(
        self,
        url: str,
        logger: logging.Logger,
        environment: str = "dev",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ) -> None:
        self._url = url
        self._logger = logger
        self._environment = environment
        self._client = client
        self._timeout = timeout

    async def notify(self, notification: AlertNotification) -> None:
        payload = build_payload(notification, self._environment)
        try:
            if self._client is not None:
                resp = await self._client.post(self._url, json=payload, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(f"Webhook delivery failed: {e}") from e
        self._logger.info(
            "alert_notification_sent",
            extra={
                "sink": "webhook",
                "record_id": notification.record_id,
                "severity": notification.severity.value,
            },
        )
