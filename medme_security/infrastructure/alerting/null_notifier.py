"""Notifier used when no outbound sink is configured."""

import logging

from medme_security.application.notifier import AlertNotification


class NullAlertNotifier:
    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    async def notify(self, notification: AlertNotification) -> None:
        self._logger.debug(
            "alert_notification_skipped",
            extra={"record_id": notification.record_id, "severity": notification.severity.value},
        )
