# medme_security/infrastructure/alerting/rabbitmq_notifier.py

import json
import logging
from typing import Optional

import aio_pika
from aio_pika.exceptions import AMQPException

from medme_security.application.exceptions import NotificationError
from medme_security.application.notifier import AlertNotification
from medme_security.config.settings import get_settings

ROUTING_KEY_PREFIX = "security.alert"


def routing_key(notification: AlertNotification) -> str:
    return f"{ROUTING_KEY_PREFIX}.{notification.severity.value.lower()}"


class RabbitMQAlertNotifier:
    """Publishes alerts to a durable topic exchange, routed by severity."""

    def __init__(
        self,
        logger: logging.Logger,
        exchange_name: Optional[str] = None,
        url: Optional[str] = None,
    ):
        settings = get_settings()
        self._logger = logger
        self._exchange_name = exchange_name or settings.alert_exchange
        self._url = url or settings.rabbitmq_url
        self._connection = None
        self._channel = None

    async def connect(self):
        self._connection = await aio_pika.connect_robust(self._url)
        self._channel = await self._connection.channel()

    async def notify(self, notification: AlertNotification) -> None:
        try:
            if not self._channel:
                await self.connect()

            exchange = await self._channel.declare_exchange(
                self._exchange_name,
                aio_pika.ExchangeType.TOPIC,
                durable=True,
            )

            msg = aio_pika.Message(
                body=json.dumps(notification.to_dict(), default=str).encode(),
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                headers={"record_id": notification.record_id},
            )

            await exchange.publish(msg, routing_key=routing_key(notification))
        except (AMQPException, OSError) as e:
            raise NotificationError(f"Alert publish failed: {e}") from e
        self._logger.info(
            "alert_notification_sent",
            extra={
                "sink": "rabbitmq",
                "record_id": notification.record_id,
                "routing_key": routing_key(notification),
            },
        )

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
