"""Outbound alert sink protocol. Infrastructure provides webhook, RabbitMQ and null implementations."""

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol

from medme_security.domain.models.audit import AuditSeverity


@dataclass(frozen=True)
class AlertNotification:
    """Normalized payload pushed to the monitoring / paging channel."""

    title: str
    description: str
    severity: AuditSeverity
    record_id: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "record_id": self.record_id,
            "metadata": self.metadata,
        }


class AlertNotifier(Protocol):
    async def notify(self, notification: AlertNotification) -> None:
        """Deliver one notification. Raises NotificationError on failure."""
        ...
