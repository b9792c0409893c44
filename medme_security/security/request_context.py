"""Structured per-request context, built once at the HTTP boundary and passed explicitly."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from medme_security.security.rbac import Role


@dataclass(frozen=True)
class RequestContext:
    """
    Who is calling and from where. actor_id and role come from the identity
    provider; the rest is request metadata copied onto audit records.
    """

    actor_id: Optional[str] = None
    role: Optional[Role] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    endpoint: Optional[str] = None
    method: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.actor_id)

    def audit_metadata(self) -> Dict[str, Any]:
        """Request fields recorded on every audit entry; unset fields are left out."""
        fields = {
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "endpoint": self.endpoint,
            "method": self.method,
            "correlation_id": self.correlation_id,
        }
        return {k: v for k, v in fields.items() if v is not None}


SYSTEM_CONTEXT = RequestContext()
