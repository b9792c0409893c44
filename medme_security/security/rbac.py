"""Role-based access control over explicit capabilities. No FastAPI."""

from enum import Enum
from typing import FrozenSet, Mapping, Optional

from medme_security.security.exceptions import AuthenticationError, AuthorizationError


class Role(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Role from an identity-provider claim; unknown or blank -> None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Capability(str, Enum):
    SECURITY_FEED_READ = "security_feed:read"
    AUDIT_LOG_READ = "audit_log:read"
    SECURITY_ALERT_MANAGE = "security_alert:manage"


# Capability matrix:
# Role      Feed read  Audit read  Alert manage
# ADMIN     ✓          ✓           ✓
# DOCTOR    ✗          ✗           ✗
# PATIENT   ✗          ✗           ✗

_ROLE_CAPABILITIES: Mapping[Role, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.DOCTOR: frozenset(),
    Role.PATIENT: frozenset(),
}


class RBACService:
    """Check a role against a capability. Raise a typed error if it does not hold."""

    def has_capability(self, role: Optional[Role], capability: Capability) -> bool:
        if role is None:
            return False
        return capability in _ROLE_CAPABILITIES.get(role, frozenset())

    def check_capability(self, actor_id: Optional[str], role: Optional[Role], capability: Capability) -> None:
        """Raises AuthenticationError without an actor, AuthorizationError without the capability."""
        if not actor_id:
            raise AuthenticationError("Authentication required")
        if not self.has_capability(role, capability):
            role_name = role.value if role else "none"
            raise AuthorizationError(
                f"Role {role_name} does not have capability '{capability.value}'"
            )
