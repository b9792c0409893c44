"""Security: capability-based RBAC and the typed request context. No FastAPI."""

from medme_security.security.rbac import Capability, RBACService, Role
from medme_security.security.request_context import RequestContext

__all__ = [
    "Capability",
    "RBACService",
    "RequestContext",
    "Role",
]
