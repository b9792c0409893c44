"""Audit store protocols. Application layer depends on these; infrastructure implements them."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Protocol

from medme_security.domain.models.audit import (
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
    as_utc,
)


@dataclass(frozen=True)
class AuditQuery:
    """Filter for audit-record reads. Results are always newest first."""

    actor_id: Optional[str] = None
    actions: FrozenSet[AuditAction] = field(default_factory=frozenset)
    categories: FrozenSet[AuditCategory] = field(default_factory=frozenset)
    severities: FrozenSet[AuditSeverity] = field(default_factory=frozenset)
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    limit: int = 100
    skip: int = 0

    def __post_init__(self) -> None:
        # Bounds are compared with UTC record timestamps.
        if self.since is not None:
            object.__setattr__(self, "since", as_utc(self.since))
        if self.until is not None:
            object.__setattr__(self, "until", as_utc(self.until))

    def matches(self, record: AuditRecord) -> bool:
        """In-process evaluation of the filter. limit/skip are not applied here."""
        if self.actor_id is not None and record.actor_id != self.actor_id:
            return False
        if self.actions and record.action not in self.actions:
            return False
        if self.categories and record.category not in self.categories:
            return False
        if self.severities and record.severity not in self.severities:
            return False
        if self.since is not None and record.timestamp_utc < self.since:
            return False
        if self.until is not None and record.timestamp_utc > self.until:
            return False
        return True


@dataclass(frozen=True)
class AuditCounts:
    total: int = 0
    categories: Dict[str, int] = field(default_factory=dict)
    severities: Dict[str, int] = field(default_factory=dict)
    actions: Dict[str, int] = field(default_factory=dict)


class AuditRepository(Protocol):
    """
    Persistence for immutable audit records.
    Every method raises StoreUnavailableError when the store cannot be reached.
    """

    async def save(self, record: AuditRecord) -> None:
        """Persist a new record. Must not overwrite an existing one."""
        ...

    async def get(self, record_id: str) -> Optional[AuditRecord]:
        ...

    async def find(self, query: AuditQuery) -> list[AuditRecord]:
        """Records matching query, newest first, after skip, at most limit."""
        ...

    async def count(self, query: AuditQuery) -> AuditCounts:
        """Totals per category, severity and action over every record matching query."""
        ...

    async def update_metadata(
        self,
        record_id: str,
        expected_version: int,
        metadata: Mapping[str, Any],
    ) -> Optional[AuditRecord]:
        """
        Compare-and-swap: replace metadata and bump version only if the stored
        version equals expected_version. Returns the updated record, or None
        when the record is missing or the version moved on.
        """
        ...


@dataclass(frozen=True)
class UserCounts:
    total: int = 0
    active: int = 0
    verified: int = 0
    admins: int = 0
    doctors: int = 0
    patients: int = 0


class UserDirectory(Protocol):
    """Read-only view over platform users, for metrics and display names."""

    async def counts(self) -> UserCounts:
        ...

    async def display_names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """Map of user id -> display name for the ids that are known."""
        ...
