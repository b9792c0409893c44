"""Pydantic schemas for admin-facing security feeds."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

from medme_security.domain.models.alert import AlertState

PresentedSeverity = Literal["low", "medium", "high", "critical"]
AlertCategoryName = Literal["authentication", "authorization", "data_breach", "suspicious_activity"]
SecurityEventType = Literal["login", "failed_login", "data_access", "permission_change", "suspicious_activity"]

T = TypeVar("T")


class FeedStatus(str, Enum):
    """Outcome of a feed read. `empty` and `unavailable` are kept apart on purpose."""

    LIVE = "live"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


class SecurityAlertView(BaseModel):
    id: str
    title: str
    description: str
    severity: PresentedSeverity
    category: AlertCategoryName
    timestamp: datetime
    state: AlertState = AlertState.OPEN
    acknowledged: bool = False
    acknowledged_by: Optional[str] = None
    acknowledged_at: Optional[datetime] = None
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    version: int = 1


class SecurityEventView(BaseModel):
    id: str
    type: SecurityEventType
    severity: PresentedSeverity
    description: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    timestamp: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    resolved: bool = True


class SecurityMetricsView(BaseModel):
    overall_score: int = Field(..., ge=0, le=100)
    authentication_health: int = Field(..., ge=0, le=100)
    data_protection: int = Field(..., ge=0, le=100)
    access_control: int = Field(..., ge=0, le=100)
    audit_compliance: int = Field(..., ge=0, le=100)
    threat_detection: int = Field(..., ge=0, le=100)


class Feed(BaseModel, Generic[T]):
    """Feed envelope. `sample` marks demonstration data substituted by the caller."""

    status: FeedStatus
    sample: bool = False
    items: List[T] = Field(default_factory=list)


class AlertFeed(Feed[SecurityAlertView]):
    pass


class EventFeed(Feed[SecurityEventView]):
    pass


class MetricsSnapshot(BaseModel):
    status: FeedStatus
    sample: bool = False
    metrics: Optional[SecurityMetricsView] = None
    generated_at: datetime


class AuditLogEntry(BaseModel):
    id: str
    action: str
    category: str
    severity: str
    description: str
    actor_id: Optional[str] = None
    timestamp: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)
    version: int = 1


class AuditLogStats(BaseModel):
    total: int = 0
    categories: Dict[str, int] = Field(default_factory=dict)
    severities: Dict[str, int] = Field(default_factory=dict)
    actions: Dict[str, int] = Field(default_factory=dict)


class AuditLogPage(BaseModel):
    status: FeedStatus
    logs: List[AuditLogEntry] = Field(default_factory=list)
    stats: AuditLogStats = Field(default_factory=AuditLogStats)
    limit: int
    skip: int


class AlertActionRequest(BaseModel):
    """Optional compare-and-swap guard for acknowledge / resolve."""

    expected_version: Optional[int] = Field(None, ge=1)
