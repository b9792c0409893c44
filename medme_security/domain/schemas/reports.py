"""Pydantic schemas for inbound security reports and their outcome."""

import json
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from medme_security.domain.models.audit import AuditSeverity


def _json_serializable(v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if v is None:
        return v
    try:
        json.dumps(v)
    except (TypeError, ValueError) as e:
        raise ValueError("metadata must be JSON-serializable") from e
    return v


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SecurityAlertReport(BaseModel):
    """Generic security alert raised by a client or an internal monitor."""

    type: Optional[str] = Field(None, description="Alert type tag, e.g. UNAUTHORIZED_ACCESS")
    message: Optional[str] = None
    timestamp: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def metadata_must_be_json_serializable(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Ensure metadata is JSON-serializable."""
        return _json_serializable(v)


class CspViolation(BaseModel):
    """Violation detail as posted by the browser-side reporter (camelCase accepted)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    blocked_uri: Optional[str] = Field(None, alias="blockedURI")
    violated_directive: Optional[str] = Field(None, alias="violatedDirective")
    original_policy: Optional[str] = Field(None, alias="originalPolicy")
    source_file: Optional[str] = Field(None, alias="sourceFile")
    line_number: Optional[int] = Field(None, alias="lineNumber")
    column_number: Optional[int] = Field(None, alias="columnNumber")


class CspViolationReport(BaseModel):
    type: Optional[str] = None
    violation: Optional[CspViolation] = None
    timestamp: Optional[str] = None


class SuspiciousActivityReport(BaseModel):
    type: Optional[str] = Field(None, description="RAPID_CLICKING, UNUSUAL_NAVIGATION, AUTOMATED_BEHAVIOR, ...")
    count: int = 0
    timestamp: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def metadata_must_be_json_serializable(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Ensure metadata is JSON-serializable."""
        return _json_serializable(v)


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------

class ReportAction(str, Enum):
    LOGGED = "LOGGED"
    IGNORED = "IGNORED"
    LOG = "LOG"
    MONITOR = "MONITOR"


class ReportOutcome(BaseModel):
    """Definite classification result returned for every accepted report."""

    success: bool = True
    message: str
    severity: AuditSeverity
    action: ReportAction
    record_id: Optional[str] = None
    suspicion_score: Optional[int] = None
    escalated: bool = False
    incidents: list[str] = Field(default_factory=list)
