# medme_security/infrastructure/database/models.py

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from medme_security.infrastructure.database.session import Base

MetadataType = JSON().with_variant(JSONB, "postgresql")


class AuditLogRow(Base):
    """Append-only audit record. Only metadata and version are ever updated."""

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True)
    action = Column(String(64), nullable=False, index=True)
    category = Column(String(32), nullable=False)
    severity = Column(String(16), nullable=False)
    description = Column(Text, nullable=False)
    actor_id = Column(String, nullable=True, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    metadata_ = Column("metadata", MetadataType, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_audit_logs_severity_timestamp", "severity", "timestamp"),
        Index("ix_audit_logs_category_timestamp", "category", "timestamp"),
    )


class UserRow(Base):
    """Platform users as seen by the security subsystem (read-only here)."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    clerk_id = Column(String, nullable=False, unique=True, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    role = Column(String(16), nullable=False, default="patient")
    status = Column(String(16), nullable=False, default="active")
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
