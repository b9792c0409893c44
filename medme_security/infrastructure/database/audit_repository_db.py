"""DB-backed audit repository. Implements AuditRepository protocol over the audit_logs table."""

from typing import Any, Dict, Mapping, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from medme_security.application.audit_repository import AuditCounts, AuditQuery
from medme_security.domain.models.audit import (
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
    as_utc,
)
from medme_security.infrastructure.database.errors import store_errors
from medme_security.infrastructure.database.models import AuditLogRow


def _to_record(row: AuditLogRow) -> AuditRecord:
    return AuditRecord(
        record_id=row.id,
        action=AuditAction(row.action),
        category=AuditCategory(row.category),
        severity=AuditSeverity(row.severity),
        description=row.description,
        timestamp_utc=as_utc(row.timestamp),
        actor_id=row.actor_id,
        metadata=dict(row.metadata_ or {}),
        version=row.version,
    )


def _filters(query: AuditQuery) -> list:
    clauses = []
    if query.actor_id is not None:
        clauses.append(AuditLogRow.actor_id == query.actor_id)
    if query.actions:
        clauses.append(AuditLogRow.action.in_([a.value for a in query.actions]))
    if query.categories:
        clauses.append(AuditLogRow.category.in_([c.value for c in query.categories]))
    if query.severities:
        clauses.append(AuditLogRow.severity.in_([s.value for s in query.severities]))
    if query.since is not None:
        clauses.append(AuditLogRow.timestamp >= query.since)
    if query.until is not None:
        clauses.append(AuditLogRow.timestamp <= query.until)
    return clauses


class SqlAuditRepository:
    """Persists audit records to PostgreSQL. Metadata updates are compare-and-swap on version."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, record: AuditRecord) -> None:
        row = AuditLogRow(
            id=record.record_id,
            action=record.action.value,
            category=record.category.value,
            severity=record.severity.value,
            description=record.description,
            actor_id=record.actor_id,
            timestamp=record.timestamp_utc,
            metadata_=dict(record.metadata),
            version=record.version,
        )
        with store_errors("save"):
            try:
                self._session.add(row)
                await self._session.commit()
            except Exception:
                await self._session.rollback()
                raise

    async def get(self, record_id: str) -> Optional[AuditRecord]:
        with store_errors("get"):
            result = await self._session.execute(
                select(AuditLogRow).where(AuditLogRow.id == record_id)
            )
            row = result.scalar_one_or_none()
        return _to_record(row) if row is not None else None

    async def find(self, query: AuditQuery) -> list[AuditRecord]:
        stmt = (
            select(AuditLogRow)
            .where(*_filters(query))
            .order_by(AuditLogRow.timestamp.desc())
            .offset(query.skip)
            .limit(query.limit)
        )
        with store_errors("find"):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [_to_record(row) for row in rows]

    async def count(self, query: AuditQuery) -> AuditCounts:
        clauses = _filters(query)
        grouped: Dict[str, Dict[str, int]] = {}
        with store_errors("count"):
            total = await self._session.scalar(
                select(func.count()).select_from(AuditLogRow).where(*clauses)
            )
            for name, column in (
                ("categories", AuditLogRow.category),
                ("severities", AuditLogRow.severity),
                ("actions", AuditLogRow.action),
            ):
                result = await self._session.execute(
                    select(column, func.count()).where(*clauses).group_by(column)
                )
                grouped[name] = {value: n for value, n in result.all()}
        return AuditCounts(total=total or 0, **grouped)

    async def update_metadata(
        self,
        record_id: str,
        expected_version: int,
        metadata: Mapping[str, Any],
    ) -> Optional[AuditRecord]:
        stmt = (
            update(AuditLogRow)
            .where(AuditLogRow.id == record_id, AuditLogRow.version == expected_version)
            .values(metadata_=dict(metadata), version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        with store_errors("update"):
            try:
                result = await self._session.execute(stmt)
                if result.rowcount != 1:
                    await self._session.rollback()
                    return None
                await self._session.commit()
            except Exception:
                await self._session.rollback()
                raise
        return await self.get(record_id)
