"""DB-backed user directory. Implements UserDirectory protocol over the users table."""

from typing import Dict, Iterable

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medme_security.application.audit_repository import UserCounts
from medme_security.infrastructure.database.errors import store_errors
from medme_security.infrastructure.database.models import UserRow


def _flag(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class SqlUserDirectory:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def counts(self) -> UserCounts:
        stmt = select(
            func.count(UserRow.id),
            _flag(UserRow.status == "active"),
            _flag(UserRow.email_verified.is_(True)),
            _flag(UserRow.role == "admin"),
            _flag(UserRow.role == "doctor"),
            _flag(UserRow.role == "patient"),
        )
        with store_errors("user count"):
            result = await self._session.execute(stmt)
            total, active, verified, admins, doctors, patients = result.one()
        return UserCounts(
            total=int(total or 0),
            active=int(active),
            verified=int(verified),
            admins=int(admins),
            doctors=int(doctors),
            patients=int(patients),
        )

    async def display_names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        ids = list(user_ids)
        if not ids:
            return {}
        stmt = select(UserRow.clerk_id, UserRow.first_name, UserRow.last_name).where(
            UserRow.clerk_id.in_(ids)
        )
        with store_errors("user lookup"):
            result = await self._session.execute(stmt)
            rows = result.all()
        names: Dict[str, str] = {}
        for clerk_id, first_name, last_name in rows:
            name = " ".join(part for part in (first_name, last_name) if part)
            if name:
                names[clerk_id] = name
        return names
