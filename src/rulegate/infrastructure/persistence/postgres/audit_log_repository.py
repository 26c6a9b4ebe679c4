"""PostgreSQL audit log repository implementation."""

from datetime import datetime
from typing import Any
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from rulegate.domain.entities import AuditLog
from rulegate.domain.value_objects import AuditAction

_COLUMNS = (
    "id, action, entity_type, entity_id, changes, description, actor_id, "
    "ip_address, user_agent, metadata, created_at"
)


def _row_to_audit_log(r: tuple) -> AuditLog:
    return AuditLog(
        id=r[0],
        action=AuditAction(r[1]),
        entity_type=r[2],
        entity_id=r[3],
        changes=r[4],
        description=r[5],
        actor_id=r[6],
        ip_address=r[7],
        user_agent=r[8],
        metadata=r[9] or {},
        created_at=r[10],
    )


def _where(
    action: AuditAction | None,
    actor_id: UUID | None,
    entity_type: str | None,
    entity_id: str | None,
) -> tuple[str, list[Any]]:
    clauses, params = [], []
    for column, value in (
        ("action", action),
        ("actor_id", actor_id),
        ("entity_type", entity_type),
        ("entity_id", entity_id),
    ):
        if value is not None:
            clauses.append(f"{column} = %s")
            params.append(str(value) if column == "action" else value)
    return (" WHERE " + " AND ".join(clauses) if clauses else ""), params


class PostgresAuditLogRepository:
    """Audit log repository implementation - insert, filtered reads and retention delete."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, entry: AuditLog) -> AuditLog:
        """Insert audit entry."""
        await self._conn.execute(
            f"INSERT INTO audit_log ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                entry.id,
                str(entry.action),
                entry.entity_type,
                entry.entity_id,
                Jsonb(entry.changes) if entry.changes is not None else None,
                entry.description,
                entry.actor_id,
                entry.ip_address,
                entry.user_agent,
                Jsonb(entry.metadata),
                entry.created_at,
            ),
        )
        return entry

    async def list(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[AuditLog]:
        """List entries newest first."""
        where, params = _where(action, actor_id, entity_type, entity_id)
        sql = f"SELECT {_COLUMNS} FROM audit_log{where} ORDER BY created_at DESC, id"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        if offset:
            sql += " OFFSET %s"
            params.append(offset)
        cur = await self._conn.execute(sql, params)
        rows = await cur.fetchall()
        return [_row_to_audit_log(r) for r in rows]

    async def count(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> int:
        """Count entries matching filters."""
        where, params = _where(action, actor_id, entity_type, entity_id)
        cur = await self._conn.execute(f"SELECT count(*) FROM audit_log{where}", params)
        r = await cur.fetchone()
        return r[0]

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete entries created before cutoff."""
        cur = await self._conn.execute(
            "DELETE FROM audit_log WHERE created_at < %s",
            (cutoff,),
        )
        return cur.rowcount
