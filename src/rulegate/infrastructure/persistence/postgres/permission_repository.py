"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from rulegate.domain.entities import Permission

PERMISSION_COLUMNS = "id, role_id, action, subject, fields, conditions, inverted, reason, created_at"


def row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        role_id=r[1],
        action=r[2],
        subject=r[3],
        fields=r[4],
        conditions=r[5],
        inverted=bool(r[6]),
        reason=r[7],
        created_at=r[8],
    )


def _json_or_null(value: object) -> Jsonb | None:
    return Jsonb(value) if value is not None else None


class PostgresPermissionRepository:
    """Permission repository implementation. Rules keep insertion order via seq."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return row_to_permission(r) if r else None

    async def list_by_role(self, role_id: UUID) -> list[Permission]:
        """List permissions of a role in declaration order."""
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE role_id = %s ORDER BY seq",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [row_to_permission(r) for r in rows]

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        await self._conn.execute(
            "INSERT INTO permission (id, role_id, action, subject, fields, conditions, inverted, reason, created_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                permission.id,
                permission.role_id,
                Jsonb(permission.action),
                Jsonb(permission.subject),
                _json_or_null(permission.fields),
                _json_or_null(permission.conditions),
                permission.inverted,
                permission.reason,
                permission.created_at,
            ),
        )
        return permission

    async def update(self, permission: Permission) -> None:
        """Update permission."""
        await self._conn.execute(
            "UPDATE permission SET action=%s, subject=%s, fields=%s, conditions=%s, inverted=%s, reason=%s "
            "WHERE id=%s",
            (
                Jsonb(permission.action),
                Jsonb(permission.subject),
                _json_or_null(permission.fields),
                _json_or_null(permission.conditions),
                permission.inverted,
                permission.reason,
                permission.id,
            ),
        )

    async def delete(self, permission_id: UUID) -> None:
        """Delete permission."""
        await self._conn.execute(
            "DELETE FROM permission WHERE id = %s",
            (permission_id,),
        )
