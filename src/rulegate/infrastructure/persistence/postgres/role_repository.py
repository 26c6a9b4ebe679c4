"""PostgreSQL role repository implementation."""

from collections.abc import Sequence
from uuid import UUID

from psycopg import AsyncConnection

from rulegate.domain.entities import Role
from rulegate.infrastructure.persistence.postgres.permission_repository import (
    PERMISSION_COLUMNS,
    row_to_permission,
)


class PostgresRoleRepository:
    """Role repository implementation. Roles are loaded with their permissions."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        roles = await self.list_with_permissions([role_id])
        return roles[0] if roles else None

    async def get_by_name(self, name: str) -> Role | None:
        """Get role by name."""
        cur = await self._conn.execute("SELECT id FROM role WHERE name = %s", (name,))
        r = await cur.fetchone()
        if not r:
            return None
        return await self.get_by_id(r[0])

    async def list_all(self) -> list[Role]:
        """List all roles."""
        return await self.list_with_permissions()

    async def list_with_permissions(self, role_ids: Sequence[UUID] | None = None) -> list[Role]:
        """List roles (optionally only role_ids) with their ordered permissions."""
        if role_ids is None:
            cur = await self._conn.execute(
                "SELECT id, name, description, created_at FROM role ORDER BY name"
            )
        else:
            cur = await self._conn.execute(
                "SELECT id, name, description, created_at FROM role WHERE id = ANY(%s) ORDER BY name",
                (list(role_ids),),
            )
        roles = [
            Role(id=r[0], name=r[1], description=r[2], created_at=r[3])
            for r in await cur.fetchall()
        ]
        if not roles:
            return roles

        by_id = {role.id: role for role in roles}
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE role_id = ANY(%s) ORDER BY seq",
            (list(by_id),),
        )
        for r in await cur.fetchall():
            by_id[r[1]].permissions.append(row_to_permission(r))
        return roles

    async def create(self, role: Role) -> Role:
        """Create role (without permissions)."""
        await self._conn.execute(
            "INSERT INTO role (id, name, description, created_at) VALUES (%s, %s, %s, %s)",
            (role.id, role.name, role.description, role.created_at),
        )
        return role

    async def update(self, role: Role) -> None:
        """Update role name and description."""
        await self._conn.execute(
            "UPDATE role SET name=%s, description=%s WHERE id=%s",
            (role.name, role.description, role.id),
        )

    async def delete(self, role_id: UUID) -> None:
        """Delete role; its permissions are removed by cascade."""
        await self._conn.execute("DELETE FROM role WHERE id = %s", (role_id,))
