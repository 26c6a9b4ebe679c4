"""PostgreSQL account repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rulegate.domain.entities import Account, Role

_SELECT = (
    "SELECT a.id, a.email, a.external_id, a.attributes, r.id, r.name, r.description "
    "FROM account a LEFT JOIN role r ON r.id = a.role_id "
)


def _row_to_account(r: tuple) -> Account:
    role = Role(id=r[4], name=r[5], description=r[6]) if r[4] else None
    return Account(
        id=r[0],
        email=r[1],
        external_id=r[2],
        attributes=r[3] or {},
        role=role,
    )


class PostgresAccountRepository:
    """Account repository implementation - role joined eagerly."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, account_id: UUID) -> Account | None:
        """Get account by id."""
        cur = await self._conn.execute(_SELECT + "WHERE a.id = %s", (account_id,))
        r = await cur.fetchone()
        return _row_to_account(r) if r else None

    async def get_by_external_id(self, external_id: str) -> Account | None:
        """Get account by OIDC subject."""
        cur = await self._conn.execute(_SELECT + "WHERE a.external_id = %s", (external_id,))
        r = await cur.fetchone()
        return _row_to_account(r) if r else None

    async def update_role(self, account_id: UUID, role_id: UUID | None) -> None:
        """Assign role to account."""
        await self._conn.execute(
            "UPDATE account SET role_id=%s WHERE id=%s",
            (role_id, account_id),
        )
