"""Role repository port."""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from rulegate.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence. Roles are returned with their ordered permissions."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def list_all(self) -> list[Role]: ...

    async def list_with_permissions(self, role_ids: Sequence[UUID] | None = None) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def delete(self, role_id: UUID) -> None: ...
