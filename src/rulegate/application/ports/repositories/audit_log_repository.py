"""Audit log repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from rulegate.domain.entities import AuditLog
from rulegate.domain.value_objects import AuditAction


class AuditLogRepository(Protocol):
    """Port for append-only audit log storage. Listings are newest first."""

    async def create(self, entry: AuditLog) -> AuditLog: ...

    async def list(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[AuditLog]: ...

    async def count(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> int: ...

    async def delete_older_than(self, cutoff: datetime) -> int: ...
