"""Audit recorder port - append-only audit trail of mutations."""

from typing import Any, Protocol
from uuid import UUID

from rulegate.domain.entities import AuditLog


class AuditRecorder(Protocol):
    """Port for recording role and permission mutations.

    Implementations must not raise; a failed write returns None.
    """

    async def log_permission_grant(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        permission: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_permission_revoke(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        permission_id: UUID,
        permission: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_permission_update(
        self,
        actor_id: UUID | None,
        permission_id: UUID,
        before: dict[str, Any],
        after: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_role_assignment(
        self,
        actor_id: UUID | None,
        account_id: UUID,
        old_role_id: UUID | None,
        new_role_id: UUID | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_role_creation(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        role_name: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_role_update(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        before: dict[str, Any],
        after: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...

    async def log_role_deletion(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        role_name: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None: ...
