"""Audit log service - append-only record of role and permission mutations."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from rulegate.application.dto.audit_dto import AuditEntryInput, AuditLogFilter, Page
from rulegate.domain.entities import AuditLog
from rulegate.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class AuditLogService:
    """Records and queries audit entries.

    record() runs in its own unit of work and never raises, so audit storage
    problems cannot block or roll back the mutation being audited.
    """

    def __init__(self, unit_of_work_factory: type, retention_days: int = 90) -> None:
        self._uow_factory = unit_of_work_factory
        self._retention_days = retention_days

    async def record(self, entry: AuditEntryInput) -> AuditLog | None:
        try:
            log = AuditLog(
                id=uuid4(),
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                changes=entry.changes,
                description=entry.description,
                actor_id=entry.actor_id,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                metadata=dict(entry.metadata),
                created_at=datetime.now(UTC),
            )
            async with self._uow_factory() as uow:
                saved = await uow.audit_logs.create(log)
        except Exception:
            logger.exception("Failed to record audit action %s on %s", entry.action, entry.entity_type)
            return None

        logger.info(
            "Audit: %s performed %s on %s%s",
            entry.actor_id or "system",
            entry.action,
            entry.entity_type,
            f" ({entry.entity_id})" if entry.entity_id else "",
        )
        return saved

    async def log_permission_grant(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        permission: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.GRANT_PERMISSION,
                entity_type="Permission",
                entity_id=str(role_id),
                after=permission,
                description=(
                    f"Granted permission: {permission.get('action')} on "
                    f"{permission.get('subject')} to role {role_id}"
                ),
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def log_permission_revoke(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        permission_id: UUID,
        permission: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.REVOKE_PERMISSION,
                entity_type="Permission",
                entity_id=str(permission_id),
                before=permission,
                description=(
                    f"Revoked permission: {permission.get('action')} on "
                    f"{permission.get('subject')} from role {role_id}"
                ),
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
                metadata={"role_id": str(role_id)},
            )
        )

    async def log_permission_update(
        self,
        actor_id: UUID | None,
        permission_id: UUID,
        before: dict[str, Any],
        after: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.UPDATE_PERMISSION,
                entity_type="Permission",
                entity_id=str(permission_id),
                before=before,
                after=after,
                description=f"Updated permission {permission_id}",
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def log_role_assignment(
        self,
        actor_id: UUID | None,
        account_id: UUID,
        old_role_id: UUID | None,
        new_role_id: UUID | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        old, new = (str(r) if r else None for r in (old_role_id, new_role_id))
        return await self.record(
            AuditEntryInput(
                action=AuditAction.UPDATE_ACCOUNT_ROLE,
                entity_type="Account",
                entity_id=str(account_id),
                before={"role_id": old},
                after={"role_id": new},
                description=f"Changed role for account {account_id} from {old} to {new}",
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def log_role_creation(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        role_name: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.CREATE_ROLE,
                entity_type="Role",
                entity_id=str(role_id),
                after={"name": role_name},
                description=f"Created role: {role_name}",
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def log_role_update(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        before: dict[str, Any],
        after: dict[str, Any],
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.UPDATE_ROLE,
                entity_type="Role",
                entity_id=str(role_id),
                before=before,
                after=after,
                description=f"Updated role {role_id}",
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def log_role_deletion(
        self,
        actor_id: UUID | None,
        role_id: UUID,
        role_name: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog | None:
        return await self.record(
            AuditEntryInput(
                action=AuditAction.DELETE_ROLE,
                entity_type="Role",
                entity_id=str(role_id),
                before={"name": role_name},
                description=f"Deleted role: {role_name}",
                actor_id=actor_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    async def list_for_entity(self, entity_type: str, entity_id: str) -> list[AuditLog]:
        async with self._uow_factory() as uow:
            return await uow.audit_logs.list(entity_type=entity_type, entity_id=str(entity_id))

    async def list_by_actor(self, actor_id: UUID) -> list[AuditLog]:
        async with self._uow_factory() as uow:
            return await uow.audit_logs.list(actor_id=actor_id)

    async def list_by_action(self, action: AuditAction) -> list[AuditLog]:
        async with self._uow_factory() as uow:
            return await uow.audit_logs.list(action=action)

    async def paginate(
        self, page: int = 1, limit: int = 50, filters: AuditLogFilter | None = None
    ) -> Page[AuditLog]:
        """Page of entries, newest first. page is 1-based."""
        page = max(page, 1)
        limit = max(limit, 1)
        kwargs = (filters or AuditLogFilter()).as_kwargs()
        async with self._uow_factory() as uow:
            total = await uow.audit_logs.count(**kwargs)
            results = await uow.audit_logs.list(**kwargs, offset=(page - 1) * limit, limit=limit)
        return Page(results=results, total=total, page=page, limit=limit)

    async def delete_older_than(self, days: int | None = None) -> int:
        """Delete entries older than days (default: configured retention). Returns count."""
        days = self._retention_days if days is None else days
        cutoff = datetime.now(UTC) - timedelta(days=days)
        async with self._uow_factory() as uow:
            deleted = await uow.audit_logs.delete_older_than(cutoff)
        logger.info("Deleted %d audit logs older than %d days", deleted, days)
        return deleted
