"""Remove permission use case."""

import logging
from uuid import UUID

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.domain.entities import Permission
from rulegate.domain.exceptions import NotFound, RemovePermissionError, RuleGateError

logger = logging.getLogger(__name__)


class RemovePermissionUseCase:
    """Detach a rule from a role, refresh the role's cached rules and audit the revoke."""

    def __init__(
        self,
        unit_of_work_factory: type,
        rule_store: RuleCache,
        audit_log: AuditRecorder,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._rule_store = rule_store
        self._audit_log = audit_log

    async def execute(
        self,
        role_id: UUID,
        permission_id: UUID,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        *,
        refresh: bool = True,
    ) -> Permission:
        """Remove permission_id from role_id. Returns the removed rule."""
        try:
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", str(role_id))
                removed = next(
                    (p for p in role.permissions if str(p.id) == str(permission_id)), None
                )
                if not removed:
                    raise NotFound("Permission", f"{role_id}/{permission_id}")
                await uow.permissions.delete(removed.id)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error removing permission %s from role %s", permission_id, role_id)
            raise RemovePermissionError(role_id, permission_id) from e

        if refresh:
            await refresh_roles(self._rule_store, role_id)
        await self._audit_log.log_permission_revoke(
            actor_id, role_id, removed.id, removed.snapshot(), ip_address, user_agent
        )
        return removed
