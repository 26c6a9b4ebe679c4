"""Add permission use case."""

import logging
from uuid import UUID

from rulegate.application.dto.permission_dto import PermissionRuleInput
from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.domain.entities import Permission
from rulegate.domain.exceptions import AddPermissionError, NotFound, RuleGateError

logger = logging.getLogger(__name__)


class AddPermissionUseCase:
    """Attach a rule to a role, refresh the role's cached rules and audit the grant."""

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
        rule: PermissionRuleInput,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        *,
        refresh: bool = True,
    ) -> Permission:
        """Add rule to role. refresh=False leaves cache refresh to the caller."""
        try:
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", str(role_id))
                permission = rule.to_permission(role_id)
                await uow.permissions.create(permission)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error adding permission to role %s", role_id)
            raise AddPermissionError(role_id) from e

        if refresh:
            await refresh_roles(self._rule_store, role_id)
        await self._audit_log.log_permission_grant(
            actor_id, role_id, permission.snapshot(), ip_address, user_agent
        )
        return permission
