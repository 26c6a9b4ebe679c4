"""Update permission use case."""

import logging
from uuid import UUID

from rulegate.application.dto.permission_dto import PermissionUpdateInput
from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.domain.entities import Permission
from rulegate.domain.exceptions import NotFound, RuleGateError, UpdatePermissionError

logger = logging.getLogger(__name__)


class UpdatePermissionUseCase:
    """Change a rule in place and audit its before/after state."""

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
        update: PermissionUpdateInput,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Permission:
        try:
            async with self._uow_factory() as uow:
                permission = await uow.permissions.get_by_id(permission_id)
                if not permission or permission.role_id != role_id:
                    raise NotFound("Permission", f"{role_id}/{permission_id}")
                before = permission.snapshot()
                update.apply(permission)
                await uow.permissions.update(permission)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error updating permission %s", permission_id)
            raise UpdatePermissionError(permission_id) from e

        await refresh_roles(self._rule_store, role_id)
        await self._audit_log.log_permission_update(
            actor_id, permission_id, before, permission.snapshot(), ip_address, user_agent
        )
        return permission
