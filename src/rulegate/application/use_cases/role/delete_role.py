"""Delete role use case."""

import logging
from uuid import UUID

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.domain.exceptions import NotFound, RoleMutationError, RuleGateError

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Delete a role with its rules and drop it from the rule cache."""

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
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        try:
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", str(role_id))
                await uow.roles.delete(role_id)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error deleting role %s", role_id)
            raise RoleMutationError("deleting role", role_id) from e

        await refresh_roles(self._rule_store, role_id)
        await self._audit_log.log_role_deletion(actor_id, role_id, role.name, ip_address, user_agent)
