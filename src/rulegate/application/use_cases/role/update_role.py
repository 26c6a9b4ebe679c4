"""Update role use case."""

import logging
from uuid import UUID

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.domain.entities import Role
from rulegate.domain.exceptions import (
    NotFound,
    RoleMutationError,
    RuleGateError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class UpdateRoleUseCase:
    """Rename or re-describe a role. Rules are untouched, so the cache is too."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditRecorder) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_log = audit_log

    async def execute(
        self,
        role_id: UUID,
        name: str | None = None,
        description: str | None = None,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Role:
        if name is not None and not isinstance(name, str):
            raise ValidationError("Role name must be a string")
        if description is not None and not isinstance(description, str):
            raise ValidationError("Role description must be a string")
        try:
            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise NotFound("Role", str(role_id))
                before = role.snapshot()
                if name is not None:
                    name = name.strip()
                    if not name:
                        raise ValidationError("Role name is required")
                    existing = await uow.roles.get_by_name(name)
                    if existing and existing.id != role_id:
                        raise ValidationError(f"Role {name} already exists")
                    role.name = name
                if description is not None:
                    role.description = description
                await uow.roles.update(role)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error updating role %s", role_id)
            raise RoleMutationError("updating role", role_id) from e

        await self._audit_log.log_role_update(
            actor_id, role_id, before, role.snapshot(), ip_address, user_agent
        )
        return role
