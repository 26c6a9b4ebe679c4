"""Create role use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.domain.entities import Role
from rulegate.domain.exceptions import RoleMutationError, RuleGateError, ValidationError

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Create an empty role and audit it."""

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
        name: str,
        description: str | None = None,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Role:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Role name is required")
        if description is not None and not isinstance(description, str):
            raise ValidationError("Role description must be a string")
        name = name.strip()

        role = Role(id=uuid4(), name=name, description=description, created_at=datetime.now(UTC))
        try:
            async with self._uow_factory() as uow:
                if await uow.roles.get_by_name(name):
                    raise ValidationError(f"Role {name} already exists")
                await uow.roles.create(role)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error creating role %s", name)
            raise RoleMutationError("creating role", name) from e

        await refresh_roles(self._rule_store, role.id)
        await self._audit_log.log_role_creation(actor_id, role.id, role.name, ip_address, user_agent)
        return role
