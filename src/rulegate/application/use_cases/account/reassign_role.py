"""Reassign account role use case."""

import logging
from uuid import UUID

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.domain.entities import Account
from rulegate.domain.exceptions import AccountRoleError, NotFound, RuleGateError

logger = logging.getLogger(__name__)


class ReassignAccountRoleUseCase:
    """Give an account a different role (or none) and audit the change."""

    def __init__(self, unit_of_work_factory: type, audit_log: AuditRecorder) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_log = audit_log

    async def execute(
        self,
        account_id: UUID,
        role_id: UUID | None,
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Account:
        try:
            async with self._uow_factory() as uow:
                account = await uow.accounts.get_by_id(account_id)
                if not account:
                    raise NotFound("Account", str(account_id))
                new_role = None
                if role_id is not None:
                    new_role = await uow.roles.get_by_id(role_id)
                    if not new_role:
                        raise NotFound("Role", str(role_id))
                old_role_id = account.role_id
                await uow.accounts.update_role(account_id, role_id)
        except RuleGateError:
            raise
        except Exception as e:
            logger.exception("Error reassigning role of account %s", account_id)
            raise AccountRoleError(account_id) from e

        account.role = new_role
        await self._audit_log.log_role_assignment(
            actor_id, account_id, old_role_id, role_id, ip_address, user_agent
        )
        return account
