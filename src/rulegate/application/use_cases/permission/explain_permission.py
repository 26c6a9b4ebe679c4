"""Explain permission use case - test what a user may do and why."""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from rulegate.application.ports import PermissionChecker
from rulegate.domain.ability import ResourceInstance
from rulegate.domain.entities import Account

logger = logging.getLogger(__name__)


@dataclass
class PermissionExplanation:
    """Result of a permission test."""

    user_id: UUID
    action: str
    subject: str
    allowed: bool
    reason: str
    field: str | None = None
    user: Account | None = None
    permission_id: UUID | None = None
    rule_reason: str | None = None


class ExplainPermissionUseCase:
    """Evaluate one action/subject/field (optionally against resource data) for a user."""

    def __init__(self, unit_of_work_factory: type, permission_checker: PermissionChecker) -> None:
        self._uow_factory = unit_of_work_factory
        self._checker = permission_checker

    async def execute(
        self,
        user_id: UUID,
        action: str,
        subject: str,
        field: str | None = None,
        resource_data: dict[str, Any] | None = None,
    ) -> PermissionExplanation:
        async with self._uow_factory() as uow:
            user = await uow.accounts.get_by_id(user_id)

        explanation = PermissionExplanation(
            user_id=user_id, action=action, subject=subject, field=field, allowed=False, reason=""
        )
        if user is None:
            explanation.reason = "User not found"
            return explanation
        explanation.user = user

        ability = self._checker.compile(user)
        if ability is None:
            explanation.reason = "User has no role or role has no cached rules"
            return explanation

        target: Any = subject
        if resource_data is not None:
            target = ResourceInstance(subject=subject, attributes=resource_data)
        decision = ability.decide(action, target, field)

        explanation.allowed = decision.allowed
        explanation.rule_reason = decision.reason
        explanation.permission_id = decision.rule.permission_id if decision.rule else None
        qualifier = " with resource conditions" if resource_data is not None else ""
        if decision.allowed:
            explanation.reason = f"Permission granted{qualifier}"
        elif decision.rule is not None:
            explanation.reason = f"Permission forbidden{qualifier}"
        else:
            explanation.reason = f"Permission denied{qualifier}"
        logger.debug("Explained %s on %s for %s: %s", action, subject, user_id, explanation.reason)
        return explanation
