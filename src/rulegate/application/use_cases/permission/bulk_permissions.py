"""Bulk add/remove permission use cases."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from rulegate.application.dto.permission_dto import PermissionRuleInput
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.use_cases.cache import refresh_roles
from rulegate.application.use_cases.permission.add_permission import AddPermissionUseCase
from rulegate.application.use_cases.permission.remove_permission import (
    RemovePermissionUseCase,
)
from rulegate.domain.exceptions import RuleGateError

logger = logging.getLogger(__name__)


@dataclass
class BulkItemResult:
    """Outcome for one item of a bulk operation."""

    item: Any
    success: bool
    permission_id: UUID | None = None
    error: str | None = None


@dataclass
class BulkResult:
    """Outcome of a bulk operation on one role."""

    role_id: UUID
    results: list[BulkItemResult] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.successful


class BulkAddPermissionsUseCase:
    """Add several rules to a role; each item succeeds or fails on its own."""

    def __init__(self, add_permission: AddPermissionUseCase, rule_store: RuleCache) -> None:
        self._add = add_permission
        self._rule_store = rule_store

    async def execute(
        self,
        role_id: UUID,
        rules: Sequence[Mapping[str, Any]],
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> BulkResult:
        result = BulkResult(role_id=role_id)
        for raw in rules:
            try:
                rule = PermissionRuleInput.from_mapping(raw)
                permission = await self._add.execute(
                    role_id, rule, actor_id, ip_address, user_agent, refresh=False
                )
            except RuleGateError as e:
                logger.error("Error adding permission to role %s: %s", role_id, e)
                result.results.append(BulkItemResult(item=raw, success=False, error=str(e)))
                continue
            result.results.append(
                BulkItemResult(item=raw, success=True, permission_id=permission.id)
            )

        await refresh_roles(self._rule_store, role_id)
        return result


class BulkRemovePermissionsUseCase:
    """Remove several rules from a role; each item succeeds or fails on its own."""

    def __init__(self, remove_permission: RemovePermissionUseCase, rule_store: RuleCache) -> None:
        self._remove = remove_permission
        self._rule_store = rule_store

    async def execute(
        self,
        role_id: UUID,
        permission_ids: Sequence[UUID],
        actor_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> BulkResult:
        result = BulkResult(role_id=role_id)
        for permission_id in permission_ids:
            try:
                await self._remove.execute(
                    role_id, permission_id, actor_id, ip_address, user_agent, refresh=False
                )
            except RuleGateError as e:
                logger.error(
                    "Error removing permission %s from role %s: %s", permission_id, role_id, e
                )
                result.results.append(
                    BulkItemResult(item=str(permission_id), success=False, error=str(e))
                )
                continue
            result.results.append(
                BulkItemResult(item=str(permission_id), success=True, permission_id=permission_id)
            )

        await refresh_roles(self._rule_store, role_id)
        return result
