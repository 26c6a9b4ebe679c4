"""Ability compiler - builds per-user abilities from cached rules and resolved conditions."""

import logging
from typing import Any
from uuid import UUID

from rulegate.domain.ability import Ability, ConditionResolver
from rulegate.domain.entities import Account
from rulegate.infrastructure.permission.rule_store import RuleStore

logger = logging.getLogger(__name__)


class AbilityCompiler:
    """Compiles abilities and answers permission checks.

    Implements the PermissionChecker port. Abilities are never cached: they are
    rebuilt per call from the role's cached raw rules and the live user.
    """

    def __init__(
        self,
        rule_store: RuleStore,
        condition_resolver: ConditionResolver,
        unit_of_work_factory: type,
    ) -> None:
        self._rule_store = rule_store
        self._resolver = condition_resolver
        self._uow_factory = unit_of_work_factory

    def compile(self, user: Account) -> Ability | None:
        """Ability for user, or None if the user has no role or the role is not cached."""
        if user.role is None:
            logger.warning("User %s has no role assigned", user.id)
            return None

        raw_rules = self._rule_store.get(user.role.id)
        if raw_rules is None:
            logger.warning("Role %s not found in rule cache", user.role.id)
            return None

        return Ability(
            rule.with_conditions(self._resolver.resolve(rule.conditions, user))
            if rule.has_conditions
            else rule
            for rule in raw_rules
        )

    def check_user_ability(
        self, user: Account, action: str, subject: str, field: str | None = None
    ) -> bool:
        ability = self.compile(user)
        if ability is None:
            return False
        return ability.can(action, subject, field)

    def check_user_ability_with_resource(
        self, user: Account, action: str, resource: Any, field: str | None = None
    ) -> bool:
        """Condition-aware check against a concrete resource instance."""
        ability = self.compile(user)
        if ability is None:
            return False
        return ability.can(action, resource, field)

    async def check_permission(
        self, user_id: UUID, action: str, subject: str, field: str | None = None
    ) -> bool:
        """Check by account id; unknown accounts are denied."""
        async with self._uow_factory() as uow:
            user = await uow.accounts.get_by_id(user_id)
        if user is None:
            logger.warning("Permission check for unknown account %s", user_id)
            return False
        return self.check_user_ability(user, action, subject, field)

    async def check_permission_with_resource(
        self, user: Account, action: str, resource: Any, field: str | None = None
    ) -> bool:
        return self.check_user_ability_with_resource(user, action, resource, field)

    async def invalidate_role(self, role_id: UUID) -> None:
        await self._rule_store.invalidate(role_id)

    def clear_cache(self) -> None:
        self._rule_store.clear()
