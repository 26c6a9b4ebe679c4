"""Rule store - in-memory cache of raw (unresolved) rules per role."""

import json
import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from rulegate.domain.ability import Rule
from rulegate.domain.entities import Permission
from rulegate.domain.exceptions import RuleStoreInitError

logger = logging.getLogger(__name__)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _decode(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def to_rule(permission: Permission) -> Rule:
    """Normalize a stored permission row into a rule."""
    fields = _decode(permission.fields)
    conditions = _decode(permission.conditions)
    return Rule(
        actions=_as_tuple(permission.action),
        subjects=_as_tuple(permission.subject),
        fields=_as_tuple(fields) if fields is not None else None,
        conditions=conditions or None,
        inverted=bool(permission.inverted),
        reason=permission.reason,
        permission_id=permission.id,
    )


class RuleStore:
    """Maps role id to its ordered raw rules.

    Conditions are stored unresolved; they are resolved per user when an
    ability is compiled. Each role entry is replaced with a single assignment,
    so concurrent readers see either the old or the new rule tuple.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory
        self._rules: dict[UUID, tuple[Rule, ...]] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def get(self, role_id: UUID) -> tuple[Rule, ...] | None:
        return self._rules.get(role_id)

    def role_ids(self) -> list[UUID]:
        return list(self._rules)

    async def load(self, role_ids: Sequence[UUID] | None = None) -> None:
        """Load all roles, or only role_ids, from the role/permission read model."""
        try:
            async with self._uow_factory() as uow:
                roles = await uow.roles.list_with_permissions(role_ids)
            loaded = {role.id: tuple(to_rule(p) for p in role.permissions) for role in roles}
        except Exception as e:
            scope = "all roles" if role_ids is None else f"roles {', '.join(map(str, role_ids))}"
            logger.exception("Error loading rules for %s", scope)
            raise RuleStoreInitError("Error initializing role abilities") from e

        if role_ids is None:
            self._rules = loaded
            self._initialized = True
            logger.info("Initialized rules for %d roles", len(loaded))
            return

        for role_id in role_ids:
            if role_id in loaded:
                self._rules[role_id] = loaded[role_id]
            else:
                self._rules.pop(role_id, None)
        logger.info("Reloaded rules for %d roles", len(role_ids))

    async def invalidate(self, role_id: UUID) -> None:
        """Reload a single role's rules (drops the entry if the role is gone).

        A failed reload leaves the previous entry in place and raises
        RuleStoreInitError.
        """
        await self.load([role_id])

    def clear(self) -> None:
        """Empty the store. Every check fails closed until the next load()."""
        self._rules = {}
        self._initialized = False
        logger.info("Rule cache cleared")
