"""Audit log DTOs."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from uuid import UUID

from rulegate.domain.value_objects import AuditAction

T = TypeVar("T")


@dataclass
class AuditEntryInput:
    """Audit entry to record. actor_id None means the system acted."""

    action: AuditAction
    entity_type: str
    entity_id: str | None = None
    before: Any = None
    after: Any = None
    description: str | None = None
    actor_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def changes(self) -> dict[str, Any] | None:
        changes = {}
        if self.before is not None:
            changes["before"] = self.before
        if self.after is not None:
            changes["after"] = self.after
        return changes or None


@dataclass
class AuditLogFilter:
    """Filters for paginated audit log listing."""

    action: AuditAction | None = None
    actor_id: UUID | None = None
    entity_type: str | None = None
    entity_id: str | None = None

    def as_kwargs(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "actor_id": self.actor_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
        }


@dataclass
class Page(Generic[T]):
    """One page of results."""

    results: list[T]
    total: int
    page: int
    limit: int

    @property
    def page_total(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
