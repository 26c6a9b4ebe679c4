"""Audit log entity - immutable record of a role/permission mutation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from rulegate.domain.value_objects import AuditAction


@dataclass(frozen=True)
class AuditLog:
    """Audit log entry. actor_id is None for system-initiated actions."""

    id: UUID
    action: AuditAction
    entity_type: str
    created_at: datetime
    entity_id: str | None = None
    changes: dict[str, Any] | None = None
    description: str | None = None
    actor_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
