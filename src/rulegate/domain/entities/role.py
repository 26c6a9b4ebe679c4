"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from rulegate.domain.entities.permission import Permission


@dataclass
class Role:
    """Role - named, ordered set of permission rules."""

    id: UUID
    name: str
    description: str | None = None
    permissions: list[Permission] = field(default_factory=list)
    created_at: datetime | None = None

    def snapshot(self) -> dict:
        """Role fields for audit before/after snapshots (rules excluded)."""
        return {"id": str(self.id), "name": self.name, "description": self.description}
