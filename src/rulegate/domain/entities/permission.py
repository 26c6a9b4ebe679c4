"""Permission entity - one grant or forbid rule attached to a role."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass
class Permission:
    """Permission rule - action(s) on subject(s), optionally scoped by fields and conditions.

    inverted=True turns the rule into a forbid. reason is informational and is
    surfaced in decision explanations.
    """

    id: UUID
    role_id: UUID
    action: list[str]
    subject: list[str]
    fields: list[str] | None = None
    conditions: dict[str, Any] | None = None
    inverted: bool = False
    reason: str | None = None
    created_at: datetime | None = field(default=None, compare=False)

    def snapshot(self) -> dict[str, Any]:
        """Rule fields for audit before/after snapshots."""
        return {
            "id": str(self.id),
            "action": list(self.action),
            "subject": list(self.subject),
            "fields": list(self.fields) if self.fields is not None else None,
            "conditions": self.conditions,
            "inverted": self.inverted,
            "reason": self.reason,
        }
