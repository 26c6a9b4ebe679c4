"""Permission rule DTOs."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from rulegate.domain.entities import Permission
from rulegate.domain.exceptions import ValidationError
from rulegate.domain.value_objects import Action, Subject

_UPDATABLE = ("action", "subject", "fields", "conditions", "inverted", "reason")


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _validate_members(name: str, values: list[str], enum: type) -> list[str]:
    if not values:
        raise ValidationError(f"Permission {name} must not be empty")
    allowed = {member.value for member in enum}
    unknown = [v for v in values if v not in allowed]
    if unknown:
        raise ValidationError(f"Unknown {name}: {', '.join(map(str, unknown))}")
    return [enum(v).value for v in values]


def _validate_fields(fields: Any) -> list[str] | None:
    if fields is None:
        return None
    if isinstance(fields, str) or not all(isinstance(f, str) for f in fields):
        raise ValidationError("Permission fields must be a list of strings")
    return list(fields)


def _validate_conditions(conditions: Any) -> dict[str, Any] | None:
    if conditions is None:
        return None
    if isinstance(conditions, str):
        try:
            conditions = json.loads(conditions)
        except ValueError as e:
            raise ValidationError("Permission conditions must be valid JSON") from e
    if not isinstance(conditions, Mapping):
        raise ValidationError("Permission conditions must be an object")
    return dict(conditions)


@dataclass
class PermissionRuleInput:
    """Validated rule to attach to a role."""

    action: list[str]
    subject: list[str]
    fields: list[str] | None = None
    conditions: dict[str, Any] | None = None
    inverted: bool = False
    reason: str | None = None

    def __post_init__(self) -> None:
        self.action = _validate_members("action", _as_list(self.action), Action)
        self.subject = _validate_members("subject", _as_list(self.subject), Subject)
        self.fields = _validate_fields(self.fields)
        self.conditions = _validate_conditions(self.conditions)
        self.inverted = bool(self.inverted)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PermissionRuleInput":
        try:
            return cls(
                action=data["action"],
                subject=data["subject"],
                fields=data.get("fields"),
                conditions=data.get("conditions"),
                inverted=data.get("inverted", False),
                reason=data.get("reason"),
            )
        except KeyError as e:
            raise ValidationError(f"Missing required field: {e}") from e
        except TypeError as e:
            raise ValidationError("Permission rule must be an object") from e

    def to_permission(self, role_id: UUID) -> Permission:
        return Permission(
            id=uuid4(),
            role_id=role_id,
            action=list(self.action),
            subject=list(self.subject),
            fields=self.fields,
            conditions=self.conditions,
            inverted=self.inverted,
            reason=self.reason,
            created_at=datetime.now(UTC),
        )


@dataclass
class PermissionUpdateInput:
    """Partial rule update - only keys present in changes are applied."""

    changes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = set(self.changes) - set(_UPDATABLE)
        if unknown:
            raise ValidationError(f"Cannot update: {', '.join(sorted(unknown))}")
        if "action" in self.changes:
            self.changes["action"] = _validate_members("action", _as_list(self.changes["action"]), Action)
        if "subject" in self.changes:
            self.changes["subject"] = _validate_members(
                "subject", _as_list(self.changes["subject"]), Subject
            )
        if "fields" in self.changes:
            self.changes["fields"] = _validate_fields(self.changes["fields"])
        if "conditions" in self.changes:
            self.changes["conditions"] = _validate_conditions(self.changes["conditions"])
        if "inverted" in self.changes:
            self.changes["inverted"] = bool(self.changes["inverted"])

    def apply(self, permission: Permission) -> None:
        for key, value in self.changes.items():
            setattr(permission, key, value)
