"""Entity to JSON conversions for API responses."""

from typing import Any

from rulegate.application.use_cases.permission.get_permission_matrix import (
    MatrixCell,
    RoleMatrix,
)
from rulegate.domain.entities import Account, AuditLog, Permission, Role


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def permission_to_dict(permission: Permission) -> dict[str, Any]:
    return {
        "id": str(permission.id),
        "role_id": str(permission.role_id),
        "action": list(permission.action),
        "subject": list(permission.subject),
        "fields": permission.fields,
        "conditions": permission.conditions,
        "inverted": permission.inverted,
        "reason": permission.reason,
        "created_at": _iso(permission.created_at),
    }


def role_to_dict(role: Role, with_permissions: bool = True) -> dict[str, Any]:
    data = {
        "id": str(role.id),
        "name": role.name,
        "description": role.description,
        "created_at": _iso(role.created_at),
    }
    if with_permissions:
        data["permissions"] = [permission_to_dict(p) for p in role.permissions]
    return data


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": str(account.id),
        "email": account.email,
        "role": {"id": str(account.role.id), "name": account.role.name} if account.role else None,
        "attributes": account.attributes,
    }


def audit_log_to_dict(log: AuditLog) -> dict[str, Any]:
    return {
        "id": str(log.id),
        "action": str(log.action),
        "entity_type": log.entity_type,
        "entity_id": log.entity_id,
        "changes": log.changes,
        "description": log.description,
        "actor_id": str(log.actor_id) if log.actor_id else None,
        "ip_address": log.ip_address,
        "user_agent": log.user_agent,
        "metadata": log.metadata,
        "created_at": _iso(log.created_at),
    }


def _cell_to_dict(cell: MatrixCell) -> dict[str, Any]:
    return {
        "action": cell.action,
        "key": cell.key,
        "state": str(cell.state),
        "granted": cell.granted,
        "fields": cell.fields,
        "conditions": cell.conditions,
        "reason": cell.reason,
        "permission_id": str(cell.permission_id) if cell.permission_id else None,
    }


def role_matrix_to_dict(matrix: RoleMatrix) -> dict[str, Any]:
    return {
        "role": {"id": str(matrix.role.id), "name": matrix.role.name},
        "matrix": [
            {"subject": subject, "actions": [_cell_to_dict(c) for c in cells]}
            for subject, cells in matrix.rows.items()
        ],
    }
