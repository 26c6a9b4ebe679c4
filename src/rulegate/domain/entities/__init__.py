"""Domain entities."""

from rulegate.domain.entities.account import Account
from rulegate.domain.entities.audit_log import AuditLog
from rulegate.domain.entities.permission import Permission
from rulegate.domain.entities.role import Role

__all__ = [
    "Account",
    "AuditLog",
    "Permission",
    "Role",
]
