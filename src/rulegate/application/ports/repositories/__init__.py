"""Repository ports."""

from rulegate.application.ports.repositories.account_repository import AccountRepository
from rulegate.application.ports.repositories.audit_log_repository import (
    AuditLogRepository,
)
from rulegate.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from rulegate.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AccountRepository",
    "AuditLogRepository",
    "PermissionRepository",
    "RoleRepository",
]
