"""Application ports - interfaces for external adapters."""

from rulegate.application.ports.audit_recorder import AuditRecorder
from rulegate.application.ports.permission_checker import PermissionChecker
from rulegate.application.ports.rule_cache import RuleCache
from rulegate.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuditRecorder",
    "PermissionChecker",
    "RuleCache",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
