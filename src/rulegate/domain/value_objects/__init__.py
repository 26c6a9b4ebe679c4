"""Domain value objects."""

from rulegate.domain.value_objects.action import Action
from rulegate.domain.value_objects.audit_action import AuditAction
from rulegate.domain.value_objects.subject import Subject

__all__ = [
    "Action",
    "AuditAction",
    "Subject",
]
