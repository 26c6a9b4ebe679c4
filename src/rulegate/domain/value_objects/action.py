"""Actions for access control rules."""

from enum import StrEnum


class Action(StrEnum):
    """Actions a rule can grant or forbid. MANAGE covers every action."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
