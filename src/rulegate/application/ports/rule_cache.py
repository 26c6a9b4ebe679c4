"""Rule cache port - per-role rule reloads after committed mutations."""

from typing import Protocol
from uuid import UUID


class RuleCache(Protocol):
    """Port for the cache the guard reads role rules from."""

    async def invalidate(self, role_id: UUID) -> None: ...
