"""Permission checker port - boolean authorization decisions."""

from typing import Any, Protocol
from uuid import UUID

from rulegate.domain.ability import Ability
from rulegate.domain.entities import Account


class PermissionChecker(Protocol):
    """Port for checking what an account may do."""

    def compile(self, user: Account) -> Ability | None: ...

    async def check_permission(
        self, user_id: UUID, action: str, subject: str, field: str | None = None
    ) -> bool: ...

    async def check_permission_with_resource(
        self, user: Account, action: str, resource: Any, field: str | None = None
    ) -> bool: ...
