"""Account repository port."""

from typing import Protocol
from uuid import UUID

from rulegate.domain.entities import Account


class AccountRepository(Protocol):
    """Port for account reads. Accounts are returned with their role eager-loaded."""

    async def get_by_id(self, account_id: UUID) -> Account | None: ...

    async def get_by_external_id(self, external_id: str) -> Account | None: ...

    async def update_role(self, account_id: UUID, role_id: UUID | None) -> None: ...
