"""Account entity - the acting user."""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from rulegate.domain.entities.role import Role


@dataclass
class Account:
    """Account with its (eager) role and an open attribute graph.

    Unknown attributes are looked up in ``attributes`` so that condition
    templates such as ``${user.companyId}`` or ``${user.profile.team}`` resolve
    by plain attribute access.
    """

    id: UUID
    email: str | None = None
    role: Role | None = None
    external_id: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "attributes":
            raise AttributeError(name)
        try:
            return self.attributes[name]
        except KeyError:
            raise AttributeError(name) from None

    @property
    def role_id(self) -> UUID | None:
        return self.role.id if self.role else None
