"""Permission matrix use case - subject x action view of rules."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from uuid import UUID

from rulegate.domain.entities import Role
from rulegate.domain.exceptions import NotFound
from rulegate.domain.value_objects import Action, Subject


class CellState(StrEnum):
    """How a role covers one action:subject key."""

    NONE = "none"
    GRANTED = "granted"
    CONDITIONAL = "conditional"
    FORBIDDEN = "forbidden"


def matrix_key(action: str, subject: str) -> str:
    return f"{action}:{subject}"


@dataclass
class MatrixCell:
    """One action:subject cell of a role's matrix."""

    action: str
    subject: str
    state: CellState = CellState.NONE
    permission_id: UUID | None = None
    reason: str | None = None
    fields: list[str] | None = None
    conditions: dict[str, Any] | None = None

    @property
    def key(self) -> str:
        return matrix_key(self.action, self.subject)

    @property
    def granted(self) -> bool:
        return self.state in (CellState.GRANTED, CellState.CONDITIONAL)


@dataclass
class RoleMatrix:
    """Matrix of one role, rows by subject in enum order."""

    role: Role
    rows: dict[str, list[MatrixCell]] = field(default_factory=dict)

    def cell(self, action: str, subject: str) -> MatrixCell:
        return next(c for c in self.rows[subject] if c.action == action)


class GetPermissionMatrixUseCase:
    """Enumerate subject x action combinations, optionally as covered by a role.

    Cells are literal: a manage or all rule fills the manage/all cells, it is
    not expanded into the other columns. A forbid is sticky for its cell.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    def execute(self) -> dict[str, list[str]]:
        """Every subject with the keys of every action on it."""
        return {
            subject.value: [matrix_key(action.value, subject.value) for action in Action]
            for subject in Subject
        }

    async def execute_for_role(self, role_id: UUID) -> RoleMatrix:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
        if not role:
            raise NotFound("Role", str(role_id))

        matrix = RoleMatrix(
            role=role,
            rows={
                subject.value: [MatrixCell(action=action.value, subject=subject.value) for action in Action]
                for subject in Subject
            },
        )
        for permission in role.permissions:
            for subject in permission.subject:
                if subject not in matrix.rows:
                    continue
                for action in permission.action:
                    cell = next((c for c in matrix.rows[subject] if c.action == action), None)
                    if cell is None or cell.state is CellState.FORBIDDEN:
                        continue
                    if permission.inverted:
                        cell.state = CellState.FORBIDDEN
                    elif permission.conditions:
                        cell.state = CellState.CONDITIONAL
                    else:
                        cell.state = CellState.GRANTED
                    cell.permission_id = permission.id
                    cell.reason = permission.reason
                    cell.fields = permission.fields
                    cell.conditions = permission.conditions
        return matrix
