"""Pytest fixtures for RuleGate tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from rulegate.domain.ability import ConditionResolver
from rulegate.domain.entities import Account, AuditLog, Permission, Role
from rulegate.domain.value_objects import AuditAction
from rulegate.infrastructure.audit.audit_log_service import AuditLogService
from rulegate.infrastructure.permission.ability_compiler import AbilityCompiler
from rulegate.infrastructure.permission.rule_store import RuleStore


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission repository. Insertion order is rule order."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Permission] = {}

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)

    async def list_by_role(self, role_id: UUID) -> list[Permission]:
        return [p for p in self._by_id.values() if p.role_id == role_id]

    async def create(self, permission: Permission) -> Permission:
        self._by_id[permission.id] = permission
        return permission

    async def update(self, permission: Permission) -> None:
        self._by_id[permission.id] = permission

    async def delete(self, permission_id: UUID) -> None:
        self._by_id.pop(permission_id, None)

    def delete_by_role(self, role_id: UUID) -> None:
        self._by_id = {k: p for k, p in self._by_id.items() if p.role_id != role_id}


class FakeRoleRepository:
    """In-memory role repository; permissions come from the permission repository."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self._by_id: dict[UUID, Role] = {}
        self._permissions = permissions

    def _with_permissions(self, role: Role) -> Role:
        return replace(
            role, permissions=[p for p in self._permissions._by_id.values() if p.role_id == role.id]
        )

    async def get_by_id(self, role_id: UUID) -> Role | None:
        role = self._by_id.get(role_id)
        return self._with_permissions(role) if role else None

    async def get_by_name(self, name: str) -> Role | None:
        role = next((r for r in self._by_id.values() if r.name == name), None)
        return self._with_permissions(role) if role else None

    async def list_all(self) -> list[Role]:
        return await self.list_with_permissions()

    async def list_with_permissions(self, role_ids: Sequence[UUID] | None = None) -> list[Role]:
        roles = [
            r for r in self._by_id.values() if role_ids is None or r.id in role_ids
        ]
        return [self._with_permissions(r) for r in sorted(roles, key=lambda r: r.name)]

    async def create(self, role: Role) -> Role:
        self._by_id[role.id] = replace(role, permissions=[])
        return role

    async def update(self, role: Role) -> None:
        self._by_id[role.id] = replace(role, permissions=[])

    async def delete(self, role_id: UUID) -> None:
        self._by_id.pop(role_id, None)
        self._permissions.delete_by_role(role_id)

    def add_role(self, role: Role) -> Role:
        """Helper to add a role and its permissions for tests."""
        self._by_id[role.id] = replace(role, permissions=[])
        for permission in role.permissions:
            self._permissions._by_id[permission.id] = permission
        return role


class FakeAccountRepository:
    """In-memory account repository."""

    def __init__(self, roles: FakeRoleRepository) -> None:
        self._by_id: dict[UUID, Account] = {}
        self._roles = roles

    async def get_by_id(self, account_id: UUID) -> Account | None:
        return self._by_id.get(account_id)

    async def get_by_external_id(self, external_id: str) -> Account | None:
        return next((a for a in self._by_id.values() if a.external_id == external_id), None)

    async def update_role(self, account_id: UUID, role_id: UUID | None) -> None:
        account = self._by_id[account_id]
        role = self._roles._by_id.get(role_id) if role_id else None
        self._by_id[account_id] = replace(account, role=role)

    def add_account(self, account: Account) -> Account:
        """Helper to add account for tests."""
        self._by_id[account.id] = account
        return account


class FakeAuditLogRepository:
    """In-memory audit log repository. Listings are newest first."""

    def __init__(self) -> None:
        self.entries: list[AuditLog] = []

    async def create(self, entry: AuditLog) -> AuditLog:
        self.entries.append(entry)
        return entry

    def _filter(
        self,
        action: AuditAction | None,
        actor_id: UUID | None,
        entity_type: str | None,
        entity_id: str | None,
    ) -> list[AuditLog]:
        return [
            e
            for e in reversed(self.entries)
            if (action is None or e.action == action)
            and (actor_id is None or e.actor_id == actor_id)
            and (entity_type is None or e.entity_type == entity_type)
            and (entity_id is None or e.entity_id == entity_id)
        ]

    async def list(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[AuditLog]:
        items = self._filter(action, actor_id, entity_type, entity_id)[offset:]
        return items if limit is None else items[:limit]

    async def count(
        self,
        *,
        action: AuditAction | None = None,
        actor_id: UUID | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> int:
        return len(self._filter(action, actor_id, entity_type, entity_id))

    async def delete_older_than(self, cutoff: datetime) -> int:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.created_at >= cutoff]
        return before - len(self.entries)


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository(self.permissions)
        self.accounts = FakeAccountRepository(self.roles)
        self.audit_logs = FakeAuditLogRepository()
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same FakeUnitOfWork on every call, so state persists."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


# --- Builders ---


def make_permission(role_id: UUID, action: Any, subject: Any, **kwargs: Any) -> Permission:
    return Permission(
        id=uuid4(),
        role_id=role_id,
        action=[action] if isinstance(action, str) else list(action),
        subject=[subject] if isinstance(subject, str) else list(subject),
        **kwargs,
    )


def make_role(name: str, rules: Sequence[dict[str, Any]] = ()) -> Role:
    role_id = uuid4()
    return Role(
        id=role_id,
        name=name,
        permissions=[make_permission(role_id, **rule) for rule in rules],
    )


def make_account(role: Role | None = None, **attributes: Any) -> Account:
    return Account(
        id=uuid4(),
        email=attributes.pop("email", "user@example.com"),
        role=role,
        external_id=attributes.pop("external_id", None),
        attributes=attributes,
    )


ADMIN_RULES = [{"action": "manage", "subject": "all"}]
COMPANY_ADMIN_RULES = [
    {"action": ["read", "update"], "subject": "company", "conditions": {"id": "${user.companyId}"}},
    {"action": "read", "subject": "account", "conditions": {"companyId": "${user.companyId}"}},
    {"action": "read", "subject": "permission"},
]


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """In-memory UnitOfWork shared by every factory call in a test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    return make_uow_factory(fake_uow)


@pytest.fixture
def admin_role(fake_uow: FakeUnitOfWork) -> Role:
    return fake_uow.roles.add_role(make_role("admin", ADMIN_RULES))


@pytest.fixture
def company_admin_role(fake_uow: FakeUnitOfWork) -> Role:
    return fake_uow.roles.add_role(make_role("company_admin", COMPANY_ADMIN_RULES))


@pytest.fixture
def rule_store(uow_factory) -> RuleStore:
    return RuleStore(uow_factory)


@pytest.fixture
def ability_compiler(rule_store: RuleStore, uow_factory) -> AbilityCompiler:
    return AbilityCompiler(rule_store, ConditionResolver(), uow_factory)


@pytest.fixture
def audit_log(uow_factory) -> AuditLogService:
    return AuditLogService(uow_factory)
