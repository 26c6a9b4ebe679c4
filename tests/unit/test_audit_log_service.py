"""Unit tests for AuditLogService."""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest

from rulegate.application.dto.audit_dto import AuditEntryInput, AuditLogFilter
from rulegate.domain.value_objects import AuditAction
from rulegate.infrastructure.audit.audit_log_service import AuditLogService

from tests.conftest import FakeUnitOfWork, make_uow_factory


@pytest.mark.asyncio
async def test_record_persists_entry(fake_uow: FakeUnitOfWork, audit_log: AuditLogService) -> None:
    actor = uuid4()
    saved = await audit_log.record(
        AuditEntryInput(
            action=AuditAction.CREATE_ROLE,
            entity_type="Role",
            entity_id="r1",
            after={"name": "editor"},
            actor_id=actor,
            ip_address="10.0.0.1",
        )
    )
    assert saved is not None
    assert fake_uow.audit_logs.entries == [saved]
    assert saved.changes == {"after": {"name": "editor"}}
    assert saved.actor_id == actor
    assert saved.ip_address == "10.0.0.1"


@pytest.mark.asyncio
async def test_record_without_actor_is_system(audit_log: AuditLogService) -> None:
    saved = await audit_log.record(AuditEntryInput(action=AuditAction.DELETE_ROLE, entity_type="Role"))
    assert saved.actor_id is None
    assert saved.changes is None


@pytest.mark.asyncio
async def test_record_failure_returns_none(fake_uow: FakeUnitOfWork, audit_log: AuditLogService) -> None:
    with patch.object(fake_uow.audit_logs, "create", side_effect=RuntimeError("disk full")):
        result = await audit_log.record(
            AuditEntryInput(action=AuditAction.CREATE_ROLE, entity_type="Role")
        )
    assert result is None


@pytest.mark.asyncio
async def test_log_permission_grant(fake_uow: FakeUnitOfWork, audit_log: AuditLogService) -> None:
    role_id = uuid4()
    entry = await audit_log.log_permission_grant(
        None, role_id, {"action": ["read"], "subject": ["company"]}
    )
    assert entry.action == AuditAction.GRANT_PERMISSION
    assert entry.entity_type == "Permission"
    assert entry.changes == {"after": {"action": ["read"], "subject": ["company"]}}
    assert str(role_id) in entry.description


@pytest.mark.asyncio
async def test_log_permission_revoke_keys_on_permission(audit_log: AuditLogService) -> None:
    role_id, permission_id = uuid4(), uuid4()
    entry = await audit_log.log_permission_revoke(
        None, role_id, permission_id, {"action": ["read"], "subject": ["company"]}
    )
    assert entry.action == AuditAction.REVOKE_PERMISSION
    assert entry.entity_id == str(permission_id)
    assert entry.metadata == {"role_id": str(role_id)}
    assert entry.changes == {"before": {"action": ["read"], "subject": ["company"]}}


@pytest.mark.asyncio
async def test_log_role_assignment(audit_log: AuditLogService) -> None:
    account_id, new_role = uuid4(), uuid4()
    entry = await audit_log.log_role_assignment(uuid4(), account_id, None, new_role)
    assert entry.action == AuditAction.UPDATE_ACCOUNT_ROLE
    assert entry.entity_type == "Account"
    assert entry.changes == {"before": {"role_id": None}, "after": {"role_id": str(new_role)}}


@pytest.mark.asyncio
async def test_queries_newest_first(audit_log: AuditLogService) -> None:
    actor = uuid4()
    first = await audit_log.log_role_creation(actor, uuid4(), "a")
    second = await audit_log.log_role_creation(actor, uuid4(), "b")
    await audit_log.log_role_creation(uuid4(), uuid4(), "c")

    assert await audit_log.list_by_actor(actor) == [second, first]
    assert len(await audit_log.list_by_action(AuditAction.CREATE_ROLE)) == 3
    assert await audit_log.list_for_entity("Role", first.entity_id) == [first]


@pytest.mark.asyncio
async def test_paginate(audit_log: AuditLogService) -> None:
    for i in range(5):
        await audit_log.log_role_creation(None, uuid4(), f"role-{i}")
    await audit_log.log_role_deletion(None, uuid4(), "gone")

    page = await audit_log.paginate(
        page=2, limit=2, filters=AuditLogFilter(action=AuditAction.CREATE_ROLE)
    )
    assert page.total == 5
    assert page.page_total == 3
    assert [e.changes["after"]["name"] for e in page.results] == ["role-2", "role-1"]


@pytest.mark.asyncio
async def test_delete_older_than(fake_uow: FakeUnitOfWork) -> None:
    service = AuditLogService(make_uow_factory(fake_uow), retention_days=30)
    old = await service.log_role_creation(None, uuid4(), "old")
    fresh = await service.log_role_creation(None, uuid4(), "fresh")
    fake_uow.audit_logs.entries[0] = replace(old, created_at=datetime.now(UTC) - timedelta(days=31))

    assert await service.delete_older_than() == 1
    assert fake_uow.audit_logs.entries == [fresh]
