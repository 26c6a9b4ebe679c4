"""Default role seeding."""

import pytest

from scripts.seed_roles import DEFAULT_ROLES, seed_roles
from tests.conftest import FakeUnitOfWork, make_role


@pytest.mark.asyncio
async def test_seeds_default_roles(fake_uow: FakeUnitOfWork, uow_factory) -> None:
    created = await seed_roles(uow_factory)

    assert created == ["admin", "company_admin"]
    admin = await fake_uow.roles.get_by_name("admin")
    assert [(p.action, p.subject) for p in admin.permissions] == [(["manage"], ["all"])]
    company_admin = await fake_uow.roles.get_by_name("company_admin")
    assert company_admin.permissions[0].conditions == {"id": "${user.companyId}"}


@pytest.mark.asyncio
async def test_existing_roles_are_skipped(fake_uow: FakeUnitOfWork, uow_factory) -> None:
    fake_uow.roles.add_role(make_role("admin", []))

    created = await seed_roles(uow_factory)

    assert created == ["company_admin"]
    admin = await fake_uow.roles.get_by_name("admin")
    assert admin.permissions == []


@pytest.mark.asyncio
async def test_dry_run_writes_nothing(fake_uow: FakeUnitOfWork, uow_factory) -> None:
    created = await seed_roles(uow_factory, dry_run=True)

    assert created == [role["name"] for role in DEFAULT_ROLES]
    assert await fake_uow.roles.list_all() == []
    assert fake_uow.audit_logs.entries == []
