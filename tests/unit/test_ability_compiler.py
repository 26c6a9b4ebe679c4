"""Unit tests for AbilityCompiler."""

import pytest

from rulegate.domain.ability import ResourceInstance
from rulegate.infrastructure.permission.ability_compiler import AbilityCompiler
from rulegate.infrastructure.permission.rule_store import RuleStore

from tests.conftest import FakeUnitOfWork, make_account, make_permission, make_role


@pytest.mark.asyncio
async def test_user_without_role_gets_no_ability(ability_compiler: AbilityCompiler) -> None:
    user = make_account(role=None)
    assert ability_compiler.compile(user) is None
    assert not ability_compiler.check_user_ability(user, "read", "company")


@pytest.mark.asyncio
async def test_uncached_role_denies(ability_compiler: AbilityCompiler, admin_role) -> None:
    # store never loaded
    user = make_account(role=admin_role)
    assert ability_compiler.compile(user) is None
    assert not ability_compiler.check_user_ability(user, "read", "company")


@pytest.mark.asyncio
async def test_admin_can_do_anything(
    ability_compiler: AbilityCompiler, rule_store: RuleStore, admin_role
) -> None:
    await rule_store.load()
    user = make_account(role=admin_role)
    assert ability_compiler.check_user_ability(user, "delete", "payment")


@pytest.mark.asyncio
async def test_conditions_resolved_per_user(
    ability_compiler: AbilityCompiler, rule_store: RuleStore, company_admin_role
) -> None:
    await rule_store.load()
    alice = make_account(role=company_admin_role, companyId=5)
    bob = make_account(role=company_admin_role, companyId=6)
    company = ResourceInstance("company", {"id": 5})

    assert ability_compiler.check_user_ability_with_resource(alice, "read", company)
    assert not ability_compiler.check_user_ability_with_resource(bob, "read", company)


@pytest.mark.asyncio
async def test_cached_rules_stay_unresolved(
    ability_compiler: AbilityCompiler, rule_store: RuleStore, company_admin_role
) -> None:
    await rule_store.load()
    ability_compiler.compile(make_account(role=company_admin_role, companyId=5))
    assert rule_store.get(company_admin_role.id)[0].conditions == {"id": "${user.companyId}"}


@pytest.mark.asyncio
async def test_missing_template_value_denies(
    ability_compiler: AbilityCompiler, rule_store: RuleStore, company_admin_role
) -> None:
    await rule_store.load()
    user = make_account(role=company_admin_role)
    assert not ability_compiler.check_user_ability_with_resource(
        user, "read", ResourceInstance("company", {"id": None})
    )
    assert not ability_compiler.check_user_ability(user, "read", "company")


@pytest.mark.asyncio
async def test_check_permission_by_user_id(
    fake_uow: FakeUnitOfWork,
    ability_compiler: AbilityCompiler,
    rule_store: RuleStore,
    admin_role,
) -> None:
    await rule_store.load()
    user = fake_uow.accounts.add_account(make_account(role=admin_role))
    assert await ability_compiler.check_permission(user.id, "read", "company")
    assert not await ability_compiler.check_permission(make_account().id, "read", "company")


@pytest.mark.asyncio
async def test_invalidate_role_applies_new_forbid(
    fake_uow: FakeUnitOfWork,
    ability_compiler: AbilityCompiler,
    rule_store: RuleStore,
    admin_role,
) -> None:
    await rule_store.load()
    user = make_account(role=admin_role)
    assert ability_compiler.check_user_ability(user, "read", "payment")

    await fake_uow.permissions.create(
        make_permission(admin_role.id, "read", "payment", inverted=True)
    )
    assert ability_compiler.check_user_ability(user, "read", "payment")
    await ability_compiler.invalidate_role(admin_role.id)
    assert not ability_compiler.check_user_ability(user, "read", "payment")


@pytest.mark.asyncio
async def test_clear_cache_denies_everyone(
    ability_compiler: AbilityCompiler, rule_store: RuleStore, admin_role
) -> None:
    await rule_store.load()
    ability_compiler.clear_cache()
    assert not ability_compiler.check_user_ability(make_account(role=admin_role), "read", "company")


@pytest.mark.asyncio
async def test_role_entry_replaced_not_mutated(
    fake_uow: FakeUnitOfWork, ability_compiler: AbilityCompiler, rule_store: RuleStore
) -> None:
    role = fake_uow.roles.add_role(make_role("reader", [{"action": "read", "subject": "file"}]))
    await rule_store.load()
    old = rule_store.get(role.id)
    await fake_uow.permissions.create(make_permission(role.id, "read", "course"))
    await rule_store.invalidate(role.id)
    assert len(old) == 1
    assert len(rule_store.get(role.id)) == 2
