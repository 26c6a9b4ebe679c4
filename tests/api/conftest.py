"""Fixtures for API tests."""

import asyncio
from uuid import UUID

import falcon.asgi
import pytest
from falcon.testing import TestClient

from rulegate.application.authorization.ownership_check import OwnershipCheck
from rulegate.application.authorization.permission_guard import PermissionGuard
from rulegate.application.use_cases.account.reassign_role import ReassignAccountRoleUseCase
from rulegate.application.use_cases.permission.add_permission import AddPermissionUseCase
from rulegate.application.use_cases.permission.bulk_permissions import (
    BulkAddPermissionsUseCase,
    BulkRemovePermissionsUseCase,
)
from rulegate.application.use_cases.permission.explain_permission import ExplainPermissionUseCase
from rulegate.application.use_cases.permission.get_permission_matrix import (
    GetPermissionMatrixUseCase,
)
from rulegate.application.use_cases.permission.remove_permission import RemovePermissionUseCase
from rulegate.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from rulegate.application.use_cases.role.create_role import CreateRoleUseCase
from rulegate.application.use_cases.role.delete_role import DeleteRoleUseCase
from rulegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rulegate.interfaces.api.middleware.permission_guard import PermissionGuardMiddleware
from rulegate.interfaces.api.resources.accounts import AccountResource, AccountRoleResource
from rulegate.interfaces.api.resources.audit_logs import (
    ActorAuditLogsResource,
    AuditLogsResource,
    EntityAuditLogsResource,
)
from rulegate.interfaces.api.resources.health import HealthResource
from rulegate.interfaces.api.resources.permission_management import (
    BulkAddPermissionsResource,
    BulkRemovePermissionsResource,
    CacheClearResource,
    CacheRefreshResource,
    PermissionMatrixResource,
    PermissionTestResource,
    RolePermissionMatrixResource,
)
from rulegate.interfaces.api.resources.roles import (
    RolePermissionResource,
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)

from tests.conftest import FakeUnitOfWork, make_account

USER_HEADER = "X-Test-User"


class HeaderAuthMiddleware:
    """Sets context.user from the X-Test-User header (an account id)."""

    def __init__(self, uow_factory) -> None:
        self._uow_factory = uow_factory

    async def process_request(self, req, resp):
        req.context.user = None
        account_id = req.get_header(USER_HEADER)
        if account_id:
            async with self._uow_factory() as uow:
                req.context.user = await uow.accounts.get_by_id(UUID(account_id))


@pytest.fixture
def admin(fake_uow: FakeUnitOfWork, admin_role):
    return fake_uow.accounts.add_account(make_account(role=admin_role, email="admin@example.com"))


@pytest.fixture
def company_admin(fake_uow: FakeUnitOfWork, company_admin_role):
    return fake_uow.accounts.add_account(
        make_account(role=company_admin_role, email="ca@example.com", companyId=42)
    )


@pytest.fixture
def app(uow_factory, rule_store, ability_compiler, audit_log, admin, company_admin):
    """Falcon ASGI app with the management resources over in-memory storage."""
    asyncio.run(rule_store.load())

    add_permission = AddPermissionUseCase(uow_factory, rule_store, audit_log)
    remove_permission = RemovePermissionUseCase(uow_factory, rule_store, audit_log)
    get_matrix = GetPermissionMatrixUseCase(uow_factory)

    app = falcon.asgi.App(
        middleware=[
            HeaderAuthMiddleware(uow_factory),
            PermissionGuardMiddleware(PermissionGuard(ability_compiler)),
        ]
    )
    health = HealthResource(rule_store=rule_store)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")
    app.add_route("/v1/roles", RolesResource(uow_factory, CreateRoleUseCase(uow_factory, rule_store, audit_log)))
    app.add_route(
        "/v1/roles/{role_id}",
        RoleResource(
            uow_factory,
            UpdateRoleUseCase(uow_factory, audit_log),
            DeleteRoleUseCase(uow_factory, rule_store, audit_log),
        ),
    )
    app.add_route("/v1/roles/{role_id}/permissions", RolePermissionsResource(add_permission))
    app.add_route(
        "/v1/roles/{role_id}/permissions/{permission_id}",
        RolePermissionResource(
            UpdatePermissionUseCase(uow_factory, rule_store, audit_log), remove_permission
        ),
    )
    app.add_route(
        "/v1/accounts/{account_id}",
        AccountResource(uow_factory, OwnershipCheck(ability_compiler)),
    )
    app.add_route(
        "/v1/accounts/{account_id}/role",
        AccountRoleResource(ReassignAccountRoleUseCase(uow_factory, audit_log)),
    )
    app.add_route("/v1/permission-management/matrix", PermissionMatrixResource(get_matrix))
    app.add_route(
        "/v1/permission-management/matrix/role/{role_id}", RolePermissionMatrixResource(get_matrix)
    )
    app.add_route(
        "/v1/permission-management/test",
        PermissionTestResource(ExplainPermissionUseCase(uow_factory, ability_compiler)),
    )
    app.add_route(
        "/v1/permission-management/bulk-add",
        BulkAddPermissionsResource(BulkAddPermissionsUseCase(add_permission, rule_store)),
    )
    app.add_route(
        "/v1/permission-management/bulk-remove",
        BulkRemovePermissionsResource(BulkRemovePermissionsUseCase(remove_permission, rule_store)),
    )
    app.add_route("/v1/permission-management/cache/clear", CacheClearResource(rule_store))
    app.add_route(
        "/v1/permission-management/cache/refresh/{role_id}", CacheRefreshResource(rule_store)
    )
    app.add_route("/v1/audit-logs", AuditLogsResource(audit_log))
    app.add_route(
        "/v1/audit-logs/entity/{entity_type}/{entity_id}", EntityAuditLogsResource(audit_log)
    )
    app.add_route("/v1/audit-logs/actor/{actor_id}", ActorAuditLogsResource(audit_log))
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


def as_user(account) -> dict[str, str]:
    return {USER_HEADER: str(account.id)}
