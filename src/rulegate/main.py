"""Application entry point and composition root."""

import logging

import falcon
import falcon.asgi

from rulegate import __version__
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
from rulegate.config import Settings, configure_logging, get_settings
from rulegate.domain.ability import ConditionResolver
from rulegate.infrastructure.audit.audit_log_service import AuditLogService
from rulegate.infrastructure.auth.keycloak_provider import KeycloakProvider
from rulegate.infrastructure.permission.ability_compiler import AbilityCompiler
from rulegate.infrastructure.permission.rule_store import RuleStore
from rulegate.infrastructure.persistence.postgres.connection import create_pool
from rulegate.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from rulegate.interfaces.api.middleware.auth import AuthMiddleware
from rulegate.interfaces.api.middleware.cors import CORSMiddleware
from rulegate.interfaces.api.middleware.lifespan import LifespanMiddleware
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

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"RuleGate v{__version__}")


async def handle_unexpected_error(req, resp, ex, params) -> None:
    """Log unhandled exceptions and answer 500 without internals."""
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def create_rulegate_app(settings: Settings | None = None) -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.debug)

    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; all requests are anonymous")

    rule_store = RuleStore(uow_factory)
    ability_compiler = AbilityCompiler(rule_store, ConditionResolver(), uow_factory)
    audit_log = AuditLogService(uow_factory, retention_days=settings.audit_retention_days)
    guard = PermissionGuard(ability_compiler)
    ownership_check = OwnershipCheck(ability_compiler, settings.default_owner_path)

    add_permission = AddPermissionUseCase(uow_factory, rule_store, audit_log)
    remove_permission = RemovePermissionUseCase(uow_factory, rule_store, audit_log)
    update_permission = UpdatePermissionUseCase(uow_factory, rule_store, audit_log)
    bulk_add = BulkAddPermissionsUseCase(add_permission, rule_store)
    bulk_remove = BulkRemovePermissionsUseCase(remove_permission, rule_store)
    create_role = CreateRoleUseCase(uow_factory, rule_store, audit_log)
    update_role = UpdateRoleUseCase(uow_factory, audit_log)
    delete_role = DeleteRoleUseCase(uow_factory, rule_store, audit_log)
    reassign_role = ReassignAccountRoleUseCase(uow_factory, audit_log)
    get_matrix = GetPermissionMatrixUseCase(uow_factory)
    explain_permission = ExplainPermissionUseCase(uow_factory, ability_compiler)

    app = falcon.asgi.App(
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            LifespanMiddleware(pool, rule_store),
            AuthMiddleware(keycloak, uow_factory),
            PermissionGuardMiddleware(guard),
        ],
    )
    app.add_error_handler(Exception, handle_unexpected_error)

    health_resource = HealthResource(pool, rule_store)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")

    app.add_route("/v1/roles", RolesResource(uow_factory, create_role))
    app.add_route("/v1/roles/{role_id}", RoleResource(uow_factory, update_role, delete_role))
    app.add_route("/v1/roles/{role_id}/permissions", RolePermissionsResource(add_permission))
    app.add_route(
        "/v1/roles/{role_id}/permissions/{permission_id}",
        RolePermissionResource(update_permission, remove_permission),
    )

    app.add_route(
        "/v1/accounts/{account_id}",
        AccountResource(uow_factory, ownership_check, settings.allow_admin_override),
    )
    app.add_route("/v1/accounts/{account_id}/role", AccountRoleResource(reassign_role))

    app.add_route("/v1/permission-management/matrix", PermissionMatrixResource(get_matrix))
    app.add_route(
        "/v1/permission-management/matrix/role/{role_id}", RolePermissionMatrixResource(get_matrix)
    )
    app.add_route("/v1/permission-management/test", PermissionTestResource(explain_permission))
    app.add_route("/v1/permission-management/bulk-add", BulkAddPermissionsResource(bulk_add))
    app.add_route(
        "/v1/permission-management/bulk-remove", BulkRemovePermissionsResource(bulk_remove)
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


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_rulegate_app(), host="0.0.0.0", port=8000)
