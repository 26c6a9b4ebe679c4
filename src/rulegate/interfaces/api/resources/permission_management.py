"""Permission management API resources: matrix, test, bulk operations and cache control."""

import logging

import falcon.asgi

from rulegate.application.authorization.permission_guard import PermissionRequirement
from rulegate.application.use_cases.permission.bulk_permissions import (
    BulkAddPermissionsUseCase,
    BulkRemovePermissionsUseCase,
    BulkResult,
)
from rulegate.application.use_cases.permission.explain_permission import ExplainPermissionUseCase
from rulegate.application.use_cases.permission.get_permission_matrix import (
    GetPermissionMatrixUseCase,
)
from rulegate.domain.exceptions import RuleGateError, RuleStoreInitError
from rulegate.domain.value_objects import Action, Subject
from rulegate.infrastructure.permission.rule_store import RuleStore
from rulegate.interfaces.api.resources.base import (
    bad_request,
    error_response,
    parse_uuid,
    read_json_object,
    request_audit_context,
)
from rulegate.interfaces.api.resources.serializers import role_matrix_to_dict

logger = logging.getLogger(__name__)


def _bulk_result_to_dict(result: BulkResult) -> dict:
    return {
        "role_id": str(result.role_id),
        "results": [
            {
                "success": r.success,
                "item": r.item,
                "permission_id": str(r.permission_id) if r.permission_id else None,
                "error": r.error,
            }
            for r in result.results
        ],
        "summary": {
            "total": len(result.results),
            "successful": result.successful,
            "failed": result.failed,
        },
    }


class PermissionMatrixResource:
    """GET /v1/permission-management/matrix - every subject x action key."""

    subject = Subject.PERMISSION
    permissions = {"GET": PermissionRequirement(Action.READ)}

    def __init__(self, get_matrix: GetPermissionMatrixUseCase) -> None:
        self._get_matrix = get_matrix

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        matrix = self._get_matrix.execute()
        resp.media = {
            "subjects": list(matrix),
            "actions": [str(a) for a in Action],
            "matrix": [
                {
                    "subject": subject,
                    "actions": [{"action": key.split(":", 1)[0], "key": key} for key in keys],
                }
                for subject, keys in matrix.items()
            ],
        }
        resp.status = falcon.HTTP_200


class RolePermissionMatrixResource:
    """GET /v1/permission-management/matrix/role/{role_id} - a role's coverage."""

    subject = Subject.PERMISSION
    permissions = {"GET": PermissionRequirement(Action.READ)}

    def __init__(self, get_matrix: GetPermissionMatrixUseCase) -> None:
        self._get_matrix = get_matrix

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        try:
            matrix = await self._get_matrix.execute_for_role(rid)
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = role_matrix_to_dict(matrix)
        resp.status = falcon.HTTP_200


class PermissionTestResource:
    """POST /v1/permission-management/test - would this user be allowed, and why."""

    subject = Subject.PERMISSION
    permissions = {"POST": PermissionRequirement(Action.READ)}

    def __init__(self, explain_permission: ExplainPermissionUseCase) -> None:
        self._explain = explain_permission

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return
        try:
            user_id = parse_uuid(body["user_id"])
            action, subject = body["action"], body["subject"]
        except KeyError as e:
            bad_request(resp, f"Missing required field: {e}")
            return
        if user_id is None:
            bad_request(resp, "Invalid user ID")
            return
        resource_data = body.get("resource_data")
        if resource_data is not None and not isinstance(resource_data, dict):
            bad_request(resp, "resource_data must be an object")
            return

        result = await self._explain.execute(
            user_id, action, subject, body.get("field"), resource_data
        )
        resp.media = {
            "user_id": str(result.user_id),
            "user": {
                "id": str(result.user.id),
                "email": result.user.email,
                "role": result.user.role.name if result.user.role else None,
            }
            if result.user
            else None,
            "action": result.action,
            "subject": result.subject,
            "field": result.field,
            "resource_data": resource_data,
            "has_permission": result.allowed,
            "reason": result.reason,
            "rule_reason": result.rule_reason,
            "permission_id": str(result.permission_id) if result.permission_id else None,
        }
        resp.status = falcon.HTTP_200


class BulkAddPermissionsResource:
    """POST /v1/permission-management/bulk-add."""

    subject = Subject.PERMISSION
    permissions = {"POST": PermissionRequirement(Action.CREATE)}

    def __init__(self, bulk_add: BulkAddPermissionsUseCase) -> None:
        self._bulk_add = bulk_add

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return
        role_id = parse_uuid(body.get("role_id"))
        rules = body.get("permissions")
        if role_id is None:
            bad_request(resp, "Invalid role ID")
            return
        if not isinstance(rules, list):
            bad_request(resp, "permissions must be a list")
            return

        result = await self._bulk_add.execute(role_id, rules, **request_audit_context(req))
        resp.media = _bulk_result_to_dict(result)
        resp.status = falcon.HTTP_200


class BulkRemovePermissionsResource:
    """DELETE /v1/permission-management/bulk-remove."""

    subject = Subject.PERMISSION
    permissions = {"DELETE": PermissionRequirement(Action.DELETE)}

    def __init__(self, bulk_remove: BulkRemovePermissionsUseCase) -> None:
        self._bulk_remove = bulk_remove

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return
        role_id = parse_uuid(body.get("role_id"))
        raw_ids = body.get("permission_ids")
        if role_id is None:
            bad_request(resp, "Invalid role ID")
            return
        if not isinstance(raw_ids, list):
            bad_request(resp, "permission_ids must be a list")
            return
        permission_ids = [parse_uuid(p) for p in raw_ids]
        if any(p is None for p in permission_ids):
            bad_request(resp, "Invalid permission ID")
            return

        result = await self._bulk_remove.execute(
            role_id, permission_ids, **request_audit_context(req)
        )
        resp.media = _bulk_result_to_dict(result)
        resp.status = falcon.HTTP_200


class CacheClearResource:
    """POST /v1/permission-management/cache/clear - reload every role's rules."""

    subject = Subject.PERMISSION
    permissions = {"POST": PermissionRequirement(Action.MANAGE)}

    def __init__(self, rule_store: RuleStore) -> None:
        self._rule_store = rule_store

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            await self._rule_store.load()
        except RuleStoreInitError as e:
            error_response(resp, e)
            return
        logger.info("Rule cache reloaded (%d roles)", len(self._rule_store.role_ids()))
        resp.media = {"success": True, "message": "Abilities cache cleared successfully"}
        resp.status = falcon.HTTP_200


class CacheRefreshResource:
    """POST /v1/permission-management/cache/refresh/{role_id}."""

    subject = Subject.PERMISSION
    permissions = {"POST": PermissionRequirement(Action.UPDATE)}

    def __init__(self, rule_store: RuleStore) -> None:
        self._rule_store = rule_store

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        try:
            await self._rule_store.invalidate(rid)
        except RuleStoreInitError as e:
            error_response(resp, e)
            return
        resp.media = {
            "success": True,
            "message": f"Role {rid} ability cache refreshed successfully",
        }
        resp.status = falcon.HTTP_200
