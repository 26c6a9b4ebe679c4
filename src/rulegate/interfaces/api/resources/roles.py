"""Role and role permission API resources."""

import falcon.asgi

from rulegate.application.authorization.permission_guard import PermissionRequirement
from rulegate.application.dto.permission_dto import PermissionRuleInput, PermissionUpdateInput
from rulegate.application.use_cases.permission.add_permission import AddPermissionUseCase
from rulegate.application.use_cases.permission.remove_permission import RemovePermissionUseCase
from rulegate.application.use_cases.permission.update_permission import UpdatePermissionUseCase
from rulegate.application.use_cases.role.create_role import CreateRoleUseCase
from rulegate.application.use_cases.role.delete_role import DeleteRoleUseCase
from rulegate.application.use_cases.role.update_role import UpdateRoleUseCase
from rulegate.domain.exceptions import RuleGateError
from rulegate.domain.value_objects import Action, Subject
from rulegate.interfaces.api.resources.base import (
    bad_request,
    error_response,
    parse_uuid,
    read_json_object,
    request_audit_context,
)
from rulegate.interfaces.api.resources.serializers import permission_to_dict, role_to_dict


class RolesResource:
    """GET/POST /v1/roles - list and create roles."""

    subject = Subject.ROLE
    permissions = {
        "GET": PermissionRequirement(Action.READ),
        "POST": PermissionRequirement(Action.CREATE),
    }

    def __init__(self, unit_of_work_factory: type, create_role: CreateRoleUseCase) -> None:
        self._uow_factory = unit_of_work_factory
        self._create = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            roles = await uow.roles.list_with_permissions()
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return

        try:
            role = await self._create.execute(
                body.get("name"), body.get("description"), **request_audit_context(req)
            )
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id}."""

    subject = Subject.ROLE
    permissions = {
        "GET": PermissionRequirement(Action.READ),
        "PATCH": PermissionRequirement(Action.UPDATE),
        "DELETE": PermissionRequirement(Action.DELETE),
    }

    def __init__(
        self,
        unit_of_work_factory: type,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._update = update_role
        self._delete = delete_role

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(rid)
        if not role:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Role not found"}
            return
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return

        try:
            role = await self._update.execute(
                rid, body.get("name"), body.get("description"), **request_audit_context(req)
            )
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        try:
            await self._delete.execute(rid, **request_audit_context(req))
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.status = falcon.HTTP_204


class RolePermissionsResource:
    """POST /v1/roles/{role_id}/permissions - attach a rule to a role."""

    subject = Subject.PERMISSION
    permissions = {"POST": PermissionRequirement(Action.CREATE)}

    def __init__(self, add_permission: AddPermissionUseCase) -> None:
        self._add = add_permission

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        rid = parse_uuid(role_id)
        if rid is None:
            bad_request(resp, "Invalid role ID")
            return
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return

        try:
            rule = PermissionRuleInput.from_mapping(body)
            permission = await self._add.execute(rid, rule, **request_audit_context(req))
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class RolePermissionResource:
    """PATCH/DELETE /v1/roles/{role_id}/permissions/{permission_id}."""

    subject = Subject.PERMISSION
    permissions = {
        "PATCH": PermissionRequirement(Action.UPDATE),
        "DELETE": PermissionRequirement(Action.DELETE),
    }

    def __init__(
        self,
        update_permission: UpdatePermissionUseCase,
        remove_permission: RemovePermissionUseCase,
    ) -> None:
        self._update = update_permission
        self._remove = remove_permission

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        permission_id: str,
    ) -> None:
        rid, pid = parse_uuid(role_id), parse_uuid(permission_id)
        if rid is None or pid is None:
            bad_request(resp, "Invalid role or permission ID")
            return
        body = await read_json_object(req)
        if body is None:
            bad_request(resp, "Request body must be a JSON object")
            return

        try:
            update = PermissionUpdateInput(changes=body)
            permission = await self._update.execute(rid, pid, update, **request_audit_context(req))
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        permission_id: str,
    ) -> None:
        rid, pid = parse_uuid(role_id), parse_uuid(permission_id)
        if rid is None or pid is None:
            bad_request(resp, "Invalid role or permission ID")
            return
        try:
            await self._remove.execute(rid, pid, **request_audit_context(req))
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.status = falcon.HTTP_204
