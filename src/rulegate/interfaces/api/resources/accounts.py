"""Account API resources."""

import falcon.asgi

from rulegate.application.authorization.ownership_check import (
    OwnershipCheck,
    OwnershipRequirement,
)
from rulegate.application.authorization.permission_guard import PermissionRequirement
from rulegate.application.use_cases.account.reassign_role import ReassignAccountRoleUseCase
from rulegate.domain.ability import ResourceInstance
from rulegate.domain.exceptions import PermissionDenied, RuleGateError
from rulegate.domain.value_objects import Action, Subject
from rulegate.interfaces.api.resources.base import (
    bad_request,
    error_response,
    parse_uuid,
    read_json_object,
    request_audit_context,
)
from rulegate.interfaces.api.resources.serializers import account_to_dict


class AccountResource:
    """GET /v1/accounts/{account_id} - own account, or any account the ability covers."""

    subject = Subject.ACCOUNT
    permissions = {"GET": PermissionRequirement(Action.READ, check_resource=True)}

    def __init__(
        self,
        unit_of_work_factory: type,
        ownership_check: OwnershipCheck,
        allow_admin_override: bool = True,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ownership = ownership_check
        self._requirement = OwnershipRequirement(
            owner_path="id", allow_admin_override=allow_admin_override
        )

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, account_id: str
    ) -> None:
        aid = parse_uuid(account_id)
        if aid is None:
            bad_request(resp, "Invalid account ID")
            return

        async with self._uow_factory() as uow:
            account = await uow.accounts.get_by_id(aid)

        if req.context.needs_ownership_check:
            resource = None
            if account is not None:
                resource = ResourceInstance(
                    subject=self.subject,
                    attributes={**account.attributes, "id": account.id, "role_id": account.role_id},
                )
            try:
                self._ownership.check(req.context.user, resource, self._requirement, req.method)
            except PermissionDenied as e:
                error_response(resp, e)
                return

        if account is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Account not found"}
            return
        resp.media = account_to_dict(account)
        resp.status = falcon.HTTP_200


class AccountRoleResource:
    """PUT /v1/accounts/{account_id}/role - reassign an account's role."""

    subject = Subject.ACCOUNT
    permissions = {"PUT": PermissionRequirement(Action.UPDATE, field="role")}

    def __init__(self, reassign_role: ReassignAccountRoleUseCase) -> None:
        self._reassign = reassign_role

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, account_id: str
    ) -> None:
        aid = parse_uuid(account_id)
        if aid is None:
            bad_request(resp, "Invalid account ID")
            return
        body = await read_json_object(req)
        if body is None or "role_id" not in body:
            bad_request(resp, "Missing required field: 'role_id'")
            return
        role_id = None
        if body["role_id"] is not None:
            role_id = parse_uuid(body["role_id"])
            if role_id is None:
                bad_request(resp, "Invalid role ID")
                return

        try:
            account = await self._reassign.execute(aid, role_id, **request_audit_context(req))
        except RuleGateError as e:
            error_response(resp, e)
            return
        resp.media = account_to_dict(account)
        resp.status = falcon.HTTP_200
