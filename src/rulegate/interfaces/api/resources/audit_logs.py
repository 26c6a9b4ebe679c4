"""Audit log API resources."""

import falcon.asgi

from rulegate.application.authorization.permission_guard import PermissionRequirement
from rulegate.application.dto.audit_dto import AuditLogFilter
from rulegate.domain.value_objects import Action, AuditAction, Subject
from rulegate.infrastructure.audit.audit_log_service import AuditLogService
from rulegate.interfaces.api.resources.base import bad_request, parse_uuid
from rulegate.interfaces.api.resources.serializers import audit_log_to_dict

_READ = {"GET": PermissionRequirement(Action.READ)}


def _limit(req: falcon.asgi.Request) -> int:
    limit = req.get_param_as_int("limit") or 50
    return min(max(limit, 1), 200)


class AuditLogsResource:
    """GET /v1/audit-logs - paginated, filterable by action, actor and entity type."""

    subject = Subject.AUDIT_LOG
    permissions = _READ

    def __init__(self, audit_log: AuditLogService) -> None:
        self._audit_log = audit_log

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        page = max(req.get_param_as_int("page") or 1, 1)

        action = req.get_param("action")
        if action is not None:
            try:
                action = AuditAction(action)
            except ValueError:
                bad_request(resp, f"Unknown audit action: {action}")
                return
        actor_id = req.get_param("actor_id")
        if actor_id is not None:
            actor_id = parse_uuid(actor_id)
            if actor_id is None:
                bad_request(resp, "Invalid actor ID")
                return

        filters = AuditLogFilter(
            action=action, actor_id=actor_id, entity_type=req.get_param("entity_type")
        )
        result = await self._audit_log.paginate(page=page, limit=_limit(req), filters=filters)
        resp.media = {
            "results": [audit_log_to_dict(log) for log in result.results],
            "total": result.total,
            "page": result.page,
            "limit": result.limit,
            "page_total": result.page_total,
        }
        resp.status = falcon.HTTP_200


class EntityAuditLogsResource:
    """GET /v1/audit-logs/entity/{entity_type}/{entity_id}."""

    subject = Subject.AUDIT_LOG
    permissions = _READ

    def __init__(self, audit_log: AuditLogService) -> None:
        self._audit_log = audit_log

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        entity_type: str,
        entity_id: str,
    ) -> None:
        logs = await self._audit_log.list_for_entity(entity_type, entity_id)
        resp.media = {"items": [audit_log_to_dict(log) for log in logs[: _limit(req)]]}
        resp.status = falcon.HTTP_200


class ActorAuditLogsResource:
    """GET /v1/audit-logs/actor/{actor_id}."""

    subject = Subject.AUDIT_LOG
    permissions = _READ

    def __init__(self, audit_log: AuditLogService) -> None:
        self._audit_log = audit_log

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, actor_id: str
    ) -> None:
        aid = parse_uuid(actor_id)
        if aid is None:
            bad_request(resp, "Invalid actor ID")
            return
        logs = await self._audit_log.list_by_actor(aid)
        resp.media = {"items": [audit_log_to_dict(log) for log in logs[: _limit(req)]]}
        resp.status = falcon.HTTP_200
