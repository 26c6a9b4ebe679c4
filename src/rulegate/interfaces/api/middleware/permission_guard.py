"""Permission guard middleware - applies a resource's declared requirements."""

import falcon.asgi

from rulegate.application.authorization.permission_guard import PermissionGuard
from rulegate.domain.exceptions import NotAuthenticated, PermissionDenied


class PermissionGuardMiddleware:
    """Runs the permission guard before dispatch.

    Resources declare ``subject`` (default subject for their operations) and
    ``permissions``, a mapping of HTTP method to PermissionRequirement. Methods
    with no requirement are rejected. Resources without ``permissions`` are
    not guarded.
    """

    def __init__(self, guard: PermissionGuard) -> None:
        self._guard = guard

    async def process_resource(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params
    ) -> None:
        req.context.needs_ownership_check = False
        if req.method == "OPTIONS" or resource is None:
            return
        permissions = getattr(resource, "permissions", None)
        if permissions is None:
            return

        requirement = permissions.get(req.method)
        if requirement is None:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission subject not defined"}
            resp.complete = True
            return

        try:
            decision = self._guard.authorize(
                getattr(req.context, "user", None),
                requirement,
                getattr(resource, "subject", None),
            )
        except NotAuthenticated as e:
            resp.status = falcon.HTTP_401
            resp.media = {"error": str(e)}
            resp.complete = True
            return
        except PermissionDenied as e:
            resp.status = falcon.HTTP_403
            resp.media = {"error": str(e)}
            resp.complete = True
            return
        req.context.needs_ownership_check = decision.needs_ownership_check
