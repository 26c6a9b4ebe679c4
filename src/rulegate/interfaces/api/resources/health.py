"""Health check endpoints."""

import falcon.asgi
from psycopg_pool import AsyncConnectionPool

from rulegate.application.authorization.permission_guard import PUBLIC
from rulegate.infrastructure.permission.rule_store import RuleStore
from rulegate.infrastructure.persistence.postgres.connection import ping


class HealthResource:
    """Health and readiness endpoints."""

    permissions = {"GET": PUBLIC}

    def __init__(self, pool: AsyncConnectionPool | None = None, rule_store: RuleStore | None = None) -> None:
        self._pool = pool
        self._rule_store = rule_store

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (database, rule store)."""
        database = await ping(self._pool) if self._pool is not None else False
        rules = self._rule_store.initialized if self._rule_store is not None else False
        ready = database and rules
        resp.media = {
            "status": "ready" if ready else "not_ready",
            "database": database,
            "rule_store": {
                "initialized": rules,
                "roles": len(self._rule_store.role_ids()) if self._rule_store is not None else 0,
            },
        }
        resp.status = falcon.HTTP_200 if ready else falcon.HTTP_503
