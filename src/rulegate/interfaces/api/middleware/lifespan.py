"""Lifespan middleware - opens the pool and warms the rule store on startup."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

from rulegate.domain.exceptions import RuleStoreInitError
from rulegate.infrastructure.permission.rule_store import RuleStore

logger = logging.getLogger(__name__)


class LifespanMiddleware:
    """Opens the connection pool and loads all role rules when the ASGI server starts."""

    def __init__(self, pool: AsyncConnectionPool, rule_store: RuleStore) -> None:
        self._pool = pool
        self._rule_store = rule_store

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        """Open pool, then load the rule store. A failed load leaves every role denied."""
        await self._pool.open()
        try:
            await self._rule_store.load()
        except RuleStoreInitError:
            logger.error("Starting with an empty rule store; all checks will deny")

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        """Close pool when ASGI server shuts down."""
        await self._pool.close()
