"""Auth middleware - resolves the bearer token to an Account."""

import logging

import falcon.asgi

from rulegate.infrastructure.auth.keycloak_provider import KeycloakProvider

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """Middleware that validates the bearer token and sets req.context.user.

    req.context.user is the Account mapped from the token subject, or None when
    the request is anonymous or the token does not map to a known account.
    """

    def __init__(self, keycloak_provider: KeycloakProvider | None, unit_of_work_factory: type) -> None:
        self._keycloak = keycloak_provider
        self._uow_factory = unit_of_work_factory

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract user from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return

        identity = self._keycloak.decode_token(auth[7:])
        if identity is None:
            return

        async with self._uow_factory() as uow:
            account = await uow.accounts.get_by_external_id(identity.external_id)
        if account is None:
            logger.warning("No account for token subject %s", identity.external_id)
            return
        req.context.user = account
