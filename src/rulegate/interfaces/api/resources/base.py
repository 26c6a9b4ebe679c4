"""Shared helpers for API resources: id parsing, request context, error mapping."""

import logging
from uuid import UUID

import falcon
import falcon.asgi

from rulegate.domain.exceptions import (
    MutationError,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ResourceNotFound,
    RuleStoreInitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_ERROR_STATUS = (
    (ValidationError, falcon.HTTP_400),
    (NotFound, falcon.HTTP_404),
    (ResourceNotFound, falcon.HTTP_404),
    (NotAuthenticated, falcon.HTTP_401),
    (PermissionDenied, falcon.HTTP_403),
    (RuleStoreInitError, falcon.HTTP_503),
    (MutationError, falcon.HTTP_500),
)


def parse_uuid(value: str | None) -> UUID | None:
    """UUID from a path or body value, or None if malformed."""
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def request_audit_context(req: falcon.asgi.Request) -> dict:
    """Actor, IP and user agent of the request, as use case keyword arguments."""
    user = getattr(req.context, "user", None)
    return {
        "actor_id": user.id if user else None,
        "ip_address": req.remote_addr,
        "user_agent": req.user_agent,
    }


def error_response(resp: falcon.asgi.Response, error: Exception) -> None:
    """Set status and {"error": ...} body for a domain error."""
    for error_type, status in _ERROR_STATUS:
        if isinstance(error, error_type):
            resp.status = status
            resp.media = {"error": str(error)}
            return
    logger.error("Unmapped error %s: %s", type(error).__name__, error)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def bad_request(resp: falcon.asgi.Response, message: str) -> None:
    resp.status = falcon.HTTP_400
    resp.media = {"error": message}


async def read_json_object(req: falcon.asgi.Request) -> dict | None:
    """Request body if it is a JSON object, else None."""
    try:
        body = await req.get_media()
    except (falcon.MediaNotFoundError, falcon.MediaMalformedError):
        return None
    return body if isinstance(body, dict) else None
