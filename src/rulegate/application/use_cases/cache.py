"""Rule cache refresh after committed mutations."""

import logging
from uuid import UUID

from rulegate.application.ports.rule_cache import RuleCache
from rulegate.domain.exceptions import RuleStoreInitError

logger = logging.getLogger(__name__)


async def refresh_roles(rule_store: RuleCache, *role_ids: UUID) -> None:
    """Reload cached rules for role_ids.

    The mutation is already committed, so a failed reload is logged rather
    than raised. The cache keeps serving the previous rules for that role
    until a later refresh succeeds.
    """
    for role_id in role_ids:
        try:
            await rule_store.invalidate(role_id)
        except RuleStoreInitError:
            logger.error("Failed to reload rules for role %s; serving previous rules", role_id)
