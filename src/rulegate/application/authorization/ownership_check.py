"""Ownership check - resource-level authorization with an ability-based override."""

import logging
from dataclasses import dataclass
from typing import Any

from rulegate.application.ports import PermissionChecker
from rulegate.domain.ability import UNRESOLVED, ResourceInstance, walk_path
from rulegate.domain.entities import Account
from rulegate.domain.exceptions import NotOwner, ResourceNotFound
from rulegate.domain.value_objects import Action, Subject

logger = logging.getLogger(__name__)

_METHOD_ACTIONS = {
    "GET": Action.READ,
    "HEAD": Action.READ,
    "POST": Action.CREATE,
    "PUT": Action.UPDATE,
    "PATCH": Action.UPDATE,
    "DELETE": Action.DELETE,
}


def action_for_method(method: str) -> Action:
    """Map an HTTP verb to the action it performs (unknown verbs read)."""
    return _METHOD_ACTIONS.get(method.upper(), Action.READ)


@dataclass(frozen=True)
class OwnershipRequirement:
    """Where the owner lives on the resource, and whether abilities may override.

    owner_path None uses the check's default owner path.
    """

    owner_path: str | None = None
    allow_admin_override: bool = True


def _is_owner(owner: Any, user_id: Any) -> bool:
    if owner is UNRESOLVED:
        return False
    if owner == user_id or str(owner) == str(user_id):
        return True
    owner_id = walk_path(owner, "id")
    return owner_id is not UNRESOLVED and str(owner_id) == str(user_id)


class OwnershipCheck:
    """Allows the resource owner, or a non-owner whose ability covers the instance."""

    def __init__(
        self, permission_checker: PermissionChecker, default_owner_path: str = "owner_id"
    ) -> None:
        self._checker = permission_checker
        self._default_owner_path = default_owner_path

    def check(
        self,
        user: Account,
        resource: Any,
        requirement: OwnershipRequirement,
        method: str,
        subject: Subject | None = None,
    ) -> None:
        """Raise ResourceNotFound or NotOwner unless the user may act on resource.

        subject wraps a plain resource into a ResourceInstance for the override
        check; ResourceInstance arguments are used as-is.
        """
        if resource is None:
            logger.warning("Resource not found for ownership check by user %s", user.id)
            raise ResourceNotFound("Resource not found")

        target = resource
        if subject is not None and not isinstance(resource, ResourceInstance):
            target = ResourceInstance(subject=subject, attributes=resource)
        attributes = target.attributes if isinstance(target, ResourceInstance) else target

        owner = walk_path(attributes, requirement.owner_path or self._default_owner_path)
        if _is_owner(owner, user.id):
            logger.debug("User %s is owner of resource", user.id)
            return

        if not requirement.allow_admin_override:
            logger.warning("User %s is not owner and override not allowed", user.id)
            raise NotOwner("You can only access your own resources")

        action = action_for_method(method)
        ability = self._checker.compile(user)
        if ability is not None and ability.can(action, target):
            logger.debug("User %s granted override permission for %s on resource", user.id, action)
            return

        logger.warning("User %s is not owner and failed override check for %s", user.id, action)
        raise NotOwner("You can only access your own resources unless you have override permissions")
