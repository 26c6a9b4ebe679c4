"""Permission guard - per-operation authorization decision point."""

import logging
from dataclasses import dataclass

from rulegate.application.ports import PermissionChecker
from rulegate.domain.entities import Account
from rulegate.domain.exceptions import NotAuthenticated, PermissionDenied
from rulegate.domain.value_objects import Action, Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionRequirement:
    """What an operation requires, attached to the operation when it is registered.

    subject=None means "use the subject declared for the resource".
    check_resource=True means the base grant is only a precondition and the
    operation must run an ownership check once it has loaded the resource.
    """

    action: Action
    subject: Subject | None = None
    field: str | None = None
    check_resource: bool = False
    public: bool = False


PUBLIC = PermissionRequirement(action=Action.READ, public=True)


@dataclass(frozen=True)
class GuardDecision:
    """Result of a passed guard."""

    subject: Subject | None
    needs_ownership_check: bool = False


class PermissionGuard:
    """Checks the coarse action/subject/field grant before an operation runs."""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._checker = permission_checker

    def authorize(
        self,
        user: Account | None,
        requirement: PermissionRequirement,
        default_subject: Subject | None = None,
    ) -> GuardDecision:
        """Raise NotAuthenticated / PermissionDenied, or return the decision."""
        if requirement.public:
            return GuardDecision(subject=requirement.subject or default_subject)

        if user is None:
            logger.warning("No user resolved for protected operation")
            raise NotAuthenticated("User not authenticated")

        subject = requirement.subject or default_subject
        if subject is None:
            logger.error("Cannot determine subject for %s requirement", requirement.action)
            raise PermissionDenied("Permission subject not defined")

        action, field = requirement.action, requirement.field
        ability = self._checker.compile(user)
        decision = ability.decide(action, subject, field) if ability else None

        if decision is None or not decision.allowed:
            rule = decision.rule if decision else None
            logger.warning(
                "User %s (%s) denied %s on %s%s%s",
                user.id,
                user.email,
                action,
                subject,
                f".{field}" if field else "",
                f" by rule {rule.permission_id} ({rule.reason})" if rule else "",
            )
            raise PermissionDenied(
                f"You do not have permission to {action} {subject}"
                + (f" field: {field}" if field else "")
            )

        logger.debug(
            "User %s granted %s on %s%s", user.id, action, subject, f".{field}" if field else ""
        )
        return GuardDecision(subject=subject, needs_ownership_check=requirement.check_resource)
