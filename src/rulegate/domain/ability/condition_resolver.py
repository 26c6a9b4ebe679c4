"""Condition resolver - replaces ${...} templates with values from the acting user.

A template is a whole string leaf of the form ``${path}``. The path is an
attribute path on the user, optionally prefixed with ``user.``:

- ``${user.id}`` -> the user's id
- ``${user.companyId}`` -> the user's company id
- ``${user.role.name}`` -> the name of the user's role

Only single property paths are supported; there is no expression language.
Paths that cannot be walked resolve to ``UNRESOLVED``, which never matches a
resource value.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from rulegate.domain.ability.paths import UNRESOLVED, walk_path

logger = logging.getLogger(__name__)

TEMPLATE_RE = re.compile(r"^\$\{(.+)\}$")
_EMBEDDED_TEMPLATE_RE = re.compile(r"\$\{(.+?)\}")
_USER_PREFIX = "user."


def _normalize_path(path: str) -> str:
    path = path.strip()
    return path[len(_USER_PREFIX):] if path.startswith(_USER_PREFIX) else path


class ConditionResolver:
    """Resolves template variables in rule conditions against a user."""

    def resolve(self, conditions: Mapping[str, Any] | None, user: Any) -> dict[str, Any] | None:
        """Return a resolved copy of conditions.

        If resolution fails the original conditions are returned unchanged;
        unresolved templates never match a resource, so the rule degrades to
        unsatisfiable instead of crashing the authorization path.
        """
        if conditions is None:
            return None
        try:
            return self._resolve_value(conditions, user)
        except Exception:
            logger.exception("Failed to resolve conditions %r", conditions)
            return conditions

    def _resolve_value(self, value: Any, user: Any) -> Any:
        if isinstance(value, str):
            return self._resolve_string(value, user)
        if isinstance(value, Mapping):
            return {key: self._resolve_value(item, user) for key, item in value.items()}
        if isinstance(value, Sequence):
            return [self._resolve_value(item, user) for item in value]
        return value

    def _resolve_string(self, value: str, user: Any) -> Any:
        match = TEMPLATE_RE.match(value)
        if not match:
            return value
        return self.resolve_path(match.group(1), user)

    def resolve_path(self, path: str, user: Any) -> Any:
        """Resolve one template path (with or without the user. prefix)."""
        resolved = walk_path(user, _normalize_path(path))
        if resolved is UNRESOLVED:
            logger.warning("Cannot resolve template path %r for user %s", path, getattr(user, "id", None))
        else:
            logger.debug("Resolved %s -> %r", path, resolved)
        return resolved

    def has_template_variables(self, conditions: Any) -> bool:
        """Check whether any string in the condition tree contains a template."""
        return bool(self.extract_template_variables(conditions))

    def extract_template_variables(self, conditions: Any) -> list[str]:
        """Distinct template paths in the condition tree, in first-seen order."""
        found: list[str] = []
        self._collect(conditions, found)
        return found

    def _collect(self, value: Any, found: list[str]) -> None:
        if isinstance(value, str):
            for path in _EMBEDDED_TEMPLATE_RE.findall(value):
                path = path.strip()
                if path not in found:
                    found.append(path)
        elif isinstance(value, Mapping):
            for item in value.values():
                self._collect(item, found)
        elif isinstance(value, Sequence):
            for item in value:
                self._collect(item, found)

    def validate_template_variables(self, conditions: Any, user: Any) -> list[str]:
        """Template paths that do not resolve for this user (diagnostics only)."""
        return [
            path
            for path in self.extract_template_variables(conditions)
            if walk_path(user, _normalize_path(path)) is UNRESOLVED
        ]

    def build_company_isolation(self, user: Any) -> dict[str, Any] | None:
        """Conditions restricting rows to the user's company, if the user has one."""
        company_id = walk_path(user, "companyId")
        if company_id is UNRESOLVED:
            return None
        return {"companyId": company_id}

    def build_owner_isolation(self, user: Any, owner_field: str = "account_id") -> dict[str, Any]:
        """Conditions restricting rows to those owned by the user."""
        return {owner_field: user.id}
