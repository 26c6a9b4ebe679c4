"""Ability - per-user compiled rule set answering can(action, subject, field)."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from rulegate.domain.ability.paths import UNRESOLVED, walk_path
from rulegate.domain.ability.rules import Rule, attributes_of, subject_type_of

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, UUID)


class MalformedCondition(ValueError):
    """Condition value outside the supported grammar."""


@dataclass(frozen=True)
class Decision:
    """Outcome of an ability check and the rule that decided it."""

    allowed: bool
    rule: Rule | None = None

    @property
    def reason(self) -> str | None:
        return self.rule.reason if self.rule else None


class Ability:
    """Ordered, resolved rules for one user at one point in time.

    Any matching inverted rule forbids, whatever its position relative to
    grants for the same tuple. Otherwise the last matching grant decides.
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def can(self, action: str, subject: Any, field: str | None = None) -> bool:
        return self.decide(action, subject, field).allowed

    def cannot(self, action: str, subject: Any, field: str | None = None) -> bool:
        return not self.can(action, subject, field)

    def decide(self, action: str, subject: Any, field: str | None = None) -> Decision:
        """Evaluate subject (a subject name or a resource instance)."""
        if isinstance(subject, str):
            subject_type, target = subject, None
        else:
            subject_type, target = subject_type_of(subject), attributes_of(subject)

        granted_by: Rule | None = None
        for rule in self._rules:
            try:
                applies = self._applies(rule, action, subject_type, target, field)
            except Exception:
                logger.exception(
                    "Rule %s failed to evaluate for %s on %s", rule.permission_id, action, subject_type
                )
                continue
            if not applies:
                continue
            if rule.inverted:
                return Decision(allowed=False, rule=rule)
            granted_by = rule
        return Decision(allowed=granted_by is not None, rule=granted_by)

    def rules_for(self, action: str, subject_type: str) -> list[Rule]:
        """Rules whose action and subject cover the tuple, ignoring fields and conditions."""
        return [r for r in self._rules if r.matches_action(action) and r.matches_subject(subject_type)]

    @staticmethod
    def _applies(rule: Rule, action: str, subject_type: str, target: Any, field: str | None) -> bool:
        if not (rule.matches_action(action) and rule.matches_subject(subject_type)):
            return False
        if not rule.matches_field(field):
            return False
        if not rule.has_conditions:
            return True
        if target is None:
            # Subject-level check: a conditional grant may apply to some instance,
            # a conditional forbid cannot be known to apply.
            return not rule.inverted and rule.is_satisfiable()
        return matches_conditions(rule.conditions, target)


def matches_conditions(conditions: Mapping[str, Any], target: Any) -> bool:
    """Every key path in conditions must equal the value at that path in target."""
    for key, expected in conditions.items():
        if not _value_matches(expected, walk_path(target, key)):
            return False
    return True


def _value_matches(expected: Any, actual: Any) -> bool:
    if expected is UNRESOLVED:
        return False
    if expected is None:
        return actual is UNRESOLVED
    if isinstance(expected, Mapping):
        return actual is not UNRESOLVED and matches_conditions(expected, actual)
    if isinstance(expected, (list, tuple)):
        if isinstance(actual, (str, bytes)) or not isinstance(actual, Sequence):
            return False
        return len(expected) == len(actual) and all(
            _value_matches(e, a) for e, a in zip(expected, actual)
        )
    if isinstance(expected, _SCALARS):
        return actual is not UNRESOLVED and _scalar_equal(expected, actual)
    raise MalformedCondition(f"Unsupported condition value {expected!r}")


def _scalar_equal(expected: Any, actual: Any) -> bool:
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected is actual
    if isinstance(expected, UUID) or isinstance(actual, UUID):
        return str(expected) == str(actual)
    return expected == actual
