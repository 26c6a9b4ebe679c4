"""Compiled rule and subject-typed resource instances."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any
from uuid import UUID

from rulegate.domain.ability.paths import UNRESOLVED
from rulegate.domain.value_objects import Action, Subject


@dataclass(frozen=True)
class Rule:
    """One normalized rule: action set, subject set, optional fields and conditions."""

    actions: tuple[str, ...]
    subjects: tuple[str, ...]
    fields: tuple[str, ...] | None = None
    conditions: Mapping[str, Any] | None = None
    inverted: bool = False
    reason: str | None = None
    permission_id: UUID | None = None

    def matches_action(self, action: str) -> bool:
        return action in self.actions or Action.MANAGE in self.actions

    def matches_subject(self, subject_type: str) -> bool:
        return subject_type in self.subjects or Subject.ALL in self.subjects

    def matches_field(self, field: str | None) -> bool:
        if self.fields is None:
            return True
        if field is None:
            # A field-scoped forbid only applies when that field is asked for.
            return not self.inverted
        return field in self.fields

    @property
    def has_conditions(self) -> bool:
        return bool(self.conditions)

    def is_satisfiable(self) -> bool:
        """False when any condition value failed to resolve."""
        return not _contains_unresolved(self.conditions)

    def with_conditions(self, conditions: Mapping[str, Any] | None) -> "Rule":
        return replace(self, conditions=conditions)


def _contains_unresolved(value: Any) -> bool:
    if value is UNRESOLVED:
        return True
    if isinstance(value, Mapping):
        return any(_contains_unresolved(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_contains_unresolved(v) for v in value)
    return False


@dataclass(frozen=True)
class ResourceInstance:
    """A concrete resource: its subject kind plus its attributes (mapping or object)."""

    subject: str
    attributes: Any


def subject_type_of(resource: Any) -> str:
    """Subject kind of a resource instance.

    ResourceInstance carries it explicitly; objects may declare ``__subject__``;
    mappings may carry a ``__subject__`` key. Anything else falls back to the
    lower-cased class name.
    """
    if isinstance(resource, ResourceInstance):
        return str(resource.subject)
    if isinstance(resource, Mapping):
        declared = resource.get("__subject__")
    else:
        declared = getattr(type(resource), "__subject__", None)
    if declared is not None:
        return str(declared)
    return type(resource).__name__.lower()


def attributes_of(resource: Any) -> Any:
    if isinstance(resource, ResourceInstance):
        return resource.attributes
    return resource
