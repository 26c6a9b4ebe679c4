"""Rule evaluation engine - condition resolution and abilities."""

from rulegate.domain.ability.ability import Ability, Decision, MalformedCondition
from rulegate.domain.ability.condition_resolver import ConditionResolver
from rulegate.domain.ability.paths import UNRESOLVED, walk_path
from rulegate.domain.ability.rules import ResourceInstance, Rule, subject_type_of

__all__ = [
    "Ability",
    "ConditionResolver",
    "Decision",
    "MalformedCondition",
    "ResourceInstance",
    "Rule",
    "UNRESOLVED",
    "subject_type_of",
    "walk_path",
]
