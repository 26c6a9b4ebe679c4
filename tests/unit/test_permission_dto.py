"""Unit tests for permission rule DTOs."""

from uuid import uuid4

import pytest

from rulegate.application.dto.permission_dto import PermissionRuleInput, PermissionUpdateInput
from rulegate.domain.exceptions import ValidationError

from tests.conftest import make_permission


def test_scalars_become_lists() -> None:
    rule = PermissionRuleInput(action="read", subject="company")
    assert rule.action == ["read"]
    assert rule.subject == ["company"]
    assert rule.inverted is False


def test_unknown_subject_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown subject: spaceship"):
        PermissionRuleInput(action="read", subject=["company", "spaceship"])


def test_empty_action_rejected() -> None:
    with pytest.raises(ValidationError, match="must not be empty"):
        PermissionRuleInput(action=[], subject="company")


def test_conditions_json_string_decoded() -> None:
    rule = PermissionRuleInput(action="read", subject="company", conditions='{"id": "${user.companyId}"}')
    assert rule.conditions == {"id": "${user.companyId}"}


@pytest.mark.parametrize("conditions", ["not json", "[1, 2]", 5])
def test_bad_conditions_rejected(conditions) -> None:
    with pytest.raises(ValidationError):
        PermissionRuleInput(action="read", subject="company", conditions=conditions)


def test_fields_must_be_list_of_strings() -> None:
    with pytest.raises(ValidationError):
        PermissionRuleInput(action="read", subject="company", fields="name")


def test_from_mapping_missing_field() -> None:
    with pytest.raises(ValidationError, match="Missing required field: 'subject'"):
        PermissionRuleInput.from_mapping({"action": "read"})


def test_to_permission() -> None:
    role_id = uuid4()
    permission = PermissionRuleInput(
        action="delete", subject="payment", inverted=True, reason="finance only"
    ).to_permission(role_id)
    assert permission.role_id == role_id
    assert permission.inverted
    assert permission.reason == "finance only"
    assert permission.created_at is not None


def test_update_applies_only_given_keys() -> None:
    permission = make_permission(uuid4(), "read", "company", reason="keep")
    PermissionUpdateInput({"subject": "file"}).apply(permission)
    assert permission.subject == ["file"]
    assert permission.reason == "keep"


def test_update_validates_values() -> None:
    with pytest.raises(ValidationError):
        PermissionUpdateInput({"action": "fly"})
