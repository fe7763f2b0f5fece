"""
Unit tests for the per-role table descriptors used by the PostgreSQL repository.
"""

import pytest

from carelink.domain.entities import ApprovalStatus, Availability, Role, VolunteerRole
from carelink.infrastructure.repositories.identity_tables import IDENTITY_TABLES

pytestmark = pytest.mark.unit


def test_every_role_has_a_table():
    assert set(IDENTITY_TABLES) == set(Role)
    assert IDENTITY_TABLES[Role.OPERATOR].table == "elder_home_operators"


@pytest.mark.parametrize(
    "constraint, expected",
    [
        ("uq_donors_email", "email"),
        ("uq_donors_username", "username"),
        ("uq_volunteers_email", "unknown"),
        (None, "unknown"),
    ],
)
def test_constraint_field(constraint, expected):
    assert IDENTITY_TABLES[Role.DONOR].constraint_field(constraint) == expected


def test_operator_home_name_is_unique():
    table = IDENTITY_TABLES[Role.OPERATOR]

    assert "elder_home_name" in table.unique_fields
    assert table.constraint_field("uq_elder_home_operators_elder_home_name") == (
        "elder_home_name"
    )
    assert table.has_approval_status is True
    assert IDENTITY_TABLES[Role.DONOR].has_approval_status is False


def test_profile_columns_exclude_base_columns():
    columns = IDENTITY_TABLES[Role.VOLUNTEER].profile_columns

    assert "availability" in columns
    assert "password_hash" not in columns
    assert "id" not in columns


def test_writable_columns_exclude_store_assigned_ones():
    columns = IDENTITY_TABLES[Role.OPERATOR].writable_columns

    assert {"username", "password_hash", "is_blocked", "approval_status"} <= columns
    assert not {"id", "created_at", "updated_at"} & columns


def test_enum_and_availability_conversion():
    volunteers = IDENTITY_TABLES[Role.VOLUNTEER]
    operators = IDENTITY_TABLES[Role.OPERATOR]

    assert volunteers.to_db("volunteer_role", VolunteerRole.CARETAKER) == "Caretaker"
    assert volunteers.from_db("volunteer_role", "Caretaker") == VolunteerRole.CARETAKER
    assert operators.from_db("approval_status", "approved") == ApprovalStatus.APPROVED
    assert volunteers.from_db("availability", {}) == Availability()
    assert volunteers.from_db("skills", None) is None
    assert volunteers.from_db("ratings", [1, 2]) == [1, 2]
