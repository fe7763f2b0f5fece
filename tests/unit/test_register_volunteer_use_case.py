"""
Unit tests for RegisterVolunteerUseCase (fail-fast ordering and parsing).
"""

import json
from datetime import date

import pytest

from carelink.application.use_cases import (
    IdentityErrorCode,
    RegisterVolunteerInput,
    RegisterVolunteerUseCase,
)
from carelink.domain.entities import VolunteerRole
from tests.factories import make_volunteer

pytestmark = pytest.mark.unit

TODAY = date(2025, 1, 1)


def _input(**overrides) -> RegisterVolunteerInput:
    values = dict(
        name="Vera Volunteer",
        username="Vera",
        email="vera@example.com",
        password="help@2024",
        phone="0771234567",
        age="30",
        date_of_birth="1994-05-20T00:00:00.000Z",
        address="Kandy",
        role="Caretaker",
        description="Weekend helper",
        skills=json.dumps(["cooking", "first aid"]),
        availability=json.dumps({"saturday": True, "timePreference": "mornings"}),
    )
    values.update(overrides)
    return RegisterVolunteerInput(**values)


@pytest.fixture
def use_case(volunteer_repo, storage):
    return RegisterVolunteerUseCase(volunteer_repo, storage, today=lambda: TODAY)


def test_registers_volunteer(use_case):
    result = use_case.execute(_input())

    assert result.error is None
    volunteer = result.identity
    assert volunteer.username == "vera"
    assert volunteer.age == 30
    assert volunteer.date_of_birth == date(1994, 5, 20)
    assert volunteer.volunteer_role == VolunteerRole.CARETAKER
    assert volunteer.skills == ["cooking", "first aid"]
    assert volunteer.availability.saturday is True
    assert volunteer.availability.monday is False
    assert volunteer.availability.time_preference == "mornings"
    assert result.token


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"name": "Vera 2"}, "Full name can only contain letters"),
        ({"username": "ve"}, "Username must be at least 3 letters and only contain letters"),
        ({"email": "vera.example.com"}, "Invalid email address"),
        ({"password": "a@1"}, "Password must be at least 6 characters"),
        ({"password": "help2024"}, "Password must include a special character like @"),
        ({"password": "help@now"}, "Password must include at least one number"),
        ({"password": "vera@1234"}, "Password cannot contain your name or username"),
        ({"phone": "12345"}, "Contact number must be exactly 10 digits"),
        ({"age": "thirty"}, "Please add your age"),
        ({"date_of_birth": ""}, "Please add your date of birth"),
        ({"age": "31"}, "Age and date of birth do not match"),
        ({"role": ""}, "Volunteer role is required"),
        ({"role": "Chef"}, "Please specify a valid volunteer role"),
        ({"address": "A very long address over twenty"}, "Address must be 20 characters or less"),
        ({"description": " "}, "Description is required"),
        ({"skills": "not json"}, "Invalid data format for skills or availability"),
        ({"availability": json.dumps({"monday": "yes"})}, "Invalid data format for skills or availability"),
    ],
)
def test_validation_messages(use_case, volunteer_repo, overrides, message):
    result = use_case.execute(_input(**overrides))

    assert result.error.code == IdentityErrorCode.VALIDATION_ERROR
    assert result.error.message == message
    assert volunteer_repo.count_identities() == 0


def test_first_violation_wins(use_case):
    result = use_case.execute(_input(name="R2D2", phone="1", age="x"))

    assert result.error.message == "Full name can only contain letters"


def test_username_conflict_is_case_insensitive(use_case, volunteer_repo):
    volunteer_repo.create(make_volunteer(username="vera", email="first@example.com"))

    result = use_case.execute(_input(username="VERA"))

    assert result.error.code == IdentityErrorCode.CONFLICT
    assert result.error.message == "Username already exists"


def test_email_conflict(use_case, volunteer_repo):
    volunteer_repo.create(make_volunteer(username="other", email="vera@example.com"))

    result = use_case.execute(_input())

    assert result.error.code == IdentityErrorCode.CONFLICT
    assert result.error.message == "Email already exists"
