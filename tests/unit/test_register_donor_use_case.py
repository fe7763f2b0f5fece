"""
Unit tests for RegisterDonorUseCase.
"""

from unittest.mock import MagicMock

import pytest

from carelink.application.uploads import UploadField
from carelink.application.use_cases import (
    IdentityErrorCode,
    RegisterDonorInput,
    RegisterDonorUseCase,
)
from carelink.domain.entities import DEFAULT_PROFILE_PHOTO, Role
from carelink.exceptions import DuplicateIdentityError
from carelink.passwords import verify_password
from carelink.tokens import verify_token
from tests.factories import PASSWORD, make_donor, png_upload

pytestmark = pytest.mark.unit


def _input(**overrides) -> RegisterDonorInput:
    values = dict(
        full_name="Dana Donor",
        email="Dana@Example.com",
        address="12 Main Street",
        contact_number="0771234567",
        username="dana",
        password=PASSWORD,
    )
    values.update(overrides)
    return RegisterDonorInput(**values)


def test_registers_donor_and_issues_token(donor_repo, storage):
    result = RegisterDonorUseCase(donor_repo, storage).execute(_input())

    assert result.error is None
    donor = result.identity
    assert donor.email == "dana@example.com"
    assert donor.profile_photo == DEFAULT_PROFILE_PHOTO
    assert donor.password_hash is None

    stored = donor_repo.get_by_username("dana")
    assert verify_password(PASSWORD, stored.password_hash)

    claims = verify_token(result.token)
    assert claims.subject_id == donor.id
    assert claims.role == Role.DONOR


def test_profile_photo_is_stored(donor_repo, storage):
    result = RegisterDonorUseCase(donor_repo, storage).execute(
        _input(profile_photo=png_upload(UploadField.PROFILE_PHOTO))
    )

    assert result.identity.profile_photo.startswith("profiles/profilePhoto-")
    assert (storage.root / result.identity.profile_photo).exists()


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"full_name": " "}, "Full name is required"),
        ({"email": ""}, "Email is required"),
        ({"username": "ab"}, "Username must be at least 3 characters long"),
        ({"password": "12345"}, "Password must be at least 6 characters long"),
        ({"email": "not-an-email"}, "Please enter a valid email address"),
    ],
)
def test_validation_failures(donor_repo, storage, overrides, message):
    result = RegisterDonorUseCase(donor_repo, storage).execute(_input(**overrides))

    assert result.error.code == IdentityErrorCode.VALIDATION_ERROR
    assert result.error.message == message
    assert donor_repo.count_identities() == 0


def test_duplicate_username_and_email(donor_repo, storage):
    donor_repo.create(make_donor(username="dana", email="other@example.com"))
    use_case = RegisterDonorUseCase(donor_repo, storage)

    taken_username = use_case.execute(_input())
    taken_email = use_case.execute(_input(username="dana2", email="OTHER@example.com"))

    assert taken_username.error.code == IdentityErrorCode.CONFLICT
    assert taken_username.error.message == "Username already exists"
    assert taken_email.error.message == "Email already in use"


def test_lost_uniqueness_race_cleans_up_photo(storage):
    repo = MagicMock()
    repo.exists.return_value = False
    repo.create.side_effect = DuplicateIdentityError("email")

    result = RegisterDonorUseCase(repo, storage).execute(
        _input(profile_photo=png_upload(UploadField.PROFILE_PHOTO))
    )

    assert result.error.code == IdentityErrorCode.CONFLICT
    assert result.error.message == "Email already in use"
    assert not list((storage.root / "profiles").glob("*"))
