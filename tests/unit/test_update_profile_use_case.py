"""
Unit tests for UpdateProfileUseCase.

Tests:
  - Truthy merge (empty values leave stored ones untouched)
  - Uniqueness re-checks exclude the identity itself
  - Password re-hash only when a new one is supplied
  - File replacement removes the superseded files after commit
  - A fresh token is issued
"""

import json

import pytest

from carelink.application.uploads import UploadField
from carelink.application.use_cases import (
    IdentityErrorCode,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from carelink.domain.entities import ApprovalStatus, VolunteerRole
from carelink.passwords import verify_password
from carelink.tokens import verify_token
from tests.factories import (
    PASSWORD,
    PNG_BYTES,
    make_admin,
    make_donor,
    make_operator,
    make_volunteer,
    pdf_upload,
    png_upload,
)

pytestmark = pytest.mark.unit


class TestDonorProfile:
    def test_truthy_merge_keeps_unset_fields(self, donor_repo, storage):
        donor = donor_repo.create(make_donor())

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(
                identity_id=donor.id,
                changes={"address": "New Road 1", "full_name": "", "description": None},
            )
        )

        assert result.error is None
        assert result.identity.address == "New Road 1"
        assert result.identity.full_name == "Dana Donor"
        assert verify_token(result.token).subject_id == donor.id

    def test_password_is_kept_unless_supplied(self, donor_repo, storage):
        donor = donor_repo.create(make_donor())
        use_case = UpdateProfileUseCase(donor_repo, storage)

        use_case.execute(UpdateProfileInput(identity_id=donor.id, changes={"address": "X Road"}))
        assert verify_password(PASSWORD, donor_repo.get_by_id(donor.id).password_hash)

        use_case.execute(UpdateProfileInput(identity_id=donor.id, changes={"password": "newpass@1"}))
        assert verify_password("newpass@1", donor_repo.get_by_id(donor.id).password_hash)

    def test_short_password_is_rejected(self, donor_repo, storage):
        donor = donor_repo.create(make_donor())

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(identity_id=donor.id, changes={"password": "123"})
        )

        assert result.error.message == "Password must be at least 6 characters long"

    def test_keeping_own_username_is_not_a_conflict(self, donor_repo, storage):
        donor = donor_repo.create(make_donor())

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(
                identity_id=donor.id,
                changes={"username": "donorone", "email": "DONOR@example.com"},
            )
        )

        assert result.error is None

    def test_username_taken_by_other_donor(self, donor_repo, storage):
        donor_repo.create(make_donor(username="taken", email="taken@example.com"))
        donor = donor_repo.create(make_donor())

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(identity_id=donor.id, changes={"username": "taken"})
        )

        assert result.error.code == IdentityErrorCode.CONFLICT
        assert result.error.message == "Username already exists"

    def test_email_is_lowercased_and_checked(self, donor_repo, storage):
        donor_repo.create(make_donor(username="other", email="taken@example.com"))
        donor = donor_repo.create(make_donor())
        use_case = UpdateProfileUseCase(donor_repo, storage)

        taken = use_case.execute(
            UpdateProfileInput(identity_id=donor.id, changes={"email": "TAKEN@example.com"})
        )
        invalid = use_case.execute(
            UpdateProfileInput(identity_id=donor.id, changes={"email": "nope"})
        )

        assert taken.error.message == "Email already in use"
        assert invalid.error.message == "Please enter a valid email address"

    def test_new_photo_replaces_old_file(self, donor_repo, storage):
        storage.upload_file("profiles/old.png", PNG_BYTES, "image/png")
        donor = donor_repo.create(make_donor(profile_photo="profiles/old.png"))

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(
                identity_id=donor.id,
                profile_photo=png_upload(UploadField.PROFILE_PHOTO),
            )
        )

        assert result.identity.profile_photo != "profiles/old.png"
        assert (storage.root / result.identity.profile_photo).exists()
        assert not (storage.root / "profiles/old.png").exists()

    def test_unknown_identity(self, donor_repo, storage):
        from uuid import uuid4

        result = UpdateProfileUseCase(donor_repo, storage).execute(
            UpdateProfileInput(identity_id=uuid4(), changes={"address": "x"})
        )

        assert result.error.code == IdentityErrorCode.NOT_FOUND
        assert result.error.message == "Donor not found"


class TestVolunteerProfile:
    def test_structured_fields_are_parsed(self, volunteer_repo, storage):
        volunteer = volunteer_repo.create(make_volunteer())

        result = UpdateProfileUseCase(volunteer_repo, storage).execute(
            UpdateProfileInput(
                identity_id=volunteer.id,
                changes={
                    "age": "31",
                    "role": "Educational Support",
                    "skills": json.dumps(["reading"]),
                    "availability": json.dumps({"monday": True}),
                },
            )
        )

        updated = result.identity
        assert updated.age == 31
        assert updated.volunteer_role == VolunteerRole.EDUCATIONAL_SUPPORT
        assert updated.skills == ["reading"]
        # R: availability is merged over the stored schedule
        assert updated.availability.monday is True
        assert updated.availability.saturday is True

    @pytest.mark.parametrize(
        "changes,message",
        [
            ({"username": "a!"}, "Invalid username format (min 3 chars, letters, numbers, underscores only)"),
            ({"email": "bad"}, "Invalid email format"),
            ({"age": "old"}, "Age must be a number"),
            ({"date_of_birth": "yesterday"}, "Invalid date of birth"),
            ({"role": "Chef"}, "Please specify a valid volunteer role"),
            ({"skills": "{"}, "Invalid data format for skills"),
            ({"availability": "[1]"}, "Invalid data format for availability"),
        ],
    )
    def test_validation_messages(self, volunteer_repo, storage, changes, message):
        volunteer = volunteer_repo.create(make_volunteer())

        result = UpdateProfileUseCase(volunteer_repo, storage).execute(
            UpdateProfileInput(identity_id=volunteer.id, changes=changes)
        )

        assert result.error.message == message

    def test_username_conflict_message(self, volunteer_repo, storage):
        volunteer_repo.create(make_volunteer(username="taken", email="t@example.com"))
        volunteer = volunteer_repo.create(make_volunteer())

        result = UpdateProfileUseCase(volunteer_repo, storage).execute(
            UpdateProfileInput(identity_id=volunteer.id, changes={"username": "Taken"})
        )

        assert result.error.code == IdentityErrorCode.CONFLICT
        assert result.error.message == "Username already taken"


class TestOperatorProfile:
    def test_home_name_conflict(self, operator_repo, storage):
        operator_repo.create(
            make_operator(username="other", email="o@example.com", elder_home_name="Taken")
        )
        operator = operator_repo.create(make_operator(approval_status=ApprovalStatus.APPROVED))

        result = UpdateProfileUseCase(operator_repo, storage).execute(
            UpdateProfileInput(identity_id=operator.id, changes={"elder_home_name": "Taken"})
        )

        assert result.error.message == "Elder home name already exists"

    def test_numeric_fields(self, operator_repo, storage):
        operator = operator_repo.create(make_operator(approval_status=ApprovalStatus.APPROVED))
        use_case = UpdateProfileUseCase(operator_repo, storage)

        bad_account = use_case.execute(
            UpdateProfileInput(identity_id=operator.id, changes={"account_number": "12"})
        )
        bad_capacity = use_case.execute(
            UpdateProfileInput(identity_id=operator.id, changes={"capacity": "many"})
        )
        ok = use_case.execute(
            UpdateProfileInput(identity_id=operator.id, changes={"capacity": "40"})
        )

        assert bad_account.error.message == "Account number must be exactly 16 digits"
        assert bad_capacity.error.message == "Capacity must be a positive whole number"
        assert ok.identity.capacity == 40
        assert ok.identity.approval_status == ApprovalStatus.APPROVED

    @pytest.mark.parametrize("capacity", ["2.9", "-5", "0", "1e20", "99999999999"])
    def test_capacity_out_of_range_keeps_stored_value(self, operator_repo, storage, capacity):
        operator = operator_repo.create(
            make_operator(approval_status=ApprovalStatus.APPROVED, capacity=25)
        )

        result = UpdateProfileUseCase(operator_repo, storage).execute(
            UpdateProfileInput(identity_id=operator.id, changes={"capacity": capacity})
        )

        assert result.error.code == IdentityErrorCode.VALIDATION_ERROR
        assert result.error.message == "Capacity must be a positive whole number"
        assert operator_repo.get_by_id(operator.id).capacity == 25

    def test_replacing_documents_removes_old_files(self, operator_repo, storage):
        old_license = "licenses/licenseDocument-1-aaaaaaaaaaaa.pdf"
        old_photo = "homes/homePhotos-1-bbbbbbbbbbbb.png"
        storage.upload_file(old_license, b"%PDF", "application/pdf")
        storage.upload_file(old_photo, PNG_BYTES, "image/png")
        operator = operator_repo.create(make_operator(approval_status=ApprovalStatus.APPROVED))

        result = UpdateProfileUseCase(operator_repo, storage).execute(
            UpdateProfileInput(
                identity_id=operator.id,
                license_document=pdf_upload(),
                home_photos=[png_upload(UploadField.HOME_PHOTOS)],
            )
        )

        assert result.identity.license_path != old_license
        assert result.identity.home_photos != [old_photo]
        assert not (storage.root / old_license).exists()
        assert not (storage.root / old_photo).exists()


def test_admin_profiles_are_not_updatable(admin_repo, storage):
    admin_repo.create(make_admin())

    with pytest.raises(ValueError):
        UpdateProfileUseCase(admin_repo, storage)
