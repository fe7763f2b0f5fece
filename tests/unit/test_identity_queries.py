"""
Unit tests for identity query use cases and account deletion.
"""

from uuid import uuid4

import pytest

from carelink.application.use_cases import (
    CheckAvailabilityUseCase,
    DeleteAccountUseCase,
    GetIdentityUseCase,
    ListIdentitiesUseCase,
    operator_status,
)
from carelink.domain.entities import ApprovalStatus
from tests.factories import PNG_BYTES, make_donor, make_operator, make_volunteer

pytestmark = pytest.mark.unit


def test_get_identity_hides_password_hash(donor_repo):
    donor = donor_repo.create(make_donor())

    result = GetIdentityUseCase(donor_repo).execute(donor.id)

    assert result.identity.id == donor.id
    assert result.identity.password_hash is None


def test_get_unknown_identity(volunteer_repo):
    result = GetIdentityUseCase(volunteer_repo).execute(uuid4())

    assert result.error.message == "Volunteer not found"


def test_list_filters_by_status(operator_repo):
    operator_repo.create(make_operator())
    approved = operator_repo.create(
        make_operator(
            username="b",
            email="b@example.com",
            elder_home_name="B",
            approval_status=ApprovalStatus.APPROVED,
        )
    )

    result = ListIdentitiesUseCase(operator_repo).execute(ApprovalStatus.APPROVED)

    assert [o.id for o in result.identities] == [approved.id]
    assert len(ListIdentitiesUseCase(operator_repo).execute().identities) == 2


def test_availability_uses_write_normalization(donor_repo, volunteer_repo):
    donor_repo.create(make_donor())
    volunteer_repo.create(make_volunteer(username="vera"))

    assert CheckAvailabilityUseCase(donor_repo).execute("email", "DONOR@example.com") is False
    assert CheckAvailabilityUseCase(donor_repo).execute("username", "fresh") is True
    assert CheckAvailabilityUseCase(volunteer_repo).execute("username", "Vera") is False


def test_operator_status():
    assert operator_status(make_operator(approval_status=ApprovalStatus.APPROVED)) is None

    pending = operator_status(make_operator())
    assert pending.message == "Your account is pending approval from admin."

    rejected = operator_status(
        make_operator(approval_status=ApprovalStatus.REJECTED, rejection_reason="Bad")
    )
    assert rejected.rejection_reason == "Bad"


def test_delete_account_removes_files(operator_repo, storage):
    operator = operator_repo.create(make_operator(approval_status=ApprovalStatus.APPROVED))
    for key in operator.stored_files():
        storage.upload_file(key, PNG_BYTES, "image/png")

    result = DeleteAccountUseCase(operator_repo, storage).execute(operator.id)

    assert result.deleted is True
    assert operator_repo.get_by_id(operator.id) is None
    assert not any((storage.root / key).exists() for key in operator.stored_files())


def test_delete_unknown_account(donor_repo, storage):
    result = DeleteAccountUseCase(donor_repo, storage).execute(uuid4())

    assert result.deleted is False
    assert result.error.message == "Donor not found"
