"""
Unit tests for column-scoped identity writes.

Tests:
  - An admin block landing mid profile update survives the update
  - Approval and ratings written mid profile update survive it
  - update() writes only the named fields and refuses store-owned ones
"""

import pytest

from carelink.application.use_cases import (
    ApproveOperatorUseCase,
    SubmitFeedbackInput,
    SubmitFeedbackUseCase,
    ToggleBlockUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from carelink.domain.entities import ApprovalStatus, Role
from carelink.infrastructure.repositories import InMemoryIdentityRepository
from tests.factories import make_donor, make_operator, make_volunteer

pytestmark = pytest.mark.unit


class InterleavingRepository(InMemoryIdentityRepository):
    """Runs `concurrent` once, on the first uniqueness check of a use case."""

    def __init__(self, role: Role):
        super().__init__(role)
        self.concurrent = None

    def exists(self, field, value, *, exclude_id=None):
        if self.concurrent is not None:
            action, self.concurrent = self.concurrent, None
            action()
        return super().exists(field, value, exclude_id=exclude_id)


def test_block_during_profile_update_is_kept(storage):
    donors = InterleavingRepository(Role.DONOR)
    donor = donors.create(make_donor())
    donors.concurrent = lambda: ToggleBlockUseCase(donors).execute(donor.id)

    result = UpdateProfileUseCase(donors, storage).execute(
        UpdateProfileInput(identity_id=donor.id, changes={"username": "renamed"})
    )

    stored = donors.get_by_id(donor.id)
    assert result.error is None
    assert stored.username == "renamed"
    assert stored.is_blocked is True
    assert result.identity.is_blocked is True


def test_operator_block_and_approval_survive_profile_update(storage):
    operators = InterleavingRepository(Role.OPERATOR)
    operator = operators.create(make_operator(approval_status=ApprovalStatus.PENDING))

    def admin_actions():
        ApproveOperatorUseCase(operators).execute(operator.id)
        ToggleBlockUseCase(operators).execute(operator.id)

    operators.concurrent = admin_actions

    UpdateProfileUseCase(operators, storage).execute(
        UpdateProfileInput(identity_id=operator.id, changes={"email": "new@example.com"})
    )

    stored = operators.get_by_id(operator.id)
    assert stored.email == "new@example.com"
    assert stored.approval_status == ApprovalStatus.APPROVED
    assert stored.is_blocked is True


def test_feedback_during_profile_update_is_kept(storage):
    volunteers = InterleavingRepository(Role.VOLUNTEER)
    volunteer = volunteers.create(make_volunteer())
    volunteers.concurrent = lambda: SubmitFeedbackUseCase(volunteers).execute(
        SubmitFeedbackInput(volunteer.id, 5, "Great")
    )

    UpdateProfileUseCase(volunteers, storage).execute(
        UpdateProfileInput(identity_id=volunteer.id, changes={"username": "renamed"})
    )

    stored = volunteers.get_by_id(volunteer.id)
    assert stored.ratings == [5]
    assert stored.average_rating == 5.0


class TestScopedUpdate:
    def test_writes_only_named_fields(self, donor_repo):
        donor = donor_repo.create(make_donor())
        stale = donor_repo.get_by_id(donor.id, include_secret=False)
        stale.address = "7 Elm Street"
        stale.full_name = "Not Written"
        stale.is_blocked = True

        updated = donor_repo.update(stale, ("address",))

        assert updated.address == "7 Elm Street"
        assert updated.full_name == donor.full_name
        assert updated.is_blocked is False

    def test_none_hash_keeps_stored_hash(self, donor_repo):
        donor = donor_repo.create(make_donor())
        stale = donor_repo.get_by_id(donor.id, include_secret=False)

        donor_repo.update(stale, ("password_hash",))

        assert donor_repo.get_by_id(donor.id).password_hash

    @pytest.mark.parametrize("field", ["id", "created_at", "role"])
    def test_store_owned_fields_are_refused(self, donor_repo, field):
        donor = donor_repo.create(make_donor())

        with pytest.raises(ValueError):
            donor_repo.update(donor, (field,))

    def test_feedback_only_for_volunteers(self, donor_repo):
        donor = donor_repo.create(make_donor())

        with pytest.raises(ValueError):
            donor_repo.add_feedback(donor.id, 4, "Nice")
