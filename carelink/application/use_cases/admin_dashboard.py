"""
Name: Admin Dashboard Use Case

Responsibilities:
  - Aggregate account counts across the role namespaces
  - Read donation totals (all time and the last 7 days) from the ledger

Notes:
  - totalUsers counts donors, volunteers and approved elder homes;
    pending and rejected applications are reported separately
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

from ...domain.entities import ApprovalStatus
from ...domain.repositories import DonationLedger, IdentityRepository
from .identity_results import AdminDashboard

RECENT_DONATIONS_WINDOW = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdminDashboardUseCase:
    def __init__(
        self,
        donors: IdentityRepository,
        volunteers: IdentityRepository,
        operators: IdentityRepository,
        ledger: DonationLedger,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.donors = donors
        self.volunteers = volunteers
        self.operators = operators
        self.ledger = ledger
        self.clock = clock

    def execute(self) -> AdminDashboard:
        total_donors = self.donors.count_identities()
        total_volunteers = self.volunteers.count_identities()
        approved = self.operators.count_identities(approval_status=ApprovalStatus.APPROVED)
        pending = self.operators.count_identities(approval_status=ApprovalStatus.PENDING)
        rejected = self.operators.count_identities(approval_status=ApprovalStatus.REJECTED)

        return AdminDashboard(
            total_users=total_donors + total_volunteers + approved,
            total_donors=total_donors,
            total_volunteers=total_volunteers,
            total_elder_homes=approved,
            pending_approvals=pending,
            rejected_applications=rejected,
            total_donations=self.ledger.total_amount(),
            recent_donations=self.ledger.total_since(self.clock() - RECENT_DONATIONS_WINDOW),
        )
