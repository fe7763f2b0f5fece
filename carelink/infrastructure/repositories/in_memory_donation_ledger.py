"""
Name: In-Memory Donation Ledger

Responsibilities:
  - DonationLedger for tests and APP_ENV=test (no database)
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID


@dataclass
class DonationRecord:
    amount: float
    created_at: datetime
    donor_id: Optional[UUID] = None


class InMemoryDonationLedger:
    """R: In-memory implementation of DonationLedger."""

    def __init__(self) -> None:
        self._records: List[DonationRecord] = []

    def record(
        self,
        amount: float,
        *,
        donor_id: Optional[UUID] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self._records.append(
            DonationRecord(
                amount=amount,
                donor_id=donor_id,
                created_at=created_at or datetime.now(timezone.utc),
            )
        )

    def total_amount(self) -> float:
        return float(sum(r.amount for r in self._records))

    def total_since(self, since: datetime) -> float:
        return float(sum(r.amount for r in self._records if r.created_at >= since))
