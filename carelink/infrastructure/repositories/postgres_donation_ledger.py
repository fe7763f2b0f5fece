"""
Name: PostgreSQL Donation Ledger

Responsibilities:
  - Sum donation amounts for the administrator dashboard

Notes:
  - donations.donor_id is ON DELETE SET NULL, so amounts of deleted
    donors still count toward the totals
"""

from datetime import datetime
from typing import Optional

from psycopg_pool import ConnectionPool

from ...exceptions import DatabaseError
from ...logger import logger


class PostgresDonationLedger:
    """R: PostgreSQL implementation of DonationLedger."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ..db.pool import get_pool

        return get_pool()

    def total_amount(self) -> float:
        try:
            with self._get_pool().connection() as conn:
                row = conn.execute(
                    "SELECT COALESCE(SUM(amount), 0) FROM donations"
                ).fetchone()
            return float(row[0]) if row else 0.0
        except Exception as e:
            logger.error(f"PostgresDonationLedger: Total failed: {e}")
            raise DatabaseError(f"Donation total failed: {e}")

    def total_since(self, since: datetime) -> float:
        try:
            with self._get_pool().connection() as conn:
                row = conn.execute(
                    """
                    SELECT COALESCE(SUM(amount), 0)
                    FROM donations
                    WHERE created_at >= %s
                    """,
                    (since,),
                ).fetchone()
            return float(row[0]) if row else 0.0
        except Exception as e:
            logger.error(f"PostgresDonationLedger: Recent total failed: {e}")
            raise DatabaseError(f"Donation total failed: {e}")
