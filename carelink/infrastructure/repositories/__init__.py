"""Infrastructure repositories"""

from .identity_tables import IDENTITY_TABLES, IdentityTable
from .postgres_identity_repo import PostgresIdentityRepository
from .postgres_donation_ledger import PostgresDonationLedger
from .in_memory_identity_repo import InMemoryIdentityRepository
from .in_memory_donation_ledger import InMemoryDonationLedger

__all__ = [
    "IDENTITY_TABLES",
    "IdentityTable",
    "PostgresIdentityRepository",
    "PostgresDonationLedger",
    "InMemoryIdentityRepository",
    "InMemoryDonationLedger",
]
