"""Domain layer exports"""

from .entities import (
    Administrator,
    ApprovalStatus,
    Availability,
    Donor,
    ElderHomeOperator,
    Identity,
    Role,
    Volunteer,
    VolunteerRole,
)
from .repositories import DonationLedger, IdentityRepository
from .services import FileStoragePort

__all__ = [
    "Administrator",
    "ApprovalStatus",
    "Availability",
    "Donor",
    "ElderHomeOperator",
    "Identity",
    "Role",
    "Volunteer",
    "VolunteerRole",
    "DonationLedger",
    "IdentityRepository",
    "FileStoragePort",
]
