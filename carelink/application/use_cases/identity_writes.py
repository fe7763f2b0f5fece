"""
Name: Identity Write Helpers

Responsibilities:
  - Run role-scoped uniqueness pre-checks with role-specific messages
  - Translate insert/update-time DuplicateIdentityError into the same
    conflict the pre-check would have produced

Notes:
  - The pre-check and the write are not atomic; the unique constraint
    is the real guarantee
"""

from typing import Mapping, Optional, Sequence, Tuple
from uuid import UUID

from ...domain.repositories import IdentityRepository
from ...exceptions import DuplicateIdentityError
from .identity_results import IdentityError, conflict

# R: (field, candidate value, conflict message)
UniqueCheck = Tuple[str, Optional[str], str]


def first_taken(
    repository: IdentityRepository,
    checks: Sequence[UniqueCheck],
    *,
    exclude_id: UUID | None = None,
) -> IdentityError | None:
    """R: Return the conflict for the first field whose value is already held."""
    for field, value, message in checks:
        if value and repository.exists(field, value, exclude_id=exclude_id):
            return conflict(message)
    return None


def duplicate_error(
    exc: DuplicateIdentityError, messages: Mapping[str, str]
) -> IdentityError:
    return conflict(messages.get(exc.field) or exc.message)
