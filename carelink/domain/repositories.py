"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the credential store contract (one store per role namespace)
  - Define the read-only donation ledger used by the admin dashboard

Collaborators:
  - domain.entities: Identity and its subclasses
  - Implementations in infrastructure.repositories

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Uniqueness (username, email, elder home name) is scoped to one role
  - create/update raise DuplicateIdentityError when a unique constraint
    fires, so a lost check-then-insert race surfaces as a conflict
  - update writes only the named fields; concurrent writers touching other
    columns (block flag, approval state, ratings) are never overwritten

Notes:
  - Using typing.Protocol for structural subtyping (duck typing)
"""

from datetime import datetime
from typing import Collection, List, Optional, Protocol
from uuid import UUID

from .entities import ApprovalStatus, Identity, Role


class IdentityRepository(Protocol):
    """
    R: Interface for identity persistence within one role namespace.

    Implementations must provide:
      - Lookup by id (optionally without the password hash) and username
      - Uniqueness probes for the role's unique fields
      - Create / update / delete
      - Listing and counting (operators filterable by approval status)
    """

    role: Role

    def get_by_id(
        self, identity_id: UUID, *, include_secret: bool = True
    ) -> Optional[Identity]:
        """
        R: Load an identity by id.

        Args:
            identity_id: Identity UUID
            include_secret: When False, password_hash is left as None
        """
        ...

    def get_by_username(self, username: str) -> Optional[Identity]:
        """R: Load an identity (with password hash) for credential checks."""
        ...

    def exists(
        self, field: str, value: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        """
        R: Whether another identity already holds value for a unique field.

        Args:
            field: One of the role's unique fields
                   (username, email, elder_home_name)
            value: Candidate value
            exclude_id: Identity to ignore (the one being updated)
        """
        ...

    def create(self, identity: Identity) -> Identity:
        """R: Insert a new identity. Raises DuplicateIdentityError."""
        ...

    def update(
        self, identity: Identity, fields: Collection[str]
    ) -> Optional[Identity]:
        """
        R: Persist the named fields of identity and refresh updated_at.

        Args:
            identity: Entity carrying the new values
            fields: Attribute names to write; every other column keeps its
                    stored value. password_hash is skipped when None.

        Returns:
            The stored identity after the write, or None when it is gone

        Raises:
            DuplicateIdentityError: a unique field collided
            ValueError: a field is not writable (id, created_at, unknown)
        """
        ...

    def add_feedback(
        self, identity_id: UUID, rating: int, text: str
    ) -> Optional[Identity]:
        """R: Append one rating and feedback entry atomically (volunteers)."""
        ...

    def delete(self, identity_id: UUID) -> bool:
        ...

    def list_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> List[Identity]:
        """R: List identities, newest first, without password hashes."""
        ...

    def count_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> int:
        ...

    def ping(self) -> bool:
        """R: Check that the backing store answers."""
        ...


class DonationLedger(Protocol):
    """R: Read-only view over recorded donation amounts."""

    def total_amount(self) -> float:
        ...

    def total_since(self, since: datetime) -> float:
        """R: Sum of donation amounts recorded at or after `since`."""
        ...
