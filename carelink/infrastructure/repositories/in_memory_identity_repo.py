"""
Name: In-Memory Identity Repository

Responsibilities:
  - Implement IdentityRepository without a database (APP_ENV=test, unit tests)
  - Enforce the same per-role uniqueness as the PostgreSQL constraints

Constraints:
  - Stores copies; callers never hold a reference to stored state
  - Thread-safe (sync endpoints run in a threadpool)
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Collection, Dict, List, Optional
from uuid import UUID

from ...domain.entities import IDENTITY_TYPES, ApprovalStatus, Identity, Role
from ...exceptions import DuplicateIdentityError

_UNIQUE_FIELDS: dict[Role, tuple[str, ...]] = {
    Role.DONOR: ("username", "email"),
    Role.VOLUNTEER: ("username", "email"),
    Role.OPERATOR: ("username", "email", "elder_home_name"),
    Role.ADMIN: ("username",),
}

# R: Assigned by the store, never by update()
_READ_ONLY_FIELDS = ("id", "created_at", "updated_at")


class InMemoryIdentityRepository:
    """R: In-memory implementation of IdentityRepository."""

    def __init__(self, role: Role):
        self.role = role
        self._unique_fields = _UNIQUE_FIELDS[role]
        self._writable = frozenset(
            f for f in IDENTITY_TYPES[role].field_names() if f not in _READ_ONLY_FIELDS
        )
        self._items: Dict[UUID, Identity] = {}
        self._lock = threading.Lock()

    def _copy(self, identity: Identity, *, include_secret: bool = True) -> Identity:
        clone = copy.deepcopy(identity)
        if not include_secret:
            clone.password_hash = None
        return clone

    def _find_duplicate(self, identity: Identity) -> Optional[str]:
        for field in self._unique_fields:
            value = getattr(identity, field)
            for other in self._items.values():
                if other.id != identity.id and getattr(other, field) == value:
                    return field
        return None

    def get_by_id(
        self, identity_id: UUID, *, include_secret: bool = True
    ) -> Optional[Identity]:
        with self._lock:
            stored = self._items.get(identity_id)
            return self._copy(stored, include_secret=include_secret) if stored else None

    def get_by_username(self, username: str) -> Optional[Identity]:
        with self._lock:
            for stored in self._items.values():
                if stored.username == username:
                    return self._copy(stored)
        return None

    def exists(
        self, field: str, value: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        if field not in self._unique_fields:
            raise ValueError(f"{field} is not a unique field for {self.role.value}")
        with self._lock:
            return any(
                getattr(stored, field) == value and stored.id != exclude_id
                for stored in self._items.values()
            )

    def create(self, identity: Identity) -> Identity:
        with self._lock:
            duplicate = self._find_duplicate(identity)
            if duplicate:
                raise DuplicateIdentityError(duplicate)
            stored = self._copy(identity)
            now = datetime.now(timezone.utc)
            stored.created_at = now
            stored.updated_at = now
            self._items[stored.id] = stored
            return self._copy(stored, include_secret=False)

    def update(
        self, identity: Identity, fields: Collection[str]
    ) -> Optional[Identity]:
        names = [
            f for f in fields if f != "password_hash" or identity.password_hash is not None
        ]
        for name in names:
            if name not in self._writable:
                raise ValueError(f"{name} is not writable for {self.role.value}")
        with self._lock:
            current = self._items.get(identity.id)
            if current is None:
                return None
            stored = self._copy(current)
            for name in names:
                setattr(stored, name, copy.deepcopy(getattr(identity, name)))
            duplicate = self._find_duplicate(stored)
            if duplicate:
                raise DuplicateIdentityError(duplicate)
            stored.updated_at = datetime.now(timezone.utc)
            self._items[stored.id] = stored
            return self._copy(stored, include_secret=False)

    def add_feedback(
        self, identity_id: UUID, rating: int, text: str
    ) -> Optional[Identity]:
        if self.role != Role.VOLUNTEER:
            raise ValueError(f"{self.role.value} accounts take no feedback")
        with self._lock:
            stored = self._items.get(identity_id)
            if stored is None:
                return None
            stored.add_feedback(rating, text)
            stored.updated_at = datetime.now(timezone.utc)
            return self._copy(stored, include_secret=False)

    def delete(self, identity_id: UUID) -> bool:
        with self._lock:
            return self._items.pop(identity_id, None) is not None

    def _filtered(self, approval_status: Optional[ApprovalStatus]) -> List[Identity]:
        items = list(self._items.values())
        if approval_status is not None:
            if self.role != Role.OPERATOR:
                raise ValueError(f"{self.role.value} has no approval status")
            items = [i for i in items if i.approval_status == approval_status]
        return items

    def list_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> List[Identity]:
        with self._lock:
            items = self._filtered(approval_status)
            items.sort(key=lambda i: i.created_at, reverse=True)
            return [self._copy(i, include_secret=False) for i in items]

    def count_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> int:
        with self._lock:
            return len(self._filtered(approval_status))

    def ping(self) -> bool:
        return True
