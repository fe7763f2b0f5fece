"""
Name: Identity Use Case Results

Responsibilities:
  - Provide consistent error/result types for account and admission use cases
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from ...domain.entities import ApprovalStatus, Identity, Role, Volunteer


class IdentityErrorCode(str, Enum):
    """R: Error codes for identity use cases."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class IdentityError:
    code: IdentityErrorCode
    message: str
    extra: dict[str, Any] | None = None


def validation(message: str) -> IdentityError:
    return IdentityError(IdentityErrorCode.VALIDATION_ERROR, message)


def conflict(message: str) -> IdentityError:
    return IdentityError(IdentityErrorCode.CONFLICT, message)


def not_found(message: str) -> IdentityError:
    return IdentityError(IdentityErrorCode.NOT_FOUND, message)


class LoginOutcome(str, Enum):
    """R: Successful login, or an operator whose admission is not final."""

    AUTHENTICATED = "authenticated"
    PENDING = "pending"
    REJECTED = "rejected"


@dataclass
class RegistrationResult:
    identity: Identity | None = None
    token: str | None = None
    error: IdentityError | None = None


@dataclass
class LoginResult:
    identity: Identity | None = None
    token: str | None = None
    outcome: LoginOutcome | None = None
    error: IdentityError | None = None


@dataclass
class ProfileResult:
    identity: Identity | None = None
    token: str | None = None
    error: IdentityError | None = None


@dataclass
class DeleteAccountResult:
    deleted: bool
    error: IdentityError | None = None


@dataclass
class ModerationResult:
    identity: Identity | None = None
    message: str = ""
    error: IdentityError | None = None


@dataclass
class ToggleBlockResult:
    identity: Identity | None = None
    is_blocked: bool = False
    message: str = ""
    error: IdentityError | None = None


@dataclass
class IdentityListResult:
    identities: List[Identity] = field(default_factory=list)


@dataclass
class FeedbackResult:
    volunteer: Volunteer | None = None
    error: IdentityError | None = None


@dataclass
class AdminDashboard:
    total_users: int
    total_donors: int
    total_volunteers: int
    total_elder_homes: int
    pending_approvals: int
    rejected_applications: int
    total_donations: float
    recent_donations: float


@dataclass
class OperatorStatus:
    """R: What an operator sees on the dashboard before approval."""

    approval_status: ApprovalStatus
    message: str
    rejection_reason: Optional[str] = None


NOT_FOUND_MESSAGES = {
    Role.DONOR: "Donor not found",
    Role.VOLUNTEER: "Volunteer not found",
    Role.OPERATOR: "Elder home owner not found",
    Role.ADMIN: "Administrator not found",
}


def identity_not_found(role: Role) -> IdentityError:
    return not_found(NOT_FOUND_MESSAGES[Role(role)])
