"""
Name: Identity Query Use Cases

Responsibilities:
  - Fetch one identity (without its hash) by id
  - List identities of a role, optionally by approval status
  - Answer availability probes for unique fields
  - Describe an operator's dashboard state before approval
"""

from uuid import UUID

from ...domain.approval import NO_REASON_PROVIDED
from ...domain.entities import ApprovalStatus, ElderHomeOperator, Role
from ...domain.repositories import IdentityRepository
from .authenticate import PENDING_LOGIN_MESSAGE, REJECTED_LOGIN_MESSAGE
from .identity_results import (
    IdentityListResult,
    OperatorStatus,
    ProfileResult,
    identity_not_found,
)


class GetIdentityUseCase:
    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, identity_id: UUID) -> ProfileResult:
        identity = self.repository.get_by_id(identity_id, include_secret=False)
        if identity is None:
            return ProfileResult(error=identity_not_found(self.repository.role))
        return ProfileResult(identity=identity)


class ListIdentitiesUseCase:
    """R: Newest first, never with password hashes."""

    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, approval_status: ApprovalStatus | None = None) -> IdentityListResult:
        return IdentityListResult(
            identities=self.repository.list_identities(approval_status=approval_status)
        )


class CheckAvailabilityUseCase:
    """R: Whether a username / email / elder home name is still free."""

    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, field: str, value: str) -> bool:
        return not self.repository.exists(
            field, normalize_unique_value(self.repository.role, field, value)
        )


def normalize_unique_value(role: Role, field: str, value: str) -> str:
    """R: Apply the same normalization the write path applies."""
    value = (value or "").strip()
    if field == "email" and role in (Role.DONOR, Role.OPERATOR):
        return value.lower()
    if field == "username" and role == Role.VOLUNTEER:
        return value.lower()
    return value


def operator_status(operator: ElderHomeOperator) -> OperatorStatus | None:
    """R: Status payload for a non-approved operator; None once approved."""
    if operator.approval_status == ApprovalStatus.PENDING:
        return OperatorStatus(
            approval_status=ApprovalStatus.PENDING, message=PENDING_LOGIN_MESSAGE
        )
    if operator.approval_status == ApprovalStatus.REJECTED:
        return OperatorStatus(
            approval_status=ApprovalStatus.REJECTED,
            message=REJECTED_LOGIN_MESSAGE,
            rejection_reason=operator.rejection_reason or NO_REASON_PROVIDED,
        )
    return None
