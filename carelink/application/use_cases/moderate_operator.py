"""
Name: Moderate Operator Use Cases

Responsibilities:
  - Approve an elder home application (from pending or rejected)
  - Reject a pending application with a reason

Collaborators:
  - domain.approval: transition rules
  - IdentityRepository (operator namespace)
"""

from uuid import UUID

from ...domain.approval import (
    APPROVAL_FIELDS,
    ApprovalTransitionError,
    approve,
    reject,
)
from ...domain.entities import Role
from ...domain.repositories import IdentityRepository
from ...logger import logger
from .identity_results import ModerationResult, identity_not_found, validation


def _require_operator_repository(repository: IdentityRepository) -> None:
    if repository.role != Role.OPERATOR:
        raise ValueError("Moderation requires the operator repository")


class ApproveOperatorUseCase:
    """R: Admit an elder home operator."""

    def __init__(self, repository: IdentityRepository):
        _require_operator_repository(repository)
        self.repository = repository

    def execute(self, operator_id: UUID) -> ModerationResult:
        operator = self.repository.get_by_id(operator_id, include_secret=False)
        if operator is None:
            return ModerationResult(error=identity_not_found(Role.OPERATOR))

        previous = operator.approval_status
        updated = self.repository.update(approve(operator), APPROVAL_FIELDS)
        if updated is None:
            return ModerationResult(error=identity_not_found(Role.OPERATOR))

        logger.info(
            "Elder home approved",
            extra={"identity_id": str(operator_id), "from_status": previous.value},
        )
        return ModerationResult(
            identity=updated, message="Elder home owner approved successfully"
        )


class RejectOperatorUseCase:
    """R: Refuse a pending elder home application."""

    def __init__(self, repository: IdentityRepository):
        _require_operator_repository(repository)
        self.repository = repository

    def execute(self, operator_id: UUID, reason: str | None = None) -> ModerationResult:
        operator = self.repository.get_by_id(operator_id, include_secret=False)
        if operator is None:
            return ModerationResult(error=identity_not_found(Role.OPERATOR))

        try:
            reject(operator, reason)
        except ApprovalTransitionError as exc:
            return ModerationResult(error=validation(str(exc)))

        updated = self.repository.update(operator, APPROVAL_FIELDS)
        if updated is None:
            return ModerationResult(error=identity_not_found(Role.OPERATOR))

        logger.info("Elder home rejected", extra={"identity_id": str(operator_id)})
        return ModerationResult(
            identity=updated, message="Elder home owner rejected successfully"
        )
