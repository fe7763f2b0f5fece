"""
Name: Toggle Block Use Case

Responsibilities:
  - Flip the blocked flag of a donor, volunteer or approved operator

Constraints:
  - Administrators cannot be blocked
  - Operators can be blocked or unblocked only while approved
"""

from uuid import UUID

from ...domain.approval import can_toggle_block
from ...domain.entities import ElderHomeOperator, Role
from ...domain.repositories import IdentityRepository
from ...logger import logger
from .identity_results import ToggleBlockResult, identity_not_found, validation

BLOCK_LABELS = {
    Role.DONOR: "Donor",
    Role.VOLUNTEER: "Volunteer",
    Role.OPERATOR: "Elder home owner",
}


class ToggleBlockUseCase:
    """R: Administrator block / unblock."""

    def __init__(self, repository: IdentityRepository):
        if repository.role not in BLOCK_LABELS:
            raise ValueError(f"{repository.role.value} accounts cannot be blocked")
        self.repository = repository

    def execute(self, identity_id: UUID) -> ToggleBlockResult:
        role = self.repository.role
        identity = self.repository.get_by_id(identity_id, include_secret=False)
        if identity is None:
            return ToggleBlockResult(error=identity_not_found(role))

        if isinstance(identity, ElderHomeOperator) and not can_toggle_block(identity):
            return ToggleBlockResult(
                error=validation("Only approved elder homes can be blocked or unblocked")
            )

        identity.is_blocked = not identity.is_blocked
        updated = self.repository.update(identity, ("is_blocked",))
        if updated is None:
            return ToggleBlockResult(error=identity_not_found(role))

        action = "blocked" if updated.is_blocked else "unblocked"
        logger.info(
            f"Account {action}",
            extra={"role": role.value, "identity_id": str(identity_id)},
        )
        return ToggleBlockResult(
            identity=updated,
            is_blocked=updated.is_blocked,
            message=f"{BLOCK_LABELS[role]} {action} successfully",
        )
