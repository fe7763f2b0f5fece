"""
Name: Delete Account Use Case

Responsibilities:
  - Remove an identity from its role namespace
  - Remove the files it owned (profile photo, license, home photos)

Constraints:
  - Files are removed only after the identity row is gone
  - Donation rows referencing a donor survive with the reference nulled
    (enforced by the database)
"""

from uuid import UUID

from ...domain.repositories import IdentityRepository
from ...domain.services import FileStoragePort
from ...logger import logger
from ..uploads import remove_stored_files
from .identity_results import DeleteAccountResult, identity_not_found


class DeleteAccountUseCase:
    """R: Self-service account deletion."""

    def __init__(self, repository: IdentityRepository, storage: FileStoragePort):
        self.repository = repository
        self.storage = storage

    def execute(self, identity_id: UUID) -> DeleteAccountResult:
        role = self.repository.role
        identity = self.repository.get_by_id(identity_id, include_secret=False)
        if identity is None:
            return DeleteAccountResult(deleted=False, error=identity_not_found(role))

        if not self.repository.delete(identity_id):
            return DeleteAccountResult(deleted=False, error=identity_not_found(role))

        remove_stored_files(self.storage, identity.stored_files())
        logger.info(
            "Account deleted",
            extra={"role": role.value, "identity_id": str(identity_id)},
        )
        return DeleteAccountResult(deleted=True)
