"""
Name: Register Elder Home Operator Use Case

Responsibilities:
  - Validate an operator application in a fixed, fail-fast order
  - Enforce username/email/elder-home-name uniqueness among operators
  - Stage the license document and home photos, then create the operator
    in the pending approval state

Collaborators:
  - application.uploads: upload policies and StagedUploads
  - domain.validation: format rules
  - IdentityRepository (operator namespace)

Constraints:
  - The first violated rule wins; nothing is written before all pass
  - No token is issued: an operator cannot sign in until approved

Notes:
  - The elder home name is checked twice: at most 20 characters, then
    (after the username and email checks) at most 10.
"""

from dataclasses import dataclass, field
from typing import List
from uuid import uuid4

from ...domain.entities import ApprovalStatus, ElderHomeOperator
from ...domain.repositories import IdentityRepository
from ...domain.services import FileStoragePort
from ...domain.validation import (
    MIN_PASSWORD_LENGTH,
    is_account_number,
    is_contact_number,
    is_person_name,
    is_valid_email,
    is_valid_username,
    parse_capacity,
    within_length,
)
from ...exceptions import DuplicateIdentityError
from ...logger import logger
from ...passwords import hash_password
from ..uploads import UPLOAD_POLICIES, IncomingFile, StagedUploads, UploadField
from .identity_results import IdentityError, RegistrationResult, conflict, validation
from .identity_writes import duplicate_error

OPERATOR_DUPLICATE_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already in use",
    "elder_home_name": "Elder home name already exists",
}

MAX_ELDER_HOME_NAME_LENGTH = 20
MAX_ELDER_HOME_NAME_SHORT = 10
MAX_ADDRESS_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 50


@dataclass
class RegisterOperatorInput:
    full_name: str = ""
    username: str = ""
    email: str = ""
    password: str = ""
    contact_number: str = ""
    address: str = ""
    elder_home_name: str = ""
    elder_home_address: str = ""
    account_number: str = ""
    capacity: str = ""
    description: str = ""
    license_document: IncomingFile | None = None
    home_photos: List[IncomingFile] = field(default_factory=list)
    max_home_photos: int = 5


class RegisterOperatorUseCase:
    """R: Accept an elder home application for administrator review."""

    def __init__(self, repository: IdentityRepository, storage: FileStoragePort):
        self.repository = repository
        self.storage = storage

    def _validate(self, data: RegisterOperatorInput) -> IdentityError | None:
        username = (data.username or "").strip()
        email = (data.email or "").strip().lower()
        home_name = (data.elder_home_name or "").strip()
        license_policy = UPLOAD_POLICIES[UploadField.LICENSE_DOCUMENT]
        photo_policy = UPLOAD_POLICIES[UploadField.HOME_PHOTOS]

        if data.license_document is None:
            return validation("License document upload is required")
        if not is_account_number((data.account_number or "").strip()):
            return validation("Account number must be exactly 16 digits")
        if not within_length(home_name, MAX_ELDER_HOME_NAME_LENGTH):
            return validation("Elder home name cannot exceed 20 characters")
        if (data.license_document.content_type or "").lower() not in license_policy.mime_types:
            return validation(license_policy.type_message)

        if not is_valid_username(username):
            return validation(
                "Username must be at least 3 characters and only contain "
                "letters, numbers, and underscores"
            )
        if self.repository.exists("username", username):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["username"])
        if not is_valid_email(email):
            return validation("Invalid email address")
        if self.repository.exists("email", email):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["email"])
        if not within_length(home_name, MAX_ELDER_HOME_NAME_SHORT):
            return validation(
                "Elder home name is required and must be 10 characters or less"
            )
        if self.repository.exists("elder_home_name", home_name):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["elder_home_name"])

        if not is_person_name((data.full_name or "").strip()):
            return validation("Owner name can only contain letters")
        if not within_length((data.address or "").strip(), MAX_ADDRESS_LENGTH):
            return validation("Address is required and must be 20 characters or less")
        if parse_capacity(data.capacity) is None:
            return validation("Capacity is required and must be a positive whole number")
        if not within_length((data.description or "").strip(), MAX_DESCRIPTION_LENGTH):
            return validation(
                "Description is required and must be 50 characters or less"
            )
        if not is_contact_number((data.contact_number or "").strip()):
            return validation("Contact number must be exactly 10 digits")

        if not data.home_photos:
            return validation("At least one home photo is required")
        if len(data.home_photos) > data.max_home_photos:
            return validation(photo_policy.count_error(data.max_home_photos))
        for photo in data.home_photos:
            if (photo.content_type or "").lower() not in photo_policy.mime_types:
                return validation(photo_policy.type_message)

        if len(data.password or "") < MIN_PASSWORD_LENGTH:
            return validation("Password must be at least 6 characters")
        if not (data.elder_home_address or "").strip():
            return validation("Elder home address is required")
        return None

    def execute(self, input_data: RegisterOperatorInput) -> RegistrationResult:
        error = self._validate(input_data)
        if error:
            return RegistrationResult(error=error)

        password_hash = hash_password(input_data.password)

        with StagedUploads(self.storage) as staged:
            license_path = staged.stage(input_data.license_document)
            photo_paths = staged.stage_all(input_data.home_photos)

            operator = ElderHomeOperator(
                id=uuid4(),
                username=input_data.username.strip(),
                password_hash=password_hash,
                email=input_data.email.strip().lower(),
                full_name=input_data.full_name.strip(),
                address=input_data.address.strip(),
                contact_number=input_data.contact_number.strip(),
                elder_home_name=input_data.elder_home_name.strip(),
                elder_home_address=input_data.elder_home_address.strip(),
                account_number=input_data.account_number.strip(),
                capacity=parse_capacity(input_data.capacity),
                description=input_data.description.strip(),
                license_path=license_path,
                home_photos=photo_paths,
                approval_status=ApprovalStatus.PENDING,
            )
            try:
                created = self.repository.create(operator)
            except DuplicateIdentityError as exc:
                logger.info(
                    "Operator registration lost uniqueness race",
                    extra={"field": exc.field},
                )
                return RegistrationResult(
                    error=duplicate_error(exc, OPERATOR_DUPLICATE_MESSAGES)
                )
            staged.commit()

        logger.info(
            "Elder home application received",
            extra={"identity_id": str(created.id), "home_photos": len(photo_paths)},
        )
        return RegistrationResult(identity=created)
