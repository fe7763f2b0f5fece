"""
Name: Register Donor Use Case

Responsibilities:
  - Validate donor registration fields
  - Enforce username/email uniqueness among donors
  - Stage the optional profile photo, hash the password, create the donor
  - Issue a bearer token for the new account
"""

from dataclasses import dataclass
from uuid import uuid4

from ...domain.entities import DEFAULT_PROFILE_PHOTO, Donor, Role
from ...domain.repositories import IdentityRepository
from ...domain.services import FileStoragePort
from ...domain.validation import (
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    is_valid_email,
)
from ...exceptions import DuplicateIdentityError
from ...logger import logger
from ...passwords import hash_password
from ...tokens import issue_token
from ..uploads import IncomingFile, StagedUploads
from .identity_results import RegistrationResult, validation
from .identity_writes import duplicate_error, first_taken

DONOR_DUPLICATE_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already in use",
}

_REQUIRED_FIELDS = (
    ("full_name", "Full name is required"),
    ("email", "Email is required"),
    ("address", "Address is required"),
    ("contact_number", "Contact number is required"),
    ("username", "Username is required"),
    ("password", "Password is required"),
)


@dataclass
class RegisterDonorInput:
    full_name: str = ""
    email: str = ""
    address: str = ""
    contact_number: str = ""
    username: str = ""
    password: str = ""
    description: str = ""
    profile_photo: IncomingFile | None = None


class RegisterDonorUseCase:
    """R: Create a donor account and sign it in."""

    def __init__(self, repository: IdentityRepository, storage: FileStoragePort):
        self.repository = repository
        self.storage = storage

    def execute(self, input_data: RegisterDonorInput) -> RegistrationResult:
        username = (input_data.username or "").strip()
        email = (input_data.email or "").strip().lower()

        for name, message in _REQUIRED_FIELDS:
            if not (getattr(input_data, name) or "").strip():
                return RegistrationResult(error=validation(message))

        if len(username) < MIN_USERNAME_LENGTH:
            return RegistrationResult(
                error=validation("Username must be at least 3 characters long")
            )
        if len(input_data.password) < MIN_PASSWORD_LENGTH:
            return RegistrationResult(
                error=validation("Password must be at least 6 characters long")
            )
        if not is_valid_email(email):
            return RegistrationResult(
                error=validation("Please enter a valid email address")
            )

        taken = first_taken(
            self.repository,
            [
                ("username", username, DONOR_DUPLICATE_MESSAGES["username"]),
                ("email", email, DONOR_DUPLICATE_MESSAGES["email"]),
            ],
        )
        if taken:
            return RegistrationResult(error=taken)

        password_hash = hash_password(input_data.password)

        with StagedUploads(self.storage) as staged:
            profile_photo = DEFAULT_PROFILE_PHOTO
            if input_data.profile_photo is not None:
                profile_photo = staged.stage(input_data.profile_photo)

            donor = Donor(
                id=uuid4(),
                username=username,
                password_hash=password_hash,
                email=email,
                full_name=input_data.full_name.strip(),
                address=input_data.address.strip(),
                contact_number=input_data.contact_number.strip(),
                description=(input_data.description or "").strip(),
                profile_photo=profile_photo,
            )
            try:
                created = self.repository.create(donor)
            except DuplicateIdentityError as exc:
                logger.info("Donor registration lost uniqueness race", extra={"field": exc.field})
                return RegistrationResult(
                    error=duplicate_error(exc, DONOR_DUPLICATE_MESSAGES)
                )
            staged.commit()

        logger.info("Donor registered", extra={"identity_id": str(created.id)})
        return RegistrationResult(
            identity=created, token=issue_token(created.id, Role.DONOR)
        )
