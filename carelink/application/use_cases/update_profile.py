"""
Name: Update Profile Use Case

Responsibilities:
  - Apply a partial profile update for donors, volunteers and operators
  - Re-check username / email / elder home name uniqueness within the role
  - Re-hash the password only when a new one is supplied
  - Replace stored files with newly uploaded ones
  - Re-issue a bearer token for the updated identity

Collaborators:
  - IdentityRepository (role namespace), FileStoragePort
  - application.uploads.StagedUploads, remove_stored_files

Constraints:
  - Truthy merge: an absent or empty value leaves the stored value as is
  - The identity is loaded without its hash, so the store keeps the
    existing hash unless a new one is set here
  - Only changed profile columns are written; the block flag, approval
    state and ratings are left to their own writers
  - Replaced files are deleted only after the update committed
"""

import copy
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional
from uuid import UUID

from ...domain.entities import (
    LIFECYCLE_FIELDS,
    Donor,
    ElderHomeOperator,
    Identity,
    Role,
    Volunteer,
)
from ...domain.repositories import IdentityRepository
from ...domain.services import FileStoragePort
from ...domain.validation import (
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    is_account_number,
    is_valid_email,
    is_valid_username,
    parse_capacity,
)
from ...exceptions import DuplicateIdentityError
from ...logger import logger
from ...passwords import hash_password
from ...tokens import issue_token
from ..uploads import IncomingFile, StagedUploads, remove_stored_files
from .identity_results import (
    IdentityError,
    ProfileResult,
    conflict,
    identity_not_found,
    validation,
)
from .identity_writes import duplicate_error
from .register_donor import DONOR_DUPLICATE_MESSAGES
from .register_operator import OPERATOR_DUPLICATE_MESSAGES
from .register_volunteer import (
    parse_age,
    parse_availability,
    parse_birth_date,
    parse_skills,
    parse_volunteer_role,
)

VOLUNTEER_UPDATE_DUPLICATE_MESSAGES = {
    "username": "Username already taken",
    "email": "Email already registered",
}

DUPLICATE_MESSAGES: Dict[Role, Mapping[str, str]] = {
    Role.DONOR: DONOR_DUPLICATE_MESSAGES,
    Role.VOLUNTEER: VOLUNTEER_UPDATE_DUPLICATE_MESSAGES,
    Role.OPERATOR: OPERATOR_DUPLICATE_MESSAGES,
}


@dataclass
class UpdateProfileInput:
    identity_id: UUID
    changes: Dict[str, Optional[str]] = field(default_factory=dict)
    profile_photo: IncomingFile | None = None
    license_document: IncomingFile | None = None
    home_photos: List[IncomingFile] = field(default_factory=list)


def _text(changes: Mapping[str, Optional[str]], key: str) -> Optional[str]:
    """R: Provided, non-blank value (stripped) or None."""
    value = changes.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _merge(identity: Identity, changes: Mapping[str, Optional[str]], *names: str) -> None:
    for name in names:
        value = _text(changes, name)
        if value:
            setattr(identity, name, value)


def _apply_donor_changes(
    donor: Donor, changes: Mapping[str, Optional[str]], repository: IdentityRepository
) -> IdentityError | None:
    username = _text(changes, "username")
    if username and username != donor.username:
        if len(username) < MIN_USERNAME_LENGTH:
            return validation("Username must be at least 3 characters long")
        if repository.exists("username", username, exclude_id=donor.id):
            return conflict(DONOR_DUPLICATE_MESSAGES["username"])
        donor.username = username

    email = _text(changes, "email")
    if email and email.lower() != donor.email:
        email = email.lower()
        if not is_valid_email(email):
            return validation("Please enter a valid email address")
        if repository.exists("email", email, exclude_id=donor.id):
            return conflict(DONOR_DUPLICATE_MESSAGES["email"])
        donor.email = email

    _merge(donor, changes, "full_name", "address", "contact_number", "description")
    return None


def _apply_volunteer_changes(
    volunteer: Volunteer,
    changes: Mapping[str, Optional[str]],
    repository: IdentityRepository,
) -> IdentityError | None:
    username = _text(changes, "username")
    if username and username.lower() != volunteer.username:
        if not is_valid_username(username):
            return validation(
                "Invalid username format (min 3 chars, letters, numbers, underscores only)"
            )
        username = username.lower()
        if repository.exists("username", username, exclude_id=volunteer.id):
            return conflict(VOLUNTEER_UPDATE_DUPLICATE_MESSAGES["username"])
        volunteer.username = username

    email = _text(changes, "email")
    if email and email != volunteer.email:
        if not is_valid_email(email):
            return validation("Invalid email format")
        if repository.exists("email", email, exclude_id=volunteer.id):
            return conflict(VOLUNTEER_UPDATE_DUPLICATE_MESSAGES["email"])
        volunteer.email = email

    _merge(volunteer, changes, "name", "phone", "address", "description")

    if _text(changes, "age"):
        age = parse_age(changes["age"])
        if age is None:
            return validation("Age must be a number")
        volunteer.age = age
    if _text(changes, "date_of_birth"):
        birth_date = parse_birth_date(changes["date_of_birth"])
        if birth_date is None:
            return validation("Invalid date of birth")
        volunteer.date_of_birth = birth_date
    if _text(changes, "role"):
        volunteer_role = parse_volunteer_role(changes["role"])
        if volunteer_role is None:
            return validation("Please specify a valid volunteer role")
        volunteer.volunteer_role = volunteer_role

    if _text(changes, "skills"):
        try:
            volunteer.skills = parse_skills(changes["skills"])
        except ValueError:
            return validation("Invalid data format for skills")
    if _text(changes, "availability"):
        try:
            volunteer.availability = parse_availability(
                changes["availability"], base=volunteer.availability
            )
        except ValueError:
            return validation("Invalid data format for availability")
    return None


def _apply_operator_changes(
    operator: ElderHomeOperator,
    changes: Mapping[str, Optional[str]],
    repository: IdentityRepository,
) -> IdentityError | None:
    username = _text(changes, "username")
    if username and username != operator.username:
        if not is_valid_username(username):
            return validation(
                "Username must be at least 3 characters and only contain "
                "letters, numbers, and underscores"
            )
        if repository.exists("username", username, exclude_id=operator.id):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["username"])
        operator.username = username

    email = _text(changes, "email")
    if email and email.lower() != operator.email:
        email = email.lower()
        if not is_valid_email(email):
            return validation("Invalid email address")
        if repository.exists("email", email, exclude_id=operator.id):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["email"])
        operator.email = email

    home_name = _text(changes, "elder_home_name")
    if home_name and home_name != operator.elder_home_name:
        if repository.exists("elder_home_name", home_name, exclude_id=operator.id):
            return conflict(OPERATOR_DUPLICATE_MESSAGES["elder_home_name"])
        operator.elder_home_name = home_name

    account_number = _text(changes, "account_number")
    if account_number:
        if not is_account_number(account_number):
            return validation("Account number must be exactly 16 digits")
        operator.account_number = account_number

    if _text(changes, "capacity"):
        capacity = parse_capacity(changes["capacity"])
        if capacity is None:
            return validation("Capacity must be a positive whole number")
        operator.capacity = capacity

    _merge(
        operator,
        changes,
        "full_name",
        "address",
        "contact_number",
        "elder_home_address",
        "description",
    )
    return None


_APPLIERS: Dict[Role, Callable[..., Optional[IdentityError]]] = {
    Role.DONOR: _apply_donor_changes,
    Role.VOLUNTEER: _apply_volunteer_changes,
    Role.OPERATOR: _apply_operator_changes,
}

# R: Assigned by the store
_STORE_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _changed_fields(before: Identity, after: Identity) -> List[str]:
    """R: Profile attributes whose value differs; lifecycle flags never count."""
    return [
        name
        for name in after.field_names()
        if name not in LIFECYCLE_FIELDS
        and name not in _STORE_FIELDS
        and getattr(after, name) != getattr(before, name)
    ]


class UpdateProfileUseCase:
    """R: Self-service profile update for one role."""

    def __init__(self, repository: IdentityRepository, storage: FileStoragePort):
        if repository.role not in _APPLIERS:
            raise ValueError(f"Profile updates are not supported for {repository.role}")
        self.repository = repository
        self.storage = storage

    def execute(self, input_data: UpdateProfileInput) -> ProfileResult:
        role = self.repository.role
        identity = self.repository.get_by_id(input_data.identity_id, include_secret=False)
        if identity is None:
            return ProfileResult(error=identity_not_found(role))

        previous_files = set(identity.stored_files())
        before = copy.deepcopy(identity)

        error = _APPLIERS[role](identity, input_data.changes, self.repository)
        if error:
            return ProfileResult(error=error)

        password = input_data.changes.get("password")
        if password:
            if len(password) < MIN_PASSWORD_LENGTH:
                return ProfileResult(
                    error=validation("Password must be at least 6 characters long")
                )
            identity.password_hash = hash_password(password)

        with StagedUploads(self.storage) as staged:
            self._stage_files(identity, input_data, staged)
            try:
                updated = self.repository.update(
                    identity, _changed_fields(before, identity)
                )
            except DuplicateIdentityError as exc:
                return ProfileResult(
                    error=duplicate_error(exc, DUPLICATE_MESSAGES[role])
                )
            if updated is None:
                return ProfileResult(error=identity_not_found(role))
            staged.commit()

        replaced = previous_files - set(updated.stored_files())
        if replaced:
            remove_stored_files(self.storage, sorted(replaced))

        logger.info(
            "Profile updated",
            extra={"role": role.value, "identity_id": str(updated.id)},
        )
        return ProfileResult(identity=updated, token=issue_token(updated.id, role))

    @staticmethod
    def _stage_files(
        identity: Identity, input_data: UpdateProfileInput, staged: StagedUploads
    ) -> None:
        if isinstance(identity, (Donor, Volunteer)) and input_data.profile_photo:
            identity.profile_photo = staged.stage(input_data.profile_photo)
        if isinstance(identity, ElderHomeOperator):
            if input_data.license_document:
                identity.license_path = staged.stage(input_data.license_document)
            if input_data.home_photos:
                identity.home_photos = staged.stage_all(input_data.home_photos)
