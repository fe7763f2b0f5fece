"""
Name: Register Volunteer Use Case

Responsibilities:
  - Validate volunteer registration in a fixed, fail-fast order
  - Parse the JSON-encoded skills list and availability object
  - Stage the optional profile photo, hash the password, create the volunteer
  - Issue a bearer token for the new account

Constraints:
  - Usernames are letters only at registration and stored lower-cased
  - Age must agree with the date of birth (completed years, today)
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional
from uuid import uuid4

from ...domain.entities import (
    DEFAULT_PROFILE_PHOTO,
    Availability,
    Role,
    Volunteer,
    VolunteerRole,
)
from ...domain.repositories import IdentityRepository
from ...domain.services import FileStoragePort
from ...domain.validation import (
    MIN_PASSWORD_LENGTH,
    age_matches_birth_date,
    is_contact_number,
    is_letters_only_username,
    is_person_name,
    is_valid_email,
    within_length,
)
from ...exceptions import DuplicateIdentityError
from ...logger import logger
from ...passwords import hash_password
from ...tokens import issue_token
from ..uploads import IncomingFile, StagedUploads
from .identity_results import IdentityError, RegistrationResult, conflict, validation
from .identity_writes import duplicate_error

VOLUNTEER_DUPLICATE_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already exists",
}

MAX_ADDRESS_LENGTH = 20


@dataclass
class RegisterVolunteerInput:
    name: str = ""
    username: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    age: str = ""
    date_of_birth: str = ""
    address: str = ""
    role: str = ""
    description: str = ""
    skills: str | None = None
    availability: str | None = None
    profile_photo: IncomingFile | None = None


def parse_age(value: str | int | None) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def parse_birth_date(value: str | date | None) -> Optional[date]:
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if not text:
        return None
    try:
        # R: Accept full ISO timestamps from date pickers ("2000-01-31T00:00:00Z")
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_volunteer_role(value: str | None) -> Optional[VolunteerRole]:
    try:
        return VolunteerRole((value or "").strip())
    except ValueError:
        return None


def parse_skills(raw: str | None) -> List[str]:
    """
    R: Decode the skills JSON array.

    Raises:
        ValueError: if not a JSON array of strings
    """
    if raw is None or not raw.strip():
        return []
    value = json.loads(raw)
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise ValueError("skills must be a JSON array of strings")
    return value


def parse_availability(raw: str | None, base: Availability | None = None) -> Availability:
    """
    R: Decode the availability JSON object, merged over base.

    Raises:
        ValueError: if not a JSON object with boolean days
    """
    base = base or Availability()
    if raw is None or not raw.strip():
        return base
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError("availability must be a JSON object")
    return base.merged(value)


class RegisterVolunteerUseCase:
    """R: Create a volunteer account and sign it in."""

    def __init__(
        self,
        repository: IdentityRepository,
        storage: FileStoragePort,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.storage = storage
        self.today = today

    def _validate(self, data: RegisterVolunteerInput) -> IdentityError | None:
        name = (data.name or "").strip()
        username = (data.username or "").strip()
        email = (data.email or "").strip()
        password = data.password or ""

        if not is_person_name(name):
            return validation("Full name can only contain letters")
        if not is_letters_only_username(username):
            return validation(
                "Username must be at least 3 letters and only contain letters"
            )
        if self.repository.exists("username", username.lower()):
            return conflict(VOLUNTEER_DUPLICATE_MESSAGES["username"])
        if not is_valid_email(email):
            return validation("Invalid email address")
        if self.repository.exists("email", email):
            return conflict(VOLUNTEER_DUPLICATE_MESSAGES["email"])
        if len(password) < MIN_PASSWORD_LENGTH:
            return validation("Password must be at least 6 characters")
        if "@" not in password:
            return validation("Password must include a special character like @")
        if not any(ch.isdigit() for ch in password):
            return validation("Password must include at least one number")
        lowered = password.lower()
        if name.lower() in lowered or username.lower() in lowered:
            return validation("Password cannot contain your name or username")
        if not is_contact_number((data.phone or "").strip()):
            return validation("Contact number must be exactly 10 digits")

        age = parse_age(data.age)
        if age is None:
            return validation("Please add your age")
        birth_date = parse_birth_date(data.date_of_birth)
        if birth_date is None:
            return validation("Please add your date of birth")
        if not age_matches_birth_date(age, birth_date, self.today()):
            return validation("Age and date of birth do not match")

        if not (data.role or "").strip():
            return validation("Volunteer role is required")
        if parse_volunteer_role(data.role) is None:
            return validation("Please specify a valid volunteer role")
        if not within_length((data.address or "").strip(), MAX_ADDRESS_LENGTH):
            return validation("Address must be 20 characters or less")
        if not (data.description or "").strip():
            return validation("Description is required")
        return None

    def execute(self, input_data: RegisterVolunteerInput) -> RegistrationResult:
        error = self._validate(input_data)
        if error:
            return RegistrationResult(error=error)

        try:
            skills = parse_skills(input_data.skills)
            availability = parse_availability(input_data.availability)
        except ValueError:
            # R: json.JSONDecodeError is a ValueError
            return RegistrationResult(
                error=validation("Invalid data format for skills or availability")
            )

        password_hash = hash_password(input_data.password)

        with StagedUploads(self.storage) as staged:
            profile_photo = DEFAULT_PROFILE_PHOTO
            if input_data.profile_photo is not None:
                profile_photo = staged.stage(input_data.profile_photo)

            volunteer = Volunteer(
                id=uuid4(),
                username=input_data.username.strip().lower(),
                password_hash=password_hash,
                email=input_data.email.strip(),
                name=input_data.name.strip(),
                phone=input_data.phone.strip(),
                age=parse_age(input_data.age),
                date_of_birth=parse_birth_date(input_data.date_of_birth),
                address=input_data.address.strip(),
                volunteer_role=parse_volunteer_role(input_data.role),
                description=input_data.description.strip(),
                skills=skills,
                availability=availability,
                profile_photo=profile_photo,
            )
            try:
                created = self.repository.create(volunteer)
            except DuplicateIdentityError as exc:
                return RegistrationResult(
                    error=duplicate_error(exc, VOLUNTEER_DUPLICATE_MESSAGES)
                )
            staged.commit()

        logger.info("Volunteer registered", extra={"identity_id": str(created.id)})
        return RegistrationResult(
            identity=created, token=issue_token(created.id, Role.VOLUNTEER)
        )
