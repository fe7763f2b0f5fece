"""
Name: API Schemas & Helpers

Responsibilities:
  - Pydantic response/request models (camelCase on the wire)
  - Map domain identities to their public projections
  - Translate use case errors into RFC 7807 AppHTTPException

Constraints:
  - Password hashes never appear in any response model
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..application.use_cases import IdentityError, IdentityErrorCode, LoginResult
from ..domain.entities import (
    Availability,
    Donor,
    ElderHomeOperator,
    Identity,
    Volunteer,
)
from ..error_responses import (
    AppHTTPException,
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# R: Shared request/response models
class LoginReq(CamelModel):
    username: str
    password: str


class MessageRes(CamelModel):
    message: str


class AvailableRes(CamelModel):
    available: bool


class ScheduleRes(CamelModel):
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    time_preference: str = ""


class IdentityRes(CamelModel):
    id: UUID
    username: str
    is_blocked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DonorRes(IdentityRes):
    full_name: str
    email: str
    address: str
    contact_number: str
    description: str = ""
    profile_photo: str


class DonorAuthRes(DonorRes):
    token: str


class VolunteerRes(IdentityRes):
    name: str
    email: str
    phone: str
    age: int
    date_of_birth: date
    address: str
    role: str
    description: str
    skills: List[str] = []
    availability: ScheduleRes
    profile_photo: str
    average_rating: float = 0.0
    total_ratings: int = 0


class VolunteerAuthRes(VolunteerRes):
    token: str


class OperatorRes(IdentityRes):
    full_name: str
    email: str
    address: str
    contact_number: str
    elder_home_name: str
    elder_home_address: str
    account_number: str
    capacity: int
    description: str
    license: Optional[str] = None
    home_photos: List[str] = []
    approval_status: str
    rejection_reason: Optional[str] = None


class OperatorAuthRes(OperatorRes):
    token: str


class ElderHomePublicRes(CamelModel):
    """R: What anyone may see about an approved elder home."""

    id: UUID
    full_name: str
    contact_number: str
    elder_home_name: str
    elder_home_address: str
    capacity: int
    description: str
    home_photos: List[str] = []


def schedule_res(availability: Availability) -> ScheduleRes:
    return ScheduleRes(**availability.to_dict(snake_case=True))


def _identity_fields(identity: Identity) -> dict:
    return {
        "id": identity.id,
        "username": identity.username,
        "is_blocked": identity.is_blocked,
        "created_at": identity.created_at,
        "updated_at": identity.updated_at,
    }


def donor_res(donor: Donor) -> DonorRes:
    return DonorRes(
        **_identity_fields(donor),
        full_name=donor.full_name,
        email=donor.email,
        address=donor.address,
        contact_number=donor.contact_number,
        description=donor.description or "",
        profile_photo=donor.profile_photo,
    )


def volunteer_res(volunteer: Volunteer) -> VolunteerRes:
    return VolunteerRes(
        **_identity_fields(volunteer),
        name=volunteer.name,
        email=volunteer.email,
        phone=volunteer.phone,
        age=volunteer.age,
        date_of_birth=volunteer.date_of_birth,
        address=volunteer.address,
        role=volunteer.volunteer_role.value,
        description=volunteer.description,
        skills=list(volunteer.skills),
        availability=schedule_res(volunteer.availability),
        profile_photo=volunteer.profile_photo,
        average_rating=volunteer.average_rating,
        total_ratings=len(volunteer.ratings),
    )


def operator_res(operator: ElderHomeOperator) -> OperatorRes:
    return OperatorRes(
        **_identity_fields(operator),
        full_name=operator.full_name,
        email=operator.email,
        address=operator.address,
        contact_number=operator.contact_number,
        elder_home_name=operator.elder_home_name,
        elder_home_address=operator.elder_home_address,
        account_number=operator.account_number,
        capacity=operator.capacity,
        description=operator.description,
        license=operator.license_path,
        home_photos=list(operator.home_photos),
        approval_status=operator.approval_status.value,
        rejection_reason=operator.rejection_reason,
    )


def elder_home_public_res(operator: ElderHomeOperator) -> ElderHomePublicRes:
    return ElderHomePublicRes(
        id=operator.id,
        full_name=operator.full_name,
        contact_number=operator.contact_number,
        elder_home_name=operator.elder_home_name,
        elder_home_address=operator.elder_home_address,
        capacity=operator.capacity,
        description=operator.description,
        home_photos=list(operator.home_photos),
    )


_ERROR_FACTORIES = {
    IdentityErrorCode.VALIDATION_ERROR: validation_error,
    IdentityErrorCode.CONFLICT: conflict,
    IdentityErrorCode.UNAUTHORIZED: unauthorized,
    IdentityErrorCode.FORBIDDEN: forbidden,
    IdentityErrorCode.NOT_FOUND: not_found,
}


def to_http_exception(error: IdentityError) -> AppHTTPException:
    exc = _ERROR_FACTORIES[error.code](error.message)
    if error.extra:
        exc.extra = error.extra
    return exc


def raise_for_error(error: IdentityError | None) -> None:
    """R: Raise the problem response for a failed use case result."""
    if error is not None:
        raise to_http_exception(error)


def login_outcome_label(result: LoginResult) -> str:
    """R: Metric label for a login attempt."""
    if result.error is None:
        return result.outcome.value if result.outcome else "authenticated"
    if result.error.code == IdentityErrorCode.FORBIDDEN:
        return "blocked"
    return "invalid_credentials"
