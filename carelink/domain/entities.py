"""
Name: Domain Entities

Responsibilities:
  - Define the identity hierarchy shared by all four account kinds
  - Encapsulate role-specific attributes (donor, volunteer, operator, admin)
  - Expose the stored files each identity owns (for cleanup on delete)

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - No dependencies on infrastructure or frameworks
  - Simple dataclasses (mutability not enforced)
  - password_hash is None when the identity was loaded without its secret

Notes:
  - Identity carries what every role authenticates with (username,
    password_hash, is_blocked); subclasses add their profile fields
  - Stored file references are storage-relative paths, never absolute
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional, List
from uuid import UUID

DEFAULT_PROFILE_PHOTO = "default-profile.jpg"


class Role(str, Enum):
    """R: Account kinds; each authenticates against its own namespace."""

    DONOR = "donor"
    VOLUNTEER = "volunteer"
    OPERATOR = "operator"
    ADMIN = "admin"


class ApprovalStatus(str, Enum):
    """R: Operator admission lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VolunteerRole(str, Enum):
    CARETAKER = "Caretaker"
    MEDICAL_ASSISTANCE = "Medical Assistance"
    EDUCATIONAL_SUPPORT = "Educational Support"
    GENERAL_HELPER = "General Helper"
    OTHER = "Other"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass
class Availability:
    """R: Weekly volunteer availability plus a free-text time preference."""

    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    time_preference: str = ""

    @classmethod
    def from_mapping(cls, data: dict) -> "Availability":
        """
        R: Build from a camelCase or snake_case mapping.

        Raises:
            ValueError: if a weekday is not a boolean or the
                time preference is not a string
        """
        return cls().merged(data)

    def merged(self, data: dict) -> "Availability":
        """R: Return a copy with the provided keys overwritten."""
        values = self.to_dict(snake_case=True)
        for key, value in data.items():
            name = "time_preference" if key in ("timePreference", "time_preference") else key
            if name in WEEKDAYS:
                if not isinstance(value, bool):
                    raise ValueError(f"{key} must be a boolean")
                values[name] = value
            elif name == "time_preference":
                if not isinstance(value, str):
                    raise ValueError("timePreference must be a string")
                values[name] = value
        return Availability(**values)

    def to_dict(self, snake_case: bool = False) -> dict:
        data = {day: getattr(self, day) for day in WEEKDAYS}
        data["time_preference" if snake_case else "timePreference"] = self.time_preference
        return data


@dataclass(kw_only=True)
class Identity:
    """
    R: Base for every authenticatable account.

    Attributes:
        id: Immutable identifier assigned at creation
        username: Unique within the role's namespace
        password_hash: Argon2 hash (None when loaded without secret)
        is_blocked: Administrator-controlled access flag
        created_at / updated_at: Maintained by the credential store
    """

    role: ClassVar[Role]

    id: UUID
    username: str
    password_hash: Optional[str] = None
    is_blocked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def stored_files(self) -> List[str]:
        """R: Storage-relative paths owned by this identity."""
        return []

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass(kw_only=True)
class Donor(Identity):
    role: ClassVar[Role] = Role.DONOR

    email: str
    full_name: str
    address: str
    contact_number: str
    description: str = ""
    profile_photo: str = DEFAULT_PROFILE_PHOTO

    def stored_files(self) -> List[str]:
        if self.profile_photo and self.profile_photo != DEFAULT_PROFILE_PHOTO:
            return [self.profile_photo]
        return []


@dataclass(kw_only=True)
class Volunteer(Identity):
    role: ClassVar[Role] = Role.VOLUNTEER

    email: str
    name: str
    phone: str
    age: int
    date_of_birth: date
    address: str
    volunteer_role: VolunteerRole
    description: str
    skills: List[str] = field(default_factory=list)
    availability: Availability = field(default_factory=Availability)
    profile_photo: str = DEFAULT_PROFILE_PHOTO
    ratings: List[int] = field(default_factory=list)
    feedback: List[str] = field(default_factory=list)
    average_rating: float = 0.0

    def stored_files(self) -> List[str]:
        if self.profile_photo and self.profile_photo != DEFAULT_PROFILE_PHOTO:
            return [self.profile_photo]
        return []

    def add_feedback(self, rating: int, text: str) -> None:
        """R: Append a rating and recompute the running average."""
        self.ratings.append(rating)
        self.feedback.append(text)
        self.average_rating = sum(self.ratings) / len(self.ratings)


@dataclass(kw_only=True)
class ElderHomeOperator(Identity):
    role: ClassVar[Role] = Role.OPERATOR

    email: str
    full_name: str
    address: str
    contact_number: str
    elder_home_name: str
    elder_home_address: str
    account_number: str
    capacity: int
    description: str
    license_path: Optional[str] = None
    home_photos: List[str] = field(default_factory=list)
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    rejection_reason: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED

    def stored_files(self) -> List[str]:
        files = list(self.home_photos)
        if self.license_path:
            files.insert(0, self.license_path)
        return files


@dataclass(kw_only=True)
class Administrator(Identity):
    role: ClassVar[Role] = Role.ADMIN


IDENTITY_TYPES: dict[Role, type[Identity]] = {
    Role.DONOR: Donor,
    Role.VOLUNTEER: Volunteer,
    Role.OPERATOR: ElderHomeOperator,
    Role.ADMIN: Administrator,
}

# R: Owned by administrators and the feedback flow, never by profile edits
LIFECYCLE_FIELDS = frozenset(
    {
        "is_blocked",
        "approval_status",
        "rejection_reason",
        "ratings",
        "feedback",
        "average_rating",
    }
)
