"""
Name: Identity Table Mapping

Responsibilities:
  - Describe how each role's entity maps onto its PostgreSQL table
  - Convert enum / JSON attributes to and from column values
  - Map unique constraint names back to the field that collided

Collaborators:
  - postgres_identity_repo.py: builds SQL from these descriptions
  - alembic/versions/001_identities.py: creates matching tables

Notes:
  - Column names equal dataclass attribute names
  - Unique constraints are named uq_<table>_<column>
"""

from dataclasses import dataclass, field, fields
from typing import Any, Callable

from psycopg.types.json import Jsonb

from ...domain.entities import (
    Administrator,
    ApprovalStatus,
    Availability,
    Donor,
    ElderHomeOperator,
    Identity,
    Role,
    Volunteer,
    VolunteerRole,
)

# R: Columns every identity table has, handled explicitly by the repository
BASE_COLUMNS = ("id", "username", "password_hash", "is_blocked", "created_at", "updated_at")


@dataclass(frozen=True)
class Converter:
    to_db: Callable[[Any], Any]
    from_db: Callable[[Any], Any]


def _enum_converter(enum_type) -> Converter:
    return Converter(to_db=lambda v: v.value, from_db=enum_type)


def _availability_from_db(value: Any) -> Availability:
    if not value:
        return Availability()
    return Availability.from_mapping(value)


_AVAILABILITY = Converter(
    to_db=lambda a: Jsonb(a.to_dict(snake_case=True)),
    from_db=_availability_from_db,
)

_LIST = Converter(to_db=list, from_db=lambda v: list(v or []))


@dataclass(frozen=True)
class IdentityTable:
    role: Role
    table: str
    entity: type[Identity]
    unique_fields: tuple[str, ...]
    converters: dict[str, Converter] = field(default_factory=dict)

    @property
    def profile_columns(self) -> tuple[str, ...]:
        """R: Role-specific columns (everything beyond BASE_COLUMNS)."""
        return tuple(
            f.name for f in fields(self.entity) if f.name not in BASE_COLUMNS
        )

    @property
    def writable_columns(self) -> frozenset[str]:
        """R: Columns update() may assign (everything but id and timestamps)."""
        return frozenset(("username", "password_hash", "is_blocked") + self.profile_columns)

    @property
    def has_approval_status(self) -> bool:
        return "approval_status" in self.profile_columns

    def constraint_field(self, constraint_name: str | None) -> str:
        """R: Field behind a uq_<table>_<column> constraint."""
        prefix = f"uq_{self.table}_"
        if constraint_name and constraint_name.startswith(prefix):
            return constraint_name[len(prefix):]
        return "unknown"

    def to_db(self, attribute: str, value: Any) -> Any:
        converter = self.converters.get(attribute)
        if converter is None or value is None:
            return value
        return converter.to_db(value)

    def from_db(self, attribute: str, value: Any) -> Any:
        converter = self.converters.get(attribute)
        if converter is None or value is None:
            return value
        return converter.from_db(value)


DONOR_TABLE = IdentityTable(
    role=Role.DONOR,
    table="donors",
    entity=Donor,
    unique_fields=("username", "email"),
)

VOLUNTEER_TABLE = IdentityTable(
    role=Role.VOLUNTEER,
    table="volunteers",
    entity=Volunteer,
    unique_fields=("username", "email"),
    converters={
        "volunteer_role": _enum_converter(VolunteerRole),
        "availability": _AVAILABILITY,
        "skills": _LIST,
        "ratings": _LIST,
        "feedback": _LIST,
        "average_rating": Converter(to_db=float, from_db=float),
    },
)

OPERATOR_TABLE = IdentityTable(
    role=Role.OPERATOR,
    table="elder_home_operators",
    entity=ElderHomeOperator,
    unique_fields=("username", "email", "elder_home_name"),
    converters={
        "approval_status": _enum_converter(ApprovalStatus),
        "home_photos": _LIST,
    },
)

ADMIN_TABLE = IdentityTable(
    role=Role.ADMIN,
    table="administrators",
    entity=Administrator,
    unique_fields=("username",),
)

IDENTITY_TABLES: dict[Role, IdentityTable] = {
    table.role: table
    for table in (DONOR_TABLE, VOLUNTEER_TABLE, OPERATOR_TABLE, ADMIN_TABLE)
}
