"""
Name: Test Data Factories

Responsibilities:
  - Build domain entities with valid defaults (override per test)
  - Build in-memory uploads for the photo and license fields
"""

from datetime import date
from uuid import uuid4

from carelink.application.uploads import IncomingFile, UploadField
from carelink.domain.entities import (
    Administrator,
    ApprovalStatus,
    Availability,
    Donor,
    ElderHomeOperator,
    Volunteer,
    VolunteerRole,
)
from carelink.passwords import hash_password
from carelink.tokens import issue_token

PASSWORD = "secret@123"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
PDF_BYTES = b"%PDF-1.4\n%test\n"


def png_upload(field: UploadField, name: str = "photo.png") -> IncomingFile:
    return IncomingFile(
        field=field, filename=name, content_type="image/png", content=PNG_BYTES
    )


def pdf_upload(name: str = "license.pdf") -> IncomingFile:
    return IncomingFile(
        field=UploadField.LICENSE_DOCUMENT,
        filename=name,
        content_type="application/pdf",
        content=PDF_BYTES,
    )


# ============================================================================
# Domain Entity Factories
# ============================================================================


def make_donor(**overrides) -> Donor:
    values = dict(
        id=uuid4(),
        username="donorone",
        password_hash=hash_password(PASSWORD),
        email="donor@example.com",
        full_name="Dana Donor",
        address="12 Main Street",
        contact_number="0771234567",
    )
    values.update(overrides)
    return Donor(**values)


def make_volunteer(**overrides) -> Volunteer:
    values = dict(
        id=uuid4(),
        username="vera",
        password_hash=hash_password(PASSWORD),
        email="vera@example.com",
        name="Vera Volunteer",
        phone="0771234567",
        age=30,
        date_of_birth=date(1994, 5, 20),
        address="Kandy",
        volunteer_role=VolunteerRole.CARETAKER,
        description="Weekend helper",
        availability=Availability(saturday=True),
    )
    values.update(overrides)
    return Volunteer(**values)


def make_operator(**overrides) -> ElderHomeOperator:
    values = dict(
        id=uuid4(),
        username="owner_one",
        password_hash=hash_password(PASSWORD),
        email="owner@example.com",
        full_name="Olga Owner",
        address="Colombo",
        contact_number="0771234567",
        elder_home_name="Sunrise",
        elder_home_address="5 Lake Road, Colombo",
        account_number="1234567812345678",
        capacity=25,
        description="Small home by the lake",
        license_path="licenses/licenseDocument-1-aaaaaaaaaaaa.pdf",
        home_photos=["homes/homePhotos-1-bbbbbbbbbbbb.png"],
        approval_status=ApprovalStatus.PENDING,
    )
    values.update(overrides)
    return ElderHomeOperator(**values)


def make_admin(**overrides) -> Administrator:
    values = dict(
        id=uuid4(),
        username="root",
        password_hash=hash_password(PASSWORD),
    )
    values.update(overrides)
    return Administrator(**values)


def auth_header(identity) -> dict:
    return {"Authorization": f"Bearer {issue_token(identity.id, identity.role)}"}
