"""
Name: Field Validation Rules

Responsibilities:
  - Hold the format rules shared by registration and profile updates
  - Keep the patterns ASCII-only (no Unicode digits or letters slip through)

Notes:
  - Rules answer True/False; messages live with the use case that
    evaluates them, because ordering and wording differ per role
"""

import re
from datetime import date

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")
LETTERS_ONLY_PATTERN = re.compile(r"[A-Za-z]+")
PERSON_NAME_PATTERN = re.compile(r"[A-Za-z ]+")
EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
ACCOUNT_NUMBER_PATTERN = re.compile(r"[0-9]{16}")
CONTACT_NUMBER_PATTERN = re.compile(r"[0-9]{10}")
WHOLE_NUMBER_PATTERN = re.compile(r"[0-9]+")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# R: capacity is an INTEGER column
MAX_CAPACITY = 2_147_483_647


def is_valid_username(value: str | None) -> bool:
    """R: Letters, digits and underscores, at least 3 characters."""
    return bool(value) and len(value) >= MIN_USERNAME_LENGTH and bool(
        USERNAME_PATTERN.fullmatch(value)
    )


def is_letters_only_username(value: str | None) -> bool:
    return bool(value) and len(value) >= MIN_USERNAME_LENGTH and bool(
        LETTERS_ONLY_PATTERN.fullmatch(value)
    )


def is_person_name(value: str | None) -> bool:
    return bool(value) and bool(PERSON_NAME_PATTERN.fullmatch(value))


def is_valid_email(value: str | None) -> bool:
    return bool(value) and bool(EMAIL_PATTERN.fullmatch(value))


def is_account_number(value: str | None) -> bool:
    return bool(value) and bool(ACCOUNT_NUMBER_PATTERN.fullmatch(value))


def is_contact_number(value: str | None) -> bool:
    return bool(value) and bool(CONTACT_NUMBER_PATTERN.fullmatch(value))


def within_length(value: str | None, max_length: int) -> bool:
    """R: Present (non-empty) and at most max_length characters."""
    return bool(value) and len(value) <= max_length


def parse_capacity(value: str | None) -> int | None:
    """R: Whole number in 1..MAX_CAPACITY; None when absent or out of range."""
    text = str(value).strip() if value is not None else ""
    if not WHOLE_NUMBER_PATTERN.fullmatch(text):
        return None
    capacity = int(text)
    if not 1 <= capacity <= MAX_CAPACITY:
        return None
    return capacity


def age_on(birth_date: date, today: date) -> int:
    """R: Completed years between birth_date and today."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def age_matches_birth_date(age: int, birth_date: date, today: date | None = None) -> bool:
    return age_on(birth_date, today or date.today()) == age
