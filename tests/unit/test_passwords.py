"""
Unit tests for carelink/passwords.py (Argon2 hashing).
"""

import pytest

from carelink.passwords import hash_password, verify_password

pytestmark = pytest.mark.unit


def test_hash_is_salted_and_not_plaintext():
    first = hash_password("secret@123")
    second = hash_password("secret@123")

    assert first != "secret@123"
    assert first.startswith("$argon2")
    assert first != second


def test_verify_accepts_matching_password():
    assert verify_password("secret@123", hash_password("secret@123")) is True


def test_verify_rejects_wrong_password():
    assert verify_password("wrong", hash_password("secret@123")) is False


@pytest.mark.parametrize("stored", [None, "", "not-a-hash"])
def test_verify_rejects_missing_or_corrupt_hash(stored):
    assert verify_password("secret@123", stored) is False


def test_verify_rejects_empty_password():
    assert verify_password("", hash_password("secret@123")) is False
