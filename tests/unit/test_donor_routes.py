"""
API tests for /api/donors.

Tests:
  - Registration (form body, optional photo) and login
  - Guarded profile read / update / delete
  - Availability probes
  - Problem Details bodies on failures
"""

import pytest

from carelink.passwords import verify_password
from tests.factories import PASSWORD, PNG_BYTES, auth_header, make_donor

pytestmark = pytest.mark.unit

REGISTRATION = {
    "fullName": "Dana Donor",
    "email": "Dana@Example.com",
    "address": "12 Main Street",
    "contactNumber": "0771234567",
    "username": "dana",
    "password": "secret1",
}


def test_register_returns_profile_and_token(client, repositories):
    response = client.post("/api/donors/register", data=REGISTRATION)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "dana@example.com"
    assert body["fullName"] == "Dana Donor"
    assert body["profilePhoto"] == "default-profile.jpg"
    assert body["token"]
    assert "password" not in body and "passwordHash" not in body
    assert repositories.donors.get_by_username("dana") is not None


def test_register_with_photo(client, repositories):
    response = client.post(
        "/api/donors/register",
        data=REGISTRATION,
        files={"profilePhoto": ("me.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 201
    assert response.json()["profilePhoto"].startswith("profiles/profilePhoto-")


def test_register_rejects_wrong_photo_type(client, repositories):
    response = client.post(
        "/api/donors/register",
        data=REGISTRATION,
        files={"profilePhoto": ("me.pdf", b"%PDF", "application/pdf")},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert repositories.donors.count_identities() == 0


def test_register_missing_field(client):
    response = client.post(
        "/api/donors/register", data={**REGISTRATION, "contactNumber": ""}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Contact number is required"
    assert body["detail"] == body["message"]
    assert response.headers["content-type"].startswith("application/problem+json")


def test_register_duplicate_email(client, repositories):
    repositories.donors.create(make_donor(email="dana@example.com"))

    response = client.post("/api/donors/register", data=REGISTRATION)

    assert response.status_code == 400
    assert response.json()["code"] == "CONFLICT"


def test_login(client, repositories):
    donor = repositories.donors.create(make_donor())

    response = client.post(
        "/api/donors/login", json={"username": "donorone", "password": PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["id"] == str(donor.id)
    assert response.json()["token"]


def test_login_wrong_password(client, repositories):
    repositories.donors.create(make_donor())

    response = client.post(
        "/api/donors/login", json={"username": "donorone", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password"


def test_login_blocked(client, repositories):
    repositories.donors.create(make_donor(is_blocked=True))

    response = client.post(
        "/api/donors/login", json={"username": "donorone", "password": PASSWORD}
    )

    assert response.status_code == 403


def test_login_missing_body_is_400(client):
    response = client.post("/api/donors/login", json={})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_profile_requires_token(client):
    response = client.get("/api/donors/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


def test_profile(client, repositories):
    donor = repositories.donors.create(make_donor())

    response = client.get("/api/donors/profile", headers=auth_header(donor))

    assert response.status_code == 200
    assert response.json()["username"] == "donorone"


def test_update_profile(client, repositories):
    donor = repositories.donors.create(make_donor())

    response = client.put(
        "/api/donors/profile",
        headers=auth_header(donor),
        data={"address": "99 New Road", "password": "changed@1"},
    )

    assert response.status_code == 200
    assert response.json()["address"] == "99 New Road"
    assert response.json()["token"]
    stored = repositories.donors.get_by_username("donorone")
    assert verify_password("changed@1", stored.password_hash)


def test_delete_account(client, repositories):
    donor = repositories.donors.create(make_donor())

    response = client.delete("/api/donors/profile", headers=auth_header(donor))

    assert response.status_code == 200
    assert repositories.donors.get_by_id(donor.id) is None
    follow_up = client.get("/api/donors/profile", headers=auth_header(donor))
    assert follow_up.status_code == 401


def test_availability_probes(client, repositories):
    repositories.donors.create(make_donor())

    assert client.get("/api/donors/check-username/donorone").json() == {"available": False}
    assert client.get("/api/donors/check-username/someone").json() == {"available": True}
    assert client.get("/api/donors/check-email/DONOR@example.com").json() == {
        "available": False
    }
