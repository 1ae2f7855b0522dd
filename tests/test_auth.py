"""Registration, login, logout and session status."""

import pytest

from storefront.models.database import db, User
from storefront.services.auth_service import AuthService
from storefront.services.errors import DuplicateEmail, InvalidCredentials, InvalidInput

from .conftest import PASSWORD, login

REGISTRATION = {
    "firstname": "Juan",
    "middlename": "Santos",
    "lastname": "Cruz",
    "email": "a@x.com",
    "password": "s3cretpass",
    "address": "Quezon City",
    "contact": "0917-123-4567",
}


class TestRegister:

    def test_register_creates_user_with_hashed_password(self, client):
        resp = client.post("/api/register", json=REGISTRATION)
        assert resp.status_code == 201
        assert resp.json["success"] is True

        user = User.query.filter_by(email="a@x.com").one()
        assert user.role == "user"
        assert user.password_hash != REGISTRATION["password"]
        assert AuthService.verify_password(REGISTRATION["password"], user.password_hash)

    def test_duplicate_email_rejected(self, client):
        assert client.post("/api/register", json=REGISTRATION).status_code == 201

        resp = client.post("/api/register", json=REGISTRATION)
        assert resp.status_code == 400
        assert resp.json["error"] == "DuplicateEmail"
        assert User.query.count() == 1

    def test_duplicate_email_is_case_insensitive(self, app, make_user):
        make_user(email="a@x.com")
        with pytest.raises(DuplicateEmail):
            make_user(email=" A@X.com ")

    def test_missing_fields_rejected(self, client):
        resp = client.post("/api/register", json={"email": "a@x.com"})
        assert resp.status_code == 400
        assert resp.json["error"] == "InvalidInput"
        assert "password" in resp.json["errors"]
        assert "firstname" in resp.json["errors"]

    def test_malformed_email_rejected(self, client):
        resp = client.post("/api/register", json={**REGISTRATION, "email": "not-an-email"})
        assert resp.status_code == 400
        assert "email" in resp.json["errors"]

    def test_password_over_bcrypt_limit_rejected(self, client):
        resp = client.post("/api/register", json={**REGISTRATION, "password": "p" * 100})
        assert resp.status_code == 400
        assert resp.json["error"] == "InvalidInput"
        assert "password" in resp.json["errors"]
        assert User.query.count() == 0

    def test_password_limit_counts_bytes(self, client):
        # 40 characters, 80 bytes in UTF-8
        resp = client.post("/api/register", json={**REGISTRATION, "password": "\u00f1" * 40})
        assert resp.status_code == 400
        assert "password" in resp.json["errors"]

    def test_password_at_limit_accepted(self, client):
        resp = client.post("/api/register", json={**REGISTRATION, "password": "p" * 72})
        assert resp.status_code == 201

    def test_service_rejects_long_password(self, app):
        with pytest.raises(InvalidInput):
            AuthService.register_user(
                firstname="Juan", lastname="Cruz", email="a@x.com", password="p" * 73,
            )


class TestLogin:

    def test_login_returns_identity_and_sets_cookie(self, app, client, make_user):
        make_user(email="jane@shop.test")

        resp = login(client, "jane@shop.test")
        assert resp.status_code == 200
        assert resp.json["success"] is True
        assert resp.json["role"] == "user"
        assert resp.json["user"]["email"] == "jane@shop.test"
        assert "password_hash" not in resp.json["user"]
        assert client.get_cookie(app.config["SESSION_COOKIE_NAME"]) is not None

    def test_login_role_matches_stored_role(self, client, make_user):
        make_user(email="boss@shop.test", role="admin")

        resp = login(client, "boss@shop.test")
        assert resp.json["role"] == "admin"
        assert resp.json["user"]["role"] == "admin"

    def test_wrong_password_and_unknown_email_look_the_same(self, client, make_user):
        make_user(email="jane@shop.test")

        wrong_password = login(client, "jane@shop.test", "nope-nope-nope")
        unknown_email = login(client, "ghost@shop.test")

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json == unknown_email.json
        assert wrong_password.json["error"] == "InvalidCredentials"

        long_known = login(client, "jane@shop.test", "p" * 100)
        long_unknown = login(client, "ghost@shop.test", "p" * 100)
        assert long_known.status_code == long_unknown.status_code == 400
        assert long_known.json == long_unknown.json == wrong_password.json

    def test_authenticate_raises_invalid_credentials(self, app, make_user):
        make_user(email="jane@shop.test")
        with pytest.raises(InvalidCredentials):
            AuthService.authenticate("jane@shop.test", "wrong")
        assert AuthService.authenticate("JANE@shop.test", PASSWORD).email == "jane@shop.test"


class TestStatusAndLogout:

    def test_status_for_guest(self, client):
        resp = client.get("/status")
        assert resp.status_code == 200
        assert resp.json == {"loggedIn": False}

    def test_status_for_logged_in_user(self, user_client):
        resp = user_client.get("/status")
        assert resp.json["loggedIn"] is True
        assert resp.json["user"]["firstname"] == "Jane"
        assert resp.json["user"]["role"] == "user"

    def test_logout_destroys_session(self, app, user_client):
        cookie = user_client.get_cookie(app.config["SESSION_COOKIE_NAME"])
        session_id = cookie.value

        resp = user_client.post("/logout")
        assert resp.json == {"success": True}
        assert user_client.get("/status").json == {"loggedIn": False}
        assert app.extensions["session_store"].get(session_id) is None

    def test_logout_without_session(self, client):
        resp = client.post("/logout")
        assert resp.status_code == 200
        assert resp.json == {"success": True}

    def test_session_is_a_snapshot(self, user_client):
        user = User.query.filter_by(email="jane@shop.test").one()
        user.firstname = "Janet"
        db.session.commit()

        assert user_client.get("/status").json["user"]["firstname"] == "Jane"
