"""
Registration and the access/refresh token life cycle.

A user has at most one live access token: the one issued by the most recent
login or refresh. Logging out revokes it without issuing a new one.
"""

import pytest
from datetime import timedelta

from school_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    InternalServerException,
    UnauthorizedException
)
from school_backend.interface.auth import RegisterRequest
from school_backend.permissions.registry import DEFAULT_ROLE, PROFILE_READ
from school_backend.permissions.tokens import ACCESS_TOKEN, REFRESH_TOKEN, create_token, decode_token, hash_token
from school_backend.services.auth import INVALID_CREDENTIALS, LOGGED_OUT, SUPERSEDED, AuthService

TEST_PASSWORD = "Secret123"


def register_request(**overrides) -> RegisterRequest:
    data = {"name": "Dewi", "username": "dewi", "email": "dewi@school.org", "password": TEST_PASSWORD}
    data.update(overrides)
    return RegisterRequest(**data)


class TestRegistration:

    def test_register_assigns_only_default_role(self, seeded):
        user = AuthService(seeded).register(register_request(roles=["admin"]))
        assert [role.name for role in user.roles] == [DEFAULT_ROLE]
        assert user.password != TEST_PASSWORD

    def test_duplicate_email(self, seeded):
        service = AuthService(seeded)
        service.register(register_request())
        with pytest.raises(ConflictException) as e:
            service.register(register_request(username="other"))
        assert e.value.detail == "email already exists"

    def test_duplicate_username(self, seeded):
        service = AuthService(seeded)
        service.register(register_request())
        with pytest.raises(ConflictException) as e:
            service.register(register_request(email="other@school.org"))
        assert e.value.detail == "username already exists"

    def test_weak_password(self, seeded):
        with pytest.raises(BadRequestException):
            AuthService(seeded).register(register_request(password="weakpass"))

    def test_without_default_role(self, db, make_role):
        make_role("staff", is_default=False)
        with pytest.raises(InternalServerException) as e:
            AuthService(db).register(register_request())
        assert e.value.detail == "registration failed: default role not configured"


class TestTokens:
    """Login, refresh, logout and single-session revocation"""

    def test_login_by_username_or_email(self, db, make_user):
        user = make_user("andi")
        service = AuthService(db)

        by_username = service.login("andi", TEST_PASSWORD)
        assert by_username.token_type == "Bearer"
        assert by_username.expires_in > 0
        assert service.validate_token(by_username.access_token).id == user.id

        by_email = service.login("andi@school.org", TEST_PASSWORD)
        assert service.validate_token(by_email.access_token).id == user.id

    def test_login_failure_message_is_uniform(self, db, make_user):
        make_user("andi")
        service = AuthService(db)
        for login, password in [("andi", "Wrong1234"), ("nobody", TEST_PASSWORD)]:
            with pytest.raises(UnauthorizedException) as e:
                service.login(login, password)
            assert e.value.detail == INVALID_CREDENTIALS

    def test_stored_hash_matches_latest_access_token(self, db, make_user):
        user = make_user("andi")
        response = AuthService(db).login("andi", TEST_PASSWORD)
        db.refresh(user)
        assert user.current_token_hash == hash_token(response.access_token)

    def test_new_login_supersedes_previous(self, db, make_user):
        make_user("andi")
        service = AuthService(db)
        first = service.login("andi", TEST_PASSWORD)
        second = service.login("andi", TEST_PASSWORD)

        with pytest.raises(UnauthorizedException) as e:
            service.validate_token(first.access_token)
        assert e.value.detail == SUPERSEDED
        service.validate_token(second.access_token)

    def test_logout_revokes(self, db, make_user):
        user = make_user("andi")
        service = AuthService(db)
        response = service.login("andi", TEST_PASSWORD)
        service.logout(user.id)

        with pytest.raises(UnauthorizedException) as e:
            service.validate_token(response.access_token)
        assert e.value.detail == LOGGED_OUT

    def test_refresh_issues_new_session(self, db, make_user):
        make_user("andi")
        service = AuthService(db)
        login = service.login("andi", TEST_PASSWORD)
        refreshed = service.refresh(login.refresh_token)

        service.validate_token(refreshed.access_token)
        with pytest.raises(UnauthorizedException) as e:
            service.validate_token(login.access_token)
        assert e.value.detail == SUPERSEDED

    def test_token_types_are_not_interchangeable(self, db, make_user):
        make_user("andi")
        service = AuthService(db)
        login = service.login("andi", TEST_PASSWORD)

        with pytest.raises(UnauthorizedException):
            service.refresh(login.access_token)
        with pytest.raises(UnauthorizedException):
            service.validate_token(login.refresh_token)

    def test_expired_token(self, db, make_user):
        user = make_user("andi")
        token = create_token(user.id, ACCESS_TOKEN, expires_delta=timedelta(seconds=-30))
        with pytest.raises(UnauthorizedException):
            AuthService(db).validate_token(token)

    def test_refresh_for_deleted_user(self, db, make_user):
        user = make_user("andi")
        token = create_token(user.id, REFRESH_TOKEN)
        db.delete(user)
        db.commit()
        with pytest.raises(UnauthorizedException) as e:
            AuthService(db).refresh(token)
        assert e.value.detail == "user not found"

    def test_decode_returns_user_id(self):
        token = create_token("user-1", REFRESH_TOKEN)
        assert decode_token(token, REFRESH_TOKEN) == "user-1"


class TestChangePassword:

    def test_wrong_current_password(self, db, make_user):
        user = make_user("andi")
        with pytest.raises(BadRequestException) as e:
            AuthService(db).change_password(user.id, "Wrong1234", "NewSecret456")
        assert e.value.detail == "current password is incorrect"

    def test_change_ends_session(self, db, make_user):
        user = make_user("andi")
        service = AuthService(db)
        session = service.login("andi", TEST_PASSWORD)

        service.change_password(user.id, TEST_PASSWORD, "NewSecret456")

        with pytest.raises(UnauthorizedException):
            service.validate_token(session.access_token)
        with pytest.raises(UnauthorizedException):
            service.login("andi", TEST_PASSWORD)
        service.login("andi", "NewSecret456")


class TestAuthApi:

    def test_register_login_me_logout(self, seeded, client):
        response = client.post("/auth/register", json={
            "name": "Dewi",
            "username": "dewi",
            "email": "dewi@school.org",
            "password": TEST_PASSWORD
        })
        assert response.status_code == 201
        assert PROFILE_READ in response.json()["permissions"]

        response = client.post("/auth/login", json={"login": "dewi", "password": TEST_PASSWORD})
        assert response.status_code == 200
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["username"] == "dewi"
        assert [role["name"] for role in response.json()["roles"]] == [DEFAULT_ROLE]

        assert client.post("/auth/logout", headers=headers).status_code == 204

        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_bad_login(self, seeded, client):
        response = client.post("/auth/login", json={"login": "ghost", "password": TEST_PASSWORD})
        assert response.status_code == 401
        assert response.json()["detail"] == INVALID_CREDENTIALS
