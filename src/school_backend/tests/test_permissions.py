"""
Role/permission graph evaluation and the HTTP auth dependencies.
"""

import pytest

from school_backend.api.exceptions import BadRequestException, ForbiddenException, NotFoundException
from school_backend.interface.roles import RoleCreate, RoleUpdate
from school_backend.model.role import Permission, Role
from school_backend.permissions.core import authorize, build_principal, effective_permissions, has_permission
from school_backend.permissions.principal import FORBIDDEN_MESSAGE, Principal
from school_backend.permissions.registry import (
    ADMIN_ROLE,
    ALL_PERMISSIONS,
    ATTENDANCE_SUBMIT,
    DEFAULT_ROLE,
    GRADES_WRITE,
    STUDENTS_DELETE,
    STUDENTS_READ
)
from school_backend.services.auth import AuthService
from school_backend.services.roles import RoleService
from school_backend.services.users import UserService

TEST_PASSWORD = "Secret123"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestEffectivePermissions:

    def test_union_of_roles_and_direct_grants(self, db, make_role, make_user):
        teacher = make_role("teacher", [GRADES_WRITE, ATTENDANCE_SUBMIT])
        user = make_user("guru", roles=[teacher])
        user.permissions = [
            db.query(Permission).filter(Permission.name == ATTENDANCE_SUBMIT).one(),
            Permission(name=STUDENTS_READ)
        ]
        db.commit()
        db.refresh(user)

        assert effective_permissions(user) == {GRADES_WRITE, ATTENDANCE_SUBMIT, STUDENTS_READ}

    def test_teacher_role_scenario(self, db, make_role, make_user):
        user = make_user("guru", roles=[make_role("teacher", [GRADES_WRITE])])

        assert has_permission(user, GRADES_WRITE)
        assert not has_permission(user, STUDENTS_DELETE)

        principal = build_principal(user)
        assert principal.roles == ["teacher"]
        principal.authorize(GRADES_WRITE)
        with pytest.raises(ForbiddenException) as e:
            principal.authorize(STUDENTS_DELETE)
        assert e.value.detail == FORBIDDEN_MESSAGE

    def test_user_without_roles(self, db, make_user):
        user = make_user("nobody")
        assert effective_permissions(user) == set()
        assert not authorize(effective_permissions(user), STUDENTS_READ)

    def test_principal_without_user(self):
        with pytest.raises(NotFoundException):
            Principal().get_user_id_or_throw()


class TestSeededRoles:

    def test_admin_holds_every_permission(self, seeded):
        admin = seeded.query(Role).filter(Role.name == ADMIN_ROLE).one()
        assert {p.name for p in admin.permissions} == set(ALL_PERMISSIONS)

    def test_single_default_role(self, seeded):
        defaults = seeded.query(Role).filter(Role.is_default.is_(True)).all()
        assert [role.name for role in defaults] == [DEFAULT_ROLE]

    def test_new_default_clears_previous(self, seeded):
        RoleService(seeded).create(RoleCreate(name="guest", is_default=True, permissions=[STUDENTS_READ]))
        defaults = seeded.query(Role).filter(Role.is_default.is_(True)).all()
        assert [role.name for role in defaults] == ["guest"]

    def test_update_replaces_permissions(self, seeded):
        service = RoleService(seeded)
        role = service.create(RoleCreate(name="staff", permissions=[STUDENTS_READ]))
        role = service.update(role.id, RoleUpdate(permissions=[GRADES_WRITE]))
        assert [p.name for p in role.permissions] == [GRADES_WRITE]

    def test_default_role_cannot_be_deleted(self, seeded):
        role = seeded.query(Role).filter(Role.name == DEFAULT_ROLE).one()
        with pytest.raises(BadRequestException) as e:
            RoleService(seeded).delete(role.id)
        assert e.value.detail == "cannot delete default role"

    def test_unknown_permission(self, seeded):
        with pytest.raises(NotFoundException) as e:
            RoleService(seeded).create(RoleCreate(name="staff", permissions=["nope.read"]))
        assert e.value.detail == "permission not found: nope.read"


class TestUserGrants:

    def test_sync_roles(self, seeded, make_user):
        user = make_user("andi")
        user = UserService(seeded).sync_roles(user.id, [ADMIN_ROLE, DEFAULT_ROLE, ADMIN_ROLE])
        assert sorted(role.name for role in user.roles) == [ADMIN_ROLE, DEFAULT_ROLE]

    def test_sync_roles_unknown(self, seeded, make_user):
        user = make_user("andi")
        with pytest.raises(NotFoundException) as e:
            UserService(seeded).sync_roles(user.id, ["ghost"])
        assert e.value.detail == "role not found: ghost"

    def test_sync_permissions(self, seeded, make_user):
        user = make_user("andi")
        user = UserService(seeded).sync_permissions(user.id, [STUDENTS_READ])
        assert effective_permissions(user) == {STUDENTS_READ}


class TestAuthDependencies:
    """401 and 403 mapping of the bearer-token dependencies"""

    def test_missing_header(self, db, client):
        response = client.get("/students")
        assert response.status_code == 401
        assert response.json()["detail"] == "Authorization header is required"

    def test_wrong_scheme(self, db, client):
        response = client.get("/students", headers={"Authorization": "Token abc"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Authorization header format must be Bearer {token}"

    def test_garbage_token(self, db, client):
        response = client.get("/students", headers=bearer("not-a-jwt"))
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_superseded_token(self, db, client, make_user):
        make_user("andi")
        first = AuthService(db).login("andi", TEST_PASSWORD)
        AuthService(db).login("andi", TEST_PASSWORD)
        response = client.get("/auth/me", headers=bearer(first.access_token))
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_forbidden_until_granted(self, db, client, make_role, make_user):
        teacher = make_role("teacher", [GRADES_WRITE])
        make_user("guru", roles=[teacher])
        token = AuthService(db).login("guru", TEST_PASSWORD).access_token

        response = client.get("/students", headers=bearer(token))
        assert response.status_code == 403
        assert response.json()["detail"] == FORBIDDEN_MESSAGE

        # Grants are re-read on every request
        teacher.permissions.append(Permission(name=STUDENTS_READ))
        db.commit()

        response = client.get("/students", headers=bearer(token))
        assert response.status_code == 200
        assert response.json() == []
