"""
Mapping of database constraint failures to HTTP errors, and patch models
that refuse an explicit null for required columns.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import DataError, IntegrityError

from school_backend.api.exceptions import BadRequestException, ConflictException
from school_backend.interface.academic import AcademicYearUpdate, ClassroomUpdate
from school_backend.interface.employees import EmployeeUpdate
from school_backend.interface.roles import RoleCreate, RoleUpdate
from school_backend.interface.students import ParentLink, StudentCreate, StudentUpdate
from school_backend.interface.users import UserUpdate
from school_backend.model.role import Role
from school_backend.permissions.registry import ADMIN_ROLE, STUDENTS_READ
from school_backend.repositories.base import ConstraintError, DuplicateError, integrity_error
from school_backend.services.auth import AuthService
from school_backend.services.base import repository_errors
from school_backend.services.roles import RoleService
from school_backend.services.students import StudentService


class DriverError(Exception):
    """Stand-in for a DBAPI exception carrying a SQLSTATE"""

    def __init__(self, message: str, pgcode: str = None):
        super().__init__(message)
        self.pgcode = pgcode


def driver_integrity_error(message: str, pgcode: str = None) -> IntegrityError:
    return IntegrityError("UPDATE ...", {}, DriverError(message, pgcode))


class TestIntegrityClassification:

    def test_sqlite_unique_violation(self):
        error = integrity_error("Student", driver_integrity_error("UNIQUE constraint failed: students.nisn"))
        assert isinstance(error, DuplicateError)

    def test_postgres_unique_violation(self):
        error = integrity_error("Role", driver_integrity_error("duplicate key value", pgcode="23505"))
        assert isinstance(error, DuplicateError)

    @pytest.mark.parametrize("message,pgcode", [
        ("NOT NULL constraint failed: students.full_name", None),
        ("FOREIGN KEY constraint failed", None),
        ("null value in column \"name\"", "23502"),
        ("update or delete on table \"employees\" violates foreign key constraint", "23503")
    ])
    def test_other_constraints(self, message, pgcode):
        error = integrity_error("Employee", driver_integrity_error(message, pgcode))
        assert isinstance(error, ConstraintError)
        assert not isinstance(error, DuplicateError)


class TestRepositoryErrors:

    def test_duplicate_is_conflict(self):
        with pytest.raises(ConflictException) as e:
            with repository_errors("student already exists"):
                raise DuplicateError("Student", "UNIQUE constraint failed: students.nisn")
        assert e.value.detail == "student already exists"

    def test_constraint_is_bad_request(self):
        with pytest.raises(BadRequestException):
            with repository_errors("student already exists"):
                raise ConstraintError("Student", "NOT NULL constraint failed: students.full_name")

    def test_raw_foreign_key_failure_is_bad_request(self):
        with pytest.raises(BadRequestException):
            with repository_errors("resource already exists"):
                raise driver_integrity_error("FOREIGN KEY constraint failed")

    def test_value_too_long_is_bad_request(self):
        with pytest.raises(BadRequestException):
            with repository_errors():
                raise DataError("INSERT ...", {}, DriverError("value too long for type character varying(20)"))


class TestRequiredColumns:

    def test_student_name_cannot_be_nulled(self):
        with pytest.raises(ValidationError):
            StudentUpdate(full_name=None)
        assert StudentUpdate(gender=None).model_dump(exclude_unset=True) == {"gender": None}

    @pytest.mark.parametrize("model,field", [
        (RoleUpdate, "name"),
        (UserUpdate, "email"),
        (EmployeeUpdate, "job_title"),
        (ClassroomUpdate, "level"),
        (AcademicYearUpdate, "start_date")
    ])
    def test_patch_models_reject_null(self, model, field):
        with pytest.raises(ValidationError):
            model(**{field: None})

    def test_null_reaching_the_database_is_bad_request(self, db, encryption):
        students = StudentService(db, encryption)
        student = students.create(StudentCreate(full_name="Ahmad"))

        with pytest.raises(BadRequestException):
            students.update(student.id, StudentUpdate.model_construct(full_name=None))

        db.expire_all()
        assert students.get(student.id).full_name == "Ahmad"

    def test_role_name_null_is_bad_request(self, seeded):
        service = RoleService(seeded)
        role = service.create(RoleCreate(name="staff", permissions=[STUDENTS_READ]))

        with pytest.raises(BadRequestException):
            service.update(role.id, RoleUpdate.model_construct(name=None))

    def test_patch_with_null_name_over_http(self, seeded, client, make_user):
        admin_role = seeded.query(Role).filter(Role.name == ADMIN_ROLE).one()
        make_user("root", roles=[admin_role])
        token = AuthService(seeded).login("root", "Secret123").access_token
        headers = {"Authorization": f"Bearer {token}"}
        student_id = client.post("/students", json={"full_name": "Ahmad"}, headers=headers).json()["id"]

        response = client.patch(f"/students/{student_id}", json={"full_name": None}, headers=headers)

        assert response.status_code == 422
        assert client.get(f"/students/{student_id}", headers=headers).json()["full_name"] == "Ahmad"


class TestParentLinkLength:

    def test_relationship_type_fits_column(self):
        assert ParentLink(parent_id="p", relationship_type="step_mother").relationship_type == "STEP_MOTHER"
        with pytest.raises(ValidationError):
            ParentLink(parent_id="p", relationship_type="x" * 21)
