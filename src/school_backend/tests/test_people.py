"""
Students, parents, guardians and employees: encrypted identifiers, the
polymorphic guardian reference and the student-parent links.
"""

import pytest

from school_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    InternalServerException,
    NotFoundException
)
from school_backend.interface.employees import EmployeeCreate
from school_backend.interface.guardians import GuardianCreate, GuardianUpdate
from school_backend.interface.parents import ParentCreate
from school_backend.interface.students import ParentLink, StudentCreate, StudentUpdate
from school_backend.model.people import Student, StudentParent
from school_backend.permissions.registry import ADMIN_ROLE
from school_backend.model.role import Role
from school_backend.services.auth import AuthService
from school_backend.services.employees import EmployeeService
from school_backend.services.guardians import GuardianService
from school_backend.services.parents import ParentService
from school_backend.services.students import StudentService

NIK = "3201234567890001"


@pytest.fixture
def students(db, encryption):
    return StudentService(db, encryption)


@pytest.fixture
def parent(db, encryption):
    return ParentService(db, encryption).create(ParentCreate(full_name="Hasan", phone_number="0811000001"))


@pytest.fixture
def guardian(db, encryption):
    return GuardianService(db, encryption).create(GuardianCreate(
        full_name="Rahmat",
        phone_number="0811000002",
        relationship_to_student="UNCLE"
    ))


class TestEncryptedIdentifiers:

    def test_nik_stored_encrypted_with_blind_index(self, students, encryption):
        student = students.create(StudentCreate(full_name="Ahmad", nik=NIK, no_kk="3201000000000009"))

        assert student.nik != NIK
        assert student.nik_hash == encryption.hash(NIK)
        assert student.no_kk != "3201000000000009"

        detail = students.detail(student.id)
        assert detail.nik == NIK
        assert detail.no_kk == "3201000000000009"

    def test_duplicate_nik_conflicts(self, students):
        students.create(StudentCreate(full_name="Ahmad", nik=NIK))
        with pytest.raises(ConflictException) as e:
            students.create(StudentCreate(full_name="Budi", nik=NIK))
        assert e.value.detail == "nik already exists"

    def test_update_with_own_nik(self, students):
        student = students.create(StudentCreate(full_name="Ahmad", nik=NIK))
        students.update(student.id, StudentUpdate(nik=NIK, full_name="Ahmad Fauzi"))
        assert students.detail(student.id).full_name == "Ahmad Fauzi"

    def test_empty_identifiers_stay_null(self, students):
        first = students.create(StudentCreate(full_name="Ahmad", nik="", nisn=""))
        second = students.create(StudentCreate(full_name="Budi", nik="", nisn=""))
        for student in (first, second):
            assert student.nik is None
            assert student.nik_hash is None
            assert student.nisn is None

    def test_duplicate_nisn(self, students):
        students.create(StudentCreate(full_name="Ahmad", nisn="0051234567"))
        with pytest.raises(ConflictException) as e:
            students.create(StudentCreate(full_name="Budi", nisn="0051234567"))
        assert e.value.detail == "nisn already exists"

    def test_undecryptable_value_shows_sentinel(self, db, students):
        student = students.create(StudentCreate(full_name="Ahmad", nik=NIK))
        student.nik = "corrupted"
        db.commit()
        assert students.detail(student.id).nik == "[DECRYPTION_ERROR]"

    def test_employee_nik_and_nip(self, db, encryption):
        service = EmployeeService(db, encryption)
        service.create(EmployeeCreate(full_name="Budi", job_title="Teacher", nip="1987", nik=NIK))
        with pytest.raises(ConflictException):
            service.create(EmployeeCreate(full_name="Citra", job_title="Teacher", nip="1988", nik=NIK))
        with pytest.raises(ConflictException):
            service.create(EmployeeCreate(full_name="Dodi", job_title="Teacher", nip="1987"))


class TestGuardianReference:
    """The (guardian_id, guardian_type) pointer on a student"""

    def test_set_guardian_from_guardians_table(self, students, guardian):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.set_guardian(student.id, guardian.id, "guardian")

        info = students.detail(student.id).guardian
        assert info.id == guardian.id
        assert info.type == "guardian"
        assert info.relationship == "UNCLE"
        assert info.phone_number == "0811000002"

    def test_set_guardian_from_parents_table(self, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.set_guardian(student.id, parent.id, "parent")

        info = students.detail(student.id).guardian
        assert info.id == parent.id
        assert info.type == "parent"
        assert info.relationship == "PARENT"

    def test_id_must_exist_in_tagged_table(self, students, guardian):
        student = students.create(StudentCreate(full_name="Ahmad"))
        with pytest.raises(NotFoundException) as e:
            students.set_guardian(student.id, guardian.id, "parent")
        assert e.value.detail == "parent not found"

    def test_unknown_type(self, students, guardian):
        student = students.create(StudentCreate(full_name="Ahmad"))
        with pytest.raises(BadRequestException):
            students.set_guardian(student.id, guardian.id, "uncle")

    def test_remove_guardian(self, students, guardian):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.set_guardian(student.id, guardian.id, "guardian")

        student = students.remove_guardian(student.id)
        assert student.guardian_id is None
        assert student.guardian_type is None
        assert students.detail(student.id).guardian is None

    def test_remove_without_guardian_is_noop(self, students):
        student = students.create(StudentCreate(full_name="Ahmad"))
        student = students.remove_guardian(student.id)
        assert student.guardian_id is None

    def test_dangling_reference_is_integrity_error(self, db, students):
        student = students.create(StudentCreate(full_name="Ahmad"))
        student.guardian_id = "missing-parent"
        student.guardian_type = "parent"
        db.commit()

        with pytest.raises(InternalServerException):
            students.detail(student.id)

    def test_deleting_guardian_clears_pointer(self, db, encryption, students, guardian):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.set_guardian(student.id, guardian.id, "guardian")

        GuardianService(db, encryption).delete(guardian.id)

        student = students.get(student.id)
        assert student.guardian_id is None
        assert student.guardian_type is None

    def test_deleting_parent_clears_pointer(self, db, encryption, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.set_guardian(student.id, parent.id, "parent")

        ParentService(db, encryption).delete(parent.id)

        student = students.get(student.id)
        assert student.guardian_id is None
        assert student.parents == []


class TestParentSync:

    def test_replace_links(self, db, encryption, students, parent):
        mother = ParentService(db, encryption).create(ParentCreate(full_name="Aisyah", phone_number="0811000003"))
        student = students.create(StudentCreate(full_name="Ahmad"))

        students.sync_parents(student.id, [ParentLink(parent_id=parent.id, relationship_type="father")])
        student = students.sync_parents(student.id, [
            ParentLink(parent_id=mother.id, relationship_type="MOTHER")
        ])

        assert [(link.parent_id, link.relationship_type) for link in student.parents] == [(mother.id, "MOTHER")]
        assert db.query(StudentParent).count() == 1

    def test_relationship_type_is_upper_cased(self, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        student = students.sync_parents(student.id, [ParentLink(parent_id=parent.id, relationship_type=" father ")])
        assert student.parents[0].relationship_type == "FATHER"

    def test_duplicate_leaves_links_untouched(self, db, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.sync_parents(student.id, [ParentLink(parent_id=parent.id, relationship_type="FATHER")])

        with pytest.raises(BadRequestException) as e:
            students.sync_parents(student.id, [
                ParentLink(parent_id=parent.id, relationship_type="FATHER"),
                ParentLink(parent_id=parent.id, relationship_type="MOTHER")
            ])
        assert e.value.detail == "duplicate parent_id"

        links = db.query(StudentParent).filter(StudentParent.student_id == student.id).all()
        assert [(link.parent_id, link.relationship_type) for link in links] == [(parent.id, "FATHER")]

    def test_missing_parent(self, db, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        with pytest.raises(NotFoundException) as e:
            students.sync_parents(student.id, [
                ParentLink(parent_id=parent.id, relationship_type="FATHER"),
                ParentLink(parent_id="ghost", relationship_type="MOTHER")
            ])
        assert e.value.detail == "parent not found: ghost"
        assert db.query(StudentParent).count() == 0

    def test_empty_list_clears_links(self, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.sync_parents(student.id, [ParentLink(parent_id=parent.id, relationship_type="FATHER")])
        assert students.sync_parents(student.id, []).parents == []

    def test_parent_detail_lists_children(self, db, encryption, students, parent):
        student = students.create(StudentCreate(full_name="Ahmad"))
        students.sync_parents(student.id, [ParentLink(parent_id=parent.id, relationship_type="FATHER")])

        detail = ParentService(db, encryption).detail(parent.id)
        assert [(child.student_id, child.relationship_type) for child in detail.students] == [(student.id, "FATHER")]


class TestContactsAndAccounts:

    def test_guardian_phone_unique_and_required(self, db, encryption, guardian):
        service = GuardianService(db, encryption)
        with pytest.raises(ConflictException):
            service.create(GuardianCreate(full_name="Other", phone_number="0811000002"))
        with pytest.raises(BadRequestException):
            service.update(guardian.id, GuardianUpdate(phone_number=None))

    def test_user_account_links_once(self, db, students, make_user):
        user = make_user("ahmad")
        first = students.create(StudentCreate(full_name="Ahmad"))
        second = students.create(StudentCreate(full_name="Budi"))

        students.link_user(first.id, user.id)
        with pytest.raises(ConflictException) as e:
            students.link_user(second.id, user.id)
        assert e.value.detail == "this user account is already linked to another student"

        students.unlink_user(first.id)
        assert students.link_user(second.id, user.id).user_id == user.id


class TestStudentApi:

    def test_create_and_guardian_round(self, seeded, client, make_user):
        admin_role = seeded.query(Role).filter(Role.name == ADMIN_ROLE).one()
        make_user("root", roles=[admin_role])
        token = AuthService(seeded).login("root", "Secret123").access_token
        headers = {"Authorization": f"Bearer {token}"}

        response = client.post("/students", json={"full_name": "Ahmad", "nik": NIK}, headers=headers)
        assert response.status_code == 201
        student = response.json()
        assert student["nik"] == NIK
        assert student["guardian"] is None

        response = client.post("/guardians", json={"full_name": "Rahmat", "phone_number": "0811"}, headers=headers)
        assert response.status_code == 201
        guardian_id = response.json()["id"]

        response = client.put(
            f"/students/{student['id']}/guardian",
            json={"guardian_id": guardian_id, "guardian_type": "guardian"},
            headers=headers
        )
        assert response.status_code == 200
        assert response.json()["guardian"]["id"] == guardian_id

        response = client.get(f"/students/{student['id']}/guardian", headers=headers)
        assert response.json()["type"] == "guardian"

        response = client.post("/students", json={"full_name": "Budi", "nik": NIK}, headers=headers)
        assert response.status_code == 409
        assert response.json()["detail"] == "nik already exists"

        assert client.get("/students/unknown", headers=headers).status_code == 404

        student_count = seeded.query(Student).count()
        assert student_count == 1
