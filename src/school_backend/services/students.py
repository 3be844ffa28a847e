"""
Student management, including the polymorphic guardian reference and the
student-parent links.

A student's guardian is stored as ``(guardian_id, guardian_type)`` where the
type names the table the id points into: ``parent`` or ``guardian``. Both
columns are NULL together or set together.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, InternalServerException, NotFoundException
from ..database import transaction
from ..encryption import EncryptionService
from ..interface.people import ParentSummary
from ..interface.students import (
    GuardianInfo,
    ParentLink,
    StudentCreate,
    StudentGet,
    StudentParentInfo,
    StudentUpdate
)
from ..model.people import GUARDIAN_TYPE_GUARDIAN, GUARDIAN_TYPE_PARENT, Student, StudentParent
from ..repositories.people import GuardianRepository, ParentRepository, StudentRepository
from .base import patch_fields, repository_errors
from .people import PersonService, blank_to_none

logger = logging.getLogger(__name__)

GUARDIAN_TYPES = (GUARDIAN_TYPE_PARENT, GUARDIAN_TYPE_GUARDIAN)


class StudentService(PersonService):
    label = "student"

    def __init__(self, db: Session, encryption: Optional[EncryptionService] = None):
        super().__init__(db, StudentRepository(db), encryption)
        self.students: StudentRepository = self.repository
        self.parents = ParentRepository(db)
        self.guardians = GuardianRepository(db)

    # CRUD

    def create(self, payload: StudentCreate) -> Student:
        values = blank_to_none(payload.model_dump())
        self._check_identifiers(values)
        self.apply_nik(values)
        values["no_kk"] = self.encryption.encrypt_optional(values.get("no_kk"))
        if values.get("user_id"):
            self.ensure_user_linkable(values["user_id"])

        with repository_errors("student already exists"):
            student = self.students.create(Student(**values))
        logger.info(f"Created student {student.id}")
        return student

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Student]:
        return self.students.search(search, limit=limit, offset=skip)

    def update(self, student_id: str, payload: StudentUpdate) -> Student:
        student = self.get(student_id)
        values = blank_to_none(patch_fields(payload))
        self._check_identifiers(values, current_id=student.id)
        self.apply_nik(values, current_id=student.id)
        if "no_kk" in values:
            values["no_kk"] = self.encryption.encrypt_optional(values["no_kk"])

        with repository_errors("student already exists"):
            return self.students.save(student, values)

    def detail(self, student_id: str) -> StudentGet:
        """Student with decrypted PII, linked parents and the resolved guardian"""
        student = self.get(student_id)

        dto = StudentGet.model_validate(student)
        dto.nik = self.reveal(student.nik, "student.nik")
        dto.no_kk = self.reveal(student.no_kk, "student.no_kk")
        dto.parents = [
            StudentParentInfo(
                relationship_type=link.relationship_type,
                parent=ParentSummary.model_validate(link.parent)
            )
            for link in student.parents
        ]
        if student.guardian_id is not None:
            dto.guardian = self.resolve_guardian(student.guardian_id, student.guardian_type)
        return dto

    # Guardian reference

    def resolve_guardian(self, guardian_id: str, guardian_type: str) -> GuardianInfo:
        """
        Load the row a guardian reference points at.

        Raises:
            InternalServerException: unknown type tag or dangling id
        """
        if guardian_type == GUARDIAN_TYPE_PARENT:
            parent = self.parents.get_by_id_optional(guardian_id)
            if parent is None:
                logger.error(f"Guardian reference to missing parent {guardian_id}")
                raise InternalServerException("data integrity error: guardian not found")
            return GuardianInfo(
                id=parent.id,
                full_name=parent.full_name,
                phone_number=parent.phone_number,
                email=parent.email,
                type=GUARDIAN_TYPE_PARENT,
                relationship="PARENT"
            )

        if guardian_type == GUARDIAN_TYPE_GUARDIAN:
            guardian = self.guardians.get_by_id_optional(guardian_id)
            if guardian is None:
                logger.error(f"Guardian reference to missing guardian {guardian_id}")
                raise InternalServerException("data integrity error: guardian not found")
            return GuardianInfo(
                id=guardian.id,
                full_name=guardian.full_name,
                phone_number=guardian.phone_number,
                email=guardian.email,
                type=GUARDIAN_TYPE_GUARDIAN,
                relationship=guardian.relationship_to_student
            )

        logger.error(f"Unknown guardian type {guardian_type!r}")
        raise InternalServerException("data integrity error: unknown guardian type")

    def set_guardian(self, student_id: str, guardian_id: str, guardian_type: str) -> Student:
        if guardian_type not in GUARDIAN_TYPES:
            raise BadRequestException("guardian_type must be 'parent' or 'guardian'")

        student = self.get(student_id)

        # The target row must exist in the table the tag names
        if guardian_type == GUARDIAN_TYPE_PARENT:
            if self.parents.get_by_id_optional(guardian_id) is None:
                raise NotFoundException("parent not found")
        elif self.guardians.get_by_id_optional(guardian_id) is None:
            raise NotFoundException("guardian not found")

        with transaction(self.db):
            student.guardian_id = guardian_id
            student.guardian_type = guardian_type

        self.db.refresh(student)
        logger.info(f"Student {student_id} guardian set to {guardian_type} {guardian_id}")
        return student

    def remove_guardian(self, student_id: str) -> Student:
        student = self.get(student_id)
        if student.guardian_id is None and student.guardian_type is None:
            return student

        with transaction(self.db):
            student.guardian_id = None
            student.guardian_type = None

        self.db.refresh(student)
        return student

    # Parents

    def sync_parents(self, student_id: str, links: List[ParentLink]) -> Student:
        """
        Replace the full set of parents linked to a student.

        Nothing is written unless every link is valid.

        Raises:
            NotFoundException: student or any parent missing
            BadRequestException: the same parent listed twice
        """
        student = self.get(student_id)

        seen = set()
        for link in links:
            if link.parent_id in seen:
                raise BadRequestException("duplicate parent_id")
            seen.add(link.parent_id)

        found = {parent.id for parent in self.parents.find_by_ids(list(seen))}
        for link in links:
            if link.parent_id not in found:
                raise NotFoundException(f"parent not found: {link.parent_id}")

        with repository_errors(), transaction(self.db):
            self.students.replace_parents(student, [
                StudentParent(
                    student_id=student.id,
                    parent_id=link.parent_id,
                    relationship_type=link.relationship_type
                )
                for link in links
            ])

        self.db.refresh(student)
        logger.info(f"Student {student_id} now has {len(links)} parent(s)")
        return student

    def _check_identifiers(self, values: dict, current_id: Optional[str] = None) -> None:
        self.ensure_unique(self.students.find_by_nisn, values.get("nisn"), "nisn already exists", current_id)
        self.ensure_unique(self.students.find_by_nim, values.get("nim"), "nim already exists", current_id)
