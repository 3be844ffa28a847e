import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..database import transaction
from ..encryption import EncryptionService
from ..interface.parents import ParentChild, ParentCreate, ParentGet, ParentUpdate
from ..model.people import GUARDIAN_TYPE_PARENT, Parent, Student
from ..repositories.people import ParentRepository
from .base import patch_fields, repository_errors
from .people import PersonService, blank_to_none

logger = logging.getLogger(__name__)


class ParentService(PersonService):
    label = "parent"

    def __init__(self, db: Session, encryption: Optional[EncryptionService] = None):
        super().__init__(db, ParentRepository(db), encryption)
        self.parents: ParentRepository = self.repository

    def create(self, payload: ParentCreate) -> Parent:
        values = blank_to_none(payload.model_dump())
        self._check_contacts(values)
        self.apply_nik(values)
        if values.get("user_id"):
            self.ensure_user_linkable(values["user_id"])

        with repository_errors("parent already exists"):
            parent = self.parents.create(Parent(**values))
        logger.info(f"Created parent {parent.id}")
        return parent

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Parent]:
        return self.parents.search(search, limit=limit, offset=skip)

    def update(self, parent_id: str, payload: ParentUpdate) -> Parent:
        parent = self.get(parent_id)
        values = blank_to_none(patch_fields(payload))
        self._check_contacts(values, current_id=parent.id)
        self.apply_nik(values, current_id=parent.id)
        if "life_status" in values and values["life_status"] is None:
            del values["life_status"]

        with repository_errors("parent already exists"):
            return self.parents.save(parent, values)

    def detail(self, parent_id: str) -> ParentGet:
        parent = self.get(parent_id)
        dto = ParentGet.model_validate(parent)
        dto.nik = self.reveal(parent.nik, "parent.nik")
        dto.students = [
            ParentChild(
                student_id=link.student_id,
                full_name=link.student.full_name,
                relationship_type=link.relationship_type
            )
            for link in parent.children
        ]
        return dto

    def delete(self, parent_id: str) -> None:
        """Delete a parent and clear any student guardian pointer referencing it"""
        parent = self.get(parent_id)
        with repository_errors(), transaction(self.db):
            cleared = self.db.query(Student).filter(
                Student.guardian_id == parent.id,
                Student.guardian_type == GUARDIAN_TYPE_PARENT
            ).update({Student.guardian_id: None, Student.guardian_type: None}, synchronize_session="fetch")
            self.db.delete(parent)
        logger.info(f"Deleted parent {parent_id}, cleared {cleared} guardian reference(s)")

    def _check_contacts(self, values: dict, current_id: Optional[str] = None) -> None:
        self.ensure_unique(self.parents.find_by_phone, values.get("phone_number"), "phone number already exists", current_id)
        self.ensure_unique(self.parents.find_by_email, values.get("email"), "email already exists", current_id)
