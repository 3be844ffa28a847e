import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException
from ..database import transaction
from ..encryption import EncryptionService
from ..interface.guardians import GuardianCreate, GuardianGet, GuardianUpdate
from ..model.people import GUARDIAN_TYPE_GUARDIAN, Guardian, Student
from ..repositories.people import GuardianRepository
from .base import patch_fields, repository_errors
from .people import PersonService, blank_to_none

logger = logging.getLogger(__name__)


class GuardianService(PersonService):
    label = "guardian"

    def __init__(self, db: Session, encryption: Optional[EncryptionService] = None):
        super().__init__(db, GuardianRepository(db), encryption)
        self.guardians: GuardianRepository = self.repository

    def create(self, payload: GuardianCreate) -> Guardian:
        values = blank_to_none(payload.model_dump())
        self._check_contacts(values)
        self.apply_nik(values)
        if values.get("user_id"):
            self.ensure_user_linkable(values["user_id"])

        with repository_errors("guardian already exists"):
            guardian = self.guardians.create(Guardian(**values))
        logger.info(f"Created guardian {guardian.id}")
        return guardian

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Guardian]:
        return self.guardians.search(search, limit=limit, offset=skip)

    def update(self, guardian_id: str, payload: GuardianUpdate) -> Guardian:
        guardian = self.get(guardian_id)
        values = blank_to_none(patch_fields(payload))
        if "phone_number" in values and values["phone_number"] is None:
            raise BadRequestException("phone number is required")
        self._check_contacts(values, current_id=guardian.id)
        self.apply_nik(values, current_id=guardian.id)

        with repository_errors("guardian already exists"):
            return self.guardians.save(guardian, values)

    def detail(self, guardian_id: str) -> GuardianGet:
        guardian = self.get(guardian_id)
        dto = GuardianGet.model_validate(guardian)
        dto.nik = self.reveal(guardian.nik, "guardian.nik")
        return dto

    def delete(self, guardian_id: str) -> None:
        """Delete a guardian and clear any student guardian pointer referencing it"""
        guardian = self.get(guardian_id)
        with repository_errors(), transaction(self.db):
            cleared = self.db.query(Student).filter(
                Student.guardian_id == guardian.id,
                Student.guardian_type == GUARDIAN_TYPE_GUARDIAN
            ).update({Student.guardian_id: None, Student.guardian_type: None}, synchronize_session="fetch")
            self.db.delete(guardian)
        logger.info(f"Deleted guardian {guardian_id}, cleared {cleared} guardian reference(s)")

    def _check_contacts(self, values: dict, current_id: Optional[str] = None) -> None:
        self.ensure_unique(self.guardians.find_by_phone, values.get("phone_number"), "phone number already exists", current_id)
        self.ensure_unique(self.guardians.find_by_email, values.get("email"), "email already exists", current_id)
