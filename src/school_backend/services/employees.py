import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..encryption import EncryptionService
from ..interface.employees import EmployeeCreate, EmployeeGet, EmployeeUpdate
from ..model.people import Employee
from ..repositories.people import EmployeeRepository
from .base import patch_fields, repository_errors
from .people import PersonService, blank_to_none

logger = logging.getLogger(__name__)


class EmployeeService(PersonService):
    label = "employee"

    def __init__(self, db: Session, encryption: Optional[EncryptionService] = None):
        super().__init__(db, EmployeeRepository(db), encryption)
        self.employees: EmployeeRepository = self.repository

    def create(self, payload: EmployeeCreate) -> Employee:
        values = blank_to_none(payload.model_dump())
        self._check_identifiers(values)
        self.apply_nik(values)
        if values.get("user_id"):
            self.ensure_user_linkable(values["user_id"])

        with repository_errors("employee already exists"):
            employee = self.employees.create(Employee(**values))
        logger.info(f"Created employee {employee.id}")
        return employee

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Employee]:
        return self.employees.search(search, limit=limit, offset=skip)

    def update(self, employee_id: str, payload: EmployeeUpdate) -> Employee:
        employee = self.get(employee_id)
        values = blank_to_none(patch_fields(payload))
        self._check_identifiers(values, current_id=employee.id)
        self.apply_nik(values, current_id=employee.id)

        with repository_errors("employee already exists"):
            return self.employees.save(employee, values)

    def detail(self, employee_id: str) -> EmployeeGet:
        employee = self.get(employee_id)
        dto = EmployeeGet.model_validate(employee)
        dto.nik = self.reveal(employee.nik, "employee.nik")
        return dto

    def _check_identifiers(self, values: dict, current_id: Optional[str] = None) -> None:
        self.ensure_unique(self.employees.find_by_nip, values.get("nip"), "nip already exists", current_id)
        self.ensure_unique(self.employees.find_by_phone, values.get("phone_number"), "phone number already exists", current_id)
