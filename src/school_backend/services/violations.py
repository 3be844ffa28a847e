import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..interface.violations import (
    StudentViolationCreate,
    StudentViolationUpdate,
    ViolationCategoryCreate,
    ViolationCategoryUpdate,
    ViolationTypeCreate,
    ViolationTypeUpdate
)
from ..model.violation import StudentViolation, ViolationCategory, ViolationType
from ..repositories.people import StudentRepository
from ..repositories.violation import (
    StudentViolationRepository,
    ViolationCategoryRepository,
    ViolationTypeRepository
)
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


class ViolationService:
    """Conduct rules (categories and types) and the violations recorded against students"""

    def __init__(self, db: Session):
        self.db = db
        self.categories = ViolationCategoryRepository(db)
        self.types = ViolationTypeRepository(db)
        self.records = StudentViolationRepository(db)
        self.students = StudentRepository(db)

    # Categories

    def create_category(self, payload: ViolationCategoryCreate) -> ViolationCategory:
        with repository_errors():
            return self.categories.create(ViolationCategory(**payload.model_dump()))

    def list_categories(self) -> List[ViolationCategory]:
        return self.db.query(ViolationCategory).order_by(ViolationCategory.name).all()

    def get_category(self, category_id: str) -> ViolationCategory:
        return get_or_404(self.categories, category_id, "category not found")

    def update_category(self, category_id: str, payload: ViolationCategoryUpdate) -> ViolationCategory:
        category = self.get_category(category_id)
        with repository_errors():
            return self.categories.save(category, patch_fields(payload))

    def delete_category(self, category_id: str) -> None:
        self.get_category(category_id)
        with repository_errors():
            self.categories.delete(category_id)

    # Types

    def create_type(self, payload: ViolationTypeCreate) -> ViolationType:
        if not self.categories.exists(payload.category_id):
            raise NotFoundException("category not found")
        with repository_errors():
            return self.types.create(ViolationType(**payload.model_dump()))

    def list_types(self, category_id: Optional[str] = None) -> List[ViolationType]:
        return self.types.list_by_category(category_id)

    def get_type(self, type_id: str) -> ViolationType:
        return get_or_404(self.types, type_id, "violation type not found")

    def update_type(self, type_id: str, payload: ViolationTypeUpdate) -> ViolationType:
        violation_type = self.get_type(type_id)
        updates = {key: value for key, value in patch_fields(payload).items() if value is not None or key == "description"}
        if "category_id" in updates and not self.categories.exists(updates["category_id"]):
            raise NotFoundException("category not found")
        with repository_errors():
            return self.types.save(violation_type, updates)

    def delete_type(self, type_id: str) -> None:
        self.get_type(type_id)
        with repository_errors():
            self.types.delete(type_id)

    # Student violations

    def record(self, payload: StudentViolationCreate) -> StudentViolation:
        """Record a violation; points are copied from the type at this moment"""
        if not self.students.exists(payload.student_id):
            raise NotFoundException("student not found")
        violation_type = self.types.get_by_id_optional(payload.violation_type_id)
        if violation_type is None:
            raise NotFoundException("violation type not found")

        violation = StudentViolation(points=violation_type.default_points, **payload.model_dump())
        with repository_errors():
            violation = self.records.create(violation)
        logger.info(f"Recorded violation {violation.id} for student {payload.student_id}")
        return violation

    def list_records(self, student_id: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[StudentViolation]:
        return self.records.search(student_id=student_id, limit=limit, offset=skip)

    def get_record(self, violation_id: str) -> StudentViolation:
        return get_or_404(self.records, violation_id, "violation not found")

    def update_record(self, violation_id: str, payload: StudentViolationUpdate) -> StudentViolation:
        violation = self.get_record(violation_id)
        updates = patch_fields(payload)
        if updates.get("violation_date") is None:
            updates.pop("violation_date", None)
        with repository_errors():
            return self.records.save(violation, updates)

    def delete_record(self, violation_id: str) -> None:
        self.get_record(violation_id)
        with repository_errors():
            self.records.delete(violation_id)

    def total_points(self, student_id: str) -> int:
        if not self.students.exists(student_id):
            raise NotFoundException("student not found")
        return self.records.total_points(student_id)
