"""
Conduct violation repositories.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.violation import StudentViolation, ViolationCategory, ViolationType


class ViolationCategoryRepository(BaseRepository[ViolationCategory]):

    def __init__(self, db: Session):
        super().__init__(db, ViolationCategory)


class ViolationTypeRepository(BaseRepository[ViolationType]):

    def __init__(self, db: Session):
        super().__init__(db, ViolationType)

    def list_by_category(self, category_id: Optional[str] = None) -> List[ViolationType]:
        query = self.db.query(ViolationType)
        if category_id:
            query = query.filter(ViolationType.category_id == category_id)
        return query.order_by(ViolationType.name).all()


class StudentViolationRepository(BaseRepository[StudentViolation]):

    def __init__(self, db: Session):
        super().__init__(db, StudentViolation)

    def search(self, student_id: Optional[str] = None, limit: Optional[int] = None,
               offset: Optional[int] = None) -> List[StudentViolation]:
        query = self.db.query(StudentViolation)
        if student_id:
            query = query.filter(StudentViolation.student_id == student_id)
        query = query.order_by(StudentViolation.violation_date.desc())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def total_points(self, student_id: str) -> int:
        return sum(v.points for v in self.find_by(student_id=student_id))
