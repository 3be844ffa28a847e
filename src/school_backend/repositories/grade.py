"""
Assessment and score repositories.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.grade import Assessment, StudentScore


class AssessmentRepository(BaseRepository[Assessment]):

    def __init__(self, db: Session):
        super().__init__(db, Assessment)

    def list_by_assignment(self, teaching_assignment_id: Optional[str] = None) -> List[Assessment]:
        query = self.db.query(Assessment)
        if teaching_assignment_id:
            query = query.filter(Assessment.teaching_assignment_id == teaching_assignment_id)
        return query.order_by(Assessment.date.desc()).all()


class StudentScoreRepository(BaseRepository[StudentScore]):

    def __init__(self, db: Session):
        super().__init__(db, StudentScore)

    def find_for(self, assessment_id: str, student_id: str) -> Optional[StudentScore]:
        return self.find_one_by(assessment_id=assessment_id, student_id=student_id)
