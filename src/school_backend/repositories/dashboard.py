"""
Aggregate counts for the dashboard.
"""

from datetime import date
from typing import Dict, List, Type
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..model.academic import StudentClassroom, TeachingAssignment
from ..model.attendance import AttendanceSession
from ..model.people import Student


class DashboardRepository:

    def __init__(self, db: Session):
        self.db = db

    def count(self, model: Type) -> int:
        return self.db.query(func.count(model.id)).scalar() or 0

    def count_students_by_gender(self) -> Dict[str, int]:
        """Student count per lower-cased gender; students without one are left out"""
        gender = func.lower(Student.gender)
        rows = (
            self.db.query(gender, func.count(Student.id))
            .filter(Student.gender.isnot(None))
            .group_by(gender)
            .all()
        )
        return {value: count for value, count in rows}

    def count_sessions_for(self, schedule_ids: List[str], session_date: date) -> int:
        if not schedule_ids:
            return 0
        return self.db.query(func.count(AttendanceSession.id)).filter(
            AttendanceSession.schedule_id.in_(schedule_ids),
            AttendanceSession.date == session_date
        ).scalar() or 0

    def count_students_taught_by(self, teacher_id: str) -> int:
        """Distinct students enrolled in any classroom the teacher has an assignment in"""
        return (
            self.db.query(func.count(func.distinct(StudentClassroom.student_id)))
            .join(TeachingAssignment, TeachingAssignment.classroom_id == StudentClassroom.classroom_id)
            .filter(TeachingAssignment.teacher_id == teacher_id)
            .scalar()
        ) or 0
