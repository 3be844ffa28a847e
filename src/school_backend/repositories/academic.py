"""
Repositories for the academic calendar: years, subjects, classrooms,
teaching assignments and weekly schedules.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.academic import AcademicYear, Classroom, Schedule, Subject, TeachingAssignment


class AcademicYearRepository(BaseRepository[AcademicYear]):

    def __init__(self, db: Session):
        super().__init__(db, AcademicYear)

    def find_active(self) -> Optional[AcademicYear]:
        return self.find_one_by(status="ACTIVE")

    def deactivate_all(self) -> None:
        """Set every year INACTIVE (not committed)."""
        self.db.query(AcademicYear).update({AcademicYear.status: "INACTIVE"}, synchronize_session="fetch")


class SubjectRepository(BaseRepository[Subject]):

    def __init__(self, db: Session):
        super().__init__(db, Subject)

    def find_by_code(self, code: str) -> Optional[Subject]:
        return self.find_one_by(code=code)


class ClassroomRepository(BaseRepository[Classroom]):

    def __init__(self, db: Session):
        super().__init__(db, Classroom)

    def list_by_academic_year(self, academic_year_id: Optional[str] = None) -> List[Classroom]:
        query = self.db.query(Classroom)
        if academic_year_id:
            query = query.filter(Classroom.academic_year_id == academic_year_id)
        return query.order_by(Classroom.level, Classroom.name).all()


class TeachingAssignmentRepository(BaseRepository[TeachingAssignment]):

    def __init__(self, db: Session):
        super().__init__(db, TeachingAssignment)

    def find_by_classroom_subject(self, classroom_id: str, subject_id: str) -> Optional[TeachingAssignment]:
        return self.find_one_by(classroom_id=classroom_id, subject_id=subject_id)


class ScheduleRepository(BaseRepository[Schedule]):

    def __init__(self, db: Session):
        super().__init__(db, Schedule)

    def _overlapping(self, day_of_week: int, start_time: str, end_time: str, exclude_id: Optional[str] = None):
        # Zero-padded HH:MM strings compare the same way as the times they denote
        query = (
            self.db.query(Schedule)
            .join(TeachingAssignment, TeachingAssignment.id == Schedule.teaching_assignment_id)
            .filter(
                Schedule.day_of_week == day_of_week,
                Schedule.start_time < end_time,
                Schedule.end_time > start_time
            )
        )
        if exclude_id is not None:
            query = query.filter(Schedule.id != exclude_id)
        return query

    def find_classroom_conflict(self, classroom_id: str, day_of_week: int, start_time: str, end_time: str,
                                exclude_id: Optional[str] = None) -> Optional[Schedule]:
        return self._overlapping(day_of_week, start_time, end_time, exclude_id).filter(
            TeachingAssignment.classroom_id == classroom_id
        ).first()

    def find_teacher_conflict(self, teacher_id: str, day_of_week: int, start_time: str, end_time: str,
                              exclude_id: Optional[str] = None) -> Optional[Schedule]:
        return self._overlapping(day_of_week, start_time, end_time, exclude_id).filter(
            TeachingAssignment.teacher_id == teacher_id
        ).first()

    def list_by(self, classroom_id: Optional[str] = None, teacher_id: Optional[str] = None,
                teaching_assignment_id: Optional[str] = None, day_of_week: Optional[int] = None) -> List[Schedule]:
        query = self.db.query(Schedule).join(
            TeachingAssignment, TeachingAssignment.id == Schedule.teaching_assignment_id
        )
        if classroom_id:
            query = query.filter(TeachingAssignment.classroom_id == classroom_id)
        if teacher_id:
            query = query.filter(TeachingAssignment.teacher_id == teacher_id)
        if teaching_assignment_id:
            query = query.filter(Schedule.teaching_assignment_id == teaching_assignment_id)
        if day_of_week:
            query = query.filter(Schedule.day_of_week == day_of_week)
        return query.order_by(Schedule.day_of_week, Schedule.start_time).all()
