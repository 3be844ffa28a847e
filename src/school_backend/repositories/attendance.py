"""
Attendance session repository.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.academic import Schedule, TeachingAssignment
from ..model.attendance import AttendanceDetail, AttendanceSession


class AttendanceSessionRepository(BaseRepository[AttendanceSession]):

    def __init__(self, db: Session):
        super().__init__(db, AttendanceSession)

    def find_by_schedule_date(self, schedule_id: str, session_date: date) -> Optional[AttendanceSession]:
        return self.find_one_by(schedule_id=schedule_id, date=session_date)

    def history(self, teaching_assignment_id: Optional[str] = None, teacher_id: Optional[str] = None,
                limit: Optional[int] = None, offset: Optional[int] = None) -> List[AttendanceSession]:
        query = (
            self.db.query(AttendanceSession)
            .join(Schedule, Schedule.id == AttendanceSession.schedule_id)
            .join(TeachingAssignment, TeachingAssignment.id == Schedule.teaching_assignment_id)
        )
        if teaching_assignment_id:
            query = query.filter(TeachingAssignment.id == teaching_assignment_id)
        if teacher_id:
            query = query.filter(TeachingAssignment.teacher_id == teacher_id)
        query = query.order_by(AttendanceSession.date.desc())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def replace_details(self, session: AttendanceSession, details: List[AttendanceDetail]) -> None:
        """Swap the full detail set of a session (not committed)."""
        self.db.query(AttendanceDetail).filter(
            AttendanceDetail.attendance_session_id == session.id
        ).delete(synchronize_session="fetch")
        for detail in details:
            detail.attendance_session_id = session.id
            self.db.add(detail)
        self.db.flush()
        self.db.expire(session, ["details"])
