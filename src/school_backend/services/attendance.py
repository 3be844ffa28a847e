"""
Attendance per (schedule, date). Submitting again for the same pair
replaces the session header and its full detail set.
"""

import logging
from collections import Counter
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..database import transaction
from ..interface.attendance import (
    AttendanceDetailGet,
    AttendanceHistoryItem,
    AttendanceSessionGet,
    AttendanceSubmit
)
from ..model.attendance import ATTENDANCE_STATUSES, AttendanceDetail, AttendanceSession
from ..repositories.academic import ClassroomRepository, ScheduleRepository
from ..repositories.attendance import AttendanceSessionRepository
from ..repositories.people import EmployeeRepository, StudentRepository
from .base import get_or_404, repository_errors

logger = logging.getLogger(__name__)


def summarize(statuses) -> dict:
    counts = Counter(statuses)
    return {status: counts.get(status, 0) for status in ATTENDANCE_STATUSES}


class AttendanceService:

    def __init__(self, db: Session):
        self.db = db
        self.sessions = AttendanceSessionRepository(db)
        self.schedules = ScheduleRepository(db)
        self.classrooms = ClassroomRepository(db)
        self.students = StudentRepository(db)
        self.employees = EmployeeRepository(db)

    def submit(self, payload: AttendanceSubmit) -> AttendanceSessionGet:
        if self.schedules.get_by_id_optional(payload.schedule_id) is None:
            raise NotFoundException("schedule not found")

        student_ids = [entry.student_id for entry in payload.students]
        if len(set(student_ids)) != len(student_ids):
            raise BadRequestException("duplicate student_id")
        for student_id in student_ids:
            if not self.students.exists(student_id):
                raise NotFoundException(f"student not found: {student_id}")

        details = [
            AttendanceDetail(student_id=entry.student_id, status=entry.status, notes=entry.notes)
            for entry in payload.students
        ]

        with repository_errors("attendance already submitted for this schedule and date"), transaction(self.db):
            session = self.sessions.find_by_schedule_date(payload.schedule_id, payload.date)
            if session is None:
                session = self.sessions.add(AttendanceSession(
                    schedule_id=payload.schedule_id,
                    date=payload.date
                ))
                self.sessions.flush()
            session.topic = payload.topic
            session.notes = payload.notes
            self.sessions.replace_details(session, details)

        logger.info(f"Attendance saved for schedule {payload.schedule_id} on {payload.date}")
        return self.detail(session.id)

    def detail(self, session_id: str) -> AttendanceSessionGet:
        session = get_or_404(self.sessions, session_id, "attendance session not found")
        details = [
            AttendanceDetailGet(
                student_id=detail.student_id,
                student_name=detail.student.full_name if detail.student else None,
                status=detail.status,
                notes=detail.notes
            )
            for detail in session.details
        ]
        return AttendanceSessionGet(
            id=session.id,
            schedule_id=session.schedule_id,
            date=session.date,
            topic=session.topic,
            notes=session.notes,
            details=details,
            summary=summarize(detail.status for detail in session.details),
            created_at=session.created_at,
            updated_at=session.updated_at
        )

    def session_or_class_list(self, schedule_id: str, session_date: date) -> AttendanceSessionGet:
        """The saved session, or an unsaved sheet listing the classroom's students"""
        session = self.sessions.find_by_schedule_date(schedule_id, session_date)
        if session is not None:
            return self.detail(session.id)

        schedule = self.schedules.get_by_id_optional(schedule_id)
        if schedule is None:
            raise NotFoundException("schedule not found")

        classroom = self.classrooms.get_by_id(schedule.teaching_assignment.classroom_id)
        students = sorted(classroom.students, key=lambda s: s.full_name)
        return AttendanceSessionGet(
            id=None,
            schedule_id=schedule.id,
            date=session_date,
            details=[AttendanceDetailGet(student_id=s.id, student_name=s.full_name) for s in students],
            summary={}
        )

    def history(self, teaching_assignment_id: Optional[str] = None, teacher_user_id: Optional[str] = None,
                skip: int = 0, limit: int = 100) -> List[AttendanceHistoryItem]:
        teacher_id = None
        if teacher_user_id is not None:
            employee = self.employees.find_by_user_id(teacher_user_id)
            if employee is None:
                raise NotFoundException("teacher/employee profile not found")
            teacher_id = employee.id
        sessions = self.sessions.history(teaching_assignment_id, teacher_id, limit=limit, offset=skip)
        return [AttendanceHistoryItem.model_validate(session) for session in sessions]

    def delete(self, session_id: str) -> None:
        get_or_404(self.sessions, session_id, "attendance session not found")
        with repository_errors():
            self.sessions.delete(session_id)
