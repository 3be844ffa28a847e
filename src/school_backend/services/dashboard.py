"""
Headline numbers for the landing page: school-wide totals and a teacher's
view of the current day.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..interface.dashboard import DashboardStats, StudentGenderCount, TeacherDashboardStats
from ..model.auth import User
from ..model.people import Employee, Parent, Student
from ..repositories.academic import ScheduleRepository
from ..repositories.dashboard import DashboardRepository
from ..repositories.people import EmployeeRepository


class DashboardService:

    def __init__(self, db: Session):
        self.db = db
        self.dashboard = DashboardRepository(db)
        self.schedules = ScheduleRepository(db)
        self.employees = EmployeeRepository(db)

    def stats(self) -> DashboardStats:
        genders = self.dashboard.count_students_by_gender()
        return DashboardStats(
            total_students=self.dashboard.count(Student),
            total_employees=self.dashboard.count(Employee),
            total_parents=self.dashboard.count(Parent),
            total_users=self.dashboard.count(User),
            student_gender=StudentGenderCount(
                male=genders.get("male", 0),
                female=genders.get("female", 0)
            )
        )

    def teacher_stats(self, user_id: str, now: Optional[datetime] = None) -> TeacherDashboardStats:
        """
        Lessons the teacher has today, how many of them still lack an
        attendance session, and the distinct students across their classrooms.
        """
        employee = self.employees.find_by_user_id(user_id)
        if employee is None:
            raise NotFoundException("teacher/employee profile not found")

        now = now or datetime.now()
        today = self.schedules.list_by(teacher_id=employee.id, day_of_week=now.isoweekday())
        recorded = self.dashboard.count_sessions_for([schedule.id for schedule in today], now.date())

        return TeacherDashboardStats(
            total_classes_today=len(today),
            pending_attendance=len(today) - recorded,
            total_students=self.dashboard.count_students_taught_by(employee.id)
        )
