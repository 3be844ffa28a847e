"""
Dashboard totals and the teacher's daily overview.
"""

import pytest
from datetime import date, datetime

from school_backend.api.exceptions import NotFoundException
from school_backend.model.academic import Schedule
from school_backend.model.attendance import AttendanceSession
from school_backend.model.people import Parent
from school_backend.services.auth import AuthService
from school_backend.services.dashboard import DashboardService

TEST_PASSWORD = "Secret123"
MONDAY = datetime(2025, 7, 14, 10, 0)


class TestSchoolStats:

    def test_counts_match_fixture(self, db, school, make_user):
        ahmad, siti = school["students"]
        ahmad.gender = "Male"
        siti.gender = "female"
        db.add(Parent(full_name="Hasan Fauzi", phone_number="0812111"))
        db.commit()
        make_user("operator")

        stats = DashboardService(db).stats()

        assert stats.total_students == 2
        assert stats.total_employees == 1
        assert stats.total_parents == 1
        assert stats.total_users == 1
        assert (stats.student_gender.male, stats.student_gender.female) == (1, 1)

    def test_empty_school(self, db):
        stats = DashboardService(db).stats()
        assert stats.total_students == 0
        assert stats.student_gender.male == 0


class TestTeacherStats:

    @pytest.fixture
    def teacher_user(self, db, school, make_user):
        user = make_user("budi")
        school["teacher"].user_id = user.id
        db.commit()
        return user

    def test_lessons_today_and_pending_attendance(self, db, school, teacher_user):
        assignment = school["assignment"]
        first = Schedule(teaching_assignment=assignment, day_of_week=1, start_time="07:00", end_time="08:30")
        second = Schedule(teaching_assignment=assignment, day_of_week=1, start_time="09:00", end_time="10:30")
        tuesday = Schedule(teaching_assignment=assignment, day_of_week=2, start_time="07:00", end_time="08:30")
        db.add_all([first, second, tuesday])
        db.flush()
        db.add(AttendanceSession(schedule_id=first.id, date=date(2025, 7, 14)))
        db.commit()

        stats = DashboardService(db).teacher_stats(teacher_user.id, now=MONDAY)

        assert stats.total_classes_today == 2
        assert stats.pending_attendance == 1
        assert stats.total_students == 2

    def test_session_on_another_day_is_still_pending(self, db, school, teacher_user):
        lesson = Schedule(teaching_assignment=school["assignment"], day_of_week=1, start_time="07:00", end_time="08:30")
        db.add(lesson)
        db.flush()
        db.add(AttendanceSession(schedule_id=lesson.id, date=date(2025, 7, 7)))
        db.commit()

        stats = DashboardService(db).teacher_stats(teacher_user.id, now=MONDAY)
        assert (stats.total_classes_today, stats.pending_attendance) == (1, 1)

    def test_user_without_employee_profile(self, db, make_user):
        user = make_user("tamu")
        with pytest.raises(NotFoundException):
            DashboardService(db).teacher_stats(user.id, now=MONDAY)


class TestDashboardApi:

    def test_any_signed_in_user(self, db, client, school, make_user):
        make_user("siswa")
        token = AuthService(db).login("siswa", TEST_PASSWORD).access_token

        response = client.get("/dashboard/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["total_students"] == 2

    def test_requires_login(self, client):
        response = client.get("/dashboard/stats")
        assert response.status_code == 401
