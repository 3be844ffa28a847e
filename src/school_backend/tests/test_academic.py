import pytest
from datetime import date, datetime

from school_backend.api.exceptions import BadRequestException, ConflictException, NotFoundException
from school_backend.interface.academic import (
    AcademicYearCreate,
    AcademicYearUpdate,
    ScheduleCreate,
    ScheduleUpdate,
    TeachingAssignmentCreate
)
from school_backend.model.academic import AcademicYear, Classroom, Subject, TeachingAssignment
from school_backend.model.people import Employee, Student
from school_backend.services.academic import (
    AcademicYearService,
    ClassroomService,
    ScheduleService,
    TeachingAssignmentService
)

MONDAY = 1


def year_payload(name: str, **overrides) -> AcademicYearCreate:
    data = {"name": name, "start_date": date(2025, 7, 14), "end_date": date(2026, 6, 19)}
    data.update(overrides)
    return AcademicYearCreate(**data)


def active_names(db) -> list:
    return [year.name for year in db.query(AcademicYear).filter(AcademicYear.status == "ACTIVE").all()]


class TestAcademicYears:
    """At most one academic year is ACTIVE"""

    def test_activate_switches_active_year(self, db, school):
        service = AcademicYearService(db)
        next_year = service.create(year_payload("2025/2026"))
        assert next_year.status == "INACTIVE"

        service.activate(next_year.id)

        assert active_names(db) == ["2025/2026"]
        assert service.active().id == next_year.id

    def test_create_active_deactivates_others(self, db, school):
        AcademicYearService(db).create(year_payload("2025/2026", status="ACTIVE"))
        assert active_names(db) == ["2025/2026"]

    def test_update_to_active(self, db, school):
        service = AcademicYearService(db)
        next_year = service.create(year_payload("2025/2026"))
        service.update(next_year.id, AcademicYearUpdate(status="ACTIVE"))
        assert active_names(db) == ["2025/2026"]

    def test_dates_must_be_ordered(self, db):
        with pytest.raises(BadRequestException) as e:
            AcademicYearService(db).create(year_payload("bad", end_date=date(2025, 7, 14)))
        assert e.value.detail == "start date must be before end date"

    def test_active_year_cannot_be_deleted(self, db, school):
        service = AcademicYearService(db)
        with pytest.raises(BadRequestException) as e:
            service.delete(school["year"].id)
        assert e.value.detail == "Cannot delete active academic year"

        old = service.create(year_payload("2023/2024", start_date=date(2023, 7, 17), end_date=date(2024, 6, 21)))
        service.delete(old.id)
        assert db.query(AcademicYear).count() == 1

    def test_no_active_year(self, db):
        with pytest.raises(NotFoundException):
            AcademicYearService(db).active()


class TestClassrooms:

    def test_add_students_skips_enrolled(self, db, school):
        newcomer = Student(full_name="Citra Lestari")
        db.add(newcomer)
        db.commit()

        classroom = ClassroomService(db).add_students(
            school["classroom"].id,
            [school["students"][0].id, newcomer.id, newcomer.id]
        )
        assert len(classroom.students) == 3

    def test_remove_student(self, db, school):
        service = ClassroomService(db)
        classroom = service.remove_student(school["classroom"].id, school["students"][0].id)
        assert [s.full_name for s in classroom.students] == ["Siti Aminah"]

        with pytest.raises(NotFoundException) as e:
            service.remove_student(school["classroom"].id, school["students"][0].id)
        assert e.value.detail == "student is not in this classroom"

    def test_one_teacher_per_subject_and_class(self, db, school):
        with pytest.raises(ConflictException) as e:
            TeachingAssignmentService(db).create(TeachingAssignmentCreate(
                classroom_id=school["classroom"].id,
                subject_id=school["subject"].id,
                teacher_id=school["teacher"].id
            ))
        assert e.value.detail == "this subject already has a teacher in this class"


class TestSchedules:
    """Overlap is start < other.end and end > other.start on the same day"""

    @pytest.fixture
    def other_assignments(self, db, school):
        """Same classroom with another teacher, and another classroom with the same teacher."""
        other_teacher = Employee(full_name="Citra Dewi", job_title="Teacher")
        other_subject = Subject(code="IPA", name="Ilmu Pengetahuan Alam")
        other_classroom = Classroom(academic_year=school["year"], name="X-B", level="10")
        same_class = TeachingAssignment(classroom=school["classroom"], subject=other_subject, teacher=other_teacher)
        same_teacher = TeachingAssignment(classroom=other_classroom, subject=school["subject"], teacher=school["teacher"])
        db.add_all([other_teacher, other_subject, other_classroom, same_class, same_teacher])
        db.commit()
        return same_class, same_teacher

    def schedule(self, assignment, start, end, day=MONDAY) -> ScheduleCreate:
        return ScheduleCreate(teaching_assignment_id=assignment.id, day_of_week=day, start_time=start, end_time=end)

    def test_classroom_conflict(self, db, school, other_assignments):
        service = ScheduleService(db)
        service.create(self.schedule(school["assignment"], "07:00", "08:30"))

        with pytest.raises(ConflictException) as e:
            service.create(self.schedule(other_assignments[0], "08:00", "09:00"))
        assert e.value.detail == "Classroom is occupied at this time"

    def test_teacher_conflict(self, db, school, other_assignments):
        service = ScheduleService(db)
        service.create(self.schedule(school["assignment"], "07:00", "08:30"))

        with pytest.raises(ConflictException) as e:
            service.create(self.schedule(other_assignments[1], "07:30", "08:00"))
        assert e.value.detail == "Teacher is teaching in another class at this time"

    def test_adjacent_and_other_days_are_free(self, db, school, other_assignments):
        service = ScheduleService(db)
        service.create(self.schedule(school["assignment"], "07:00", "08:30"))

        service.create(self.schedule(other_assignments[0], "08:30", "10:00"))
        service.create(self.schedule(other_assignments[1], "07:00", "08:30", day=2))
        assert len(service.list()) == 3

    def test_update_ignores_itself(self, db, school):
        service = ScheduleService(db)
        created = service.create(self.schedule(school["assignment"], "07:00", "08:30"))
        updated = service.update(created.id, ScheduleUpdate(start_time="07:30", end_time="09:00"))
        assert (updated.start_time, updated.end_time) == ("07:30", "09:00")

    def test_end_after_start(self, db, school):
        with pytest.raises(BadRequestException) as e:
            ScheduleService(db).create(self.schedule(school["assignment"], "09:00", "09:00"))
        assert e.value.detail == "end time must be after start time"

    def test_time_format(self, school):
        with pytest.raises(ValueError):
            self.schedule(school["assignment"], "7:00", "25:00")

    def test_today_for_teacher(self, db, school, make_user):
        user = make_user("budi")
        school["teacher"].user_id = user.id
        db.commit()

        service = ScheduleService(db)
        service.create(self.schedule(school["assignment"], "07:00", "08:30"))
        service.create(self.schedule(school["assignment"], "10:00", "11:00", day=3))

        monday = datetime(2025, 7, 14, 6, 0)
        assert [s.start_time for s in service.today_for_user(user.id, now=monday)] == ["07:00"]

    def test_today_without_employee_profile(self, db, make_user):
        user = make_user("outsider")
        with pytest.raises(NotFoundException) as e:
            ScheduleService(db).today_for_user(user.id)
        assert e.value.detail == "teacher/employee profile not found"
